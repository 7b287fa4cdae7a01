"""Unit tests for platform input capabilities"""

import subprocess
from unittest.mock import Mock

import pytest

from trackpad.common.types import Key, Modifier, Platform, ScrollAxis
from trackpad.input.factory import capability_create, platform_detect
from trackpad.input.null import NullInputCapability
from trackpad.macos.backend import MacInputCapability, systemEventsScript_build
from trackpad.windows.backend import WindowsInputCapability


class TestPlatformDetect:
    """Test platform classification"""

    @pytest.mark.parametrize("name", ["win32", "cygwin", "Win32"])
    def test_windows(self, name):
        assert platform_detect(name) is Platform.WINDOWS

    def test_macos(self):
        assert platform_detect("darwin") is Platform.MACOS

    @pytest.mark.parametrize("name", ["linux", "freebsd13", "aix"])
    def test_other(self, name):
        assert platform_detect(name) is Platform.OTHER

    def test_other_platform_gets_null_capability(self):
        capability = capability_create(Platform.OTHER)
        assert isinstance(capability, NullInputCapability)
        assert capability.platform is Platform.OTHER


class TestWindowsCapability:
    """Test pyautogui-backed injection with a mock driver"""

    @pytest.fixture
    def driver(self):
        return Mock(spec=["hotkey", "press", "scroll", "hscroll"])

    def test_hotkey_modifiers_first(self, driver):
        capability = WindowsInputCapability(driver)

        capability.keyCombo_inject(frozenset({Modifier.CONTROL, Modifier.WIN}), Key.LEFT)

        driver.hotkey.assert_called_once_with("win", "ctrl", "left")

    def test_plain_key_uses_press(self, driver):
        capability = WindowsInputCapability(driver)

        capability.keyCombo_inject(frozenset(), Key.ESCAPE)

        driver.press.assert_called_once_with("esc")
        driver.hotkey.assert_not_called()

    def test_zoom_in_uses_unshifted_plus_key(self, driver):
        """Ctrl+Plus is sent as ctrl and "=" so pyautogui adds no Shift"""
        WindowsInputCapability(driver).keyCombo_inject(frozenset({Modifier.CONTROL}), Key.PLUS)
        driver.hotkey.assert_called_once_with("ctrl", "=")

    def test_zoom_out_key(self, driver):
        WindowsInputCapability(driver).keyCombo_inject(frozenset({Modifier.CONTROL}), Key.MINUS)
        driver.hotkey.assert_called_once_with("ctrl", "-")

    def test_vertical_scroll(self, driver):
        WindowsInputCapability(driver).scroll_inject(ScrollAxis.VERTICAL, -1)
        driver.scroll.assert_called_once_with(-1)
        driver.hscroll.assert_not_called()

    def test_horizontal_scroll(self, driver):
        WindowsInputCapability(driver).scroll_inject(ScrollAxis.HORIZONTAL, 1)
        driver.hscroll.assert_called_once_with(1)

    def test_script_not_supported(self, driver):
        capability = WindowsInputCapability(driver)

        capability.platformScript_invoke("anything")

        assert driver.method_calls == []

    def test_platform(self, driver):
        assert WindowsInputCapability(driver).platform is Platform.WINDOWS


class TestSystemEventsScript:
    """Test AppleScript generation"""

    def test_key_code_with_modifier(self):
        script = systemEventsScript_build(key_code=124, modifiers=frozenset({Modifier.CONTROL}))
        assert script == 'tell application "System Events" to key code 124 using {control down}'

    def test_keystroke_with_command(self):
        script = systemEventsScript_build(keystroke="+", modifiers=frozenset({Modifier.COMMAND}))
        assert script == 'tell application "System Events" to keystroke "+" using {command down}'

    def test_key_code_without_modifiers(self):
        assert systemEventsScript_build(key_code=53).endswith("key code 53")

    def test_multiple_modifiers_sorted(self):
        script = systemEventsScript_build(
            key_code=48, modifiers=frozenset({Modifier.SHIFT, Modifier.COMMAND})
        )
        assert script.endswith("using {command down, shift down}")

    def test_keystroke_quote_escaped(self):
        assert 'keystroke "\\""' in systemEventsScript_build(keystroke='"')

    @pytest.mark.parametrize("kwargs", [{}, {"key_code": 1, "keystroke": "a"}])
    def test_requires_exactly_one_target(self, kwargs):
        with pytest.raises(ValueError):
            systemEventsScript_build(**kwargs)


class TestMacCapability:
    """Test osascript launching with a mock launcher"""

    @pytest.fixture
    def launcher(self):
        return Mock()

    def test_script_launched_without_shell(self, launcher):
        capability = MacInputCapability(launcher)

        capability.platformScript_invoke('tell application "System Events" to key code 126')

        launcher.assert_called_once_with(
            ["osascript", "-e", 'tell application "System Events" to key code 126'],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )

    def test_key_combo_uses_key_code(self, launcher):
        MacInputCapability(launcher).keyCombo_inject(frozenset({Modifier.CONTROL}), Key.RIGHT)

        args = launcher.call_args[0][0]
        assert args[2].endswith("key code 124 using {control down}")

    def test_key_combo_uses_keystroke_for_characters(self, launcher):
        MacInputCapability(launcher).keyCombo_inject(frozenset({Modifier.COMMAND}), Key.MINUS)

        args = launcher.call_args[0][0]
        assert args[2].endswith('keystroke "-" using {command down}')

    @pytest.mark.parametrize(
        "axis,direction,code",
        [
            (ScrollAxis.VERTICAL, 1, 126),
            (ScrollAxis.VERTICAL, -1, 125),
            (ScrollAxis.HORIZONTAL, 1, 124),
            (ScrollAxis.HORIZONTAL, -1, 123),
        ],
    )
    def test_scroll_as_arrow_keys(self, launcher, axis, direction, code):
        MacInputCapability(launcher).scroll_inject(axis, direction)

        args = launcher.call_args[0][0]
        assert args[2].endswith(f"key code {code}")

    def test_launch_failure_propagates(self, launcher):
        launcher.side_effect = FileNotFoundError("osascript")
        with pytest.raises(FileNotFoundError):
            MacInputCapability(launcher).platformScript_invoke("x")

    def test_platform(self, launcher):
        assert MacInputCapability(launcher).platform is Platform.MACOS


class TestNullCapability:
    """Test the no-op capability"""

    def test_primitives_do_nothing(self, caplog):
        capability = NullInputCapability()

        capability.keyCombo_inject(frozenset({Modifier.CONTROL}), Key.PLUS)
        capability.scroll_inject(ScrollAxis.VERTICAL, 1)
        capability.platformScript_invoke("x")

        assert sum("[NOOP]" in r.getMessage() for r in caplog.records) == 3
