"""Windows input injection using pyautogui"""

import logging
from typing import Any, Optional

from trackpad.common.types import Key, Modifier, Platform, ScrollAxis

logger = logging.getLogger(__name__)

# Modifiers are pressed in this order and released in reverse
MODIFIER_ORDER = (Modifier.WIN, Modifier.CONTROL, Modifier.ALT, Modifier.SHIFT, Modifier.COMMAND)

# Send the unshifted key: pyautogui adds Shift for "+", turning Ctrl+Plus into
# Ctrl+Shift+=. The OEM plus key is the "=" key on US layouts.
KEY_NAMES = {Key.PLUS: "="}


class WindowsInputCapability:
    """Injects key combinations and wheel scrolls through pyautogui"""

    def __init__(self, driver: Optional[Any] = None) -> None:
        """
        Initialize Windows capability

        Args:
            driver: pyautogui-compatible module. Defaults to pyautogui itself.
        """
        if driver is None:
            import pyautogui as driver

            # Gestures are one-shot; no inter-call pause wanted
            driver.PAUSE = 0
        self._driver: Any = driver
        self.platform: Platform = Platform.WINDOWS

    @staticmethod
    def keyNames_build(modifiers: frozenset[Modifier], key: Key) -> list[str]:
        """
        Build the ordered pyautogui key name sequence for a combination

        Args:
            modifiers: Modifiers to hold
            key: Key to press

        Returns:
            Modifier names in MODIFIER_ORDER followed by the pyautogui key name
        """
        names = [m.value for m in MODIFIER_ORDER if m in modifiers]
        names.append(KEY_NAMES.get(key, key.value))
        return names

    def keyCombo_inject(self, modifiers: frozenset[Modifier], key: Key) -> None:
        """
        Press key while holding modifiers

        Args:
            modifiers: Modifiers held during the press (may be empty)
            key: Key to press
        """
        if not modifiers:
            self._driver.press(KEY_NAMES.get(key, key.value))
            return
        self._driver.hotkey(*self.keyNames_build(modifiers, key))

    def scroll_inject(self, axis: ScrollAxis, direction: int) -> None:
        """
        Scroll one wheel notch

        Args:
            axis: Scroll axis
            direction: +1 (up/right) or -1 (down/left)
        """
        if axis == ScrollAxis.HORIZONTAL:
            self._driver.hscroll(direction)
        else:
            self._driver.scroll(direction)

    def platformScript_invoke(self, script: str) -> None:
        """Windows has no automation-script channel; the request is logged and dropped"""
        logger.warning(f"Platform scripts are not supported on Windows, ignoring: {script}")
