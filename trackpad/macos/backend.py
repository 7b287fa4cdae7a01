"""macOS input injection through AppleScript (osascript)"""

import logging
import subprocess
from typing import Any, Callable, Optional

from trackpad.common.types import Key, Modifier, Platform, ScrollAxis

logger = logging.getLogger(__name__)

OSASCRIPT = "osascript"
SYSTEM_EVENTS = 'tell application "System Events" to '

# AppleScript virtual key codes
KEY_CODES = {
    Key.LEFT: 123,
    Key.RIGHT: 124,
    Key.DOWN: 125,
    Key.UP: 126,
    Key.TAB: 48,
    Key.ESCAPE: 53,
}

MODIFIER_CLAUSES = {
    Modifier.COMMAND: "command down",
    Modifier.WIN: "command down",
    Modifier.CONTROL: "control down",
    Modifier.ALT: "option down",
    Modifier.SHIFT: "shift down",
}


def systemEventsScript_build(
    key_code: Optional[int] = None,
    keystroke: Optional[str] = None,
    modifiers: frozenset[Modifier] = frozenset(),
) -> str:
    """
    Build a one-line System Events script

    Exactly one of key_code or keystroke must be given.

    Args:
        key_code: Virtual key code to send
        keystroke: Character to type
        modifiers: Modifiers held down

    Returns:
        AppleScript source, e.g.
        'tell application "System Events" to key code 124 using {control down}'
    """
    if (key_code is None) == (keystroke is None):
        raise ValueError("Exactly one of key_code or keystroke is required")
    if key_code is not None:
        command = f"key code {key_code}"
    else:
        escaped = keystroke.replace("\\", "\\\\").replace('"', '\\"')
        command = f'keystroke "{escaped}"'
    clauses = sorted({MODIFIER_CLAUSES[m] for m in modifiers})
    if clauses:
        command += " using {" + ", ".join(clauses) + "}"
    return SYSTEM_EVENTS + command


class MacInputCapability:
    """Runs System Events scripts through osascript, fire-and-forget"""

    def __init__(self, process_launcher: Optional[Callable[..., Any]] = None) -> None:
        """
        Initialize macOS capability

        Args:
            process_launcher: Popen-compatible callable. Defaults to subprocess.Popen.
        """
        self._process_launcher: Callable[..., Any] = process_launcher or subprocess.Popen
        self.platform: Platform = Platform.MACOS

    def platformScript_invoke(self, script: str) -> None:
        """
        Launch osascript for a one-line script without waiting for completion

        The script is passed as a single argument, so no shell quoting applies.

        Raises:
            OSError: If osascript cannot be started
        """
        logger.debug(f"[OSASCRIPT] {script}")
        self._process_launcher(
            [OSASCRIPT, "-e", script],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )

    def keyCombo_inject(self, modifiers: frozenset[Modifier], key: Key) -> None:
        """Press key with modifiers through a generated System Events script"""
        if key in KEY_CODES:
            script = systemEventsScript_build(key_code=KEY_CODES[key], modifiers=modifiers)
        else:
            script = systemEventsScript_build(keystroke=key.value, modifiers=modifiers)
        self.platformScript_invoke(script)

    def scroll_inject(self, axis: ScrollAxis, direction: int) -> None:
        """Emulate a scroll notch with the matching arrow key"""
        if axis == ScrollAxis.HORIZONTAL:
            key = Key.RIGHT if direction > 0 else Key.LEFT
        else:
            key = Key.UP if direction > 0 else Key.DOWN
        self.platformScript_invoke(systemEventsScript_build(key_code=KEY_CODES[key]))
