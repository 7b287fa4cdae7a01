"""
Gesture-to-action mapping and dispatch.

The action table maps every gesture token to one primitive action per
platform. It is read-only after import and shared by all sessions without
locking.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Mapping

from trackpad.common.types import (
    Action,
    GestureToken,
    Key,
    KeyComboAction,
    Modifier,
    NoAction,
    Platform,
    ScriptAction,
    ScrollAction,
    ScrollAxis,
)
from trackpad.input.backend import InputCapability
from trackpad.macos.backend import systemEventsScript_build

logger = logging.getLogger(__name__)

__all__ = [
    "ACTION_MAPPING",
    "ActionDispatcher",
    "actionMapping_validate",
    "action_lookup",
]

_WIN_CTRL = frozenset({Modifier.WIN, Modifier.CONTROL})
_CTRL = frozenset({Modifier.CONTROL})
_CMD = frozenset({Modifier.COMMAND})
_UNSUPPORTED = NoAction(reason="platform has no input injection")


def _macKeyCode(key_code: int, modifiers: frozenset[Modifier] = frozenset()) -> ScriptAction:
    return ScriptAction(systemEventsScript_build(key_code=key_code, modifiers=modifiers))


def _macKeystroke(char: str, modifiers: frozenset[Modifier]) -> ScriptAction:
    return ScriptAction(systemEventsScript_build(keystroke=char, modifiers=modifiers))


# Desktop switching is inverted relative to the swipe direction, as on
# professional trackpads: content moving right reveals the previous desktop.
_ACTION_TABLE: dict[GestureToken, dict[Platform, Action]] = {
    GestureToken.SWIPE_RIGHT: {
        Platform.WINDOWS: KeyComboAction(_WIN_CTRL, Key.LEFT),
        Platform.MACOS: _macKeyCode(124, _CTRL),
        Platform.OTHER: _UNSUPPORTED,
    },
    GestureToken.SWIPE_LEFT: {
        Platform.WINDOWS: KeyComboAction(_WIN_CTRL, Key.RIGHT),
        Platform.MACOS: _macKeyCode(123, _CTRL),
        Platform.OTHER: _UNSUPPORTED,
    },
    GestureToken.SCROLL_RIGHT: {
        Platform.WINDOWS: ScrollAction(ScrollAxis.HORIZONTAL, 1),
        Platform.MACOS: _macKeyCode(124),
        Platform.OTHER: _UNSUPPORTED,
    },
    GestureToken.SCROLL_LEFT: {
        Platform.WINDOWS: ScrollAction(ScrollAxis.HORIZONTAL, -1),
        Platform.MACOS: _macKeyCode(123),
        Platform.OTHER: _UNSUPPORTED,
    },
    GestureToken.SCROLL_DOWN: {
        Platform.WINDOWS: ScrollAction(ScrollAxis.VERTICAL, -1),
        Platform.MACOS: _macKeyCode(125),
        Platform.OTHER: _UNSUPPORTED,
    },
    GestureToken.SCROLL_UP: {
        Platform.WINDOWS: ScrollAction(ScrollAxis.VERTICAL, 1),
        Platform.MACOS: _macKeyCode(126),
        Platform.OTHER: _UNSUPPORTED,
    },
    GestureToken.ZOOM_IN: {
        Platform.WINDOWS: KeyComboAction(_CTRL, Key.PLUS),
        Platform.MACOS: _macKeystroke("+", _CMD),
        Platform.OTHER: _UNSUPPORTED,
    },
    GestureToken.ZOOM_OUT: {
        Platform.WINDOWS: KeyComboAction(_CTRL, Key.MINUS),
        Platform.MACOS: _macKeystroke("-", _CMD),
        Platform.OTHER: _UNSUPPORTED,
    },
    GestureToken.PINCH_OUT_FIVE: {
        Platform.WINDOWS: KeyComboAction(frozenset({Modifier.WIN}), Key.TAB),
        Platform.MACOS: _macKeyCode(103),
        Platform.OTHER: _UNSUPPORTED,
    },
    GestureToken.PINCH_IN_FIVE: {
        Platform.WINDOWS: KeyComboAction(frozenset(), Key.ESCAPE),
        Platform.MACOS: _macKeyCode(130),
        Platform.OTHER: _UNSUPPORTED,
    },
    GestureToken.UNKNOWN: {
        Platform.WINDOWS: NoAction(reason="unknown gesture"),
        Platform.MACOS: NoAction(reason="unknown gesture"),
        Platform.OTHER: NoAction(reason="unknown gesture"),
    },
}


def actionMapping_validate(table: Mapping[GestureToken, Mapping[Platform, Action]]) -> None:
    """
    Verify that every token has an action for every platform.

    Args:
        table: Candidate action table.

    Raises:
        ValueError: Naming the first missing token or token/platform pair.
    """
    for token in GestureToken:
        if token not in table:
            raise ValueError(f"Action table has no entry for {token.name}")
        for platform in Platform:
            if platform not in table[token]:
                raise ValueError(
                    f"Action table has no {platform.name} action for {token.name}"
                )


actionMapping_validate(_ACTION_TABLE)

ACTION_MAPPING: Mapping[GestureToken, Mapping[Platform, Action]] = MappingProxyType(
    {token: MappingProxyType(actions) for token, actions in _ACTION_TABLE.items()}
)


def action_lookup(token: GestureToken, platform: Platform) -> Action:
    """
    Look up the action for a token on a platform.

    Args:
        token: Decoded gesture token.
        platform: Platform selected at startup.

    Returns:
        Mapped action; never raises for a valid token/platform pair.
    """
    return ACTION_MAPPING[token][platform]


class ActionDispatcher:
    """
    Translates gesture tokens into capability calls.

    The platform and capability are selected once at startup. Capability
    failures are logged and never propagated to the caller, because the
    gesture protocol has no channel to report them to the client.
    """

    def __init__(self, capability: InputCapability, platform: Platform | None = None) -> None:
        """
        Initialize dispatcher.

        Args:
            capability: Input capability for the host platform.
            platform: Table column to use. Defaults to `capability.platform`.
        """
        self.capability: InputCapability = capability
        self.platform: Platform = platform if platform is not None else capability.platform

    def gesture_dispatch(self, token: GestureToken) -> bool:
        """
        Perform the action mapped to a token.

        Args:
            token: Decoded gesture token.

        Returns:
            True if a capability primitive was invoked successfully.
        """
        action = action_lookup(token, self.platform)
        if isinstance(action, NoAction):
            logger.debug(f"[DISPATCH] {token.name} on {self.platform.value}: no-op ({action.reason})")
            return False

        try:
            self.action_perform(action)
        except Exception as e:
            logger.error(
                f"[DISPATCH] {token.name} failed on {self.platform.value}: {e}",
                exc_info=True,
            )
            return False

        logger.info(f"[DISPATCH] {token.name} -> {action}")
        return True

    def action_perform(self, action: Action) -> None:
        """
        Invoke the single capability primitive that matches an action.

        Args:
            action: Non-empty action.

        Raises:
            TypeError: For an unrecognized action type.
        """
        if isinstance(action, KeyComboAction):
            self.capability.keyCombo_inject(action.modifiers, action.key)
        elif isinstance(action, ScrollAction):
            self.capability.scroll_inject(action.axis, action.direction)
        elif isinstance(action, ScriptAction):
            self.capability.platformScript_invoke(action.script)
        else:
            raise TypeError(f"Unsupported action type: {type(action).__name__}")
