"""Common types and data structures for trackpad"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union


class Platform(Enum):
    """Host platforms with distinct input-injection mechanisms"""
    WINDOWS = "windows"
    MACOS = "macos"
    OTHER = "other"    # No injection support, every gesture is a no-op


class Modifier(Enum):
    """Keyboard modifiers usable in a key combination"""
    CONTROL = "ctrl"
    WIN = "win"
    COMMAND = "command"
    SHIFT = "shift"
    ALT = "alt"


class Key(Enum):
    """Non-modifier keys referenced by the action table"""
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"
    PLUS = "+"
    MINUS = "-"
    TAB = "tab"
    ESCAPE = "esc"


class ScrollAxis(Enum):
    """Scroll wheel axes"""
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


class GestureToken(Enum):
    """
    Closed vocabulary of gesture tokens.

    Values are the exact wire literals, emoji prefix included. Matching is
    case-sensitive. UNKNOWN stands for any content outside the vocabulary.
    """
    SWIPE_RIGHT = "\u27a1\ufe0f Cambio escritorio"
    SWIPE_LEFT = "\u2b05\ufe0f Cambio escritorio"
    SCROLL_RIGHT = "\u27a1\ufe0f Scroll H"
    SCROLL_LEFT = "\u2b05\ufe0f Scroll H"
    SCROLL_DOWN = "\u2b07\ufe0f Scroll V"
    SCROLL_UP = "\u2b06\ufe0f Scroll V"
    ZOOM_IN = "\U0001f50d Zoom+"
    ZOOM_OUT = "\U0001f50e Zoom-"
    PINCH_OUT_FIVE = "\U0001f590\ufe0f\U0001f50d Pinch+ de 5"
    PINCH_IN_FIVE = "\U0001f590\ufe0f\U0001f50e Pinch- de 5"
    UNKNOWN = ""

    def isKnown(self) -> bool:
        """Check if this token belongs to the gesture vocabulary"""
        return self is not GestureToken.UNKNOWN


@dataclass(frozen=True)
class Endpoint:
    """Identity and listening endpoint announced by a server"""
    name: str
    ip: str
    port: int


@dataclass(frozen=True)
class KeyComboAction:
    """Press a key while holding a set of modifiers"""
    modifiers: frozenset[Modifier]
    key: Key


@dataclass(frozen=True)
class ScrollAction:
    """Scroll one notch along an axis (direction is +1 or -1)"""
    axis: ScrollAxis
    direction: int

    def __post_init__(self) -> None:
        if self.direction not in (1, -1):
            raise ValueError(f"Scroll direction must be +1 or -1, got {self.direction}")


@dataclass(frozen=True)
class ScriptAction:
    """Run a one-line platform automation script"""
    script: str


@dataclass(frozen=True)
class NoAction:
    """Explicit no-op mapping"""
    reason: str = field(default="unsupported")


Action = Union[KeyComboAction, ScrollAction, ScriptAction, NoAction]
