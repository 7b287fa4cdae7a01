"""Capability protocol for OS-level input injection."""

from __future__ import annotations

from typing import Protocol

from trackpad.common.types import Key, Modifier, Platform, ScrollAxis


class InputCapability(Protocol):
    """Abstract input injection interface, one implementation per platform."""

    platform: Platform

    def keyCombo_inject(self, modifiers: frozenset[Modifier], key: Key) -> None:
        """
        Press key while holding modifiers, then release everything.

        Args:
            modifiers: Modifiers held during the key press (may be empty).
            key: Key to press.
        """

    def scroll_inject(self, axis: ScrollAxis, direction: int) -> None:
        """
        Scroll one notch.

        Args:
            axis: Scroll axis.
            direction: +1 or -1.
        """

    def platformScript_invoke(self, script: str) -> None:
        """
        Launch a one-line platform automation script without waiting for it.

        Args:
            script: Script source.
        """
