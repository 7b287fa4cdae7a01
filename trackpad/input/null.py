"""Capability for platforms without input injection support."""

from __future__ import annotations

import logging

from trackpad.common.types import Key, Modifier, Platform, ScrollAxis

logger = logging.getLogger(__name__)


class NullInputCapability:
    """Every primitive is an explicit no-op."""

    def __init__(self) -> None:
        self.platform: Platform = Platform.OTHER

    def keyCombo_inject(self, modifiers: frozenset[Modifier], key: Key) -> None:
        names = "+".join(sorted(m.value for m in modifiers))
        logger.debug(f"[NOOP] key combo {names}+{key.value} ignored on this platform")

    def scroll_inject(self, axis: ScrollAxis, direction: int) -> None:
        logger.debug(f"[NOOP] {axis.value} scroll {direction:+d} ignored on this platform")

    def platformScript_invoke(self, script: str) -> None:
        logger.debug(f"[NOOP] platform script ignored on this platform: {script}")
