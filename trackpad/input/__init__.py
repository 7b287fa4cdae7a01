"""Capability abstraction layer for input injection."""

from trackpad.input.backend import InputCapability
from trackpad.input.factory import capability_create, platform_detect
from trackpad.input.null import NullInputCapability

__all__ = [
    "InputCapability",
    "NullInputCapability",
    "capability_create",
    "platform_detect",
]
