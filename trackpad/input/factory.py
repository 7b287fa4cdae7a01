"""Capability factory functions."""

from __future__ import annotations

import sys

from trackpad.common.types import Platform
from trackpad.input.backend import InputCapability
from trackpad.input.null import NullInputCapability


def platform_detect(platform_name: str | None = None) -> Platform:
    """
    Map a `sys.platform` value to a supported platform.

    Args:
        platform_name: Value to classify. Defaults to `sys.platform`.

    Returns:
        Detected platform; anything other than Windows or macOS is OTHER.
    """
    name = (platform_name if platform_name is not None else sys.platform).lower()
    if name.startswith("win") or name == "cygwin":
        return Platform.WINDOWS
    if name == "darwin":
        return Platform.MACOS
    return Platform.OTHER


def capability_create(platform: Platform) -> InputCapability:
    """
    Create the input capability for a platform.

    Platform modules are imported lazily so that their third-party
    dependencies are only needed where they are used.

    Args:
        platform: Target platform.

    Returns:
        Capability implementation for that platform.
    """
    if platform == Platform.WINDOWS:
        from trackpad.windows.backend import WindowsInputCapability

        return WindowsInputCapability()

    if platform == Platform.MACOS:
        from trackpad.macos.backend import MacInputCapability

        return MacInputCapability()

    return NullInputCapability()
