"""Server bootstrap helpers for config, logging, and capability wiring."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from trackpad.common.config import Config, ConfigLoader
from trackpad.common.settings import settings
from trackpad.common.types import Platform
from trackpad.input.backend import InputCapability
from trackpad.input.factory import capability_create, platform_detect
from trackpad.server.dispatcher import ActionDispatcher

logger = logging.getLogger(__name__)


def configWithSettings_load(args: argparse.Namespace) -> Config:
    """
    Load configuration and initialize settings singleton.

    Args:
        args: Parsed CLI args.

    Returns:
        Loaded config. Exits with status 1 on config errors.
    """
    config_path: Path | None = Path(args.config) if getattr(args, "config", None) else None
    try:
        config: Config = ConfigLoader.configWithOverrides_load(
            file_path=config_path,
            host=getattr(args, "host", None),
            port=getattr(args, "port", None),
            name=getattr(args, "name", None),
            discovery_port=getattr(args, "discovery_port", None),
            no_discovery=getattr(args, "no_discovery", False),
        )
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        print("Check the path given with --config", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        sys.exit(1)
    settings.initialize(config)
    return config


def loggingWithConfig_setup(
    args: argparse.Namespace, config: Config, logging_setup_func
) -> None:
    """
    Setup logging from config and CLI override.

    Args:
        args: Parsed CLI args.
        config: Loaded config.
        logging_setup_func: Logging setup callback.
    """
    log_level: str = getattr(args, "log_level", None) or config.logging.level
    try:
        logging_setup_func(log_level, config.logging.format, config.logging.file)
    except (ValueError, OSError) as e:
        print(f"Error configuring logging: {e}", file=sys.stderr)
        sys.exit(1)


def dispatcher_create(platform: Platform | None = None) -> ActionDispatcher:
    """
    Select the input capability once for this process and wrap it in a dispatcher.

    Args:
        platform: Platform override; detected from `sys.platform` if omitted.

    Returns:
        Dispatcher bound to the selected capability.
    """
    selected: Platform = platform if platform is not None else platform_detect()
    try:
        capability: InputCapability = capability_create(selected)
    except Exception as e:
        logger.error(f"Failed to initialize {selected.value} input capability: {e}")
        sys.exit(1)
    if selected == Platform.OTHER:
        logger.warning(
            f"Input injection is not supported on '{sys.platform}'; gestures will be ignored"
        )
    logger.info(f"Input capability: {selected.value}")
    return ActionDispatcher(capability, selected)
