"""
Process-wide logging setup.

Installs the console handler (and the optional log file) for the server and
the client tools, and stamps every timestamp with the running version so
logs from mixed deployments can be told apart.
"""

from __future__ import annotations

import logging

from trackpad import __version__

__all__ = [
    "logging_setup",
    "logFormatWithVersion_get",
]


def logging_setup(level: str, log_format: str, log_file: str | None) -> None:
    """
    Replace the root logging configuration.

    Args:
        level:
            Level name, case-insensitive (`debug`, `INFO`, ...).
        log_format:
            `logging.Formatter` format string.
        log_file:
            Also append records to this file when set.

    Raises:
        ValueError:
            If `level` does not name a logging level.
        OSError:
            If the log file cannot be opened.
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level '{level}'")

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=numeric_level,
        format=logFormatWithVersion_get(log_format),
        handlers=handlers,
        force=True,
    )


def logFormatWithVersion_get(log_format: str) -> str:
    """
    Append the package version to the `%(asctime)s` field of a format.

    Args:
        log_format:
            Format string; returned unchanged if it has no timestamp.

    Returns:
        Format string such as `%(asctime)s [v1.0.0.dev] - %(message)s`.
    """
    return log_format.replace("%(asctime)s", f"%(asctime)s [v{__version__}]")
