"""trackpad unified command-line interface"""

import argparse
import sys
from typing import NoReturn

from trackpad import __version__

# Most restrictive first: when several flags are given, the first match wins
LOG_LEVELS_BY_PRECEDENCE = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def parser_create() -> argparse.ArgumentParser:
    """
    Create the unified argument parser

    Returns:
        Configured parser. Every option is optional: no arguments runs the server.
    """
    parser = argparse.ArgumentParser(
        prog="trackpad",
        description="Gesture server driving desktop input from a handheld trackpad",
    )

    parser.add_argument("--version", action="version", version=f"trackpad {__version__}")

    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to config file (default: search standard locations, else built-in defaults)",
    )

    # Server-specific options
    parser.add_argument(
        "--host", type=str, default=None, help="[Server] Host address to bind to (overrides config)"
    )

    parser.add_argument(
        "--port", type=int, default=None, help="[Server] Gesture TCP port (overrides config)"
    )

    parser.add_argument(
        "--discovery-port",
        type=int,
        default=None,
        dest="discovery_port",
        help="UDP discovery port (overrides config)",
    )

    parser.add_argument(
        "--name", type=str, default=None, help="[Server] Announced server name (default: host name)"
    )

    parser.add_argument(
        "--no-discovery",
        action="store_true",
        dest="no_discovery",
        help="[Server] Do not broadcast discovery announcements",
    )

    # Client modes
    parser.add_argument(
        "--discover",
        action="store_true",
        help="[Client] Listen for server announcements and list them",
    )

    parser.add_argument(
        "--timeout",
        type=float,
        default=5.0,
        help="[Client] Seconds to listen in --discover mode (default: 5)",
    )

    parser.add_argument(
        "--server",
        type=str,
        metavar="HOST[:PORT]",
        default=None,
        help="[Client] Send gestures to this server",
    )

    parser.add_argument(
        "--gesture",
        type=str,
        action="append",
        metavar="NAME",
        default=None,
        help="[Client] Gesture to send with --server (repeatable, e.g. zoom_in, swipe_left)",
    )

    for level in LOG_LEVELS_BY_PRECEDENCE:
        parser.add_argument(
            f"--{level.lower()}",
            action="store_true",
            help=f"Log at {level} and above (overrides config)",
        )

    return parser


def arguments_parse(argv: list[str] | None = None) -> argparse.Namespace:
    """
    Parse command line arguments

    Args:
        argv: Argument list; defaults to sys.argv[1:].

    Returns:
        Parsed CLI arguments.
    """
    return parser_create().parse_args(argv)


def main() -> NoReturn:
    """Entry point of the `trackpad` command: server by default, client with client flags"""
    args = arguments_parse()
    argsWithLogLevel_apply(args, logLevelOverride_get(args))

    try:
        if clientMode_isEnabled(args):
            clientMode_run(args)
        else:
            serverMode_run(args)
    except KeyboardInterrupt:
        print("\nShutting down...")
        sys.exit(0)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    sys.exit(0)


def logLevelOverride_get(args: argparse.Namespace) -> str | None:
    """
    Pick the log level requested by CLI flags.

    Args:
        args: Parsed CLI args.

    Returns:
        Level name, or None when no level flag was given.
    """
    for level in LOG_LEVELS_BY_PRECEDENCE:
        if getattr(args, level.lower(), False):
            return level
    return None


def argsWithLogLevel_apply(args: argparse.Namespace, log_level: str | None) -> None:
    """Record a CLI log level on args as `log_level`, which bootstrap prefers over config"""
    if log_level is not None:
        setattr(args, "log_level", log_level)


def clientMode_isEnabled(args: argparse.Namespace) -> bool:
    """Any of --discover, --server or --gesture selects client mode"""
    return bool(args.discover or args.server or args.gesture)


def clientMode_run(args: argparse.Namespace) -> None:
    """
    Run the discovery listing or gesture sender.

    Raises:
        ValueError: If gestures are given without a target server.
    """
    if args.gesture and not args.server and not args.discover:
        raise ValueError("--gesture requires --server HOST[:PORT]")

    from trackpad.client.main import client_run

    client_run(args)


def serverMode_run(args: argparse.Namespace) -> None:
    """Run the beacon and gesture server until interrupted"""
    from trackpad.server.main import server_run

    server_run(args)


if __name__ == "__main__":
    main()
