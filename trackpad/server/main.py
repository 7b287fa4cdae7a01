"""trackpad server main entry point"""

import argparse
import logging
import sys
import threading
from typing import NoReturn, Optional

from trackpad import __version__
from trackpad.common.config import Config
from trackpad.common.settings import settings
from trackpad.server.beacon import AnnouncementBeacon
from trackpad.server.bootstrap import (
    configWithSettings_load,
    dispatcher_create,
    loggingWithConfig_setup,
)
from trackpad.server.dispatcher import ActionDispatcher
from trackpad.server.network import GestureServer
from trackpad.server.server_logging import logging_setup
from trackpad.server.supervisor import TaskSupervisor

logger = logging.getLogger(__name__)


class ServerRuntime:
    """
    Gesture server plus discovery beacon, each under its own supervisor

    The listener is bound before the beacon starts, so a bind failure never
    leaves a beacon announcing an endpoint nobody serves.
    """

    def __init__(self, config: Config, dispatcher: ActionDispatcher) -> None:
        """
        Initialize runtime

        Args:
            config: Loaded configuration
            dispatcher: Dispatcher shared by all sessions
        """
        self.config: Config = config
        self.stop_event: threading.Event = threading.Event()
        self.server: GestureServer = GestureServer(
            host=config.server.host,
            port=config.server.port,
            dispatcher=dispatcher,
            read_buffer_size=config.server.read_buffer_size,
            cooldown_seconds=config.server.cooldown_ms / settings.MS_PER_SECOND,
            idle_timeout_seconds=config.server.idle_timeout_seconds,
        )
        self.beacon: Optional[AnnouncementBeacon] = None
        self.supervisors: list[TaskSupervisor] = []

    def runtime_start(self) -> None:
        """
        Bind the listener, then start the accept loop and the beacon

        Raises:
            OSError: If the listener cannot bind (nothing is left running)
        """
        self.server.server_start()

        self.supervisors.append(
            TaskSupervisor("gesture-accept", self.server.connections_serve, stop_event=self.stop_event)
        )

        if self.config.discovery.enabled:
            self.beacon = AnnouncementBeacon(
                gesture_port=self.server.port,
                discovery_port=self.config.discovery.port,
                interval_ms=self.config.discovery.interval_ms,
                broadcast_address=self.config.discovery.broadcast_address,
                name=self.config.server.name,
            )
            self.supervisors.append(
                TaskSupervisor("discovery-beacon", self.beacon.beacon_run, stop_event=self.stop_event)
            )
        else:
            logger.info("Discovery beacon disabled")

        for supervisor in self.supervisors:
            supervisor.task_start()

    def runtime_wait(self, poll_seconds: float = 1.0) -> None:
        """
        Block until the runtime is stopped

        Args:
            poll_seconds: Wake-up interval so Ctrl+C is handled promptly
        """
        while not self.stop_event.wait(poll_seconds):
            pass

    def runtime_stop(self) -> None:
        """Stop both tasks and close every session"""
        self.stop_event.set()
        self.server.server_stop()
        for supervisor in self.supervisors:
            supervisor.task_stop(timeout=2.0)


def server_run(args: argparse.Namespace) -> None:
    """
    Run trackpad server

    Args:
        args: Parsed command line arguments
    """
    config = configWithSettings_load(args)
    loggingWithConfig_setup(args, config, logging_setup)

    logger.info(f"trackpad server v{__version__}")
    logger.info(f"Gesture port: {config.server.port} (host {config.server.host})")
    if config.discovery.enabled:
        logger.info(
            f"Discovery: {config.discovery.broadcast_address}:{config.discovery.port} "
            f"every {config.discovery.interval_ms} ms"
        )
    logger.info(f"Gesture cool-down: {config.server.cooldown_ms} ms")
    if config.server.idle_timeout_seconds is None:
        logger.info("Idle timeout: none")
    else:
        logger.info(f"Idle timeout: {config.server.idle_timeout_seconds}s")

    dispatcher = dispatcher_create()
    runtime = ServerRuntime(config, dispatcher)

    try:
        runtime.runtime_start()
    except OSError as e:
        logger.error(f"Failed to start gesture server on {config.server.host}:{config.server.port}: {e}")
        sys.exit(1)

    logger.info("Server running. Press Ctrl+C to stop.")
    try:
        runtime.runtime_wait()
    finally:
        runtime.runtime_stop()


def main() -> NoReturn:
    """Entry point of `trackpad-server`: shared CLI options, server mode only"""
    from trackpad.cli import (
        arguments_parse,
        argsWithLogLevel_apply,
        clientMode_isEnabled,
        logLevelOverride_get,
    )

    args = arguments_parse()
    if clientMode_isEnabled(args):
        print(
            "Error: --discover, --server and --gesture are client options; use `trackpad`",
            file=sys.stderr,
        )
        sys.exit(2)
    argsWithLogLevel_apply(args, logLevelOverride_get(args))

    try:
        server_run(args)
    except KeyboardInterrupt:
        print("\nShutting down...")
        sys.exit(0)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    sys.exit(0)


if __name__ == "__main__":
    main()
