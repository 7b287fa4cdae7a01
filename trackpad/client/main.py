"""trackpad client entry points: discovery listing and gesture sending"""

import argparse
import logging
import sys
import threading
import time

from trackpad.client.discovery import DiscoveryListener
from trackpad.client.network import GestureClient
from trackpad.common.config import Config
from trackpad.common.types import GestureToken
from trackpad.protocol.gesture import GestureCodec
from trackpad.server.bootstrap import configWithSettings_load, loggingWithConfig_setup
from trackpad.server.server_logging import logging_setup

logger = logging.getLogger(__name__)


def serverAddress_parse(address: str, default_port: int) -> tuple[str, int]:
    """
    Parse HOST[:PORT]

    Args:
        address: Address text
        default_port: Port used when none is given

    Returns:
        (host, port)

    Raises:
        ValueError: If the port is not an integer
    """
    host, sep, port_text = address.rpartition(":")
    if not sep:
        return address, default_port
    if not host:
        raise ValueError(f"Missing host in '{address}'")
    try:
        return host, int(port_text)
    except ValueError:
        raise ValueError(f"Invalid port in '{address}'")


def discover_run(args: argparse.Namespace, config: Config) -> int:
    """
    Listen for announcements and print every discovered server

    Args:
        args: Parsed CLI args (uses `timeout`)
        config: Loaded config

    Returns:
        Process exit status
    """
    listener = DiscoveryListener(port=config.discovery.port)
    try:
        listener.listener_start()
    except OSError as e:
        logger.error(f"Cannot listen on UDP port {config.discovery.port}: {e}")
        return 1

    timeout: float = args.timeout
    print(f"Listening for servers for {timeout:g}s...")
    try:
        listener.listener_run(threading.Event(), deadline=time.monotonic() + timeout)
    finally:
        listener.listener_close()

    servers = listener.directory.servers_list()
    now = time.monotonic()
    if not servers:
        print("No servers found")
        return 1
    for server in servers:
        print(server.displayInfo_get(now))
    return 0


def gestures_send(
    client: GestureClient, tokens: list[GestureToken], sleep=time.sleep
) -> int:
    """
    Send gestures in order, waiting out the send block between them

    Args:
        client: Connected client
        tokens: Gestures to send
        sleep: Sleep function

    Returns:
        Number of gestures sent
    """
    sent = 0
    for token in tokens:
        while client.isBlocked_check():
            sleep(client.block_seconds / 4)
        if client.gesture_send(token):
            sent += 1
    return sent


def gesturesSend_run(args: argparse.Namespace, config: Config) -> int:
    """
    Connect to a server and send the gestures named on the command line

    Args:
        args: Parsed CLI args (uses `server` and `gesture`)
        config: Loaded config

    Returns:
        Process exit status
    """
    try:
        host, port = serverAddress_parse(args.server, config.server.port)
        tokens = [GestureCodec.tokenByName_get(name) for name in (args.gesture or [])]
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    if not tokens:
        print("Error: no gestures given (use --gesture NAME)", file=sys.stderr)
        return 1

    client = GestureClient(host, port)
    try:
        client.connection_establish()
        sent = gestures_send(client, tokens)
    except ConnectionError as e:
        logger.error(str(e))
        return 1
    finally:
        client.connection_close()

    print(f"Sent {sent} gesture(s) to {host}:{port}")
    return 0


def client_run(args: argparse.Namespace) -> None:
    """
    Run a client mode and exit with its status

    Args:
        args: Parsed CLI args
    """
    config = configWithSettings_load(args)
    loggingWithConfig_setup(args, config, logging_setup)

    if getattr(args, "discover", False):
        sys.exit(discover_run(args, config))
    sys.exit(gesturesSend_run(args, config))
