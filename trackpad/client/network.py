"""
TCP client transport for sending gestures.

Each gesture is written as one line. The client applies the same short
block after every send as the handheld client does, so gesture storms are
suppressed at the source.
"""

from __future__ import annotations

import logging
import socket
import time
from typing import Callable

from trackpad.common.settings import settings
from trackpad.common.types import GestureToken
from trackpad.protocol.gesture import GestureCodec

logger = logging.getLogger(__name__)


class GestureClient:
    """Persistent gesture stream connection to one server."""

    def __init__(
        self,
        host: str,
        port: int,
        block_ms: int = settings.CLIENT_SEND_BLOCK_MS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize client transport configuration.

        Args:
            host:
                Server host.
            port:
                Server gesture port.
            block_ms:
                Time after a send during which further gestures are dropped.
            clock:
                Monotonic time source.
        """
        self.host: str = host
        self.port: int = port
        self.block_seconds: float = block_ms / settings.MS_PER_SECOND
        self._clock: Callable[[], float] = clock
        self._blocked_until: float = float("-inf")
        self.socket: socket.socket | None = None

    @property
    def is_connected(self) -> bool:
        return self.socket is not None

    def connection_establish(self, timeout: float = settings.CONNECT_TIMEOUT_SECONDS) -> None:
        """
        Connect to the server.

        Args:
            timeout:
                Connect timeout in seconds.

        Raises:
            ConnectionError:
                Raised when the connection cannot be established.
        """
        try:
            self.socket = socket.create_connection((self.host, self.port), timeout=timeout)
        except OSError as e:
            self.socket = None
            raise ConnectionError(f"Failed to connect to {self.host}:{self.port}: {e}") from e
        self.socket.settimeout(None)
        logger.info(f"Connected to {self.host}:{self.port}")

    def isBlocked_check(self) -> bool:
        """
        Check whether the post-send block is active.

        Returns:
            `True` while gestures would be dropped.
        """
        return self._clock() < self._blocked_until

    def gesture_send(self, token: GestureToken) -> bool:
        """
        Send one gesture unless blocked.

        Args:
            token:
                Gesture to send.

        Returns:
            `True` if written, `False` if dropped because of the block.

        Raises:
            ConnectionError:
                Raised when not connected or the write fails.
        """
        if self.socket is None:
            raise ConnectionError("Not connected")
        if self.isBlocked_check():
            logger.debug(f"Gesture {token.name} dropped during send block")
            return False

        try:
            self.socket.sendall(GestureCodec.token_encode(token))
        except OSError as e:
            self.connection_close()
            raise ConnectionError(f"Failed to send gesture: {e}") from e

        self._blocked_until = self._clock() + self.block_seconds
        logger.info(f"Sent {token.name}")
        return True

    def connection_close(self) -> None:
        """Close the connection."""
        if self.socket is not None:
            try:
                self.socket.close()
            except OSError as e:
                logger.error(f"Error closing connection: {e}")
            finally:
                self.socket = None
