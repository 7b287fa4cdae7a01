"""
Per-connection gesture session.

A session owns one client socket for its lifetime, reads gesture tokens from
it in arrival order and hands each one to the shared dispatcher. Sessions run
on their own thread and never touch each other's state.
"""

from __future__ import annotations

import logging
import socket
import time
from typing import Callable

from trackpad.common.types import GestureToken
from trackpad.protocol.gesture import GestureCodec
from trackpad.server.dispatcher import ActionDispatcher

logger = logging.getLogger(__name__)

__all__ = ["ConnectionSession", "CooldownGate"]


class CooldownGate:
    """
    Minimum-gap gate between accepted gestures.

    Holds a monotonic "blocked-until" timestamp. A zero cool-down never blocks.
    """

    def __init__(
        self, cooldown_seconds: float, clock: Callable[[], float] = time.monotonic
    ) -> None:
        """
        Initialize gate.

        Args:
            cooldown_seconds: Gap enforced after each accepted gesture.
            clock: Monotonic time source.
        """
        self.cooldown_seconds: float = cooldown_seconds
        self._clock: Callable[[], float] = clock
        self.blocked_until: float = float("-inf")

    def isOpen_check(self) -> bool:
        """
        Check whether a gesture would be accepted now.

        Returns:
            True when the cool-down has elapsed.
        """
        return self._clock() >= self.blocked_until

    def gate_arm(self) -> None:
        """Close the gate for one cool-down period starting now."""
        self.blocked_until = self._clock() + self.cooldown_seconds

    def gesture_admit(self) -> bool:
        """
        Admit a gesture if the gate is open, arming it on success.

        Returns:
            True if admitted.
        """
        if not self.isOpen_check():
            return False
        self.gate_arm()
        return True


class ConnectionSession:
    """
    One client connection and its read loop.

    Framing: each read of up to `read_buffer_size` bytes is decoded as exactly
    one gesture token after trimming. Tokens split across reads are not
    reassembled and coalesced writes are not split; clients are expected to
    write each gesture atomically.
    """

    def __init__(
        self,
        client_socket: socket.socket,
        address: tuple[str, int],
        dispatcher: ActionDispatcher,
        read_buffer_size: int = 1024,
        cooldown_seconds: float = 0.25,
        idle_timeout_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize session.

        Args:
            client_socket: Accepted client socket, owned by this session.
            address: Client address (host, port).
            dispatcher: Shared gesture dispatcher.
            read_buffer_size: Maximum bytes per read.
            cooldown_seconds: Minimum gap between dispatched gestures.
            idle_timeout_seconds: Read timeout; None waits forever.
            clock: Monotonic time source for the cool-down gate.
        """
        self.socket: socket.socket = client_socket
        self.address: tuple[str, int] = address
        self.dispatcher: ActionDispatcher = dispatcher
        self.read_buffer_size: int = read_buffer_size
        self.cooldown: CooldownGate = CooldownGate(cooldown_seconds, clock)
        self.idle_timeout_seconds: float | None = idle_timeout_seconds
        self.tokens_received: int = 0
        self.gestures_dispatched: int = 0
        self.is_open: bool = True

    def chunk_read(self) -> bytes | None:
        """
        Read one chunk from the client.

        Returns:
            Received bytes, or None when the session must end (EOF, I/O
            error or idle timeout).
        """
        try:
            data = self.socket.recv(self.read_buffer_size)
        except socket.timeout:
            logger.info(f"Client {self.address} idle for {self.idle_timeout_seconds}s, closing")
            return None
        except OSError as e:
            logger.warning(f"Client {self.address} read error: {e}")
            return None

        if not data:
            return None
        return data

    def chunk_handle(self, data: bytes) -> GestureToken:
        """
        Decode one chunk and dispatch it if allowed.

        Unknown content is dropped silently and does not arm the cool-down.

        Args:
            data: Bytes of one read.

        Returns:
            Decoded token.
        """
        token = GestureCodec.token_decode(data)
        self.tokens_received += 1

        if not token.isKnown():
            logger.debug(f"Ignoring unknown gesture from {self.address}: {data[:64]!r}")
            return token

        if not self.cooldown.gesture_admit():
            logger.debug(f"[COOLDOWN] Dropping {token.name} from {self.address}")
            return token

        logger.info(f"Received {token.name} from {self.address}")
        if self.dispatcher.gesture_dispatch(token):
            self.gestures_dispatched += 1
        return token

    def session_run(self) -> None:
        """
        Read and dispatch gestures until the client disconnects.

        Never raises on I/O errors; those end the session only.
        """
        logger.info(f"Client connected: {self.address}")
        try:
            self.socket.settimeout(self.idle_timeout_seconds)
        except OSError as e:
            logger.warning(f"Client {self.address} unusable: {e}")
            self.connection_close()
            return

        try:
            while self.is_open:
                data = self.chunk_read()
                if data is None:
                    break
                self.chunk_handle(data)
        finally:
            self.connection_close()
            logger.info(f"Client disconnected: {self.address}")

    def connection_close(self) -> None:
        """Close the client socket (idempotent)."""
        self.is_open = False
        try:
            # Wakes a recv blocked on another thread
            self.socket.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass  # peer already gone
        try:
            self.socket.close()
        except OSError as e:
            logger.error(f"Error closing connection to {self.address}: {e}")
