"""
Discovery listener for server announcements.

Receives beacon datagrams, keeps one entry per announced IP address and
refreshes its "last seen" time on every re-receipt.
"""

from __future__ import annotations

import logging
import socket
import threading
import time
from dataclasses import dataclass
from typing import Callable

from trackpad.common.settings import settings
from trackpad.common.types import Endpoint
from trackpad.protocol.announcement import AnnouncementMessage

logger = logging.getLogger(__name__)

__all__ = ["DiscoveredServer", "DiscoveryListener", "ServerDirectory"]


@dataclass
class DiscoveredServer:
    """A server seen on the network"""

    name: str
    ip: str
    port: int
    last_seen: float

    def endpoint_get(self) -> Endpoint:
        """Return the announced endpoint."""
        return Endpoint(name=self.name, ip=self.ip, port=self.port)

    def displayInfo_get(self, now: float) -> str:
        """
        Format the entry for a listing.

        Args:
            now: Current time on the same clock as `last_seen`.

        Returns:
            Text such as 'desk (192.168.1.20:4567): 2s'.
        """
        age = max(0, int(now - self.last_seen))
        return f"{self.name} ({self.ip}:{self.port}): {age}s"


class ServerDirectory:
    """Thread-safe set of discovered servers keyed by IP address"""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock: Callable[[], float] = clock
        self._servers: dict[str, DiscoveredServer] = {}
        self._lock: threading.Lock = threading.Lock()

    def announcement_record(self, message: AnnouncementMessage) -> bool:
        """
        Record an announcement.

        A new IP adds an entry; a known IP refreshes its last-seen time and
        takes the latest name and port.

        Args:
            message: Received announcement.

        Returns:
            True if this IP was not known before.
        """
        now = self._clock()
        with self._lock:
            existing = self._servers.get(message.ip)
            if existing is None:
                self._servers[message.ip] = DiscoveredServer(
                    name=message.name, ip=message.ip, port=message.port, last_seen=now
                )
                return True
            existing.name = message.name
            existing.port = message.port
            existing.last_seen = now
            return False

    def servers_list(self, max_age: float | None = None) -> list[DiscoveredServer]:
        """
        List discovered servers in discovery order.

        Args:
            max_age: Only include servers seen within this many seconds.

        Returns:
            Snapshot copies of the entries.
        """
        now = self._clock()
        with self._lock:
            entries = list(self._servers.values())
        return [
            DiscoveredServer(e.name, e.ip, e.port, e.last_seen)
            for e in entries
            if max_age is None or now - e.last_seen <= max_age
        ]

    def stale_prune(self, max_age: float = settings.DISCOVERY_STALE_SECONDS) -> int:
        """
        Drop servers not seen within max_age seconds.

        Returns:
            Number of entries removed.
        """
        now = self._clock()
        with self._lock:
            stale = [ip for ip, e in self._servers.items() if now - e.last_seen > max_age]
            for ip in stale:
                del self._servers[ip]
        return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._servers)


class DiscoveryListener:
    """Binds the discovery port and feeds announcements into a ServerDirectory"""

    RECEIVE_SIZE = 2048

    def __init__(
        self,
        port: int = 4568,
        host: str = "",
        directory: ServerDirectory | None = None,
        poll_seconds: float = 0.5,
    ) -> None:
        """
        Initialize listener.

        Args:
            port: UDP port to bind (0 for an ephemeral port).
            host: Local address to bind; empty string binds all interfaces.
            directory: Directory to fill; a new one is created if omitted.
            poll_seconds: Receive timeout so the loop can observe a stop request.
        """
        self.host: str = host
        self.port: int = port
        self.directory: ServerDirectory = directory if directory is not None else ServerDirectory()
        self.poll_seconds: float = poll_seconds
        self.socket: socket.socket | None = None

    def listener_start(self) -> None:
        """
        Bind the UDP socket.

        Raises:
            OSError: If the port cannot be bound.
        """
        udp = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        try:
            udp.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            udp.setsockopt(socket.SOL_SOCKET, socket.SO_BROADCAST, 1)
            udp.bind((self.host, self.port))
            udp.settimeout(self.poll_seconds)
        except OSError:
            udp.close()
            raise
        self.socket = udp
        self.port = udp.getsockname()[1]
        logger.info(f"Listening for announcements on UDP port {self.port}")

    def datagram_handle(self, payload: bytes, sender: tuple[str, int]) -> AnnouncementMessage | None:
        """
        Decode and record one datagram; malformed payloads are ignored.

        Args:
            payload: Datagram bytes.
            sender: Source address.

        Returns:
            Decoded announcement, or None if the payload was not one.
        """
        try:
            message = AnnouncementMessage.datagram_decode(payload)
        except ValueError as e:
            logger.debug(f"Ignoring malformed announcement from {sender}: {e}")
            return None

        if self.directory.announcement_record(message):
            logger.info(f"Discovered {message.name} at {message.ip}:{message.port}")
        return message

    def listener_run(self, stop_event: threading.Event, deadline: float | None = None) -> None:
        """
        Receive announcements until stopped or the deadline passes.

        Args:
            stop_event: Ends the loop when set.
            deadline: Optional `time.monotonic()` value after which to return.

        Raises:
            RuntimeError: If no socket is open after `listener_start()`
        """
        if self.socket is None:
            self.listener_start()
        udp = self.socket
        if udp is None:
            raise RuntimeError("listener_start() did not open the discovery socket")

        while not stop_event.is_set():
            if deadline is not None and time.monotonic() >= deadline:
                break
            try:
                payload, sender = udp.recvfrom(self.RECEIVE_SIZE)
            except socket.timeout:
                continue
            except OSError as e:
                if stop_event.is_set():
                    break
                logger.warning(f"Discovery receive failed: {e}")
                continue
            self.datagram_handle(payload, sender)

    def listener_close(self) -> None:
        """Close the UDP socket."""
        if self.socket is not None:
            try:
                self.socket.close()
            finally:
                self.socket = None
