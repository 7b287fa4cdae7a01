"""
UDP discovery beacon.

The beacon periodically broadcasts this host's identity and gesture
endpoint so clients can find the server without typing an address. It is
fire-and-forget: no replies are expected and a failed send is retried on the
next tick.
"""

from __future__ import annotations

import ipaddress
import logging
import socket
import threading
from typing import Callable

from trackpad.common.settings import settings
from trackpad.common.types import Endpoint
from trackpad.protocol.announcement import AnnouncementMessage

logger = logging.getLogger(__name__)

__all__ = ["AnnouncementBeacon", "localIPv4_get"]


def localIPv4_get(
    hostname: str | None = None,
    resolver: Callable[..., list] = socket.getaddrinfo,
) -> str:
    """
    Pick the first non-loopback IPv4 address of this host.

    Falls back to loopback when the host has no other IPv4 address. In that
    state discovery only works on this machine.

    Args:
        hostname: Host to resolve. Defaults to `socket.gethostname()`.
        resolver: `getaddrinfo`-compatible resolver.

    Returns:
        Dotted-quad address.
    """
    host = hostname if hostname is not None else socket.gethostname()
    try:
        infos = resolver(host, None, socket.AF_INET)
    except OSError as e:
        logger.warning(f"Could not resolve host addresses for '{host}': {e}")
        infos = []

    for info in infos:
        address = info[4][0]
        try:
            parsed = ipaddress.ip_address(address)
        except ValueError:
            continue
        if parsed.version == 4 and not parsed.is_loopback:
            return address

    logger.warning(
        f"No non-loopback IPv4 address found, announcing {settings.LOOPBACK_FALLBACK_IP}; "
        "clients on other hosts will not discover this server"
    )
    return settings.LOOPBACK_FALLBACK_IP


class AnnouncementBeacon:
    """Broadcasts an AnnouncementMessage every interval"""

    def __init__(
        self,
        gesture_port: int,
        discovery_port: int = 4568,
        interval_ms: int = 2000,
        broadcast_address: str = "255.255.255.255",
        name: str | None = None,
        ip_provider: Callable[[], str] = localIPv4_get,
    ) -> None:
        """
        Initialize beacon.

        Args:
            gesture_port: TCP port announced to clients.
            discovery_port: UDP port datagrams are sent to.
            interval_ms: Delay between announcements.
            broadcast_address: Destination broadcast address.
            name: Announced host identifier. Defaults to the host name.
            ip_provider: Callable returning the announced IPv4 address.
        """
        self.gesture_port: int = gesture_port
        self.discovery_port: int = discovery_port
        self.interval_seconds: float = interval_ms / settings.MS_PER_SECOND
        self.broadcast_address: str = broadcast_address
        self.name: str | None = name
        self._ip_provider: Callable[[], str] = ip_provider
        self._socket: socket.socket | None = None
        self.announcements_sent: int = 0

    def endpoint_build(self) -> Endpoint:
        """
        Build this host's endpoint from its current identity and address.

        Returns:
            Endpoint announced on this tick.
        """
        name = self.name or socket.gethostname()
        return Endpoint(name=name, ip=self._ip_provider(), port=self.gesture_port)

    def socket_get(self) -> socket.socket:
        """
        Get the broadcast-enabled UDP socket, creating it on first use.

        Returns:
            UDP socket with SO_BROADCAST set.
        """
        if self._socket is None:
            udp = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
            udp.setsockopt(socket.SOL_SOCKET, socket.SO_BROADCAST, 1)
            self._socket = udp
        return self._socket

    def announcement_send(self) -> bool:
        """
        Send one announcement datagram.

        Returns:
            True if the datagram was handed to the network stack; False if the
            send failed (logged, retried next tick).
        """
        endpoint = self.endpoint_build()
        payload = AnnouncementMessage.endpoint_wrap(endpoint).datagram_encode()
        try:
            self.socket_get().sendto(payload, (self.broadcast_address, self.discovery_port))
        except OSError as e:
            logger.warning(f"[BEACON] Broadcast failed, retrying next tick: {e}")
            self.beacon_close()
            return False

        self.announcements_sent += 1
        logger.debug(f"[BEACON] Announced {endpoint.name}@{endpoint.ip}:{endpoint.port}")
        return True

    def beacon_run(self, stop_event: threading.Event | None = None) -> None:
        """
        Announce every interval until stop_event is set.

        Args:
            stop_event: Optional event that ends the loop.
        """
        stop_event = stop_event if stop_event is not None else threading.Event()
        endpoint = self.endpoint_build()
        logger.info(
            f"[BEACON] Broadcasting {endpoint.name}@{endpoint.ip}:{endpoint.port} "
            f"to {self.broadcast_address}:{self.discovery_port} "
            f"every {self.interval_seconds:g}s"
        )
        try:
            while not stop_event.is_set():
                self.announcement_send()
                stop_event.wait(self.interval_seconds)
        finally:
            self.beacon_close()

    def beacon_close(self) -> None:
        """Close the UDP socket; the next send opens a new one."""
        if self._socket is not None:
            try:
                self._socket.close()
            except OSError as e:
                logger.error(f"Error closing beacon socket: {e}")
            finally:
                self._socket = None
