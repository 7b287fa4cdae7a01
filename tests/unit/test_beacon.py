"""Unit tests for the discovery beacon"""

import json
import socket
import threading
from unittest.mock import Mock

import pytest

from trackpad.server.beacon import AnnouncementBeacon, localIPv4_get


def _info(address):
    return (socket.AF_INET, socket.SOCK_DGRAM, 0, "", (address, 0))


class TestLocalIPv4:
    """Test local address selection"""

    def test_first_non_loopback(self):
        resolver = Mock(return_value=[_info("127.0.1.1"), _info("192.168.1.20"), _info("10.0.0.5")])

        assert localIPv4_get("desk", resolver) == "192.168.1.20"
        resolver.assert_called_once_with("desk", None, socket.AF_INET)

    def test_loopback_fallback(self, caplog):
        resolver = Mock(return_value=[_info("127.0.0.1")])

        assert localIPv4_get("desk", resolver) == "127.0.0.1"
        assert any("No non-loopback IPv4" in r.getMessage() for r in caplog.records)

    def test_resolver_failure_falls_back(self):
        resolver = Mock(side_effect=socket.gaierror("no such host"))

        assert localIPv4_get("desk", resolver) == "127.0.0.1"


class TestAnnouncementBeacon:
    """Test announcement emission with a mock socket"""

    @pytest.fixture
    def beacon(self):
        beacon = AnnouncementBeacon(
            gesture_port=4567,
            discovery_port=4568,
            interval_ms=10,
            name="desk",
            ip_provider=lambda: "192.168.1.20",
        )
        beacon._socket = Mock(spec=socket.socket)
        return beacon

    def test_announcement_payload(self, beacon):
        assert beacon.announcement_send() is True

        payload, destination = beacon._socket.sendto.call_args[0]
        assert destination == ("255.255.255.255", 4568)
        assert json.loads(payload.decode("utf-8")) == {
            "name": "desk",
            "ip": "192.168.1.20",
            "port": 4567,
        }
        assert beacon.announcements_sent == 1

    def test_default_name_is_hostname(self, beacon):
        beacon.name = None
        assert beacon.endpoint_build().name == socket.gethostname()

    def test_send_failure_is_not_fatal(self, beacon):
        failing = beacon._socket
        failing.sendto.side_effect = OSError("network unreachable")

        assert beacon.announcement_send() is False
        failing.close.assert_called_once()
        assert beacon._socket is None
        assert beacon.announcements_sent == 0

    def test_run_repeats_until_stopped(self, beacon):
        stop_event = threading.Event()
        sock = beacon._socket

        def counting_send(payload, destination):
            if sock.sendto.call_count >= 3:
                stop_event.set()

        sock.sendto.side_effect = counting_send

        beacon.beacon_run(stop_event)

        assert sock.sendto.call_count == 3
        sock.close.assert_called_once()

    def test_run_survives_failed_ticks(self, beacon):
        stop_event = threading.Event()
        sock = beacon._socket
        outcomes = [OSError("down"), None]

        def flaky_send(payload, destination):
            result = outcomes.pop(0)
            if result is not None:
                raise result
            stop_event.set()

        sock.sendto.side_effect = flaky_send
        beacon.socket_get = Mock(return_value=sock)

        beacon.beacon_run(stop_event)

        assert sock.sendto.call_count == 2
        assert beacon.announcements_sent == 1

    def test_broadcast_socket_option(self, monkeypatch):
        created = Mock(spec=socket.socket)
        monkeypatch.setattr(socket, "socket", Mock(return_value=created))
        beacon = AnnouncementBeacon(gesture_port=4567, ip_provider=lambda: "10.0.0.2")

        assert beacon.socket_get() is created
        created.setsockopt.assert_called_once_with(socket.SOL_SOCKET, socket.SO_BROADCAST, 1)
