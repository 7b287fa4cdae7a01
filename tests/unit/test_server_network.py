"""Unit tests for GestureServer shutdown and session registration"""

import socket
from unittest.mock import Mock

import pytest

from trackpad.server.dispatcher import ActionDispatcher
from trackpad.server.network import GestureServer


def _server(recording_capability) -> GestureServer:
    return GestureServer("127.0.0.1", 0, ActionDispatcher(recording_capability))


class TestServerStop:
    """Test ordering of listener close and session drain"""

    def test_listener_closed_before_sessions(self, recording_capability):
        server = _server(recording_capability)
        server.is_running = True
        events = []
        listener = Mock(spec=socket.socket)
        listener.close.side_effect = lambda: events.append("listener")
        session = Mock()
        session.connection_close.side_effect = lambda: events.append("session")
        server.server_socket = listener
        server._sessions.add(session)

        server.server_stop()

        assert events == ["listener", "session"]
        assert server.server_socket is None
        assert server.is_running is False

    def test_client_accepted_after_stop_is_refused(self, recording_capability):
        server = _server(recording_capability)
        server.is_running = True
        server.server_stop()
        client_socket = Mock(spec=socket.socket)

        session = server.session_spawn(client_socket, ("192.0.2.10", 50000))

        assert session is None
        client_socket.close.assert_called_once()
        assert server.sessions_count() == 0

    def test_listener_close_error_still_drains(self, recording_capability):
        server = _server(recording_capability)
        server.is_running = True
        listener = Mock(spec=socket.socket)
        listener.close.side_effect = OSError("bad descriptor")
        session = Mock()
        server.server_socket = listener
        server._sessions.add(session)

        server.server_stop()

        session.connection_close.assert_called_once()


class TestConnectionsServe:
    """Test accept loop preconditions"""

    def test_serve_before_start_raises(self, recording_capability):
        server = _server(recording_capability)

        with pytest.raises(RuntimeError, match="server_start"):
            server.connections_serve()
