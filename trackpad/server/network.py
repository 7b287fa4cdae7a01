"""TCP server accepting gesture stream connections"""

import logging
import socket
import threading
import time
from typing import Callable, Optional

from trackpad.common.settings import settings
from trackpad.server.dispatcher import ActionDispatcher
from trackpad.server.session import ConnectionSession

logger = logging.getLogger(__name__)


class GestureServer:
    """
    TCP listener that runs one ConnectionSession per accepted client

    Sessions run on their own daemon threads. The server only keeps a
    registry of live sessions for counting and shutdown; sessions never see
    each other.
    """

    def __init__(
        self,
        host: str,
        port: int,
        dispatcher: ActionDispatcher,
        read_buffer_size: int = 1024,
        cooldown_seconds: float = 0.25,
        idle_timeout_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize gesture server

        Args:
            host: Host address to bind to
            port: Port to listen on (0 picks an ephemeral port)
            dispatcher: Dispatcher shared by all sessions
            read_buffer_size: Maximum bytes per session read
            cooldown_seconds: Per-session minimum gap between gestures
            idle_timeout_seconds: Per-session read timeout, None for no timeout
            clock: Monotonic time source for session cool-down gates
        """
        self.host: str = host
        self.port: int = port
        self.dispatcher: ActionDispatcher = dispatcher
        self.read_buffer_size: int = read_buffer_size
        self.cooldown_seconds: float = cooldown_seconds
        self.idle_timeout_seconds: Optional[float] = idle_timeout_seconds
        self._clock: Callable[[], float] = clock
        self.server_socket: Optional[socket.socket] = None
        self.is_running: bool = False
        self._sessions: set[ConnectionSession] = set()
        self._sessions_lock: threading.Lock = threading.Lock()

    def server_start(self) -> None:
        """
        Bind and listen on all requested interfaces

        Raises:
            OSError: If unable to bind to address (fatal at startup)
        """
        server_socket = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            server_socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            server_socket.bind((self.host, self.port))
            server_socket.listen()
            server_socket.settimeout(settings.ACCEPT_POLL_SECONDS)
        except OSError:
            server_socket.close()
            raise

        self.server_socket = server_socket
        self.port = server_socket.getsockname()[1]
        self.is_running = True
        logger.info(f"Gesture server listening on {self.host}:{self.port}")

    def connections_serve(self, stop_event: Optional[threading.Event] = None) -> None:
        """
        Accept clients until stopped, spawning one session thread per client

        Args:
            stop_event: Optional event that ends the loop when set

        Raises:
            RuntimeError: If the server was not started
        """
        server_socket = self.server_socket
        if server_socket is None:
            raise RuntimeError("server_start() must be called before connections_serve()")

        while self.is_running and not (stop_event is not None and stop_event.is_set()):
            try:
                client_socket, address = server_socket.accept()
            except socket.timeout:
                continue
            except OSError as e:
                if not self.is_running:
                    break
                logger.error(f"Error accepting connection: {e}")
                raise

            self.session_spawn(client_socket, address)

    def session_spawn(
        self, client_socket: socket.socket, address: tuple
    ) -> Optional[ConnectionSession]:
        """
        Create a session for an accepted socket and start its thread

        Args:
            client_socket: Accepted socket
            address: Client address

        Returns:
            The started session, or None if the server is stopping (the
            socket is closed)
        """
        # Accepted sockets inherit the listener timeout
        client_socket.settimeout(None)
        session = ConnectionSession(
            client_socket,
            address,
            self.dispatcher,
            read_buffer_size=self.read_buffer_size,
            cooldown_seconds=self.cooldown_seconds,
            idle_timeout_seconds=self.idle_timeout_seconds,
            clock=self._clock,
        )
        # Same lock as server_stop: a session is either drained or refused
        with self._sessions_lock:
            refused = not self.is_running
            if not refused:
                self._sessions.add(session)
        if refused:
            logger.info(f"Refusing client {address}: server is stopping")
            session.connection_close()
            return None

        thread = threading.Thread(
            target=self._session_run,
            args=(session,),
            name=f"session-{address[0]}:{address[1]}",
            daemon=True,
        )
        thread.start()
        return session

    def _session_run(self, session: ConnectionSession) -> None:
        try:
            session.session_run()
        except Exception as e:
            # Never let one session's failure reach the accept loop
            logger.error(f"Session {session.address} crashed: {e}", exc_info=True)
            session.connection_close()
        finally:
            with self._sessions_lock:
                self._sessions.discard(session)

    def sessions_count(self) -> int:
        """
        Get number of live sessions

        Returns:
            Number of connected clients
        """
        with self._sessions_lock:
            return len(self._sessions)

    def server_stop(self) -> None:
        """Stop accepting, then close every live session"""
        with self._sessions_lock:
            self.is_running = False

        if self.server_socket:
            try:
                self.server_socket.close()
            except OSError as e:
                logger.error(f"Error closing server socket: {e}")
            finally:
                self.server_socket = None

        with self._sessions_lock:
            sessions = list(self._sessions)
        for session in sessions:
            session.connection_close()

        logger.info("Gesture server stopped")
