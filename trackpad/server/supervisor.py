"""
Supervised background tasks.

The beacon and the accept loop each run under their own supervisor. A
crash in one task is logged and that task is restarted after a delay; the
other task keeps running.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable

from trackpad.common.settings import settings

logger = logging.getLogger(__name__)

__all__ = ["TaskSupervisor"]


class TaskSupervisor:
    """Runs a loop function on a daemon thread and restarts it when it raises."""

    def __init__(
        self,
        name: str,
        target: Callable[[threading.Event], None],
        restart_delay: float | None = None,
        stop_event: threading.Event | None = None,
    ) -> None:
        """
        Initialize supervisor.

        Args:
            name: Task name used for the thread and in logs.
            target: Loop function; receives the stop event and returns once
                the event is set.
            restart_delay: Seconds to wait before a restart.
            stop_event: Shared stop event; a private one is created if omitted.
        """
        self.name: str = name
        self.target: Callable[[threading.Event], None] = target
        self.restart_delay: float = (
            restart_delay if restart_delay is not None else settings.TASK_RESTART_DELAY_SEC
        )
        self.stop_event: threading.Event = stop_event if stop_event is not None else threading.Event()
        self.restarts: int = 0
        self._thread: threading.Thread | None = None

    def task_start(self) -> None:
        """Start the supervised thread."""
        self._thread = threading.Thread(target=self.task_supervise, name=self.name, daemon=True)
        self._thread.start()

    def task_supervise(self) -> None:
        """Run the target, restarting it after unexpected exceptions until stopped."""
        while not self.stop_event.is_set():
            try:
                self.target(self.stop_event)
            except Exception as e:
                logger.error(f"[SUPERVISOR] Task '{self.name}' crashed: {e}", exc_info=True)
                self.restarts += 1
                if self.stop_event.wait(self.restart_delay):
                    break
                logger.info(f"[SUPERVISOR] Restarting task '{self.name}' (restart #{self.restarts})")
                continue
            # Target returned normally: only expected once stop is requested
            if not self.stop_event.is_set():
                logger.warning(f"[SUPERVISOR] Task '{self.name}' exited without a stop request")
            break

    def task_stop(self, timeout: float | None = None) -> None:
        """
        Request stop and wait for the thread.

        Args:
            timeout: Join timeout in seconds.
        """
        self.stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)

    def isAlive_check(self) -> bool:
        """
        Check whether the supervised thread is running.

        Returns:
            True while the thread is alive.
        """
        return self._thread is not None and self._thread.is_alive()
