"""
Application layer: lazily scheduled background heartbeats.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import replace
from typing import Callable

from pulseguard.client.domain.entities import HeartbeatState


class HeartbeatScheduler:
    """Launches heartbeats from the host's poll loop, one at a time.

    ``poll()`` never blocks: it starts a daemon thread when the interval has
    elapsed and nothing is in flight, then answers from the last completed
    heartbeat. The state record is swapped as a whole; the lock only guards
    the swap itself.
    """

    def __init__(
        self,
        heartbeat: Callable[[], bool],
        is_unsafe: Callable[[], bool],
        interval: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.heartbeat = heartbeat
        self.is_unsafe = is_unsafe
        self.interval = interval
        self.clock = clock
        self.logger = logging.getLogger(__name__)
        self._swap_lock = threading.Lock()
        self._state = HeartbeatState(last_attempt=clock())
        self._thread: threading.Thread | None = None
        self._stopped = False

    @property
    def state(self) -> HeartbeatState:
        """Current immutable snapshot."""
        return self._state

    def poll(self) -> bool:
        """Per-tick liveness check. False means the host must halt."""
        self._maybe_launch()
        state = self._state
        # Connectivity loss is tolerated while the subject is in a safe state.
        return not (state.failed and self.is_unsafe())

    def stop(self) -> None:
        """Stop launching new heartbeats. An in-flight one still completes."""
        self._stopped = True

    def join(self, timeout: float | None = None) -> None:
        """Wait for the in-flight heartbeat, if any."""
        thread = self._thread
        if thread is not None:
            thread.join(timeout)

    def _maybe_launch(self) -> None:
        if self._stopped:
            return
        now = self.clock()
        with self._swap_lock:
            state = self._state
            if state.in_flight or now - state.last_attempt < self.interval:
                return
            self._state = replace(state, last_attempt=now, in_flight=True)
        self._thread = threading.Thread(
            target=self._run, name="pulseguard-heartbeat", daemon=True
        )
        self._thread.start()

    def _run(self) -> None:
        try:
            succeeded = bool(self.heartbeat())
        except Exception:
            self.logger.exception("Heartbeat raised")
            succeeded = False
        with self._swap_lock:
            self._state = replace(
                self._state, last_succeeded=succeeded, in_flight=False
            )
