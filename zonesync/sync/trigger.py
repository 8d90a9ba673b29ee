# ZoneSync Notification Trigger
# Turns external wake-up signals into pull runs

from __future__ import annotations

import threading
from enum import Enum
from typing import Optional

from zonesync.errors import SyncError
from zonesync.sync.engine import DeltaSyncEngine, PullResult


class SignalOutcome(str, Enum):
    """Outcome reported back to the notification delivery mechanism."""

    NEW_DATA = "new_data"
    NO_DATA = "no_data"
    FAILED = "failed"
    COALESCED = "coalesced"


class NotificationTrigger:
    """
    Runs the pull loop on every signal.

    Signals carry no trusted payload and may arrive duplicated, late or
    while a pull is in flight. A signal during a running pull only asks the
    running caller for one more pass, so concurrent signals coalesce.
    """

    def __init__(self, engine: DeltaSyncEngine):
        self.engine = engine
        self.last_error: Optional[SyncError] = None
        self.last_result: Optional[PullResult] = None
        self._lock = threading.Lock()
        self._running = False
        self._rerun_requested = False

    def on_signal(self) -> SignalOutcome:
        """
        Handle one wake-up signal.

        Never raises SyncError; failures are reported as FAILED and kept on
        ``last_error`` for the caller to retry later.
        """
        with self._lock:
            if self._running:
                self._rerun_requested = True
                return SignalOutcome.COALESCED
            self._running = True

        has_changes = False
        try:
            while True:
                result = self.engine.pull_changes()
                has_changes = has_changes or result.has_changes
                self.last_result = result
                with self._lock:
                    if not self._rerun_requested:
                        self._running = False
                        break
                    self._rerun_requested = False
        except SyncError as e:
            with self._lock:
                self._running = False
                self._rerun_requested = False
            self.last_error = e
            return SignalOutcome.FAILED
        except BaseException:
            with self._lock:
                self._running = False
                self._rerun_requested = False
            raise

        self.last_error = None
        return SignalOutcome.NEW_DATA if has_changes else SignalOutcome.NO_DATA
