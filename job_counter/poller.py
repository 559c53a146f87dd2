# job_counter/poller.py
"""
Poll-until-changed confirmation.

The chain offers no push notification for a state change, so after a
mutation is submitted we re-read the full value every `interval` seconds
until it differs from the baseline read before submission.

Bounded by `max_attempts` and/or `timeout`. Leaving both as None polls
forever (what the interactive increment script does by default).
A deadline also cuts the last sleep short, so `timeout` bounds the total wait.

The observer gets one `PollProgress` per attempt that still saw the
baseline. The attempt that observes the change is not reported; it comes
back as `PollResult.attempts`.
"""
import threading, time
from dataclasses import dataclass
from typing import Any, Callable, Optional

from .errors import ConfirmationTimeout, PollCancelled

DEFAULT_INTERVAL = 2.0


@dataclass(frozen=True)
class PollProgress:
    attempt: int
    observed: Any


@dataclass(frozen=True)
class PollResult:
    value: Any
    attempts: int


class ConfirmationPoller:
    def __init__(
        self,
        interval: float = DEFAULT_INTERVAL,
        max_attempts: Optional[int] = None,
        timeout: Optional[float] = None,
        observer: Optional[Callable[[PollProgress], None]] = None,
        cancel: Optional[threading.Event] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_attempts is not None and max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self.interval = float(interval)
        self.max_attempts = max_attempts
        self.timeout = timeout
        self.observer = observer
        self.cancel = cancel
        self._sleep = sleep
        self._clock = clock

    def _wait(self, deadline: Optional[float]) -> bool:
        """Sleep one interval (less if the deadline is closer); True if cancelled meanwhile."""
        delay = self.interval
        if deadline is not None:
            delay = max(0.0, min(delay, deadline - self._clock()))
        if self.cancel is None:
            self._sleep(delay)
            return False
        return self.cancel.wait(delay)

    def poll(self, baseline, read: Callable[[], Any]) -> PollResult:
        deadline = None if self.timeout is None else self._clock() + float(self.timeout)
        attempt = 0
        observed = baseline
        while True:
            if self.cancel is not None and self.cancel.is_set():
                raise PollCancelled(observed, attempt)

            attempt += 1
            observed = read()
            if observed != baseline:
                return PollResult(observed, attempt)

            if self.observer is not None:
                self.observer(PollProgress(attempt, observed))

            if self.max_attempts is not None and attempt >= self.max_attempts:
                raise ConfirmationTimeout(observed, attempt)
            if deadline is not None and self._clock() >= deadline:
                raise ConfirmationTimeout(observed, attempt)

            if self._wait(deadline):
                raise PollCancelled(observed, attempt)
