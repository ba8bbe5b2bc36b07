from __future__ import annotations

"""Polling evaluator
--------------------
Turns a one-shot probe into a time-tolerant boolean: the probe is retried
until it succeeds or the wait budget runs out. The budget is passed in
explicitly as a WaitPolicy; exhaustion is reported as an Exhausted outcome
rather than an exception.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field

from page_matchers.core.options import FindOptions
from page_matchers.utils.logger import get_logger
from page_matchers.utils.timing import Stopwatch, now_ms, sleep_ms

log = get_logger(__name__)

Probe = Callable[[], bool]


# ---------- Policy ----------

class WaitPolicy(BaseModel):
    """How long to keep probing and how often.

    timeout_ms=None means the backend is not live: one probe, no retry.
    That is the same as timeout_ms=0, and both go through the same loop.
    """

    model_config = ConfigDict(frozen=True)

    timeout_ms: Optional[int] = Field(default=2000, ge=0)
    interval_ms: int = Field(default=50, ge=1)

    @property
    def budget_ms(self) -> int:
        return self.timeout_ms or 0

    def with_timeout(self, timeout_ms: Optional[int]) -> "WaitPolicy":
        return WaitPolicy(timeout_ms=timeout_ms, interval_ms=self.interval_ms)


NO_WAIT = WaitPolicy(timeout_ms=None)


# ---------- Outcomes ----------

@dataclass(frozen=True)
class Success:
    attempts: int
    elapsed_ms: int


@dataclass(frozen=True)
class Exhausted:
    attempts: int
    elapsed_ms: int


Outcome = Union[Success, Exhausted]


# ---------- Loop ----------

def poll(
    probe: Probe,
    policy: WaitPolicy,
    *,
    clock: Callable[[], int] = now_ms,
    sleep: Callable[[int], None] = sleep_ms,
) -> Outcome:
    """
    Call `probe()` until it returns True or `policy` runs out of budget.

    The probe always runs at least once, even with a zero budget. Exceptions
    raised by the probe are not caught.
    """
    sw = Stopwatch(clock=clock).start()
    deadline = sw.start_ms + policy.budget_ms
    attempts = 0

    while True:
        attempts += 1
        if probe():
            return Success(attempts=attempts, elapsed_ms=sw.elapsed_ms())
        remaining = deadline - clock()
        if remaining <= 0:
            log.debug(f"Wait budget of {policy.budget_ms} ms exhausted after {attempts} probe(s)")
            return Exhausted(attempts=attempts, elapsed_ms=sw.elapsed_ms())
        sleep(min(policy.interval_ms, remaining))


def evaluate(
    probe: Probe,
    policy: WaitPolicy,
    *,
    clock: Callable[[], int] = now_ms,
    sleep: Callable[[int], None] = sleep_ms,
) -> bool:
    """Boolean view of poll(): Success -> True, Exhausted -> False."""
    outcome = poll(probe, policy, clock=clock, sleep=sleep)
    if isinstance(outcome, Exhausted):
        return False
    return True


# ---------- Count-aware probes ----------

def presence_probe(query: Callable[[str, FindOptions], Sequence], selector: str, options: FindOptions) -> Probe:
    """Probe that holds when the selector matches (exactly `count` times if given)."""
    def _probe() -> bool:
        n = len(query(selector, options))
        if options.count is not None:
            return n == options.count
        return n > 0
    return _probe


def absence_probe(query: Callable[[str, FindOptions], Sequence], selector: str, options: FindOptions) -> Probe:
    """Probe that holds when the selector does not match (or not exactly `count` times)."""
    def _probe() -> bool:
        n = len(query(selector, options))
        if options.count is not None:
            return n != options.count
        return n == 0
    return _probe
