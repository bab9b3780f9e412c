"""Polling state machine for one assessment session.

The engine submits a new job, then re-polls until the job settles::

    STARTING -> POLLING -> SUCCEEDED | FAILED | TIMED_OUT
                    \\-> AWAITING_GRACE_DETAILS -> SUCCEEDED

``AWAITING_GRACE_DETAILS`` is entered when every started endpoint reports
``Ready`` but only some of them carry their detail blob yet. Exactly one more
poll is made after the grace wait and its snapshot is accepted as-is.
"""
from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Mapping, Optional, Protocol

from ..errors import AssessmentError, JobError, PollingTimeout
from ..models.config import DEFAULT_POLL_INTERVAL, DEFAULT_POLL_INTERVALS
from ..models.snapshot import JobSnapshot, JobStatus

logger = logging.getLogger(__name__)


class SnapshotSource(Protocol):
    async def submit(self, domain: str, start_new: bool, request_full_details: bool = True) -> JobSnapshot: ...


class ProgressReporter(Protocol):
    def __call__(self, snapshot: JobSnapshot, is_first_call: bool) -> None: ...


class SessionState(str, Enum):
    starting = "starting"
    polling = "polling"
    awaiting_grace_details = "awaiting_grace_details"
    succeeded = "succeeded"
    failed = "failed"
    timed_out = "timed_out"


@dataclass(frozen=True)
class EndpointTally:
    started: int
    ready: int
    with_details: int

    @classmethod
    def from_snapshot(cls, snapshot: JobSnapshot) -> "EndpointTally":
        started = ready = with_details = 0
        for endpoint in snapshot.endpoints:
            if not endpoint.started:
                continue
            started += 1
            if endpoint.is_ready:
                ready += 1
                if endpoint.details is not None:
                    with_details += 1
        return cls(started=started, ready=ready, with_details=with_details)

    @property
    def all_ready(self) -> bool:
        return self.started > 0 and self.ready == self.started


def next_state(snapshot: JobSnapshot) -> SessionState:
    """Decide what a polling session does with ``snapshot``."""
    if snapshot.status == JobStatus.ready:
        return SessionState.succeeded
    if snapshot.status == JobStatus.error:
        return SessionState.failed

    tally = EndpointTally.from_snapshot(snapshot)
    if tally.all_ready:
        if tally.with_details == tally.ready:
            return SessionState.succeeded
        if tally.with_details > 0:
            return SessionState.awaiting_grace_details
    return SessionState.polling


def poll_interval(
    status: str,
    intervals: Mapping[str, float] = DEFAULT_POLL_INTERVALS,
    default: float = DEFAULT_POLL_INTERVAL,
) -> float:
    return intervals.get(status, default)


class PollingEngine:
    def __init__(
        self,
        client: SnapshotSource,
        reporter: Optional[ProgressReporter] = None,
        max_session_seconds: float = 600.0,
        grace_wait_seconds: float = 10.0,
        intervals: Optional[Mapping[str, float]] = None,
        default_interval_seconds: float = DEFAULT_POLL_INTERVAL,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.client = client
        self.reporter = reporter
        self.max_session_seconds = max_session_seconds
        self.grace_wait_seconds = grace_wait_seconds
        self.intervals = dict(DEFAULT_POLL_INTERVALS if intervals is None else intervals)
        self.default_interval_seconds = default_interval_seconds
        self._sleep = sleep
        self._clock = clock
        self.state = SessionState.starting
        self.polls = 0

    def _transition(self, state: SessionState) -> None:
        if state != self.state:
            logger.info("session state", extra={"from": self.state.value, "to": state.value})
        self.state = state

    def _report(self, snapshot: JobSnapshot, is_first_call: bool) -> None:
        if self.reporter is None:
            return
        try:
            self.reporter(snapshot, is_first_call)
        except Exception:  # pragma: no cover - reporting must not affect polling
            logger.warning("progress reporter failed", exc_info=True)

    async def _poll(self, domain: str, start_new: bool) -> JobSnapshot:
        snapshot = await self.client.submit(domain, start_new=start_new, request_full_details=True)
        self.polls += 1
        self._report(snapshot, is_first_call=start_new)
        return snapshot

    async def _wait(self, seconds: float, reason: str) -> None:
        logger.debug("sleeping", extra={"seconds": seconds, "reason": reason})
        await self._sleep(seconds)

    async def run(self, domain: str) -> JobSnapshot:
        self.state = SessionState.starting
        self.polls = 0
        started_at = self._clock()
        try:
            snapshot = await self._poll(domain, start_new=True)
            self._transition(SessionState.polling)

            while True:
                elapsed = self._clock() - started_at
                if elapsed > self.max_session_seconds:
                    self._transition(SessionState.timed_out)
                    raise PollingTimeout(f"timeout: assessment took longer than {self.max_session_seconds:g}s")

                state = next_state(snapshot)
                if state == SessionState.succeeded:
                    self._transition(state)
                    return snapshot
                if state == SessionState.failed:
                    self._transition(state)
                    raise JobError(f"assessment failed: {snapshot.status_message}")
                if state == SessionState.awaiting_grace_details:
                    self._transition(state)
                    return await self._grace_poll(domain)

                await self._wait(
                    poll_interval(snapshot.status, self.intervals, self.default_interval_seconds),
                    reason=snapshot.status,
                )
                snapshot = await self._poll(domain, start_new=False)
        except (JobError, PollingTimeout):
            raise
        except AssessmentError:
            self._transition(SessionState.failed)
            raise

    async def _grace_poll(self, domain: str) -> JobSnapshot:
        await self._wait(self.grace_wait_seconds, reason="grace")
        snapshot = await self._poll(domain, start_new=False)
        self._transition(SessionState.succeeded)
        return snapshot
