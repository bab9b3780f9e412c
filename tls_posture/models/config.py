from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from .snapshot import JobStatus

DEFAULT_API_BASE_URL = "https://api.ssllabs.com/api/v2"

# Seconds between polls, keyed by job status; any other status uses the default.
DEFAULT_POLL_INTERVALS = {JobStatus.dns.value: 5.0, JobStatus.in_progress.value: 10.0}
DEFAULT_POLL_INTERVAL = 5.0


class OutputFormat(str, Enum):
    text = "text"
    json = "json"


class RunConfig(BaseModel):
    domain: str
    api_base_url: str = DEFAULT_API_BASE_URL
    request_timeout_seconds: float = 30.0
    max_session_seconds: float = Field(600.0, gt=0)
    grace_wait_seconds: float = 10.0
    dns_interval_seconds: float = DEFAULT_POLL_INTERVALS[JobStatus.dns.value]
    in_progress_interval_seconds: float = DEFAULT_POLL_INTERVALS[JobStatus.in_progress.value]
    default_interval_seconds: float = DEFAULT_POLL_INTERVAL
    output: OutputFormat = OutputFormat.text
    run_id: str
    timestamp: datetime

    @property
    def poll_intervals(self) -> dict[str, float]:
        return {
            JobStatus.dns.value: self.dns_interval_seconds,
            JobStatus.in_progress.value: self.in_progress_interval_seconds,
        }
