from __future__ import annotations

import asyncio
import logging
from typing import Optional

from ..models.config import RunConfig
from ..models.results import AssessmentResult
from ..modules.analyze import AssessmentClient
from ..modules.extract import extract
from ..utils.http import HttpClient
from .polling import PollingEngine, ProgressReporter, SnapshotSource

logger = logging.getLogger(__name__)


def build_engine(config: RunConfig, client: SnapshotSource, reporter: Optional[ProgressReporter] = None) -> PollingEngine:
    return PollingEngine(
        client,
        reporter=reporter,
        max_session_seconds=config.max_session_seconds,
        grace_wait_seconds=config.grace_wait_seconds,
        intervals=config.poll_intervals,
        default_interval_seconds=config.default_interval_seconds,
    )


async def run_assessment(
    config: RunConfig,
    reporter: Optional[ProgressReporter] = None,
    client: Optional[SnapshotSource] = None,
) -> AssessmentResult:
    http: HttpClient | None = None
    if client is None:
        http = HttpClient(timeout_seconds=config.request_timeout_seconds)
        client = AssessmentClient(http, base_url=config.api_base_url)

    engine = build_engine(config, client, reporter)
    logger.info("assessment started", extra={"domain": config.domain, "run_id": config.run_id})
    try:
        snapshot = await engine.run(config.domain)
    finally:
        if http is not None:
            await http.close()

    logger.info(
        "assessment finished",
        extra={"domain": config.domain, "run_id": config.run_id, "polls": engine.polls, "status": snapshot.status},
    )
    return extract(snapshot)


def run_assessment_sync(
    config: RunConfig,
    reporter: Optional[ProgressReporter] = None,
    client: Optional[SnapshotSource] = None,
) -> AssessmentResult:
    return asyncio.run(run_assessment(config, reporter=reporter, client=client))
