from __future__ import annotations

from typing import Optional

import typer

from ..models.snapshot import JobSnapshot, JobStatus
from ..pipeline.polling import EndpointTally


def _describe_in_progress(snapshot: JobSnapshot) -> str:
    if not snapshot.endpoints or not snapshot.endpoints[0].started:
        return "Assessing TLS security..."
    progress = snapshot.endpoints[0].progress
    if progress < 100:
        return f"Assessing TLS security... ({progress}%)"

    tally = EndpointTally.from_snapshot(snapshot)
    if tally.ready == 0:
        return f"Waiting for the assessment to finish... ({tally.started} endpoints in progress)"
    if tally.with_details < tally.ready:
        if tally.with_details > 0:
            return f"Waiting for TLS details... ({tally.with_details}/{tally.ready} endpoints with full details)"
        return f"Waiting for TLS details... ({tally.ready} endpoints ready, waiting for details)"
    return "Finalizing assessment..."


def describe_progress(snapshot: JobSnapshot, is_first_call: bool) -> Optional[str]:
    if snapshot.status == JobStatus.dns:
        return "Resolving DNS..."
    if snapshot.status == JobStatus.in_progress:
        return _describe_in_progress(snapshot)
    if snapshot.status == JobStatus.ready:
        return "Assessment complete."
    if snapshot.status == JobStatus.error:
        return None
    if is_first_call:
        return "Starting assessment..."
    return None


class ConsoleProgressReporter:
    def __init__(self, err: bool = True) -> None:
        self.err = err

    def __call__(self, snapshot: JobSnapshot, is_first_call: bool) -> None:
        line = describe_progress(snapshot, is_first_call)
        if line:
            typer.echo(line, err=self.err)
