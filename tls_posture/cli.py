from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import NoReturn
from uuid import uuid4

import typer

from .errors import AssessmentError, InvalidDomain
from .models.config import OutputFormat, RunConfig
from .pipeline.runner import run_assessment_sync
from .reporting.progress import ConsoleProgressReporter
from .reporting.text import build_report
from .utils.normalize import validate_domain

app = typer.Typer(add_completion=False)

USAGE = "Usage: tls-posture <domain>"

_RECORD_FIELDS = set(vars(logging.makeLogRecord({})))


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
            "time": datetime.now(timezone.utc).isoformat(),
        }
        for key, value in vars(record).items():
            if key not in _RECORD_FIELDS and key not in payload:
                payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def setup_logging(verbose: bool = False) -> None:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JsonFormatter())
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, handlers=[handler], force=True)


def _fail(message: str, usage: bool = False) -> NoReturn:
    typer.echo(f"Error: {message}", err=True)
    if usage:
        typer.echo(USAGE, err=True)
    raise typer.Exit(1)


@app.command()
def run(
    domain: str | None = typer.Argument(None, help="Domain to assess, e.g. example.com"),
    output: OutputFormat = typer.Option(OutputFormat.text, "--output", help="Report format written to stdout."),
    max_minutes: float = typer.Option(10.0, "--max-minutes", min=0.1, help="Give up on the assessment after this long."),
    verbose: bool = typer.Option(False, "--verbose", help="Emit debug logs (JSON lines) on stderr."),
) -> None:
    """Check the TLS/SSL posture of a domain."""
    setup_logging(verbose)
    if domain is None:
        _fail("domain required", usage=True)
    try:
        normalized = validate_domain(domain)
    except InvalidDomain as exc:
        _fail(str(exc), usage=True)

    config = RunConfig(
        domain=normalized,
        max_session_seconds=max_minutes * 60,
        output=output,
        run_id=str(uuid4()),
        timestamp=datetime.now(timezone.utc),
    )
    typer.echo(f"Checking TLS security of: {config.domain}", err=True)

    try:
        result = run_assessment_sync(config, reporter=ConsoleProgressReporter())
    except AssessmentError as exc:
        _fail(str(exc))

    if config.output == OutputFormat.json:
        typer.echo(json.dumps(result.model_dump(), indent=2))
    else:
        typer.echo(build_report(result))
