from __future__ import annotations

import json
import logging

import httpx
from pydantic import ValidationError

from ..errors import (
    DecodeError,
    InvalidRequest,
    RateLimited,
    ServiceOverloaded,
    ServiceUnavailable,
    UnexpectedStatus,
)
from ..models.config import DEFAULT_API_BASE_URL
from ..models.snapshot import JobSnapshot
from ..utils.http import HttpClient

logger = logging.getLogger(__name__)

ANALYZE_PATH = "/analyze"


def build_analyze_params(domain: str, start_new: bool, request_full_details: bool) -> dict[str, str]:
    # Results are never published to the public board.
    params = {"host": domain, "publish": "off"}
    if start_new:
        params["startNew"] = "on"
    if request_full_details:
        params["all"] = "done"
    return params


def _invalid_request(response: httpx.Response) -> InvalidRequest:
    try:
        payload = response.json()
    except ValueError:
        payload = None
    errors = payload.get("errors") if isinstance(payload, dict) else None
    if isinstance(errors, list) and errors and isinstance(errors[0], dict):
        field = str(errors[0].get("field") or "")
        message = str(errors[0].get("message") or "")
        return InvalidRequest(f"API error (400): {field} - {message}", field=field or None)
    return InvalidRequest("invalid request (400): invalid parameters")


def raise_for_status(response: httpx.Response) -> None:
    status = response.status_code
    if status == 200:
        return
    if status == 400:
        raise _invalid_request(response)
    if status == 429:
        raise RateLimited("rate limit exceeded (429): wait before retrying")
    if status == 500:
        raise ServiceUnavailable("internal server error (500): try again later", status_code=status)
    if status == 503:
        raise ServiceUnavailable("service unavailable (503): try again later", status_code=status)
    if status == 529:
        raise ServiceOverloaded("service overloaded (529): try again later")
    raise UnexpectedStatus(status)


def decode_snapshot(content: bytes) -> JobSnapshot:
    try:
        return JobSnapshot.model_validate(json.loads(content))
    except (ValueError, ValidationError) as exc:
        raise DecodeError(f"error decoding assessment response: {exc}") from exc


class AssessmentClient:
    """One request/response exchange against the assessment service."""

    def __init__(self, http: HttpClient, base_url: str = DEFAULT_API_BASE_URL) -> None:
        self.http = http
        self.base_url = base_url.rstrip("/")

    async def submit(self, domain: str, start_new: bool, request_full_details: bool = True) -> JobSnapshot:
        params = build_analyze_params(domain, start_new, request_full_details)
        response = await self.http.get(f"{self.base_url}{ANALYZE_PATH}", params=params)
        raise_for_status(response)
        snapshot = decode_snapshot(response.content)
        logger.debug(
            "analyze response",
            extra={"domain": domain, "status": snapshot.status, "endpoints": len(snapshot.endpoints)},
        )
        return snapshot
