from __future__ import annotations

import logging

from ..errors import NoEndpoints, NoReadyEndpoints
from ..models.results import AssessmentResult, EndpointResult
from ..models.snapshot import EndpointSnapshot, JobSnapshot
from .grades import worst_grade

logger = logging.getLogger(__name__)


def build_endpoint_result(endpoint: EndpointSnapshot) -> EndpointResult:
    details = endpoint.details
    protocols = [p.label for p in details.protocols if p.is_secure] if details else []
    cert = details.certificate if details else None
    return EndpointResult(
        address=endpoint.address,
        server_name=endpoint.server_name,
        grade=endpoint.grade,
        secure_protocols=protocols,
        cert_issuer=cert.issuer if cert else "",
        cert_valid_from=cert.valid_from if cert else 0,
        cert_valid_to=cert.valid_to if cert else 0,
    )


def extract(snapshot: JobSnapshot) -> AssessmentResult:
    """Summarize the endpoints that finished with full details.

    The job status is not checked: a snapshot accepted before ``READY`` is
    summarized from whichever endpoints are already complete.
    """
    if not snapshot.endpoints:
        raise NoEndpoints("no endpoints available in the response")

    results: list[EndpointResult] = []
    skipped = 0
    for endpoint in snapshot.endpoints:
        if not endpoint.is_ready or endpoint.details is None:
            skipped += 1
            continue
        results.append(build_endpoint_result(endpoint))

    if not results:
        raise NoReadyEndpoints(f"no ready endpoints with complete details (status: {snapshot.status})")
    if skipped:
        logger.info("endpoints skipped", extra={"domain": snapshot.domain, "skipped": skipped})

    return AssessmentResult(
        domain=snapshot.domain,
        overall_grade=worst_grade([r.grade for r in results]),
        endpoints=results,
    )
