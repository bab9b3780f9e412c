from __future__ import annotations

from datetime import datetime, timezone

from ..models.results import AssessmentResult, EndpointResult


def format_epoch_millis(value: int) -> str:
    return datetime.fromtimestamp(value // 1000, tz=timezone.utc).strftime("%Y-%m-%d")


def _endpoint_lines(index: int, endpoint: EndpointResult) -> list[str]:
    title = endpoint.address
    if endpoint.server_name:
        title = f"{endpoint.address} ({endpoint.server_name})"
    lines = [f"--- Endpoint {index}: {title} ---", f"Grade: {endpoint.grade}"]
    if endpoint.secure_protocols:
        lines.append(f"TLS protocols: {', '.join(endpoint.secure_protocols)}")
    else:
        lines.append("TLS protocols: No secure protocols available")
    if endpoint.cert_issuer:
        lines.append(f"Certificate issuer: {endpoint.cert_issuer}")
    if endpoint.cert_valid_from > 0 and endpoint.cert_valid_to > 0:
        lines.append(
            f"Certificate valid: {format_epoch_millis(endpoint.cert_valid_from)}"
            f" until {format_epoch_millis(endpoint.cert_valid_to)}"
        )
    lines.append("")
    return lines


def build_report(result: AssessmentResult) -> str:
    lines = ["=== TLS Security Results ===", f"Domain: {result.domain}", f"Overall grade: {result.overall_grade}", ""]
    for index, endpoint in enumerate(result.endpoints, start=1):
        lines.extend(_endpoint_lines(index, endpoint))

    if len(result.endpoints) > 1:
        lines.append("=== Summary ===")
        lines.append(f"Overall grade (worst of all endpoints): {result.overall_grade}")

    return "\n".join(lines).rstrip("\n")
