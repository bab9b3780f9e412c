from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class EndpointResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    address: str
    server_name: str = ""
    grade: str
    secure_protocols: list[str] = Field(default_factory=list)
    cert_issuer: str = ""
    cert_valid_from: int = 0
    cert_valid_to: int = 0


class AssessmentResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    domain: str
    overall_grade: str
    endpoints: list[EndpointResult]
