"""Wire models for the /analyze response.

A fresh ``JobSnapshot`` is decoded from every poll; none of these objects is
mutated after decoding.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

ENDPOINT_READY = "Ready"


class JobStatus(str, Enum):
    dns = "DNS"
    in_progress = "IN_PROGRESS"
    ready = "READY"
    error = "ERROR"


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")


class Protocol(_WireModel):
    name: str
    version: str
    # None means the service did not flag the protocol, which it uses for secure.
    secure: Optional[bool] = None

    @model_validator(mode="before")
    @classmethod
    def _flag_from_q(cls, data: Any) -> Any:
        if isinstance(data, dict) and "q" in data and "secure" not in data:
            data = dict(data)
            q = data.pop("q")
            data["secure"] = None if q is None else q != 0
        return data

    @property
    def is_secure(self) -> bool:
        return self.secure is not False

    @property
    def label(self) -> str:
        return f"{self.name} {self.version}"


class Certificate(_WireModel):
    issuer: str = Field("", alias="issuerLabel")
    valid_from: int = Field(0, alias="notBefore")
    valid_to: int = Field(0, alias="notAfter")


class ExtendedDetails(_WireModel):
    protocols: list[Protocol] = Field(default_factory=list)
    certificate: Optional[Certificate] = Field(None, alias="cert")


class EndpointSnapshot(_WireModel):
    address: str = Field("", alias="ipAddress")
    server_name: str = Field("", alias="serverName")
    readiness_label: str = Field("", alias="statusMessage")
    status_details: str = Field("", alias="statusDetails")
    grade: str = ""
    grade_trust_ignored: str = Field("", alias="gradeTrustIgnored")
    has_warnings: bool = Field(False, alias="hasWarnings")
    progress: int = -1
    duration: int = 0
    eta: int = 0
    details: Optional[ExtendedDetails] = None

    @property
    def started(self) -> bool:
        return self.progress >= 0

    @property
    def is_ready(self) -> bool:
        return self.readiness_label == ENDPOINT_READY


class JobSnapshot(_WireModel):
    domain: str = Field("", alias="host")
    port: int = 443
    protocol: str = "http"
    is_public: bool = Field(False, alias="isPublic")
    status: str
    status_message: str = Field("", alias="statusMessage")
    start_time: int = Field(0, alias="startTime")
    test_time: int = Field(0, alias="testTime")
    engine_version: str = Field("", alias="engineVersion")
    criteria_version: str = Field("", alias="criteriaVersion")
    endpoints: list[EndpointSnapshot] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _null_endpoints(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("endpoints", ()) is None:
            data = {**data, "endpoints": []}
        return data
