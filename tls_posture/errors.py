from __future__ import annotations


class AssessmentError(RuntimeError):
    pass


class InvalidDomain(AssessmentError):
    pass


class InvalidRequest(AssessmentError):
    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class RateLimited(AssessmentError):
    pass


class ServiceUnavailable(AssessmentError):
    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class ServiceOverloaded(AssessmentError):
    pass


class UnexpectedStatus(AssessmentError):
    def __init__(self, status_code: int) -> None:
        super().__init__(f"unexpected HTTP status: {status_code}")
        self.status_code = status_code


class TransportError(AssessmentError):
    pass


class DecodeError(AssessmentError):
    pass


class JobError(AssessmentError):
    pass


class PollingTimeout(AssessmentError):
    pass


class NoEndpoints(AssessmentError):
    pass


class NoReadyEndpoints(AssessmentError):
    pass
