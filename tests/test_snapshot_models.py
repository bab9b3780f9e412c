from tls_posture.models.snapshot import JobSnapshot, Protocol


def test_snapshot_decodes_wire_names():
    snapshot = JobSnapshot.model_validate(
        {
            "host": "example.com",
            "port": 443,
            "status": "IN_PROGRESS",
            "statusMessage": "In progress",
            "engineVersion": "2.2.0",
            "unknownField": True,
            "endpoints": [
                {
                    "ipAddress": "93.184.216.34",
                    "serverName": "edge.example.com",
                    "statusMessage": "Ready",
                    "grade": "A",
                    "progress": 100,
                    "details": {
                        "protocols": [{"name": "TLS", "version": "1.2", "q": None}],
                        "cert": {"issuerLabel": "Example CA", "notBefore": 1, "notAfter": 2},
                    },
                }
            ],
        }
    )
    assert snapshot.domain == "example.com"
    assert snapshot.status_message == "In progress"
    endpoint = snapshot.endpoints[0]
    assert endpoint.address == "93.184.216.34"
    assert endpoint.is_ready
    assert endpoint.started
    assert endpoint.details.certificate.issuer == "Example CA"
    assert endpoint.details.protocols[0].label == "TLS 1.2"


def test_snapshot_tolerates_missing_or_null_endpoints():
    assert JobSnapshot.model_validate({"status": "DNS"}).endpoints == []
    assert JobSnapshot.model_validate({"status": "DNS", "endpoints": None}).endpoints == []


def test_endpoint_progress_defaults_to_not_started():
    snapshot = JobSnapshot.model_validate({"status": "DNS", "endpoints": [{"ipAddress": "1.1.1.1"}]})
    assert snapshot.endpoints[0].started is False


def test_protocol_security_flag_from_q():
    assert Protocol.model_validate({"name": "TLS", "version": "1.0", "q": 0}).secure is False
    assert Protocol.model_validate({"name": "TLS", "version": "1.3", "q": None}).secure is None
    assert Protocol.model_validate({"name": "TLS", "version": "1.3"}).is_secure
    assert not Protocol(name="SSL", version="3.0", secure=False).is_secure
