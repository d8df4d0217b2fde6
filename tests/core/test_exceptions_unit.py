from kolam_client.core import exceptions


def test_exception_error_codes_and_messages():
    # Ensure each domain exception sets the correct error_code and message
    e = exceptions.RequestTimeout()
    assert isinstance(e, exceptions.TransportFailure)
    assert isinstance(e, exceptions.KolamClientError)
    assert e.error_code == "timeout"
    assert "deadline" in e.message

    e2 = exceptions.NameResolutionFailure("no such host")
    assert e2.error_code == "name_resolution"
    assert e2.message == "no such host"

    e3 = exceptions.NetworkFailure()
    assert e3.error_code == "network"

    e4 = exceptions.ServiceRejectedError("bad boundary")
    assert e4.error_code == "service_rejected"
    assert str(e4).startswith("service_rejected:")

    e5 = exceptions.ParameterValidationError()
    assert e5.error_code == "invalid_parameters"

    assert exceptions.ServiceNotReadyError().error_code == "not_ready"
    assert exceptions.MalformedResponseError().error_code == "malformed_response"
    assert exceptions.NoArtifactError().error_code == "no_artifact"


def test_unexpected_status_carries_code_and_snippet():
    e = exceptions.UnexpectedStatusError(503, "upstream down")
    assert isinstance(e, exceptions.TransportFailure)
    assert e.status_code == 503
    assert e.error_code == "http_status"
    assert e.message == "HTTP 503: upstream down"


def test_unexpected_status_without_body():
    assert exceptions.UnexpectedStatusError(404).message == "HTTP 404"


def test_exceptions_chain_with_raise_from():
    cause = OSError("connection refused")
    try:
        try:
            raise cause
        except OSError as exc:
            raise exceptions.NetworkFailure("refused") from exc
    except exceptions.NetworkFailure as wrapped:
        assert wrapped.__cause__ is cause
