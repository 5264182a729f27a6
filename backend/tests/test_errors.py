import pytest

from duelytics.core.errors import NotFoundError, StateError, ValidationError, http_error_kind


@pytest.mark.parametrize("status, kind", [
    (400, "validation_error"),
    (401, "unauthorized"),
    (403, "forbidden"),
    (404, "not_found"),
    (405, "method_not_allowed"),
    (418, "http_error"),
    (502, "server_error"),
])
def test_http_error_kind(status, kind):
    assert http_error_kind(status) == kind


def test_domain_errors_share_kinds_with_http_errors():
    assert http_error_kind(ValidationError.status_code) == ValidationError.kind
    assert http_error_kind(NotFoundError.status_code) == NotFoundError.kind
    assert http_error_kind(StateError.status_code) == StateError.kind


def test_status_override_keeps_kind():
    err = StateError("You are not a participant of this session", status_code=403)
    assert (err.kind, err.status_code, err.detail) == ("state_error", 403, "You are not a participant of this session")
