"""Error taxonomy shared by the scoring engine and the HTTP layer.

Every error carries a machine-checkable ``kind`` and a short ``detail`` that is
safe to show to the desktop client. ``main.py`` turns them into JSON responses.
"""


class DuelyticsError(Exception):
    kind = "error"
    status_code = 500

    def __init__(self, detail: str, *, status_code: int | None = None):
        super().__init__(detail)
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code


class ValidationError(DuelyticsError):
    """Missing or malformed input."""

    kind = "validation_error"
    status_code = 400


class NotFoundError(DuelyticsError):
    """Session, participant, deck or stats row absent."""

    kind = "not_found"
    status_code = 404


class StateError(DuelyticsError):
    """Operation not allowed in the current state (inactive session, not a participant, duplicate join)."""

    kind = "state_error"
    status_code = 409


class PersistenceError(DuelyticsError):
    """Underlying store failure. Nothing was committed."""

    kind = "persistence_error"
    status_code = 503


_HTTP_KINDS = {
    400: "validation_error",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    409: "state_error",
}


def http_error_kind(status_code: int) -> str:
    """Error kind for framework-raised HTTP errors (auth, unknown route)."""
    if status_code >= 500:
        return "server_error"
    return _HTTP_KINDS.get(status_code, "http_error")
