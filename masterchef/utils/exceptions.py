"""Custom exception classes.

Every error that crosses the HTTP boundary is one of these. Each class knows
its status code, a short ``kind`` used in the error body, and whether the
caller may simply try again.
"""


class MasterChefException(Exception):
    """Base exception for MasterChef application."""

    status_code = 500
    kind = "internal_error"
    retryable = False

    def __init__(self, message: str = "An unexpected error occurred"):
        super().__init__(message)
        self.message = message


class InvalidRequest(MasterChefException):
    """Raised when a required field is missing or empty."""

    status_code = 400
    kind = "invalid_request"


class Unconfigured(MasterChefException):
    """Raised when the deployment is missing a required secret."""

    status_code = 500
    kind = "service_unconfigured"


class UpstreamFailure(MasterChefException):
    """Raised when the model API errors, times out or returns nothing usable."""

    status_code = 500
    kind = "generation_failed"
    retryable = True


class NotAuthenticated(MasterChefException):
    """Raised when a persistence operation is attempted without a session."""

    status_code = 401
    kind = "not_authenticated"


class NotFound(MasterChefException):
    """Raised when a document does not exist for the requesting owner."""

    status_code = 404
    kind = "not_found"


ERROR_KINDS = {
    cls.kind: cls
    for cls in (MasterChefException, InvalidRequest, Unconfigured, UpstreamFailure, NotAuthenticated, NotFound)
}


def exception_for_kind(kind: str, message: str) -> MasterChefException:
    """Rebuild an exception from the ``error`` field of an error body."""
    return ERROR_KINDS.get(kind, MasterChefException)(message)
