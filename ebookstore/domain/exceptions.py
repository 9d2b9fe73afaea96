"""Domain error taxonomy.

Every failure that crosses the API boundary is one of these. Each kind carries
a stable machine-readable ``code`` and the HTTP status the API layer reports.
"""


class BookstoreError(Exception):
    """Base class for all expected bookstore failures."""

    code = "unknown"
    status_code = 500

    def __init__(self, message: str = "Unexpected error"):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.message, "code": self.code}


class Unauthenticated(BookstoreError):
    """Missing, invalid or expired token, or bad credentials."""

    code = "unauthenticated"
    status_code = 401


class Forbidden(BookstoreError):
    """Valid identity without the required role or entitlement."""

    code = "forbidden"
    status_code = 403


class NotFound(BookstoreError):
    code = "not_found"
    status_code = 404


class InvalidInput(BookstoreError):
    code = "invalid_input"
    status_code = 400


class Conflict(BookstoreError):
    code = "conflict"
    status_code = 409


class UpstreamFailure(BookstoreError):
    """Content could not be retrieved from any of its retrieval paths."""

    code = "upstream_failure"
    status_code = 502


class ContentUnavailable(Exception):
    """Raised by a content store when a single retrieval attempt fails.

    Not a ``BookstoreError``: the delivery service decides whether to fall
    back or surface an ``UpstreamFailure``.
    """
