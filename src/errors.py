"""
QuickJob - Error Taxonomy

Services raise these; the handlers registered in src.main render them as
``{"success": false, "message": ...}`` with the matching status code.
"""


class QuickJobError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFound(QuickJobError):
    """A referenced account, credential, conversation or request is absent."""

    status_code = 404
    default_message = "Not found"


class ValidationError(QuickJobError):
    """A disallowed enum value or otherwise malformed input."""

    status_code = 400
    default_message = "Invalid request"


class Unauthorized(QuickJobError):
    """Missing, expired or invalid credentials."""

    status_code = 401
    default_message = "Authentication required"


class Forbidden(Unauthorized):
    """Authenticated, but the account's role may not use this route."""

    status_code = 403
    default_message = "Admin access required"


class StoreFailure(QuickJobError):
    """The underlying persistence layer failed. Detail is never shown to callers."""

    status_code = 500
    default_message = "Internal server error"
