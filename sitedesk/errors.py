from __future__ import annotations


class ApiError(RuntimeError):
    """Request failure rendered as ``{"error": message}`` with ``status_code``."""

    status_code = 500
    default_message = "Internal server error."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class BadRequest(ApiError):
    status_code = 400
    default_message = "Bad request."


class Unauthorized(ApiError):
    status_code = 401
    default_message = "Unauthorized"


class NotFound(ApiError):
    """Entity absent or not owned by the caller; the two are indistinguishable."""

    status_code = 404
    default_message = "Not found"


class ServerError(ApiError):
    status_code = 500
