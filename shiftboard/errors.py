"""Error taxonomy shared by services and routers.

Services raise these; ``main.py`` renders every one of them as
``{"message": ...}`` with the matching HTTP status.
"""

from __future__ import annotations


class ShiftboardError(Exception):
    status_code = 500
    default_message = "Unexpected error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ShiftboardError):
    status_code = 400
    default_message = "Invalid request"


class AuthenticationError(ShiftboardError):
    status_code = 401
    default_message = "Not authenticated"


class AuthorizationError(ShiftboardError):
    status_code = 403
    default_message = "You do not have permission to perform this action"


class NotFoundError(ShiftboardError):
    status_code = 404
    default_message = "Not found"
