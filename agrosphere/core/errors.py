"""
Domain error taxonomy.

Services raise these; ``agrosphere.main`` renders them as
``{"kind": ..., "detail": ...}`` with the matching HTTP status.
"""


class AppError(Exception):
    kind = "error"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"kind": self.kind, "detail": self.message}


class ValidationError(AppError):
    kind = "validation_error"
    status_code = 400


class AuthorizationError(AppError):
    kind = "forbidden"
    status_code = 403


class NotFoundError(AppError):
    kind = "not_found"
    status_code = 404


class ConflictError(AppError):
    kind = "conflict"
    status_code = 409
