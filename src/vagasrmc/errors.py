"""Domain error taxonomy.

Services raise these; the API layer turns them into the JSON envelope
``{"success": false, "error": message, "error_code": code}`` with the
matching HTTP status.
"""

from __future__ import annotations

from typing import Any


class VagasError(Exception):
    code = "ERROR"
    status_code = 500

    def __init__(self, message: str, *, details: dict[str, Any] | None = None, code: str | None = None):
        self.message = message
        self.details = details or {}
        if code is not None:
            self.code = code
        super().__init__(f"[{self.code}] {message}")


class ValidationError(VagasError):
    code = "VALIDATION_ERROR"
    status_code = 400


class Unauthenticated(VagasError):
    code = "UNAUTHENTICATED"
    status_code = 401


class InvalidCredential(VagasError):
    code = "INVALID_CREDENTIAL"
    status_code = 401


class Forbidden(VagasError):
    code = "FORBIDDEN"
    status_code = 403


class QuotaExceeded(Forbidden):
    code = "QUOTA_EXCEEDED"


class NotFound(VagasError):
    code = "NOT_FOUND"
    status_code = 404


class Conflict(VagasError):
    code = "CONFLICT"
    status_code = 400
