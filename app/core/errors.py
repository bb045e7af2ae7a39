# app/core/errors.py
"""
Domain errors raised by the ledger, rewards and account services.

Routers do not translate these one by one; app.main registers a single
handler that turns ``status_code`` + ``detail`` into the JSON response.
"""
from __future__ import annotations


class LedgerError(Exception):
    status_code: int = 500
    default_detail: str = "Ledger error"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationError(LedgerError):
    status_code = 400
    default_detail = "Invalid input"


class AuthError(LedgerError):
    status_code = 401
    default_detail = "Authentication required"


class Forbidden(LedgerError):
    status_code = 403
    default_detail = "Unauthorized"


class NotFound(LedgerError):
    status_code = 404
    default_detail = "Not found"


class Conflict(LedgerError):
    status_code = 409
    default_detail = "Conflict"


class DependencyFailure(LedgerError):
    status_code = 503
    default_detail = "Storage unavailable"
