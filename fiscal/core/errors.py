from __future__ import annotations


class FiscalError(ValueError):
    """Base for local, deterministic input failures.

    ``field`` names the form field that carried the bad value so the caller can
    attach the message to it.
    """

    code = "fiscal_error"

    def __init__(self, message: str, *, field: str | None = None):
        super().__init__(message)
        self.message = message
        self.field = field

    def as_issue(self) -> dict[str, str | None]:
        return {"code": self.code, "field": self.field, "message": self.message}


class InvalidAmount(FiscalError):
    code = "invalid_amount"


class UnsupportedRate(FiscalError):
    code = "unsupported_rate"


class InvalidPeriod(FiscalError):
    code = "invalid_period"


__all__ = ["FiscalError", "InvalidAmount", "UnsupportedRate", "InvalidPeriod"]
