from typing import Any, Dict, List, Optional

class PayGuardError(Exception):
    """Base error reported synchronously to the caller with a wire error code."""
    code = "PAYGUARD_ERROR"
    status_code = 500

    def __init__(self, message: str, details: Optional[List[str]] = None, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details or []
        if code:
            self.code = code

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.code, "message": self.message}
        if self.details:
            body["details"] = self.details
        return body

class ValidationError(PayGuardError):
    code = "VALIDATION_ERROR"
    status_code = 400

class InvalidDueDateError(ValidationError):
    code = "INVALID_DUE_DATE"

class InvalidRenewalDayError(ValidationError):
    code = "INVALID_RENEWAL_DAY"

class BillNotFoundError(PayGuardError):
    code = "BILL_NOT_FOUND"
    status_code = 404

class BillAlreadyPaidError(PayGuardError):
    """Conflict: payment requested for a bill that is already paid."""
    code = "BILL_ALREADY_PAID"
    status_code = 400

class InvalidTransitionError(PayGuardError):
    code = "INVALID_TRANSITION"
    status_code = 400

class InternalError(PayGuardError):
    code = "INTERNAL_ERROR"
    status_code = 500

class ScanAggregateError(Exception):
    """Raised after an isolated overdue scan finishes with per-bill failures."""

    def __init__(self, failures: Dict[str, Exception]):
        self.failures = failures
        summary = ", ".join(f"{bill_id}: {exc}" for bill_id, exc in failures.items())
        super().__init__(f"Overdue scan failed for {len(failures)} bill(s): {summary}")
