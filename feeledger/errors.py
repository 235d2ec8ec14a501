"""
Error taxonomy for the fee ledger.

ValidationError is raised before any store call, so a failed validation never
leaves partial state behind. PersistenceError wraps any failure of the record
store or the image store; its cause is logged, never shown to the caller.
"""


class FeeLedgerError(Exception):
    """Base class for all fee ledger errors."""

    def __init__(self, message=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    default_message = "Fee ledger error"


class ValidationError(FeeLedgerError):
    default_message = "Invalid input"


class DuplicateFeeError(ValidationError):
    default_message = "A fee record already exists for this month"


class PersistenceError(FeeLedgerError):
    default_message = "Something went wrong, please try again"


class NotAuthenticatedError(FeeLedgerError):
    default_message = "Not authenticated"
