class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when a required field is missing or malformed."""


class StoreError(DomainError):
    """Raised when the relational store is unreachable, fails or times out.

    Callers may retry the whole operation. The message is generic on purpose;
    driver details are logged, not surfaced.
    """

    def __init__(self, operation: str, key: object = None):
        self.operation = operation
        self.key = key
        super().__init__(f"Store operation failed: {operation}")
