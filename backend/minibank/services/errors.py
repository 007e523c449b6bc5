"""Domain and infrastructure errors raised by the service layer.

Every error carries the HTTP status and machine-readable code the API layer
reports for it, so routers never have to translate them one by one.
"""


class BankError(Exception):
    """Base class for all errors surfaced to API clients."""

    status_code = 400
    code = "bank_error"
    default_message = "Request failed"
    retryable = False

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(BankError):
    """Raised when the requested entity does not exist."""

    status_code = 404
    code = "not_found"
    default_message = "Not found"


class UserNotFoundError(NotFoundError):
    code = "user_not_found"
    default_message = "User not found"


class AccountNotFoundError(NotFoundError):
    code = "account_not_found"
    default_message = "Account not found"


class ConflictError(BankError):
    """Raised when a unique constraint would be violated."""

    code = "conflict"
    default_message = "Conflict"


class UsernameTakenError(ConflictError):
    code = "username_taken"
    default_message = "Username already registered"


class InsufficientFundsError(BankError):
    """Raised when a transfer would drive the sender's balance below zero."""

    code = "insufficient_funds"
    default_message = "Insufficient funds"


class InvalidAmountError(BankError):
    """Raised for zero, negative, non-finite or over-precise amounts."""

    code = "invalid_amount"
    default_message = "Amount must be a positive value with at most two decimal places"


class AuthenticationError(BankError):
    """Base class for login failures."""

    status_code = 401
    code = "authentication_failed"
    default_message = "Authentication failed"


class InvalidCredentialsError(AuthenticationError):
    code = "invalid_credentials"
    default_message = "Invalid password"


class InvalidHashError(AuthenticationError):
    code = "invalid_hash"
    default_message = "Invalid password hash"


class PersistenceError(BankError):
    """Storage failure. The message never carries driver details."""

    status_code = 500
    code = "persistence_error"
    default_message = "Internal storage error"


class ConstraintViolationError(PersistenceError):
    """A write was rejected by a database constraint (e.g. unknown foreign key)."""

    status_code = 400
    code = "constraint_violation"
    default_message = "Request violates a data constraint"


class LockTimeoutError(PersistenceError):
    """A row lock could not be acquired in time. Safe for the client to retry."""

    status_code = 503
    code = "lock_timeout"
    default_message = "Resource busy, try again"
    retryable = True
