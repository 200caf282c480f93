"""Exception types raised by spendwise."""


class SpendwiseError(Exception):
    """Base class for all spendwise errors."""


class ValidationError(SpendwiseError, ValueError):
    """Raised when input does not meet validation requirements."""


class TransactionNotFoundError(SpendwiseError, LookupError):
    """Raised when a fund or expense cannot be located by id."""

    def __init__(self, txn_id: int, txn_type: str) -> None:
        super().__init__(f"No {txn_type} with id {txn_id}")
        self.id = txn_id
        self.type = txn_type


class AuthError(SpendwiseError):
    """Base class for authentication failures."""


class DuplicateAccountError(AuthError):
    """Raised at signup when the email is already registered."""

    def __init__(self, message: str = "User with this email already exists") -> None:
        super().__init__(message)


class InvalidCredentialsError(AuthError):
    """Raised at login when email or password do not match."""

    def __init__(self, message: str = "Invalid email or password") -> None:
        super().__init__(message)


class NotLoggedInError(AuthError):
    """Raised when a command needs a logged-in user and there is none."""

    def __init__(self, message: str = "Not logged in. Run 'spendwise login' first.") -> None:
        super().__init__(message)


class PersistenceWarning(UserWarning):
    """Recoverable storage failure; in-memory state is still valid."""


class StorageError(SpendwiseError, OSError):
    """Raised when the persistence layer cannot be read."""
