"""Error taxonomy shared by the auth components and the stores."""

from enum import Enum


class VocabTrainerError(Exception):
    """Base class for every error raised by this package."""


class AuthFailure(VocabTrainerError):
    """Login rejected. Carries no detail about which check failed."""

    message = "Invalid credentials"

    def __init__(self) -> None:
        super().__init__(self.message)


class BadCredentials(AuthFailure):
    pass


class StorageUnavailable(VocabTrainerError):
    """The user repository could not be reached while authenticating."""

    def __init__(self, message: str = "User store unavailable") -> None:
        super().__init__(message)


class TokenFailureKind(str, Enum):
    MALFORMED = "malformed"
    EXPIRED = "expired"
    SIGNATURE_INVALID = "signature_invalid"


class TokenFailure(VocabTrainerError):
    def __init__(self, kind: TokenFailureKind) -> None:
        self.kind = kind
        super().__init__(f"Session token rejected: {kind.value}")


class StorageErrorKind(str, Enum):
    CONNECTION_FAILURE = "connection_failure"
    CONSTRAINT_VIOLATION = "constraint_violation"
    UNKNOWN = "unknown"


class StorageError(VocabTrainerError):
    def __init__(self, kind: StorageErrorKind, operation: str) -> None:
        self.kind = kind
        self.operation = operation
        super().__init__(f"{operation} failed: {kind.value}")
