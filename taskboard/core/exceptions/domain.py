from taskboard.core.exceptions.base import AppException


class AuthenticationError(AppException):
    """Missing, malformed or forged credentials. The caller must sign in again."""

    def __init__(self, message: str = "Please log in"):
        super().__init__(message)


class SessionExpiredError(AuthenticationError):
    """A session token that was valid once but is past its lifetime."""

    def __init__(self, message: str = "Your session has expired - please log in again"):
        super().__init__(message)


class AuthorizationError(AppException):
    """Valid session, but the user may not act on this board.

    Kept separate from ResourceNotFoundError so callers can tell a board that
    does not exist from one they cannot touch.
    """

    def __init__(self, message: str = "You do not have access to this board"):
        super().__init__(message)


class ResourceNotFoundError(AppException):
    """A board, list, task or user that does not exist."""

    def __init__(self, resource: str = "Resource", identifier: str = ""):
        self.resource = resource
        self.identifier = identifier
        message = f"{resource} '{identifier}' not found" if identifier else f"{resource} not found"
        super().__init__(message)


class DuplicateResourceError(AppException):
    """A write that would break a uniqueness rule, e.g. a second account per email."""

    def __init__(self, resource: str = "Resource", identifier: str = ""):
        self.resource = resource
        self.identifier = identifier
        message = (
            f"{resource} '{identifier}' already exists" if identifier else f"{resource} already exists"
        )
        super().__init__(message)


class ValidationError(AppException):
    """Input the caller has to correct: bad email, weak password, empty update, illegal move."""

    def __init__(self, message: str = "Validation failed"):
        super().__init__(message)
