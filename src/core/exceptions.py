"""
Core Exceptions

Custom exceptions for the console navigation core.

Two families exist:
- EndUserError and its subclasses carry a message that can be shown to the
  person who clicked the control.
- Everything else is a programming or identifier defect; the requester only
  ever sees a generic message for those (see src.dashboards.status).
"""


class ConsoleError(Exception):
    """
    Parent class for all errors raised by the console.

    Optionally wraps the error that caused it so the status layer can show
    both messages.
    """

    def __init__(self, message: str, parent_error: BaseException | None = None):
        self.message = message
        self.parent_error = parent_error
        super().__init__(self.message)


# ==================== IDENTIFIER ERRORS ====================


class IdentifierError(ConsoleError):
    """Base class for custom id encoding/decoding failures."""


class MalformedIdentifierError(IdentifierError):
    """
    Raised when a custom id cannot be decoded.

    Covers fewer than three segments, an unpaired trailing argument segment
    and repeated argument names.
    """

    def __init__(self, raw: str | None, reason: str):
        self.raw = raw
        self.reason = reason
        super().__init__(f"Malformed custom id {raw!r}: {reason}")


class EncodingError(IdentifierError):
    """Raised when a segment cannot be placed in a custom id."""


class IdentifierTooLongError(IdentifierError):
    """
    Raised when an encoded custom id would exceed the transport limit.

    The codec never truncates, a truncated id would silently route every later
    click on that control somewhere else.
    """

    def __init__(self, length: int, max_length: int):
        self.length = length
        self.max_length = max_length
        super().__init__(
            f"Custom ID exceeds maximum length of {max_length} characters "
            f"by {length - max_length} characters"
        )


# ==================== PAGINATION / WIRING ERRORS ====================


class InvalidPageError(ConsoleError):
    """Raised when the page argument is present but not a non-negative integer."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Invalid page argument: {value!r}")


class ConfigurationError(ConsoleError):
    """Raised for wiring mistakes: bad page sizes, duplicate ids, unbound actions."""


# ==================== END USER ERRORS ====================


class EndUserError(ConsoleError):
    """
    User-oriented error. The message is communicated back to the requester.
    """


class NotFoundError(EndUserError):
    """Raised when a screen, action or domain entity does not exist."""


class PermissionDeniedError(EndUserError):
    """
    Raised when the requester may not access a screen.

    The message is never shown; the requester gets the generic denial text.
    """

    def __init__(self, message: str = "Access denied"):
        super().__init__(message)


class DomainOperationError(EndUserError):
    """
    Raised by domain collaborators, e.g. a uniqueness violation while creating
    a record. Caught at the action boundary and shown to the requester.
    """


class EndUserInfo(ConsoleError):
    """
    Not a failure: an informational message that ends the request early,
    e.g. "there are no active funding rounds".
    """
