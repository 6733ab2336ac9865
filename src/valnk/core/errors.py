"""Error taxonomy shared by the key encoder, cursor codec and query planner.

Usage:
    try:
        page = planner.list(SUBMISSIONS_BY_TOPIC, "news", start_cursor=token)
    except InvalidInputDataError:
        ...  # bad cursor or attribute set, never an empty page
    except ServerError as e:
        ...  # upstream store failure, e.message keeps the original text
"""

from __future__ import annotations


class ValnkError(Exception):
    """Base class for every error raised by valnk."""

    pass


class BadRequestError(ValnkError):
    """Raised when a caller supplies invalid pagination parameters."""

    def __init__(self, message: str):
        super().__init__(f"invalid request: {message}")
        self.message = message


class InvalidInputDataError(ValnkError):
    """Raised for malformed cursors or attribute sets supplied for encoding."""

    pass


class InvalidAttributeError(InvalidInputDataError):
    """Raised when an attribute is absent, out of range or of the wrong type."""

    def __init__(self, attribute: str, reason: str):
        super().__init__(f"invalid attribute `{attribute}`: {reason}")
        self.attribute = attribute
        self.reason = reason


class MalformedCursorError(InvalidInputDataError):
    """Raised when a cursor token cannot be decoded into a complete position."""

    def __init__(self, reason: str):
        super().__init__(f"malformed cursor: {reason}")
        self.reason = reason


class BuildError(InvalidInputDataError):
    """Raised by entity builders when required fields were never set.

    Attributes:
        entity: Name of the record type being built.
        missing: Every required field that was left unset, in declaration order.
    """

    def __init__(self, entity: str, missing: tuple[str, ...]):
        fields = ", ".join(f"`{name}`" for name in missing)
        super().__init__(f"failed to build {entity}, missing fields: {fields}")
        self.entity = entity
        self.missing = missing


class InvalidOutputDataError(ValnkError):
    """Raised when a stored item does not deserialize into the expected record.

    Data written through the builders never triggers this, so it points at
    schema drift or an external write to the table.
    """

    pass


class ServerError(ValnkError):
    """Raised when the upstream store fails (timeouts, throttling, permissions)."""

    def __init__(self, message: str):
        super().__init__(f"upstream server error: {message}")
        self.message = message


class UnknownError(ValnkError):
    """Catch-all for failures outside the taxonomy above."""

    def __init__(self, message: str):
        super().__init__(f"unknown error: {message}")
        self.message = message
