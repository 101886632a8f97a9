"""Error handling utilities for optail."""

from enum import Enum
from typing import Any, Dict, Optional

from .json_utils import dumps_value


class ErrorCategory(Enum):
    """Categories of fatal errors, used for reporting."""

    CONFIGURATION = "configuration"          # Bad config file or values
    CONNECTION = "connection"                # Cannot reach the server
    BOOKMARK_QUERY = "bookmark_query"        # Newest oplog entry lookup failed
    CURSOR_OPEN = "cursor_open"              # Tailable cursor could not be created
    ENTRY_DECODE = "entry_decode"            # Malformed BSON in the stream
    STREAM_INTERRUPTED = "stream_interrupted"  # Transport lost after the cursor opened
    EMBEDDED_STREAM = "embedded_stream"      # Server sent a $err record in-band


class OptailError(Exception):
    """Base class for optail errors with categorization.

    Every ``OptailError`` is fatal: the tail loop stops and the process exits.
    """

    category = ErrorCategory.CONNECTION

    def __init__(
        self,
        message: str,
        original_error: Optional[BaseException] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.original_error = original_error
        self.context = context or {}

    @property
    def always_report(self) -> bool:
        """Whether the error is shown even when debug output is off."""
        return False


class ConfigurationError(OptailError):
    category = ErrorCategory.CONFIGURATION


class MongoConnectionError(OptailError):
    category = ErrorCategory.CONNECTION


class BookmarkQueryError(OptailError):
    category = ErrorCategory.BOOKMARK_QUERY


class CursorOpenError(OptailError):
    category = ErrorCategory.CURSOR_OPEN


class EntryDecodeError(OptailError):
    category = ErrorCategory.ENTRY_DECODE


class StreamInterruptedError(OptailError):
    category = ErrorCategory.STREAM_INTERRUPTED


class EmbeddedStreamError(OptailError):
    """An ``$err`` record the server placed in the oplog stream."""

    category = ErrorCategory.EMBEDDED_STREAM

    def __init__(self, value: Any, context: Optional[Dict[str, Any]] = None):
        super().__init__(f"got error {dumps_value(value)}", context=context)
        self.value = value

    @property
    def always_report(self) -> bool:
        return True


def wrap_error(
    error: BaseException,
    error_class: type = MongoConnectionError,
    context: Optional[Dict[str, Any]] = None
) -> OptailError:
    """Wrap a driver error into an optail error of the given kind.

    Args:
        error: The original error
        error_class: The ``OptailError`` subclass to wrap it in
        context: Optional context information

    Returns:
        OptailError: The wrapped error, or ``error`` itself if it already is one
    """
    if isinstance(error, OptailError):
        return error
    return error_class(str(error), original_error=error, context=context)
