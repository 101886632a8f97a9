"""Oplog tailing loop."""

import sys
import time
from typing import Any, Mapping, Optional, TextIO

from bson.errors import InvalidBSON
from pymongo import CursorType
from pymongo.collection import Collection
from pymongo.cursor import Cursor
from pymongo.errors import PyMongoError

from ..logging.logging_config import get_logger, add_context_to_logger
from ..utils.error_utils import (
    CursorOpenError, EmbeddedStreamError, EntryDecodeError,
    StreamInterruptedError, wrap_error
)
from .formatter import format_entry

ERROR_FIELD = "$err"


class OplogTailer:
    """Follows the oplog from a fixed bookmark and prints every new entry.

    The tailer owns a single tailable-await cursor for its whole lifetime.
    There is no reconnect: any failure ends :meth:`run` with an
    ``OptailError``.
    """

    def __init__(
        self,
        oplog: Collection,
        bookmark: Any,
        output: Optional[TextIO] = None,
        poll_interval: float = 1.0,
        max_await_time_ms: Optional[int] = 1000,
        color: bool = True
    ):
        """Initialize the tailer.

        Args:
            oplog: The oplog collection
            bookmark: Only entries with ``ts`` greater than this are shown
            output: Stream receiving formatted entries, stdout by default
            poll_interval: Seconds to sleep when no entry is available
            max_await_time_ms: Server-side wait per fetch, ``None`` for the
                server default
            color: Whether to highlight output
        """
        self.oplog = oplog
        self.bookmark = bookmark
        self.output = output if output is not None else sys.stdout
        self.poll_interval = poll_interval
        self.max_await_time_ms = max_await_time_ms
        self.color = color
        self.cursor: Optional[Cursor] = None
        self.delivered = 0
        self._fetched = False

        self.logger = add_context_to_logger(
            get_logger(__name__),
            {"namespace": oplog.full_name}
        )

    @property
    def filter(self) -> dict:
        return {"ts": {"$gt": self.bookmark}}

    def open_cursor(self) -> Cursor:
        """Open the tailable cursor over entries newer than the bookmark.

        Returns:
            Cursor: The opened cursor

        Raises:
            CursorOpenError: If the cursor cannot be created
        """
        try:
            cursor = self.oplog.find(
                self.filter,
                cursor_type=CursorType.TAILABLE_AWAIT,
                no_cursor_timeout=True,
                oplog_replay=True
            )
            if self.max_await_time_ms is not None:
                cursor = cursor.max_await_time_ms(self.max_await_time_ms)
        except (PyMongoError, TypeError, ValueError) as e:
            raise wrap_error(e, CursorOpenError, {"filter": repr(self.filter)}) from e

        self.cursor = cursor
        self._fetched = False
        self.logger.debug("cursor_opened", bookmark=repr(self.bookmark))
        return self.cursor

    def _next_entry(self) -> Optional[Mapping[str, Any]]:
        """Fetch the next entry, or ``None`` if nothing is available yet.

        The find command is only sent on the first fetch, so a failure there
        means the cursor never opened.
        """
        context = {"delivered": self.delivered}
        try:
            entry = self.cursor.try_next()
        except InvalidBSON as e:
            raise wrap_error(e, EntryDecodeError, context) from e
        except PyMongoError as e:
            error_class = StreamInterruptedError if self._fetched else CursorOpenError
            raise wrap_error(e, error_class, context) from e

        self._fetched = True
        return entry

    def deliver(self, entry: Mapping[str, Any]) -> None:
        """Print one entry, or raise if the server sent an error record.

        Raises:
            EmbeddedStreamError: If the entry carries ``$err``
        """
        if ERROR_FIELD in entry:
            raise EmbeddedStreamError(entry[ERROR_FIELD], context={"entry": dict(entry)})

        self.output.write(format_entry(entry, color=self.color) + "\n")
        self.output.flush()
        self.delivered += 1

    def drain(self) -> int:
        """Deliver every entry that is available right now.

        Returns:
            int: Number of entries delivered
        """
        count = 0
        while True:
            entry = self._next_entry()
            if entry is None:
                return count
            self.deliver(entry)
            count += 1

    def run(self) -> None:
        """Tail until a fatal error occurs.

        Raises:
            OptailError: The error that ended the loop
        """
        if self.cursor is None:
            self.open_cursor()

        while True:
            count = self.drain()
            if count:
                self.logger.debug("entries_delivered", count=count, total=self.delivered)

            if not self.cursor.alive:
                raise StreamInterruptedError(
                    "tailable cursor was closed by the server",
                    context={"delivered": self.delivered}
                )

            time.sleep(self.poll_interval)

    def close(self) -> None:
        if self.cursor is not None:
            self.cursor.close()
            self.cursor = None
