"""Resolution of the position to start tailing from."""

from typing import Any

from bson.errors import InvalidBSON
from bson.timestamp import Timestamp
from pymongo import DESCENDING
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from ..logging.logging_config import get_logger
from ..utils.error_utils import BookmarkQueryError, wrap_error

logger = get_logger(__name__)

# Sorts before every real oplog timestamp.
MIN_BOOKMARK = Timestamp(0, 0)


def resolve_bookmark(oplog: Collection) -> Any:
    """Find the ``ts`` of the newest oplog entry.

    Args:
        oplog: The oplog collection

    Returns:
        The newest entry's ``ts``, or ``MIN_BOOKMARK`` when the oplog is
        empty or its newest entry has no ``ts``.

    Raises:
        BookmarkQueryError: If the query fails
    """
    try:
        last_entry = oplog.find_one({}, sort=[("ts", DESCENDING)])
    except (PyMongoError, InvalidBSON) as e:
        raise wrap_error(
            e, BookmarkQueryError, {"namespace": oplog.full_name}
        ) from e

    if last_entry is not None and "ts" in last_entry:
        bookmark = last_entry["ts"]
    else:
        bookmark = MIN_BOOKMARK

    logger.debug("bookmark_resolved", bookmark=repr(bookmark), empty=last_entry is None)
    return bookmark
