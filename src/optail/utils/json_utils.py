"""JSON utilities for oplog entries."""

from typing import Any, Mapping

from bson import json_util
from bson.json_util import JSONOptions, JSONMode

# Relaxed extended JSON keeps timestamps and ObjectIds readable while
# staying unambiguous: {"$timestamp": {"t": ..., "i": ...}}, {"$oid": ...}.
ENTRY_JSON_OPTIONS = JSONOptions(json_mode=JSONMode.RELAXED, tz_aware=True)


def dumps_entry(entry: Mapping[str, Any]) -> str:
    """Serialize an oplog entry to single-line extended JSON.

    Field order follows the entry's own key order.

    Example:
        ```python
        dumps_entry({"ts": Timestamp(1, 1), "op": "i"})
        # '{"ts": {"$timestamp": {"t": 1, "i": 1}}, "op": "i"}'
        ```
    """
    return json_util.dumps(entry, json_options=ENTRY_JSON_OPTIONS)


def dumps_value(value: Any) -> str:
    """Serialize a single BSON value, e.g. ``"not authorized"`` with quotes."""
    return json_util.dumps(value, json_options=ENTRY_JSON_OPTIONS)
