"""Rendering of oplog entries for the terminal."""

import re
from typing import Any, Mapping

from colorama import Fore, Style

from ..utils.json_utils import dumps_entry

STRUCTURAL_CHARS = ("{", "}", ":")

_HIGHLIGHT = {char: f"{Fore.BLUE}{char}{Style.RESET_ALL}" for char in STRUCTURAL_CHARS}
_HIGHLIGHT_RE = re.compile("|".join(re.escape(char) for char in STRUCTURAL_CHARS))
_MARKUP_RE = re.compile(
    re.escape(Fore.BLUE) + "([{}:])" + re.escape(Style.RESET_ALL)
)


def serialize_entry(entry: Mapping[str, Any]) -> str:
    """Return the canonical single-line text form of an entry."""
    return dumps_entry(entry)


def highlight(text: str) -> str:
    """Colour braces and colons blue.

    This is a plain character substitution: braces or colons inside string
    values are coloured as well.
    """
    return _HIGHLIGHT_RE.sub(lambda match: _HIGHLIGHT[match.group(0)], text)


def strip_highlighting(line: str) -> str:
    """Undo :func:`highlight`."""
    return _MARKUP_RE.sub(r"\1", line)


def format_entry(entry: Mapping[str, Any], color: bool = True) -> str:
    """Render an oplog entry as one display line.

    Args:
        entry: The decoded oplog entry
        color: Whether to apply highlighting

    Returns:
        str: The line to print, without a trailing newline
    """
    text = serialize_entry(entry)
    if color:
        return highlight(text)
    return text
