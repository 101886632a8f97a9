"""Tail a MongoDB replica set oplog to the terminal."""

__version__ = "0.1.0"
