"""Integration test configuration and fixtures.

These tests need a running replica set; set ``MONGODB_TEST_URI`` to point at
one, e.g. ``mongodb://localhost:27017/?replicaSet=rs0``.
"""
import os

import pytest
from pymongo import MongoClient
from pymongo.errors import PyMongoError


@pytest.fixture(scope="session")
def mongodb_uri():
    """Return the MongoDB URI from environment variables."""
    uri = os.getenv("MONGODB_TEST_URI")
    if not uri:
        pytest.skip("MongoDB URI not configured")
    return uri


@pytest.fixture(scope="session")
def mongodb_client(mongodb_uri):
    """Create a MongoDB client for integration tests."""
    client = MongoClient(mongodb_uri, serverSelectionTimeoutMS=2000)
    try:
        client.admin.command("ping")
    except PyMongoError:
        client.close()
        pytest.skip("MongoDB server is not available")
    yield client
    client.close()


@pytest.fixture
def test_collection(mongodb_client):
    """A scratch collection whose writes show up in the oplog."""
    database = os.getenv("MONGODB_TEST_DB", "optail_test")
    collection = mongodb_client[database]["writes"]
    collection.delete_many({})
    yield collection
    collection.drop()
