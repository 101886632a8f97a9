"""MongoDB client bootstrap."""

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from ..config.config_manager import MongoDBConfig
from ..logging.logging_config import get_logger
from ..utils.error_utils import MongoConnectionError, wrap_error

logger = get_logger(__name__)


def connect(config: MongoDBConfig) -> MongoClient:
    """Create a client and verify the server is reachable.

    ``MongoClient`` connects lazily, so a ``ping`` is issued to surface an
    unreachable server before any tailing starts.

    Args:
        config: MongoDB configuration

    Returns:
        MongoClient: A connected client

    Raises:
        MongoConnectionError: If the server cannot be reached
    """
    context = {"host": config.host, "port": config.port}
    client = None
    try:
        client = MongoClient(
            config.host,
            config.port,
            serverSelectionTimeoutMS=config.server_selection_timeout_ms,
            **config.options
        )
        client.admin.command("ping")
    except (PyMongoError, TypeError, ValueError) as e:
        if client is not None:
            client.close()
        raise wrap_error(e, MongoConnectionError, context) from e

    logger.debug("connected", **context)
    return client


def oplog_collection(client: MongoClient, config: MongoDBConfig) -> Collection:
    """Return the oplog collection handle."""
    return client[config.database][config.collection]
