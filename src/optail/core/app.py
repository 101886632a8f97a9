"""Top-level application: connect, resolve the bookmark, then tail."""

import sys
from typing import Optional, TextIO

from pymongo import MongoClient
from pymongo.errors import PyMongoError

from ..config.config_manager import OptailConfig
from ..logging.logging_config import configure_logging, get_logger
from ..utils.error_utils import OptailError
from .bookmark import resolve_bookmark
from .client import connect, oplog_collection
from .reporter import ErrorReporter
from .tailer import OplogTailer

EXIT_INTERRUPTED = 130


class OptailApp:
    """Owns the client and tailer for one run of the program."""

    def __init__(
        self,
        config: OptailConfig,
        output: Optional[TextIO] = None,
        errors: Optional[TextIO] = None
    ):
        """Initialize the application.

        Args:
            config: The loaded configuration
            output: Stream for oplog entries, stdout by default
            errors: Stream for error reports, stderr by default
        """
        self.config = config
        self.output = output if output is not None else sys.stdout
        self.reporter = ErrorReporter(
            verbose=config.debug,
            stream=errors if errors is not None else sys.stderr,
            color=config.tail.color
        )
        self.client: Optional[MongoClient] = None
        self.tailer: Optional[OplogTailer] = None
        self.logger = get_logger(__name__)

    def start(self) -> None:
        """Connect and resolve the bookmark, then tail forever.

        Raises:
            OptailError: Whatever ended the run
        """
        mongodb = self.config.mongodb
        self.client = connect(mongodb)
        oplog = oplog_collection(self.client, mongodb)

        bookmark = resolve_bookmark(oplog)

        self.tailer = OplogTailer(
            oplog,
            bookmark,
            output=self.output,
            poll_interval=self.config.tail.poll_interval,
            max_await_time_ms=self.config.tail.max_await_time_ms,
            color=self.config.tail.color
        )
        self.logger.info("tailing_started", namespace=oplog.full_name)
        self.tailer.run()

    def stop(self) -> None:
        """Release the cursor and the client.

        Close failures are logged at debug level and not raised.
        """
        if self.tailer is not None:
            try:
                self.tailer.close()
            except PyMongoError as e:
                self.logger.debug("cursor_close_failed", error=str(e))
            self.tailer = None
        if self.client is not None:
            try:
                self.client.close()
            except PyMongoError as e:
                self.logger.debug("client_close_failed", error=str(e))
            self.client = None

    def run(self) -> int:
        """Run until a fatal error or an interrupt.

        Returns:
            int: Process exit status
        """
        try:
            self.start()
        except OptailError as e:
            return self.reporter.report(e)
        except KeyboardInterrupt:
            self.logger.info("interrupted")
            return EXIT_INTERRUPTED
        finally:
            self.stop()
        return 0


def main(config: OptailConfig) -> int:
    """Configure logging and run optail with the given configuration."""
    configure_logging(config.logging)
    return OptailApp(config).run()
