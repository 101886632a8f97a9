"""Fatal error reporting."""

import sys
from typing import Optional, TextIO

from colorama import Fore, Style

from ..utils.error_utils import OptailError

ERROR_LABEL = "optail error"
EXIT_FAILURE = 1


class ErrorReporter:
    """Surfaces fatal errors on the error stream.

    With ``verbose`` off only errors the server itself sent (``$err``) are
    written; everything else exits silently.
    """

    def __init__(self, verbose: bool = False, stream: Optional[TextIO] = None, color: bool = True):
        self.verbose = verbose
        self.stream = stream if stream is not None else sys.stderr
        self.color = color

    def should_report(self, error: OptailError) -> bool:
        return self.verbose or error.always_report

    def format(self, error: OptailError) -> str:
        label = ERROR_LABEL
        if self.color:
            label = f"{Fore.RED}{label}{Style.RESET_ALL}"
        return f"{label}: {error}"

    def report(self, error: OptailError) -> int:
        """Write the error if it should be shown.

        Args:
            error: The fatal error

        Returns:
            int: Process exit status
        """
        if self.should_report(error):
            self.stream.write(self.format(error) + "\n")
            self.stream.flush()
        return EXIT_FAILURE
