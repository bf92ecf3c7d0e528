"""Reporting sinks the evaluation writes its progress and violations to."""

import sys
from typing import TextIO

import structlog

logger = structlog.get_logger(__name__)


def escape_data(message: str) -> str:
    """Escape a message for use in a GitHub Actions workflow command."""
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


class ActionsReporter:
    """
    Reports through GitHub Actions workflow commands on stdout.

    Info lines are printed as-is, warnings and failures become annotations.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream = stream or sys.stdout
        self.failed = False

    def _write(self, line: str) -> None:
        self.stream.write(line + "\n")
        self.stream.flush()

    def info(self, message: str) -> None:
        self._write(message)

    def warning(self, message: str) -> None:
        self._write(f"::warning::{escape_data(message)}")

    def set_failed(self, message: str) -> None:
        """Annotate the run with an error; the runner exits non-zero afterwards."""
        self.failed = True
        self._write(f"::error::{escape_data(message)}")


class LogReporter:
    """Reports through structlog, for the webhook service where no run log exists."""

    def __init__(self, **context: object) -> None:
        self.log = logger.bind(**context)
        self.failed = False

    def info(self, message: str) -> None:
        self.log.info(message)

    def warning(self, message: str) -> None:
        self.log.warning(message)

    def set_failed(self, message: str) -> None:
        self.failed = True
        self.log.error(message)
