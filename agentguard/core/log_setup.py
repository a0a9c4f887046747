"""Logging configuration for hosts embedding agentguard."""
import json
import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class ExtraDataFormatter(logging.Formatter):
    """Formatter that appends a record's extra_data as JSON when present."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        extra_data = getattr(record, "extra_data", None)
        if extra_data:
            message = f"{message} | {json.dumps(extra_data, default=str, sort_keys=True)}"
        return message


def setup_logging(level: str) -> None:
    """Configure logging for the application.

    Args:
        level: Logging level string (DEBUG, INFO, etc.)
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ExtraDataFormatter(LOG_FORMAT))

    logging.basicConfig(
        level=getattr(logging, level),
        handlers=[handler],
        force=True,
    )

    # Reduce noise from external libraries
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
