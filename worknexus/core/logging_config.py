"""
Structured logging configuration for the application.

JSON logs (JSON_LOGS=true) carry the service name and version on every
record so marketplace, realtime and storage logs can be told apart once
shipped to a log store.
"""

import logging
import sys
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from worknexus import __version__
from worknexus.core.timeutils import utcnow

SERVICE_NAME = "worknexus-api"

# Libraries that log every request/connection at INFO
NOISY_LOGGERS = (
    "urllib3",
    "boto3",
    "botocore",
    "s3transfer",
    "sse_starlette",
    "sqlalchemy.engine",
)


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """
    JSON formatter that stamps service, version and source location.
    """

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record['timestamp'] = utcnow().isoformat().replace('+00:00', 'Z')
        log_record['level'] = record.levelname
        log_record['logger'] = record.name
        log_record['service'] = SERVICE_NAME
        log_record['version'] = __version__
        log_record['function'] = record.funcName

        if record.levelno >= logging.WARNING:
            log_record['line'] = record.lineno
            log_record['pathname'] = record.pathname


def setup_logging(log_level: str = "INFO", json_logs: bool = True) -> None:
    """
    Configure the root logger.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: JSON lines for production, plain text for local runs
    """
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)

    if json_logs:
        formatter = CustomJsonFormatter('%(timestamp)s %(level)s %(logger)s %(message)s')
    else:
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

    console_handler.setFormatter(formatter)

    root_logger.setLevel(getattr(logging, log_level.upper()))
    root_logger.addHandler(console_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
