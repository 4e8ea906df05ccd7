"""
Logging configuration with structured logging support.

Package modules log through the standard ``logging`` module and attach the
registry name and command id via ``extra``. This module renders those
records either as JSON (python-json-logger) or as human-readable key/value
lines (structlog's console renderer), with optional JSON file output.
"""

import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import structlog
from pythonjsonlogger import jsonlogger

from chatbot_registry.config import LoggingConfig

# Record attributes the registries and mailboxes pass via ``extra``
CONTEXT_KEYS = ("registry", "command_id")


class StructuredFormatter(jsonlogger.JsonFormatter):
    """JSON formatter adding service context to every record."""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]):
        super().add_fields(log_record, record, message_dict)

        log_record['timestamp'] = datetime.now(timezone.utc).isoformat()
        log_record['service'] = 'chatbot-registry'
        log_record['environment'] = os.getenv('ENVIRONMENT', 'development')

        for key in CONTEXT_KEYS:
            value = getattr(record, key, None)
            if value:
                log_record[key] = value


def console_formatter(colors: bool = False) -> structlog.stdlib.ProcessorFormatter:
    """Human-readable formatter that renders registry context as key=value pairs."""
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.ExtraAdder(allow=CONTEXT_KEYS),
        ],
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.dev.ConsoleRenderer(colors=colors),
        ],
    )


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "text",
    log_file: Optional[str] = None,
) -> None:
    """
    Set up application logging with structured output.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Output format ('json' for structured logging, 'text' for human-readable)
        log_file: Optional file path for log output (always JSON)
    """
    handlers = []

    console_handler = logging.StreamHandler(sys.stdout)
    if log_format == "json":
        console_handler.setFormatter(StructuredFormatter(
            '%(asctime)s %(name)s %(levelname)s %(message)s'
        ))
    else:
        console_handler.setFormatter(console_formatter(colors=sys.stdout.isatty()))
    handlers.append(console_handler)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(StructuredFormatter(
            '%(asctime)s %(name)s %(levelname)s %(message)s'
        ))
        handlers.append(file_handler)

    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        handlers=handlers,
        format='%(message)s',
        force=True,
    )

    # Reduce noise from the event loop's own debug output
    logging.getLogger('asyncio').setLevel(logging.WARNING)


def init_logging(config: Optional[LoggingConfig] = None) -> None:
    """Initialize logging from a LoggingConfig (default: environment)."""
    if config is None:
        config = LoggingConfig()
    setup_logging(
        log_level=config.level,
        log_format=config.format,
        log_file=config.file,
    )
