"""
Logging configuration for the curation engine
"""

import logging
import sys
from typing import Any, List

import structlog


def _convert_collections(value: Any) -> Any:
    """Render sets and tuples as lists for cleaner logs."""
    if isinstance(value, (set, frozenset)):
        return sorted(_convert_collections(v) for v in value)
    elif isinstance(value, tuple):
        return [_convert_collections(v) for v in value]
    elif isinstance(value, dict):
        return {k: _convert_collections(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_convert_collections(v) for v in value]
    return value


def collections_to_list_processor(logger, method_name, event_dict):
    """Structlog processor that converts sets/tuples to lists."""
    return {k: _convert_collections(v) for k, v in event_dict.items()}


def setup_logging(log_level: str = "INFO", log_file: str = ""):
    """
    Configure structured logging using structlog.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional path of an additional log file
    """
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        format="%(message)s",
        handlers=handlers,
        level=getattr(logging, log_level.upper()),
        force=True,
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            collections_to_list_processor,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
