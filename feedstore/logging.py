# Copyright 2025 thestill.me
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Structured logging configuration for feedstore.

The storage modules log key/value events through structlog
(``logger.error("Query failed", table="feed", error=...)``). Applications
embedding feedstore call ``configure_structlog()`` once at startup to pick
the output format; without it structlog's defaults apply.

Environment Variables:
    LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL). Default: INFO
    LOG_FORMAT: Output format (console, json, auto). Default: auto
    LOG_FILE: Optional file path for log output. Default: None (stderr only)

Example:
    from feedstore.logging import configure_structlog, get_logger

    configure_structlog()
    logger = get_logger(__name__)
    logger.info("Feed added", url="https://example.com/feed")
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, List

import structlog
from structlog.dev import ConsoleRenderer
from structlog.processors import JSONRenderer


def get_log_level() -> int:
    """Get log level from environment variable.

    Returns:
        Logging level constant from logging module (e.g., logging.INFO)
    """
    level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    return getattr(logging, level_name, logging.INFO)


def get_log_format() -> str:
    """Get log format from environment variable.

    Formats:
        - console: Colored output for development
        - json: JSON output for production
        - auto: console if TTY, json otherwise (default)

    Returns:
        Format string: 'console' or 'json'
    """
    format_str = os.getenv("LOG_FORMAT", "auto").lower()
    if format_str == "auto":
        return "console" if sys.stderr.isatty() else "json"
    if format_str not in ("console", "json"):
        return "json"
    return format_str


def _get_renderer(log_format: str) -> Any:
    if log_format == "console":
        return ConsoleRenderer(colors=True)
    return JSONRenderer()


def build_processors(log_format: str) -> List[Any]:
    """Processor chain shared by all outputs, ending in the renderer."""
    return [
        # Correlation fields bound via structlog.contextvars.bind_contextvars()
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        _get_renderer(log_format),
    ]


def configure_structlog() -> None:
    """Configure structlog based on environment variables.

    Call once at application startup, before loggers are used. Output goes
    to stderr, plus a rotating file when LOG_FILE is set.
    """
    log_level = get_log_level()
    processors = build_processors(get_log_format())
    log_file = os.getenv("LOG_FILE")

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)

        # Route structlog through stdlib logging so both handlers receive events
        root_logger = logging.getLogger()
        root_logger.setLevel(log_level)

        stderr_handler = logging.StreamHandler(sys.stderr)
        stderr_handler.setLevel(log_level)
        stderr_handler.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(stderr_handler)

        # 10MB max, 3 backups
        file_handler = RotatingFileHandler(log_file, maxBytes=10 * 1024 * 1024, backupCount=3)
        file_handler.setLevel(log_level)
        file_handler.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(file_handler)

        logger_factory: Any = structlog.stdlib.LoggerFactory()
    else:
        logger_factory = structlog.PrintLoggerFactory(file=sys.stderr)

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=logger_factory,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger instance.

    Args:
        name: Logger name, typically __name__ of the calling module

    Returns:
        Configured structlog logger instance
    """
    return structlog.get_logger(name)
