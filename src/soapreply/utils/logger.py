# soapreply/utils/logger.py
"""
Logging configuration for the soapreply package.

Every module logs through ``logging.getLogger(__name__)``; this module only
configures the package-level ``soapreply`` logger that they all inherit from.
Applications that already configure logging do not need to call it.
"""

import logging
import os
from datetime import datetime
from pathlib import Path
from sys import stderr

from .config_loader import LoggingSection

PACKAGE_LOGGER_NAME: str = 'soapreply'

LOG_FORMAT: str = '%(asctime)s %(levelname)-8s [%(name)s] %(message)s'


class Rfc3339Formatter(logging.Formatter):
    """Formatter whose ``asctime`` is an RFC 3339 local timestamp (``+01:00``)."""

    def formatTime(  # noqa: N802
        self, record: logging.LogRecord, datefmt: str | None = None
    ) -> str:
        timestamp: datetime = datetime.fromtimestamp(record.created).astimezone()
        return timestamp.isoformat(timespec='milliseconds')


def _add_file_handler(
    package_logger: logging.Logger,
    file_path: Path,
    file_level: int,
) -> None:
    file_path.parent.mkdir(parents=True, exist_ok=True)

    file_handler: logging.Handler = logging.FileHandler(
        filename=str(file_path),
        mode='a',
        encoding='utf-8',
    )
    file_handler.setFormatter(Rfc3339Formatter(fmt=LOG_FORMAT))
    file_handler.setLevel(file_level)
    package_logger.addHandler(file_handler)
    package_logger.info('Logging to file: %s', file_path)


def setup_logger(logging_config: LoggingSection | None = None) -> logging.Logger:
    """
    Set up logging for the soapreply package.

    Configures a console handler on stderr and, when ``file_path`` is set,
    a file handler. The function is idempotent: calling it again brings the
    existing handlers in line with the new configuration instead of adding
    duplicates. A file handler for a different (or no) path is replaced (or
    removed).

    Args:
        logging_config: The 'logging' section of the configuration. Defaults
                        to console logging at INFO.

    Returns:
        The package-level logger.

    Example:
        >>> config = load_config()
        >>> setup_logger(config.logging)
    """
    if logging_config is None:
        logging_config = LoggingSection()

    console_level: int = logging_config.get_console_level_int()
    file_level: int | None = logging_config.get_file_level_int()

    package_logger: logging.Logger = logging.getLogger(PACKAGE_LOGGER_NAME)

    # The logger must let through the most verbose of the handler levels
    package_logger.setLevel(
        min(console_level, file_level) if file_level is not None else console_level
    )

    wanted_file: str | None = (
        os.path.abspath(logging_config.file_path)
        if logging_config.file_path is not None and file_level is not None
        else None
    )

    has_console: bool = False
    has_file: bool = False
    for existing_handler in list(package_logger.handlers):
        if isinstance(existing_handler, logging.FileHandler):
            if wanted_file is not None and existing_handler.baseFilename == wanted_file:
                existing_handler.setLevel(file_level or console_level)
                has_file = True
            else:
                package_logger.removeHandler(existing_handler)
                existing_handler.close()
        else:
            existing_handler.setLevel(console_level)
            has_console = True

    if not has_console:
        console_handler: logging.Handler = logging.StreamHandler(stderr)
        console_handler.setFormatter(Rfc3339Formatter(fmt=LOG_FORMAT))
        console_handler.setLevel(console_level)
        package_logger.addHandler(console_handler)

    if (
        logging_config.file_path is not None
        and file_level is not None
        and not has_file
    ):
        _add_file_handler(package_logger, logging_config.file_path, file_level)

    return package_logger
