"""Logging configuration for applications embedding diskstash.

The library itself only creates module loggers; hosts call `setup_logging`
(or configure logging their own way) to see the records.
"""

import logging
import sys
from typing import Optional, Union

from diskstash.infrastructure.config.settings import get_config

DEFAULT_LOG_LEVEL = logging.INFO
DEFAULT_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    return getattr(logging, str(level).upper(), DEFAULT_LOG_LEVEL)


def setup_logging(
    log_level: Optional[Union[int, str]] = None,
    log_format: str = DEFAULT_LOG_FORMAT,
    log_file: Optional[str] = None
) -> None:
    """Configures the root logger.

    Args:
        log_level: Minimum level; defaults to the 'logging.level' setting, then INFO.
        log_format: The format string for log messages.
        log_file: Optional file for log output; defaults to the 'logging.file' setting.
    """
    level = _resolve_level(log_level if log_level is not None else get_config('logging.level', DEFAULT_LOG_LEVEL))
    log_file = log_file or get_config('logging.file')

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers attached to the root logger
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(log_format)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
        except OSError as e:
            logging.error(f"Failed to set up file logging to {log_file}: {e}")
        else:
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)
            logging.info(f"Logging to file: {log_file}")

    logging.debug(f"Logging configured. Level={logging.getLevelName(level)}")
