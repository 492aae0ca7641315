"""Logging setup shared by the CLI, the fetcher and the background poller."""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, TextIO

LOGGER_NAME = 'frutales'

# threadName tells poller ticks apart from the main thread in watch mode
DETAILED_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(threadName)s %(filename)s:%(lineno)d] - %(message)s'
SIMPLE_FORMAT = '%(levelname)s: %(message)s'

# requests logs every connection through urllib3
HTTP_LOGGERS = ('urllib3',)


def setup_logging(
    log_dir: Optional[Path] = None,
    level: int = logging.INFO,
    log_to_file: bool = True,
    log_to_console: bool = True,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Configure the ``frutales`` logger hierarchy.

    Calling it again replaces the previous handlers, so a watch session and
    a one-off run can share a process.

    Args:
        log_dir: Directory for log files (default: ./logs)
        level: Logging level (default: INFO)
        log_to_file: Write a timestamped frutales_<time>.log file
        log_to_console: Log to ``stream``
        stream: Console stream (default: stderr, leaving stdout to the table)

    Returns:
        The configured ``frutales`` logger

    Example:
        from frutales.logging_config import setup_logging
        logger = setup_logging(log_to_file=False)
        logger.info("Recalculating leaderboard")
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers = []

    if log_to_file:
        log_dir = Path('logs') if log_dir is None else Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f'frutales_{datetime.now().strftime("%Y%m%d_%H%M%S")}.log'

        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(DETAILED_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        logger.addHandler(file_handler)

    if log_to_console:
        console_handler = logging.StreamHandler(stream or sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(logging.Formatter(SIMPLE_FORMAT))
        logger.addHandler(console_handler)

    http_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for name in HTTP_LOGGERS:
        logging.getLogger(name).setLevel(http_level)

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger inside the ``frutales`` hierarchy.

    ``get_logger('cli')`` and ``get_logger('frutales.cli')`` return the same
    logger; without a name the package root logger is returned.
    """
    if not name or name == LOGGER_NAME:
        return logging.getLogger(LOGGER_NAME)
    if not name.startswith(f'{LOGGER_NAME}.'):
        name = f'{LOGGER_NAME}.{name}'
    return logging.getLogger(name)
