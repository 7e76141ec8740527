"""
Logging setup for the DPS bot.

Handlers live on the ``dpsbot`` package logger, so modules that only call
``logging.getLogger(__name__)`` (the services) write to the same console
and log file as the cogs.
"""

import logging
import sys
from datetime import date
from pathlib import Path
from typing import Optional

from dpsbot.config import Config

PACKAGE_LOGGER = 'dpsbot'
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def log_file_path(log_dir: Path, day: Optional[date] = None) -> Path:
    """Daily log file, e.g. logs/dps_bot_20240131.log"""
    day = day or date.today()
    return log_dir / f'dps_bot_{day:%Y%m%d}.log'


def configure_package_logging() -> logging.Logger:
    """Attach handlers to the package logger. Later calls are no-ops."""
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if package_logger.handlers:
        return package_logger

    level = logging.DEBUG if Config.DEBUG else logging.INFO
    package_logger.setLevel(logging.DEBUG)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    package_logger.addHandler(console_handler)

    # Empty LOG_DIR keeps logging on the console only
    if Config.LOG_DIR:
        log_dir = Path(Config.LOG_DIR)
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file_path(log_dir), encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        package_logger.addHandler(file_handler)

    return package_logger


def setup_logger(name: str) -> logging.Logger:
    """Logger for a module, placed under the package logger."""
    configure_package_logging()
    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + '.'):
        name = f'{PACKAGE_LOGGER}.{name}'
    return logging.getLogger(name)
