"""
Application logging for the dashboard

Dashboard diagnostics go to a file so they never interfere with the
terminal the dashboard draws on.
"""
import logging
from pathlib import Path

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def setup_logging(log_dir: Path, level: str = "INFO") -> logging.Logger:
    """
    Attach a file handler to the AGCP logger

    Calling this again does not add a second handler.

    Args:
        log_dir: Directory for dashboard.log, created if missing
        level: Logging level name

    Returns:
        The configured package logger
    """
    logger = logging.getLogger('AGCP')
    logger.setLevel(level.upper())

    if not logger.handlers:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_dir / "dashboard.log")
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(file_handler)

    return logger
