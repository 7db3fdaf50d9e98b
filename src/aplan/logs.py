import logging
import os
import sys
from pathlib import Path

def _log_dir() -> Path:
    override = os.getenv('APLAN_LOG_DIR', '')
    if override:
        return Path(override)
    return Path.home() / ".local" / "share" / "aplan" / "logs"

def setup_logging():
    """Set up logging configuration for the aplan package with environment-based levels."""
    # Determine log level from environment
    env_level = os.getenv('APLAN_LOG_LEVEL', '').upper()
    is_debug = os.getenv('APLAN_DEBUG', '').lower() in ('1', 'true', 'yes')

    # Default to WARNING so the CLI output stays clean for regular users
    if is_debug:
        level = logging.DEBUG
    elif env_level:
        level = getattr(logging, env_level, logging.WARNING)
    else:
        level = logging.WARNING

    log_format = '[%(asctime)s] %(levelname)-8s [%(name)s:%(funcName)s:%(lineno)d] %(message)s'
    date_format = '%Y-%m-%d %H:%M:%S'

    detailed_formatter = logging.Formatter(log_format, date_format)
    console_formatter = logging.Formatter(
        '%(levelname)-8s [%(name)s] %(message)s' if is_debug
        else '%(levelname)s: %(message)s'
    )

    logger = logging.getLogger('aplan')
    logger.setLevel(logging.DEBUG)  # Logger accepts all, handlers filter
    logger.handlers.clear()

    # File handler (always detailed); read-only homes just lose the log file
    log_dir = _log_dir()
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_dir / "aplan.log")
    except OSError:
        file_handler = None
    if file_handler is not None:
        file_handler.setFormatter(detailed_formatter)
        file_handler.setLevel(logging.DEBUG)
        logger.addHandler(file_handler)

    # Console handler goes to stderr so rendered output on stdout stays pipeable
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(console_formatter)
    console_handler.setLevel(level)
    logger.addHandler(console_handler)

    logger.propagate = False

    return logger

# Initialize logging when package is imported
setup_logging()

def get_logger(name: str = None):
    """Get a logger instance for a specific module."""
    if name:
        return logging.getLogger(f'aplan.{name}')
    return logging.getLogger('aplan')
