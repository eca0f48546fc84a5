"""
Centralized logging configuration for the game catalog package.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from . import config

# Names given to the handlers installed here, so a second call is a no-op
CONSOLE_HANDLER_NAME = "game_catalog.console"
FILE_HANDLER_NAME = "game_catalog.file"


def setup_logging(log_file: Optional[str] = "game_catalog.log", level: int = logging.INFO) -> None:
    """
    Set up centralized logging for the game catalog package.

    Args:
        log_file: Name of the log file, an absolute path, or None for console only
        level: Logging level
    """
    # Avoid duplicate handlers if already configured
    root_logger = logging.getLogger()
    if any(h.get_name() in (CONSOLE_HANDLER_NAME, FILE_HANDLER_NAME) for h in root_logger.handlers):
        return

    # Create formatter
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # Console handler
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(level)
    console_handler.set_name(CONSOLE_HANDLER_NAME)

    root_logger.setLevel(level)
    root_logger.addHandler(console_handler)

    if log_file:
        # Default to logs dir if bare filename provided
        log_path = Path(log_file)
        if not log_path.is_absolute():
            log_path = config.LOGS_DIR / log_path.name
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(str(log_path))
        except OSError as e:
            root_logger.warning(f"File logging disabled, cannot open {log_path}: {e}")
        else:
            file_handler.setFormatter(formatter)
            file_handler.setLevel(level)
            file_handler.set_name(FILE_HANDLER_NAME)
            root_logger.addHandler(file_handler)

    # Reduce noise from external libraries
    logging.getLogger('requests').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)
