"""Logging utilities."""

import logging
import os
import sys
from pathlib import Path
from typing import Optional

DEBUG_ENV_VAR = "LORANSAC_DEBUG"


def default_log_level() -> int:
    """DEBUG when LORANSAC_DEBUG=1 is set in the environment, INFO otherwise."""
    return logging.DEBUG if os.environ.get(DEBUG_ENV_VAR, "0") == "1" else logging.INFO


def setup_logger(name: str = 'loransac', log_level: Optional[int] = None,
                 log_file: Optional[str] = None) -> logging.Logger:
    """Setup logger with console and optional file handler."""
    logger = logging.getLogger(name)
    logger.setLevel(default_log_level() if log_level is None else log_level)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # Calling setup twice must not duplicate console output
    if not any(getattr(h, '_loransac_console', False) for h in logger.handlers):
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        console_handler._loransac_console = True
        logger.addHandler(console_handler)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
