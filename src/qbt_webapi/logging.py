"""
Logging setup for qbt-webapi

Console output goes to stderr so command results on stdout stay parseable.
File logging is optional and never fatal.
"""

import logging
import sys
from typing import Optional

LOG_FORMAT_SIMPLE = '%(asctime)s | %(levelname)-8s | %(message)s'
LOG_FORMAT_DETAILED = '%(asctime)s | %(levelname)-8s | %(name)s:%(module)s:%(funcName)s:%(lineno)d | %(message)s'
CONSOLE_FORMAT = '%(levelname)s: %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def setup_logging(config, trace_mode: bool = False):
    """
    Configure root logger with console and optional file handlers

    Args:
        config: Config object providing get_log_level() and get_log_file()
        trace_mode: Use detailed format with module/function/line info
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    level = getattr(logging, config.get_log_level(), logging.INFO)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(
        LOG_FORMAT_DETAILED if trace_mode else CONSOLE_FORMAT,
        datefmt=DATE_FORMAT
    ))
    root_logger.addHandler(console_handler)

    # urllib3 logs every connection at DEBUG
    logging.getLogger('urllib3').setLevel(logging.WARNING)

    log_file = config.get_log_file()
    if log_file is None:
        return

    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(
            LOG_FORMAT_DETAILED if trace_mode else LOG_FORMAT_SIMPLE,
            datefmt=DATE_FORMAT
        ))
        root_logger.addHandler(file_handler)
    except OSError as e:
        print(f"WARNING: Failed to setup file logging at {log_file}: {type(e).__name__}: {e}", file=sys.stderr)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a module logger"""
    return logging.getLogger(name)
