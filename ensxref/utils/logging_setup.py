"""
Logging configuration for the xref loading scripts.

Scripts log to stdout and, when asked, to a file. Library modules only
ever call logging.getLogger(__name__).
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
DEFAULT_LOG_NAME = "xref_parser.log"

# Loggers that flood the output at DEBUG with one line per statement
NOISY_LOGGERS = ("sqlalchemy.engine", "sqlalchemy.pool")

PathLike = Union[str, Path]


def resolve_log_path(
    log_file: Optional[PathLike] = None,
    log_dir: Optional[PathLike] = None,
) -> Optional[Path]:
    """
    Work out where the log file goes.

    A relative log_file is placed under log_dir; log_dir on its own gets
    the default file name. Returns None when neither is given.
    """
    if log_file is None and log_dir is None:
        return None
    if log_file is None:
        return Path(log_dir) / DEFAULT_LOG_NAME

    log_path = Path(log_file)
    if log_dir is not None and not log_path.is_absolute():
        log_path = Path(log_dir) / log_path
    return log_path


def setup_logging(
    name: Optional[str] = None,
    verbose: bool = False,
    log_file: Optional[PathLike] = None,
    log_dir: Optional[PathLike] = None,
    console: bool = True,
) -> logging.Logger:
    """
    Configure a logger for a script run.

    Args:
        name: Logger name (root logger if None)
        verbose: Log at DEBUG rather than INFO
        log_file: Log file name or path
        log_dir: Directory for the log file
        console: Also log to stdout

    Returns:
        The configured logger

    Example:
        >>> logger = setup_logging(verbose=True, log_file="uniprot.log", log_dir="/tmp/xref")
        >>> logger.debug("Source IDs loaded")
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Re-running a script in the same interpreter must not double every line
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handlers: list[logging.Handler] = []
    if console:
        handlers.append(logging.StreamHandler(sys.stdout))

    log_path = resolve_log_path(log_file, log_dir)
    if log_path is not None:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path))

    formatter = logging.Formatter(LOG_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    for noisy in NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(logging.WARNING)

    return logger
