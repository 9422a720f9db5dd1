"""Unified logging for rw with console and debug file output."""
import logging
import tempfile
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

console = Console()

# Debug log file configuration
LOG_DIR = Path.home() / ".rw"
LOG_FILE = LOG_DIR / "debug.log"

# Debug logs larger than this are deleted on teardown
MAX_LOG_BYTES = 1_000_000

# Active file handler, if file logging has been set up
_file_handler: Optional[logging.FileHandler] = None


def setup_file_logging(log_file: Optional[str] = None, verbose: bool = False) -> Path:
    """Set up debug file logging for rw operations.

    Args:
        log_file: Path to log file (defaults to ~/.rw/debug.log)
        verbose: Enable debug-level logging on the console as well

    Returns:
        Path of the log file in use

    Note:
        Creates the log directory if it doesn't exist.
        Falls back to the system temp dir if the home directory is not writable.
    """
    global _file_handler

    if _file_handler is not None:
        return Path(_file_handler.baseFilename)

    target_log_file = Path(log_file) if log_file else LOG_FILE

    try:
        target_log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(target_log_file)
    except PermissionError:
        target_log_file = Path(tempfile.gettempdir()) / "rw-debug.log"
        file_handler = logging.FileHandler(target_log_file)

    # The file always receives everything, the console only what verbose allows
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(
        "%(asctime)s | %(name)s | %(levelname)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))

    root_logger = logging.getLogger("rwcli")
    root_logger.addHandler(file_handler)
    root_logger.setLevel(logging.DEBUG)

    for handler in _console_handlers():
        handler.setLevel(logging.DEBUG if verbose else logging.WARNING)

    _file_handler = file_handler
    root_logger.debug(f"rw logging initialized: {target_log_file}")
    return target_log_file


def teardown_file_logging() -> None:
    """Close the debug log file and delete it when it has grown too large."""
    global _file_handler

    if _file_handler is None:
        return

    root_logger = logging.getLogger("rwcli")
    root_logger.debug("rw logging stopped")
    root_logger.removeHandler(_file_handler)
    _file_handler.close()

    log_path = Path(_file_handler.baseFilename)
    _file_handler = None

    if log_path.exists() and log_path.stat().st_size > MAX_LOG_BYTES:
        log_path.unlink()


def get_logger(name: str) -> logging.Logger:
    """Get a configured logger instance with console output.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger with Rich console handler

    Note:
        File logging must be enabled separately via setup_file_logging()
    """
    logger = logging.getLogger(name)

    # Only add console handler if not already present
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(console=console, show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        handler.setLevel(logging.WARNING)
        logger.addHandler(handler)
        logger.setLevel(logging.DEBUG)

    return logger


def _console_handlers():
    """Yield the Rich handlers attached to rw loggers."""
    manager = logging.Logger.manager
    for name, candidate in list(manager.loggerDict.items()):
        if not name.startswith("rwcli") or not isinstance(candidate, logging.Logger):
            continue
        for handler in candidate.handlers:
            if isinstance(handler, RichHandler):
                yield handler
