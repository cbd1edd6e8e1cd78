# prep_instructions/A_core/A00_logging.py
"""
Centralized logging configuration for the prep-instruction pipeline.

Every module logs through a named logger under the ``prep_instructions``
namespace. ``configure_logging`` is called once by entry points (CLI,
batch runs); library code only calls ``get_logger``.

Provides:
- Colored console output for interactive runs
- Rotating file logs per run
- LogContext for timed start/complete/failed messages
- ``timed`` decorator for function timing
- ``log_and_default`` decorator for classifiers that must never raise

Usage:
    from A_core.A00_logging import get_logger, LogContext

    logger = get_logger(__name__)

    with LogContext(logger, "PDF text extraction"):
        text = extractor.extract(path)
"""

from __future__ import annotations

import functools
import logging
import sys
import time
from contextlib import contextmanager
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Callable, Generator, Optional, TypeVar, Union

F = TypeVar("F", bound=Callable[..., Any])

ROOT_LOGGER_NAME = "prep_instructions"
DEFAULT_LOG_DIR = Path("logs")
DEFAULT_LOG_LEVEL = logging.INFO
DEFAULT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
MAX_LOG_SIZE = 5 * 1024 * 1024  # 5 MB
BACKUP_COUNT = 3

COLORS = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[35m",
    "RESET": "\033[0m",
    "DIM": "\033[2m",
}


class ColoredFormatter(logging.Formatter):
    """Console formatter that colors the level name when writing to a TTY."""

    def __init__(
        self,
        fmt: Optional[str] = None,
        datefmt: Optional[str] = None,
        use_colors: bool = True,
    ) -> None:
        super().__init__(fmt, datefmt)
        self.use_colors = use_colors and sys.stdout.isatty()

    def format(self, record: logging.LogRecord) -> str:
        if not self.use_colors:
            return super().format(record)
        # Work on a copy so file handlers sharing the record stay uncolored
        colored = logging.makeLogRecord(record.__dict__)
        level_color = COLORS.get(record.levelname, COLORS["RESET"])
        colored.levelname = f"{level_color}{record.levelname}{COLORS['RESET']}"
        colored.name = f"{COLORS['DIM']}{record.name}{COLORS['RESET']}"
        return super().format(colored)


class PipelineLogger:
    """
    Process-wide logging manager.

    Holds the handlers attached to the ``prep_instructions`` root logger so
    repeated ``configure`` calls replace them instead of stacking duplicates.
    """

    _instance: Optional["PipelineLogger"] = None
    _initialized: bool = False

    def __new__(cls) -> "PipelineLogger":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        if PipelineLogger._initialized:
            return

        self._log_dir: Path = DEFAULT_LOG_DIR
        self._log_level: int = DEFAULT_LOG_LEVEL
        self._run_id: Optional[str] = None

        PipelineLogger._initialized = True

    def configure(
        self,
        log_dir: Optional[Union[str, Path]] = None,
        log_level: Union[int, str] = DEFAULT_LOG_LEVEL,
        run_id: Optional[str] = None,
        enable_file_logging: bool = False,
        enable_console_logging: bool = True,
    ) -> None:
        """
        Attach console and/or file handlers to the pipeline root logger.

        Args:
            log_dir: Directory for log files. Created when file logging is on.
            log_level: Minimum level, as an int or a level name ("DEBUG").
            run_id: Identifier used in the log file name.
            enable_file_logging: Write a rotating log file per run.
            enable_console_logging: Write to stdout.
        """
        if isinstance(log_level, str):
            log_level = logging.getLevelName(log_level.upper())
            if not isinstance(log_level, int):
                log_level = DEFAULT_LOG_LEVEL

        self._log_level = log_level
        self._run_id = run_id or datetime.now().strftime("%Y%m%d_%H%M%S")
        if log_dir:
            self._log_dir = Path(log_dir)

        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        root_logger.setLevel(log_level)
        for handler in list(root_logger.handlers):
            handler.close()
        root_logger.handlers.clear()

        if enable_console_logging:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(log_level)
            console_handler.setFormatter(
                ColoredFormatter(fmt="%(levelname)-8s | %(message)s", datefmt=DEFAULT_DATE_FORMAT)
            )
            root_logger.addHandler(console_handler)

        if enable_file_logging:
            self._log_dir.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                self._log_dir / f"prep_{self._run_id}.log",
                maxBytes=MAX_LOG_SIZE,
                backupCount=BACKUP_COUNT,
                encoding="utf-8",
            )
            file_handler.setLevel(log_level)
            file_handler.setFormatter(logging.Formatter(fmt=DEFAULT_FORMAT, datefmt=DEFAULT_DATE_FORMAT))
            root_logger.addHandler(file_handler)

    def get_logger(self, name: str) -> logging.Logger:
        if not name.startswith(ROOT_LOGGER_NAME):
            name = f"{ROOT_LOGGER_NAME}.{name}"
        return logging.getLogger(name)

    @property
    def run_id(self) -> Optional[str]:
        return self._run_id


_logger_manager = PipelineLogger()


def configure_logging(
    log_dir: Optional[Union[str, Path]] = None,
    log_level: Union[int, str] = DEFAULT_LOG_LEVEL,
    run_id: Optional[str] = None,
    enable_file_logging: bool = False,
    enable_console_logging: bool = True,
) -> None:
    """
    Configure pipeline logging. Call once at application startup.

    Example:
        >>> configure_logging(log_level="DEBUG", enable_file_logging=True)
    """
    _logger_manager.configure(
        log_dir=log_dir,
        log_level=log_level,
        run_id=run_id,
        enable_file_logging=enable_file_logging,
        enable_console_logging=enable_console_logging,
    )


def get_logger(name: str) -> logging.Logger:
    """Return the namespaced logger for a module (pass ``__name__``)."""
    return _logger_manager.get_logger(name)


@contextmanager
def LogContext(
    logger: logging.Logger,
    operation: str,
    level: int = logging.INFO,
) -> Generator[None, None, None]:
    """
    Log the start, completion and failure of an operation with its timing.

    Exceptions are logged and re-raised.
    """
    start_time = time.perf_counter()
    logger.log(level, f"Starting: {operation}")
    try:
        yield
    except Exception as e:
        elapsed = time.perf_counter() - start_time
        logger.error(f"Failed: {operation} ({elapsed:.2f}s) - {type(e).__name__}: {e}")
        raise
    else:
        elapsed = time.perf_counter() - start_time
        logger.log(level, f"Completed: {operation} ({elapsed:.2f}s)")


def timed(
    logger: Optional[logging.Logger] = None,
    level: int = logging.DEBUG,
) -> Callable[[F], F]:
    """Decorator logging how long the wrapped function took."""

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            log = logger or get_logger(func.__module__)
            start_time = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                elapsed = time.perf_counter() - start_time
                log.error(f"{func.__name__} failed after {elapsed:.2f}s: {e}")
                raise
            elapsed = time.perf_counter() - start_time
            log.log(level, f"{func.__name__} completed in {elapsed:.3f}s")
            return result

        return wrapper  # type: ignore[return-value]

    return decorator


def log_and_default(
    default: Any,
    logger: Optional[logging.Logger] = None,
) -> Callable[[F], F]:
    """
    Decorator for heuristic classifiers: any exception is logged as a
    warning and ``default`` is returned instead.

    Example:
        >>> @log_and_default(None)
        ... def extract_time(text):
        ...     ...
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                log = logger or get_logger(func.__module__)
                log.warning(
                    f"{func.__name__} failed ({type(e).__name__}: {e}); using default {default!r}"
                )
                return default

        return wrapper  # type: ignore[return-value]

    return decorator
