"""
Centralized logging helpers for podbrief.

Every component (ingestion, processor, database, api) gets its own named
logger writing to a file under the log directory, plus an optional console
handler when running a CLI in verbose mode.

Usage:
    from podbrief.logger import setup_logging, log_function

    logger = setup_logging(logger_name="ingestion", log_file="ingestion.log")

    @log_function(logger_name="ingestion", log_args=True)
    def ingest_podcast(podcast_id, creator_id):
        ...
"""

import functools
import logging
import os
import time
from pathlib import Path
from typing import Optional, Callable, Any


DEFAULT_LOG_DIR = "logs"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _resolve_log_path(log_file: str) -> Path:
    """Place bare file names under LOG_DIR (default: logs/)."""
    path = Path(log_file)
    if path.parent != Path("."):
        return path
    return Path(os.getenv("LOG_DIR", DEFAULT_LOG_DIR)) / path


def setup_logging(
    logger_name: str,
    log_file: str = "podbrief.log",
    verbose: bool = False,
    level: int = logging.INFO,
) -> logging.Logger:
    """
    Configure a named logger with a file handler and an optional console handler.

    Calling it again for an already configured logger only adjusts verbosity,
    so modules can call it at import time and CLIs can call it again with
    verbose=True.

    Args:
        logger_name: Name of the logger (e.g. "processor")
        log_file: File name (placed under LOG_DIR) or explicit path
        verbose: Also log DEBUG and above to the console
        level: Level for the file handler

    Returns:
        The configured logger
    """
    logger = logging.getLogger(logger_name)

    if logger.handlers:
        if verbose and not any(
            isinstance(h, logging.StreamHandler)
            and not isinstance(h, logging.FileHandler)
            for h in logger.handlers
        ):
            logger.setLevel(logging.DEBUG)
            logger.addHandler(_console_handler())
        return logger

    logger.setLevel(logging.DEBUG if verbose else level)

    log_path = _resolve_log_path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(file_handler)

    if verbose:
        logger.addHandler(_console_handler())

    return logger


def _console_handler() -> logging.Handler:
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.DEBUG)
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    return console_handler


def log_function(
    logger_name: Optional[str] = None,
    level: int = logging.INFO,
    log_args: bool = False,
    log_result: bool = False,
    log_execution_time: bool = True,
) -> Callable:
    """
    Decorator logging entry, exit, duration and exceptions of a function.

    Exceptions are logged with traceback and re-raised unchanged.

    Args:
        logger_name: Logger to use (defaults to the function's module name)
        level: Level for entry/exit messages
        log_args: Include positional and keyword arguments in the entry message
        log_result: Include the return value in the exit message
        log_execution_time: Include the elapsed time in the exit message

    Example:
        @log_function(logger_name="database", log_args=True, log_result=True)
        def upsert_summary(episode_id, data):
            ...
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            logger = logging.getLogger(logger_name or func.__module__)
            if not logger.handlers:
                logger = setup_logging(logger.name, level=level)

            func_name = func.__name__
            log_msg = f"Calling {func_name}"
            if log_args and (args or kwargs):
                args_repr = [repr(a) for a in args]
                kwargs_repr = [f"{k}={v!r}" for k, v in kwargs.items()]
                log_msg += f" with args: {', '.join(args_repr + kwargs_repr)}"
            logger.log(level, log_msg)

            start_time = time.time()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                execution_time = time.time() - start_time
                logger.error(
                    f"Exception in {func_name} after {execution_time:.2f}s: {type(e).__name__}: {e}",
                    exc_info=True,
                )
                raise

            completion_msg = f"Completed {func_name}"
            if log_execution_time:
                completion_msg += f" in {time.time() - start_time:.2f}s"
            if log_result:
                completion_msg += f" with result: {result!r}"
            logger.log(level, completion_msg)

            return result

        return wrapper

    return decorator
