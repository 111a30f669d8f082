import logging
import sys
from typing import Any

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Library logger; silent until the application attaches a handler
logger = logging.getLogger("githours")
logger.addHandler(logging.NullHandler())


def get_logger(name: str | None = None) -> logging.Logger:
    """Get the githours logger, or one of its children.

    Args:
        name: Dotted suffix of the child logger (e.g. ``"repository"``). If None, returns
              the main githours logger.

    Returns:
        logging.Logger: The requested logger instance.
    """
    if name is None:
        return logger
    return logger.getChild(name)


def set_log_level(level: int | str) -> None:
    """Set the level of the githours logger.

    Args:
        level: A logging level name (e.g. ``'DEBUG'``) or number (e.g. ``logging.DEBUG``).
    """
    logger.setLevel(level)


def add_stream_handler(
    level: int | str = logging.INFO,
    format_string: str = DEFAULT_FORMAT,
    **handler_kwargs: Any,
) -> logging.Handler | None:
    """Attach a stream handler to the githours logger.

    Args:
        level: The logging level for the handler. Defaults to INFO.
        format_string: The format string for log messages.
        **handler_kwargs: Passed through to ``logging.StreamHandler`` (e.g. ``stream=sys.stderr``).

    Returns:
        The new handler, or None if a stream handler was already attached.
    """
    if any(type(h) is logging.StreamHandler for h in logger.handlers):
        logger.warning("StreamHandler already exists for githours logger.")
        return None

    handler = logging.StreamHandler(**handler_kwargs)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(format_string))
    logger.addHandler(handler)
    return handler


def add_file_handler(
    filename: str,
    level: int | str = logging.INFO,
    format_string: str = DEFAULT_FORMAT,
    **handler_kwargs: Any,
) -> logging.Handler | None:
    """Attach a file handler to the githours logger.

    Args:
        filename: Path of the log file.
        level: The logging level for the handler. Defaults to INFO.
        format_string: The format string for log messages.
        **handler_kwargs: Passed through to ``logging.FileHandler``.

    Returns:
        The new handler, or None if that file is already being logged to.
    """
    handler = logging.FileHandler(filename, delay=True, **handler_kwargs)
    if any(isinstance(h, logging.FileHandler) and h.baseFilename == handler.baseFilename for h in logger.handlers):
        logger.warning(f"FileHandler for {filename} already exists for githours logger.")
        return None

    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(format_string))
    logger.addHandler(handler)
    return handler


def configure_cli_logging(verbose: bool = False, log_file: str | None = None) -> None:
    """Logging setup used by the ``git-hours`` command.

    Output goes to stderr so that stdout carries only the JSON report. Without ``verbose``
    only warnings and errors are shown.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    set_log_level(logging.DEBUG if log_file is not None else level)
    add_stream_handler(level=level, stream=sys.stderr)
    if log_file is not None:
        add_file_handler(log_file, level=logging.DEBUG)


def remove_all_handlers() -> None:
    """Remove every handler from the githours logger except the default NullHandler."""
    for handler in logger.handlers[:]:
        if not isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)
            handler.close()


__all__ = [
    "DEFAULT_FORMAT",
    "logger",
    "get_logger",
    "set_log_level",
    "add_stream_handler",
    "add_file_handler",
    "configure_cli_logging",
    "remove_all_handlers",
]
