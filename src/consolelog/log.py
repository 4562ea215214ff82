"""Logger registry and loguru output for routed console calls.

Routed calls land on plain stdlib ``logging`` loggers, so the usual
``logging.getLogger("app.server").setLevel(...)`` configuration applies.
Printing them is up to the host application; ``setup_logging()`` is an
opt-in that forwards stdlib records to a loguru stderr sink::

    import consolelog
    consolelog.setup_logging("INFO")
    consolelog.install()
"""

import os
import sys
import inspect
import logging

from loguru import logger

from .config import config
from .console import format_args

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

# Console severity -> stdlib level
LEVELS = {
    "trace": TRACE,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

_PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))

_configured = False
_sink_id: int | None = None
_previous_root_level: int | None = None


# Intercept stdlib logging → loguru
class InterceptHandler(logging.Handler):
    def emit(self, record):
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Attribute to the first frame outside logging and this package, so
        # logger.disable("consolelog") does not swallow routed calls.
        frame, depth = inspect.currentframe(), 0
        while frame:
            filename = frame.f_code.co_filename
            is_logging = filename == logging.__file__
            is_ours = os.path.dirname(os.path.abspath(filename)) == _PACKAGE_DIR
            if depth > 0 and not (is_logging or is_ours):
                break
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).bind(
            logger_name=record.name
        ).log(level, record.getMessage())


def _routed(record) -> bool:
    return "logger_name" in record["extra"]


def setup_logging(level: str | None = None) -> int:
    """Print routed records through a loguru stderr sink. Opt-in, idempotent.

    Other loguru sinks are left alone and only records that came through
    ``InterceptHandler`` reach the new sink. The root logger is opened up to
    every level so per-logger levels decide what gets through.
    Returns the loguru sink id.
    """
    global _configured, _sink_id, _previous_root_level
    if _configured:
        return _sink_id
    _configured = True

    _sink_id = logger.add(
        sys.stderr,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level:<7} | {extra[logger_name]} | {message}",
        level=(level or config.log_level).upper(),
        filter=_routed,
        colorize=True,
    )

    root = logging.getLogger()
    if not any(isinstance(h, InterceptHandler) for h in root.handlers):
        root.addHandler(InterceptHandler())
    _previous_root_level = root.level
    root.setLevel(0)
    return _sink_id


def teardown_logging() -> None:
    """Undo ``setup_logging``."""
    global _configured, _sink_id, _previous_root_level
    if not _configured:
        return
    if _sink_id is not None:
        logger.remove(_sink_id)
    root = logging.getLogger()
    for handler in [h for h in root.handlers if isinstance(h, InterceptHandler)]:
        root.removeHandler(handler)
    if _previous_root_level is not None:
        root.setLevel(_previous_root_level)
    _configured = False
    _sink_id = None
    _previous_root_level = None


def get_logger(name: str) -> logging.Logger:
    """Registry lookup: the logger registered under the dotted ``name``."""
    return logging.getLogger(name)


def log_call(log: logging.Logger, level: str, args) -> None:
    """Log console-style ``args`` on ``log`` at the named console severity."""
    log.log(LEVELS.get(level, logging.DEBUG), format_args(args))
