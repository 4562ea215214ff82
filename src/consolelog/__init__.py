"""consolelog - route console calls to loggers named after their call site."""

__version__ = "0.1.0"

from loguru import logger

# Library diagnostics stay quiet unless the host opts in with
# logger.enable("consolelog").
logger.disable(__name__)

from .console import Console, console
from .interceptor import ConsoleInterceptor, install, intercepted, restore
from .log import get_logger, setup_logging, teardown_logging

__all__ = [
    "Console",
    "ConsoleInterceptor",
    "console",
    "get_logger",
    "install",
    "intercepted",
    "restore",
    "setup_logging",
    "teardown_logging",
]
