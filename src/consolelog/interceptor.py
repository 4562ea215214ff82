"""Console interception: route console calls to named loggers.

Usage::

    import consolelog
    consolelog.install(ignore=["myapp.vendor"], debug="myapp:*")
    console.log("hello")     # -> logging.getLogger("myapp.server").debug("hello")
    consolelog.restore()

Each call is attributed to the file that made it (see ``resolver``). With
debugging enabled, lines in the debug convention are unpacked first so
``"  \\x1b[94mapp:db\\x1b[90m connected"`` is logged as "connected" on
``<caller>.app.db``.
"""

import contextlib
import os
import pprint
from dataclasses import dataclass, field
from typing import Callable

from loguru import logger

from . import dbug
from .config import config
from .console import METHOD_NAMES, Console, console
from .inspector import capture_stack
from .log import get_logger, log_call
from .parser import extract_level, strip_level, try_parse
from .resolver import NameResolver

# Console methods that map straight onto a logger severity
ALIASES = ("trace", "debug", "info", "warn", "error")

_PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))


@dataclass
class Session:
    root: str
    ignore: tuple[str, ...]
    debugging: bool
    resolver: NameResolver
    originals: dict[str, Callable] = field(default_factory=dict)
    # raw debug namespace -> logger, so the stack is only walked once per namespace
    debug_cache: dict = field(default_factory=dict)
    previous_hook: Callable | None = None

    def ignored(self, name: str) -> bool:
        # Plain prefix match: "app.se" also covers "app.server".
        return any(name.startswith(prefix) for prefix in self.ignore)


def _caller_dir() -> str:
    """Directory of the nearest frame outside this package."""
    for site in capture_stack():
        filename = site.filename
        if not filename or filename.startswith("<") or filename == contextlib.__file__:
            continue
        if os.path.dirname(os.path.abspath(filename)) != _PACKAGE_DIR:
            return os.path.dirname(os.path.abspath(filename))
    return os.getcwd()


def _apply_debug_env(debug) -> None:
    if debug is True:
        os.environ["DEBUG"] = "*"
    elif isinstance(debug, str) and debug:
        current = os.environ.get("DEBUG")
        os.environ["DEBUG"] = f"{current},{debug}" if current else debug


class ConsoleInterceptor:
    """Swaps a console's entry points for logger dispatchers and back."""

    def __init__(self, target: Console = console, get_logger: Callable = get_logger):
        self.target = target
        self.get_logger = get_logger
        self._session: Session | None = None

    @property
    def installed(self) -> bool:
        return self._session is not None

    @property
    def session(self) -> Session | None:
        return self._session

    def install(self, root: str | None = None, ignore=None, debug=None) -> Session:
        """Start routing console calls.

        Args:
            root: Attribution base directory. Defaults to ``config.root``, then
                the directory of the calling file.
            ignore: Logger-name prefixes that keep using the plain console.
            debug: ``True`` to capture all debug namespaces, a namespace
                pattern string to capture some, falsy to leave them alone.
        """
        root = os.path.abspath(root or config.root or _caller_dir())
        ignore = tuple(config.ignore if ignore is None else ignore)
        if debug is None:
            debug = config.debug
        _apply_debug_env(debug)

        previous = self._session
        session = Session(
            root=root,
            ignore=ignore,
            debugging=bool(debug),
            resolver=NameResolver(root),
        )
        if previous is not None:
            # Reconfigure only; the pristine methods stay as first captured.
            session.originals = previous.originals
            session.previous_hook = previous.previous_hook
        else:
            session.originals = {name: self.target.get_method(name) for name in METHOD_NAMES}
            session.previous_hook = dbug.set_hook(self.debug_hook)

        for name in METHOD_NAMES:
            self.target.set_method(name, self._dispatcher(name))
        self._session = session
        logger.debug(
            f"Console intercepted (root={root}, ignore={list(ignore)}, debug={debug!r})"
        )
        return session

    def restore(self) -> None:
        """Put the original console methods back. No-op when not installed."""
        session = self._session
        if session is None:
            return
        for name, method in session.originals.items():
            self.target.set_method(name, method)
        session.originals.clear()
        dbug.set_hook(session.previous_hook)
        self._session = None
        logger.debug("Console restored")

    def _dispatcher(self, method: str) -> Callable:
        if method == "dir":
            def dir_(obj):
                self.dispatch("dir", [obj])
            dir_.__name__ = "dir"
            return dir_

        def alias(*args):
            self.dispatch(method, args)
        alias.__name__ = method
        return alias

    def _forward(self, session: Session, method: str, args) -> None:
        session.originals[method](*args)

    def dispatch(self, method: str, args) -> None:
        """Deliver one intercepted console call."""
        session = self._session
        args = list(args)
        if session is None:
            self.target.get_method(method)(*args)
            return

        if method == "dir":
            # Ignored calls get the raw object; routed ones a readable string.
            parsed, routed = None, [pprint.pformat(args[0])]
        else:
            parsed = try_parse(args[0]) if session.debugging and args else None
            routed = list(args)
        debug_name = None
        if parsed is not None:
            routed[0] = parsed.message
            debug_name = strip_level(parsed.logger_name)

        name = session.resolver.resolve_name(capture_stack(), debug_name)
        if session.ignored(name):
            self._forward(session, method, args)
            return
        log = self.get_logger(name)
        # The registry may normalize the name
        if log.name != name and session.ignored(log.name):
            self._forward(session, method, args)
            return

        if parsed is not None:
            level = extract_level(parsed.logger_name)
        elif method in ALIASES:
            level = method
        else:
            level = "debug"
        log_call(log, level, routed)

    def debug_hook(self, namespace: str, level: str, args: list) -> None:
        """dbug output hook: log debugger calls without formatting them first."""
        session = self._session
        if session is None:
            return
        log = session.debug_cache.get(namespace)
        if log is None:
            name = session.resolver.resolve_name(capture_stack(), namespace.replace(":", "."))
            log = session.debug_cache[namespace] = self.get_logger(name)
        log_call(log, level, args)


_default = ConsoleInterceptor()


def install(root: str | None = None, ignore=None, debug=None) -> Session:
    """Intercept the process-wide ``console``. See ``ConsoleInterceptor.install``."""
    return _default.install(root=root, ignore=ignore, debug=debug)


def restore() -> None:
    _default.restore()


@contextlib.contextmanager
def intercepted(root: str | None = None, ignore=None, debug=None):
    """Intercept the process-wide ``console`` for the duration of a block."""
    session = install(root=root, ignore=ignore, debug=debug)
    try:
        yield session
    finally:
        restore()
