"""Namespaced debug output, switched on by the DEBUG environment variable.

Usage::

    from consolelog.dbug import dbug
    log = dbug("app:server")
    log("listening on %d", 3000)      # debug level
    log.warn("slow request")

    $ DEBUG=app:* python server.py

Lines go to stderr, colored when stderr is a terminal and prefixed with a
UTC timestamp otherwise. Everything passes through a single module hook so
another logging system can take the output over (see ``set_hook``).
"""

import os
import re
import sys
import time
from email.utils import formatdate
from typing import Callable

from .console import format_args

Hook = Callable[[str, str, list], None]

_COLORS = (6, 2, 3, 4, 5, 1)
_last_call: dict[str, float] = {}


def _patterns() -> tuple[list[re.Pattern], list[re.Pattern]]:
    names, skips = [], []
    for pattern in re.split(r"[\s,]+", os.environ.get("DEBUG", "")):
        if not pattern:
            continue
        target = skips if pattern.startswith("-") else names
        pattern = pattern.lstrip("-")
        target.append(re.compile("^" + re.escape(pattern).replace(r"\*", ".*?") + "$"))
    return names, skips


def enabled(namespace: str) -> bool:
    names, skips = _patterns()
    if any(p.match(namespace) for p in skips):
        return False
    return any(p.match(namespace) for p in names)


def _color(namespace: str) -> int:
    h = 0
    for ch in namespace:
        h = (h * 31 + ord(ch)) & 0xFFFFFFFF
    return _COLORS[h % len(_COLORS)]


def _default_emit(namespace: str, level: str, args: list) -> None:
    name = namespace if level == "debug" else f"{namespace}:{level}"
    message = format_args(args)
    stream = sys.stderr
    if stream.isatty():
        now = time.monotonic()
        ms = int((now - _last_call.get(namespace, now)) * 1000)
        _last_call[namespace] = now
        c = _color(namespace)
        line = f"  \x1b[9{c}m{name} \x1b[3{c}m\x1b[90m{message}\x1b[3{c}m +{ms}ms\x1b[0m"
    else:
        line = f"{formatdate(usegmt=True)} {name} {message}"
    stream.write(line + "\n")


_hook: Hook = _default_emit


def get_hook() -> Hook:
    return _hook


def set_hook(fn: Hook) -> Hook:
    """Route all debugger output to ``fn``; returns the hook it replaced."""
    global _hook
    previous, _hook = _hook, fn
    return previous


def reset_hook() -> None:
    global _hook
    _hook = _default_emit


class Debugger:
    def __init__(self, namespace: str):
        self.namespace = namespace

    @property
    def enabled(self) -> bool:
        return enabled(self.namespace)

    def _emit(self, level: str, args) -> None:
        if self.enabled:
            _hook(self.namespace, level, list(args))

    def __call__(self, *args):
        self._emit("debug", args)

    def debug(self, *args):
        self._emit("debug", args)

    def info(self, *args):
        self._emit("info", args)

    def warn(self, *args):
        self._emit("warn", args)

    def error(self, *args):
        self._emit("error", args)


def dbug(namespace: str) -> Debugger:
    return Debugger(namespace)
