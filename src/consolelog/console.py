"""Process-wide console object: the raw output sink that gets intercepted."""

import json
import pprint
import re
import sys
import traceback
from typing import Any, Callable

METHOD_NAMES = ("trace", "debug", "dir", "error", "info", "log", "warn")

_FORMAT_RE = re.compile(r"%[sdifjoO%]")


def format_args(args) -> str:
    """Join console arguments into one line, printf style.

    ``format_args(["%s is %d", "x", 3, "extra"])`` -> ``"x is 3 extra"``
    """
    if not args:
        return ""
    first, rest = args[0], list(args[1:])
    if not isinstance(first, str):
        return " ".join(_to_str(a) for a in args)

    def _sub(match: re.Match) -> str:
        token = match.group(0)
        if token == "%%":
            return "%"
        if not rest:
            return token
        value = rest.pop(0)
        if token == "%s":
            return _to_str(value)
        if token in ("%d", "%i"):
            try:
                return str(int(value))
            except (TypeError, ValueError):
                return "NaN"
        if token == "%f":
            try:
                return str(float(value))
            except (TypeError, ValueError):
                return "NaN"
        if token == "%j":
            try:
                return json.dumps(value)
            except (TypeError, ValueError):
                return "[Circular]"
        return pprint.pformat(value)

    text = _FORMAT_RE.sub(_sub, first)
    if rest:
        text = " ".join([text] + [_to_str(a) for a in rest])
    return text


def _to_str(value: Any) -> str:
    return value if isinstance(value, str) else str(value)


class Console:
    """A console with swappable entry points.

    Every public method looks itself up in a per-instance dispatch table, so
    replacing an entry with ``set_method`` changes what ``console.log(...)``
    does without touching the class.
    """

    def __init__(self, stdout=None, stderr=None):
        self._stdout = stdout
        self._stderr = stderr
        self._table: dict[str, Callable] = {
            "trace": self._trace,
            "debug": self._out,
            "dir": self._dir,
            "error": self._err,
            "info": self._out,
            "log": self._out,
            "warn": self._err,
        }

    @property
    def stdout(self):
        return self._stdout if self._stdout is not None else sys.stdout

    @property
    def stderr(self):
        return self._stderr if self._stderr is not None else sys.stderr

    def get_method(self, name: str) -> Callable:
        if name not in self._table:
            raise KeyError(f"Unknown console method: {name}")
        return self._table[name]

    def set_method(self, name: str, fn: Callable) -> None:
        if name not in self._table:
            raise KeyError(f"Unknown console method: {name}")
        self._table[name] = fn

    def trace(self, *args):
        return self._table["trace"](*args)

    def debug(self, *args):
        return self._table["debug"](*args)

    def dir(self, obj):
        return self._table["dir"](obj)

    def error(self, *args):
        return self._table["error"](*args)

    def info(self, *args):
        return self._table["info"](*args)

    def log(self, *args):
        return self._table["log"](*args)

    def warn(self, *args):
        return self._table["warn"](*args)

    # Raw writers

    def _out(self, *args):
        self.stdout.write(format_args(args) + "\n")

    def _err(self, *args):
        self.stderr.write(format_args(args) + "\n")

    def _dir(self, obj):
        self.stdout.write(pprint.pformat(obj) + "\n")

    def _trace(self, *args):
        # Goes through the public ``error`` entry, which may be intercepted.
        stack = "".join(traceback.format_stack()[:-1]).rstrip("\n")
        message = format_args(args)
        self.error(f"Trace: {message}\n{stack}" if message else f"Trace\n{stack}")


console = Console()
