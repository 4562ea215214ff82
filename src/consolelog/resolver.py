"""Turn a captured call stack into a dotted logger name.

The name is the calling file's path relative to the project root, prefixed
with the project's directory name::

    root = /srv/connect, caller = /srv/connect/lib/session.py
    -> "connect.session"

``lib`` directories are dropped from the middle of the name since that is
where most project code lives anyway.
"""

import os
from typing import Iterable, Sequence

from .inspector import CallSite

_PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))

# Modules that sit between the caller and the resolver during dispatch.
SELF_FILES = frozenset(
    os.path.join(_PACKAGE_DIR, name)
    for name in ("interceptor.py", "resolver.py", "inspector.py")
)

# The console sink. Console.trace re-enters through console.error, so its
# frame can show up above the real caller.
INSTRUMENTATION_FILE = os.path.join(_PACKAGE_DIR, "console.py")

# Skipped only for calls that carry a debug namespace.
DEBUG_PATHS = (
    os.path.join("consolelog", "dbug.py"),
    os.path.join("logging", "__init__.py"),
)


def project_name(root: str) -> str:
    """Top-level name segment for ``root``: its basename without extension."""
    base = os.path.basename(os.path.normpath(root))
    return os.path.splitext(base)[0] or "root"


class NameResolver:
    """Derives logger names for call sites under one project root."""

    def __init__(
        self,
        root: str,
        self_files: Iterable[str] = SELF_FILES,
        instrumentation_file: str = INSTRUMENTATION_FILE,
        debug_paths: Sequence[str] = DEBUG_PATHS,
    ):
        self.root = os.path.abspath(root)
        self.project = project_name(self.root)
        self.self_files = frozenset(self_files)
        self.instrumentation_file = instrumentation_file
        self.debug_paths = tuple(debug_paths)

    def _skip(self, filename: str, debugging: bool) -> bool:
        if filename in self.self_files or filename == self.instrumentation_file:
            return True
        return debugging and any(filename.endswith(p) for p in self.debug_paths)

    def caller_file(self, frames: Sequence[CallSite], debug_name: str | None = None) -> str:
        """File of the first frame that is not instrumentation.

        Falls back to the last frame when everything is skippable, and to
        ``""`` for an empty stack.
        """
        filename = ""
        for site in frames:
            filename = site.filename
            if not self._skip(filename, bool(debug_name)):
                break
        return filename

    def _relative(self, filename: str) -> str:
        if not filename:
            return ""
        if filename.startswith("<"):
            # <stdin>, <string>, <frozen importlib._bootstrap>
            return filename.strip("<>").replace(" ", "_")
        try:
            rel = os.path.relpath(filename, self.root)
        except ValueError:
            # Different drive on Windows
            rel = os.path.basename(filename)
        return os.path.splitext(rel)[0]

    def module_name(self, filename: str) -> str:
        rel = self._relative(filename)
        if not rel:
            return self.project
        name = os.path.normpath(os.path.join(self.project, rel))
        name = name.replace("\\", ".").replace("/", ".")
        name = name.replace(".lib.", ".")
        name = ".".join(part for part in name.split(".") if part)
        return name or self.project

    def resolve_name(self, frames: Sequence[CallSite], debug_name: str | None = None) -> str:
        name = self.module_name(self.caller_file(frames, debug_name))
        if debug_name:
            if name.endswith("." + debug_name):
                return name
            name = f"{name}.{debug_name}"
        return name
