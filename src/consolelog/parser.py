"""Recognizers for debug-convention output lines.

Two shapes are understood, both produced by ``consolelog.dbug`` (and by the
convention it follows):

colored, when writing to a TTY::

    "  \\x1b[94mapp:server \\x1b[34m\\x1b[90mlistening\\x1b[34m +2ms\\x1b[0m"

timestamped, otherwise::

    "Sat, 17 Oct 2026 12:00:00 GMT app:server listening"

Namespaces use ``:`` separators; parsed names come back dotted.
"""

import re
from dataclasses import dataclass

# Two leading spaces, a bright foreground color (90-99), the name, then the
# grey (90) color that starts the message.
COLORED_RE = re.compile(r"^  \x1b\[9\dm(.+)\x1b\[90m(.+)\Z")

# Date.toUTCString() / email.utils.formatdate(usegmt=True)
TIMESTAMP_RE = re.compile(
    r"(?:Mon|Tue|Wed|Thu|Fri|Sat|Sun), \d{2} "
    r"(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec) "
    r"\d{4} \d{2}:\d{2}:\d{2} GMT"
)

ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")

LEVELS = ("debug", "info", "warn", "error")
BASELINE_LEVEL = "debug"


@dataclass(frozen=True)
class ParseResult:
    logger_name: str  # dotted, may end with a level segment
    message: str


def strip_ansi(text: str) -> str:
    return ANSI_RE.sub("", text)


def find_timestamp(text: str) -> str | None:
    match = TIMESTAMP_RE.search(text)
    return match.group(0) if match else None


def has_timestamp(text: str) -> bool:
    return find_timestamp(text) is not None


def parse_colored(text: str) -> ParseResult | None:
    match = COLORED_RE.match(text)
    if not match:
        return None
    name = strip_ansi(match.group(1)).strip()
    message = strip_ansi(match.group(2)).strip()
    return ParseResult(name.replace(":", "."), message)


def parse_timestamped(text: str) -> ParseResult | None:
    stamp = find_timestamp(text)
    if stamp is None:
        return None
    rest = text.replace(stamp, "", 1).strip()
    parts = rest.split(None, 1)
    if not parts:
        return None
    namespace = parts[0]
    message = parts[1].strip() if len(parts) > 1 else ""
    return ParseResult(namespace.replace(":", "."), message)


def try_parse(text) -> ParseResult | None:
    """Parse a console argument as debug-convention output, if it is one."""
    if not isinstance(text, str):
        return None
    return parse_colored(text) or parse_timestamped(text)


def extract_level(name: str | None) -> str:
    """Level named by the last segment of ``name``, else ``debug``.

    >>> extract_level("app.server.warn")
    'warn'
    """
    if name:
        for level in reversed(LEVELS):
            if name.endswith("." + level):
                return level
    return BASELINE_LEVEL


def strip_level(name: str | None) -> str | None:
    """Drop one trailing ``.<level>`` segment from ``name``."""
    if not name or "." not in name:
        return name
    for level in reversed(LEVELS):
        suffix = "." + level
        if name.endswith(suffix):
            return name[: -len(suffix)]
    return name
