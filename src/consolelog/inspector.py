"""Call-site capture: which files are on the stack right now."""

import sys
from dataclasses import dataclass


@dataclass(frozen=True)
class CallSite:
    filename: str  # "" when the frame has no code file
    function: str


def capture_stack(skip: int = 0) -> list[CallSite]:
    """Return the current call stack, newest frame first.

    The frame of ``capture_stack`` itself is never included; ``skip`` drops
    that many additional frames from the top.
    """
    frame = sys._getframe(1)
    sites: list[CallSite] = []
    while frame is not None:
        code = frame.f_code
        sites.append(CallSite(code.co_filename or "", code.co_name or ""))
        frame = frame.f_back
    return sites[skip:]
