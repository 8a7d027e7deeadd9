"""Host capability probes used when resolving VM resources at launch time."""

from __future__ import annotations

import os

from .util import which


def host_cpu_count() -> int | None:
    try:
        count = os.cpu_count()
    except Exception:
        return None
    return int(count) if count else None


def check_commands(*cmds: str) -> list[str]:
    """Return the subset of ``cmds`` not found on PATH."""
    return [c for c in cmds if which(c) is None]
