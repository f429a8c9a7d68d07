"""Locating the executable behind a command name."""

from __future__ import annotations

import os
from collections.abc import Iterable


def resolve_command(name: str, path_dirs: Iterable[str]) -> str | None:
    """Return the path to run for ``name``, or None if none is found.

    A name containing a slash is returned unchanged. Otherwise each entry of
    ``path_dirs`` (which already ends with a slash) is tried in order and the
    first existing, executable candidate is returned.
    """
    if not name:
        return None
    if "/" in name:
        return name
    for directory in path_dirs:
        candidate = directory + name
        if os.access(candidate, os.F_OK) and os.access(candidate, os.X_OK):
            return candidate
    return None