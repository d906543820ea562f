"""Locating ``pkgcost.toml``.

``$PKGCOST_CONFIG`` pins the file outright. Otherwise the nearest
``pkgcost.toml`` in the start directory or any of its parents wins, the way
``go`` finds ``go.mod``.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "pkgcost.toml"
CONFIG_ENV_VAR = "PKGCOST_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Path of the config file that applies to *start* (default: CWD), if any.

    A ``$PKGCOST_CONFIG`` naming a missing file means "no config", never a
    fallback to discovery.
    """
    pinned = os.environ.get(CONFIG_ENV_VAR)
    if pinned:
        path = Path(pinned)
        return path if path.is_file() else None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None
