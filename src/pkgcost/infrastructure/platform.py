"""Platform-root discovery and standard-library classification.

A package is platform-internal when ``<GOROOT>/src/<import path>`` exists.
Results are memoized per :class:`RootClassifier` instance, never globally,
so concurrent analyses each carry their own cache.
"""

from __future__ import annotations

import os
import sys
import threading
from pathlib import Path, PurePosixPath

from pkgcost.domain.errors import ConfigurationError
from pkgcost.domain.graph import NATIVE_INTEROP_IMPORT

PLATFORM_ROOT_ENV_VAR = "GOROOT"


def default_platform_root() -> Path:
    """Where the Go distribution lives when ``$GOROOT`` is unset."""
    if sys.platform == "win32":
        return Path("C:\\Go")
    return Path("/usr/local/go")


def discover_platform_root(configured: str | Path | None = None) -> Path:
    """Resolve the platform root: explicit setting, then ``$GOROOT``, then OS default.

    Only the OS default is checked for existence; an explicitly configured
    root is trusted as given.

    Raises:
        ConfigurationError: no root was configured and the default is missing.
    """
    if configured:
        return Path(configured)

    env_root = os.environ.get(PLATFORM_ROOT_ENV_VAR)
    if env_root:
        return Path(env_root)

    root = default_platform_root()
    if not root.exists():
        msg = f"({root}) does not exist, please set ${PLATFORM_ROOT_ENV_VAR}"
        raise ConfigurationError(msg, platform_root=str(root))
    return root


class RootClassifier:
    """Decides which imports are excluded from the analyzed graph."""

    def __init__(self, platform_root: Path) -> None:
        self.platform_root = platform_root
        self._cache: dict[str, bool] = {}
        self._lock = threading.Lock()

    def is_platform_package(self, import_path: str) -> bool:
        with self._lock:
            cached = self._cache.get(import_path)
        if cached is not None:
            return cached

        folder = self.platform_root / "src" / Path(*PurePosixPath(import_path).parts)
        result = folder.exists()
        with self._lock:
            self._cache[import_path] = result
        return result

    def is_native_interop(self, import_path: str) -> bool:
        return import_path == NATIVE_INTEROP_IMPORT

    def is_skipped(self, import_path: str) -> bool:
        """True for platform packages and the cgo pseudo-import (never looked up)."""
        if self.is_native_interop(import_path):
            return True
        return self.is_platform_package(import_path)

    def classify(self, import_path: str) -> str:
        """Human-facing label: ``native``, ``platform`` or ``external``."""
        if self.is_native_interop(import_path):
            return "native"
        return "platform" if self.is_platform_package(import_path) else "external"

    @property
    def cache_size(self) -> int:
        with self._lock:
            return len(self._cache)
