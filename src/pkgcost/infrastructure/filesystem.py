"""On-disk file sizes for package cost collection."""

from __future__ import annotations

import os

from pkgcost.domain.errors import CostCollectionError


class StatFileSizeProvider:
    """Reports file sizes via ``os.stat``."""

    def size(self, path: str) -> int:
        try:
            return os.stat(path).st_size
        except OSError as exc:
            msg = f"while getting file size of {path}: {exc.strerror or exc}"
            raise CostCollectionError(msg, path=path) from exc
