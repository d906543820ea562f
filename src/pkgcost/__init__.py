"""pkgcost — measure what a Go package really pulls in."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pkgcost")
except PackageNotFoundError:
    # Running from a source checkout without an install
    __version__ = "unknown"

__all__ = ["__version__"]
