"""manifestlint — pluggable linter for Kubernetes manifests."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("manifestlint")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.1.0-dev"

__all__ = ["__version__"]
