"""exparse - replay chat exports to estimate pay-per-token API cost."""

from exparse._version import version as __version__

__all__ = ["__version__"]
