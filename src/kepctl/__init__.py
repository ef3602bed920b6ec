"""kepctl package root."""

from kepctl.exceptions import KepctlError

__all__ = ["__version__", "KepctlError"]

__version__ = "0.1.0"
