"""scopectl — run build and test commands only for affected workspace packages."""

__version__ = "0.3.0"
