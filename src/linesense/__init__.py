"""LineSense: context-aware shell command suggestions and explanations."""

from linesense.version import __version__

__all__ = ["__version__"]
