"""Content Modeller - form display hierarchy tooling for Drupal config exports."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("content-modeller")
except PackageNotFoundError:
    # Package not installed (development mode without editable install)
    __version__ = "1.0.0"

__all__ = ["__version__"]
