"""Attimo -- user-defined record categories with an open/close lifecycle."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("attimo")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

from attimo.core import AttimoDB
from attimo.datatypes import CategoryTemplate, Datatype

__all__ = ["AttimoDB", "CategoryTemplate", "Datatype", "__version__"]
