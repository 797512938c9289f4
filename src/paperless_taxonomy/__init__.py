"""Public package surface for the paperless taxonomy client."""

from .client import DEFAULT_URL, Paperless
from .taxonomy import *
from .taxonomy import __all__ as _taxonomy_all


__all__ = ["DEFAULT_URL", "Paperless", *_taxonomy_all]
