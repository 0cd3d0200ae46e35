"""Entity pre-extraction: ordered regex rules over the raw document text."""

from .extractor import extract
from .schemas import ExtractedEntities, StudentProfile

__all__ = ["extract", "ExtractedEntities", "StudentProfile"]
