"""Document classification client."""

from .client import (
    ClassificationError,
    ClassificationResult,
    DocumentClassifier,
    NothingExtractedError,
    parse_extraction,
)

__all__ = [
    "ClassificationError",
    "ClassificationResult",
    "DocumentClassifier",
    "NothingExtractedError",
    "parse_extraction",
]
