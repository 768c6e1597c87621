"""Componentization: hoist duplicate JSX subtrees into reusable components."""

from .extractor import ExtractionResult, extract_components, extract_document
from .fingerprint import FingerprintOptions, compute_fingerprint
from .options import DEFAULT_SKIP_TAGS, ExtractorOptions
from .rewriter import ExtractedComponent

__all__ = [
    "DEFAULT_SKIP_TAGS",
    "ExtractedComponent",
    "ExtractionResult",
    "ExtractorOptions",
    "FingerprintOptions",
    "compute_fingerprint",
    "extract_components",
    "extract_document",
]
