"""
Pipeline stages for document reflow.
"""

from .diagnostics import Diagnostics, PipelineWarning, WarningCode
from .pages import (
    RawPage, CleanedPage, ReconstructionError, InvalidInput,
    coerce_pages, filter_pages,
)
from .cleaner import clean_page, clean_pages
from .columns import reorder_columns
from .joiner import join_pages
from .structure import (
    StructureTag, DetectorPass, StructureDetector,
    default_passes, detect_structure, count_tags,
)
from .normalizer import merge_hyphenation, normalize_text, normalize_reduced
from .assembler import (
    DocumentAssembler, ReconstructedDocument, ReconstructionMetrics,
    NoExtractableText, reconstruct,
)

__all__ = [
    # Diagnostics
    "Diagnostics", "PipelineWarning", "WarningCode",
    # Pages
    "RawPage", "CleanedPage", "ReconstructionError", "InvalidInput",
    "coerce_pages", "filter_pages",
    # Stages
    "clean_page", "clean_pages", "reorder_columns", "join_pages",
    "StructureTag", "DetectorPass", "StructureDetector",
    "default_passes", "detect_structure", "count_tags",
    "merge_hyphenation", "normalize_text", "normalize_reduced",
    # Assembly
    "DocumentAssembler", "ReconstructedDocument", "ReconstructionMetrics",
    "NoExtractableText", "reconstruct",
]
