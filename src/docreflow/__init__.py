"""
Document Reflow Pipeline
========================

Turns raw per-page text extracted from a paginated document into one
continuously readable text body.

Main components:
- Page filtering (blank and boilerplate-only pages)
- Header/footer cleanup
- Multi-column repair
- Page joining with hyphenation repair
- Structure detection (headings, tables, lists, footnotes, captions,
  bibliography, math)
- Paragraph and whitespace normalization
"""

__version__ = "1.0.0"

from .config import PipelineConfig, get_config
from .utils import (
    RawPage, ReconstructedDocument, NoExtractableText, InvalidInput,
    DocumentAssembler, reconstruct,
)

__all__ = [
    "PipelineConfig", "get_config",
    "RawPage", "ReconstructedDocument", "NoExtractableText", "InvalidInput",
    "DocumentAssembler", "reconstruct",
]
