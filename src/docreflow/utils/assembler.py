"""
Document assembler module for document reflow.

Provides:
- ReconstructedDocument result model
- Pipeline orchestration (filter, clean, reorder, join, detect, normalize)
- Processing mode policy for very large inputs
- Metrics calculation
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

import numpy as np

from ..config import PipelineConfig, PROCESSING_MODES
from .cleaner import clean_page
from .columns import reorder_columns
from .diagnostics import Diagnostics, PipelineWarning, WarningCode
from .joiner import join_pages
from .normalizer import merge_hyphenation, normalize_reduced, normalize_text
from .pages import CleanedPage, RawPage, ReconstructionError, coerce_pages, filter_pages
from .structure import DetectorPass, StructureDetector, count_tags

logger = logging.getLogger(__name__)


# ============================================================================
# Exceptions
# ============================================================================

class NoExtractableText(ReconstructionError):
    """No page carried readable text; the caller should offer another view."""

    def __init__(self, message: str, warnings: Iterable[PipelineWarning] = ()):
        super().__init__(message)
        self.warnings = tuple(warnings)


# ============================================================================
# Data Classes
# ============================================================================

MODE_FULL = "full"
MODE_REDUCED = "reduced"


@dataclass
class ReconstructionMetrics:
    """Metrics about one reconstruction run."""
    pages_received: int = 0
    pages_kept: int = 0
    pages_dropped: int = 0
    empty_pages: int = 0
    boilerplate_lines_removed: int = 0

    mean_page_chars: float = 0.0
    median_page_chars: float = 0.0
    chars_joined: int = 0
    chars_output: int = 0

    tag_counts: Dict[str, int] = field(default_factory=dict)
    failed_passes: List[str] = field(default_factory=list)
    processing_time_seconds: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pages": {
                "received": self.pages_received,
                "kept": self.pages_kept,
                "dropped": self.pages_dropped,
                "empty": self.empty_pages,
            },
            "boilerplate_lines_removed": self.boilerplate_lines_removed,
            "page_chars": {
                "mean": round(self.mean_page_chars, 1),
                "median": round(self.median_page_chars, 1),
            },
            "chars_joined": self.chars_joined,
            "chars_output": self.chars_output,
            "tags": self.tag_counts,
            "failed_passes": self.failed_passes,
            "processing_time_seconds": round(self.processing_time_seconds, 3)
        }


@dataclass(frozen=True)
class ReconstructedDocument:
    """Final readable text plus non-fatal warnings."""
    text: str
    warnings: Tuple[PipelineWarning, ...] = ()
    mode: str = MODE_FULL
    metrics: Optional[ReconstructionMetrics] = None

    def has_warning(self, code: str) -> bool:
        return any(w.code == code for w in self.warnings)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "mode": self.mode,
            "warnings": [w.to_dict() for w in self.warnings],
            "metrics": self.metrics.to_dict() if self.metrics else {}
        }


# ============================================================================
# Document Assembler
# ============================================================================

class DocumentAssembler:
    """
    Orchestrates the document reflow pipeline.

    Coordinates:
    - Page filtering
    - Header/footer cleanup
    - Column repair
    - Page joining
    - Structure detection
    - Normalization

    The assembler keeps no state between calls; reconstruct() is safe to call
    from several threads at once.
    """

    def __init__(
        self,
        config: Optional[PipelineConfig] = None,
        passes: Optional[Iterable[DetectorPass]] = None
    ):
        self.config = config or PipelineConfig()
        if self.config.processing_mode not in PROCESSING_MODES:
            raise ValueError(
                f"processing_mode must be one of {PROCESSING_MODES}, "
                f"got {self.config.processing_mode!r}"
            )
        self._passes = list(passes) if passes is not None else None
        self._detector = None

    @property
    def detector(self) -> StructureDetector:
        if self._detector is None:
            self._detector = StructureDetector(self.config.detector, self._passes)
        return self._detector

    def select_mode(self, joined_length: int) -> str:
        """
        Pick full or reduced processing.

        In "auto" mode, inputs above large_input_threshold skip structure
        detection and get only hyphenation merge and whitespace cleanup.
        """
        mode = self.config.processing_mode
        if mode == "auto":
            if joined_length > self.config.large_input_threshold:
                return MODE_REDUCED
            return MODE_FULL
        return mode

    def reconstruct(self, pages: Optional[Iterable[Any]]) -> ReconstructedDocument:
        """
        Turn raw per-page text into one readable document.

        Args:
            pages: Page Source output: RawPage, (index, text) or mappings

        Returns:
            ReconstructedDocument with text, warnings, mode and metrics

        Raises:
            InvalidInput: If the page list violates the input contract
            NoExtractableText: If no page carries usable text
        """
        start_time = time.time()
        diagnostics = Diagnostics()

        raw_pages = coerce_pages(pages)
        if not raw_pages:
            diagnostics.warn(WarningCode.EMPTY_INPUT, message="No pages supplied")
            raise NoExtractableText("No pages supplied", diagnostics.warnings)

        logger.info(f"Reconstructing document from {len(raw_pages)} pages")

        # 1. Filter pages without usable content
        kept = filter_pages(raw_pages, self.config.filter, diagnostics)
        if not kept:
            raise NoExtractableText(
                f"None of {len(raw_pages)} pages carried extractable text",
                diagnostics.warnings
            )

        # 2. Strip headers/footers
        cleaned = [clean_page(page, self.config.cleaner) for page in kept]

        # 3. Repair multi-column fragments within each page
        if self.config.columns.enabled:
            cleaned = [
                CleanedPage(
                    index=page.index,
                    text=reorder_columns(page.text, self.config.columns.max_fragment_chars),
                    removed_lines=page.removed_lines
                )
                for page in cleaned
            ]

        # 4. Join pages and fuse hyphenated words
        joined = join_pages(cleaned)
        joined = merge_hyphenation(joined, self.config.normalizer.compound_prefixes)
        logger.debug(f"Joined text: {len(joined)} characters")

        # 5-6. Structure detection and normalization
        mode = self.select_mode(len(joined))
        if mode == MODE_FULL:
            tagged = self.detector.detect(joined, diagnostics)
            text = normalize_text(
                tagged, config=self.config.normalizer, diagnostics=diagnostics
            )
        else:
            logger.info(
                f"Reduced processing for {len(joined)} characters "
                f"(threshold {self.config.large_input_threshold}); "
                "structure detection skipped"
            )
            diagnostics.warn(
                WarningCode.REDUCED_PROCESSING, count=len(joined),
                message="Structure detection skipped for a large input"
            )
            text = normalize_reduced(
                joined, config=self.config.normalizer, diagnostics=diagnostics
            )

        elapsed = time.time() - start_time
        metrics = self._calculate_metrics(
            raw_pages, kept, cleaned, joined, text, diagnostics, elapsed
        )
        logger.info(
            f"Reconstructed {metrics.chars_output} characters from "
            f"{metrics.pages_kept} pages in {elapsed:.2f}s"
        )

        return ReconstructedDocument(
            text=text,
            warnings=tuple(diagnostics.warnings),
            mode=mode,
            metrics=metrics
        )

    def _calculate_metrics(
        self,
        raw_pages: List[RawPage],
        kept: List[RawPage],
        cleaned: List[CleanedPage],
        joined: str,
        text: str,
        diagnostics: Diagnostics,
        processing_time: float
    ) -> ReconstructionMetrics:
        """Calculate run-wide metrics."""
        metrics = ReconstructionMetrics()
        metrics.processing_time_seconds = processing_time
        metrics.pages_received = len(raw_pages)
        metrics.pages_kept = len(kept)
        metrics.empty_pages = sum(w.count or 0 for w in diagnostics.of(WarningCode.EMPTY_INPUT))
        metrics.pages_dropped = sum(w.count or 0 for w in diagnostics.of(WarningCode.PAGES_DROPPED))
        metrics.boilerplate_lines_removed = sum(p.removed_lines for p in cleaned)

        page_lengths = np.array([len(p.text) for p in cleaned], dtype=float)
        if page_lengths.size:
            metrics.mean_page_chars = float(np.mean(page_lengths))
            metrics.median_page_chars = float(np.median(page_lengths))

        metrics.chars_joined = len(joined)
        metrics.chars_output = len(text)
        metrics.tag_counts = {tag.value: n for tag, n in count_tags(text).items()}
        metrics.failed_passes = [
            w.pass_id for w in diagnostics.of(WarningCode.DETECTOR_FAILED)
        ]
        return metrics


def reconstruct(
    pages: Optional[Iterable[Any]],
    config: Optional[PipelineConfig] = None,
    passes: Optional[Iterable[DetectorPass]] = None
) -> ReconstructedDocument:
    """Run the full reflow pipeline once with a fresh assembler."""
    return DocumentAssembler(config, passes).reconstruct(pages)
