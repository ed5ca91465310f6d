"""
Configuration and constants for the document reflow pipeline.

This module provides:
- Global configuration settings
- Per-stage processing parameters
- Inline decoration markers
- Environment overrides
"""

import os
from dataclasses import dataclass, field
from typing import List
import logging

# ============================================================================
# Logging Configuration
# ============================================================================

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger("docreflow")


# ============================================================================
# Processing Configuration
# ============================================================================

@dataclass
class FilterConfig:
    """Page filter configuration."""
    min_content_chars: int = 20  # Pages this short (or shorter) are dropped
    blank_page_phrases: List[str] = field(default_factory=lambda: [
        "intentionally left blank",
    ])


@dataclass
class CleanerConfig:
    """Header/footer cleanup configuration."""
    edge_lines: int = 2  # Lines at each end of a page eligible for removal
    min_line_chars: int = 3


@dataclass
class ColumnConfig:
    """Multi-column repair configuration."""
    enabled: bool = True
    max_fragment_chars: int = 15


@dataclass
class DetectorConfig:
    """Structure detector configuration."""
    chapter_rule_width: int = 50
    section_rule_width: int = 30
    caps_rule_width: int = 25
    table_rule_width: int = 50
    bibliography_rule_width: int = 30
    min_caps_words: int = 5
    min_title_words: int = 3
    # Pass ids listed here are skipped
    disabled_passes: List[str] = field(default_factory=list)


@dataclass
class NormalizerConfig:
    """Final cleanup configuration."""
    max_length: int = 75000
    repair_spaced_letters: bool = True
    # Hyphenated compounds that keep their hyphen when merged
    compound_prefixes: List[str] = field(default_factory=lambda: [
        "self", "non", "pre", "post", "anti", "co", "re"
    ])


@dataclass
class PipelineConfig:
    """Main pipeline configuration."""
    filter: FilterConfig = field(default_factory=FilterConfig)
    cleaner: CleanerConfig = field(default_factory=CleanerConfig)
    columns: ColumnConfig = field(default_factory=ColumnConfig)
    detector: DetectorConfig = field(default_factory=DetectorConfig)
    normalizer: NormalizerConfig = field(default_factory=NormalizerConfig)

    # "auto" switches to reduced processing above large_input_threshold,
    # "full" always runs structure detection, "reduced" never does.
    processing_mode: str = "auto"
    large_input_threshold: int = 200_000


PROCESSING_MODES = ("auto", "full", "reduced")


# ============================================================================
# Environment Overrides
# ============================================================================

def _int_from_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def get_config() -> PipelineConfig:
    """Get the default pipeline configuration with environment overrides."""
    config = PipelineConfig()

    config.normalizer.max_length = _int_from_env(
        "DOC_REFLOW_MAX_LENGTH", config.normalizer.max_length
    )
    config.large_input_threshold = _int_from_env(
        "DOC_REFLOW_LARGE_INPUT_THRESHOLD", config.large_input_threshold
    )

    mode = os.environ.get("DOC_REFLOW_MODE", "").strip().lower()
    if mode:
        if mode not in PROCESSING_MODES:
            raise ValueError(
                f"DOC_REFLOW_MODE must be one of {PROCESSING_MODES}, got {mode!r}"
            )
        config.processing_mode = mode

    if os.environ.get("DOC_REFLOW_DEBUG", "").lower() == "true":
        logger.setLevel(logging.DEBUG)

    return config


# ============================================================================
# Inline Markers
# ============================================================================

class Markers:
    """Decorations embedded in the output text to tag structure."""
    CHAPTER = "📖"
    SECTION = "🔸"
    SUBSECTION = "▪️"
    CAPS_HEADING = "🔷"
    TITLE_HEADING = "📝"
    TABLE_HEADER = "📋 TABLE:"
    TABLE_ROW = "📊"
    TABLE_LEADER = "···········"
    BULLET = "•"
    NOTE = "🔗 Note"
    LINK = "🔗"
    CAPTION = "🖼️"
    BIBLIOGRAPHY = "📚"
    CITATION = "📖"
    MATH_LINE = "🧮"
    MATH_OPEN = "『"
    MATH_CLOSE = "』"

    HEAVY_RULE = "━"
    LIGHT_RULE = "─"
    DOUBLE_RULE = "═"


# Replaces a trailing page-boundary hyphen in the joined stream
SOFT_HYPHEN = "\u00ad"
