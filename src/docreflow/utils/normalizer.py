"""
Final text normalization.

Provides:
- Hyphenation merge (line breaks and page-boundary soft hyphens)
- Paragraph reflow (mid-sentence line merge, sentence-end paragraph breaks)
- Whitespace and punctuation spacing cleanup
- Length capping with a recorded warning

normalize_text is idempotent on its own output.
"""

import logging
import re
from typing import Iterable, Optional

from ..config import NormalizerConfig, SOFT_HYPHEN
from .diagnostics import Diagnostics, WarningCode

logger = logging.getLogger(__name__)

# Any whitespace except the newline
_HSPACE = r"[^\S\n]"


# ============================================================================
# Hyphenation
# ============================================================================

def merge_hyphenation(text: str, compound_prefixes: Optional[Iterable[str]] = None) -> str:
    """
    Fix words hyphenated across lines or pages.

    Example: "docu-\\nment" -> "document", "self-\\naware" -> "self-aware"
    """
    if compound_prefixes is None:
        compound_prefixes = NormalizerConfig().compound_prefixes
    prefixes = {p.lower() for p in compound_prefixes}

    def replace_hyphen(match):
        word1 = match.group(1)
        word2 = match.group(2)
        # Likely a real hyphenated compound word
        if word1.lower() in prefixes:
            return f"{word1}-{word2}"
        return word1 + word2

    text = re.sub(rf"([A-Za-z]\w*){SOFT_HYPHEN}([a-z]\w*)", replace_hyphen, text)
    # A soft hyphen not followed by a word keeps a visible hyphen
    text = text.replace(SOFT_HYPHEN, "-")
    return re.sub(rf"(\w+)-{_HSPACE}*\n{_HSPACE}*([a-z]\w*)", replace_hyphen, text)


# ============================================================================
# Normalization Steps
# ============================================================================

def merge_continuation_lines(text: str) -> str:
    """Join a lowercase/comma-ending line with a lowercase-starting next line."""
    return re.sub(rf"([a-z,]){_HSPACE}*\n{_HSPACE}*(?=[a-z])", r"\1 ", text)


def insert_paragraph_breaks(text: str) -> str:
    """Sentence punctuation, line break, uppercase letter -> paragraph break."""
    return re.sub(rf"([.!?]){_HSPACE}*\n{_HSPACE}*(?=[A-Z])", "\\1\n\n", text)


def collapse_whitespace(text: str) -> str:
    """Collapse horizontal whitespace runs and trim every line."""
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = re.sub(rf"{_HSPACE}+", " ", text)
    return re.sub(r"^ | $", "", text, flags=re.MULTILINE)


def fix_punctuation_spacing(text: str) -> str:
    """No space before punctuation, one space after a sentence end."""
    text = re.sub(rf"{_HSPACE}+([.!?,:;])", r"\1", text)
    return re.sub(r"([a-z0-9)\]\"'][.!?])(?=[A-Z])", r"\1 ", text)


def repair_spaced_letters(text: str) -> str:
    """Re-fuse letter-spaced words such as 'T h e'."""
    return re.sub(
        r"(?<!\w)([A-Za-z])((?: [A-Za-z]){2,})(?!\w)",
        lambda m: m.group(1) + m.group(2).replace(" ", ""),
        text
    )


def collapse_blank_lines(text: str) -> str:
    """Three or more newlines become one paragraph break."""
    return re.sub(r"\n{3,}", "\n\n", text).strip()


def truncate_text(
    text: str,
    max_length: int,
    diagnostics: Optional[Diagnostics] = None
) -> str:
    """
    Cap text at max_length characters.

    Returns:
        The (possibly) shortened text; a TruncatedCharacters warning records
        exactly how many characters were dropped
    """
    if max_length < 0:
        raise ValueError(f"max_length must be non-negative, got {max_length}")
    if len(text) <= max_length:
        return text

    truncated = text[:max_length].rstrip()
    dropped = len(text) - len(truncated)
    logger.warning(f"Truncated output to {len(truncated)} characters ({dropped} dropped)")
    if diagnostics is not None:
        diagnostics.warn(
            WarningCode.TRUNCATED_CHARACTERS, count=dropped,
            message=f"Output capped at {max_length} characters"
        )
    return truncated


# ============================================================================
# Entry Points
# ============================================================================

def normalize_text(
    text: str,
    max_length: Optional[int] = None,
    config: Optional[NormalizerConfig] = None,
    diagnostics: Optional[Diagnostics] = None
) -> str:
    """
    Reflow paragraphs, clean whitespace and punctuation, then cap length.

    Args:
        text: Joined (and usually structure-tagged) text
        max_length: Character cap; defaults to config.max_length
        config: Normalizer settings
        diagnostics: Optional collector for the truncation warning

    Returns:
        Normalized text no longer than max_length
    """
    config = config or NormalizerConfig()
    if max_length is None:
        max_length = config.max_length

    text = merge_hyphenation(text, config.compound_prefixes)
    text = merge_continuation_lines(text)
    text = insert_paragraph_breaks(text)
    text = collapse_whitespace(text)
    text = fix_punctuation_spacing(text)
    if config.repair_spaced_letters:
        text = repair_spaced_letters(text)
    text = collapse_blank_lines(text)

    # Truncation runs last
    return truncate_text(text, max_length, diagnostics)


def normalize_reduced(
    text: str,
    max_length: Optional[int] = None,
    config: Optional[NormalizerConfig] = None,
    diagnostics: Optional[Diagnostics] = None
) -> str:
    """Hyphenation merge and whitespace cleanup only, for very large inputs."""
    config = config or NormalizerConfig()
    if max_length is None:
        max_length = config.max_length

    text = merge_hyphenation(text, config.compound_prefixes)
    text = collapse_whitespace(text)
    text = collapse_blank_lines(text)
    return truncate_text(text, max_length, diagnostics)
