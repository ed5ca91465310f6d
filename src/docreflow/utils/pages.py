"""
Page data model and page filtering.

Provides:
- RawPage / CleanedPage value objects
- Input coercion and validation for Page Source output
- Page filter (drops blank, boilerplate-only and too-short pages)
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional

from ..config import FilterConfig
from .diagnostics import Diagnostics, WarningCode

logger = logging.getLogger(__name__)


# ============================================================================
# Exceptions
# ============================================================================

class ReconstructionError(Exception):
    """Base class for reconstruction failures."""


class InvalidInput(ReconstructionError, ValueError):
    """The Page Source violated the input contract."""


# ============================================================================
# Data Classes
# ============================================================================

@dataclass(frozen=True)
class RawPage:
    """Text of one page as supplied by the Page Source."""
    index: int
    text: str

    @property
    def page_number(self) -> int:
        return self.index + 1


@dataclass(frozen=True)
class CleanedPage:
    """A page with header/footer boilerplate removed."""
    index: int
    text: str
    removed_lines: int = 0


# ============================================================================
# Input Coercion
# ============================================================================

def _coerce_text(index: int, text: Any) -> str:
    if text is None:
        return ""
    if isinstance(text, bytes):
        try:
            return text.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidInput(f"Page {index} is not valid UTF-8: {e}")
    if not isinstance(text, str):
        raise InvalidInput(
            f"Page {index} text must be str, got {type(text).__name__}"
        )
    return text


def _coerce_one(item: Any) -> RawPage:
    if isinstance(item, RawPage):
        index, text = item.index, item.text
    elif isinstance(item, Mapping):
        if "index" not in item:
            raise InvalidInput(f"Page record has no 'index': {item!r}")
        index, text = item["index"], item.get("text")
    elif isinstance(item, (tuple, list)) and len(item) == 2:
        index, text = item
    else:
        raise InvalidInput(f"Unsupported page record: {item!r}")

    # bool is an int subclass but never a valid page index
    if isinstance(index, bool) or not isinstance(index, int):
        raise InvalidInput(f"Page index must be an int, got {index!r}")
    if index < 0:
        raise InvalidInput(f"Page index must be non-negative, got {index}")

    return RawPage(index=index, text=_coerce_text(index, text))


def coerce_pages(pages: Optional[Iterable[Any]]) -> List[RawPage]:
    """
    Validate Page Source output and return RawPages in ascending index order.

    Args:
        pages: RawPage objects, (index, text) pairs or {"index", "text"} mappings

    Returns:
        List of RawPage sorted by index

    Raises:
        InvalidInput: On negative/non-integer/duplicate indices or non-text content
    """
    if pages is None:
        return []
    if isinstance(pages, (str, bytes)):
        raise InvalidInput("Expected a sequence of pages, got a single string")

    result = [_coerce_one(item) for item in pages]

    seen = set()
    for page in result:
        if page.index in seen:
            raise InvalidInput(f"Duplicate page index: {page.index}")
        seen.add(page.index)

    return sorted(result, key=lambda p: p.index)


# ============================================================================
# Page Filter
# ============================================================================

# Digits, bullets, rules and the literal page label only
_MARKER_ONLY = re.compile(r"^(?:\s|\d|[•·▪▫▬■□●◦\-–—_.|#*]|📄|page)*$", re.IGNORECASE)


def page_drop_reason(text: str, config: Optional[FilterConfig] = None) -> Optional[str]:
    """
    Explain why a page would be dropped, or return None if it is kept.
    """
    config = config or FilterConfig()
    trimmed = text.strip()

    if not trimmed:
        return "empty"
    if len(trimmed) <= config.min_content_chars:
        return "too short"
    lowered = trimmed.lower()
    for phrase in config.blank_page_phrases:
        if phrase.lower() in lowered:
            return "blank page notice"
    if _MARKER_ONLY.match(trimmed):
        return "page markers only"
    return None


def filter_pages(
    pages: List[RawPage],
    config: Optional[FilterConfig] = None,
    diagnostics: Optional[Diagnostics] = None
) -> List[RawPage]:
    """
    Drop pages without usable content, preserving order.

    Args:
        pages: Pages in ascending index order
        config: Filter thresholds
        diagnostics: Optional collector for EmptyInput / PagesDropped warnings

    Returns:
        The pages that carry readable content
    """
    config = config or FilterConfig()
    kept = []
    empty, dropped = 0, 0

    for page in pages:
        reason = page_drop_reason(page.text, config)
        if reason is None:
            kept.append(page)
        elif reason == "empty":
            empty += 1
            logger.debug(f"Page {page.page_number} skipped: no text")
        else:
            dropped += 1
            logger.debug(f"Page {page.page_number} skipped: {reason}")

    if diagnostics is not None:
        if empty:
            diagnostics.warn(
                WarningCode.EMPTY_INPUT, count=empty,
                message=f"{empty} page(s) had no extractable text"
            )
        if dropped:
            diagnostics.warn(
                WarningCode.PAGES_DROPPED, count=dropped,
                message=f"{dropped} page(s) had no usable content"
            )

    logger.info(f"Kept {len(kept)} of {len(pages)} pages")
    return kept
