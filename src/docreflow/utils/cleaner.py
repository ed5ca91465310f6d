"""
Page cleaner: removes running headers and footers.

Only the first and last few lines of a page (by original position, blank
lines included) are candidates for removal; everything in between is kept.
"""

import logging
import re
from typing import List, Optional

from ..config import CleanerConfig
from .pages import CleanedPage, RawPage

logger = logging.getLogger(__name__)

_BARE_NUMBER = re.compile(r"^\d+$")
_PAGE_LABEL = re.compile(r"^page\s+\d+", re.IGNORECASE)


def is_boilerplate_line(line: str, min_line_chars: int = 3) -> bool:
    """Check if a trimmed line looks like a page number or running header."""
    return (
        bool(_BARE_NUMBER.match(line))
        or bool(_PAGE_LABEL.match(line))
        or len(line) < min_line_chars
    )


def clean_page(page: RawPage, config: Optional[CleanerConfig] = None) -> CleanedPage:
    """
    Strip header/footer lines and blank lines from a page.

    Args:
        page: Raw page from the Page Source
        config: Cleaner settings

    Returns:
        CleanedPage whose lines are trimmed and joined by single newlines
    """
    config = config or CleanerConfig()
    raw_lines = page.text.splitlines()
    lines = [line.strip() for line in raw_lines if line.strip()]

    edge = config.edge_lines
    kept: List[str] = []
    removed = 0

    # Edge positions are original line numbers, blank lines included
    for i, raw_line in enumerate(raw_lines):
        line = raw_line.strip()
        if not line:
            continue
        at_edge = i < edge or i >= len(raw_lines) - edge
        if at_edge and is_boilerplate_line(line, config.min_line_chars):
            removed += 1
            continue
        kept.append(line)

    if not kept and lines:
        # Never remove the only content on a page
        kept, removed = lines, 0

    logger.debug(
        f"Page {page.index + 1}: removed {removed} boilerplate line(s), "
        f"{len(kept)} remain"
    )
    return CleanedPage(index=page.index, text="\n".join(kept), removed_lines=removed)


def clean_pages(
    pages: List[RawPage],
    config: Optional[CleanerConfig] = None
) -> List[CleanedPage]:
    return [clean_page(page, config) for page in pages]
