"""
Column reorderer for text fragmented by multi-column layouts.

Two line-level heuristics, applied in order:
1. A short capitalized word on its own line, followed by a lowercase line,
   is a wrapped fragment and is joined to the next line.
2. lowercase-ending line / capitalized word / lowercase-starting line is an
   interleaved column: the outer lines form one sentence and the middle line
   moves to its own paragraph after it.

Both rules misfire occasionally on legitimately short lines.
"""

import logging
import re
from typing import List

logger = logging.getLogger(__name__)

_CAPITALIZED_WORD = re.compile(r"^[A-Z][a-z]+$")
_STARTS_LOWER = re.compile(r"^[a-z]")
_ENDS_LOWER = re.compile(r"[a-z]$")


def _is_fragment(line: str, max_chars: int) -> bool:
    if len(line) > max_chars:
        return False
    return bool(re.match(r"^[A-Z][a-z]*$", line))


def join_wrapped_fragments(lines: List[str], max_fragment_chars: int = 15) -> List[str]:
    """Rule 1: join short capitalized fragments to the line that follows."""
    out: List[str] = []
    i = 0
    while i < len(lines):
        line = lines[i]
        if (
            out
            and i + 1 < len(lines)
            # lowercase-ending predecessor is rule 2's shape
            and not _ENDS_LOWER.search(out[-1])
            and _is_fragment(line, max_fragment_chars)
            and _STARTS_LOWER.match(lines[i + 1])
        ):
            out.append(f"{line} {lines[i + 1]}")
            i += 2
            continue
        out.append(line)
        i += 1
    return out


def merge_interleaved_lines(lines: List[str]) -> List[str]:
    """Rule 2: merge sentences split around an interleaved column line."""
    out: List[str] = []
    i = 0
    while i < len(lines):
        if (
            i + 2 < len(lines)
            and _ENDS_LOWER.search(lines[i])
            and _CAPITALIZED_WORD.match(lines[i + 1])
            and _STARTS_LOWER.match(lines[i + 2])
        ):
            out.extend([f"{lines[i]} {lines[i + 2]}", "", lines[i + 1], ""])
            i += 3
            continue
        out.append(lines[i])
        i += 1
    return out


def reorder_columns(text: str, max_fragment_chars: int = 15) -> str:
    """
    Repair line order and wrapping artifacts left by multi-column layouts.

    Args:
        text: Text of a page (or the joined document)
        max_fragment_chars: Longest line treated as a wrapped word fragment

    Returns:
        Text with both heuristics applied
    """
    if not text:
        return text
    lines = text.split("\n")
    repaired = merge_interleaved_lines(join_wrapped_fragments(lines, max_fragment_chars))
    result = "\n".join(repaired)
    if result != text:
        logger.debug(f"Column reorder changed {len(lines)} -> {len(repaired)} lines")
    return result
