"""
Page joiner: concatenates cleaned pages into one text stream.
"""

import logging
import re
from typing import List, Sequence, Union

from ..config import SOFT_HYPHEN
from .pages import CleanedPage

logger = logging.getLogger(__name__)

PARAGRAPH_BREAK = "\n\n"
SENTENCE_END = (".", "!", "?", ":")

_TRAILING_WORD_HYPHEN = re.compile(r"\w-$")
_TRAILING_LETTER_HYPHEN = re.compile(r"[A-Za-z]-$")
_STARTS_LOWER = re.compile(r"^[a-z]")


def is_split_word(text: str, next_text: str) -> bool:
    """
    Check if a page ends in the first half of a hyphenated word.

    Only a letter + hyphen followed by a lowercase continuation counts:
    "hyphen-" / "ated" is a split word, "10-" / "20" and "Anglo-" / "Saxon"
    are real hyphens.
    """
    return bool(_TRAILING_LETTER_HYPHEN.search(text) and _STARTS_LOWER.match(next_text))


def page_separator(text: str) -> str:
    """
    Choose what goes between this page and the next one.

    Returns:
        "\\n\\n" after sentence punctuation, "" after a word hyphen,
        a single space otherwise
    """
    if text.endswith(SENTENCE_END):
        return PARAGRAPH_BREAK
    if _TRAILING_WORD_HYPHEN.search(text):
        return ""
    return " "


def join_pages(pages: Sequence[Union[CleanedPage, str]]) -> str:
    """
    Join page texts in order, picking the separator at each boundary.

    A word hyphenated across a page boundary keeps its split point as a soft
    hyphen, which the normalizer's hyphen merge later removes. Any other
    trailing hyphen stays a literal "-" with no separator.

    Args:
        pages: CleanedPages (or plain strings) in ascending page order

    Returns:
        The joined text
    """
    texts = [
        (page.text if isinstance(page, CleanedPage) else page).strip()
        for page in pages
    ]
    texts = [t for t in texts if t]

    parts: List[str] = []
    for i, text in enumerate(texts):
        if i == len(texts) - 1:
            parts.append(text)
            break
        separator = page_separator(text)
        if separator == "" and is_split_word(text, texts[i + 1]):
            text = text[:-1] + SOFT_HYPHEN
        parts.append(text + separator)

    joined = "".join(parts)
    logger.debug(f"Joined {len(texts)} pages into {len(joined)} characters")
    return joined
