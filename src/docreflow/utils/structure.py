"""
Structure detection for reflowed document text.

Provides:
- StructureTag enumeration
- One pure text -> text function per detector pass
- StructureDetector, which runs the passes in a fixed order and isolates
  failures so one broken pass never aborts reconstruction
- Tag counting over decorated text

Tags are inline decorations (glyph prefixes and rule lines), not offsets.
Pass order matters: an earlier pass claims a line by prefixing a glyph, so
later, more general patterns no longer match it.
"""

import logging
import re
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional

from ..config import DetectorConfig, Markers
from .columns import reorder_columns
from .diagnostics import Diagnostics, WarningCode

logger = logging.getLogger(__name__)


# ============================================================================
# Data Classes and Enums
# ============================================================================

class StructureTag(Enum):
    """Structural roles recognized in the text."""
    HEADING = "heading"
    TABLE = "table"
    LIST_ITEM = "list_item"
    FOOTNOTE = "footnote"
    CAPTION = "caption"
    BIBLIOGRAPHY_ENTRY = "bibliography_entry"
    MATH_EXPRESSION = "math_expression"
    PARAGRAPH = "paragraph"


PassFunction = Callable[[str, DetectorConfig], str]


@dataclass(frozen=True)
class DetectorPass:
    """One ordered step of the structure detector."""
    pass_id: str
    func: PassFunction
    tag: Optional[StructureTag] = None
    level: Optional[int] = None  # Heading level, for heading passes

    def __call__(self, text: str, config: DetectorConfig) -> str:
        return self.func(text, config)


# ============================================================================
# Headings
# ============================================================================

def tag_chapter_headings(text: str, config: DetectorConfig) -> str:
    """Chapter/Part + arabic or roman number -> Heading(1)."""
    rule = Markers.HEAVY_RULE * config.chapter_rule_width

    def replace(m):
        return f"\n\n{rule}\n{Markers.CHAPTER} {m.group(1)} {m.group(2)}{m.group(3)}\n{rule}\n"

    return re.sub(
        r"^(Chapter|CHAPTER|Part|PART)[ \t]*(\d+|[IVX]+)\b(.*)$",
        replace, text, flags=re.MULTILINE
    )


def tag_section_headings(text: str, config: DetectorConfig) -> str:
    """'N.N Title' -> Heading(2)."""
    rule = Markers.LIGHT_RULE * config.section_rule_width
    return re.sub(
        r"^(\d+\.\d+\.?[ \t]+[A-Z][A-Za-z ]{3,})$",
        lambda m: f"\n\n{Markers.SECTION} {m.group(1)}\n{rule}\n",
        text, flags=re.MULTILINE
    )


def tag_subsection_headings(text: str, config: DetectorConfig) -> str:
    """'N.N.N Title' -> Heading(3)."""
    return re.sub(
        r"^(\d+\.\d+\.\d+\.?[ \t]+[A-Z][A-Za-z ]{2,})$",
        lambda m: f"\n\n{Markers.SUBSECTION} {m.group(1)}\n",
        text, flags=re.MULTILINE
    )


def tag_caps_headings(text: str, config: DetectorConfig) -> str:
    """A line of only uppercase words -> Heading(2)."""
    rule = Markers.LIGHT_RULE * config.caps_rule_width
    extra_words = max(config.min_caps_words - 1, 0)
    return re.sub(
        rf"^([A-Z]+(?:[ \t]+[A-Z]+){{{extra_words},}})$",
        lambda m: f"\n\n{Markers.CAPS_HEADING} {m.group(1)}\n{rule}\n",
        text, flags=re.MULTILINE
    )


def tag_title_case_headings(text: str, config: DetectorConfig) -> str:
    """Consecutive Capitalized Words without punctuation -> Heading(3)."""
    extra_words = max(config.min_title_words - 1, 0)
    return re.sub(
        rf"^([A-Z][a-z]+(?:[ \t]+[A-Z][a-z]+){{{extra_words},}})$",
        lambda m: f"\n\n{Markers.TITLE_HEADING} {m.group(1)}\n",
        text, flags=re.MULTILINE
    )


def cleanup_columns(text: str, config: DetectorConfig) -> str:
    """Re-run the column reorderer over the joined text."""
    return reorder_columns(text)


# ============================================================================
# Tables and Lists
# ============================================================================

def tag_tables(text: str, config: DetectorConfig) -> str:
    """Header rows of capitalized words and 'label   number' rows."""
    rule = Markers.DOUBLE_RULE * config.table_rule_width
    text = re.sub(
        r"^([A-Z][A-Za-z]+[ \t]+[A-Z][A-Za-z]+[ \t]+[A-Z][A-Za-z]+.*?)$",
        lambda m: f"\n\n{Markers.TABLE_HEADER} {m.group(1)}\n{rule}\n",
        text, flags=re.MULTILINE
    )
    return re.sub(
        r"^([A-Za-z][^\n]*?)[ \t]{3,}(\d+[.\d%]*)[ \t]*$",
        lambda m: f"{Markers.TABLE_ROW} {m.group(1)} {Markers.TABLE_LEADER} {m.group(2)}",
        text, flags=re.MULTILINE
    )


def tag_list_items(text: str, config: DetectorConfig) -> str:
    """Bulleted lines get a uniform bullet; numbered items start a new line."""
    text = re.sub(
        r"^[•·▪▫●◦][ \t]*([A-Z][^\n]*)$",
        lambda m: f"{Markers.BULLET} {m.group(1)}",
        text, flags=re.MULTILINE
    )
    return re.sub(
        r"^(\d+\.)[ \t]*([A-Z][^\n]*)$",
        lambda m: f"\n{m.group(1)} {m.group(2)}",
        text, flags=re.MULTILINE
    )


# ============================================================================
# Footnotes, Captions, Bibliography
# ============================================================================

def tag_footnotes(text: str, config: DetectorConfig) -> str:
    """Reference numbers glued to a sentence end, and footnote body lines."""
    text = re.sub(
        r"([a-z)\]\"'”’][.!?])(\d{1,3})(?=[ \t]+[A-Z])",
        r"\1 [\2]",
        text
    )
    return re.sub(
        r"^(\d{1,3})[ \t]+([A-Z][^\n]*)$",
        lambda m: f"\n{Markers.NOTE} {m.group(1)}: {m.group(2)}",
        text, flags=re.MULTILINE
    )


_CAPTION_WORDS = r"(Figure|Image|Photo|Diagram|Chart|Graph)"


def tag_captions(text: str, config: DetectorConfig) -> str:
    """'Figure 3. Caption' lines, including captions split from their number."""
    text = re.sub(
        rf"^{_CAPTION_WORDS}[ \t]+(\d+[.:])[ \t]*([^\n]+)$",
        lambda m: f"\n{Markers.CAPTION} {m.group(1)} {m.group(2)} {m.group(3)}\n",
        text, flags=re.MULTILINE
    )
    return re.sub(
        rf"^{_CAPTION_WORDS}[ \t]+(\d+)[ \t]*\n([A-Z][^\n]*)$",
        lambda m: f"\n{Markers.CAPTION} {m.group(1)} {m.group(2)}: {m.group(3)}\n",
        text, flags=re.MULTILINE
    )


def tag_bibliography(text: str, config: DetectorConfig) -> str:
    """Reference section headers, 'Author, I. Year. Title' entries, DOIs and URLs."""
    rule = Markers.DOUBLE_RULE * config.bibliography_rule_width
    text = re.sub(
        r"^(References|REFERENCES|Bibliography|BIBLIOGRAPHY|Works Cited|Sources)[ \t]*$",
        lambda m: f"\n\n{Markers.BIBLIOGRAPHY} {m.group(1)}\n{rule}\n",
        text, flags=re.MULTILINE
    )
    text = re.sub(
        r"^([A-Z][a-z]+,[ \t]+[A-Z]\.[^\n]*?)[ \t]*\(?(\d{4})\)?[.,]?[ \t]+([A-Z][^\n]*)$",
        lambda m: f"{Markers.CITATION} {m.group(1)} ({m.group(2)}). {m.group(3)}",
        text, flags=re.MULTILINE
    )
    return re.sub(
        r"\b(doi:[^\s]*|https?://[^\s]+)",
        lambda m: f"{Markers.LINK} {m.group(1)}",
        text
    )


# ============================================================================
# Math
# ============================================================================

_MATH_OPERATORS = "=<>±×÷∞∑∫√π∆∇∂"


def tag_math(text: str, config: DetectorConfig) -> str:
    """Bracket operator runs and put lines with operators on their own."""
    text = re.sub(
        rf"([\w \t])([{_MATH_OPERATORS}]+)([\w \t])",
        lambda m: f"{m.group(1)} {Markers.MATH_OPEN}{m.group(2)}{Markers.MATH_CLOSE} {m.group(3)}",
        text
    )
    return re.sub(
        rf"^([^\n]*[{_MATH_OPERATORS}][^\n]*)$",
        lambda m: f"\n{Markers.MATH_LINE} {m.group(1)}\n",
        text, flags=re.MULTILINE
    )


# ============================================================================
# Pass Registry
# ============================================================================

def default_passes() -> List[DetectorPass]:
    """The canonical, ordered detector pipeline."""
    return [
        DetectorPass("chapter_headings", tag_chapter_headings, StructureTag.HEADING, 1),
        DetectorPass("section_headings", tag_section_headings, StructureTag.HEADING, 2),
        DetectorPass("subsection_headings", tag_subsection_headings, StructureTag.HEADING, 3),
        DetectorPass("caps_headings", tag_caps_headings, StructureTag.HEADING, 2),
        DetectorPass("title_case_headings", tag_title_case_headings, StructureTag.HEADING, 3),
        DetectorPass("column_cleanup", cleanup_columns),
        DetectorPass("tables", tag_tables, StructureTag.TABLE),
        DetectorPass("list_items", tag_list_items, StructureTag.LIST_ITEM),
        DetectorPass("footnotes", tag_footnotes, StructureTag.FOOTNOTE),
        DetectorPass("captions", tag_captions, StructureTag.CAPTION),
        DetectorPass("bibliography", tag_bibliography, StructureTag.BIBLIOGRAPHY_ENTRY),
        DetectorPass("math", tag_math, StructureTag.MATH_EXPRESSION),
    ]


# ============================================================================
# Structure Detector
# ============================================================================

class StructureDetector:
    """
    Runs detector passes in order over the joined document text.

    A pass that raises, or that returns something other than a non-empty
    string for non-empty input, is skipped: the text from before the pass is
    kept and a DetectorFailed warning is recorded.
    """

    def __init__(
        self,
        config: Optional[DetectorConfig] = None,
        passes: Optional[Iterable[DetectorPass]] = None
    ):
        self.config = config or DetectorConfig()
        self.passes = list(passes) if passes is not None else default_passes()

    @property
    def pass_ids(self) -> List[str]:
        return [p.pass_id for p in self.passes]

    def detect(self, text: str, diagnostics: Optional[Diagnostics] = None) -> str:
        """
        Apply every enabled pass in order.

        Args:
            text: Joined document text
            diagnostics: Optional collector for DetectorFailed warnings

        Returns:
            Text with inline structure decorations
        """
        for detector_pass in self.passes:
            if detector_pass.pass_id in self.config.disabled_passes:
                logger.debug(f"Pass {detector_pass.pass_id} disabled")
                continue
            text = self._run_pass(detector_pass, text, diagnostics)
        return text

    def _run_pass(
        self,
        detector_pass: DetectorPass,
        text: str,
        diagnostics: Optional[Diagnostics]
    ) -> str:
        try:
            result = detector_pass(text, self.config)
        except Exception as e:
            return self._skip(detector_pass, text, diagnostics, f"{type(e).__name__}: {e}")

        if not isinstance(result, str):
            return self._skip(
                detector_pass, text, diagnostics,
                f"returned {type(result).__name__} instead of str"
            )
        if text.strip() and not result.strip():
            return self._skip(detector_pass, text, diagnostics, "produced empty text")

        logger.debug(f"Pass {detector_pass.pass_id}: {len(text)} -> {len(result)} chars")
        return result

    def _skip(
        self,
        detector_pass: DetectorPass,
        text: str,
        diagnostics: Optional[Diagnostics],
        reason: str
    ) -> str:
        logger.warning(f"Detector pass {detector_pass.pass_id} skipped: {reason}")
        if diagnostics is not None:
            diagnostics.warn(
                WarningCode.DETECTOR_FAILED,
                pass_id=detector_pass.pass_id,
                message=reason
            )
        return text


def detect_structure(
    text: str,
    config: Optional[DetectorConfig] = None,
    diagnostics: Optional[Diagnostics] = None,
    passes: Optional[Iterable[DetectorPass]] = None
) -> str:
    """Run the structure detector once over text."""
    return StructureDetector(config, passes).detect(text, diagnostics)


# ============================================================================
# Tag Counting
# ============================================================================

_HEADING_LINE = re.compile(
    rf"^(?:{Markers.CHAPTER} (?:Chapter|CHAPTER|Part|PART)\b"
    rf"|{Markers.SECTION} |{Markers.SUBSECTION} "
    rf"|{Markers.CAPS_HEADING} |{Markers.TITLE_HEADING} )"
)


def heading_level(line: str) -> Optional[int]:
    """Return the heading level a decorated line carries, if any."""
    if line.startswith(f"{Markers.CHAPTER} ") and _HEADING_LINE.match(line):
        return 1
    if line.startswith((f"{Markers.SECTION} ", f"{Markers.CAPS_HEADING} ")):
        return 2
    if line.startswith((f"{Markers.SUBSECTION} ", f"{Markers.TITLE_HEADING} ")):
        return 3
    return None


def _line_tag(line: str) -> Optional[StructureTag]:
    if heading_level(line) is not None:
        return StructureTag.HEADING
    if line.startswith((Markers.TABLE_HEADER, f"{Markers.TABLE_ROW} ")):
        return StructureTag.TABLE
    if line.startswith(f"{Markers.BULLET} ") or re.match(r"^\d+\. [A-Z]", line):
        return StructureTag.LIST_ITEM
    if line.startswith(f"{Markers.NOTE} "):
        return StructureTag.FOOTNOTE
    if line.startswith(f"{Markers.CAPTION} "):
        return StructureTag.CAPTION
    if line.startswith((f"{Markers.CITATION} ", f"{Markers.BIBLIOGRAPHY} ")):
        return StructureTag.BIBLIOGRAPHY_ENTRY
    if line.startswith(f"{Markers.MATH_LINE} "):
        return StructureTag.MATH_EXPRESSION
    return None


def count_tags(text: str) -> Dict[StructureTag, int]:
    """
    Count decorated lines per tag; undecorated lines count as paragraphs.

    Rule lines (━, ─, ═) belong to the heading or table above them and are
    not counted.
    """
    counts: Counter = Counter()
    rule_chars = {Markers.HEAVY_RULE, Markers.LIGHT_RULE, Markers.DOUBLE_RULE}
    for block in re.split(r"\n\s*\n", text):
        lines = [line.strip() for line in block.split("\n")]
        lines = [line for line in lines if line and not set(line) <= rule_chars]
        tags = [_line_tag(line) for line in lines]
        for tag in tags:
            if tag is not None:
                counts[tag] += 1
        if lines and all(tag is None for tag in tags):
            counts[StructureTag.PARAGRAPH] += 1
    return {tag: counts.get(tag, 0) for tag in StructureTag}
