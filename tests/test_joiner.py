"""
Tests for the page joiner.
"""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


class TestPageJoiner:
    """Test join_pages."""

    def test_sentence_end_gets_paragraph_break(self):
        """Test pages ending a sentence are separated by a blank line."""
        from docreflow.utils.joiner import join_pages

        assert join_pages(["Hello world.", "Next sentence."]) == "Hello world.\n\nNext sentence."

    def test_other_sentence_punctuation(self):
        """Test '!', '?' and ':' also end a paragraph at a page boundary."""
        from docreflow.utils.joiner import join_pages

        assert join_pages(["Stop!", "Why?", "Because:", "done"]) == (
            "Stop!\n\nWhy?\n\nBecause:\n\ndone"
        )

    def test_mid_sentence_boundary_gets_space(self):
        """Test a sentence running over the page boundary."""
        from docreflow.utils.joiner import join_pages

        assert join_pages(["the sentence continues", "on the next page."]) == (
            "the sentence continues on the next page."
        )

    def test_hyphenated_word_is_marked_for_merge(self):
        """Test a word split across pages keeps its split as a soft hyphen."""
        from docreflow.config import SOFT_HYPHEN
        from docreflow.utils.joiner import join_pages

        joined = join_pages(["This is hyphen-", "ated word."])

        assert joined == f"This is hyphen{SOFT_HYPHEN}ated word."

    def test_hyphenated_word_is_fused_after_normalization(self):
        """Test the split word reads as one word in the final text."""
        from docreflow.utils.joiner import join_pages
        from docreflow.utils.normalizer import normalize_text

        joined = join_pages(["This is hyphen-", "ated word."])

        assert normalize_text(joined) == "This is hyphenated word."

    def test_dash_after_space_is_not_a_hyphen(self):
        """Test a free-standing dash gets a normal space separator."""
        from docreflow.utils.joiner import join_pages

        assert join_pages(["an aside -", "continues here"]) == "an aside - continues here"

    def test_numeric_range_keeps_hyphen(self):
        """Test a range split over a page boundary keeps its hyphen."""
        from docreflow.config import SOFT_HYPHEN
        from docreflow.utils.joiner import join_pages

        joined = join_pages(["The results are on pages 10-", "20 of the annual report."])

        assert joined == "The results are on pages 10-20 of the annual report."
        assert SOFT_HYPHEN not in joined

    def test_capitalized_compound_keeps_hyphen(self):
        """Test 'Anglo-' / 'Saxon' is not fused into one word."""
        from docreflow.utils.joiner import join_pages

        joined = join_pages(["Kings ruled the early Anglo-", "Saxon kingdoms for centuries."])

        assert joined == "Kings ruled the early Anglo-Saxon kingdoms for centuries."

    def test_is_split_word(self):
        """Test only letter + hyphen before a lowercase continuation."""
        from docreflow.utils.joiner import is_split_word

        assert is_split_word("hyphen-", "ated word.")
        assert not is_split_word("pages 10-", "20 of them")
        assert not is_split_word("Anglo-", "Saxon kingdoms")

    def test_accepts_cleaned_pages(self):
        """Test CleanedPage inputs."""
        from docreflow.utils.pages import CleanedPage
        from docreflow.utils.joiner import join_pages

        pages = [CleanedPage(0, "Alpha."), CleanedPage(1, "Beta.")]

        assert join_pages(pages) == "Alpha.\n\nBeta."

    def test_empty_pages_are_skipped(self):
        """Test whitespace-only pages add no separator."""
        from docreflow.utils.joiner import join_pages

        assert join_pages(["Alpha.", "   ", "Beta."]) == "Alpha.\n\nBeta."
        assert join_pages([]) == ""

    def test_each_page_appears_once_in_order(self):
        """Test no page content is duplicated or reordered."""
        from docreflow.utils.joiner import join_pages

        pages = ["First page here.", "Second page here.", "Third page here."]
        joined = join_pages(pages)

        positions = [joined.find(p) for p in pages]
        assert positions == sorted(positions)
        assert all(joined.count(p) == 1 for p in pages)

    def test_page_separator(self):
        """Test separator choice."""
        from docreflow.utils.joiner import page_separator

        assert page_separator("end.") == "\n\n"
        assert page_separator("word-") == ""
        assert page_separator("word") == " "
