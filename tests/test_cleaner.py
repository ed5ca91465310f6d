"""
Tests for header/footer cleanup.
"""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


class TestPageCleaner:
    """Test clean_page."""

    def test_strips_page_numbers_at_edges(self):
        """Test bare numbers and 'Page N' lines are removed at page edges."""
        from docreflow.utils.pages import RawPage
        from docreflow.utils.cleaner import clean_page

        page = RawPage(4, (
            "12\n"
            "Running Header Of Book\n"
            "First body line here.\n"
            "Second body line here.\n"
            "Page 12\n"
            "34"
        ))

        cleaned = clean_page(page)

        assert cleaned.index == 4
        assert cleaned.text == (
            "Running Header Of Book\n"
            "First body line here.\n"
            "Second body line here."
        )
        assert cleaned.removed_lines == 3

    def test_keeps_numbers_in_the_middle(self):
        """Test only edge lines are eligible for removal."""
        from docreflow.utils.pages import RawPage
        from docreflow.utils.cleaner import clean_page

        page = RawPage(0, "Intro text here.\nabc\n42\nmore text here.\nend text here.")

        lines = clean_page(page).text.split("\n")

        assert "42" in lines
        assert "abc" in lines

    def test_never_removes_the_only_content(self):
        """Test a page made only of boilerplate-looking lines keeps them."""
        from docreflow.utils.pages import RawPage
        from docreflow.utils.cleaner import clean_page

        cleaned = clean_page(RawPage(0, "7\n8"))

        assert cleaned.text == "7\n8"
        assert cleaned.removed_lines == 0

    def test_trims_lines_and_drops_blank_lines(self):
        """Test whitespace normalization within a page."""
        from docreflow.utils.pages import RawPage
        from docreflow.utils.cleaner import clean_page

        page = RawPage(0, "  Hello there world  \n\n\n  Another line here  ")

        assert clean_page(page).text == "Hello there world\nAnother line here"

    def test_keeps_internal_alignment(self):
        """Test column alignment inside a line survives for table detection."""
        from docreflow.utils.pages import RawPage
        from docreflow.utils.cleaner import clean_page

        page = RawPage(0, "Quarterly figures follow.\nRevenue     1200\nCosts       800\nThat is all for now.")

        assert "Revenue     1200" in clean_page(page).text

    def test_page_label_is_case_insensitive(self):
        """Test 'PAGE 3 of 10' style footers."""
        from docreflow.utils.cleaner import is_boilerplate_line

        assert is_boilerplate_line("PAGE 3 of 10")
        assert is_boilerplate_line("Page 3")
        assert is_boilerplate_line("ix")
        assert not is_boilerplate_line("Pages of history")

    def test_edges_use_original_line_positions(self):
        """Test leading blank lines count toward the edge window."""
        from docreflow.utils.pages import RawPage
        from docreflow.utils.cleaner import clean_page

        page = RawPage(0, (
            "\n\n"
            "AB\n"
            "First body line here.\n"
            "Second body line here.\n"
            "Third body line here.\n"
            "Fourth body line."
        ))

        cleaned = clean_page(page)

        assert cleaned.text.split("\n")[0] == "AB"
        assert cleaned.removed_lines == 0

    def test_number_after_leading_blank_line_is_removed(self):
        """Test a page number on the second raw line is still at the edge."""
        from docreflow.utils.pages import RawPage
        from docreflow.utils.cleaner import clean_page

        page = RawPage(0, "\n3\nBody text one here.\nBody text two here.\nBody text three.")

        cleaned = clean_page(page)

        assert cleaned.text == "Body text one here.\nBody text two here.\nBody text three."
        assert cleaned.removed_lines == 1
