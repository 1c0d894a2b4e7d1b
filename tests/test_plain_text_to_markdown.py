"""Tests for PlainTextToMarkdown."""

from markconv.PlainTextToMarkdown import PlainTextToMarkdown


def _convert(text):
    return PlainTextToMarkdown().convert(text)


class TestTables:
    """Test tab-delimited tables."""

    def test_tab_table(self):
        txt = "City\tPopulation\tNotes\nLondon\t9000000\tCapital city\nParis\t2100000\t\nPrague\t1300000\tBeautiful!"
        md = _convert(txt)
        assert md.split("\n") == [
            "| City | Population | Notes |",
            "| --- | --- | --- |",
            "| London | 9000000 | Capital city |",
            "| Paris | 2100000 |  |",
            "| Prague | 1300000 | Beautiful! |",
        ]

    def test_short_rows_are_padded(self):
        md = _convert("a\tb\tc\n1\t2")
        assert "| 1 | 2 |  |" in md

    def test_long_rows_are_cut(self):
        md = _convert("a\tb\n1\t2\t3")
        assert "| 1 | 2 |" in md.split("\n")

    def test_blank_line_ends_table(self):
        md = _convert("a\tb\n\nc\td")
        assert md.count("| --- | --- |") == 2

    def test_text_line_ends_table(self):
        md = _convert("a\tb\nplain\nc\td")
        assert md.count("| --- | --- |") == 2


class TestLines:
    """Test the line classifier."""

    def test_bullets(self):
        md = _convert("- First\n- Second\n* Third\n• Fourth")
        assert md == "- First\n- Second\n- Third\n- Fourth"

    def test_indented_bullet(self):
        assert _convert("   * item") == "- item"

    def test_ordered_lists_pass_through(self):
        md = _convert("1. First\n2. Second\n10. Tenth")
        assert md == "1. First\n2. Second\n10. Tenth"

    def test_heading_from_all_caps(self):
        md = _convert("MY MAIN HEADING\nSomething else")
        assert md == "# My main heading\nSomething else"

    def test_short_caps_is_not_heading(self):
        assert _convert("ABC") == "ABC"

    def test_caps_with_punctuation_is_not_heading(self):
        assert _convert("WARNING!") == "WARNING!"

    def test_digits_only_is_not_heading(self):
        assert _convert("2024") == "2024"

    def test_quote(self):
        assert _convert("  > This is a quote  ") == "> This is a quote"

    def test_other_lines_verbatim(self):
        assert _convert("Just  text\n  indented") == "Just  text\n  indented"

    def test_empty(self):
        assert _convert("") == ""
        assert _convert("   \n  ") == ""


class TestCodeBlocks:
    """Test CODE: / ENDCODE markers."""

    def test_code_block(self):
        md = _convert("Some intro\nCODE:\nvar x = 5;\nENDCODE\nSummary")
        assert md == "Some intro\n```\nvar x = 5;\n```\nSummary"

    def test_endcode_is_not_a_heading(self):
        md = _convert("CODE:\nx\nENDCODE")
        assert "# Endcode" not in md
        assert md.endswith("```")

    def test_code_content_is_verbatim(self):
        md = _convert("CODE:\nIMPORTANT VALUE\n- not a bullet\na\tb\nENDCODE")
        assert md == "```\nIMPORTANT VALUE\n- not a bullet\na\tb\n```"

    def test_unclosed_code_block(self):
        assert _convert("CODE:\nx = 1") == "```\nx = 1\n```"

    def test_mixed_content(self):
        txt = "MY REPORT\n\n- Item one\n- Item two\n\nCity\tPopulation\nPrague\t1300000\nBrno\t400000\n\nCODE:\nprint('Hello')\nENDCODE"
        md = _convert(txt)
        assert "# My report" in md
        assert "- Item one" in md
        assert "| City | Population |" in md
        assert "| Prague | 1300000 |" in md
        assert "```\nprint('Hello')\n```" in md
