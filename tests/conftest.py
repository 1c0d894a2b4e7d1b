"""Shared fixtures for markconv tests."""

import pytest

from markconv.markdown_parser import MarkdownParser
from markconv.MarkdownToHtml import MarkdownToHtml


@pytest.fixture
def parser():
    """Return a fresh MarkdownParser instance."""
    return MarkdownParser()


@pytest.fixture
def md_to_html():
    """Return a MarkdownToHtml converter without a CSS class."""
    return MarkdownToHtml()


@pytest.fixture
def sample_md_path(tmp_path):
    """Write a small Markdown document with front matter and return its path."""
    path = tmp_path / "sample.md"
    path.write_text(
        "---\n"
        "title: Sample Document\n"
        "---\n"
        "# Heading\n"
        "\n"
        "Some **bold** text.\n",
        encoding='utf-8',
    )
    return str(path)


@pytest.fixture
def tmp_output(tmp_path):
    """Return a temporary output path for .html files."""
    return str(tmp_path / "output.html")
