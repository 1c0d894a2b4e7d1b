"""Tests for front matter handling."""

from markconv.frontmatter_parser import (
    parse_markdown_string_with_frontmatter,
    parse_markdown_with_frontmatter,
)


class TestFrontmatter:

    def test_metadata_and_body(self):
        metadata, content = parse_markdown_string_with_frontmatter("---\ntitle: T\n---\n# Body")
        assert metadata == {'title': 'T'}
        assert content == "# Body"

    def test_without_front_matter(self):
        assert parse_markdown_string_with_frontmatter("# Body") == ({}, "# Body")

    def test_empty(self):
        assert parse_markdown_string_with_frontmatter("") == ({}, "")

    def test_malformed_front_matter_is_kept(self):
        text = "---\ntitle: [unclosed\n---\nbody"
        assert parse_markdown_string_with_frontmatter(text) == ({}, text)

    def test_from_file(self, sample_md_path):
        metadata, content = parse_markdown_with_frontmatter(sample_md_path)
        assert metadata['title'] == "Sample Document"
        assert content.startswith("# Heading")
