"""
markconv - Convert between Markdown, HTML and plain text

This package provides pure Python converters for Markdown, HTML and plain
text documents, each usable on strings or on (async) streams.
"""

__version__ = "0.1.0"

from .config import ConversionConfig, DEFAULT_CONFIG
from .exceptions import ConversionError, MappingError, MarkconvError
from .MarkdownToHtml import MarkdownToHtml
from .MarkdownToPlainText import MarkdownToPlainText
from .HtmlToMarkdown import HtmlToMarkdown
from .HtmlToPlainText import HtmlToPlainText
from .PlainTextToHtml import PlainTextToHtml
from .PlainTextToMarkdown import PlainTextToMarkdown
from .markdown_parser import MarkdownParser
from .tag_mapping import TagMapping, common_tag_mappings, load_tag_mappings
from .frontmatter_parser import (
    parse_markdown_with_frontmatter,
    parse_markdown_string_with_frontmatter,
)

__all__ = [
    "ConversionConfig",
    "DEFAULT_CONFIG",
    "ConversionError",
    "MappingError",
    "MarkconvError",
    "MarkdownToHtml",
    "MarkdownToPlainText",
    "HtmlToMarkdown",
    "HtmlToPlainText",
    "PlainTextToHtml",
    "PlainTextToMarkdown",
    "MarkdownParser",
    "TagMapping",
    "common_tag_mappings",
    "load_tag_mappings",
    "parse_markdown_with_frontmatter",
    "parse_markdown_string_with_frontmatter",
]
