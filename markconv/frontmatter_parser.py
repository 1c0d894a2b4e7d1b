"""
YAML front matter handling for Markdown input.

    ---
    title: Release notes
    ---
    # Body starts here
"""

import logging

import frontmatter

logger = logging.getLogger(__name__)


def parse_markdown_string_with_frontmatter(text):
    """
    Split Markdown text into its front matter and body.

    Returns:
        (metadata dict, content str). Text without front matter gives
        ``({}, text)``; so does front matter that fails to parse.
    """
    if not text:
        return {}, ""

    try:
        post = frontmatter.loads(text)
    except Exception as e:
        # python-frontmatter surfaces the YAML library's own error types
        logger.warning("Could not parse front matter, keeping it as text: %s", e)
        return {}, text

    return dict(post.metadata), post.content


def parse_markdown_with_frontmatter(input_path):
    """Read a Markdown file and return ``(metadata, content)``."""
    with open(input_path, 'r', encoding='utf-8') as f:
        text = f.read()
    return parse_markdown_string_with_frontmatter(text)
