"""
markconv - convert between Markdown, HTML and plain text.
"""

import argparse
import html
import logging
import os
import sys

from . import __version__
from .exceptions import MarkconvError
from .frontmatter_parser import parse_markdown_string_with_frontmatter
from .HtmlToMarkdown import HtmlToMarkdown
from .HtmlToPlainText import HtmlToPlainText
from .MarkdownToHtml import STANDALONE_TEMPLATE, MarkdownToHtml
from .MarkdownToPlainText import MarkdownToPlainText
from .PlainTextToHtml import PlainTextToHtml
from .PlainTextToMarkdown import PlainTextToMarkdown
from .tag_mapping import common_tag_mappings, load_tag_mappings

EXTENSION_FORMATS = {
    '.md': 'md',
    '.markdown': 'md',
    '.html': 'html',
    '.htm': 'html',
    '.txt': 'txt',
}

SUPPORTED_PAIRS = {
    ('md', 'html'),
    ('md', 'txt'),
    ('html', 'md'),
    ('html', 'txt'),
    ('txt', 'md'),
    ('txt', 'html'),
}


def detect_format(path, explicit=None):
    if explicit:
        return explicit
    ext = os.path.splitext(path)[1].lower()
    return EXTENSION_FORMATS.get(ext)


def build_converter(source, target, args):
    if (source, target) == ('md', 'html'):
        return MarkdownToHtml(css_class=args.css_class, escape_markdown=args.escape)
    if (source, target) == ('md', 'txt'):
        return MarkdownToPlainText()
    if (source, target) == ('html', 'md'):
        mappings = load_tag_mappings(args.mappings) if args.mappings else common_tag_mappings()
        return HtmlToMarkdown(mappings=mappings)
    if (source, target) == ('html', 'txt'):
        return HtmlToPlainText(fragment=args.fragment)
    if (source, target) == ('txt', 'md'):
        return PlainTextToMarkdown()
    return PlainTextToHtml(minify=args.minify)


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="markconv",
        description="Convert between Markdown, HTML and plain text.",
        epilog="Examples:\n"
               "  markconv README.md -o README.html\n"
               "  markconv page.html -o page.md --mappings tags.json\n"
               "  markconv notes.txt -o notes.html --minify",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument("input_file", help="Input file (.md, .markdown, .html, .htm, .txt)")
    parser.add_argument("-o", "--output", required=True, help="Output file")
    parser.add_argument("--from", dest="source_format", choices=['md', 'html', 'txt'],
                        help="Input format (default: from the input extension)")
    parser.add_argument("--to", dest="target_format", choices=['md', 'html', 'txt'],
                        help="Output format (default: from the output extension)")
    parser.add_argument("--css-class", default="", help="Class attribute added to every generated HTML element")
    parser.add_argument("--escape", action="store_true", help="Escape Markdown syntax instead of rendering it")
    parser.add_argument("--minify", action="store_true", help="Minify HTML generated from plain text")
    parser.add_argument("--mappings", default=None, help="JSON file with HTML tag mappings")
    parser.add_argument("--fragment", action="store_true", help="HTML input has no <body> tag")
    parser.add_argument("--standalone", action="store_true", help="Wrap HTML output in a complete document")
    parser.add_argument("-v", "--verbose", action="store_true", help="Print debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    args = parser.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="[%(levelname)s] %(name)s: %(message)s")

    input_file = args.input_file
    if not os.path.exists(input_file):
        print(f"Error: Input file not found: {input_file}", file=sys.stderr)
        sys.exit(1)

    source = detect_format(input_file, args.source_format)
    target = detect_format(args.output, args.target_format)
    if source is None:
        print(f"Error: Unsupported input format: {os.path.splitext(input_file)[1]}", file=sys.stderr)
        sys.exit(1)
    if target is None:
        print(f"Error: Unsupported output format: {os.path.splitext(args.output)[1]}", file=sys.stderr)
        print("Supported formats: .md, .markdown, .html, .htm, .txt", file=sys.stderr)
        sys.exit(1)
    if (source, target) not in SUPPORTED_PAIRS:
        print(f"Error: Cannot convert {source} to {target}", file=sys.stderr)
        sys.exit(1)

    with open(input_file, 'r', encoding='utf-8') as f:
        text = f.read()

    metadata = {}
    if source == 'md':
        metadata, text = parse_markdown_string_with_frontmatter(text)

    try:
        converter = build_converter(source, target, args)
    except (MarkconvError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    result = converter.convert(text)

    if args.standalone and target == 'html':
        title = metadata.get('title') or os.path.splitext(os.path.basename(input_file))[0]
        result = STANDALONE_TEMPLATE.format(title=html.escape(str(title)), body=result)

    with open(args.output, 'w', encoding='utf-8') as f:
        f.write(result)
    print(f"Successfully converted to {args.output}")


if __name__ == "__main__":
    main()
