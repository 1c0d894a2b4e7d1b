import html
import logging
import os
import re

from marko.html_renderer import HTMLRenderer

from .config import DEFAULT_CONFIG
from .exceptions import ConversionError
from .frontmatter_parser import parse_markdown_with_frontmatter
from .markdown_parser import MarkdownParser
from .protected_blocks import extract_protected_blocks, render_code_block, restore_protected_blocks
from .streams import StreamConverterMixin
from .text_helper import convert_new_lines

logger = logging.getLogger(__name__)

MARKDOWN_SPECIAL_RE = re.compile(r'([\\`*_{}\[\]()#+\-.!~^])')
STARTS_WITH_TAG_RE = re.compile(r'<.*>')
BLANK_RUN_RE = re.compile(r'(\n\s*){3,}')

STANDALONE_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>{title}</title>
</head>
<body>
{body}
</body>
</html>
"""


class MarkdownToHtml(StreamConverterMixin):
    """
    Markdown to HTML renderer.

    Parses the text into a Pandoc-like tree with ``MarkdownParser`` and walks
    it once. Every element gets ``class="css_class"`` when a class is given.
    """

    def __init__(self, css_class="", escape_markdown=False, config=None):
        self.css_class = css_class or ""
        self.escape_markdown = escape_markdown
        self.config = config or DEFAULT_CONFIG
        self.parser = MarkdownParser(config=self.config)

        self.class_attr = f' class="{self.css_class}"' if self.css_class.strip() else ""

    @staticmethod
    def convert_to_html(input_path, output_path, css_class="", escape_markdown=False, standalone=False, config=None):
        """
        Convert a Markdown file to an HTML file.

        Front matter is stripped from the input. With ``standalone=True`` the
        fragment is wrapped in a full HTML document titled after the
        ``title`` front matter key (or the input file name).
        """
        if not os.path.exists(input_path):
            raise ConversionError(f"Input file not found: {input_path}")

        metadata, content = parse_markdown_with_frontmatter(input_path)
        converter = MarkdownToHtml(css_class=css_class, escape_markdown=escape_markdown, config=config)
        body = converter.convert(content)

        if standalone:
            title = metadata.get('title') or os.path.splitext(os.path.basename(input_path))[0]
            body = STANDALONE_TEMPLATE.format(title=html.escape(str(title)), body=body)

        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(body)
        logger.debug("Wrote %d characters to %s", len(body), output_path)

    def convert(self, text):
        if not text:
            return ""

        text = convert_new_lines(text)
        if self.escape_markdown:
            return self._convert_escaped(text)

        document = self.parser.parse(text)
        result = self._render_document(document)
        return BLANK_RUN_RE.sub("\n\n", result).strip()

    def _convert_escaped(self, text):
        fragments = extract_protected_blocks(text)
        escaped = restore_protected_blocks(
            fragments,
            render_text=lambda fragment: MARKDOWN_SPECIAL_RE.sub(r'\\\1', fragment),
            class_attr=self.class_attr,
        )
        return f"<p{self.class_attr}>{escaped.strip()}</p>"

    def _render_document(self, document):
        body = self._process_blocks(document.get('blocks', []))
        footnotes = document.get('footnotes', {})
        if footnotes:
            body += "\n" + self._render_footnotes(footnotes)
        return body

    # --- BLOCKS ---

    def _process_blocks(self, blocks):
        result = []
        for block in blocks:
            b_type = block.get('t')
            b_content = block.get('c')

            if b_type == 'Header':
                result.append(self._handle_header(b_content))
            elif b_type == 'Para':
                result.append(self._handle_para(b_content))
            elif b_type == 'HorizontalRule':
                result.append(f"<hr{self.class_attr} />")
            elif b_type == 'BlockQuote':
                result.append(self._handle_blockquote(b_content))
            elif b_type == 'BulletList':
                result.append(self._handle_bullet_list(b_content))
            elif b_type == 'OrderedList':
                result.append(self._handle_ordered_list(b_content))
            elif b_type == 'Table':
                result.append(self._handle_table(b_content))
            elif b_type == 'CodeBlock':
                lang, code, tail = b_content
                result.append(render_code_block(code, lang, self.class_attr) + self._process_inlines(tail))
            elif b_type == 'RawBlock':
                raw, tail = b_content
                result.append(raw + self._process_inlines(tail))
            elif b_type == 'BlankLine':
                result.append("")
            else:
                logger.warning("Skipping unknown block type: %s", b_type)

        return "\n".join(result)

    def _handle_header(self, content):
        level, inlines = content
        return f"<h{level}{self.class_attr}>{self._process_inlines(inlines)}</h{level}>"

    def _handle_para(self, inlines):
        text = self._process_inlines(inlines).strip()
        if STARTS_WITH_TAG_RE.match(text):
            return text
        return f"<p{self.class_attr}>{text}</p>"

    def _handle_blockquote(self, document):
        inner = BLANK_RUN_RE.sub("\n\n", self._render_document(document)).strip()
        return f"<blockquote{self.class_attr}>{inner}</blockquote>"

    def _handle_bullet_list(self, items):
        c = self.class_attr
        lines = [f"<ul{c}>"]
        for checked, inlines in items:
            checkbox = ""
            if checked is not None:
                checked_attr = " checked" if checked else ""
                checkbox = f'<input type="checkbox"{checked_attr} disabled{c} /> '
            lines.append(f"<li{c}>{checkbox}{self._process_inlines(inlines)}</li>")
        lines.append("</ul>")
        return "\n".join(lines)

    def _handle_ordered_list(self, items):
        c = self.class_attr
        lines = [f"<ol{c}>"]
        for _, inlines in items:
            lines.append(f"<li{c}>{self._process_inlines(inlines)}</li>")
        lines.append("</ol>")
        return "\n".join(lines)

    def _handle_table(self, content):
        c = self.class_attr
        header, rows = content

        lines = [f"<table{c}>"]
        cells = "".join(f"<th{c}>{self._process_inlines(cell)}</th>" for cell in header)
        lines.append(f"<tr{c}>{cells}</tr>")
        for row in rows:
            cells = "".join(f"<td{c}>{self._process_inlines(cell)}</td>" for cell in row)
            lines.append(f"<tr{c}>{cells}</tr>")
        lines.append("</table>")
        return "\n".join(lines)

    def _render_footnotes(self, footnotes):
        c = self.class_attr
        prefix = self.config.FOOTNOTE_ID_PREFIX
        section_class = self.config.FOOTNOTES_CLASS
        if self.css_class.strip():
            section_class += " " + self.css_class

        lines = [f'<section class="{section_class}">', f"<hr{c} />", f"<ol{c}>"]
        for note_id, inlines in footnotes.items():
            footnote_id = prefix + note_id
            body = self._process_inlines(inlines)
            lines.append(
                f'<li id="{footnote_id}"{c}>{body} '
                f'<a href="#ref-{footnote_id}"{c}>{self.config.FOOTNOTE_BACKLINK}</a></li>'
            )
        lines.extend(["</ol>", "</section>"])
        return "\n".join(lines)

    # --- INLINES ---

    def _process_inlines(self, inlines):
        c = self.class_attr
        result = []
        for item in inlines:
            i_type = item.get('t')
            i_content = item.get('c')

            if i_type == 'Str':
                result.append(i_content)
            elif i_type == 'NoteRef':
                footnote_id = self.config.FOOTNOTE_ID_PREFIX + i_content
                result.append(
                    f'<sup{c}><a href="#{footnote_id}" id="ref-{footnote_id}"{c}>[{i_content}]</a></sup>'
                )
            elif i_type == 'Code':
                result.append(f"<code{c}>{html.escape(i_content)}</code>")
            elif i_type == 'Image':
                alt, src = i_content
                result.append(f'<img alt="{html.escape(alt)}" src="{HTMLRenderer.escape_url(src)}"{c} />')
            elif i_type == 'Link':
                text_inlines, url = i_content
                result.append(f'<a href="{HTMLRenderer.escape_url(url)}"{c}>{self._process_inlines(text_inlines)}</a>')
            elif i_type == 'Strong':
                result.append(f"<strong{c}>{self._process_inlines(i_content)}</strong>")
            elif i_type == 'Emph':
                result.append(f"<em{c}>{self._process_inlines(i_content)}</em>")
            elif i_type == 'Superscript':
                result.append(f"<sup{c}>{self._process_inlines(i_content)}</sup>")
            elif i_type == 'Subscript':
                result.append(f"<sub{c}>{self._process_inlines(i_content)}</sub>")

        return "".join(result)
