import html
import logging
import re

from marko import Markdown
from marko.renderer import Renderer

from .config import DEFAULT_CONFIG
from .streams import StreamConverterMixin
from .text_helper import convert_new_lines

logger = logging.getLogger(__name__)

TABLE_LINE_RE = re.compile(r'^\|.*\|\s*$')
TABLE_SEPARATOR_RE = re.compile(r'^\|[-:\s|]+\|\s*$')
FENCE_RE = re.compile(r'^\s*(```|~~~)')
FOOTNOTE_DEF_RE = re.compile(r'^\[\^[^\]]*\]:')
FOOTNOTE_REF_RE = re.compile(r'\[\^[^\]]*\]')
TAG_RE = re.compile(r'<[^>]+>')
BLANK_RUN_RE = re.compile(r'\n{3,}')


class PlainTextRenderer(Renderer):
    """
    Renders a marko tree as readable plain text.

    Blocks are separated by blank lines, headings are upper-cased, code is
    framed by ``CODE:`` / ``ENDCODE`` lines and links keep their target in
    parentheses.
    """

    def render_document(self, element):
        return self._render_blocks(element.children, "\n\n")

    def _render_blocks(self, children, separator):
        parts = [self.render(child) for child in children]
        return separator.join(part for part in parts if part)

    def render_paragraph(self, element):
        return self.render_children(element).strip()

    def render_heading(self, element):
        return self.render_children(element).strip().upper()

    render_setext_heading = render_heading

    def render_code_block(self, element):
        code = element.children[0].children if element.children else ""
        return f"CODE:\n{code.strip(chr(10))}\nENDCODE"

    render_fenced_code = render_code_block

    def render_html_block(self, element):
        return TAG_RE.sub("", element.body).strip()

    def render_thematic_break(self, element):
        return "---"

    def render_blank_line(self, element):
        return ""

    def render_link_ref_def(self, element):
        return ""

    def render_quote(self, element):
        inner = self._render_blocks(element.children, "\n\n")
        return "\n".join("> " + line if line else ">" for line in inner.split("\n"))

    def render_list(self, element):
        items = []
        for i, item in enumerate(element.children):
            marker = f"{element.start + i}. " if element.ordered else "- "
            body = self.render(item)
            # Continuation lines line up with the item text
            body = body.replace("\n", "\n" + " " * len(marker))
            items.append(marker + body)
        return "\n".join(items)

    def render_list_item(self, element):
        return self._render_blocks(element.children, "\n")

    def render_emphasis(self, element):
        return self.render_children(element)

    render_strong_emphasis = render_emphasis

    def render_link(self, element):
        return f"{self.render_children(element)} ({element.dest})"

    render_image = render_link

    def render_auto_link(self, element):
        return self.render_children(element)

    def render_code_span(self, element):
        return element.children

    def render_inline_html(self, element):
        return ""

    def render_line_break(self, element):
        return "\n"

    def render_literal(self, element):
        return element.children

    def render_raw_text(self, element):
        return html.unescape(element.children)


class MarkdownToPlainText(StreamConverterMixin):
    """
    Markdown to plain text.

    Pipe tables are turned into tab-separated rows before parsing; the rest
    of the document is parsed by marko (CommonMark) and rendered with
    ``PlainTextRenderer``. Footnote definitions and references are dropped.
    """

    def __init__(self, config=None):
        self.config = config or DEFAULT_CONFIG
        self.markdown = Markdown(renderer=PlainTextRenderer)

    def convert(self, text):
        if not text:
            return ""

        source = self._prepare_source(convert_new_lines(text))
        output = self.markdown.convert(source)
        return BLANK_RUN_RE.sub("\n\n", output).strip()

    @staticmethod
    def _prepare_source(text):
        """
        Rewrite ``| a | b |`` rows as ``a<TAB>b`` (separator rows are dropped)
        and remove footnote definitions and references. Fenced code is left
        alone.

        Footnotes go before marko sees the text: it would read ``[^1]: x`` as
        a link reference definition and ``[^1]`` as a link to it.
        """
        lines = []
        in_fence = False
        for line in text.split("\n"):
            if FENCE_RE.match(line):
                in_fence = not in_fence
            elif not in_fence:
                if FOOTNOTE_DEF_RE.match(line):
                    line = ""
                elif TABLE_LINE_RE.match(line):
                    if TABLE_SEPARATOR_RE.match(line):
                        continue
                    cells = [cell.strip() for cell in line.strip().strip('|').split('|')]
                    line = "\t".join(cells)
                line = FOOTNOTE_REF_RE.sub("", line)
            lines.append(line)
        return "\n".join(lines)
