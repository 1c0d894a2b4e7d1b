import logging
import re

from .config import DEFAULT_CONFIG
from .streams import StreamConverterMixin
from .text_helper import convert_new_lines

logger = logging.getLogger(__name__)

UL_ITEM_RE = re.compile(r'^[-•] ')
OL_ITEM_RE = re.compile(r'^\d+[.)] ')
LINK_RE = re.compile(
    r'(?P<url>\bhttps?://[^\s<>"]+\b)'
    r'|(?P<email>\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b)'
)
MINIFY_RE = re.compile(r'>\s+<')


def escape_html(text):
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


class PlainTextToHtml(StreamConverterMixin):
    """
    Plain text to simple HTML.

    The text is wrapped in ``<p>``; blank lines start a new paragraph, ``- ``
    and ``1. `` lines become lists, URLs and e-mail addresses become links.
    Single-letter words listed in ``config.NBSP_PREPOSITIONS`` are glued to
    the following word with ``&nbsp;``.
    """

    def __init__(self, minify=False, config=None):
        self.minify = minify
        self.config = config or DEFAULT_CONFIG

        prepositions = self.config.NBSP_PREPOSITIONS
        self.preposition_re = re.compile(rf'\b([{re.escape(prepositions)}])\s') if prepositions else None

    def convert(self, text):
        if not text:
            return ""

        parts = ["<p>"]
        open_list = None

        for line in convert_new_lines(text).split("\n"):
            if not line.strip():
                if open_list:
                    parts.append(f"</{open_list}>\n")
                    open_list = None
                parts.append("</p>\n<p>")
                continue

            if UL_ITEM_RE.match(line):
                open_list = self._switch_list(parts, open_list, 'ul')
                parts.append(f"<li>{escape_html(line[2:])}</li>\n")
                continue
            if OL_ITEM_RE.match(line):
                open_list = self._switch_list(parts, open_list, 'ol')
                parts.append(f"<li>{escape_html(OL_ITEM_RE.sub('', line, count=1))}</li>\n")
                continue
            if open_list:
                parts.append(f"</{open_list}>\n")
                open_list = None

            indent_width = len(line) - len(line.lstrip(' '))
            parts.append("&nbsp;" * indent_width + self._format_line(line[indent_width:]) + "<br>\n")

        if open_list:
            parts.append(f"</{open_list}>\n")
        parts.append("</p>")

        result = "".join(parts)
        if self.minify:
            result = MINIFY_RE.sub("><", result).replace("\n", "").replace("\r", "")
        return result

    @staticmethod
    def _switch_list(parts, open_list, wanted):
        if open_list == wanted:
            return open_list
        if open_list:
            parts.append(f"</{open_list}>\n")
        parts.append(f"<{wanted}>\n")
        return wanted

    def _format_line(self, line):
        """Escape a line, link URLs and e-mails, and apply the preposition rule outside links."""
        result = []
        pos = 0
        for match in LINK_RE.finditer(line):
            result.append(self._format_text(line[pos:match.start()]))
            target = escape_html(match.group(0))
            href = target if match.group('url') else f"mailto:{target}"
            result.append(f'<a href="{href}">{target}</a>')
            pos = match.end()
        result.append(self._format_text(line[pos:]))
        return "".join(result)

    def _format_text(self, text):
        text = escape_html(text)
        if self.preposition_re is not None:
            text = self.preposition_re.sub(r'\1&nbsp;', text)
        return text
