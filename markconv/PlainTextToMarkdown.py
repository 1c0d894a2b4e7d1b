import logging
import re

from .config import DEFAULT_CONFIG
from .streams import StreamConverterMixin
from .text_helper import capitalize_first, convert_new_lines

logger = logging.getLogger(__name__)

BULLET_PREFIXES = ("- ", "* ", "• ")
ORDERED_ITEM_RE = re.compile(r'^\d+\.\s')
CODE_START = "CODE:"
CODE_END = "ENDCODE"


class PlainTextToMarkdown(StreamConverterMixin):
    """
    Line-by-line plain text to Markdown classifier.

    Recognizes tab-delimited tables, bullet and numbered lists, ``CODE:`` /
    ``ENDCODE`` blocks, all-caps headings and ``> `` quotes. Anything else is
    copied through.
    """

    def __init__(self, config=None):
        self.config = config or DEFAULT_CONFIG

    def convert(self, text):
        if not text or not text.strip():
            return ""

        lines = []
        table_width = 0
        in_code = False

        for line in convert_new_lines(text).split("\n"):
            stripped = line.strip()

            # Code markers win over the heading rule ("ENDCODE" is all caps)
            if stripped == CODE_START and not in_code:
                in_code = True
                table_width = 0
                lines.append("```")
                continue
            if stripped == CODE_END and in_code:
                in_code = False
                lines.append("```")
                continue
            if in_code:
                lines.append(line)
                continue

            if "\t" in line:
                cells = [cell.strip() for cell in line.split("\t")]
                if not table_width:
                    table_width = len(cells)
                    lines.append(self._table_row(cells))
                    lines.append(self._table_row(["---"] * table_width))
                else:
                    cells = (cells + [""] * table_width)[:table_width]
                    lines.append(self._table_row(cells))
                continue
            table_width = 0

            lines.append(self._convert_line(line))

        if in_code:
            logger.debug("CODE: block without ENDCODE, closing fence at end of input")
            lines.append("```")

        return "\n".join(lines).rstrip()

    def _convert_line(self, line):
        stripped = line.strip()
        left = line.lstrip()

        if left.startswith(BULLET_PREFIXES):
            return "- " + left[2:]
        if ORDERED_ITEM_RE.match(line):
            return stripped
        if self._is_heading(line):
            return "# " + capitalize_first(stripped.lower())
        if left.startswith("> "):
            return stripped
        return line

    @staticmethod
    def _is_heading(line):
        stripped = line.strip()
        return (
            len(stripped) > 3
            and stripped.upper() == stripped
            and any(c.isalpha() for c in stripped)
            and all(c.isalnum() or c.isspace() for c in stripped)
        )

    @staticmethod
    def _table_row(cells):
        return "| " + " | ".join(cells) + " |"
