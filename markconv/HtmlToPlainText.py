import html
import logging
import re

from .config import DEFAULT_CONFIG
from .streams import StreamConverterMixin

logger = logging.getLogger(__name__)

IGNORED_TAGS = ('script', 'style', 'head')
HREF_RE = re.compile(r'(?:^|\s)href\s*=\s*(?:"([^"]*)"|\'([^\']*)\'|([^\s"\']+))', re.IGNORECASE)


class _ListLevel:
    def __init__(self, ordered):
        self.ordered = ordered
        self.counter = 1


class _ScanState:
    def __init__(self, in_body):
        self.output = []
        self.in_tag = False
        self.in_body = in_body
        self.in_ignore_block = False
        self.ignore_tag = ""
        self.in_anchor = False
        self.anchor_href = ""
        self.list_stack = []


class HtmlToPlainText(StreamConverterMixin):
    """
    Single-pass HTML to plain text scanner.

    Text is emitted only after the opening ``<body>`` tag, unless
    ``fragment=True``. ``script``, ``style`` and ``head`` contents are
    skipped. Links become ``text: href``; list items are indented per nesting
    level and marked with ``- `` or an ordered counter.
    """

    def __init__(self, fragment=False, config=None):
        self.fragment = fragment
        self.config = config or DEFAULT_CONFIG

    def convert(self, text):
        if not text:
            return ""

        state = _ScanState(in_body=self.fragment)
        tag_buffer = []

        i = 0
        while i < len(text):
            c = text[i]

            if state.in_tag:
                if c == '>':
                    state.in_tag = False
                    self._handle_tag(state, "".join(tag_buffer).strip())
                    tag_buffer = []
                else:
                    tag_buffer.append(c)
            elif state.in_ignore_block:
                # Only the matching closing tag ends the block; it is then read as a tag
                closing = '</' + state.ignore_tag
                if c == '<' and text[i:i + len(closing)].lower() == closing:
                    state.in_ignore_block = False
                    state.in_tag = True
            elif c == '<':
                state.in_tag = True
            elif state.in_body:
                state.output.append(c)
            i += 1

        if not state.in_body:
            logger.debug("No <body> tag found, output is empty")

        result = html.unescape("".join(state.output)).replace('\xa0', ' ')
        return result.strip()

    def _handle_tag(self, state, tag):
        parts = tag.split(None, 1)
        if not parts:
            return
        name = parts[0].lower().rstrip('/')
        attrs = parts[1] if len(parts) > 1 else ""

        if not state.in_body:
            if name == 'body':
                state.in_body = True
            return

        if name in IGNORED_TAGS:
            state.in_ignore_block = True
            state.ignore_tag = name
        elif name == 'a':
            m = HREF_RE.search(attrs)
            if m:
                state.in_anchor = True
                state.anchor_href = next(g for g in m.groups() if g is not None)
        elif name == '/a':
            if state.in_anchor:
                state.output.append(f": {state.anchor_href}")
                state.in_anchor = False
                state.anchor_href = ""
        elif name == 'li':
            self._start_list_item(state)
        elif name in ('ol', 'ul'):
            state.list_stack.append(_ListLevel(ordered=(name == 'ol')))
        elif name in ('/ol', '/ul'):
            if state.list_stack:
                state.list_stack.pop()
            state.output.append("\n")
        elif name == 'br':
            state.output.append("\n")
        elif name == '/p':
            state.output.append("\n\n")

    def _start_list_item(self, state):
        level = state.list_stack[-1] if state.list_stack else None
        indent = " " * (self.config.LIST_INDENT * max(0, len(state.list_stack) - 1))

        if level is not None and level.ordered:
            marker = self.config.ORDERED_LIST_MARKER.format(n=level.counter)
            level.counter += 1
        else:
            marker = self.config.UNORDERED_LIST_MARKER

        state.output.append("\n" + indent + marker)
