"""
Markdown tokenizer producing a Pandoc-like tree.

The tree uses the same ``{'t': type, 'c': content}`` shape as Pandoc's JSON
AST so that renderers can dispatch on ``'t'``:

    {'blocks': [
        {'t': 'Header', 'c': [1, [{'t': 'Str', 'c': 'Title'}]]},
        {'t': 'Para', 'c': [{'t': 'Strong', 'c': [{'t': 'Str', 'c': 'bold'}]}]},
     ],
     'footnotes': {'1': [{'t': 'Str', 'c': 'Footnote text'}]}}

Block types: Para, Header, HorizontalRule, BlockQuote (nested document),
OrderedList, BulletList, Table, CodeBlock, RawBlock, BlankLine.
Inline types: Str, NoteRef, Code, Image, Link, Strong, Emph, Superscript,
Subscript.
"""

import logging
import re

from .config import DEFAULT_CONFIG
from .protected_blocks import CODEBLOCK, ProtectedBlock, extract_protected_blocks
from .text_helper import convert_new_lines

logger = logging.getLogger(__name__)

FOOTNOTE_DEF_RE = re.compile(r'^\[\^(\w+)\]:[ \t]*(.*)$')
TABLE_ROW_RE = re.compile(r'^\|.+\|\s*$')
TABLE_SEPARATOR_RE = re.compile(r'^\|[-:| ]+\|\s*$')
TABLE_CELL_RE = re.compile(r'\|([^|]+)')
HR_RE = re.compile(r'^\s*(?:---|\*\*\*|___)\s*$')
HEADING_RE = re.compile(r'^(#{1,6})\s*(.*?)$')
QUOTE_PREFIX_RE = re.compile(r'^> ?')
ORDERED_ITEM_RE = re.compile(r'^\d+\.\s+(.*)$')
BULLET_ITEM_RE = re.compile(r'^[*\-+]\s+(.*)$')
TASK_RE = re.compile(r'^\[([ xX])\]\s+(.*)$')

# Inline rules in precedence order. A node built by one rule is opaque to the
# rules after it; the node's own children are parsed by the later rules only.
INLINE_RULES = [
    ('NoteRef', re.compile(r'\[\^(\w+)\]')),
    ('Code', re.compile(r'`([^`]+)`')),
    ('Image', re.compile(r'!\[(.*?)\]\((.*?)\)')),
    ('Link', re.compile(r'\[(.*?)\]\((.*?)\)')),
    ('Strong', re.compile(r'(\*\*|__)(.+?)\1')),
    ('Emph', re.compile(r'(\*|_)(.+?)\1')),
    ('Superscript', re.compile(r'\^([^^\s][^ ^]*)\^')),
    ('Subscript', re.compile(r'~([^~\s][^ ~]*)~')),
]

# Stands in for an already-built node when a rule's pattern is matched.
_NODE_CHAR = '\x00'


def new_document():
    return {'blocks': [], 'footnotes': {}}


class MarkdownParser:
    def __init__(self, config=None):
        self.config = config or DEFAULT_CONFIG

    def parse(self, text):
        """Parse Markdown text into a document dict."""
        document = new_document()
        if not text:
            return document

        fragments = extract_protected_blocks(convert_new_lines(text))
        items = self._split_lines(fragments)

        # Blockquotes are parsed through this work list instead of recursion,
        # so nesting depth never grows the call stack.
        pending = [(items, 0, document)]
        while pending:
            items, depth, target = pending.pop()
            self._parse_level(items, depth, target, pending)

        return document

    def _split_lines(self, fragments):
        """
        Turn fragments into a list of lines and ``(ProtectedBlock, tail)``
        pairs, where ``tail`` is the text that followed the block on its
        closing line.
        """
        items = []
        for i, fragment in enumerate(fragments):
            if isinstance(fragment, ProtectedBlock):
                items.append((fragment, ""))
                continue

            pieces = fragment.split("\n")
            if items and isinstance(items[-1], tuple):
                items[-1] = (items[-1][0], pieces.pop(0))

            # Text right before a block on the same line becomes its own line;
            # drop it when it is only indentation.
            if i + 1 < len(fragments) and pieces and not pieces[-1].strip():
                pieces.pop()
            items.extend(pieces)
        return items

    # --- BLOCK LEVEL ---

    def _parse_level(self, items, depth, document, pending):
        items = self._collect_footnotes(items, document)
        blocks = document['blocks']

        i = 0
        while i < len(items):
            item = items[i]

            if isinstance(item, tuple):
                blocks.append(self._protected_to_block(*item))
                i += 1
            elif self._is_table_start(items, i):
                i = self._parse_table(items, i, blocks)
            elif HR_RE.match(item):
                blocks.append({'t': 'HorizontalRule'})
                i += 1
            elif item.startswith('#'):
                m = HEADING_RE.match(item)
                level = len(m.group(1))
                blocks.append({'t': 'Header', 'c': [level, self.parse_inlines(m.group(2).strip())]})
                i += 1
            elif item.startswith('>'):
                i = self._parse_quote(items, i, depth, blocks, pending)
            elif ORDERED_ITEM_RE.match(item):
                i = self._parse_list(items, i, blocks, ordered=True)
            elif BULLET_ITEM_RE.match(item):
                i = self._parse_list(items, i, blocks, ordered=False)
            elif not item.strip():
                blocks.append({'t': 'BlankLine'})
                i += 1
            else:
                blocks.append({'t': 'Para', 'c': self.parse_inlines(item)})
                i += 1

    def _collect_footnotes(self, items, document):
        """Move ``[^id]: body`` lines into the footnote table (last one wins)."""
        result = []
        for item in items:
            if isinstance(item, str):
                m = FOOTNOTE_DEF_RE.match(item)
                if m:
                    document['footnotes'][m.group(1)] = self.parse_inlines(m.group(2))
                    result.append("")
                    continue
            result.append(item)
        return result

    def _protected_to_block(self, block, tail):
        tail_inlines = self.parse_inlines(tail.rstrip()) if tail.strip() else []
        if block.kind == CODEBLOCK:
            return {'t': 'CodeBlock', 'c': [block.lang, block.source, tail_inlines]}
        return {'t': 'RawBlock', 'c': [block.source, tail_inlines]}

    def _is_table_start(self, items, i):
        if i + 1 >= len(items) or not isinstance(items[i + 1], str):
            return False
        return bool(TABLE_ROW_RE.match(items[i]) and TABLE_SEPARATOR_RE.match(items[i + 1]))

    def _parse_table(self, items, i, blocks):
        header = self._table_cells(items[i])
        i += 2  # header and separator

        rows = []
        while i < len(items) and isinstance(items[i], str) and TABLE_ROW_RE.match(items[i]):
            rows.append(self._table_cells(items[i]))
            i += 1

        blocks.append({'t': 'Table', 'c': [header, rows]})
        return i

    def _table_cells(self, line):
        # Column counts are not reconciled with the header.
        return [self.parse_inlines(cell.strip()) for cell in TABLE_CELL_RE.findall(line.rstrip())]

    def _parse_quote(self, items, i, depth, blocks, pending):
        quote_lines = []
        while i < len(items) and isinstance(items[i], str) and items[i].startswith('>'):
            quote_lines.append(items[i])
            i += 1

        if depth >= self.config.MAX_BLOCKQUOTE_DEPTH:
            logger.debug("Blockquote nesting exceeds %d levels, rendering flat", self.config.MAX_BLOCKQUOTE_DEPTH)
            blocks.extend({'t': 'Para', 'c': self.parse_inlines(line)} for line in quote_lines)
            return i

        inner = new_document()
        blocks.append({'t': 'BlockQuote', 'c': inner})
        inner_lines = [QUOTE_PREFIX_RE.sub('', line, count=1) for line in quote_lines]
        pending.append((inner_lines, depth + 1, inner))
        return i

    def _parse_list(self, items, i, blocks, ordered):
        pattern = ORDERED_ITEM_RE if ordered else BULLET_ITEM_RE

        entries = []
        while i < len(items) and isinstance(items[i], str):
            m = pattern.match(items[i])
            if not m:
                break

            content = m.group(1)
            checked = None
            if not ordered:
                task = TASK_RE.match(content)
                if task:
                    checked = task.group(1).lower() == 'x'
                    content = task.group(2)

            entries.append([checked, self.parse_inlines(content)])
            i += 1

        blocks.append({'t': 'OrderedList' if ordered else 'BulletList', 'c': entries})
        return i

    # --- INLINE LEVEL ---

    def parse_inlines(self, text):
        """Parse one line of Markdown into a list of inline nodes."""
        if not text:
            return []
        return self._to_inlines(self._apply_rules(list(text), 0))

    def _apply_rules(self, seq, first_rule):
        # seq holds single characters and already-built nodes
        for rule_index in range(first_rule, len(INLINE_RULES)):
            seq = self._apply_rule(seq, rule_index)
        return seq

    def _apply_rule(self, seq, rule_index):
        node_type, pattern = INLINE_RULES[rule_index]
        view = "".join(item if isinstance(item, str) else _NODE_CHAR for item in seq)

        result = []
        pos = 0
        for match in pattern.finditer(view):
            result.extend(seq[pos:match.start()])
            result.append(self._build_inline(node_type, match, seq, rule_index))
            pos = match.end()

        if pos == 0:
            return seq
        result.extend(seq[pos:])
        return result

    def _build_inline(self, node_type, match, seq, rule_index):
        def group(n):
            return seq[match.start(n):match.end(n)]

        def children(n):
            return self._to_inlines(self._apply_rules(group(n), rule_index + 1))

        if node_type == 'NoteRef':
            return {'t': 'NoteRef', 'c': match.group(1)}
        if node_type == 'Code':
            return {'t': 'Code', 'c': self._source_text(group(1))}
        if node_type == 'Image':
            return {'t': 'Image', 'c': [self._source_text(group(1)), self._source_text(group(2))]}
        if node_type == 'Link':
            return {'t': 'Link', 'c': [children(1), self._source_text(group(2))]}
        if node_type in ('Strong', 'Emph'):
            return {'t': node_type, 'c': children(2)}
        return {'t': node_type, 'c': children(1)}

    def _source_text(self, seq):
        """Flatten a sequence back to Markdown source (for code, alt text and URLs)."""
        parts = []
        for item in seq:
            if isinstance(item, str):
                parts.append(item)
                continue

            i_type = item.get('t')
            i_content = item.get('c')
            if i_type == 'NoteRef':
                parts.append(f"[^{i_content}]")
            elif i_type == 'Code':
                parts.append(f"`{i_content}`")
            elif i_type == 'Image':
                parts.append(f"![{i_content[0]}]({i_content[1]})")
        return "".join(parts)

    def _to_inlines(self, seq):
        """Merge runs of characters into Str nodes."""
        inlines = []
        chars = []
        for item in seq:
            if isinstance(item, str):
                chars.append(item)
                continue
            if chars:
                inlines.append({'t': 'Str', 'c': "".join(chars)})
                chars = []
            inlines.append(item)
        if chars:
            inlines.append({'t': 'Str', 'c': "".join(chars)})
        return inlines
