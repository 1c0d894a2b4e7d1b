"""
Extraction of content that later Markdown passes must not touch.

Fenced code blocks and top-level raw HTML blocks are cut out of the document
before any other parsing. Instead of splicing placeholder tokens into the
text, the document is returned as an ordered list of fragments: plain strings
for the text that still needs parsing and ``ProtectedBlock`` objects for the
shielded parts. Input text can therefore never be mistaken for a placeholder.
"""

import html
import re
from dataclasses import dataclass

CODEBLOCK = 'CODEBLOCK'
HTMLBLOCK = 'HTMLBLOCK'

# One scan for both kinds; the leftmost match wins, so a fence inside an HTML
# block stays raw HTML and an HTML tag inside a fence stays code.
PROTECTED_RE = re.compile(
    r'(?P<fence>```(?P<lang>\w*)\n(?P<code>[\s\S]*?)```)'
    r'|^[ \t]*(?P<html><(?P<tag>[A-Za-z][\w\-]*)\b[^>]*>[\s\S]*?</(?P=tag)>)',
    re.MULTILINE,
)


@dataclass
class ProtectedBlock:
    kind: str
    index: int
    source: str
    lang: str = ""

    def to_html(self, class_attr=""):
        if self.kind == HTMLBLOCK:
            return self.source
        return render_code_block(self.source, self.lang, class_attr)


def render_code_block(code, lang="", class_attr=""):
    code = html.escape(code.strip('\r\n'))
    lang_attr = f' data-lang="{lang}"' if lang else ""
    return f'<pre{class_attr}><code{class_attr}{lang_attr}>{code}</code></pre>'


def extract_protected_blocks(text):
    """
    Split text into a list of ``str`` and ``ProtectedBlock`` fragments.

    Indexes are zero-based and counted separately per kind, in document order.
    Joining the string fragments with the block sources gives back the input
    (minus indentation before a raw HTML block).
    """
    if not text:
        return []

    fragments = []
    counters = {CODEBLOCK: 0, HTMLBLOCK: 0}
    pos = 0

    for match in PROTECTED_RE.finditer(text):
        fragments.append(text[pos:match.start()])

        if match.group('fence') is not None:
            block = ProtectedBlock(CODEBLOCK, counters[CODEBLOCK], match.group('code'), match.group('lang'))
        else:
            block = ProtectedBlock(HTMLBLOCK, counters[HTMLBLOCK], match.group('html'))
        counters[block.kind] += 1

        fragments.append(block)
        pos = match.end()

    fragments.append(text[pos:])
    return [f for f in fragments if not isinstance(f, str) or f]


def protected_blocks_of(fragments, kind=None):
    """Return the extracted blocks, optionally only one kind, in index order."""
    blocks = [f for f in fragments if isinstance(f, ProtectedBlock)]
    if kind is not None:
        blocks = [b for b in blocks if b.kind == kind]
    return blocks


def restore_protected_blocks(fragments, render_text=None, class_attr=""):
    """
    Join fragments back into one string.

    Text fragments go through ``render_text`` (identity by default); code
    blocks are rendered as ``<pre><code>`` and HTML blocks verbatim.
    """
    parts = []
    for fragment in fragments:
        if isinstance(fragment, ProtectedBlock):
            parts.append(fragment.to_html(class_attr))
        elif render_text is not None:
            parts.append(render_text(fragment))
        else:
            parts.append(fragment)
    return "".join(parts)
