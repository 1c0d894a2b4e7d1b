"""
Fixed HTML -> Markdown rewrites applied after the caller's tag mappings.

Each handler owns the tags it rewrites. ``DEFAULT_HANDLERS`` is the order in
which they run; earlier handlers see the raw markup of later ones (a list
inside a blockquote is still ``<ul>`` when the blockquote is rewritten).
"""

import itertools
import re

FLAGS = re.IGNORECASE | re.DOTALL


def paired_tag_re(tag):
    return re.compile(rf'<{tag}\b[^>]*>(.*?)</{tag}\s*>', FLAGS)


class TagHandler:
    """Base class for one special-cased rewrite."""

    tags = ()

    def render(self, text):
        raise NotImplementedError


class BlockquoteHandler(TagHandler):
    tags = ('blockquote',)
    pattern = paired_tag_re('blockquote')

    def render(self, text):
        return self.pattern.sub(lambda m: "> " + m.group(1).strip().replace("\n", "\n> "), text)


class HorizontalRuleHandler(TagHandler):
    tags = ('hr',)
    pattern = re.compile(r'<hr\b[^>]*/?>', re.IGNORECASE)

    def render(self, text):
        return self.pattern.sub("---", text)


class PreHandler(TagHandler):
    tags = ('pre',)
    pattern = paired_tag_re('pre')
    inner_code = re.compile(r'^<code\b[^>]*>(.*?)</code>$', FLAGS)

    def render(self, text):
        def fence(m):
            content = m.group(1).strip('\r\n')
            content = self.inner_code.sub(r'\1', content)
            return f"```\n{content}\n```"

        return self.pattern.sub(fence, text)


class WrapHandler(TagHandler):
    """Replaces ``<tag>x</tag>`` with ``marker x marker``."""

    def __init__(self, tag, marker):
        self.tags = (tag,)
        self.marker = marker
        self.pattern = paired_tag_re(re.escape(tag))

    def render(self, text):
        return self.pattern.sub(lambda m: f"{self.marker}{m.group(1)}{self.marker}", text)


class UnorderedListHandler(TagHandler):
    tags = ('ul', 'li')
    pattern = paired_tag_re('ul')
    item = paired_tag_re('li')

    def render(self, text):
        return self.pattern.sub(lambda m: self.item.sub(lambda i: f"- {i.group(1).strip()}\n", m.group(1)), text)


class OrderedListHandler(TagHandler):
    tags = ('ol', 'li')
    pattern = paired_tag_re('ol')
    item = paired_tag_re('li')

    def render(self, text):
        def renumber(m):
            counter = itertools.count(1)
            return self.item.sub(lambda i: f"{next(counter)}. {i.group(1).strip()}\n", m.group(1))

        return self.pattern.sub(renumber, text)


class TableHandler(TagHandler):
    """Rows become ``| a | b |`` lines. No separator row is generated."""

    tags = ('table', 'thead', 'tbody', 'tr', 'th', 'td')
    row = paired_tag_re('tr')
    cell = re.compile(r'<t[hd]\b[^>]*>(.*?)</t[hd]\s*>', FLAGS)

    def render(self, text):
        def rewrite_row(m):
            cells = [c.strip() for c in self.cell.findall(m.group(1))]
            return "| " + " | ".join(cells) + " |\n"

        return self.row.sub(rewrite_row, text)


class LinkHandler(TagHandler):
    tags = ('a',)
    pattern = re.compile(r'<a\s+[^>]*?href="(.*?)"[^>]*>(.*?)</a>', FLAGS)

    def render(self, text):
        return self.pattern.sub(r'[\2](\1)', text)


class ImageHandler(TagHandler):
    tags = ('img',)
    pattern = re.compile(r'<img\b[^>]*>', re.IGNORECASE)
    alt = re.compile(r'\balt="(.*?)"', re.IGNORECASE)
    src = re.compile(r'\bsrc="(.*?)"', re.IGNORECASE)

    def render(self, text):
        def rewrite(m):
            src = self.src.search(m.group(0))
            if not src:
                return m.group(0)
            alt = self.alt.search(m.group(0))
            return f"![{alt.group(1) if alt else ''}]({src.group(1)})"

        return self.pattern.sub(rewrite, text)


class ContainerHandler(TagHandler):
    tags = ('div', 'span')
    pattern = re.compile(r'</?(?:div|span)\b[^>]*>', re.IGNORECASE)

    def render(self, text):
        return self.pattern.sub("", text)


class StripTagsHandler(TagHandler):
    """Drops every remaining tag; the text between tags survives."""

    pattern = re.compile(r'<[^>]+>')

    def render(self, text):
        return self.pattern.sub("", text)


DEFAULT_HANDLERS = [
    BlockquoteHandler(),
    HorizontalRuleHandler(),
    PreHandler(),
    WrapHandler('code', '`'),
    WrapHandler('sup', '^'),
    WrapHandler('sub', '~'),
    WrapHandler('bold', '**'),
    UnorderedListHandler(),
    OrderedListHandler(),
    TableHandler(),
    LinkHandler(),
    ImageHandler(),
    ContainerHandler(),
    StripTagsHandler(),
]
