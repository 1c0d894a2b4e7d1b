import logging

from .config import DEFAULT_CONFIG
from .streams import StreamConverterMixin
from .tag_handlers import DEFAULT_HANDLERS
from .text_helper import convert_new_lines

logger = logging.getLogger(__name__)


class HtmlToMarkdown(StreamConverterMixin):
    """
    HTML to Markdown by successive regex rewrites.

    Caller mappings (``TagMapping`` list, see ``tag_mapping``) run first in
    list order. A mapping flagged ``is_special`` is skipped when a handler
    claims its tag, and applied like any other mapping when none does. Then
    every handler in ``handlers`` runs in order, the last one stripping
    whatever markup is left.
    """

    def __init__(self, mappings=None, handlers=None, config=None):
        self.mappings = list(mappings or [])
        self.handlers = list(handlers if handlers is not None else DEFAULT_HANDLERS)
        self.config = config or DEFAULT_CONFIG

        # First handler in the chain wins for a shared tag ('li')
        self.handlers_by_tag = {}
        for handler in self.handlers:
            for tag in handler.tags:
                self.handlers_by_tag.setdefault(tag.lower(), handler)

    def handler_for(self, tag):
        """Return the handler that rewrites ``tag``, or None."""
        return self.handlers_by_tag.get(tag.lower())

    def convert(self, text):
        if not text:
            return ""

        output = convert_new_lines(text)

        applied = 0
        for mapping in self.mappings:
            if mapping.is_special:
                if self.handler_for(mapping.html_tag) is not None:
                    continue
                logger.debug("No handler for special tag <%s>, applying its mapping", mapping.html_tag)
            output = mapping.apply(output)
            applied += 1
        logger.debug("Applied %d of %d tag mappings", applied, len(self.mappings))

        for handler in self.handlers:
            output = handler.render(output)

        return output.strip()
