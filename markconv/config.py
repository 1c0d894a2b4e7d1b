"""
Conversion settings shared by all markconv converters.

Every converter accepts ``config=None`` and falls back to ``DEFAULT_CONFIG``.
Override values on a fresh instance rather than mutating the default:

    config = ConversionConfig()
    config.MAX_BLOCKQUOTE_DEPTH = 4
    html = MarkdownToHtml(config=config).convert(text)
"""


class ConversionConfig:
    # Markdown -> HTML
    MAX_BLOCKQUOTE_DEPTH = 16
    FOOTNOTE_ID_PREFIX = "footnote-"
    FOOTNOTE_BACKLINK = "&#8617;"
    FOOTNOTES_CLASS = "footnotes"

    # Plain text -> HTML: single-letter words glued to the next word with &nbsp;
    # (Czech typography). An empty string disables the rule.
    NBSP_PREPOSITIONS = "aiksvzo"

    # HTML -> plain text
    LIST_INDENT = 2
    UNORDERED_LIST_MARKER = "- "
    ORDERED_LIST_MARKER = "{n}) "

    # Stream adapters
    STREAM_CHUNK_SIZE = 4096
    STREAM_ENCODING = "utf-8"

    def __init__(self, **overrides):
        for key, value in overrides.items():
            if not hasattr(self, key):
                raise AttributeError(f"Unknown config option: {key}")
            setattr(self, key, value)


DEFAULT_CONFIG = ConversionConfig()
