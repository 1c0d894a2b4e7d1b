"""
Caller-supplied HTML tag to Markdown mappings.

A mapping file is a JSON list of records:

    [
        {"html_tag": "strong", "markdown": "**", "requires_closing_tag": true,
         "is_prefix": true, "is_suffix": true},
        {"html_tag": "br", "markdown": "\\n", "requires_closing_tag": false}
    ]
"""

import json
import logging
import re
from dataclasses import dataclass, fields

from .exceptions import MappingError

logger = logging.getLogger(__name__)

TAG_NAME_RE = re.compile(r'^[A-Za-z][\w\-]*$')


@dataclass
class TagMapping:
    html_tag: str
    markdown: str = ""
    requires_closing_tag: bool = True
    is_prefix: bool = False
    is_suffix: bool = False
    is_special: bool = False
    description: str = ""

    def __post_init__(self):
        if not isinstance(self.html_tag, str) or not TAG_NAME_RE.match(self.html_tag):
            raise MappingError(f"Invalid html_tag in tag mapping: {self.html_tag!r}")

    @classmethod
    def from_dict(cls, record):
        if not isinstance(record, dict):
            raise MappingError(f"Tag mapping must be an object, got {type(record).__name__}")
        if 'html_tag' not in record:
            raise MappingError(f"Tag mapping without html_tag: {record}")

        known = {f.name for f in fields(cls)}
        unknown = set(record) - known
        if unknown:
            logger.debug("Ignoring unknown tag mapping keys: %s", ", ".join(sorted(unknown)))

        return cls(**{k: v for k, v in record.items() if k in known})

    def pattern(self):
        tag = re.escape(self.html_tag)
        if self.requires_closing_tag:
            return re.compile(rf'<\s*{tag}\b[^>]*>(.*?)<\s*/\s*{tag}\s*>', re.IGNORECASE | re.DOTALL)
        return re.compile(rf'<\s*{tag}\b[^>]*/?>', re.IGNORECASE)

    def apply(self, text):
        if not self.requires_closing_tag:
            return self.pattern().sub(lambda m: self.markdown, text)

        prefix = self.markdown if self.is_prefix else ""
        suffix = self.markdown if self.is_suffix else ""
        return self.pattern().sub(lambda m: f"{prefix}{m.group(1)}{suffix}", text)


def load_tag_mappings(path):
    """Read a JSON list of mapping records from ``path``."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            records = json.load(f)
    except json.JSONDecodeError as e:
        raise MappingError(f"Invalid JSON in tag mapping file {path}: {e}") from e

    if not isinstance(records, list):
        raise MappingError(f"Tag mapping file must contain a list: {path}")

    mappings = [TagMapping.from_dict(record) for record in records]
    logger.debug("Loaded %d tag mappings from %s", len(mappings), path)
    return mappings


def common_tag_mappings():
    """Mappings for the usual inline and heading tags."""
    mappings = [
        TagMapping('strong', '**', is_prefix=True, is_suffix=True, description="bold"),
        TagMapping('b', '**', is_prefix=True, is_suffix=True, description="bold"),
        TagMapping('em', '*', is_prefix=True, is_suffix=True, description="italic"),
        TagMapping('i', '*', is_prefix=True, is_suffix=True, description="italic"),
        TagMapping('del', '~~', is_prefix=True, is_suffix=True, description="strikethrough"),
        TagMapping('s', '~~', is_prefix=True, is_suffix=True, description="strikethrough"),
        TagMapping('br', '\n', requires_closing_tag=False, description="line break"),
    ]
    for level in range(1, 7):
        mappings.append(TagMapping(f'h{level}', '#' * level + ' ', is_prefix=True, description=f"heading {level}"))
    mappings.append(TagMapping('p', '\n', is_prefix=True, is_suffix=True, description="paragraph"))
    return mappings
