"""
Small string utilities shared by the converters.
"""

import enum
import unicodedata


class NewLineStyle(enum.Enum):
    WINDOWS = "\r\n"
    UNIX = "\n"
    MAC = "\r"


def capitalize_first(text):
    """Upper-case the first character, leave the rest untouched."""
    if not text or not text.strip():
        return text
    return text[0].upper() + text[1:]


def remove_diacritics(text):
    """Strip combining marks, e.g. 'Příliš' -> 'Prilis'."""
    if text is None:
        return ""
    decomposed = unicodedata.normalize('NFD', text)
    stripped = "".join(ch for ch in decomposed if unicodedata.category(ch) != 'Mn')
    return unicodedata.normalize('NFC', stripped)


def convert_new_lines(text, style=NewLineStyle.UNIX):
    if text is None:
        return ""
    normalized = text.replace("\r\n", "\n").replace("\r", "\n")
    return normalized.replace("\n", style.value)


def truncate(text, max_length):
    if not text or max_length <= 0:
        return ""
    if len(text) <= max_length:
        return text
    return text[:max_length] + "…"


def slugify(text):
    """
    Make a URL-safe slug: diacritics removed, lower-cased, whitespace turned
    into dashes and every other non-alphanumeric character dropped.
    """
    if text is None:
        return ""
    result = []
    for ch in remove_diacritics(text).lower():
        if ch.isalnum():
            result.append(ch)
        elif ch.isspace():
            result.append('-')
    return "".join(result).strip('-')


def unslugify(text):
    if text is None:
        return ""
    return text.replace('-', ' ')
