"""
Field-by-field recovery from text too broken for any JSON parser.

Each known field has its own pattern that only looks at the field's local
context, so an unescaped quote elsewhere in the document does not stop the
other fields from being recovered. The first match of each field wins.

Patterns use negated character classes and disjoint alternations only,
which keeps every scan linear in the length of the text.
"""

import re
from typing import Any, Dict, List, Optional

from career_diagnosis.utils.json_text import decode_json_string

# Body of a JSON string: anything but a quote or backslash, or an escape pair
_STRING_BODY = r'((?:[^"\\]|\\.)*)'

SCALAR_FIELDS = ("result_type", "confidence_level", "urgency_level", "personal_summary")
EMOTIONAL_FIELDS = ("recognition", "validation", "hope_message")
LIST_FIELDS = ("immediate_actions", "motivation_drivers", "career_strengths", "growth_areas")


def _scalar_pattern(name: str) -> re.Pattern:
    # A value cut off by the end of the text still counts
    return re.compile(rf'"{name}"\s*:\s*"{_STRING_BODY}(?:"|\Z)', re.DOTALL)


_SCALAR_PATTERNS = {name: _scalar_pattern(name) for name in SCALAR_FIELDS}
_EMOTIONAL_PATTERNS = {name: _scalar_pattern(name) for name in EMOTIONAL_FIELDS}
_EMOTIONAL_BLOCK_RE = re.compile(r'"emotional_connection"\s*:\s*\{([^}]*)')
# An array cut off by the end of the text still counts
_LIST_PATTERNS = {
    name: re.compile(rf'"{name}"\s*:\s*\[([^\]]*)(?:\]|\Z)') for name in LIST_FIELDS
}
# Quoted strings, with a trailing colon captured so object keys can be skipped
# without losing track of which quotes open and which close
_LIST_ITEM_RE = re.compile(rf'"{_STRING_BODY}"(\s*:)?', re.DOTALL)


def _clean(raw: str) -> str:
    return decode_json_string(raw).strip()


def extract_scalar(text: str, pattern: re.Pattern) -> Optional[str]:
    """First non-empty string value matched by pattern, JSON escapes decoded."""
    match = pattern.search(text)
    if not match:
        return None
    value = _clean(match.group(1))
    return value or None


def split_list_items(body: str) -> List[str]:
    """
    Items of an array body cut out of the text.

    Quoted items first; when there are none, fall back to splitting on commas
    and stripping quote characters from each piece.

    Examples:
        >>> split_list_items('"継続力", "責任感"')
        ['継続力', '責任感']
        >>> split_list_items("継続力, '責任感'")
        ['継続力', '責任感']
    """
    quoted = [_clean(item) for item, key_colon in _LIST_ITEM_RE.findall(body) if not key_colon]
    items = [item for item in quoted if item]
    if items:
        return items

    pieces = (piece.strip().strip("\"'").strip() for piece in body.split(","))
    return [piece for piece in pieces if piece]


def extract_list(text: str, pattern: re.Pattern) -> Optional[List[str]]:
    match = pattern.search(text)
    if not match:
        return None
    return split_list_items(match.group(1)) or None


def extract_emotional_connection(text: str) -> Optional[Dict[str, str]]:
    """The three empathy strings, from the first emotional_connection object."""
    match = _EMOTIONAL_BLOCK_RE.search(text)
    if not match:
        return None

    block = match.group(1)
    emotional = {}
    for name, pattern in _EMOTIONAL_PATTERNS.items():
        value = extract_scalar(block, pattern)
        if value:
            emotional[name] = value
    return emotional or None


def extract_partial_fields(text: str) -> Dict[str, Any]:
    """
    Recover whatever known fields are present, without parsing the document.

    Returns a flat mapping: scalars, an "emotional_connection" dict, and the
    list fields at the top level. Empty when nothing was found.
    """
    recovered: Dict[str, Any] = {}

    for name, pattern in _SCALAR_PATTERNS.items():
        value = extract_scalar(text, pattern)
        if value:
            recovered[name] = value

    emotional = extract_emotional_connection(text)
    if emotional:
        recovered["emotional_connection"] = emotional

    for name, pattern in _LIST_PATTERNS.items():
        items = extract_list(text, pattern)
        if items:
            recovered[name] = items

    return recovered
