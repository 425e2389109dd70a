"""
Normalization utilities for model output.

LLMs sometimes return objects instead of strings in list fields, lists
instead of strings in scalar fields, or an array around the object we asked
for. This module coerces those shapes back to what the diagnosis schema
expects.

Also includes the library JSON repair used as the last repair attempt.
"""

from typing import Any, Dict, List, Optional

from json_repair import repair_json

# Keys that identify the diagnosis object when the model wraps it in an array
EXPECTED_KEYS = (
    "result_type",
    "personal_summary",
    "personal_insights",
    "personalized_action_plan",
    "summary",
    "immediate_actions",
)

# Priority order for extracting text from objects
TEXT_KEYS = (
    "action",
    "text",
    "content",
    "description",
    "title",
    "name",
    "value",
    "item",
    "reason",
)


def coerce_to_object(parsed: Any) -> Optional[Dict[str, Any]]:
    """
    Pick the diagnosis object out of a parsed JSON value.

    Returns a non-empty dict, or None when the value holds no usable object.

    Examples:
        >>> coerce_to_object({"result_type": "様子見型"})
        {'result_type': '様子見型'}

        >>> coerce_to_object([{"note": 1}, {"result_type": "様子見型"}])
        {'result_type': '様子見型'}

        >>> coerce_to_object("just text") is None
        True
    """
    if isinstance(parsed, dict):
        return parsed or None

    if isinstance(parsed, list):
        dicts_in_list = [item for item in parsed if isinstance(item, dict) and item]
        if not dicts_in_list:
            return None
        # Prefer the element that looks like a diagnosis
        for d in dicts_in_list:
            if any(k in d for k in EXPECTED_KEYS):
                return d
        return dicts_in_list[0]

    return None


def repair_llm_json(raw_content: str) -> Optional[Dict[str, Any]]:
    """
    Repair and parse potentially malformed JSON from LLM output.

    Uses json-repair library to fix common issues like:
    - Missing closing quotes, brackets and braces
    - Unescaped quotes inside strings
    - Missing commas and stray text between members

    Args:
        raw_content: Raw JSON string from LLM (may be malformed)

    Returns:
        Parsed non-empty dict if successful, None if repair failed
    """
    if not raw_content or not raw_content.strip():
        return None

    try:
        repaired = repair_json(raw_content, return_objects=True)
    except Exception:
        return None

    # repair_json returns "" (or another scalar) when it finds nothing
    return coerce_to_object(repaired)


def normalize_string_list(items: Any) -> List[str]:
    """
    Normalize a list that should contain strings but may contain objects.

    A bare non-empty string is treated as a one-item list.

    Args:
        items: The list to normalize (may be list of strings, objects, or mixed)

    Returns:
        List[str]: Normalized list of non-empty strings

    Examples:
        >>> normalize_string_list(["強み1", "強み2"])
        ['強み1', '強み2']

        >>> normalize_string_list([{"action": "履歴書を書く"}, "相談する"])
        ['履歴書を書く', '相談する']

        >>> normalize_string_list("一つだけ")
        ['一つだけ']
    """
    if not items:
        return []

    if isinstance(items, str):
        return [items.strip()] if items.strip() else []

    if not isinstance(items, list):
        return []

    result: List[str] = []

    for item in items:
        if isinstance(item, str):
            # Already a string - keep as-is (stripped)
            if item.strip():
                result.append(item.strip())
        elif isinstance(item, dict):
            # Object - try to extract text value
            text = _extract_text_from_object(item)
            if text:
                result.append(text)
        elif item is not None and not isinstance(item, (list, bool)):
            # Numbers - convert to string
            result.append(str(item))

    return result


def normalize_to_string(value: Any) -> str:
    """
    Normalize a value that should be a string but may be a list.

    Args:
        value: The value to normalize (string, list, or other)

    Returns:
        str: Normalized string (lists are joined with "、")

    Examples:
        >>> normalize_to_string("こんにちは")
        'こんにちは'

        >>> normalize_to_string(["情報整理", "相談"])
        '情報整理、相談'
    """
    if value is None or isinstance(value, bool):
        return ""

    if isinstance(value, str):
        return value.strip()

    if isinstance(value, list):
        return "、".join(normalize_string_list(value))

    if isinstance(value, dict):
        return _extract_text_from_object(value)

    # Other types - convert to string
    return str(value)


def _extract_text_from_object(obj: dict) -> str:
    """
    Extract text value from an object using known key patterns.

    Tries keys in priority order: action, text, content, etc.
    Falls back to first string value if no known keys found.

    Args:
        obj: Dictionary to extract text from

    Returns:
        Extracted string or empty string if extraction fails
    """
    # Try known keys in priority order
    for key in TEXT_KEYS:
        if key in obj:
            value = obj[key]
            if isinstance(value, str) and value.strip():
                return value.strip()

    # Fallback: use first non-empty string value
    for value in obj.values():
        if isinstance(value, str) and value.strip():
            return value.strip()

    return ""
