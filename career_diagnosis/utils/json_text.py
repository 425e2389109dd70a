"""
Text-level helpers applied to raw model output before any parse attempt.

All functions are pure and never raise on string input.
"""

import re

import orjson

# ```json ... ``` fenced blocks (lazy body, so consecutive blocks stay separate)
_JSON_FENCE_RE = re.compile(r"```json\s*(.*?)```", re.DOTALL)

# ASCII control characters that are invalid inside JSON strings.
# Tab, LF and CR are kept: they are legal whitespace between tokens.
_CONTROL_CHARS_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")

# A backslash plus the escape it starts, if that escape is valid JSON.
# Matching pairs left to right keeps "\\d" (escaped backslash + d) intact.
_BACKSLASH_RE = re.compile(r'\\(?:["\\/bfnrt]|u[0-9a-fA-F]{4})?')

# Halves of a surrogate pair; a reply cut off inside an emoji leaves one behind
_SURROGATE_RE = re.compile(r"[\ud800-\udfff]")


def unwrap_markdown_json(text: str) -> str:
    """
    Return the body of the last ```json fenced block, or the text unchanged.

    Models sometimes emit a draft block followed by a corrected one,
    so the last block wins.

    Examples:
        >>> unwrap_markdown_json('Here:\\n```json\\n{"a": 1}\\n```\\nDone.')
        '{"a": 1}'
        >>> unwrap_markdown_json('{"a": 1}')
        '{"a": 1}'
    """
    last_body = None
    for match in _JSON_FENCE_RE.finditer(text):
        last_body = match.group(1)
    if last_body is None:
        return text
    return last_body.strip()


def _escape_stray_backslash(match: re.Match) -> str:
    escape = match.group(0)
    return escape if len(escape) > 1 else "\\\\"


def strip_trailing_comma(text: str) -> str:
    """Drop the comma(s) that end the text, along with surrounding whitespace."""
    stripped = text.rstrip()
    if not stripped.endswith(","):
        return text
    while stripped.endswith(","):
        stripped = stripped[:-1].rstrip()
    return stripped


def sanitize_json_text(text: str) -> str:
    """
    Make model output safer to hand to a strict JSON parser.

    - removes ASCII control characters
    - escapes backslashes that do not start a valid JSON escape
      (this changes string content; parseability wins over fidelity)
    - strips a trailing comma at the very end of the text

    Idempotent: sanitize_json_text(sanitize_json_text(x)) == sanitize_json_text(x)
    """
    cleaned = _CONTROL_CHARS_RE.sub("", text)
    cleaned = _BACKSLASH_RE.sub(_escape_stray_backslash, cleaned)
    return strip_trailing_comma(cleaned)


def decode_json_string(raw: str) -> str:
    """
    Decode JSON escapes (\\n, \\", \\uXXXX...) in a string body cut out by regex.

    Returns the input unchanged when it is not a valid JSON string body.
    """
    if "\\" not in raw:
        return raw
    try:
        decoded = orjson.loads(f'"{raw}"')
    except orjson.JSONDecodeError:
        return raw
    return decoded if isinstance(decoded, str) else raw


def strip_lone_surrogates(text: str) -> str:
    """Drop surrogate code points, which cannot be encoded as UTF-8."""
    return _SURROGATE_RE.sub("", text)
