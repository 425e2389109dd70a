"""
Structural repairs for truncated or sloppy JSON from the model.

Each rule is a pure str -> str function, safe to apply when not needed and
idempotent. REPAIR_RULES fixes the order they run in.
"""

import re
from typing import Callable, List, Tuple

RepairRule = Callable[[str], str]

_CLOSERS = {"{": "}", "[": "]"}
_OPENERS = {"}": "{", "]": "["}

# Comma (or a run of commas) directly before a closing brace/bracket
_TRAILING_COMMA_RE = re.compile(r",[\s,]*([}\]])")

# Line endings that open a value which never arrived
_DANGLING_OPENERS = ('": "', ": [", ": {")


def _scan_structure(text: str) -> Tuple[List[str], bool]:
    """
    Single pass over the text, skipping string contents.

    Returns the stack of still-open '{' / '[' (outermost first) and whether
    the text ends inside a string.
    """
    stack: List[str] = []
    open_counts = {"{": 0, "[": 0}
    in_string = False
    escaped = False

    for ch in text:
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue

        if ch == '"':
            in_string = True
        elif ch in _CLOSERS:
            stack.append(ch)
            open_counts[ch] += 1
        elif ch in _OPENERS:
            opener = _OPENERS[ch]
            # A closer with no matching opener is stray; leave the stack alone
            if open_counts[opener]:
                while True:
                    popped = stack.pop()
                    open_counts[popped] -= 1
                    if popped == opener:
                        break

    return stack, in_string


def close_unterminated_string(text: str) -> str:
    """Close a string value cut off by truncation (last quote after last '}')."""
    last_quote = text.rfind('"')
    if last_quote == -1 or last_quote < text.rfind("}"):
        return text
    _, in_string = _scan_structure(text)
    return text + '"' if in_string else text


def _close_until(text: str, opener: str) -> str:
    stack, _ = _scan_structure(text)
    if opener not in stack:
        return text
    outermost = stack.index(opener)
    return text + "".join(_CLOSERS[ch] for ch in reversed(stack[outermost:]))


def balance_braces(text: str) -> str:
    """
    Append the missing '}' closers.

    Brackets opened inside an unclosed object are closed on the way out,
    innermost first, so '{"a": [1' becomes '{"a": [1]}'.
    """
    return _close_until(text, "{")


def balance_brackets(text: str) -> str:
    """Append the missing ']' closers."""
    return _close_until(text, "[")


def remove_trailing_commas(text: str) -> str:
    """Drop commas directly before '}' or ']'."""
    return _TRAILING_COMMA_RE.sub(r"\1", text)


def prune_incomplete_lines(text: str) -> str:
    """Drop lines that end in a key whose value never started ('"key": "', ': [', ': {')."""
    lines = text.split("\n")
    kept = [line for line in lines if not line.strip().endswith(_DANGLING_OPENERS)]
    if len(kept) == len(lines):
        return text
    return "\n".join(kept)


REPAIR_RULES: Tuple[RepairRule, ...] = (
    close_unterminated_string,
    balance_braces,
    balance_brackets,
    remove_trailing_commas,
    prune_incomplete_lines,
)


def apply_repairs(text: str) -> str:
    """Run every rule of REPAIR_RULES in order."""
    for rule in REPAIR_RULES:
        text = rule(text)
    return text
