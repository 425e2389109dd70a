"""
Response normalization pipeline for Claude diagnosis output.

The model is asked for JSON but may return it truncated, wrapped in
markdown, repeated, or not at all. Stages run in strict fallback order and
stop at the first success:

1. unwrap   - take the body of the last ```json block
2. complete - strict parse of the sanitized text
3. repaired - structural repairs, then parse
4. partial  - per-field regex extraction
5. fallback - nothing recoverable

No stage raises. Stage events go to the optional trace hook supplied by the
caller; nothing here logs on its own.
"""

from typing import Any, Dict, Optional

import orjson

from career_diagnosis.models.parsing import ParseOutcome, ParseTracer
from career_diagnosis.services.extraction import extract_partial_fields
from career_diagnosis.services.repair import apply_repairs
from career_diagnosis.utils.json_text import sanitize_json_text, unwrap_markdown_json
from career_diagnosis.utils.normalize import coerce_to_object, repair_llm_json


def _no_trace(event: str, fields: Dict[str, Any]) -> None:
    pass


def _load_object(text: str) -> Optional[Dict[str, Any]]:
    """Strict parse; the diagnosis object or None."""
    try:
        parsed = orjson.loads(text)
    except orjson.JSONDecodeError:
        return None
    return coerce_to_object(parsed)


def try_direct_parse(text: str, trace: ParseTracer = _no_trace) -> ParseOutcome:
    """One strict parse attempt of the sanitized text."""
    data = _load_object(sanitize_json_text(text))
    if data is None:
        trace("direct_parse_failed", {"length": len(text)})
        return ParseOutcome.failed("complete", "strict parse rejected the text")

    trace("direct_parse_succeeded", {"fields": len(data)})
    return ParseOutcome.succeeded("complete", data)


def try_repair_parse(text: str, trace: ParseTracer = _no_trace) -> ParseOutcome:
    """
    Repair the text structurally and parse it once.

    When the rule-based repair still does not parse, the json-repair
    library gets one attempt on the sanitized text.
    """
    try:
        sanitized = sanitize_json_text(text)
        data = _load_object(apply_repairs(sanitized))
        if data is None:
            data = repair_llm_json(sanitized)
            if data is not None:
                trace("library_repair_used", {"fields": len(data)})
    except Exception as e:
        trace("repair_crashed", {"exception": type(e).__name__})
        return ParseOutcome.failed("repaired", f"repair raised {type(e).__name__}")

    if data is None:
        trace("repair_failed", {"length": len(text)})
        return ParseOutcome.failed("repaired", "repaired text still rejected")

    trace("repair_succeeded", {"fields": len(data)})
    return ParseOutcome.succeeded("repaired", data)


def try_partial_extraction(text: str, trace: ParseTracer = _no_trace) -> ParseOutcome:
    """Recover individual known fields; success needs at least one."""
    try:
        data = extract_partial_fields(text)
    except Exception as e:
        trace("partial_extraction_crashed", {"exception": type(e).__name__})
        return ParseOutcome.failed("partial", f"extraction raised {type(e).__name__}")

    if not data:
        trace("partial_extraction_failed", {"length": len(text)})
        return ParseOutcome.failed("partial", "no known field found")

    trace("partial_extraction_succeeded", {"fields": sorted(data)})
    return ParseOutcome.succeeded("partial", data)


def parse_model_response(text: Optional[str], trace: Optional[ParseTracer] = None) -> ParseOutcome:
    """
    Turn raw model text into a ParseOutcome.

    Always returns; an unsuccessful outcome has method "fallback" and tells
    the result builder to use the fallback diagnosis.
    """
    trace = trace or _no_trace

    if not text or not text.strip():
        trace("empty_response", {})
        return ParseOutcome.failed("fallback", "empty response")

    stripped = text.strip()
    candidate = unwrap_markdown_json(stripped)
    if candidate != stripped:
        trace("markdown_unwrapped", {"length": len(candidate)})

    for stage in (try_direct_parse, try_repair_parse, try_partial_extraction):
        outcome = stage(candidate, trace)
        if outcome.success:
            return outcome

    trace("all_stages_failed", {"length": len(candidate)})
    return ParseOutcome.failed("fallback", "no stage recovered any field")
