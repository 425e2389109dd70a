"""
Outcome of one stage of the response normalization pipeline.

Stages run in fixed order and stop at the first success:
complete (strict parse) -> repaired (textual repair) -> partial (per-field
extraction) -> fallback (nothing recoverable).
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Literal, Optional

ParseMethod = Literal["complete", "repaired", "partial", "fallback"]
ConfidenceTier = Literal["high", "medium", "low"]

# Stage events are reported here instead of a module logger.
# Called as trace(event, fields).
ParseTracer = Callable[[str, Dict[str, Any]], None]

METHOD_CONFIDENCE: Dict[str, ConfidenceTier] = {
    "complete": "high",
    "repaired": "medium",
    "partial": "low",
    "fallback": "low",
}


@dataclass(frozen=True)
class ParseOutcome:
    """Recovered data (or the lack of it) tagged with the stage that produced it."""

    success: bool
    method: ParseMethod
    data: Optional[Dict[str, Any]] = None
    detail: Optional[str] = None  # diagnostics for logs, never shown to users

    def __post_init__(self):
        if self.method not in METHOD_CONFIDENCE:
            raise ValueError(f"Unknown parse method: {self.method!r}")
        if self.success and not self.data:
            raise ValueError("A successful outcome requires non-empty data")

    @property
    def confidence(self) -> ConfidenceTier:
        return METHOD_CONFIDENCE[self.method]

    @classmethod
    def succeeded(cls, method: ParseMethod, data: Dict[str, Any]) -> "ParseOutcome":
        return cls(success=True, method=method, data=data)

    @classmethod
    def failed(cls, method: ParseMethod, detail: Optional[str] = None) -> "ParseOutcome":
        return cls(success=False, method=method, data=None, detail=detail)
