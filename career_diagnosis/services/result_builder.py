"""
Builds complete diagnosis results from whatever the parser recovered.

Merging happens field by field: a recovered career_strengths list survives
even when emotional_pattern next to it has to be defaulted. Defaults depend
on the confidence tier of the parse.
"""

import re
from datetime import datetime
from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel

from career_diagnosis.models.diagnosis import (
    ActionPlan,
    DiagnosisResult,
    EmotionalConnection,
    FutureScenario,
    FutureScenarios,
    MonthlyGoal,
    PersonalInsights,
    PersonalizedService,
    QuarterVision,
    QuickDiagnosisResult,
    WeeklyAction,
)
from career_diagnosis.models.parsing import ParseOutcome, ParseTracer
from career_diagnosis.models.request import DiagnosisContext
from career_diagnosis.services.defaults import (
    DEFAULT_ACTION_PLAN,
    DEFAULT_DETAIL_TIME,
    DEFAULT_EMOTIONAL_CONNECTION,
    DEFAULT_INSIGHTS,
    DEFAULT_QUICK_ACTIONS,
    DEFAULT_QUICK_SUMMARY,
    DEFAULT_RESULT_TYPE,
    DEFAULT_SCENARIOS,
    DEFAULT_SERVICES,
    DEFAULT_SUMMARIES,
    DEFAULT_URGENCY,
    build_fallback_diagnosis,
    build_quick_fallback,
)
from career_diagnosis.services.response_parser import parse_model_response
from career_diagnosis.utils.json_text import strip_lone_surrogates
from career_diagnosis.utils.normalize import normalize_string_list, normalize_to_string
from career_diagnosis.utils.time import jst_timestamp

M = TypeVar("M", bound=BaseModel)

LEVELS = ("low", "medium", "high")

# Wording that must never reach the user, even when the model wrote it
TECHNICAL_TERMS_RE = re.compile(r"error|json|parse|traceback", re.IGNORECASE)

# List fields of personal_insights that the partial extractor returns flat
INSIGHT_LIST_FIELDS = ("motivation_drivers", "career_strengths", "growth_areas")


# =============================================================================
# FIELD HELPERS
# =============================================================================

def is_presentable(text: str) -> bool:
    """Non-empty and free of technical wording."""
    return bool(text) and not TECHNICAL_TERMS_RE.search(text)


def _text(value: Any, default: str) -> str:
    text = strip_lone_surrogates(normalize_to_string(value))
    return text if is_presentable(text) else default


def _text_list(value: Any, default: List[str]) -> List[str]:
    items = [strip_lone_surrogates(item) for item in normalize_string_list(value)]
    items = [item for item in items if is_presentable(item)]
    return items or list(default)


def _level(value: Any, default: str) -> str:
    level = normalize_to_string(value).lower()
    return level if level in LEVELS else default


def _mapping(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _merge(model: Type[M], raw: Any, template: M) -> M:
    """
    Build model from raw, falling back to template one field at a time.

    Only handles models whose fields are str or List[str].
    """
    source = _mapping(raw)
    values = {}
    for name in model.model_fields:
        default = getattr(template, name)
        if isinstance(default, list):
            values[name] = _text_list(source.get(name), default)
        else:
            values[name] = _text(source.get(name), default)
    return model(**values)


def _merge_items(model: Type[M], raw: Any, key_field: str, template: M) -> List[M]:
    """
    Complete each recovered item of a list field.

    Bare strings become items whose key_field is that string. Items without
    a usable key_field are dropped. Returns [] when nothing usable remains.
    """
    if isinstance(raw, (dict, str)):
        raw = [raw]
    if not isinstance(raw, list):
        return []

    items = []
    for entry in raw:
        if isinstance(entry, str):
            entry = {key_field: entry}
        if not isinstance(entry, dict) or not _text(entry.get(key_field), ""):
            continue
        items.append(_merge(model, entry, template))
    return items


def _positive_int(value: Any, default: int) -> int:
    if isinstance(value, bool):
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


# =============================================================================
# SECTION BUILDERS
# =============================================================================

def _build_insights(parsed: Dict[str, Any]) -> PersonalInsights:
    nested = _mapping(parsed.get("personal_insights"))
    source = dict(nested)
    for name in INSIGHT_LIST_FIELDS:
        if not normalize_string_list(nested.get(name)):
            source[name] = parsed.get(name)
    return _merge(PersonalInsights, source, DEFAULT_INSIGHTS)


def _build_action_plan(parsed: Dict[str, Any]) -> ActionPlan:
    plan = _mapping(parsed.get("personalized_action_plan"))

    this_week = _merge_items(WeeklyAction, plan.get("this_week"), "action", DEFAULT_ACTION_PLAN.this_week[0])
    if not this_week:
        # Quick-style immediate_actions can stand in for the weekly plan
        this_week = _merge_items(
            WeeklyAction, parsed.get("immediate_actions"), "action", DEFAULT_ACTION_PLAN.this_week[0]
        )

    this_month = _merge_items(MonthlyGoal, plan.get("this_month"), "goal", DEFAULT_ACTION_PLAN.this_month[0])
    next_3_months = _merge_items(
        QuarterVision, plan.get("next_3_months"), "vision", DEFAULT_ACTION_PLAN.next_3_months[0]
    )

    return ActionPlan(
        this_week=this_week or DEFAULT_ACTION_PLAN.this_week,
        this_month=this_month or DEFAULT_ACTION_PLAN.this_month,
        next_3_months=next_3_months or DEFAULT_ACTION_PLAN.next_3_months,
    )


def _build_services(raw: Any) -> List[PersonalizedService]:
    services = _merge_items(PersonalizedService, raw, "service_category", DEFAULT_SERVICES[0])
    return services or list(DEFAULT_SERVICES)


def _build_scenarios(raw: Any) -> FutureScenarios:
    scenarios = _mapping(raw)
    return FutureScenarios(
        stay_current_path=_merge(
            FutureScenario, scenarios.get("stay_current_path"), DEFAULT_SCENARIOS.stay_current_path
        ),
        change_path=_merge(FutureScenario, scenarios.get("change_path"), DEFAULT_SCENARIOS.change_path),
    )


# =============================================================================
# RESULT BUILDERS
# =============================================================================

def build_diagnosis_result(
    outcome: ParseOutcome,
    context: DiagnosisContext,
    now: Optional[datetime] = None,
) -> DiagnosisResult:
    """
    Complete detailed diagnosis from a parse outcome.

    Unsuccessful outcomes get the fallback diagnosis. A pre-computed empathy
    message in the context always replaces the model's emotional_connection.
    """
    if not outcome.success:
        return build_fallback_diagnosis(context, now)

    parsed = outcome.data
    tier = outcome.confidence

    emotional_connection = context.empathy or _merge(
        EmotionalConnection, parsed.get("emotional_connection"), DEFAULT_EMOTIONAL_CONNECTION
    )

    return DiagnosisResult(
        result_type=_text(parsed.get("result_type"), DEFAULT_RESULT_TYPE),
        confidence_level=_level(parsed.get("confidence_level"), tier),
        urgency_level=_level(parsed.get("urgency_level"), DEFAULT_URGENCY),
        emotional_connection=emotional_connection,
        personal_summary=_text(parsed.get("personal_summary"), DEFAULT_SUMMARIES[tier]),
        personal_insights=_build_insights(parsed),
        personalized_action_plan=_build_action_plan(parsed),
        personalized_services=_build_services(parsed.get("personalized_services")),
        your_future_scenarios=_build_scenarios(parsed.get("your_future_scenarios")),
        diagnosed_at=jst_timestamp(now),
        answered_questions=context.answered_questions,
    )


def build_quick_result(outcome: ParseOutcome) -> QuickDiagnosisResult:
    """Phase 1 result from a parse outcome, with the same per-field defaults."""
    if not outcome.success:
        return build_quick_fallback()

    parsed = outcome.data
    return QuickDiagnosisResult(
        result_type=_text(parsed.get("result_type"), DEFAULT_RESULT_TYPE),
        confidence_level=_level(parsed.get("confidence_level"), outcome.confidence),
        urgency_level=_level(parsed.get("urgency_level"), DEFAULT_URGENCY),
        summary=_text(parsed.get("summary") or parsed.get("personal_summary"), DEFAULT_QUICK_SUMMARY),
        immediate_actions=_text_list(parsed.get("immediate_actions"), DEFAULT_QUICK_ACTIONS),
        estimated_detail_time=_positive_int(parsed.get("estimated_detail_time"), DEFAULT_DETAIL_TIME),
    )


def diagnose_from_text(
    text: Optional[str],
    context: DiagnosisContext,
    trace: Optional[ParseTracer] = None,
    now: Optional[datetime] = None,
) -> DiagnosisResult:
    """Raw model text to a complete detailed diagnosis. Never raises."""
    outcome = parse_model_response(text, trace)
    try:
        return build_diagnosis_result(outcome, context, now)
    except Exception as e:
        if trace:
            trace("result_build_failed", {"method": outcome.method, "exception": type(e).__name__})
        return build_fallback_diagnosis(context, now)


def quick_diagnose_from_text(text: Optional[str], trace: Optional[ParseTracer] = None) -> QuickDiagnosisResult:
    """Raw model text to a complete quick diagnosis. Never raises."""
    outcome = parse_model_response(text, trace)
    try:
        return build_quick_result(outcome)
    except Exception as e:
        if trace:
            trace("result_build_failed", {"method": outcome.method, "exception": type(e).__name__})
        return build_quick_fallback()
