"""Tests for building complete diagnosis results from parse outcomes."""

import re
from datetime import datetime, timezone

import orjson
import pytest

from career_diagnosis.models.diagnosis import DiagnosisResult, EmotionalConnection
from career_diagnosis.models.parsing import ParseOutcome
from career_diagnosis.models.request import DiagnosisContext
from career_diagnosis.services.defaults import (
    DEFAULT_ACTION_PLAN,
    DEFAULT_EMOTIONAL_CONNECTION,
    DEFAULT_INSIGHTS,
    DEFAULT_RESULT_TYPE,
    DEFAULT_SUMMARIES,
    FALLBACK_SUMMARY,
)
from career_diagnosis.services.result_builder import (
    build_diagnosis_result,
    build_quick_result,
    diagnose_from_text,
    quick_diagnose_from_text,
)

NOW = datetime(2025, 6, 29, 6, 0, tzinfo=timezone.utc)

TECHNICAL_TERMS = re.compile(r"json\.parse|typeerror|syntaxerror|referenceerror|error|traceback", re.IGNORECASE)

FULL_RESPONSE = {
    "result_type": "転職検討型",
    "confidence_level": "medium",
    "urgency_level": "high",
    "emotional_connection": {
        "recognition": "毎日の重圧、よく分かります",
        "validation": "真面目に向き合ってきた証拠です",
        "hope_message": "一緒に道を探しましょう",
    },
    "personal_summary": "あなたは責任感が強く、今の環境で消耗しています。",
    "personal_insights": {
        "your_situation_analysis": "評価されない環境に疲れています",
        "emotional_pattern": "我慢を重ねてから一気に落ち込みます",
        "stress_response": "一人で抱え込みがちです",
        "motivation_drivers": ["成長実感", "感謝されること"],
        "career_strengths": ["継続力", "調整力"],
        "growth_areas": ["休む技術"],
    },
    "personalized_action_plan": {
        "this_week": [
            {
                "action": "気持ちを書き出す",
                "why_for_you": "頭の中を整理するため",
                "how_to_start": "寝る前に5分ノートに書く",
                "expected_feeling": "少し軽くなる感覚",
            }
        ],
        "this_month": [
            {
                "goal": "相談相手を見つける",
                "your_approach": "信頼できる先輩に声をかける",
                "success_indicators": ["一度話せた"],
                "potential_challenges": "遠慮してしまうこと",
                "support_needed": ["時間の確保"],
            }
        ],
        "next_3_months": [
            {
                "vision": "進む方向を決める",
                "milestone_path": ["情報収集", "面談"],
                "decision_points": ["異動か転職か"],
                "backup_plans": ["副業で試す"],
            }
        ],
    },
    "personalized_services": [
        {
            "service_category": "career_counseling",
            "why_recommended_for_you": "客観的な意見が必要なため",
            "timing_for_you": "今月中",
            "expected_benefit_for_you": "選択肢が明確になる",
            "how_to_choose": "同業界に詳しい人を選ぶ",
        }
    ],
    "your_future_scenarios": {
        "stay_current_path": {
            "probability_for_you": "中",
            "what_happens_to_you": ["消耗が続く"],
            "your_risks": ["体調を崩す"],
            "your_success_keys": ["業務量の調整"],
        },
        "change_path": {
            "probability_for_you": "高",
            "what_happens_to_you": ["新しい環境で評価される"],
            "your_risks": ["収入の一時的な低下"],
            "your_success_keys": ["準備期間の確保"],
        },
    },
}

CONTEXT = DiagnosisContext(answered_questions=10)


def user_facing_strings(result) -> list:
    """Every string in the result except the timestamp."""
    strings = []

    def walk(value):
        if isinstance(value, dict):
            for key, item in value.items():
                if key != "diagnosed_at":
                    walk(item)
        elif isinstance(value, list):
            for item in value:
                walk(item)
        elif isinstance(value, str):
            strings.append(value)

    walk(result.model_dump())
    return strings


def test_complete_response_is_kept_verbatim():
    result = diagnose_from_text(orjson.dumps(FULL_RESPONSE).decode(), CONTEXT, now=NOW)
    dumped = result.model_dump()
    for key, value in FULL_RESPONSE.items():
        assert dumped[key] == value
    assert dumped["diagnosed_at"] == "2025-06-29T15:00:00.000+09:00"
    assert dumped["phase"] == "detailed"
    assert dumped["answered_questions"] == 10


def test_single_field_markdown_response_uses_defaults():
    text = '```json\n{"result_type":"転職推奨型"}\n```\nこの結果を参考にしてください。'
    result = diagnose_from_text(text, CONTEXT)
    assert result.result_type == "転職推奨型"
    assert result.confidence_level == "high"
    assert result.personal_summary == DEFAULT_SUMMARIES["high"]
    assert result.emotional_connection == DEFAULT_EMOTIONAL_CONNECTION
    assert result.personal_insights == DEFAULT_INSIGHTS
    assert result.personalized_action_plan == DEFAULT_ACTION_PLAN


def test_truncated_summary_keeps_leading_fields():
    text = '{"result_type": "要注意型", "urgency_level": "high", "personal_summary": "あなたが感じている辛さ'
    result = diagnose_from_text(text, CONTEXT)
    assert result.result_type == "要注意型"
    assert result.urgency_level == "high"
    assert result.personal_summary.startswith("あなたが感じている辛さ")
    assert result.confidence_level == "medium"


def test_field_level_merge_inside_insights():
    outcome = ParseOutcome.succeeded(
        "repaired",
        {"personal_insights": {"career_strengths": ["粘り強さ"], "emotional_pattern": ""}},
    )
    insights = build_diagnosis_result(outcome, CONTEXT).personal_insights
    assert insights.career_strengths == ["粘り強さ"]
    assert insights.emotional_pattern == DEFAULT_INSIGHTS.emotional_pattern
    assert insights.growth_areas == DEFAULT_INSIGHTS.growth_areas


def test_partial_fields_feed_nested_sections():
    outcome = ParseOutcome.succeeded(
        "partial",
        {
            "result_type": "様子見型",
            "career_strengths": ["継続力", "責任感"],
            "immediate_actions": ["日記を書く"],
            "emotional_connection": {"recognition": "分かります"},
        },
    )
    result = build_diagnosis_result(outcome, CONTEXT)
    assert result.confidence_level == "low"
    assert result.personal_summary == DEFAULT_SUMMARIES["low"]
    assert result.personal_insights.career_strengths == ["継続力", "責任感"]
    assert result.personalized_action_plan.this_week[0].action == "日記を書く"
    assert result.personalized_action_plan.this_week[0].why_for_you == DEFAULT_ACTION_PLAN.this_week[0].why_for_you
    assert result.emotional_connection.recognition == "分かります"
    assert result.emotional_connection.validation == DEFAULT_EMOTIONAL_CONNECTION.validation


def test_items_without_key_field_are_dropped():
    outcome = ParseOutcome.succeeded(
        "complete",
        {
            "personalized_services": [{"why_recommended_for_you": "理由だけ"}, "skills_assessment"],
            "personalized_action_plan": {"this_month": [{"your_approach": "目標なし"}]},
        },
    )
    result = build_diagnosis_result(outcome, CONTEXT)
    assert [s.service_category for s in result.personalized_services] == ["skills_assessment"]
    assert result.personalized_action_plan.this_month == DEFAULT_ACTION_PLAN.this_month


def test_invalid_levels_fall_back_to_tier():
    outcome = ParseOutcome.succeeded("repaired", {"confidence_level": "very high", "urgency_level": "HIGH"})
    result = build_diagnosis_result(outcome, CONTEXT)
    assert result.confidence_level == "medium"
    assert result.urgency_level == "high"


def test_precomputed_empathy_wins():
    empathy = EmotionalConnection(recognition="認識", validation="承認", hope_message="希望")
    context = DiagnosisContext(answered_questions=3, empathy=empathy)
    result = diagnose_from_text(orjson.dumps(FULL_RESPONSE).decode(), context)
    assert result.emotional_connection == empathy
    assert result.answered_questions == 3


def test_precomputed_empathy_used_in_fallback():
    empathy = EmotionalConnection(recognition="認識", validation="承認", hope_message="希望")
    result = diagnose_from_text("", DiagnosisContext(answered_questions=1, empathy=empathy))
    assert result.emotional_connection == empathy


@pytest.mark.parametrize("text", ["", "   ", "ただの文章で、構造化された情報はありません。"])
def test_fallback_recommends_professional(text):
    result = diagnose_from_text(text, CONTEXT)
    assert isinstance(result, DiagnosisResult)
    assert result.confidence_level == "low"
    assert result.personal_summary == FALLBACK_SUMMARY
    assert "専門家" in result.personal_summary
    assert "カウンセラー" in result.personalized_action_plan.this_week[0].action
    assert result.result_type == DEFAULT_RESULT_TYPE


def test_fallback_has_same_shape_as_success():
    fallback = diagnose_from_text("", CONTEXT).model_dump()
    success = diagnose_from_text(orjson.dumps(FULL_RESPONSE).decode(), CONTEXT).model_dump()
    assert fallback.keys() == success.keys()
    for key in ("emotional_connection", "personal_insights", "personalized_action_plan", "your_future_scenarios"):
        assert fallback[key].keys() == success[key].keys()


def test_technical_wording_is_replaced():
    outcome = ParseOutcome.succeeded(
        "complete",
        {
            "result_type": "Error",
            "personal_summary": "JSON parse failed at line 3",
            "personal_insights": {"career_strengths": ["TypeError: undefined", "継続力"]},
        },
    )
    result = build_diagnosis_result(outcome, CONTEXT)
    assert result.result_type == DEFAULT_RESULT_TYPE
    assert result.personal_summary == DEFAULT_SUMMARIES["high"]
    assert result.personal_insights.career_strengths == ["継続力"]


@pytest.mark.parametrize(
    "text",
    [
        "",
        "SyntaxError: Unexpected token < in JSON at position 0",
        '{"result_type": "ReferenceError", "personal_summary": "Traceback (most recent call last)"',
        '{"personal_insights": {"growth_areas": ["error handling"]}}',
        '"immediate_actions": ["JSON.parse を直す", "休む"]',
        "{" * 10000,
        orjson.dumps(FULL_RESPONSE).decode(),
    ],
)
def test_no_technical_vocabulary_in_output(text):
    result = diagnose_from_text(text, CONTEXT)
    for value in user_facing_strings(result):
        assert not TECHNICAL_TERMS.search(value), value


def test_builder_failure_degrades_to_fallback(monkeypatch):
    from career_diagnosis.services import result_builder

    def explode(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(result_builder, "build_diagnosis_result", explode)
    events = []
    result = result_builder.diagnose_from_text(
        '{"result_type": "様子見型"}', CONTEXT, trace=lambda event, fields: events.append(event)
    )
    assert result.personal_summary == FALLBACK_SUMMARY
    assert "result_build_failed" in events


def test_quick_result_from_text():
    text = (
        '{"result_type": "転職検討型", "confidence_level": "high", "urgency_level": "low", '
        '"summary": "まずは整理から", "immediate_actions": ["日記を書く", "散歩する"], '
        '"estimated_detail_time": 20}'
    )
    result = quick_diagnose_from_text(text)
    assert result.phase == "quick"
    assert result.summary == "まずは整理から"
    assert result.immediate_actions == ["日記を書く", "散歩する"]
    assert result.estimated_detail_time == 20


def test_quick_result_defaults():
    result = build_quick_result(ParseOutcome.succeeded("partial", {"result_type": "様子見型"}))
    assert result.confidence_level == "low"
    assert result.estimated_detail_time == 15
    assert result.immediate_actions


def test_quick_fallback():
    result = quick_diagnose_from_text("")
    assert result.confidence_level == "low"
    assert len(result.immediate_actions) == 3


def test_truncated_emoji_escape_serializes():
    text = r'{"result_type": "転職推奨型", "urgency_level": "high", "personal_summary": "前向きに進みましょう\ud83d'
    result = diagnose_from_text(text, CONTEXT)

    body = result.model_dump_json()
    assert result.result_type.startswith("転職推奨型")
    assert not re.search(r"[\ud800-\udfff]", body)
    assert not any(re.search(r"[\ud800-\udfff]", value) for value in user_facing_strings(result))


def test_lone_surrogate_in_list_item_is_dropped():
    outcome = ParseOutcome.succeeded(
        "complete",
        {"result_type": "様子見型", "personal_insights": {"career_strengths": ["誠実さ\udc00", "\ud800"]}},
    )
    result = build_diagnosis_result(outcome, CONTEXT)
    assert result.personal_insights.career_strengths == ["誠実さ"]
    result.model_dump_json()


def test_multi_megabyte_truncated_reply():
    text = '{"result_type": "転職検討型", "urgency_level": "medium", "personal_summary": "' + "あなた" * 700_000
    assert len(text.encode()) > 2_000_000

    result = diagnose_from_text(text, CONTEXT)
    assert isinstance(result, DiagnosisResult)
    assert result.result_type == "転職検討型"
    assert result.urgency_level == "medium"
    assert result.personal_summary.startswith("あなたあなた")
    assert result.personal_insights.career_strengths
    assert result.personalized_action_plan.this_week
