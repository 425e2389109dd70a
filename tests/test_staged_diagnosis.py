"""Tests for the staged diagnosis service with a fake provider."""

import asyncio
import random
from typing import Optional

import orjson
import pytest

from career_diagnosis.models.request import StagedDiagnosisRequest
from career_diagnosis.providers.base import BaseProvider, ProviderError
from career_diagnosis.services.empathy import EMPATHY_TEMPLATES
from career_diagnosis.services.defaults import FALLBACK_SUMMARY
from career_diagnosis.services import staged_diagnosis
from career_diagnosis.services.staged_diagnosis import StagedDiagnosisService, run_staged_diagnosis


class FakeProvider(BaseProvider):
    name = "fake"

    def __init__(self, reply: str = "", error: Optional[Exception] = None):
        super().__init__(api_key="fake-key")
        self.reply = reply
        self.error = error
        self.calls = []

    async def complete(self, prompt, model, max_tokens, temperature, timeout=None):
        self.calls.append(
            {"prompt": prompt, "model": model, "max_tokens": max_tokens, "temperature": temperature, "timeout": timeout}
        )
        if self.error:
            raise self.error
        return self.reply


def make_request(**overrides):
    data = {
        "q1_text": "毎日ストレスで疲れています",
        "q2_text": "残業が続くと辛い",
        "answeredQuestions": 9,
        "sessionId": "session-1",
    }
    data.update(overrides)
    return StagedDiagnosisRequest.model_validate(data)


DETAILED_REPLY = orjson.dumps(
    {
        "result_type": "転職検討型",
        "confidence_level": "medium",
        "urgency_level": "high",
        "emotional_connection": {"recognition": "モデルの共感", "validation": "v", "hope_message": "h"},
        "personal_summary": "あなたは責任感の強い方です。",
    }
).decode()


def test_detailed_phase_uses_precomputed_empathy():
    provider = FakeProvider(reply=f"```json\n{DETAILED_REPLY}\n```")
    response = asyncio.run(StagedDiagnosisService(provider).run(make_request(), "detailed"))

    result = response.result
    assert response.success
    assert result.phase == "detailed"
    assert result.result_type == "転職検討型"
    assert result.personal_summary == "あなたは責任感の強い方です。"
    assert result.emotional_connection == EMPATHY_TEMPLATES["stress"]
    assert provider.calls[0]["model"] == "claude-3-5-sonnet-20241022"
    assert provider.calls[0]["max_tokens"] == 800
    assert provider.calls[0]["timeout"] == 30.0


def test_answered_questions_is_recounted():
    provider = FakeProvider(reply=DETAILED_REPLY)
    response = asyncio.run(StagedDiagnosisService(provider).run(make_request(), "detailed"))
    assert response.metadata.answered_questions == 2
    assert response.result.answered_questions == 2
    assert "（2問回答）" in provider.calls[0]["prompt"]


def test_quick_phase():
    reply = '{"result_type": "様子見型", "summary": "少し休みましょう", "immediate_actions": ["早く寝る"]}'
    provider = FakeProvider(reply=reply)
    response = asyncio.run(StagedDiagnosisService(provider).run(make_request(), "quick"))

    assert response.metadata.phase == "quick"
    assert response.result.phase == "quick"
    assert response.result.summary == "少し休みましょう"
    assert provider.calls[0]["model"] == "claude-3-haiku-20240307"
    assert provider.calls[0]["temperature"] == 0.0
    assert provider.calls[0]["timeout"] == 10.0


def test_metadata():
    response = asyncio.run(StagedDiagnosisService(FakeProvider(reply=DETAILED_REPLY)).run(make_request(), "detailed"))
    metadata = response.metadata
    assert metadata.processing_time_ms >= 0
    assert metadata.phase == "detailed"
    assert metadata.timestamp.endswith("+09:00")

    body = response.model_dump()
    assert body["success"] is True
    assert set(body["metadata"]) == {"processing_time_ms", "phase", "answered_questions", "timestamp"}


def test_broken_reply_still_yields_result():
    provider = FakeProvider(reply='{"result_type": "要注意型", "personal_summary": "あなたが感じている辛さ')
    response = asyncio.run(StagedDiagnosisService(provider).run(make_request(), "detailed"))
    assert response.result.result_type == "要注意型"
    assert response.result.confidence_level == "medium"


def test_provider_error_degrades_to_fallback():
    provider = FakeProvider(error=ProviderError("fake", "HTTP 500", 500))
    response = asyncio.run(StagedDiagnosisService(provider).run(make_request(), "detailed"))
    assert response.success
    assert response.result.confidence_level == "low"
    assert response.result.personal_summary == FALLBACK_SUMMARY
    assert response.result.emotional_connection == EMPATHY_TEMPLATES["stress"]


def test_provider_error_in_quick_phase():
    provider = FakeProvider(error=ProviderError("fake", "timeout"))
    response = asyncio.run(StagedDiagnosisService(provider).run(make_request(), "quick"))
    assert response.result.confidence_level == "low"


def test_request_without_answers_is_rejected():
    request = make_request(q1_text="  ", q2_text=None)
    with pytest.raises(ValueError):
        asyncio.run(StagedDiagnosisService(FakeProvider()).run(request, "quick"))


def test_unknown_phase_is_rejected():
    with pytest.raises(ValueError):
        asyncio.run(StagedDiagnosisService(FakeProvider()).run(make_request(), "final"))


def test_run_staged_diagnosis_helper():
    response = asyncio.run(run_staged_diagnosis(make_request(), "detailed", provider=FakeProvider(reply="")))
    assert response.result.personal_summary == FALLBACK_SUMMARY


def test_detailed_phase_attaches_service_recommendations():
    service = StagedDiagnosisService(FakeProvider(reply=DETAILED_REPLY), rng=random.Random(5))
    response = asyncio.run(service.run(make_request(), "detailed"))

    recs = response.result.service_recommendations
    assert recs[0].rank == 1
    assert recs[0].service.id == "albatross"
    assert "service_recommendations" in orjson.loads(response.model_dump_json())["result"]


def test_fallback_diagnosis_still_has_recommendations():
    provider = FakeProvider(error=ProviderError("fake", "HTTP 529", 529))
    response = asyncio.run(StagedDiagnosisService(provider).run(make_request(), "detailed"))
    assert response.result.personal_summary == FALLBACK_SUMMARY
    assert len(response.result.service_recommendations) >= 3


def test_recommendation_failure_keeps_diagnosis(monkeypatch):
    def broken(answers, rng=None):
        raise RuntimeError("catalog unavailable")

    monkeypatch.setattr(staged_diagnosis, "generate_recommendations", broken)
    response = asyncio.run(StagedDiagnosisService(FakeProvider(reply=DETAILED_REPLY)).run(make_request(), "detailed"))
    assert response.result.result_type == "転職検討型"
    assert response.result.service_recommendations == []
