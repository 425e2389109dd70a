"""
Staged diagnosis orchestrator.

Runs one phase of the two-phase diagnosis:
Phase quick:    fast model, short prompt, QuickDiagnosisResult
Phase detailed: empathy analysis first, then the larger model; the empathy
                message replaces the model's emotional_connection

Model text always goes through the response parser and result builder, so a
successful run yields a complete result however broken the model output was.
"""

import logging
import random
import time
from typing import Any, Dict, Optional

from career_diagnosis.config import settings
from career_diagnosis.models.diagnosis import DiagnosisResult, QuickDiagnosisResult
from career_diagnosis.models.request import DiagnosisContext, StagedDiagnosisRequest
from career_diagnosis.models.response import ResponseMetadata, StagedDiagnosisResponse
from career_diagnosis.providers.base import BaseProvider, ProviderError
from career_diagnosis.providers.claude import ClaudeProvider
from career_diagnosis.services.defaults import build_fallback_diagnosis, build_quick_fallback
from career_diagnosis.services.empathy import analyze_emotional_state, generate_empathetic_message
from career_diagnosis.services.prompts import build_detailed_prompt, build_quick_prompt
from career_diagnosis.services.recommendation import generate_recommendations
from career_diagnosis.services.result_builder import diagnose_from_text, quick_diagnose_from_text
from career_diagnosis.utils.time import jst_timestamp

logger = logging.getLogger(__name__)

PHASES = ("quick", "detailed")


def log_parse_event(event: str, fields: Dict[str, Any]) -> None:
    """Trace hook that forwards parser stage events to the module logger."""
    logger.debug(f"parse {event}: {fields}")


class StagedDiagnosisService:
    """
    Runs a diagnosis phase against one provider.

    The provider is injected so callers (and tests) can swap it; by default
    a ClaudeProvider built from settings is used. A seeded rng makes the
    service recommendation scores reproducible.
    """

    def __init__(self, provider: Optional[BaseProvider] = None, rng: Optional[random.Random] = None):
        self.provider = provider or ClaudeProvider()
        self.rng = rng

    async def run(self, request: StagedDiagnosisRequest, phase: str = "detailed") -> StagedDiagnosisResponse:
        """
        Validate the request, run the phase and wrap the result.

        Raises ValueError for a request without answers or an unknown phase.
        """
        if phase not in PHASES:
            raise ValueError(f"Invalid phase: {phase}")

        answered = request.answered_count()
        if answered == 0:
            raise ValueError("At least one answer is required")

        # The client-reported count is not trusted
        request = request.model_copy(update={"answered_questions": answered})

        start_time = time.perf_counter()
        logger.info(f"Starting {phase} diagnosis for session {request.session_id} ({answered} answers)")

        if phase == "quick":
            result = await self._run_quick(request)
        else:
            result = await self._run_detailed(request)

        processing_time_ms = int((time.perf_counter() - start_time) * 1000)
        logger.info(
            f"{phase} diagnosis finished in {processing_time_ms}ms "
            f"(confidence: {result.confidence_level})"
        )

        return StagedDiagnosisResponse(
            result=result,
            metadata=ResponseMetadata(
                processing_time_ms=processing_time_ms,
                phase=phase,
                answered_questions=answered,
                timestamp=jst_timestamp(),
            ),
        )

    async def _run_quick(self, request: StagedDiagnosisRequest) -> QuickDiagnosisResult:
        try:
            text = await self.provider.complete(
                build_quick_prompt(request),
                model=settings.quick_model,
                max_tokens=settings.quick_max_tokens,
                temperature=settings.quick_temperature,
                timeout=settings.quick_timeout,
            )
        except ProviderError as e:
            logger.warning(f"Quick diagnosis call failed, using fallback: {e}")
            return build_quick_fallback()

        return quick_diagnose_from_text(text, trace=log_parse_event)

    async def _run_detailed(self, request: StagedDiagnosisRequest) -> DiagnosisResult:
        state = analyze_emotional_state(request.answers())
        empathy = generate_empathetic_message(state)
        logger.debug(f"Emotional state: {state.primary_emotion} ({state.intensity})")

        context = DiagnosisContext(answered_questions=request.answered_questions, empathy=empathy)

        try:
            text = await self.provider.complete(
                build_detailed_prompt(request, empathy),
                model=settings.detailed_model,
                max_tokens=settings.detailed_max_tokens,
                temperature=settings.detailed_temperature,
                timeout=settings.detailed_timeout,
            )
        except ProviderError as e:
            logger.warning(f"Detailed diagnosis call failed, using fallback: {e}")
            result = build_fallback_diagnosis(context)
        else:
            result = diagnose_from_text(text, context, trace=log_parse_event)

        return self._attach_recommendations(result, request)

    def _attach_recommendations(self, result: DiagnosisResult, request: StagedDiagnosisRequest) -> DiagnosisResult:
        # Recommendations are optional; the diagnosis is returned without them on failure
        try:
            recommendations = generate_recommendations(request.answers(), rng=self.rng)
        except Exception as e:
            logger.warning(f"Service recommendation failed: {e}")
            recommendations = []
        return result.model_copy(update={"service_recommendations": recommendations})

    async def cleanup(self):
        await self.provider.cleanup()


async def run_staged_diagnosis(
    request: StagedDiagnosisRequest,
    phase: str = "detailed",
    provider: Optional[BaseProvider] = None,
) -> StagedDiagnosisResponse:
    """One-shot helper: run a phase and release the provider's client."""
    service = StagedDiagnosisService(provider)
    try:
        return await service.run(request, phase)
    finally:
        await service.cleanup()
