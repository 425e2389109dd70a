"""
Career-change diagnosis backend: staged LLM diagnosis with a response
normalization pipeline that always yields a complete result.
"""

from career_diagnosis.models.diagnosis import DiagnosisResult, QuickDiagnosisResult
from career_diagnosis.models.parsing import ParseOutcome
from career_diagnosis.models.request import DiagnosisContext, StagedDiagnosisRequest
from career_diagnosis.models.response import StagedDiagnosisResponse
from career_diagnosis.services.response_parser import parse_model_response
from career_diagnosis.services.recommendation import generate_recommendations
from career_diagnosis.services.result_builder import (
    build_diagnosis_result,
    build_quick_result,
    diagnose_from_text,
    quick_diagnose_from_text,
)
from career_diagnosis.services.staged_diagnosis import StagedDiagnosisService, run_staged_diagnosis

__all__ = [
    "DiagnosisContext",
    "DiagnosisResult",
    "ParseOutcome",
    "QuickDiagnosisResult",
    "StagedDiagnosisRequest",
    "StagedDiagnosisResponse",
    "StagedDiagnosisService",
    "build_diagnosis_result",
    "build_quick_result",
    "diagnose_from_text",
    "generate_recommendations",
    "parse_model_response",
    "quick_diagnose_from_text",
    "run_staged_diagnosis",
]
