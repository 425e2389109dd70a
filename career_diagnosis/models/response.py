from pydantic import BaseModel
from typing import Literal, Union

from career_diagnosis.models.diagnosis import DiagnosisResult, QuickDiagnosisResult


class ResponseMetadata(BaseModel):
    processing_time_ms: int
    phase: Literal["quick", "detailed"]
    answered_questions: int
    timestamp: str


class StagedDiagnosisResponse(BaseModel):
    """Envelope handed to the web handler, which owns HTTP semantics."""

    success: bool = True
    result: Union[DiagnosisResult, QuickDiagnosisResult]
    metadata: ResponseMetadata
