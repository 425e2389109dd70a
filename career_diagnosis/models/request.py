from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, Literal, Optional

from career_diagnosis.models.diagnosis import EmotionalConnection

QUESTION_COUNT = 10


class StagedDiagnosisRequest(BaseModel):
    """Free-text answers for one diagnosis run (camelCase keys from the web client)."""
    q1_text: Optional[str] = None
    q2_text: Optional[str] = None
    q3_text: Optional[str] = None
    q4_text: Optional[str] = None
    q5_text: Optional[str] = None
    q6_text: Optional[str] = None
    q7_text: Optional[str] = None
    q8_text: Optional[str] = None
    q9_text: Optional[str] = None
    q10_text: Optional[str] = None
    diagnosis_type: Literal["partial", "final"] = Field("final", alias="diagnosisType")
    answered_questions: int = Field(0, ge=0, alias="answeredQuestions")
    session_id: str = Field(..., min_length=1, alias="sessionId")

    model_config = ConfigDict(populate_by_name=True)

    def answers(self) -> Dict[str, str]:
        """Answers keyed q1..q10, with missing ones as empty strings."""
        return {
            f"q{num}": getattr(self, f"q{num}_text") or ""
            for num in range(1, QUESTION_COUNT + 1)
        }

    def answered_count(self) -> int:
        """Number of answers that are not blank."""
        return sum(1 for answer in self.answers().values() if answer.strip())


class DiagnosisContext(BaseModel):
    """Request context the result builder needs besides the model text."""
    answered_questions: int = Field(0, ge=0, alias="answeredQuestions")
    # Pre-computed empathy message; always wins over the model's own
    empathy: Optional[EmotionalConnection] = None

    model_config = ConfigDict(populate_by_name=True, frozen=True)
