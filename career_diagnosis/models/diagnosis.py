"""
Diagnosis result models.

Phase 1 (quick): short classification from the fast model.
Phase 2 (detailed): fully personalized diagnosis from the detailed model.

Every field is required. The result builder fills anything the model did not
return with defaults, so callers never need to check for missing keys.
"""

from typing import List, Literal
from pydantic import BaseModel, ConfigDict, Field

Level = Literal["low", "medium", "high"]


class FrozenModel(BaseModel):
    """Immutable after construction."""
    model_config = ConfigDict(frozen=True)


class EmotionalConnection(FrozenModel):
    recognition: str
    validation: str
    hope_message: str


class PersonalInsights(FrozenModel):
    your_situation_analysis: str
    emotional_pattern: str
    stress_response: str
    motivation_drivers: List[str] = Field(min_length=1)
    career_strengths: List[str] = Field(min_length=1)
    growth_areas: List[str] = Field(min_length=1)


class WeeklyAction(FrozenModel):
    action: str
    why_for_you: str
    how_to_start: str
    expected_feeling: str


class MonthlyGoal(FrozenModel):
    goal: str
    your_approach: str
    success_indicators: List[str]
    potential_challenges: str
    support_needed: List[str]


class QuarterVision(FrozenModel):
    vision: str
    milestone_path: List[str]
    decision_points: List[str]
    backup_plans: List[str]


class ActionPlan(FrozenModel):
    """Exactly three time horizons, each with at least one item."""
    this_week: List[WeeklyAction] = Field(min_length=1)
    this_month: List[MonthlyGoal] = Field(min_length=1)
    next_3_months: List[QuarterVision] = Field(min_length=1)


class PersonalizedService(FrozenModel):
    service_category: str
    why_recommended_for_you: str
    timing_for_you: str
    expected_benefit_for_you: str
    how_to_choose: str


class FutureScenario(FrozenModel):
    probability_for_you: str
    what_happens_to_you: List[str]
    your_risks: List[str]
    your_success_keys: List[str]


class FutureScenarios(FrozenModel):
    stay_current_path: FutureScenario
    change_path: FutureScenario


class ServiceInfo(FrozenModel):
    """One entry of the partner service catalog."""
    id: str
    name: str
    description: str
    category: List[str]
    target_type: List[str]
    urgency_level: List[Level]
    url: str
    tags: List[str]


class ServiceRecommendation(FrozenModel):
    """A catalog service ranked for this user (rank 1 is the best match)."""
    service: ServiceInfo
    rank: int = Field(ge=1)
    score: float
    reason: str
    priority: Literal["urgent", "recommended", "consider"]
    timing: Literal["immediate", "1-3months", "3-6months"]
    expected_outcome: str
    match_factors: List[str]


class DiagnosisResult(FrozenModel):
    """Phase 2 detailed personal diagnosis."""
    result_type: str
    confidence_level: Level
    urgency_level: Level

    emotional_connection: EmotionalConnection
    personal_summary: str
    personal_insights: PersonalInsights
    personalized_action_plan: ActionPlan
    personalized_services: List[PersonalizedService] = Field(min_length=1)
    your_future_scenarios: FutureScenarios
    # Attached by the staged service after the result is built
    service_recommendations: List[ServiceRecommendation] = Field(default_factory=list)

    diagnosed_at: str
    phase: Literal["detailed"] = "detailed"
    answered_questions: int = Field(ge=0)


class QuickDiagnosisResult(FrozenModel):
    """Phase 1 quick diagnosis."""
    result_type: str
    confidence_level: Level
    urgency_level: Level
    summary: str
    immediate_actions: List[str] = Field(min_length=1)
    estimated_detail_time: int = 15  # seconds until the detailed result is expected
    phase: Literal["quick"] = "quick"
