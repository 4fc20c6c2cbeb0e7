"""Wire models for AI-generated curricula, covering both payload generations.

The generation backend has emitted two shapes over time. The legacy shape
uses ``student_analysis`` and ``learning_path``; the current one uses
``student_profile`` and ``curriculum`` plus exam and resource sections. The
models here accept either, ignore unknown keys, and treat explicit ``null``
the same as an absent field so every collection falls back to an empty list.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Literal, Optional, get_args

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidatorFunctionWrapHandler,
    field_validator,
    model_validator,
)

logger = logging.getLogger(__name__)

ValidationStatus = Literal["available", "alternative", "external_platform_fallback"]
VALIDATION_STATUSES = frozenset(get_args(ValidationStatus))

LEVELS = ("Beginner", "Intermediate", "Advanced")
LEARNING_STYLES = ("video-heavy", "hands-on", "reading", "mixed")

NETWORK_ERROR = "network_error"
VALIDATION_ERROR = "validation_error"
INVALID_RESPONSE = "invalid_response"


class WireModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


def _as_text(value: Any) -> Any:
    """Numbers become strings; anything else is left for pydantic to judge."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


class CurriculumFormData(WireModel):
    """Generation parameters submitted by the learner."""

    learning_goal: str = ""
    current_level: str = "Beginner"
    focus_areas: List[str] = Field(default_factory=list)
    prior_knowledge: str = ""
    time_commitment: str = "10-20 hours/week"
    learning_objectives: str = ""
    learning_style: str = "mixed"
    interests: Optional[str] = None
    exam_date: Optional[str] = None

    def validation_error(self) -> Optional[str]:
        """Return a learner-facing message when the form cannot be submitted."""
        if not self.learning_goal.strip():
            return "Please specify what you want to learn"
        if self.current_level not in LEVELS:
            return f"Current level must be one of: {', '.join(LEVELS)}"
        if self.learning_style not in LEARNING_STYLES:
            return f"Learning style must be one of: {', '.join(LEARNING_STYLES)}"
        return None


class QuizQuestion(WireModel):
    question: str = ""
    options: List[str] = Field(default_factory=list)
    correct_answer: str = ""
    explanation: str = ""
    difficulty: Optional[str] = None
    question_type: Optional[str] = None

    @field_validator("correct_answer", "difficulty", mode="before")
    @classmethod
    def _numeric_text(cls, value: Any) -> Any:
        return _as_text(value)

    @field_validator("options", mode="before")
    @classmethod
    def _numeric_options(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [_as_text(option) for option in value if option is not None]
        return value


class ExternalLink(WireModel):
    title: str
    url: str
    platform: str = "external"


class MatchingCriteria(WireModel):
    topic_slug: Optional[str] = None
    subtopic_slugs: List[str] = Field(default_factory=list)
    difficulty_level: Optional[str] = None
    keywords: List[str] = Field(default_factory=list)
    domain: Optional[str] = None
    exam_context: Optional[str] = None
    alternative_names: List[str] = Field(default_factory=list)
    validation_status: Optional[ValidationStatus] = None
    matched_content_id: Optional[str] = None
    content_url: Optional[str] = None
    external_links: List[ExternalLink] = Field(default_factory=list)

    @field_validator("validation_status", mode="before")
    @classmethod
    def _unknown_status_is_legacy(cls, value: Any) -> Any:
        if isinstance(value, str):
            normalized = value.strip().lower()
            if normalized in VALIDATION_STATUSES:
                return normalized
            logger.warning("Ignoring unknown validation_status %r", value)
            return None
        return value


class DifficultyDistribution(WireModel):
    easy: int = 0
    medium: int = 0
    hard: int = 0


class PracticeProblem(WireModel):
    recommended_count: int = 0
    difficulty_distribution: DifficultyDistribution = Field(default_factory=DifficultyDistribution)
    problem_types: List[str] = Field(default_factory=list)


class Course(WireModel):
    """Single learning unit. Carries both the legacy and the current field names."""

    position: int = 0
    title: str = ""
    description: str = ""
    topics: List[str] = Field(default_factory=list)
    video_count: Optional[int] = None
    expected_video_count: Optional[int] = None
    duration_hours: Optional[float] = None
    estimated_hours: Optional[float] = None
    prerequisites: List[str] = Field(default_factory=list)
    prerequisite_courses: List[str] = Field(default_factory=list)
    learning_outcomes: List[str] = Field(default_factory=list)
    quiz: List[QuizQuestion] = Field(default_factory=list)
    hands_on_project: Optional[str] = None
    matching_criteria: Optional[MatchingCriteria] = None
    exam_relevance: Optional[str] = None
    weightage: Optional[str] = None
    practice_problems: Optional[PracticeProblem] = None

    @field_validator("exam_relevance", "weightage", "hands_on_project", mode="before")
    @classmethod
    def _numeric_text(cls, value: Any) -> Any:
        return _as_text(value)


class LearningTier(WireModel):
    tier_description: str = ""
    total_videos: Optional[int] = None
    total_estimated_hours: Optional[float] = None
    tier_relevance: str = ""
    courses: List[Course] = Field(default_factory=list)


class TierSet(WireModel):
    beginner: Optional[LearningTier] = None
    intermediate: Optional[LearningTier] = None
    advanced: Optional[LearningTier] = None


class StudentAnalysis(WireModel):
    """Learner analysis; legacy and current field names side by side."""

    profile_summary: Optional[str] = None
    summary: Optional[str] = None
    starting_tier: Optional[str] = None
    recommended_start_tier: Optional[str] = None
    reasoning: Optional[str] = None
    estimated_completion_weeks: Optional[float] = None
    estimated_weeks: Optional[float] = None
    weekly_hours_needed: Optional[float] = None
    weekly_hours: Optional[float] = None
    special_notes: Optional[str] = None


class ProgressMilestone(WireModel):
    milestone_name: str = ""
    tier: str = ""
    percentage: float = 0
    courses_completed: Optional[int] = None
    videos_completed: Optional[int] = None
    skills_unlocked: List[str] = Field(default_factory=list)
    next_step: Optional[str] = None
    exam_readiness: Optional[str] = None


class Personalization(WireModel):
    skipped_content: List[str] = Field(default_factory=list)
    emphasized_areas: List[str] = Field(default_factory=list)
    recommended_pace: str = ""
    learning_style_adaptations: str = ""


class FinalProject(WireModel):
    title: str = ""
    description: str = ""
    skills_demonstrated: List[str] = Field(default_factory=list)
    estimated_hours: float = 0
    deliverables: List[str] = Field(default_factory=list)


class CareerOutcomes(WireModel):
    job_titles: List[str] = Field(default_factory=list)
    portfolio_pieces: List[str] = Field(default_factory=list)
    next_learning_paths: List[str] = Field(default_factory=list)


class LearningGoalAnalysis(WireModel):
    detected_domain: str = ""
    primary_topic: str = ""
    subtopics: List[str] = Field(default_factory=list)
    exam_specific: bool = False
    exam_name: str = ""
    complexity_level: str = ""


class TopicPriority(WireModel):
    topic: str = ""
    importance: str = ""
    recommended_hours: float = 0


class ExamStrategy(WireModel):
    study_schedule: Dict[str, Any] = Field(default_factory=dict)
    topic_prioritization: List[TopicPriority] = Field(default_factory=list)
    mock_test_schedule: Optional[str] = None


class ExamStrategySection(WireModel):
    if_exam_prep: Optional[ExamStrategy] = None


class ResourceRecommendation(WireModel):
    topic: str = ""
    difficulty: str = ""
    recommended_platforms: List[str] = Field(default_factory=list)
    search_query: str = ""
    youtube_channels: List[str] = Field(default_factory=list)
    books: List[str] = Field(default_factory=list)
    websites: List[str] = Field(default_factory=list)


class ResourceRecommendationSection(WireModel):
    if_no_internal_videos: List[ResourceRecommendation] = Field(default_factory=list)


class CompletionTargets(WireModel):
    beginner_completion: str = ""
    intermediate_completion: str = ""
    advanced_completion: str = ""


class SuccessMetrics(WireModel):
    for_skills: Optional[CompletionTargets] = None
    for_exams: Optional[CompletionTargets] = None


class CurriculumData(WireModel):
    student_analysis: Optional[StudentAnalysis] = None
    student_profile: Optional[StudentAnalysis] = None
    learning_path: Optional[TierSet] = None
    curriculum: Optional[TierSet] = None
    progress_milestones: List[ProgressMilestone] = Field(default_factory=list)
    personalization: Optional[Personalization] = None
    final_project: Optional[FinalProject] = None
    career_outcomes: Optional[CareerOutcomes] = None
    learning_goal_analysis: Optional[LearningGoalAnalysis] = None
    exam_strategy: Optional[ExamStrategySection] = None
    resource_recommendations: Optional[ResourceRecommendationSection] = None
    success_metrics: Optional[SuccessMetrics] = None


class SavedCurriculum(WireModel):
    """Curriculum record as stored by the backend. Read-only on the client."""

    id: str
    user_id: str = Field("", alias="userId")
    form_data: CurriculumFormData = Field(default_factory=CurriculumFormData, alias="formData")
    curriculum: Optional[CurriculumData] = None
    created_at: Optional[str] = Field(None, alias="createdAt")
    updated_at: Optional[str] = Field(None, alias="updatedAt")
    progress: Optional[Dict[str, Any]] = None

    @field_validator("curriculum", mode="wrap")
    @classmethod
    def _unreadable_body_is_corrupted(cls, value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
        # A record with a broken body still exists; callers report it as corrupted.
        try:
            return handler(value)
        except ValidationError as exc:
            logger.warning("Dropping unreadable curriculum body: %s", exc)
            return None

    @field_validator("form_data", mode="wrap")
    @classmethod
    def _unreadable_form_uses_defaults(cls, value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
        try:
            return handler(value)
        except ValidationError as exc:
            logger.warning("Using default form data for unreadable formData: %s", exc)
            return CurriculumFormData()

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class GenerateResult(BaseModel):
    success: bool
    message: str
    curriculum: Optional[SavedCurriculum] = None
    error: Optional[str] = None


__all__ = [
    "CareerOutcomes",
    "Course",
    "CurriculumData",
    "CurriculumFormData",
    "ExamStrategy",
    "ExternalLink",
    "FinalProject",
    "GenerateResult",
    "INVALID_RESPONSE",
    "LearningTier",
    "MatchingCriteria",
    "NETWORK_ERROR",
    "Personalization",
    "PracticeProblem",
    "ProgressMilestone",
    "QuizQuestion",
    "ResourceRecommendation",
    "SavedCurriculum",
    "StudentAnalysis",
    "SuccessMetrics",
    "TierSet",
    "VALIDATION_ERROR",
    "ValidationStatus",
]
