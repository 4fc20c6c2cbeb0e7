"""Normalize legacy and current curriculum payloads into one view model."""

from __future__ import annotations

from typing import Iterable, List, Literal, Optional, Tuple, TypeVar

from pydantic import BaseModel, Field

from .curriculum_models import (
    CareerOutcomes,
    Course,
    CurriculumData,
    ExamStrategy,
    FinalProject,
    LearningGoalAnalysis,
    LearningTier,
    MatchingCriteria,
    Personalization,
    PracticeProblem,
    ProgressMilestone,
    QuizQuestion,
    ResourceRecommendation,
    StudentAnalysis,
    SuccessMetrics,
    TierSet,
)

DEFAULT_SUMMARY = "Standard Learning Path"
DEFAULT_STARTING_TIER = "Beginner"
DEFAULT_WEEKLY_HOURS = 0
DEFAULT_WEEKS = 4

TierKey = Literal["beginner", "intermediate", "advanced"]
TIER_ORDER: Tuple[Tuple[TierKey, str], ...] = (
    ("beginner", "Beginner"),
    ("intermediate", "Intermediate"),
    ("advanced", "Advanced"),
)
SchemaGeneration = Literal["legacy", "current", "unknown"]

T = TypeVar("T")


class ProfileView(BaseModel):
    summary: str
    starting_tier: str
    weekly_hours: float
    weeks: float
    reasoning: Optional[str] = None
    special_notes: Optional[str] = None


class CourseView(BaseModel):
    position: int
    title: str
    description: str
    topics: List[str] = Field(default_factory=list)
    video_count: int = 0
    hours: float = 0
    prerequisites: List[str] = Field(default_factory=list)
    learning_outcomes: List[str] = Field(default_factory=list)
    quiz: List[QuizQuestion] = Field(default_factory=list)
    hands_on_project: Optional[str] = None
    matching_criteria: Optional[MatchingCriteria] = None
    exam_relevance: Optional[str] = None
    weightage: Optional[str] = None
    practice_problems: Optional[PracticeProblem] = None


class TierView(BaseModel):
    key: TierKey
    name: str
    description: str
    relevance: str
    total_videos: int
    total_hours: float
    courses: List[CourseView] = Field(default_factory=list)


class CurriculumView(BaseModel):
    """Rendering-ready curriculum; identical structure for both payload generations."""

    source_schema: SchemaGeneration
    profile: ProfileView
    beginner: Optional[TierView] = None
    intermediate: Optional[TierView] = None
    advanced: Optional[TierView] = None
    milestones: List[ProgressMilestone] = Field(default_factory=list)
    personalization: Optional[Personalization] = None
    final_project: Optional[FinalProject] = None
    career_outcomes: Optional[CareerOutcomes] = None
    exam_strategy: Optional[ExamStrategy] = None
    learning_goal_analysis: Optional[LearningGoalAnalysis] = None
    resource_recommendations: List[ResourceRecommendation] = Field(default_factory=list)
    success_metrics: Optional[SuccessMetrics] = None
    has_personalization: bool = False
    has_final_project: bool = False
    has_career_outcomes: bool = False
    has_exam_strategy: bool = False
    total_videos: int = 0
    total_hours: float = 0
    total_courses: int = 0

    def present_tiers(self) -> List[TierView]:
        tiers = (self.beginner, self.intermediate, self.advanced)
        return [tier for tier in tiers if tier is not None]

    def all_courses(self) -> Iterable[CourseView]:
        for tier in self.present_tiers():
            yield from tier.courses


def _first(*values: Optional[T], default: T) -> T:
    """First truthy value; zero and empty strings fall through like a missing field."""
    for value in values:
        if value:
            return value
    return default


def _normalize_profile(legacy: Optional[StudentAnalysis], current: Optional[StudentAnalysis]) -> ProfileView:
    old = legacy or StudentAnalysis()
    new = current or StudentAnalysis()
    return ProfileView(
        summary=_first(old.profile_summary, new.summary, old.summary, new.profile_summary, default=DEFAULT_SUMMARY),
        starting_tier=_first(
            old.starting_tier,
            new.recommended_start_tier,
            old.recommended_start_tier,
            new.starting_tier,
            default=DEFAULT_STARTING_TIER,
        ),
        weekly_hours=_first(
            old.weekly_hours_needed,
            new.weekly_hours,
            old.weekly_hours,
            new.weekly_hours_needed,
            default=DEFAULT_WEEKLY_HOURS,
        ),
        weeks=_first(
            old.estimated_completion_weeks,
            new.estimated_weeks,
            old.estimated_weeks,
            new.estimated_completion_weeks,
            default=DEFAULT_WEEKS,
        ),
        reasoning=old.reasoning or new.reasoning,
        special_notes=old.special_notes or new.special_notes,
    )


def normalize_course(course: Course) -> CourseView:
    return CourseView(
        position=course.position,
        title=course.title,
        description=course.description,
        topics=list(course.topics),
        video_count=_first(course.expected_video_count, course.video_count, default=0),
        hours=_first(course.estimated_hours, course.duration_hours, default=0),
        prerequisites=list(course.prerequisite_courses or course.prerequisites),
        learning_outcomes=list(course.learning_outcomes),
        quiz=list(course.quiz),
        hands_on_project=course.hands_on_project,
        matching_criteria=course.matching_criteria,
        exam_relevance=course.exam_relevance,
        weightage=course.weightage,
        practice_problems=course.practice_problems,
    )


def _normalize_tier(key: TierKey, name: str, tier: Optional[LearningTier]) -> Optional[TierView]:
    if tier is None:
        return None
    courses = [normalize_course(course) for course in tier.courses]
    return TierView(
        key=key,
        name=name,
        description=tier.tier_description,
        relevance=tier.tier_relevance,
        total_videos=_first(tier.total_videos, default=sum(course.video_count for course in courses)),
        total_hours=_first(tier.total_estimated_hours, default=sum(course.hours for course in courses)),
        courses=courses,
    )


def _detect_generation(data: CurriculumData) -> SchemaGeneration:
    if data.learning_path is not None or data.student_analysis is not None:
        return "legacy"
    if data.curriculum is not None or data.student_profile is not None:
        return "current"
    return "unknown"


def normalize_curriculum(data: CurriculumData) -> CurriculumView:
    """Map either payload generation onto :class:`CurriculumView`.

    Never raises on missing sections: absent tiers stay ``None``, absent
    numbers take their documented defaults and absent collections are empty.
    """
    tiers = data.learning_path if data.learning_path is not None else data.curriculum
    tiers = tiers or TierSet()

    normalized = {key: _normalize_tier(key, name, getattr(tiers, key)) for key, name in TIER_ORDER}
    present = [tier for tier in normalized.values() if tier is not None]

    exam_strategy = data.exam_strategy.if_exam_prep if data.exam_strategy else None
    recommendations = (
        list(data.resource_recommendations.if_no_internal_videos) if data.resource_recommendations else []
    )

    return CurriculumView(
        source_schema=_detect_generation(data),
        profile=_normalize_profile(data.student_analysis, data.student_profile),
        beginner=normalized["beginner"],
        intermediate=normalized["intermediate"],
        advanced=normalized["advanced"],
        milestones=list(data.progress_milestones),
        personalization=data.personalization,
        final_project=data.final_project,
        career_outcomes=data.career_outcomes,
        exam_strategy=exam_strategy,
        learning_goal_analysis=data.learning_goal_analysis,
        resource_recommendations=recommendations,
        success_metrics=data.success_metrics,
        has_personalization=data.personalization is not None,
        has_final_project=data.final_project is not None,
        has_career_outcomes=data.career_outcomes is not None,
        has_exam_strategy=exam_strategy is not None,
        total_videos=sum(tier.total_videos for tier in present),
        total_hours=sum(tier.total_hours for tier in present),
        total_courses=sum(len(tier.courses) for tier in present),
    )


__all__ = [
    "CourseView",
    "CurriculumView",
    "DEFAULT_STARTING_TIER",
    "DEFAULT_SUMMARY",
    "DEFAULT_WEEKS",
    "ProfileView",
    "TIER_ORDER",
    "TierView",
    "normalize_course",
    "normalize_curriculum",
]
