"""Terminal page states for a saved curriculum (ready, not found, corrupted)."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from .content_catalog import ContentCatalog
from .curriculum_models import CurriculumFormData, SavedCurriculum
from .curriculum_normalizer import CurriculumView, normalize_curriculum
from .resource_resolver import ResolvedResource, resolve_course_resources

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Curriculum not found"
CORRUPTED_MESSAGE = "This curriculum's data seems corrupted. Please generate a new one."

PageStatus = Literal["ready", "not_found", "corrupted"]


class CourseResources(BaseModel):
    tier: str
    position: int
    resource: ResolvedResource


class CurriculumPageState(BaseModel):
    status: PageStatus
    message: Optional[str] = None
    curriculum_id: Optional[str] = None
    form_data: Optional[CurriculumFormData] = None
    view: Optional[CurriculumView] = None
    resources: List[CourseResources] = Field(default_factory=list)
    progress: Dict[str, Any] = Field(default_factory=dict)


class CurriculumSummary(BaseModel):
    id: str
    learning_goal: str
    created_at: Optional[str] = None
    total_courses: int = 0
    corrupted: bool = False


def build_page_state(saved: Optional[SavedCurriculum], catalog: ContentCatalog) -> CurriculumPageState:
    if saved is None:
        return CurriculumPageState(status="not_found", message=NOT_FOUND_MESSAGE)
    if saved.curriculum is None:
        logger.warning("Curriculum %s has no curriculum body", saved.id)
        return CurriculumPageState(
            status="corrupted",
            message=CORRUPTED_MESSAGE,
            curriculum_id=saved.id,
            form_data=saved.form_data,
        )

    view = normalize_curriculum(saved.curriculum)
    resources = [
        CourseResources(
            tier=tier.key,
            position=course.position,
            resource=resolve_course_resources(course, catalog, level=tier.name),
        )
        for tier in view.present_tiers()
        for course in tier.courses
    ]
    return CurriculumPageState(
        status="ready",
        curriculum_id=saved.id,
        form_data=saved.form_data,
        view=view,
        resources=resources,
        progress=dict(saved.progress or {}),
    )


def summarize(saved: SavedCurriculum) -> CurriculumSummary:
    total = normalize_curriculum(saved.curriculum).total_courses if saved.curriculum else 0
    return CurriculumSummary(
        id=saved.id,
        learning_goal=saved.form_data.learning_goal,
        created_at=saved.created_at,
        total_courses=total,
        corrupted=saved.curriculum is None,
    )


__all__ = [
    "CORRUPTED_MESSAGE",
    "CourseResources",
    "CurriculumPageState",
    "CurriculumSummary",
    "NOT_FOUND_MESSAGE",
    "build_page_state",
    "summarize",
]
