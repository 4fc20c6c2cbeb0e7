"""Normalization of legacy and current curriculum payloads."""

from __future__ import annotations

from typing import Any, Dict

from openlearn_hub.curriculum_models import CurriculumData
from openlearn_hub.curriculum_normalizer import CurriculumView, normalize_curriculum


def _tier(description: str, **extra: Any) -> Dict[str, Any]:
    return {"tier_description": description, "tier_relevance": f"{description} relevance", **extra}


def _legacy_payload() -> Dict[str, Any]:
    return {
        "student_analysis": {
            "profile_summary": "Career switcher",
            "starting_tier": "Intermediate",
            "weekly_hours_needed": 12,
            "estimated_completion_weeks": 10,
            "reasoning": "Has some JavaScript",
        },
        "learning_path": {
            "beginner": _tier(
                "Foundations",
                total_videos=6,
                total_estimated_hours=9,
                courses=[
                    {
                        "position": 1,
                        "title": "HTML & CSS",
                        "description": "Markup basics",
                        "topics": ["HTML", "CSS"],
                        "video_count": 6,
                        "duration_hours": 9,
                        "prerequisites": ["None"],
                        "learning_outcomes": ["Build a page"],
                        "quiz": [
                            {
                                "question": "What does CSS stand for?",
                                "options": ["Cascading Style Sheets", "Computer Style Sheets"],
                                "correct_answer": "Cascading Style Sheets",
                                "explanation": "CSS cascades.",
                            }
                        ],
                        "hands_on_project": "Portfolio page",
                    }
                ],
            ),
            "intermediate": _tier("Frameworks", total_videos=0, total_estimated_hours=0, courses=[]),
        },
        "personalization": {"emphasized_areas": ["React"]},
        "final_project": {"title": "Shop", "estimated_hours": 20},
        "career_outcomes": {"job_titles": ["Frontend Developer"]},
    }


def _current_payload() -> Dict[str, Any]:
    return {
        "student_profile": {
            "summary": "Career switcher",
            "recommended_start_tier": "Intermediate",
            "weekly_hours": 12,
            "estimated_weeks": 10,
            "reasoning": "Has some JavaScript",
        },
        "curriculum": {
            "beginner": _tier(
                "Foundations",
                total_estimated_hours=9,
                courses=[
                    {
                        "position": 1,
                        "title": "HTML & CSS",
                        "description": "Markup basics",
                        "expected_video_count": 6,
                        "estimated_hours": 9,
                        "prerequisite_courses": ["None"],
                        "learning_outcomes": ["Build a page"],
                        "matching_criteria": {
                            "topic_slug": "html-css",
                            "keywords": ["html", "css"],
                            "validation_status": "available",
                            "matched_content_id": "web_3",
                        },
                        "weightage": "10% of marks",
                    }
                ],
            ),
            "intermediate": _tier("Frameworks", courses=[]),
        },
        "exam_strategy": {"if_exam_prep": {"mock_test_schedule": "Weekly"}},
        "resource_recommendations": {
            "if_no_internal_videos": [{"topic": "React", "search_query": "react hooks tutorial"}]
        },
    }


def _normalize(payload: Dict[str, Any]) -> CurriculumView:
    return normalize_curriculum(CurriculumData.model_validate(payload))


def _shape(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: _shape(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_shape(item) for item in value[:1]]
    return type(value).__name__


def test_legacy_payload_is_normalized() -> None:
    view = _normalize(_legacy_payload())

    assert view.source_schema == "legacy"
    assert view.profile.summary == "Career switcher"
    assert view.profile.starting_tier == "Intermediate"
    assert view.profile.weekly_hours == 12
    assert view.profile.weeks == 10
    assert view.beginner is not None
    course = view.beginner.courses[0]
    assert course.video_count == 6
    assert course.hours == 9
    assert course.topics == ["HTML", "CSS"]
    assert course.prerequisites == ["None"]
    assert view.has_personalization and view.has_final_project and view.has_career_outcomes
    assert view.has_exam_strategy is False


def test_current_payload_is_normalized() -> None:
    view = _normalize(_current_payload())

    assert view.source_schema == "current"
    assert view.profile.summary == "Career switcher"
    assert view.profile.starting_tier == "Intermediate"
    assert view.beginner is not None
    assert view.beginner.total_videos == 6
    course = view.beginner.courses[0]
    assert course.video_count == 6
    assert course.hours == 9
    assert course.topics == []
    assert course.matching_criteria is not None
    assert course.matching_criteria.validation_status == "available"
    assert view.has_exam_strategy is True
    assert view.exam_strategy is not None and view.exam_strategy.mock_test_schedule == "Weekly"
    assert view.resource_recommendations[0].search_query == "react hooks tutorial"
    assert view.has_personalization is False


def test_profile_and_tiers_share_structure_across_generations() -> None:
    legacy = {"student_analysis": _legacy_payload()["student_analysis"], "learning_path": _legacy_payload()["learning_path"]}
    current = {"student_profile": _current_payload()["student_profile"], "curriculum": _current_payload()["curriculum"]}
    legacy_view = _normalize(legacy)
    current_view = _normalize(current)

    assert _shape(legacy_view.profile.model_dump()) == _shape(current_view.profile.model_dump())
    for key in ("beginner", "intermediate", "advanced"):
        legacy_tier = getattr(legacy_view, key)
        current_tier = getattr(current_view, key)
        assert (legacy_tier is None) == (current_tier is None)
        if legacy_tier is not None:
            assert set(legacy_tier.model_dump()) == set(current_tier.model_dump())
            assert [course.title for course in legacy_tier.courses] == [course.title for course in current_tier.courses]
    assert legacy_view.profile == current_view.profile


def test_missing_advanced_tier_is_absent() -> None:
    view = _normalize(_legacy_payload())

    assert view.advanced is None
    assert [tier.key for tier in view.present_tiers()] == ["beginner", "intermediate"]
    assert view.intermediate is not None and view.intermediate.courses == []


def test_empty_payload_uses_defaults() -> None:
    view = _normalize({})

    assert view.source_schema == "unknown"
    assert view.profile.summary == "Standard Learning Path"
    assert view.profile.starting_tier == "Beginner"
    assert view.profile.weekly_hours == 0
    assert view.profile.weeks == 4
    assert view.present_tiers() == []
    assert view.milestones == []
    assert view.total_courses == 0


def test_nulls_and_missing_collections_default_to_empty() -> None:
    payload = {
        "learning_path": {
            "beginner": {
                "tier_description": "Basics",
                "courses": [{"position": 1, "title": "Intro", "topics": None, "quiz": None}],
            },
            "advanced": None,
        },
        "final_project": {"title": "Capstone", "deliverables": None},
        "career_outcomes": {},
        "progress_milestones": None,
    }

    view = _normalize(payload)

    assert view.beginner is not None
    course = view.beginner.courses[0]
    assert course.topics == [] and course.quiz == [] and course.learning_outcomes == []
    assert course.video_count == 0 and course.hours == 0
    assert view.advanced is None
    assert view.final_project is not None and view.final_project.deliverables == []
    assert view.career_outcomes is not None and view.career_outcomes.job_titles == []
    assert view.milestones == []


def test_zero_legacy_values_fall_back_to_current_fields() -> None:
    payload = {
        "student_analysis": {"weekly_hours_needed": 0, "profile_summary": ""},
        "student_profile": {"weekly_hours": 6, "summary": "From the current profile"},
    }

    view = _normalize(payload)

    assert view.profile.weekly_hours == 6
    assert view.profile.summary == "From the current profile"


def test_tier_totals_fall_back_to_course_sums() -> None:
    payload = {
        "curriculum": {
            "beginner": {
                "courses": [
                    {"position": 1, "title": "A", "expected_video_count": 3, "estimated_hours": 2.5},
                    {"position": 2, "title": "B", "video_count": 4, "duration_hours": 1.5},
                ]
            },
            "advanced": {"total_videos": 7, "total_estimated_hours": 12, "courses": []},
        }
    }

    view = _normalize(payload)

    assert view.beginner is not None
    assert view.beginner.total_videos == 7
    assert view.beginner.total_hours == 4.0
    assert view.total_videos == 14
    assert view.total_hours == 16.0
    assert view.total_courses == 2
