"""Curriculum cache, schema normalization and resource resolution for OpenLearn Hub."""

from .cache import CacheKey, TTLCache, curriculum_key, user_curricula_key
from .content_catalog import ContentCatalog, ContentItem
from .curriculum_client import CurriculumClient, build_curriculum_client
from .curriculum_models import CurriculumData, CurriculumFormData, GenerateResult, SavedCurriculum
from .curriculum_normalizer import CurriculumView, normalize_curriculum
from .curriculum_view import CurriculumPageState, build_page_state
from .resource_resolver import ResolvedResource, resolve_course_resources

__all__ = [
    "CacheKey",
    "ContentCatalog",
    "ContentItem",
    "CurriculumClient",
    "CurriculumData",
    "CurriculumFormData",
    "CurriculumPageState",
    "CurriculumView",
    "GenerateResult",
    "ResolvedResource",
    "SavedCurriculum",
    "TTLCache",
    "build_curriculum_client",
    "build_page_state",
    "curriculum_key",
    "normalize_curriculum",
    "resolve_course_resources",
    "user_curricula_key",
]
