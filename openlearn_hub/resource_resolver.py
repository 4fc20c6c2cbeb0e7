"""Pick the learning material shown for a course: hosted content or external links.

Resolution order:

1. ``alternative`` / ``external_platform_fallback`` status: external links
   only. Internal ids are not consulted at all.
2. ``matched_content_id`` that exists in the catalog.
3. ``available`` status with an internal ``content_url``.
4. No backend validation (legacy payloads): conservative title matching
   against the catalog, then generated search links.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, List, Literal, Optional, Union
from urllib.parse import parse_qs, quote, urlsplit

from pydantic import BaseModel, Field

from .content_catalog import ContentCatalog, ContentItem
from .curriculum_models import Course, ExternalLink, MatchingCriteria
from .curriculum_normalizer import CourseView

logger = logging.getLogger(__name__)

MIN_TITLE_SIMILARITY = 0.6
EXTERNAL_ONLY_STATUSES = frozenset({"alternative", "external_platform_fallback"})

# Boilerplate that course titles add without changing the subject.
TITLE_FILLER_WORDS = frozenset(
    {
        "a",
        "an",
        "the",
        "complete",
        "course",
        "crash",
        "explained",
        "full",
        "guide",
        "masterclass",
        "tutorial",
        "tutorials",
    }
)

_NOTE_PATH = re.compile(r"/note/([A-Za-z0-9_-]+)")
_CONTENT_ID_PARAMS = ("contentId", "content_id")

PLATFORM_LABELS = {
    "internal": "OpenLearn Hub",
    "youtube": "YouTube",
    "coursera": "Coursera",
    "freecodecamp": "freeCodeCamp",
    "khan-academy": "Khan Academy",
}

ResolutionSource = Literal[
    "matched_content",
    "validated_url",
    "title_match",
    "curated_external",
    "search_fallback",
]
CourseLike = Union[Course, CourseView]


class ResolvedResource(BaseModel):
    course_title: str
    is_internal: bool
    source: ResolutionSource
    content: Optional[ContentItem] = None
    view_url: str
    platform_label: str
    external_links: List[ExternalLink] = Field(default_factory=list)


def platform_label(platform: Optional[str]) -> str:
    return PLATFORM_LABELS.get((platform or "").strip().lower(), "External")


def extract_content_id(url: Optional[str]) -> Optional[str]:
    """Read the content id from ``/note/<id>`` (``#/note/<id>`` too) or ``?contentId=<id>``."""
    if not url:
        return None
    match = _NOTE_PATH.search(url)
    if match:
        return match.group(1)
    query = parse_qs(urlsplit(url).query)
    for name in _CONTENT_ID_PARAMS:
        values = query.get(name)
        if values and values[0].strip():
            return values[0].strip()
    return None


def _normalize_title(title: str) -> str:
    return " ".join(title.lower().split())


def _core_title(title: str) -> str:
    normalized = _normalize_title(title)
    kept = [word for word in normalized.split() if word not in TITLE_FILLER_WORDS]
    return " ".join(kept) or normalized


def titles_match(left: str, right: str) -> bool:
    """Exact match, or containment where the shorter title is over 60% of the longer.

    Both checks run on the lowercased titles with boilerplate words removed, so
    "React Hooks" matches "React Hooks Complete Guide" but "React" does not
    match "React.js Complete Tutorial and Beyond".
    """
    if not _normalize_title(left) or not _normalize_title(right):
        return False
    if _normalize_title(left) == _normalize_title(right):
        return True
    core_left, core_right = _core_title(left), _core_title(right)
    if core_left == core_right:
        return True
    shorter, longer = sorted((core_left, core_right), key=len)
    return shorter in longer and len(shorter) / len(longer) > MIN_TITLE_SIMILARITY


def _level_allows(item: ContentItem, level: Optional[str]) -> bool:
    if not level or not item.level:
        return True
    return item.level.strip().lower() == level.strip().lower()


def find_platform_content(
    title: str,
    items: Iterable[ContentItem],
    *,
    level: Optional[str] = None,
) -> Optional[ContentItem]:
    candidates = [item for item in items if _level_allows(item, level)]
    target = _normalize_title(title)
    for item in candidates:
        if _normalize_title(item.title) == target:
            return item
    for item in candidates:
        if titles_match(item.title, title):
            return item
    return None


def generate_external_links(title: str) -> List[ExternalLink]:
    topic = quote(title, safe="")
    return [
        ExternalLink(
            title=f"{title} - Complete Tutorial",
            url=f"https://www.youtube.com/results?search_query={topic}+tutorial",
            platform="youtube",
        ),
        ExternalLink(
            title=f"{title} - freeCodeCamp",
            url=f"https://www.freecodecamp.org/news/search/?query={topic}",
            platform="freecodecamp",
        ),
    ]


def _internal(course: CourseLike, item: ContentItem, source: ResolutionSource) -> ResolvedResource:
    return ResolvedResource(
        course_title=course.title,
        is_internal=True,
        source=source,
        content=item,
        view_url=item.view_path,
        platform_label=platform_label("internal"),
    )


def _external(course: CourseLike, criteria: Optional[MatchingCriteria]) -> ResolvedResource:
    curated = list(criteria.external_links) if criteria else []
    links = curated or generate_external_links(course.title)
    return ResolvedResource(
        course_title=course.title,
        is_internal=False,
        source="curated_external" if curated else "search_fallback",
        view_url=links[0].url,
        platform_label=platform_label(links[0].platform),
        external_links=links,
    )


def resolve_course_resources(
    course: CourseLike,
    catalog: ContentCatalog,
    *,
    level: Optional[str] = None,
) -> ResolvedResource:
    criteria = course.matching_criteria
    status = criteria.validation_status if criteria else None

    if status in EXTERNAL_ONLY_STATUSES:
        return _external(course, criteria)

    if criteria is not None:
        item = catalog.get(criteria.matched_content_id)
        if item is not None:
            return _internal(course, item, "matched_content")
        if status == "available":
            item = catalog.get(extract_content_id(criteria.content_url))
            if item is not None:
                return _internal(course, item, "validated_url")
            logger.info("Validated content for %r is not in the catalog; using external links", course.title)
            return _external(course, criteria)

    declared_level = (criteria.difficulty_level if criteria else None) or level
    item = find_platform_content(course.title, catalog.items(), level=declared_level)
    if item is not None:
        return _internal(course, item, "title_match")
    return _external(course, criteria)


__all__ = [
    "MIN_TITLE_SIMILARITY",
    "ResolvedResource",
    "extract_content_id",
    "find_platform_content",
    "generate_external_links",
    "platform_label",
    "resolve_course_resources",
    "titles_match",
]
