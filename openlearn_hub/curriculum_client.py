"""Async client for the curriculum REST API with a read-through TTL cache."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from .cache import TTLCache, build_cache, curriculum_key, user_curricula_key
from .config import Settings, get_settings
from .curriculum_models import (
    INVALID_RESPONSE,
    NETWORK_ERROR,
    VALIDATION_ERROR,
    CurriculumFormData,
    GenerateResult,
    SavedCurriculum,
)
from .telemetry import record_request_failure

logger = logging.getLogger(__name__)

CONNECTION_FAILED_MESSAGE = "Connection failed. Please ensure the server is running."
GENERATE_FAILED_MESSAGE = "Failed to generate curriculum"
GENERATE_SUCCESS_MESSAGE = "Curriculum generated successfully"
MISSING_USER_MESSAGE = "Please sign in to generate a curriculum"


def _body(response: httpx.Response) -> Dict[str, Any]:
    try:
        payload = response.json()
    except ValueError:
        return {}
    return payload if isinstance(payload, dict) else {}


def _server_message(body: Dict[str, Any]) -> Optional[str]:
    message = body.get("message")
    if message is None:
        return None
    return str(message)


def _parse_saved(payload: Any, source: str) -> Optional[SavedCurriculum]:
    if not isinstance(payload, dict):
        logger.warning("Expected a curriculum object from %s, got %s", source, type(payload).__name__)
        return None
    try:
        return SavedCurriculum.model_validate(payload)
    except ValidationError as exc:
        logger.warning("Curriculum from %s failed validation: %s", source, exc)
        return None


def _parse_saved_list(payload: Any, source: str) -> Optional[List[SavedCurriculum]]:
    if not isinstance(payload, list):
        logger.warning("Expected a curriculum list from %s, got %s", source, type(payload).__name__)
        return None
    curricula: List[SavedCurriculum] = []
    for item in payload:
        saved = _parse_saved(item, source)
        if saved is not None:
            curricula.append(saved)
    return curricula


class CurriculumClient:
    """Typed wrapper around ``/api/curriculum``.

    No method raises for service or connectivity problems. Failures come back
    as ``None``, ``False``, ``[]`` or a ``GenerateResult`` with
    ``success=False`` and are logged here. Only ``get_by_id`` and
    ``get_user_curricula`` read from the cache; writes invalidate the keys
    they affect.
    """

    def __init__(
        self,
        settings: Settings,
        cache: TTLCache,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._base_url = settings.curriculum_api_base
        self._cache = cache
        self._http = http_client or httpx.AsyncClient(timeout=settings.request_timeout_seconds)
        self._owns_http = http_client is None

    @property
    def cache(self) -> TTLCache:
        return self._cache

    async def __aenter__(self) -> "CurriculumClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    def _url(self, *segments: str) -> str:
        path = "/".join(quote(segment, safe="") for segment in segments)
        return f"{self._base_url}/{path}"

    async def _send(
        self,
        operation: str,
        method: str,
        url: str,
        *,
        json: Optional[Dict[str, Any]] = None,
    ) -> Optional[httpx.Response]:
        try:
            return await self._http.request(method, url, json=json)
        except httpx.HTTPError as exc:
            logger.error("%s could not reach the curriculum service: %s", operation, exc)
            record_request_failure(operation, NETWORK_ERROR)
            return None

    def _rejected(self, operation: str, response: httpx.Response, body: Dict[str, Any]) -> None:
        logger.error(
            "%s rejected by curriculum service (status=%s): %s",
            operation,
            response.status_code,
            _server_message(body) or body.get("error") or response.reason_phrase,
        )
        record_request_failure(operation, "rejected", status_code=response.status_code)

    async def generate(self, user_id: str, form_data: CurriculumFormData) -> GenerateResult:
        if not user_id or not user_id.strip():
            logger.error("generate called without a user id")
            return GenerateResult(success=False, message=MISSING_USER_MESSAGE, error=VALIDATION_ERROR)
        problem = form_data.validation_error()
        if problem:
            return GenerateResult(success=False, message=problem, error=VALIDATION_ERROR)

        payload = {"userId": user_id, **form_data.model_dump(mode="json", exclude_none=True)}
        response = await self._send("generate", "POST", self._url("generate"), json=payload)
        if response is None:
            return GenerateResult(success=False, message=CONNECTION_FAILED_MESSAGE, error=NETWORK_ERROR)

        body = _body(response)
        if not response.is_success:
            self._rejected("generate", response, body)
            error = body.get("error")
            return GenerateResult(
                success=False,
                message=_server_message(body) or GENERATE_FAILED_MESSAGE,
                error=str(error) if error is not None else None,
            )

        # The new curriculum must show up in the next list fetch.
        self._cache.invalidate(user_curricula_key(user_id))

        saved = _parse_saved(body.get("curriculum"), "generate")
        if saved is None:
            record_request_failure("generate", INVALID_RESPONSE, status_code=response.status_code)
            return GenerateResult(
                success=False,
                message="The curriculum service returned an unreadable curriculum.",
                error=INVALID_RESPONSE,
            )
        return GenerateResult(
            success=True,
            message=_server_message(body) or GENERATE_SUCCESS_MESSAGE,
            curriculum=saved,
        )

    async def get_by_id(self, curriculum_id: str) -> Optional[SavedCurriculum]:
        if not curriculum_id or not curriculum_id.strip():
            logger.error("get_by_id called without a curriculum id")
            return None

        key = curriculum_key(curriculum_id)
        cached = self._cache.get(key)
        if cached is not None:
            saved = _parse_saved(cached, f"cache entry {key}")
            if saved is not None:
                return saved
            self._cache.invalidate(key)

        response = await self._send("get_by_id", "GET", self._url(curriculum_id))
        if response is None:
            return None
        body = _body(response)
        if not response.is_success:
            self._rejected("get_by_id", response, body)
            return None

        saved = _parse_saved(body.get("curriculum"), "get_by_id")
        if saved is None:
            record_request_failure("get_by_id", INVALID_RESPONSE, status_code=response.status_code)
            return None
        self._cache.save(key, saved.to_wire())
        return saved

    async def get_user_curricula(self, user_id: str) -> List[SavedCurriculum]:
        if not user_id or not user_id.strip():
            logger.error("get_user_curricula called without a user id")
            return []

        key = user_curricula_key(user_id)
        cached = self._cache.get(key)
        if cached is not None:
            curricula = _parse_saved_list(cached, f"cache entry {key}")
            if curricula is not None and len(curricula) == len(cached):
                return curricula
            self._cache.invalidate(key)

        response = await self._send("get_user_curricula", "GET", self._url("user", user_id))
        if response is None:
            return []
        body = _body(response)
        if not response.is_success:
            self._rejected("get_user_curricula", response, body)
            return []

        curricula = _parse_saved_list(body.get("curricula") or [], "get_user_curricula")
        if curricula is None:
            record_request_failure("get_user_curricula", INVALID_RESPONSE, status_code=response.status_code)
            return []
        self._cache.save(key, [saved.to_wire() for saved in curricula])
        return curricula

    async def delete(self, curriculum_id: str, user_id: str) -> bool:
        if not curriculum_id.strip() or not user_id.strip():
            logger.error("delete called without a curriculum id or user id")
            return False
        response = await self._send(
            "delete",
            "DELETE",
            self._url(curriculum_id),
            json={"userId": user_id},
        )
        if response is None:
            return False
        if not response.is_success:
            self._rejected("delete", response, _body(response))
            return False

        # List membership changed too, so both entries go.
        self._cache.invalidate(curriculum_key(curriculum_id))
        self._cache.invalidate(user_curricula_key(user_id))
        return True

    async def update_progress(
        self,
        curriculum_id: str,
        progress: Dict[str, Any],
    ) -> Optional[SavedCurriculum]:
        if not curriculum_id.strip():
            logger.error("update_progress called without a curriculum id")
            return None
        response = await self._send(
            "update_progress",
            "PATCH",
            self._url(curriculum_id, "progress"),
            json={"progress": progress},
        )
        if response is None:
            return None
        body = _body(response)
        if not response.is_success:
            self._rejected("update_progress", response, body)
            return None

        saved = _parse_saved(body.get("curriculum"), "update_progress")
        key = curriculum_key(curriculum_id)
        self._cache.invalidate(key)
        if saved is None:
            record_request_failure("update_progress", INVALID_RESPONSE, status_code=response.status_code)
            return None
        self._cache.save(key, saved.to_wire())
        return saved


def build_curriculum_client(
    settings: Optional[Settings] = None,
    *,
    cache: Optional[TTLCache] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> CurriculumClient:
    resolved = settings or get_settings()
    return CurriculumClient(resolved, cache or build_cache(resolved), http_client=http_client)


__all__ = [
    "CONNECTION_FAILED_MESSAGE",
    "CurriculumClient",
    "build_curriculum_client",
]
