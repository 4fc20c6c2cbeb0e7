import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, List, Optional

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse

from .config import Settings, get_settings
from .content_catalog import ContentCatalog
from .curriculum_client import CurriculumClient, build_curriculum_client
from .curriculum_view import CurriculumPageState, CurriculumSummary, build_page_state, summarize
from .logging_config import configure_logging


configure_logging()
logger = logging.getLogger(__name__)

_curriculum_client: Optional[CurriculumClient] = None
_content_catalog: Optional[ContentCatalog] = None


def get_curriculum_client() -> CurriculumClient:
    global _curriculum_client
    if _curriculum_client is None:
        _curriculum_client = build_curriculum_client(get_settings())
    return _curriculum_client


def get_content_catalog() -> ContentCatalog:
    global _content_catalog
    if _content_catalog is None:
        _content_catalog = ContentCatalog.from_file(get_settings().catalog_path)
    return _content_catalog


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    settings_snapshot = get_settings()
    logger.info("Curriculum view service starting against %s", settings_snapshot.curriculum_api_base)
    logger.info("Cache storage: %s", settings_snapshot.cache_path or "in-memory")
    yield
    global _curriculum_client
    if _curriculum_client is not None:
        await _curriculum_client.aclose()
        _curriculum_client = None


app = FastAPI(title="OpenLearn Hub Curriculum Views", version="0.1.0", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/healthz")
def health(settings: Settings = Depends(get_settings)) -> Dict[str, str]:
    return {"status": "ok", "api_url": settings.api_url}


@app.get("/api/curriculum/{curriculum_id}/view", response_model=CurriculumPageState)
async def curriculum_view(
    curriculum_id: str,
    client: CurriculumClient = Depends(get_curriculum_client),
    catalog: ContentCatalog = Depends(get_content_catalog),
):
    saved = await client.get_by_id(curriculum_id)
    state = build_page_state(saved, catalog)
    if state.status == "not_found":
        return JSONResponse(status_code=404, content=state.model_dump(mode="json"))
    return state


@app.get("/api/curriculum/user/{user_id}/summaries", response_model=List[CurriculumSummary])
async def curriculum_summaries(
    user_id: str,
    client: CurriculumClient = Depends(get_curriculum_client),
) -> List[CurriculumSummary]:
    curricula = await client.get_user_curricula(user_id)
    return [summarize(saved) for saved in curricula]
