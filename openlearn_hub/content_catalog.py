"""Platform content catalog used to match courses against hosted material."""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parent / "data"
DEFAULT_CATALOG_PATH = DATA_DIR / "content_catalog.json"


class ContentItem(BaseModel):
    """Uploaded learning material hosted on the platform."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    title: str
    description: str = ""
    uploaded_by: str = Field("", alias="uploadedBy")
    views: int = 0
    level: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    video_url: Optional[str] = Field(None, alias="videoUrl")

    @property
    def view_path(self) -> str:
        return f"/note/{self.id}"


class ContentCatalog:
    """In-memory catalog, newest uploads first."""

    def __init__(self, items: Iterable[ContentItem] = ()) -> None:
        self._items: List[ContentItem] = list(items)
        self._lock = threading.RLock()

    @classmethod
    def from_file(cls, path: Path | str | None = None) -> "ContentCatalog":
        source = Path(path) if path else DEFAULT_CATALOG_PATH
        with source.open("r", encoding="utf-8") as handle:
            raw = json.load(handle)
        items: List[ContentItem] = []
        for index, payload in enumerate(raw if isinstance(raw, list) else []):
            try:
                items.append(ContentItem.model_validate(payload))
            except ValidationError:
                logger.exception("Skipping invalid catalog entry %s in %s", index, source)
        logger.debug("Loaded %s catalog items from %s", len(items), source)
        return cls(items)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def items(self) -> List[ContentItem]:
        with self._lock:
            return list(self._items)

    def get(self, content_id: Optional[str]) -> Optional[ContentItem]:
        if not content_id:
            return None
        with self._lock:
            for item in self._items:
                if item.id == content_id:
                    return item
        return None

    def add(self, item: ContentItem) -> None:
        with self._lock:
            self._items = [existing for existing in self._items if existing.id != item.id]
            self._items.insert(0, item)


__all__ = ["ContentCatalog", "ContentItem", "DEFAULT_CATALOG_PATH"]
