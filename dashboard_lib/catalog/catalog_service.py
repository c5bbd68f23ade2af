"""CatalogService: the services and categories shown on the dashboard.

The catalog is read from a YAML document with two top-level lists,
`categories` and `services`. A category either lists its member service
ids explicitly (`services:`) or collects every service whose `category`
field matches its id.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

logger = logging.getLogger(__name__)

MIN_SEARCH_LENGTH = 1
HIGHLIGHT_THRESHOLD = 5


@dataclass
class Service:
    id: str
    name: str
    url: str
    category: str = ""
    description: str = ""
    icon: str = ""
    color: str = ""
    priority: str = "normal"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Service":
        if not data.get("id") or not data.get("name"):
            raise ValueError(f"service entry requires 'id' and 'name': {data!r}")
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        known.setdefault("url", "")
        return cls(**known)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class Category:
    id: str
    name: str
    icon: str = ""
    services: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class SearchHit:
    service: Service
    score: int
    highlighted: bool

    def to_dict(self) -> dict:
        return {"service": self.service.to_dict(), "score": self.score, "highlighted": self.highlighted}


def score_service(service: Service, term: str) -> int:
    """Relevance of `service` for an already lower-cased search term."""
    name = service.name.lower()
    desc = service.description.lower()
    score = 0
    if name == term:
        score += 10
    if name.startswith(term):
        score += 5
    if term in name:
        score += 3
    if term in desc:
        score += 2
    return score


class CatalogService:
    def __init__(self, services: List[Service], categories: Optional[List[Category]] = None):
        self._services = list(services)
        self._by_id = {s.id: s for s in self._services}
        self._categories = self._resolve_categories(categories or [])

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CatalogService":
        if not isinstance(data, dict):
            raise ValueError("invalid catalog format: expected mapping")
        services = [Service.from_dict(s) for s in data.get("services") or []]
        categories = [
            Category(id=c["id"], name=c.get("name", c["id"]), icon=c.get("icon", ""), services=list(c.get("services") or []))
            for c in data.get("categories") or []
        ]
        return cls(services, categories)

    @classmethod
    def from_file(cls, path: str | Path) -> "CatalogService":
        p = Path(path)
        with p.open("r", encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ValueError(f"invalid catalog format in {p}: parse error") from e
        catalog = cls.from_dict(data)
        logger.info("Loaded %d services in %d categories from %s", len(catalog._services), len(catalog._categories), p)
        return catalog

    def _resolve_categories(self, categories: List[Category]) -> List[Category]:
        resolved = []
        for c in categories:
            members = c.services or [s.id for s in self._services if s.category == c.id]
            missing = [sid for sid in members if sid not in self._by_id]
            if missing:
                logger.warning("Category %s references unknown services: %s", c.id, ", ".join(missing))
            resolved.append(Category(id=c.id, name=c.name, icon=c.icon, services=[sid for sid in members if sid in self._by_id]))
        return resolved

    def list_services(self) -> List[Service]:
        return list(self._services)

    def list_categories(self) -> List[Category]:
        return list(self._categories)

    def get_service_by_id(self, service_id: str) -> Optional[Service]:
        return self._by_id.get(service_id)

    def services_in_category(self, category_id: str) -> List[Service]:
        for c in self._categories:
            if c.id == category_id:
                return [self._by_id[sid] for sid in c.services]
        return [s for s in self._services if s.category == category_id]

    def search(self, query: str) -> List[SearchHit]:
        """Score every service against `query`, best matches first.

        Queries shorter than MIN_SEARCH_LENGTH reset the search: every
        service is returned unhighlighted with a zero score.
        """
        term = (query or "").lower().strip()
        if len(term) < MIN_SEARCH_LENGTH:
            return [SearchHit(s, 0, False) for s in self._services]
        hits = []
        for s in self._services:
            score = score_service(s, term)
            if score > 0:
                hits.append(SearchHit(s, score, score >= HIGHLIGHT_THRESHOLD))
        hits.sort(key=lambda h: -h.score)
        return hits

    def visible_categories(self, query: str) -> List[Category]:
        """Categories holding at least one service that matches `query`."""
        matched = {h.service.id for h in self.search(query)}
        return [c for c in self._categories if any(sid in matched for sid in c.services)]

    def to_dict(self) -> dict:
        return {
            "categories": [c.to_dict() for c in self._categories],
            "services": [s.to_dict() for s in self._services],
        }
