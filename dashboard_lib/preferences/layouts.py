"""Named dashboard layouts persisted through the expiring store.

The stored document is `{"layouts": [...], "activeId": "<id>"}` under
`mserv_layout`. The built-in default layout is never read back from
storage: it is always rebuilt from `default_layout()` and cannot be deleted.
"""
from __future__ import annotations

import copy
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from dashboard_lib.events import EventBus, LAYOUTS_UPDATED
from dashboard_lib.storage import ExpiringStore

logger = logging.getLogger(__name__)

LAYOUT_KEY = "mserv_layout"
DEFAULT_LAYOUT_ID = "default"
MAX_SECTIONS = 5
GRID_SIZES = ("1x1", "1x2", "2x1", "2x2")


@dataclass
class LayoutSection:
    id: str
    title: str
    type: str
    row: int = 1
    column: int = 1
    width: int = 1
    height: int = 1

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LayoutSection":
        if not isinstance(data, dict) or not data.get("id"):
            raise ValueError("layout section requires an 'id'")
        position = data.get("position") if isinstance(data.get("position"), dict) else {}
        size = data.get("size") if isinstance(data.get("size"), dict) else {}
        return cls(
            id=str(data["id"]),
            title=str(data.get("title", data["id"])),
            type=str(data.get("type", data["id"])),
            row=int(position.get("row", 1)),
            column=int(position.get("column", 1)),
            width=int(size.get("width", 1)),
            height=int(size.get("height", 1)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "type": self.type,
            "position": {"row": self.row, "column": self.column},
            "size": {"width": self.width, "height": self.height},
        }


@dataclass
class Layout:
    id: str
    name: str
    sections: List[LayoutSection] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Layout":
        if not isinstance(data, dict) or not data.get("id"):
            raise ValueError("layout requires an 'id'")
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", data["id"])),
            sections=[LayoutSection.from_dict(s) for s in (data.get("sections") or [])],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "sections": [s.to_dict() for s in self.sections]}

    def find_section(self, section_id: str) -> Optional[LayoutSection]:
        return next((s for s in self.sections if s.id == section_id), None)


def default_layout() -> Layout:
    return Layout(
        id=DEFAULT_LAYOUT_ID,
        name="Default layout",
        sections=[
            LayoutSection("favorites", "Favorites", "favorites", row=1, column=1, width=2, height=1),
            LayoutSection("categories", "Services", "categories", row=2, column=1, width=2, height=2),
        ],
    )


class LayoutManager:
    """Keeps the list of layouts and which one is active.

    Every change is saved immediately and announced as `layouts:updated`
    with the stored document.
    """

    def __init__(
        self,
        store: ExpiringStore,
        events: Optional[EventBus] = None,
        storage_key: str = LAYOUT_KEY,
        max_sections: int = MAX_SECTIONS,
        clock: Optional[Callable[[], int]] = None,
    ) -> None:
        self.store = store
        self.events = events
        self.storage_key = storage_key
        self.max_sections = max_sections
        self._clock = clock or (lambda: int(time.time() * 1000))
        self._layouts: List[Layout] = [default_layout()]
        self.active_layout_id = DEFAULT_LAYOUT_ID

    @property
    def layouts(self) -> List[Layout]:
        return copy.deepcopy(self._layouts)

    def get(self, layout_id: str) -> Optional[Layout]:
        return next((layout for layout in self._layouts if layout.id == layout_id), None)

    def active_layout(self) -> Layout:
        return copy.deepcopy(self.get(self.active_layout_id) or self._layouts[0])

    def load(self) -> List[Layout]:
        stored = self.store.get(self.storage_key)
        self._layouts = [default_layout()]
        self.active_layout_id = DEFAULT_LAYOUT_ID
        if stored is None:
            return self.layouts
        if not isinstance(stored, dict):
            logger.warning("Ignoring malformed layouts entry: %r", stored)
            return self.layouts

        raw_layouts = stored.get("layouts")
        for raw in raw_layouts if isinstance(raw_layouts, list) else []:
            try:
                layout = Layout.from_dict(raw)
            except (TypeError, ValueError) as e:
                logger.warning("Skipping invalid stored layout: %s", e)
                continue
            if layout.id != DEFAULT_LAYOUT_ID and self.get(layout.id) is None:
                self._layouts.append(layout)

        active_id = stored.get("activeId")
        if isinstance(active_id, str) and self.get(active_id) is not None:
            self.active_layout_id = active_id
        return self.layouts

    def to_dict(self) -> Dict[str, Any]:
        return {"layouts": [layout.to_dict() for layout in self._layouts], "activeId": self.active_layout_id}

    def save(self) -> bool:
        data = self.to_dict()
        ok = self.store.set(self.storage_key, data)
        if not ok:
            logger.error("Failed to persist layouts")
        if self.events is not None:
            self.events.emit(LAYOUTS_UPDATED, data)
        return ok

    def select(self, layout_id: str) -> bool:
        if self.get(layout_id) is None:
            logger.warning("Cannot select unknown layout %s", layout_id)
            return False
        self.active_layout_id = layout_id
        self.save()
        return True

    def create(self, name: str) -> Layout:
        """Add a layout seeded with the default sections and make it active."""
        name = (name or "").strip()
        if not name:
            raise ValueError("layout name must not be empty")
        stamp = self._clock()
        layout_id = f"layout-{stamp}"
        suffix = 1
        while self.get(layout_id) is not None:
            layout_id = f"layout-{stamp}-{suffix}"
            suffix += 1
        layout = Layout(layout_id, name, copy.deepcopy(default_layout().sections))
        self._layouts.append(layout)
        self.active_layout_id = layout.id
        self.save()
        return copy.deepcopy(layout)

    def delete_current(self) -> bool:
        if self.active_layout_id == DEFAULT_LAYOUT_ID:
            logger.warning("The default layout cannot be deleted")
            return False
        self._layouts = [layout for layout in self._layouts if layout.id != self.active_layout_id]
        self.active_layout_id = DEFAULT_LAYOUT_ID
        self.save()
        return True

    def _editable_active(self) -> Optional[Layout]:
        layout = self.get(self.active_layout_id)
        if layout is None or layout.id == DEFAULT_LAYOUT_ID:
            logger.warning("Create a layout before editing sections")
            return None
        return layout

    def add_section(self, section: LayoutSection) -> bool:
        layout = self._editable_active()
        if layout is None:
            return False
        if layout.find_section(section.id) is not None:
            logger.warning("Section %s already exists in layout %s", section.id, layout.id)
            return False
        if len(layout.sections) >= self.max_sections:
            logger.warning("Layout %s already has %d sections", layout.id, self.max_sections)
            return False
        layout.sections.append(copy.deepcopy(section))
        self.save()
        return True

    def remove_section(self, section_id: str) -> bool:
        layout = self._editable_active()
        if layout is None or layout.find_section(section_id) is None:
            return False
        layout.sections = [s for s in layout.sections if s.id != section_id]
        self.save()
        return True

    def resize_section(self, section_id: str, size: str) -> bool:
        """Resize a section of the active layout to one of `GRID_SIZES` ("WxH")."""
        if size not in GRID_SIZES:
            raise ValueError(f"unsupported section size {size!r}; expected one of {', '.join(GRID_SIZES)}")
        layout = self._editable_active()
        section = layout.find_section(section_id) if layout is not None else None
        if section is None:
            return False
        section.width, section.height = (int(n) for n in size.split("x"))
        self.save()
        return True
