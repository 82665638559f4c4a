"""
Board schema: cards, containers, and their wire payloads.

Display ids carry a per-kind prefix (see ids.py); payloads always carry the
bare persistence id. Geometry fields are local view state and never persisted.
"""
from enum import Enum
from dataclasses import dataclass
from typing import Optional, Dict, Any

from . import ids


class EntityKind(Enum):
    """The two persisted resource collections."""
    CARD = "cards"
    CONTAINER = "columns"

    @property
    def collection(self) -> str:
        return self.value

    @property
    def label(self) -> str:
        return "card" if self is EntityKind.CARD else "column"


# Elevation used while a card is picked up, and the resting elevation after a drop
DRAG_Z_INDEX = 10
REST_Z_INDEX = 4
DRAG_ROTATION = 5.0

# Highlight opacity of a container while a dragged card hovers over it
HOVER_OPACITY = 0.35
NORMAL_OPACITY = 1.0


@dataclass
class Card:
    """A titled, described unit of work belonging to at most one container."""

    card_id: str                    # display id (e.g. card-1718000000000-3fa2b1c4)
    title: str = ""
    description: str = ""
    container_id: Optional[str] = None  # display id of the owning container
    persisted: bool = False         # False until the first create intent

    # View state
    x: float = 0.0
    y: float = 0.0
    origin_x: float = 0.0
    origin_y: float = 0.0
    height: float = 60.0
    z_index: int = REST_Z_INDEX
    rotation: float = 0.0

    @property
    def db_id(self) -> str:
        return ids.to_db_id(EntityKind.CARD, self.card_id)

    def move_to(self, x: float, y: float) -> None:
        self.x = x
        self.y = y

    def to_payload(self) -> Dict[str, Any]:
        """Serialize to the wire payload {id, title, description, columnId}."""
        return {
            "id": self.db_id,
            "title": self.title,
            "description": self.description,
            "columnId": ids.to_db_id(EntityKind.CONTAINER, self.container_id) if self.container_id else None,
        }

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "Card":
        """Build a durable card from a wire payload."""
        column_id = data.get("columnId")
        return cls(
            card_id=ids.to_display_id(EntityKind.CARD, str(data.get("id", ""))),
            title=data.get("title") or "",
            description=data.get("description") or "",
            container_id=ids.to_display_id(EntityKind.CONTAINER, str(column_id)) if column_id not in (None, "") else None,
            persisted=True,
        )


@dataclass
class Container:
    """A named column of cards. Membership is held by the registry."""

    container_id: str
    title: str = ""
    persisted: bool = False

    # View state
    x: float = 0.0
    y: float = 0.0
    width: float = 240.0
    height: float = 600.0
    title_height: float = 40.0
    opacity: float = NORMAL_OPACITY

    @property
    def db_id(self) -> str:
        return ids.to_db_id(EntityKind.CONTAINER, self.container_id)

    def to_payload(self) -> Dict[str, Any]:
        return {"id": self.db_id, "title": self.title}

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "Container":
        return cls(
            container_id=ids.to_display_id(EntityKind.CONTAINER, str(data.get("id", ""))),
            title=data.get("title") or "",
            persisted=True,
        )
