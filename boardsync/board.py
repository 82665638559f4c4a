"""
Board aggregate: owns every container and card, the intent bus and the
membership registry for one session.

The board attaches a single root listener for REPARENT. That listener is the
only place containment changes after bootstrap: it resolves both endpoints,
moves the card in the registry, and publishes CARD_UPDATE for persistence.

Editing operations (new / save / delete) validate first, then publish the
matching intent. Nothing is rolled back if the remote write later fails.
"""
import logging
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from . import ids
from .bus import EventBus, IntentType
from .cascade import CascadeDeleteCoordinator, ConfirmFn
from .config import Config
from .drag import DragSession
from .layout import column_left, contains, stack_positions
from .registry import MembershipRegistry
from .schema import Card, Container, EntityKind
from .validation import TitleValidator, ValidationError, clean_text

logger = logging.getLogger(__name__)


def log_notice(message: str) -> None:
    """Default user notification: log it."""
    logger.warning(message)


class Board:
    """Root aggregate for one board session."""

    def __init__(
        self,
        bus: Optional[EventBus] = None,
        config: Optional[Config] = None,
        notify: Optional[Callable[[str], None]] = None,
        confirm: Optional[ConfirmFn] = None,
    ):
        self.bus = bus or EventBus()
        self.config = config or Config()
        self.notify = notify or log_notice
        self.confirm = confirm

        self._containers: Dict[str, Container] = {}
        self._cards: Dict[str, Card] = {}
        self._drag: Optional[DragSession] = None

        self.registry = MembershipRegistry(on_change=self._restack)
        self.validator = TitleValidator(self._titles)
        self.cascade = CascadeDeleteCoordinator(self)

        self.bus.subscribe(IntentType.REPARENT, self._on_reparent)

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # Queries
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def card(self, card_id: str) -> Optional[Card]:
        return self._cards.get(card_id)

    def container(self, container_id: Optional[str]) -> Optional[Container]:
        if container_id is None:
            return None
        return self._containers.get(container_id)

    def cards(self) -> List[Card]:
        return list(self._cards.values())

    def containers(self) -> List[Container]:
        return list(self._containers.values())

    def members_of(self, container_id: str) -> List[str]:
        return self.registry.members_of(container_id)

    def drop_target_at(self, x: float, y: float) -> Optional[str]:
        """Container under the pointer, or None (including outside the viewport)."""
        cfg = self.config
        if not contains(0, 0, cfg.viewport_width, cfg.viewport_height, x, y):
            return None
        # Later containers are drawn on top
        for container in reversed(self.containers()):
            if contains(container.x, container.y, container.width, container.height, x, y):
                return container.container_id
        return None

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # Materialization (bootstrap)
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def add_container(self, container: Container) -> Container:
        """Place a container in the next column slot and register it."""
        cfg = self.config
        container.x = column_left(len(self._containers), cfg.board_margin, cfg.container_width, cfg.container_gap)
        container.y = cfg.board_margin
        container.width = cfg.container_width
        container.height = cfg.container_height
        container.title_height = cfg.title_height

        self._containers[container.container_id] = container
        self.registry.add_container(container.container_id)
        return container

    def add_card(self, card: Card) -> bool:
        """Add a card to its container. Unknown container: logged, card not added."""
        if not self.registry.has_container(card.container_id):
            logger.warning(f"Card {card.card_id} references unknown container {card.container_id}")
            return False
        self._cards[card.card_id] = card
        return self.registry.attach(card.card_id, card.container_id)

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # Containers
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def new_container(self, title: str = "") -> Container:
        """Open a transient column. It is persisted on the first save."""
        return self.add_container(Container(container_id=ids.new_container_id(), title=title))

    def save_container(self, container_id: str, title: str) -> bool:
        container = self.container(container_id)
        if container is None:
            logger.warning(f"Cannot save unknown container {container_id}")
            return False

        try:
            title = self.validator.ensure_title(EntityKind.CONTAINER, title)
            self.validator.ensure_unique(EntityKind.CONTAINER, title, exclude_id=container_id)
        except ValidationError as e:
            self.notify(str(e))
            return False

        container.title = title
        if container.persisted:
            self.bus.publish(IntentType.CONTAINER_UPDATE, id=container.db_id, title=title)
        else:
            self.bus.publish(IntentType.CONTAINER_CREATE, **container.to_payload())
            container.persisted = True
        return True

    def delete_container(self, container_id: str, confirm: Optional[ConfirmFn] = None) -> bool:
        return self.cascade.delete_container(container_id, confirm or self.confirm)

    def discard_container(self, container_id: str) -> None:
        """Drop a container from the board without publishing anything."""
        if self._containers.pop(container_id, None) is None:
            return
        # Close the gap left by the removed column
        cfg = self.config
        for index, container in enumerate(self._containers.values()):
            container.x = column_left(index, cfg.board_margin, cfg.container_width, cfg.container_gap)
            self._restack(container.container_id, self.registry.members_of(container.container_id))

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # Cards
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def new_card(self, container_id: str, title: str = "", description: str = "") -> Optional[Card]:
        """Open a transient card in a column. It is persisted on the first save."""
        card = Card(
            card_id=ids.new_card_id(),
            title=title,
            description=description,
            container_id=container_id,
            height=self.config.card_height,
        )
        if not self.add_card(card):
            return None
        return card

    def save_card(self, card_id: str, title: str, description: str = "") -> bool:
        """
        Validate and commit a card edit.

        Transient cards publish CARD_CREATE with the full payload; durable
        cards publish CARD_UPDATE with title and description. A rejected
        title leaves the card untouched and notifies the user.
        """
        card = self.card(card_id)
        if card is None:
            logger.warning(f"Cannot save unknown card {card_id}")
            return False

        try:
            title = self.validator.ensure_title(EntityKind.CARD, title)
            self.validator.ensure_unique(EntityKind.CARD, title, exclude_id=card_id)
        except ValidationError as e:
            self.notify(str(e))
            return False

        card.title = title
        card.description = clean_text(description)
        if card.persisted:
            self.bus.publish(
                IntentType.CARD_UPDATE,
                id=card.db_id,
                title=card.title,
                description=card.description,
            )
        else:
            self.bus.publish(IntentType.CARD_CREATE, **card.to_payload())
            card.persisted = True
        return True

    def delete_card(self, card_id: str) -> bool:
        card = self.card(card_id)
        if card is None:
            logger.warning(f"Cannot delete unknown card {card_id}")
            return False

        if card.persisted:
            self.bus.publish(IntentType.CARD_DELETE, id=card.db_id)
        if card.container_id is not None:
            self.registry.detach(card_id, card.container_id)
        self.discard_card(card_id)
        return True

    def discard_card(self, card_id: str) -> None:
        """Drop a card from the board without publishing anything."""
        card = self._cards.pop(card_id, None)
        if card is None:
            return
        if self._drag is not None and self._drag.card is card:
            self._drag = None

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # Dragging
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def begin_drag(self, card_id: str, x: float, y: float) -> Optional[DragSession]:
        """Pick up a card at pointer (x, y). Only one drag may be active."""
        card = self.card(card_id)
        if card is None:
            logger.warning(f"Cannot drag unknown card {card_id}")
            return None
        if self._drag is not None and self._drag.active:
            logger.warning(f"Drag of {self._drag.card.card_id} still active; ignoring {card_id}")
            return None

        session = DragSession(card, self)
        session.pointer_down(x, y)
        self._drag = session
        return session

    @property
    def active_drag(self) -> Optional[DragSession]:
        if self._drag is not None and self._drag.active:
            return self._drag
        return None

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # Internals
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    def _on_reparent(self, card_id: str, from_id: Optional[str], to_id: str) -> None:
        """Root listener: apply a drop to the registry, then request persistence."""
        card = self.card(card_id)
        target = self.container(to_id)
        if card is None or target is None:
            logger.warning(f"Reparent ignored: card={card_id} target={to_id}")
            return

        if not self.registry.reparent(card_id, from_id, to_id):
            return
        card.container_id = to_id

        if card.persisted:
            self.bus.publish(IntentType.CARD_UPDATE, id=card.db_id, columnId=target.db_id)
        else:
            logger.debug(f"{card_id} not saved yet; move stays local until create")

    def _restack(self, container_id: str, members: List[str]) -> None:
        """Registry hook: restack a container's cards in visit order."""
        container = self.container(container_id)
        if container is None:
            return
        cards = [self._cards[m] for m in members if m in self._cards]
        slots = stack_positions(
            container.x,
            container.y,
            container.title_height,
            [c.height for c in cards],
        )
        for card, (x, y) in zip(cards, slots):
            card.origin_x, card.origin_y = x, y
            card.move_to(x, y)

    def _titles(self, kind: EntityKind) -> Iterator[Tuple[str, str]]:
        if kind is EntityKind.CARD:
            for card in self._cards.values():
                yield card.card_id, card.title
        else:
            for container in self._containers.values():
                yield container.container_id, container.title
