"""
Drag session state machine for a single card.

    IDLE ──pointer_down──▶ DRAGGING ◀──┐
                              │        │ hit changes / no hit
                              ▼        │
                         OVER_TARGET ──┘
                              │
           pointer_up / pointer_out (from DRAGGING or OVER_TARGET)
                              ▼
                            IDLE

Dropping over a different container publishes a REPARENT intent; anything
else snaps the card back to where it was before the drag. Visual state
(tilt, elevation, hover highlight) is reset on every exit.
"""
import logging
from enum import Enum
from typing import Optional, TYPE_CHECKING

from .bus import IntentType
from .schema import (
    Card,
    DRAG_ROTATION,
    DRAG_Z_INDEX,
    HOVER_OPACITY,
    NORMAL_OPACITY,
    REST_Z_INDEX,
)

if TYPE_CHECKING:
    from .board import Board

logger = logging.getLogger(__name__)


class DragState(Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    OVER_TARGET = "over_target"


class DragSession:
    """Pointer-driven move of one card. Discarded once the pointer is released."""

    def __init__(self, card: Card, board: "Board"):
        self.card = card
        self.board = board
        self.state = DragState.IDLE

        self.origin_container_id: Optional[str] = None
        self.target_id: Optional[str] = None

        # pointer position minus card top-left, captured on pointer_down
        self.shift_x = 0.0
        self.shift_y = 0.0
        # where the card was before the drag
        self.start_x = 0.0
        self.start_y = 0.0

    @property
    def active(self) -> bool:
        return self.state is not DragState.IDLE

    def pointer_down(self, x: float, y: float) -> None:
        if self.active:
            return
        card = self.card
        self.origin_container_id = card.container_id
        self.target_id = None
        self.start_x, self.start_y = card.x, card.y
        self.shift_x = x - card.x
        self.shift_y = y - card.y

        card.z_index = DRAG_Z_INDEX
        self._move(x, y)
        self.state = DragState.DRAGGING
        logger.debug(f"Drag started: {card.card_id} from {self.origin_container_id}")

    def pointer_move(self, x: float, y: float) -> None:
        if not self.active:
            return
        self._move(x, y)
        self.card.rotation = DRAG_ROTATION

        hit = self.board.drop_target_at(x, y)
        if hit == self.target_id:
            return

        if self.target_id is not None:
            self._leave(self.target_id)
        self.target_id = hit
        if hit is not None:
            self._enter(hit)
            self.state = DragState.OVER_TARGET
        else:
            self.state = DragState.DRAGGING

    def pointer_up(self) -> Optional[str]:
        """
        Finish the drag.

        Returns the new container id if the card was reparented, else None.
        """
        if not self.active:
            return None

        card = self.card
        target = self.target_id
        try:
            if target is not None and target != self.origin_container_id:
                self.board.bus.publish(
                    IntentType.REPARENT,
                    card_id=card.card_id,
                    from_id=self.origin_container_id,
                    to_id=target,
                )
                # The root listener refuses the move if the target vanished mid-drag
                if card.container_id == target:
                    logger.info(f"Dropped {card.card_id} into {target}")
                    return target
                logger.warning(f"Drop of {card.card_id} into {target} was not applied")

            card.move_to(self.start_x, self.start_y)
            return None
        finally:
            card.rotation = 0.0
            card.z_index = REST_Z_INDEX
            if target is not None:
                self._leave(target)
            self.target_id = None
            self.state = DragState.IDLE

    # Pointer leaving the card ends the drag exactly like a release
    pointer_out = pointer_up

    def _move(self, x: float, y: float) -> None:
        self.card.move_to(x - self.shift_x, y - self.shift_y)

    def _enter(self, container_id: str) -> None:
        container = self.board.container(container_id)
        if container is not None:
            container.opacity = HOVER_OPACITY

    def _leave(self, container_id: str) -> None:
        container = self.board.container(container_id)
        if container is not None:
            container.opacity = NORMAL_OPACITY
