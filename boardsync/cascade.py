"""
Container delete cascade.

Deleting a column removes the column and every card in it, remotely and
locally. Remote removal is one delete per entity (1 + N calls), each issued
independently so a failure on one card does not hold back the rest. Local
removal happens as soon as the delete is initiated and does not wait for, or
depend on, the remote outcome.
"""
import logging
from typing import Callable, Optional, TYPE_CHECKING

from .bus import IntentType

if TYPE_CHECKING:
    from .board import Board

logger = logging.getLogger(__name__)

ConfirmFn = Callable[[str], bool]


def deny_all(message: str) -> bool:
    """Default confirmation: refuse to drop non-empty columns without a prompt."""
    logger.info(f"Confirmation required but no prompt available: {message}")
    return False


class CascadeDeleteCoordinator:
    """Removes a container and its member cards."""

    def __init__(self, board: "Board"):
        self.board = board

    def delete_container(self, container_id: str, confirm: Optional[ConfirmFn] = None) -> bool:
        board = self.board
        container = board.container(container_id)
        if container is None:
            logger.warning(f"Cannot delete unknown container {container_id}")
            return False

        members = board.registry.members_of(container_id)
        if members:
            confirm = confirm or deny_all
            message = f"{container.title.strip()} contains cards. Cards will be deleted. Confirm?"
            if not confirm(message):
                logger.info(f"Delete of {container_id} cancelled")
                return False

        # Entities never saved have nothing to delete remotely
        if container.persisted:
            board.bus.publish(IntentType.CONTAINER_DELETE, id=container.db_id)
        for card_id in members:
            card = board.card(card_id)
            if card is None or not card.persisted:
                continue
            board.bus.publish(IntentType.CARD_DELETE, id=card.db_id)

        # Local removal is unconditional once initiated
        released = board.registry.remove_container(container_id)
        for card_id in released:
            board.discard_card(card_id)
        board.discard_container(container_id)

        logger.info(f"Deleted container {container_id} with {len(released)} card(s)")
        return True
