"""
Bootstrap loader: list columns, then cards, and materialize the board.
"""
import logging
from typing import Optional

from .board import Board
from .config import Config
from .gateway import PersistenceGateway, PersistenceListener
from .schema import Card, Container, EntityKind

logger = logging.getLogger(__name__)


class BoardLoader:
    """Builds a Board from the persistence service."""

    def __init__(self, gateway: PersistenceGateway, board: Optional[Board] = None):
        self.gateway = gateway
        self.board = board or Board()

    def load(self) -> Board:
        board = self.board

        # Columns first so every card has somewhere to go
        for data in self.gateway.list(EntityKind.CONTAINER):
            board.add_container(Container.from_payload(data))

        skipped = 0
        for data in self.gateway.list(EntityKind.CARD):
            card = Card.from_payload(data)
            card.height = board.config.card_height
            if not board.add_card(card):
                skipped += 1

        logger.info(
            f"Loaded {len(board.containers())} column(s), {len(board.cards())} card(s)"
            + (f", skipped {skipped} orphan card(s)" if skipped else "")
        )
        return board


class BoardSession:
    """
    One editing session: gateway, threaded persistence listener, loaded board.

        with BoardSession(cfg) as board:
            board.begin_drag(...)
    """

    def __init__(self, config: Config, gateway: Optional[PersistenceGateway] = None):
        self.config = config
        self.gateway = gateway or PersistenceGateway(config.server_url, timeout=config.request_timeout)
        self.board = Board(config=config)
        self.listener = PersistenceListener.threaded(self.board.bus, self.gateway, max_workers=config.max_workers)

    def open(self) -> Board:
        return BoardLoader(self.gateway, self.board).load()

    def flush(self) -> None:
        self.listener.flush()

    def close(self) -> None:
        self.listener.close()
        self.gateway.close()

    def __enter__(self) -> Board:
        return self.open()

    def __exit__(self, *exc) -> None:
        self.close()
