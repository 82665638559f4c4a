"""Shared fixtures: a recording gateway and a board wired to it inline."""

import pytest

from boardsync.board import Board
from boardsync.gateway import PersistenceListener
from boardsync.schema import Card, Container, EntityKind


class RecordingGateway:
    """Stands in for PersistenceGateway; records every call in order."""

    def __init__(self, cards=None, columns=None):
        self.calls = []
        self.fail_ids = set()
        self.data = {
            EntityKind.CARD: list(cards or []),
            EntityKind.CONTAINER: list(columns or []),
        }

    def create(self, kind, payload):
        self.calls.append(("create", kind, dict(payload)))
        if payload.get("id") in self.fail_ids:
            return None
        return dict(payload)

    def update(self, kind, entity_id, payload):
        self.calls.append(("update", kind, entity_id, dict(payload)))
        if entity_id in self.fail_ids:
            return None
        return dict(payload)

    def remove(self, kind, entity_id):
        self.calls.append(("remove", kind, entity_id))
        return entity_id not in self.fail_ids

    def list(self, kind):
        self.calls.append(("list", kind))
        return [dict(d) for d in self.data[kind]]

    def close(self):
        pass

    def writes(self):
        return [c for c in self.calls if c[0] != "list"]


def seed(board, columns=(), cards=()):
    """Materialize durable columns [(id, title)] and cards [(id, title, column_id)]."""
    for db_id, title in columns:
        board.add_container(Container.from_payload({"id": db_id, "title": title}))
    for db_id, title, column_id in cards:
        board.add_card(Card.from_payload({
            "id": db_id, "title": title, "description": "", "columnId": column_id,
        }))
    return board


@pytest.fixture
def gateway():
    return RecordingGateway()


@pytest.fixture
def notices():
    return []


@pytest.fixture
def board(gateway, notices):
    b = Board(notify=notices.append)
    PersistenceListener(b.bus, gateway)
    return b
