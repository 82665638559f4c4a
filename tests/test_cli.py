"""
End-to-end run of `boardsync verify` against the Flask service, with the
gateway's HTTP session routed into the app's test client.
"""
import argparse
import tempfile
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import patch
from urllib.parse import urlsplit

from boardsync.cli import cmd_verify
from boardsync.config import Config
from boardsync.gateway import PersistenceGateway
from boardsync.schema import EntityKind
from boardsync.server import create_app
from boardsync.store import BoardStore


class _TestClientSession:
    """Minimal requests.Session stand-in backed by a Flask test client."""

    def __init__(self, client):
        self.client = client
        self.requests = []

    def request(self, method, url, timeout=None, json=None):
        path = urlsplit(url).path
        self.requests.append((method, path))
        resp = self.client.open(path, method=method, json=json)
        return SimpleNamespace(
            ok=200 <= resp.status_code < 300,
            status_code=resp.status_code,
            json=resp.get_json,
        )

    def close(self):
        pass


class TestVerifyCommand:

    def setup_method(self):
        with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as tmp:
            self.db_path = tmp.name
        self.store = BoardStore(self.db_path)
        self.session = _TestClientSession(create_app(self.store).test_client())

    def teardown_method(self):
        for suffix in ("", "-wal", "-shm"):
            Path(self.db_path + suffix).unlink(missing_ok=True)

    def _gateway(self, base_url, timeout=None):
        return PersistenceGateway(base_url, timeout=timeout, session=self.session)

    def test_verify_round_trip(self, capsys):
        cfg = Config(server_url="http://board.test/", max_workers=1)
        with patch("boardsync.loader.PersistenceGateway", side_effect=self._gateway):
            assert cmd_verify(cfg, argparse.Namespace(url=None)) == 0

        out = capsys.readouterr().out
        assert "[5/5] Server state clean" in out
        assert "ALL CHECKS PASSED" in out

        # Two columns and one card were created, the card moved, then everything was removed
        methods = [m for m, _ in self.session.requests]
        assert methods.count("POST") == 3
        assert methods.count("PATCH") == 1
        assert methods.count("DELETE") == 3
        assert self.store.list_all(EntityKind.CARD) == []
        assert self.store.list_all(EntityKind.CONTAINER) == []

    def test_verify_leaves_existing_board_alone(self, capsys):
        self.store.create(EntityKind.CONTAINER, {"id": "1", "title": "Backlog"})
        self.store.create(EntityKind.CARD, {"id": "1", "title": "Fix bug", "columnId": "1"})

        cfg = Config(server_url="http://board.test/", max_workers=1)
        with patch("boardsync.loader.PersistenceGateway", side_effect=self._gateway):
            assert cmd_verify(cfg, argparse.Namespace(url=None)) == 0

        assert "1 column(s), 1 card(s)" in capsys.readouterr().out
        assert [c["id"] for c in self.store.list_all(EntityKind.CONTAINER)] == ["1"]
        assert [c["id"] for c in self.store.list_all(EntityKind.CARD)] == ["1"]
