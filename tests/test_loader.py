"""Tests for bootstrap loading and the CLI board dump."""

from unittest.mock import patch

from conftest import RecordingGateway

from boardsync.cli import main, render_board
from boardsync.loader import BoardLoader
from boardsync.schema import EntityKind


def _gateway():
    return RecordingGateway(
        columns=[{"id": "1", "title": "Backlog"}, {"id": "2", "title": "Done"}],
        cards=[
            {"id": "1", "title": "Fix bug", "description": "crash", "columnId": "1"},
            {"id": "2", "title": "Write docs", "description": "", "columnId": "1"},
            {"id": "3", "title": "Lost", "description": "", "columnId": "99"},
        ],
    )


def test_load_materializes_board():
    gateway = _gateway()
    board = BoardLoader(gateway).load()

    assert [c.container_id for c in board.containers()] == ["col-1", "col-2"]
    assert board.members_of("col-1") == ["card-1", "card-2"]
    assert board.members_of("col-2") == []
    assert all(c.persisted for c in board.cards())
    # columns are listed before cards
    assert gateway.calls == [("list", EntityKind.CONTAINER), ("list", EntityKind.CARD)]


def test_orphan_cards_are_skipped():
    board = BoardLoader(_gateway()).load()
    assert board.card("card-3") is None
    assert len(board.cards()) == 2


def test_loaded_cards_are_stacked():
    board = BoardLoader(_gateway()).load()
    first, second = board.card("card-1"), board.card("card-2")
    assert (first.x, first.y) == (16, 66)
    assert (second.x, second.y) == (16, 116)


def test_loading_publishes_nothing():
    gateway = _gateway()
    BoardLoader(gateway).load()
    assert gateway.writes() == []


def test_render_board():
    text = render_board(BoardLoader(_gateway()).load())
    assert text.splitlines() == [
        "Backlog [col-1] (2)",
        "  - Fix bug [card-1]",
        "      crash",
        "  - Write docs [card-2]",
        "Done [col-2] (0)",
    ]


def test_render_empty_board():
    assert render_board(BoardLoader(RecordingGateway()).load()) == "Board is empty."


def test_show_command(capsys, tmp_path):
    with patch("boardsync.cli.PersistenceGateway", return_value=_gateway()):
        assert main(["--config", str(_write_config(tmp_path)), "show"]) == 0
    assert "Backlog [col-1] (2)" in capsys.readouterr().out


def test_bad_config_exits_2(capsys, tmp_path):
    assert main(["--config", str(tmp_path / "missing.yaml"), "show"]) == 2
    assert "Config error" in capsys.readouterr().err


def _write_config(tmp_path):
    path = tmp_path / "boardsync.yaml"
    path.write_text("server_url: http://board.test/\nlog_level: WARNING\n")
    return path
