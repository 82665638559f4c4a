"""Tests for title normalization and duplicate detection."""

import pytest

from boardsync.schema import EntityKind
from boardsync.validation import (
    DuplicateTitleError,
    TitleValidator,
    ValidationError,
    clean_text,
    normalize_title,
)


def _validator(cards=(), columns=()):
    live = {EntityKind.CARD: list(cards), EntityKind.CONTAINER: list(columns)}
    return TitleValidator(lambda kind: live[kind])


def test_clean_text_removes_control_chars():
    assert clean_text("a\tb\nc\rd") == "abcd"
    assert clean_text(None) == ""


def test_normalize_title():
    assert normalize_title("  ship IT\n") == "SHIP IT"
    assert normalize_title("Ship it") == normalize_title("  ship IT\n")
    assert normalize_title("Ship it!") != normalize_title("Ship it")


def test_duplicate_detected_after_normalization():
    v = _validator(cards=[("card-1", "  ship IT\n")])
    assert v.is_duplicate(EntityKind.CARD, "Ship it")
    assert not v.is_duplicate(EntityKind.CARD, "Ship it!")


def test_duplicate_ignores_self_and_other_kind():
    v = _validator(cards=[("card-1", "Ship it")], columns=[("col-1", "Done")])
    assert not v.is_duplicate(EntityKind.CARD, "ship it", exclude_id="card-1")
    assert not v.is_duplicate(EntityKind.CARD, "Done")
    assert v.is_duplicate(EntityKind.CONTAINER, "DONE")


def test_ensure_unique_raises_with_message():
    v = _validator(columns=[("col-1", "Done")])
    with pytest.raises(DuplicateTitleError) as exc:
        v.ensure_unique(EntityKind.CONTAINER, "done")
    assert "Same Title found in other columns" in str(exc.value)
    assert exc.value.kind is EntityKind.CONTAINER


def test_ensure_title_rejects_blank():
    v = _validator()
    with pytest.raises(ValidationError):
        v.ensure_title(EntityKind.CARD, " \t\n ")
    assert v.ensure_title(EntityKind.CARD, "Fix\tbug") == "Fixbug"
