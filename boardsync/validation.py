"""
Title validation for cards and columns.

Titles are compared after normalization: tabs, newlines and carriage returns
removed, uppercased, trimmed. "Ship it" and "  ship IT\\n" collide;
"Ship it!" does not.
"""
import re
from typing import Callable, Iterable, Optional, Tuple

from .schema import EntityKind

_CONTROL_RE = re.compile(r"[\t\n\r]")

# (entity id, title) pairs of every live entity of a kind
TitleSource = Callable[[EntityKind], Iterable[Tuple[str, str]]]


class ValidationError(Exception):
    """Raised when a save is rejected before any state is touched."""
    pass


class DuplicateTitleError(ValidationError):
    """Raised when another live entity of the same kind has the same title."""

    def __init__(self, kind: EntityKind, title: str):
        self.kind = kind
        self.title = title
        noun = "cards" if kind is EntityKind.CARD else "columns"
        super().__init__(f"Same Title found in other {noun}! Please write another.")


def clean_text(text: Optional[str]) -> str:
    """Strip tab / newline / carriage-return characters (the persisted form)."""
    return _CONTROL_RE.sub("", text or "")


def normalize_title(text: Optional[str]) -> str:
    """Comparison form of a title."""
    return clean_text(text).upper().strip()


class TitleValidator:
    """Scans live entities of one kind for a title collision."""

    def __init__(self, titles: TitleSource):
        self.titles = titles

    def is_duplicate(self, kind: EntityKind, candidate: str, exclude_id: Optional[str] = None) -> bool:
        wanted = normalize_title(candidate)
        for entity_id, title in self.titles(kind):
            if entity_id == exclude_id:
                continue
            if normalize_title(title) == wanted:
                return True
        return False

    def ensure_title(self, kind: EntityKind, candidate: str) -> str:
        """Return the cleaned title, or raise if it is blank."""
        cleaned = clean_text(candidate)
        if not cleaned.strip():
            raise ValidationError(f"Title required for {kind.label}.")
        return cleaned

    def ensure_unique(self, kind: EntityKind, candidate: str, exclude_id: Optional[str] = None) -> None:
        if self.is_duplicate(kind, candidate, exclude_id):
            raise DuplicateTitleError(kind, candidate)
