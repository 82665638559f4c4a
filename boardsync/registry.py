"""
Membership registry: the authoritative local record of which card sits in
which container.

Cards point at their container by id only; the registry is the index in the
other direction. All containment changes go through attach / detach /
reparent. Each change fires the refresh hook for the affected containers so
their members can be restacked.
"""
import logging
from typing import Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


class MembershipRegistry:
    """Container id -> ordered member card ids, plus the reverse lookup."""

    def __init__(self, on_change: Optional[Callable[[str, List[str]], None]] = None):
        self._members: Dict[str, Dict[str, None]] = {}  # insertion-ordered set per container
        self._owner: Dict[str, str] = {}                # card_id -> container_id
        self.on_change = on_change

    # ── containers ──────────────────────────────────────────

    def add_container(self, container_id: str) -> None:
        self._members.setdefault(container_id, {})

    def remove_container(self, container_id: str) -> List[str]:
        """Drop a container and release its members. Returns the former members."""
        members = self._members.pop(container_id, None)
        if members is None:
            logger.warning(f"Cannot remove unknown container {container_id}")
            return []
        for card_id in members:
            self._owner.pop(card_id, None)
        return list(members)

    def has_container(self, container_id: Optional[str]) -> bool:
        return container_id in self._members

    def containers(self) -> List[str]:
        return list(self._members)

    # ── membership ──────────────────────────────────────────

    def attach(self, card_id: str, container_id: str) -> bool:
        """Attach a card, implicitly detaching it from its previous container."""
        if container_id not in self._members:
            logger.warning(f"Cannot attach {card_id}: unknown container {container_id}")
            return False

        previous = self._owner.get(card_id)
        if previous == container_id:
            return True
        if previous is not None:
            self._members[previous].pop(card_id, None)

        self._members[container_id][card_id] = None
        self._owner[card_id] = container_id

        if previous is not None:
            self._refresh(previous)
        self._refresh(container_id)
        return True

    def detach(self, card_id: str, container_id: str) -> bool:
        members = self._members.get(container_id)
        if members is None or card_id not in members:
            logger.warning(f"Cannot detach {card_id}: not a member of {container_id}")
            return False

        del members[card_id]
        self._owner.pop(card_id, None)
        self._refresh(container_id)
        return True

    def reparent(self, card_id: str, from_id: Optional[str], to_id: str) -> bool:
        """Move a card between containers. `from_id` must match the current owner."""
        current = self._owner.get(card_id)
        if from_id is not None and current != from_id:
            logger.warning(
                f"Reparent of {card_id} expected it in {from_id}, found {current}"
            )
            return False
        return self.attach(card_id, to_id)

    def members_of(self, container_id: str) -> List[str]:
        """Member card ids in visit (insertion) order. Unknown container -> []."""
        return list(self._members.get(container_id, {}))

    def container_of(self, card_id: str) -> Optional[str]:
        return self._owner.get(card_id)

    def _refresh(self, container_id: str) -> None:
        if self.on_change is not None:
            self.on_change(container_id, self.members_of(container_id))
