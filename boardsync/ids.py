"""
Identifier codec.

Visible ids are the persistence id with a fixed per-kind prefix:
    card-<id>   for cards
    col-<id>    for columns (containers)

Everything published toward the persistence gateway uses the bare id.
"""
import time
import uuid

CARD_PREFIX = "card-"
CONTAINER_PREFIX = "col-"

# keyed by EntityKind.value (collection name)
_PREFIXES = {
    "cards": CARD_PREFIX,
    "columns": CONTAINER_PREFIX,
}


def prefix_for(kind) -> str:
    """Return the display prefix for an EntityKind."""
    return _PREFIXES[kind.value]


def to_db_id(kind, display_id: str) -> str:
    """Strip the kind's prefix. Ids without the prefix pass through unchanged."""
    prefix = prefix_for(kind)
    if display_id.startswith(prefix):
        return display_id[len(prefix):]
    return display_id


def to_display_id(kind, db_id: str) -> str:
    """Add the kind's prefix (idempotent)."""
    prefix = prefix_for(kind)
    if db_id.startswith(prefix):
        return db_id
    return f"{prefix}{db_id}"


def make_entity_id() -> str:
    """Generate a sortable unique bare id (ms-precision timestamp + random hex)."""
    ts = int(time.time() * 1000)
    rand = uuid.uuid4().hex[:8]
    return f"{ts}-{rand}"


def new_card_id() -> str:
    return CARD_PREFIX + make_entity_id()


def new_container_id() -> str:
    return CONTAINER_PREFIX + make_entity_id()
