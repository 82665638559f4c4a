# Board sync engine: containment tracking, drag reparenting, and persistence intents
#
# Components:
#   schema.py     - Data model (Card, Container, EntityKind)
#   ids.py        - Display id <-> persistence id codec
#   bus.py        - Intent bus (typed publish/subscribe)
#   registry.py   - Membership registry (card -> container index)
#   layout.py     - Card stacking and hit-test geometry
#   drag.py       - Drag session state machine
#   validation.py - Title normalization and uniqueness checks
#   cascade.py    - Container delete cascade
#   board.py      - Board aggregate and root listener
#   gateway.py    - HTTP persistence gateway and intent listener
#   loader.py     - Bootstrap loader
#   store.py      - SQLite store behind the persistence service
#   server.py     - Flask persistence service
#   config.py     - YAML / env configuration
#   cli.py        - Command line (serve, show, verify)

__version__ = "0.3.0"
