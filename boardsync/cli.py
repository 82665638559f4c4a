"""
boardsync command line.

    boardsync serve [--host H] [--port P] [--db PATH]   run the persistence service
    boardsync show  [--url URL]                         load a board and print it
    boardsync verify [--url URL]                        round-trip a scratch board
"""
import argparse
import logging
import sys
from typing import List, Optional

from .board import Board
from .config import Config, ConfigError
from .gateway import PersistenceGateway
from .ids import make_entity_id
from .loader import BoardLoader, BoardSession
from .schema import EntityKind

logger = logging.getLogger(__name__)


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=getattr(logging, level.upper(), logging.INFO),
    )


def render_board(board: Board) -> str:
    """Plain-text dump of columns and their cards in stacking order."""
    if not board.containers():
        return "Board is empty."
    lines = []
    for container in board.containers():
        members = board.members_of(container.container_id)
        lines.append(f"{container.title or '<untitled>'} [{container.container_id}] ({len(members)})")
        for card_id in members:
            card = board.card(card_id)
            lines.append(f"  - {card.title or '<untitled>'} [{card_id}]")
            if card.description:
                lines.append(f"      {card.description}")
    return "\n".join(lines)


def cmd_serve(cfg: Config, args: argparse.Namespace) -> int:
    from .server import create_app
    from .store import BoardStore

    store = BoardStore(args.db or cfg.db_path)
    app = create_app(store)
    host = args.host or cfg.host
    port = args.port or cfg.port
    logger.info(f"Serving {store.db_path} on http://{host}:{port}/")
    app.run(host=host, port=port, debug=False, threaded=True)
    return 0


def cmd_show(cfg: Config, args: argparse.Namespace) -> int:
    gateway = PersistenceGateway(args.url or cfg.server_url, timeout=cfg.request_timeout)
    try:
        board = BoardLoader(gateway, Board(config=cfg)).load()
    finally:
        gateway.close()
    print(render_board(board))
    return 0


def cmd_verify(cfg: Config, args: argparse.Namespace) -> int:
    """End-to-end check against a running service: create, drag, cascade delete."""
    if args.url:
        cfg.server_url = args.url if args.url.endswith("/") else args.url + "/"
    tag = make_entity_id()[-8:]
    session = BoardSession(cfg)
    try:
        board = session.open()
        print(f"[1/5] Loaded board: {len(board.containers())} column(s), {len(board.cards())} card(s)")

        backlog = board.new_container()
        done = board.new_container()
        if not (board.save_container(backlog.container_id, f"Backlog {tag}")
                and board.save_container(done.container_id, f"Done {tag}")):
            print("❌ Could not save columns")
            return 1
        card = board.new_card(backlog.container_id)
        if card is None or not board.save_card(card.card_id, f"Fix bug {tag}", ""):
            print("❌ Could not save card")
            return 1
        session.flush()
        print(f"[2/5] Created {backlog.container_id}, {done.container_id}, {card.card_id}")

        drag = board.begin_drag(card.card_id, card.x + 5, card.y + 5)
        drag.pointer_move(done.x + done.width / 2, done.y + done.height / 2)
        drag.pointer_up()
        session.flush()
        print(f"[3/5] Dragged {card.card_id} → {card.container_id}")

        board.delete_container(done.container_id, confirm=lambda message: True)
        board.delete_container(backlog.container_id, confirm=lambda message: True)
        session.flush()
        print("[4/5] Deleted test columns")

        remote_cards = {c.get("id") for c in session.gateway.list(EntityKind.CARD)}
        remote_cols = {c.get("id") for c in session.gateway.list(EntityKind.CONTAINER)}
        leftovers = {card.db_id} & remote_cards | {backlog.db_id, done.db_id} & remote_cols
        if leftovers:
            print(f"❌ Still on server: {sorted(leftovers)}")
            return 1
        print("[5/5] Server state clean")
    finally:
        session.close()

    print("✅ ALL CHECKS PASSED")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="boardsync", description="Board sync engine")
    parser.add_argument("--config", help="Path to boardsync.yaml")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the persistence service")
    serve.add_argument("--host", help="Bind address (use 0.0.0.0 to expose on network)")
    serve.add_argument("--port", type=int)
    serve.add_argument("--db", help="Path to board.db (overrides BOARDSYNC_DB)")
    serve.set_defaults(func=cmd_serve)

    show = sub.add_parser("show", help="Load a board from the service and print it")
    show.add_argument("--url", help="Persistence service URL (overrides BOARDSYNC_SERVER_URL)")
    show.set_defaults(func=cmd_show)

    verify = sub.add_parser("verify", help="Round-trip a scratch board through the service")
    verify.add_argument("--url", help="Persistence service URL")
    verify.set_defaults(func=cmd_verify)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        cfg = Config.load(args.config)
    except ConfigError as e:
        print(f"Config error: {e}", file=sys.stderr)
        return 2
    _setup_logging(cfg.log_level)
    return args.func(cfg, args)


if __name__ == "__main__":
    sys.exit(main())
