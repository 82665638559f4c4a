"""
boardsync persistence service
-----------------------------
JSON API over the SQLite BoardStore, serving the two collections the board
client writes to.

API:
    GET    /health
    GET    /<collection>/          → [entity, ...]
    POST   /<collection>/          → entity (201); 409 if the id exists
    GET    /<collection>/<id>      → entity; 404 if missing
    PATCH  /<collection>/<id>      → entity; 404 if missing
    DELETE /<collection>/<id>      → {}; 404 if missing

    collection ∈ {cards, columns}
    card   = {id, title, description, columnId}
    column = {id, title}

Run:
    boardsync serve --port 3000
"""
from flask import Flask, abort, jsonify, request

from .schema import EntityKind
from .store import BoardStore, DuplicateIdError

_COLLECTIONS = {kind.collection: kind for kind in EntityKind}


def _kind(collection: str) -> EntityKind:
    kind = _COLLECTIONS.get(collection)
    if kind is None:
        abort(404)
    return kind


def _body() -> dict:
    data = request.get_json(force=True, silent=True)
    if not isinstance(data, dict):
        abort(400, "JSON object body required")
    return data


def _require_title(data: dict) -> None:
    if not str(data.get("title") or "").strip():
        abort(400, "title is required")


def create_app(store: BoardStore) -> Flask:
    """Build the Flask app around a store."""
    app = Flask(__name__)
    app.config["STORE"] = store

    @app.errorhandler(400)
    @app.errorhandler(404)
    @app.errorhandler(409)
    def _json_error(error):
        return jsonify({"error": error.description}), error.code

    @app.route("/health")
    def health():
        return jsonify({"status": "ok", "db": store.db_path})

    @app.route("/<collection>/", methods=["GET"])
    def list_entities(collection):
        return jsonify(store.list_all(_kind(collection)))

    @app.route("/<collection>/", methods=["POST"])
    def create_entity(collection):
        kind = _kind(collection)
        data = _body()
        _require_title(data)
        try:
            entity = store.create(kind, data)
        except DuplicateIdError as e:
            abort(409, str(e))
        app.logger.info(f"Created {kind.label} {entity['id']}")
        return jsonify(entity), 201

    @app.route("/<collection>/<entity_id>", methods=["GET"])
    def get_entity(collection, entity_id):
        entity = store.get(_kind(collection), entity_id)
        if entity is None:
            abort(404, f"{collection} {entity_id} not found")
        return jsonify(entity)

    @app.route("/<collection>/<entity_id>", methods=["PATCH"])
    def update_entity(collection, entity_id):
        kind = _kind(collection)
        data = _body()
        if "title" in data:
            _require_title(data)
        entity = store.update(kind, entity_id, data)
        if entity is None:
            abort(404, f"{collection} {entity_id} not found")
        return jsonify(entity)

    @app.route("/<collection>/<entity_id>", methods=["DELETE"])
    def delete_entity(collection, entity_id):
        kind = _kind(collection)
        if not store.delete(kind, entity_id):
            abort(404, f"{collection} {entity_id} not found")
        app.logger.info(f"Deleted {kind.label} {entity_id}")
        return jsonify({})

    return app
