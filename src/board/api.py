"""JSON routes exposing the storage gateway over HTTP."""

from flask import Blueprint, current_app, jsonify, request

from documents import normalize_document
from gateway import GatewayError

bp = Blueprint('api', __name__)


def _gateway():
    return current_app.config["BOARD_GATEWAY"]


@bp.route('/data', methods=['GET'])
@bp.route('/api/data', methods=['GET'])
def read_data():
    """Return the whole board document.

    Backends that cannot reach their store hand back the initial document;
    only an unreadable local file surfaces as a 500.
    """
    try:
        return jsonify(_gateway().read())
    except GatewayError as exc:
        print(f"Error reading data: {exc}")
        return jsonify({"error": "Failed to load data"}), 500


@bp.route('/data', methods=['POST'])
@bp.route('/api/data', methods=['POST'])
def save_data():
    """Replace the stored document with the request body."""
    payload = request.get_json(silent=True)
    try:
        doc = normalize_document(payload)
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400
    if not _gateway().write(doc):
        return jsonify({"error": "Failed to save data"}), 500
    return jsonify({"success": True})


@bp.route('/data', methods=['DELETE'])
@bp.route('/api/data', methods=['DELETE'])
def clear_data():
    """Reset the store to the initial document."""
    if not _gateway().reset():
        return jsonify({"error": "Failed to clear data"}), 500
    return jsonify({"success": True})


@bp.route('/data', methods=['PATCH'])
@bp.route('/api/data', methods=['PATCH'])
def rename_data_author():
    """Rewrite ``oldName`` to ``newName`` on every thread and comment."""
    payload = request.get_json(silent=True) or {}
    old_name = str(payload.get("oldName") or "").strip()
    new_name = str(payload.get("newName") or "").strip()
    if not old_name or not new_name:
        return jsonify({"error": "oldName and newName are required"}), 400
    try:
        updated = _gateway().rename_author(old_name, new_name)
    except GatewayError as exc:
        print(f"Error renaming author: {exc}")
        updated = None
    if updated is None:
        return jsonify({"error": "Failed to rename author"}), 500
    return jsonify({"success": True, "data": updated})
