# Overview: Flask API routes for item operations; parses input and returns JSON responses.

# backend/inventory_tracker/routes/items.py
"""
Item routes.

SECURITY: All routes require authentication (@require_auth). The acting
user is taken from g.current_user and recorded as last_performed_by.

Typed errors raised by the item service (not found, already exists,
validation) are rendered by the app-level error handler.
"""
from flask import Blueprint, g, jsonify, current_app

from ..services import get_services
from ..validation import required_arg, optional_arg, json_body, item_from_payload
from ..errors import MissingParamError
from ..decorators import require_auth


items_bp = Blueprint("items", __name__, url_prefix="/api/item")


@items_bp.get("/info")
@require_auth
def search_items_route():
    """
    Search items by id, name, category, details or location.

    Query params:
    - q: str (required)
    """
    query = required_arg("q")
    items = get_services().items.search(query)
    return jsonify([item.to_dict() for item in items])


@items_bp.post("")
@require_auth
def add_item_route():
    """
    Add an item, or overwrite an existing one with ?overwrite=1.

    Request body:
    - id, name, category: str (required)
    - quantity: int (required, non-zero)
    - details, location, picture_url (or pictureURL): str (optional)
    """
    payload = json_body()
    overwrite = optional_arg("overwrite") == "1"
    item = item_from_payload(payload, actor_id=g.current_user.id)

    get_services().items.add(item, overwrite=overwrite)
    current_app.logger.info(
        "User %s added item %s (overwrite=%s)", g.current_user.id, item.id, overwrite
    )
    return jsonify({"success": True})


@items_bp.post("/move")
@require_auth
def move_item_route():
    """
    Check an item in or out.

    Request body:
    - id: str (required)
    - direction: "in" | "out" (required)
    """
    payload = json_body()
    item_id = payload.get("id")
    direction = payload.get("direction")
    if not item_id or not direction:
        raise MissingParamError("missing id or direction in the body")

    status = get_services().items.move(str(item_id), str(direction), g.current_user.id)
    current_app.logger.info("User %s moved item %s to %s", g.current_user.id, item_id, status)
    return jsonify({"success": True})


@items_bp.delete("")
@require_auth
def delete_item_route():
    """
    Soft-delete an item.

    Query params:
    - id: str (required)
    """
    item_id = required_arg("id")
    get_services().items.delete(item_id, g.current_user.id)
    current_app.logger.info("User %s deleted item %s", g.current_user.id, item_id)
    return jsonify({"success": True})
