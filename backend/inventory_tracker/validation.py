from __future__ import annotations

from typing import Any

from flask import request

from .errors import MissingParamError, ValidationError
from .stores.item_store import ItemDetail


ITEM_TEXT_FIELDS = ("id", "name", "category", "details", "location")


def required_arg(name: str) -> str:
    """Exactly one non-empty query parameter called name."""
    values = request.args.getlist(name)
    if len(values) != 1 or not values[0]:
        raise MissingParamError(name)
    return values[0]


def optional_arg(name: str) -> str:
    values = request.args.getlist(name)
    if len(values) != 1:
        return ""
    return values[0]


def json_body() -> dict:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValidationError("request body must be a JSON object")
    return payload


def body_str(payload: dict, key: str) -> str:
    """String field from a JSON body; missing or null is "", anything else non-string is rejected."""
    value = payload.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(f"{key} must be a string")
    return value


def _coerce_quantity(value: Any) -> int:
    # Reject bools and floats; accept plain integer strings
    if isinstance(value, bool):
        raise ValidationError("quantity must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        stripped = value.strip()
        if stripped.lstrip("-").isdigit():
            return int(stripped)
    if value is None:
        return 0
    raise ValidationError("quantity must be an integer")


def item_from_payload(payload: dict, actor_id: int | None) -> ItemDetail:
    """
    Build an ItemDetail from a JSON body.

    Accepts pictureURL as well as picture_url for the picture field.
    """
    fields = {}
    for key in ITEM_TEXT_FIELDS:
        value = payload.get(key, "")
        if value is None:
            value = ""
        if not isinstance(value, str):
            raise ValidationError(f"{key} must be a string")
        fields[key] = value.strip()

    picture_url = payload.get("picture_url", payload.get("pictureURL", "")) or ""
    if not isinstance(picture_url, str):
        raise ValidationError("picture_url must be a string")

    missing = [key for key in ("id", "name", "category") if not fields[key]]
    quantity = _coerce_quantity(payload.get("quantity"))
    if missing or quantity == 0:
        raise MissingParamError("ID, name, category, quantity must not be blank/0")

    return ItemDetail(
        id=fields["id"],
        name=fields["name"],
        category=fields["category"],
        quantity=quantity,
        picture_url=picture_url.strip(),
        details=fields["details"],
        location=fields["location"],
        last_performed_by=actor_id,
    )
