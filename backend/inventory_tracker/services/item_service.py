# Overview: Service-layer operations for items; existence rules, status transitions and audit entries.

"""
Item lifecycle rules.

State machine:
- Two states, checked_in and checked_out. New items start checked_in.
- Moving an item into the state it is already in is legal. It rewrites the
  same status and writes another audit entry.
- deleted is a tombstone next to the state machine. A deleted item is
  invisible to search and exists(), and every mutation reports it as not
  found.

Existence rules:
- add() always checks existence before writing.
- overwrite=False on an existing id -> ItemAlreadyExistsError.
- overwrite=True on a missing id -> ItemNotFoundError.
- The check and the write are two separate store calls. A concurrent insert
  of the same id that wins the race surfaces from the store as
  ItemAlreadyExistsError.

Audit:
- Every successful mutation appends one audit entry.
- Audit writes are best-effort: a failure is logged and swallowed, because
  the primary write has already been committed.
"""

import logging

from ..errors import (
    ItemAlreadyExistsError,
    ItemNotFoundError,
    ValidationError,
)
from ..models.inventory import (
    ACTION_ADD,
    ACTION_DELETE,
    ITEM_ID_MAX_LENGTH,
    STATUS_CHECKED_IN,
    STATUS_CHECKED_OUT,
)
from ..stores.item_store import ItemDetail, ItemStore


logger = logging.getLogger(__name__)

DIRECTION_STATUSES = {
    "in": STATUS_CHECKED_IN,
    "out": STATUS_CHECKED_OUT,
}


def validate_item(item: ItemDetail) -> None:
    """Reject items missing an id, name, category or a non-zero quantity."""
    for field_name in ("id", "name", "category"):
        value = getattr(item, field_name)
        if not isinstance(value, str) or not value.strip():
            raise ValidationError(f"{field_name} must not be blank")

    if len(item.id) > ITEM_ID_MAX_LENGTH:
        raise ValidationError(f"id must be at most {ITEM_ID_MAX_LENGTH} characters")

    quantity = item.quantity
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ValidationError("quantity must be an integer")
    if quantity == 0:
        raise ValidationError("quantity must not be 0")


class ItemService:
    def __init__(self, item_store: ItemStore):
        self.item_store = item_store

    def search(self, query: str) -> list[ItemDetail]:
        """Items matching query by exact id or by name/category/details/location. No match returns []."""
        if not query or not query.strip():
            raise ValidationError("search query must not be blank")
        return self.item_store.search(query.strip())

    def exists(self, item_id: str) -> bool:
        return self.item_store.exists(item_id)

    def add(self, item: ItemDetail, overwrite: bool = False) -> None:
        """
        Create an item, or overwrite every editable field of an existing one.

        Fresh inserts always start checked_in; overwrites keep the current
        status. The audit entry is attributed to item.last_performed_by and
        skipped when that is unknown.
        """
        validate_item(item)

        exists = self.item_store.exists(item.id)
        if exists and not overwrite:
            raise ItemAlreadyExistsError(f"item {item.id} already exists")
        if not exists and overwrite:
            raise ItemNotFoundError(f"item {item.id} not found")

        if overwrite:
            self.item_store.update(item)
        else:
            item.status = STATUS_CHECKED_IN
            self.item_store.insert(item)

        if item.last_performed_by is not None:
            self._audit(
                item.last_performed_by,
                item.id,
                ACTION_ADD,
                f"overwrite/skip exist check flag was received as {str(overwrite).lower()}",
            )

    def move(self, item_id: str, direction: str, actor_id: int) -> str:
        """
        Check an item in ("in") or out ("out") and return the resulting status.

        Unknown directions are rejected before the store is touched.
        """
        status = DIRECTION_STATUSES.get(direction)
        if status is None:
            raise ValidationError(f"invalid direction {direction!r}, expected 'in' or 'out'")
        if not item_id:
            raise ValidationError("id must not be blank")

        if not self.item_store.exists(item_id):
            raise ItemNotFoundError(f"item {item_id} not found")

        self.item_store.set_status(item_id, status, actor_id)
        self._audit(actor_id, item_id, status)
        return status

    def delete(self, item_id: str, actor_id: int) -> None:
        if not item_id:
            raise ValidationError("id must not be blank")

        affected = self.item_store.soft_delete(item_id, actor_id)
        if affected <= 0:
            raise ItemNotFoundError(f"item {item_id} not found")

        self._audit(actor_id, item_id, ACTION_DELETE)

    def _audit(self, actor_id: int, object_id: str, action: str, details: str = "") -> None:
        try:
            self.item_store.append_audit_log(actor_id, object_id, action, details)
        except Exception:
            logger.exception(
                "Failed to write audit entry action=%s object_id=%s user_id=%s",
                action, object_id, actor_id,
            )
