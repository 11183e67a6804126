# Overview: Item persistence contract and its SQLAlchemy implementation.

from __future__ import annotations

import logging
from dataclasses import dataclass, asdict
from typing import Protocol

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..errors import ItemAlreadyExistsError, StorageError
from ..models import Item, AuditLogEntry
from ..models.inventory import STATUS_CHECKED_IN


logger = logging.getLogger(__name__)


@dataclass
class ItemDetail:
    """Plain item record passed between the item service and its store."""

    id: str
    name: str
    category: str
    quantity: int
    picture_url: str = ""
    details: str = ""
    location: str = ""
    last_performed_by: int | None = None
    last_performed_by_username: str | None = None
    status: str = STATUS_CHECKED_IN

    def to_dict(self) -> dict:
        return asdict(self)


class ItemStore(Protocol):
    def exists(self, item_id: str) -> bool: ...

    def search(self, query: str) -> list[ItemDetail]: ...

    def insert(self, item: ItemDetail) -> None: ...

    def update(self, item: ItemDetail) -> None: ...

    def set_status(self, item_id: str, status: str, actor_id: int) -> None: ...

    def soft_delete(self, item_id: str, actor_id: int) -> int: ...

    def append_audit_log(self, actor_id: int, object_id: str, action: str, details: str = "") -> None: ...


def _to_detail(row: Item) -> ItemDetail:
    return ItemDetail(
        id=row.id,
        name=row.name,
        category=row.category,
        quantity=row.quantity,
        picture_url=row.picture_url or "",
        details=row.details or "",
        location=row.location or "",
        last_performed_by=row.last_performed_by,
        last_performed_by_username=row.performed_by.username if row.performed_by else None,
        status=row.status,
    )


class SqlItemStore:
    """
    Item store backed by the Flask-SQLAlchemy session.

    Every write commits on its own. A failed write is rolled back and
    re-raised as StorageError so callers never see driver exceptions.
    """

    def __init__(self, database):
        self.db = database

    @property
    def session(self):
        return self.db.session

    def _fail(self, action: str, exc: Exception) -> StorageError:
        self.session.rollback()
        logger.error("Item store failed to %s: %s", action, exc)
        return StorageError(f"failed to {action}")

    def exists(self, item_id: str) -> bool:
        try:
            count = self.session.query(Item).filter(
                Item.id == item_id,
                Item.deleted.is_(False),
            ).count()
        except SQLAlchemyError as exc:
            raise self._fail("check item existence", exc) from exc
        return count > 0

    def search(self, query: str) -> list[ItemDetail]:
        try:
            rows = self.session.query(Item).filter(
                Item.deleted.is_(False),
                or_(
                    Item.id == query,
                    Item.name.icontains(query, autoescape=True),
                    Item.category.icontains(query, autoescape=True),
                    Item.details.icontains(query, autoescape=True),
                    Item.location.icontains(query, autoescape=True),
                ),
            ).order_by(Item.name, Item.id).all()
        except SQLAlchemyError as exc:
            raise self._fail("search items", exc) from exc
        return [_to_detail(row) for row in rows]

    def insert(self, item: ItemDetail) -> None:
        """
        Insert a fresh item in the checked_in state.

        A tombstoned row with the same id is revived instead, since the
        primary key is still taken by it.
        """
        try:
            row = self.session.get(Item, item.id)
            if row is None:
                row = Item(id=item.id)
                self.session.add(row)
            elif not row.deleted:
                # Lost a race with a concurrent insert of the same id
                raise ItemAlreadyExistsError()

            self._copy_fields(row, item)
            row.status = STATUS_CHECKED_IN
            row.deleted = False
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            raise ItemAlreadyExistsError() from exc
        except SQLAlchemyError as exc:
            raise self._fail("insert item", exc) from exc

    def update(self, item: ItemDetail) -> None:
        try:
            row = self.session.query(Item).filter(
                Item.id == item.id,
                Item.deleted.is_(False),
            ).first()
            if row is None:
                return
            self._copy_fields(row, item)
            self.session.commit()
        except SQLAlchemyError as exc:
            raise self._fail("update item", exc) from exc

    def set_status(self, item_id: str, status: str, actor_id: int) -> None:
        try:
            self.session.query(Item).filter(
                Item.id == item_id,
                Item.deleted.is_(False),
            ).update(
                {Item.status: status, Item.last_performed_by: actor_id},
                synchronize_session=False,
            )
            self.session.commit()
        except SQLAlchemyError as exc:
            raise self._fail("update item status", exc) from exc

    def soft_delete(self, item_id: str, actor_id: int) -> int:
        try:
            affected = self.session.query(Item).filter(
                Item.id == item_id,
                Item.deleted.is_(False),
            ).update(
                {Item.deleted: True, Item.last_performed_by: actor_id},
                synchronize_session=False,
            )
            self.session.commit()
        except SQLAlchemyError as exc:
            raise self._fail("delete item", exc) from exc
        return affected

    def append_audit_log(self, actor_id: int, object_id: str, action: str, details: str = "") -> None:
        try:
            self.session.add(AuditLogEntry(
                user_id=actor_id,
                object_id=object_id,
                action=action,
                details=details,
            ))
            self.session.commit()
        except SQLAlchemyError as exc:
            raise self._fail("append audit log", exc) from exc

    @staticmethod
    def _copy_fields(row: Item, item: ItemDetail) -> None:
        row.name = item.name
        row.category = item.category
        row.picture_url = item.picture_url or ""
        row.details = item.details or ""
        row.location = item.location or ""
        row.quantity = item.quantity
        row.last_performed_by = item.last_performed_by
