from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z

STATUS_CHECKED_IN = "checked_in"
STATUS_CHECKED_OUT = "checked_out"
VALID_STATUSES = {STATUS_CHECKED_IN, STATUS_CHECKED_OUT}

ITEM_ID_MAX_LENGTH = 64

ACTION_ADD = "add"
ACTION_DELETE = "delete"


class Item(db.Model):
    """
    An inventory item keyed by its external id (usually a barcode).

    status is a two-state machine (checked_in / checked_out). deleted is a
    tombstone next to it, not a third status: a deleted row is invisible to
    search and existence checks, and every mutation treats it as missing.
    """
    __tablename__ = "items"
    __table_args__ = (
        db.Index("ix_items_deleted_name", "deleted", "name"),
    )

    # Business key supplied by the caller, not a surrogate
    id = db.Column(db.String(ITEM_ID_MAX_LENGTH), primary_key=True)

    name = db.Column(db.String(255), nullable=False)
    category = db.Column(db.String(128), nullable=False)
    picture_url = db.Column(db.String(512), nullable=False, default="")
    details = db.Column(db.Text, nullable=False, default="")
    location = db.Column(db.String(255), nullable=False, default="")

    last_performed_by = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True, index=True)
    quantity = db.Column(db.Integer, nullable=False, default=1)

    status = db.Column(db.String(16), nullable=False, default=STATUS_CHECKED_IN)
    deleted = db.Column(db.Boolean, nullable=False, default=False)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    performed_by = db.relationship("User", foreign_keys=[last_performed_by])

    def __repr__(self) -> str:
        return f"<Item id={self.id!r} name={self.name!r} status={self.status} deleted={self.deleted}>"


class AuditLogEntry(db.Model):
    """
    Append-only record of every item mutation.

    action is "add", "delete", or the status an item moved into.

    IMMUTABLE: Never update or delete.
    """
    __tablename__ = "audit_logs"
    __table_args__ = (
        db.Index("ix_audit_logs_object_occurred", "object_id", "occurred_at"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    object_id = db.Column(db.String(ITEM_ID_MAX_LENGTH), nullable=False)
    action = db.Column(db.String(32), nullable=False)
    details = db.Column(db.Text, nullable=False, default="")

    occurred_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), index=True)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "object_id": self.object_id,
            "action": self.action,
            "details": self.details,
            "occurred_at": to_utc_z(self.occurred_at),
        }
