# Overview: Error taxonomy shared by services and routes, plus the JSON error envelope.

"""
Typed errors for the inventory backend.

Every error a service raises on purpose is an InventoryError. Each one knows
the HTTP status and the numeric error code it maps to, so the boundary only
needs one handler to render it as {"code": int, "details": str}.

Codes:
- 1000 internal error (storage, email, barcode lookup)
- 1001 unauthorized
- 1002 missing or invalid parameter
- 1003 policy violation (system account)
- 1100 item not found
- 1101 item already exists
- 1200 user not found
- 1201 user already exists
"""

from flask import jsonify, current_app
from sqlalchemy.exc import SQLAlchemyError


class InventoryError(Exception):
    """Base class for errors that are safe to show to the caller."""

    status_code = 500
    error_code = 1000
    default_message = "an internal server error was encountered"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)

    def to_dict(self) -> dict:
        return {"code": self.error_code, "details": self.message}


class ValidationError(InventoryError):
    """400-level input problem."""

    status_code = 400
    error_code = 1002
    default_message = "invalid request"


class MissingParamError(ValidationError):
    def __init__(self, param: str):
        super().__init__(f"Missing param - {param}")
        self.param = param


class UnauthorizedError(InventoryError):
    status_code = 401
    error_code = 1001
    default_message = "user is not authorized to make this request"


class SystemAccountError(InventoryError):
    """The reserved system account (id 0) can never be deleted or reset."""

    status_code = 400
    error_code = 1003
    default_message = "the system account cannot be modified"


class NotFoundError(InventoryError):
    status_code = 404


class ItemNotFoundError(NotFoundError):
    error_code = 1100
    default_message = "item not found"


class UserNotFoundError(NotFoundError):
    error_code = 1200
    default_message = "username not found or already deleted"


class ConflictError(InventoryError):
    """409-level business rule conflict (e.g., duplicate item id)."""

    status_code = 409


class ItemAlreadyExistsError(ConflictError):
    error_code = 1101
    default_message = "item already exists"


class UserAlreadyExistsError(ConflictError):
    error_code = 1201
    default_message = "username already exists"


class InternalError(InventoryError):
    """A collaborator (database, email, barcode service) failed."""


class StorageError(InternalError):
    default_message = "a database error was encountered"


class EmailNotConfiguredError(InternalError):
    default_message = (
        "your admin did not set up email properly. "
        "Please contact them to reset your password for you"
    )


class EmailDeliveryError(InternalError):
    default_message = "failed sending email"


class BarcodeLookupError(InternalError):
    default_message = "barcode lookup failed"


def error_response(err: InventoryError):
    return jsonify(err.to_dict()), err.status_code


def register_error_handlers(app):
    """Render typed errors and unexpected failures as the JSON envelope."""

    @app.errorhandler(InventoryError)
    def handle_inventory_error(err):
        if err.status_code >= 500:
            current_app.logger.error("Request failed: %s", err)
        return error_response(err)

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(err):
        current_app.logger.exception("Unhandled database error")
        return error_response(StorageError())

    @app.errorhandler(404)
    def handle_not_found(err):
        return jsonify({"code": 404, "details": "resource not found"}), 404

    @app.errorhandler(405)
    def handle_method_not_allowed(err):
        return jsonify({"code": 405, "details": "method not allowed"}), 405

    @app.errorhandler(500)
    def handle_internal(err):
        current_app.logger.error("Internal server error: %s", getattr(err, "original_exception", err))
        return error_response(InternalError())
