# Overview: Wires stores and services together once per app.

from dataclasses import dataclass

from flask import current_app

from ..extensions import db
from ..stores import SqlIdentityStore, SqlItemStore
from .auth_service import AuthGate, DEFAULT_BCRYPT_ROUNDS
from .email_service import EmailSender, SmtpEmailSender
from .item_service import ItemService
from .upc_service import BarcodeClient
from .user_service import UserService


EXTENSION_KEY = "inventory_tracker"


@dataclass
class Services:
    auth: AuthGate
    items: ItemService
    users: UserService
    barcodes: BarcodeClient


def build_services(config, email_sender: EmailSender | None = None) -> Services:
    """Build the service graph around the shared database handle."""
    identity_store = SqlIdentityStore(db)
    item_store = SqlItemStore(db)

    return Services(
        auth=AuthGate(identity_store),
        items=ItemService(item_store),
        users=UserService(
            identity_store,
            email_sender or SmtpEmailSender.from_config(config),
            bcrypt_rounds=config.get("BCRYPT_ROUNDS", DEFAULT_BCRYPT_ROUNDS),
        ),
        barcodes=BarcodeClient.from_config(config),
    )


def init_services(app, email_sender: EmailSender | None = None) -> Services:
    services = build_services(app.config, email_sender=email_sender)
    app.extensions[EXTENSION_KEY] = services
    return services


def get_services() -> Services:
    return current_app.extensions[EXTENSION_KEY]
