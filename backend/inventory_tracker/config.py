# backend/inventory_tracker/config.py
from __future__ import annotations
import os


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB stored in backend/instance/inventory.sqlite3
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///inventory.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Barcode lookup service
    UPC_URL = os.environ.get("UPC_URL", "")
    UPC_TOKEN = os.environ.get("UPC_TOKEN", "")
    UPC_TIMEOUT_SECONDS = float(os.environ.get("UPC_TIMEOUT_SECONDS", "10"))

    # Outbound email; an empty server leaves email unconfigured
    EMAIL_SMTP_SERV = os.environ.get("EMAIL_SMTP_SERV", "")
    EMAIL_SMTP_PORT = int(os.environ.get("EMAIL_SMTP_PORT", "587"))
    EMAIL_USERNAME = os.environ.get("EMAIL_USERNAME", "")
    EMAIL_PASSWORD = os.environ.get("EMAIL_PASSWORD", "")
    EMAIL_FROM_ADDR = os.environ.get("EMAIL_FROM_ADDR", "")

    # Static frontend directory served at "/"
    FRONTEND_PATH = os.environ.get("FRONTEND_PATH", "")

    TOKEN_COOKIE_DAYS = int(os.environ.get("TOKEN_COOKIE_DAYS", "31"))

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    BCRYPT_ROUNDS = int(os.environ.get("BCRYPT_ROUNDS", "12"))
