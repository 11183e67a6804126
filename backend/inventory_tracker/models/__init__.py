from .auth import User
from .inventory import Item, AuditLogEntry

__all__ = [
    'User',
    'Item', 'AuditLogEntry',
]
