from .identity_store import Identity, IdentityStore, SqlIdentityStore
from .item_store import ItemDetail, ItemStore, SqlItemStore

__all__ = [
    'Identity', 'IdentityStore', 'SqlIdentityStore',
    'ItemDetail', 'ItemStore', 'SqlItemStore',
]
