"""Data-access layer."""
from marketplace.stores.base import MarketplaceStore, DeliveryLane
from marketplace.stores.sql_store import SqlAlchemyStore


def get_store():
    """Store bound to the current request's scoped session."""
    from marketplace.database import get_session
    return SqlAlchemyStore(get_session())


__all__ = ['MarketplaceStore', 'DeliveryLane', 'SqlAlchemyStore', 'get_store']
