"""Infrastructure brokers module."""

from .protocols import ApiRequester, OrderManager, PortfolioReader
from .saxo import Client, SaxoAuthManager, SaxoRequestClient, create_client

__all__ = [
    "ApiRequester",
    "Client",
    "OrderManager",
    "PortfolioReader",
    "SaxoAuthManager",
    "SaxoRequestClient",
    "create_client",
]
