"""Saxo OpenAPI infrastructure module

SaxoAuthManager - browser-less authorization-code login flow
SaxoRequestClient - bearer-authenticated requests with error classification
SaxoPortfolio - account, position, order and balance reads
SaxoOrders - order submission, reconciliation, modification and cancellation
Client / Account - facade over the above
"""

from .auth import SaxoAuthManager
from .facade import Account, Client, create_client
from .orders import SaxoOrders, validate_order
from .portfolio import SaxoPortfolio
from .requests import SaxoRequestClient, build_http_client, install_logging_bridge

__all__ = [
    "Account",
    "Client",
    "SaxoAuthManager",
    "SaxoOrders",
    "SaxoPortfolio",
    "SaxoRequestClient",
    "build_http_client",
    "create_client",
    "install_logging_bridge",
    "validate_order",
]
