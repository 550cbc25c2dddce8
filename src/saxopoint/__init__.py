"""saxopoint - async client for the Saxo Bank OpenAPI

    >>> config = AppConfig.from_env()
    >>> async with await create_client(TokenCredentials(token), config) as client:
    ...     accounts = await client.get_accounts()
"""

from saxopoint.core.config import AppConfig
from saxopoint.domain.models import (
    AccountCredentials,
    Balance,
    ClosedPosition,
    Credentials,
    NetPosition,
    Order,
    OrderOutcome,
    Position,
    Session,
    TokenCredentials,
)
from saxopoint.infrastructure.brokers.saxo import Account, Client, create_client
from saxopoint.shared.exceptions import (
    ApiError,
    AuthenticationError,
    ConfigurationError,
    LoginFailed,
    NoAuthCode,
    OrderNotFound,
    SaxoError,
    SubmissionFailed,
    TokenExchangeFailed,
    TransportError,
    UnexpectedRedirect,
    ValidationError,
)
from saxopoint.validation import (
    OrderDuration,
    OrderOptions,
    OrderRequest,
    PreCheckResult,
)

__version__ = "0.1.0"

__all__ = [
    "Account",
    "AccountCredentials",
    "ApiError",
    "AppConfig",
    "AuthenticationError",
    "Balance",
    "Client",
    "ClosedPosition",
    "ConfigurationError",
    "Credentials",
    "LoginFailed",
    "NetPosition",
    "NoAuthCode",
    "Order",
    "OrderDuration",
    "OrderNotFound",
    "OrderOptions",
    "OrderOutcome",
    "OrderRequest",
    "Position",
    "PreCheckResult",
    "SaxoError",
    "Session",
    "SubmissionFailed",
    "TokenCredentials",
    "TokenExchangeFailed",
    "TransportError",
    "UnexpectedRedirect",
    "ValidationError",
    "create_client",
]
