"""Pydantic validation models for OpenAPI request/response shapes"""

from .auth import TokenResponse
from .orders import (
    AssetType,
    DurationType,
    OrderDuration,
    OrderOptions,
    OrderRequest,
    PreCheckResult,
)

__all__ = [
    "AssetType",
    "DurationType",
    "OrderDuration",
    "OrderOptions",
    "OrderRequest",
    "PreCheckResult",
    "TokenResponse",
]
