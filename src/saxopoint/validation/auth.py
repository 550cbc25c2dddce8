"""Pydantic model for the OAuth token endpoint response"""

from pydantic import BaseModel, ConfigDict, Field


class TokenResponse(BaseModel):
    """Token endpoint response (snake_case on the wire)"""

    model_config = ConfigDict(extra="allow")

    access_token: str = Field(..., min_length=1, description="Bearer token")
    token_type: str | None = Field(None, description="Usually 'Bearer'")
    expires_in: int | None = Field(None, description="Lifetime in seconds")
    refresh_token: str | None = Field(
        None, description="Refresh token (unused, no renewal)"
    )
