"""Credentials and session domain models"""

from dataclasses import dataclass, field
from typing import Literal


@dataclass(frozen=True)
class AccountCredentials:
    """Username/password login, resolved through the browser-less login flow"""

    username: str
    password: str = field(repr=False)
    type: Literal["account"] = field(default="account", init=False)


@dataclass(frozen=True)
class TokenCredentials:
    """Pre-issued access token, used as is"""

    token: str = field(repr=False)
    type: Literal["token"] = field(default="token", init=False)


Credentials = AccountCredentials | TokenCredentials


@dataclass(frozen=True)
class Session:
    """Resolved access token plus the caller's client identity"""

    access_token: str = field(repr=False)
    client_id: str
    client_key: str
    name: str | None = None
