"""SaxoAuthManager - browser-less authorization-code login flow"""

import base64
import secrets
import time

import httpx
from loguru import logger

from saxopoint.core.config import AppConfig
from saxopoint.shared.exceptions import (
    AuthenticationError,
    LoginFailed,
    NoAuthCode,
    TokenExchangeFailed,
    UnexpectedRedirect,
)
from saxopoint.validation.auth import TokenResponse

from .requests import build_http_client


class SaxoAuthManager:
    """Runs the OAuth authorization-code flow by emulating a browser login

    Responsibilities:
    - Authorize request and login page redirect check
    - Credential form submission
    - Authorization code extraction from the post-login redirect
    - Code-for-token exchange

    Every step depends on headers of the previous response, so the steps
    run strictly in order. Nothing is retried and no state survives a
    failed attempt.
    """

    LOGIN_DOMAIN = "saxobank.com"
    ACCEPT_HTML = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"

    def __init__(
        self,
        config: AppConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize auth manager

        Args:
            config: App registration (key, secret, redirect URI, endpoints)
            transport: Optional httpx transport (for testing)
        """
        self._config = config
        self._transport = transport

    @property
    def config(self) -> AppConfig:
        return self._config

    @classmethod
    def is_login_domain(cls, url: str) -> bool:
        """True for https URLs whose host is the login domain or a subdomain"""
        try:
            parsed = httpx.URL(url)
        except httpx.InvalidURL:
            return False
        host = parsed.host
        return parsed.scheme == "https" and (
            host == cls.LOGIN_DOMAIN or host.endswith(f".{cls.LOGIN_DOMAIN}")
        )

    @staticmethod
    def generate_state() -> str:
        """Opaque correlation value sent with the authorize request.

        The provider's echo of this value is not checked.
        """
        return secrets.token_urlsafe(16)

    def basic_credentials(self) -> str:
        """HTTP Basic credentials for the token endpoint"""
        raw = f"{self._config.app_key}:{self._config.app_secret}"
        return base64.b64encode(raw.encode("utf-8")).decode("ascii")

    async def authenticate(self, username: str, password: str) -> TokenResponse:
        """Exchange username/password for an access token

        Steps:
        1. GET /authorize - expect a redirect to the login page
        2. POST credentials to the login page
        3. GET the post-login redirect with the login cookie
        4. Read the authorization code from the final redirect
        5. POST /token - exchange the code for an access token

        Args:
            username: Login user id
            password: Login password

        Returns:
            Parsed token response

        Raises:
            UnexpectedRedirect: If /authorize does not redirect to the login page
            LoginFailed: If the credential submission is not redirected
            NoAuthCode: If the final redirect carries no code
            TokenExchangeFailed: If the token endpoint rejects the code
            AuthenticationError: On network failure during any step
        """
        logger.info("Authenticating via authorization-code login flow...")

        async with build_http_client(self._transport) as http_client:
            try:
                login_url = await self._request_login_page(http_client)
                post_login_url, cookie = await self._submit_credentials(
                    http_client, login_url, username, password
                )
                code = await self._follow_post_login(
                    http_client, post_login_url, cookie
                )
                token = await self._exchange_code(http_client, code)
            except httpx.HTTPError as e:
                raise AuthenticationError(f"Login flow failed: {e}") from e

        logger.info(
            f"Access token obtained (type={token.token_type}, "
            f"expires_in={token.expires_in}s)"
        )
        return token

    async def _request_login_page(self, http_client: httpx.AsyncClient) -> str:
        params = {
            "response_type": "code",
            "client_id": self._config.app_key,
            "state": self.generate_state(),
            "redirect_uri": self._config.redirect_uri,
        }
        response = await http_client.get(
            f"{self._config.auth_endpoint}/authorize", params=params
        )

        login_url = response.headers.get("location")
        if not login_url or not self.is_login_domain(login_url):
            logger.error(
                f"Unexpected authorize response {response.status_code}: "
                f"location={login_url}"
            )
            raise UnexpectedRedirect(
                f"Unexpected redirect during authentication: {login_url!r}"
            )

        logger.info("Login page located")
        return login_url

    async def _submit_credentials(
        self,
        http_client: httpx.AsyncClient,
        login_url: str,
        username: str,
        password: str,
    ) -> tuple[str, str]:
        form = {
            "PageLoadInfo": "0|0",
            "LoginSubmitTime": str(int(time.time() * 1000)),
            "field_userid": username,
            "field_password": password,
            "Platform": "MacIntel",
            "IsMobile": "0",
            "Locality": "en-GB",
            "field_isSrp": "false",
        }
        response = await http_client.post(
            login_url, data=form, headers={"Accept": self.ACCEPT_HTML}
        )

        post_login_url = response.headers.get("location")
        if not post_login_url:
            logger.error(f"Login rejected ({response.status_code})")
            raise LoginFailed("Login failed, no redirect received")

        logger.info("Credentials accepted")
        return post_login_url, response.headers.get("set-cookie", "")

    async def _follow_post_login(
        self, http_client: httpx.AsyncClient, post_login_url: str, cookie: str
    ) -> str:
        response = await http_client.get(
            post_login_url, headers={"Cookie": cookie}
        )

        final_url = response.headers.get("location")
        code = httpx.URL(final_url).params.get("code") if final_url else None
        if not code:
            logger.error(
                f"No authorization code in redirect ({response.status_code})"
            )
            raise NoAuthCode("Failed to retrieve authorization code")

        logger.info("Authorization code received")
        return code

    async def _exchange_code(
        self, http_client: httpx.AsyncClient, code: str
    ) -> TokenResponse:
        response = await http_client.post(
            f"{self._config.auth_endpoint}/token",
            headers={"Authorization": f"Basic {self.basic_credentials()}"},
            data={
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": self._config.redirect_uri,
            },
        )

        if not response.is_success:
            raise TokenExchangeFailed(
                f"Failed to fetch token: {response.status_code} "
                f"{response.reason_phrase}"
            )

        try:
            return TokenResponse.model_validate(response.json())
        except ValueError as e:
            raise TokenExchangeFailed(f"Invalid token response: {e}") from e
