"""SaxoRequestClient - authenticated HTTP requests against the gateway"""

import logging
from typing import Any

import httpx
from loguru import logger

from saxopoint.shared.exceptions import TransportError

from .normalizer import classify_error

_MASKED_HEADERS = ("authorization", "cookie", "set-cookie")
_MASKED_PARAMS = ("code",)


class _LoguruHandler(logging.Handler):
    """Bridge stdlib logging into loguru"""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        logger.opt(depth=6, exception=record.exc_info).log(
            level, record.getMessage()
        )


_logging_bridge_installed = False


def install_logging_bridge() -> None:
    """Route the httpx stdlib logger into loguru.

    Opt-in for applications that want httpx records in their loguru sinks;
    the library itself never calls it.
    """
    global _logging_bridge_installed
    if _logging_bridge_installed:
        return

    handler = _LoguruHandler()
    std_logger = logging.getLogger("httpx")
    std_logger.setLevel(logging.DEBUG)
    std_logger.addHandler(handler)
    std_logger.propagate = False

    _logging_bridge_installed = True


def _mask_url(url: str | httpx.URL | None) -> str | None:
    """Mask authorization codes carried in redirect URLs"""
    if url is None:
        return None
    try:
        parsed = httpx.URL(str(url))
    except httpx.InvalidURL:
        return str(url)
    for name in _MASKED_PARAMS:
        if name in parsed.params:
            parsed = parsed.copy_set_param(name, "***")
    return str(parsed)


async def _log_httpx_request(request: httpx.Request) -> None:
    """Log outbound httpx requests with headers (credentials masked)."""
    headers = {
        k: ("***" if k.lower() in _MASKED_HEADERS else v)
        for k, v in request.headers.items()
    }
    logger.debug(f"HTTPX request: {request.method} {request.url} {headers}")


async def _log_httpx_response(response: httpx.Response) -> None:
    """Log httpx responses including status and body."""
    await response.aread()
    location = _mask_url(response.headers.get("location"))
    # Token responses carry credentials
    if response.request.url.path.endswith("/token"):
        body = "***"
    else:
        body = response.text[:2000]
    url = _mask_url(response.url)
    logger.debug(
        f"HTTPX response: status={response.status_code} url={url} "
        f"location={location} body={body}"
    )


def build_http_client(
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create an AsyncClient with request/response logging hooks.

    No timeout and no redirect following: callers wrap calls externally
    when they need deadlines, and the login flow reads every redirect.
    """
    return httpx.AsyncClient(
        timeout=None,
        follow_redirects=False,
        transport=transport,
        event_hooks={
            "request": [_log_httpx_request],
            "response": [_log_httpx_response],
        },
    )


class SaxoRequestClient:
    """Low-level HTTP request client for the OpenAPI gateway

    Responsibilities:
    - Bearer-authenticated request execution
    - JSON parsing
    - Error classification (provider error payloads -> ApiError,
      anything else non-2xx -> TransportError)

    No retries: every call is one request/response exchange.
    """

    def __init__(
        self,
        api_endpoint: str,
        access_token: str,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize request client

        Args:
            api_endpoint: Gateway base URL (e.g. the simulation gateway)
            access_token: Bearer token of the session
            transport: Optional httpx transport (for testing)
        """
        self._api_endpoint = api_endpoint.rstrip("/")
        self._access_token = access_token
        self._http_client: httpx.AsyncClient = build_http_client(transport)

    @property
    def api_endpoint(self) -> str:
        return self._api_endpoint

    def set_http_client(self, client: httpx.AsyncClient) -> None:
        """Set the HTTP client (for testing or external management)"""
        self._http_client = client

    async def aclose(self) -> None:
        await self._http_client.aclose()

    async def request(
        self,
        method: str,
        endpoint: str,
        data: dict | None = None,
        params: dict | None = None,
    ) -> Any:
        """Make an authenticated request and return the parsed JSON body

        Args:
            method: HTTP method (GET, POST, PATCH, DELETE)
            endpoint: API path (e.g., "/port/v1/clients/me")
            data: JSON payload
            params: Query parameters

        Returns:
            Parsed JSON ({} for empty bodies)

        Raises:
            ApiError: If the body is a provider error payload
            TransportError: On network failure or unclassifiable non-2xx
        """
        url = f"{self._api_endpoint}{endpoint}"
        headers = {
            "Authorization": f"Bearer {self._access_token}",
            "Content-Type": "application/json",
        }

        logger.debug(f"{method.upper()} {url} params={params}")

        try:
            response = await self._http_client.request(
                method.upper(), url, headers=headers, json=data, params=params
            )
        except httpx.HTTPError as e:
            logger.error(f"Network error on {method.upper()} {endpoint}: {e}")
            raise TransportError(f"Request failed: {e}") from e

        body = self._parse_json(response)

        if response.is_success:
            if body is None:
                raise TransportError(
                    f"Response is not JSON: {response.status_code}",
                    status_code=response.status_code,
                    body=response.text,
                )
            return classify_error(body, response.status_code)

        logger.error(
            f"Client error {response.status_code} on {method.upper()} "
            f"{endpoint}: {response.text}"
        )
        classify_error(body, response.status_code)
        raise TransportError(
            self._format_error(response),
            status_code=response.status_code,
            body=response.text,
        )

    @staticmethod
    def _parse_json(response: httpx.Response) -> Any:
        """Return parsed JSON, {} for an empty body, None when not JSON"""
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            return None

    def _format_error(self, response: httpx.Response) -> str:
        """Return a safe string describing an HTTP error without assuming keys."""
        reason = response.reason_phrase or ""
        return f"API request failed: {response.status_code} {reason}".rstrip()
