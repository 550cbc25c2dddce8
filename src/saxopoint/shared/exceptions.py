"""Consolidated exceptions for saxopoint.

All custom exceptions are defined here to provide a single source of truth
for error handling across the client.
"""

from typing import Any


class SaxoError(Exception):
    """Base exception for saxopoint errors"""

    pass


class AuthenticationError(SaxoError):
    """Raised when any step of the login flow fails"""

    pass


class UnexpectedRedirect(AuthenticationError):
    """Authorize endpoint did not redirect to the provider login page"""

    pass


class LoginFailed(AuthenticationError):
    """Credential submission did not produce a redirect"""

    pass


class NoAuthCode(AuthenticationError):
    """Post-login redirect carried no authorization code"""

    pass


class TokenExchangeFailed(AuthenticationError):
    """Token endpoint rejected the authorization code"""

    pass


class ValidationError(SaxoError):
    """Raised when order parameters are malformed (no request is sent)"""

    pass


class ApiError(SaxoError):
    """Raised when the provider answers with a classified error payload

    Attributes:
        code: Provider error code (e.g. "InvalidModelState")
        message: Provider error message
        model_state: Per-field validation details, when the provider sent them
        status_code: HTTP status of the response, when known
    """

    def __init__(
        self,
        code: str,
        message: str,
        model_state: dict[str, Any] | None = None,
        status_code: int | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.model_state = model_state
        self.status_code = status_code
        text = f"API request failed with error {code}: {message}"
        if model_state:
            text = f"{text} {model_state}"
        super().__init__(text)


class SubmissionFailed(ApiError):
    """Order creation response carried no order identifier"""

    def __init__(self, message: str, response: Any = None) -> None:
        super().__init__("SubmissionFailed", message)
        self.response = response


class OrderNotFound(SaxoError):
    """Raised when a modify/cancel target is not among the current orders"""

    def __init__(self, order_id: str) -> None:
        self.order_id = order_id
        super().__init__(f"Order {order_id} not found")


class TransportError(SaxoError):
    """Raised on non-2xx responses without a classifiable error payload"""

    def __init__(
        self, message: str, status_code: int | None = None, body: str = ""
    ) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class ConfigurationError(SaxoError):
    """Raised when configuration is invalid or missing"""

    pass
