"""Configuration management for saxopoint"""

import os
from dataclasses import dataclass

from loguru import logger

from saxopoint.shared.exceptions import ConfigurationError

SIM_API_ENDPOINT = "https://gateway.saxobank.com/sim/openapi"
SIM_AUTH_ENDPOINT = "https://sim.logonvalidation.net"


@dataclass(frozen=True)
class AppConfig:
    """Application registration used to talk to the OpenAPI

    Each client owns its own config value; nothing is read from the
    environment unless from_env() is called explicitly.
    """

    # Fields without defaults (required parameters)
    app_key: str
    app_secret: str
    redirect_uri: str

    # Endpoints default to the simulation environment
    api_endpoint: str = SIM_API_ENDPOINT
    auth_endpoint: str = SIM_AUTH_ENDPOINT

    def __post_init__(self) -> None:
        # Endpoints are joined with absolute paths
        object.__setattr__(self, "api_endpoint", self.api_endpoint.rstrip("/"))
        object.__setattr__(
            self, "auth_endpoint", self.auth_endpoint.rstrip("/")
        )

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Load configuration from environment variables

        Returns:
            AppConfig instance with values from environment

        Raises:
            ConfigurationError: If required environment variables are missing
        """
        required_vars = {
            "SAXO_APP_KEY": os.getenv("SAXO_APP_KEY"),
            "SAXO_APP_SECRET": os.getenv("SAXO_APP_SECRET"),
            "SAXO_APP_REDIRECT_URI": os.getenv("SAXO_APP_REDIRECT_URI"),
        }
        missing = [k for k, v in required_vars.items() if not v]
        if missing:
            raise ConfigurationError(f"Missing configuration: {missing}")

        config = cls(
            app_key=required_vars["SAXO_APP_KEY"],  # type: ignore[arg-type]
            app_secret=required_vars["SAXO_APP_SECRET"],  # type: ignore[arg-type]
            redirect_uri=required_vars["SAXO_APP_REDIRECT_URI"],  # type: ignore[arg-type]
            api_endpoint=os.getenv("SAXO_API_ENDPOINT") or SIM_API_ENDPOINT,
            auth_endpoint=os.getenv("SAXO_AUTH_ENDPOINT") or SIM_AUTH_ENDPOINT,
        )

        logger.info("Configuration loaded:")
        logger.info(f"  App Key: {config.app_key}")
        logger.info("  App Secret: ***")
        logger.info(f"  Redirect URI: {config.redirect_uri}")
        logger.info(f"  API Endpoint: {config.api_endpoint}")
        logger.info(f"  Auth Endpoint: {config.auth_endpoint}")

        return config

    @property
    def is_simulation(self) -> bool:
        """True when both endpoints point at the simulation environment"""
        return (
            self.api_endpoint == SIM_API_ENDPOINT
            and self.auth_endpoint == SIM_AUTH_ENDPOINT
        )
