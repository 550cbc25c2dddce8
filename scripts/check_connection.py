#!/usr/bin/env python3
"""Check the connection to the Saxo OpenAPI

This script checks the setup by:
1. Loading app registration from .env / environment
2. Resolving credentials (SAXO_ACCESS_TOKEN, or SAXO_USERNAME/SAXO_PASSWORD)
3. Fetching the client identity
4. Listing accounts with their balances

Requires python-dotenv (pip install -e ".[scripts]").

Usage:
    python scripts/check_connection.py
"""

import asyncio
import os
import sys
from datetime import datetime
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger

from saxopoint import (
    AccountCredentials,
    AppConfig,
    SaxoError,
    TokenCredentials,
    create_client,
)
from saxopoint.infrastructure.brokers.saxo import install_logging_bridge


class Colors:
    """ANSI color codes for terminal output"""

    GREEN = "\033[92m"
    RED = "\033[91m"
    YELLOW = "\033[93m"
    BLUE = "\033[94m"
    RESET = "\033[0m"


def print_status(success: bool, message: str) -> None:
    """Print status message with color"""
    if success:
        print(f"{Colors.GREEN}✓{Colors.RESET} {message}")
    else:
        print(f"{Colors.RED}✗{Colors.RESET} {message}")


def print_info(message: str) -> None:
    print(f"{Colors.BLUE}ℹ{Colors.RESET}  {message}")


def print_warn(message: str) -> None:
    print(f"{Colors.YELLOW}⚠{Colors.RESET}  {message}")


def resolve_credentials() -> AccountCredentials | TokenCredentials | None:
    token = os.getenv("SAXO_ACCESS_TOKEN")
    if token:
        return TokenCredentials(token)

    username = os.getenv("SAXO_USERNAME")
    password = os.getenv("SAXO_PASSWORD")
    if username and password:
        return AccountCredentials(username, password)

    return None


async def check_connection() -> bool:
    """Run the connection check

    Returns:
        True if connection successful, False otherwise
    """
    timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    print(f"\n{Colors.BLUE}=== OpenAPI Connection Check ==={Colors.RESET}")
    print(f"{Colors.BLUE}Timestamp: {timestamp}{Colors.RESET}\n")

    # 1. App registration
    try:
        config = AppConfig.from_env()
    except SaxoError as e:
        print_status(False, str(e))
        return False

    env_name = "SIMULATION" if config.is_simulation else "CUSTOM"
    print_status(True, f"App registration loaded ({env_name} endpoints)")

    # 2. Credentials
    credentials = resolve_credentials()
    if credentials is None:
        print_status(False, "No credentials configured")
        print_info("Set SAXO_ACCESS_TOKEN, or SAXO_USERNAME and SAXO_PASSWORD")
        return False

    print_status(True, f"Using {credentials.type} credentials")

    # 3. Client identity
    try:
        print_info("Connecting...")
        client = await create_client(credentials, config)
    except SaxoError as e:
        print_status(False, f"Failed to connect: {e}")
        return False

    async with client:
        print_status(True, f"Connected as {client.name} (client {client.id})")

        # 4. Accounts and balances
        try:
            accounts = await client.get_accounts()
        except SaxoError as e:
            print_status(False, f"Failed to list accounts: {e}")
            return False

        if not accounts:
            print_warn("No accounts found")

        for account in accounts:
            try:
                balance = await account.get_balance()
                print_status(
                    True,
                    f"Account {account.id}: {balance.total_value} {balance.currency}",
                )
            except SaxoError as e:
                print_warn(f"Account {account.id}: balance unavailable ({e})")

    print(f"\n{Colors.GREEN}=== Connection Check Passed ==={Colors.RESET}\n")
    return True


def main():
    """Main entry point"""
    env_path = Path(__file__).parent.parent / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    # Configure logger to be less verbose
    logger.remove()
    logger.add(
        sys.stderr,
        level="WARNING",
        format="<level>{level}</level>: {message}",
    )
    install_logging_bridge()

    try:
        success = asyncio.run(check_connection())
        sys.exit(0 if success else 1)
    except KeyboardInterrupt:
        print(f"\n{Colors.YELLOW}Check interrupted by user{Colors.RESET}")
        sys.exit(1)


if __name__ == "__main__":
    main()
