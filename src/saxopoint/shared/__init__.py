"""Shared exceptions for the OpenAPI client."""
