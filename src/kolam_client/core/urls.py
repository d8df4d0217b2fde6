"""URL helpers for the remote service endpoints."""

from __future__ import annotations


def build_url(base_url: str, endpoint: str) -> str:
    """Join a base URL and an endpoint path with exactly one ``/`` between them.

    >>> build_url("https://host/", "/api/health")
    'https://host/api/health'
    >>> build_url("https://host", "api/health")
    'https://host/api/health'
    """
    return f"{base_url.rstrip('/')}/{endpoint.lstrip('/')}"
