"""Shared boto3 client factory with caching."""

from __future__ import annotations

import threading
from typing import Any, Optional

import boto3

_CLIENT_CACHE: dict[tuple[str, Optional[str]], Any] = {}
_LOCK = threading.Lock()


def get_client(service: str, region_name: Optional[str] = None) -> Any:
    """Return a process-wide boto3 client for the given service."""
    cache_key = (service, region_name)
    with _LOCK:
        client = _CLIENT_CACHE.get(cache_key)
        if client is None:
            client = boto3.client(service, region_name=region_name)
            _CLIENT_CACHE[cache_key] = client
    return client


def clear_client_cache() -> None:
    """Clear cached boto3 clients (useful in tests)."""
    with _LOCK:
        _CLIENT_CACHE.clear()


def get_ssm_client(region_name: Optional[str] = None) -> Any:
    return get_client("ssm", region_name=region_name)


def get_cognito_idp_client(region_name: Optional[str] = None) -> Any:
    return get_client("cognito-idp", region_name=region_name)
