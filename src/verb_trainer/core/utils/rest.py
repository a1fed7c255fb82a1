"""Helpers shared by the PostgREST-backed catalog source and attempt store."""

from __future__ import annotations

from typing import Dict, Optional


def postgrest_headers(api_key: Optional[str], **extra: str) -> Dict[str, str]:
    """
    Standard request headers for a PostgREST (Supabase) endpoint.

    Example:
        >>> postgrest_headers("k")["Authorization"]
        'Bearer k'
    """
    headers = {
        "Accept": "application/json",
        "Content-Type": "application/json",
    }
    if api_key:
        headers["apikey"] = api_key
        headers["Authorization"] = f"Bearer {api_key}"
    headers.update(extra)
    return headers


def table_url(base_url: str, table: str) -> str:
    """Join a PostgREST root (".../rest/v1") and a table name."""
    return f"{base_url.rstrip('/')}/{table}"
