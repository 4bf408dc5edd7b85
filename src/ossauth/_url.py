"""
Object key and URL helpers for the ossauth SDK
"""

from typing import Optional, Tuple
from urllib.parse import quote


def percent_encode(value: str) -> str:
    """Percent-encode everything outside ``A-Za-z0-9-_.~``."""
    return quote(str(value), safe="")


def normalize_key(key: str) -> str:
    """Return ``key`` rooted at ``/``."""
    if key.startswith("/"):
        return key
    return f"/{key}"


def encode_key(key: str) -> str:
    """Percent-encode each path segment of ``key``, keeping ``/`` literal."""
    return "/".join(percent_encode(segment) for segment in key.split("/"))


def endpoint_scheme_and_host(endpoint: str) -> Tuple[str, str]:
    """Split a configured endpoint into ``(scheme, host)``."""
    if endpoint.startswith("https"):
        return "https", endpoint.replace("https://", "", 1)
    return "http", endpoint.replace("http://", "", 1)


def build_url(
    endpoint: str,
    bucket: str,
    key: str,
    query: str = "",
    cdn_host: Optional[str] = None,
) -> str:
    """
    Build the final request URL for ``key``.

    A CDN host replaces the virtual-hosted ``{bucket}.{endpoint}`` host
    entirely, scheme included.
    """
    path = encode_key(normalize_key(key))
    if cdn_host:
        url = f"{cdn_host}{path}"
    else:
        scheme, host = endpoint_scheme_and_host(endpoint)
        url = f"{scheme}://{bucket}.{host}{path}"
    if query:
        url = f"{url}?{query}"
    return url
