"""
Data models for the ossauth SDK
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Optional, Dict, Tuple

TRAFFIC_LIMIT_PARAMETER = "x-oss-traffic-limit"
MIN_TRAFFIC_LIMIT = 819200
MAX_TRAFFIC_LIMIT = 838860800


@dataclass(frozen=True)
class RequestBuilder:
    """
    Describes one operation to sign.

    Every ``with_*`` helper returns a new builder, so a base builder can be
    shared between calls and threads.

    Example:
        build = (
            RequestBuilder()
            .with_expire(600)
            .with_cdn("https://cdn.example.com")
            .with_response_content_disposition("attachment; filename=a.txt")
        )
    """
    method: str = "GET"
    expire_seconds: Optional[int] = None
    content_type: Optional[str] = None
    cdn_host: Optional[str] = None
    headers: Dict[str, str] = field(default_factory=dict)
    parameters: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "method", self.method.upper())
        if self.expire_seconds is not None and self.expire_seconds < 1:
            raise ValueError("Expiry must be at least 1 second.")

    def with_method(self, method: str) -> "RequestBuilder":
        return replace(self, method=method)

    def with_expire(self, expire_seconds: int) -> "RequestBuilder":
        return replace(self, expire_seconds=int(expire_seconds))

    def with_content_type(self, content_type: str) -> "RequestBuilder":
        return replace(self, content_type=content_type)

    def with_cdn(self, cdn_host: str) -> "RequestBuilder":
        """Serve the final URL from ``cdn_host`` instead of the bucket host."""
        return replace(self, cdn_host=cdn_host)

    def with_header(self, name: str, value) -> "RequestBuilder":
        return self.with_headers({name: value})

    def with_headers(self, headers: Dict[str, str]) -> "RequestBuilder":
        merged = dict(self.headers)
        merged.update({k: str(v) for k, v in headers.items()})
        return replace(self, headers=merged)

    def with_parameter(self, name: str, value) -> "RequestBuilder":
        return self.with_parameters({name: value})

    def with_parameters(self, parameters: Dict[str, str]) -> "RequestBuilder":
        merged = dict(self.parameters)
        merged.update({k: str(v) for k, v in parameters.items()})
        return replace(self, parameters=merged)

    def with_download_speed_limit(self, bits_per_second: int) -> "RequestBuilder":
        """Cap download bandwidth, in bit/s (100 KB/s to 100 MB/s)."""
        if bits_per_second < MIN_TRAFFIC_LIMIT or bits_per_second > MAX_TRAFFIC_LIMIT:
            raise ValueError(
                f"Speed limit must be between {MIN_TRAFFIC_LIMIT} and {MAX_TRAFFIC_LIMIT} bit/s."
            )
        return self.with_parameter(TRAFFIC_LIMIT_PARAMETER, bits_per_second)

    def with_response_content_type(self, value: str) -> "RequestBuilder":
        return self.with_parameter("response-content-type", value)

    def with_response_content_language(self, value: str) -> "RequestBuilder":
        return self.with_parameter("response-content-language", value)

    def with_response_expires(self, value: str) -> "RequestBuilder":
        return self.with_parameter("response-expires", value)

    def with_response_cache_control(self, value: str) -> "RequestBuilder":
        return self.with_parameter("response-cache-control", value)

    def with_response_content_disposition(self, value: str) -> "RequestBuilder":
        return self.with_parameter("response-content-disposition", value)

    def with_response_content_encoding(self, value: str) -> "RequestBuilder":
        return self.with_parameter("response-content-encoding", value)


@dataclass(frozen=True)
class SignedRequest:
    """URL and headers for an immediate authenticated request."""
    url: str
    headers: Dict[str, str]

    def __iter__(self):
        return iter((self.url, self.headers))

    def as_tuple(self) -> Tuple[str, Dict[str, str]]:
        return self.url, dict(self.headers)


@dataclass
class PresignedUrlResult:
    """Represents a presigned URL response."""
    url: str
    expires_at: datetime


@dataclass
class PutObjectResult:
    """Represents the result of a put object operation."""
    bucket_name: str
    object_name: str
    etag: Optional[str] = None
