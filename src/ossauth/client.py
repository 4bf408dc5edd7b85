"""
OssClient - request signing and object access for OSS
"""

import logging
import time
import xml.etree.ElementTree as ET
from datetime import datetime, timezone
from typing import Callable, Dict, Optional, Tuple

import httpx

from ._http import HttpClient
from ._signer import OssSignatureV1Signer, build_query_string, public_parameters
from ._url import build_url, normalize_key
from .config import OssConfig
from .error import (
    AccessDeniedException,
    ObjectNotFoundException,
    ServerException,
    SignatureMismatchException,
)
from .models import PresignedUrlResult, PutObjectResult, RequestBuilder, SignedRequest


class OssClient:
    """
    Signs requests for one bucket and runs simple object operations.

    Example:
        client = OssClient(
            key_id="AK",
            key_secret="SK",
            endpoint="https://oss-cn-hangzhou.aliyuncs.com",
            bucket="photos",
        )

        url = client.sign_download_url(
            "archive/image.jpg",
            RequestBuilder().with_expire(600),
        )

        data = await client.get_object("/hello.txt")
    """

    def __init__(
        self,
        key_id: str,
        key_secret: str,
        endpoint: str,
        bucket: str,
        request_timeout: int = 30,
        clock: Callable[[], float] = time.time,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize OssClient.

        Args:
            key_id: Access key id
            key_secret: Access key secret, used only as the HMAC key
            endpoint: Region endpoint, optionally prefixed with http:// or https://
            bucket: Bucket every request is addressed to
            request_timeout: Request timeout in seconds
            clock: Returns the current Unix time; read once per signed request
            transport: Optional httpx transport, mainly for tests
        """
        self.config = OssConfig(key_id, key_secret, endpoint, bucket)
        self._clock = clock
        self._http = HttpClient(timeout=request_timeout, transport=transport)
        self._signer = OssSignatureV1Signer(key_id, key_secret)
        self._logger = logging.getLogger(__name__)

    @classmethod
    def from_config(cls, config: OssConfig, **kwargs) -> "OssClient":
        return cls(config.key_id, config.key_secret, config.endpoint, config.bucket, **kwargs)

    @classmethod
    def from_env(cls, **kwargs) -> "OssClient":
        """Build a client from OSS_KEY_ID, OSS_KEY_SECRET, OSS_ENDPOINT and OSS_BUCKET."""
        return cls.from_config(OssConfig.from_env(), **kwargs)

    @property
    def bucket(self) -> str:
        return self.config.bucket

    @property
    def endpoint(self) -> str:
        return self.config.endpoint

    def _now(self, timestamp: Optional[int]) -> int:
        if timestamp is None:
            return int(self._clock())
        return int(timestamp)

    # Signing

    def sign_for_header(
        self,
        key: str,
        build: Optional[RequestBuilder] = None,
        timestamp: Optional[int] = None,
    ) -> SignedRequest:
        """
        Sign an immediate request and return its URL and headers.

        A builder carrying ``expire_seconds`` describes a presigned URL; use
        ``sign_for_url`` for it.
        """
        build = build or RequestBuilder()
        if build.expire_seconds is not None:
            raise ValueError("expire_seconds selects a presigned URL; use sign_for_url.")
        key = normalize_key(key)
        now = self._now(timestamp)

        headers = self._signer.sign_request(self.bucket, key, build, now)
        query = build_query_string(public_parameters(build.parameters))
        url = build_url(self.endpoint, self.bucket, key, query, build.cdn_host)

        self._logger.debug(
            "[OSS][SignedRequest] method=%s url=%s headers=%s",
            build.method,
            url,
            sorted(headers),
        )
        return SignedRequest(url=url, headers=headers)

    def build_request(
        self,
        key: str,
        build: Optional[RequestBuilder] = None,
        timestamp: Optional[int] = None,
    ) -> Tuple[str, Dict[str, str]]:
        return self.sign_for_header(key, build, timestamp).as_tuple()

    def _presign(self, key: str, build: RequestBuilder, timestamp: Optional[int]) -> Tuple[str, int]:
        key = normalize_key(key)
        now = self._now(timestamp)

        query, expiration = self._signer.presigned_query(self.bucket, key, build, now)
        url = build_url(self.endpoint, self.bucket, key, query, build.cdn_host)

        self._logger.info(
            "[OSS][PresignedUrl] method=%s bucket=%s object=%s expires=%s cdn=%s",
            build.method,
            self.bucket,
            key,
            expiration,
            build.cdn_host or "",
        )
        return url, expiration

    def sign_for_url(
        self,
        key: str,
        build: RequestBuilder,
        timestamp: Optional[int] = None,
    ) -> str:
        """Sign a time-limited URL; ``build.expire_seconds`` is required."""
        url, _ = self._presign(key, build, timestamp)
        return url

    def sign_download_url(self, key: str, build: RequestBuilder) -> str:
        return self.sign_for_url(key, build.with_method("GET"))

    def sign_upload_url(self, key: str, build: RequestBuilder) -> str:
        return self.sign_for_url(key, build.with_method("PUT"))

    def presigned_get_object(
        self,
        key: str,
        expires_in_seconds: int = 3600,
        build: Optional[RequestBuilder] = None,
        timestamp: Optional[int] = None,
    ) -> PresignedUrlResult:
        """Generate a presigned GET URL along with its expiry time."""
        build = (build or RequestBuilder()).with_method("GET").with_expire(expires_in_seconds)
        url, expiration = self._presign(key, build, timestamp)
        return PresignedUrlResult(
            url=url,
            expires_at=datetime.fromtimestamp(expiration, timezone.utc),
        )

    # Object operations

    def _raise_for_status(self, response: httpx.Response, operation: str, key: str) -> None:
        if response.is_success:
            return

        body = response.text or ""
        error_code = _error_code(body)
        message = f"{operation} status: {response.status_code} error: {body}"
        self._logger.debug("[OSS][%s] status=%s code=%s", operation, response.status_code, error_code)

        if response.status_code == 404 and error_code in (None, "NoSuchKey"):
            raise ObjectNotFoundException(self.bucket, key, body=body)
        if response.status_code == 403:
            if error_code == "SignatureDoesNotMatch":
                raise SignatureMismatchException(message, body=body)
            raise AccessDeniedException(message, error_code=error_code or "AccessDenied", body=body)
        raise ServerException(message, response.status_code, error_code, body=body)

    async def get_object(self, key: str, build: Optional[RequestBuilder] = None) -> bytes:
        """Download an object."""
        key = normalize_key(key)
        url, headers = self.sign_for_header(key, (build or RequestBuilder()).with_method("GET"))
        response = await self._http.get(url, headers=headers)
        self._raise_for_status(response, "get object", key)
        return response.content

    async def put_object(
        self,
        key: str,
        data: bytes,
        build: Optional[RequestBuilder] = None,
    ) -> PutObjectResult:
        """Upload an object."""
        key = normalize_key(key)
        url, headers = self.sign_for_header(key, (build or RequestBuilder()).with_method("PUT"))
        response = await self._http.put(url, content=data, headers=headers)
        self._raise_for_status(response, "put object", key)
        etag = response.headers.get("ETag")
        return PutObjectResult(
            bucket_name=self.bucket,
            object_name=key,
            etag=etag.strip('"') if etag else None,
        )

    async def delete_object(self, key: str, build: Optional[RequestBuilder] = None) -> None:
        """Remove an object."""
        key = normalize_key(key)
        url, headers = self.sign_for_header(key, (build or RequestBuilder()).with_method("DELETE"))
        response = await self._http.delete(url, headers=headers)
        self._raise_for_status(response, "delete object", key)

    async def close(self) -> None:
        """Close the client and cleanup resources."""
        await self._http.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()


def _error_code(body: str) -> Optional[str]:
    """Pull ``<Code>`` out of an OSS XML error body."""
    if not body.strip():
        return None
    try:
        doc = ET.fromstring(body)
    except ET.ParseError:
        return None
    for node in doc.iter():
        if node.tag.split("}")[-1] == "Code" and node.text:
            return node.text.strip()
    return None
