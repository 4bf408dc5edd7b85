"""
OSS Signature V1 signer for the ossauth SDK
"""

import base64
import hashlib
import hmac
import logging
from email.utils import formatdate
from typing import Dict, Optional, Tuple

from ._url import normalize_key, percent_encode
from .error import EncodingException, ReservedParameterException
from .models import RequestBuilder

OSS_HEADER_PREFIX = "x-oss-"
SOURCE_IP_PARAMETER = "x-oss-ac-source-ip"
RESERVED_PARAMETERS = frozenset({"Expires", "OSSAccessKeyId", "Signature"})

logger = logging.getLogger(__name__)


def http_date(timestamp: int) -> str:
    """Format a Unix timestamp as an RFC 1123 GMT date."""
    return formatdate(timestamp, usegmt=True)


def _get_header(headers: Dict[str, str], name: str) -> Optional[str]:
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value
    return None


def canonicalized_resource(bucket: str, key: str) -> str:
    # An empty bucket yields "/" with no key; kept for compatibility.
    if bucket == "":
        return f"/{bucket}"
    return f"/{bucket}{normalize_key(key)}"


def canonicalized_oss_headers(headers: Dict[str, str]) -> str:
    """Render the x-oss-* headers as sorted ``name:value\\n`` lines."""
    canonical = {}
    for key, value in headers.items():
        name = key.lower()
        if name.startswith(OSS_HEADER_PREFIX):
            if name in canonical:
                raise ValueError(f"Header '{name}' is given more than once with different case.")
            canonical[name] = str(value).strip()
    return "".join(f"{k}:{canonical[k]}\n" for k in sorted(canonical))


def canonicalize(
    method: str,
    key: str,
    bucket: str,
    date: str,
    headers: Optional[Dict[str, str]] = None,
    content_type: Optional[str] = None,
    content_md5: Optional[str] = None,
) -> str:
    """
    Build the string to sign.

    ``date`` is the Date header value, or the Expires timestamp for a
    presigned URL. Query parameters are not part of the result.
    """
    headers = headers or {}
    if content_type is None:
        content_type = _get_header(headers, "Content-Type")
    if content_md5 is None:
        content_md5 = _get_header(headers, "Content-MD5")

    return "\n".join([
        method.upper(),
        content_md5 or "",
        content_type or "",
        date,
        canonicalized_oss_headers(headers) + canonicalized_resource(bucket, key),
    ])


def sign(secret_key: str, canonical_string: str) -> bytes:
    """Raw HMAC-SHA1 digest of ``canonical_string``."""
    return hmac.new(
        secret_key.encode("utf-8"),
        canonical_string.encode("utf-8"),
        hashlib.sha1
    ).digest()


def validate_header_value(name: str, value: str) -> str:
    try:
        value.encode("latin-1")
    except UnicodeEncodeError:
        raise EncodingException(name, value)
    if any(c in value for c in ("\r", "\n", "\0")):
        raise EncodingException(name, value)
    return value


def build_query_string(parameters: Dict[str, str]) -> str:
    """Sort raw parameters by name, then percent-encode and serialize them."""
    return "&".join(
        f"{percent_encode(k)}={percent_encode(v)}" for k, v in sorted(parameters.items())
    )


def public_parameters(parameters: Dict[str, str]) -> Dict[str, str]:
    """Caller parameters minus ``x-oss-ac-source-ip``."""
    return {
        k: str(v)
        for k, v in parameters.items()
        if k != SOURCE_IP_PARAMETER
    }


class OssSignatureV1Signer:
    """
    Signs requests using OSS Signature Version 1.
    Used for both authorization headers and presigned URLs.
    """

    def __init__(self, access_key: str, secret_key: str):
        self.access_key = access_key
        self.secret_key = secret_key

    def _signature(self, canonical_string: str) -> str:
        logger.debug("[OSS][Sign] canonical=%r", canonical_string)
        return base64.b64encode(sign(self.secret_key, canonical_string)).decode("ascii")

    def authorization(self, canonical_string: str) -> str:
        return f"OSS {self.access_key}:{self._signature(canonical_string)}"

    def sign_request(
        self,
        bucket: str,
        key: str,
        build: RequestBuilder,
        timestamp: int,
    ) -> Dict[str, str]:
        """
        Sign a request and return the headers to send with it.

        The Date header carries exactly the value that was signed.
        """
        date = http_date(timestamp)
        content_type = build.content_type or _get_header(build.headers, "Content-Type")

        canonical = canonicalize(
            build.method,
            key,
            bucket,
            date,
            headers=build.headers,
            content_type=content_type,
        )

        headers = {
            k: str(v) for k, v in build.headers.items()
            if k.lower() not in ("date", "authorization", "content-type")
        }
        headers["Date"] = date
        if content_type:
            headers["Content-Type"] = content_type
        headers["Authorization"] = self.authorization(canonical)

        for name, value in headers.items():
            validate_header_value(name, str(value))
        return headers

    def presigned_query(
        self,
        bucket: str,
        key: str,
        build: RequestBuilder,
        timestamp: int,
    ) -> Tuple[str, int]:
        """
        Sign a presigned URL and return ``(query_string, expiration)``.

        The expiration timestamp takes the place of the Date header in the
        string to sign.
        """
        if build.expire_seconds is None:
            raise ValueError("A presigned URL requires expire_seconds.")

        for name in build.parameters:
            if name in RESERVED_PARAMETERS:
                raise ReservedParameterException(name)

        expiration = int(timestamp) + int(build.expire_seconds)
        canonical = canonicalize(
            build.method,
            key,
            bucket,
            str(expiration),
            headers=build.headers,
            content_type=build.content_type,
        )

        query_params = public_parameters(build.parameters)
        query_params["Expires"] = str(expiration)
        query_params["OSSAccessKeyId"] = self.access_key
        query_params["Signature"] = self._signature(canonical)
        return build_query_string(query_params), expiration
