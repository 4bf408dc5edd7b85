"""
ossauth - OSS request signing and presigned URL SDK
"""

__version__ = "1.0.0"

from .client import OssClient
from .config import OssConfig
from .models import (
    RequestBuilder,
    SignedRequest,
    PresignedUrlResult,
    PutObjectResult,
)
from .error import (
    OssException,
    ConfigurationException,
    EncodingException,
    ReservedParameterException,
    ServerException,
    ObjectNotFoundException,
    AccessDeniedException,
    SignatureMismatchException,
)
from .logging_config import enable_debug_logging

__all__ = [
    "OssClient",
    "OssConfig",
    "RequestBuilder",
    "SignedRequest",
    "PresignedUrlResult",
    "PutObjectResult",
    "OssException",
    "ConfigurationException",
    "EncodingException",
    "ReservedParameterException",
    "ServerException",
    "ObjectNotFoundException",
    "AccessDeniedException",
    "SignatureMismatchException",
    "enable_debug_logging",
]
