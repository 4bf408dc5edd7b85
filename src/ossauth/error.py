"""
Exception classes for the ossauth SDK
"""


class OssException(Exception):
    """
    Base exception for all ossauth SDK errors.
    """

    def __init__(self, message: str, status_code: int = None, error_code: str = None):
        super().__init__(message)
        self.status_code = status_code
        self.error_code = error_code


class ConfigurationException(OssException):
    """Thrown when a credential, endpoint or bucket value is missing."""

    def __init__(self, message: str):
        super().__init__(message, error_code="InvalidConfiguration")


class EncodingException(OssException):
    """Thrown when a computed header or URL value cannot be put on the wire."""

    def __init__(self, name: str, value: str):
        super().__init__(
            f"Value for '{name}' contains characters not allowed in an HTTP header: {value!r}",
            error_code="InvalidEncoding"
        )
        self.name = name


class ReservedParameterException(OssException):
    """Thrown when a caller query parameter collides with a signing parameter."""

    def __init__(self, name: str):
        super().__init__(
            f"Query parameter '{name}' is reserved for URL signing.",
            error_code="ReservedParameter"
        )
        self.name = name


class ServerException(OssException):
    """Thrown when the server returns an error."""

    def __init__(self, message: str, status_code: int, error_code: str = None, body: str = ""):
        super().__init__(message, status_code, error_code)
        self.body = body


class ObjectNotFoundException(ServerException):
    """Thrown when an object is not found."""

    def __init__(self, bucket_name: str, object_name: str, body: str = ""):
        super().__init__(
            f"Object '{object_name}' not found in bucket '{bucket_name}'.",
            status_code=404,
            error_code="NoSuchKey",
            body=body,
        )


class AccessDeniedException(ServerException):
    """Thrown when access is denied."""

    def __init__(self, message: str, error_code: str = "AccessDenied", body: str = ""):
        super().__init__(
            message,
            status_code=403,
            error_code=error_code,
            body=body,
        )


class SignatureMismatchException(AccessDeniedException):
    """Thrown when the server recomputed a different signature."""

    def __init__(self, message: str, body: str = ""):
        super().__init__(message, error_code="SignatureDoesNotMatch", body=body)
