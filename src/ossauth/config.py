"""
Client configuration for the ossauth SDK
"""

import os
from dataclasses import dataclass, fields
from typing import Mapping, Optional

from .error import ConfigurationException

ENV_KEY_ID = "OSS_KEY_ID"
ENV_KEY_SECRET = "OSS_KEY_SECRET"
ENV_ENDPOINT = "OSS_ENDPOINT"
ENV_BUCKET = "OSS_BUCKET"


@dataclass(frozen=True)
class OssConfig:
    """Credential pair plus the endpoint context requests are signed for."""
    key_id: str
    key_secret: str
    endpoint: str
    bucket: str

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if not isinstance(value, str) or not value:
                raise ConfigurationException(f"Missing required OSS setting '{f.name}'.")

    def __repr__(self):
        return (
            f"OssConfig(key_id={self.key_id!r}, key_secret='***', "
            f"endpoint={self.endpoint!r}, bucket={self.bucket!r})"
        )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "OssConfig":
        """
        Load the configuration from environment variables.

        Reads OSS_KEY_ID, OSS_KEY_SECRET, OSS_ENDPOINT and OSS_BUCKET from
        ``environ`` (``os.environ`` when omitted).
        """
        if environ is None:
            environ = os.environ

        values = {}
        for name, var in (
            ("key_id", ENV_KEY_ID),
            ("key_secret", ENV_KEY_SECRET),
            ("endpoint", ENV_ENDPOINT),
            ("bucket", ENV_BUCKET),
        ):
            value = environ.get(var)
            if not value:
                raise ConfigurationException(f"{var} not found")
            values[name] = value
        return cls(**values)
