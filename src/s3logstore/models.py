"""Shared data models for the log store."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ErrorKind(str, Enum):
    """Classification of log store failures."""

    CONFIGURATION = "configuration"
    PROVISIONING = "provisioning"
    NOT_FOUND = "not_found"
    TRANSPORT = "transport"
    CANCELED = "canceled"


class S3Connection(BaseModel):
    """Connection parameters parsed from a log store URL."""

    model_config = ConfigDict(frozen=True)

    endpoint: str  # host[:port]
    access_key_id: str = ""
    secret_access_key: str = Field(default="", repr=False)
    use_ssl: bool = False
    location: str = Field(min_length=1)
    bucket_name: str = Field(min_length=1)

    @property
    def endpoint_url(self) -> str:
        scheme = "https" if self.use_ssl else "http"
        return f"{scheme}://{self.endpoint}"
