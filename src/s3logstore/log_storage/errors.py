"""Log store exceptions, each tagged with an ErrorKind."""

from __future__ import annotations

from s3logstore.models import ErrorKind


class LogStoreError(Exception):
    """Base class for log store failures."""

    kind: ErrorKind = ErrorKind.TRANSPORT

    @property
    def retryable(self) -> bool:
        """True for transient transport failures; not-found and config errors are permanent."""
        return self.kind is ErrorKind.TRANSPORT


class LogStoreConfigError(LogStoreError, ValueError):
    """Malformed store URL or parameters rejected by the S3 client."""

    kind = ErrorKind.CONFIGURATION


class LogStoreProvisioningError(LogStoreError):
    """Bucket could not be created and is not usable."""

    kind = ErrorKind.PROVISIONING


class LogNotFoundError(LogStoreError):
    """No log stored for the requested app and call."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, app_name: str, call_id: str) -> None:
        super().__init__(f"log not found: app={app_name!r} call={call_id!r}")
        self.app_name = app_name
        self.call_id = call_id


class LogStoreTransportError(LogStoreError):
    """Network or store failure while reading or writing a log."""

    kind = ErrorKind.TRANSPORT


class LogStoreCanceledError(LogStoreError):
    """Transfer aborted because the caller cancelled the operation."""

    kind = ErrorKind.CANCELED
