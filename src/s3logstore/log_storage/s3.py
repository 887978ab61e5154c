"""S3 API compatible log store (AWS S3, MinIO, Ceph RGW, ...) via boto3."""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import Any, BinaryIO
from urllib.parse import parse_qs, unquote, urlsplit

import boto3
from boto3.exceptions import S3UploadFailedError
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from botocore.response import StreamingBody

from s3logstore.log_storage.base import CONTENT_TYPE, log_key
from s3logstore.log_storage.errors import (
    LogNotFoundError,
    LogStoreCanceledError,
    LogStoreConfigError,
    LogStoreProvisioningError,
    LogStoreTransportError,
)
from s3logstore.models import S3Connection

logger = logging.getLogger(__name__)

# TODO encrypt stored logs with a user supplied key.

_URL_EXAMPLE = "e.g. s3://s3.com/us-east-1/my_bucket"

# S3 rejects an explicit LocationConstraint for the default region
_DEFAULT_REGION = "us-east-1"

_MISSING_BUCKET_CODES = {"404", "NoSuchBucket", "NotFound"}
_MISSING_OBJECT_CODES = {"404", "NoSuchKey", "NotFound"}


def _error_code(error: ClientError) -> str | None:
    return error.response.get("Error", {}).get("Code")


def parse_store_url(url: str) -> S3Connection:
    """
    Parse s3://access_key_id:secret_access_key@host/location/bucket_name?ssl=true.

    The scheme is not checked. TLS is enabled only when ssl is literally "true".
    Raises LogStoreConfigError if the host, location or bucket name is missing.
    """
    try:
        parts = urlsplit(url)
    except ValueError as e:
        raise LogStoreConfigError(f"invalid s3 api url: {e}") from e

    userinfo, _, host = parts.netloc.rpartition("@")
    if not host:
        raise LogStoreConfigError(f"must provide host in s3 api url. {_URL_EXAMPLE}")
    access_key_id, _, secret_access_key = userinfo.partition(":")
    use_ssl = parse_qs(parts.query).get("ssl", [""])[0] == "true"

    path = parts.path[1:] if parts.path.startswith("/") else parts.path
    if path.endswith("/"):
        path = path[:-1]
    segments = path.split("/")
    if len(segments) != 2:
        raise LogStoreConfigError(
            f"must provide bucket name and location in path of s3 api url. {_URL_EXAMPLE}"
        )
    location, bucket_name = (unquote(s) for s in segments)
    if not location:
        raise LogStoreConfigError(
            f"must provide non-empty location in path of s3 api url. {_URL_EXAMPLE}"
        )
    if not bucket_name:
        raise LogStoreConfigError(
            f"must provide non-empty bucket name in path of s3 api url. {_URL_EXAMPLE}"
        )

    return S3Connection(
        endpoint=host,
        access_key_id=unquote(access_key_id),
        secret_access_key=unquote(secret_access_key),
        use_ssl=use_ssl,
        location=location,
        bucket_name=bucket_name,
    )


def _build_client(conn: S3Connection) -> Any:
    """boto3 S3 client for the endpoint; empty credentials fall back to the default chain."""
    try:
        return boto3.client(
            "s3",
            endpoint_url=conn.endpoint_url,
            aws_access_key_id=conn.access_key_id or None,
            aws_secret_access_key=conn.secret_access_key or None,
            region_name=conn.location,
            config=Config(signature_version="s3v4", s3={"addressing_style": "path"}),
        )
    except (ValueError, BotoCoreError) as e:
        raise LogStoreConfigError(
            f"could not create s3 client for {conn.endpoint_url}: {e}"
        ) from e


def _ensure_bucket(client: Any, bucket_name: str, location: str) -> None:
    """Create the bucket, accepting one that already exists (e.g. on restart)."""
    create_kwargs: dict[str, Any] = {"Bucket": bucket_name}
    if location != _DEFAULT_REGION:
        create_kwargs["CreateBucketConfiguration"] = {"LocationConstraint": location}
    try:
        client.create_bucket(**create_kwargs)
        logger.info("Created log bucket %s in %s", bucket_name, location)
        return
    except (ClientError, BotoCoreError) as e:
        create_error = e

    try:
        client.head_bucket(Bucket=bucket_name)
    except ClientError as e:
        if _error_code(e) in _MISSING_BUCKET_CODES:
            raise LogStoreProvisioningError(
                "could not create bucket and bucket does not exist, please check permissions"
            ) from create_error
        raise LogStoreProvisioningError(
            f"could not check whether bucket {bucket_name} exists: {e}"
        ) from e
    except BotoCoreError as e:
        raise LogStoreProvisioningError(
            f"could not check whether bucket {bucket_name} exists: {e}"
        ) from e
    logger.info("Using existing log bucket %s", bucket_name)


class _AbortableReader:
    """Read-only wrapper that fails the next read once the caller has cancelled."""

    def __init__(self, fileobj: BinaryIO, abort: threading.Event) -> None:
        self._fileobj = fileobj
        self._abort = abort

    def read(self, size: int = -1) -> bytes:
        if self._abort.is_set():
            raise LogStoreCanceledError("log upload cancelled")
        return self._fileobj.read(size)

    def seekable(self) -> bool:
        # Forces the transfer manager onto its streaming, unknown-length path.
        return False


class S3LogStore:
    """
    Stores one text/plain object per call at /<app_name>/<call_id>.

    Owns a boto3 client bound to a single bucket. Build it with from_url()
    (parses the URL and provisions the bucket) or pass an existing client.
    Blocking S3 calls run in worker threads; cancelling the awaiting task
    aborts the in-flight transfer. No retries are done here.
    """

    def __init__(self, client: Any, bucket: str, connection: S3Connection | None = None) -> None:
        self._client = client
        self.bucket = bucket
        self.connection = connection

    @classmethod
    def from_url(cls, url: str) -> S3LogStore:
        """Parse url, build the client and ensure the bucket exists."""
        conn = parse_store_url(url)
        client = _build_client(conn)
        _ensure_bucket(client, conn.bucket_name, conn.location)
        logger.info(
            "S3 log store ready",
            extra={"endpoint": conn.endpoint, "bucket": conn.bucket_name, "ssl": conn.use_ssl},
        )
        return cls(client, conn.bucket_name, connection=conn)

    async def insert_log(self, app_name: str, call_id: str, call_log: BinaryIO) -> None:
        """Stream call_log to the store, overwriting any log already stored for the call."""
        key = log_key(app_name, call_id)
        abort = threading.Event()
        try:
            await asyncio.to_thread(self._upload, key, _AbortableReader(call_log, abort))
        except asyncio.CancelledError:
            abort.set()
            logger.info("Log upload cancelled", extra={"bucket": self.bucket, "key": key})
            raise

    def _upload(self, key: str, reader: _AbortableReader) -> None:
        try:
            self._client.upload_fileobj(
                reader,
                self.bucket,
                key,
                ExtraArgs={"ContentType": CONTENT_TYPE},
            )
        except (ClientError, BotoCoreError, S3UploadFailedError) as e:
            logger.warning("Log upload failed: bucket=%s key=%s: %s", self.bucket, key, e)
            raise LogStoreTransportError(str(e)) from e
        logger.debug("Stored log", extra={"bucket": self.bucket, "key": key})

    async def get_log(self, app_name: str, call_id: str) -> StreamingBody:
        """
        Open the stored log for reading.

        The returned body is lazy: bytes are pulled from the store as the
        caller reads. It is single-pass; the caller should close it.
        Raises LogNotFoundError when nothing was stored for the call.
        """
        key = log_key(app_name, call_id)
        abort = threading.Event()
        try:
            return await asyncio.to_thread(self._open, app_name, call_id, key, abort)
        except asyncio.CancelledError:
            abort.set()
            raise

    def _open(
        self,
        app_name: str,
        call_id: str,
        key: str,
        abort: threading.Event,
    ) -> StreamingBody:
        try:
            response = self._client.get_object(Bucket=self.bucket, Key=key)
        except ClientError as e:
            if _error_code(e) in _MISSING_OBJECT_CODES:
                raise LogNotFoundError(app_name, call_id) from e
            logger.warning("Log read failed: bucket=%s key=%s: %s", self.bucket, key, e)
            raise LogStoreTransportError(str(e)) from e
        except BotoCoreError as e:
            logger.warning("Log read failed: bucket=%s key=%s: %s", self.bucket, key, e)
            raise LogStoreTransportError(str(e)) from e

        body = response["Body"]
        if abort.is_set():
            # Nobody is waiting for this body any more.
            body.close()
            raise LogStoreCanceledError("log read cancelled")
        logger.debug("Opened log", extra={"bucket": self.bucket, "key": key})
        return body
