"""
Log storage for function call logs.

Stores and streams back the text log of each call, keyed by app and call id.
"""

from s3logstore.log_storage.base import CONTENT_TYPE, LogStore, log_key
from s3logstore.log_storage.errors import (
    LogNotFoundError,
    LogStoreCanceledError,
    LogStoreConfigError,
    LogStoreError,
    LogStoreProvisioningError,
    LogStoreTransportError,
)
from s3logstore.log_storage.s3 import S3LogStore, parse_store_url

__all__ = [
    "CONTENT_TYPE",
    "LogNotFoundError",
    "LogStore",
    "LogStoreCanceledError",
    "LogStoreConfigError",
    "LogStoreError",
    "LogStoreProvisioningError",
    "LogStoreTransportError",
    "S3LogStore",
    "log_key",
    "parse_store_url",
]
