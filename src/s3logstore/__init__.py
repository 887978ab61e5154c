"""
s3logstore — per-call log storage on S3-compatible object stores.

Writes the log of one function call under (app name, call id) and streams
it back on request.
"""

__version__ = "0.1.0"
