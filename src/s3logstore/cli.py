"""CLI entry point for s3logstore."""

import argparse
import asyncio
import logging
import sys

from s3logstore import __version__
from s3logstore.config import get_settings
from s3logstore.log_storage import LogStoreError, S3LogStore

_CHUNK_SIZE = 64 * 1024


async def _put(store: S3LogStore, app_name: str, call_id: str, path: str) -> None:
    if path == "-":
        await store.insert_log(app_name, call_id, sys.stdin.buffer)
        return
    with open(path, "rb") as f:
        await store.insert_log(app_name, call_id, f)


async def _get(store: S3LogStore, app_name: str, call_id: str) -> None:
    body = await store.get_log(app_name, call_id)
    try:
        for chunk in body.iter_chunks(_CHUNK_SIZE):
            sys.stdout.buffer.write(chunk)
    finally:
        body.close()
    sys.stdout.buffer.flush()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Store and fetch function call logs in S3")
    parser.add_argument("--url", help="Log store URL (default: LOG_STORE_URL)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    commands = parser.add_subparsers(dest="command", required=True)

    put = commands.add_parser("put", help="Store the log of a call")
    put.add_argument("app_name")
    put.add_argument("call_id")
    put.add_argument("file", nargs="?", default="-", help="Log file to upload (default: stdin)")

    get = commands.add_parser("get", help="Write the log of a call to stdout")
    get.add_argument("app_name")
    get.add_argument("call_id")

    args = parser.parse_args(argv)

    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    url = args.url or settings.log_store_url
    if not url:
        parser.error("no log store URL: pass --url or set LOG_STORE_URL")

    try:
        store = S3LogStore.from_url(url)
        if args.command == "put":
            asyncio.run(_put(store, args.app_name, args.call_id, args.file))
        else:
            asyncio.run(_get(store, args.app_name, args.call_id))
    except (LogStoreError, ValueError, OSError) as e:
        print(f"s3logstore: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
