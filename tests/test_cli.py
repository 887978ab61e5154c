"""Tests for the s3logstore command line."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from s3logstore.cli import main
from s3logstore.log_storage import LogNotFoundError, LogStoreConfigError

STORE_URL = "s3://s3.example.com/us-east-1/logs"


@patch("s3logstore.cli.S3LogStore")
def test_put_uploads_file(mock_store_class, tmp_path):
    log_file = tmp_path / "call.log"
    log_file.write_bytes(b"started\nfinished\n")
    store = MagicMock()
    store.insert_log = AsyncMock()
    mock_store_class.from_url.return_value = store

    assert main(["--url", STORE_URL, "put", "myapp", "call-1", str(log_file)]) == 0

    mock_store_class.from_url.assert_called_once_with(STORE_URL)
    store.insert_log.assert_awaited_once()
    app_name, call_id, fileobj = store.insert_log.call_args[0]
    assert (app_name, call_id) == ("myapp", "call-1")
    assert fileobj.name == str(log_file)


@patch("s3logstore.cli.S3LogStore")
def test_get_writes_log_to_stdout(mock_store_class, capsysbinary):
    body = MagicMock()
    body.iter_chunks.return_value = [b"started\n", b"finished\n"]
    store = MagicMock()
    store.get_log = AsyncMock(return_value=body)
    mock_store_class.from_url.return_value = store

    assert main(["--url", STORE_URL, "get", "myapp", "call-1"]) == 0

    assert capsysbinary.readouterr().out == b"started\nfinished\n"
    store.get_log.assert_awaited_once_with("myapp", "call-1")
    body.close.assert_called_once()


@patch("s3logstore.cli.S3LogStore")
def test_get_missing_log_exits_1(mock_store_class, capsys):
    store = MagicMock()
    store.get_log = AsyncMock(side_effect=LogNotFoundError("myapp", "call-1"))
    mock_store_class.from_url.return_value = store

    assert main(["--url", STORE_URL, "get", "myapp", "call-1"]) == 1
    assert "log not found" in capsys.readouterr().err


@patch("s3logstore.cli.S3LogStore")
def test_bad_url_exits_1(mock_store_class, capsys):
    mock_store_class.from_url.side_effect = LogStoreConfigError("must provide bucket name")

    assert main(["--url", "s3://host/us-east-1", "get", "myapp", "call-1"]) == 1
    assert "must provide bucket name" in capsys.readouterr().err


@patch("s3logstore.cli.S3LogStore")
def test_url_from_environment(mock_store_class, monkeypatch):
    monkeypatch.setenv("LOG_STORE_URL", STORE_URL)
    store = MagicMock()
    store.get_log = AsyncMock(return_value=MagicMock(iter_chunks=MagicMock(return_value=[])))
    mock_store_class.from_url.return_value = store

    assert main(["get", "myapp", "call-1"]) == 0
    mock_store_class.from_url.assert_called_once_with(STORE_URL)


def test_missing_url_is_usage_error(monkeypatch, tmp_path):
    monkeypatch.delenv("LOG_STORE_URL", raising=False)
    monkeypatch.chdir(tmp_path)

    with pytest.raises(SystemExit) as exc_info:
        main(["get", "myapp", "call-1"])
    assert exc_info.value.code == 2
