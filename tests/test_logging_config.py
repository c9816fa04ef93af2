import json
import logging

from synctarget.logging_config import JsonFormatter, TextFormatter, configure_logging


def _record(**extra) -> logging.LogRecord:
    record = logging.makeLogRecord({"name": "synctarget.test", "levelname": "INFO", "msg": "Creating S3 client: bucket=%s", "args": ("notes",)})
    record.__dict__.update(extra)
    return record


def test_json_formatter_context_and_masking():
    payload = json.loads(JsonFormatter(service="synctarget").format(_record(bucket="notes", password="hunter2")))
    assert payload["message"] == "Creating S3 client: bucket=notes"
    assert payload["service"] == "synctarget"
    assert payload["context"] == {"bucket": "notes", "password": "***"}


def test_text_formatter():
    line = TextFormatter(service="synctarget").format(_record(bucket="notes"))
    assert "INFO synctarget.test service=synctarget message=Creating S3 client: bucket=notes" in line
    assert line.endswith("bucket='notes'")


def test_configure_logging_json(monkeypatch):
    monkeypatch.setenv("SYNCTARGET_LOG_JSON", "true")
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        configure_logging(level="DEBUG")
        assert root.level == logging.DEBUG
        assert isinstance(root.handlers[0].formatter, JsonFormatter)
        assert logging.getLogger("botocore").level == logging.INFO
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
        logging.getLogger("botocore").setLevel(logging.NOTSET)
