import json
import threading

import pytest

from moodtune.utils.logging import REDACTED, StructuredLogger, redact_secrets


def _records(capsys):
    return [json.loads(line) for line in capsys.readouterr().out.splitlines() if line.strip()]


def test_redact_secrets_nested():
    config = {
        "inference": {"api_token": "hf_secret", "base_url": "https://x"},
        "auth_header": None,
        "version": "1.0.0",
    }
    redacted = redact_secrets(config)
    assert redacted["inference"]["api_token"] == REDACTED
    assert redacted["inference"]["base_url"] == "https://x"
    assert redacted["auth_header"] is None
    assert config["inference"]["api_token"] == "hf_secret"


def test_json_lines_carry_fields(capsys):
    logger = StructuredLogger("moodtune.test.fields")
    logger.info("hello", songs=3)
    record = _records(capsys)[-1]
    assert record["message"] == "hello"
    assert record["level"] == "INFO"
    assert record["songs"] == 3


def test_log_config_never_prints_token(capsys):
    StructuredLogger("moodtune.test.config").log_config({"inference": {"api_token": "hf_secret"}})
    out = capsys.readouterr().out
    assert "hf_secret" not in out
    assert REDACTED in out


def test_operation_context_logs_failure_and_reraises(capsys):
    logger = StructuredLogger("moodtune.test.operation")
    with pytest.raises(RuntimeError):
        with logger.operation_context("Component", "work", mood="happy"):
            raise RuntimeError("boom")

    records = _records(capsys)
    assert records[0]["operation_status"] == "started"
    assert records[0]["context"]["metadata"] == {"mood": "happy"}
    assert records[-1]["operation_status"] == "failed"
    assert records[-1]["error_type"] == "RuntimeError"


def test_operation_context_reuses_handlers():
    logger = StructuredLogger("moodtune.test.handlers")
    handlers = list(logger.logger.handlers)
    with logger.operation_context("Component", "work") as log:
        assert log.logger is logger.logger
        assert log._context.operation == "work"
    assert logger.logger.handlers == handlers
    assert logger._context is None


def test_concurrent_operations_log_each_record_once(capsys):
    logger = StructuredLogger("moodtune.test.threads")

    def run(worker):
        for i in range(200):
            with logger.operation_context("Component", "work", worker=worker, i=i):
                pass

    threads = [threading.Thread(target=run, args=(n,)) for n in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    records = _records(capsys)
    assert len(records) == 4 * 200 * 2
    starts = {(r["context"]["metadata"]["worker"], r["context"]["metadata"]["i"])
              for r in records if r["operation_status"] == "started"}
    assert len(starts) == 4 * 200
