import json

import pytest

from moodshift.utils.logging import LogContext, StructuredLogger


def test_json_lines_carry_context_and_fields(capsys):
    logger = StructuredLogger("moodshift.tests.json", level="DEBUG", fmt="json")
    logger.with_context(LogContext("Engine", "rank")).info("Ranked", items=3)
    entry = json.loads(capsys.readouterr().out.strip())
    assert entry['message'] == "Ranked"
    assert entry['items'] == 3
    assert entry['context']['operation'] == "rank"


def test_operation_context_logs_failure_and_reraises(capsys):
    logger = StructuredLogger("moodshift.tests.ops", level="INFO", fmt="json")
    with pytest.raises(KeyError):
        with logger.operation_context("Engine", "explode", user_id="alice"):
            raise KeyError("missing")
    entry = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    assert entry['operation_status'] == "failed"
    assert entry['error_type'] == "KeyError"
    assert entry['exception']['type'] == "KeyError"


def test_log_config_redacts_secrets(capsys):
    logger = StructuredLogger("moodshift.tests.cfg", level="INFO", fmt="json")
    logger.log_config({'service': {'api_key': 'abc', 'version': '1.0.0'}})
    entry = json.loads(capsys.readouterr().out.strip())
    assert entry['config']['service'] == {'api_key': '***REDACTED***', 'version': '1.0.0'}
