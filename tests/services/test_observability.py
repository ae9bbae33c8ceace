"""Structured Logging: JSONFormatter surfaces codex extra fields."""

import json
import logging

from sigil_codex.infrastructure.observability import JSONFormatter


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "sigil_codex.test", logging.WARNING, __file__, 1,
        "Sigil or node not found", None, None,
    )
    record.__dict__.update(extra)
    return record


def test_json_formatter_includes_extra_fields():
    out = json.loads(JSONFormatter().format(
        _record(user_id="u-1", sigil_id="s-1", node_id="past-echo"),
    ))
    assert out["level"] == "WARNING"
    assert out["message"] == "Sigil or node not found"
    assert out["user_id"] == "u-1"
    assert out["node_id"] == "past-echo"


def test_json_formatter_omits_missing_fields():
    out = json.loads(JSONFormatter().format(_record()))
    assert "sigil_id" not in out
    assert "error_code" not in out
