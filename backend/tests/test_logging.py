"""Tests for the JSON log formatter."""

import json
import logging

from school_results.core.logging import CustomJsonFormatter


def test_formatter_emits_structured_fields():
    formatter = CustomJsonFormatter("%(timestamp)s %(level)s %(logger)s %(module)s %(function)s")
    record = logging.LogRecord(
        name="school_results.ranking.service",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg="Analyzed %s snapshot",
        args=("result",),
        exc_info=None,
        func="analyze_snapshot",
    )
    record.term_id = 3

    payload = json.loads(formatter.format(record))

    assert payload["event"] == "Analyzed result snapshot"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "school_results.ranking.service"
    assert payload["function"] == "analyze_snapshot"
    assert payload["term_id"] == 3
    assert "message" not in payload
