import logging

from infrastructure.observability.logging import (
    ContextInjectFilter,
    get_log_context,
    make_run_tag,
    request_context,
    set_log_context,
)


def _record() -> logging.LogRecord:
    return logging.LogRecord("test", logging.INFO, __file__, 1, "msg", None, None)


def test_request_context_tags_records_and_restores_previous_id() -> None:
    flt = ContextInjectFilter()
    set_log_context(request_id="outer")

    with request_context("inner"):
        record = _record()
        flt.filter(record)
        assert record.request == "inner"
        assert get_log_context()["request_id"] == "inner"

    assert get_log_context()["request_id"] == "outer"


def test_run_tag_is_stable_short_hash() -> None:
    set_log_context(run_id_full="20260101_120000_detect", provider="openai", model="gpt-4o-mini")
    ctx = get_log_context()

    assert ctx["run_tag"] == make_run_tag("20260101_120000_detect")
    assert len(ctx["run_tag"]) == 8
    assert ctx["provider"] == "openai"

    record = _record()
    ContextInjectFilter().filter(record)
    assert record.run == ctx["run_tag"]
