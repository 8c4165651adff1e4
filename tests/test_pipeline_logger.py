import importlib
import logging


def _reload_pipeline_logger(monkeypatch, debug_log: bool):
    monkeypatch.setenv("DEBUG_LOG", "true" if debug_log else "false")
    monkeypatch.setenv("DEBUG_MODE", "false")
    monkeypatch.setenv("PIPELINE_LOG_TO_FILE", "false")

    import bottlematch.pipeline_logger as pipeline_logger

    return importlib.reload(pipeline_logger)


def _capture(monkeypatch, pl):
    events = []

    def fake_log(level, message, extra=None, exc_info=None):
        events.append((level, message, extra))

    monkeypatch.setattr(pl.pipeline_logger, "log", fake_log)
    return events


def test_non_debug_mode_keeps_only_requests_summaries_and_errors(monkeypatch):
    pl = _reload_pipeline_logger(monkeypatch, debug_log=False)
    events = _capture(monkeypatch, pl)

    pl.log_match("normal info")
    pl.log_comparison_request("Blue Rum", 10.0, 3)
    pl.log_latency_summary("COMPARE", "pipeline", 5)
    pl.log_pipeline("INDEX", "something failed", level=logging.ERROR)

    assert len(events) == 3
    assert events[0][1].startswith("COMPARE_REQUEST")
    assert events[1][1].startswith("LATENCY_SUMMARY")
    assert events[2][0] == logging.ERROR


def test_debug_mode_logs_stage_events(monkeypatch):
    pl = _reload_pipeline_logger(monkeypatch, debug_log=True)
    events = _capture(monkeypatch, pl)

    pl.log_index("Catalog indexed", {"entries": 3})
    assert len(events) == 1
    assert events[0][2]["stage"] == "INDEX"
    assert '"entries": 3' in events[0][1]


def test_truncate_data_redacts_sensitive_keys_and_long_values(monkeypatch):
    pl = _reload_pipeline_logger(monkeypatch, debug_log=True)

    data = {
        "token": "secret-token",
        "product": "x" * 200,
        "keywords": ["a", "b", "c", "d", "e", "f"],
        "nested": {"password": "p", "ok": "yes"},
    }
    out = pl._truncate_data(data, max_len=20)

    assert out["token"] == "***REDACTED***"
    assert out["product"].endswith("...")
    assert out["keywords"] == "[6 items]"
    assert out["nested"]["password"] == "***REDACTED***"
    assert out["nested"]["ok"] == "yes"


def test_trace_stage_appends_stage_result(monkeypatch):
    pl = _reload_pipeline_logger(monkeypatch, debug_log=True)

    with pl.trace_comparison("Blue Rum", 10.0) as trace:
        with pl.trace_stage("MATCH", "filter"):
            pass

    assert len(trace.stages) == 1
    assert trace.stages[0]["stage"] == "MATCH"
    assert trace.stages[0]["success"] is True
    assert set(trace.stage_timings()) == {"MATCH"}
    assert pl.get_current_trace() is None


def test_trace_stage_records_failure(monkeypatch):
    pl = _reload_pipeline_logger(monkeypatch, debug_log=False)
    events = _capture(monkeypatch, pl)

    with pl.trace_comparison("Blue Rum") as trace:
        try:
            with pl.trace_stage("INDEX", "index"):
                raise ValueError("boom")
        except ValueError:
            pass

    assert trace.stages[0]["success"] is False
    assert trace.stages[0]["error"] == "boom"
    assert any(level == logging.ERROR for level, _, _ in events)
