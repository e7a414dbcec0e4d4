import json

from sessionguard.obs.context import clear_context, session_id_var
from sessionguard.obs.logger import log_event, redact_session_id
from sessionguard.obs.metrics import get_counter, get_metrics_snapshot, inc_counter, record_timing


def test_redact_session_id():
    assert redact_session_id("abcdefghijklmnop") == "***klmnop"
    assert redact_session_id("abc") == "***"
    assert redact_session_id(None) == ""


def test_logger_never_prints_full_session_id(capsys):
    sid = "Zx9" * 14
    log_event("session_reset", old_session_id=sid, new_session_id="n" * 43, reason="timeout")

    line = capsys.readouterr().out.strip()
    payload = json.loads(line)
    assert sid not in line
    assert payload["old_session_id"] == "***" + sid[-6:]
    assert payload["reason"] == "timeout"
    assert payload["event"] == "session_reset"


def test_logger_picks_up_context(capsys):
    session_id_var.set("q" * 43)
    try:
        log_event("step")
    finally:
        clear_context()
    payload = json.loads(capsys.readouterr().out.strip())
    assert payload["session_id"] == "***qqqqqq"


def test_counters_and_histograms():
    inc_counter("session_resets_total", {"reason": "ip"})
    inc_counter("session_resets_total", {"reason": "ip"})
    record_timing("request_latency_ms", 3.0, {"route": "/session"})
    record_timing("request_latency_ms", 5000.0, {"route": "/session"})

    assert get_counter("session_resets_total", {"reason": "ip"}) == 2
    snap = get_metrics_snapshot()
    [hist] = [h for h in snap["histograms"] if h["name"] == "request_latency_ms"]
    assert hist["counts"][1] == 1
    assert hist["counts"][-1] == 1
    assert hist["sum_ms"] == 5003.0
