from __future__ import annotations

import json
import logging

from models.discovery_result import DiscoveryResult, PlatformDiagnostics, SourceError, SourceResult
from utils.logging_setup import SafeExtraFormatter
from utils.trace_logger import log_discovery_run


def _result():
    diagnostics = PlatformDiagnostics(variants_executed=["handle:clean", "name:full"], variants_rejected=["name:full"])
    return DiscoveryResult(
        external_id="john-doe-1234",
        role_type="engineer",
        run_id="test-run-123",
        platform_results=[SourceResult(platform="github", queries_executed=2, diagnostics=diagnostics)],
        total_queries_executed=2,
        sources_queried=["github", "stackoverflow"],
        errors=[SourceError(platform="stackoverflow", error="boom")],
    )


def test_discovery_trace_writes_jsonl(tmp_path):
    log_file = tmp_path / "nested" / "runs.jsonl"
    assert log_discovery_run(_result(), enabled=True, log_path=str(log_file), extras={"cli": True})

    rec = json.loads(log_file.read_text(encoding="utf-8").strip().splitlines()[-1])
    assert rec["run_id"] == "test-run-123"
    assert rec["best"] is None
    assert rec["errors"] == [{"platform": "stackoverflow", "error": "boom"}]
    assert rec["extras"] == {"cli": True}
    github = rec["platforms"]["github"]
    assert github["queries_executed"] == 2
    assert github["variants"]["executed"]["canonical"]["handle:primary"] == 1
    assert github["diagnostics"]["variantsRejected"] == ["name:full"]


def test_disabled_trace_writes_nothing(tmp_path):
    log_file = tmp_path / "runs.jsonl"
    assert log_discovery_run(_result(), enabled=False, log_path=str(log_file)) is False
    assert not log_file.exists()


def test_formatter_fills_missing_extras():
    formatter = SafeExtraFormatter(fmt="%(message)s platform=%(platform)s run_id=%(run_id)s")
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "hello", None, None)
    record.platform = "github"
    assert formatter.format(record) == "hello platform=github run_id=-"
