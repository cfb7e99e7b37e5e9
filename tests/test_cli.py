from __future__ import annotations

import json

import cli


def test_platforms_lists_catalog(capsys):
    assert cli.main(["platforms"]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["total"] == 32
    assert {"platform": "github", "display_name": "GitHub", "base_weight": 0.6} in out["platforms"]


def test_platforms_for_role(capsys):
    assert cli.main(["platforms", "--role", "researcher"]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out[0]["platform"] == "orcid"


def test_discover_requires_an_identity(capsys):
    assert cli.main(["discover", "--name", "John Doe"]) == 2
    assert "--external-id" in capsys.readouterr().err


def test_discover_prints_result(monkeypatch, capsys, fakes):
    from services.search_executor import SearchExecutor

    monkeypatch.setattr(cli, "build_search_executor", lambda settings, config: SearchExecutor(fakes["provider"]()))
    monkeypatch.setenv("DISCOVERY_TRACE", "false")

    code = cli.main(["discover", "-i", "john-doe-1234", "-n", "John Doe", "-r", "engineer", "--max-sources", "2"])

    assert code == 0
    out = json.loads(capsys.readouterr().out)
    assert out["externalId"] == "john-doe-1234"
    assert out["roleType"] == "engineer"
    assert out["sourcesQueried"] == ["github"]
    assert out["bestIdentity"] is None


def test_discover_reads_hints_file(tmp_path, monkeypatch, capsys, fakes):
    from services.search_executor import SearchExecutor

    hints_file = tmp_path / "hints.json"
    hints_file.write_text(json.dumps({"externalId": "jane-roe", "nameHint": "Jane Roe", "roleType": "researcher"}))
    monkeypatch.setattr(cli, "build_search_executor", lambda settings, config: SearchExecutor(fakes["provider"]()))
    monkeypatch.setenv("DISCOVERY_TRACE", "false")

    assert cli.main(["discover", "--hints-file", str(hints_file), "--max-sources", "1"]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["roleType"] == "researcher"
    assert out["sourcesQueried"] == ["orcid"]
