import json
import logging

import pytest

import run_report


@pytest.fixture(autouse=True)
def restore_root_handlers():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def write_run(tmp_path, record=None):
    record = record or {
        "id": "cli-run-0001",
        "agent": "pitch",
        "status": "success",
        "request": {"form": {"product": "Widget"}},
        "response": {"recomendacoes": [{"key": "a", "score": 0.7, "tatica": "Launch teaser"}]},
    }
    path = tmp_path / "run.json"
    path.write_text(json.dumps(record), encoding="utf-8")
    return path


def test_html_report_to_stdout(tmp_path, capsys):
    path = write_run(tmp_path)
    assert run_report.main([str(path)]) == 0
    out = capsys.readouterr().out
    assert out.startswith("<!DOCTYPE html>")
    assert "Launch teaser" in out
    assert 'class="theme-pitch"' in out


def test_json_export_to_file(tmp_path):
    path = write_run(tmp_path)
    output = tmp_path / "out" / "run.json"
    assert run_report.main([str(path), "--json", "--output", str(output)]) == 0
    exported = json.loads(output.read_text(encoding="utf-8"))
    assert exported["id"] == "cli-run-0001"
    assert exported["response"]["recomendacoes"][0]["tatica"] == "Launch teaser"


def test_editable_mode_with_memory(tmp_path, capsys):
    path = write_run(tmp_path)
    memory = tmp_path / "memory.json"
    memory.write_text(json.dumps({"a": {"score": 0.9}}), encoding="utf-8")
    assert run_report.main([str(path), "--mode", "editable", "--memory", str(memory)]) == 0
    out = capsys.readouterr().out
    assert "data-editable-root" in out
    assert "-0.20" in out


def test_missing_file_exits_with_error(tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        run_report.main([str(tmp_path / "missing.json")])
    assert excinfo.value.code == 1


def test_invalid_record_exits_with_error(tmp_path):
    path = write_run(tmp_path, {"id": "", "agent": "pitch", "status": "success"})
    with pytest.raises(SystemExit) as excinfo:
        run_report.main([str(path)])
    assert excinfo.value.code == 1


def test_non_object_record_exits_with_error(tmp_path):
    path = tmp_path / "run.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(SystemExit) as excinfo:
        run_report.main([str(path)])
    assert excinfo.value.code == 1


def test_unknown_mode_is_rejected_by_parser(tmp_path):
    path = write_run(tmp_path)
    with pytest.raises(SystemExit) as excinfo:
        run_report.main([str(path), "--mode", "draft"])
    assert excinfo.value.code == 2


def test_report_failure_exits_with_error(tmp_path, monkeypatch):
    def broken_build_report(*args, **kwargs):
        raise RuntimeError("renderer exploded")

    monkeypatch.setattr(run_report, "build_report", broken_build_report)
    with pytest.raises(SystemExit) as excinfo:
        run_report.main([str(write_run(tmp_path))])
    assert excinfo.value.code == 1
