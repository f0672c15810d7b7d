import json
import subprocess

from woo_tools.report_tools.allure_utils import AllureReportProcessor, attach_artifact


def write_result(results_dir, name, **data):
    (results_dir / f"{name}-result.json").write_text(json.dumps(data), encoding="utf-8")


def test_summary_counts_last_rerun_attempt(tmp_path):
    results_dir = tmp_path / "allure-results"
    results_dir.mkdir()
    write_result(results_dir, "a1", historyId="checkout", status="failed", start=0, stop=1000)
    write_result(results_dir, "a2", historyId="checkout", status="passed", start=2000, stop=2500)
    write_result(results_dir, "b", historyId="orders", status="broken", start=0, stop=300)
    write_result(results_dir, "c", historyId="auth", status="skipped", start=0, stop=0)
    (results_dir / "d-result.json").write_text("{not json", encoding="utf-8")

    summary = AllureReportProcessor(results_dir).generate_summary()

    assert summary.total == 3
    assert summary.passed == 1
    assert summary.failed == 0
    assert summary.broken == 1
    assert summary.skipped == 1
    assert summary.duration_ms == 800
    assert summary.to_dict()["pass_rate"] == "33.33%"


def test_history_is_carried_over(tmp_path):
    results_dir = tmp_path / "allure-results"
    report_dir = tmp_path / "allure-report"
    (report_dir / "history").mkdir(parents=True)
    (report_dir / "history" / "history.json").write_text("{}", encoding="utf-8")
    results_dir.mkdir()

    AllureReportProcessor(results_dir, report_dir).copy_history()

    assert (results_dir / "history" / "history.json").exists()


def test_generate_report_without_cli(monkeypatch, tmp_path):
    def missing_cli(*args, **kwargs):
        raise FileNotFoundError("allure")

    monkeypatch.setattr(subprocess, "run", missing_cli)

    assert AllureReportProcessor(tmp_path / "allure-results").generate_report() is False


def test_attach_artifact_requires_existing_file(tmp_path):
    assert attach_artifact(tmp_path / "trace.zip") is False

    trace = tmp_path / "trace.zip"
    trace.write_bytes(b"PK\x03\x04")
    assert attach_artifact(trace, name="Trace") is True
