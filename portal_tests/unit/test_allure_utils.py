import json

from portal_tools.report_tools import AllureReportProcessor, RunSummary, generate_allure_report


def write_result(directory, name, history_id, status, start, stop):
    result = {
        "uuid": name,
        "historyId": history_id,
        "fullName": f"portal_tests.ui_testing.tests.{history_id}",
        "name": history_id,
        "status": status,
        "start": start,
        "stop": stop,
    }
    (directory / f"{name}-result.json").write_text(json.dumps(result), encoding="utf-8")


def make_results(tmp_path):
    results = tmp_path / "allure-results"
    results.mkdir()
    write_result(results, "a1", "test_login", "passed", 0, 1000)
    write_result(results, "b1", "test_cart", "failed", 0, 2000)
    write_result(results, "b2", "test_cart", "passed", 5000, 6000)
    write_result(results, "c1", "test_checkout", "broken", 0, 500)
    write_result(results, "c2", "test_checkout", "failed", 7000, 7500)
    write_result(results, "d1", "test_register", "skipped", 0, 0)
    (results / "garbage-result.json").write_text("{not json", encoding="utf-8")
    return results


def test_retries_count_once_with_last_status(tmp_path):
    summary = AllureReportProcessor(make_results(tmp_path)).summarize()

    assert (summary.total, summary.passed, summary.failed, summary.skipped) == (4, 2, 1, 1)
    assert summary.failures == ["portal_tests.ui_testing.tests.test_checkout"]
    assert summary.flaky == ["portal_tests.ui_testing.tests.test_cart"]
    assert summary.duration_ms == 1000 + 3000 + 1000
    assert round(summary.pass_rate, 2) == 66.67


def test_empty_run_summary():
    summary = RunSummary()

    assert summary.pass_rate == 0.0
    assert summary.to_dict()["failures"] == []


def test_generate_without_allure_cli_still_writes_summary(tmp_path, monkeypatch):
    results = make_results(tmp_path)
    monkeypatch.setenv("PATH", str(tmp_path / "no-bin"))

    summary = generate_allure_report(str(results), str(tmp_path / "report"))

    written = json.loads((tmp_path / "summary.json").read_text(encoding="utf-8"))
    assert written["total"] == summary.total == 4
    assert written["flaky"] == summary.flaky
    assert not (tmp_path / "report").exists()
