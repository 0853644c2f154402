"""
Tests for the run report.
"""

from mailcorpus.utils.report import RunReport, load_report, save_report


def test_report_tallies():
    report = RunReport()
    report.record_success("sci.space")
    report.record_success(None)
    report.record_failure("root/readme.txt")

    assert report.processed == 2
    assert report.failed == 1
    assert report.visited == 3
    assert report.labels == {"sci.space": 1, "<unlabeled>": 1}


def test_report_round_trip(tmp_path):
    report = RunReport()
    report.record_success("sci.space")
    report.record_failure("bad")
    report.finish()

    save_report(report, tmp_path)
    loaded = load_report(tmp_path)

    assert loaded == report


def test_load_report_missing(tmp_path):
    assert load_report(tmp_path) is None


def test_load_report_corrupt(tmp_path):
    (tmp_path / "ingest_report.json").write_text("{not json")
    assert load_report(tmp_path) is None
