"""Tests for the ui module — console output and batch summaries."""

import io
from unittest.mock import patch


def test_step_summary_counts():
    from clipsidecar.ui import StepSummary

    summary = StepSummary("Reapply")
    summary.record_success("A.MOV")
    summary.record_success("B.MOV")
    summary.record_failure("C.MOV", "no sidecar record")
    summary.record_skip("D.MOV", "cancelled")

    assert summary.succeeded == 2
    assert summary.failed == 1
    assert summary.skipped == 1
    assert summary.total == 4
    assert summary.failures == [("C.MOV", "no sidecar record")]


def test_step_summary_render():
    from clipsidecar.ui import StepSummary

    summary = StepSummary("Reapply")
    summary.record_success("A.MOV")
    summary.record_failure("B.MOV", "write failed")
    assert summary.render() == "Reapply: 1 succeeded, 1 failed, 0 skipped (2 total)"


def test_console_quiet_suppresses_info():
    from clipsidecar.ui import Console

    console = Console(quiet=True)
    with patch("sys.stderr", new_callable=io.StringIO) as mock_stderr:
        console.info("this should not appear")
        assert mock_stderr.getvalue() == ""


def test_console_error_always_shows():
    from clipsidecar.ui import Console

    output = io.StringIO()
    Console(quiet=True).error("something broke", file=output)
    assert "something broke" in output.getvalue()


def test_console_debug_only_when_verbose():
    from clipsidecar.ui import Console

    hidden, shown = io.StringIO(), io.StringIO()
    Console().debug("detail", file=hidden)
    Console(verbose=True).debug("detail", file=shown)
    assert hidden.getvalue() == ""
    assert "detail" in shown.getvalue()


def test_progress_tracker():
    from clipsidecar.ui import ProgressTracker

    tracker = ProgressTracker(total=3, label="Reapply")
    tracker.advance()
    assert tracker.completed == 1
    assert tracker.remaining == 2
    assert tracker.render() == "[1/3] Reapply"
