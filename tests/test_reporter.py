from __future__ import annotations

import io

from tested import CaseResult, StartedCase, StdoutReporter
from tested.reporter import RULE


def _reporter() -> tuple:
    stream = io.StringIO()
    return StdoutReporter(stream), stream


def test_group_header() -> None:
    reporter, stream = _reporter()

    reporter.on_group_start("math", 2)

    assert stream.getvalue() == f"\nmath [group]\n{RULE}\n\n"


def test_passed_case_lines() -> None:
    reporter, stream = _reporter()

    reporter.on_case_start(StartedCase("Addition", 0))
    reporter.on_case_done(CaseResult.PASSED)

    assert stream.getvalue().splitlines() == ["00:Addition...", "00:Addition PASSED"]


def test_failed_case_prints_message_first() -> None:
    reporter, stream = _reporter()

    reporter.on_case_start(StartedCase("Multiplication", 1))
    reporter.on_case_done(CaseResult.FAILED, "Multiplication does not work")

    assert stream.getvalue().splitlines() == [
        "01:Multiplication...",
        "Case failed: Multiplication does not work",
        "01:Multiplication FAILED",
    ]


def test_skipped_case_with_reason() -> None:
    reporter, stream = _reporter()

    reporter.on_case_start(StartedCase("Later", 12))
    reporter.on_case_done(CaseResult.SKIPPED, "not on this platform")

    assert stream.getvalue().splitlines() == [
        "12:Later...",
        "Case skipped: not on this platform",
        "12:Later SKIPPED",
    ]


def test_done_without_start_is_marked_unannounced() -> None:
    reporter, stream = _reporter()
    reporter.on_case_start(StartedCase("Previous", 0))
    reporter.on_case_done(CaseResult.PASSED)

    reporter.on_case_done(CaseResult.FAILED, "case body does not announce")

    assert stream.getvalue().splitlines()[-1] == "??:<unannounced> FAILED"
