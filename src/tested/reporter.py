from __future__ import annotations

import sys
from typing import Optional, TextIO

from .types import CaseResult, StartedCase

RULE = "-" * 71

class StdoutReporter:
    """Default observer: group headers plus one start and one done line per case."""

    def __init__(self, stream: Optional[TextIO] = None):
        self._stream = stream
        self._current: Optional[StartedCase] = None

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def _print(self, text: str = "") -> None:
        print(text, file=self.stream)

    def on_group_start(self, name: str, cases_in_group: int) -> None:
        self._print()
        self._print(f"{name} [group]")
        self._print(RULE)
        self._print()

    def on_case_start(self, case: StartedCase) -> None:
        self._current = case
        self._print(f"{case.ordinal:02d}:{case.name}...")

    def on_case_done(self, result: CaseResult, message: Optional[str] = None) -> None:
        if message:
            if result is CaseResult.FAILED:
                self._print(f"Case failed: {message}")
            elif result is CaseResult.SKIPPED:
                self._print(f"Case skipped: {message}")

        label = {
            CaseResult.PASSED: "PASSED",
            CaseResult.FAILED: "FAILED",
            CaseResult.SKIPPED: "SKIPPED",
        }.get(result, result.name)

        if self._current is None:
            self._print(f"??:<unannounced> {label}")
            return

        self._print(f"{self._current.ordinal:02d}:{self._current.name} {label}")
        self._current = None
