from __future__ import annotations

import logging
import traceback
from typing import Optional, Sequence, Tuple

from .filters import Filter
from .slots import MALFORMED_MESSAGE
from .types import (
    NIL,
    CaseFailed, CaseFiltered, CaseIsReal, CaseNode, CaseResult, CaseSkipped,
    GroupNode, Observer, ProcessCorrupted, RunInfo, StartedCase, bound_message,
)
from .utils import debug_py_trace_enabled

logger = logging.getLogger(__name__)

UNKNOWN_ERROR = "unknown error"

def _case_allowed(filters: Sequence[Filter], name: str, ordinal: int) -> bool:
    return all(f.matches_case(name, ordinal) for f in filters)

def unknown_error_message(exc: BaseException) -> str:
    message = f"{UNKNOWN_ERROR} ({type(exc).__name__}: {exc})"

    if debug_py_trace_enabled():
        message += "\n" + "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))

    return bound_message(message)

class DispatchRuntime:
    """Runtime handed to case bodies during a run."""

    def __init__(self, observer: Observer, filters: Sequence[Filter] = ()):
        self.observer = observer
        self.filters: Tuple[Filter, ...] = tuple(filters)
        self.ordinal = NIL
        self.case_name: Optional[str] = None
        self.announced = False

    def begin(self, ordinal: int) -> None:
        self.ordinal = ordinal
        self.case_name = None
        self.announced = False

    def start_case(self, name: str, description: Optional[str] = None) -> None:
        if self.announced:
            raise CaseFailed("case announced more than once")

        self.announced = True
        self.case_name = name

        if not _case_allowed(self.filters, name, self.ordinal):
            raise CaseFiltered()

        self.observer.on_case_start(StartedCase(name, self.ordinal, description))

class ExportRuntime:
    """Runtime for re-probing cases during export: announce always unwinds."""

    def __init__(self, filters: Sequence[Filter] = ()):
        self.filters: Tuple[Filter, ...] = tuple(filters)
        self.ordinal = NIL

    def begin(self, ordinal: int) -> None:
        self.ordinal = ordinal

    def start_case(self, name: str, description: Optional[str] = None) -> None:
        if not _case_allowed(self.filters, name, self.ordinal):
            raise CaseFiltered()

        raise CaseIsReal(name, description)

class Dispatcher:
    """
    Runs cases one at a time and folds their outcomes into RunInfo.

    Everything a case raises is contained here except ProcessCorrupted,
    which is annotated with the case's address and re-raised.
    """

    def __init__(self, observer: Observer, filters: Sequence[Filter] = ()):
        self.observer = observer
        self.runtime = DispatchRuntime(observer, filters)
        self.stats = RunInfo()

    def start_group(self, name: str, cases_in_group: int) -> None:
        self.observer.on_group_start(name, cases_in_group)

    def run_one_case(self, group: GroupNode, node: CaseNode) -> CaseResult:
        rt = self.runtime
        rt.begin(node.ordinal)
        message: Optional[str] = None

        try:
            node.proc(rt)
            if rt.announced:
                result = CaseResult.PASSED
            else:
                result, message = CaseResult.FAILED, MALFORMED_MESSAGE
        except CaseSkipped as signal:
            result, message = CaseResult.SKIPPED, signal.message or None
        except CaseFiltered:
            logger.debug("case #%d %r filtered out", node.ordinal, rt.case_name)
            return CaseResult.FILTERED
        except CaseFailed as signal:
            result, message = CaseResult.FAILED, signal.message
        except ProcessCorrupted as signal:
            signal.annotate(group.name, group.file_name, node.ordinal, rt.case_name)
            raise
        except AssertionError as exc:
            result, message = CaseResult.FAILED, bound_message(str(exc)) or "assertion failed"
        except Exception as exc:
            logger.debug("case #%d %r raised outside the signal vocabulary", node.ordinal, rt.case_name, exc_info=True)
            result, message = CaseResult.FAILED, unknown_error_message(exc)

        logger.debug("case #%d %r: %s", node.ordinal, rt.case_name, result.name)
        self.observer.on_case_done(result, message)
        self.stats.record(result)

        return result
