"""tested: a small framework for declaring, discovering and running test cases."""

from .asserts import expect, expect_eq, expect_not, fail, fail_if, panic, skip
from .filters import Address, Filter, FilterMode, parse_address
from .iterator import CaseEvent, Done, GroupStart, SubsetIterator
from .reporter import StdoutReporter
from .runtime import Dispatcher, DispatchRuntime, ExportRuntime
from .slots import CaseSlots, CollectorRuntime, collect_cases, probe, stub_case
from .storage import Group, Storage
from .subset import Subset
from .types import (
    MAX_MESSAGE, MAX_ORDINAL, NIL,
    CaseFailed, CaseFiltered, CaseIsReal, CaseIsStub, CaseNode, CaseProc,
    CaseResult, CaseSkipped, CollectionFailed, ControlSignal, Exporter,
    ExportStopped, GroupNode, Observer, Probe, ProbeKind, ProcessCorrupted,
    RunInfo, Runtime, StartedCase, TestedError,
)

__all__ = [
    "Address", "CaseEvent", "CaseFailed", "CaseFiltered", "CaseIsReal",
    "CaseIsStub", "CaseNode", "CaseProc", "CaseResult", "CaseSkipped",
    "CaseSlots", "CollectionFailed", "CollectorRuntime", "ControlSignal",
    "DispatchRuntime", "Dispatcher", "Done", "ExportRuntime", "ExportStopped",
    "Exporter", "Filter", "FilterMode", "Group", "GroupNode", "GroupStart",
    "MAX_MESSAGE", "MAX_ORDINAL", "NIL", "Observer", "Probe", "ProbeKind",
    "ProcessCorrupted", "RunInfo", "Runtime", "StartedCase", "StdoutReporter",
    "Storage", "Subset", "SubsetIterator", "TestedError", "collect_cases",
    "expect", "expect_eq", "expect_not", "fail", "fail_if", "panic",
    "parse_address", "probe", "skip", "stub_case",
]
