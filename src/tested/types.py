from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Optional
from typing_extensions import Protocol, TypeAlias

# ---------- Constants ----------

# Ordinals mirror a signed-char counter: -1 ends the walk, 0..127 are slots.
MAX_ORDINAL = 127
MIN_ORDINAL = -1

# Failure/skip messages are bounded like a fixed-size buffer would be.
MAX_MESSAGE = 1024

# Arena "null pointer" for CaseNode.next / GroupNode.next.
NIL = -1

# ---------- Case protocol ----------

class Runtime(Protocol):
    """Handle passed to every case body; the first call must be start_case()."""
    def start_case(self, name: str, description: Optional[str] = None) -> None: ...

CaseProc: TypeAlias = Callable[[Runtime], None]

class CaseResult(Enum):
    PASSED = auto()
    FAILED = auto()
    SKIPPED = auto()
    FILTERED = auto()

class ProbeKind(Enum):
    REAL = auto()
    STUB = auto()
    MALFORMED = auto()

@dataclass(frozen=True)
class Probe:
    kind: ProbeKind
    name: Optional[str] = None
    description: Optional[str] = None
    detail: Optional[str] = None

@dataclass(frozen=True)
class StartedCase:
    name: str
    ordinal: int
    description: Optional[str] = None

# ---------- Arena nodes ----------

@dataclass
class CaseNode:
    ordinal: int
    proc: CaseProc
    name: str
    next: int = NIL

@dataclass
class GroupNode:
    name: str
    file_name: str
    case_head: int = NIL
    next: int = NIL

@dataclass
class RunInfo:
    passed: int = 0
    skipped: int = 0
    failed: int = 0

    @property
    def total(self) -> int:
        return self.passed + self.skipped + self.failed

    def is_failed(self) -> bool:
        return self.failed != 0

    def is_passed(self) -> bool:
        return self.failed == 0

    def record(self, result: CaseResult) -> None:
        if result is CaseResult.PASSED:
            self.passed += 1
        elif result is CaseResult.SKIPPED:
            self.skipped += 1
        elif result is CaseResult.FAILED:
            self.failed += 1

# ---------- Collaborators ----------

class Observer(Protocol):
    def on_group_start(self, name: str, cases_in_group: int) -> None: ...
    def on_case_start(self, case: StartedCase) -> None: ...
    def on_case_done(self, result: CaseResult, message: Optional[str] = None) -> None: ...

class Exporter(Protocol):
    def on_group(self, name: str) -> None: ...
    def on_case(self, name: str, ordinal: int, proc: CaseProc) -> None: ...
    def on_done(self) -> None: ...

# ---------- Exceptions ----------

def bound_message(message: Optional[str]) -> str:
    if not message:
        return ""

    return message[:MAX_MESSAGE]

class TestedError(Exception):
    """Misuse of the framework API (bad filter arguments and similar)."""

class ControlSignal(Exception):
    """Base of every outcome a case body (or the machinery) can raise."""

class CaseIsReal(ControlSignal):
    """Internal: raised by the collector runtime when a case announces itself."""
    def __init__(self, name: str, description: Optional[str] = None):
        super().__init__(name)
        self.name = name
        self.description = description

class CaseIsStub(ControlSignal):
    """Raised by the default body of an unfilled slot."""

class CaseSkipped(ControlSignal):
    def __init__(self, message: str = ""):
        self.message = bound_message(message)
        super().__init__(self.message)

class CaseFiltered(ControlSignal):
    """Case announced a name the active filters exclude."""

class CaseFailed(ControlSignal):
    def __init__(self, message: str = ""):
        self.message = bound_message(message)
        super().__init__(self.message)

class ExportStopped(ControlSignal):
    """Raised by an exporter to halt Subset.export() early."""

class ProcessCorrupted(ControlSignal):
    group_name: Optional[str]
    file_name: Optional[str]
    ordinal: Optional[int]
    case_name: Optional[str]
    stats: Optional[RunInfo]

    def __init__(self, message: str = ""):
        self.message = bound_message(message)
        super().__init__(self.message)
        self.group_name = None
        self.file_name = None
        self.ordinal = None
        self.case_name = None
        self.stats = None

    def annotate(self, group_name: str, file_name: str, ordinal: int, case_name: Optional[str]) -> None:
        self.group_name = group_name
        self.file_name = file_name
        self.ordinal = ordinal
        self.case_name = case_name

    def __str__(self) -> str:
        msg = self.message or "process corrupted"

        if self.group_name is None:
            return msg

        where = f"group '{self.group_name}', case #{self.ordinal}"
        if self.case_name:
            where += f" '{self.case_name}'"

        return f"{msg} ({where}, file '{self.file_name}')"

class CollectionFailed(ControlSignal):
    group_name: Optional[str]
    file_name: Optional[str]

    def __init__(self, ordinal: int, message: str):
        self.ordinal = ordinal
        self.message = bound_message(message)
        super().__init__(self.message)
        self.group_name = None
        self.file_name = None

    def annotate(self, group_name: str, file_name: str) -> None:
        self.group_name = group_name
        self.file_name = file_name

    def __str__(self) -> str:
        if self.group_name is None:
            return f"{self.message} (case #{self.ordinal})"

        return f"{self.message} (group '{self.group_name}', case #{self.ordinal}, file '{self.file_name}')"
