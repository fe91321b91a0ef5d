from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Tuple, overload

from .types import (
    MAX_ORDINAL, MIN_ORDINAL, NIL,
    CaseIsReal, CaseIsStub, CaseNode, CaseProc, CollectionFailed,
    Probe, ProbeKind,
)

logger = logging.getLogger(__name__)

MALFORMED_MESSAGE = "case body does not announce before doing anything else"

def stub_case(_runtime: object) -> None:
    """Default body of every slot nobody filled."""
    raise CaseIsStub()

class CaseSlots:
    """
    Per-module table of case slots.

    Every `@slots.case` takes the next counter value unless it passes an
    explicit `ordinal=`. Slots between declared ordinals stay stubs. The
    counter is the highest ordinal handed out, i.e. the K the collector
    walks down from.
    """

    def __init__(self) -> None:
        self._procs: Dict[int, CaseProc] = {}
        self.counter = MIN_ORDINAL

    @overload
    def case(self, proc: CaseProc) -> CaseProc: ...
    @overload
    def case(self, *, ordinal: Optional[int] = None) -> Callable[[CaseProc], CaseProc]: ...

    def case(self, proc=None, *, ordinal=None):
        def dec(fn: CaseProc) -> CaseProc:
            self.define(fn, ordinal)
            return fn

        if proc is not None:
            return dec(proc)

        return dec

    def define(self, proc: CaseProc, ordinal: Optional[int] = None) -> int:
        if ordinal is None:
            ordinal = self.counter + 1

        if ordinal < 0 or ordinal > MAX_ORDINAL:
            raise ValueError(f"case ordinal {ordinal} out of range 0..{MAX_ORDINAL}")

        if ordinal in self._procs:
            raise ValueError(f"case ordinal {ordinal} already defined")

        self._procs[ordinal] = proc
        self.counter = max(self.counter, ordinal)

        return ordinal

    def reserve(self, count: int = 1) -> None:
        """Advance the counter, leaving `count` stub slots behind."""
        if self.counter + count > MAX_ORDINAL:
            raise ValueError(f"case counter exceeds {MAX_ORDINAL}")
        self.counter += count

    def slot(self, ordinal: int) -> CaseProc:
        return self._procs.get(ordinal, stub_case)

    def __len__(self) -> int:
        return len(self._procs)

class CollectorRuntime:
    """Runtime for the discovery phase: the announce call unwinds the body."""

    def start_case(self, name: str, description: Optional[str] = None) -> None:
        raise CaseIsReal(name, description)

def probe(proc: CaseProc) -> Probe:
    """Ask a slot body what it is without running its assertions."""
    try:
        proc(CollectorRuntime())
    except CaseIsStub:
        return Probe(ProbeKind.STUB)
    except CaseIsReal as signal:
        return Probe(ProbeKind.REAL, name=signal.name, description=signal.description)
    except Exception as exc:
        return Probe(ProbeKind.MALFORMED, detail=f"{type(exc).__name__}: {exc}")

    return Probe(ProbeKind.MALFORMED, detail="returned without announcing")

def collect_cases(slots: CaseSlots, max_ordinal: Optional[int] = None) -> Tuple[List[CaseNode], int]:
    """
    Walk ordinals from K down to 0 and link the real ones.

    Nodes are prepended while walking downwards, so following `next` from the
    returned head visits cases in ascending (declaration) order. Returns the
    local node arena and the head index into it.
    """
    nodes: List[CaseNode] = []
    head = NIL
    ordinal = slots.counter if max_ordinal is None else max_ordinal

    while ordinal > MIN_ORDINAL:
        proc = slots.slot(ordinal)
        found = probe(proc)

        match found.kind:
            case ProbeKind.STUB:
                pass
            case ProbeKind.REAL:
                nodes.append(CaseNode(ordinal=ordinal, proc=proc, name=found.name or "", next=head))
                head = len(nodes) - 1
                logger.debug("slot %d holds case %r", ordinal, found.name)
            case _:
                logger.debug("slot %d is malformed: %s", ordinal, found.detail)
                raise CollectionFailed(ordinal, MALFORMED_MESSAGE)

        ordinal -= 1

    return nodes, head
