from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional, Sequence, Tuple

from .filters import Filter
from .iterator import CaseEvent, GroupStart, SubsetIterator
from .reporter import StdoutReporter
from .runtime import Dispatcher, ExportRuntime
from .slots import MALFORMED_MESSAGE
from .types import (
    CaseFiltered, CaseIsReal, CaseNode, CollectionFailed, Exporter,
    ExportStopped, GroupNode, Observer, ProcessCorrupted, RunInfo,
)

if TYPE_CHECKING:
    from .storage import Storage

logger = logging.getLogger(__name__)

class Subset:
    """
    A view of the registry plus the filters that select from it.

    Narrowing returns a new Subset with one more filter; every filter must
    match, so a derived Subset never selects more than its parent.
    """

    def __init__(self, storage: Storage, filters: Sequence[Filter] = ()):
        self.storage = storage
        self.filters: Tuple[Filter, ...] = tuple(filters)

    def narrow(self, flt: Filter) -> Subset:
        return Subset(self.storage, self.filters + (flt,))

    def by_group_name(self, name: str) -> Subset:
        return self.narrow(Filter.by_group(name))

    def by_case_name(self, group: str, case_name: str) -> Subset:
        return self.narrow(Filter.by_case_name(group, case_name))

    def by_case_ordinal(self, group: str, ordinal: int) -> Subset:
        return self.narrow(Filter.by_case_ordinal(group, ordinal))

    def by_address(self, text: str) -> Subset:
        return self.narrow(Filter.by_address(text))

    def iterate(self) -> SubsetIterator:
        return SubsetIterator(self.storage, self.filters)

    def _raise_collection_failure(self) -> None:
        failure = self.storage.collection_failure

        # The same instance is raised on every attempt; start each from a clean traceback.
        if failure is not None:
            raise failure.with_traceback(None)

    def run(self, observer: Optional[Observer] = None) -> RunInfo:
        """Execute every selected case and return the statistics."""
        self._raise_collection_failure()

        if observer is None:
            observer = StdoutReporter()

        dispatcher = Dispatcher(observer, self.filters)

        try:
            for event in self.iterate():
                match event:
                    case GroupStart():
                        dispatcher.start_group(event.name, event.cases_in_group)
                    case CaseEvent():
                        dispatcher.run_one_case(event.group, event.node)
        except ProcessCorrupted as signal:
            signal.stats = dispatcher.stats
            raise

        return dispatcher.stats

    def export(self, exporter: Exporter) -> int:
        """
        Report every selected case to `exporter` without running it.

        Each case body is re-probed to confirm its announced name. Returns
        the number of cases handed to on_case(), including the one whose
        on_case() raised ExportStopped; that ends the traversal early and
        skips on_done().
        """
        self._raise_collection_failure()

        rt = ExportRuntime(self.filters)
        exported = 0

        try:
            for event in self.iterate():
                match event:
                    case GroupStart():
                        exporter.on_group(event.name)
                    case CaseEvent():
                        name = _reprobe(rt, event.group, event.node)
                        if name is None:
                            continue
                        exported += 1
                        exporter.on_case(name, event.node.ordinal, event.node.proc)
        except ExportStopped:
            logger.debug("export stopped by exporter after %d case(s)", exported)
            return exported

        exporter.on_done()

        return exported

def _reprobe(rt: ExportRuntime, group: GroupNode, node: CaseNode) -> Optional[str]:
    rt.begin(node.ordinal)

    try:
        node.proc(rt)
    except CaseIsReal as signal:
        return signal.name
    except CaseFiltered:
        return None
    except Exception as exc:
        failure = CollectionFailed(node.ordinal, MALFORMED_MESSAGE)
        failure.annotate(group.name, group.file_name)
        raise failure from exc

    failure = CollectionFailed(node.ordinal, MALFORMED_MESSAGE)
    failure.annotate(group.name, group.file_name)
    raise failure
