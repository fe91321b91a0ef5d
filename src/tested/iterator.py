from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator, Sequence, Tuple, Union

from .filters import Filter
from .types import NIL, CaseNode, GroupNode

if TYPE_CHECKING:
    from .storage import Storage

@dataclass(frozen=True)
class GroupStart:
    name: str
    file_name: str
    cases_in_group: int

@dataclass(frozen=True)
class CaseEvent:
    group: GroupNode
    node: CaseNode

@dataclass(frozen=True)
class Done:
    pass

Event = Union[GroupStart, CaseEvent, Done]

class SubsetIterator:
    """
    Lazy walk over the groups and cases that pass every filter.

    Emits GroupStart once per visited group (only for groups with at least
    one matching case), then that group's CaseEvents, and finally Done.
    Advancing after Done keeps returning Done; restart() rewinds.
    """

    def __init__(self, storage: Storage, filters: Sequence[Filter] = ()):
        self.storage = storage
        self.filters: Tuple[Filter, ...] = tuple(filters)
        self.restart()

    def restart(self) -> None:
        self._group = self.storage.first_group
        self._case = NIL
        self._in_group = False
        self._done = False

    def group_matches(self, group: GroupNode) -> bool:
        return all(f.matches_group(group.name) for f in self.filters)

    def case_matches(self, node: CaseNode) -> bool:
        return all(f.matches_case(node.name, node.ordinal) for f in self.filters)

    def _next_matching_case(self, cur: int) -> int:
        while cur != NIL:
            node = self.storage.case_at(cur)
            if self.case_matches(node):
                return cur
            cur = node.next

        return NIL

    def _count_matching(self, group: GroupNode) -> int:
        return sum(1 for node in self.storage.cases(group) if self.case_matches(node))

    def advance(self) -> Event:
        if self._done:
            return Done()

        if self._in_group:
            group = self.storage.group_at(self._group)
            cur = self._next_matching_case(self._case)

            if cur != NIL:
                node = self.storage.case_at(cur)
                self._case = node.next
                return CaseEvent(group, node)

            self._in_group = False
            self._group = group.next

        while self._group != NIL:
            group = self.storage.group_at(self._group)

            if self.group_matches(group):
                first = self._next_matching_case(group.case_head)

                if first != NIL:
                    self._in_group = True
                    self._case = first
                    return GroupStart(group.name, group.file_name, self._count_matching(group))

            self._group = group.next

        self._done = True

        return Done()

    def __iter__(self) -> Iterator[Event]:
        self.restart()

        while True:
            event = self.advance()
            yield event

            if isinstance(event, Done):
                return
