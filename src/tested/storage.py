from __future__ import annotations

import logging
from typing import Iterator, List, Optional, Sequence, Tuple

from .slots import CaseSlots, collect_cases
from .subset import Subset
from .types import NIL, CaseNode, CollectionFailed, GroupNode

logger = logging.getLogger(__name__)

class Storage:
    """
    Registry of discovered groups.

    Groups and cases live in two arenas linked by integer indices. The
    process-wide instance is built on first access and never torn down;
    it is only mutated while test modules link their groups.
    """

    _instance: Optional[Storage] = None

    def __init__(self) -> None:
        self._groups: List[GroupNode] = []
        self._cases: List[CaseNode] = []
        self._head = NIL
        self._tail = NIL
        self.collection_failure: Optional[CollectionFailed] = None

    @classmethod
    def instance(cls) -> Storage:
        if cls._instance is None:
            cls._instance = cls()

        return cls._instance

    def get_all(self) -> Subset:
        return Subset(self)

    def add_group(self, group: GroupNode, cases: Sequence[CaseNode] = (), head: int = NIL) -> int:
        """Append a discovered group; `cases`/`head` come from collect_cases()."""
        offset = len(self._cases)

        for node in cases:
            if node.next != NIL:
                node.next += offset
            self._cases.append(node)

        group.case_head = head + offset if head != NIL else NIL
        self._groups.append(group)
        index = len(self._groups) - 1

        if self._tail == NIL:
            self._head = self._tail = index
        else:
            self._groups[self._tail].next = index

        # The cached tail can lag behind if a linked chain was appended.
        while self._groups[self._tail].next != NIL:
            self._tail = self._groups[self._tail].next

        logger.debug("registered group %r from %s with %d case(s)", group.name, group.file_name, len(cases))

        return index

    def add_collection_failure(self, failure: CollectionFailed) -> None:
        # First failure wins; later ones are dropped on purpose.
        if self.collection_failure is not None:
            logger.warning("dropping collection failure, one is already recorded: %s", failure)
            return

        self.collection_failure = failure

    def clear_collection_failure(self) -> None:
        self.collection_failure = None

    def group_at(self, index: int) -> GroupNode:
        return self._groups[index]

    def case_at(self, index: int) -> CaseNode:
        return self._cases[index]

    @property
    def first_group(self) -> int:
        return self._head

    def groups(self) -> Iterator[GroupNode]:
        cur = self._head

        while cur != NIL:
            group = self._groups[cur]
            yield group
            cur = group.next

    def cases(self, group: GroupNode) -> Iterator[CaseNode]:
        cur = group.case_head

        while cur != NIL:
            node = self._cases[cur]
            yield node
            cur = node.next

    def find_group(self, name: str) -> Optional[GroupNode]:
        for group in self.groups():
            if group.name == name:
                return group

        return None

class Group:
    """
    Declares one test group: discovers the slots of a module and registers
    them, or records why discovery failed.
    """

    def __init__(self, name: str, slots: CaseSlots, file_name: str, storage: Optional[Storage] = None):
        self.name = name
        self.file_name = file_name
        self.storage = storage if storage is not None else Storage.instance()
        self.failure: Optional[CollectionFailed] = None

        try:
            nodes, head = collect_cases(slots)
        except CollectionFailed as failure:
            failure.annotate(name, file_name)
            self.failure = failure
            self.storage.add_collection_failure(failure)
            return

        self.index = self.storage.add_group(GroupNode(name=name, file_name=file_name), nodes, head)

    @property
    def registered(self) -> bool:
        return self.failure is None

    def case_names(self) -> List[Tuple[int, str]]:
        if self.failure is not None:
            return []

        group = self.storage.group_at(self.index)
        return [(node.ordinal, node.name) for node in self.storage.cases(group)]
