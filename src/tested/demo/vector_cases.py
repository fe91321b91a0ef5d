"""Test group for list behaviour."""
from __future__ import annotations

from typing import List, Optional

from ..asserts import expect, fail_if
from ..slots import CaseSlots
from ..storage import Group, Storage
from ..types import Runtime

cases = CaseSlots()

@cases.case
def empty_by_default(runner: Runtime) -> None:
    runner.start_case("EmptyByDefault")

    vec: List[int] = []
    expect(not vec, "List must be empty by default")

@cases.case
def add_element(runner: Runtime) -> None:
    runner.start_case("AddElement")

    vec: List[int] = []
    vec.append(1)
    expect(len(vec) == 1)
    fail_if(not vec)
    expect(vec[0] == 1)

def link_vector_tests(storage: Optional[Storage] = None) -> None:
    storage = storage if storage is not None else Storage.instance()

    if storage.find_group("vector") is None:
        Group("vector", cases, __file__, storage)
