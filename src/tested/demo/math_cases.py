"""Test group for some basic math operations."""
from __future__ import annotations

from typing import Optional

from ..asserts import expect_eq, fail_if
from ..slots import CaseSlots
from ..storage import Group, Storage
from ..types import Runtime

cases = CaseSlots()

@cases.case
def addition(runner: Runtime) -> None:
    runner.start_case("Addition")
    fail_if(2 + 2 != 4, "Addition does not work")

@cases.case
def multiplication(runner: Runtime) -> None:
    runner.start_case("Multiplication")
    fail_if(2 * 2 != 4, "Multiplication does not work")

@cases.case
def integer_division(runner: Runtime) -> None:
    runner.start_case("IntegerDivision", "floor division rounds towards negative infinity")
    expect_eq(7 // 2, 3)
    expect_eq(-7 // 2, -4)

def link_math_tests(storage: Optional[Storage] = None) -> None:
    storage = storage if storage is not None else Storage.instance()

    if storage.find_group("math") is None:
        Group("math", cases, __file__, storage)
