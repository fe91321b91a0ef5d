from __future__ import annotations

from typing import List

import pytest

from tests.support.harness import (
    CollectionFailed,
    Storage,
    add_group,
    eager_case,
    make_slots,
    passing,
    run_recorded,
    silent_case,
)
from tested import (
    NIL,
    CaseSlots,
    ProbeKind,
    Runtime,
    collect_cases,
    probe,
    stub_case,
)
from tested.slots import MALFORMED_MESSAGE


def _linked(nodes, head) -> List[int]:
    order = []
    cur = head
    while cur != NIL:
        order.append(nodes[cur].ordinal)
        cur = nodes[cur].next
    return order


def test_cases_link_in_declaration_order() -> None:
    slots = make_slots({5: passing("e"), 3: passing("c"), 1: passing("a")})

    nodes, head = collect_cases(slots)

    assert _linked(nodes, head) == [1, 3, 5]
    assert [nodes[i].name for i in (head, nodes[head].next)] == ["a", "c"]


def test_cases_execute_in_declaration_order() -> None:
    calls: List[str] = []
    storage = Storage()
    add_group(
        storage,
        "g",
        {5: passing("five", calls), 3: passing("three", calls), 1: passing("one", calls)},
    )

    run_recorded(storage.get_all())

    assert calls == ["one", "three", "five"]


def test_stubs_between_real_slots_contribute_nothing() -> None:
    slots = make_slots({0: passing("first"), 4: passing("last")})

    nodes, head = collect_cases(slots)

    assert len(nodes) == 2
    assert _linked(nodes, head) == [0, 4]


def test_empty_slot_table_collects_nothing() -> None:
    nodes, head = collect_cases(CaseSlots())

    assert nodes == []
    assert head == NIL


def test_explicit_max_ordinal_limits_walk() -> None:
    slots = make_slots({1: passing("a"), 6: passing("b")})

    nodes, head = collect_cases(slots, max_ordinal=3)

    assert _linked(nodes, head) == [1]


@pytest.mark.parametrize(
    "proc, kind, name",
    [
        pytest.param(passing("Real"), ProbeKind.REAL, "Real", id="announces"),
        pytest.param(stub_case, ProbeKind.STUB, None, id="stub"),
        pytest.param(silent_case, ProbeKind.MALFORMED, None, id="returns-silently"),
        pytest.param(eager_case, ProbeKind.MALFORMED, None, id="raises-before-announce"),
    ],
)
def test_probe_classifies_slot(proc, kind: ProbeKind, name) -> None:
    found = probe(proc)

    assert found.kind is kind
    assert found.name == name


def test_probe_does_not_run_case_body() -> None:
    calls: List[str] = []

    found = probe(passing("Quiet", calls))

    assert found.kind is ProbeKind.REAL
    assert calls == []


def test_probe_keeps_description() -> None:
    def described(runner: Runtime) -> None:
        runner.start_case("Named", "what it checks")

    found = probe(described)

    assert found.description == "what it checks"


@pytest.mark.parametrize(
    "bad",
    [
        pytest.param(silent_case, id="returns-silently"),
        pytest.param(eager_case, id="raises-before-announce"),
    ],
)
def test_malformed_slot_aborts_collection(bad) -> None:
    slots = make_slots({0: passing("a"), 2: bad, 3: passing("b")})

    with pytest.raises(CollectionFailed) as exc_info:
        collect_cases(slots)

    assert exc_info.value.ordinal == 2
    assert exc_info.value.message == MALFORMED_MESSAGE


def test_decorator_assigns_sequential_ordinals() -> None:
    slots = CaseSlots()

    @slots.case
    def first(runner: Runtime) -> None:
        runner.start_case("first")

    @slots.case(ordinal=7)
    def pinned(runner: Runtime) -> None:
        runner.start_case("pinned")

    @slots.case
    def after(runner: Runtime) -> None:
        runner.start_case("after")

    assert slots.slot(0) is first
    assert slots.slot(7) is pinned
    assert slots.slot(8) is after
    assert slots.slot(3) is stub_case
    assert slots.counter == 8
    assert len(slots) == 3


def test_reserve_leaves_stub_slots() -> None:
    slots = CaseSlots()
    slots.reserve(3)
    ordinal = slots.define(passing("x"))

    assert ordinal == 3
    assert [slots.slot(n) is stub_case for n in range(3)] == [True, True, True]


@pytest.mark.parametrize(
    "ordinal",
    [pytest.param(-1, id="negative"), pytest.param(128, id="past-counter-width")],
)
def test_out_of_range_ordinal_rejected(ordinal: int) -> None:
    with pytest.raises(ValueError):
        CaseSlots().define(passing("x"), ordinal)


def test_duplicate_ordinal_rejected() -> None:
    slots = CaseSlots()
    slots.define(passing("x"), 4)

    with pytest.raises(ValueError, match="already defined"):
        slots.define(passing("y"), 4)


def test_real_case_is_reinvoked_during_run() -> None:
    calls: List[str] = []
    storage = Storage()
    add_group(storage, "g", [passing("again", calls)])

    run_recorded(storage.get_all())
    run_recorded(storage.get_all())

    assert calls == ["again", "again"]
