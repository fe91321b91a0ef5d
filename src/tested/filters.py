from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from lark import Lark, Transformer, UnexpectedInput, v_args

from .types import MAX_ORDINAL, MIN_ORDINAL, TestedError

class FilterMode(Enum):
    NONE = auto()
    BY_GROUP = auto()
    BY_GROUP_AND_CASE_NAME = auto()
    BY_GROUP_AND_CASE_ORDINAL = auto()
    BY_ADDRESS = auto()

# "group:case" or "group:*"; names run up to the separator.
ADDRESS_GRAMMAR = r"""
    start: NAME ":" target
    target: WILDCARD -> any_case
           | NAME     -> named_case

    NAME: /[^:*\s][^:\s]*/
    WILDCARD: "*"
"""

@dataclass(frozen=True)
class Address:
    group: str
    case: Optional[str]

class _AddressTidy(Transformer):
    @v_args(inline=True)
    def start(self, group, case):
        return Address(str(group), case)

    def any_case(self, _c):
        return None

    @v_args(inline=True)
    def named_case(self, name):
        return str(name)

_ADDRESS_PARSER: Optional[Lark] = None

def _address_parser() -> Lark:
    global _ADDRESS_PARSER

    if _ADDRESS_PARSER is None:
        _ADDRESS_PARSER = Lark(ADDRESS_GRAMMAR, parser="lalr", lexer="basic")

    return _ADDRESS_PARSER

def parse_address(text: str) -> Optional[Address]:
    """Parse "group:case" / "group:*"; returns None for anything else."""
    try:
        tree = _address_parser().parse(text.strip())
    except UnexpectedInput:
        return None

    return _AddressTidy().transform(tree)

@dataclass(frozen=True)
class Filter:
    """
    Which groups and cases to include.

    Constructors replace the mode outright; to combine filters narrow a
    Subset instead (every filter of a Subset must match).
    """
    mode: FilterMode = FilterMode.NONE
    group: Optional[str] = None
    case_name: Optional[str] = None
    ordinal: Optional[int] = None
    address: Optional[str] = None
    resolved: bool = True

    @classmethod
    def none(cls) -> Filter:
        return cls()

    @classmethod
    def by_group(cls, name: str) -> Filter:
        if not name:
            raise TestedError("group filter needs a group name")
        return cls(FilterMode.BY_GROUP, group=name)

    @classmethod
    def by_case_name(cls, group: str, case_name: str) -> Filter:
        if not group or not case_name:
            raise TestedError("case filter needs a group name and a case name")
        return cls(FilterMode.BY_GROUP_AND_CASE_NAME, group=group, case_name=case_name)

    @classmethod
    def by_case_ordinal(cls, group: str, ordinal: int) -> Filter:
        if not group:
            raise TestedError("case filter needs a group name")
        if ordinal <= MIN_ORDINAL or ordinal > MAX_ORDINAL:
            raise TestedError(f"case ordinal {ordinal} out of range 0..{MAX_ORDINAL}")
        return cls(FilterMode.BY_GROUP_AND_CASE_ORDINAL, group=group, ordinal=ordinal)

    @classmethod
    def by_address(cls, text: str) -> Filter:
        address = parse_address(text)

        if address is None:
            return cls(FilterMode.BY_ADDRESS, address=text, resolved=False)

        return cls(FilterMode.BY_ADDRESS, group=address.group, case_name=address.case, address=text)

    def matches_group(self, name: str) -> bool:
        if not self.resolved:
            return False

        if self.mode is FilterMode.NONE:
            return True

        return name == self.group

    def matches_case(self, name: str, ordinal: int) -> bool:
        if not self.resolved:
            return False

        match self.mode:
            case FilterMode.BY_GROUP_AND_CASE_NAME:
                return name == self.case_name
            case FilterMode.BY_GROUP_AND_CASE_ORDINAL:
                return ordinal == self.ordinal
            case FilterMode.BY_ADDRESS if self.case_name is not None:
                return name == self.case_name
            case _:
                return True

    def __str__(self) -> str:
        match self.mode:
            case FilterMode.NONE:
                return "all"
            case FilterMode.BY_GROUP:
                return f"group '{self.group}'"
            case FilterMode.BY_GROUP_AND_CASE_NAME:
                return f"case '{self.group}:{self.case_name}'"
            case FilterMode.BY_GROUP_AND_CASE_ORDINAL:
                return f"case '{self.group}' #{self.ordinal}"
            case _:
                return f"address '{self.address}'"
