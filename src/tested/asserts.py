"""Flow-control helpers for case bodies.

Each helper either returns normally or raises one of the control signals the
dispatcher understands.
"""
from __future__ import annotations

from typing import Any, NoReturn

from .types import CaseFailed, CaseSkipped, ProcessCorrupted

def skip(message: str = "") -> NoReturn:
    raise CaseSkipped(message)

def fail(message: str = "") -> NoReturn:
    raise CaseFailed(message)

def fail_if(condition: bool, message: str = "") -> None:
    if condition:
        fail(message)

def expect(condition: bool, message: str = "") -> None:
    fail_if(not condition, message)

def expect_not(condition: bool, message: str = "") -> None:
    fail_if(condition, message)

def expect_eq(actual: Any, expected: Any, message: str = "") -> None:
    if actual == expected:
        return

    if not message:
        message = f"expected {expected!r}, got {actual!r}"

    fail(message)

def panic(message: str = "") -> NoReturn:
    """Declare the process untrustworthy; stops the whole run."""
    raise ProcessCorrupted(message)
