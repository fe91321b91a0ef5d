"""Demo groups used by the command-line runner."""
from __future__ import annotations

from typing import Optional

from ..storage import Storage
from .math_cases import link_math_tests
from .vector_cases import link_vector_tests

def link_demo_tests(storage: Optional[Storage] = None) -> None:
    link_math_tests(storage)
    link_vector_tests(storage)
