from __future__ import annotations

import argparse
import logging
import sys
import traceback
from typing import List, Optional, TextIO

from .demo import link_demo_tests
from .storage import Storage
from .subset import Subset
from .types import CaseProc, CollectionFailed, ProcessCorrupted, RunInfo, TestedError
from .utils import configure_logging, debug_py_trace_enabled

RET_OK = 0
RET_TESTS_FAILED = 1
RET_FAILED_TO_START = 2

BANNER_RULE = "=" * 71

class ListExporter:
    """Prints the selected cases as `group:Name  #NN` lines."""

    def __init__(self, stream: TextIO):
        self.stream = stream
        self._group = ""

    def on_group(self, name: str) -> None:
        self._group = name

    def on_case(self, name: str, ordinal: int, proc: CaseProc) -> None:
        print(f"{self._group}:{name}  #{ordinal:02d}", file=self.stream)

    def on_done(self) -> None:
        pass

def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="tested-demo", description="Run the registered demo test cases.")
    ap.add_argument("--group", help="Only run cases of this group")
    ap.add_argument("--case", help="Only run the case with this name (needs --group)")
    ap.add_argument("--ordinal", type=int, help="Only run the case with this ordinal (needs --group)")
    ap.add_argument("--address", help="Select cases by address, 'group:case' or 'group:*'")
    ap.add_argument("--list", action="store_true", help="List matching cases instead of running them")
    ap.add_argument("-v", "--verbose", action="count", default=0, help="More log output (repeatable)")
    return ap

def select_subset(args: argparse.Namespace, storage: Storage) -> Subset:
    subset = storage.get_all()

    if args.case is not None:
        subset = subset.by_case_name(args.group, args.case)
    elif args.ordinal is not None:
        subset = subset.by_case_ordinal(args.group, args.ordinal)
    elif args.group is not None:
        subset = subset.by_group_name(args.group)

    if args.address is not None:
        subset = subset.by_address(args.address)

    return subset

def print_collection_failure(failure: CollectionFailed, out: TextIO) -> None:
    print(f"Error: {failure.message}", file=out)
    print(f"   In    '{failure.file_name}'", file=out)
    print(f"   Group '{failure.group_name}'", file=out)
    print(f"   Case  #{failure.ordinal}", file=out)
    print(file=out)

def print_totals(stats: RunInfo, out: TextIO) -> None:
    print("Test run completed:", file=out)
    print(f"   Passed : {stats.passed}", file=out)
    print(f"   Skipped: {stats.skipped}", file=out)
    print(f"   Failed : {stats.failed}", file=out)

def main(argv: Optional[List[str]] = None, storage: Optional[Storage] = None) -> int:
    ap = build_arg_parser()
    args = ap.parse_args(argv)

    if (args.case is not None or args.ordinal is not None) and args.group is None:
        ap.error("--case and --ordinal need --group")
    if args.case is not None and args.ordinal is not None:
        ap.error("--case and --ordinal are mutually exclusive")

    if args.verbose:
        configure_logging(logging.INFO if args.verbose == 1 else logging.DEBUG)
    else:
        configure_logging()

    out = sys.stdout
    storage = storage if storage is not None else Storage.instance()
    link_demo_tests(storage)
    try:
        subset = select_subset(args, storage)
    except TestedError as exc:
        ap.error(str(exc))

    try:
        if args.list:
            subset.export(ListExporter(out))
            return RET_OK

        print("RunTest: run selected tests\n", file=out)
        stats = subset.run()
    except CollectionFailed as failure:
        print_collection_failure(failure, sys.stderr)
        if debug_py_trace_enabled():
            traceback.print_exc()
        return RET_FAILED_TO_START
    except ProcessCorrupted as signal:
        print(f"\n{BANNER_RULE}", file=out)
        print(f"Run aborted: {signal}", file=sys.stderr)
        if debug_py_trace_enabled():
            traceback.print_exc()
        if signal.stats is not None:
            print_totals(signal.stats, out)
        return RET_TESTS_FAILED

    print(f"\n{BANNER_RULE}", file=out)
    print_totals(stats, out)

    return RET_TESTS_FAILED if stats.is_failed() else RET_OK

if __name__ == "__main__":
    sys.exit(main())
