#!/usr/bin/env python3
"""
Minimize a truth table to a sum of prime implicants.

Examples:
  python3 solve_logic.py                              # 7-segment segment 'a', BCD inputs
  python3 solve_logic.py --table 11100111             # index 0 first, N inferred
  python3 solve_logic.py --file seg.txt --strategy greedy
  python3 solve_logic.py --vars 4 --minterms 0 2 5 --dc 7 8 --compare --time

Output: one implicant per line over {0,1,-}, most significant variable first.
"""

import argparse
import logging
import sys
import time
from typing import List, Optional

from truth_table import Table, TableError
from qm_minimize import Implicant, MinimizeOptions, minimize_report, prime_implicants
from cover_solver import STRATEGIES, SolverError, essential_implicants

log = logging.getLogger("solve_logic")

# Segment 'a' of a 7-segment decoder; inputs D C B A (A = bit 0), codes 10-15 unused.
SEGMENT_A = [
    1, 0, 1, 1, 0, 1, 1, 1,
    1, 1, "-", "-", "-", "-", "-", "-",
]

def positive_float(text: str) -> float:
    try:
        x = float(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {text!r}")
    if not x > 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {text}")
    return x

def load_table(args: argparse.Namespace) -> Table:
    if args.table is not None:
        return Table.from_string(args.table, args.vars)
    if args.file is not None:
        with open(args.file, "r", encoding="utf-8") as f:
            lines = [ln.split("#", 1)[0] for ln in f]
        return Table.from_string(" ".join(lines), args.vars)
    if args.minterms is not None:
        if args.vars is None:
            raise TableError("--minterms needs --vars")
        return Table.from_minterms(args.vars, args.minterms, args.dc or [])
    return Table(4, SEGMENT_A)

def print_primes(primes: List[Implicant], table: Table) -> None:
    ess = set(essential_implicants(primes, table.minterms()))
    print(f"Prime implicants ({len(primes)}):")
    for p in sorted(primes, key=str):
        mark = "  *essential" if p in ess else ""
        print(f"  {p}  covers {sorted(p.constituents)}{mark}")

def run(table: Table, opts: MinimizeOptions, show_time: bool) -> List[Implicant]:
    result = minimize_report(table, opts.strategy, opts.time_limit, opts.fallback)
    if result.fell_back:
        print(f"# {opts.strategy} solver failed, used {result.strategy}", file=sys.stderr)
    for imp in result.implicants:
        print(imp)
    if show_time:
        print(f"# {result.strategy}: {len(result.implicants)} terms in {result.elapsed:.4f}s",
              file=sys.stderr)
    return result.implicants

def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    src = parser.add_mutually_exclusive_group()
    src.add_argument("--table", type=str, help="outputs as a string over 0/1/-, index 0 first")
    src.add_argument("--file", type=str, help="file holding the outputs ('#' starts a comment)")
    src.add_argument("--minterms", nargs="*", type=int, help="indices where f=1")
    parser.add_argument("--dc", nargs="*", type=int, default=[], help="don't-care indices")
    parser.add_argument("--vars", type=int, default=None, help="number of input variables")
    parser.add_argument("--strategy", choices=sorted(STRATEGIES), default="exact")
    parser.add_argument("--time-limit", type=positive_float, default=None,
                        help="seconds allowed for the exact solver")
    parser.add_argument("--fallback", choices=["greedy"], default=None,
                        help="strategy to use if the exact solver fails or times out")
    parser.add_argument("--compare", action="store_true", help="run every strategy")
    parser.add_argument("--primes", action="store_true", help="list prime implicants first")
    parser.add_argument("--time", action="store_true", help="report elapsed time per phase")
    parser.add_argument("-v", "--verbose", action="count", default=0)
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.WARNING - 10 * min(args.verbose, 2),
        format="%(asctime)s %(name)s %(levelname)s: %(message)s")

    try:
        table = load_table(args)
    except (TableError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    log.info("table: N=%d, %d minterms, %d don't-cares",
             table.n_vars, len(table.minterms()), len(table.dont_cares()))

    if args.primes or args.time:
        t0 = time.time()
        primes = prime_implicants(table)
        if args.time:
            print(f"# prime implicants: {len(primes)} in {time.time() - t0:.4f}s", file=sys.stderr)
        if args.primes:
            print_primes(primes, table)

    strategies = sorted(STRATEGIES) if args.compare else [args.strategy]
    try:
        for name in strategies:
            if args.compare:
                print(f"--- {name} ---")
            opts = MinimizeOptions(name, args.time_limit, args.fallback)
            run(table, opts, args.time)
    except SolverError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0

if __name__ == "__main__":
    sys.exit(main())
