#!/usr/bin/env python3
"""
Cover benchmark: exact (ILP) vs greedy cover on random truth tables.

- Sweeps n_vars; each trial draws a table with P(1)=p_one, P(-)=p_dc.
- Records prime count, cover size per strategy, and solve times.
- Saves CSV + JSON under --out (plot with plot_cover_bench.py).
"""

import os, sys, time, argparse, json, csv
from typing import Dict, List, Optional
import numpy as np

from truth_table import Table, Value
from qm_minimize import prime_implicants
from cover_solver import CoverError, CoverResult, select_cover

# ============ Tables ============
def random_table(n_vars: int, p_one: float, p_dc: float, rng: np.random.Generator) -> Table:
    if p_one < 0 or p_dc < 0 or p_one + p_dc > 1:
        raise ValueError(f"bad probabilities p_one={p_one} p_dc={p_dc}")
    draws = rng.choice(3, size=1 << n_vars, p=[1.0 - p_one - p_dc, p_one, p_dc])
    symbols = (Value.ZERO, Value.ONE, Value.DONT_CARE)
    return Table(n_vars, [symbols[int(d)] for d in draws])

def covered_minterms(result: CoverResult, table: Table) -> set:
    out = set()
    for imp in result.implicants:
        out |= imp.constituents
    return out & table.minterms()

# ============ Trials ============
def run_trial(table: Table, time_limit: Optional[float] = None) -> Dict:
    t0 = time.time()
    primes = prime_implicants(table)
    t_primes = time.time() - t0
    universe = table.minterms()

    row = {
        "n_vars": table.n_vars,
        "minterms": len(universe),
        "dont_cares": len(table.dont_cares()),
        "primes": len(primes),
        "t_primes": t_primes,
    }
    for name in ("exact", "greedy"):
        res = select_cover(primes, universe, name, time_limit=time_limit,
                           fallback="greedy" if name == "exact" else None)
        if covered_minterms(res, table) != universe:
            raise CoverError(f"{name} cover misses {sorted(universe - covered_minterms(res, table))}")
        row[f"{name}_terms"] = len(res.implicants)
        row[f"t_{name}"] = res.elapsed
        if name == "exact":
            row["exact_fell_back"] = res.fell_back
    return row

# ============ CLI main ============
def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser()
    parser.add_argument("--out", type=str, default="results")
    parser.add_argument("--timestamp", type=str, default="")
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--vars", type=int, nargs="+", default=[3, 4, 5, 6, 7, 8])
    parser.add_argument("--trials", type=int, default=20)
    parser.add_argument("--p-one", type=float, default=0.4)
    parser.add_argument("--p-dc", type=float, default=0.1)
    parser.add_argument("--time-limit", type=float, default=10.0)
    args = parser.parse_args(argv)

    os.makedirs(args.out, exist_ok=True)
    stamp = args.timestamp or time.strftime("%Y%m%d-%H%M%S")
    out_csv = os.path.join(args.out, f"cover_bench_{stamp}.csv")
    out_json = os.path.join(args.out, f"cover_bench_{stamp}.json")

    rng = np.random.default_rng(args.seed)
    rows = []
    t0 = time.time()
    for n in args.vars:
        print(f"\n== n={n} (p_one={args.p_one}, p_dc={args.p_dc}) ==")
        for trial in range(args.trials):
            table = random_table(n, args.p_one, args.p_dc, rng)
            row = run_trial(table, args.time_limit)
            row["trial"] = trial
            rows.append(row)
        sub = [r for r in rows if r["n_vars"] == n]
        gap = np.mean([r["greedy_terms"] - r["exact_terms"] for r in sub])
        worse = sum(1 for r in sub if r["greedy_terms"] > r["exact_terms"])
        print(f"  primes≈{np.mean([r['primes'] for r in sub]):6.1f}  "
              f"exact≈{np.mean([r['exact_terms'] for r in sub]):5.2f}  "
              f"greedy≈{np.mean([r['greedy_terms'] for r in sub]):5.2f}  "
              f"gap={gap:4.2f}  greedy worse in {worse}/{len(sub)}")
    print(f"\nTotal time: {time.time() - t0:.2f}s")

    if not rows:
        print("No rows.", file=sys.stderr)
        return
    # write CSV
    with open(out_csv, "w", newline="") as f:
        w = csv.DictWriter(f, fieldnames=list(rows[0].keys()))
        w.writeheader()
        w.writerows(rows)
    # write JSON
    with open(out_json, "w") as f:
        json.dump(rows, f, indent=2)
    print(f"wrote {out_csv}")

if __name__ == "__main__":
    main()
