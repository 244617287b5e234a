#!/usr/bin/env python3
# Quine–McCluskey prime implicant generation + minimum cover selection.
# Input: a truth_table.Table (minterms, don't-cares, zeros).
# Output: list of Implicant; str(implicant) is the cube over {0,1,-},
# most significant variable first.

from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, Iterator, List, Optional, Tuple

from truth_table import Table, Value
from cover_solver import CoverResult, select_cover

Cube = Tuple[Value, ...]  # coordinate k = input variable k

def int_to_values(x: int, n: int) -> Cube:
    return tuple(Value.ONE if (x >> i) & 1 else Value.ZERO for i in range(n))  # little-endian


# ---------- implicant ----------
class Implicant:
    """
    A cube of the Boolean n-cube plus the minterms it was built from.

    Identity is the value vector only; `constituents` is payload and takes no
    part in ==/hash. Instances are never mutated after construction.
    """

    __slots__ = ("values", "constituents")

    def __init__(self, values: Iterable[Value], constituents: Iterable[int] = ()) -> None:
        self.values: Cube = tuple(values)
        self.constituents: FrozenSet[int] = frozenset(constituents)

    @classmethod
    def from_index(cls, idx: int, n_vars: int, is_minterm: bool) -> "Implicant":
        if not 0 <= idx < (1 << n_vars):
            raise ValueError(f"index {idx} outside [0, {1 << n_vars})")
        return cls(int_to_values(idx, n_vars), (idx,) if is_minterm else ())

    @classmethod
    def from_string(cls, text: str, constituents: Iterable[int] = ()) -> "Implicant":
        # text is most-significant-first, values are stored LSB first
        return cls((Value.parse(ch) for ch in reversed(text)), constituents)

    @property
    def width(self) -> int:
        return len(self.values)

    def free_count(self) -> int:
        return sum(1 for v in self.values if v is Value.DONT_CARE)

    def covers(self, idx: int) -> bool:
        for k, v in enumerate(self.values):
            if v is Value.DONT_CARE:
                continue
            if ((idx >> k) & 1) != (v is Value.ONE):
                return False
        return True

    def try_merge(self, other: "Implicant") -> Optional["Implicant"]:
        return try_merge(self, other)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Implicant):
            return NotImplemented
        return self.values == other.values

    def __hash__(self) -> int:
        return hash(self.values)

    def __lt__(self, other: "Implicant") -> bool:
        return len(self.constituents) < len(other.constituents)

    def __str__(self) -> str:
        return "".join(v.value for v in reversed(self.values))

    def __repr__(self) -> str:
        return f"Implicant({str(self)!r}, covers={sorted(self.constituents)})"


def try_merge(a: Implicant, b: Implicant) -> Optional[Implicant]:
    """
    Consensus rule: merge iff a and b differ in exactly one coordinate and that
    coordinate is a 0/1 pair. The result is free at that coordinate.
    """
    if a.width != b.width:
        raise ValueError(f"cannot merge implicants of width {a.width} and {b.width}")
    diff = -1
    for k, (x, y) in enumerate(zip(a.values, b.values)):
        if x is y:
            continue
        if x is Value.DONT_CARE or y is Value.DONT_CARE or diff >= 0:
            return None
        diff = k
    if diff < 0:
        return None
    values = list(a.values)
    values[diff] = Value.DONT_CARE
    return Implicant(values, a.constituents | b.constituents)


# ---------- prime implicant generation ----------
@dataclass
class Generation:
    level: int                   # number of free coordinates in every member
    implicants: List[Implicant]
    primes: List[Implicant]      # members that merged with nothing

def seed_implicants(table: Table) -> List[Implicant]:
    return [Implicant.from_index(i, table.n_vars, table.is_minterm(i))
            for i in table.care_indices()]

def group_key(imp: Implicant) -> Tuple[Tuple[int, ...], int]:
    # (free coordinates, number of ONEs); only keys (f, k) and (f, k+1) can merge
    free = tuple(k for k, v in enumerate(imp.values) if v is Value.DONT_CARE)
    return free, sum(1 for v in imp.values if v is Value.ONE)

def merge_pass(implicants: List[Implicant]) -> Tuple[List[Implicant], List[bool]]:
    """
    One Quine–McCluskey pass. Implicants are bucketed by free coordinates and
    ONE count, and only neighbouring buckets are compared; every other pair
    differs in a '-' or in more than one bit.
    Returns (next generation, merged flags aligned with `implicants`).
    """
    groups: Dict[Tuple[Tuple[int, ...], int], List[int]] = {}
    for i, imp in enumerate(implicants):
        groups.setdefault(group_key(imp), []).append(i)

    merged = [False] * len(implicants)
    # values -> accumulated constituents; duplicates union into the first entry
    next_gen: Dict[Cube, FrozenSet[int]] = {}
    for (free, ones), lower in groups.items():
        upper = groups.get((free, ones + 1))
        if not upper:
            continue
        for i in lower:
            a = implicants[i]
            for j in upper:
                c = try_merge(a, implicants[j])
                if c is None:
                    continue
                merged[i] = merged[j] = True
                prev = next_gen.get(c.values)
                next_gen[c.values] = c.constituents if prev is None else prev | c.constituents
    return [Implicant(v, cs) for v, cs in next_gen.items()], merged

def iter_generations(table: Table) -> Iterator[Generation]:
    implicants = seed_implicants(table)
    level = 0
    while implicants:
        next_gen, merged = merge_pass(implicants)
        primes = [imp for imp, m in zip(implicants, merged) if not m]
        yield Generation(level, implicants, primes)
        implicants = next_gen
        level += 1

def prime_implicants(table: Table) -> List[Implicant]:
    primes: List[Implicant] = []
    for gen in iter_generations(table):
        primes.extend(gen.primes)
    return primes


# ---------- minimization ----------
@dataclass
class MinimizeOptions:
    strategy: str = "exact"
    time_limit: Optional[float] = None   # seconds, exact strategy only
    fallback: Optional[str] = None       # strategy to run if the primary solver fails

def minimize_report(table: Table, strategy="exact", time_limit: Optional[float] = None,
                    fallback: Optional[str] = None) -> CoverResult:
    primes = prime_implicants(table)
    return select_cover(primes, table.minterms(), strategy,
                        time_limit=time_limit, fallback=fallback)

def minimize(table: Table, strategy="exact", time_limit: Optional[float] = None,
             fallback: Optional[str] = None) -> List[Implicant]:
    """
    Minimal (exact) or near-minimal (greedy) list of prime implicants covering
    every minterm of `table`. Don't-cares are used for merging only.
    """
    return minimize_report(table, strategy, time_limit, fallback).implicants
