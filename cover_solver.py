# Minimum set cover over prime implicants.
#
# Two interchangeable strategies behind CoverStrategy:
#   exact  - 0/1 integer program (scipy.optimize.milp / HiGHS), provably minimum
#   greedy - maximum-coverage heuristic, ln(n)-competitive, no solver needed
#
# Candidates are anything with a `constituents` set (qm_minimize.Implicant);
# each covers `constituents & universe`. Candidates covering nothing are never
# selected, so an empty universe always yields an empty cover.

import logging
import time
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional, Sequence, Set, Type

import numpy as np
from scipy.optimize import Bounds, LinearConstraint, milp

log = logging.getLogger(__name__)


class CoverError(Exception):
    pass

class UncoverableError(CoverError):
    """Some universe element is covered by no candidate (malformed input)."""

    def __init__(self, missing: Sequence[int]) -> None:
        self.missing = sorted(missing)
        super().__init__(f"no candidate covers {self.missing}")

class SolverError(CoverError):
    """The exact solver did not produce a solution (infrastructure failure)."""

class SolverTimeout(SolverError):
    pass


# ---------- strategies ----------
class CoverStrategy:
    name = "abstract"

    def select(self, universe: Set[int], sets: Sequence[FrozenSet[int]]) -> List[int]:
        """Indices into `sets` whose union contains `universe`."""
        raise NotImplementedError


class ExactCover(CoverStrategy):
    """
    min  sum_j x_j
    s.t. sum_{j : e in sets[j]} x_j >= 1   for every e in universe
         x_j in {0, 1}
    """
    name = "exact"

    def __init__(self, time_limit: Optional[float] = None) -> None:
        if time_limit is not None and time_limit <= 0:
            raise ValueError(f"time_limit must be positive, got {time_limit}")
        self.time_limit = time_limit

    def coverage_matrix(self, universe: Set[int], sets: Sequence[FrozenSet[int]]) -> np.ndarray:
        elements = sorted(universe)
        row = {e: r for r, e in enumerate(elements)}
        A = np.zeros((len(elements), len(sets)), dtype=np.float64)
        for j, s in enumerate(sets):
            for e in s:
                r = row.get(e)
                if r is not None:
                    A[r, j] = 1.0
        missing = [elements[r] for r in np.flatnonzero(A.sum(axis=1) == 0)]
        if missing:
            raise UncoverableError(missing)
        return A

    def select(self, universe: Set[int], sets: Sequence[FrozenSet[int]]) -> List[int]:
        if not universe:
            return []
        A = self.coverage_matrix(universe, sets)
        n = A.shape[1]
        options = {"disp": False}
        if self.time_limit is not None:
            options["time_limit"] = float(self.time_limit)
        try:
            res = milp(c=np.ones(n),
                       constraints=LinearConstraint(A, lb=1.0, ub=np.inf),
                       integrality=np.ones(n),
                       bounds=Bounds(0.0, 1.0),
                       options=options)
        except (ValueError, RuntimeError) as e:
            raise SolverError(f"milp failed: {e}") from e
        log.debug("milp status=%s rows=%d cols=%d obj=%s", res.status, A.shape[0], n, res.fun)
        if res.status == 1:
            raise SolverTimeout(f"exact cover hit its limit ({self.time_limit}s): {res.message}")
        if res.status != 0 or res.x is None:
            raise SolverError(f"milp status {res.status}: {res.message}")
        return [int(j) for j in np.flatnonzero(res.x > 0.5)]


class GreedyCover(CoverStrategy):
    """Pick the set covering most uncovered elements until none are left."""
    name = "greedy"

    def select(self, universe: Set[int], sets: Sequence[FrozenSet[int]]) -> List[int]:
        uncovered = set(universe)
        pool = list(range(len(sets)))
        chosen: List[int] = []
        while uncovered:
            best, best_key = None, (0, 0)
            for j in pool:
                # (new elements, total size); earlier candidate wins full ties
                key = (len(sets[j] & uncovered), len(sets[j]))
                if key[0] and key > best_key:
                    best, best_key = j, key
            if best is None:
                raise UncoverableError(uncovered)
            chosen.append(best)
            uncovered -= sets[best]
            pool.remove(best)
        return chosen


STRATEGIES: Dict[str, Type[CoverStrategy]] = {
    ExactCover.name: ExactCover,
    GreedyCover.name: GreedyCover,
}

def get_strategy(name: str, time_limit: Optional[float] = None) -> CoverStrategy:
    if name not in STRATEGIES:
        raise ValueError(f"unknown cover strategy {name!r} (choose from {sorted(STRATEGIES)})")
    if name == ExactCover.name:
        return ExactCover(time_limit=time_limit)
    return STRATEGIES[name]()


# ---------- driver-facing selection ----------
@dataclass
class CoverResult:
    implicants: List = field(default_factory=list)
    strategy: str = ""
    fell_back: bool = False
    elapsed: float = 0.0

def _run(strategy: CoverStrategy, candidates: Sequence, universe: Set[int]) -> List:
    useful = [c for c in candidates if c.constituents & universe]
    sets = [frozenset(c.constituents & universe) for c in useful]
    return [useful[j] for j in strategy.select(universe, sets)]

def select_cover(candidates: Sequence, universe: Set[int], strategy="exact",
                 time_limit: Optional[float] = None,
                 fallback: Optional[str] = None) -> CoverResult:
    """
    Choose a subset of `candidates` covering `universe`.

    `strategy` is a CoverStrategy or a registered name. If `fallback` names a
    strategy, a SolverError from the primary strategy (including a timeout) is
    logged and the fallback runs instead; the result then has fell_back=True.
    Without a fallback the error propagates.
    """
    primary = get_strategy(strategy, time_limit) if isinstance(strategy, str) else strategy
    universe = set(universe)
    log.debug("cover: %d candidates, %d elements, strategy=%s",
              len(candidates), len(universe), primary.name)
    t0 = time.time()
    try:
        chosen = _run(primary, candidates, universe)
    except SolverError as e:
        if fallback is None:
            raise
        secondary = get_strategy(fallback)
        log.warning("%s cover failed (%s); falling back to %s", primary.name, e, secondary.name)
        chosen = _run(secondary, candidates, universe)
        return CoverResult(chosen, secondary.name, True, time.time() - t0)
    return CoverResult(chosen, primary.name, False, time.time() - t0)


def essential_implicants(candidates: Sequence, universe: Set[int]) -> List:
    """Candidates that are the only cover of at least one universe element."""
    owners: Dict[int, List[int]] = {e: [] for e in universe}
    for j, c in enumerate(candidates):
        for e in c.constituents:
            if e in owners:
                owners[e].append(j)
    essential = sorted({js[0] for js in owners.values() if len(js) == 1})
    return [candidates[j] for j in essential]
