# Truth tables over N Boolean inputs with forced-0 / forced-1 / don't-care outputs.
# Index i of a table is the assignment whose bit k is input variable k (k=0 = LSB).

import numbers
import re
from enum import Enum
from typing import Iterable, Optional, Sequence, Set, Tuple

import numpy as np


class TableError(ValueError):
    pass

class TableFormatError(TableError):
    """Output sequence does not describe a table (bad width, length or symbol)."""

class TableIndexError(TableError, IndexError):
    """Index outside [0, 2^N)."""


# ---------- values ----------
class Value(Enum):
    ZERO = "0"
    ONE = "1"
    DONT_CARE = "-"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, x) -> "Value":
        if isinstance(x, Value):
            return x
        if isinstance(x, _BOOLS):
            return cls.ONE if x else cls.ZERO
        if isinstance(x, numbers.Integral):
            if x in (0, 1):
                return cls.ONE if x else cls.ZERO
            raise TableFormatError(f"output value must be 0 or 1, got {x}")
        if isinstance(x, str) and len(x) == 1:
            v = _SYMBOLS.get(x)
            if v is not None:
                return v
        raise TableFormatError(f"unrecognised output symbol {x!r}")

_SYMBOLS = {
    "0": Value.ZERO,
    "1": Value.ONE,
    "-": Value.DONT_CARE, "x": Value.DONT_CARE, "X": Value.DONT_CARE,
    "d": Value.DONT_CARE, "D": Value.DONT_CARE, "*": Value.DONT_CARE,
}

_SEPARATORS = re.compile(r"[\s,]+")

_BOOLS = (bool, np.bool_)

def _is_index(x) -> bool:
    # python and numpy integers, never bools
    return isinstance(x, numbers.Integral) and not isinstance(x, _BOOLS)


# ---------- table ----------
class Table:
    """
    Immutable truth table: `n_vars` inputs, `2**n_vars` outputs.

    outputs[i] is the required value for the assignment encoded by i.
    """

    __slots__ = ("_n_vars", "_outputs")

    def __init__(self, n_vars: int, outputs: Iterable) -> None:
        if not _is_index(n_vars) or n_vars < 1:
            raise TableFormatError(f"n_vars must be a positive integer, got {n_vars!r}")
        n_vars = int(n_vars)
        values = tuple(Value.parse(v) for v in outputs)
        if len(values) != 1 << n_vars:
            raise TableFormatError(
                f"table with {n_vars} inputs needs {1 << n_vars} outputs, got {len(values)}")
        self._n_vars = n_vars
        self._outputs = values

    @classmethod
    def from_minterms(cls, n_vars: int, minterms: Iterable[int],
                      dont_cares: Iterable[int] = ()) -> "Table":
        if not _is_index(n_vars) or n_vars < 1:
            raise TableFormatError(f"n_vars must be a positive integer, got {n_vars!r}")
        n_vars = int(n_vars)
        size = 1 << n_vars
        on, dc = set(minterms), set(dont_cares)
        bad = sorted((i for i in on | dc if not _is_index(i) or not 0 <= i < size), key=str)
        if bad:
            raise TableFormatError(f"indices out of range for N={n_vars}: {bad}")
        on, dc = {int(i) for i in on}, {int(i) for i in dc}
        if on & dc:
            raise TableFormatError(f"indices both minterm and don't-care: {sorted(on & dc)}")
        outputs = [Value.ZERO] * size
        for i in on:
            outputs[i] = Value.ONE
        for i in dc:
            outputs[i] = Value.DONT_CARE
        return cls(n_vars, outputs)

    @classmethod
    def from_string(cls, text: str, n_vars: Optional[int] = None) -> "Table":
        """Parse one symbol per entry, index 0 first. Whitespace and commas are ignored."""
        symbols = "".join(_SEPARATORS.split(text.strip()))
        if n_vars is None:
            n = len(symbols)
            if n < 2 or n & (n - 1):
                raise TableFormatError(f"table length {n} is not a power of two >= 2")
            n_vars = n.bit_length() - 1
        return cls(n_vars, symbols)

    @property
    def n_vars(self) -> int:
        return self._n_vars

    @property
    def outputs(self) -> Tuple[Value, ...]:
        return self._outputs

    @property
    def size(self) -> int:
        return len(self._outputs)

    def __len__(self) -> int:
        return len(self._outputs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Table):
            return NotImplemented
        return self._n_vars == other._n_vars and self._outputs == other._outputs

    def __hash__(self) -> int:
        return hash((self._n_vars, self._outputs))

    def __repr__(self) -> str:
        return f"Table({self._n_vars}, {''.join(str(v) for v in self._outputs)!r})"

    def _check_index(self, idx: int) -> int:
        if not _is_index(idx):
            raise TableIndexError(f"table index must be an int, got {idx!r}")
        if not 0 <= idx < len(self._outputs):
            raise TableIndexError(f"index {idx} outside [0, {len(self._outputs)})")
        return int(idx)

    def output(self, idx: int) -> Value:
        return self._outputs[self._check_index(idx)]

    def is_minterm(self, idx: int) -> bool:
        return self.output(idx) is Value.ONE

    def minterms(self) -> Set[int]:
        return {i for i, v in enumerate(self._outputs) if v is Value.ONE}

    def dont_cares(self) -> Set[int]:
        return {i for i, v in enumerate(self._outputs) if v is Value.DONT_CARE}

    def care_indices(self) -> Sequence[int]:
        """Indices that seed merging: minterms and don't-cares, ascending."""
        return [i for i, v in enumerate(self._outputs) if v is not Value.ZERO]
