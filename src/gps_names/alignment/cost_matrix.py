"""Symmetric phoneme edit-cost table."""
from __future__ import annotations

import math
from pathlib import Path
from typing import Iterable

from gps_names.exceptions import FrozenMatrixError, MalformedRecordError, ResourceError
from gps_names.fs import atomic_write_text
from gps_names.phonemes import EMPTY_ID, NUM_SYMBOLS, phoneme_id, phoneme_symbol

MAX_EDIT_COST = 100
COST_MULTIPLIER = 8


class CostMatrix:
    """Costs for every unordered pair of phoneme ids, EMPTY included.

    Only the upper triangle is stored; lookups canonicalise the index order
    so ``get_cost(a, b) == get_cost(b, a)`` always holds. The same structure
    doubles as a counts table during training: counts are accumulated with
    ``add_count`` and turned into costs by ``calc_costs``.
    """

    def __init__(self) -> None:
        self._cells: list[list[int]] = [[0] * NUM_SYMBOLS for _ in range(NUM_SYMBOLS)]
        self._frozen = False

    @classmethod
    def seeded(cls, match_cost: int = 0, edit_cost: int = 1) -> "CostMatrix":
        """Plain edit-distance costs, the usual starting point for training."""
        matrix = cls()
        for i in range(NUM_SYMBOLS):
            for j in range(i, NUM_SYMBOLS):
                matrix._cells[i][j] = match_cost if i == j else edit_cost
        return matrix

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> "CostMatrix":
        """Make the matrix read-only so it can be shared across threads."""
        self._frozen = True
        return self

    def copy(self) -> "CostMatrix":
        matrix = CostMatrix()
        matrix._cells = [row[:] for row in self._cells]
        return matrix

    def _check_mutable(self) -> None:
        if self._frozen:
            raise FrozenMatrixError("cost matrix is read-only")

    def get_cost(self, a: int, b: int) -> int:
        if b < a:
            a, b = b, a
        return self._cells[a][b]

    def set_cost(self, a: int, b: int, cost: int) -> None:
        self._check_mutable()
        if not 0 <= cost <= MAX_EDIT_COST:
            raise ValueError(f"cost {cost} outside [0, {MAX_EDIT_COST}]")
        if b < a:
            a, b = b, a
        self._cells[a][b] = cost

    def add_count(self, a: int, b: int, count: int = 1) -> None:
        self._check_mutable()
        if b < a:
            a, b = b, a
        self._cells[a][b] += count

    def _upper(self) -> Iterable[tuple[int, int]]:
        for i in range(NUM_SYMBOLS):
            for j in range(i, NUM_SYMBOLS):
                yield i, j

    def calc_costs(self, smooth: bool = False) -> None:
        """Turn accumulated counts into costs in place.

        cost = min(MAX_EDIT_COST, round(-log(count / total) * COST_MULTIPLIER));
        pairs never observed cost MAX_EDIT_COST. With ``smooth`` every count
        is incremented first.
        """
        self._check_mutable()
        cells = self._cells
        total = 0
        for i, j in self._upper():
            if smooth:
                cells[i][j] += 1
            total += cells[i][j]

        for i, j in self._upper():
            count = cells[i][j]
            if count < 1:
                cells[i][j] = MAX_EDIT_COST
            else:
                cells[i][j] = min(MAX_EDIT_COST, round(-math.log(count / total) * COST_MULTIPLIER))

    def difference(self, other: "CostMatrix") -> int:
        """Sum of absolute per-cell differences over the upper triangle."""
        return sum(abs(self._cells[i][j] - other._cells[i][j]) for i, j in self._upper())

    def is_bounded(self) -> bool:
        return all(0 <= self._cells[i][j] <= MAX_EDIT_COST for i, j in self._upper())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CostMatrix):
            return NotImplemented
        return self.difference(other) == 0

    # ------------------------ persistence ------------------------

    def dumps(self) -> str:
        lines = [
            f"{phoneme_symbol(i)}|{phoneme_symbol(j)},{self._cells[i][j]}"
            for i, j in self._upper()
        ]
        return "\n".join(lines) + "\n"

    @classmethod
    def loads(cls, text: str) -> "CostMatrix":
        """Parse ``symbolA|symbolB,cost`` lines into a read-only matrix.

        Raises:
            MalformedRecordError: on an unparsable line or out-of-range cost
        """
        matrix = cls()
        for line_number, raw in enumerate(text.splitlines(), 1):
            line = raw.strip()
            if not line:
                continue
            key, sep, cost_text = line.rpartition(",")
            if not sep:
                raise MalformedRecordError("missing cost field", line, line_number)
            symbols = key.split("|")
            try:
                a = phoneme_id(symbols[0])
                b = phoneme_id(symbols[1]) if len(symbols) > 1 else EMPTY_ID
                cost = int(cost_text)
            except ValueError as e:
                raise MalformedRecordError(str(e), line, line_number) from e
            if not 0 <= cost <= MAX_EDIT_COST:
                raise MalformedRecordError(f"cost outside [0, {MAX_EDIT_COST}]", line, line_number)
            matrix.set_cost(a, b, cost)
        return matrix.freeze()

    @classmethod
    def load(cls, path: Path | str) -> "CostMatrix":
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ResourceError("cost matrix", str(path), e.strerror or "unreadable") from e
        try:
            return cls.loads(text)
        except MalformedRecordError as e:
            raise ResourceError("cost matrix", str(path), str(e)) from e

    def save(self, path: Path | str) -> Path:
        return atomic_write_text(path, self.dumps())
