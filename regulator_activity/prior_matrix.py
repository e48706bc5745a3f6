"""Read-only access to a regulatory-potential prior matrix.

The prior matrix scores how plausible it is that a regulator (column) controls
a target gene (row). Scoring and link extraction only ever read from it:
every restriction returns a new matrix backed by a read-only copy, and
lookups of identifiers that are not in the matrix raise instead of
returning NaN.
"""

import logging
from typing import Iterable

import numpy as np
import pandas as pd

from .errors import UnknownIdentifierError

log = logging.getLogger(__name__)


class RegulatoryPotentialMatrix:
    """Immutable targets × regulators matrix of non-negative weights.

    Args:
        weights: DataFrame with target genes as the index and regulators as
            columns. Labels must be unique and all values finite and >= 0.

    Raises:
        ValueError: On duplicate labels, non-numeric, non-finite or negative
            values.
    """

    def __init__(self, weights: pd.DataFrame):
        if weights.index.has_duplicates:
            dup = weights.index[weights.index.duplicated()].unique().tolist()
            raise ValueError(f"Duplicate target identifiers in prior matrix: {dup[:10]}")
        if weights.columns.has_duplicates:
            dup = weights.columns[weights.columns.duplicated()].unique().tolist()
            raise ValueError(f"Duplicate regulator identifiers in prior matrix: {dup[:10]}")

        values = np.array(weights.to_numpy(dtype=float), dtype=float, copy=True)
        if not np.all(np.isfinite(values)):
            raise ValueError("Prior matrix contains NaN or infinite weights.")
        if (values < 0).any():
            raise ValueError("Prior matrix contains negative weights.")
        values.setflags(write=False)

        self._values = values
        self._targets = pd.Index(weights.index.astype(str), name="target")
        self._regulators = pd.Index(weights.columns.astype(str), name="regulator")
        self._target_pos = {t: i for i, t in enumerate(self._targets)}
        self._regulator_pos = {r: i for i, r in enumerate(self._regulators)}

    @classmethod
    def _from_parts(
        cls, values: np.ndarray, targets: pd.Index, regulators: pd.Index
    ) -> "RegulatoryPotentialMatrix":
        return cls(pd.DataFrame(values, index=targets, columns=regulators))

    def __repr__(self) -> str:
        return (
            f"RegulatoryPotentialMatrix({len(self._targets)} targets × "
            f"{len(self._regulators)} regulators)"
        )

    @property
    def shape(self) -> tuple[int, int]:
        return self._values.shape

    @property
    def targets(self) -> pd.Index:
        """Row identifiers in matrix order."""
        return self._targets

    @property
    def regulators(self) -> pd.Index:
        """Column identifiers in matrix order."""
        return self._regulators

    @property
    def values(self) -> np.ndarray:
        """Read-only view of the weights."""
        return self._values

    def has_target(self, target: str) -> bool:
        return target in self._target_pos

    def has_regulator(self, regulator: str) -> bool:
        return regulator in self._regulator_pos

    def target_positions(self, targets: Iterable[str]) -> np.ndarray:
        """Return row positions for targets, raising on any unknown identifier."""
        targets = list(targets)
        missing = [t for t in targets if t not in self._target_pos]
        if missing:
            raise UnknownIdentifierError("target", missing)
        return np.array([self._target_pos[t] for t in targets], dtype=int)

    def regulator_positions(self, regulators: Iterable[str]) -> np.ndarray:
        """Return column positions for regulators, raising on any unknown identifier."""
        regulators = list(regulators)
        missing = [r for r in regulators if r not in self._regulator_pos]
        if missing:
            raise UnknownIdentifierError("regulator", missing)
        return np.array([self._regulator_pos[r] for r in regulators], dtype=int)

    def column(self, regulator: str, targets: Iterable[str] | None = None) -> pd.Series:
        """Weights of one regulator, optionally restricted to targets (in the given order)."""
        col = self.regulator_positions([regulator])[0]
        if targets is None:
            return pd.Series(self._values[:, col], index=self._targets, name=regulator)
        targets = list(targets)
        rows = self.target_positions(targets)
        return pd.Series(
            self._values[rows, col], index=pd.Index(targets, name="target"), name=regulator
        )

    def weight(self, target: str, regulator: str) -> float:
        row = self.target_positions([target])[0]
        col = self.regulator_positions([regulator])[0]
        return float(self._values[row, col])

    def restrict(
        self,
        targets: Iterable[str] | None = None,
        regulators: Iterable[str] | None = None,
    ) -> "RegulatoryPotentialMatrix":
        """Return a new matrix limited to targets and/or regulators.

        Labels keep the order in which they are given. Unknown labels raise
        UnknownIdentifierError.
        """
        target_idx = self._targets if targets is None else pd.Index(list(targets))
        regulator_idx = self._regulators if regulators is None else pd.Index(list(regulators))
        rows = self.target_positions(target_idx)
        cols = self.regulator_positions(regulator_idx)
        return self._from_parts(
            self._values[np.ix_(rows, cols)], target_idx, regulator_idx
        )

    def to_frame(self) -> pd.DataFrame:
        """Return a writable DataFrame copy of the weights."""
        return pd.DataFrame(
            self._values.copy(), index=self._targets.copy(), columns=self._regulators.copy()
        )
