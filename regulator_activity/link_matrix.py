"""Shaping of a weighted link list into a dense regulator × target matrix.

The matrix is meant for a heatmap renderer:
  1. Rows are the regulators and columns the targets present in the edge list.
  2. Pairs without a link are filled with exactly 0.
  3. Optionally, weak links below a quantile of the positive link weights are
     zeroed to thin out the grid.
  4. Values above the saturation cutoff are clamped to the cutoff so a few
     outlying weights do not flatten the colour scale.

Row and column orders are supplied by the caller (typically regulators
best-first from the ranking, targets in first-appearance order). The shaper
keeps whatever sequence it is given.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Union

import numpy as np
import pandas as pd

from .errors import UnknownIdentifierError
from .weighted_links import LINK_COLUMNS, WeightedLink, links_from_frame, links_to_frame

log = logging.getLogger(__name__)

ORIENTATIONS = ("regulator_target", "target_regulator")


@dataclass(frozen=True, eq=False)
class LinkMatrix:
    """Dense, saturated link matrix with string labels.

    Attributes:
        data: Values in [0, cutoff]. Treat as read-only; use frame for a copy.
        cutoff: Saturation cutoff applied to the values (None if unclamped).
        orientation: 'regulator_target' (rows = regulators) or
            'target_regulator' (rows = targets).
    """

    data: pd.DataFrame
    cutoff: Optional[float]
    orientation: str = "regulator_target"

    @property
    def frame(self) -> pd.DataFrame:
        return self.data.copy()

    @property
    def rows(self) -> list[str]:
        return self.data.index.tolist()

    @property
    def columns(self) -> list[str]:
        return self.data.columns.tolist()

    @property
    def regulators(self) -> list[str]:
        return self.rows if self.orientation == "regulator_target" else self.columns

    @property
    def targets(self) -> list[str]:
        return self.columns if self.orientation == "regulator_target" else self.rows

    @property
    def shape(self) -> tuple[int, int]:
        return self.data.shape

    def value(self, regulator: str, target: str) -> float:
        if self.orientation == "regulator_target":
            return float(self.data.loc[regulator, target])
        return float(self.data.loc[target, regulator])


def _first_appearance(values: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(values))


def _resolve_order(
    order: Optional[Iterable[str]],
    present: list[str],
    axis: str,
) -> list[str]:
    """Caller order first, then any remaining labels in first-appearance order."""
    if order is None:
        return present
    order = _first_appearance(order)
    present_set = set(present)
    unknown = [o for o in order if o not in present_set]
    if unknown:
        raise UnknownIdentifierError(axis, unknown)
    ordered = set(order)
    return order + [p for p in present if p not in ordered]


def prepare_link_matrix(
    links: Union[list[WeightedLink], pd.DataFrame],
    cutoff: Optional[float] = None,
    regulator_order: Optional[Iterable[str]] = None,
    target_order: Optional[Iterable[str]] = None,
    orientation: str = "regulator_target",
    quantile_floor: Optional[float] = None,
    drop_empty_targets: bool = False,
) -> LinkMatrix:
    """Build a dense, zero-filled and saturated link matrix.

    Args:
        links: WeightedLink list or a ['regulator', 'target', 'weight'] table.
        cutoff: Saturation cutoff; values above it are set to it. None
            disables clamping.
        regulator_order: Row order for regulators. Regulators in the edge
            list that are not named are appended in first-appearance order.
        target_order: Column order for targets, same rules.
        orientation: 'regulator_target' or 'target_regulator' (transposed).
        quantile_floor: If given (0 <= q < 1), cells below the q-quantile of
            the positive link weights are set to 0 before clamping.
        drop_empty_targets: Drop targets whose values are all 0 after the
            quantile floor.

    Returns:
        LinkMatrix.

    Raises:
        ValueError: On a bad cutoff, quantile, orientation or duplicate links.
        UnknownIdentifierError: If an ordering names a label that is not in
            the edge list.
    """
    if orientation not in ORIENTATIONS:
        raise ValueError(f"Unknown orientation '{orientation}'. Choose: {', '.join(ORIENTATIONS)}.")
    if cutoff is not None and not cutoff > 0:
        raise ValueError(f"Saturation cutoff must be > 0, got {cutoff}")
    if quantile_floor is not None and not 0 <= quantile_floor < 1:
        raise ValueError(f"quantile_floor must be in [0, 1), got {quantile_floor}")

    if isinstance(links, pd.DataFrame):
        links = links_from_frame(links)
    edges = links_to_frame(links)
    if edges.duplicated(["regulator", "target"]).any():
        dup = edges.loc[edges.duplicated(["regulator", "target"]), ["regulator", "target"]]
        raise ValueError(f"Duplicate regulator-target links: {dup.head(5).values.tolist()}")

    rows = _resolve_order(regulator_order, _first_appearance(edges["regulator"]), "regulator")
    cols = _resolve_order(target_order, _first_appearance(edges["target"]), "target")

    if edges.empty:
        log.warning("No links to shape; returning an empty link matrix.")
        data = pd.DataFrame(dtype=float)
    else:
        data = (
            edges.pivot(index="regulator", columns="target", values="weight")
            .reindex(index=rows, columns=cols)
            .fillna(0.0)
            .astype(float)
        )
        data.index.name = LINK_COLUMNS[0]
        data.columns.name = LINK_COLUMNS[1]

        if quantile_floor is not None:
            positive = edges["weight"].to_numpy()
            positive = positive[positive > 0]
            if positive.size:
                floor = float(np.quantile(positive, quantile_floor))
                data = data.where(data >= floor, 0.0)
                log.info("Zeroed links below the %.2f quantile (%.4g)", quantile_floor, floor)

        if drop_empty_targets:
            keep = (data > 0).any(axis=0)
            if not keep.all():
                log.info("Dropped %d targets without remaining links", int((~keep).sum()))
            data = data.loc[:, keep]

        if cutoff is not None:
            n_clamped = int((data > cutoff).to_numpy().sum())
            if n_clamped:
                log.info("Clamped %d link weights to the saturation cutoff %.4g", n_clamped, cutoff)
            data = data.clip(upper=cutoff)

    if orientation == "target_regulator":
        data = data.T

    log.info("Link matrix: %d × %d (%s)", data.shape[0], data.shape[1], orientation)
    return LinkMatrix(data=data, cutoff=cutoff, orientation=orientation)
