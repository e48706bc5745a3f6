"""Extraction of weighted regulator → target links for selected regulators.

For each selected regulator, the N targets with the highest prior weight are
kept, considering only genes of interest (or, optionally, background genes
outside the gene set). The result is an edge list of known links: pairs
without a positive prior weight are absent, never present with weight 0.
Densifying the list into a zero-filled grid is the job of link_matrix.

Ordering within a regulator is by descending weight, ties by ascending
target identifier.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

import pandas as pd

from .gene_universe import GeneUniverse
from .prior_matrix import RegulatoryPotentialMatrix

log = logging.getLogger(__name__)

LINK_COLUMNS = ["regulator", "target", "weight"]


@dataclass(frozen=True)
class WeightedLink:
    """A prior-weighted edge from a regulator to one of its top targets."""

    regulator: str
    target: str
    weight: float


def eligible_targets(universe: GeneUniverse, outside_geneset: bool = False) -> tuple[str, ...]:
    """Targets a link may point to: G', or B' minus G' when outside_geneset."""
    if not outside_geneset:
        return universe.geneset
    geneset = set(universe.geneset)
    return tuple(g for g in universe.background if g not in geneset)


def extract_top_targets(
    prior: RegulatoryPotentialMatrix,
    regulator: str,
    targets: Iterable[str],
    n: int,
) -> list[WeightedLink]:
    """Top-n positive-weight links of one regulator among targets.

    Args:
        prior: Regulatory-potential matrix.
        regulator: Regulator identifier (must be a prior column).
        targets: Eligible target identifiers (must be prior rows).
        n: Maximum number of links.

    Returns:
        Links sorted by weight descending, ties by target identifier.
    """
    col = prior.column(regulator, targets)
    col = col[col > 0]
    if col.empty:
        return []
    ranked = (
        col.rename("weight")
        .rename_axis("target")
        .reset_index()
        .sort_values(["weight", "target"], ascending=[False, True], kind="mergesort")
        .head(n)
    )
    return [
        WeightedLink(regulator, str(t), float(w))
        for t, w in zip(ranked["target"], ranked["weight"])
    ]


def get_weighted_links(
    prior: RegulatoryPotentialMatrix,
    regulators: Iterable[str],
    universe: GeneUniverse,
    n: int = 250,
    outside_geneset: bool = False,
) -> list[WeightedLink]:
    """Edge list of the top-n target links for every selected regulator.

    Args:
        prior: Regulatory-potential matrix.
        regulators: Selected regulators (e.g. from select_top_regulators()).
            The output follows this order.
        universe: Validated universe providing the eligible targets.
        n: Maximum number of targets per regulator.
        outside_geneset: Link to background genes outside the gene set of
            interest instead of the gene set itself.

    Returns:
        List of WeightedLink. Regulators without any eligible positive-weight
        target contribute nothing.

    Raises:
        ValueError: If n < 1.
        UnknownIdentifierError: If a regulator is not a prior column.
    """
    if n < 1:
        raise ValueError(f"Number of targets per regulator must be >= 1, got {n}")
    regulators = list(dict.fromkeys(regulators))
    prior.regulator_positions(regulators)
    targets = eligible_targets(universe, outside_geneset=outside_geneset)

    links = []
    dropped = []
    for reg in regulators:
        reg_links = extract_top_targets(prior, reg, targets, n)
        if not reg_links:
            dropped.append(reg)
            continue
        links.extend(reg_links)

    if dropped:
        log.warning(
            "%d regulator(s) have no positive-weight targets among %d eligible genes: %s",
            len(dropped), len(targets), ", ".join(dropped[:10]),
        )
    log.info(
        "Extracted %d links for %d regulators (top %d targets each)",
        len(links), len(regulators) - len(dropped), n,
    )
    return links


def links_to_frame(links: list[WeightedLink]) -> pd.DataFrame:
    """Convert links to a ['regulator', 'target', 'weight'] table."""
    return pd.DataFrame(
        [(link.regulator, link.target, link.weight) for link in links], columns=LINK_COLUMNS
    )


def links_from_frame(df: pd.DataFrame, weight_col: Optional[str] = None) -> list[WeightedLink]:
    """Convert a link table back into WeightedLink values.

    Args:
        df: DataFrame with 'regulator' and 'target' columns and a weight column.
        weight_col: Weight column name. Defaults to 'weight'.

    Raises:
        ValueError: If required columns are missing or a weight is negative
            or null.
    """
    weight_col = weight_col or "weight"
    missing = {"regulator", "target", weight_col} - set(df.columns)
    if missing:
        raise ValueError(f"Link table missing columns: {missing}")
    weights = pd.to_numeric(df[weight_col], errors="coerce")
    if weights.isna().any() or (weights < 0).any():
        raise ValueError("Link weights must be non-null and >= 0.")
    return [
        WeightedLink(str(r), str(t), float(w))
        for r, t, w in zip(df["regulator"], df["target"], weights)
    ]
