"""Validation of the background universe, gene set of interest and candidates.

The background (expressed genes) and gene set of interest (e.g. DEGs) are
intersected with the prior's target genes, and the candidate regulators
with its regulator columns. Nothing downstream sees an identifier that
failed this step.

  B' = background ∩ targets(prior)
  G' = geneset ∩ B'
  C' = candidates ∩ regulators(prior)

Orders follow the prior matrix (row order for B'/G', column order for C'),
so later tie-breaks are reproducible regardless of how the input sets
were built.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

import numpy as np

from .errors import EmptyCandidateError, EmptyUniverseError, UnknownIdentifierError
from .prior_matrix import RegulatoryPotentialMatrix

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeneUniverse:
    """Validated inputs for scoring.

    Attributes:
        background: B' in prior row order.
        geneset: G' in prior row order (subset of background).
        candidates: C' in prior column order.
        labels: Boolean vector over background, True where the gene is in G'.
    """

    background: tuple[str, ...]
    geneset: tuple[str, ...]
    candidates: tuple[str, ...]
    labels: np.ndarray = field(repr=False, compare=False)

    @property
    def n_background(self) -> int:
        return len(self.background)

    @property
    def n_geneset(self) -> int:
        return len(self.geneset)

    @property
    def positive_fraction(self) -> float:
        return self.n_geneset / self.n_background


def _as_set(ids: Iterable[str]) -> set:
    if isinstance(ids, str):
        raise TypeError("Expected an iterable of identifiers, got a single string.")
    return {str(i) for i in ids}


def validate_universe(
    prior: RegulatoryPotentialMatrix,
    background: Iterable[str],
    geneset: Iterable[str],
    candidates: Optional[Iterable[str]] = None,
    strict: bool = False,
) -> GeneUniverse:
    """Intersect the requested gene sets and candidates with the prior matrix.

    Args:
        prior: Regulatory-potential matrix (targets × regulators).
        background: Expressed / detectable genes.
        geneset: Genes of interest. Genes outside the background are dropped.
        candidates: Regulators to score. Must be given explicitly; None is
            treated as an empty request rather than "all columns".
        strict: If True, requested targets or regulators that are absent from
            the prior raise UnknownIdentifierError instead of being dropped.

    Returns:
        GeneUniverse with the intersected sets and the label vector.

    Raises:
        EmptyUniverseError: If B' or G' is empty.
        EmptyCandidateError: If C' is empty.
        UnknownIdentifierError: In strict mode, for unknown identifiers.
    """
    bg_requested = _as_set(background)
    gs_requested = _as_set(geneset)
    cand_requested = _as_set(candidates) if candidates is not None else set()

    if strict:
        unknown_targets = {g for g in bg_requested | gs_requested if not prior.has_target(g)}
        if unknown_targets:
            raise UnknownIdentifierError("target", unknown_targets)
        unknown_regulators = {r for r in cand_requested if not prior.has_regulator(r)}
        if unknown_regulators:
            raise UnknownIdentifierError("regulator", unknown_regulators)

    bg = tuple(t for t in prior.targets if t in bg_requested)
    if not bg:
        raise EmptyUniverseError("background", bg_requested)

    bg_set = set(bg)
    gs = tuple(t for t in bg if t in gs_requested)
    if not gs:
        raise EmptyUniverseError("geneset", gs_requested)

    cands = tuple(r for r in prior.regulators if r in cand_requested)
    if not cands:
        raise EmptyCandidateError(cand_requested)

    dropped_gs = len(gs_requested - bg_set)
    if dropped_gs:
        log.info("%d gene set genes not in the background universe were dropped", dropped_gs)
    log.info(
        "Universe: %d background genes, %d genes of interest, %d/%d candidate regulators",
        len(bg), len(gs), len(cands), len(cand_requested),
    )

    gs_set = set(gs)
    labels = np.fromiter((t in gs_set for t in bg), dtype=bool, count=len(bg))
    labels.setflags(write=False)
    return GeneUniverse(background=bg, geneset=gs, candidates=cands, labels=labels)
