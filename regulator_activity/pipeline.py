"""End-to-end regulator activity analysis.

Pipeline:
  1. Validate the background universe, gene set of interest and candidate
     regulators against the prior matrix.
  2. Score every candidate (pearson, auroc, aupr, aupr_corrected, spearman)
     and rank by the chosen metric (pearson by default).
  3. Select the union of the top-K regulators by pearson, auroc and aupr.
  4. Extract the top-N weighted target links of the selected regulators,
     restricted to the gene set of interest.
  5. Shape the links into a dense, zero-filled, saturated regulator × target
     matrix, regulators ordered best-first.

Every stage either succeeds completely or raises; a validation failure
aborts the run before any scoring.

Usage:
    python -m regulator_activity.pipeline --config configs/default_config.yaml \\
        --prior-file data/ligand_target_matrix.csv \\
        --background-file results/expressed_genes.txt \\
        --geneset-file results/degs.txt \\
        --candidates-file results/expressed_ligands.txt \\
        --output-dir results/regulator_activity/
"""

import argparse
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Mapping, Optional, Union

import pandas as pd

from .activity_scoring import DEFAULT_RANK_METRIC, ActivityRecord, score_regulators
from .gene_universe import GeneUniverse, validate_universe
from .link_matrix import LinkMatrix, prepare_link_matrix
from .prior_matrix import RegulatoryPotentialMatrix
from .ranking import DEFAULT_SELECTION_METRICS, activities_to_frame, select_top_regulators
from .utils.io import (
    load_config,
    load_gene_set,
    load_prior_matrix,
    save_activities,
    save_link_matrix,
    save_links,
)
from .weighted_links import WeightedLink, get_weighted_links

log = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class PipelineResult:
    """Outputs of one pipeline run.

    Attributes:
        universe: Validated universe.
        records: Activity records in candidate order.
        activities: Ranked activity table (ascending rank).
        selected: Selected regulators, best first.
        links: Weighted links of the selected regulators.
        link_matrix: Dense link matrix for rendering.
    """

    universe: GeneUniverse
    records: list[ActivityRecord]
    activities: pd.DataFrame
    selected: list[str]
    links: list[WeightedLink]
    link_matrix: LinkMatrix


def predict_regulator_activities(
    prior: RegulatoryPotentialMatrix,
    background: Iterable[str],
    geneset: Iterable[str],
    candidates: Iterable[str],
    rank_by: str = DEFAULT_RANK_METRIC,
    strict: bool = False,
    n_workers: int = 1,
) -> pd.DataFrame:
    """Validate inputs and return the ranked activity table.

    Args:
        prior: Regulatory-potential matrix (targets × regulators).
        background: Expressed genes.
        geneset: Genes of interest.
        candidates: Regulators to score.
        rank_by: Metric for the rank column.
        strict: Raise on identifiers missing from the prior.
        n_workers: Threads for per-regulator scoring.

    Returns:
        DataFrame with columns regulator, pearson, auroc, aupr,
        aupr_corrected, spearman, rank, sorted ascending by rank.
    """
    universe = validate_universe(prior, background, geneset, candidates, strict=strict)
    records = score_regulators(prior, universe, rank_by=rank_by, n_workers=n_workers)
    return activities_to_frame(records)


def run_activity_pipeline(
    prior: RegulatoryPotentialMatrix,
    background: Iterable[str],
    geneset: Iterable[str],
    candidates: Iterable[str],
    rank_by: str = DEFAULT_RANK_METRIC,
    top_k: Union[int, Mapping[str, int]] = 20,
    selection_metrics: Iterable[str] = DEFAULT_SELECTION_METRICS,
    n_targets: int = 250,
    outside_geneset: bool = False,
    cutoff: Optional[float] = None,
    quantile_floor: Optional[float] = None,
    drop_empty_targets: bool = False,
    orientation: str = "regulator_target",
    strict: bool = False,
    n_workers: int = 1,
) -> PipelineResult:
    """Score, rank and select regulators, then extract and shape their links.

    Args:
        prior: Regulatory-potential matrix (targets × regulators).
        background: Expressed genes.
        geneset: Genes of interest.
        candidates: Regulators to score.
        rank_by: Metric for the rank field and the matrix row order.
        top_k: K per selection metric, or a mapping metric → K.
        selection_metrics: Metrics whose top-K lists are united.
        n_targets: Maximum links per selected regulator.
        outside_geneset: Link to background genes outside the gene set.
        cutoff: Saturation cutoff for the link matrix.
        quantile_floor: Zero links below this quantile of link weights.
        drop_empty_targets: Drop all-zero target columns from the matrix.
        orientation: 'regulator_target' or 'target_regulator'.
        strict: Raise on identifiers missing from the prior.
        n_workers: Threads for per-regulator scoring.

    Returns:
        PipelineResult.
    """
    universe = validate_universe(prior, background, geneset, candidates, strict=strict)
    records = score_regulators(prior, universe, rank_by=rank_by, n_workers=n_workers)
    activities = activities_to_frame(records, metric_ranks=True)

    selected = select_top_regulators(records, top_k=top_k, metrics=selection_metrics)
    links = get_weighted_links(
        prior, selected, universe, n=n_targets, outside_geneset=outside_geneset,
    )

    linked = {link.regulator for link in links}
    link_matrix = prepare_link_matrix(
        links,
        cutoff=cutoff,
        regulator_order=[r for r in selected if r in linked],
        orientation=orientation,
        quantile_floor=quantile_floor,
        drop_empty_targets=drop_empty_targets,
    )
    return PipelineResult(
        universe=universe,
        records=records,
        activities=activities,
        selected=selected,
        links=links,
        link_matrix=link_matrix,
    )


def run_pipeline_from_files(
    prior_path: str | Path,
    background_path: str | Path,
    geneset_path: str | Path,
    output_dir: str | Path,
    candidates_path: Optional[str | Path] = None,
    all_regulators: bool = False,
    **kwargs,
) -> PipelineResult:
    """Load inputs from disk, run the pipeline and save its outputs.

    Outputs written to output_dir: regulator_activities.csv,
    selected_regulators.txt, weighted_links.csv, link_matrix.csv.

    Args:
        prior_path: Prior matrix CSV/TSV (targets × regulators).
        background_path: Background gene list.
        geneset_path: Gene set of interest list.
        output_dir: Output directory.
        candidates_path: Candidate regulator list.
        all_regulators: Score every prior column. Required when no
            candidates file is given.
        **kwargs: Forwarded to run_activity_pipeline().

    Raises:
        ValueError: If neither candidates_path nor all_regulators is given.
    """
    if candidates_path is None and not all_regulators:
        raise ValueError("Provide a candidates file or request all regulators explicitly.")

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    prior = load_prior_matrix(prior_path)
    log.info("Loaded %r", prior)
    background = load_gene_set(background_path)
    geneset = load_gene_set(geneset_path)
    if candidates_path is not None:
        candidates = load_gene_set(candidates_path)
    else:
        candidates = set(prior.regulators)

    result = run_activity_pipeline(prior, background, geneset, candidates, **kwargs)

    save_activities(result.activities, output_dir / "regulator_activities.csv")
    (output_dir / "selected_regulators.txt").write_text(
        "".join(f"{r}\n" for r in result.selected)
    )
    save_links(result.links, output_dir / "weighted_links.csv")
    save_link_matrix(result.link_matrix, output_dir / "link_matrix.csv")
    log.info("Results saved to %s", output_dir)
    return result


# ── CLI ───────────────────────────────────────────────────────────────────────

def _setting(section: dict, key: str, default):
    """Config value for key, or default when the key is absent or null."""
    value = section.get(key)
    return default if value is None else value


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(
        description="Score candidate regulators against a gene set using a prior matrix."
    )
    parser.add_argument("--config", help="Path to YAML config file.")
    parser.add_argument("--prior-file", required=True, help="Prior matrix CSV/TSV (targets × regulators).")
    parser.add_argument("--background-file", required=True, help="Background gene list.")
    parser.add_argument("--geneset-file", required=True, help="Gene set of interest list.")
    parser.add_argument("--candidates-file", help="Candidate regulator list.")
    parser.add_argument("--all-regulators", action="store_true",
                        help="Score every regulator in the prior matrix.")
    parser.add_argument("--output-dir", required=True, help="Output directory.")
    parser.add_argument("--rank-by", default=DEFAULT_RANK_METRIC)
    parser.add_argument("--top-k", type=int, default=20)
    parser.add_argument("--selection-metrics", nargs="+", default=list(DEFAULT_SELECTION_METRICS))
    parser.add_argument("--n-targets", type=int, default=250)
    parser.add_argument("--outside-geneset", action="store_true")
    parser.add_argument("--cutoff", type=float, default=None)
    parser.add_argument("--quantile-floor", type=float, default=None)
    parser.add_argument("--strict", action="store_true")
    parser.add_argument("--n-workers", type=int, default=1)
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    cfg = load_config(args.config) if args.config else {}
    act_cfg = cfg.get("activity_scoring") or {}
    link_cfg = cfg.get("weighted_links") or {}
    mat_cfg = cfg.get("link_matrix") or {}

    run_pipeline_from_files(
        prior_path=args.prior_file,
        background_path=args.background_file,
        geneset_path=args.geneset_file,
        output_dir=args.output_dir,
        candidates_path=args.candidates_file,
        all_regulators=args.all_regulators,
        rank_by=_setting(act_cfg, "rank_by", args.rank_by),
        top_k=_setting(act_cfg, "top_k", args.top_k),
        selection_metrics=_setting(act_cfg, "selection_metrics", args.selection_metrics),
        strict=_setting(act_cfg, "strict", args.strict),
        n_workers=_setting(act_cfg, "n_workers", args.n_workers),
        n_targets=_setting(link_cfg, "n_targets", args.n_targets),
        outside_geneset=_setting(link_cfg, "outside_geneset", args.outside_geneset),
        cutoff=_setting(mat_cfg, "cutoff", args.cutoff),
        quantile_floor=_setting(mat_cfg, "quantile_floor", args.quantile_floor),
        drop_empty_targets=_setting(mat_cfg, "drop_empty_targets", False),
        orientation=_setting(mat_cfg, "orientation", "regulator_target"),
    )


if __name__ == "__main__":
    main()
