"""Ranking of activity records and multi-metric top-K selection.

Ranks are standard competition ranks ("1224"): regulators with equal metric
values share the best rank of their group and the next rank is skipped.
Higher metric values rank better for every metric.

Top-K selection is strict: exactly min(K, n) regulators per metric. Ties at
the K-th position are broken by candidate order (prior column order), so
the result is deterministic. When several metrics are requested, the
selection is the deduplicated union of the per-metric top-K lists, e.g. the
union of the top 20 by pearson, top 20 by auroc and top 20 by aupr.
"""

import logging
from dataclasses import replace
from typing import Iterable, Mapping, Union

import pandas as pd

from .activity_scoring import DEFAULT_RANK_METRIC, METRICS, ActivityRecord, check_metric
from .errors import InvalidTopKError
from .utils.stats import competition_rank

log = logging.getLogger(__name__)

DEFAULT_SELECTION_METRICS = ("pearson", "auroc", "aupr")


def assign_ranks(
    records: list[ActivityRecord],
    metric: str = DEFAULT_RANK_METRIC,
) -> list[ActivityRecord]:
    """Return new records whose rank field is the competition rank on metric.

    Args:
        records: Activity records (any order).
        metric: Metric to rank by (descending).

    Returns:
        New records in the same order as the input.
    """
    check_metric(metric)
    if not records:
        return []
    ranks = competition_rank([getattr(r, metric) for r in records])
    return [replace(r, rank=int(rank)) for r, rank in zip(records, ranks)]


def activities_to_frame(
    records: list[ActivityRecord],
    metric_ranks: bool = False,
) -> pd.DataFrame:
    """Convert activity records to a table sorted ascending by rank.

    Args:
        records: Activity records.
        metric_ranks: If True, add a 'rank_<metric>' column for every metric.

    Returns:
        DataFrame with columns ['regulator', *METRICS, 'rank'] (plus the
        per-metric rank columns). Equal ranks keep input order.
    """
    columns = ["regulator", *METRICS, "rank"]
    df = pd.DataFrame([{c: getattr(r, c) for c in columns} for r in records], columns=columns)
    if metric_ranks and not df.empty:
        for m in METRICS:
            df[f"rank_{m}"] = competition_rank(df[m].to_numpy())
    return df.sort_values("rank", kind="mergesort").reset_index(drop=True)


def top_k_by_metric(records: list[ActivityRecord], metric: str, k: int) -> list[str]:
    """Select the k regulators with the highest value on metric.

    Args:
        records: Activity records, in candidate order.
        metric: Metric name.
        k: Number of regulators to select. Values above len(records) are
            clipped.

    Returns:
        Regulator identifiers, best first.

    Raises:
        InvalidTopKError: If k < 1.
    """
    check_metric(metric)
    if k < 1:
        raise InvalidTopKError(k, metric)
    if k > len(records):
        log.warning(
            "Requested top %d by %s but only %d regulators were scored; using all",
            k, metric, len(records),
        )
        k = len(records)
    # sorted() is stable: ties keep candidate order
    ranked = sorted(records, key=lambda r: -getattr(r, metric))
    return [r.regulator for r in ranked[:k]]


def select_top_regulators(
    records: list[ActivityRecord],
    top_k: Union[int, Mapping[str, int]] = 20,
    metrics: Iterable[str] = DEFAULT_SELECTION_METRICS,
) -> list[str]:
    """Union of the top-K regulators across one or more metrics.

    Args:
        records: Activity records.
        top_k: K for every metric, or a mapping metric → K. With a mapping,
            its keys define the metrics and `metrics` is ignored.
        metrics: Metrics to select on when top_k is an int.

    Returns:
        Deduplicated regulator identifiers ordered by the records' rank
        field (best first), ties by candidate order.

    Raises:
        InvalidTopKError: If any K < 1. Raised before any selection.
    """
    if isinstance(top_k, Mapping):
        per_metric = dict(top_k)
    else:
        per_metric = {m: top_k for m in metrics}
    if not per_metric:
        raise ValueError("At least one metric is required for top-K selection.")
    for metric, k in per_metric.items():
        check_metric(metric)
        if k < 1:
            raise InvalidTopKError(k, metric)

    selected = set()
    for metric, k in per_metric.items():
        selected.update(top_k_by_metric(records, metric, k))

    ordered = order_by_rank(records, selected)
    log.info(
        "Selected %d regulators from the union of top-K by %s",
        len(ordered), ", ".join(f"{m} ({k})" for m, k in per_metric.items()),
    )
    return ordered


def order_by_rank(records: list[ActivityRecord], regulators: Iterable[str]) -> list[str]:
    """Order a subset of regulators by their records' rank (best first)."""
    wanted = set(regulators)
    ranked = sorted((r for r in records if r.regulator in wanted), key=lambda r: r.rank)
    return [r.regulator for r in ranked]
