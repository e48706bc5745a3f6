"""Shared statistical functions used across analysis modules.

All metrics compare a vector of prior weights (the classifier score) with a
boolean label vector (membership of the gene set of interest). They are
defined for degenerate input instead of returning NaN: a constant score
vector carries no ranking information.
"""

import numpy as np
from scipy.stats import rankdata


def _as_arrays(scores, labels) -> tuple[np.ndarray, np.ndarray]:
    scores = np.asarray(scores, dtype=float)
    labels = np.asarray(labels, dtype=bool)
    if scores.shape != labels.shape or scores.ndim != 1:
        raise ValueError(
            f"scores and labels must be 1-D and equal length, got {scores.shape} and {labels.shape}"
        )
    return scores, labels


def pearson_score(scores, labels) -> float:
    """Pearson correlation between weights and the 0/1 label vector.

    Equivalent to the point-biserial correlation. Returns 0.0 when either
    vector has zero variance (constant column, or all/no genes labelled).

    Args:
        scores: 1-D array of prior weights.
        labels: 1-D boolean array, True for genes of interest.

    Returns:
        Correlation coefficient in [-1, 1].
    """
    x, y = _as_arrays(scores, labels)
    y = y.astype(float)
    # centring a constant leaves rounding residue, so test the range first
    if len(x) == 0 or np.ptp(x) == 0 or np.ptp(y) == 0:
        return 0.0
    xc = x - x.mean()
    yc = y - y.mean()
    denom = np.sqrt(np.dot(xc, xc) * np.dot(yc, yc))
    if denom == 0 or not np.isfinite(denom):
        return 0.0
    return float(np.clip(np.dot(xc, yc) / denom, -1.0, 1.0))


def spearman_score(scores, labels) -> float:
    """Spearman rank correlation between weights and the label vector.

    Weights are converted to average ranks; the label vector is already
    two-valued, so its ranks are an affine map of itself and Pearson on the
    ranks is the Spearman coefficient. 0.0 for constant input.
    """
    x, y = _as_arrays(scores, labels)
    return pearson_score(rankdata(x), y)


def auroc_score(scores, labels) -> float:
    """Area under the ROC curve via the Mann-Whitney U statistic.

    AUROC = P(score of a random positive > score of a random negative), with
    ties contributing 0.5. Average ranks give exactly this tie handling.

    Returns 0.5 if there are no positives or no negatives.
    """
    x, y = _as_arrays(scores, labels)
    n_pos = int(y.sum())
    n_neg = len(y) - n_pos
    if n_pos == 0 or n_neg == 0:
        return 0.5
    ranks = rankdata(x)
    u_stat = ranks[y].sum() - n_pos * (n_pos + 1) / 2.0
    return float(u_stat / (n_pos * n_neg))


def aupr_score(scores, labels) -> float:
    """Area under the precision-recall curve (step-wise, not interpolated).

    Genes are ordered by descending score; ties keep their input order
    (stable sort). Each positive adds a recall step of 1/n_pos at the
    precision reached at its position:

        AUPR = sum_k P(k) * (R(k) - R(k-1))

    Returns 0.0 if there are no positives.
    """
    x, y = _as_arrays(scores, labels)
    n_pos = int(y.sum())
    if n_pos == 0:
        return 0.0
    order = np.argsort(-x, kind="stable")
    hits = y[order]
    precision = np.cumsum(hits) / np.arange(1, len(hits) + 1)
    return float(precision[hits].sum() / n_pos)


def competition_rank(values, ascending: bool = False) -> np.ndarray:
    """Standard competition ranks ("1224"): ties share the lowest rank.

    Args:
        values: 1-D array of metric values.
        ascending: If False (default), larger values get better (lower) ranks.

    Returns:
        Integer array of ranks starting at 1.
    """
    values = np.asarray(values, dtype=float)
    keyed = values if ascending else -values
    return rankdata(keyed, method="min").astype(int)
