"""Tests for competition ranking and multi-metric top-K selection."""

import pytest

from regulator_activity.activity_scoring import ActivityRecord
from regulator_activity.errors import InvalidTopKError
from regulator_activity.ranking import (
    activities_to_frame,
    assign_ranks,
    order_by_rank,
    select_top_regulators,
    top_k_by_metric,
)


def _record(name, pearson, auroc, aupr, rank=1):
    return ActivityRecord(
        regulator=name, pearson=pearson, auroc=auroc, aupr=aupr,
        aupr_corrected=aupr - 0.1, spearman=pearson, rank=rank,
    )


@pytest.fixture
def records():
    recs = [
        _record("A", 0.30, 0.60, 0.20),
        _record("B", 0.10, 0.90, 0.15),
        _record("C", 0.30, 0.55, 0.50),
        _record("D", 0.05, 0.50, 0.10),
        _record("E", 0.20, 0.70, 0.12),
    ]
    return assign_ranks(recs, "pearson")


class TestAssignRanks:

    def test_competition_ranks(self, records):
        assert [r.rank for r in records] == [1, 4, 1, 5, 3]

    def test_returns_new_records(self, records):
        reranked = assign_ranks(records, "auroc")
        assert [r.rank for r in reranked] == [3, 1, 4, 5, 2]
        assert [r.rank for r in records] == [1, 4, 1, 5, 3]

    def test_empty(self):
        assert assign_ranks([]) == []


class TestTopK:

    def test_exact_cardinality_and_dominance(self, records):
        top = top_k_by_metric(records, "auroc", 2)
        assert top == ["B", "E"]
        excluded = [r for r in records if r.regulator not in top]
        kept = [r for r in records if r.regulator in top]
        assert min(r.auroc for r in kept) >= max(r.auroc for r in excluded)

    def test_ties_at_boundary_use_candidate_order(self, records):
        # A and C tie on pearson; only one fits
        assert top_k_by_metric(records, "pearson", 1) == ["A"]

    def test_over_ask_is_clipped(self, records, caplog):
        top = top_k_by_metric(records[:3], "pearson", 5)
        assert sorted(top) == ["A", "B", "C"]
        assert "only 3 regulators" in caplog.text

    @pytest.mark.parametrize("k", [0, -3])
    def test_invalid_k(self, records, k):
        with pytest.raises(InvalidTopKError) as exc:
            top_k_by_metric(records, "pearson", k)
        assert exc.value.k == k


class TestSelectTopRegulators:

    def test_union_across_metrics(self, records):
        selected = select_top_regulators(records, top_k=1)
        # pearson -> A, auroc -> B, aupr -> C
        assert set(selected) == {"A", "B", "C"}

    def test_order_best_first(self, records):
        assert select_top_regulators(records, top_k=1) == ["A", "C", "B"]

    def test_per_metric_mapping(self, records):
        selected = select_top_regulators(records, top_k={"auroc": 2, "aupr": 1})
        assert set(selected) == {"B", "E", "C"}

    def test_duplicates_removed(self, records):
        selected = select_top_regulators(records, top_k=5)
        assert sorted(selected) == ["A", "B", "C", "D", "E"]

    def test_invalid_k_raises_before_selection(self, records):
        with pytest.raises(InvalidTopKError):
            select_top_regulators(records, top_k={"pearson": 2, "aupr": 0})

    def test_unknown_metric(self, records):
        with pytest.raises(ValueError):
            select_top_regulators(records, top_k=2, metrics=["pearson", "mcc"])


def test_activities_to_frame_sorted_by_rank(records):
    df = activities_to_frame(records, metric_ranks=True)
    assert df["rank"].tolist() == [1, 1, 3, 4, 5]
    assert df["regulator"].tolist() == ["A", "C", "E", "B", "D"]
    assert df.loc[df["regulator"] == "B", "rank_auroc"].item() == 1
    assert list(df.columns[:7]) == [
        "regulator", "pearson", "auroc", "aupr", "aupr_corrected", "spearman", "rank",
    ]


def test_order_by_rank(records):
    assert order_by_rank(records, {"D", "E", "A"}) == ["A", "E", "D"]
