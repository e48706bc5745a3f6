"""End-to-end tests for the scoring → selection → link pipeline."""

import pandas as pd
import pytest

from regulator_activity.errors import EmptyUniverseError, InvalidTopKError
from regulator_activity.pipeline import (
    main,
    predict_regulator_activities,
    run_activity_pipeline,
    run_pipeline_from_files,
)


class TestPredictActivities:

    def test_toy_scenario(self, toy_prior, toy_sets):
        background, geneset = toy_sets
        df = predict_regulator_activities(toy_prior, background, geneset, {"rA", "rB"})
        assert df["regulator"].tolist() == ["rA", "rB"]
        assert df["auroc"].tolist() == pytest.approx([1.0, 0.5])
        assert df["rank"].tolist() == [1, 2]

    def test_empty_geneset_aborts(self, toy_prior, toy_sets):
        background, _ = toy_sets
        with pytest.raises(EmptyUniverseError):
            predict_regulator_activities(toy_prior, background, set(), {"rA", "rB"})


class TestRunPipeline:

    def test_full_run(self, link_prior, link_sets):
        background, geneset = link_sets
        result = run_activity_pipeline(
            link_prior, background, geneset, {"R1", "R2", "R3", "R9"}, n_targets=10,
        )
        assert result.universe.candidates == ("R1", "R2", "R3")
        assert result.activities["regulator"].tolist() == ["R3", "R1", "R2"]
        assert result.selected == ["R3", "R1", "R2"]
        assert {link.regulator for link in result.links} == {"R1", "R3"}
        assert {link.target for link in result.links} <= geneset
        assert result.link_matrix.rows == ["R3", "R1"]
        assert result.link_matrix.columns == ["g4", "g2", "g1", "g3"]

    def test_top_k_over_ask_is_not_an_error(self, link_prior, link_sets):
        background, geneset = link_sets
        result = run_activity_pipeline(
            link_prior, background, geneset, {"R1", "R2", "R3"},
            top_k={"pearson": 5},
        )
        assert sorted(result.selected) == ["R1", "R2", "R3"]

    def test_invalid_top_k(self, link_prior, link_sets):
        background, geneset = link_sets
        with pytest.raises(InvalidTopKError):
            run_activity_pipeline(link_prior, background, geneset, {"R1"}, top_k=0)

    def test_cutoff_applied(self, link_prior, link_sets):
        background, geneset = link_sets
        result = run_activity_pipeline(
            link_prior, background, geneset, {"R1", "R3"}, cutoff=0.5,
        )
        assert result.link_matrix.data.to_numpy().max() == pytest.approx(0.5)
        assert result.link_matrix.value("R1", "g1") == pytest.approx(0.5)


class TestFiles:

    @pytest.fixture
    def input_files(self, tmp_path, link_prior, link_sets):
        background, geneset = link_sets
        prior_path = tmp_path / "prior.csv"
        link_prior.to_frame().to_csv(prior_path)
        (tmp_path / "background.txt").write_text("\n".join(sorted(background)) + "\n")
        (tmp_path / "geneset.txt").write_text("# DEGs\n" + "\n".join(sorted(geneset)) + "\n")
        (tmp_path / "candidates.txt").write_text("R1\nR3\n")
        return tmp_path

    def test_requires_explicit_candidates(self, input_files):
        with pytest.raises(ValueError, match="candidates"):
            run_pipeline_from_files(
                input_files / "prior.csv",
                input_files / "background.txt",
                input_files / "geneset.txt",
                input_files / "out",
            )

    def test_all_regulators(self, input_files):
        result = run_pipeline_from_files(
            input_files / "prior.csv",
            input_files / "background.txt",
            input_files / "geneset.txt",
            input_files / "out",
            all_regulators=True,
        )
        assert set(result.universe.candidates) == {"R1", "R2", "R3"}

    def test_cli_writes_outputs(self, input_files):
        config = input_files / "config.yaml"
        config.write_text("link_matrix:\n  cutoff: 0.5\nweighted_links:\n  n_targets: 2\n")
        out = input_files / "out"
        main([
            "--config", str(config),
            "--prior-file", str(input_files / "prior.csv"),
            "--background-file", str(input_files / "background.txt"),
            "--geneset-file", str(input_files / "geneset.txt"),
            "--candidates-file", str(input_files / "candidates.txt"),
            "--output-dir", str(out),
        ])
        activities = pd.read_csv(out / "regulator_activities.csv")
        assert activities["regulator"].tolist() == ["R3", "R1"]
        links = pd.read_csv(out / "weighted_links.csv")
        assert links.groupby("regulator").size().max() <= 2
        matrix = pd.read_csv(out / "link_matrix.csv", index_col=0)
        assert matrix.to_numpy().max() <= 0.5
        assert (out / "selected_regulators.txt").read_text().split() == ["R3", "R1"]

    def test_cli_null_config_values_fall_back_to_flags(self, input_files):
        config = input_files / "config.yaml"
        config.write_text(
            "weighted_links:\n"
            "link_matrix:\n  cutoff: null\n  quantile_floor: null\n"
        )
        out = input_files / "out"
        main([
            "--config", str(config),
            "--prior-file", str(input_files / "prior.csv"),
            "--background-file", str(input_files / "background.txt"),
            "--geneset-file", str(input_files / "geneset.txt"),
            "--candidates-file", str(input_files / "candidates.txt"),
            "--output-dir", str(out),
            "--cutoff", "0.5",
        ])
        matrix = pd.read_csv(out / "link_matrix.csv", index_col=0)
        assert matrix.to_numpy().max() == pytest.approx(0.5)
