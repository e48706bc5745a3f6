"""
Shared fixtures: small prior matrices with hand-checkable activity values.
"""

import numpy as np
import pandas as pd
import pytest

from regulator_activity.prior_matrix import RegulatoryPotentialMatrix


@pytest.fixture
def toy_prior():
    """Four targets, two regulators.

    rA ranks both genes of interest (t1, t2) above both negatives; rB puts
    one positive and one negative on top.
    """
    df = pd.DataFrame(
        {"rA": [1.0, 1.0, 0.0, 0.0], "rB": [0.0, 1.0, 1.0, 0.0]},
        index=["t1", "t2", "t3", "t4"],
    )
    return RegulatoryPotentialMatrix(df)


@pytest.fixture
def toy_sets():
    return {"t1", "t2", "t3", "t4"}, {"t1", "t2"}


@pytest.fixture
def link_prior():
    """Six targets, three regulators; g1-g4 are the genes of interest.

    R1 has a weight tie (g2/g3) and a zero on g4, R2 only links outside the
    gene set, R3 has the strongest gene-set signal.
    """
    df = pd.DataFrame(
        {
            "R1": [0.9, 0.5, 0.5, 0.0, 0.8, 0.1],
            "R2": [0.0, 0.0, 0.0, 0.0, 0.7, 0.3],
            "R3": [0.2, 0.4, 0.0, 0.6, 0.0, 0.0],
        },
        index=["g1", "g2", "g3", "g4", "g5", "g6"],
    )
    return RegulatoryPotentialMatrix(df)


@pytest.fixture
def link_sets():
    background = {"g1", "g2", "g3", "g4", "g5", "g6"}
    geneset = {"g1", "g2", "g3", "g4"}
    return background, geneset


@pytest.fixture
def random_prior():
    """Sparse random prior with 200 targets and 30 regulators."""
    rng = np.random.default_rng(42)
    values = rng.exponential(1.0, size=(200, 30))
    values[rng.random(values.shape) < 0.6] = 0.0
    values[:, 0] = 0.25  # one constant column
    df = pd.DataFrame(
        values,
        index=[f"gene{i}" for i in range(200)],
        columns=[f"reg{j}" for j in range(30)],
    )
    return RegulatoryPotentialMatrix(df)
