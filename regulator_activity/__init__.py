"""
regulator_activity: Prior-knowledge scoring of upstream regulators (ligands
or transcription factors) against a differential expression signature.

Analyses:
    1. prior_matrix     : Read-only regulatory-potential matrix (targets × regulators)
    2. gene_universe    : Background / gene set / candidate validation
    3. activity_scoring : Pearson, AUROC and AUPR activity per regulator
    4. ranking          : Competition ranks and multi-metric top-K selection
    5. weighted_links   : Top-N regulator → target links within the gene set
    6. link_matrix      : Dense, saturated regulator × target link matrix
    7. pipeline         : End-to-end orchestration and CLI
"""

from .errors import (
    EmptyCandidateError,
    EmptyUniverseError,
    InvalidTopKError,
    RegulatorActivityError,
    UnknownIdentifierError,
)
from .prior_matrix import RegulatoryPotentialMatrix
from .gene_universe import GeneUniverse, validate_universe
from .activity_scoring import ActivityRecord, score_regulators
from .ranking import activities_to_frame, assign_ranks, select_top_regulators
from .weighted_links import WeightedLink, get_weighted_links
from .link_matrix import LinkMatrix, prepare_link_matrix
from .pipeline import PipelineResult, predict_regulator_activities, run_activity_pipeline

__version__ = "0.1.0"

__all__ = [
    "ActivityRecord",
    "EmptyCandidateError",
    "EmptyUniverseError",
    "GeneUniverse",
    "InvalidTopKError",
    "LinkMatrix",
    "PipelineResult",
    "RegulatorActivityError",
    "RegulatoryPotentialMatrix",
    "UnknownIdentifierError",
    "WeightedLink",
    "activities_to_frame",
    "assign_ranks",
    "get_weighted_links",
    "predict_regulator_activities",
    "prepare_link_matrix",
    "run_activity_pipeline",
    "score_regulators",
    "select_top_regulators",
    "validate_universe",
]
