"""I/O helpers for loading inputs and saving analysis results."""

from pathlib import Path

import pandas as pd
import yaml

from ..link_matrix import LinkMatrix
from ..prior_matrix import RegulatoryPotentialMatrix
from ..weighted_links import WeightedLink, links_to_frame


def _sep_for(path: Path) -> str:
    return "\t" if path.suffix in {".tsv", ".txt"} else ","


def load_prior_matrix(path: str | Path) -> RegulatoryPotentialMatrix:
    """Load a regulatory-potential matrix (targets × regulators).

    Args:
        path: CSV or TSV with target genes in the first column and one
            column per regulator.

    Returns:
        RegulatoryPotentialMatrix.

    Raises:
        ValueError: If the matrix has duplicate labels or blank, non-numeric
            or negative weights.
    """
    path = Path(path)
    # gene symbols such as "NA" or "NULL" must not be read as missing values
    df = pd.read_csv(path, sep=_sep_for(path), index_col=0, keep_default_na=False)
    df = df.apply(pd.to_numeric, errors="coerce")
    df.index = df.index.astype(str)
    df.columns = df.columns.astype(str)
    return RegulatoryPotentialMatrix(df)


def load_gene_set(path: str | Path) -> set:
    """Load a set of identifiers, one per line (blank lines and '#' comments skipped).

    Args:
        path: Plain text file.

    Returns:
        Set of identifiers.
    """
    with open(path) as f:
        return {
            line.strip()
            for line in f
            if line.strip() and not line.lstrip().startswith("#")
        }


def save_activities(df: pd.DataFrame, path: str | Path) -> None:
    """Save a ranked activity table to CSV.

    Args:
        df: Output of activities_to_frame().
        path: Output path for the CSV file.
    """
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False)


def save_links(links: list[WeightedLink], path: str | Path) -> None:
    """Save a weighted link list as a ['regulator', 'target', 'weight'] CSV."""
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    links_to_frame(links).to_csv(path, index=False)


def save_link_matrix(matrix: LinkMatrix, path: str | Path) -> None:
    """Save a dense link matrix to CSV with row labels in the first column."""
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    matrix.data.to_csv(path)


def load_config(path: str | Path) -> dict:
    """Load a YAML configuration file.

    Args:
        path: Path to a YAML config file.

    Returns:
        Dictionary of configuration parameters (empty for an empty file).

    Raises:
        FileNotFoundError: If the config file does not exist.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path) as f:
        return yaml.safe_load(f) or {}
