"""Typed errors raised by the scoring and link-extraction stages.

Every error names the precondition that failed and carries the identifiers
responsible, so callers can report them without parsing messages.
"""

from typing import Iterable, Optional


def _preview(identifiers: Iterable[str], limit: int = 10) -> str:
    items = sorted(str(i) for i in identifiers)
    shown = ", ".join(items[:limit])
    if len(items) > limit:
        shown += f", ... (+{len(items) - limit} more)"
    return shown


class RegulatorActivityError(ValueError):
    """Base class for all precondition failures in this package."""


class EmptyUniverseError(RegulatorActivityError):
    """Background or gene set of interest is empty after intersection.

    Attributes:
        which: 'background' or 'geneset'.
        requested: Identifiers the caller asked for before intersection.
    """

    def __init__(self, which: str, requested: Iterable[str]):
        self.which = which
        self.requested = frozenset(requested)
        super().__init__(
            f"{which} is empty after intersection with the prior matrix "
            f"({len(self.requested)} requested: {_preview(self.requested) or 'none'})"
        )


class EmptyCandidateError(RegulatorActivityError):
    """No candidate regulator is a column of the prior matrix."""

    def __init__(self, requested: Iterable[str]):
        self.requested = frozenset(requested)
        super().__init__(
            f"No candidate regulator found in the prior matrix columns "
            f"({len(self.requested)} requested: {_preview(self.requested) or 'none'})"
        )


class UnknownIdentifierError(RegulatorActivityError, KeyError):
    """Identifiers referenced by the caller are absent from the prior matrix.

    Attributes:
        axis: 'target' (rows) or 'regulator' (columns).
        missing: The identifiers that could not be resolved.
    """

    def __init__(self, axis: str, missing: Iterable[str]):
        self.axis = axis
        self.missing = frozenset(missing)
        super().__init__(
            f"Unknown {axis} identifier(s): {_preview(self.missing)}"
        )

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.args[0]


class InvalidTopKError(RegulatorActivityError):
    """Top-K selection was requested with K < 1."""

    def __init__(self, k: int, metric: Optional[str] = None):
        self.k = k
        self.metric = metric
        where = f" for metric '{metric}'" if metric else ""
        super().__init__(f"Top-K must be >= 1{where}, got {k}")
