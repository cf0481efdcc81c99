"""Module s1_governor : budgets temps/opérations/profondeur et contexte d'exécution."""

from .types import GovernorLimits, ProgressCallback, RunStats, TripKind
from .governor import ResourceGovernor
from .context import RunContext

__all__ = [
    "GovernorLimits",
    "ProgressCallback",
    "RunStats",
    "TripKind",
    "ResourceGovernor",
    "RunContext",
]
