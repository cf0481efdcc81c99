"""Module s2_propagation : déduction par comptage et réduction par arc-consistance."""

from .types import PassResult, PropagationOutcome
from .deduction import DeductionEngine
from .arc_consistency import ArcConsistencyReducer

__all__ = [
    "PassResult",
    "PropagationOutcome",
    "DeductionEngine",
    "ArcConsistencyReducer",
]
