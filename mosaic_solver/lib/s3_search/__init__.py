"""Module s3_search : recherche par backtracking avec propagation à chaque nœud."""

from .heuristics import order_values, select_variable, value_scores
from .backtracking import BacktrackingSearch, SearchPhase, SearchStatus

__all__ = [
    "order_values",
    "select_variable",
    "value_scores",
    "BacktrackingSearch",
    "SearchPhase",
    "SearchStatus",
]
