"""Heuristiques d'ordre : variable (MRV + degré) et valeur (pression de remplissage)."""

from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from mosaic_solver.config import SEARCH_CONFIG
from mosaic_solver.lib.s0_grid import CellState, DOMAIN_EMPTY, DOMAIN_FILLED, domain_values
from mosaic_solver.lib.s0_grid.model import Assignment, ConstraintModel


def select_variable(
    model: ConstraintModel,
    assignment: Assignment,
    candidates: Iterable[int],
) -> Optional[int]:
    """Variable non résolue au plus petit domaine, puis au plus grand degré, puis au plus petit index."""
    best: Optional[int] = None
    best_key: Optional[Tuple[int, int, int]] = None
    for var in candidates:
        mask = assignment.domain(var)
        if mask in (DOMAIN_EMPTY, DOMAIN_FILLED):
            continue
        key = (bin(mask).count("1"), -model.degree(var), var)
        if best_key is None or key < best_key:
            best, best_key = var, key
    return best


def value_scores(
    model: ConstraintModel,
    assignment: Assignment,
    var: int,
    empty_bonus: float = SEARCH_CONFIG['empty_bonus'],
) -> Tuple[float, float]:
    """Retourne (score rempli, score vide) d'une variable."""
    fill_score = 0.0
    empty_score = 0.0
    for ci in model.cell_constraints[var]:
        constraint = model.constraints[ci]
        filled, _ = assignment.counts(constraint)
        fill_score += max(0, constraint.requirement - filled)
        if filled == constraint.requirement:
            empty_score += empty_bonus
    return fill_score, empty_score


def order_values(
    model: ConstraintModel,
    assignment: Assignment,
    var: int,
    empty_bonus: float = SEARCH_CONFIG['empty_bonus'],
) -> List[CellState]:
    """Valeurs du domaine, la branche au meilleur score en premier (égalité → rempli)."""
    fill_score, empty_score = value_scores(model, assignment, var, empty_bonus)
    preferred = (
        [CellState.FILLED, CellState.EMPTY]
        if fill_score >= empty_score
        else [CellState.EMPTY, CellState.FILLED]
    )
    available = domain_values(assignment.domain(var))
    return [value for value in preferred if value in available]
