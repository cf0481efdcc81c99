"""Recherche par backtracking : SELECT_VAR → SELECT_VAL → PROPAGATE → (RECURSE | UNDO) → DONE | FAIL.

Chaque affectation tentative est suivie d'une propagation ; une incohérence
annule l'affectation (journal d'annulation) et passe à la valeur suivante.
Sans budget limitant, la recherche est correcte et complète.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Optional

from mosaic_solver.config import SEARCH_CONFIG
from mosaic_solver.lib.s0_grid.model import Assignment, ConstraintModel
from mosaic_solver.lib.s1_governor import RunContext, TripKind
from mosaic_solver.lib.s2_propagation import (
    ArcConsistencyReducer,
    DeductionEngine,
    PropagationOutcome,
)
from mosaic_solver.lib.s7_debug.console import get_logger
from .heuristics import order_values, select_variable


class SearchPhase(str, Enum):
    """Phase courante de la machine à états de recherche."""
    SELECT_VAR = "SELECT_VAR"
    SELECT_VAL = "SELECT_VAL"
    PROPAGATE = "PROPAGATE"
    RECURSE = "RECURSE"
    UNDO = "UNDO"
    DONE = "DONE"
    FAIL = "FAIL"


class SearchStatus(str, Enum):
    """Issue d'une recherche (ou d'un sous-arbre)."""
    DONE = "DONE"
    FAIL = "FAIL"
    STOPPED = "STOPPED"


class BacktrackingSearch:
    """Recherche en profondeur sur les variables touchées par au moins une contrainte."""

    def __init__(
        self,
        model: ConstraintModel,
        propagator: str = SEARCH_CONFIG['propagator'],
        empty_bonus: float = SEARCH_CONFIG['empty_bonus'],
        check_interval: int = SEARCH_CONFIG['ac_check_interval'],
    ):
        if propagator not in ("arc", "count"):
            raise ValueError(f"Propagateur inconnu : {propagator!r}")
        self.model = model
        self.propagator = propagator
        self.empty_bonus = empty_bonus
        self.deduction = DeductionEngine(model)
        self.reducer = ArcConsistencyReducer(model, check_interval=check_interval)
        self.candidates = tuple(model.constrained_variables())
        self.phase = SearchPhase.SELECT_VAR
        self.logger = get_logger()

    def run(self, assignment: Assignment, context: RunContext) -> SearchStatus:
        """
        Lance la recherche depuis l'état courant.

        En cas d'échec, l'état de départ est restauré ; en cas d'arrêt forcé,
        l'affectation partielle la plus profonde est laissée en place.
        """
        start = assignment.mark()
        outcome = self._propagate(assignment, context, seeds=None)
        if outcome is PropagationOutcome.STOPPED:
            return SearchStatus.STOPPED
        if outcome is PropagationOutcome.INCONSISTENT:
            assignment.undo(start)
            self.phase = SearchPhase.FAIL
            return SearchStatus.FAIL

        try:
            status = self._search(assignment, context, depth=1)
        except RecursionError:
            # Pile Python plus courte que max_depth : traité comme une limite de profondeur
            context.governor.trip(TripKind.DEPTH_CAP)
            context.governor.depth = 0
            self.logger.warning(
                "[SEARCH] Pile d'appels épuisée à la profondeur %d", context.governor.max_depth_reached
            )
            return SearchStatus.STOPPED
        if status is SearchStatus.FAIL:
            assignment.undo(start)
        return status

    def _propagate(
        self,
        assignment: Assignment,
        context: RunContext,
        seeds: Optional[Iterable[int]],
    ) -> PropagationOutcome:
        if self.propagator == "count":
            return self.deduction.propagate(assignment, context)
        return self.reducer.reduce(assignment, context, seeds=seeds)

    def _search(self, assignment: Assignment, context: RunContext, depth: int) -> SearchStatus:
        context.tick()
        if context.should_stop():
            return SearchStatus.STOPPED

        governor = context.governor
        try:
            if not governor.enter():
                self.logger.debug("[SEARCH] Profondeur maximale dépassée (%d)", depth)
                return SearchStatus.STOPPED

            context.stats.search_nodes += 1
            context.report_progress(assignment.resolved_count(), self.model.size)

            self.phase = SearchPhase.SELECT_VAR
            var = select_variable(self.model, assignment, self.candidates)
            if var is None:
                if self.model.is_satisfied(assignment.states()):
                    self.phase = SearchPhase.DONE
                    return SearchStatus.DONE
                self.phase = SearchPhase.FAIL
                return SearchStatus.FAIL

            self.phase = SearchPhase.SELECT_VAL
            for value in order_values(self.model, assignment, var, self.empty_bonus):
                mark = assignment.mark()
                self.phase = SearchPhase.PROPAGATE
                assignment.assign(var, value)
                self.logger.debug(
                    "[SEARCH] Profondeur %d : %s ← %s", depth, self.model.coord(var), value.name
                )

                outcome = self._propagate(assignment, context, seeds=(var,))
                if outcome is PropagationOutcome.STOPPED:
                    return SearchStatus.STOPPED
                if outcome is PropagationOutcome.FIXPOINT:
                    self.phase = SearchPhase.RECURSE
                    status = self._search(assignment, context, depth + 1)
                    if status is not SearchStatus.FAIL:
                        return status

                self.phase = SearchPhase.UNDO
                assignment.undo(mark)
                context.stats.backtracks += 1
                self.logger.debug(
                    "[SEARCH] Retour arrière en %s (profondeur %d)", self.model.coord(var), depth
                )

            self.phase = SearchPhase.FAIL
            return SearchStatus.FAIL
        finally:
            governor.exit()
