"""Solver principal : orchestration déduction + recherche.

Pipeline interne :
1. Modèle de contraintes (grille validée, rejet avant toute exécution)
2. Déduction jusqu'au point fixe
3. Recherche par backtracking (arc-consistance à chaque nœud) si nécessaire
4. Cellules encore inconnues → vides ; raison de fin rapportée avec la grille
"""

from __future__ import annotations

import time
from typing import Any, Callable, Dict, Optional

import numpy as np

from mosaic_solver.config import merge_config
from mosaic_solver.lib.s0_grid import CellState, ClueGrid
from mosaic_solver.lib.s0_grid.model import Assignment, ConstraintModel, build_model
from mosaic_solver.lib.s1_governor import GovernorLimits, ProgressCallback, RunContext
from mosaic_solver.lib.s2_propagation import DeductionEngine, PropagationOutcome
from mosaic_solver.lib.s3_search import BacktrackingSearch, SearchStatus
from mosaic_solver.lib.s7_debug import RunLogger, debug_scope, get_logger
from .types import SolveResult, TerminationReason

_SEARCH_TO_REASON = {
    SearchStatus.DONE: TerminationReason.SOLVED,
    SearchStatus.FAIL: TerminationReason.NO_SOLUTION,
    SearchStatus.STOPPED: TerminationReason.GOVERNOR_TRIP,
}


class Solver:
    """Orchestrateur principal du solveur.

    Une instance n'exécute qu'une résolution à la fois ; chaque appel à
    solve() crée son propre contexte d'exécution (gouverneur remis à zéro).
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = merge_config(config)
        self.limits = GovernorLimits.from_config(self.config)
        self.propagator = self.config["propagator"]
        self.empty_bonus = self.config["empty_bonus"]
        self.ac_check_interval = self.config["ac_check_interval"]
        self._clock = clock
        self._context: Optional[RunContext] = None

        log_dir = self.config["log_dir"]
        self.run_logger = RunLogger(log_dir) if log_dir else None
        self.debug = bool(self.config["debug"])
        self.logger = get_logger()

    @property
    def running(self) -> bool:
        return self._context is not None

    def cancel(self) -> None:
        """Annulation coopérative de l'exécution en cours (sans effet sinon)."""
        if self._context is not None:
            self._context.governor.cancel()

    def solve(self, clue_grid: ClueGrid, on_progress: Optional[ProgressCallback] = None) -> SolveResult:
        """Résout une grille d'indices.

        Args:
            clue_grid: Grille R×C d'indices 0-9 ou None
            on_progress: Callback (pourcentage, résolues, total), optionnel

        Returns:
            SolveResult (grille 0/1 + raison de fin)

        Raises:
            InvalidGridError: grille mal formée (aucune exécution lancée)
            RuntimeError: une exécution est déjà active sur ce Solver
        """
        if self._context is not None:
            raise RuntimeError("Une résolution est déjà en cours sur ce Solver")

        model = build_model(clue_grid)
        context = RunContext.create(self.limits, on_progress, clock=self._clock)
        context.governor.reset()
        self._context = context
        try:
            with debug_scope(self.debug):
                return self._run(model, context)
        finally:
            self._context = None

    def _run(self, model: ConstraintModel, context: RunContext) -> SolveResult:
        self.logger.info(
            "[SOLVER] Grille %dx%d, %d indice(s)", model.rows, model.cols, len(model.constraints)
        )
        assignment = Assignment(model)

        # Phase 1 : déduction
        outcome = DeductionEngine(model).propagate(assignment, context)
        if outcome is PropagationOutcome.INCONSISTENT:
            reason = TerminationReason.NO_SOLUTION
        elif outcome is PropagationOutcome.STOPPED:
            reason = TerminationReason.GOVERNOR_TRIP
        elif all(assignment.is_resolved(var) for var in model.constrained_variables()):
            reason = (
                TerminationReason.SOLVED
                if model.is_satisfied(assignment.states())
                else TerminationReason.NO_SOLUTION
            )
        else:
            # Phase 2 : recherche
            self.logger.debug(
                "[SOLVER] Déduction : %d/%d résolues, recherche lancée",
                assignment.resolved_count(), model.size,
            )
            search = BacktrackingSearch(
                model,
                propagator=self.propagator,
                empty_bonus=self.empty_bonus,
                check_interval=self.ac_check_interval,
            )
            reason = _SEARCH_TO_REASON[search.run(assignment, context)]

        trip_kind = context.governor.trip_kind if reason is TerminationReason.GOVERNOR_TRIP else None
        resolved = assignment.resolved_count()

        # Phase 3 : normalisation
        grid = assignment.states()
        grid[grid == CellState.UNKNOWN] = CellState.EMPTY
        grid = grid.astype(np.int8, copy=False)

        stats = context.finish()
        self.logger.info(
            "[SOLVER] Terminé : %s%s (%d passe(s), %d nœud(s), %d retour(s) arrière, %.1f ms)",
            reason.value,
            f"/{trip_kind.value}" if trip_kind else "",
            stats.deduction_passes,
            stats.search_nodes,
            stats.backtracks,
            stats.elapsed_ms,
        )
        if self.run_logger is not None:
            self.run_logger.log_run(
                rows=model.rows,
                cols=model.cols,
                clue_count=len(model.constraints),
                reason=reason.value,
                duration_ms=stats.elapsed_ms,
                trip_kind=trip_kind.value if trip_kind else None,
                deduction_passes=stats.deduction_passes,
                search_nodes=stats.search_nodes,
                backtracks=stats.backtracks,
                resolved=resolved,
                total=model.size,
            )

        return SolveResult(grid=grid, reason=reason, trip_kind=trip_kind, stats=stats)


# === API fonctionnelle ===

def solve(
    clue_grid: ClueGrid,
    config: Optional[Dict[str, Any]] = None,
    on_progress: Optional[ProgressCallback] = None,
) -> SolveResult:
    """Résout une grille (API fonctionnelle, un Solver neuf par appel)."""
    return Solver(config).solve(clue_grid, on_progress=on_progress)
