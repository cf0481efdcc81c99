"""Session pas à pas : une passe de déduction par appel à advance()."""

from __future__ import annotations

import time
from typing import Any, Callable, Dict, Optional

import numpy as np

from mosaic_solver.config import merge_config
from mosaic_solver.lib.s0_grid import ClueGrid
from mosaic_solver.lib.s0_grid.model import Assignment, build_model
from mosaic_solver.lib.s1_governor import GovernorLimits, RunContext
from mosaic_solver.lib.s2_propagation import DeductionEngine
from mosaic_solver.lib.s7_debug import RunLogger, debug_scope, get_logger
from .types import StepDelta


class StepSession:
    """État persistant d'une démonstration pas à pas."""

    def __init__(
        self,
        clue_grid: ClueGrid,
        config: Optional[Dict[str, Any]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = merge_config(config)
        self.model = build_model(clue_grid)
        self.assignment = Assignment(self.model)
        self.engine = DeductionEngine(self.model)
        self.context = RunContext.create(GovernorLimits.from_config(self.config), clock=clock)
        self.iteration = 0
        self.complete = False
        self.inconsistent = False
        log_dir = self.config["log_dir"]
        self.run_logger = RunLogger(log_dir) if log_dir else None
        self.debug = bool(self.config["debug"])
        self.logger = get_logger()

    @property
    def grid(self) -> np.ndarray:
        """Copie des états courants (-1 inconnu, 0 vide, 1 rempli)."""
        return self.assignment.states()

    @property
    def resolved_count(self) -> int:
        return self.assignment.resolved_count()

    def advance(self) -> StepDelta:
        """Exécute exactement une passe de déduction et retourne le delta."""
        if self.complete:
            return StepDelta([], [], True, self.iteration, self.inconsistent, "Résolution déjà terminée")

        # Budget temps par appel : l'attente entre deux étapes ne compte pas
        self.context.governor.restart_timer()
        with debug_scope(self.debug):
            return self._advance()

    def _advance(self) -> StepDelta:
        if self.context.should_stop():
            self.complete = True
            kind = self.context.governor.trip_kind
            return StepDelta(
                [], [], True, self.iteration, False, f"Budget épuisé ({kind.value if kind else '?'})"
            )

        self.context.tick()
        self.context.stats.deduction_passes += 1
        self.iteration += 1

        result = self.engine.run_pass(self.assignment)
        filled = [self.model.coord(var) for var in result.filled]
        emptied = [self.model.coord(var) for var in result.emptied]

        if result.inconsistent:
            self.complete = True
            self.inconsistent = True
            anchor = self.model.constraints[result.conflict].anchor
            message = f"Contradiction sur l'indice en {anchor}"
        elif not result.changed:
            self.complete = True
            message = "Propagation convergée, aucune avancée possible"
        elif all(self.assignment.is_resolved(var) for var in self.model.constrained_variables()):
            self.complete = True
            message = "Grille entièrement résolue"
        else:
            message = f"Itération {self.iteration} : {len(filled) + len(emptied)} cellule(s) déterminée(s)"

        self.logger.debug("[STEP] %s", message)
        if self.run_logger is not None:
            self.run_logger.log_step(
                iteration=self.iteration,
                filled_count=len(filled),
                emptied_count=len(emptied),
                complete=self.complete,
                inconsistent=self.inconsistent,
            )

        return StepDelta(
            cells_newly_filled=filled,
            cells_newly_emptied=emptied,
            complete=self.complete,
            iteration=self.iteration,
            inconsistent=self.inconsistent,
            message=message,
        )


def start_step_session(clue_grid: ClueGrid, config: Optional[Dict[str, Any]] = None) -> StepSession:
    """Démarre une session pas à pas (la grille est validée immédiatement)."""
    return StepSession(clue_grid, config)
