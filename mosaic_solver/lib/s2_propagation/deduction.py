"""Moteur de déduction : règles de comptage locales, sans spéculation."""

from __future__ import annotations

from mosaic_solver.lib.s0_grid import DOMAIN_BOTH, DOMAIN_EMPTY, DOMAIN_FILLED
from mosaic_solver.lib.s0_grid.model import Assignment, ConstraintModel
from mosaic_solver.lib.s1_governor import RunContext
from mosaic_solver.lib.s7_debug.console import get_logger
from .types import PassResult, PropagationOutcome


class DeductionEngine:
    """Applique les règles de saturation et de remplissage forcé jusqu'au point fixe."""

    def __init__(self, model: ConstraintModel):
        self.model = model
        self.logger = get_logger()

    def run_pass(self, assignment: Assignment) -> PassResult:
        """
        Une passe complète sur toutes les contraintes.

        Les affectations faites par une contrainte sont visibles des
        contraintes évaluées ensuite dans la même passe. La passe s'arrête
        à la première contrainte violée.
        """
        result = PassResult()
        for constraint in self.model.constraints:
            filled, unknown = assignment.counts(constraint)
            required = constraint.requirement

            if filled > required or filled + unknown < required:
                self.logger.debug(
                    "[DEDUCTION] Contradiction en %s : requis %d, rempli %d, inconnu %d",
                    constraint.anchor, required, filled, unknown,
                )
                result.conflict = constraint.index
                return result

            if unknown == 0:
                continue

            # Règle A : saturation → inconnues vides
            if filled == required:
                target, bucket = DOMAIN_EMPTY, result.emptied
            # Règle B : remplissage forcé → inconnues remplies
            elif filled + unknown == required:
                target, bucket = DOMAIN_FILLED, result.filled
            else:
                continue

            for var in constraint.scope:
                if assignment.domain(var) == DOMAIN_BOTH:
                    assignment.set_domain(var, target)
                    bucket.append(var)
            self.logger.debug(
                "[DEDUCTION] %s (requis %d) : %d cellule(s) %s",
                constraint.anchor, required, unknown,
                "vides" if target == DOMAIN_EMPTY else "remplies",
            )
        return result

    def propagate(self, assignment: Assignment, context: RunContext) -> PropagationOutcome:
        """Enchaîne les passes jusqu'au point fixe, une contradiction ou un arrêt."""
        while True:
            if context.should_stop():
                return PropagationOutcome.STOPPED
            context.tick()
            context.stats.deduction_passes += 1

            result = self.run_pass(assignment)
            context.report_progress(assignment.resolved_count(), self.model.size)

            if result.inconsistent:
                return PropagationOutcome.INCONSISTENT
            if not result.changed:
                return PropagationOutcome.FIXPOINT
