"""Réduction par arc-consistance sur le CSP binaire dérivé des contraintes de comptage.

Un arc (Xi → Xj, C) existe pour chaque paire de variables de la portée de C.
Réviser l'arc retire de D(Xi) toute valeur v sans support w dans D(Xj) :
avec Xi=v, Xj=w et les autres membres de la portée dans leur état courant,
C doit rester satisfaisable. Les portées d'une seule cellule (grille 1x1)
sont révisées en unaire (Xj = -1).
"""

from __future__ import annotations

from collections import deque
from typing import Deque, Iterable, List, Optional, Set, Tuple

from mosaic_solver.config import SEARCH_CONFIG
from mosaic_solver.lib.s0_grid import DOMAIN_BOTH, DOMAIN_EMPTY, DOMAIN_FILLED, DOMAIN_NONE
from mosaic_solver.lib.s0_grid.model import Assignment, ConstraintModel
from mosaic_solver.lib.s1_governor import RunContext
from mosaic_solver.lib.s7_debug.console import get_logger
from .types import PropagationOutcome

Arc = Tuple[int, int, int]  # (xi, xj, index de contrainte)

UNARY = -1


class ArcConsistencyReducer:
    """File d'arcs à la AC-3 ; chaque réduction de D(Xi) remet en file les arcs entrant dans Xi
    (sauf l'arc inverse de celui qui a provoqué la réduction)."""

    def __init__(self, model: ConstraintModel, check_interval: int = SEARCH_CONFIG['ac_check_interval']):
        self.model = model
        self.check_interval = max(1, int(check_interval))
        self.logger = get_logger()

        # Arcs (Xk → Xi, C) indexés par Xi
        self._arcs_into: List[List[Arc]] = [[] for _ in range(model.size)]
        self._unary: List[List[Arc]] = [[] for _ in range(model.size)]
        for constraint in model.constraints:
            if constraint.size == 1:
                var = constraint.scope[0]
                self._unary[var].append((var, UNARY, constraint.index))
                continue
            for xi in constraint.scope:
                for xk in constraint.scope:
                    if xk != xi:
                        self._arcs_into[xi].append((xk, xi, constraint.index))

    def initial_arcs(self) -> List[Arc]:
        arcs: List[Arc] = []
        for var in range(self.model.size):
            arcs.extend(self._unary[var])
            arcs.extend(self._arcs_into[var])
        return arcs

    def seed_arcs(self, variables: Iterable[int]) -> List[Arc]:
        """Arcs à réviser après la modification des variables données."""
        arcs: List[Arc] = []
        for var in variables:
            arcs.extend(self._unary[var])
            arcs.extend(self._arcs_into[var])
        return arcs

    def reduce(
        self,
        assignment: Assignment,
        context: RunContext,
        seeds: Optional[Iterable[int]] = None,
    ) -> PropagationOutcome:
        """
        Propage jusqu'à ce que la file soit vide.

        Args:
            assignment: Domaines courants (modifiés sur place, journalisés)
            context: Contexte d'exécution (gouverneur consulté périodiquement)
            seeds: Variables modifiées ; None = tous les arcs

        Returns:
            FIXPOINT, INCONSISTENT (domaine vide) ou STOPPED
        """
        arcs = self.initial_arcs() if seeds is None else self.seed_arcs(seeds)
        queue: Deque[Arc] = deque()
        queued: Set[Arc] = set()
        for arc in arcs:
            if arc not in queued:
                queue.append(arc)
                queued.add(arc)

        revisions = 0
        while queue:
            if revisions % self.check_interval == 0 and context.should_stop():
                return PropagationOutcome.STOPPED

            arc = queue.popleft()
            queued.discard(arc)
            xi, xj, ci = arc
            revisions += 1
            context.stats.arc_revisions += 1

            before = assignment.domain(xi)
            after = self._revise(assignment, xi, xj, ci)
            if after == before:
                continue

            assignment.set_domain(xi, after)
            if after == DOMAIN_NONE:
                self.logger.debug(
                    "[ARC] Domaine vide pour %s sous la contrainte %s",
                    self.model.coord(xi), self.model.constraints[ci].anchor,
                )
                return PropagationOutcome.INCONSISTENT

            for follow in self._arcs_into[xi]:
                if follow[0] == xj and follow[2] == ci:
                    continue
                if follow not in queued:
                    queue.append(follow)
                    queued.add(follow)

        return PropagationOutcome.FIXPOINT

    def _revise(self, assignment: Assignment, xi: int, xj: int, ci: int) -> int:
        """Retourne le domaine de Xi restreint aux valeurs supportées par Xj."""
        constraint = self.model.constraints[ci]
        required = constraint.requirement

        filled_rest = 0
        unknown_rest = 0
        for var in constraint.scope:
            if var == xi or var == xj:
                continue
            mask = assignment.domain(var)
            if mask == DOMAIN_FILLED:
                filled_rest += 1
            elif mask == DOMAIN_BOTH:
                unknown_rest += 1

        if xj == UNARY:
            partner = (0,)
        else:
            partner_mask = assignment.domain(xj)
            partner = tuple(
                w for w, bit in ((0, DOMAIN_EMPTY), (1, DOMAIN_FILLED)) if partner_mask & bit
            )

        domain = assignment.domain(xi)
        kept = DOMAIN_NONE
        for v, bit in ((0, DOMAIN_EMPTY), (1, DOMAIN_FILLED)):
            if not domain & bit:
                continue
            for w in partner:
                base = filled_rest + v + w
                if base <= required <= base + unknown_rest:
                    kept |= bit
                    break
        return kept
