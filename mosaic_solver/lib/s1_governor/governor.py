"""Gouverneur de ressources : temps, opérations, profondeur, arrêt collant.

Un gouverneur appartient à une seule exécution à la fois (non réentrant).
Une fois déclenché, il le reste jusqu'au prochain reset() : chaque
vérification suivante court-circuite sans relire l'horloge, ce qui permet
à une pile de récursion profonde de se dérouler rapidement.
"""

from __future__ import annotations

import time
from typing import Any, Callable, Dict, Optional

from .types import GovernorLimits, TripKind


class ResourceGovernor:
    """Compteurs et seuils d'une exécution du solveur."""

    def __init__(
        self,
        limits: Optional[GovernorLimits] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.limits = limits or GovernorLimits()
        self._clock = clock
        self.reset()

    def reset(self) -> None:
        """Remet tous les compteurs à zéro (début d'un appel solve)."""
        self._start = self._clock()
        self.operations = 0
        self.depth = 0
        self.max_depth_reached = 0
        self.tripped = False
        self.trip_kind: Optional[TripKind] = None

    def restart_timer(self) -> None:
        """Redémarre le chronomètre sans toucher aux compteurs ni à l'arrêt."""
        self._start = self._clock()

    @property
    def elapsed_ms(self) -> float:
        return (self._clock() - self._start) * 1000.0

    def tick(self, count: int = 1) -> None:
        self.operations += count

    def cancel(self) -> None:
        """Demande d'annulation coopérative (prise en compte au prochain point de contrôle)."""
        self.trip(TripKind.CANCELLED)

    def trip(self, kind: TripKind) -> None:
        """Déclenche l'arrêt (le premier motif est conservé)."""
        self._trip(kind)

    def should_stop(self) -> bool:
        if self.tripped:
            return True
        if self.elapsed_ms > self.limits.time_budget_ms:
            self._trip(TripKind.TIMEOUT)
        elif self.operations > self.limits.max_operations:
            self._trip(TripKind.OPERATION_CAP)
        return self.tripped

    def enter(self) -> bool:
        """Entrée en récursion. Retourne False si la profondeur maximale est dépassée.

        L'appelant doit toujours appeler exit(), même après un refus.
        """
        self.depth += 1
        if self.depth > self.max_depth_reached:
            self.max_depth_reached = self.depth
        if self.depth > self.limits.max_depth:
            self._trip(TripKind.DEPTH_CAP)
            return False
        return True

    def exit(self) -> None:
        self.depth -= 1

    def _trip(self, kind: TripKind) -> None:
        if not self.tripped:
            self.tripped = True
            self.trip_kind = kind

    def stats(self) -> Dict[str, Any]:
        return {
            "elapsed_ms": self.elapsed_ms,
            "operations": self.operations,
            "depth": self.depth,
            "max_depth_reached": self.max_depth_reached,
            "tripped": self.tripped,
            "trip_kind": self.trip_kind.value if self.trip_kind else None,
        }
