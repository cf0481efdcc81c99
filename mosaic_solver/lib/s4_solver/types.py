"""Types pour le module s4_solver."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

import numpy as np

from mosaic_solver.lib.s0_grid import Coord, filled_coords
from mosaic_solver.lib.s1_governor import RunStats, TripKind


class TerminationReason(str, Enum):
    """Raison de fin d'une exécution."""
    SOLVED = "SOLVED"
    NO_SOLUTION = "NO_SOLUTION"
    GOVERNOR_TRIP = "GOVERNOR_TRIP"


@dataclass
class SolveResult:
    """Grille finale (0 vide / 1 rempli) + raison de fin."""
    grid: np.ndarray
    reason: TerminationReason
    trip_kind: Optional[TripKind] = None
    stats: RunStats = field(default_factory=RunStats)

    @property
    def verified(self) -> bool:
        """Seul un résultat SOLVED est une solution certifiée."""
        return self.reason == TerminationReason.SOLVED

    def to_lists(self) -> List[List[int]]:
        return self.grid.tolist()

    def filled_coords(self) -> List[Coord]:
        return filled_coords(self.grid)


@dataclass
class StepDelta:
    """Changements produits par une passe de déduction pas à pas."""
    cells_newly_filled: List[Coord]
    cells_newly_emptied: List[Coord]
    complete: bool
    iteration: int = 0
    inconsistent: bool = False
    message: str = ""

    @property
    def changed_count(self) -> int:
        return len(self.cells_newly_filled) + len(self.cells_newly_emptied)
