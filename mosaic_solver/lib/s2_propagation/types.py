"""Types pour le module s2_propagation."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class PropagationOutcome(str, Enum):
    """Issue d'une propagation jusqu'au point fixe."""
    FIXPOINT = "FIXPOINT"
    INCONSISTENT = "INCONSISTENT"
    STOPPED = "STOPPED"


@dataclass
class PassResult:
    """Résultat d'une passe de déduction (indices de variables)."""
    filled: List[int] = field(default_factory=list)
    emptied: List[int] = field(default_factory=list)
    conflict: Optional[int] = None  # Index de la contrainte violée

    @property
    def changed(self) -> bool:
        return bool(self.filled or self.emptied)

    @property
    def inconsistent(self) -> bool:
        return self.conflict is not None
