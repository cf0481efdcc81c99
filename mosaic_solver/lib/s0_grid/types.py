"""Types et énumérations pour le modèle de contraintes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import List, Optional, Sequence, Tuple

Coord = Tuple[int, int]
ClueGrid = Sequence[Sequence[Optional[int]]]

MIN_CLUE = 0
MAX_CLUE = 9


class CellState(IntEnum):
    """État d'une cellule (codes stockés dans les grilles numpy int8)."""
    UNKNOWN = -1
    EMPTY = 0
    FILLED = 1


# Domaine d'une variable : masque 2 bits
DOMAIN_NONE = 0
DOMAIN_EMPTY = 1
DOMAIN_FILLED = 2
DOMAIN_BOTH = DOMAIN_EMPTY | DOMAIN_FILLED

STATE_TO_DOMAIN = {
    CellState.EMPTY: DOMAIN_EMPTY,
    CellState.FILLED: DOMAIN_FILLED,
    CellState.UNKNOWN: DOMAIN_BOTH,
}

# Index = masque de domaine → code d'état (un domaine vide n'a pas d'état)
DOMAIN_TO_STATE: Tuple[int, ...] = (
    int(CellState.UNKNOWN),
    int(CellState.EMPTY),
    int(CellState.FILLED),
    int(CellState.UNKNOWN),
)


def domain_values(mask: int) -> List[CellState]:
    """Retourne les valeurs encore possibles d'un domaine."""
    values = []
    if mask & DOMAIN_EMPTY:
        values.append(CellState.EMPTY)
    if mask & DOMAIN_FILLED:
        values.append(CellState.FILLED)
    return values


class InvalidGridError(ValueError):
    """Grille d'indices mal formée (rejetée avant toute résolution)."""


@dataclass(frozen=True)
class Constraint:
    """Contrainte ancrée sur une cellule indicée.

    Attributes:
        index: Position dans l'arène des contraintes
        anchor: Coordonnée (row, col) de l'indice
        requirement: Nombre de cellules remplies exigé dans la fenêtre
        scope: Indices des variables de la fenêtre 3x3 tronquée
    """
    index: int
    anchor: Coord
    requirement: int
    scope: Tuple[int, ...]

    @property
    def size(self) -> int:
        return len(self.scope)
