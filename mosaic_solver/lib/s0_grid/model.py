"""Modèle de contraintes : variables (une par cellule) et contraintes (une par indice).

Les contraintes sont rangées dans une arène indexée par entier ; chaque
contrainte ne stocke que des indices de variables, et chaque variable
l'index des contraintes qui la touchent. Aucune référence croisée d'objets.
"""

from __future__ import annotations

from numbers import Integral
from typing import Iterator, List, Optional, Set, Tuple

import numpy as np

from .types import (
    CellState,
    ClueGrid,
    Constraint,
    Coord,
    DOMAIN_BOTH,
    DOMAIN_EMPTY,
    DOMAIN_FILLED,
    DOMAIN_TO_STATE,
    InvalidGridError,
    MAX_CLUE,
    MIN_CLUE,
    STATE_TO_DOMAIN,
)

NormalizedClues = Tuple[Tuple[Optional[int], ...], ...]

_STATE_LUT = np.array(DOMAIN_TO_STATE, dtype=np.int8)


def validate_clue_grid(clue_grid: ClueGrid) -> NormalizedClues:
    """
    Vérifie et normalise une grille d'indices.

    Args:
        clue_grid: Séquence de lignes (ou tableau numpy 2D) ; None = pas d'indice

    Returns:
        Tuple de tuples (copie, jamais d'alias vers la grille de l'appelant)

    Raises:
        InvalidGridError: grille vide, irrégulière ou indice hors [0, 9]
    """
    if isinstance(clue_grid, np.ndarray):
        if clue_grid.ndim != 2:
            raise InvalidGridError(f"Grille numpy de dimension {clue_grid.ndim}, 2 attendue")
        clue_grid = clue_grid.tolist()

    if clue_grid is None or isinstance(clue_grid, (str, bytes)):
        raise InvalidGridError("Grille d'indices absente ou illisible")

    rows = list(clue_grid)
    if not rows:
        raise InvalidGridError("Grille vide")

    width: Optional[int] = None
    normalized = []
    for r, row in enumerate(rows):
        if isinstance(row, (str, bytes)):
            raise InvalidGridError(f"Ligne {r} : séquence de cellules attendue")
        cells = list(row)
        if not cells:
            raise InvalidGridError(f"Ligne {r} vide")
        if width is None:
            width = len(cells)
        elif len(cells) != width:
            raise InvalidGridError(
                f"Grille irrégulière : ligne {r} a {len(cells)} colonnes, {width} attendues"
            )
        normalized.append(tuple(_normalize_clue(value, r, c) for c, value in enumerate(cells)))

    return tuple(normalized)


def _normalize_clue(value, row: int, col: int) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, Integral):
        raise InvalidGridError(f"Indice non entier en ({row}, {col}) : {value!r}")
    value = int(value)
    if not MIN_CLUE <= value <= MAX_CLUE:
        raise InvalidGridError(f"Indice hors limites en ({row}, {col}) : {value}")
    return value


class ConstraintModel:
    """Graphe variables/contraintes construit depuis une grille d'indices validée."""

    def __init__(self, clues: NormalizedClues):
        self.clues = clues
        self.rows = len(clues)
        self.cols = len(clues[0])
        self.size = self.rows * self.cols

        constraints: List[Constraint] = []
        touching: List[List[int]] = [[] for _ in range(self.size)]
        for r, row in enumerate(clues):
            for c, clue in enumerate(row):
                if clue is None:
                    continue
                constraint = Constraint(
                    index=len(constraints),
                    anchor=(r, c),
                    requirement=clue,
                    scope=self.window(r, c),
                )
                constraints.append(constraint)
                for var in constraint.scope:
                    touching[var].append(constraint.index)

        self.constraints: Tuple[Constraint, ...] = tuple(constraints)
        self.cell_constraints: Tuple[Tuple[int, ...], ...] = tuple(tuple(t) for t in touching)
        self.neighbors: Tuple[frozenset, ...] = tuple(
            frozenset(
                other
                for ci in self.cell_constraints[var]
                for other in self.constraints[ci].scope
                if other != var
            )
            for var in range(self.size)
        )

    def index(self, row: int, col: int) -> int:
        return row * self.cols + col

    def coord(self, var: int) -> Coord:
        return divmod(var, self.cols)

    def window(self, row: int, col: int) -> Tuple[int, ...]:
        """Fenêtre 3x3 (centre inclus) tronquée aux bords : 1 à 9 cellules."""
        return tuple(
            self.index(r, c)
            for r in range(max(0, row - 1), min(self.rows, row + 2))
            for c in range(max(0, col - 1), min(self.cols, col + 2))
        )

    def degree(self, var: int) -> int:
        return len(self.cell_constraints[var])

    def constrained_variables(self) -> Iterator[int]:
        return (var for var in range(self.size) if self.cell_constraints[var])

    def is_satisfied(self, states: np.ndarray) -> bool:
        """Vérifie qu'une grille d'états satisfait exactement chaque contrainte."""
        flat = np.asarray(states).reshape(-1)
        for constraint in self.constraints:
            filled = sum(1 for var in constraint.scope if flat[var] == CellState.FILLED)
            if filled != constraint.requirement:
                return False
        return True

    def violated_constraints(self, states: np.ndarray) -> List[Constraint]:
        flat = np.asarray(states).reshape(-1)
        return [
            constraint
            for constraint in self.constraints
            if sum(1 for var in constraint.scope if flat[var] == CellState.FILLED)
            != constraint.requirement
        ]


def build_model(clue_grid: ClueGrid) -> ConstraintModel:
    """Valide la grille puis construit le graphe de contraintes."""
    return ConstraintModel(validate_clue_grid(clue_grid))


class Assignment:
    """États/domaines courants des variables d'une exécution, avec journal d'annulation.

    Chaque modification de domaine est journalisée (variable, ancien masque) ;
    undo(mark) rejoue le journal à l'envers et restaure l'état exact.
    """

    def __init__(self, model: ConstraintModel):
        self.model = model
        self.domains = np.full(model.size, DOMAIN_BOTH, dtype=np.uint8)
        self._trail: List[Tuple[int, int]] = []

    def domain(self, var: int) -> int:
        return int(self.domains[var])

    def state(self, var: int) -> int:
        return DOMAIN_TO_STATE[int(self.domains[var])]

    def is_resolved(self, var: int) -> bool:
        return int(self.domains[var]) in (DOMAIN_EMPTY, DOMAIN_FILLED)

    def set_domain(self, var: int, mask: int) -> bool:
        """Remplace le domaine d'une variable. Retourne True s'il a changé."""
        previous = int(self.domains[var])
        if previous == mask:
            return False
        self._trail.append((var, previous))
        self.domains[var] = mask
        return True

    def assign(self, var: int, state: CellState) -> bool:
        return self.set_domain(var, STATE_TO_DOMAIN[CellState(state)])

    def mark(self) -> int:
        return len(self._trail)

    def undo(self, mark: int) -> None:
        trail = self._trail
        while len(trail) > mark:
            var, previous = trail.pop()
            self.domains[var] = previous

    def counts(self, constraint: Constraint) -> Tuple[int, int]:
        """Retourne (remplies, inconnues) dans la portée d'une contrainte."""
        filled = 0
        unknown = 0
        domains = self.domains
        for var in constraint.scope:
            mask = domains[var]
            if mask == DOMAIN_FILLED:
                filled += 1
            elif mask == DOMAIN_BOTH:
                unknown += 1
        return filled, unknown

    def resolved_count(self) -> int:
        domains = self.domains
        return int(np.count_nonzero((domains == DOMAIN_EMPTY) | (domains == DOMAIN_FILLED)))

    def unresolved(self) -> Set[int]:
        return {var for var in range(self.model.size) if not self.is_resolved(var)}

    def states(self) -> np.ndarray:
        """Copie de la grille d'états (-1 inconnu, 0 vide, 1 rempli)."""
        return _STATE_LUT[self.domains].reshape(self.model.rows, self.model.cols)

    def is_consistent(self) -> bool:
        """filled ≤ requirement ≤ filled + unknown pour toutes les contraintes."""
        for constraint in self.model.constraints:
            filled, unknown = self.counts(constraint)
            if filled > constraint.requirement or filled + unknown < constraint.requirement:
                return False
        return True
