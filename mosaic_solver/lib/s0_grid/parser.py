"""Conversions entre formats externes et grilles d'indices / de solution."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

import numpy as np

from .types import CellState, Coord, InvalidGridError

NO_CLUE_TOKENS = {".", "-", "_", "?"}

_SYMBOLS = {
    int(CellState.FILLED): "#",
    int(CellState.EMPTY): ".",
    int(CellState.UNKNOWN): "?",
}


def parse_clue_text(text: str) -> List[List[Optional[int]]]:
    """
    Lit une grille d'indices au format texte.

    Une ligne par rangée ; jetons séparés par des espaces, ou un caractère
    par cellule si la ligne n'en contient pas. '.', '-', '_', '?' = pas d'indice.
    Les lignes commençant par '#' sont des commentaires.
    """
    grid: List[List[Optional[int]]] = []
    for line_no, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        tokens = line.split() if any(ch.isspace() for ch in line) else list(line)
        row: List[Optional[int]] = []
        for token in tokens:
            if token in NO_CLUE_TOKENS:
                row.append(None)
            elif token.isdigit():
                row.append(int(token))
            else:
                raise InvalidGridError(f"Ligne {line_no} : jeton invalide {token!r}")
        grid.append(row)
    if not grid:
        raise InvalidGridError("Aucune rangée dans le texte de la grille")
    return grid


def clue_grid_from_cells(cells: Iterable[Dict[str, Any]]) -> List[List[Optional[int]]]:
    """Construit la grille depuis des enregistrements {row, col, number}.

    La taille est déduite des coordonnées maximales ; les nombres non
    numériques sont ignorés.
    """
    records = list(cells)
    if not records:
        raise InvalidGridError("Aucune cellule fournie")

    max_row = max(int(cell["row"]) for cell in records)
    max_col = max(int(cell["col"]) for cell in records)
    grid: List[List[Optional[int]]] = [[None] * (max_col + 1) for _ in range(max_row + 1)]

    for cell in records:
        number = cell.get("number")
        if number is None or number == "":
            continue
        try:
            value = int(number)
        except (TypeError, ValueError):
            continue
        grid[int(cell["row"])][int(cell["col"])] = value
    return grid


def filled_coords(grid) -> List[Coord]:
    """Cellules remplies d'une grille de solution, en ordre ligne par ligne."""
    states = np.asarray(grid)
    return [(int(r), int(c)) for r, c in np.argwhere(states == CellState.FILLED)]


def format_grid(grid) -> str:
    """Rendu texte : '#' rempli, '.' vide, '?' inconnu."""
    states = np.asarray(grid)
    return "\n".join("".join(_SYMBOLS[int(value)] for value in row) for row in states)
