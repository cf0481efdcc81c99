"""Module s0_grid : modèle de contraintes (variables, contraintes, états)."""

from .types import (
    Coord,
    ClueGrid,
    CellState,
    Constraint,
    InvalidGridError,
    DOMAIN_NONE,
    DOMAIN_EMPTY,
    DOMAIN_FILLED,
    DOMAIN_BOTH,
    domain_values,
)
from .model import Assignment, ConstraintModel, build_model, validate_clue_grid
from .parser import clue_grid_from_cells, filled_coords, format_grid, parse_clue_text

__all__ = [
    # Types
    "Coord",
    "ClueGrid",
    "CellState",
    "Constraint",
    "InvalidGridError",
    "DOMAIN_NONE",
    "DOMAIN_EMPTY",
    "DOMAIN_FILLED",
    "DOMAIN_BOTH",
    "domain_values",
    # Modèle
    "Assignment",
    "ConstraintModel",
    "build_model",
    "validate_clue_grid",
    # Conversions
    "clue_grid_from_cells",
    "filled_coords",
    "format_grid",
    "parse_clue_text",
]
