"""Solveur Mosaic : propagation de contraintes + backtracking borné.

Usage :
    from mosaic_solver import solve
    result = solve([[1, None], [None, 1]])
    result.grid, result.reason
"""

from mosaic_solver.lib.s0_grid import (
    CellState,
    InvalidGridError,
    clue_grid_from_cells,
    filled_coords,
    format_grid,
    parse_clue_text,
)
from mosaic_solver.lib.s1_governor import GovernorLimits, RunStats, TripKind
from mosaic_solver.lib.s4_solver import (
    SolveResult,
    Solver,
    StepDelta,
    StepSession,
    TerminationReason,
    solve,
    start_step_session,
)
from mosaic_solver.lib.s7_debug import disable_debug, enable_debug

__version__ = "0.1.0"

__all__ = [
    "CellState",
    "InvalidGridError",
    "clue_grid_from_cells",
    "filled_coords",
    "format_grid",
    "parse_clue_text",
    "GovernorLimits",
    "RunStats",
    "TripKind",
    "SolveResult",
    "Solver",
    "StepDelta",
    "StepSession",
    "TerminationReason",
    "solve",
    "start_step_session",
    "enable_debug",
    "disable_debug",
]
