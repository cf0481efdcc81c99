"""Module s4_solver : orchestration de la résolution (boîte noire).

API publique :
    solve(clue_grid, config=None, on_progress=None) → SolveResult
    start_step_session(clue_grid, config=None) → StepSession
"""

from .types import SolveResult, StepDelta, TerminationReason
from .solver import Solver, solve
from .step_session import StepSession, start_step_session

__all__ = [
    # Types
    "SolveResult",
    "StepDelta",
    "TerminationReason",
    # Solver
    "Solver",
    "solve",
    # Pas à pas
    "StepSession",
    "start_step_session",
]
