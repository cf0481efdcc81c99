import numpy as np
import pytest

from mosaic_solver.lib.s0_grid import Assignment, CellState, build_model
from mosaic_solver.lib.s1_governor import GovernorLimits, RunContext, TripKind
from mosaic_solver.lib.s2_propagation import (
    ArcConsistencyReducer,
    DeductionEngine,
    PropagationOutcome,
)

GRIDS = [
    [[None, 2, None, 0]],
    [[None, None, None], [None, 0, None], [None, None, None]],
    [[None, None, None], [None, 9, None], [None, None, None]],
    [[1, None], [None, 1]],
    [[0, None, 1]],
    [[None, 2, None, 0], [3, None, None, None], [None, None, 4, None]],
    [[None, 1, None, None], [None, None, None, 0], [3, None, None, None]],
    [[2, None, None, 3], [None, None, 4, None], [None, 5, None, None], [1, None, None, 2]],
]


def _context(**limits):
    return RunContext.create(GovernorLimits(**limits))


def test_initial_arcs_cover_every_pair():
    model = build_model([[1, None], [None, None]])
    reducer = ArcConsistencyReducer(model)
    # Une contrainte de 4 variables → 4 x 3 arcs orientés
    assert len(reducer.initial_arcs()) == 12


def test_prunes_like_cascade():
    model = build_model([[None, 2, None, 0]])
    assignment = Assignment(model)
    outcome = ArcConsistencyReducer(model).reduce(assignment, _context())
    assert outcome is PropagationOutcome.FIXPOINT
    assert assignment.states().tolist() == [[1, 1, 0, 0]]


def test_seeded_reduction_after_assignment():
    model = build_model([[1, None], [None, 1]])
    assignment = Assignment(model)
    reducer = ArcConsistencyReducer(model)
    assert reducer.reduce(assignment, _context()) is PropagationOutcome.FIXPOINT
    assert assignment.resolved_count() == 0

    assignment.assign(0, CellState.FILLED)
    outcome = reducer.reduce(assignment, _context(), seeds=(0,))
    assert outcome is PropagationOutcome.FIXPOINT
    assert assignment.states().tolist() == [[1, 0], [0, 0]]


def test_empty_domain_is_inconsistent():
    model = build_model([[0, None], [None, 4]])
    outcome = ArcConsistencyReducer(model).reduce(Assignment(model), _context())
    assert outcome is PropagationOutcome.INCONSISTENT


@pytest.mark.parametrize("clue, expected", [(0, 0), (1, 1)])
def test_single_cell_unary_revision(clue, expected):
    model = build_model([[clue]])
    assignment = Assignment(model)
    assert ArcConsistencyReducer(model).reduce(assignment, _context()) is PropagationOutcome.FIXPOINT
    assert assignment.states().tolist() == [[expected]]


def test_single_cell_impossible_clue():
    model = build_model([[2]])
    outcome = ArcConsistencyReducer(model).reduce(Assignment(model), _context())
    assert outcome is PropagationOutcome.INCONSISTENT


def test_stops_when_governor_tripped():
    model = build_model([[None, 2, None, 0]])
    context = _context()
    context.governor.cancel()
    assignment = Assignment(model)
    outcome = ArcConsistencyReducer(model).reduce(assignment, context)
    assert outcome is PropagationOutcome.STOPPED
    assert context.governor.trip_kind == TripKind.CANCELLED
    assert assignment.resolved_count() == 0


def test_revisions_counted():
    model = build_model([[None, 2, None, 0]])
    context = _context()
    ArcConsistencyReducer(model).reduce(Assignment(model), context)
    assert context.stats.arc_revisions >= len(ArcConsistencyReducer(model).initial_arcs())


@pytest.mark.parametrize("clues", GRIDS)
def test_fixpoint_matches_deduction(clues):
    """Pour des contraintes de comptage, les deux propagations ont le même point fixe."""
    model = build_model(clues)

    by_count = Assignment(model)
    count_outcome = DeductionEngine(model).propagate(by_count, _context())

    by_arc = Assignment(model)
    arc_outcome = ArcConsistencyReducer(model).reduce(by_arc, _context())

    assert (count_outcome is PropagationOutcome.INCONSISTENT) == (
        arc_outcome is PropagationOutcome.INCONSISTENT
    )
    if count_outcome is PropagationOutcome.FIXPOINT:
        assert np.array_equal(by_count.states(), by_arc.states())
