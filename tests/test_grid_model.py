import numpy as np
import pytest

from mosaic_solver.lib.s0_grid import (
    Assignment,
    CellState,
    DOMAIN_BOTH,
    DOMAIN_EMPTY,
    DOMAIN_FILLED,
    InvalidGridError,
    build_model,
    clue_grid_from_cells,
    domain_values,
    filled_coords,
    format_grid,
    parse_clue_text,
    validate_clue_grid,
)


def test_window_sizes_corner_edge_interior():
    model = build_model([[None] * 3 for _ in range(3)])
    assert len(model.window(0, 0)) == 4
    assert len(model.window(0, 1)) == 6
    assert len(model.window(1, 0)) == 6
    assert len(model.window(1, 1)) == 9
    assert len(model.window(2, 2)) == 4


def test_window_includes_center_cell():
    model = build_model([[None] * 3 for _ in range(3)])
    assert model.index(1, 1) in model.window(1, 1)
    assert model.index(0, 0) in model.window(0, 0)


def test_window_single_row_and_single_cell():
    row = build_model([[None, None, None]])
    assert row.window(0, 0) == (0, 1)
    assert row.window(0, 1) == (0, 1, 2)

    single = build_model([[1]])
    assert single.window(0, 0) == (0,)
    assert single.constraints[0].size == 1


def test_constraints_built_from_clues_only():
    model = build_model([[1, None], [None, 2]])
    assert len(model.constraints) == 2
    assert model.constraints[0].anchor == (0, 0)
    assert model.constraints[1].anchor == (1, 1)
    assert model.constraints[1].requirement == 2
    # 2x2 : chaque fenêtre couvre toute la grille
    assert model.constraints[0].scope == (0, 1, 2, 3)
    assert model.cell_constraints[0] == (0, 1)
    assert model.degree(3) == 2
    assert model.neighbors[0] == frozenset({1, 2, 3})


def test_constrained_variables_skip_untouched_cells():
    model = build_model([[0, None, None, None]])
    assert list(model.constrained_variables()) == [0, 1]
    assert model.degree(3) == 0


def test_coord_and_index_are_inverse():
    model = build_model([[None] * 4 for _ in range(3)])
    for var in range(model.size):
        assert model.index(*model.coord(var)) == var
    assert model.coord(5) == (1, 1)


@pytest.mark.parametrize("grid", [
    [],
    [[]],
    [[1, 2], [3]],
    [[10]],
    [[-1]],
    [[True]],
    [[1.5]],
    [["1"]],
    "12\n34",
    None,
])
def test_invalid_grids_rejected(grid):
    with pytest.raises(InvalidGridError):
        validate_clue_grid(grid)


def test_invalid_grid_error_is_value_error():
    with pytest.raises(ValueError):
        build_model([[1, 2], [3]])


def test_validate_accepts_numpy_and_copies():
    clues = [[1, None], [None, 1]]
    normalized = validate_clue_grid(clues)
    clues[0][0] = 9
    assert normalized == ((1, None), (None, 1))

    from_numpy = validate_clue_grid(np.array([[0, 9], [4, 5]]))
    assert from_numpy == ((0, 9), (4, 5))
    assert all(type(v) is int for row in from_numpy for v in row)


def test_is_satisfied_and_violations():
    model = build_model([[1, None], [None, 1]])
    assert model.is_satisfied(np.array([[1, 0], [0, 0]]))
    assert not model.is_satisfied(np.array([[1, 1], [0, 0]]))
    assert len(model.violated_constraints(np.zeros((2, 2)))) == 2


class TestAssignment:
    """Domaines, journal d'annulation et grille d'états."""

    def test_initial_state_all_unknown(self):
        assignment = Assignment(build_model([[1, None], [None, 1]]))
        assert assignment.resolved_count() == 0
        assert np.array_equal(assignment.states(), np.full((2, 2), -1))
        assert assignment.domain(0) == DOMAIN_BOTH

    def test_undo_restores_exact_state(self):
        model = build_model([[2, None, None], [None, None, None]])
        assignment = Assignment(model)
        assignment.assign(1, CellState.EMPTY)
        snapshot = assignment.domains.copy()
        mark = assignment.mark()

        assignment.assign(0, CellState.FILLED)
        assignment.assign(2, CellState.EMPTY)
        assignment.set_domain(3, DOMAIN_FILLED)
        assert assignment.resolved_count() == 4

        assignment.undo(mark)
        assert np.array_equal(assignment.domains, snapshot)
        assert assignment.resolved_count() == 1

    def test_set_domain_unchanged_not_recorded(self):
        assignment = Assignment(build_model([[0]]))
        mark = assignment.mark()
        assert not assignment.set_domain(0, DOMAIN_BOTH)
        assert assignment.mark() == mark

    def test_counts_and_consistency(self):
        model = build_model([[1, None], [None, None]])
        assignment = Assignment(model)
        assignment.assign(0, CellState.FILLED)
        assignment.assign(1, CellState.EMPTY)
        assert assignment.counts(model.constraints[0]) == (1, 2)
        assert assignment.is_consistent()

        assignment.assign(2, CellState.FILLED)
        assert not assignment.is_consistent()

    def test_states_is_a_copy(self):
        assignment = Assignment(build_model([[None, None]]))
        states = assignment.states()
        states[0, 0] = 1
        assert assignment.state(0) == CellState.UNKNOWN


def test_domain_values():
    assert domain_values(DOMAIN_BOTH) == [CellState.EMPTY, CellState.FILLED]
    assert domain_values(DOMAIN_EMPTY) == [CellState.EMPTY]
    assert domain_values(0) == []


class TestParser:
    """Conversions texte / enregistrements / grilles de solution."""

    def test_parse_compact_rows(self):
        assert parse_clue_text("1.\n.1\n") == [[1, None], [None, 1]]

    def test_parse_whitespace_tokens_and_comments(self):
        text = "# grille 2x3\n1 - 2\n\n_ ? 0\n"
        assert parse_clue_text(text) == [[1, None, 2], [None, None, 0]]

    def test_parse_invalid_token(self):
        with pytest.raises(InvalidGridError):
            parse_clue_text("1x\n")

    def test_parse_empty_text(self):
        with pytest.raises(InvalidGridError):
            parse_clue_text("# rien\n\n")

    def test_clue_grid_from_cells(self):
        cells = [
            {"row": 0, "col": 0, "number": "3"},
            {"row": 1, "col": 2, "number": 1},
            {"row": 1, "col": 0, "number": ""},
            {"row": 0, "col": 1, "number": "?"},
        ]
        assert clue_grid_from_cells(cells) == [[3, None, None], [None, None, 1]]

    def test_clue_grid_from_no_cells(self):
        with pytest.raises(InvalidGridError):
            clue_grid_from_cells([])

    def test_filled_coords_row_major(self):
        grid = np.array([[0, 1, 0], [1, 0, 1]], dtype=np.int8)
        assert filled_coords(grid) == [(0, 1), (1, 0), (1, 2)]

    def test_format_grid(self):
        assert format_grid([[1, 0], [-1, 1]]) == "#.\n?#"
