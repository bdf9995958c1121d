import pytest

from sudoku_game import (
    box_origin, box_peers, can_place, column_peers, format_time, is_valid_solution, peers, row_peers
)

SOLVED = [
    [5, 3, 4, 6, 7, 8, 9, 1, 2],
    [6, 7, 2, 1, 9, 5, 3, 4, 8],
    [1, 9, 8, 3, 4, 2, 5, 6, 7],
    [8, 5, 9, 7, 6, 1, 4, 2, 3],
    [4, 2, 6, 8, 5, 3, 7, 9, 1],
    [7, 1, 3, 9, 2, 4, 8, 5, 6],
    [9, 6, 1, 5, 3, 7, 2, 8, 4],
    [2, 8, 7, 4, 1, 9, 6, 3, 5],
    [3, 4, 5, 2, 8, 6, 1, 7, 9],
]


def test_peer_groups_exclude_the_cell():
    for group in (row_peers, column_peers, box_peers):
        cells = group(4, 7)
        assert len(cells) == 8
        assert (4, 7) not in cells


def test_box_peers_stay_inside_the_box():
    assert box_origin(4, 7) == (3, 6)
    assert set(box_peers(4, 7)) == {(r, c) for r in range(3, 6) for c in range(6, 9)} - {(4, 7)}


def test_peers_are_deduplicated():
    cells = peers(0, 0)
    assert len(cells) == 20
    assert len(set(cells)) == 20


def test_out_of_range_position_raises():
    with pytest.raises(ValueError):
        row_peers(9, 0)


def test_can_place_checks_row_column_and_box():
    grid = [[0] * 9 for _ in range(9)]
    grid[0][8] = 5
    grid[8][1] = 6
    grid[2][2] = 7
    assert not can_place(grid, 0, 0, 5)  # row
    assert not can_place(grid, 0, 1, 6)  # column
    assert not can_place(grid, 1, 1, 7)  # box
    assert can_place(grid, 4, 4, 5)


def test_can_place_ignores_the_cell_itself():
    assert can_place(SOLVED, 0, 0, 5)
    assert not can_place(SOLVED, 0, 0, 3)


def test_is_valid_solution():
    assert is_valid_solution(SOLVED)
    broken = [row[:] for row in SOLVED]
    broken[0][0], broken[0][1] = broken[0][1], broken[0][0]
    assert not is_valid_solution(broken)


def test_is_valid_solution_rejects_incomplete_grid():
    grid = [row[:] for row in SOLVED]
    grid[8][8] = 0
    assert not is_valid_solution(grid)


@pytest.mark.parametrize("seconds, expected", [
    (0, "00:00"),
    (65, "01:05"),
    (5999, "99:59"),
    (6000, "100:00"),
])
def test_format_time(seconds, expected):
    assert format_time(seconds) == expected
