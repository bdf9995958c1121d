import random

import pytest

from sudoku_game import (
    CLUE_RANGES, DIFFICULTIES, PuzzleDeriver, SolutionGenerator, is_valid_solution
)


@pytest.mark.parametrize("seed", range(25))
def test_generated_grid_is_valid(seed):
    grid = SolutionGenerator(random.Random(seed)).generate()
    assert is_valid_solution(grid)


def test_generated_grids_vary():
    generator = SolutionGenerator(random.Random(3))
    grids = {tuple(map(tuple, generator.generate())) for _ in range(5)}
    assert len(grids) > 1


def test_fill_box_places_a_permutation():
    board = [[0] * 9 for _ in range(9)]
    SolutionGenerator(random.Random(0)).fill_box(board, 3, 3)
    values = sorted(board[r][c] for r in range(3, 6) for c in range(3, 6))
    assert values == list(range(1, 10))
    assert sum(v for row in board for v in row if v) == 45


def test_fill_board_keeps_given_cells():
    generator = SolutionGenerator(random.Random(11))
    solution = generator.generate()
    board = [row[:] for row in solution]
    cleared = [(r, c) for r in range(9) for c in range(9) if (r + c) % 4 == 0]
    for r, c in cleared:
        board[r][c] = 0

    assert generator.fill_board(board)
    assert is_valid_solution(board)
    for r in range(9):
        for c in range(9):
            if (r, c) not in cleared:
                assert board[r][c] == solution[r][c]


def test_fill_board_reports_failure_and_unwinds():
    board = [[0] * 9 for _ in range(9)]
    board[0] = [0, 1, 2, 3, 4, 5, 6, 7, 8]
    board[1][0] = 9
    snapshot = [row[:] for row in board]

    assert SolutionGenerator(random.Random(0)).fill_board(board) is False
    assert board == snapshot


@pytest.mark.parametrize("difficulty", DIFFICULTIES)
def test_derived_puzzle_respects_clue_range(difficulty):
    rng = random.Random(42)
    solution = SolutionGenerator(rng).generate()
    deriver = PuzzleDeriver(rng)
    min_visible, max_visible = CLUE_RANGES[difficulty]

    for _ in range(10):
        cells = deriver.derive(solution, difficulty)
        revealed = [(r, c) for r in range(9) for c in range(9) if cells[r][c].is_original]
        assert min_visible <= len(revealed) <= max_visible
        for r in range(9):
            for c in range(9):
                cell = cells[r][c]
                assert not cell.is_error
                assert cell.notes == set()
                if cell.is_original:
                    assert cell.value == solution[r][c]
                else:
                    assert cell.value is None


def test_unknown_difficulty_falls_back_to_beginner():
    rng = random.Random(5)
    solution = SolutionGenerator(rng).generate()
    cells = PuzzleDeriver(rng).derive(solution, 'nightmare')
    revealed = sum(cell.is_original for row in cells for cell in row)
    assert 36 <= revealed <= 40
