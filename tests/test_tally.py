import pytest

from sudoku_game import CellState, DigitTally, GameTimer


def test_increment_completes_at_nine():
    tally = DigitTally()
    for _ in range(8):
        tally.increment(7)
    assert not tally.is_completed(7)
    tally.increment(7)
    assert tally.count(7) == 9
    assert tally.is_completed(7)


def test_decrement_clears_completed_below_nine():
    tally = DigitTally()
    for _ in range(9):
        tally.increment(3)
    tally.decrement(3)
    assert tally.count(3) == 8
    assert not tally.is_completed(3)


def test_decrement_keeps_completed_when_a_duplicate_remains():
    tally = DigitTally()
    for _ in range(10):
        tally.increment(4)
    tally.decrement(4)
    assert tally.count(4) == 9
    assert tally.is_completed(4)


def test_reset_counts_cells():
    cells = [[CellState() for _ in range(9)] for _ in range(9)]
    cells[0][0].value = 1
    cells[4][4].value = 1
    cells[8][8].value = 9
    tally = DigitTally()
    tally.increment(5)
    tally.reset(cells)
    assert tally.snapshot()[0] == (1, 2, False)
    assert tally.count(5) == 0
    assert tally.count(9) == 1


@pytest.mark.parametrize("digit", [0, 10, None])
def test_digit_out_of_range_raises(digit):
    with pytest.raises(ValueError):
        DigitTally().increment(digit)


def test_timer_excludes_paused_time(clock):
    timer = GameTimer(clock)
    assert timer.elapsed_seconds() == 0
    timer.start()
    clock.advance(10)
    timer.pause()
    clock.advance(100)
    assert timer.elapsed_seconds() == 10
    timer.resume()
    clock.advance(5)
    assert timer.elapsed_seconds() == 15


def test_timer_freezes_when_stopped(clock):
    timer = GameTimer(clock)
    timer.start()
    clock.advance(42.7)
    timer.stop()
    clock.advance(60)
    assert timer.elapsed_seconds() == 42
    assert not timer.running
