import json
import random
import time
from dataclasses import dataclass
from datetime import datetime

# -------------------------------------------------------------------------
# GAME CONFIGURATION
# -------------------------------------------------------------------------
GRID_SIZE = 9
BOX_SIZE = 3
DIGITS = tuple(range(1, GRID_SIZE + 1))

MAX_HINTS = 10
BASE_HINT_PENALTY = 3
ERROR_PENALTY = 1
CORRECT_CELL_POINTS = 5
TIME_BONUS_BASE = 500

RECORDS_PER_DIFFICULTY = 3
RECORDS_KEY = 'sudokuRecords'
DEFAULT_RECORDS_FILE = 'sudoku_records.json'

# Enumeration order matters: the leaderboard is rebuilt tier by tier in this order.
DIFFICULTIES = ('beginner', 'intermediate', 'hard', 'expert')

# Number of revealed cells (out of 81) for each tier, inclusive.
CLUE_RANGES = {
    'beginner': (36, 40),
    'intermediate': (32, 36),
    'hard': (28, 32),
    'expert': (24, 28)
}

STATE_NOT_STARTED = 'not_started'
STATE_ACTIVE = 'active'
STATE_PAUSED = 'paused'
STATE_COMPLETED = 'completed'


# =========================================================================
# MODULE 1: GRID UTILITIES
# Row/column/box addressing and placement checks over the 9x9 space.
# =========================================================================
def _check_position(row, col):
    if not (0 <= row < GRID_SIZE and 0 <= col < GRID_SIZE):
        raise ValueError(f"Cell ({row}, {col}) is outside the grid")


def _check_digit(value):
    if value not in DIGITS:
        raise ValueError(f"Digit must be between 1 and {GRID_SIZE}, got {value!r}")


def box_origin(row, col):
    """Top-left corner of the 3x3 box containing (row, col)."""
    return BOX_SIZE * (row // BOX_SIZE), BOX_SIZE * (col // BOX_SIZE)


def row_peers(row, col):
    _check_position(row, col)
    return [(row, j) for j in range(GRID_SIZE) if j != col]


def column_peers(row, col):
    _check_position(row, col)
    return [(i, col) for i in range(GRID_SIZE) if i != row]


def box_peers(row, col):
    _check_position(row, col)
    box_row, box_col = box_origin(row, col)
    return [(i, j)
            for i in range(box_row, box_row + BOX_SIZE)
            for j in range(box_col, box_col + BOX_SIZE)
            if (i, j) != (row, col)]


def peers(row, col):
    """
    Every cell sharing a row, column or box with (row, col), without duplicates.
    The cell itself is never included.
    """
    seen = set()
    result = []
    for cell in row_peers(row, col) + column_peers(row, col) + box_peers(row, col):
        if cell not in seen:
            seen.add(cell)
            result.append(cell)
    return result


def can_place(grid, row, col, value):
    """
    Checks whether 'value' may go at (row, col) of 'grid'.
    Returns False if the value already occurs among the row, column or box peers.
    Empty cells may hold 0 or None.
    """
    for i, j in peers(row, col):
        if grid[i][j] == value:
            return False
    return True


def is_valid_solution(grid):
    """True when every row, column and box is a permutation of 1..9."""
    expected = set(DIGITS)

    # Rows
    for row in grid:
        if set(row) != expected:
            return False

    # Columns
    for j in range(GRID_SIZE):
        if {grid[i][j] for i in range(GRID_SIZE)} != expected:
            return False

    # 3x3 boxes
    for box_row in range(0, GRID_SIZE, BOX_SIZE):
        for box_col in range(0, GRID_SIZE, BOX_SIZE):
            values = {grid[i][j]
                      for i in range(box_row, box_row + BOX_SIZE)
                      for j in range(box_col, box_col + BOX_SIZE)}
            if values != expected:
                return False

    return True


def format_time(seconds):
    """Renders elapsed seconds as MM:SS. Minutes grow past two digits instead of rolling over."""
    minutes = seconds // 60
    seconds = seconds % 60
    return f"{minutes:02d}:{seconds:02d}"


# =========================================================================
# MODULE 2: SOLUTION GENERATOR
# Seeds the diagonal boxes, then completes the grid with randomized
# backtracking driven by an explicit frame stack.
# =========================================================================
class SolutionGenerator:
    def __init__(self, rng=None):
        self.rng = rng or random.Random()

    def generate(self):
        """Generates a completely filled, valid Sudoku grid."""
        board = [[0] * GRID_SIZE for _ in range(GRID_SIZE)]

        # The diagonal boxes share no peers, so they can be filled independently
        for box in range(0, GRID_SIZE, BOX_SIZE):
            self.fill_box(board, box, box)

        if not self.fill_board(board):
            raise RuntimeError("Backtracking exhausted every candidate")
        return board

    def fill_box(self, board, row, col):
        """Fills the 3x3 box starting at (row, col) with a random permutation of 1..9."""
        numbers = list(DIGITS)
        self.rng.shuffle(numbers)
        index = 0
        for i in range(BOX_SIZE):
            for j in range(BOX_SIZE):
                board[row + i][col + j] = numbers[index]
                index += 1

    def fill_board(self, board):
        """
        Fills the remaining empty cells in row-major order.

        Each frame on the stack holds the untried digits for one empty cell.
        When a frame runs dry its cell is cleared and the search resumes at the
        previous cell. Returns False if the very first cell runs out of digits.
        """
        empty_cells = [(i, j) for i in range(GRID_SIZE) for j in range(GRID_SIZE) if board[i][j] == 0]
        frames = []
        depth = 0

        while depth < len(empty_cells):
            row, col = empty_cells[depth]

            if len(frames) == depth:
                numbers = list(DIGITS)
                self.rng.shuffle(numbers)
                frames.append(numbers)

            # Clear any digit left over from a previous attempt at this depth
            board[row][col] = 0
            candidates = frames[depth]
            placed = False

            while candidates:
                num = candidates.pop()
                if can_place(board, row, col, num):
                    board[row][col] = num
                    placed = True
                    break

            if placed:
                depth += 1
            else:
                frames.pop()
                depth -= 1
                if depth < 0:
                    return False

        return True


# =========================================================================
# MODULE 3: PUZZLE DERIVER
# Reveals a random subset of the solution sized by difficulty tier.
# =========================================================================
class CellState:
    """Play state of a single grid position."""

    def __init__(self, value=None, is_original=False):
        self.value = value
        self.is_original = is_original
        self.is_error = False
        self.is_highlighted = False
        self.notes = set()

    def __repr__(self):
        return (f"CellState(value={self.value!r}, is_original={self.is_original}, "
                f"is_error={self.is_error}, notes={sorted(self.notes)})")


def empty_cells():
    return [[CellState() for _ in range(GRID_SIZE)] for _ in range(GRID_SIZE)]


class PuzzleDeriver:
    def __init__(self, rng=None):
        self.rng = rng or random.Random()

    def reveal_count(self, difficulty):
        # Fallback for unknown difficulty setting
        if difficulty not in CLUE_RANGES:
            difficulty = DIFFICULTIES[0]
        min_visible, max_visible = CLUE_RANGES[difficulty]
        return self.rng.randint(min_visible, max_visible)

    def derive(self, solution, difficulty):
        """
        Builds the 9x9 cell states for a new puzzle.
        Revealed cells copy the solution value and are marked original,
        every other cell starts empty.
        """
        cells = empty_cells()
        visible = self.reveal_count(difficulty)

        # Create a list of all coordinates and shuffle them
        positions = [(i, j) for i in range(GRID_SIZE) for j in range(GRID_SIZE)]
        self.rng.shuffle(positions)

        for row, col in positions[:visible]:
            cell = cells[row][col]
            cell.value = solution[row][col]
            cell.is_original = True

        return cells


# =========================================================================
# MODULE 4: DIGIT TALLY TRACKER
# Live per-digit placement counts for the numpad.
# =========================================================================
@dataclass
class DigitCount:
    digit: int
    count: int = 0
    completed: bool = False


class DigitTally:
    def __init__(self):
        self.counts = [DigitCount(d) for d in DIGITS]

    def reset(self, cells):
        """Recounts from scratch against the given cell states."""
        self.counts = [DigitCount(d) for d in DIGITS]
        for row in cells:
            for cell in row:
                if cell.value is not None:
                    self.increment(cell.value)

    def increment(self, digit):
        _check_digit(digit)
        entry = self.counts[digit - 1]
        entry.count += 1
        if entry.count >= GRID_SIZE:
            entry.completed = True

    def decrement(self, digit):
        _check_digit(digit)
        entry = self.counts[digit - 1]
        entry.count -= 1
        # Recomputed rather than cleared outright: a duplicate digit can leave the count at 9
        entry.completed = entry.count >= GRID_SIZE

    def count(self, digit):
        _check_digit(digit)
        return self.counts[digit - 1].count

    def is_completed(self, digit):
        _check_digit(digit)
        return self.counts[digit - 1].completed

    def snapshot(self):
        return [(entry.digit, entry.count, entry.completed) for entry in self.counts]


# =========================================================================
# MODULE 5: GAME TIMER
# Elapsed time is derived from the wall clock; ticks only refresh the display.
# =========================================================================
class GameTimer:
    def __init__(self, clock=None):
        self.clock = clock or time.time
        self.start_time = None
        self.stop_time = None
        self.paused_at = None
        self.paused_total = 0.0

    @property
    def running(self):
        return self.start_time is not None and self.stop_time is None

    def start(self):
        self.start_time = self.clock()
        self.stop_time = None
        self.paused_at = None
        self.paused_total = 0.0

    def pause(self):
        if self.running and self.paused_at is None:
            self.paused_at = self.clock()

    def resume(self):
        if self.paused_at is not None:
            self.paused_total += self.clock() - self.paused_at
            self.paused_at = None

    def stop(self):
        if self.running:
            self.resume()
            self.stop_time = self.clock()

    def elapsed_seconds(self):
        if self.start_time is None:
            return 0
        if self.stop_time is not None:
            end = self.stop_time
        elif self.paused_at is not None:
            end = self.paused_at
        else:
            end = self.clock()
        return max(0, int(end - self.start_time - self.paused_total))


# =========================================================================
# MODULE 6: MOVE LOG
# Closed set of move kinds recorded for undo/redo.
# =========================================================================
@dataclass(frozen=True)
class SetValue:
    row: int
    col: int
    previous_value: object
    new_value: object
    kind = 'set_value'


@dataclass(frozen=True)
class ToggleNote:
    row: int
    col: int
    digit: int
    added: bool
    kind = 'toggle_note'


# =========================================================================
# MODULE 7: LEADERBOARD
# Top records per difficulty, persisted to a string-keyed store.
# =========================================================================
class JsonFileStore:
    """Key-value store of strings backed by a single JSON file."""

    def __init__(self, filename=DEFAULT_RECORDS_FILE):
        self.filename = filename

    def _load(self):
        try:
            with open(self.filename, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except (json.JSONDecodeError, UnicodeDecodeError, OSError):
            print(f"Warning: Could not read store file {self.filename}.")
            return {}
        return data if isinstance(data, dict) else {}

    def get_item(self, key):
        return self._load().get(key)

    def set_item(self, key, value):
        data = self._load()
        data[key] = value
        try:
            with open(self.filename, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2)
        except OSError:
            print(f"Warning: Could not save store file {self.filename}.")


@dataclass
class GameRecord:
    player_name: str
    score: int
    difficulty: str
    time: int
    date: str

    def to_dict(self):
        return {
            'playerName': self.player_name,
            'score': self.score,
            'difficulty': self.difficulty,
            'time': self.time,
            'date': self.date
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            player_name=str(data['playerName']),
            score=int(data['score']),
            difficulty=str(data['difficulty']),
            time=int(data['time']),
            date=str(data['date'])
        )


class LeaderboardManager:
    def __init__(self, store=None, name_prompt=None):
        self.store = store if store is not None else JsonFileStore()
        self.name_prompt = name_prompt
        self.records = self.load()

    def load(self):
        """Reads the records from the store. Missing or malformed data means no records."""
        raw = self.store.get_item(RECORDS_KEY)
        if raw is None:
            return []
        try:
            return [GameRecord.from_dict(item) for item in json.loads(raw)]
        except (json.JSONDecodeError, TypeError, KeyError, ValueError, OverflowError):
            print("Warning: Stored leaderboard is malformed, starting with an empty one.")
            return []

    def save(self):
        self.store.set_item(RECORDS_KEY, json.dumps([r.to_dict() for r in self.records]))

    def ask_player_name(self):
        name = self.name_prompt() if self.name_prompt else None
        return name or 'Anonymous'

    def add_record(self, score, difficulty, elapsed_time, player_name=None):
        """
        Appends a record and rebuilds the collection keeping the top records
        of every difficulty. Returns the new record.
        """
        if player_name is None:
            player_name = self.ask_player_name()

        record = GameRecord(
            player_name=player_name,
            score=score,
            difficulty=difficulty,
            time=elapsed_time,
            date=datetime.now().isoformat()
        )
        self.records.append(record)

        # Sort records by score (descending); the sort is stable so ties keep insertion order
        self.records.sort(key=lambda r: r.score, reverse=True)

        by_difficulty = {d: [] for d in DIFFICULTIES}
        for r in self.records:
            if r.difficulty in by_difficulty:
                by_difficulty[r.difficulty].append(r)

        top_records = []
        for d in DIFFICULTIES:
            top_records.extend(by_difficulty[d][:RECORDS_PER_DIFFICULTY])
        self.records = top_records

        self.save()
        return record

    def get_top_records(self, difficulty):
        ranked = sorted((r for r in self.records if r.difficulty == difficulty),
                        key=lambda r: r.score, reverse=True)
        return ranked[:RECORDS_PER_DIFFICULTY]

    def all_top_records(self):
        return {d: self.get_top_records(d) for d in DIFFICULTIES}


# =========================================================================
# MODULE 8: GAME SESSION
# Owns the puzzle, the per-cell play state, scoring and the undo/redo log.
# =========================================================================
class GameSession:
    def __init__(self, leaderboard=None, clock=None, rng=None):
        self.rng = rng or random.Random()
        self.leaderboard = leaderboard if leaderboard is not None else LeaderboardManager()
        self.timer = GameTimer(clock)
        self.generator = SolutionGenerator(self.rng)
        self.deriver = PuzzleDeriver(self.rng)
        self.tally = DigitTally()

        self.solution = [[0] * GRID_SIZE for _ in range(GRID_SIZE)]
        self.cells = empty_cells()
        self.difficulty = DIFFICULTIES[0]

        self.started = False
        self.completed = False
        self.paused = False
        self.draft_mode = False
        self.elapsed_time = 0

        self.score = 0
        self.hints_used = 0
        self.errors = 0
        self.selected = None

        self.moves = []
        self.cursor = -1

    # ---------------------------------------------------------------------
    # Lifecycle
    # ---------------------------------------------------------------------
    @property
    def state(self):
        if self.completed:
            return STATE_COMPLETED
        if not self.started:
            return STATE_NOT_STARTED
        if self.paused:
            return STATE_PAUSED
        return STATE_ACTIVE

    @property
    def is_active(self):
        return self.state == STATE_ACTIVE

    def new_game(self, difficulty):
        """Generates a fresh solution and puzzle, resets every counter and starts the timer."""
        self.difficulty = difficulty if difficulty in CLUE_RANGES else DIFFICULTIES[0]
        self.started = True
        self.completed = False
        self.paused = False
        self.score = 0
        self.hints_used = 0
        self.errors = 0
        self.selected = None
        self.moves = []
        self.cursor = -1
        self.elapsed_time = 0

        self.solution = self.generator.generate()
        self.cells = self.deriver.derive(self.solution, self.difficulty)
        self.tally.reset(self.cells)

        self.timer.start()

    def pause_game(self):
        if self.state != STATE_ACTIVE:
            return False
        self.paused = True
        self.timer.pause()
        return True

    def resume_game(self):
        if self.state != STATE_PAUSED:
            return False
        self.paused = False
        self.timer.resume()
        return True

    def tick(self):
        """Called once per second by the UI; refreshes the displayed elapsed time."""
        if self.is_active:
            self.elapsed_time = self.timer.elapsed_seconds()

    @property
    def formatted_time(self):
        return format_time(self.elapsed_time)

    def toggle_draft_mode(self):
        self.draft_mode = not self.draft_mode
        return self.draft_mode

    # ---------------------------------------------------------------------
    # Player operations
    # ---------------------------------------------------------------------
    def select_cell(self, row, col):
        if not self.is_active:
            return False
        _check_position(row, col)
        self.selected = (row, col)
        return True

    def _record(self, move):
        # A new move discards everything after the cursor
        del self.moves[self.cursor + 1:]
        self.moves.append(move)
        self.cursor = len(self.moves) - 1

    def _write_value(self, row, col, value):
        """Writes a value, keeping the tally and the error flag in step with it."""
        cell = self.cells[row][col]
        if cell.value is not None:
            self.tally.decrement(cell.value)
        if value is not None:
            self.tally.increment(value)
        cell.value = value
        cell.is_error = value is not None and value != self.solution[row][col]

    def set_cell_value(self, row, col, value):
        """
        Places (or clears, with None) a value in a non-original cell.
        Correct values score points; wrong ones cost a point and count as an error.
        """
        if not self.is_active:
            return False
        _check_position(row, col)
        if value is not None:
            _check_digit(value)

        cell = self.cells[row][col]
        if cell.is_original:
            return False

        self._record(SetValue(row, col, cell.value, value))
        self._write_value(row, col, value)

        if value is not None:
            if not cell.is_error:
                self.score += CORRECT_CELL_POINTS
            else:
                self.score = max(0, self.score - ERROR_PENALTY)
                self.errors += 1

        self.check_completion()
        return True

    def toggle_note(self, row, col, digit):
        """Adds or removes a pencil mark. Only empty, non-original cells in draft mode take notes."""
        if not self.is_active or not self.draft_mode:
            return False
        _check_position(row, col)
        _check_digit(digit)

        cell = self.cells[row][col]
        if cell.is_original or cell.value is not None:
            return False

        added = digit not in cell.notes
        self._record(ToggleNote(row, col, digit, added))
        if added:
            cell.notes.add(digit)
        else:
            cell.notes.discard(digit)
        return True

    def use_hint(self):
        """
        Fills the selected cell with its solution value.
        Each hint costs more than the last; the placement itself still scores as correct.
        """
        if not self.is_active or self.hints_used >= MAX_HINTS:
            return False
        if self.selected is None:
            return False

        row, col = self.selected
        cell = self.cells[row][col]
        if cell.is_original or cell.value == self.solution[row][col]:
            return False

        hint_penalty = BASE_HINT_PENALTY + self.hints_used
        self.score = max(0, self.score - hint_penalty)
        self.hints_used += 1

        return self.set_cell_value(row, col, self.solution[row][col])

    def _apply_note(self, move, present):
        notes = self.cells[move.row][move.col].notes
        if present:
            notes.add(move.digit)
        else:
            notes.discard(move.digit)

    def undo(self):
        """Reverts the move at the cursor and steps the cursor back."""
        if not self.is_active or self.cursor < 0:
            return False

        move = self.moves[self.cursor]
        if isinstance(move, SetValue):
            self._write_value(move.row, move.col, move.previous_value)
        elif isinstance(move, ToggleNote):
            self._apply_note(move, not move.added)
        else:
            raise TypeError(f"Unknown move {move!r}")

        self.cursor -= 1
        if isinstance(move, SetValue):
            self.check_completion()
        return True

    def redo(self):
        """Steps the cursor forward and reapplies the move found there."""
        if not self.is_active or self.cursor >= len(self.moves) - 1:
            return False

        self.cursor += 1
        move = self.moves[self.cursor]
        if isinstance(move, SetValue):
            self._write_value(move.row, move.col, move.new_value)
            self.check_completion()
        elif isinstance(move, ToggleNote):
            self._apply_note(move, move.added)
        else:
            raise TypeError(f"Unknown move {move!r}")
        return True

    @property
    def can_undo(self):
        return self.is_active and self.cursor >= 0

    @property
    def can_redo(self):
        return self.is_active and self.cursor < len(self.moves) - 1

    # ---------------------------------------------------------------------
    # Completion
    # ---------------------------------------------------------------------
    def check_completion(self):
        """Finishes the game once every cell matches the solution."""
        for i in range(GRID_SIZE):
            for j in range(GRID_SIZE):
                if self.cells[i][j].value != self.solution[i][j]:
                    return False

        self.completed = True
        self.timer.stop()
        self.elapsed_time = self.timer.elapsed_seconds()

        time_bonus = max(0, TIME_BONUS_BASE - self.elapsed_time)
        self.score += time_bonus

        self.leaderboard.add_record(self.score, self.difficulty, self.elapsed_time)
        return True

    # ---------------------------------------------------------------------
    # Read surface for the UI
    # ---------------------------------------------------------------------
    def grid_values(self):
        return [[cell.value for cell in row] for row in self.cells]

    def is_valid_cell(self, row, col, value):
        """Checks a value against what the player currently has on the board."""
        return can_place(self.grid_values(), row, col, value)

    def conflicting_cells(self):
        """Cells whose value clashes with at least one peer."""
        grid = self.grid_values()
        conflicts = set()
        for i in range(GRID_SIZE):
            for j in range(GRID_SIZE):
                if grid[i][j] is not None and not can_place(grid, i, j, grid[i][j]):
                    conflicts.add((i, j))
        return conflicts

    def empty_positions(self):
        return [(i, j) for i in range(GRID_SIZE) for j in range(GRID_SIZE) if self.cells[i][j].value is None]
