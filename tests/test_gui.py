import pytest

pygame = pytest.importorskip("pygame")


@pytest.fixture
def window(tmp_path, monkeypatch):
    monkeypatch.setenv("SDL_VIDEODRIVER", "dummy")
    monkeypatch.setenv("SDL_AUDIODRIVER", "dummy")
    import sudoku_gui

    timers = []
    monkeypatch.setattr(sudoku_gui.pygame.time, "set_timer", lambda event, millis: timers.append((event, millis)))
    w = sudoku_gui.SudokuWindow(str(tmp_path / "records.json"))
    w.timers = timers
    yield w
    pygame.quit()


def finish_game(session):
    session.completed = True


@pytest.mark.parametrize("action", ["undo", "redo"])
def test_undo_and_redo_stop_ticks_on_completion(window, monkeypatch, action):
    import sudoku_gui

    window.start_game('beginner')
    assert window.timers[-1] == (sudoku_gui.TICK_EVENT, 1000)

    monkeypatch.setattr(window.session, action, lambda: finish_game(window.session))
    getattr(window, action)()
    assert window.timers[-1] == (sudoku_gui.TICK_EVENT, 0)


def test_panel_undo_redo_go_through_window(window):
    window.start_game('beginner')
    actions = {text: action for _, text, _, action in window.panel_buttons()}
    assert actions["Undo"] == window.undo
    assert actions["Redo"] == window.redo


def test_closing_during_name_prompt_stops_main_loop(window, monkeypatch):
    monkeypatch.setattr(pygame.event, "get", lambda: [pygame.event.Event(pygame.QUIT)])
    assert window.prompt_player_name() == ""
    assert window.running is False
