import sys

import pygame

from sudoku_game import (
    DEFAULT_RECORDS_FILE, DIFFICULTIES, GRID_SIZE, MAX_HINTS, STATE_COMPLETED, STATE_PAUSED,
    GameSession, JsonFileStore, LeaderboardManager, format_time
)

TICK_EVENT = pygame.USEREVENT + 1
MAX_NAME_LENGTH = 16


# =========================================================================
# PYGAME FRONT END
# Menu, board, numpad and leaderboard screens driving a GameSession.
# =========================================================================
class SudokuWindow:
    def __init__(self, records_file=DEFAULT_RECORDS_FILE):
        pygame.init()
        self.WINDOW_WIDTH = 800
        self.WINDOW_HEIGHT = 650

        self.screen = pygame.display.set_mode((self.WINDOW_WIDTH, self.WINDOW_HEIGHT))
        pygame.display.set_caption("Sudoku")

        # Color Palette
        self.BG_COLOR = (245, 247, 250)
        self.GRID_BG = (255, 255, 255)
        self.BLACK = (30, 30, 30)
        self.GRAY = (180, 190, 200)
        self.PRIMARY = (79, 70, 229)
        self.PRIMARY_LIGHT = (129, 140, 248)
        self.PRIMARY_DARK = (55, 48, 163)
        self.SUCCESS = (34, 197, 94)
        self.SUCCESS_LIGHT = (134, 239, 172)
        self.ERROR = (239, 68, 68)
        self.ERROR_LIGHT = (254, 202, 202)
        self.WARNING = (251, 191, 36)
        self.SELECTION = (224, 231, 255)
        self.SELECTION_BORDER = (129, 140, 248)
        self.TEXT_GRAY = (100, 116, 139)
        self.SUBGRID_LINE = (203, 213, 225)
        self.CONFLICT_BORDER = (200, 50, 50)

        # Grid positioning
        self.GRID_PIXELS = 450
        self.CELL_SIZE = self.GRID_PIXELS // GRID_SIZE
        self.GRID_X = 30
        self.GRID_Y = 80
        self.PANEL_X = self.GRID_X + self.GRID_PIXELS + 20
        self.PANEL_WIDTH = 260
        self.NUMPAD_Y = self.GRID_Y + self.GRID_PIXELS + 20

        # Fonts
        self.font_title = pygame.font.Font(None, 48)
        self.font_large = pygame.font.Font(None, 42)
        self.font_medium = pygame.font.Font(None, 32)
        self.font_small = pygame.font.Font(None, 22)
        self.font_tiny = pygame.font.Font(None, 18)
        self.font_note = pygame.font.Font(None, 16)

        self.key_mapping = {
            pygame.K_1: 1, pygame.K_2: 2, pygame.K_3: 3, pygame.K_4: 4, pygame.K_5: 5,
            pygame.K_6: 6, pygame.K_7: 7, pygame.K_8: 8, pygame.K_9: 9,
            pygame.K_KP1: 1, pygame.K_KP2: 2, pygame.K_KP3: 3, pygame.K_KP4: 4, pygame.K_KP5: 5,
            pygame.K_KP6: 6, pygame.K_KP7: 7, pygame.K_KP8: 8, pygame.K_KP9: 9
        }

        leaderboard = LeaderboardManager(JsonFileStore(records_file), name_prompt=self.prompt_player_name)
        self.session = GameSession(leaderboard=leaderboard)
        self.difficulty = DIFFICULTIES[0]

        # Menu State
        self.show_menu = True
        self.show_leaderboard = False
        self.running = True

    # ---------------------------------------------------------------------
    # Actions
    # ---------------------------------------------------------------------
    def start_game(self, difficulty=None):
        if difficulty is not None:
            self.difficulty = difficulty
        self.session.new_game(self.difficulty)
        # Replaces any timer left over from the previous game
        pygame.time.set_timer(TICK_EVENT, 1000)
        self.show_menu = False
        self.show_leaderboard = False

    def toggle_pause(self):
        if self.session.state == STATE_PAUSED:
            self.session.resume_game()
        else:
            self.session.pause_game()

    def stop_ticks_if_completed(self):
        if self.session.state == STATE_COMPLETED:
            pygame.time.set_timer(TICK_EVENT, 0)

    def enter_digit(self, digit):
        if self.session.selected is None:
            return
        row, col = self.session.selected
        if self.session.draft_mode:
            self.session.toggle_note(row, col, digit)
        else:
            self.session.set_cell_value(row, col, digit)
        self.stop_ticks_if_completed()

    def clear_selected(self):
        if self.session.selected is not None:
            row, col = self.session.selected
            if self.session.cells[row][col].value is not None:
                self.session.set_cell_value(row, col, None)
                self.stop_ticks_if_completed()

    def use_hint(self):
        self.session.use_hint()
        self.stop_ticks_if_completed()

    def undo(self):
        self.session.undo()
        self.stop_ticks_if_completed()

    def redo(self):
        self.session.redo()
        self.stop_ticks_if_completed()

    def prompt_player_name(self):
        """Blocks on a small text-entry overlay until the player confirms a name."""
        name = ""
        while True:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    # The main loop never sees this event, so close from here
                    self.running = False
                    return name
                if event.type == pygame.KEYDOWN:
                    if event.key in (pygame.K_RETURN, pygame.K_KP_ENTER):
                        return name.strip()
                    if event.key == pygame.K_ESCAPE:
                        return ""
                    if event.key == pygame.K_BACKSPACE:
                        name = name[:-1]
                    elif event.unicode and event.unicode.isprintable() and len(name) < MAX_NAME_LENGTH:
                        name += event.unicode

            self.draw_game()
            self.draw_name_prompt(name)
            pygame.display.flip()
            pygame.time.wait(30)

    # ---------------------------------------------------------------------
    # Drawing helpers
    # ---------------------------------------------------------------------
    def draw_rounded_rect(self, surface, color, rect, radius=10):
        pygame.draw.rect(surface, color, pygame.Rect(rect), border_radius=radius)

    def draw_button(self, text, x, y, width, height, color, text_color):
        """Draws a clickable button with a shadow effect."""
        shadow_offset = 2
        self.draw_rounded_rect(self.screen, self.GRAY,
                               (x + shadow_offset, y + shadow_offset, width, height), 8)
        self.draw_rounded_rect(self.screen, color, (x, y, width, height), 8)

        text_surface = self.font_small.render(text, True, text_color)
        self.screen.blit(text_surface, text_surface.get_rect(center=(x + width // 2, y + height // 2)))
        return pygame.Rect(x, y, width, height)

    def draw_stat_card(self, label, value, x, y, width):
        height = 50
        self.draw_rounded_rect(self.screen, self.GRID_BG, (x, y, width, height), 8)
        self.screen.blit(self.font_tiny.render(label, True, self.TEXT_GRAY), (x + 12, y + 10))
        self.screen.blit(self.font_medium.render(str(value), True, self.BLACK), (x + 12, y + 24))

    def menu_buttons(self):
        menu_x = (self.WINDOW_WIDTH - 400) // 2
        entries = []
        if self.session.state == STATE_PAUSED:
            entries.append(("Continue", self.SUCCESS, self.continue_game))
        for difficulty in DIFFICULTIES:
            entries.append((difficulty.title(), self.PRIMARY, lambda d=difficulty: self.start_game(d)))
        entries.append(("Leaderboard", self.WARNING, self.open_leaderboard))
        entries.append(("Exit", self.ERROR, self.quit))

        return [(pygame.Rect(menu_x, 180 + i * 62, 400, 50), text, color, action)
                for i, (text, color, action) in enumerate(entries)]

    def panel_buttons(self):
        paused = self.session.state == STATE_PAUSED
        labels = [
            ("New Game", self.PRIMARY, self.start_game),
            (f"Hint ({MAX_HINTS - self.session.hints_used})", self.SUCCESS, self.use_hint),
            ("Undo", self.TEXT_GRAY, self.undo),
            ("Redo", self.TEXT_GRAY, self.redo),
            ("Notes: ON" if self.session.draft_mode else "Notes: OFF",
             self.WARNING if self.session.draft_mode else self.PRIMARY_LIGHT, self.session.toggle_draft_mode),
            ("Resume" if paused else "Pause", self.PRIMARY_DARK, self.toggle_pause),
            ("Menu", self.TEXT_GRAY, self.open_menu)
        ]
        button_y = 290
        button_height = 38
        button_spacing = 8
        return [(pygame.Rect(self.PANEL_X, button_y + i * (button_height + button_spacing),
                             self.PANEL_WIDTH, button_height), text, color, action)
                for i, (text, color, action) in enumerate(labels)]

    def numpad_buttons(self):
        size = self.CELL_SIZE - 4
        return [(pygame.Rect(self.GRID_X + (d - 1) * self.CELL_SIZE + 2, self.NUMPAD_Y, size, size), d)
                for d in range(1, GRID_SIZE + 1)]

    def open_menu(self):
        # Leaving the board pauses a running game
        self.session.pause_game()
        self.show_menu = True
        self.show_leaderboard = False

    def continue_game(self):
        self.session.resume_game()
        self.show_menu = False

    def open_leaderboard(self):
        self.show_menu = False
        self.show_leaderboard = True

    def quit(self):
        self.running = False

    # ---------------------------------------------------------------------
    # Screens
    # ---------------------------------------------------------------------
    def draw_menu(self):
        self.screen.fill(self.BG_COLOR)

        title = self.font_title.render("SUDOKU", True, self.PRIMARY_DARK)
        shadow = self.font_title.render("SUDOKU", True, (200, 200, 210))
        title_rect = title.get_rect(center=(self.WINDOW_WIDTH // 2, 110))
        self.screen.blit(shadow, (title_rect.x + 3, title_rect.y + 3))
        self.screen.blit(title, title_rect)

        subtitle = self.font_small.render("Pick a difficulty to start a new game", True, self.TEXT_GRAY)
        self.screen.blit(subtitle, subtitle.get_rect(center=(self.WINDOW_WIDTH // 2, 160)))

        for rect, text, color, _ in self.menu_buttons():
            self.draw_button(text, rect.x, rect.y, rect.width, rect.height, color, (255, 255, 255))

    def draw_leaderboard(self):
        self.screen.fill(self.BG_COLOR)

        title = self.font_title.render("Leaderboard", True, self.PRIMARY_DARK)
        self.screen.blit(title, title.get_rect(center=(self.WINDOW_WIDTH // 2, 50)))
        self.draw_button("Back to Menu", 30, 20, 150, 40, self.PRIMARY, (255, 255, 255))

        headers = ["Player", "Score", "Time", "Date"]
        x_positions = [80, 330, 460, 580]
        row_y = 100

        for difficulty, records in self.session.leaderboard.all_top_records().items():
            self.draw_rounded_rect(self.screen, self.PRIMARY, (40, row_y, 720, 30), 8)
            self.screen.blit(self.font_small.render(difficulty.upper(), True, (255, 255, 255)), (55, row_y + 8))
            for i, header in enumerate(headers[1:], start=1):
                self.screen.blit(self.font_tiny.render(header, True, (255, 255, 255)), (x_positions[i], row_y + 9))
            row_y += 34

            if not records:
                self.screen.blit(self.font_tiny.render("No records yet", True, self.TEXT_GRAY), (x_positions[0], row_y + 4))
                row_y += 26

            for rank, record in enumerate(records, start=1):
                row_color = self.GRID_BG if rank % 2 else (248, 250, 252)
                self.draw_rounded_rect(self.screen, row_color, (40, row_y, 720, 24), 6)
                values = [f"{rank}. {record.player_name}", str(record.score),
                          format_time(record.time), record.date[:10]]
                for x, value in zip(x_positions, values):
                    self.screen.blit(self.font_tiny.render(value, True, self.BLACK), (x, row_y + 6))
                row_y += 26

            row_y += 10

    def draw_grid(self):
        self.draw_rounded_rect(self.screen, self.GRID_BG,
                               (self.GRID_X, self.GRID_Y, self.GRID_PIXELS, self.GRID_PIXELS), 4)

        for i in range(GRID_SIZE + 1):
            thickness = 3 if i % 3 == 0 else 1
            color = self.BLACK if i % 3 == 0 else self.SUBGRID_LINE
            offset = i * self.CELL_SIZE
            pygame.draw.line(self.screen, color,
                             (self.GRID_X, self.GRID_Y + offset),
                             (self.GRID_X + self.GRID_PIXELS, self.GRID_Y + offset), thickness)
            pygame.draw.line(self.screen, color,
                             (self.GRID_X + offset, self.GRID_Y),
                             (self.GRID_X + offset, self.GRID_Y + self.GRID_PIXELS), thickness)

    def draw_selection(self):
        if self.session.selected is None:
            return
        row, col = self.session.selected
        x = self.GRID_X + col * self.CELL_SIZE
        y = self.GRID_Y + row * self.CELL_SIZE

        # Cross-hair effect
        highlight_surf = pygame.Surface((self.CELL_SIZE, self.CELL_SIZE))
        highlight_surf.set_alpha(30)
        highlight_surf.fill(self.PRIMARY_LIGHT)
        for i in range(GRID_SIZE):
            self.screen.blit(highlight_surf, (self.GRID_X + i * self.CELL_SIZE, y))
            self.screen.blit(highlight_surf, (x, self.GRID_Y + i * self.CELL_SIZE))

        pygame.draw.rect(self.screen, self.SELECTION,
                         (x + 2, y + 2, self.CELL_SIZE - 4, self.CELL_SIZE - 4))
        pygame.draw.rect(self.screen, self.SELECTION_BORDER,
                         (x + 2, y + 2, self.CELL_SIZE - 4, self.CELL_SIZE - 4), 3)

    def draw_numbers(self):
        """Renders values, pencil marks and conflict outlines."""
        conflicts = self.session.conflicting_cells()
        note_size = self.CELL_SIZE // 3

        for i in range(GRID_SIZE):
            for j in range(GRID_SIZE):
                cell = self.session.cells[i][j]
                x = self.GRID_X + j * self.CELL_SIZE
                y = self.GRID_Y + i * self.CELL_SIZE

                if cell.value is not None:
                    if cell.is_original:
                        color = self.BLACK
                    else:
                        color = self.ERROR if cell.is_error else self.PRIMARY
                    text = self.font_large.render(str(cell.value), True, color)
                    self.screen.blit(text, text.get_rect(center=(x + self.CELL_SIZE // 2, y + self.CELL_SIZE // 2)))
                else:
                    for note in cell.notes:
                        nx = x + ((note - 1) % 3) * note_size + note_size // 2
                        ny = y + ((note - 1) // 3) * note_size + note_size // 2
                        t = self.font_note.render(str(note), True, self.TEXT_GRAY)
                        self.screen.blit(t, t.get_rect(center=(nx, ny)))

                if (i, j) in conflicts:
                    pygame.draw.rect(self.screen, self.CONFLICT_BORDER,
                                     (x + 2, y + 2, self.CELL_SIZE - 4, self.CELL_SIZE - 4), 2)

    def draw_numpad(self):
        """Digits already placed nine times are greyed out."""
        for rect, digit in self.numpad_buttons():
            completed = self.session.tally.is_completed(digit)
            color = self.GRAY if completed else self.PRIMARY_LIGHT
            self.draw_rounded_rect(self.screen, color, rect, 8)
            t = self.font_medium.render(str(digit), True, (255, 255, 255))
            self.screen.blit(t, t.get_rect(center=rect.center))

    def draw_ui(self):
        title = self.font_title.render("Sudoku", True, self.PRIMARY_DARK)
        self.screen.blit(title, title.get_rect(center=(self.WINDOW_WIDTH // 2, 35)))

        session = self.session
        self.draw_stat_card("TIME", session.formatted_time, self.PANEL_X, 90, 120)
        self.draw_stat_card("SCORE", session.score, self.PANEL_X + 130, 90, 120)
        self.draw_stat_card("ERRORS", session.errors, self.PANEL_X, 155, 120)
        self.draw_stat_card("HINTS", f"{session.hints_used}/{MAX_HINTS}", self.PANEL_X + 130, 155, 120)

        diff_y = 225
        self.draw_rounded_rect(self.screen, self.PRIMARY_LIGHT, (self.PANEL_X, diff_y, self.PANEL_WIDTH, 40), 8)
        d_text = self.font_small.render(f"LEVEL: {session.difficulty.upper()}", True, (255, 255, 255))
        self.screen.blit(d_text, d_text.get_rect(center=(self.PANEL_X + self.PANEL_WIDTH // 2, diff_y + 20)))

        for rect, text, color, _ in self.panel_buttons():
            self.draw_button(text, rect.x, rect.y, rect.width, rect.height, color, (255, 255, 255))

    def draw_overlay(self, headline, detail, color):
        overlay = pygame.Surface((self.WINDOW_WIDTH, self.WINDOW_HEIGHT))
        overlay.set_alpha(200)
        overlay.fill((20, 20, 30))
        self.screen.blit(overlay, (0, 0))

        mx, my = (self.WINDOW_WIDTH - 400) // 2, (self.WINDOW_HEIGHT - 240) // 2
        self.draw_rounded_rect(self.screen, self.GRID_BG, (mx, my, 400, 240), 16)
        t = self.font_title.render(headline, True, color)
        self.screen.blit(t, t.get_rect(center=(self.WINDOW_WIDTH // 2, my + 50)))
        s = self.font_medium.render(detail, True, self.PRIMARY)
        self.screen.blit(s, s.get_rect(center=(self.WINDOW_WIDTH // 2, my + 110)))
        return my

    def draw_name_prompt(self, name):
        my = self.draw_overlay("Victory!", f"Score: {self.session.score}", self.SUCCESS)
        label = self.font_small.render("Enter your name for the leaderboard:", True, self.TEXT_GRAY)
        self.screen.blit(label, label.get_rect(center=(self.WINDOW_WIDTH // 2, my + 150)))
        box_x = (self.WINDOW_WIDTH - 300) // 2
        pygame.draw.rect(self.screen, self.SELECTION_BORDER, (box_x, my + 170, 300, 40), 2, border_radius=6)
        text = self.font_medium.render(name + "|", True, self.BLACK)
        self.screen.blit(text, (box_x + 10, my + 180))

    def draw_game(self):
        self.screen.fill(self.BG_COLOR)
        self.draw_grid()
        self.draw_selection()
        if self.session.state != STATE_PAUSED:
            self.draw_numbers()
        self.draw_numpad()
        self.draw_ui()

        if self.session.state == STATE_PAUSED:
            self.draw_overlay("Paused", "Press P to resume", self.PRIMARY_DARK)
        elif self.session.state == STATE_COMPLETED:
            my = self.draw_overlay("Victory!", f"Score: {self.session.score}", self.SUCCESS)
            r = self.font_small.render("Press SPACE for New Game", True, self.PRIMARY)
            self.screen.blit(r, r.get_rect(center=(self.WINDOW_WIDTH // 2, my + 190)))

    # ---------------------------------------------------------------------
    # Input handling
    # ---------------------------------------------------------------------
    def handle_click(self, pos):
        x, y = pos

        if self.show_menu:
            for rect, _, _, action in self.menu_buttons():
                if rect.collidepoint(pos):
                    action()
                    return
            return

        if self.show_leaderboard:
            if 30 <= x <= 180 and 20 <= y <= 60:
                self.show_leaderboard = False
                self.show_menu = True
            return

        for rect, _, _, action in self.panel_buttons():
            if rect.collidepoint(pos):
                action()
                return

        if (self.GRID_X <= x < self.GRID_X + self.GRID_PIXELS and
                self.GRID_Y <= y < self.GRID_Y + self.GRID_PIXELS):
            col = (x - self.GRID_X) // self.CELL_SIZE
            row = (y - self.GRID_Y) // self.CELL_SIZE
            self.session.select_cell(row, col)
            return

        for rect, digit in self.numpad_buttons():
            if rect.collidepoint(pos):
                self.enter_digit(digit)
                return

    def handle_key(self, event):
        session = self.session
        if session.state == STATE_COMPLETED:
            if event.key == pygame.K_SPACE:
                self.start_game()
            return

        if event.key == pygame.K_p:
            self.toggle_pause()
        elif event.key == pygame.K_n:
            session.toggle_draft_mode()
        elif event.key == pygame.K_h:
            self.use_hint()
        elif event.key == pygame.K_z and event.mod & pygame.KMOD_CTRL:
            self.undo()
        elif event.key == pygame.K_y and event.mod & pygame.KMOD_CTRL:
            self.redo()
        elif event.key in (pygame.K_DELETE, pygame.K_BACKSPACE, pygame.K_0):
            self.clear_selected()
        elif event.key in self.key_mapping:
            self.enter_digit(self.key_mapping[event.key])
        elif session.selected is not None:
            # Arrow Key Navigation
            row, col = session.selected
            if event.key == pygame.K_UP and row > 0:
                session.select_cell(row - 1, col)
            elif event.key == pygame.K_DOWN and row < GRID_SIZE - 1:
                session.select_cell(row + 1, col)
            elif event.key == pygame.K_LEFT and col > 0:
                session.select_cell(row, col - 1)
            elif event.key == pygame.K_RIGHT and col < GRID_SIZE - 1:
                session.select_cell(row, col + 1)

    def run(self):
        """Main game loop."""
        clock = pygame.time.Clock()

        while self.running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self.running = False
                elif event.type == TICK_EVENT:
                    self.session.tick()
                elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                    self.handle_click(event.pos)
                elif event.type == pygame.KEYDOWN and not self.show_menu and not self.show_leaderboard:
                    self.handle_key(event)

            if self.show_menu:
                self.draw_menu()
            elif self.show_leaderboard:
                self.draw_leaderboard()
            else:
                self.draw_game()

            pygame.display.flip()
            clock.tick(60)

        pygame.quit()


def main():
    records_file = sys.argv[1] if len(sys.argv) > 1 else DEFAULT_RECORDS_FILE
    SudokuWindow(records_file).run()


if __name__ == "__main__":
    main()
