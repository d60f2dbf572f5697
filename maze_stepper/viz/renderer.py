import pygame
from maze_stepper.core.grid import Grid
from maze_stepper.core.events import Finished, Move, MoveKind, StepResult
from maze_stepper.viz.recorder import VideoRecorder, fps_for_tick, recording_path

BORDER = 2
# Smallest cell that still leaves a visible pixel inside the default border
MIN_CELL_SIZE = BORDER + 1

class Renderer:
    COLOR_BG = (34, 34, 34)            # #222, also the wall color
    COLOR_CARVE = (169, 169, 169)      # Dark gray
    COLOR_BACKTRACK = (255, 255, 255)
    COLOR_TEXT = (255, 215, 0)

    HUD_HEIGHT = 24

    # Seconds of the finished maze kept at the end of a recording
    COOLDOWN_SECONDS = 2

    def __init__(self, engine, cell_size=20, border=BORDER, tick_ms=40, record=False, output_file=None):
        if cell_size <= border:
            raise ValueError(f"Cell size {cell_size} must exceed the border width {border}")
        self.engine = engine
        self.grid: Grid = engine.grid
        self.cell_size = cell_size
        self.border = border
        self.tick_ms = tick_ms

        # Canvas: one cell_size square per cell plus a closing border line
        self.maze_width = cell_size * self.grid.width + border
        self.maze_height = cell_size * self.grid.height + border
        self.screen_width = self.maze_width
        self.screen_height = self.maze_height + self.HUD_HEIGHT

        if record and output_file is None:
            output_file = recording_path(self.grid.width, self.grid.height)
        self.recorder = VideoRecorder(output_file, fps=fps_for_tick(tick_ms), active=record)

        self.font = None
        self.running = True
        self.clock = None
        self.surface = None
        self.gen_finished = False
        self.last_result: StepResult = None

        # Frames to keep recording after completion. -1: Inactive
        self.exit_cooldown = -1

    def init_window(self):
        pygame.init()
        pygame.display.set_caption(f"Maze Stepper - {self.grid.width}x{self.grid.height}")
        self.surface = pygame.display.set_mode((self.screen_width, self.screen_height))
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("Consolas", 16)
        self.draw_grid()

    def cell_position(self, pos: int) -> int:
        """Top-left pixel of cell column/row 'pos'."""
        return pos * self.cell_size + self.border

    def cell_rect(self, x: int, y: int) -> pygame.Rect:
        inner = self.cell_size - self.border
        return pygame.Rect(self.cell_position(x), self.cell_position(y), inner, inner)

    def wall_rect(self, from_cell, to_cell) -> pygame.Rect:
        """The strip of wall pixels separating two adjacent cells."""
        (x1, y1), (x2, y2) = from_cell, to_cell
        inner = self.cell_size - self.border

        if x1 == x2 and abs(y1 - y2) == 1:
            top = self.cell_position(max(y1, y2)) - self.border
            return pygame.Rect(self.cell_position(x1), top, inner, self.border)
        if y1 == y2 and abs(x1 - x2) == 1:
            left = self.cell_position(max(x1, x2)) - self.border
            return pygame.Rect(left, self.cell_position(y1), self.border, inner)
        raise ValueError(f"Cells {from_cell} and {to_cell} are not adjacent")

    def draw_grid(self):
        """Full redraw from grid state: visited cells and their open passages."""
        self.surface.fill(self.COLOR_BG)

        for y in range(self.grid.height):
            for x in range(self.grid.width):
                if not self.grid.is_visited(x, y):
                    continue
                pygame.draw.rect(self.surface, self.COLOR_CARVE, self.cell_rect(x, y))

                # Each passage is drawn once, from its west/north cell
                if x < self.grid.width - 1 and not self.grid.has_wall(x, y, Grid.EAST):
                    pygame.draw.rect(self.surface, self.COLOR_CARVE, self.wall_rect((x, y), (x + 1, y)))
                if y < self.grid.height - 1 and not self.grid.has_wall(x, y, Grid.SOUTH):
                    pygame.draw.rect(self.surface, self.COLOR_CARVE, self.wall_rect((x, y), (x, y + 1)))

    def draw_move(self, move: Move):
        color = self.COLOR_BACKTRACK if move.kind is MoveKind.BACKTRACK else self.COLOR_CARVE

        if move.kind is MoveKind.BACKTRACK:
            # The cell being left is done for good
            pygame.draw.rect(self.surface, color, self.cell_rect(*move.from_cell))

        pygame.draw.rect(self.surface, color, self.wall_rect(move.from_cell, move.to_cell))
        pygame.draw.rect(self.surface, color, self.cell_rect(*move.to_cell))

    def draw_hud(self):
        hud = pygame.Rect(0, self.maze_height, self.screen_width, self.HUD_HEIGHT)
        self.surface.fill(self.COLOR_BG, hud)
        if self.font is None:
            return

        if self.gen_finished:
            text = "Maze complete!"
        else:
            text = f"Steps: {self.engine.step_count}  Stack: {self.engine.stack_size}"
        lbl = self.font.render(text, True, self.COLOR_TEXT)
        self.surface.blit(lbl, (4, self.maze_height + 4))

    def advance(self) -> StepResult:
        """Runs one engine step and paints it."""
        result = self.engine.step()
        self.last_result = result

        if isinstance(result, Finished):
            if not self.gen_finished:
                # The final root is the last cell retreated into
                x, y = self.engine.root
                pygame.draw.rect(self.surface, self.COLOR_BACKTRACK, self.cell_rect(x, y))
            self.gen_finished = True
        else:
            self.draw_move(result)
        return result

    def handle_input(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                self.running = False

    def run_loop(self):
        fps = 1000.0 / self.tick_ms if self.tick_ms > 0 else 0

        while self.running:
            self.handle_input()

            # One step per tick
            if not self.gen_finished:
                self.advance()
                if self.gen_finished and self.recorder.active:
                    self.exit_cooldown = self.recorder.fps * self.COOLDOWN_SECONDS

            self.draw_hud()
            pygame.display.flip()

            if self.recorder.active:
                self.recorder.capture_frame(self.surface)

            if self.exit_cooldown > 0:
                self.exit_cooldown -= 1
                if self.exit_cooldown == 0:
                    self.running = False

            self.clock.tick(fps)

        self.recorder.stop()
        pygame.quit()
