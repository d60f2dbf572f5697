import logging
import random
from enum import Enum
from typing import List, Tuple

from maze_stepper.algo.base import Generator
from maze_stepper.core.errors import InconsistentPathError, RootOutOfBoundsError
from maze_stepper.core.events import FINISHED, Backtracked, Carved, StepResult
from maze_stepper.core.grid import CellState, Grid
from maze_stepper.core.stack import PathStack

logger = logging.getLogger(__name__)


class Phase(Enum):
    RUNNING = "running"
    DONE = "done"


def random_root(width: int, height: int, rng=None) -> Tuple[int, int]:
    """Picks a root cell uniformly over a width x height grid."""
    rng = rng or random.Random()
    return rng.randrange(width), rng.randrange(height)


class StepEngine(Generator):
    """
    Randomized depth-first "recursive backtracker", one move per step().

    Each call either carves into a random unvisited neighbor of the current
    cell or retreats a single cell along the path stack. Retreats are never
    batched: a dead end ten cells deep costs ten calls.
    """

    def __init__(self, width: int, height: int, root_x: int, root_y: int, seed: int = None, rng=None):
        grid = Grid(width, height)
        if not grid.in_bounds(root_x, root_y):
            raise RootOutOfBoundsError(root_x, root_y, width, height)
        super().__init__(grid, seed)

        self.rng = rng if rng is not None else random.Random(seed)
        self.root = (root_x, root_y)
        self.phase = Phase.RUNNING
        self.carve_count = 0
        self.backtrack_count = 0

        self.stack = PathStack()
        self._current = self.root
        self.grid.mark_visited(root_x, root_y)
        self.stack.push(self.grid.get_index(root_x, root_y))

        logger.debug(f"Engine ready: {width}x{height} grid, root ({root_x}, {root_y})")

    @property
    def current(self) -> Tuple[int, int]:
        return self._current

    @property
    def is_finished(self) -> bool:
        return self.phase is Phase.DONE

    @property
    def stack_size(self) -> int:
        return len(self.stack)

    def classify(self, x: int, y: int) -> CellState:
        return self.grid.classify(x, y)

    def path(self) -> List[Tuple[int, int]]:
        """Cells on the stack, root first."""
        return [self.grid.coords(idx) for idx in self.stack]

    def step(self) -> StepResult:
        if self.phase is Phase.DONE:
            return FINISHED

        self.step_count += 1
        cx, cy = self._current
        visited, unvisited = self.grid.partition_neighbors(cx, cy)

        # Carve
        if unvisited:
            nx, ny, dir_bit, _ = self.rng.choice(unvisited)
            self.grid.mark_visited(nx, ny)
            self.grid.carve_path(cx, cy, dir_bit)
            self.stack.push(self.grid.get_index(nx, ny))
            self._current = (nx, ny)
            self.carve_count += 1
            return Carved((cx, cy), (nx, ny))

        # Backtrack
        if len(self.stack) > 1:
            self.stack.pop()
            target = self.stack.peek()
            for n in visited:
                if self.grid.get_index(n.x, n.y) == target:
                    self._current = (n.x, n.y)
                    self.backtrack_count += 1
                    return Backtracked((cx, cy), (n.x, n.y))
            raise InconsistentPathError(
                f"No visited neighbor of ({cx}, {cy}) matches stack top {self.grid.coords(target)}"
            )

        # Root with nothing left to explore
        self.stack.pop()
        self.phase = Phase.DONE
        logger.debug(f"Done after {self.step_count} steps "
                     f"({self.carve_count} carves, {self.backtrack_count} backtracks)")
        return FINISHED
