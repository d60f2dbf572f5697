from abc import ABC, abstractmethod
from typing import Iterator
from maze_stepper.core.grid import Grid
from maze_stepper.core.events import Finished, StepResult

class Generator(ABC):
    def __init__(self, grid: Grid, seed: int = None):
        self.grid = grid
        self.seed = seed
        self.step_count = 0

    @abstractmethod
    def step(self) -> StepResult:
        """
        Performs exactly one move and reports it.
        Must keep returning Finished once generation is complete.
        """
        pass

    def run(self) -> Iterator[StepResult]:
        """Yields every step result, ending with the first Finished."""
        while True:
            result = self.step()
            yield result
            if isinstance(result, Finished):
                return

    def run_all(self) -> int:
        """Helper to run the generator to completion. Returns the number of steps taken."""
        count = 0
        for _ in self.run():
            count += 1
        return count
