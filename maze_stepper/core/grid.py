from array import array
from enum import IntEnum
from typing import List, NamedTuple, Tuple

from maze_stepper.core.errors import InvalidCellError, InvalidDimensionsError


class CellState(IntEnum):
    UNVISITED = 0
    VISITED = 1
    OUT_OF_BOUNDS = 2


class Neighbor(NamedTuple):
    x: int
    y: int
    direction: int
    state: CellState


class Grid:
    # Bitmask Constants
    NORTH = 0b00000001
    EAST  = 0b00000010
    SOUTH = 0b00000100
    WEST  = 0b00001000

    # Flags
    VISITED = 0b00010000

    # All walls present by default (N|E|S|W) = 15
    ALL_WALLS = NORTH | EAST | SOUTH | WEST

    # Direction Helpers
    DX = {NORTH: 0, SOUTH: 0, EAST: 1, WEST: -1}
    DY = {NORTH: -1, SOUTH: 1, EAST: 0, WEST: 0}
    OPPOSITE = {NORTH: SOUTH, SOUTH: NORTH, EAST: WEST, WEST: EAST}

    # Neighbor enumeration order: left, right, up, down
    NEIGHBOR_ORDER = (WEST, EAST, NORTH, SOUTH)

    __slots__ = ('width', 'height', 'cells')

    def __init__(self, width: int, height: int):
        if width <= 0 or height <= 0:
            raise InvalidDimensionsError(width, height)
        self.width = width
        self.height = height
        # 1 byte per cell: wall bits + visited flag
        self.cells = array('B', [self.ALL_WALLS] * (width * height))

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get_index(self, x: int, y: int) -> int:
        if self.in_bounds(x, y):
            return y * self.width + x
        raise InvalidCellError(f"Coordinate ({x}, {y}) out of bounds")

    def coords(self, index: int) -> Tuple[int, int]:
        if not 0 <= index < len(self.cells):
            raise InvalidCellError(f"Index {index} out of bounds")
        return index % self.width, index // self.width

    def classify(self, x: int, y: int) -> CellState:
        if not self.in_bounds(x, y):
            return CellState.OUT_OF_BOUNDS
        if self.cells[y * self.width + x] & self.VISITED:
            return CellState.VISITED
        return CellState.UNVISITED

    def is_visited(self, x: int, y: int) -> bool:
        return self.classify(x, y) is CellState.VISITED

    def mark_visited(self, x: int, y: int):
        """
        Flags (x, y) as visited. A cell may only be visited once; a second
        visit, or a visit outside the grid, means the caller lost track of
        its own state.
        """
        if not self.in_bounds(x, y):
            raise InvalidCellError(f"Cannot visit ({x}, {y}): out of bounds")
        idx = y * self.width + x
        if self.cells[idx] & self.VISITED:
            raise InvalidCellError(f"Cell ({x}, {y}) already visited")
        self.cells[idx] |= self.VISITED

    def visited_count(self) -> int:
        return sum(1 for val in self.cells if val & self.VISITED)

    def neighbors(self, x: int, y: int) -> List[Neighbor]:
        """
        Returns the 4 orthogonal neighbors of (x, y) in left, right, up, down
        order, each tagged with its state. Out-of-bounds neighbors are kept
        (tagged OUT_OF_BOUNDS) so the order never shifts.
        """
        result = []
        for dir_bit in self.NEIGHBOR_ORDER:
            nx, ny = x + self.DX[dir_bit], y + self.DY[dir_bit]
            result.append(Neighbor(nx, ny, dir_bit, self.classify(nx, ny)))
        return result

    def partition_neighbors(self, x: int, y: int) -> Tuple[List[Neighbor], List[Neighbor]]:
        visited, unvisited = [], []
        for n in self.neighbors(x, y):
            if n.state is CellState.VISITED:
                visited.append(n)
            elif n.state is CellState.UNVISITED:
                unvisited.append(n)
        return visited, unvisited

    def direction_between(self, x1: int, y1: int, x2: int, y2: int) -> int:
        for dir_bit in self.NEIGHBOR_ORDER:
            if x1 + self.DX[dir_bit] == x2 and y1 + self.DY[dir_bit] == y2:
                return dir_bit
        raise InvalidCellError(f"({x1}, {y1}) and ({x2}, {y2}) are not adjacent")

    def carve_path(self, x1: int, y1: int, dir_bit: int):
        """
        Removes the wall between current cell (x,y) and the neighbor in 'dir_bit'.
        Also removes the OPPOSITE wall from the neighbor.
        """
        x2, y2 = x1 + self.DX[dir_bit], y1 + self.DY[dir_bit]
        idx1 = self.get_index(x1, y1)
        if not self.in_bounds(x2, y2):
            raise InvalidCellError(f"Cannot carve from ({x1}, {y1}) into the void")
        idx2 = y2 * self.width + x2

        self.cells[idx1] &= ~dir_bit
        self.cells[idx2] &= ~self.OPPOSITE[dir_bit]

    def has_wall(self, x: int, y: int, dir_bit: int) -> bool:
        return (self.cells[self.get_index(x, y)] & dir_bit) != 0
