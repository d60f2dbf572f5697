class MazeError(Exception):
    """Base class for every error raised by the maze engine."""


class InvalidDimensionsError(MazeError, ValueError):
    def __init__(self, width: int, height: int):
        super().__init__(f"Grid dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height


class RootOutOfBoundsError(MazeError, IndexError):
    def __init__(self, x: int, y: int, width: int, height: int):
        super().__init__(f"Root ({x}, {y}) is outside the {width}x{height} grid")
        self.x = x
        self.y = y


class InvalidCellError(MazeError, IndexError):
    """
    Raised when a cell is addressed outside the grid, visited twice, or when
    two cells that are not 4-adjacent are asked to share a passage.
    Never expected during normal generation.
    """


class InconsistentPathError(MazeError, RuntimeError):
    """The path stack no longer describes a walk of adjacent visited cells."""
