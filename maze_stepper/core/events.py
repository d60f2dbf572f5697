from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Tuple, Union

Cell = Tuple[int, int]


class MoveKind(Enum):
    CARVE = "carve"
    BACKTRACK = "backtrack"


@dataclass(frozen=True)
class Move:
    """One step of the walk, from one cell into a 4-adjacent one."""
    from_cell: Cell
    to_cell: Cell

    kind: ClassVar[MoveKind]


@dataclass(frozen=True)
class Carved(Move):
    kind: ClassVar[MoveKind] = MoveKind.CARVE


@dataclass(frozen=True)
class Backtracked(Move):
    kind: ClassVar[MoveKind] = MoveKind.BACKTRACK


@dataclass(frozen=True)
class Finished:
    pass


FINISHED = Finished()

StepResult = Union[Carved, Backtracked, Finished]
