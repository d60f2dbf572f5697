from typing import Iterator, List


class PathStack:
    """
    Cell indices from the root to the current cell, bottom to top.
    Only push/pop/peek touch the contents.
    """
    __slots__ = ('_items',)

    def __init__(self):
        self._items: List[int] = []

    def push(self, index: int):
        self._items.append(index)

    def pop(self) -> int:
        if not self._items:
            raise IndexError("pop from empty path stack")
        return self._items.pop()

    def peek(self) -> int:
        if not self._items:
            raise IndexError("peek at empty path stack")
        return self._items[-1]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[int]:
        return iter(self._items)

    def __repr__(self) -> str:
        return f"PathStack({self._items!r})"
