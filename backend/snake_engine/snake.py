"""
Snake entity for the game engine.
"""

from collections import deque
from typing import Iterator, List, Optional, Set, Tuple

Cell = Tuple[int, int]


class Snake:
    """
    Represents the snake on the board.

    Attributes:
        positions: deque of (x, y) from head at index 0 to tail at the end
        alive: whether the snake is still alive
        death_reason: 'wall' or 'self' once the snake has died
        death_tick: the tick at which the snake died
    """

    def __init__(self, positions: List[Cell]):
        if not positions:
            raise ValueError("A snake needs at least one cell.")
        self.positions = deque(tuple(cell) for cell in positions)
        self._occupied: Set[Cell] = set(self.positions)
        if len(self._occupied) != len(self.positions):
            raise ValueError(f"Snake cells must be distinct: {list(self.positions)}")
        self.alive = True
        self.death_reason: Optional[str] = None
        self.death_tick: Optional[int] = None

    @property
    def head(self) -> Cell:
        """Return the head position (first element)."""
        return self.positions[0]

    @property
    def tail(self) -> Cell:
        """Return the tail position (last element)."""
        return self.positions[-1]

    def __len__(self) -> int:
        return len(self.positions)

    def __contains__(self, cell) -> bool:
        return cell in self._occupied

    def __iter__(self) -> Iterator[Cell]:
        return iter(self.positions)

    def occupied(self) -> Set[Cell]:
        """Return a copy of the set of cells covered by the body."""
        return set(self._occupied)

    def advance(self, new_head: Cell, grow: bool = False) -> Optional[Cell]:
        """
        Move the snake one step onto new_head.

        The caller has already checked that the move is legal. Returns the
        vacated tail cell, or None if the snake grew.
        """
        vacated = None
        if not grow:
            vacated = self.positions.pop()
            self._occupied.discard(vacated)
        self.positions.appendleft(new_head)
        self._occupied.add(new_head)
        return vacated

    def __repr__(self):
        return f"<Snake head={self.head} length={len(self)} alive={self.alive}>"
