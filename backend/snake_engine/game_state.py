"""
GameState entity - a snapshot of the game at a point in time.
"""

from typing import Iterator, List, Optional, Tuple

from .constants import Direction, EngineState


class GameState:
    """
    A snapshot of the game at a specific point in time.

    Attributes:
        tick: number of ticks that moved the snake since the last reset
        grid_size: board dimension N (the board is N x N)
        snake_positions: list of (x, y) from head to tail
        food: (x, y) of the food, or None once the board is full
        heading: direction applied on the next tick
        alive: whether the snake is still alive
        state: engine lifecycle state
        death_reason: 'wall' or 'self' after a death, otherwise None
    """

    def __init__(
        self,
        tick: int,
        grid_size: int,
        snake_positions: List[Tuple[int, int]],
        food: Optional[Tuple[int, int]],
        heading: Direction,
        alive: bool,
        state: EngineState,
        death_reason: Optional[str] = None
    ):
        self.tick = tick
        self.grid_size = grid_size
        self.snake_positions = snake_positions
        self.food = food
        self.heading = heading
        self.alive = alive
        self.state = state
        self.death_reason = death_reason

    @property
    def length(self) -> int:
        return len(self.snake_positions)

    def print_board(self) -> str:
        """
        Returns a string representation of the board with:
        . = empty space
        A = food
        T = snake body
        H = snake head
        Rows run from y=0 at the top downwards, x-axis labels at the bottom.
        """
        # Create empty board
        board = [['.' for _ in range(self.grid_size)] for _ in range(self.grid_size)]

        if self.food is not None:
            fx, fy = self.food
            board[fy][fx] = 'A'

        for pos_idx, (x, y) in enumerate(self.snake_positions):
            board[y][x] = 'H' if pos_idx == 0 else 'T'

        result = []
        for y in range(self.grid_size):
            result.append(f"{y:2d} {' '.join(board[y])}")

        # Only the last digit keeps the columns aligned on wide boards
        result.append("   " + " ".join(str(i % 10) for i in range(self.grid_size)))

        return "\n".join(result)

    def cell_rects(self, cell_pixels: int = 20) -> Iterator[Tuple[str, int, int, int, int]]:
        """
        Yield (kind, left, top, width, height) squares for a painter.

        Snake cells come first with kind "snake", then the food with kind
        "food" so it is drawn on top.
        """
        for x, y in self.snake_positions:
            yield ("snake", x * cell_pixels, y * cell_pixels, cell_pixels, cell_pixels)
        if self.food is not None:
            fx, fy = self.food
            yield ("food", fx * cell_pixels, fy * cell_pixels, cell_pixels, cell_pixels)

    def to_dict(self) -> dict:
        return {
            "tick": self.tick,
            "grid_size": self.grid_size,
            "snake": [list(cell) for cell in self.snake_positions],
            "food": list(self.food) if self.food is not None else None,
            "heading": self.heading.name,
            "alive": self.alive,
            "state": self.state.value,
            "death_reason": self.death_reason,
        }

    def __repr__(self):
        return (
            f"<GameState tick={self.tick}, state={self.state.value}, "
            f"length={self.length}, food={self.food}>"
        )
