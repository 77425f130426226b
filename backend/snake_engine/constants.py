"""
Game constants for the snake engine.
"""

from enum import Enum, IntEnum
from typing import Tuple, Union

from .errors import InvalidDirectionError


class Direction(IntEnum):
    """
    Movement directions.

    The integer values are the 0-3 codes an input collaborator sends
    (arrow keys Left, Up, Right, Down in that order).
    """

    LEFT = 0
    UP = 1
    RIGHT = 2
    DOWN = 3

    @property
    def delta(self) -> Tuple[int, int]:
        return DIRECTION_DELTAS[self]

    @property
    def opposite(self) -> "Direction":
        return Direction((self + 2) % 4)

    @classmethod
    def parse(cls, value: Union["Direction", int, str]) -> "Direction":
        """
        Coerce a Direction, an int code or a direction name into a Direction.

        Raises:
            InvalidDirectionError: if the value does not name one of the four directions
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise InvalidDirectionError(f"Invalid direction: {value!r}")
        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError as exc:
                raise InvalidDirectionError(f"Invalid direction code: {value}") from exc
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError as exc:
                raise InvalidDirectionError(f"Invalid direction name: {value!r}") from exc
        raise InvalidDirectionError(f"Invalid direction: {value!r}")


# Screen coordinates: x grows to the right, y grows downwards
DIRECTION_DELTAS = {
    Direction.LEFT: (-1, 0),
    Direction.UP: (0, -1),
    Direction.RIGHT: (1, 0),
    Direction.DOWN: (0, 1),
}


class EngineState(Enum):
    CONSTRUCTED = "constructed"
    RUNNING = "running"
    STOPPED = "stopped"
    DEAD = "dead"
    WON = "won"


# Death reasons
DEATH_WALL = "wall"
DEATH_SELF = "self"

# Game settings
MIN_GRID_SIZE = 3
DEFAULT_GRID_SIZE = 30
DEFAULT_TICK_INTERVAL_MS = 300
DEFAULT_HEADING = Direction.RIGHT
DEFAULT_INITIAL_LENGTH = 1
