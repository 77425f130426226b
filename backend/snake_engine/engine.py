"""
SnakeEngine - owns and evolves the grid game state.

The engine is advanced by a tick source (PeriodicTicker by default). Input
arrives through set_direction, renderers read get_snake / get_item after
each state-changed notification.
"""

import logging
import random
import threading
from typing import Any, Callable, List, Optional, Sequence, Tuple, Union

from .constants import (
    DEATH_SELF,
    DEATH_WALL,
    DEFAULT_GRID_SIZE,
    DEFAULT_HEADING,
    DEFAULT_INITIAL_LENGTH,
    DEFAULT_TICK_INTERVAL_MS,
    MIN_GRID_SIZE,
    Direction,
    EngineState,
)
from .errors import InvalidConfigurationError, InvalidDirectionError
from .game_state import GameState
from .snake import Cell, Snake
from .ticker import PeriodicTicker

logger = logging.getLogger(__name__)

Listener = Callable[[], None]
TickerFactory = Callable[[int, Callable[[], None]], Any]


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class SnakeEngine:
    """
    Single-snake game engine driven by discrete ticks.

    Manages:
      - the snake (ordered cells, head first) and its heading
      - the single food cell
      - the start/stop lifecycle and the tick source
      - state-changed listeners

    All reads and mutations go through one re-entrant lock, so the periodic
    ticker thread and input callers never interleave inside a tick.
    Listeners are called after the lock is released.
    """

    def __init__(
        self,
        grid_size: int = DEFAULT_GRID_SIZE,
        tick_interval_ms: int = DEFAULT_TICK_INTERVAL_MS,
        initial_length: int = DEFAULT_INITIAL_LENGTH,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
        ticker_factory: Optional[TickerFactory] = None
    ):
        if not _is_int(grid_size) or grid_size < MIN_GRID_SIZE:
            raise InvalidConfigurationError(
                f"Grid size must be an integer >= {MIN_GRID_SIZE}, got {grid_size!r}"
            )
        if not _is_int(tick_interval_ms) or tick_interval_ms <= 0:
            raise InvalidConfigurationError(
                f"Tick interval must be a positive integer of milliseconds, got {tick_interval_ms!r}"
            )
        max_length = grid_size // 2 + 1
        if not _is_int(initial_length) or not 1 <= initial_length <= max_length:
            raise InvalidConfigurationError(
                f"Initial length must be between 1 and {max_length} on a {grid_size}x{grid_size} grid, "
                f"got {initial_length!r}"
            )

        self._grid_size = grid_size
        self._tick_interval_ms = tick_interval_ms
        self._initial_length = initial_length
        self._rng = rng if rng is not None else random.Random(seed)
        self._ticker_factory: TickerFactory = ticker_factory or PeriodicTicker

        self._lock = threading.RLock()
        self._listeners: List[Listener] = []
        self._ticker = None
        # Bumped whenever a tick source is replaced or cancelled
        self._generation = 0
        self._running = False

        self._reset()
        self._state = EngineState.CONSTRUCTED

    # ------------------------------------------------------------------
    # Read-only surface
    # ------------------------------------------------------------------

    @property
    def grid_size(self) -> int:
        return self._grid_size

    @property
    def tick_interval_ms(self) -> int:
        return self._tick_interval_ms

    @property
    def heading(self) -> Direction:
        return self._heading

    @property
    def alive(self) -> bool:
        return self._snake.alive

    @property
    def running(self) -> bool:
        return self._running

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def death_reason(self) -> Optional[str]:
        return self._snake.death_reason

    @property
    def tick_count(self) -> int:
        return self._tick_count

    def get_snake(self) -> List[Cell]:
        """Return the snake cells, head first, as a new list."""
        with self._lock:
            return list(self._snake.positions)

    def get_item(self) -> Optional[Cell]:
        """Return the food cell, or None once the board is full."""
        with self._lock:
            return self._food

    def get_current_state(self) -> GameState:
        """
        Return a snapshot of the current board as a GameState.
        """
        with self._lock:
            return GameState(
                tick=self._tick_count,
                grid_size=self._grid_size,
                snake_positions=list(self._snake.positions),
                food=self._food,
                heading=self._heading,
                alive=self._snake.alive,
                state=self._state,
                death_reason=self._snake.death_reason
            )

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def add_listener(self, listener: Listener) -> None:
        """Register a callable invoked with no arguments after every state change."""
        with self._lock:
            if listener not in self._listeners:
                self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def _notify(self) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener()
            except Exception:
                # A broken renderer must not stop the game
                logger.exception("State listener %r failed", listener)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start_game(self) -> None:
        """
        Reset to a fresh board and start ticking.

        Calling this while a game is running stops the old tick source first.
        """
        with self._lock:
            old_ticker, self._ticker = self._ticker, None
            self._generation += 1
            self._running = False

        # Outside the lock: stopping joins the ticker thread, which may be
        # waiting for the lock inside a tick
        if old_ticker is not None:
            old_ticker.stop()

        with self._lock:
            self._generation += 1
            generation = self._generation
            self._reset()
            self._ticker = self._ticker_factory(
                self._tick_interval_ms,
                lambda: self._advance(generation)
            )
            self._running = True
            self._state = EngineState.RUNNING
            self._ticker.start()

        logger.info(
            "Game started on a %dx%d grid (tick=%dms, food at %s)",
            self._grid_size, self._grid_size, self._tick_interval_ms, self._food
        )

    def end_game(self) -> None:
        """
        Stop ticking. The last board stays queryable. No-op when not running.
        """
        with self._lock:
            if not self._running:
                return
            ticker = self._halt(EngineState.STOPPED)

        if ticker is not None:
            ticker.stop()
        logger.info("Game stopped after %d ticks (length %d)", self._tick_count, len(self._snake))

    def _halt(self, state: EngineState):
        """Leave the running state; returns the ticker the caller must stop."""
        ticker, self._ticker = self._ticker, None
        self._generation += 1
        self._running = False
        self._state = state
        return ticker

    def _reset(self) -> None:
        center = self._grid_size // 2
        cells = [(center - i, center) for i in range(self._initial_length)]
        self._snake = Snake(cells)
        self._heading = DEFAULT_HEADING
        self._last_move = DEFAULT_HEADING
        self._tick_count = 0
        self._food = self._place_food()

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def set_direction(self, direction: Union[Direction, int, str]) -> None:
        """
        Request a new heading for the next tick.

        Invalid values are logged and ignored. Reversals (the opposite of
        the current heading, or of the last move for snakes longer than one
        cell) are ignored silently.
        """
        try:
            requested = Direction.parse(direction)
        except InvalidDirectionError as exc:
            logger.warning("Ignoring direction request: %s", exc)
            return

        with self._lock:
            if requested == self._heading.opposite:
                logger.debug("Ignoring reversal %s while heading %s", requested.name, self._heading.name)
                return
            if len(self._snake) > 1 and requested == self._last_move.opposite:
                logger.debug("Ignoring reversal %s after moving %s", requested.name, self._last_move.name)
                return
            self._heading = requested

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------

    def tick(self) -> None:
        """
        Advance the game by one step. Only effective while running and alive.
        """
        self._advance(None)

    def _advance(self, generation: Optional[int]) -> None:
        ticker = None
        with self._lock:
            if generation is not None and generation != self._generation:
                # Callback from a tick source that has since been replaced
                return
            if not self._running or not self._snake.alive:
                return

            dx, dy = self._heading.delta
            hx, hy = self._snake.head
            next_head = (hx + dx, hy + dy)

            eating = self._is_eatable(next_head)
            reason = self._check_death(next_head, eating)
            if reason is not None:
                self._snake.alive = False
                self._snake.death_reason = reason
                self._snake.death_tick = self._tick_count
                ticker = self._halt(EngineState.DEAD)
                logger.info(
                    "Snake died at tick %d (%s) with length %d",
                    self._tick_count, reason, len(self._snake)
                )
            else:
                self._snake.advance(next_head, grow=eating)
                self._last_move = self._heading
                self._tick_count += 1
                if eating:
                    self._food = self._place_food()
                    if self._food is None:
                        self._snake.alive = False
                        ticker = self._halt(EngineState.WON)
                        logger.info(
                            "Board filled at tick %d with length %d",
                            self._tick_count, len(self._snake)
                        )
                    else:
                        logger.debug("Ate food at %s, length %d, new food at %s",
                                     next_head, len(self._snake), self._food)

        if ticker is not None:
            ticker.stop()
        self._notify()

    def _is_eatable(self, cell: Tuple[int, int]) -> bool:
        return self._food is not None and cell == self._food

    def _check_death(self, cell: Tuple[int, int], eating: bool) -> Optional[str]:
        """
        Return the death reason if moving the head onto cell kills the snake.

        The tail cell is vacated in the same tick unless the snake grows, so
        it only counts as a collision when eating.
        """
        x, y = cell
        if x < 0 or x >= self._grid_size or y < 0 or y >= self._grid_size:
            return DEATH_WALL
        if cell in self._snake:
            if not eating and cell == self._snake.tail:
                return None
            return DEATH_SELF
        return None

    def _place_food(self, snake: Optional[Snake] = None) -> Optional[Cell]:
        """
        Return a cell chosen uniformly among those not covered by the snake,
        or None if the snake fills the grid.
        """
        if snake is None:
            snake = self._snake
        free = [
            (x, y)
            for y in range(self._grid_size)
            for x in range(self._grid_size)
            if (x, y) not in snake
        ]
        if not free:
            return None
        return self._rng.choice(free)

    # ------------------------------------------------------------------
    # Board seeding
    # ------------------------------------------------------------------

    def set_board(
        self,
        snake_positions: Sequence[Tuple[int, int]],
        heading: Union[Direction, int, str] = DEFAULT_HEADING,
        food: Optional[Tuple[int, int]] = None
    ) -> None:
        """
        Replace the board of the current game with the given snake and food.

        If food is None it is placed at random. The running state is kept;
        a finished game becomes STOPPED so start_game() can take over.

        Raises:
            InvalidConfigurationError: out-of-bounds or overlapping cells, an
                unknown heading, or no room left for food
        """
        cells = []
        for cell in snake_positions:
            cells.append(self._validated_cell(cell, "Snake cell"))
        try:
            snake = Snake(cells)
            parsed_heading = Direction.parse(heading)
        except ValueError as exc:
            raise InvalidConfigurationError(str(exc)) from exc

        if food is not None:
            food = self._validated_cell(food, "Food")
            if food in snake:
                raise InvalidConfigurationError(f"Food at {food} overlaps the snake.")

        with self._lock:
            if food is None:
                food = self._place_food(snake)
                if food is None:
                    raise InvalidConfigurationError("The snake leaves no free cell for food.")
            self._snake = snake
            self._heading = parsed_heading
            self._last_move = parsed_heading
            self._tick_count = 0
            self._food = food
            if self._state in (EngineState.DEAD, EngineState.WON):
                self._state = EngineState.STOPPED
        logger.debug("Board set: snake=%s heading=%s food=%s", cells, parsed_heading.name, self._food)

    def _validated_cell(self, cell, label: str) -> Cell:
        try:
            x, y = cell
        except (TypeError, ValueError) as exc:
            raise InvalidConfigurationError(f"{label} must be an (x, y) pair, got {cell!r}") from exc
        if not (_is_int(x) and _is_int(y)):
            raise InvalidConfigurationError(f"{label} must have integer coordinates, got {cell!r}")
        if not (0 <= x < self._grid_size and 0 <= y < self._grid_size):
            raise InvalidConfigurationError(f"{label} out of bounds at {(x, y)}.")
        return (x, y)

    def __repr__(self):
        return (
            f"<SnakeEngine grid={self._grid_size} state={self._state.value} "
            f"length={len(self._snake)} tick={self._tick_count}>"
        )
