import argparse
import json
import logging
import threading
from collections import deque
from typing import Any, Callable, Dict, List, Optional

from snake_engine.constants import EngineState
from snake_engine.controls import parse_moves
from snake_engine.engine import SnakeEngine
from snake_engine.errors import InvalidConfigurationError
from snake_engine.settings import LOG_FORMAT, load_settings
from snake_engine.ticker import ManualTicker

logger = logging.getLogger(__name__)

TERMINAL_STATES = (EngineState.DEAD, EngineState.WON)


# -------------------------------
# Session Function
# -------------------------------

def run_session(
    game_params: argparse.Namespace,
    printer: Callable[[str], None] = print
) -> Dict[str, Any]:
    """
    Runs a single headless game driven by a scripted key sequence.

    Args:
        game_params: An object (like argparse.Namespace) containing game settings
                     (grid_size, tick_ms, moves, max_ticks, initial_length, seed,
                     no_delay, quiet).
        printer: Where frames are written.

    Returns:
        A dictionary summarizing the game (state, length, ticks, death_reason, snake, food).
    """
    quiet = getattr(game_params, 'quiet', False)
    max_ticks: Optional[int] = getattr(game_params, 'max_ticks', None)
    no_delay = getattr(game_params, 'no_delay', False)

    # With no_delay the game loop below fires the ticks itself instead of a timer thread
    manual_tickers: List[ManualTicker] = []

    def manual_ticker_factory(interval_ms, callback):
        ticker = ManualTicker(interval_ms, callback)
        manual_tickers.append(ticker)
        return ticker

    engine = SnakeEngine(
        grid_size=game_params.grid_size,
        tick_interval_ms=game_params.tick_ms,
        initial_length=getattr(game_params, 'initial_length', 1),
        seed=getattr(game_params, 'seed', None),
        ticker_factory=manual_ticker_factory if no_delay else None
    )

    pending_moves = deque(parse_moves(getattr(game_params, 'moves', '') or ''))
    finished = threading.Event()

    def show(state) -> None:
        if quiet:
            return
        printer(
            f"\nTick {state.tick} | length {state.length} | {state.state.value}\n"
            f"{state.print_board()}"
        )

    def feed_next_move() -> None:
        if pending_moves:
            engine.set_direction(pending_moves.popleft())

    def on_state_changed() -> None:
        state = engine.get_current_state()
        show(state)
        if state.state in TERMINAL_STATES or (max_ticks is not None and state.tick >= max_ticks):
            finished.set()
            return
        feed_next_move()

    engine.add_listener(on_state_changed)
    engine.start_game()
    show(engine.get_current_state())
    feed_next_move()

    try:
        if max_ticks is not None and max_ticks <= 0:
            finished.set()
        if no_delay:
            while not finished.is_set() and manual_tickers[-1].fire():
                pass
        else:
            finished.wait()
    finally:
        engine.end_game()
        engine.remove_listener(on_state_changed)

    final_state = engine.get_current_state()
    return {
        "state": final_state.state.value,
        "length": final_state.length,
        "ticks": final_state.tick,
        "death_reason": final_state.death_reason,
        "snake": [list(cell) for cell in final_state.snake_positions],
        "food": list(final_state.food) if final_state.food is not None else None
    }


# -------------------------------
# Main Entry Point
# -------------------------------
def main(argv: Optional[List[str]] = None):
    settings = load_settings()

    parser = argparse.ArgumentParser(
        description="Run a headless snake game from a scripted key sequence."
    )
    parser.add_argument("--grid-size", dest="grid_size", type=int, default=settings.grid_size,
                        help="Board size N (the board is N x N)")
    parser.add_argument("--tick-ms", dest="tick_ms", type=int, default=settings.tick_interval_ms,
                        help="Milliseconds between ticks")
    parser.add_argument("--moves", type=str, default="",
                        help="Keys to press, one per tick (e.g. 'RRDDL' or 'right,down,left')")
    parser.add_argument("--max-ticks", dest="max_ticks", type=int, default=None,
                        help="Stop after this many ticks")
    parser.add_argument("--initial-length", dest="initial_length", type=int, default=1,
                        help="Length of the snake at start")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed for food placement")
    parser.add_argument("--no-delay", dest="no_delay", action="store_true",
                        help="Tick as fast as possible instead of on a timer")
    parser.add_argument("--quiet", action="store_true",
                        help="Only print the final summary")

    args = parser.parse_args(argv)

    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)

    try:
        result = run_session(args)
    except InvalidConfigurationError as exc:
        parser.error(str(exc))
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130

    print("\nSession Summary:")
    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
