"""
Snake game engine.

This package contains the grid simulation (SnakeEngine), its entities and
the tick sources that drive it. Rendering and keyboard handling stay with
the caller; controls and GameState offer toolkit-free helpers for both.
"""

from .constants import (
    Direction, EngineState, DIRECTION_DELTAS,
    DEFAULT_GRID_SIZE, DEFAULT_TICK_INTERVAL_MS, MIN_GRID_SIZE,
)
from .errors import SnakeEngineError, InvalidConfigurationError, InvalidDirectionError
from .snake import Snake
from .game_state import GameState
from .ticker import PeriodicTicker, ManualTicker
from .engine import SnakeEngine

__all__ = [
    'Direction', 'EngineState', 'DIRECTION_DELTAS',
    'DEFAULT_GRID_SIZE', 'DEFAULT_TICK_INTERVAL_MS', 'MIN_GRID_SIZE',
    'SnakeEngineError', 'InvalidConfigurationError', 'InvalidDirectionError',
    'Snake',
    'GameState',
    'PeriodicTicker', 'ManualTicker',
    'SnakeEngine',
]
