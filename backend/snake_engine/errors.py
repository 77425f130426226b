"""
Exceptions raised by the snake engine.

Both subclass ValueError so callers that already guard argument errors
keep working.
"""


class SnakeEngineError(Exception):
    """Base class for engine errors."""


class InvalidConfigurationError(SnakeEngineError, ValueError):
    """Grid size, tick interval, board seed or setting cannot be used."""


class InvalidDirectionError(SnakeEngineError, ValueError):
    """A direction value outside the four known directions."""
