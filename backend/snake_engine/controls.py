"""
Input translation - turns raw keys into Direction values.

Anything that is not one of the four directions is discarded (None), so
callers can forward the result straight to SnakeEngine.set_direction.
"""

import logging
import re
from typing import Dict, List, Optional, Union

from .constants import Direction

logger = logging.getLogger(__name__)

# Qt arrow key codes are consecutive in Left, Up, Right, Down order
QT_KEY_LEFT = 0x01000012
QT_KEY_DOWN = 0x01000015

KEY_NAMES: Dict[str, Direction] = {
    # Arrow key names
    "left": Direction.LEFT,
    "up": Direction.UP,
    "right": Direction.RIGHT,
    "down": Direction.DOWN,
    # Scripted move letters
    "l": Direction.LEFT,
    "u": Direction.UP,
    "r": Direction.RIGHT,
    "d": Direction.DOWN,
}


def direction_from_key(key: Union[int, str, None]) -> Optional[Direction]:
    """
    Map a key code or key name to a Direction.

    Integer keys are Qt key codes (Key_Left..Key_Down). Strings are matched
    case-insensitively against KEY_NAMES. Returns None for anything else.
    """
    if isinstance(key, bool) or key is None:
        return None
    if isinstance(key, int):
        if QT_KEY_LEFT <= key <= QT_KEY_DOWN:
            return Direction(key - QT_KEY_LEFT)
        return None
    if isinstance(key, str):
        return KEY_NAMES.get(key.strip().lower())
    return None


def parse_moves(text: str) -> List[Direction]:
    """
    Parse a scripted move string into directions.

    Accepts compact letters ("RRDDL") or separated names
    ("right, right down"). Unknown tokens are skipped with a warning.
    """
    if not text:
        return []

    if re.search(r"[\s,;]", text.strip()):
        tokens = [token for token in re.split(r"[\s,;]+", text.strip()) if token]
    elif text.strip().lower() in KEY_NAMES:
        tokens = [text.strip()]
    else:
        tokens = list(text.strip())

    moves: List[Direction] = []
    for token in tokens:
        direction = direction_from_key(token)
        if direction is None:
            logger.warning("Ignoring unknown move %r", token)
            continue
        moves.append(direction)
    return moves
