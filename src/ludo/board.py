"""
Board geometry
-----

Pure functions describing where a piece ends up. No game state is stored here.

**Cell numbering**

* -1: base (piece not yet in play)
* 0 - 51: the shared ring. Every color enters the ring on its own start cell.
* 52 - 75: home stretches. Six cells per color, private to that color. The last one is the terminal ("arrived") cell.

To check whether a piece completed its lap, ring positions are converted to a color-relative frame
(distance walked from the color's own start cell). That makes the rule identical for all four colors.
"""

from typing import Optional

from src.core.shared_types import COLOR_ORDER, Color

TRACK_LENGTH = 52
HOME_STRETCH_LENGTH = 6
BASE_POSITION = -1
DIE_FACES = (1, 2, 3, 4, 5, 6)
ENTRY_ROLL = 6
# Star cells: this many steps past every start cell
STAR_OFFSET = 8

START_CELLS: dict[Color, int] = {
    color: index * (TRACK_LENGTH // len(COLOR_ORDER))
    for index, color in enumerate(COLOR_ORDER)
}

HOME_STRETCHES: dict[Color, tuple[int, ...]] = {
    color: tuple(
        range(
            TRACK_LENGTH + index * HOME_STRETCH_LENGTH,
            TRACK_LENGTH + (index + 1) * HOME_STRETCH_LENGTH,
        )
    )
    for index, color in enumerate(COLOR_ORDER)
}

SAFE_RING_CELLS: frozenset[int] = frozenset(
    cell
    for start in START_CELLS.values()
    for cell in (start, (start + STAR_OFFSET) % TRACK_LENGTH)
)


def start_cell(color: Color) -> int:
    """Ring cell where pieces of this color enter the board."""
    return START_CELLS[color]


def home_stretch_cells(color: Color) -> tuple[int, ...]:
    """The six cells private to this color, ordered. The last one is the terminal cell."""
    return HOME_STRETCHES[color]


def terminal_cell(color: Color) -> int:
    return HOME_STRETCHES[color][-1]


def is_home_stretch_cell(position: int, color: Color) -> bool:
    return position in HOME_STRETCHES[color]


def is_ring_cell(position: int) -> bool:
    return 0 <= position < TRACK_LENGTH


def is_valid_position(position: int, color: Color) -> bool:
    """Base, ring, or this color's own home stretch."""
    return (
        position == BASE_POSITION
        or is_ring_cell(position)
        or is_home_stretch_cell(position, color)
    )


def is_safe_cell(position: int, color: Color) -> bool:
    """Start cells, star cells and the color's own home stretch are safe."""
    return position in SAFE_RING_CELLS or is_home_stretch_cell(position, color)


def relative_ring_position(position: int, color: Color) -> int:
    """Number of steps walked on the ring since entering at the start cell."""
    return (position - START_CELLS[color]) % TRACK_LENGTH


def target_position(color: Color, position: int, die: int) -> Optional[int]:
    """
    Where a piece of 'color' standing on 'position' lands when moving 'die' steps.
    ----

    Returns None when the move is not possible:

    1. From base: only a 6 brings the piece to its start cell.
    2. In the home stretch: advance within the stretch. Overshooting the terminal cell is not allowed (no clamping).
    3. On the ring: once the walked distance reaches a full lap, the remaining steps continue into the home stretch
       (same overshoot rule). Otherwise wrap around the ring.

    NOTE: A piece standing on its own start cell has walked 0 steps, it does not count as a completed lap.
    """
    if die not in DIE_FACES:
        raise ValueError(f"Die value must be one of {DIE_FACES}, got {die!r}.")
    if not is_valid_position(position, color):
        raise ValueError(f"Position {position} is not a valid cell for {color}.")

    # 1: from base
    if position == BASE_POSITION:
        return START_CELLS[color] if die == ENTRY_ROLL else None

    stretch = HOME_STRETCHES[color]

    # 2: inside the home stretch
    if position in stretch:
        target_index = stretch.index(position) + die
        return stretch[target_index] if target_index < len(stretch) else None

    # 3: on the ring
    walked = relative_ring_position(position, color) + die
    if walked >= TRACK_LENGTH:
        stretch_index = walked - TRACK_LENGTH
        return stretch[stretch_index] if stretch_index < len(stretch) else None
    return (position + die) % TRACK_LENGTH
