"""Utility functions shared by the opponent AI solvers."""

import random
from typing import Dict, Optional, Sequence, Tuple, TypeVar

T = TypeVar("T")

Position = Tuple[int, int]

# Direction name -> (dx, dy); y grows downwards.
_DELTAS: Dict[str, Tuple[int, int]] = {
    "UP": (0, -1),
    "DOWN": (0, 1),
    "LEFT": (-1, 0),
    "RIGHT": (1, 0),
}


def resolve_rng(rng: Optional[random.Random] = None) -> random.Random:
    """
    Return the generator a solver should draw from.

    Args:
        rng: Caller-supplied generator. Pass a seeded ``random.Random`` to make
            every random decision reproducible.

    Returns:
        ``rng`` itself, or a freshly seeded generator when it is None.
    """
    if rng is None:
        return random.Random()
    return rng


def roll(rng: random.Random, probability: float) -> bool:
    """Return True with the given probability."""
    return rng.random() < probability


def pick(rng: random.Random, items: Sequence[T]) -> T:
    """Pick one element uniformly at random."""
    if not items:
        raise ValueError("Cannot pick from an empty sequence.")
    return items[rng.randrange(len(items))]


def manhattan_distance(a: Position, b: Position) -> int:
    """Sum of absolute coordinate differences between two cells."""
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def step(cell: Position, direction_name: str) -> Position:
    """
    Move one cell in a named direction.

    Args:
        cell: Starting (x, y) cell.
        direction_name: One of "UP", "DOWN", "LEFT", "RIGHT".

    Returns:
        The neighbouring (x, y) cell.

    Raises:
        ValueError: If the direction name is unknown.
    """
    try:
        dx, dy = _DELTAS[direction_name]
    except KeyError:
        raise ValueError(f"Unknown direction: {direction_name!r}") from None
    return cell[0] + dx, cell[1] + dy


def in_bounds(cell: Position, grid_size: int) -> bool:
    """Check that a cell lies on a square grid of the given size."""
    x, y = cell
    return 0 <= x < grid_size and 0 <= y < grid_size
