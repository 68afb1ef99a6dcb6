"""Pytest fixtures for opponent AI testing."""
import random
from typing import List, Optional

import matplotlib

matplotlib.use("Agg")

import pytest

from opponent_ai.engine import TicTacToeState, UnoCard


def parse_board(text: str) -> List[Optional[str]]:
    """Turn "XO_ _X_ O__" style text into nine cells; '_' is empty, spaces ignored."""
    cells = [c for c in text if not c.isspace()]
    if len(cells) != 9:
        raise ValueError(f"Board text must hold 9 cells: {text!r}")
    return [None if c == "_" else c for c in cells]


@pytest.fixture
def rng() -> random.Random:
    """A seeded generator so random choices are reproducible."""
    return random.Random(1234)


@pytest.fixture
def board():
    """Factory fixture building tic-tac-toe snapshots from text.

    Usage:
        state = board("XX_ OO_ ___")            # AI plays O
        state = board("XX_ OO_ ___", ai="X")
    """
    def _board(text: str, ai: str = "O") -> TicTacToeState:
        return TicTacToeState(tuple(parse_board(text)), ai)
    return _board


@pytest.fixture
def card():
    """Factory fixture for cards with unique ids.

    Usage:
        card("red", "3")
        card("blue", "skip")
        card("wild", "+4")
    """
    counter = {"n": 0}

    def _card(color: str, value: str) -> UnoCard:
        counter["n"] += 1
        if color == "wild":
            kind = "wild"
        elif value.isdigit():
            kind = "number"
        else:
            kind = "action"
        return UnoCard(f"{color}-{value}-{counter['n']}", color, value, kind)
    return _card
