"""Game state snapshots and rules for the games the opponent AI plays."""

import time
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import (
    TYPE_CHECKING,
    AbstractSet,
    FrozenSet,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
)

from .utils import _DELTAS, Position, in_bounds, step

if TYPE_CHECKING:
    from .difficulty import DifficultyLike

# -----------------------------------------------------------------------------
# Tic-tac-toe
# -----------------------------------------------------------------------------

Cell = Optional[str]
Board = Tuple[Cell, ...]

SYMBOLS: Tuple[str, str] = ("X", "O")
CENTER = 4
CORNERS: Tuple[int, ...] = (0, 2, 6, 8)

WINNING_LINES: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2), (3, 4, 5), (6, 7, 8),  # rows
    (0, 3, 6), (1, 4, 7), (2, 5, 8),  # columns
    (0, 4, 8), (2, 4, 6),  # diagonals
)


def other_symbol(symbol: str) -> str:
    """Return the symbol of the other player."""
    if symbol == "X":
        return "O"
    if symbol == "O":
        return "X"
    raise ValueError(f"Unknown symbol: {symbol!r}")


def check_winner(board: Sequence[Cell]) -> Optional[str]:
    """
    Evaluate a 3x3 board for a terminal result.

    Args:
        board: Nine cells, each None, "X" or "O".

    Returns:
        "X" or "O" for three in a row, "draw" for a full board without a
        line, or None if the game is still running.
    """
    for a, b, c in WINNING_LINES:
        if board[a] is not None and board[a] == board[b] == board[c]:
            return board[a]
    if all(cell is not None for cell in board):
        return "draw"
    return None


def empty_cells(board: Sequence[Cell]) -> List[int]:
    """Indices of empty cells in ascending order."""
    return [i for i, cell in enumerate(board) if cell is None]


@dataclass(frozen=True)
class TicTacToeState:
    """
    Snapshot of a tic-tac-toe position with the AI to move.

    Attributes:
        board: Nine cells in row-major order (None, "X" or "O").
        ai_symbol: Symbol the AI plays; the opponent plays the other one.
    """

    board: Board
    ai_symbol: str = "O"

    def __post_init__(self) -> None:
        board = tuple(self.board)
        if len(board) != 9:
            raise ValueError(f"Board must have 9 cells, got {len(board)}.")
        for cell in board:
            if cell is not None and cell not in SYMBOLS:
                raise ValueError(f"Invalid cell value: {cell!r}")
        if self.ai_symbol not in SYMBOLS:
            raise ValueError('ai_symbol must be "X" or "O".')
        object.__setattr__(self, "board", board)

    @property
    def opponent_symbol(self) -> str:
        return other_symbol(self.ai_symbol)

    def empty_cells(self) -> List[int]:
        return empty_cells(self.board)

    def with_move(self, index: int, symbol: str) -> "TicTacToeState":
        """Return a new snapshot with ``symbol`` placed at ``index``."""
        if self.board[index] is not None:
            raise ValueError(f"Cell {index} is already taken.")
        cells = list(self.board)
        cells[index] = symbol
        return TicTacToeState(tuple(cells), self.ai_symbol)


def format_board(board: Sequence[Cell]) -> str:
    """
    Render a board for the terminal.

    Empty cells show their index so a player can type it.
    """
    rows = []
    for r in range(3):
        cells = [
            board[3 * r + c] if board[3 * r + c] is not None else str(3 * r + c)
            for c in range(3)
        ]
        rows.append(" " + " | ".join(cells))
    return "\n---+---+---\n".join(rows)


# -----------------------------------------------------------------------------
# Competitive snake
# -----------------------------------------------------------------------------


class Direction(Enum):
    """Heading of a snake. UP decreases y."""

    UP = "UP"
    DOWN = "DOWN"
    LEFT = "LEFT"
    RIGHT = "RIGHT"

    @property
    def delta(self) -> Position:
        """Step as ``(dx, dy)``."""
        return _DELTAS[self.value]

    @property
    def opposite(self) -> "Direction":
        return _OPPOSITES[self]


_OPPOSITES = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}

# Enumeration order; ties between equally scored directions go to the first.
DIRECTIONS: Tuple[Direction, ...] = (
    Direction.UP,
    Direction.DOWN,
    Direction.LEFT,
    Direction.RIGHT,
)


def next_head(head: Position, direction: Direction) -> Position:
    """Cell the head reaches after one step."""
    return step(head, direction.value)


def is_valid_move(
    head: Position,
    direction: Direction,
    obstacles: AbstractSet[Position],
    grid_size: int,
) -> bool:
    """
    Check whether stepping from ``head`` stays on the grid and off every obstacle.

    Args:
        head: Current head cell.
        direction: Direction to step in.
        obstacles: Occupied cells, as a set.
        grid_size: Side length of the square grid.
    """
    new_head = next_head(head, direction)
    if not in_bounds(new_head, grid_size):
        return False
    return new_head not in obstacles


@dataclass(frozen=True)
class SnakeState:
    """
    Snapshot of a competitive snake arena from the AI's point of view.

    Attributes:
        ai_snake: AI snake cells, head first.
        player_snake: Opponent snake cells, head first (may be empty).
        food: The goal cell both snakes race for.
        grid_size: Side length of the square grid.
    """

    ai_snake: Tuple[Position, ...]
    player_snake: Tuple[Position, ...]
    food: Position
    grid_size: int

    def __post_init__(self) -> None:
        ai_snake = tuple(tuple(c) for c in self.ai_snake)
        player_snake = tuple(tuple(c) for c in self.player_snake)
        if not ai_snake:
            raise ValueError("ai_snake must contain at least its head.")
        if self.grid_size <= 0:
            raise ValueError("grid_size must be positive.")
        object.__setattr__(self, "ai_snake", ai_snake)
        object.__setattr__(self, "player_snake", player_snake)
        object.__setattr__(self, "food", tuple(self.food))

    @property
    def ai_head(self) -> Position:
        return self.ai_snake[0]

    @property
    def player_head(self) -> Optional[Position]:
        return self.player_snake[0] if self.player_snake else None

    def obstacles(self) -> FrozenSet[Position]:
        """Cells a new AI head must not enter: both snakes minus the AI head."""
        return frozenset(self.ai_snake[1:]) | frozenset(self.player_snake)


# -----------------------------------------------------------------------------
# UNO-style card game
# -----------------------------------------------------------------------------

# Precedence order for wild color ties.
COLORS: Tuple[str, ...] = ("red", "blue", "green", "yellow")
WILD = "wild"

NUMBER = "number"
ACTION = "action"
CARD_KINDS: Tuple[str, ...] = (NUMBER, ACTION, WILD)

ACTION_VALUES: Tuple[str, ...] = ("skip", "reverse", "+2")
WILD_VALUES: Tuple[str, ...] = ("wild", "+4")


@dataclass(frozen=True)
class UnoCard:
    """A single card; ``id`` tells apart otherwise identical copies."""

    id: str
    color: str
    value: str
    kind: str

    def __post_init__(self) -> None:
        if self.color not in COLORS and self.color != WILD:
            raise ValueError(f"Invalid card color: {self.color!r}")
        if self.kind not in CARD_KINDS:
            raise ValueError(f"Invalid card kind: {self.kind!r}")
        if (self.color == WILD) != (self.kind == WILD):
            raise ValueError("Wild cards must have both wild color and wild kind.")

    def __str__(self) -> str:
        return f"{self.color} {self.value}"


def can_play_card(card: UnoCard, discard_top: UnoCard, current_color: str) -> bool:
    """A card is playable if it is wild, matches the active color, or matches the top value."""
    if card.color == WILD:
        return True
    if card.color == current_color:
        return True
    return card.value == discard_top.value


def build_deck() -> List[UnoCard]:
    """
    Build the standard 108-card deck in a fixed order.

    Per color: one 0, two each of 1-9, skip, reverse and +2. Plus four wild
    and four wild +4 cards.
    """
    deck: List[UnoCard] = []
    for color in COLORS:
        deck.append(UnoCard(f"{color}-0-0", color, "0", NUMBER))
        for copy_no in range(2):
            for n in range(1, 10):
                deck.append(UnoCard(f"{color}-{n}-{copy_no}", color, str(n), NUMBER))
            for value in ACTION_VALUES:
                deck.append(UnoCard(f"{color}-{value}-{copy_no}", color, value, ACTION))
    for copy_no in range(4):
        for value in WILD_VALUES:
            deck.append(UnoCard(f"wild-{value}-{copy_no}", WILD, value, WILD))
    return deck


@dataclass(frozen=True)
class UnoState:
    """
    What the AI sees on its turn.

    The opponent's hand is only visible as a count.
    """

    hand: Tuple[UnoCard, ...]
    discard_top: UnoCard
    current_color: str
    opponent_card_count: int
    draw_pile_count: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "hand", tuple(self.hand))
        if self.current_color not in COLORS:
            raise ValueError(f"Invalid active color: {self.current_color!r}")
        if self.opponent_card_count < 0 or self.draw_pile_count < 0:
            raise ValueError("Card counts must be non-negative.")

    def playable_cards(self) -> List[UnoCard]:
        """Legal cards in hand order."""
        return [
            card
            for card in self.hand
            if can_play_card(card, self.discard_top, self.current_color)
        ]


# -----------------------------------------------------------------------------
# Snakes & ladders
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class LaddersState:
    """Positions on a snakes & ladders board; maps go start square -> end square."""

    ai_position: int
    player_position: int
    snakes: Mapping[int, int] = field(default_factory=dict)
    ladders: Mapping[int, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "snakes", MappingProxyType(dict(self.snakes)))
        object.__setattr__(self, "ladders", MappingProxyType(dict(self.ladders)))


# -----------------------------------------------------------------------------
# Terminal play
# -----------------------------------------------------------------------------


def play_cli(
    difficulty: "DifficultyLike" = "medium",
    *,
    ai_symbol: str = "O",
    human_first: bool = True,
    use_delay: bool = True,
) -> None:
    """
    Run a simple terminal game of tic-tac-toe against the AI.

    Args:
        difficulty: Opponent difficulty.
        ai_symbol: Symbol played by the AI.
        human_first: If True, the human opens the game.
        use_delay: If True, wait the sampled thinking delay after the AI has
            chosen its move and before showing it.
    """
    from .difficulty import AIConfig
    from .solver import choose_tictactoe_move

    config = AIConfig.create(difficulty)
    name = config.personality.name if config.personality else "AI"
    human = other_symbol(ai_symbol)
    state = TicTacToeState((None,) * 9, ai_symbol)
    human_turn = human_first

    if config.personality is not None:
        print(f"{name} ({config.difficulty.value}): {config.personality.tagline}")
    print("Enter a cell number 0-8. Type 'q' to quit.\n")
    print(format_board(state.board))

    while check_winner(state.board) is None:
        if human_turn:
            s = input("\nYour move: ").strip()
            if s.lower() in {"q", "quit", "exit"}:
                print("Quit.")
                return
            try:
                index = int(s)
            except ValueError:
                print("Invalid input. Cell must be an integer 0-8.")
                continue
            if index not in state.empty_cells():
                print("That cell is not available.")
                continue
            state = state.with_move(index, human)
        else:
            index = choose_tictactoe_move(state, config.difficulty)
            if use_delay:
                time.sleep(config.next_delay() / 1000.0)
            print(f"\n{name} plays {index}.")
            state = state.with_move(index, ai_symbol)

        print()
        print(format_board(state.board))
        human_turn = not human_turn

    result = check_winner(state.board)
    if result == "draw":
        print("\nDraw.")
    elif result == human:
        print("\nYou won!")
    else:
        print(f"\n{name} won.")
