"""Move selection for computer opponents across all supported games."""

import math
import random
from collections import Counter
from dataclasses import dataclass
from functools import singledispatch
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .difficulty import Difficulty, DifficultyLike
from .engine import (
    ACTION,
    CENTER,
    COLORS,
    CORNERS,
    DIRECTIONS,
    WILD,
    Cell,
    Direction,
    LaddersState,
    SnakeState,
    TicTacToeState,
    UnoCard,
    UnoState,
    check_winner,
    empty_cells,
    is_valid_move,
    next_head,
)
from .exceptions import IllegalStateError
from .utils import manhattan_distance, pick, resolve_rng, roll

# Probability that Easy plays a random move before falling back to Medium.
EASY_RANDOM_MOVE_RATE = 0.7
EASY_RANDOM_DIRECTION_RATE = 0.6
# Probability that Hard throws away its searched move.
HARD_MISTAKE_RATE = 0.1

WIN_SCORE = 10

# Navigation scoring.
GOAL_SCORE_BASE = 100
MOBILITY_BONUS = 10
RACE_BONUS = 20

# Card scoring.
CARD_SCORES: Dict[str, int] = {
    "action": 20,
    "skip_reverse": 10,
    "draw_two": 15,
    "wild": 30,
    "wild_draw_four": 20,
    "urgent_action": 30,
    "urgent_forced_draw": 40,
}
URGENT_CARD_COUNT = 2
EASY_SCORE_RANGE = 50.0
MEDIUM_SCORE_JITTER = 20.0
MEDIUM_TOP_N = 3


# -----------------------------------------------------------------------------
# Tic-tac-toe
# -----------------------------------------------------------------------------


def _minimax(
    board: List[Cell],
    depth: int,
    maximizing: bool,
    alpha: float,
    beta: float,
    ai: str,
    opponent: str,
) -> float:
    """
    Score a position by exhaustive alpha-beta search.

    ``board`` is a scratch list owned by the caller. Each cell placed here is
    cleared again before the loop moves on or breaks, so the list is
    unchanged on return.
    """
    result = check_winner(board)
    if result == ai:
        return WIN_SCORE - depth
    if result == opponent:
        return depth - WIN_SCORE
    if result == "draw":
        return 0

    if maximizing:
        best = -math.inf
        for i in range(9):
            if board[i] is not None:
                continue
            board[i] = ai
            score = _minimax(board, depth + 1, False, alpha, beta, ai, opponent)
            board[i] = None
            best = max(best, score)
            alpha = max(alpha, score)
            if beta <= alpha:
                break
        return best

    best = math.inf
    for i in range(9):
        if board[i] is not None:
            continue
        board[i] = opponent
        score = _minimax(board, depth + 1, True, alpha, beta, ai, opponent)
        board[i] = None
        best = min(best, score)
        beta = min(beta, score)
        if beta <= alpha:
            break
    return best


def score_tictactoe_moves(state: TicTacToeState) -> List[Tuple[int, float]]:
    """
    Minimax score of every empty cell, in index order.

    Returns:
        (cell, score) pairs; higher is better for the AI.
    """
    ai, opponent = state.ai_symbol, state.opponent_symbol
    scratch = list(state.board)
    scores: List[Tuple[int, float]] = []
    for idx in empty_cells(scratch):
        scratch[idx] = ai
        scores.append(
            (idx, _minimax(scratch, 0, False, -math.inf, math.inf, ai, opponent))
        )
        scratch[idx] = None
    return scores


def best_tictactoe_move(state: TicTacToeState) -> int:
    """Highest-scoring cell; the lowest index wins ties."""
    best_move = -1
    best_score = -math.inf
    for idx, score in score_tictactoe_moves(state):
        if score > best_score:
            best_score = score
            best_move = idx
    return best_move


def _completing_move(board: Sequence[Cell], symbol: str) -> Optional[int]:
    """First empty cell that gives ``symbol`` three in a row."""
    scratch = list(board)
    for idx in empty_cells(scratch):
        scratch[idx] = symbol
        won = check_winner(scratch) == symbol
        scratch[idx] = None
        if won:
            return idx
    return None


def _medium_tictactoe_move(state: TicTacToeState, rng: random.Random) -> int:
    board = state.board
    win = _completing_move(board, state.ai_symbol)
    if win is not None:
        return win
    block = _completing_move(board, state.opponent_symbol)
    if block is not None:
        return block
    if board[CENTER] is None:
        return CENTER
    corners = [i for i in CORNERS if board[i] is None]
    if corners:
        return pick(rng, corners)
    return pick(rng, empty_cells(board))


def choose_tictactoe_move(
    state: TicTacToeState,
    difficulty: DifficultyLike,
    rng: Optional[random.Random] = None,
) -> int:
    """
    Choose the cell the AI plays.

    Args:
        state: Position with the AI to move.
        difficulty: Play strength.
            - easy: 70% random cell, otherwise plays like medium.
            - medium: win, block, center, random corner, random cell.
            - hard: minimax, but 10% of the time a random cell.
            - expert: minimax, lowest index on ties.
        rng: Optional generator for reproducible choices.

    Returns:
        Index 0-8 of an empty cell.

    Raises:
        IllegalStateError: If the board has no empty cell.
    """
    level = Difficulty.parse(difficulty)
    rng = resolve_rng(rng)
    empty = state.empty_cells()
    if not empty:
        raise IllegalStateError("Cannot choose a move on a full board.")

    if level is Difficulty.EASY and roll(rng, EASY_RANDOM_MOVE_RATE):
        return pick(rng, empty)
    if level in (Difficulty.EASY, Difficulty.MEDIUM):
        return _medium_tictactoe_move(state, rng)

    best = best_tictactoe_move(state)
    if level is Difficulty.HARD and roll(rng, HARD_MISTAKE_RATE):
        return pick(rng, empty)
    return best


# -----------------------------------------------------------------------------
# Competitive snake
# -----------------------------------------------------------------------------


def legal_directions(state: SnakeState, current_direction: Direction) -> List[Direction]:
    """Directions that neither reverse the snake nor hit a wall or a body."""
    obstacles = state.obstacles()
    reverse = current_direction.opposite
    return [
        d
        for d in DIRECTIONS
        if d is not reverse
        and is_valid_move(state.ai_head, d, obstacles, state.grid_size)
    ]


def score_direction(
    state: SnakeState, direction: Direction, difficulty: DifficultyLike
) -> int:
    """
    Heuristic value of one step for the hard and expert snakes.

    Closeness to the food, plus a bonus for every exit still open from the
    new head, plus (expert only) a bonus for beating the opponent to the food.
    """
    level = Difficulty.parse(difficulty)
    head = state.ai_head
    new_head = next_head(head, direction)
    distance = manhattan_distance(new_head, state.food)
    score = GOAL_SCORE_BASE - distance

    obstacles = state.obstacles() | {head}
    back = direction.opposite
    for d in DIRECTIONS:
        if d is not back and is_valid_move(new_head, d, obstacles, state.grid_size):
            score += MOBILITY_BONUS

    player_head = state.player_head
    if level is Difficulty.EXPERT and player_head is not None:
        if distance < manhattan_distance(player_head, state.food):
            score += RACE_BONUS
    return score


def choose_snake_direction(
    state: SnakeState,
    current_direction: Direction,
    difficulty: DifficultyLike,
    rng: Optional[random.Random] = None,
) -> Direction:
    """
    Choose the AI snake's next heading.

    Args:
        state: Arena snapshot.
        current_direction: Heading the AI snake is moving in now.
        difficulty: Play strength.
        rng: Optional generator for reproducible choices.

    Returns:
        A legal direction, or ``current_direction`` when every direction is
        blocked; the caller detects the resulting crash.
    """
    level = Difficulty.parse(difficulty)
    rng = resolve_rng(rng)
    valid = legal_directions(state, current_direction)
    if not valid:
        return current_direction

    if level is Difficulty.EASY and roll(rng, EASY_RANDOM_DIRECTION_RATE):
        return pick(rng, valid)

    if level in (Difficulty.EASY, Difficulty.MEDIUM):
        best_dir = valid[0]
        best_distance = math.inf
        for d in valid:
            distance = manhattan_distance(next_head(state.ai_head, d), state.food)
            if distance < best_distance:
                best_distance = distance
                best_dir = d
        return best_dir

    best_dir = valid[0]
    best_score = -math.inf
    for d in valid:
        score = score_direction(state, d, level)
        if score > best_score:
            best_score = score
            best_dir = d
    return best_dir


# -----------------------------------------------------------------------------
# UNO-style cards
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class CardAction:
    """
    What the AI does on its card turn.

    Either ``action == "draw"`` with no card, or ``action == "play"`` with the
    card and, for wild cards, the color it names.
    """

    action: str
    card: Optional[UnoCard] = None
    chosen_color: Optional[str] = None

    def __post_init__(self) -> None:
        if self.action not in ("play", "draw"):
            raise ValueError('action must be "play" or "draw".')
        if (self.action == "play") != (self.card is not None):
            raise ValueError("A play needs a card and a draw must not have one.")

    @classmethod
    def draw(cls) -> "CardAction":
        return cls("draw")

    @classmethod
    def play(cls, card: UnoCard, chosen_color: Optional[str] = None) -> "CardAction":
        return cls("play", card, chosen_color)

    @property
    def is_draw(self) -> bool:
        return self.action == "draw"


def base_card_score(card: UnoCard, opponent_card_count: int) -> int:
    """Value of playing ``card`` now, before any difficulty noise."""
    score = 0
    if card.kind == ACTION:
        score += CARD_SCORES["action"]
        if card.value in ("skip", "reverse"):
            score += CARD_SCORES["skip_reverse"]
        if card.value == "+2":
            score += CARD_SCORES["draw_two"]

    if card.color == WILD:
        score += CARD_SCORES["wild"]
        if card.value == "+4":
            score += CARD_SCORES["wild_draw_four"]

    # Opponent is about to go out: attack cards matter more than hand value.
    if opponent_card_count <= URGENT_CARD_COUNT:
        if card.kind == ACTION:
            score += CARD_SCORES["urgent_action"]
        if card.value in ("+2", "+4"):
            score += CARD_SCORES["urgent_forced_draw"]
    return score


def score_card(
    card: UnoCard,
    state: UnoState,
    difficulty: DifficultyLike,
    rng: Optional[random.Random] = None,
) -> float:
    """Score a legal card with the difficulty's amount of noise applied."""
    level = Difficulty.parse(difficulty)
    if level is Difficulty.EASY:
        return resolve_rng(rng).random() * EASY_SCORE_RANGE
    score = float(base_card_score(card, state.opponent_card_count))
    if level is Difficulty.MEDIUM:
        score += resolve_rng(rng).random() * MEDIUM_SCORE_JITTER
    return score


def choose_wild_color(
    hand: Sequence[UnoCard],
    played: UnoCard,
    difficulty: DifficultyLike,
    rng: Optional[random.Random] = None,
) -> str:
    """
    Pick the color to name when playing a wild card.

    Args:
        hand: The hand the card is played from.
        played: The card being played; it does not count towards the colors.
        difficulty: Easy names a random color; the rest name the most common
            color left in hand, ties broken in COLORS order.
        rng: Optional generator for reproducible choices.

    Returns:
        One of COLORS.
    """
    if Difficulty.parse(difficulty) is Difficulty.EASY:
        return pick(resolve_rng(rng), COLORS)

    remaining = list(hand)
    if played in remaining:
        remaining.remove(played)
    counts = Counter(card.color for card in remaining if card.color != WILD)
    best_color = COLORS[0]
    for color in COLORS:
        if counts[color] > counts[best_color]:
            best_color = color
    return best_color


def choose_card_action(
    state: UnoState,
    difficulty: DifficultyLike,
    rng: Optional[random.Random] = None,
) -> CardAction:
    """
    Decide whether to draw or which card to play.

    Args:
        state: The AI's view of the table.
        difficulty: Play strength.
            - easy: random legal card, random wild color.
            - medium: random pick among the three best (noisy) scores.
            - hard/expert: best score, earliest card in hand on ties.
        rng: Optional generator for reproducible choices.

    Returns:
        ``CardAction.draw()`` when nothing is playable, otherwise a play.
    """
    level = Difficulty.parse(difficulty)
    rng = resolve_rng(rng)
    playable = state.playable_cards()
    if not playable:
        return CardAction.draw()

    scored = [(card, score_card(card, state, level, rng)) for card in playable]
    # Stable: equal scores keep hand order.
    scored.sort(key=lambda pair: pair[1], reverse=True)

    if level is Difficulty.EASY:
        chosen = pick(rng, playable)
    elif level is Difficulty.MEDIUM:
        chosen = pick(rng, scored[:MEDIUM_TOP_N])[0]
    else:
        chosen = scored[0][0]

    chosen_color = None
    if chosen.color == WILD:
        chosen_color = choose_wild_color(state.hand, chosen, level, rng)
    return CardAction.play(chosen, chosen_color)


# -----------------------------------------------------------------------------
# Snakes & ladders commentary
# -----------------------------------------------------------------------------

COMMENTS: Dict[str, Tuple[str, ...]] = {
    "landed_on_snake": (
        "Oh no, a snake! Down I go...",
        "Sssssliding down!",
        "That's unfortunate...",
    ),
    "landed_on_ladder": (
        "Climbing up! Lucky!",
        "Woohoo, a ladder!",
        "That's more like it!",
    ),
    "close_to_win": (
        "Almost there!",
        "Victory is near!",
        "Just a few more steps...",
    ),
    "good_roll": (
        "Nice roll!",
        "That works!",
        "Making progress!",
    ),
    "bad_roll": (
        "Could be better...",
        "Not great...",
        "Hmm...",
    ),
}
CLOSE_TO_WIN_SQUARE = 90
GOOD_ROLL = 5


def classify_roll(state: LaddersState, dice_roll: int, new_position: int) -> str:
    """Name the situation a roll produced, first match wins."""
    if new_position in state.snakes:
        return "landed_on_snake"
    if state.ai_position + dice_roll in state.ladders:
        return "landed_on_ladder"
    if new_position >= CLOSE_TO_WIN_SQUARE:
        return "close_to_win"
    if dice_roll >= GOOD_ROLL:
        return "good_roll"
    return "bad_roll"


def comment_on_roll(
    state: LaddersState,
    dice_roll: int,
    new_position: int,
    rng: Optional[random.Random] = None,
) -> str:
    """Line the AI says after its roll in snakes & ladders (a game of pure luck)."""
    if not 1 <= dice_roll <= 6:
        raise ValueError("dice_roll must be between 1 and 6.")
    return pick(resolve_rng(rng), COMMENTS[classify_roll(state, dice_roll, new_position)])


# -----------------------------------------------------------------------------
# Uniform entry point
# -----------------------------------------------------------------------------


@singledispatch
def choose_move(
    state: Any,
    difficulty: DifficultyLike,
    rng: Optional[random.Random] = None,
    **kwargs: Any,
) -> Any:
    """
    Compute the AI's move for any supported game snapshot.

    Dispatches on the type of ``state``: TicTacToeState returns a cell index,
    SnakeState returns a Direction (pass ``current_direction=``), UnoState
    returns a CardAction.

    Raises:
        TypeError: If the state type has no solver.
    """
    raise TypeError(f"No solver for state of type {type(state).__name__}.")


@choose_move.register
def _(
    state: TicTacToeState,
    difficulty: DifficultyLike,
    rng: Optional[random.Random] = None,
) -> int:
    return choose_tictactoe_move(state, difficulty, rng)


@choose_move.register
def _(
    state: SnakeState,
    difficulty: DifficultyLike,
    rng: Optional[random.Random] = None,
    *,
    current_direction: Direction,
) -> Direction:
    return choose_snake_direction(state, current_direction, difficulty, rng)


@choose_move.register
def _(
    state: UnoState,
    difficulty: DifficultyLike,
    rng: Optional[random.Random] = None,
) -> CardAction:
    return choose_card_action(state, difficulty, rng)
