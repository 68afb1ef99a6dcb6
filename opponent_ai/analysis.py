"""Analysis and benchmarking tools for the opponent AI."""

import logging
import random
from typing import Dict, List, Optional, Tuple

import matplotlib.pyplot as plt
import numpy as np

from .difficulty import Difficulty, DifficultyLike
from .engine import (
    ACTION,
    WILD,
    Direction,
    SnakeState,
    TicTacToeState,
    UnoState,
    build_deck,
    check_winner,
    empty_cells,
    format_board,
    next_head,
    other_symbol,
)
from .solver import choose_card_action, choose_snake_direction, choose_tictactoe_move
from .utils import Position, in_bounds, pick, resolve_rng

logger = logging.getLogger(__name__)

LEVELS: Tuple[Difficulty, ...] = tuple(Difficulty)


# -----------------------------------------------------------------------------
# Tic-tac-toe
# -----------------------------------------------------------------------------


def run_tictactoe_single_test(
    ai_difficulty: DifficultyLike,
    opponent_difficulty: Optional[DifficultyLike] = None,
    *,
    ai_first: bool = False,
    ai_symbol: str = "O",
    show_boards: bool = False,
    rng: Optional[random.Random] = None,
) -> Dict[str, object]:
    """
    Play one full game of tic-tac-toe with the AI against an opponent.

    Args:
        ai_difficulty: Difficulty of the AI under test.
        opponent_difficulty: Difficulty of the opposing AI, or None for an
            opponent that picks uniformly random cells.
        ai_first: If True, the AI opens the game.
        ai_symbol: Symbol played by the AI under test.
        show_boards: If True, print the final board.
        rng: Optional generator for reproducible games.

    Returns:
        Dict with "status" (1 AI win, 0 draw, -1 AI loss), "moves_sequence"
        as (symbol, cell) pairs and "moves_count".
    """
    rng = resolve_rng(rng)
    opponent_symbol = other_symbol(ai_symbol)
    board: List[Optional[str]] = [None] * 9
    moves_sequence: List[Tuple[str, int]] = []
    ai_turn = ai_first

    while check_winner(board) is None:
        if ai_turn:
            symbol = ai_symbol
            idx = choose_tictactoe_move(
                TicTacToeState(tuple(board), ai_symbol), ai_difficulty, rng
            )
        else:
            symbol = opponent_symbol
            if opponent_difficulty is None:
                idx = pick(rng, empty_cells(board))
            else:
                idx = choose_tictactoe_move(
                    TicTacToeState(tuple(board), opponent_symbol),
                    opponent_difficulty,
                    rng,
                )
        if board[idx] is not None:
            raise RuntimeError(f"Solver picked occupied cell {idx}.")
        board[idx] = symbol
        moves_sequence.append((symbol, idx))
        ai_turn = not ai_turn

    result = check_winner(board)
    if result == ai_symbol:
        status = 1
    elif result == opponent_symbol:
        status = -1
    else:
        status = 0

    if show_boards:
        print(format_board(board))
        print(f"\nFinished with status {status}.")

    return {
        "status": status,
        "moves_sequence": moves_sequence,
        "moves_count": len(moves_sequence),
    }


def run_tictactoe_many_tests(
    ai_difficulty: DifficultyLike,
    runs: int,
    opponent_difficulty: Optional[DifficultyLike] = None,
    *,
    seed: Optional[int] = None,
) -> Dict[str, float]:
    """
    Play many games, alternating who opens, and aggregate the outcomes.

    Args:
        ai_difficulty: Difficulty of the AI under test.
        runs: Number of games, must be positive.
        opponent_difficulty: Opposing difficulty, or None for a random player.
        seed: Optional seed for the whole batch.

    Returns:
        Dict with win_rate, draw_rate, loss_rate and avg_moves_count.
    """
    if runs <= 0:
        raise ValueError("runs must be positive.")

    rng = random.Random(seed)
    statuses = np.zeros(runs, dtype=int)
    moves = np.zeros(runs, dtype=float)
    for i in range(runs):
        payload = run_tictactoe_single_test(
            ai_difficulty, opponent_difficulty, ai_first=(i % 2 == 0), rng=rng
        )
        statuses[i] = int(payload["status"])  # type: ignore[call-overload]
        moves[i] = float(payload["moves_count"])  # type: ignore[arg-type]
        logger.debug("tictactoe run %d: status %d", i, statuses[i])

    return {
        "win_rate": float(np.mean(statuses == 1)),
        "draw_rate": float(np.mean(statuses == 0)),
        "loss_rate": float(np.mean(statuses == -1)),
        "avg_moves_count": float(np.mean(moves)),
    }


# -----------------------------------------------------------------------------
# Competitive snake
# -----------------------------------------------------------------------------


def _spawn_food(
    occupied: List[Position], grid_size: int, rng: random.Random
) -> Optional[Position]:
    taken = set(occupied)
    free = [
        (x, y)
        for y in range(grid_size)
        for x in range(grid_size)
        if (x, y) not in taken
    ]
    if not free:
        return None
    return pick(rng, free)


def _advance(
    snake: List[Position], new_head: Position, ate: bool
) -> List[Position]:
    if ate:
        return [new_head] + snake
    return [new_head] + snake[:-1]


def run_snake_single_test(
    ai_difficulty: DifficultyLike,
    opponent_difficulty: DifficultyLike = "medium",
    *,
    grid_size: int = 12,
    max_steps: int = 200,
    rng: Optional[random.Random] = None,
) -> Dict[str, int]:
    """
    Race two heuristic-driven snakes for food until one crashes.

    Both heads move at the same time. A snake crashes when its new head
    leaves the grid or lands on any body after the move (head-on collisions
    crash both). Eating grows the snake by one and respawns the food.

    Args:
        ai_difficulty: Difficulty of the snake under test.
        opponent_difficulty: Difficulty of the opposing snake.
        grid_size: Side of the square arena, at least 5.
        max_steps: Step cap; reaching it is a draw.
        rng: Optional generator for reproducible games.

    Returns:
        Dict with "status" (1 opponent crashed first, -1 AI crashed first,
        0 both crashed or the cap was hit), "steps", "ai_food",
        "opponent_food", "ai_length" and "opponent_length".
    """
    if grid_size < 5:
        raise ValueError("grid_size must be at least 5.")
    if max_steps <= 0:
        raise ValueError("max_steps must be positive.")

    rng = resolve_rng(rng)
    top, bottom = grid_size // 3, (2 * grid_size) // 3
    ai: List[Position] = [(4, top), (3, top), (2, top)]
    opponent: List[Position] = [
        (grid_size - 5, bottom),
        (grid_size - 4, bottom),
        (grid_size - 3, bottom),
    ]
    ai_dir, opponent_dir = Direction.RIGHT, Direction.LEFT
    food = _spawn_food(ai + opponent, grid_size, rng)
    ai_food = opponent_food = 0
    status = 0
    steps = 0

    while steps < max_steps and food is not None:
        steps += 1
        ai_dir = choose_snake_direction(
            SnakeState(tuple(ai), tuple(opponent), food, grid_size),
            ai_dir,
            ai_difficulty,
            rng,
        )
        opponent_dir = choose_snake_direction(
            SnakeState(tuple(opponent), tuple(ai), food, grid_size),
            opponent_dir,
            opponent_difficulty,
            rng,
        )
        ai_head = next_head(ai[0], ai_dir)
        opponent_head = next_head(opponent[0], opponent_dir)
        ai_ate = ai_head == food
        opponent_ate = opponent_head == food
        ai = _advance(ai, ai_head, ai_ate)
        opponent = _advance(opponent, opponent_head, opponent_ate)

        ai_crashed = (
            not in_bounds(ai_head, grid_size)
            or ai_head in ai[1:]
            or ai_head in opponent
        )
        opponent_crashed = (
            not in_bounds(opponent_head, grid_size)
            or opponent_head in opponent[1:]
            or opponent_head in ai
        )
        if ai_crashed or opponent_crashed:
            if ai_crashed and not opponent_crashed:
                status = -1
            elif opponent_crashed and not ai_crashed:
                status = 1
            logger.debug("snake game over at step %d: status %d", steps, status)
            break

        ai_food += int(ai_ate)
        opponent_food += int(opponent_ate)
        if ai_ate or opponent_ate:
            food = _spawn_food(ai + opponent, grid_size, rng)

    return {
        "status": status,
        "steps": steps,
        "ai_food": ai_food,
        "opponent_food": opponent_food,
        "ai_length": len(ai),
        "opponent_length": len(opponent),
    }


def run_snake_many_tests(
    ai_difficulty: DifficultyLike,
    runs: int,
    opponent_difficulty: DifficultyLike = "medium",
    *,
    grid_size: int = 12,
    max_steps: int = 200,
    seed: Optional[int] = None,
) -> Dict[str, float]:
    """
    Run many snake races and return averaged metrics plus outcome rates.

    Returns:
        Dict with win_rate, draw_rate, loss_rate, avg_steps, avg_ai_food and
        avg_opponent_food.
    """
    if runs <= 0:
        raise ValueError("runs must be positive.")

    rng = random.Random(seed)
    rows = []
    for _ in range(runs):
        payload = run_snake_single_test(
            ai_difficulty,
            opponent_difficulty,
            grid_size=grid_size,
            max_steps=max_steps,
            rng=rng,
        )
        rows.append(
            (
                payload["status"],
                payload["steps"],
                payload["ai_food"],
                payload["opponent_food"],
            )
        )

    data = np.array(rows, dtype=float)
    statuses = data[:, 0]
    return {
        "win_rate": float(np.mean(statuses == 1)),
        "draw_rate": float(np.mean(statuses == 0)),
        "loss_rate": float(np.mean(statuses == -1)),
        "avg_steps": float(np.mean(data[:, 1])),
        "avg_ai_food": float(np.mean(data[:, 2])),
        "avg_opponent_food": float(np.mean(data[:, 3])),
    }


# -----------------------------------------------------------------------------
# Cards
# -----------------------------------------------------------------------------


def run_card_choice_tests(
    difficulty: DifficultyLike,
    runs: int,
    *,
    hand_size: int = 7,
    seed: Optional[int] = None,
) -> Dict[str, float]:
    """
    Deal random tables and profile which cards the AI chooses.

    Each run shuffles a full deck, deals ``hand_size`` cards to the AI, turns
    the next non-wild card face up and gives the opponent 1-7 cards.

    Args:
        difficulty: Difficulty under test.
        runs: Number of deals, must be positive.
        hand_size: Cards in the AI hand, 1-20.
        seed: Optional seed for the whole batch.

    Returns:
        Dict with draw_rate (share of deals without a legal card),
        action_play_rate and wild_play_rate (shares of plays), and
        urgent_attack_rate (share of plays against an opponent with at most
        two cards that were +2 or +4).
    """
    if runs <= 0:
        raise ValueError("runs must be positive.")
    if not 1 <= hand_size <= 20:
        raise ValueError("hand_size must be between 1 and 20.")

    rng = random.Random(seed)
    draws = plays = action_plays = wild_plays = 0
    urgent_plays = urgent_attacks = 0

    for _ in range(runs):
        deck = build_deck()
        rng.shuffle(deck)
        hand, rest = deck[:hand_size], deck[hand_size:]
        top = next(card for card in rest if card.color != WILD)
        opponent_count = rng.randint(1, 7)
        state = UnoState(
            hand=tuple(hand),
            discard_top=top,
            current_color=top.color,
            opponent_card_count=opponent_count,
            draw_pile_count=len(rest) - 1,
        )
        result = choose_card_action(state, difficulty, rng)
        if result.is_draw:
            draws += 1
            continue
        card = result.card
        if card is None or card not in state.playable_cards():
            raise RuntimeError(f"Solver returned an illegal play: {result!r}")
        plays += 1
        action_plays += int(card.kind == ACTION)
        wild_plays += int(card.color == WILD)
        if opponent_count <= 2:
            urgent_plays += 1
            urgent_attacks += int(card.value in ("+2", "+4"))

    return {
        "draw_rate": draws / runs,
        "action_play_rate": (action_plays / plays) if plays > 0 else 0.0,
        "wild_play_rate": (wild_plays / plays) if plays > 0 else 0.0,
        "urgent_attack_rate": (
            (urgent_attacks / urgent_plays) if urgent_plays > 0 else 0.0
        ),
    }


# -----------------------------------------------------------------------------
# Cross-difficulty report
# -----------------------------------------------------------------------------


def _bar_chart(
    level_names: List[str], values: List[float], ylabel: str, title: str
) -> None:
    x = np.arange(len(level_names))
    plt.figure()  # type: ignore[misc]
    plt.bar(x, values)  # type: ignore[misc]
    plt.xticks(x, level_names)  # type: ignore[misc]
    plt.ylabel(ylabel)  # type: ignore[misc]
    plt.ylim(0.0, 1.0)  # type: ignore[misc]
    plt.title(title)  # type: ignore[misc]
    plt.tight_layout()


def run_difficulty_level_analysis(
    runs: int,
    *,
    show_plots: bool = True,
    seed: Optional[int] = None,
) -> Dict[str, Dict[str, Dict[str, float]]]:
    """
    Benchmark every difficulty in every game and plot summaries.

    Tic-tac-toe is played against a random opponent, snake against a medium
    snake, and cards are profiled on random deals.

    Args:
        runs: Number of games or deals per difficulty and game.
        show_plots: If True, display the charts; otherwise they are closed.
        seed: Optional seed; each batch derives its own seed from it.

    Returns:
        Mapping game name -> difficulty name -> metrics dict.
    """
    if runs <= 0:
        raise ValueError("runs must be positive.")

    results: Dict[str, Dict[str, Dict[str, float]]] = {
        "tictactoe": {},
        "snake": {},
        "cards": {},
    }
    for i, level in enumerate(LEVELS):
        batch_seed = None if seed is None else seed + i
        logger.info("Benchmarking %s difficulty (%d runs)", level.value, runs)
        results["tictactoe"][level.value] = run_tictactoe_many_tests(
            level, runs, seed=batch_seed
        )
        results["snake"][level.value] = run_snake_many_tests(
            level, runs, seed=batch_seed
        )
        results["cards"][level.value] = run_card_choice_tests(
            level, runs, seed=batch_seed
        )

    level_names = [level.value for level in LEVELS]

    # 1) Tic-tac-toe non-loss rate against a random player
    _bar_chart(
        level_names,
        [
            results["tictactoe"][n]["win_rate"] + results["tictactoe"][n]["draw_rate"]
            for n in level_names
        ],
        "Non-loss rate",
        "Tic-tac-toe vs random player",
    )

    # 2) Snake win rate against a medium snake
    _bar_chart(
        level_names,
        [results["snake"][n]["win_rate"] for n in level_names],
        "Win rate",
        "Snake vs medium snake",
    )

    # 3) Attack cards played when the opponent is about to go out
    _bar_chart(
        level_names,
        [results["cards"][n]["urgent_attack_rate"] for n in level_names],
        "+2/+4 share of urgent plays",
        "Cards: reaction to an opponent close to winning",
    )

    if show_plots:
        plt.show()  # type: ignore[misc]
    else:
        plt.close("all")

    return results


def summarize_outcomes(results: Dict[str, Dict[str, float]]) -> Dict[str, float]:
    """
    Reduce per-difficulty outcome rates to the share of games not lost.

    Args:
        results: Dict[level_name -> metrics dict] with win_rate and draw_rate,
            as produced for one game by run_difficulty_level_analysis().

    Returns:
        Dict[level_name -> win_rate + draw_rate].
    """
    out: Dict[str, float] = {}
    for level, metrics in results.items():
        for key in ("win_rate", "draw_rate"):
            if key not in metrics:
                raise KeyError(f"Missing key {key!r} in metrics for level {level!r}.")
        out[level] = float(metrics["win_rate"]) + float(metrics["draw_rate"])
    return out
