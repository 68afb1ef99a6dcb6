"""
Opponent AI

Computer opponents for several turn-based games behind one difficulty scale:
- Tic-tac-toe: alpha-beta minimax with difficulty-scaled mistakes
- Competitive snake: one-ply lookahead over goal distance and mobility
- UNO-style cards: card-class scoring with opponent-urgency bonuses
- Snakes & ladders: roll commentary
"""

from .difficulty import (
    AIConfig,
    Difficulty,
    Personality,
    random_personality,
    sample_thinking_delay,
    thinking_delay_range,
)
from .engine import (
    Direction,
    LaddersState,
    SnakeState,
    TicTacToeState,
    UnoCard,
    UnoState,
    build_deck,
    check_winner,
    play_cli,
)
from .exceptions import IllegalStateError
from .solver import (
    CardAction,
    choose_card_action,
    choose_move,
    choose_snake_direction,
    choose_tictactoe_move,
    choose_wild_color,
    comment_on_roll,
)
from .analysis import (
    run_card_choice_tests,
    run_difficulty_level_analysis,
    run_snake_many_tests,
    run_snake_single_test,
    run_tictactoe_many_tests,
    run_tictactoe_single_test,
    summarize_outcomes,
)

__version__ = "1.0.0"

__all__ = [
    # Difficulty model
    "AIConfig",
    "Difficulty",
    "Personality",
    "random_personality",
    "sample_thinking_delay",
    "thinking_delay_range",
    # Game states
    "Direction",
    "LaddersState",
    "SnakeState",
    "TicTacToeState",
    "UnoCard",
    "UnoState",
    "build_deck",
    "check_winner",
    # Solvers
    "CardAction",
    "IllegalStateError",
    "choose_card_action",
    "choose_move",
    "choose_snake_direction",
    "choose_tictactoe_move",
    "choose_wild_color",
    "comment_on_roll",
    # CLI
    "play_cli",
    # Analysis functions
    "run_card_choice_tests",
    "run_difficulty_level_analysis",
    "run_snake_many_tests",
    "run_snake_single_test",
    "run_tictactoe_many_tests",
    "run_tictactoe_single_test",
    "summarize_outcomes",
]
