"""
Quickstart example for the Opponent AI.

This script demonstrates basic usage of the solvers and the benchmarks.
"""

from opponent_ai import (
    AIConfig,
    Direction,
    SnakeState,
    TicTacToeState,
    UnoCard,
    UnoState,
    choose_move,
    run_tictactoe_many_tests,
)


def main():
    print("=" * 60)
    print("Opponent AI - Quickstart Example")
    print("=" * 60)

    # Example 1: Start a session
    print("\n1. Starting a session against an expert opponent...")
    print("-" * 60)

    config = AIConfig.create("expert")
    print(f"Opponent: {config.personality.name} - {config.personality.tagline}")
    print(f"Next thinking delay: {config.next_delay():.0f} ms")

    # Example 2: Tic-tac-toe
    print("\n2. Tic-tac-toe: X threatens the top row...")
    print("-" * 60)

    board = TicTacToeState(("X", "X", None, None, "O", None, None, None, None))
    print(f"AI (O) plays cell {choose_move(board, config.difficulty)}")

    # Example 3: Snake
    print("\n3. Snake: racing the player to the food...")
    print("-" * 60)

    arena = SnakeState(
        ai_snake=((5, 5), (5, 4), (6, 4)),
        player_snake=((7, 7), (6, 7), (6, 6)),
        food=(7, 5),
        grid_size=10,
    )
    for level in ("medium", "hard", "expert"):
        direction = choose_move(arena, level, current_direction=Direction.DOWN)
        print(f"{level:8s} turns {direction.value}")

    # Example 4: Cards
    print("\n4. Cards: the opponent has one card left...")
    print("-" * 60)

    table = UnoState(
        hand=(
            UnoCard("r7", "red", "7", "number"),
            UnoCard("r+2", "red", "+2", "action"),
        ),
        discard_top=UnoCard("r3", "red", "3", "number"),
        current_color="red",
        opponent_card_count=1,
    )
    print(f"AI decision: {choose_move(table, 'expert')}")

    # Example 5: Benchmarks
    print("\n5. Tic-tac-toe against a random player (20 games each)...")
    print("-" * 60)

    for level in ("easy", "medium", "hard", "expert"):
        results = run_tictactoe_many_tests(level, 20, seed=0)
        print(
            f"{level:8s} win {results['win_rate']*100:5.1f}%  "
            f"draw {results['draw_rate']*100:5.1f}%  "
            f"loss {results['loss_rate']*100:5.1f}%"
        )

    print("\n" + "=" * 60)
    print("Done! See README.md for more detailed usage instructions.")
    print("=" * 60)


if __name__ == "__main__":
    main()
