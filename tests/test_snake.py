"""Tests for the competitive snake opponent."""
import random

import pytest

from opponent_ai.difficulty import Difficulty
from opponent_ai.engine import DIRECTIONS, Direction, SnakeState, is_valid_move, next_head
from opponent_ai.solver import (
    choose_move,
    choose_snake_direction,
    legal_directions,
    score_direction,
)


@pytest.fixture
def pocket_state() -> SnakeState:
    """The greedy step leads into a dead-end pocket walled by the opponent."""
    return SnakeState(
        ai_snake=((2, 2), (1, 2)),
        player_snake=((3, 5), (3, 4), (3, 3), (4, 3), (4, 2), (4, 1), (3, 1)),
        food=(5, 2),
        grid_size=10,
    )


@pytest.fixture
def race_state() -> SnakeState:
    """The opponent is two steps from the food; only one AI move gets closer."""
    return SnakeState(
        ai_snake=((5, 5), (5, 4), (6, 4)),
        player_snake=((7, 7), (6, 7), (6, 6)),
        food=(7, 5),
        grid_size=10,
    )


def random_state(rng: random.Random, grid_size: int = 7) -> SnakeState:
    cells = [(x, y) for y in range(grid_size) for x in range(grid_size)]
    rng.shuffle(cells)
    ai_len = rng.randint(1, 6)
    player_len = rng.randint(0, 6)
    ai = tuple(cells[:ai_len])
    player = tuple(cells[ai_len:ai_len + player_len])
    food = cells[ai_len + player_len]
    return SnakeState(ai, player, food, grid_size)


class TestSnakeState:
    """Snapshot construction."""

    def test_copies_input(self):
        body = [(1, 1), (0, 1)]
        state = SnakeState(body, [], (3, 3), 5)
        body.append((0, 0))
        assert state.ai_snake == ((1, 1), (0, 1))

    def test_needs_head(self):
        with pytest.raises(ValueError):
            SnakeState((), (), (0, 0), 5)

    def test_needs_positive_grid(self):
        with pytest.raises(ValueError):
            SnakeState(((0, 0),), (), (0, 0), 0)

    def test_obstacles_exclude_own_head(self, race_state):
        obstacles = race_state.obstacles()
        assert (5, 5) not in obstacles
        assert {(5, 4), (6, 4), (7, 7), (6, 7), (6, 6)} == obstacles

    def test_direction_opposites(self):
        for d in DIRECTIONS:
            assert d.opposite.opposite is d
            assert next_head(next_head((3, 3), d), d.opposite) == (3, 3)

    def test_up_decreases_y(self):
        assert next_head((3, 3), Direction.UP) == (3, 2)
        assert not is_valid_move((3, 0), Direction.UP, frozenset(), 5)

    def test_direction_deltas(self):
        assert Direction.UP.delta == (0, -1)
        assert Direction.DOWN.delta == (0, 1)
        assert Direction.LEFT.delta == (-1, 0)
        assert Direction.RIGHT.delta == (1, 0)
        for d in DIRECTIONS:
            dx, dy = d.delta
            assert next_head((3, 3), d) == (3 + dx, 3 + dy)
            assert d.opposite.delta == (-dx, -dy)

    def test_obstacle_set_blocks_move(self):
        assert not is_valid_move((2, 2), Direction.RIGHT, frozenset({(3, 2)}), 5)
        assert is_valid_move((2, 2), Direction.LEFT, frozenset({(3, 2)}), 5)


class TestLegality:
    """Moves the heuristic must never make."""

    @pytest.mark.parametrize("level", list(Difficulty))
    def test_never_reverses(self, level):
        state = SnakeState(((5, 5),), (), (0, 5), 10)
        for seed in range(30):
            d = choose_snake_direction(state, Direction.RIGHT, level, random.Random(seed))
            assert d is not Direction.LEFT

    @pytest.mark.parametrize("level", list(Difficulty))
    def test_corner_has_one_exit(self, level, rng):
        state = SnakeState(((0, 0), (0, 1)), (), (5, 5), 10)
        assert choose_snake_direction(state, Direction.UP, level, rng) is Direction.RIGHT

    @pytest.mark.parametrize("level", list(Difficulty))
    def test_trapped_keeps_heading(self, level, rng):
        """With no safe direction the current heading comes back unchanged."""
        state = SnakeState(((0, 0), (1, 0)), ((0, 1),), (5, 5), 10)
        assert legal_directions(state, Direction.LEFT) == []
        assert choose_snake_direction(state, Direction.LEFT, level, rng) is Direction.LEFT

    @pytest.mark.parametrize("level", list(Difficulty))
    def test_avoids_opponent_body(self, level, rng):
        state = SnakeState(((5, 5),), ((6, 5), (7, 5)), (9, 5), 10)
        for _ in range(20):
            assert choose_snake_direction(state, Direction.RIGHT, level, rng) in (
                Direction.UP,
                Direction.DOWN,
            )

    @pytest.mark.parametrize("level", list(Difficulty))
    def test_random_positions(self, level):
        """Across random arenas the choice is never a reversal or a crash when avoidable."""
        rng = random.Random(level.rank)
        for _ in range(300):
            state = random_state(rng)
            current = rng.choice(DIRECTIONS)
            chosen = choose_snake_direction(state, current, level, rng)
            assert chosen is not current.opposite
            valid = legal_directions(state, current)
            if valid:
                assert chosen in valid
                assert is_valid_move(state.ai_head, chosen, state.obstacles(), state.grid_size)
            else:
                assert chosen is current


class TestSelection:
    """Difficulty-specific choice."""

    def test_medium_is_greedy(self, rng):
        state = SnakeState(((5, 5),), (), (5, 0), 10)
        assert choose_snake_direction(state, Direction.RIGHT, "medium", rng) is Direction.UP

    def test_medium_tie_goes_to_first_direction(self, rng):
        state = SnakeState(((5, 5),), ((6, 5),), (9, 5), 10)
        assert choose_snake_direction(state, Direction.RIGHT, "medium", rng) is Direction.UP

    def test_medium_walks_into_pocket(self, pocket_state, rng):
        assert choose_snake_direction(pocket_state, Direction.RIGHT, "medium", rng) is Direction.RIGHT

    @pytest.mark.parametrize("level", [Difficulty.HARD, Difficulty.EXPERT])
    def test_lookahead_avoids_pocket(self, pocket_state, level, rng):
        assert choose_snake_direction(pocket_state, Direction.RIGHT, level, rng) is Direction.UP

    def test_mobility_scores(self, pocket_state):
        assert score_direction(pocket_state, Direction.RIGHT, "hard") == 98
        assert score_direction(pocket_state, Direction.UP, "hard") == 116
        assert score_direction(pocket_state, Direction.DOWN, "hard") == 116

    def test_race_scores(self, race_state):
        assert score_direction(race_state, Direction.RIGHT, "hard") == 109
        assert score_direction(race_state, Direction.LEFT, "hard") == 127
        assert score_direction(race_state, Direction.DOWN, "hard") == 117
        assert score_direction(race_state, Direction.RIGHT, "expert") == 129
        assert score_direction(race_state, Direction.LEFT, "expert") == 127

    def test_hard_prefers_open_space(self, race_state, rng):
        assert choose_snake_direction(race_state, Direction.DOWN, "hard", rng) is Direction.LEFT

    def test_expert_races_for_food(self, race_state, rng):
        assert choose_snake_direction(race_state, Direction.DOWN, "expert", rng) is Direction.RIGHT

    def test_expert_without_opponent(self, rng):
        state = SnakeState(((5, 5),), (), (5, 0), 10)
        assert choose_snake_direction(state, Direction.UP, "expert", rng) is Direction.UP

    def test_easy_is_sometimes_random(self):
        state = SnakeState(((5, 5),), (), (5, 0), 10)
        picks = {
            choose_snake_direction(state, Direction.RIGHT, "easy", random.Random(s))
            for s in range(50)
        }
        assert Direction.UP in picks
        assert len(picks) > 1

    def test_dispatch(self, race_state, rng):
        assert choose_move(
            race_state, "expert", rng, current_direction=Direction.DOWN
        ) is Direction.RIGHT
