"""Shared difficulty scale, opponent personalities and thinking delays."""

import random
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Tuple, Union

from .utils import pick, resolve_rng


class Difficulty(Enum):
    """Play strength of a computer opponent, ordered weakest to strongest."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    EXPERT = "expert"

    @property
    def rank(self) -> int:
        return _ORDER.index(self)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Difficulty):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Difficulty):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Difficulty):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Difficulty):
            return NotImplemented
        return self.rank >= other.rank

    @classmethod
    def parse(cls, value: Union["Difficulty", str]) -> "Difficulty":
        """
        Normalize a difficulty given as an enum member or a name.

        Args:
            value: A Difficulty, or one of "easy", "medium", "hard", "expert"
                (case-insensitive).

        Returns:
            The matching Difficulty member.

        Raises:
            ValueError: If the value does not name a difficulty.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise ValueError(
            'difficulty must be one of "easy", "medium", "hard", "expert"; '
            f"got {value!r}."
        )


_ORDER: Tuple[Difficulty, ...] = (
    Difficulty.EASY,
    Difficulty.MEDIUM,
    Difficulty.HARD,
    Difficulty.EXPERT,
)

DifficultyLike = Union[Difficulty, str]


@dataclass(frozen=True)
class Personality:
    """Cosmetic identity shown for a computer opponent."""

    name: str
    avatar: int
    tagline: str


PERSONALITIES: Mapping[Difficulty, Tuple[Personality, ...]] = MappingProxyType(
    {
        Difficulty.EASY: (
            Personality("Rookie Bot", 1, "I'm still learning!"),
            Personality("Friendly Fred", 2, "Having fun is what matters!"),
            Personality("Chill Charlie", 3, "Take it easy~"),
        ),
        Difficulty.MEDIUM: (
            Personality("Balanced Betty", 4, "A fair challenge awaits."),
            Personality("Steady Steve", 5, "Consistent and reliable."),
            Personality("Smart Sam", 6, "Thinking things through."),
        ),
        Difficulty.HARD: (
            Personality("Tactical Tina", 7, "Strategy is my game."),
            Personality("Pro Pete", 8, "Prepare to be challenged."),
            Personality("Sharp Sharon", 9, "Every move counts."),
        ),
        Difficulty.EXPERT: (
            Personality("Master Max", 10, "Perfection is the goal."),
            Personality("Champion Chloe", 11, "Undefeated."),
            Personality("The Algorithm", 12, "Resistance is futile."),
        ),
    }
)

# (min_ms, max_ms). Expert answers faster than Hard: it is the confident one.
THINKING_DELAYS_MS: Mapping[Difficulty, Tuple[int, int]] = MappingProxyType(
    {
        Difficulty.EASY: (300, 800),
        Difficulty.MEDIUM: (500, 1200),
        Difficulty.HARD: (700, 1500),
        Difficulty.EXPERT: (400, 800),
    }
)


def thinking_delay_range(difficulty: DifficultyLike) -> Tuple[int, int]:
    """Return the (min_ms, max_ms) pause a caller should wait before applying a move."""
    return THINKING_DELAYS_MS[Difficulty.parse(difficulty)]


def sample_thinking_delay(
    difficulty: DifficultyLike, rng: Optional[random.Random] = None
) -> float:
    """Draw one thinking delay in milliseconds, uniformly from the difficulty's range."""
    low, high = thinking_delay_range(difficulty)
    return resolve_rng(rng).uniform(low, high)


def random_personality(
    difficulty: DifficultyLike, rng: Optional[random.Random] = None
) -> Personality:
    """Pick a personality from the difficulty's fixed pool."""
    return pick(resolve_rng(rng), PERSONALITIES[Difficulty.parse(difficulty)])


@dataclass(frozen=True)
class AIConfig:
    """
    Per-session settings for a computer opponent.

    Attributes:
        difficulty: Play strength (names are accepted and parsed).
        personality: Display identity, fixed for the session.
        thinking_delay: Fixed delay in milliseconds; None means a fresh delay
            is drawn from the difficulty's range for every move.
    """

    difficulty: Difficulty
    personality: Optional[Personality] = None
    thinking_delay: Optional[float] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "difficulty", Difficulty.parse(self.difficulty))
        if self.thinking_delay is not None and self.thinking_delay < 0:
            raise ValueError("thinking_delay must be non-negative.")

    @classmethod
    def create(
        cls, difficulty: DifficultyLike, rng: Optional[random.Random] = None
    ) -> "AIConfig":
        """Start a session: parse the difficulty and pick a personality once."""
        level = Difficulty.parse(difficulty)
        return cls(difficulty=level, personality=random_personality(level, rng))

    def next_delay(self, rng: Optional[random.Random] = None) -> float:
        """Milliseconds to wait before applying the move that was just computed."""
        if self.thinking_delay is not None:
            return self.thinking_delay
        return sample_thinking_delay(self.difficulty, rng)
