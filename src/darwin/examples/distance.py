"""
String-distance individual.

Evolves strings toward a target; fitness is the negated edit distance, so a
perfect match scores 0.
"""

from dataclasses import dataclass, field
import random
from random import Random
import string
from typing import List, Optional

from src.darwin.core.individual import Individual

DEFAULT_TARGET = "this is the target string"
CHARACTERS = string.ascii_letters + string.digits + " ?!.&%^"


def levenshtein(s: str, t: str) -> int:
    """Edit distance between two strings."""
    previous = list(range(len(t) + 1))
    for i, s_char in enumerate(s, start=1):
        current = [i]
        for j, t_char in enumerate(t, start=1):
            if s_char == t_char:
                current.append(previous[j - 1])
            else:
                current.append(min(previous[j], current[j - 1], previous[j - 1]) + 1)
        previous = current
    return previous[-1]


def random_character(rng: Optional[Random] = None) -> str:
    return (rng or random).choice(CHARACTERS)


@dataclass(frozen=True)
class TargetString(Individual):
    """
    A candidate string scored against a fixed target.

    Operators draw from rng when one is given, otherwise from the random
    module; children share their parent's rng, so a seeded rng makes a whole
    search reproducible.
    """

    value: str
    target: str = DEFAULT_TARGET
    rng: Optional[Random] = field(default=None, compare=False, repr=False)

    @property
    def _random(self):
        return self.rng or random

    @classmethod
    def random(cls, target: str = DEFAULT_TARGET,
               rng: Optional[Random] = None) -> "TargetString":
        """Create a random string as long as the target."""
        return cls("".join(random_character(rng) for _ in target), target, rng)

    @classmethod
    def random_population(cls, size: int, target: str = DEFAULT_TARGET,
                          rng: Optional[Random] = None) -> List["TargetString"]:
        return [cls.random(target, rng) for _ in range(size)]

    def fitness(self) -> float:
        return float(-levenshtein(self.target, self.value))

    def mutate(self, rate: float) -> "TargetString":
        """Replace each character with a random one with probability rate."""
        characters = [
            random_character(self.rng) if self._random.random() < rate else char
            for char in self.value
        ]
        return TargetString("".join(characters), self.target, self.rng)

    def crossover(self, partner: Individual) -> "TargetString":
        """Uniform crossover: each position comes from either parent."""
        self._check_partner(partner)
        if len(partner.value) != len(self.value):
            raise ValueError(
                f"cannot cross strings of length {len(self.value)} and {len(partner.value)}"
            )
        characters = [
            mine if self._random.getrandbits(1) else theirs
            for mine, theirs in zip(self.value, partner.value)
        ]
        return TargetString("".join(characters), self.target, self.rng)

    def __str__(self) -> str:
        return self.value
