"""
Traveling-salesman individual.

A tour is an ordering of cities; fitness is the negated length of the open
path visiting them in order.
"""

from dataclasses import dataclass, field
import math
import random
from random import Random
from typing import List, Optional, Sequence, Set, Tuple

from src.darwin.core.individual import Individual


@dataclass(frozen=True)
class City:
    """A city the salesman must visit. Cities with equal coordinates are identical."""

    x: int
    y: int

    def distance_from(self, other: "City") -> float:
        return math.hypot(other.x - self.x, other.y - self.y)


@dataclass(frozen=True)
class Tour(Individual):
    """
    An order in which the salesman visits every city.

    Like TargetString, a tour draws from its rng when one is given and hands
    it on to its children.
    """

    cities: Tuple[City, ...]
    rng: Optional[Random] = field(default=None, compare=False, repr=False)

    @property
    def _random(self):
        return self.rng or random

    @classmethod
    def random(cls, cities: Sequence[City], rng: Optional[Random] = None) -> "Tour":
        """Create a tour visiting the given cities in random order."""
        order = list(cities)
        (rng or random).shuffle(order)
        return cls(tuple(order), rng)

    def fitness(self) -> float:
        total_distance = sum(
            a.distance_from(b) for a, b in zip(self.cities, self.cities[1:])
        )
        return -total_distance

    def mutate(self, rate: float) -> "Tour":
        """Swap each city with its predecessor with probability rate."""
        order = list(self.cities)
        for i in range(1, len(order)):
            if rate > self._random.random():
                order[i - 1], order[i] = order[i], order[i - 1]
        return Tour(tuple(order), self.rng)

    def crossover(self, partner: Individual) -> "Tour":
        """
        Ordered crossover.

        The child keeps a random slice of this tour in place and fills the
        remaining positions with the partner's cities, in the partner's order
        starting after the slice.
        """
        self._check_partner(partner)
        size = len(self.cities)
        child: List[Optional[City]] = [None] * size

        added: Set[City] = set()
        start, end = self._subset()
        for i in range(start, end):
            child[i] = self.cities[i]
            added.add(self.cities[i])

        free = (i for i in range(size) if child[i] is None)
        for i in range(size):
            city = partner.cities[(i + end) % size]
            if city not in added:
                child[next(free)] = city
                added.add(city)

        return Tour(tuple(child), self.rng)

    def _subset(self) -> Tuple[int, int]:
        size = len(self.cities)
        a, b = self._random.randrange(size), self._random.randrange(size)
        return (b, a) if a >= b else (a, b)

    def __str__(self) -> str:
        return "[" + ",".join(f"({city.x},{city.y})" for city in self.cities) + "]"
