"""
Selection strategies for choosing crossover partners.

A strategy is a callable taking the current (scored, sorted) population and
the search's random generator, and returning one individual.
"""

from typing import TYPE_CHECKING, Callable

import numpy as np

from src.darwin.core.exceptions import ConfigurationError, SelectionError
from src.darwin.core.individual import Individual

if TYPE_CHECKING:
    from src.darwin.core.population import Population

SelectionMethod = Callable[["Population", np.random.Generator], Individual]


def roulette() -> SelectionMethod:
    """
    Roulette-wheel selection, weighting each partner by its score.

    Only meaningful when every score is positive. With a zero or negative
    total the draw degenerates and the wheel falls through to the last
    member scanned; prefer tournament() for such fitness functions.
    """

    def select(population: "Population", rng: np.random.Generator) -> Individual:
        position = rng.random() * population.total_fitness()
        spin_wheel = 0.0
        for member in population:
            spin_wheel += member.score
            if spin_wheel >= position:
                return member.individual
        return population[len(population) - 1].individual

    select.__name__ = "roulette"
    return select


def tournament(size: int) -> SelectionMethod:
    """
    Tournament selection over the top of the ranking.

    The tournament is held among the first `size` members of the population,
    which is sorted best first, so the winner is the best of that prefix.
    No random sampling takes place.

    Args:
        size: Number of leading members taking part

    Raises:
        ConfigurationError: If size is smaller than 1
    """
    if size < 1:
        raise ConfigurationError(f"tournament size must be at least 1, got {size}")

    def select(population: "Population", rng: np.random.Generator) -> Individual:
        if size > len(population):
            raise SelectionError(
                f"tournament size ({size}) exceeds population size ({len(population)})",
                population_size=len(population),
                selection_type="tournament"
            )
        contestants = population.get_elite(size)
        winner = max(contestants, key=lambda member: member.score)
        return winner.individual

    select.__name__ = f"tournament_{size}"
    return select
