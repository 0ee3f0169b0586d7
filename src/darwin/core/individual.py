"""
Individual contract for the Darwin search engine.

Callers represent candidate solutions by subclassing Individual. The engine
never looks inside an individual; it only scores, mutates and recombines it.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from src.darwin.core.exceptions import ContractViolationError


class Individual(ABC):
    """
    A single candidate solution.

    Implementations must treat themselves as immutable: mutate() and
    crossover() return a new individual and leave the receiver untouched.
    Exceptions raised by any of the three operations abort the generation
    in progress and propagate to whoever started the search.
    """

    @abstractmethod
    def fitness(self) -> float:
        """
        Score this individual.

        Returns:
            Fitness score, higher is better
        """
        pass

    @abstractmethod
    def mutate(self, rate: float) -> "Individual":
        """
        Produce a mutated copy of this individual.

        Args:
            rate: Mutation intensity in [0, 1]

        Returns:
            A new individual
        """
        pass

    @abstractmethod
    def crossover(self, partner: "Individual") -> "Individual":
        """
        Produce a child from this individual and a partner.

        Args:
            partner: Individual of the same concrete class

        Returns:
            A new individual

        Raises:
            ContractViolationError: If partner is of a different class
        """
        pass

    def _check_partner(self, partner: "Individual") -> None:
        """Raise ContractViolationError unless partner is of our own class."""
        if type(partner) is not type(self):
            raise ContractViolationError(
                f"expected crossover partner of type {type(self).__name__}, "
                f"got {type(partner).__name__}",
                expected=type(self),
                received=type(partner)
            )


@dataclass(frozen=True)
class ScoredIndividual:
    """
    An individual paired with the score it received in one population.

    Scores are only meaningful within the population that produced them;
    they are recomputed after every crossover and mutation pass.
    """

    individual: Individual
    score: float = 0.0

    def __lt__(self, other: "ScoredIndividual") -> bool:
        """Compare pairs by score (for sorting)."""
        return self.score < other.score
