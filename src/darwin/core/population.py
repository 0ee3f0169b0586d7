"""
Population Management for the Darwin search engine.

A population is an ordered, non-empty sequence of scored individuals. It is
built once per pass, answers ranking queries, and delegates scoring to the
concurrent fitness evaluator.
"""

from collections.abc import Sequence as SequenceABC
from typing import Any, Dict, Generic, Iterator, List, Sequence, TypeVar

import numpy as np

from src.darwin.core.evaluation import evaluate_population, score_individuals
from src.darwin.core.exceptions import ContractViolationError, PopulationError
from src.darwin.core.individual import Individual, ScoredIndividual

I = TypeVar("I", bound=Individual)


def validate_individuals(collection: Any) -> List[Individual]:
    """
    Check that a caller-supplied collection can seed a population.

    Args:
        collection: Candidate individuals

    Returns:
        The members as a list, in their original order

    Raises:
        PopulationError: If the collection is not a sequence or is empty
        ContractViolationError: If a member is not an Individual, or the
            members are not all of the same concrete class
    """
    if isinstance(collection, (str, bytes)) or not isinstance(collection, SequenceABC):
        raise PopulationError(
            f"population has type {type(collection).__name__}; expecting a sequence of individuals"
        )
    if len(collection) == 0:
        raise PopulationError("population must contain at least one individual")

    members = list(collection)
    kind = type(members[0])
    for position, member in enumerate(members):
        if not isinstance(member, Individual):
            raise ContractViolationError(
                f"element {position} of type {type(member).__name__} does not implement Individual",
                expected=Individual,
                received=type(member)
            )
        if type(member) is not kind:
            raise ContractViolationError(
                f"element {position} has type {type(member).__name__}; population is "
                f"made of {kind.__name__}",
                expected=kind,
                received=type(member)
            )
    return members


class Population(Generic[I]):
    """
    Scored individuals of a single generation.

    After score_and_sort() the members are ordered by descending score, so
    position 0 holds the fittest individual. The ranking queries do not rely
    on that order.
    """

    def __init__(self, members: Sequence[ScoredIndividual]):
        """Wrap already scored pairs. Use from_individuals() for caller input."""
        if not members:
            raise PopulationError("population must contain at least one individual")
        self._members: List[ScoredIndividual] = list(members)

    @classmethod
    def from_individuals(cls, collection: Sequence[I]) -> "Population[I]":
        """
        Build an unscored population from caller-supplied individuals.

        Every member starts with a score of 0 until the next scoring pass.
        """
        members = validate_individuals(collection)
        return cls([ScoredIndividual(individual=member, score=0.0) for member in members])

    def __len__(self) -> int:
        return len(self._members)

    def __iter__(self) -> Iterator[ScoredIndividual]:
        return iter(self._members)

    def __getitem__(self, index: int) -> ScoredIndividual:
        return self._members[index]

    def __repr__(self) -> str:
        return f"Population(size={len(self._members)}, best={max(self.scores):.4f})"

    @property
    def members(self) -> List[ScoredIndividual]:
        """Scored pairs in their current order."""
        return list(self._members)

    @property
    def individuals(self) -> List[I]:
        """Individuals in their current order."""
        return [member.individual for member in self._members]

    @property
    def scores(self) -> List[float]:
        """Scores in their current order."""
        return [member.score for member in self._members]

    def target_met(self, threshold: float) -> bool:
        """Return True if any individual has met or exceeded the threshold."""
        return any(member.score >= threshold for member in self._members)

    def fittest(self) -> I:
        """Return the individual with the highest score."""
        if not self._members:
            raise PopulationError("population is empty")
        best = self._members[0]
        for member in self._members[1:]:
            if member.score > best.score:
                best = member
        return best.individual

    def fittest_score(self) -> float:
        """Return the highest score in the population."""
        if not self._members:
            raise PopulationError("population is empty")
        return max(member.score for member in self._members)

    def total_fitness(self) -> float:
        """Return the sum of all scores."""
        return float(sum(member.score for member in self._members))

    def avg_fitness(self) -> float:
        """Return the mean score."""
        if not self._members:
            raise PopulationError("cannot average the fitness of an empty population")
        return self.total_fitness() / len(self._members)

    def get_elite(self, count: int) -> List[ScoredIndividual]:
        """Return the first count members by rank."""
        return self._members[:max(0, count)]

    def rescored(self, workers: int = 1) -> "Population[I]":
        """Return a new population of the same members, freshly scored, in the same order."""
        return Population(score_individuals(self._members, workers))

    def scored_and_sorted(self, workers: int = 1) -> "Population[I]":
        """Return a new population of the same members, freshly scored, best first."""
        return Population(evaluate_population(self._members, workers))

    def score_and_sort(self, workers: int = 1) -> None:
        """Score every member and order them by descending score."""
        self._members = evaluate_population(self._members, workers)

    def calculate_statistics(self) -> Dict[str, Any]:
        """Calculate score statistics for progress reporting."""
        scores = np.asarray(self.scores, dtype=float)
        return {
            "population_size": int(scores.size),
            "best_fitness": float(scores.max()),
            "worst_fitness": float(scores.min()),
            "avg_fitness": float(scores.mean()),
            "median_fitness": float(np.median(scores)),
            "fitness_std": float(scores.std(ddof=1)) if scores.size > 1 else 0.0
        }
