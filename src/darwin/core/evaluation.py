"""
Concurrent fitness evaluation for Darwin populations.

Scores every individual of a generation exactly once, optionally spreading
the work over a bounded thread pool, and returns the pairs sorted best first.
"""

import math
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from numbers import Real
from typing import Iterable, List, Union

import logfire

from src.darwin.core.exceptions import EvaluationError
from src.darwin.core.individual import Individual, ScoredIndividual


def _score(individual: Individual) -> ScoredIndividual:
    """Score a single individual, wrapping any failure in EvaluationError."""
    try:
        score = individual.fitness()
    except Exception as e:
        raise EvaluationError(
            f"fitness evaluation failed for {individual!r}: {e}",
            individual=individual
        ) from e

    if isinstance(score, bool) or not isinstance(score, Real):
        raise EvaluationError(
            f"fitness of {individual!r} is not a real number: {score!r}",
            individual=individual
        )
    score = float(score)
    if math.isnan(score):
        raise EvaluationError(f"fitness of {individual!r} is NaN", individual=individual)

    return ScoredIndividual(individual=individual, score=score)


def _sequential_evaluation(individuals: List[Individual]) -> List[ScoredIndividual]:
    """Evaluate individuals one after another on the calling thread."""
    return [_score(individual) for individual in individuals]


def _parallel_evaluation(individuals: List[Individual], workers: int) -> List[ScoredIndividual]:
    """Evaluate individuals on a pool of worker threads."""
    executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="darwin-fitness")
    try:
        futures = [executor.submit(_score, individual) for individual in individuals]
        done, pending = wait(futures, return_when=FIRST_EXCEPTION)

        for future in done:
            error = future.exception()
            if error is not None:
                for other in pending:
                    other.cancel()
                raise error

        return [future.result() for future in futures]
    finally:
        executor.shutdown(wait=True, cancel_futures=True)


def score_individuals(
    individuals: Iterable[Union[Individual, ScoredIndividual]],
    workers: int = 1
) -> List[ScoredIndividual]:
    """Score every individual, keeping the input order."""
    members = [
        item.individual if isinstance(item, ScoredIndividual) else item
        for item in individuals
    ]
    workers = max(1, int(workers))

    with logfire.span("Evaluate Population", size=len(members), workers=workers):
        if workers == 1 or len(members) <= 1:
            return _sequential_evaluation(members)
        return _parallel_evaluation(members, min(workers, len(members)))


def evaluate_population(
    individuals: Iterable[Union[Individual, ScoredIndividual]],
    workers: int = 1
) -> List[ScoredIndividual]:
    """
    Score every individual and sort the result by score, best first.

    Args:
        individuals: Individuals or previously scored pairs; pairs are rescored
        workers: Number of worker threads, values below 1 are treated as 1

    Returns:
        One ScoredIndividual per input, sorted by descending score

    Raises:
        EvaluationError: On the first fitness failure; no partial result is returned
    """
    scored = score_individuals(individuals, workers)
    scored.sort(key=lambda pair: pair.score, reverse=True)
    return scored
