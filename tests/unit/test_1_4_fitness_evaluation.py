"""
Unit tests for concurrent fitness evaluation (Subtask 1.4).

Tests cover:
- Exactly-once scoring for every worker count
- Ordering of the result
- Failure propagation and worker cleanup
- Rejection of non-numeric scores
"""

import threading

import pytest

from src.darwin import EvaluationError, Individual, ScoredIndividual, evaluate_population
from src.darwin.core.evaluation import score_individuals


class RendezvousIndividual(Individual):
    """Individual whose fitness blocks until a partner is scored at the same time."""

    def __init__(self, barrier: threading.Barrier, score: float):
        self.barrier = barrier
        self.score = score

    def fitness(self) -> float:
        self.barrier.wait(timeout=5)
        return self.score

    def mutate(self, rate: float) -> "RendezvousIndividual":
        return self

    def crossover(self, partner: Individual) -> "RendezvousIndividual":
        return self


class TestEvaluatePopulation:
    """Test suite for evaluate_population."""

    @pytest.mark.parametrize("workers", [1, 2, 3, 8])
    def test_every_individual_scored_once(self, make_individuals, fitness_calls, workers):
        """Test that each individual is scored exactly once."""
        individuals = make_individuals([float(i % 4) for i in range(20)])

        result = evaluate_population(individuals, workers)

        assert sorted(fitness_calls) == list(range(20))
        assert len(result) == 20
        assert {id(pair.individual) for pair in result} == {id(i) for i in individuals}

    @pytest.mark.parametrize("workers", [1, 4])
    def test_result_sorted_descending(self, make_individuals, workers):
        """Test that the best individual comes first."""
        result = evaluate_population(make_individuals([2, 9, -1, 5, 0]), workers)

        assert [pair.score for pair in result] == [9.0, 5.0, 2.0, 0.0, -1.0]
        assert result[0].individual.id == 1

    @pytest.mark.parametrize("workers", [0, -3, 20])
    def test_worker_count_clamped(self, make_individuals, fitness_calls, workers):
        """Test that unusable worker counts still score everything."""
        result = evaluate_population(make_individuals([1, 2, 3]), workers)

        assert sorted(fitness_calls) == [0, 1, 2]
        assert [pair.score for pair in result] == [3.0, 2.0, 1.0]

    def test_scored_pairs_are_rescored(self, make_individual):
        """Test that stale scores are replaced."""
        stale = [ScoredIndividual(make_individual(id=0, score=7), 0.0)]

        result = evaluate_population(stale)

        assert result[0].score == 7.0

    def test_scoring_runs_concurrently(self):
        """Test that two workers score two individuals at the same time."""
        barrier = threading.Barrier(2)
        individuals = [RendezvousIndividual(barrier, 1), RendezvousIndividual(barrier, 2)]

        result = evaluate_population(individuals, workers=2)

        assert [pair.score for pair in result] == [2.0, 1.0]

    def test_score_individuals_keeps_order(self, make_individuals):
        """Test the order-preserving variant."""
        result = score_individuals(make_individuals([2, 9, -1]), workers=2)

        assert [pair.score for pair in result] == [2.0, 9.0, -1.0]


class TestEvaluationFailures:
    """Test suite for fitness failures."""

    @pytest.mark.parametrize("workers", [1, 4])
    def test_failure_wrapped_with_cause(self, make_individual, workers):
        """Test that a failing fitness is reported with its individual and cause."""
        cause = ValueError("bad genome")
        failing = make_individual(id=2, fitness_error=cause)
        individuals = [make_individual(id=0), make_individual(id=1), failing]

        with pytest.raises(EvaluationError) as exc_info:
            evaluate_population(individuals, workers)

        assert exc_info.value.individual is failing
        assert exc_info.value.__cause__ is cause

    def test_workers_released_after_failure(self, make_individual):
        """Test that no scoring thread outlives a failed pass."""
        individuals = [make_individual(id=i) for i in range(10)]
        individuals[3] = make_individual(id=3, fitness_error=RuntimeError("boom"))

        with pytest.raises(EvaluationError):
            evaluate_population(individuals, workers=4)

        alive = [t.name for t in threading.enumerate() if t.name.startswith("darwin-fitness")]
        assert alive == []

    @pytest.mark.parametrize("score", [float("nan"), "high", None, True])
    def test_non_numeric_score_rejected(self, make_individual, score):
        """Test that scores must be real numbers."""
        with pytest.raises(EvaluationError):
            evaluate_population([make_individual(score=score)])

    def test_infinite_score_accepted(self, make_individual):
        """Test that infinities still rank."""
        result = evaluate_population([
            make_individual(id=0, score=1),
            make_individual(id=1, score=float("-inf"))
        ])

        assert result[0].individual.id == 0
