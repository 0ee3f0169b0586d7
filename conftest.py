"""
PyTest configuration and fixtures for the Darwin search engine.

This module provides shared test fixtures: a controllable fake individual,
population and configuration factories, and deterministic random sources.
"""

import os
import sys
from dataclasses import dataclass, field, replace
from typing import Any, Callable, List, Optional

import numpy as np
import pytest
import logfire

# Add project root to Python path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from src.core.config import settings
from src.darwin import DarwinConfig, Individual, roulette


# Override settings for testing
settings.environment = "testing"
settings.logfire_environment = "testing"

# Keep spans local during tests
logfire.configure(send_to_logfire=False, console=False)


@dataclass(frozen=True)
class FakeIndividual(Individual):
    """Individual with a fixed score that records how often it is scored."""

    id: int = 0
    score: float = 0.0
    fitness_error: Optional[Exception] = None
    operator_error: Optional[Exception] = None
    mutations: int = 0
    crossovers: int = 0
    last_rate: Optional[float] = None
    calls: List[int] = field(default_factory=list, compare=False, repr=False)

    def fitness(self) -> float:
        self.calls.append(self.id)
        if self.fitness_error is not None:
            raise self.fitness_error
        return self.score

    def mutate(self, rate: float) -> "FakeIndividual":
        if self.operator_error is not None:
            raise self.operator_error
        return replace(self, mutations=self.mutations + 1, last_rate=rate)

    def crossover(self, partner: Individual) -> "FakeIndividual":
        self._check_partner(partner)
        if self.operator_error is not None:
            raise self.operator_error
        return replace(self, crossovers=self.crossovers + 1)


class PinnedRandom:
    """Random source whose draws are fixed in advance."""

    def __init__(self, *draws: float):
        self.draws = list(draws)
        self.count = 0

    def random(self) -> float:
        value = self.draws[min(self.count, len(self.draws) - 1)]
        self.count += 1
        return value


@pytest.fixture
def fitness_calls() -> List[int]:
    """Ids of every individual scored during a test, in call order."""
    return []


@pytest.fixture
def make_individual(fitness_calls) -> Callable[..., FakeIndividual]:
    """Factory for fake individuals sharing one call log."""

    def _make(id: int = 0, score: float = 0.0, fitness_error: Optional[Exception] = None,
              operator_error: Optional[Exception] = None) -> FakeIndividual:
        return FakeIndividual(id=id, score=score, fitness_error=fitness_error,
                              operator_error=operator_error, calls=fitness_calls)

    return _make


@pytest.fixture
def make_individuals(make_individual) -> Callable[[List[float]], List[FakeIndividual]]:
    """Factory for a list of fake individuals with the given scores, ids 0..n-1."""

    def _make(scores: List[float]) -> List[FakeIndividual]:
        return [make_individual(id=i, score=score) for i, score in enumerate(scores)]

    return _make


@pytest.fixture
def make_config(make_individuals) -> Callable[..., DarwinConfig]:
    """Factory for search configurations with test-friendly defaults."""

    def _make(scores: Optional[List[float]] = None, **overrides: Any) -> DarwinConfig:
        evolution = {
            "elitism": 0,
            "mutation_rate": 0.5,
            "crossover_rate": 0.5,
            "target_fitness": 10.0,
            **overrides.pop("evolution", {})
        }
        data = {
            "evolution": evolution,
            "selection_method": roulette(),
            "initial_population": make_individuals(scores or [0, 1, 2, 3, 5]),
            "logging": {"enable_logging": False, "metrics_export": False},
            **overrides
        }
        return DarwinConfig(**data)

    return _make


@pytest.fixture
def rng() -> np.random.Generator:
    """Seeded random generator for reproducible searches."""
    return np.random.default_rng(1234)


@pytest.fixture
def pinned_rng() -> Callable[..., PinnedRandom]:
    """Factory for random sources returning fixed draws."""
    return PinnedRandom


# Test markers
pytest.mark.slow = pytest.mark.slow
pytest.mark.integration = pytest.mark.integration
pytest.mark.unit = pytest.mark.unit
