"""
Darwin Core Module - Search Engine Components.

This module contains the core components of the Darwin search engine,
including configuration, the individual contract, population management,
fitness evaluation, selection strategies and the generational controller.
"""

from src.darwin.core.exceptions import (
    DarwinError,
    ConfigurationError,
    ContractViolationError,
    PopulationError,
    EvaluationError,
    SelectionError,
    CrossoverError,
    MutationError,
    CancellationError,
    NoResultError,
    SearchInProgressError
)

from src.darwin.core.individual import (
    Individual,
    ScoredIndividual
)

from src.darwin.core.evaluation import (
    evaluate_population,
    score_individuals
)

from src.darwin.core.population import (
    Population,
    validate_individuals
)

from src.darwin.core.selection import (
    SelectionMethod,
    roulette,
    tournament
)

from src.darwin.core.mutation import adaptive_mutation_rate

from src.darwin.core.config import (
    DarwinConfig,
    EvolutionParameters,
    ParallelizationConfig,
    LoggingConfig
)

from src.darwin.core.controller import (
    Controller,
    SearchState
)

__all__ = [
    # Errors
    "DarwinError",
    "ConfigurationError",
    "ContractViolationError",
    "PopulationError",
    "EvaluationError",
    "SelectionError",
    "CrossoverError",
    "MutationError",
    "CancellationError",
    "NoResultError",
    "SearchInProgressError",

    # Individual contract
    "Individual",
    "ScoredIndividual",

    # Fitness evaluation
    "evaluate_population",
    "score_individuals",

    # Population management
    "Population",
    "validate_individuals",

    # Selection and mutation
    "SelectionMethod",
    "roulette",
    "tournament",
    "adaptive_mutation_rate",

    # Configuration
    "DarwinConfig",
    "EvolutionParameters",
    "ParallelizationConfig",
    "LoggingConfig",

    # Controller
    "Controller",
    "SearchState"
]
