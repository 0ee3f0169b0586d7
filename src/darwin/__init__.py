"""
Darwin Evolutionary Search Framework.

A domain-agnostic genetic algorithm engine: callers supply individuals that
can be scored, mutated and recombined; Darwin supplies the generational loop,
concurrent fitness scoring, selection strategies and adaptive mutation.
"""

from src.darwin.core import (
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
    SearchInProgressError,
    Individual,
    ScoredIndividual,
    evaluate_population,
    Population,
    SelectionMethod,
    roulette,
    tournament,
    adaptive_mutation_rate,
    DarwinConfig,
    EvolutionParameters,
    ParallelizationConfig,
    LoggingConfig,
    Controller,
    SearchState
)

__version__ = "1.0.0"

__all__ = [
    # Configuration
    "DarwinConfig",
    "EvolutionParameters",
    "ParallelizationConfig",
    "LoggingConfig",
    # Individuals and populations
    "Individual",
    "ScoredIndividual",
    "Population",
    "evaluate_population",
    # Selection and mutation
    "SelectionMethod",
    "roulette",
    "tournament",
    "adaptive_mutation_rate",
    # Controller
    "Controller",
    "SearchState",
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
    "SearchInProgressError"
]
