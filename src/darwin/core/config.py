"""
Darwin Configuration Module.

This module defines the validated, immutable configuration of a search:
evolution parameters, parallelism, logging, the selection strategy and the
initial population.
"""

from typing import Optional, Dict, Any, Callable, Literal, Tuple
from pydantic import BaseModel, Field, ConfigDict, ValidationError, field_validator
import os

from src.darwin.core.exceptions import (
    ConfigurationError,
    ContractViolationError,
    PopulationError,
)
from src.darwin.core.population import validate_individuals


class _SearchModel(BaseModel):
    """Frozen model reporting invalid input as ConfigurationError."""

    model_config = ConfigDict(frozen=True, extra='forbid')

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as e:
            raise ConfigurationError(
                f"invalid {type(self).__name__}: {e}",
                errors=e.errors(include_url=False)
            ) from e


class EvolutionParameters(_SearchModel):
    """Parameters controlling the generational process."""

    elitism: int = Field(
        default=0,
        ge=0,
        description="Number of top-ranked individuals carried unchanged into the next generation"
    )
    mutation_rate: float = Field(
        default=0.1,
        ge=0.0,
        le=1.0,
        description="Probability that an individual undergoes mutation"
    )
    crossover_rate: float = Field(
        default=0.8,
        ge=0.0,
        le=1.0,
        description="Probability that an individual breeds with a selected partner"
    )
    adaptive_mutation: bool = Field(
        default=False,
        description="Scale each individual's mutation rate by its rank in the population"
    )
    target_fitness: float = Field(
        description="Fitness score at which the search terminates"
    )


class ParallelizationConfig(_SearchModel):
    """Configuration for parallel fitness evaluation."""

    num_workers: int = Field(
        default=1,
        ge=1,
        description="Number of threads scoring a population"
    )


class LoggingConfig(_SearchModel):
    """Configuration for logging and monitoring."""

    enable_logging: bool = Field(
        default=True,
        description="Enable progress logging"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level"
    )
    log_interval: int = Field(
        default=10,
        ge=1,
        description="Generations between progress logs"
    )
    metrics_export: bool = Field(
        default=True,
        description="Export per-generation statistics to logfire"
    )


class DarwinConfig(_SearchModel):
    """Complete configuration of one search."""

    evolution: EvolutionParameters = Field(
        description="Evolution parameters"
    )
    parallelization: ParallelizationConfig = Field(
        default_factory=ParallelizationConfig,
        description="Parallel processing configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging and monitoring configuration"
    )

    selection_method: Callable[..., Any] = Field(
        description="Strategy choosing a crossover partner"
    )
    initial_population: Tuple[Any, ...] = Field(
        description="Individuals of the first generation"
    )
    random_seed: Optional[int] = Field(
        default=None,
        description="Random seed for reproducibility"
    )

    @field_validator('initial_population', mode='before')
    @classmethod
    def validate_initial_population(cls, v):
        """Ensure the population is a non-empty sequence of one Individual class."""
        try:
            return tuple(validate_individuals(v))
        except (PopulationError, ContractViolationError) as e:
            raise ValueError(str(e)) from e

    @classmethod
    def from_env(cls, **overrides: Any) -> "DarwinConfig":
        """
        Create configuration from environment variables.

        Values in overrides take precedence; the selection method and the
        initial population can only be given as overrides.
        """
        config_dict: Dict[str, Any] = {}

        # Evolution parameters from env
        if elitism := os.getenv("DARWIN_ELITISM"):
            config_dict.setdefault("evolution", {})["elitism"] = elitism
        if mutation_rate := os.getenv("DARWIN_MUTATION_RATE"):
            config_dict.setdefault("evolution", {})["mutation_rate"] = mutation_rate
        if crossover_rate := os.getenv("DARWIN_CROSSOVER_RATE"):
            config_dict.setdefault("evolution", {})["crossover_rate"] = crossover_rate
        if adaptive := os.getenv("DARWIN_ADAPTIVE_MUTATION"):
            config_dict.setdefault("evolution", {})["adaptive_mutation"] = adaptive
        if target := os.getenv("DARWIN_TARGET_FITNESS"):
            config_dict.setdefault("evolution", {})["target_fitness"] = target

        # Parallelization from env
        if num_workers := os.getenv("DARWIN_NUM_WORKERS"):
            config_dict.setdefault("parallelization", {})["num_workers"] = num_workers

        # Logging from env
        if log_level := os.getenv("DARWIN_LOG_LEVEL"):
            config_dict.setdefault("logging", {})["log_level"] = log_level.upper()

        # General settings
        if random_seed := os.getenv("DARWIN_RANDOM_SEED"):
            config_dict["random_seed"] = random_seed

        for key, value in overrides.items():
            if isinstance(value, dict) and isinstance(config_dict.get(key), dict):
                config_dict[key] = {**config_dict[key], **value}
            else:
                config_dict[key] = value

        return cls(**config_dict)

    def to_dict(self) -> Dict[str, Any]:
        """Summarise the configuration without the population or strategy objects."""
        summary = self.model_dump(exclude={"initial_population", "selection_method"})
        summary["selection_method"] = getattr(
            self.selection_method, "__name__", type(self.selection_method).__name__
        )
        summary["population_size"] = len(self.initial_population)
        return summary
