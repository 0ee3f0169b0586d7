"""
Search Controller for the Darwin Framework.

This module implements the generational state machine that drives a search:
scoring the initial population, then repeating crossover, mutation and
rescoring until an individual reaches the target fitness or the search is
cancelled.
"""

import asyncio
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import wait as wait_futures
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union

import logfire
import numpy as np

from src.darwin.core.config import DarwinConfig
from src.darwin.core.exceptions import (
    CancellationError,
    ConfigurationError,
    CrossoverError,
    DarwinError,
    MutationError,
    NoResultError,
    SearchInProgressError,
)
from src.darwin.core.individual import Individual
from src.darwin.core.mutation import adaptive_mutation_rate
from src.darwin.core.population import Population


class SearchState(Enum):
    """Stages of a search."""
    SEEDING = "seeding"
    SCORING = "scoring"
    EVALUATING = "evaluating"
    CROSSOVER = "crossover"
    MUTATION = "mutation"
    CONVERGED = "converged"
    CANCELLED = "cancelled"
    FAILED = "failed"


class Controller:
    """
    Coordinates one run of the genetic algorithm.

    The generational loop runs on a single thread; only fitness scoring is
    parallel. A search started with start() hands its outcome back through a
    one-shot future that wait() consumes exactly once.
    """

    max_history = 100

    def __init__(
        self,
        config: Union[DarwinConfig, Mapping[str, Any]],
        rng: Optional[np.random.Generator] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the controller.

        Args:
            config: Search configuration, or a mapping of its fields
            rng: Random generator driving crossover, mutation and selection;
                defaults to one seeded from config.random_seed
            logger: Optional logger instance

        Raises:
            ConfigurationError: If the configuration is invalid
        """
        if not isinstance(config, DarwinConfig):
            if not isinstance(config, Mapping):
                raise ConfigurationError(
                    f"expected DarwinConfig or mapping, got {type(config).__name__}"
                )
            config = DarwinConfig(**config)

        self.config = config
        self.rng = rng if rng is not None else np.random.default_rng(config.random_seed)
        self.logger = logger or self._setup_logger()

        self.population: Population = Population.from_individuals(config.initial_population)

        # State tracking
        self.state = SearchState.SEEDING
        self.generation = 0
        self.total_evaluations = 0
        self.history: List[Dict[str, Any]] = []
        self.start_time: Optional[datetime] = None

        # One-shot result handoff
        self._lock = threading.Lock()
        self._result: Optional[Future] = None
        self._stop = threading.Event()

    def _setup_logger(self) -> logging.Logger:
        """Setup default logger."""
        logger = logging.getLogger("darwin.controller")
        logger.setLevel(getattr(logging, self.config.logging.log_level))

        if not logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            logger.addHandler(handler)

        return logger

    def run(self, cancel_event: Optional[threading.Event] = None) -> Individual:
        """
        Run the search until an individual reaches the target fitness.

        Returns:
            The fittest individual of the converged population

        Raises:
            CancellationError: If cancel_event was set before convergence
            DarwinError: If any generation failed
        """
        self.start(cancel_event)
        return self.wait()

    def start(self, cancel_event: Optional[threading.Event] = None) -> None:
        """
        Begin the search on a background thread and return immediately.

        Args:
            cancel_event: Setting this event stops the search at the next
                generation boundary

        Raises:
            SearchInProgressError: If a previous result has not been consumed
        """
        with self._lock:
            if self._result is not None:
                raise SearchInProgressError("a search result is still pending; call wait() first")
            self._stop = threading.Event()
            executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="darwin-search")
            self._result = executor.submit(self._search, cancel_event, self._stop)
            executor.shutdown(wait=False)

    def wait(self, timeout: Optional[float] = None) -> Individual:
        """
        Block until the running search delivers its result.

        Args:
            timeout: Seconds to wait; None waits for as long as it takes

        Returns:
            The fittest individual of the converged population

        Raises:
            NoResultError: If no search was started or its result was consumed
            TimeoutError: If the search is still running after timeout; the
                result stays pending
            CancellationError: If the search was cancelled
            DarwinError: If the search failed
        """
        future = self._pending_result()
        done, _ = wait_futures([future], timeout=timeout)
        if not done:
            raise TimeoutError(f"search still running after {timeout}s")
        self._consume(future)
        return future.result()

    async def evolve(self, cancel_event: Optional[threading.Event] = None) -> Individual:
        """
        Start the search and await its result from asyncio code.

        Cancelling the awaiting task stops the search at the next generation
        boundary and discards its result, so the controller can be started again.
        """
        self.start(cancel_event)
        stop = self._stop
        future = self._pending_result()
        try:
            return await asyncio.wrap_future(future)
        except asyncio.CancelledError:
            stop.set()
            future.add_done_callback(self._release)
            raise
        finally:
            if future.done():
                self._release(future)

    def fittest(self) -> Individual:
        """Return the fittest individual of the current population."""
        return self.population.fittest()

    def _pending_result(self) -> Future:
        with self._lock:
            if self._result is None:
                raise NoResultError("no search result available")
            return self._result

    def _consume(self, future: Future) -> None:
        with self._lock:
            if self._result is not future:
                raise NoResultError("search result was already consumed")
            self._result = None

    def _release(self, future: Future) -> None:
        with self._lock:
            if self._result is future:
                self._result = None

    def _search(self, cancel_event: Optional[threading.Event],
                stop: threading.Event) -> Individual:
        """Generational loop; runs on the search thread."""
        evolution = self.config.evolution

        with logfire.span("Darwin search",
                          population_size=len(self.population),
                          target_fitness=evolution.target_fitness):
            self.start_time = datetime.now()
            self.logger.info(f"Starting search with configuration {self.config.to_dict()}")

            try:
                self._set_state(SearchState.SCORING)
                self._score_population()

                while not self.population.target_met(evolution.target_fitness):
                    self._set_state(SearchState.EVALUATING)
                    if stop.is_set() or (cancel_event is not None and cancel_event.is_set()):
                        raise CancellationError(generation=self.generation)
                    self._next_generation()

            except CancellationError:
                self._set_state(SearchState.CANCELLED)
                self.logger.warning(f"Search cancelled after {self.generation} generations")
                raise
            except Exception as e:
                self._set_state(SearchState.FAILED)
                self.logger.error(f"Search failed at generation {self.generation}: {e}")
                raise

            self._set_state(SearchState.CONVERGED)
            best_score = self.population.fittest_score()
            elapsed_time = datetime.now() - self.start_time
            self.logger.info(
                f"Converged after {self.generation} generations in {elapsed_time}: "
                f"best score {best_score:.4f} (target {evolution.target_fitness})"
            )
            logfire.info("Search converged",
                         generation=self.generation,
                         best_fitness=best_score,
                         total_evaluations=self.total_evaluations)

            return self.population.fittest()

    def _set_state(self, state: SearchState) -> None:
        self.state = state
        self.logger.debug(f"Generation {self.generation}: {state.value}")

    def _score_population(self) -> None:
        self.population = self.population.scored_and_sorted(
            self.config.parallelization.num_workers
        )
        self.total_evaluations += len(self.population)

    def _next_generation(self) -> None:
        """Perform one full generation: crossover, mutation, rescoring."""
        self.generation += 1
        with logfire.span("Generation {generation}", generation=self.generation):
            self._set_state(SearchState.CROSSOVER)
            self.population = self._perform_crossovers(self.population)

            self._set_state(SearchState.MUTATION)
            self.population = self._perform_mutations(self.population)

            self._set_state(SearchState.SCORING)
            self._score_population()

            self._record_history()

    def _perform_crossovers(self, population: Population) -> Population:
        """Breed every non-elite individual that wins the crossover draw."""
        elitism = self.config.evolution.elitism
        crossover_rate = self.config.evolution.crossover_rate
        select = self.config.selection_method

        next_generation = []
        for position, member in enumerate(population):
            if position >= elitism and crossover_rate > self.rng.random():
                partner = select(population, self.rng)
                try:
                    child = member.individual.crossover(partner)
                except DarwinError:
                    raise
                except Exception as e:
                    raise CrossoverError(
                        f"crossover failed at position {position}: {e}", position=position
                    ) from e
                next_generation.append(child)
            else:
                # Carried into the next generation unchanged
                next_generation.append(member.individual)

        return Population.from_individuals(next_generation)

    def _perform_mutations(self, population: Population) -> Population:
        """Mutate every non-elite individual that wins the mutation draw."""
        evolution = self.config.evolution

        if evolution.adaptive_mutation:
            # Crossover children are unscored; rank them where they stand
            population = population.rescored(self.config.parallelization.num_workers)
            self.total_evaluations += len(population)
            avg_fitness = population.avg_fitness()
            fittest_score = population.fittest_score()

        next_generation = []
        for position, member in enumerate(population):
            mutation_rate = evolution.mutation_rate
            if evolution.adaptive_mutation:
                mutation_rate = adaptive_mutation_rate(
                    member.score, avg_fitness, fittest_score, evolution.mutation_rate
                )

            if position >= evolution.elitism and mutation_rate > self.rng.random():
                try:
                    mutated = member.individual.mutate(mutation_rate)
                except DarwinError:
                    raise
                except Exception as e:
                    raise MutationError(
                        f"mutation failed at position {position}: {e}",
                        position=position,
                        mutation_rate=mutation_rate
                    ) from e
                next_generation.append(mutated)
            else:
                next_generation.append(member.individual)

        return Population.from_individuals(next_generation)

    def _record_history(self) -> None:
        """Record and report population statistics for this generation."""
        stats = self.population.calculate_statistics()
        self.history.append({"generation": self.generation, **stats})
        if len(self.history) > self.max_history:
            self.history = self.history[-self.max_history:]

        log_config = self.config.logging
        if self.generation % log_config.log_interval != 0:
            return

        if log_config.enable_logging:
            self.logger.info(
                f"Generation {self.generation}: "
                f"Best: {stats['best_fitness']:.4f}, "
                f"Avg: {stats['avg_fitness']:.4f}, "
                f"Std: {stats['fitness_std']:.4f}"
            )
        if log_config.metrics_export:
            logfire.info("Evolution Progress",
                         evolution_generation=self.generation,
                         total_evaluations=self.total_evaluations,
                         **stats)
