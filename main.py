"""
Darwin Evolutionary Search - Demo Entry Point

This module configures observability through Logfire and evolves a population
of random strings toward a target phrase, cancelling the search if it runs
past a deadline.
"""

import random
import sys
import threading
from typing import Optional

from dotenv import load_dotenv

from src.core import configure_logfire, settings
from src.darwin import CancellationError, Controller, DarwinConfig, tournament
from src.darwin.examples import TargetString

# Load environment variables
load_dotenv()


def run_demo(
    target: str = "this is the target string",
    population_size: int = 100,
    timeout: float = 60.0,
    num_workers: int = 1,
    random_seed: Optional[int] = None
) -> TargetString:
    """
    Evolve random strings until one matches target exactly.

    Returns:
        The best string found

    Raises:
        CancellationError: If no exact match was found within timeout seconds
    """
    config = DarwinConfig.from_env(
        evolution={
            "elitism": 2,
            "mutation_rate": 0.3,
            "crossover_rate": 0.8,
            "adaptive_mutation": True,
            "target_fitness": 0.0,
        },
        parallelization={"num_workers": num_workers},
        selection_method=tournament(3),
        initial_population=TargetString.random_population(
            population_size, target, random.Random(random_seed)
        ),
        random_seed=random_seed,
    )
    controller = Controller(config)

    cancel = threading.Event()
    timer = threading.Timer(timeout, cancel.set)
    timer.start()
    try:
        return controller.run(cancel)
    finally:
        timer.cancel()


if __name__ == "__main__":
    configure_logfire(settings)
    phrase = sys.argv[1] if len(sys.argv) > 1 else "this is the target string"
    try:
        best = run_demo(phrase)
    except CancellationError as e:
        print(f"No match found: {e}")
        sys.exit(1)
    print(f"Found: {best}")
