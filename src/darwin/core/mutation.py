"""Adaptive mutation rate for the Darwin search engine."""


def adaptive_mutation_rate(score: float, avg_fitness: float, fittest_score: float,
                           base_rate: float) -> float:
    """
    Mutation rate of one individual, scaled by where it sits in the population.

    Individuals at or below the average keep the base rate. Above-average
    individuals mutate less the closer they are to the best score. When the
    best score equals the average the population has no spread left, and the
    rate is forced to 1.

    Args:
        score: The individual's own score
        avg_fitness: Mean score of the population
        fittest_score: Best score of the population
        base_rate: Configured mutation rate

    Returns:
        Effective mutation rate
    """
    spread = fittest_score - avg_fitness
    if spread == 0:
        return 1.0
    if score <= avg_fitness:
        return base_rate
    return (fittest_score - score) / spread * base_rate
