"""
Exception hierarchy for the Darwin search engine.

Every failure of a search surfaces as a subclass of DarwinError so callers
can separate "the search was stopped" (CancellationError) from "the search
is broken" (everything else).
"""

from typing import Any, Dict, List, Optional


class DarwinError(Exception):
    """Base exception for all Darwin search errors."""
    pass


class ConfigurationError(DarwinError, ValueError):
    """Raised when a search configuration is invalid."""

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.errors = errors or []


class ContractViolationError(DarwinError, TypeError):
    """Raised when a value does not honour the Individual contract."""

    def __init__(self, message: str, expected: Optional[type] = None,
                 received: Optional[type] = None):
        super().__init__(message)
        self.expected = expected
        self.received = received


class PopulationError(DarwinError, ValueError):
    """Raised when population construction or a ranking query fails."""
    pass


class EvaluationError(DarwinError):
    """Raised when a fitness computation fails."""

    def __init__(self, message: str, individual: Any = None):
        super().__init__(message)
        self.individual = individual


class SelectionError(DarwinError):
    """Raised when a selection strategy cannot pick a partner."""

    def __init__(self, message: str, population_size: Optional[int] = None,
                 selection_type: Optional[str] = None):
        super().__init__(message)
        self.population_size = population_size
        self.selection_type = selection_type


class CrossoverError(DarwinError):
    """Raised when an individual's crossover fails unexpectedly."""

    def __init__(self, message: str, position: Optional[int] = None):
        super().__init__(message)
        self.position = position


class MutationError(DarwinError):
    """Raised when an individual's mutation fails unexpectedly."""

    def __init__(self, message: str, position: Optional[int] = None,
                 mutation_rate: Optional[float] = None):
        super().__init__(message)
        self.position = position
        self.mutation_rate = mutation_rate


class CancellationError(DarwinError):
    """Raised when a search is cancelled before reaching the target fitness."""

    def __init__(self, message: str = "search cancelled before convergence",
                 generation: Optional[int] = None):
        super().__init__(message)
        self.generation = generation


class NoResultError(DarwinError):
    """Raised by Controller.wait() when no search result is pending."""
    pass


class SearchInProgressError(DarwinError):
    """Raised by Controller.start() while a previous result is still pending."""
    pass
