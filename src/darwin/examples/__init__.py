"""
Example individuals for the Darwin search engine.

Two ready-made representations showing how callers implement the
Individual contract: string matching and the traveling salesman.
"""

from src.darwin.examples.distance import TargetString, levenshtein
from src.darwin.examples.salesman import City, Tour

__all__ = [
    "TargetString",
    "levenshtein",
    "City",
    "Tour"
]
