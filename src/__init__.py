"""
Darwin Evolutionary Search - Source Package

This package contains the Darwin search engine, its example individuals
and the application settings used by the demo entry point.
"""

__version__ = "1.0.0"
__author__ = "DevQ.ai Team"
__email__ = "dion@devq.ai"

# Package-level imports for convenience
from src.core.config import settings

__all__ = [
    "settings",
    "__version__",
    "__author__",
    "__email__"
]
