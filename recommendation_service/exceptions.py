"""
Exceptions raised by the recommendation core.

Only malformed input is an error. An empty candidate list or a reference to an
article that is not among the candidates are normal cases with defined results.
"""


class RecommendationError(Exception):
    """Base class for recommendation errors."""


class InvalidInput(RecommendationError, ValueError):
    """Raised for malformed dates, non-finite weights and invalid records."""
