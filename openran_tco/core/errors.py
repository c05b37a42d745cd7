"""
Errors raised at the computation boundary.
"""


class ComputationError(ValueError):
    """Raised when a run cannot produce a well-formed projection.

    Covers an empty horizon and non-finite numbers reaching the engine.
    Unresolvable scope references are not errors.
    """
