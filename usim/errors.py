"""
Error types raised by the propagation model.
"""


class InvalidConfiguration(ValueError):
    """
    Raised when a tissue stack or transducer configuration cannot produce finite results.

    Subclasses ValueError so callers that already guard numeric input with
    ``except ValueError`` keep working.
    """
