"""Common base for payments domain errors."""


class PaymentsError(Exception):
    """Base class for every error a single record can be rejected with."""
