"""Exceptions raised by the quoting engine."""


class QuoteError(ValueError):
    """Base class for every error the quoting engine raises."""


class InvalidInputError(QuoteError):
    """The trip request is malformed and cannot be evaluated."""


class InvalidRangeError(InvalidInputError):
    """The trip ends before it starts."""


class CatalogError(QuoteError):
    """The insurance catalog configuration is malformed."""
