"""Errors raised by the swap suggestion engine."""


class SwapError(Exception):
    """Base class for swap engine errors."""


class InvalidGoalError(SwapError, ValueError):
    """A goal, or the number of goals, is not usable."""


class EmptyMealError(SwapError, ValueError):
    """A meal has no ingredients."""


class LookupFailure(SwapError):
    """A lookup for a single food failed; the request can continue."""


class FoodNotFoundError(LookupFailure):
    """The catalog has no entry for a food."""


class ConversionError(LookupFailure):
    """A quantity could not be converted to grams."""


class ServiceUnavailableError(SwapError):
    """The catalog or converter backend cannot be reached at all."""


class SwapTimeoutError(SwapError, TimeoutError):
    """The time budget ran out before any suggestion was ready."""


class SwapNotApplicableError(SwapError, ValueError):
    """A suggestion does not match any ingredient of the meal."""
