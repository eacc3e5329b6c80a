class KneedleError(ValueError):
    """Base class for invalid curves given to the Kneedle pipeline."""


class EmptyInput(KneedleError):
    """The curve has no points."""


class InvalidDimension(KneedleError):
    """A point has no components, or the wrong number of them."""


class DimensionMismatch(KneedleError):
    """Points within a single curve disagree in their number of components."""
