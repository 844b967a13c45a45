from __future__ import annotations


class DiagramError(ValueError):
    """Base class for every failure raised while laying out or rendering a diagram."""


class InvalidRangeError(DiagramError):
    pass


class InvalidIntervalError(DiagramError):
    pass


class PrecisionOverflowError(DiagramError):
    pass


class InvalidDimensionsError(DiagramError):
    pass


class InvalidCategoriesError(DiagramError):
    pass


class UnresolvedPointError(DiagramError):
    """Raised in strict mode when a polygon or distance names an unknown point id."""
