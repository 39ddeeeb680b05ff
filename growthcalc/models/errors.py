"""
Exceptions raised by the growth engine.

Every error is raised synchronously to the caller; the engine never retries
or recovers on its own.
"""


class GrowthCalcError(ValueError):
    """Base exception for growth engine errors."""

    pass


class InvalidInput(GrowthCalcError):
    """Non-positive measurement, M or S, or a negative unit-conversion value."""

    pass


class InvalidDate(GrowthCalcError):
    """A date could not be parsed."""

    pass


class InvalidRange(GrowthCalcError):
    """Measurement date precedes the date of birth."""

    pass


class EmptyTable(GrowthCalcError):
    pass


class NegativeQuery(GrowthCalcError):
    pass


class MissingParentData(GrowthCalcError):
    """Mid-parental height requested without both parental heights."""

    pass


class UnknownReference(GrowthCalcError):
    """No reference table exists for the requested metric/standard/gender."""

    pass
