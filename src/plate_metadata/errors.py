"""Exceptions and warning category shared by the plate metadata modules."""


class PlateMetadataWarning(RuntimeWarning):
    """Recoverable problem: the current command continues or is dropped."""


class InvalidOperation(ValueError):
    """A structural edit that would break the plate collection was rejected."""


class IncompletePlateError(ValueError):
    pass


class UnrecognizedFormatError(ValueError):
    pass


class InsufficientReferenceData(ValueError):
    pass
