"""Exceptions raised by the orientation and rotation engine."""


class HaloSimulationError(Exception):
    """Base class for all errors raised by this package."""


class DimensionMismatchError(HaloSimulationError, ValueError):
    """Matrix shapes are incompatible for the requested operation."""


class NonSquareMatrixError(HaloSimulationError, ValueError):
    """An in-place transpose was requested on a rectangular matrix."""


class ZeroLengthVectorError(HaloSimulationError, ValueError):
    """A zero-length vector cannot be normalized."""


class ConfigError(HaloSimulationError, ValueError):
    """Invalid simulation or distribution configuration."""
