"""Exception types raised by the cube engine."""


class CubeError(ValueError):
    """Base class for cube engine errors."""


class InvalidMoveError(CubeError):
    """Raised when a move token is not part of the move alphabet."""


class InvalidSizeError(CubeError):
    """Raised when a cube side length is not an integer >= 2."""


class StateValidationError(CubeError):
    """Raised when an input state is invalid."""


class ScrambleLengthError(CubeError):
    """Raised when a scramble length is not a non-negative integer."""
