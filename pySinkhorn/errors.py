# pySinkhorn/errors.py


class BalanceError(Exception):
    """Base class for errors raised by pySinkhorn."""


class InvalidInputError(BalanceError, ValueError):
    """The matrix is not a nonnegative, square, numeric 2-D array."""


class InvalidParameterError(BalanceError, ValueError):
    """A balancing option has an invalid value or an unknown name."""
