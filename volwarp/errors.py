"""Exceptions raised by volwarp."""

import numpy as np


class VolwarpError(Exception):
    """Base exception for volwarp errors."""

    def __init__(self, message='An error occurred in volwarp'):
        super().__init__(message)


class ArgumentError(VolwarpError):
    """Raised when the command line cannot be parsed."""


class ReadError(VolwarpError, IOError):
    """Raised when an input volume cannot be loaded."""

    def __init__(self, fname=None, reason=None):
        message = 'Cannot read volume'
        if fname is not None:
            message += ' {}'.format(fname)
        if reason is not None:
            message += ': {}'.format(reason)
        super().__init__(message)


class WriteError(VolwarpError, IOError):
    """Raised when an output volume cannot be saved."""

    def __init__(self, fname=None, reason=None):
        message = 'Cannot write volume'
        if fname is not None:
            message += ' {}'.format(fname)
        if reason is not None:
            message += ': {}'.format(reason)
        super().__init__(message)


class TransformBuildError(VolwarpError, ValueError):
    """Raised when an elementary transform has invalid parameters."""


class SingularMatrixError(VolwarpError, np.linalg.LinAlgError):
    """Raised when a non-invertible affine map is inverted."""

    def __init__(self, message='Affine matrix is singular'):
        super().__init__(message)
