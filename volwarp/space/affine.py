"""Affine maps of the 3D physical space."""

import numpy as np
from ..linalg import as_vector, as_matrix, homogeneous, split_homogeneous, \
    compose, invert, is_singular, apply_affine


class AffineMap:
    """An immutable affine map ``x -> A @ x + b`` of the physical space.

    Maps compose like functions: ``(f @ g)(x) == f(g(x))``.

    When used to resample an image, the map is applied to *output*
    points to find the *source* points they are sampled from. A map
    that describes how the source moves into the output must therefore
    be inverted first (see ``inverse``).
    """

    __slots__ = ('_matrix', '_offset')

    def __init__(self, matrix=None, offset=None):
        """

        Parameters
        ----------
        matrix : (3, 3) matrix_like, default=identity
            Linear part ``A``
        offset : (3,) vector_like, default=0
            Offset ``b``
        """
        matrix = np.eye(3) if matrix is None else as_matrix(matrix)
        offset = np.zeros(3) if offset is None else as_vector(offset)
        matrix = np.array(matrix, dtype=np.float64)
        offset = np.array(offset, dtype=np.float64)
        matrix.setflags(write=False)
        offset.setflags(write=False)
        self._matrix = matrix
        self._offset = offset

    @classmethod
    def identity(cls):
        return cls()

    @classmethod
    def from_homogeneous(cls, mat):
        """Build a map from a (4, 4) or (3, 4) matrix."""
        return cls(*split_homogeneous(mat))

    @property
    def matrix(self):
        """Linear part ``A`` (read-only)."""
        return self._matrix

    @property
    def offset(self):
        """Offset ``b`` (read-only)."""
        return self._offset

    @property
    def homogeneous(self):
        """(4, 4) homogeneous matrix."""
        return homogeneous(self._matrix, self._offset)

    def __call__(self, points):
        """Apply the map to a point or a (..., 3) array of points."""
        return apply_affine(self._matrix, self._offset, points)

    def compose(self, other):
        """Return ``self o other`` (``other`` is applied first)."""
        other = as_affine_map(other)
        return AffineMap(*compose(self._matrix, self._offset,
                                  other.matrix, other.offset))

    def __matmul__(self, other):
        return self.compose(other)

    def is_invertible(self):
        return not is_singular(self._matrix)

    def inverse(self):
        """Inverse map.

        Raises
        ------
        SingularMatrixError
            If the linear part is not invertible.
        """
        return AffineMap(*invert(self._matrix, self._offset))

    def is_identity(self, atol=1e-12):
        return (np.allclose(self._matrix, np.eye(3), rtol=0, atol=atol) and
                np.allclose(self._offset, 0, rtol=0, atol=atol))

    def allclose(self, other, rtol=1e-9, atol=1e-12):
        other = as_affine_map(other)
        return (np.allclose(self._matrix, other.matrix, rtol=rtol, atol=atol)
                and np.allclose(self._offset, other.offset,
                                rtol=rtol, atol=atol))

    def __eq__(self, other):
        if not isinstance(other, AffineMap):
            return NotImplemented
        return (np.array_equal(self._matrix, other.matrix) and
                np.array_equal(self._offset, other.offset))

    def __hash__(self):
        return hash((self._matrix.tobytes(), self._offset.tobytes()))

    def __repr__(self):
        return 'AffineMap(matrix={}, offset={})'.format(
            self._matrix.tolist(), self._offset.tolist())


def centered(mat, center=None):
    """Conjugate a linear operation with a translation to a pivot.

    Returns the map ``T(c) o M o T(-c)``, i.e. ``x -> M @ (x - c) + c``.

    Parameters
    ----------
    mat : (3, 3) matrix_like
        Linear operation ``M``
    center : (3,) vector_like, default=0
        Pivot point ``c``

    Returns
    -------
    AffineMap

    """
    mat = as_matrix(mat)
    if center is None:
        return AffineMap(mat)
    center = as_vector(center)
    return AffineMap(mat, center - np.matmul(mat, center))


def as_affine_map(x):
    """Convert an object to an ``AffineMap``.

    Accepts an ``AffineMap``, any object exposing an ``affine_map``
    attribute (e.g. an ``AffineTransform``), or a (4, 4) / (3, 4)
    matrix_like.
    """
    if isinstance(x, AffineMap):
        return x
    if hasattr(x, 'affine_map'):
        return x.affine_map
    return AffineMap.from_homogeneous(x)
