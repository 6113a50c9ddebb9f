"""Affine transform builder implemented in an Object-Oriented paradigm."""

import numpy as np
from ..errors import TransformBuildError
from ..linalg import as_vector, rodrigues, plane_rotation
from .affine import AffineMap, centered, as_affine_map


class AffineTransform:
    """Accumulate an affine map from a sequence of elementary operations.

    The transform starts as the identity. Each operation is composed
    with the current map, either after it (``pre=False``, default) or
    before it (``pre=True``). Linear operations (scaling, rotation,
    shear) act about the current center of rotation, which only
    affects operations applied after it is set::

        tfm = AffineTransform()
        tfm.translate([6, 2, 4]).scale([0.5, 0.75, 0.9])
        tfm.set_center([64, 64, 32])
        tfm.rotate3d([1, 0, 0], np.pi/3)

    All operations return the transform so that they can be chained.
    """

    def __init__(self, matrix=None, offset=None, center=None):
        """

        Parameters
        ----------
        matrix : (3, 3) matrix_like, default=identity
            Initial linear part
        offset : (3,) vector_like, default=0
            Initial offset
        center : (3,) vector_like, default=0
            Center of rotation/scaling
        """
        self._map = AffineMap(matrix, offset)
        self._center = np.zeros(3) if center is None else as_vector(center)

    # ------------------------------------------------------------------
    #                              State
    # ------------------------------------------------------------------

    @property
    def affine_map(self):
        """Snapshot of the current map."""
        return self._map

    @property
    def matrix(self):
        return self._map.matrix

    @property
    def offset(self):
        return self._map.offset

    @property
    def center(self):
        return self._center.copy()

    @property
    def translation(self):
        """Translation in the centered parametrisation.

        The map can be written ``x -> A @ (x - c) + c + t``, so that
        ``t = b - c + A @ c``.
        """
        c = self._center
        return self.offset - c + np.matmul(self.matrix, c)

    @property
    def parameters(self):
        """The 12 parameters: ``A`` (row-major) followed by ``translation``."""
        return np.concatenate((self.matrix.reshape(-1), self.translation))

    def set_center(self, center):
        """Set the pivot of subsequent linear operations.

        Operations already applied are not modified.
        """
        self._center = as_vector(center)
        return self

    def set_identity(self):
        self._map = AffineMap()
        return self

    def set_matrix(self, matrix):
        self._map = AffineMap(matrix, self.offset)
        return self

    def set_offset(self, offset):
        self._map = AffineMap(self.matrix, offset)
        return self

    # ------------------------------------------------------------------
    #                           Operations
    # ------------------------------------------------------------------

    def compose(self, other, pre=False):
        """Compose with another map.

        Parameters
        ----------
        other : AffineMap or AffineTransform or matrix_like
        pre : bool, default=False
            If False, ``other`` is applied after the current map.
            If True, it is applied before.
        """
        other = as_affine_map(other)
        if pre:
            self._map = self._map @ other
        else:
            self._map = other @ self._map
        return self

    def _apply_linear(self, mat, pre):
        return self.compose(centered(mat, self._center), pre=pre)

    def translate(self, vector, pre=False):
        """Translate by ``vector``. Independent of the center."""
        return self.compose(AffineMap(offset=as_vector(vector)), pre=pre)

    def scale(self, factor, pre=False):
        """Scale (anisotropically) about the center.

        Parameters
        ----------
        factor : float or (3,) vector_like
            Strictly positive scaling factors
        """
        factor = as_vector(factor)
        if not np.all(np.isfinite(factor)) or np.any(factor <= 0):
            raise TransformBuildError('Scaling factors must be strictly '
                                      'positive. Got {}'
                                      .format(factor.tolist()))
        return self._apply_linear(np.diag(factor), pre)

    def rotate3d(self, axis, angle, pre=False):
        """Rotate about an axis passing through the center.

        Parameters
        ----------
        axis : (3,) vector_like
            Rotation axis (normalised internally)
        angle : float
            Right-handed rotation angle, in radians
        """
        return self._apply_linear(rodrigues(axis, angle), pre)

    def rotate(self, axis1, axis2, angle, pre=False):
        """Rotate in the plane of two coordinate axes, about the center."""
        return self._apply_linear(plane_rotation(axis1, axis2, angle), pre)

    def shear(self, axis1, axis2, coef, pre=False):
        """Shear: ``x[axis1] += coef * x[axis2]``, about the center."""
        if axis1 == axis2 or not (0 <= axis1 < 3 and 0 <= axis2 < 3):
            raise TransformBuildError('Shear needs two distinct axes in '
                                      '[0, 3). Got {} and {}'
                                      .format(axis1, axis2))
        mat = np.eye(3)
        mat[axis1, axis2] = coef
        return self._apply_linear(mat, pre)

    # ------------------------------------------------------------------
    #                            Evaluation
    # ------------------------------------------------------------------

    def transform_point(self, point):
        return self._map(point)

    def inverse(self):
        """Return a new transform encoding the inverse map.

        The center is kept.
        """
        inv = self._map.inverse()
        return AffineTransform(inv.matrix, inv.offset, self._center)

    def copy(self):
        return AffineTransform(self.matrix, self.offset, self._center)

    def __repr__(self):
        return 'AffineTransform(matrix={}, offset={}, center={})'.format(
            self.matrix.tolist(), self.offset.tolist(),
            self._center.tolist())
