"""Dense linear algebra for 3D affine geometry.

Affine maps are handled as pairs ``(A, b)`` of a (3, 3) linear part and a
(3,) offset, representing ``x -> A @ x + b``. Helpers convert from/to
(4, 4) homogeneous matrices.
"""

import numpy as np
from .errors import SingularMatrixError, TransformBuildError


def as_vector(x, n=3, dtype=np.float64):
    """Convert a scalar or a sequence to a vector of length ``n``.

    Scalars are broadcast to all components.
    """
    x = np.asarray(x, dtype=dtype)
    if x.ndim == 0:
        x = np.full(n, x, dtype=dtype)
    x = x.reshape(-1)
    if x.shape[0] != n:
        raise ValueError('Expected a vector of length {}, got {}'
                         .format(n, x.shape[0]))
    return x


def as_matrix(x, n=3, dtype=np.float64):
    """Convert an array_like to a (n, n) matrix."""
    x = np.asarray(x, dtype=dtype)
    if x.shape != (n, n):
        raise ValueError('Expected a ({0}, {0}) matrix, got shape {1}'
                         .format(n, x.shape))
    return x


def homogeneous(A, b=None):
    """Build a (D+1, D+1) homogeneous matrix from a linear part and offset.

    Parameters
    ----------
    A : (D, D) array_like
        Linear part
    b : (D,) array_like, default=0
        Offset

    Returns
    -------
    mat : (D+1, D+1) np.ndarray

    """
    A = np.asarray(A, dtype=np.float64)
    dim = A.shape[0]
    mat = np.eye(dim+1, dtype=np.float64)
    mat[:dim, :dim] = A
    if b is not None:
        mat[:dim, dim] = as_vector(b, dim)
    return mat


def split_homogeneous(mat):
    """Split a (D+1, D+1) or (D, D+1) matrix into its linear part and offset.

    Returns
    -------
    A : (D, D) np.ndarray
    b : (D,) np.ndarray

    """
    mat = np.asarray(mat, dtype=np.float64)
    dim = mat.shape[-1] - 1
    if mat.shape not in ((dim, dim+1), (dim+1, dim+1)):
        raise ValueError('Expected a (D, D+1) or (D+1, D+1) matrix, got '
                         'shape {}'.format(mat.shape))
    return mat[:dim, :dim].copy(), mat[:dim, dim].copy()


def compose(A2, b2, A1, b1):
    """Compose two affine maps: ``(A2, b2) o (A1, b1)``.

    The right-hand map ``(A1, b1)`` is applied first.

    Returns
    -------
    A : np.ndarray
        ``A2 @ A1``
    b : np.ndarray
        ``A2 @ b1 + b2``

    """
    A2 = np.asarray(A2, dtype=np.float64)
    A1 = np.asarray(A1, dtype=np.float64)
    return np.matmul(A2, A1), np.matmul(A2, b1) + b2


def is_singular(A):
    """Return True if a square matrix is (numerically) not invertible."""
    A = np.asarray(A, dtype=np.float64)
    det = np.linalg.det(A)
    if not np.isfinite(det):
        return True
    scale = max(1., float(np.abs(A).max()) if A.size else 1.)
    return abs(det) <= np.finfo(np.float64).eps * scale ** A.shape[0]


def invert(A, b):
    """Invert an affine map.

    Returns
    -------
    iA : np.ndarray
        ``inv(A)``
    ib : np.ndarray
        ``-inv(A) @ b``

    Raises
    ------
    SingularMatrixError
        If ``A`` is not invertible.

    """
    A = np.asarray(A, dtype=np.float64)
    if is_singular(A):
        raise SingularMatrixError('Cannot invert singular affine matrix '
                                  '(det = {})'.format(np.linalg.det(A)))
    iA = np.linalg.inv(A)
    return iA, -np.matmul(iA, b)


def apply_affine(A, b, points):
    """Apply an affine map to one or many points.

    Parameters
    ----------
    A : (D, D) array_like
    b : (D,) array_like
    points : (..., D) array_like

    Returns
    -------
    points : (..., D) np.ndarray

    """
    points = np.asarray(points, dtype=np.float64)
    out = np.matmul(points, np.asarray(A, dtype=np.float64).transpose())
    out += np.asarray(b, dtype=np.float64)
    return out


def skew(k):
    """Cross-product matrix ``K`` such that ``K @ x == cross(k, x)``."""
    kx, ky, kz = as_vector(k, 3)
    return np.array([[0., -kz, ky],
                     [kz, 0., -kx],
                     [-ky, kx, 0.]])


def rodrigues(axis, angle):
    r"""Rotation matrix about an axis, by Rodrigues' formula.

    ..math: R = I + \sin(\theta) K + (1 - \cos(\theta)) K^2

    Parameters
    ----------
    axis : (3,) array_like
        Rotation axis. Normalised if needed.
    angle : float
        Right-handed rotation angle, in radians.

    Returns
    -------
    R : (3, 3) np.ndarray

    Raises
    ------
    TransformBuildError
        If the axis has zero (or non-finite) norm.

    """
    axis = as_vector(axis, 3)
    norm = np.sqrt((axis ** 2).sum())
    if not np.isfinite(norm) or norm == 0:
        raise TransformBuildError('Rotation axis must have a non-zero norm. '
                                  'Got {}'.format(axis.tolist()))
    K = skew(axis / norm)
    return (np.eye(3) + np.sin(angle) * K
            + (1 - np.cos(angle)) * np.matmul(K, K))


def plane_rotation(axis1, axis2, angle, dim=3):
    """Rotation matrix in the plane of two coordinate axes.

    The non-trivial block is::

        R[a1, a1] =  cos    R[a1, a2] = sin
        R[a2, a1] = -sin    R[a2, a2] = cos

    so that a positive angle rotates ``axis2`` towards ``axis1``.
    """
    if axis1 == axis2 or not (0 <= axis1 < dim and 0 <= axis2 < dim):
        raise TransformBuildError('Rotation plane needs two distinct axes '
                                  'in [0, {}). Got {} and {}'
                                  .format(dim, axis1, axis2))
    R = np.eye(dim)
    R[axis1, axis1] = np.cos(angle)
    R[axis2, axis2] = np.cos(angle)
    R[axis1, axis2] = np.sin(angle)
    R[axis2, axis1] = -np.sin(angle)
    return R
