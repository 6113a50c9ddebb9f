"""3D scalar raster with an axis-aligned physical geometry."""

import numpy as np
from .linalg import as_vector, homogeneous
from .utils import argdef


def _check_geometry(size, origin, spacing):
    size = np.asarray(size)
    if size.shape != (3,) or np.any(size < 0) \
            or np.any(size != np.round(size)):
        raise ValueError('size must be 3 non-negative integers. Got {}'
                         .format(size.tolist()))
    origin = as_vector(origin)
    spacing = as_vector(spacing)
    if not np.all(np.isfinite(origin)):
        raise ValueError('origin must be finite. Got {}'
                         .format(origin.tolist()))
    if not np.all(np.isfinite(spacing)) or np.any(spacing <= 0):
        raise ValueError('spacing must be strictly positive. Got {}'
                         .format(spacing.tolist()))
    return tuple(int(s) for s in size), origin, spacing


class Image:
    """A 3D grid of scalar samples.

    Voxel ``(i, j, k)`` lives at the physical position
    ``origin + (i, j, k) * spacing`` (the direction is the identity).

    Samples are stored in an array of shape ``size`` indexed
    ``data[i, j, k]``. The flat ``samples`` view enumerates them in
    ``(k, j, i)`` row-major order, i.e. ``i`` varies fastest.
    """

    def __init__(self, size, origin=0., spacing=1., dtype=np.uint8):
        """

        Parameters
        ----------
        size : (3,) vector_like[int]
            Number of voxels along each axis
        origin : (3,) vector_like or float, default=0
            Physical position of voxel (0, 0, 0)
        spacing : (3,) vector_like or float, default=1
            Physical distance between voxels along each axis
        dtype : type or str, default=np.uint8
            Data type of the samples

        """
        size, origin, spacing = _check_geometry(size, origin, spacing)
        self._data = np.zeros(size, dtype=dtype)
        self._origin = origin
        self._spacing = spacing

    @classmethod
    def from_array(cls, data, origin=0., spacing=1., copy=True):
        """Wrap a (X, Y, Z) array indexed ``data[i, j, k]``."""
        data = np.array(data) if copy else np.asarray(data)
        if data.ndim != 3:
            raise ValueError('Expected a 3D array. Got shape {}'
                             .format(data.shape))
        obj = cls([0, 0, 0], origin, spacing, dtype=data.dtype)
        obj._data = data
        return obj

    @classmethod
    def from_buffer(cls, samples, size, origin=0., spacing=1., dtype=None):
        """Build an image from a flat sequence of samples.

        Parameters
        ----------
        samples : iterable
            ``prod(size)`` values in ``(k, j, i)`` row-major order.
        size : (3,) vector_like[int]
        origin, spacing : (3,) vector_like or float
        dtype : type or str, default=np.uint8

        """
        size, _, _ = _check_geometry(size, origin, spacing)
        samples = np.asarray(samples, dtype=argdef(dtype, np.uint8))
        samples = samples.reshape(-1)
        if samples.size != int(np.prod(size)):
            raise ValueError('Expected {} samples for a grid of size {}. '
                             'Got {}'.format(int(np.prod(size)), size,
                                             samples.size))
        data = samples.reshape(size, order='F')
        return cls.from_array(data, origin, spacing)

    # ------------------------------------------------------------------
    #                             Geometry
    # ------------------------------------------------------------------

    @property
    def size(self):
        return tuple(self._data.shape)

    @property
    def origin(self):
        return self._origin.copy()

    @property
    def spacing(self):
        return self._spacing.copy()

    @property
    def dtype(self):
        return self._data.dtype

    @property
    def affine(self):
        """(4, 4) voxel-to-world matrix."""
        return homogeneous(np.diag(self._spacing), self._origin)

    def __len__(self):
        return self._data.size

    def is_empty(self):
        return self._data.size == 0

    def index_to_physical(self, index):
        """Physical position of a (continuous) index or (..., 3) array."""
        index = np.asarray(index, dtype=np.float64)
        return self._origin + index * self._spacing

    def physical_to_index(self, point):
        """Continuous index of a physical point or (..., 3) array."""
        point = np.asarray(point, dtype=np.float64)
        return (point - self._origin) / self._spacing

    # ------------------------------------------------------------------
    #                              Samples
    # ------------------------------------------------------------------

    @property
    def data(self):
        """Samples as an (X, Y, Z) array indexed ``data[i, j, k]``."""
        return self._data

    @property
    def samples(self):
        """Flat copy of the samples in ``(k, j, i)`` row-major order."""
        return self._data.reshape(-1, order='F').copy()

    def _check_index(self, i, j, k):
        index = (i, j, k)
        for d, (n, s) in enumerate(zip(index, self._data.shape)):
            if int(n) != n or not 0 <= n < s:
                raise IndexError('Index {} out of range for axis {} '
                                 'of size {}'.format(n, d, s))
        return tuple(int(n) for n in index)

    def get(self, i, j, k):
        return self._data[self._check_index(i, j, k)]

    def set(self, i, j, k, value):
        self._data[self._check_index(i, j, k)] = value

    def copy(self):
        return Image.from_array(self._data, self._origin, self._spacing)

    def empty_like(self, dtype=None):
        """Zero-filled image with the same geometry."""
        return Image(self.size, self._origin, self._spacing,
                     dtype=argdef(dtype, self.dtype))

    def __repr__(self):
        return 'Image(size={}, origin={}, spacing={}, dtype={})'.format(
            self.size, self._origin.tolist(), self._spacing.tolist(),
            self.dtype)
