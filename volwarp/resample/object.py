"""Tools for resampling volumes implemented in an Object-Oriented paradigm."""

# WARNING: resample.functional imports resample.object, so the opposite
# import is forbidden

import numpy as np
from joblib import Parallel, delayed
from ..image import Image
from ..interpolate import Interpolator, affine_grid, quantize
from ..linalg import homogeneous
from ..space.affine import AffineMap, as_affine_map
from ..utils import argdef


class Resampler:
    """Resample a volume through an affine map.

    For each output voxel ``(i, j, k)``:
        1. compute its physical position
           ``P_out = origin' + (i, j, k) * spacing'``;
        2. map it to the source space, ``P_src = A @ P_out + b``;
        3. convert it to a continuous source index
           ``(P_src - origin) / spacing``;
        4. interpolate the source there, or use the default value if
           the index falls outside the source grid.

    An index ``u`` is inside the source grid iff ``0 <= u <= N - 1``
    along each axis, up to ``tolerance`` (1e-6 voxel by default):
    points closer than that to the grid are snapped onto its border.
    Use ``tolerance=0`` for the strict bound.

    The map is therefore applied from the *output* space to the
    *source* space and is never inverted. A map that describes how the
    source moves into the output must be inverted by the caller.
    """

    def __init__(self, transform=None, output_size=None, output_origin=None,
                 output_spacing=None, *, order=1, default_value=0,
                 output_dtype=None, tolerance=1e-6, n_jobs=None,
                 progress=None):
        """

        Parameters
        ----------
        transform : AffineMap or AffineTransform or matrix_like, default=identity
            Output-to-source physical map

        output_size : (3,) vector_like[int], default=same as input
        output_origin : (3,) vector_like, default=same as input
        output_spacing : (3,) vector_like, default=same as input
            Geometry of the output grid

        Other Parameters
        ----------------
        order : int or str, default=1
            Interpolation order (0: nearest, 1: trilinear, 2-5: B-spline)

        default_value : scalar, default=0
            Value written where the source is sampled out-of-bounds

        output_dtype : type or str, default=same as input
            Output data type. Integer types are rounded and clipped.

        tolerance : float, default=1e-6
            Distance (in voxels) below which out-of-bounds points are
            snapped onto the source grid.

        n_jobs : int, optional
            Number of threads across which output slices are
            distributed. Sequential by default.

        progress : callable(done, total), optional
            Called after each output slice, in slice order.
        """
        self.transform = transform
        self.output_size = output_size
        self.output_origin = output_origin
        self.output_spacing = output_spacing
        self.order = order
        self.default_value = default_value
        self.output_dtype = output_dtype
        self.tolerance = tolerance
        self.n_jobs = n_jobs
        self.progress = progress

    def __call__(self, image, transform=None, output_size=None,
                 output_origin=None, output_spacing=None, *,
                 order=None, default_value=None, output_dtype=None,
                 tolerance=None, n_jobs=None, progress=None):
        """Resample a volume.

        Parameters
        ----------
        image : Image
            Source volume

        transform : AffineMap or AffineTransform or matrix_like, default=self.transform
            Output-to-source physical map

        output_size, output_origin, output_spacing : default=self.<...>
            Geometry of the output grid. Default to the source grid.

        Other Parameters
        ----------------
        order, default_value, output_dtype, tolerance, n_jobs, progress
            See ``Resampler.__init__``. Default to the attributes.

        Returns
        -------
        y : Image
            Resampled volume, of geometry (output_size, output_origin,
            output_spacing).

        """

        # Parse options
        transform = argdef(transform, self.transform, AffineMap())
        transform = as_affine_map(transform)
        output_size = argdef(output_size, self.output_size, image.size)
        output_origin = argdef(output_origin, self.output_origin,
                               image.origin)
        output_spacing = argdef(output_spacing, self.output_spacing,
                                image.spacing)
        order = argdef(order, self.order, 1)
        default_value = argdef(default_value, self.default_value, 0)
        output_dtype = np.dtype(argdef(output_dtype, self.output_dtype,
                                       image.dtype))
        tolerance = argdef(tolerance, self.tolerance, 0.)
        n_jobs = argdef(n_jobs, self.n_jobs, 1)
        progress = argdef(progress, self.progress)

        # Allocate output
        output = Image(output_size, output_origin, output_spacing,
                       dtype=output_dtype)
        nx, ny, nz = output.size
        if output.is_empty():
            return output

        interpolator = Interpolator(image, order=order, tolerance=tolerance)
        vox2vox = _voxel_map(transform, output, image)

        def slab(k):
            return k, _resample_slice(interpolator, vox2vox, (nx, ny), k,
                                      default_value, output_dtype)

        if n_jobs == 1:
            slices = (slab(k) for k in range(nz))
        else:
            slices = Parallel(n_jobs=n_jobs, prefer='threads',
                              return_as='generator')(
                delayed(slab)(k) for k in range(nz))

        for done, (k, values) in enumerate(slices, 1):
            output.data[:, :, k] = values
            if progress is not None:
                progress(done, nz)

        return output


def _voxel_map(transform, output, source):
    """Map from output indices to continuous source indices.

    Folds the output grid, the physical map and the source grid into
    a single (4, 4) matrix:
    ``u = (A @ (origin' + idx * spacing') + b - origin) / spacing``.
    """
    matrix = transform.matrix * output.spacing
    offset = np.matmul(transform.matrix, output.origin) + transform.offset
    matrix = matrix / source.spacing[:, None]
    offset = (offset - source.origin) / source.spacing
    return homogeneous(matrix, offset)


def _resample_slice(interpolator, vox2vox, shape, k, default_value,
                    output_dtype):
    """Resample the output slice ``k`` (all i, j)."""
    # Shift the map so that the slice is the plane k = 0
    mat = vox2vox.copy()
    mat[:3, 3] += mat[:3, 2] * k
    index = affine_grid(mat, tuple(shape) + (1,))[:, :, 0]
    values, mask = interpolator.sample(index)
    values = quantize(values, output_dtype)
    values[~mask] = quantize(default_value, output_dtype)
    return values


class ResamplerLike(Resampler):
    """Resample a volume onto the grid of a reference volume."""

    def __init__(self, reference=None, transform=None, **kwargs):
        super().__init__(transform, **kwargs)
        self.reference = reference

    def __call__(self, image, reference=None, transform=None, **kwargs):
        """Resample a volume onto the grid of another volume.

        Parameters
        ----------
        image : Image
            Source volume

        reference : Image, default=self.reference
            Reference volume, whose size, origin and spacing define
            the output grid

        transform : AffineMap or AffineTransform or matrix_like, default=self.transform
            Output-to-source physical map

        Returns
        -------
        y : Image

        """
        reference = argdef(reference, self.reference)
        if reference is None:
            raise ValueError('No reference volume provided')
        return super().__call__(image, transform,
                                output_size=reference.size,
                                output_origin=reference.origin,
                                output_spacing=reference.spacing,
                                **kwargs)
