import itertools
import numpy as np
from scipy.ndimage import spline_filter, map_coordinates
from .linalg import apply_affine
from .utils import sub2ind

interpolation_names = {'nearest': 0, 'linear': 1, 'quadratic': 2, 'cubic': 3}


def interpolation_order(order):
    """Convert an interpolation order or name to an integer in [0, 5]."""
    if isinstance(order, str):
        if order not in interpolation_names:
            raise ValueError('Unknown interpolation {}. Expected one of {}'
                             .format(order, list(interpolation_names)))
        return interpolation_names[order]
    if int(order) != order or not 0 <= order <= 5:
        raise ValueError('Interpolation order {} not implemented'
                         .format(order))
    return int(order)


def identity_grid(shape, dtype=None):
    """Generate a dense identity grid

    Parameters
    ----------
    shape : iterable of length D
        Shape of the dense grid.
    dtype : type, default=np.int64
        Output data type.

    Returns
    -------
    grid : np.ndarray of shape (*shape, D)
        Dense identity grid.

    """
    grid = np.stack(np.meshgrid(*(np.arange(s, dtype=dtype) for s in shape),
                                indexing='ij', copy=False), axis=-1)
    return grid


def affine_grid(mat, shape, dtype=np.float64):
    """Generate a dense grid of affinely transformed indices.

    Parameters
    ----------
    mat : (D, D+1) or (D+1, D+1) array_like
        Affine matrix, applied to each index of the grid.
    shape : iterable of length D
        Shape of the dense grid.
    dtype : type, default=np.float64
        Output data type.

    Returns
    -------
    grid : np.ndarray of shape (*shape, D)
        Dense affine grid.

    """
    mat = np.asarray(mat, dtype=dtype)
    dim = len(shape)
    if mat.shape[-1] != dim + 1 or mat.shape[0] not in (dim, dim + 1):
        raise ValueError('Expected a ({0}, {1}) or ({1}, {1}) matrix. '
                         'Got {2}'.format(dim, dim + 1, mat.shape))
    grid = identity_grid(shape, dtype)
    return apply_affine(mat[:dim, :dim], mat[:dim, dim], grid).astype(dtype)


def bound_nearest(i, n):
    """Clamp integer indices into [0, n-1]."""
    return np.clip(i, 0, max(n - 1, 0))


def inbounds(grid, shape, tolerance=0.):
    """Find points that lie inside the sampling domain of a volume.

    A continuous index ``u`` is inside iff ``0 <= u <= n - 1`` along
    each dimension. Points less than ``tolerance`` outside the domain
    are considered inside and snapped onto its border.

    Parameters
    ----------
    grid : (*spatial, D) array_like
        Continuous indices
    shape : (D,) iterable
        Shape of the sampled volume
    tolerance : float, default=0
        Tolerance, in voxels

    Returns
    -------
    grid : (*spatial, D) np.ndarray
        Indices clamped to the domain
    mask : (*spatial) np.ndarray[bool]
        True for points inside

    """
    grid = np.asarray(grid, dtype=np.float64)
    upper = np.asarray(shape, dtype=np.float64) - 1
    mask = np.all((grid >= -tolerance) & (grid <= upper + tolerance), axis=-1)
    grid = np.clip(grid, 0, np.maximum(upper, 0))
    return grid, mask


def sample_grid_nearest(x, grid):
    dim = grid.shape[-1]
    shape = x.shape[:dim]
    grid = np.floor(grid + 0.5).astype(np.int64)
    grid = np.stack(tuple(bound_nearest(grid[..., d], shape[d])
                          for d in range(dim)), axis=-1)
    return x.reshape(-1)[sub2ind(grid, shape)].astype(np.float64)


def sample_grid_linear(x, grid):
    dim = grid.shape[-1]
    shape = x.shape[:dim]
    flat = x.reshape(-1)

    # Weights of the upper corner along each dimension
    corner0 = np.floor(grid)
    weights = grid - corner0
    corner0 = corner0.astype(np.int64)

    # Accumulate the 2**D corners of the cell. Corners past the last
    # voxel only occur with a zero weight, so they can be clamped.
    out = np.zeros(grid.shape[:-1], dtype=np.float64)
    for corner in itertools.product([False, True], repeat=dim):
        corner = np.asarray(corner)
        index = corner0 + corner
        index = np.stack(tuple(bound_nearest(index[..., d], shape[d])
                               for d in range(dim)), axis=-1)
        w = np.where(corner, weights, 1 - weights).prod(axis=-1)
        out += w * flat[sub2ind(index, shape)]
    return out


def sample_grid_spline(coeffs, grid, order):
    coords = np.moveaxis(grid, -1, 0)
    return map_coordinates(coeffs, coords, order=order,
                           mode='mirror', prefilter=False)


def sample_grid(x, grid, order=1, tolerance=0., coeffs=None):
    """Sample a volume at specified coordinates.

    Parameters
    ----------
    x : (*input_spatial) array_like
        Input volume
    grid : (*output_spatial, dim) array_like
        Grid of continuous indices
    order : int or str, default=1
        Interpolation order: 0 (nearest), 1 (linear) or a B-spline
        order in [2, 5].
    tolerance : float, default=0
        See ``inbounds``
    coeffs : np.ndarray, optional
        Prefiltered spline coefficients of ``x``. Only used if order > 1.
        Computed on the fly by default.

    Returns
    -------
    y : (*output_spatial) np.ndarray[float64]
        Sampled values, zero out-of-bounds.
    mask : (*output_spatial) np.ndarray[bool]
        True where the point is in-bounds.

    """
    order = interpolation_order(order)
    x = np.asarray(x)
    grid, mask = inbounds(grid, x.shape[:grid.shape[-1]], tolerance)
    if x.size == 0:
        return np.zeros(grid.shape[:-1], dtype=np.float64), mask
    if order == 0:
        y = sample_grid_nearest(x, grid)
    elif order == 1:
        y = sample_grid_linear(x, grid)
    else:
        if coeffs is None:
            coeffs = spline_filter(x.astype(np.float64), order=order,
                                   mode='mirror')
        y = sample_grid_spline(coeffs, grid, order)
    y[~mask] = 0
    return y, mask


def quantize(values, dtype):
    """Round and clip floating point values into a data type.

    Integer types: round to nearest (ties to even) and clip to the
    range of the type (e.g. [0, 255] for uint8). Other types: cast.
    """
    dtype = np.dtype(dtype)
    values = np.asarray(values)
    if np.issubdtype(dtype, np.integer):
        info = np.iinfo(dtype)
        values = np.clip(np.rint(values), info.min, info.max)
    return values.astype(dtype)


class Interpolator:
    """Reconstruct a continuous image from its samples.

    The interpolator is queried with continuous indices. Points outside
    ``[0, n-1]`` along any dimension are out-of-bounds: they are not
    reconstructed and must be replaced by a default value.
    """

    def __init__(self, image, order=1, tolerance=1e-6):
        """

        Parameters
        ----------
        image : Image
            Source image
        order : int or {'nearest', 'linear', 'quadratic', 'cubic'}, default=1
            Interpolation order. 0 is nearest neighbour, 1 is trilinear,
            higher orders are B-splines.
        tolerance : float, default=1e-6
            Distance (in voxels) below which points outside the domain
            are snapped onto its border.
        """
        self.image = image
        self.order = interpolation_order(order)
        self.tolerance = tolerance
        self._coeffs = None
        if self.order > 1 and not image.is_empty():
            # Prefilter once; queries then only evaluate the spline.
            self._coeffs = spline_filter(image.data.astype(np.float64),
                                         order=self.order, mode='mirror')

    def inside(self, index):
        """Mask of in-bounds continuous indices ((..., 3) array_like)."""
        return inbounds(index, self.image.size, self.tolerance)[1]

    def sample(self, index):
        """Sample the image at continuous indices.

        Parameters
        ----------
        index : (..., 3) array_like
            Continuous indices

        Returns
        -------
        values : (...) np.ndarray[float64]
            Reconstructed values (zero out-of-bounds)
        mask : (...) np.ndarray[bool]
            In-bounds mask

        """
        index = np.asarray(index, dtype=np.float64)
        return sample_grid(self.image.data, index, self.order,
                           self.tolerance, self._coeffs)

    __call__ = sample

    def evaluate(self, u, v, w):
        """Sample a single point. Returns None if out-of-bounds."""
        value, mask = self.sample([[u, v, w]])
        if not mask[0]:
            return None
        return float(value[0])
