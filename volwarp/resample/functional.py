"""Tools for resampling volumes implemented in a Functional paradigm."""

from .object import Resampler, ResamplerLike
from ..hints import Matrix, Vector
from ..image import Image
from typing import Mapping


def resample(image, transform=None, output_size=None, output_origin=None,
             output_spacing=None, **kwargs):
    # type: (Image, Matrix, Vector, Vector, Vector, Mapping) -> Image
    """Resample a volume through an output-to-source affine map.

    Parameters
    ----------
    image : Image
        Source volume

    transform : AffineMap or AffineTransform or matrix_like, default=identity
        Map from output physical points to source physical points

    output_size : (3,) vector_like[int], default=same as input
    output_origin : (3,) vector_like, default=same as input
    output_spacing : (3,) vector_like, default=same as input
        Geometry of the output grid

    order : int, default=1
        Interpolation order

    default_value : scalar, default=0
        Value used out-of-bounds

    output_dtype : type or str, default=same as input
        Output data type

    n_jobs : int, optional
        Number of threads

    Returns
    -------
    y : Image
        Resampled volume

    """
    return Resampler()(image, transform, output_size, output_origin,
                       output_spacing, **kwargs)


def resample_like(image, reference, transform=None, **kwargs):
    # type: (Image, Image, Matrix, Mapping) -> Image
    """Resample a volume onto the grid of a reference volume.

    Parameters
    ----------
    image : Image
        Source volume

    reference : Image
        Reference volume defining the output grid

    transform : AffineMap or AffineTransform or matrix_like, default=identity
        Map from output physical points to source physical points

    Returns
    -------
    y : Image
        Resampled volume

    """
    return ResamplerLike()(image, reference, transform, **kwargs)
