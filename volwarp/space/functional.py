"""Affine maps implemented in a Functional paradigm."""

import numpy as np
from ..linalg import as_vector, rodrigues
from .affine import AffineMap, centered, as_affine_map
from .object import AffineTransform

# Parameters of the default composite transform
default_translation = (6., 2., 4.)
default_scale = (0.5, 0.75, 0.9)
default_axis = (1., 0., 0.)
default_angle = 60.     # degrees
center_modes = ('size', 'physical')


def translation(vector):
    """Translation ``x -> x + vector``."""
    return AffineMap(offset=vector)


def scaling(factor, center=None):
    """Anisotropic scaling about ``center`` (default: origin)."""
    return AffineTransform(center=center).scale(factor).affine_map


def rotation3d(axis, angle, center=None):
    """Rotation of ``angle`` radians about an axis through ``center``."""
    return centered(rodrigues(axis, angle), center)


def compose(*maps):
    """Compose maps, rightmost first: ``compose(f, g)(x) == f(g(x))``."""
    out = AffineMap()
    for a_map in maps:
        out = out @ as_affine_map(a_map)
    return out


def rotation_center(size, origin=None, spacing=None, mode='size'):
    """Center of rotation of a grid.

    Parameters
    ----------
    size : (3,) vector_like[int]
        Grid size
    origin : (3,) vector_like, default=0
    spacing : (3,) vector_like, default=1
    mode : {'size', 'physical'}, default='size'
        * 'size': ``size / 2``, used as-is as a physical coordinate
          (ignores origin and spacing).
        * 'physical': ``origin + spacing * size / 2``

    Returns
    -------
    center : (3,) np.ndarray

    """
    size = as_vector(size)
    if mode == 'size':
        return size / 2.
    elif mode == 'physical':
        origin = as_vector(0. if origin is None else origin)
        spacing = as_vector(1. if spacing is None else spacing)
        return origin + spacing * size / 2.
    else:
        raise ValueError('mode must be one of {}. Got {}'
                         .format(center_modes, mode))


def composite_transform(size, origin=None, spacing=None,
                        translation=default_translation,
                        scale=default_scale,
                        axis=default_axis,
                        angle=default_angle,
                        center_mode='size'):
    """Build the translate / scale / rotate transform of a grid.

    Operations are applied, in order, to the identity:
        1. translate by ``translation``;
        2. scale by ``scale`` about the origin;
        3. set the center to the grid center (see ``rotation_center``);
        4. rotate by ``angle`` about ``axis`` through that center.

    Parameters
    ----------
    size : (3,) vector_like[int]
        Grid size
    origin, spacing : (3,) vector_like, optional
        Grid geometry, only used when ``center_mode='physical'``
    translation : (3,) vector_like, default=(6, 2, 4)
    scale : (3,) vector_like, default=(0.5, 0.75, 0.9)
    axis : (3,) vector_like, default=(1, 0, 0)
    angle : float, default=60
        Rotation angle, in degrees
    center_mode : {'size', 'physical'}, default='size'

    Returns
    -------
    AffineTransform

    """
    tfm = AffineTransform()
    tfm.translate(translation)
    tfm.scale(scale)
    tfm.set_center(rotation_center(size, origin, spacing, center_mode))
    tfm.rotate3d(axis, np.deg2rad(angle), pre=False)
    return tfm
