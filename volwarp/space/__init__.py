"""Affine maps of the physical space.

Two flavours are provided:
    * ``AffineMap``: an immutable pair ``(A, b)`` with pure composition;
    * ``AffineTransform``: a stateful builder that accumulates
      translations, scalings, rotations and shears about a settable
      center of rotation.

"""

from .affine import AffineMap, centered, as_affine_map
from .object import AffineTransform
from .functional import translation, scaling, rotation3d, compose, \
    rotation_center, composite_transform
