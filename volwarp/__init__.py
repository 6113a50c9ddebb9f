"""Affine warping of 3D scalar volumes."""

from .errors import VolwarpError, ArgumentError, ReadError, WriteError, \
    TransformBuildError, SingularMatrixError
from .image import Image
from .interpolate import Interpolator
from .space import AffineMap, AffineTransform, composite_transform
from .resample import Resampler, ResamplerLike, resample, resample_like
from .io import VolumeReader, VolumeWriter
