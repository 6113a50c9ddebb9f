"""Tools for resampling volumes.

Resampling is the sequential process of:
    * **interpolation:**  transform a discrete set of points into a
      continuous function;
    * **spatial transformation:** compose the continuous image
      function with an affine map, from the output space to the
      source space;
    * **sampling:** evaluate the transformed function at the points
      of the output grid.

"""

from .object import Resampler, ResamplerLike
from .functional import resample, resample_like
