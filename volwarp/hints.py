from typing import Union, Iterable
import numpy as np
from nibabel.spatialimages import SpatialImage

Array = Union[np.ndarray, Iterable, int, float]
Matrix = Array
Vector = Matrix
Index = Union[Iterable[int], np.ndarray]
FileArray = Union[str, SpatialImage]
AnyArray = Union[Array, FileArray]
Order = Union[int, str]
