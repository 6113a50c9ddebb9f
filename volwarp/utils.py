import os.path
import numpy as np


def argdef(*args):
    """Return the first non-None value from a list of arguments.

    Options are resolved with the priority: call argument, then object
    attribute, then hard default, e.g.
    ``order = argdef(order, self.order, 1)``.

    """
    for arg in args:
        if arg is not None:
            return arg
    return None


def sub2ind(subs, shape):
    """Convert sub indices (i, j, k) into linear indices.

    Parameters
    ----------
    subs : iterable of array_like
        One integer array per dimension, all with the same shape.
    shape : iterable
        Size of each dimension, in C order (the rightmost
        dimension is the most rapidly changing one).

    Returns
    -------
    ind : np.ndarray
        Linear indices

    """
    dim = len(shape)
    if isinstance(subs, np.ndarray) and subs.shape[-1] == dim:
        subs = [subs[..., d] for d in range(dim)]
    ind = np.zeros_like(np.asarray(subs[0]))
    # if shape == [X, Y, Z], the strides are [Y*Z, Z, 1]
    stride = np.cumprod(list(shape)[:0:-1])[::-1].tolist() + [1]
    for i, s in zip(subs, stride):
        ind += np.asarray(i) * s
    return ind


def fileparts(fname):
    """Split a filename into directory / basename / extension.

    If the last extension is ``.gz``, this function checks if another
    extension is present, in which case it returns ``.<ext>.gz``
    """
    dir = os.path.dirname(fname)
    basename = os.path.basename(fname)
    basename, ext = os.path.splitext(basename)
    if ext == '.gz':
        basename, ext0 = os.path.splitext(basename)
        ext = ext0 + ext
    return dir, basename, ext
