import os.path
from warnings import warn
import nibabel as nb
import numpy as np
from nibabel.filebasedimages import ImageFileError
from nibabel.spatialimages import SpatialImage
from typing import Optional
from .errors import ReadError, WriteError
from .hints import AnyArray
from .image import Image
from .interpolate import quantize
from .utils import argdef, fileparts


def voxel_size(mat):
    """Return the voxel size associated with an affine matrix."""
    mat = np.asarray(mat)
    return np.sqrt((mat[:-1, :-1] ** 2).sum(axis=0))


def _as_3d(x, fname=None):
    """Pad to 3 dimensions, or drop trailing singleton dimensions."""
    if x.ndim < 3:
        x = x.reshape(x.shape + (1,) * (3 - x.ndim))
    elif x.ndim > 3:
        if np.any(np.array(x.shape[3:]) != 1):
            raise ReadError(fname, 'expected a 3D volume, got shape {}'
                            .format(x.shape))
        x = x.reshape(x.shape[:3])
    return x


class VolumeReader:
    """Versatile reader for volume files or objects."""

    def __init__(self, dtype=None, allow_pickle=False):
        """

        Parameters
        ----------
        dtype : type or str, default=None
            Data type in which to load the samples. Integer types are
            rounded and clipped. Keep the on-disk type by default.

        allow_pickle : bool, default=False
            Allow loading pickled object arrays stored in npy files.
            Reasons for disallowing pickles include security, as
            loading pickled data can execute arbitrary code.
        """
        self.dtype = dtype
        self.allow_pickle = allow_pickle

    def __call__(self, *args, **kwargs):
        return self.read(*args, **kwargs)

    def read(self, x, dtype=None):
        # type: (AnyArray, Optional[type]) -> Image
        """Load (and convert) a volume stored in a file or array.

        Parameters
        ----------
        x : str or nib.SpatialImage or array_like or Image
            An input volume, on disk or in memory.

        dtype : type or str, default=self.dtype
            Data type in which to load the samples.

        Returns
        -------
        x : Image
            A 3D image. Its origin and spacing are read from the
            orientation matrix when there is one, and are (0, 0, 0) and
            (1, 1, 1) otherwise.

        Raises
        ------
        ReadError
            If the volume cannot be loaded or is not 3D.

        """
        dtype = argdef(dtype, self.dtype)
        fname = None

        if isinstance(x, Image):
            origin, spacing, data = x.origin, x.spacing, x.data
        else:
            if isinstance(x, str):
                fname = x
                _, _, ext = fileparts(x)
                try:
                    if ext == '.npz':
                        x = self._load_npz(x)
                    elif ext == '.npy':
                        x = np.load(x, allow_pickle=self.allow_pickle)
                    else:
                        x = nb.load(x)
                except ReadError:
                    raise
                except (OSError, ValueError, ImageFileError) as e:
                    raise ReadError(fname, e) from e

            # Then, if nibabel object -> extract geometry
            if isinstance(x, SpatialImage):
                affine = x.affine
                if affine is None:
                    affine = np.eye(4)
                origin, spacing = self._geometry(affine, fname)
                try:
                    data = np.asanyarray(x.dataobj)
                except (OSError, ValueError) as e:
                    raise ReadError(fname, e) from e
            else:
                origin, spacing = np.zeros(3), np.ones(3)
                data = np.asarray(x)
                if data.dtype == object:
                    raise ReadError(fname, "input type '{}' not handled"
                                    .format(type(x)))

        data = _as_3d(np.asarray(data), fname)
        if dtype is not None and np.dtype(dtype) != data.dtype:
            data = self._convert(data, dtype, fname)
        return Image.from_array(data, origin, spacing)

    def _load_npz(self, fname):
        """Load the first array stored in an npz archive."""
        with np.load(fname, allow_pickle=self.allow_pickle) as f:
            if not f.files:
                raise ReadError(fname, 'no array stored')
            return np.array(f[f.files[0]])

    @staticmethod
    def _geometry(affine, fname=None):
        affine = np.asarray(affine, dtype=np.float64)[:4, :4]
        spacing = voxel_size(affine)[:3]
        origin = affine[:3, 3].copy()
        if np.any(spacing == 0):
            raise ReadError(fname, 'degenerate orientation matrix')
        direction = affine[:3, :3] / spacing
        if not np.allclose(direction, np.eye(3), atol=1e-6):
            warn('Non-identity direction cosines are ignored: only the '
                 'origin and spacing of {} are kept.'
                 .format(fname or 'the input volume'), UserWarning)
        return origin, spacing

    @staticmethod
    def _convert(data, dtype, fname=None):
        dtype = np.dtype(dtype)
        if np.issubdtype(dtype, np.integer) and data.size:
            info = np.iinfo(dtype)
            if data.min() < info.min or data.max() > info.max:
                warn('Intensities of {} outside of the range of {} are '
                     'clipped.'.format(fname or 'the input volume', dtype),
                     UserWarning)
        return quantize(data, dtype)


class VolumeWriter:
    """Versatile writer for volume files."""

    def __init__(self, dtype=None, ext='.nii.gz'):
        """

        Parameters
        ----------
        dtype : str or type, optional
            Output data type. Same as the image by default.

        ext : str, default='.nii.gz'
            Extension used when the file name has none
        """
        self.dtype = dtype
        self.ext = ext

    def __call__(self, *args, **kwargs):
        return self.write(*args, **kwargs)

    def write(self, image, fname, dtype=None):
        # type: (Image, str, Optional[type]) -> str
        """Save an image on disk.

        Files with a ``.npy`` or ``.npz`` extension are saved with numpy
        (the geometry is lost). Other extensions are delegated to nibabel.

        Parameters
        ----------
        image : Image
            Image to write
        fname : str
            Output file name
        dtype : str or type, default=self.dtype
            Output data type

        Returns
        -------
        fname : str
            Path of the written file

        Raises
        ------
        WriteError
            If the file cannot be written.

        """
        dtype = np.dtype(argdef(dtype, self.dtype, image.dtype))
        dir, basename, ext = fileparts(fname)
        if not ext:
            ext = self.ext
            fname = os.path.join(dir, basename + ext)
        data = image.data
        if data.dtype != dtype:
            data = quantize(data, dtype)

        try:
            if ext == '.npy':
                np.save(fname, data, allow_pickle=False)
            elif ext == '.npz':
                np.savez(fname, data=data)
            else:
                obj = nb.Nifti1Image(data, image.affine)
                obj.header.set_data_dtype(dtype)
                nb.save(obj, fname)
        except (OSError, ValueError, ImageFileError) as e:
            raise WriteError(fname, e) from e
        return fname
