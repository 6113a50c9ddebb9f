import numpy as np
import pytest

from volwarp.image import Image


@pytest.fixture
def cube():
    """2x2x2 volume with samples 0, 10, ..., 70 in (k, j, i) order."""
    return Image.from_buffer([0, 10, 20, 30, 40, 50, 60, 70], (2, 2, 2))


@pytest.fixture
def ramp():
    """Linear intensity ramp, exactly reproduced by trilinear sampling."""
    def make(size=(16, 16, 8), coef=(4, 3, 2), offset=20):
        grid = np.stack(np.meshgrid(*(np.arange(s) for s in size),
                                    indexing='ij'), axis=-1)
        data = offset + (grid * np.asarray(coef)).sum(axis=-1)
        return Image.from_array(data.astype(np.uint8))
    return make


@pytest.fixture
def noise():
    rng = np.random.default_rng(1234)
    data = rng.integers(0, 256, size=(12, 10, 8), dtype=np.uint8)
    return Image.from_array(data, origin=(-3., 1., 2.),
                            spacing=(1., 0.5, 2.))
