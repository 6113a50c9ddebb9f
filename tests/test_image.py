import numpy as np
import pytest

from volwarp.image import Image


def test_zeroed_construction():
    image = Image((3, 4, 5), origin=(1., 2., 3.), spacing=(0.5, 1., 2.))
    assert image.size == (3, 4, 5)
    assert image.dtype == np.uint8
    assert len(image) == 60
    assert not image.data.any()
    assert np.array_equal(image.origin, [1., 2., 3.])
    assert np.array_equal(image.spacing, [0.5, 1., 2.])


def test_buffer_order(cube):
    # i varies fastest, then j, then k
    assert cube.get(0, 0, 0) == 0
    assert cube.get(1, 0, 0) == 10
    assert cube.get(0, 1, 0) == 20
    assert cube.get(0, 0, 1) == 40
    assert cube.get(1, 1, 1) == 70
    assert cube.samples.tolist() == [0, 10, 20, 30, 40, 50, 60, 70]


def test_buffer_size_mismatch():
    with pytest.raises(ValueError):
        Image.from_buffer([1, 2, 3], (2, 2, 1))


def test_set(cube):
    cube.set(1, 0, 1, 255)
    assert cube.get(1, 0, 1) == 255
    assert cube.samples[5] == 255


@pytest.mark.parametrize('index', [(2, 0, 0), (0, 2, 0), (0, 0, 2),
                                   (-1, 0, 0)])
def test_out_of_range(cube, index):
    with pytest.raises(IndexError):
        cube.get(*index)
    with pytest.raises(IndexError):
        cube.set(*index, 1)


@pytest.mark.parametrize('kwargs', [
    dict(size=(2, -1, 2)),
    dict(size=(2, 2)),
    dict(size=(2, 2, 2), spacing=(1., 0., 1.)),
    dict(size=(2, 2, 2), spacing=-1.),
])
def test_invalid_geometry(kwargs):
    with pytest.raises(ValueError):
        Image(**kwargs)


def test_empty_image():
    image = Image((0, 3, 3))
    assert image.is_empty()
    assert image.samples.size == 0


def test_index_physical_conversions():
    image = Image((4, 4, 4), origin=(-1., 0., 2.), spacing=(0.5, 2., 1.))
    assert np.allclose(image.index_to_physical([2, 1, 3]), [0., 2., 5.])
    assert np.allclose(image.physical_to_index([0.25, 3., 2.]),
                       [2.5, 1.5, 0.])
    points = image.index_to_physical(np.zeros((2, 3, 3)))
    assert points.shape == (2, 3, 3)
    assert np.allclose(points, [-1., 0., 2.])


def test_affine():
    image = Image((4, 4, 4), origin=(-1., 0., 2.), spacing=(0.5, 2., 1.))
    affine = image.affine
    assert np.allclose(affine @ [2., 1., 3., 1.],
                       list(image.index_to_physical([2, 1, 3])) + [1.])


def test_copy_is_independent(cube):
    other = cube.copy()
    other.set(0, 0, 0, 99)
    assert cube.get(0, 0, 0) == 0
    like = cube.empty_like(dtype=np.float32)
    assert like.size == cube.size and like.dtype == np.float32
    assert not like.data.any()
