import numpy as np
import pytest

from volwarp.errors import SingularMatrixError, TransformBuildError
from volwarp.linalg import rodrigues
from volwarp.space import AffineMap, AffineTransform, centered, \
    as_affine_map, translation, scaling, rotation3d, compose, \
    rotation_center, composite_transform


# ----------------------------------------------------------------------
#                               AffineMap
# ----------------------------------------------------------------------

def test_identity():
    ident = AffineMap.identity()
    assert ident.is_identity()
    assert np.array_equal(ident([1., 2., 3.]), [1., 2., 3.])


def test_map_is_immutable():
    a_map = AffineMap(np.eye(3), [1., 2., 3.])
    with pytest.raises(ValueError):
        a_map.offset[0] = 5.


def test_composition_order():
    shift = translation([1., 0., 0.])
    zoom = scaling(2.)
    # shift is applied last
    assert np.allclose((shift @ zoom)([1., 1., 1.]), [3., 2., 2.])
    assert np.allclose((zoom @ shift)([1., 1., 1.]), [4., 2., 2.])
    assert (shift @ zoom).allclose(compose(shift, zoom))


def test_inverse():
    a_map = rotation3d([1., 1., 0.], 0.7, center=[3., 1., 2.]) \
        @ scaling([2., 0.5, 1.5]) @ translation([1., -2., 4.])
    assert (a_map @ a_map.inverse()).is_identity(atol=1e-10)
    assert (a_map.inverse() @ a_map).is_identity(atol=1e-10)


def test_inverse_singular():
    a_map = AffineMap(np.diag([1., 0., 1.]))
    assert not a_map.is_invertible()
    with pytest.raises(SingularMatrixError):
        a_map.inverse()


def test_homogeneous_conversions():
    a_map = AffineMap(np.diag([2., 3., 4.]), [1., 2., 3.])
    mat = a_map.homogeneous
    assert as_affine_map(mat) == a_map
    assert as_affine_map(mat[:3]) == a_map
    assert as_affine_map(AffineTransform(a_map.matrix, a_map.offset)) \
        == a_map


def test_centered():
    R = rodrigues([0, 0, 1], np.pi / 2)
    a_map = centered(R, [1., 1., 0.])
    # The center is a fixed point
    assert np.allclose(a_map([1., 1., 0.]), [1., 1., 0.])
    assert np.allclose(a_map([2., 1., 0.]), [1., 2., 0.])


# ----------------------------------------------------------------------
#                             AffineTransform
# ----------------------------------------------------------------------

def test_translate_ignores_center():
    tfm = AffineTransform(center=[10., 10., 10.])
    tfm.translate([6., 2., 4.])
    assert np.array_equal(tfm.matrix, np.eye(3))
    assert np.array_equal(tfm.offset, [6., 2., 4.])


def test_scale_about_center():
    tfm = AffineTransform()
    tfm.translate([1., 1., 1.]).set_center([1., 2., 3.]).scale(2.)
    assert np.allclose(tfm.matrix, 2 * np.eye(3))
    # b <- diag(s) @ (b - c) + c
    assert np.allclose(tfm.offset, [1., 0., -1.])


def test_scale_invalid():
    tfm = AffineTransform()
    with pytest.raises(TransformBuildError):
        tfm.scale([1., 0., 1.])
    with pytest.raises(TransformBuildError):
        tfm.scale(-2.)
    with pytest.raises(ValueError):
        tfm.scale([1., 1.])


def test_rotate3d_post():
    tfm = AffineTransform().scale([0.5, 0.75, 0.9]).translate([6., 2., 4.])
    A, b = tfm.matrix.copy(), tfm.offset.copy()
    c = np.array([5., 6., 7.])
    tfm.set_center(c).rotate3d([1., 0., 0.], np.pi / 3)
    R = rodrigues([1., 0., 0.], np.pi / 3)
    assert np.allclose(tfm.matrix, R @ A)
    assert np.allclose(tfm.offset, R @ (b - c) + c)


def test_rotate3d_pre():
    tfm = AffineTransform().scale([0.5, 0.75, 0.9]).translate([6., 2., 4.])
    before = tfm.affine_map
    c = np.array([5., 6., 7.])
    R = rodrigues([0., 1., 1.], 0.4)
    tfm.set_center(c).rotate3d([0., 1., 1.], 0.4, pre=True)
    assert np.allclose(tfm.matrix, before.matrix @ R)
    assert np.allclose(tfm.offset,
                       before.offset + before.matrix @ (c - R @ c))
    point = np.array([1., -3., 2.])
    assert np.allclose(tfm.transform_point(point),
                       before(R @ (point - c) + c))


def test_rotate3d_zero_axis():
    with pytest.raises(TransformBuildError):
        AffineTransform().rotate3d([0., 0., 0.], 1.)


def test_set_center_is_not_retroactive():
    tfm = AffineTransform().translate([1., 2., 3.]).scale(2.)
    matrix, offset = tfm.matrix.copy(), tfm.offset.copy()
    tfm.set_center([10., 20., 30.])
    assert np.array_equal(tfm.matrix, matrix)
    assert np.array_equal(tfm.offset, offset)
    assert np.array_equal(tfm.center, [10., 20., 30.])


def test_translation_parameters():
    tfm = AffineTransform(center=[1., 2., 3.])
    tfm.rotate3d([0., 0., 1.], 0.3).translate([1., 1., 1.])
    c = tfm.center
    assert np.allclose(tfm.translation, tfm.offset - c + tfm.matrix @ c)
    params = tfm.parameters
    assert params.shape == (12,)
    assert np.allclose(params[:9], tfm.matrix.reshape(-1))


def test_shear_and_plane_rotation():
    tfm = AffineTransform().shear(0, 1, 0.5)
    assert np.allclose(tfm.transform_point([1., 2., 3.]), [2., 2., 3.])
    with pytest.raises(TransformBuildError):
        AffineTransform().shear(2, 2, 0.5)
    tfm = AffineTransform(center=[1., 1., 0.]).rotate(0, 1, np.pi / 2)
    assert np.allclose(tfm.transform_point([1., 2., 0.]), [2., 1., 0.])


def test_compose_pre_and_post():
    shift = translation([1., 0., 0.])
    tfm = AffineTransform().scale(2.).compose(shift)
    assert np.allclose(tfm.transform_point([1., 1., 1.]), [3., 2., 2.])
    tfm = AffineTransform().scale(2.).compose(shift, pre=True)
    assert np.allclose(tfm.transform_point([1., 1., 1.]), [4., 2., 2.])


def test_builder_inverse_keeps_center():
    tfm = AffineTransform(center=[4., 4., 4.]).rotate3d([0, 0, 1], 0.5)
    inv = tfm.inverse()
    assert np.array_equal(inv.center, tfm.center)
    assert (inv.affine_map @ tfm.affine_map).is_identity(atol=1e-12)


def test_set_identity():
    tfm = AffineTransform().translate([1., 2., 3.]).set_identity()
    assert tfm.affine_map.is_identity()


# ----------------------------------------------------------------------
#                           Composite transform
# ----------------------------------------------------------------------

def test_rotation_center():
    assert np.array_equal(rotation_center([10, 20, 5]), [5., 10., 2.5])
    center = rotation_center([10, 20, 5], origin=[1., 1., 1.],
                             spacing=[2., 0.5, 1.], mode='physical')
    assert np.allclose(center, [11., 6., 3.5])
    with pytest.raises(ValueError):
        rotation_center([10, 20, 5], mode='voxel')


def test_composite_transform():
    size = (64, 48, 30)
    tfm = composite_transform(size)
    S = np.diag([0.5, 0.75, 0.9])
    R = rodrigues([1., 0., 0.], np.pi / 3)
    c = np.array([32., 24., 15.])
    t = np.array([6., 2., 4.])
    # The scaling pivots about the origin, the rotation about size / 2
    assert np.allclose(tfm.center, c)
    assert np.allclose(tfm.matrix, R @ S)
    assert np.allclose(tfm.offset, R @ (S @ t - c) + c)


def test_composite_transform_ignores_spacing_by_default():
    size = (64, 48, 30)
    tfm1 = composite_transform(size)
    tfm2 = composite_transform(size, origin=[5., 5., 5.],
                               spacing=[2., 2., 2.])
    assert tfm1.affine_map == tfm2.affine_map
    tfm3 = composite_transform(size, origin=[5., 5., 5.],
                               spacing=[2., 2., 2.], center_mode='physical')
    assert not tfm1.affine_map.allclose(tfm3.affine_map)
