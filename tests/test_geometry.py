import math
import unittest

import numpy as np

from leaf_lsystem import geometry
from leaf_lsystem.geometry import Box, Line, Mesh, Plane


class TestTransforms(unittest.TestCase):

    def test_translation(self):
        m = geometry.translation((1, 2, 3))
        np.testing.assert_allclose(geometry.apply(m, (1, 1, 1)), [2, 3, 4])

    def test_rotation_about_center(self):
        m = geometry.rotation(math.pi / 2, (0, 0, 1), (1, 0, 0))
        np.testing.assert_allclose(geometry.apply(m, (1, 0, 0)), [1, 0, 0], atol=1e-12)
        np.testing.assert_allclose(geometry.apply(m, (2, 0, 0)), [1, 1, 0], atol=1e-12)

    def test_scale_about_center(self):
        m = geometry.scale((1, 1, 1), 3.0)
        pts = geometry.apply(m, [(1, 1, 1), (2, 1, 1)])
        np.testing.assert_allclose(pts, [(1, 1, 1), (4, 1, 1)])

    def test_zero_axis(self):
        with self.assertRaises(ValueError):
            geometry.rotation(1.0, (0, 0, 0), (0, 0, 0))


class TestPlane(unittest.TestCase):

    def test_axes_are_orthonormal(self):
        plane = Plane((0, 0, 0), (2, 0, 0), (1, 3, 0))
        np.testing.assert_allclose(plane.x_axis, [1, 0, 0])
        np.testing.assert_allclose(plane.y_axis, [0, 1, 0])
        np.testing.assert_allclose(plane.z_axis, [0, 0, 1])

    def test_collinear_points(self):
        with self.assertRaises(ValueError):
            Plane((0, 0, 0), (1, 0, 0), (2, 0, 0))

    def test_plane_to_plane(self):
        source = Plane((0, 0, 0), (1, 0, 0), (0, 1, 0))
        target = Plane((5, 5, 5), (5, 6, 5), (4, 5, 5))
        m = geometry.plane_to_plane(source, target)
        np.testing.assert_allclose(geometry.apply(m, (0, 0, 0)), [5, 5, 5], atol=1e-12)
        np.testing.assert_allclose(geometry.apply(m, (1, 0, 0)), [5, 6, 5], atol=1e-12)
        np.testing.assert_allclose(geometry.apply(m, (0, 1, 0)), [4, 5, 5], atol=1e-12)
        moved = source.transform(m)
        np.testing.assert_allclose(moved.z_axis, target.z_axis, atol=1e-12)


class TestPrimitives(unittest.TestCase):

    def test_box_corners(self):
        box = Box(Plane((0, 0, 0), (1, 0, 0), (0, 1, 0)), 2.0)
        corners = box.corners()
        self.assertEqual(corners.shape, (8, 3))
        np.testing.assert_allclose(corners.min(axis=0), [0, 0, 0])
        np.testing.assert_allclose(corners.max(axis=0), [2, 2, 2])
        np.testing.assert_allclose(box.center, [1, 1, 1])
        self.assertTrue(box.to_mesh().is_valid)

    def test_mesh_transform_returns_copy(self):
        mesh = Mesh.box(1.0)
        moved = mesh.transform(geometry.translation((1, 0, 0)))
        np.testing.assert_allclose(mesh.bounds[0], [0, 0, 0])
        np.testing.assert_allclose(moved.bounds[0], [1, 0, 0])
        self.assertEqual(moved.faces, mesh.faces)

    def test_box_transform(self):
        box = Box(Plane((0, 0, 0), (1, 0, 0), (0, 1, 0)), 2.0)
        moved = box.transform(geometry.translation((3, 0, 0)))
        self.assertIsInstance(moved, Box)
        self.assertEqual(moved.size, 2.0)
        np.testing.assert_allclose(moved.center, [4, 1, 1])
        np.testing.assert_allclose(box.center, [1, 1, 1])

        turned = box.transform(geometry.rotation(math.pi / 2, (0, 0, 1), (0, 0, 0)))
        np.testing.assert_allclose(turned.center, [-1, 1, 1], atol=1e-9)

    def test_line_length(self):
        self.assertAlmostEqual(Line((0, 0, 0), (3, 4, 0)).length, 5.0)


if __name__ == "__main__":
    unittest.main()
