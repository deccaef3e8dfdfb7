"""Tests for geometric shapes."""

import pytest
import math
from lumentrace.vec3 import Vec3, Point3, Color
from lumentrace.ray import Ray
from lumentrace.materials import Material, IVORY
from lumentrace.shapes import Sphere, Triangle, TriangleMesh, Checkerboard


class TestSphere:
    """Test Sphere class."""

    def test_creation(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0, IVORY)
        assert sphere.center == Point3(0, 0, 0)
        assert sphere.radius == 1.0
        assert sphere.material is IVORY

    def test_default_material(self):
        assert Sphere(Point3(0, 0, 0), 1.0).material == Material()

    @pytest.mark.parametrize("radius", [0.0, -1.0])
    def test_invalid_radius(self, radius):
        with pytest.raises(ValueError):
            Sphere(Point3(0, 0, 0), radius)

    def test_hit_through_center(self):
        sphere = Sphere(Point3(0, 0, -10), 2.0)
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))
        assert sphere.ray_intersect(ray) == 8.0

    def test_hit_through_center_oblique(self):
        center = Point3(3, 4, -12)
        sphere = Sphere(center, 1.5)
        ray = Ray(Point3(0, 0, 0), center.normalize())
        assert math.isclose(sphere.ray_intersect(ray), 13.0 - 1.5, rel_tol=1e-12)

    def test_tangent_is_miss(self):
        # Perpendicular distance exactly equals the radius
        sphere = Sphere(Point3(0, 0, -5), 1.0)
        ray = Ray(Point3(1, 0, 0), Vec3(0, 0, -1))
        assert sphere.ray_intersect(ray) is None

    def test_just_inside_tangent_is_hit(self):
        sphere = Sphere(Point3(0, 0, -5), 1.0)
        ray = Ray(Point3(0.999, 0, 0), Vec3(0, 0, -1))
        assert sphere.ray_intersect(ray) is not None

    def test_miss(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 5, -5), Vec3(0, 0, 1))
        assert sphere.ray_intersect(ray) is None

    def test_origin_inside_returns_far_side(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, 1))
        assert sphere.ray_intersect(ray) == 1.0

    def test_origin_inside_off_center(self):
        sphere = Sphere(Point3(0, 0, 0), 2.0)
        ray = Ray(Point3(0, 0, 1), Vec3(0, 0, -1))
        assert sphere.ray_intersect(ray) == 3.0

    def test_behind_ray(self):
        sphere = Sphere(Point3(0, 0, -5), 1.0)
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, 1))
        assert sphere.ray_intersect(ray) is None

    def test_zero_distance_is_miss(self):
        # Origin on the surface, pointing outward
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        ray = Ray(Point3(0, 0, 1), Vec3(0, 0, 1))
        assert sphere.ray_intersect(ray) is None

    def test_hit_record(self):
        sphere = Sphere(Point3(0, 0, -5), 1.0, IVORY)
        hit = sphere.hit(Ray(Point3(0, 0, 0), Vec3(0, 0, -1)))

        assert hit is not None
        assert hit.t == 4.0
        assert hit.point == Point3(0, 0, -4)
        assert hit.normal == Vec3(0, 0, 1)
        assert hit.material is IVORY

    def test_normal_not_flipped_from_inside(self):
        sphere = Sphere(Point3(0, 0, 0), 1.0)
        hit = sphere.hit(Ray(Point3(0, 0, 0), Vec3(0, 0, 1)))
        # Outward normal points along the ray
        assert hit.normal == Vec3(0, 0, 1)

    def test_hit_respects_t_max(self):
        sphere = Sphere(Point3(0, 0, -5), 1.0)
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))
        assert sphere.hit(ray, 4.0) is None
        assert sphere.hit(ray, 4.5) is not None


class TestTriangle:
    """Test Möller-Trumbore triangle intersection."""

    @pytest.fixture
    def triangle(self):
        return Triangle(Point3(-1, -1, -5), Point3(1, -1, -5), Point3(0, 1, -5), IVORY)

    def test_hit_front(self, triangle):
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))
        assert math.isclose(triangle.ray_intersect(ray), 5.0)

    def test_clockwise_winding_is_miss(self):
        tri = Triangle(Point3(-1, -1, -5), Point3(-1, 1, -5), Point3(1, -1, -5))
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))
        assert tri.ray_intersect(ray) is None
        assert tri.hit(ray) is None

    def test_back_face_culled(self, triangle):
        # Same triangle seen from behind
        assert triangle.ray_intersect(Ray(Point3(0, 0, -10), Vec3(0, 0, 1))) is None

    def test_reversed_winding_hit_from_behind(self):
        tri = Triangle(Point3(-1, -1, -5), Point3(0, 1, -5), Point3(1, -1, -5))
        hit = tri.hit(Ray(Point3(0, 0, -10), Vec3(0, 0, 1)))
        assert hit is not None
        assert math.isclose(hit.t, 5.0)
        assert hit.normal == Vec3(0, 0, -1)

    def test_face_normal(self, triangle):
        assert triangle.normal == Vec3(0, 0, 1)

    def test_miss_outside(self, triangle):
        assert triangle.ray_intersect(Ray(Point3(5, 5, 0), Vec3(0, 0, -1))) is None

    def test_miss_beyond_hypotenuse(self, triangle):
        assert triangle.ray_intersect(Ray(Point3(0.9, 0.9, 0), Vec3(0, 0, -1))) is None

    def test_parallel(self, triangle):
        assert triangle.ray_intersect(Ray(Point3(0, 0, -5), Vec3(1, 0, 0))) is None

    def test_behind(self, triangle):
        assert triangle.ray_intersect(Ray(Point3(0, 0, -10), Vec3(0, 0, -1))) is None

    def test_degenerate_triangle(self):
        tri = Triangle(Point3(0, 0, -5), Point3(1, 0, -5), Point3(2, 0, -5))
        assert tri.ray_intersect(Ray(Point3(0.5, 0, 0), Vec3(0, 0, -1))) is None

    def test_hit_record(self, triangle):
        hit = triangle.hit(Ray(Point3(0, 0, 0), Vec3(0, 0, -1)))
        assert hit.point == Point3(0, 0, -5)
        assert hit.material is IVORY

    def test_hit_respects_t_max(self, triangle):
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))
        assert triangle.hit(ray, 5.0) is None
        assert triangle.hit(ray, 6.0) is not None


class TestTriangleMesh:
    """Test indexed meshes."""

    @pytest.fixture
    def two_layer_mesh(self):
        vertices = [
            Point3(-1, -1, -5), Point3(1, -1, -5), Point3(0, 1, -5),
            Point3(-1, -1, -3), Point3(1, -1, -3), Point3(0, 1, -3),
        ]
        return TriangleMesh(vertices, [(0, 1, 2), (3, 4, 5)], IVORY)

    def test_counts(self, two_layer_mesh):
        assert two_layer_mesh.nverts == 6
        assert two_layer_mesh.nfaces == 2
        assert len(two_layer_mesh) == 2

    def test_nearest_face(self, two_layer_mesh):
        hit = two_layer_mesh.hit(Ray(Point3(0, 0, 0), Vec3(0, 0, -1)))
        assert math.isclose(hit.t, 3.0)
        assert hit.material is IVORY

    def test_miss(self, two_layer_mesh):
        assert two_layer_mesh.hit(Ray(Point3(0, 0, 0), Vec3(0, 0, 1))) is None

    def test_index_out_of_range(self):
        with pytest.raises(ValueError):
            TriangleMesh([Point3(0, 0, 0), Point3(1, 0, 0), Point3(0, 1, 0)], [(0, 1, 3)])

    def test_negative_index(self):
        with pytest.raises(ValueError):
            TriangleMesh([Point3(0, 0, 0), Point3(1, 0, 0), Point3(0, 1, 0)], [(0, 1, -1)])

    def test_face_must_be_triple(self):
        with pytest.raises(ValueError):
            TriangleMesh([Point3(0, 0, 0), Point3(1, 0, 0), Point3(0, 1, 0)], [(0, 1)])

    def test_shared_material(self, two_layer_mesh):
        assert all(t.material is IVORY for t in two_layer_mesh.triangles)


class TestCheckerboard:
    """Test the bounded checkerboard floor."""

    def test_defaults(self):
        board = Checkerboard()
        assert board.height == -4.0
        assert board.half_width == 10.0
        assert board.z_near == -10.0
        assert board.z_far == -30.0

    def test_hit(self):
        board = Checkerboard()
        ray = Ray(Point3(0, 0, 0), Vec3(0, -4, -15).normalize())
        hit = board.hit(ray)

        assert hit is not None
        assert hit.point == Point3(0, -4, -15)
        assert hit.normal == Vec3(0, 1, 0)
        assert math.isclose(hit.t, math.sqrt(16 + 225))

    def test_hit_material(self):
        board = Checkerboard()
        hit = board.hit(Ray(Point3(0, 0, 0), Vec3(0, -4, -15).normalize()))
        assert hit.material.albedo == Material().albedo
        assert hit.material.diffuse_color == Color(0.3, 0.21, 0.09)

    def test_tile_colors_alternate(self):
        board = Checkerboard()
        assert board.color_at(Point3(0.5, -4, -15)) == Color(0.3, 0.21, 0.09)
        assert board.color_at(Point3(2.5, -4, -15)) == Color(0.3, 0.3, 0.3)
        assert board.color_at(Point3(2.5, -4, -13)) == Color(0.3, 0.21, 0.09)
        assert board.color_at(Point3(-1.5, -4, -15)) == Color(0.3, 0.3, 0.3)

    def test_too_close(self):
        board = Checkerboard()
        assert board.hit(Ray(Point3(0, 0, 0), Vec3(0, -4, -5).normalize())) is None

    def test_too_far(self):
        board = Checkerboard()
        assert board.hit(Ray(Point3(0, 0, 0), Vec3(0, -4, -40).normalize())) is None

    def test_outside_width(self):
        board = Checkerboard()
        assert board.hit(Ray(Point3(0, 0, 0), Vec3(12, -4, -15).normalize())) is None

    def test_near_parallel(self):
        board = Checkerboard()
        assert board.hit(Ray(Point3(0, 0, 0), Vec3(0, -0.0005, -1).normalize())) is None

    def test_pointing_up(self):
        board = Checkerboard()
        assert board.hit(Ray(Point3(0, 0, 0), Vec3(0, 4, -15).normalize())) is None

    def test_configurable_bounds(self):
        board = Checkerboard(height=-1.0, z_near=-1.0, z_far=-100.0)
        hit = board.hit(Ray(Point3(0, 0, 0), Vec3(0, -1, -3).normalize()))
        assert hit is not None
        assert hit.point == Point3(0, -1, -3)

    def test_hit_respects_t_max(self):
        board = Checkerboard()
        ray = Ray(Point3(0, 0, 0), Vec3(0, -4, -15).normalize())
        assert board.hit(ray, 10.0) is None
