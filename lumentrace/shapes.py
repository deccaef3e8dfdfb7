"""
Geometric shapes for the ray tracer.

Each shape implements the Hittable interface with a `hit` method that
returns the nearest intersection closer than `t_max`, or None.

Normals are never flipped toward the incoming ray: spheres report the
outward normal, triangles the face normal e1 x e2, the checkerboard +Y.
The shading code decides which side of the surface it is on.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
import math
from typing import Optional, Sequence, Tuple

from .vec3 import Vec3, Point3, Color
from .ray import Ray
from .materials import Material

# Determinant and distance threshold for triangle tests
TRIANGLE_EPSILON = 1e-5

# Rays flatter than this never reach the checkerboard
PLANE_EPSILON = 1e-3


@dataclass
class HitRecord:
    """Stores information about a ray-object intersection.

    Attributes:
        point: The intersection point in world space
        normal: Unit surface normal, outward facing (not oriented to the ray)
        material: The material at the hit point
        t: Distance along the ray
    """
    point: Point3
    normal: Vec3
    material: Material
    t: float


class Hittable(ABC):
    """Abstract base class for all objects that can be hit by rays."""

    @abstractmethod
    def hit(self, ray: Ray, t_max: float = math.inf) -> Optional[HitRecord]:
        """Test if ray intersects this object.

        Args:
            ray: The ray to test (unit direction)
            t_max: Only intersections strictly closer than this are reported

        Returns:
            HitRecord if intersection found, None otherwise
        """
        pass


class Sphere(Hittable):
    """A sphere defined by center and radius."""

    def __init__(self, center: Point3, radius: float, material: Optional[Material] = None):
        """Create a sphere.

        Args:
            center: Center point of the sphere
            radius: Radius of the sphere, must be positive
            material: Material for shading (shared, never copied)
        """
        if radius <= 0:
            raise ValueError(f"Sphere radius must be positive, got {radius}")
        self.center = center
        self.radius = radius
        self.material = material if material is not None else Material()

    def ray_intersect(self, ray: Ray) -> Optional[float]:
        """Distance to the nearest intersection in front of the ray origin.

        Geometric method: project the center onto the ray to get the closest
        approach `tca`, then step back and forth by the half chord `thc`.
        A tangent ray counts as a miss, and so does a distance of zero.
        """
        l = self.center - ray.origin
        tca = l.dot(ray.direction)
        d2 = l.dot(l) - tca * tca
        r2 = self.radius * self.radius

        if d2 >= r2:
            return None

        thc = math.sqrt(r2 - d2)
        t0 = tca - thc
        t1 = tca + thc

        # Origin inside the sphere: use the far side
        if t0 < 0:
            t0 = t1
        if t0 <= 0:
            return None
        return t0

    def hit(self, ray: Ray, t_max: float = math.inf) -> Optional[HitRecord]:
        t = self.ray_intersect(ray)
        if t is None or t >= t_max:
            return None

        point = ray.at(t)
        return HitRecord(
            point=point,
            normal=(point - self.center).normalize(),
            material=self.material,
            t=t
        )

    def __repr__(self) -> str:
        return f"Sphere(center={self.center}, radius={self.radius})"


class Triangle(Hittable):
    """A triangle defined by three vertices."""

    def __init__(self, v0: Point3, v1: Point3, v2: Point3, material: Optional[Material] = None):
        """Create a triangle from three vertices.

        Args:
            v0, v1, v2: The three vertices in counter-clockwise order
            material: Material for shading
        """
        self.v0 = v0
        self.v1 = v1
        self.v2 = v2
        self.material = material if material is not None else Material()

        # Pre-compute edges and normal
        self.e1 = v1 - v0
        self.e2 = v2 - v0
        self.normal = self.e1.cross(self.e2).normalize()

    def ray_intersect(self, ray: Ray) -> Optional[float]:
        """Möller-Trumbore intersection distance, or None.

        The barycentric bounds are checked against the signed determinant,
        so the division happens only once the hit is known to be inside.
        A negative determinant means the ray sees the back of the face
        (clockwise winding), which is always a miss.
        """
        pvec = ray.direction.cross(self.e2)
        a = self.e1.dot(pvec)

        # Ray is parallel to triangle (or the triangle is degenerate)
        if abs(a) < TRIANGLE_EPSILON:
            return None

        tvec = ray.origin - self.v0
        qvec = tvec.cross(self.e1)
        u = tvec.dot(pvec)
        v = ray.direction.dot(qvec)

        if u < 0 or u > a:
            return None
        if v < 0 or u + v > a:
            return None

        t = self.e2.dot(qvec) / a
        if t <= TRIANGLE_EPSILON:
            return None
        return t

    def hit(self, ray: Ray, t_max: float = math.inf) -> Optional[HitRecord]:
        t = self.ray_intersect(ray)
        if t is None or t >= t_max:
            return None

        return HitRecord(
            point=ray.at(t),
            normal=self.normal,
            material=self.material,
            t=t
        )

    def __repr__(self) -> str:
        return f"Triangle({self.v0}, {self.v1}, {self.v2})"


class TriangleMesh(Hittable):
    """An indexed triangle mesh sharing a single material."""

    def __init__(
        self,
        vertices: Sequence[Point3],
        faces: Sequence[Tuple[int, int, int]],
        material: Optional[Material] = None
    ):
        """Create a mesh.

        Args:
            vertices: Vertex positions
            faces: Triples of 0-based indices into `vertices`
            material: Material shared by every face

        Raises:
            ValueError: If a face is not a triple or references a missing vertex
        """
        self.vertices: Tuple[Point3, ...] = tuple(vertices)
        self.faces: Tuple[Tuple[int, int, int], ...] = tuple(tuple(f) for f in faces)
        self.material = material if material is not None else Material()

        count = len(self.vertices)
        for n, face in enumerate(self.faces):
            if len(face) != 3:
                raise ValueError(f"Face {n} has {len(face)} indices, expected 3")
            for idx in face:
                if not 0 <= idx < count:
                    raise ValueError(
                        f"Face {n} references vertex {idx}, mesh has {count} vertices"
                    )

        self.triangles = [
            Triangle(self.vertices[i], self.vertices[j], self.vertices[k], self.material)
            for i, j, k in self.faces
        ]

    @property
    def nverts(self) -> int:
        return len(self.vertices)

    @property
    def nfaces(self) -> int:
        return len(self.faces)

    def hit(self, ray: Ray, t_max: float = math.inf) -> Optional[HitRecord]:
        """Find the closest face hit."""
        closest_hit: Optional[HitRecord] = None
        closest_t = t_max

        for triangle in self.triangles:
            hit_record = triangle.hit(ray, closest_t)
            if hit_record is not None:
                closest_hit = hit_record
                closest_t = hit_record.t

        return closest_hit

    def __len__(self) -> int:
        return len(self.faces)

    def __repr__(self) -> str:
        return f"TriangleMesh(vertices={self.nverts}, faces={self.nfaces})"


@dataclass(frozen=True)
class Checkerboard(Hittable):
    """A horizontal two-tone floor bounded to a rectangle.

    The floor lies in the plane y = `height` and only exists for
    |x| < `half_width` and `z_far` < z < `z_near`. The defaults frame
    the reference scene as seen from a camera at the origin.
    """
    height: float = -4.0
    half_width: float = 10.0
    z_near: float = -10.0
    z_far: float = -30.0
    odd_color: Color = field(default_factory=lambda: Color(1.0, 1.0, 1.0))
    even_color: Color = field(default_factory=lambda: Color(1.0, 0.7, 0.3))
    tone_scale: float = 0.3

    def color_at(self, point: Point3) -> Color:
        """Tile color from the parity of the half-scaled coordinates."""
        parity = (math.floor(0.5 * point.x) + math.floor(0.5 * point.z)) & 1
        color = self.odd_color if parity else self.even_color
        return color * self.tone_scale

    def ray_intersect(self, ray: Ray) -> Optional[float]:
        dy = ray.direction.y
        if abs(dy) <= PLANE_EPSILON:
            return None

        d = -(ray.origin.y - self.height) / dy
        if d <= 0:
            return None

        point = ray.at(d)
        if abs(point.x) >= self.half_width:
            return None
        if not self.z_far < point.z < self.z_near:
            return None
        return d

    def hit(self, ray: Ray, t_max: float = math.inf) -> Optional[HitRecord]:
        d = self.ray_intersect(ray)
        if d is None or d >= t_max:
            return None

        point = ray.at(d)
        return HitRecord(
            point=point,
            normal=Vec3(0, 1, 0),
            material=Material(diffuse_color=self.color_at(point)),
            t=d
        )
