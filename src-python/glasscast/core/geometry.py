"""
Copyright 2026 glasscast authors and contributors

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

    http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""

import math
from typing import List, NamedTuple, Optional, Sequence, Tuple

from shapely.geometry import Point as ShapelyPoint


class Point(NamedTuple):
    """
    A point (or vector) in 2D space.

    Immutable so that rays and crossings holding points can be shared
    freely between recursive tracing branches.
    Can be converted to a Shapely Point.
    """
    x: float
    y: float

    def to_shapely(self) -> ShapelyPoint:
        """Convert to Shapely Point."""
        return ShapelyPoint(self.x, self.y)

    @classmethod
    def of(cls, value: Sequence[float]) -> 'Point':
        """Create a Point from any (x, y) pair."""
        if len(value) != 2:
            raise ValueError(f"Expected an (x, y) pair, got {value!r}")
        return cls(float(value[0]), float(value[1]))

    def to_list(self) -> List[float]:
        """Convert to a JSON-friendly [x, y] list."""
        return [self.x, self.y]


class Geometry:
    """
    Vector helpers for the intersector and the path tracer.

    Polygon validity, orientation and containment are delegated to Shapely;
    this class only holds the small amount of 2D vector algebra needed on
    the hot path of ray tracing, where building Shapely objects per ray
    would dominate the cost.
    """

    @staticmethod
    def add(p1: Point, p2: Point) -> Point:
        return Point(p1.x + p2.x, p1.y + p2.y)

    @staticmethod
    def sub(p1: Point, p2: Point) -> Point:
        return Point(p1.x - p2.x, p1.y - p2.y)

    @staticmethod
    def scale(p1: Point, factor: float) -> Point:
        return Point(p1.x * factor, p1.y * factor)

    @staticmethod
    def dot(p1: Point, p2: Point) -> float:
        """
        Calculate the dot product, where the two points are treated as vectors.

        Args:
            p1: First point (as vector)
            p2: Second point (as vector)

        Returns:
            Dot product
        """
        return p1.x * p2.x + p1.y * p2.y

    @staticmethod
    def cross(p1: Point, p2: Point) -> float:
        """
        Calculate the cross product, where the two points are treated as vectors.

        Args:
            p1: First point (as vector)
            p2: Second point (as vector)

        Returns:
            Cross product (z-component in 2D)
        """
        return p1.x * p2.y - p1.y * p2.x

    @staticmethod
    def length(p1: Point) -> float:
        return math.hypot(p1.x, p1.y)

    @staticmethod
    def distance(p1: Point, p2: Point) -> float:
        """Calculate the distance between two points."""
        return math.sqrt(Geometry.distance_squared(p1, p2))

    @staticmethod
    def distance_squared(p1: Point, p2: Point) -> float:
        """Calculate the squared distance between two points."""
        dx = p1.x - p2.x
        dy = p1.y - p2.y
        return dx * dx + dy * dy

    @staticmethod
    def normalize_vec(p1: Point) -> Point:
        """
        Normalize the given point as if it were a vector.

        A zero vector is returned unchanged; callers treat it as a
        degenerate direction.

        Args:
            p1: Point (as vector)

        Returns:
            Normalized vector
        """
        len_val = math.hypot(p1.x, p1.y)
        if len_val == 0:
            return Point(0.0, 0.0)
        return Point(p1.x / len_val, p1.y / len_val)

    @staticmethod
    def reflect(direction: Point, normal: Point) -> Point:
        """
        Reflect a direction about a surface normal.

        Args:
            direction: Incident direction (unit vector)
            normal: Surface normal (unit vector, either orientation)

        Returns:
            The reflected direction d - 2 (d.n) n
        """
        d_dot_n = Geometry.dot(direction, normal)
        return Point(direction.x - 2.0 * d_dot_n * normal.x,
                     direction.y - 2.0 * d_dot_n * normal.y)

    @staticmethod
    def refract(direction: Point, normal: Point, n1: float, n2: float) -> Optional[Point]:
        """
        Refract a direction through an interface using Snell's law.

        Args:
            direction: Incident direction (unit vector)
            normal: Surface normal (unit vector, either orientation)
            n1: Refractive index on the incident side
            n2: Refractive index on the transmitted side

        Returns:
            The refracted unit direction, or None on total internal reflection.
        """
        cos_i = -Geometry.dot(direction, normal)
        if cos_i < 0:
            # Normal points away from the incident side
            normal = Point(-normal.x, -normal.y)
            cos_i = -cos_i

        eta = n1 / n2
        sin2_t = eta * eta * (1.0 - cos_i * cos_i)
        if sin2_t > 1.0:
            return None

        cos_t = math.sqrt(1.0 - sin2_t)
        factor = eta * cos_i - cos_t
        return Geometry.normalize_vec(Point(
            eta * direction.x + factor * normal.x,
            eta * direction.y + factor * normal.y
        ))

    @staticmethod
    def ray_edge_crossing(
        origin: Point,
        direction: Point,
        a: Point,
        b: Point
    ) -> Optional[float]:
        """
        Find where the line of a ray crosses an edge.

        The edge is crossed when its endpoints lie on different sides of
        the ray line. An endpoint exactly on the line counts as lying on
        the left side, so a ray through a vertex crosses exactly one of
        the two edges meeting there when it passes through the boundary,
        and zero or two when it only touches it.

        Args:
            origin: Ray origin
            direction: Ray direction (need not be normalized)
            a: First endpoint of the edge
            b: Second endpoint of the edge

        Returns:
            t such that origin + t * direction lies on the edge, or None
            when the edge is not crossed. t may be negative.
        """
        side_a = Geometry.cross(direction, Point(a.x - origin.x, a.y - origin.y))
        side_b = Geometry.cross(direction, Point(b.x - origin.x, b.y - origin.y))
        if (side_a >= 0.0) == (side_b >= 0.0):
            return None

        edge = Point(b.x - a.x, b.y - a.y)
        # Non-zero: equals side_b - side_a, and the signs differ
        denominator = Geometry.cross(direction, edge)
        offset = Point(a.x - origin.x, a.y - origin.y)
        return Geometry.cross(offset, edge) / denominator

    @staticmethod
    def ray_circle_intersections(
        origin: Point,
        direction: Point,
        center: Point,
        radius: float,
        tolerance: float = 0.0
    ) -> List[float]:
        """
        Calculate the ray parameters where a ray meets a circle.

        Args:
            origin: Ray origin
            direction: Ray direction (unit vector)
            center: Circle center
            radius: Circle radius
            tolerance: Discriminants at or below this (relative to r^2)
                count as tangent and produce no intersection

        Returns:
            Sorted list of t values (empty, or two values)
        """
        oc = Point(origin.x - center.x, origin.y - center.y)
        b = Geometry.dot(oc, direction)
        c = Geometry.dot(oc, oc) - radius * radius
        discriminant = b * b - c

        if discriminant <= tolerance * radius * radius:
            return []

        root = math.sqrt(discriminant)
        return [-b - root, -b + root]


# Create a singleton instance for convenience
geometry = Geometry()
