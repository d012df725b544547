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
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, TYPE_CHECKING

from shapely.geometry import Polygon

from ..constants import MERGE_TOLERANCE, TANGENT_TOLERANCE
from ..crossing import Crossing, CrossingKind
from ..errors import StructuralSceneError
from ..geometry import Point, geometry
from ..material import Material

if TYPE_CHECKING:
    from ..ray import Ray


class BaseShape:
    """
    The base class for glass shapes.

    A shape is a closed region of the plane made of one Material. Shapes
    validate their boundary when they are constructed and are immutable
    afterwards; an invalid boundary raises StructuralSceneError.

    Subclasses implement:
        - to_shapely(): the region as a Shapely Polygon
        - _raw_hits(ray): every (t, outward_normal) where the ray line
          meets the boundary

    Attributes:
        id (str): Identifier, unique within a scene
        material (Material): The glass the shape is made of

    Notes:
        - Entry/exit is decided geometrically from the outward normal, so a
          shape needs no knowledge of where a ray came from.
        - Shapes may overlap or nest; the path tracer keeps track of which
          shapes a ray is inside.
    """

    type = 'shape'

    def __init__(self, id: str, material: Material) -> None:
        if not isinstance(id, str) or not id:
            raise StructuralSceneError(f"Shape id must be a non-empty string, got {id!r}")
        if not isinstance(material, Material):
            raise StructuralSceneError(
                f"Shape '{id}' needs a Material, got {type(material).__name__}"
            )
        self._id = id
        self._material = material

    @property
    def id(self) -> str:
        return self._id

    @property
    def material(self) -> Material:
        return self._material

    def to_shapely(self) -> Polygon:
        """Get the region covered by the shape as a Shapely Polygon."""
        raise NotImplementedError

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        """Bounding box (min_x, min_y, max_x, max_y)."""
        return self._bounds

    def contains(self, point: Point) -> bool:
        """True if the point lies strictly inside the shape."""
        return self.to_shapely().contains(point.to_shapely())

    def _raw_hits(self, ray: 'Ray') -> Iterable[Tuple[float, Point]]:
        raise NotImplementedError

    def _misses_bounds(self, ray: 'Ray', t_max: float) -> bool:
        """
        Slab test of the ray against the bounding box.

        Returns True only when the ray certainly misses the shape before
        t_max.
        """
        min_x, min_y, max_x, max_y = self._bounds
        t_near, t_far = -math.inf, t_max
        for o, d, lo, hi in ((ray.origin.x, ray.direction.x, min_x, max_x),
                             (ray.origin.y, ray.direction.y, min_y, max_y)):
            if abs(d) < 1e-15:
                if o < lo - MERGE_TOLERANCE or o > hi + MERGE_TOLERANCE:
                    return True
                continue
            t1 = (lo - o) / d
            t2 = (hi - o) / d
            if t1 > t2:
                t1, t2 = t2, t1
            t_near = max(t_near, t1)
            t_far = min(t_far, t2)
        return t_near > t_far + MERGE_TOLERANCE or t_far < 0

    def crossings(self, ray: 'Ray', t_min: float, t_max: float, order: int = 0) -> List[Crossing]:
        """
        Get the crossings of a ray with the boundary, sorted by t.

        Grazing hits are dropped. Hits of this shape closer than
        MERGE_TOLERANCE to each other are merged: same-kind hits become one
        crossing with the averaged normal, while an entry and an exit at the
        same point (a ray touching a corner) cancel.

        Args:
            ray: The ray
            t_min: Crossings at or before this distance are ignored
            t_max: Crossings at or beyond this distance are ignored
            order: Insertion index of this shape in its scene

        Returns:
            List of Crossing objects
        """
        if ray.is_degenerate or self._misses_bounds(ray, t_max):
            return []

        hits = []
        for t, normal in self._raw_hits(ray):
            d_dot_n = geometry.dot(ray.direction, normal)
            if abs(d_dot_n) < TANGENT_TOLERANCE:
                continue
            kind = CrossingKind.ENTRY if d_dot_n < 0 else CrossingKind.EXIT
            hits.append((t, kind, normal))
        hits.sort(key=lambda hit: hit[0])

        result = []
        i = 0
        while i < len(hits):
            group = [hits[i]]
            i += 1
            while i < len(hits) and hits[i][0] - group[0][0] <= MERGE_TOLERANCE:
                group.append(hits[i])
                i += 1
            crossing = self._merge_group(ray, group, order)
            if crossing is not None and t_min < crossing.t < t_max:
                result.append(crossing)
        return result

    def _merge_group(self, ray: 'Ray', group, order: int) -> Optional[Crossing]:
        entries = [hit for hit in group if hit[1] is CrossingKind.ENTRY]
        exits = [hit for hit in group if hit[1] is CrossingKind.EXIT]
        if len(entries) == len(exits):
            # Touching: the ray stays on the same side
            return None
        kept = entries if len(entries) > len(exits) else exits
        t = kept[0][0]
        normal = geometry.normalize_vec(Point(
            sum(hit[2].x for hit in kept),
            sum(hit[2].y for hit in kept)
        ))
        if normal == Point(0.0, 0.0):
            return None
        return Crossing(t=t, shape=self, kind=kept[0][1], normal=normal,
                        order=order, point=ray.point_at(t))

    def to_dict(self, material_name: str) -> Dict[str, Any]:
        """Serialize the shape, referring to its material by name."""
        return {'id': self.id, 'type': self.type, 'material': material_name}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], material: Material) -> 'BaseShape':
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r}, material={self.material.name!r})"


def point_list(value: Any, what: str) -> Tuple[Point, ...]:
    """
    Convert a sequence of (x, y) pairs to Points.

    Raises:
        StructuralSceneError: If the value is not a sequence of finite pairs.
    """
    try:
        points = tuple(Point.of(p) for p in value)
    except (TypeError, ValueError) as exc:
        raise StructuralSceneError(f"{what} must be a list of (x, y) pairs: {exc}") from exc
    for p in points:
        if not (math.isfinite(p.x) and math.isfinite(p.y)):
            raise StructuralSceneError(f"{what} contains a non-finite coordinate: {p}")
    return points
