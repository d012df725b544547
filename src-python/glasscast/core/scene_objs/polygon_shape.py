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

from typing import Any, Dict, Iterable, List, Mapping, Sequence, Tuple, TYPE_CHECKING

from shapely.geometry import Polygon
from shapely.geometry.polygon import orient
from shapely.validation import explain_validity

from .base_shape import BaseShape, point_list
from ..errors import StructuralSceneError
from ..geometry import Point, geometry
from ..material import Material

if TYPE_CHECKING:
    from ..ray import Ray


class PolygonShape(BaseShape):
    """
    Glass shaped as a polygon, optionally with holes.

    The polygon may be concave; a ray can then enter and leave it several
    times and every crossing is reported. Holes are regions of air inside
    the glass.

    Attributes:
        vertices: Outer boundary, as a tuple of Points (not closed; the last
            vertex connects back to the first).
        holes: Inner boundaries, one tuple of Points per hole.

    Notes:
        - The boundary is validated with Shapely: a self-intersecting or
          zero-area polygon raises StructuralSceneError because inside and
          outside are ambiguous.
        - The rings are re-oriented with shapely's orient() (outer ring
          counter-clockwise, holes clockwise), so the right-hand normal of
          every edge points out of the glass.
    """

    type = 'polygon'

    def __init__(
        self,
        id: str,
        vertices: Sequence[Sequence[float]],
        material: Material,
        holes: Sequence[Sequence[Sequence[float]]] = ()
    ) -> None:
        super().__init__(id, material)
        self._vertices = point_list(vertices, f"Polygon '{id}' vertices")
        self._holes = tuple(point_list(hole, f"Polygon '{id}' hole") for hole in holes)

        if len(self._vertices) < 3:
            raise StructuralSceneError(
                f"Polygon '{id}' needs at least 3 vertices, got {len(self._vertices)}"
            )
        for hole in self._holes:
            if len(hole) < 3:
                raise StructuralSceneError(f"Polygon '{id}' has a hole with fewer than 3 vertices")

        polygon = Polygon(self._vertices, [list(hole) for hole in self._holes])
        if not polygon.is_valid:
            raise StructuralSceneError(
                f"Polygon '{id}' has an ambiguous boundary: {explain_validity(polygon)}"
            )
        if polygon.area <= 0:
            raise StructuralSceneError(f"Polygon '{id}' has zero area")

        self._polygon = orient(polygon, sign=1.0)
        self._bounds = self._polygon.bounds
        self._edges = self._build_edges()

    def _build_edges(self) -> List[Tuple[Point, Point, Point]]:
        """Get (start, end, outward_normal) for every edge of every ring."""
        edges = []
        rings = [self._polygon.exterior] + list(self._polygon.interiors)
        for ring in rings:
            coords = [Point(x, y) for x, y in ring.coords]
            for a, b in zip(coords[:-1], coords[1:]):
                if a == b:
                    continue
                normal = geometry.normalize_vec(Point(b.y - a.y, -(b.x - a.x)))
                edges.append((a, b, normal))
        return edges

    @property
    def vertices(self) -> Tuple[Point, ...]:
        return self._vertices

    @property
    def holes(self) -> Tuple[Tuple[Point, ...], ...]:
        return self._holes

    def to_shapely(self) -> Polygon:
        return self._polygon

    def _raw_hits(self, ray: 'Ray') -> Iterable[Tuple[float, Point]]:
        for a, b, normal in self._edges:
            t = geometry.ray_edge_crossing(ray.origin, ray.direction, a, b)
            if t is not None:
                yield t, normal

    def to_dict(self, material_name: str) -> Dict[str, Any]:
        data = super().to_dict(material_name)
        data['vertices'] = [p.to_list() for p in self._vertices]
        if self._holes:
            data['holes'] = [[p.to_list() for p in hole] for hole in self._holes]
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], material: Material) -> 'PolygonShape':
        if 'vertices' not in data:
            raise StructuralSceneError(f"Polygon '{data.get('id')}' has no 'vertices'")
        return cls(data.get('id'), data['vertices'], material, holes=data.get('holes') or ())
