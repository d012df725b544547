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
from typing import Any, Dict, Iterable, Mapping, Sequence, Tuple, TYPE_CHECKING

from shapely.geometry import Polygon

from .base_shape import BaseShape
from ..constants import TANGENT_TOLERANCE
from ..errors import StructuralSceneError
from ..geometry import Point, geometry
from ..material import Material

if TYPE_CHECKING:
    from ..ray import Ray


class CircleShape(BaseShape):
    """
    Glass disc with an analytic circular boundary.

    Intersections are solved exactly from the circle equation; the Shapely
    polygon returned by to_shapely() is a buffered approximation used only
    for bounds and previews.
    """

    type = 'circle'

    # Segments per quarter circle in the Shapely approximation
    QUAD_SEGS = 64

    def __init__(self, id: str, center: Sequence[float], radius: float, material: Material) -> None:
        super().__init__(id, material)
        try:
            self._center = Point.of(center)
            self._radius = float(radius)
        except (TypeError, ValueError) as exc:
            raise StructuralSceneError(f"Circle '{id}' has invalid geometry: {exc}") from exc
        if not (math.isfinite(self._center.x) and math.isfinite(self._center.y)):
            raise StructuralSceneError(f"Circle '{id}' has a non-finite center")
        if not math.isfinite(self._radius) or self._radius <= 0:
            raise StructuralSceneError(f"Circle '{id}' radius must be > 0, got {radius}")

        self._polygon = self._center.to_shapely().buffer(self._radius, quad_segs=self.QUAD_SEGS)
        self._bounds = (self._center.x - self._radius, self._center.y - self._radius,
                        self._center.x + self._radius, self._center.y + self._radius)

    @property
    def center(self) -> Point:
        return self._center

    @property
    def radius(self) -> float:
        return self._radius

    def to_shapely(self) -> Polygon:
        return self._polygon

    def contains(self, point: Point) -> bool:
        return geometry.distance_squared(point, self._center) < self._radius * self._radius

    def _raw_hits(self, ray: 'Ray') -> Iterable[Tuple[float, Point]]:
        # Tangent rays have a (near) zero discriminant and produce no hits
        for t in geometry.ray_circle_intersections(
                ray.origin, ray.direction, self._center, self._radius,
                tolerance=TANGENT_TOLERANCE):
            p = ray.point_at(t)
            yield t, geometry.normalize_vec(geometry.sub(p, self._center))

    def to_dict(self, material_name: str) -> Dict[str, Any]:
        data = super().to_dict(material_name)
        data['center'] = self._center.to_list()
        data['radius'] = self._radius
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], material: Material) -> 'CircleShape':
        for key in ('center', 'radius'):
            if key not in data:
                raise StructuralSceneError(f"Circle '{data.get('id')}' has no '{key}'")
        return cls(data.get('id'), data['center'], data['radius'], material)
