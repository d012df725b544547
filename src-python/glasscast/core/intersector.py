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

import heapq
from typing import Iterator, List, Optional, TYPE_CHECKING

from .constants import EPSILON, MERGE_TOLERANCE
from .crossing import Crossing

if TYPE_CHECKING:
    from .ray import Ray
    from .scene import Scene


class Intersector:
    """
    Finds where a ray crosses the shapes of a scene.

    The output is the ordered sequence of crossings along the ray:
    ascending t, and for coincident t (within MERGE_TOLERANCE, e.g. two
    shapes sharing an edge) ascending shape insertion order. Coincident
    crossings are reported with the same t so the sequence is exactly
    non-decreasing, and repeated queries give the same result.

    Attributes:
        epsilon (float): Crossings at or before this distance are ignored,
            so a ray starting on a surface does not hit it again.
    """

    def __init__(self, epsilon: float = EPSILON) -> None:
        self.epsilon: float = epsilon

    def crossings(self, ray: 'Ray', scene: 'Scene') -> Iterator[Crossing]:
        """
        Lazily produce the crossings of a ray with every shape of the scene.

        Only crossings with epsilon < t < min(ray.reach, scene.far_limit)
        are produced. A ray with a zero-length direction produces none.

        Args:
            ray: The ray
            scene: The scene (read only)

        Yields:
            Crossing objects in order
        """
        if ray.is_degenerate:
            return
        t_max = min(ray.reach, scene.far_limit)

        per_shape = [
            shape.crossings(ray, self.epsilon, t_max, order=order)
            for order, shape in enumerate(scene.shapes)
        ]
        merged = heapq.merge(*per_shape, key=lambda c: c.sort_key)

        cluster: List[Crossing] = []
        for crossing in merged:
            if cluster and crossing.t - cluster[0].t > MERGE_TOLERANCE:
                yield from self._ordered_cluster(cluster)
                cluster = []
            cluster.append(crossing)
        if cluster:
            yield from self._ordered_cluster(cluster)

    @staticmethod
    def _ordered_cluster(cluster: List[Crossing]) -> List[Crossing]:
        """Snap a cluster of coincident crossings to one t, ordered by shape."""
        if len(cluster) == 1:
            return cluster
        t = cluster[0].t
        return sorted((c.with_t(t) for c in cluster), key=lambda c: c.order)

    def all_crossings(self, ray: 'Ray', scene: 'Scene') -> List[Crossing]:
        """Get the crossings as a list."""
        return list(self.crossings(ray, scene))

    def first_crossing(self, ray: 'Ray', scene: 'Scene') -> Optional[Crossing]:
        """Get the nearest crossing, or None if the ray meets nothing."""
        return next(iter(self.crossings(ray, scene)), None)
