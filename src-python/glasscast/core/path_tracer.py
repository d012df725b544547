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

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, TYPE_CHECKING

from .color import Color, Span, accumulate, blend
from .constants import AMBIENT_REFRACTIVE_INDEX, MERGE_TOLERANCE
from .crossing import Crossing
from .geometry import Point, geometry
from .intersector import Intersector
from .ray import Ray

if TYPE_CHECKING:
    from .scene import Scene
    from .scene_objs.base_shape import BaseShape

# Directions whose dot product is at least this are considered unchanged
SAME_DIRECTION_DOT = 1.0 - 1e-12


@dataclass(frozen=True)
class PathSegment:
    """
    A straight piece of a traced path, recorded for previews and debugging.

    Attributes:
        start: Where the ray started
        end: Where the ray stopped (interface or end of reach)
        interaction: How the ray was created ('primary', 'refract', 'reflect', 'tir')
        depth: Remaining depth of the ray
        color: Color carried at the end of the segment
    """
    start: Point
    end: Point
    interaction: str
    depth: int
    color: Color


class PathTracer:
    """
    Follows a ray through the glass of a scene and computes its color.

    The tracer walks the ordered crossings of a ray while keeping the tuple
    of shapes the ray is currently inside (in entry order). Between two
    crossings the ray travels a span through exactly those materials.

    At each interface (all crossings at the same t):
        - the active tuple is updated (entries appended, exits removed);
        - n1 and n2 are the refractive indices before and after, where the
          index of a region is that of the most recently entered active
          material, or the ambient index outside all glass;
        - Snell's law gives the transmitted direction, or None on total
          internal reflection;
        - the reflectivity r of the interface combines the reflectivities
          of the crossed shapes as 1 - prod(1 - r_i).

    If the direction does not change and r == 0 the ray just passes
    through and the walk continues. Otherwise the ray ends at the interface
    and up to two children continue with depth - 1: the transmitted one
    (weight 1 - r) and the reflected one (weight r). On total internal
    reflection only the reflected child exists, with weight 1.

    Termination:
        - depth <= 0: a primary ray returns the background, any other ray
          its carried color. No crossing is looked at.
        - crossings exhausted: the carried color filtered by the spans
          travelled, or the background for a primary ray that never met
          any glass.

    Attributes:
        intersector (Intersector): Produces the ordered crossings
        verbose (int): Verbosity level
            0 = silent (no debug output)
            1 = verbose (one line per traced ray)
            2 = very verbose/debug (every interface)
    """

    def __init__(self, intersector: Optional[Intersector] = None, verbose: int = 0) -> None:
        self.intersector: Intersector = intersector if intersector is not None else Intersector()
        self.verbose: int = verbose

    def trace(
        self,
        ray: Ray,
        scene: 'Scene',
        inside: Optional[Sequence['BaseShape']] = None
    ) -> Color:
        """
        Compute the color delivered by a ray.

        Args:
            ray: The ray to follow
            scene: The scene (read only)
            inside: Shapes the ray starts inside, in entry order. When None
                they are found by testing which shapes contain the origin.

        Returns:
            tuple: The color, one value per channel
        """
        return self._trace(ray, scene, self._initial_inside(ray, scene, inside), None)

    def trace_path(
        self,
        ray: Ray,
        scene: 'Scene',
        inside: Optional[Sequence['BaseShape']] = None
    ) -> Tuple[Color, List[PathSegment]]:
        """
        Compute the color of a ray and record the straight segments of its path.

        Segments are listed depth-first: transmitted branch before reflected.

        Returns:
            (color, segments)
        """
        segments: List[PathSegment] = []
        color = self._trace(ray, scene, self._initial_inside(ray, scene, inside), segments)
        return color, segments

    @staticmethod
    def _initial_inside(ray: Ray, scene: 'Scene', inside) -> Tuple['BaseShape', ...]:
        if inside is None:
            return scene.shapes_containing(ray.origin)
        return tuple(inside)

    @staticmethod
    def refractive_index(active: Sequence['BaseShape']) -> float:
        """Refractive index of the region inside the active shapes."""
        if not active:
            return AMBIENT_REFRACTIVE_INDEX
        return active[-1].material.refractive_index

    @staticmethod
    def _apply_interface(
        active: Tuple['BaseShape', ...],
        group: Sequence[Crossing]
    ) -> Tuple['BaseShape', ...]:
        updated = list(active)
        for crossing in group:
            if crossing.is_entry:
                if crossing.shape not in updated:
                    updated.append(crossing.shape)
            elif crossing.shape in updated:
                updated.remove(crossing.shape)
            # An exit from a shape the ray was not inside (origin on its
            # boundary) leaves the active tuple as it is
        return tuple(updated)

    @staticmethod
    def _interface_reflectivity(group: Sequence[Crossing]) -> float:
        transmitted = 1.0
        for crossing in group:
            transmitted *= 1.0 - crossing.shape.material.reflectivity
        return 1.0 - transmitted

    def _trace(
        self,
        ray: Ray,
        scene: 'Scene',
        inside: Tuple['BaseShape', ...],
        segments: Optional[List[PathSegment]]
    ) -> Color:
        if self.verbose >= 1:
            print(f"### TRACER {ray.interaction} ray depth={ray.depth} "
                  f"origin=({ray.origin.x:.4f}, {ray.origin.y:.4f}) "
                  f"dir=({ray.direction.x:.4f}, {ray.direction.y:.4f}) inside={[s.id for s in inside]}")

        if ray.depth <= 0:
            if self.verbose >= 1:
                print("  Depth exhausted")
            return scene.background if ray.is_primary else ray.carried_color

        active = inside
        spans: List[Span] = []
        t_prev = 0.0
        met_glass = not ray.is_primary

        crossings = iter(self.intersector.crossings(ray, scene))
        pending = next(crossings, None)
        while pending is not None:
            group = [pending]
            pending = next(crossings, None)
            while pending is not None and pending.t - group[0].t <= MERGE_TOLERANCE:
                group.append(pending)
                pending = next(crossings, None)

            t = group[0].t
            spans.append(Span(t - t_prev, tuple(s.material for s in active)))
            t_prev = t
            met_glass = True

            new_active = self._apply_interface(active, group)
            n1 = self.refractive_index(active)
            n2 = self.refractive_index(new_active)
            r = self._interface_reflectivity(group)
            normal = group[0].normal
            if n1 == n2:
                transmitted_dir = ray.direction
            else:
                transmitted_dir = geometry.refract(ray.direction, normal, n1, n2)

            if self.verbose >= 2:
                print(f"  Interface t={t:.6f} crossings={[(c.shape.id, c.kind.value) for c in group]} "
                      f"n1={n1:.4f} n2={n2:.4f} r={r:.4f} tir={transmitted_dir is None}")

            if (transmitted_dir is not None and r == 0.0 and
                    geometry.dot(transmitted_dir, ray.direction) >= SAME_DIRECTION_DOT):
                active = new_active
                continue

            carried = accumulate(ray.carried_color, spans)
            self._record(segments, ray, t, carried)
            return self._branch(ray, scene, t, carried, normal, transmitted_dir, r,
                                active, new_active, segments)

        t_end = min(ray.reach, scene.far_limit)
        if active:
            # Ray ends inside glass: absorb up to the end of its reach
            spans.append(Span(t_end - t_prev, tuple(s.material for s in active)))
            met_glass = True

        if not met_glass:
            self._record(segments, ray, t_end, scene.background)
            if self.verbose >= 1:
                print("  No glass met: background")
            return scene.background

        color = accumulate(ray.carried_color, spans)
        self._record(segments, ray, t_end, color)
        return color

    def _branch(
        self,
        ray: Ray,
        scene: 'Scene',
        t: float,
        carried: Color,
        normal: Point,
        transmitted_dir: Optional[Point],
        r: float,
        active: Tuple['BaseShape', ...],
        new_active: Tuple['BaseShape', ...],
        segments: Optional[List[PathSegment]]
    ) -> Color:
        """Spawn and trace the children leaving an interface, and weight them."""
        reflected_dir = geometry.reflect(ray.direction, normal)

        if transmitted_dir is None:
            # Total internal reflection: all light stays on this side
            child = ray.spawn(t, reflected_dir, carried, 'tir')
            return self._trace(child, scene, active, segments)

        transmitted = None
        reflected = None
        if r < 1.0:
            child = ray.spawn(t, transmitted_dir, carried, 'refract')
            transmitted = self._trace(child, scene, new_active, segments)
        if r > 0.0:
            child = ray.spawn(t, reflected_dir, carried, 'reflect')
            reflected = self._trace(child, scene, active, segments)

        if reflected is None:
            return transmitted
        if transmitted is None:
            return reflected
        return blend(reflected, transmitted, r)

    @staticmethod
    def _record(segments: Optional[List[PathSegment]], ray: Ray, t: float, color: Color) -> None:
        if segments is not None:
            segments.append(PathSegment(
                start=ray.origin,
                end=ray.point_at(t),
                interaction=ray.interaction,
                depth=ray.depth,
                color=tuple(color),
            ))
