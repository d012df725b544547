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

from dataclasses import dataclass, replace
from typing import Tuple

from .constants import DEFAULT_MAX_DEPTH, FAR_LIMIT
from .geometry import Point, geometry

VALID_INTERACTIONS = ('primary', 'refract', 'reflect', 'tir')


@dataclass(frozen=True)
class Ray:
    """
    Representation of a light ray for glass rendering.

    A ray is never modified once created. Every interface event produces a
    new Ray with an updated origin, direction, carried color and depth, so
    recursive branches never share mutable state.

    Attributes:
        origin (Point): Starting point
        direction (Point): Unit direction vector. Normalized on construction;
            a zero vector stays zero and produces no crossings.
        carried_color (tuple): Light carried by the ray, one value per
            channel (all ones at full intensity)
        depth (int): Remaining bounce budget
        reach (float): Remaining path length. Crossings further than this
            along the ray are ignored.
        interaction (str): How this ray was created:
            'primary' = cast by the renderer (no parent)
            'refract' = transmitted through an interface
            'reflect' = partial reflection at an interface
            'tir' = total internal reflection
    """

    origin: Point
    direction: Point
    carried_color: Tuple[float, ...] = (1.0, 1.0, 1.0)
    depth: int = DEFAULT_MAX_DEPTH
    reach: float = FAR_LIMIT
    interaction: str = 'primary'

    def __post_init__(self) -> None:
        if self.interaction not in VALID_INTERACTIONS:
            raise ValueError(
                f"Invalid interaction '{self.interaction}'. "
                f"Valid options: {VALID_INTERACTIONS}"
            )
        object.__setattr__(self, 'origin', Point(*self.origin))
        object.__setattr__(self, 'direction', geometry.normalize_vec(Point(*self.direction)))
        object.__setattr__(self, 'carried_color', tuple(float(c) for c in self.carried_color))

    @classmethod
    def towards(cls, origin: Point, target: Point, **kwargs) -> 'Ray':
        """
        Create a ray from origin pointing at target.

        The reach defaults to the distance between the two points.
        """
        kwargs.setdefault('reach', geometry.distance(origin, target))
        return cls(origin=origin, direction=geometry.sub(target, origin), **kwargs)

    @property
    def is_primary(self) -> bool:
        """True if this ray was cast directly by the renderer."""
        return self.interaction == 'primary'

    @property
    def is_degenerate(self) -> bool:
        """True if the ray has no direction (zero-length)."""
        return self.direction.x == 0.0 and self.direction.y == 0.0

    def point_at(self, t: float) -> Point:
        """Get the point at distance t along the ray."""
        return geometry.add(self.origin, geometry.scale(self.direction, t))

    def spawn(
        self,
        t: float,
        direction: Point,
        carried_color: Tuple[float, ...],
        interaction: str
    ) -> 'Ray':
        """
        Create the child ray leaving this ray's path at distance t.

        The child starts at point_at(t), spends one unit of depth and keeps
        the reach this ray had left after travelling t.

        Args:
            t: Distance along this ray where the event happened
            direction: Direction of the child ray
            carried_color: Color the child carries
            interaction: 'refract', 'reflect' or 'tir'

        Returns:
            Ray: The new child ray
        """
        return replace(
            self,
            origin=self.point_at(t),
            direction=direction,
            carried_color=carried_color,
            depth=self.depth - 1,
            reach=max(0.0, self.reach - t),
            interaction=interaction,
        )
