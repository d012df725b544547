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
from enum import Enum
from typing import TYPE_CHECKING, Tuple

from .geometry import Point

if TYPE_CHECKING:
    from .scene_objs.base_shape import BaseShape


class CrossingKind(Enum):
    """Whether a ray goes into or out of a shape at a crossing."""
    ENTRY = 'entry'
    EXIT = 'exit'


@dataclass(frozen=True)
class Crossing:
    """
    A point where a ray crosses the boundary of a shape.

    Attributes:
        t: Distance along the ray
        shape: The shape whose boundary is crossed
        kind: CrossingKind.ENTRY or CrossingKind.EXIT
        normal: Unit surface normal, pointing out of the shape
        order: Insertion index of the shape in its scene (tie-break key)
        point: The crossing point
    """
    t: float
    shape: 'BaseShape'
    kind: CrossingKind
    normal: Point
    order: int = 0
    point: Point = Point(0.0, 0.0)

    @property
    def sort_key(self) -> Tuple[float, int]:
        return (self.t, self.order)

    @property
    def is_entry(self) -> bool:
        return self.kind is CrossingKind.ENTRY

    def with_t(self, t: float) -> 'Crossing':
        return replace(self, t=t)
