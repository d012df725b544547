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
import numbers
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Sequence, Tuple

from shapely.geometry import MultiPoint
from shapely.ops import unary_union

from .constants import FAR_LIMIT
from .errors import StructuralSceneError
from .geometry import Point
from .scene_objs.base_shape import BaseShape


@dataclass(frozen=True)
class Viewport:
    """
    The rectangle of the scene plane covered by the framebuffer.

    Pixel (row, col) of a width x height framebuffer maps to the centre of
    the matching cell of the rectangle. Row 0 is the top edge (y_max), so
    the image is not mirrored when the scene uses a Y-up convention.
    """
    x_min: float
    y_min: float
    x_max: float
    y_max: float

    def __post_init__(self) -> None:
        values = (self.x_min, self.y_min, self.x_max, self.y_max)
        if not all(isinstance(v, numbers.Real) and not isinstance(v, bool)
                   and math.isfinite(v) for v in values):
            raise StructuralSceneError(f"Viewport bounds must be finite numbers, got {values}")
        for name in ('x_min', 'y_min', 'x_max', 'y_max'):
            object.__setattr__(self, name, float(getattr(self, name)))
        if self.x_max <= self.x_min or self.y_max <= self.y_min:
            raise StructuralSceneError(f"Viewport has no area: {values}")

    @classmethod
    def of(cls, value: Sequence[float]) -> 'Viewport':
        """Create a Viewport from an (x_min, y_min, x_max, y_max) sequence."""
        try:
            x_min, y_min, x_max, y_max = (float(v) for v in value)
        except (TypeError, ValueError) as exc:
            raise StructuralSceneError(
                f"Viewport must be (x_min, y_min, x_max, y_max), got {value!r}"
            ) from exc
        return cls(x_min, y_min, x_max, y_max)

    @property
    def width(self) -> float:
        return self.x_max - self.x_min

    @property
    def height(self) -> float:
        return self.y_max - self.y_min

    def point_for_pixel(self, row: int, col: int, width: int, height: int) -> Point:
        """
        Get the scene point at the centre of a pixel.

        Args:
            row: Pixel row (0 = top)
            col: Pixel column (0 = left)
            width: Framebuffer width in pixels
            height: Framebuffer height in pixels

        Returns:
            Point in scene coordinates
        """
        x = self.x_min + (col + 0.5) * self.width / width
        y = self.y_max - (row + 0.5) * self.height / height
        return Point(x, y)

    def to_list(self):
        return [self.x_min, self.y_min, self.x_max, self.y_max]


class Scene:
    """
    An immutable collection of glass shapes and the viewing setup.

    The scene is validated once, when it is built, and is read-only
    afterwards: tracing never modifies it, so any number of pixels can be
    evaluated against it concurrently.

    Attributes:
        shapes (tuple): Shapes in insertion order. The order only breaks
            ties between crossings at the same distance.
        background (tuple): Color of rays that never meet any glass.
        viewpoint (Point): Where primary rays start.
        viewport (Viewport): Region of the plane mapped to the framebuffer.
            When omitted, the bounds of the shapes and the viewpoint are
            used, padded by 10%.
        far_limit (float): Rays are never followed further than this.
        name (str or None): Optional name for the scene (used in exports)

    Raises:
        StructuralSceneError: If shape ids repeat, channel counts differ
            between the background and the materials, or the viewing
            parameters are invalid.
    """

    VIEWPORT_PADDING = 0.1

    def __init__(
        self,
        shapes: Iterable[BaseShape] = (),
        background: Sequence[float] = (0.0, 0.0, 0.0),
        viewpoint: Sequence[float] = (0.0, 0.0),
        viewport: Optional[Sequence[float]] = None,
        far_limit: float = FAR_LIMIT,
        name: Optional[str] = None
    ) -> None:
        self._shapes: Tuple[BaseShape, ...] = tuple(shapes)
        try:
            self._background: Tuple[float, ...] = tuple(float(c) for c in background)
            self._viewpoint: Point = Point.of(viewpoint)
            self._far_limit: float = float(far_limit)
        except (TypeError, ValueError) as exc:
            raise StructuralSceneError(f"Invalid scene parameters: {exc}") from exc
        self._name = name

        self._validate()
        self._index: Dict[int, int] = {id(shape): i for i, shape in enumerate(self._shapes)}
        self._by_id: Dict[str, BaseShape] = {shape.id: shape for shape in self._shapes}

        if viewport is None:
            self._viewport = self._default_viewport()
        elif isinstance(viewport, Viewport):
            self._viewport = viewport
        else:
            self._viewport = Viewport.of(viewport)

    def _validate(self) -> None:
        if not self._background:
            raise StructuralSceneError("Scene background must have at least one channel")
        if not all(math.isfinite(c) for c in self._background):
            raise StructuralSceneError(f"Scene background must be finite, got {self._background}")
        if not (math.isfinite(self._viewpoint.x) and math.isfinite(self._viewpoint.y)):
            raise StructuralSceneError(f"Scene viewpoint must be finite, got {self._viewpoint}")
        if not self._far_limit > 0:
            raise StructuralSceneError(f"far_limit must be > 0, got {self._far_limit}")

        seen = set()
        for shape in self._shapes:
            if not isinstance(shape, BaseShape):
                raise StructuralSceneError(f"Scene shapes must be BaseShape objects, got {shape!r}")
            if shape.id in seen:
                raise StructuralSceneError(f"Duplicate shape id '{shape.id}'")
            seen.add(shape.id)
            if shape.material.channels != len(self._background):
                raise StructuralSceneError(
                    f"Shape '{shape.id}' material has {shape.material.channels} channels, "
                    f"but the scene background has {len(self._background)}"
                )

    def _default_viewport(self) -> Viewport:
        geoms = [shape.to_shapely() for shape in self._shapes]
        geoms.append(MultiPoint([self._viewpoint]))
        min_x, min_y, max_x, max_y = unary_union(geoms).bounds
        pad = self.VIEWPORT_PADDING * max(max_x - min_x, max_y - min_y, 1.0)
        return Viewport(min_x - pad, min_y - pad, max_x + pad, max_y + pad)

    @property
    def shapes(self) -> Tuple[BaseShape, ...]:
        return self._shapes

    @property
    def background(self) -> Tuple[float, ...]:
        return self._background

    @property
    def viewpoint(self) -> Point:
        return self._viewpoint

    @property
    def viewport(self) -> Viewport:
        return self._viewport

    @property
    def far_limit(self) -> float:
        return self._far_limit

    @property
    def channels(self) -> int:
        """Number of color channels (taken from the background)."""
        return len(self._background)

    @property
    def name(self) -> Optional[str]:
        return self._name

    def get_display_name(self) -> str:
        """
        Get a display name for the scene.

        Returns the user-defined name if set, otherwise "Scene" followed by
        the number of shapes.
        """
        if self._name:
            return self._name
        return f"Scene_{len(self._shapes)}_shapes"

    def get_shape(self, shape_id: str) -> BaseShape:
        """
        Get a shape by id.

        Raises:
            KeyError: If no shape has that id.
        """
        return self._by_id[shape_id]

    def index_of(self, shape: BaseShape) -> int:
        """Insertion index of a shape of this scene."""
        return self._index[id(shape)]

    def shapes_containing(self, point: Point) -> Tuple[BaseShape, ...]:
        """Get the shapes whose interior contains the point, in insertion order."""
        return tuple(shape for shape in self._shapes if shape.contains(point))

    def __len__(self) -> int:
        return len(self._shapes)

    def __repr__(self) -> str:
        return (f"Scene(name={self._name!r}, shapes={len(self._shapes)}, "
                f"background={self._background}, viewpoint={self._viewpoint})")
