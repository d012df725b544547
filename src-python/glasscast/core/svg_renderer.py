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

from typing import Iterable, Optional, Sequence, TYPE_CHECKING

import svgwrite

from .color import to_css
from .geometry import Point
from .scene_objs import CircleShape, PolygonShape

if TYPE_CHECKING:
    from .path_tracer import PathSegment
    from .scene import Scene, Viewport
    from .scene_objs.base_shape import BaseShape


# Stroke colors of traced segments by interaction type
INTERACTION_COLORS = {
    'primary': 'black',
    'refract': 'darkorange',
    'reflect': 'royalblue',
    'tir': 'crimson',
}


class SVGRenderer:
    """
    SVG preview of a glass scene.

    Draws every shape filled with the color white light takes after
    crossing one unit of its glass, so overlapping shapes visibly combine
    like filters. The viewpoint, the viewport and traced path segments can
    be drawn on top. This is a debugging aid; pixel rendering goes through
    Renderer.

    The SVG is organized into three layers (bottom to top):
        - objects: glass shapes and the viewport outline
        - rays: traced path segments
        - labels: text annotations

    Coordinate System:
        The renderer uses a Y-up coordinate system (positive Y points upward),
        which matches mathematical convention. This is achieved by applying
        a vertical flip transformation to the SVG coordinate system.

    Attributes:
        width (int): Canvas width in pixels
        height (int): Canvas height in pixels
        viewbox (tuple): SVG viewBox (min_x, min_y, width, height), Y-down
        dwg (svgwrite.Drawing): The SVG drawing object
    """

    def __init__(self, width: int = 800, height: int = 600, viewbox: Optional[Sequence[float]] = None):
        """
        Initialize the SVG renderer.

        Args:
            width (int): Canvas width in pixels (default: 800)
            height (int): Canvas height in pixels (default: 600)
            viewbox (tuple or None): viewBox as (min_x, min_y, width, height)
                in Y-up scene coordinates. If None, uses (0, 0, width, height)
        """
        self.width = width
        self.height = height
        self.user_viewbox = tuple(viewbox) if viewbox is not None else (0, 0, width, height)

        # Convert user's Y-up viewbox to SVG's Y-down viewbox
        min_x, min_y, vb_width, vb_height = self.user_viewbox
        self.viewbox = (min_x, -(min_y + vb_height), vb_width, vb_height)

        # debug=False disables svgwrite's strict attribute validation
        self.dwg = svgwrite.Drawing(size=(f'{width}px', f'{height}px'),
                                    profile='full', debug=False)
        self.dwg.viewbox(*self.viewbox)

        self.dwg.add(self.dwg.rect(
            insert=(self.viewbox[0], self.viewbox[1]),
            size=(self.viewbox[2], self.viewbox[3]),
            fill='white'
        ))

        self.layer_objects = self.dwg.add(self.dwg.g(id='layer-objects', transform='scale(1, -1)'))
        self.layer_rays = self.dwg.add(self.dwg.g(id='layer-rays', transform='scale(1, -1)'))
        self.layer_labels = self.dwg.add(self.dwg.g(id='layer-labels'))

        # Stroke width in scene units
        self.stroke_width = max(vb_width, vb_height) / 400.0

    @classmethod
    def for_scene(cls, scene: 'Scene', width: int = 800) -> 'SVGRenderer':
        """Create a renderer whose viewBox is the scene viewport."""
        viewport = scene.viewport
        height = max(1, int(round(width * viewport.height / viewport.width)))
        return cls(width, height, viewbox=(viewport.x_min, viewport.y_min,
                                           viewport.width, viewport.height))

    def _normalize_coord(self, value: float) -> float:
        """Map negative zero and values very close to zero to 0.0."""
        if value == 0.0 or abs(value) < 1e-10:
            return 0.0
        return value

    def _ring_path(self, points: Sequence[Point]) -> str:
        coords = [f"{self._normalize_coord(p.x)},{self._normalize_coord(p.y)}" for p in points]
        return "M " + " L ".join(coords) + " Z"

    def draw_shape(self, shape: 'BaseShape', fill_opacity: float = 0.6,
                   stroke: str = 'navy', label: Optional[str] = None) -> None:
        """
        Draw a glass shape tinted by its filter color.

        Args:
            shape: PolygonShape or CircleShape
            fill_opacity: Fill opacity 0.0-1.0 (default: 0.6)
            stroke: Outline color
            label: Optional text drawn at the shape centroid
        """
        fill = to_css(shape.material.filter_color())
        if isinstance(shape, CircleShape):
            element = self.dwg.circle(
                center=(self._normalize_coord(shape.center.x), self._normalize_coord(shape.center.y)),
                r=shape.radius,
            )
        elif isinstance(shape, PolygonShape):
            path_data = " ".join(
                [self._ring_path(shape.vertices)] + [self._ring_path(hole) for hole in shape.holes]
            )
            element = self.dwg.path(d=path_data, fill_rule='evenodd')
        else:
            raise TypeError(f"Cannot draw shape of type {type(shape).__name__}")

        element.update({
            'fill': fill,
            'fill_opacity': fill_opacity,
            'stroke': stroke,
            'stroke_width': self.stroke_width,
            'id': f'shape-{shape.id}',
            'class': 'glass',
        })
        self.layer_objects.add(element)

        if label:
            centroid = shape.to_shapely().centroid
            self.draw_label(Point(centroid.x, centroid.y), label)

    def draw_point(self, point: Point, color: str = 'black', radius: Optional[float] = None,
                   label: Optional[str] = None) -> None:
        """Draw a point marker, with an optional label."""
        if radius is None:
            radius = self.stroke_width * 3
        self.layer_objects.add(self.dwg.circle(
            center=(self._normalize_coord(point.x), self._normalize_coord(point.y)),
            r=radius,
            fill=color,
        ))
        if label:
            self.draw_label(point, label)

    def draw_viewport(self, viewport: 'Viewport', color: str = 'gray') -> None:
        """Draw the viewport outline as a dashed rectangle."""
        self.layer_objects.add(self.dwg.rect(
            insert=(viewport.x_min, viewport.y_min),
            size=(viewport.width, viewport.height),
            fill='none',
            stroke=color,
            stroke_width=self.stroke_width,
            stroke_dasharray=f"{self.stroke_width * 4},{self.stroke_width * 2}",
        ))

    def draw_path_segment(self, segment: 'PathSegment', color: Optional[str] = None,
                          opacity: float = 1.0) -> None:
        """
        Draw one traced segment.

        Args:
            segment: PathSegment from PathTracer.trace_path()
            color: Stroke color; defaults to the color of the segment's
                interaction type
            opacity: Stroke opacity
        """
        if color is None:
            color = INTERACTION_COLORS.get(segment.interaction, 'black')
        line = self.dwg.line(
            start=(self._normalize_coord(segment.start.x), self._normalize_coord(segment.start.y)),
            end=(self._normalize_coord(segment.end.x), self._normalize_coord(segment.end.y)),
            stroke=color,
            stroke_width=self.stroke_width,
            stroke_opacity=opacity,
        )
        line['class'] = f'ray {segment.interaction}'
        self.layer_rays.add(line)

    def draw_label(self, point: Point, text: str, color: str = 'black') -> None:
        """Draw text at a scene point (labels are not flipped)."""
        font_size = self.stroke_width * 12
        self.layer_labels.add(self.dwg.text(
            text,
            insert=(self._normalize_coord(point.x), self._normalize_coord(-point.y)),
            fill=color,
            font_size=font_size,
            font_family='sans-serif',
            text_anchor='middle',
        ))

    def draw_scene(self, scene: 'Scene', segments: Optional[Iterable['PathSegment']] = None,
                   labels: bool = True) -> None:
        """
        Draw all shapes of a scene, its viewpoint and viewport, and optional segments.

        Args:
            scene: The scene
            segments: Optional traced segments drawn above the shapes
            labels: Whether to label shapes with their ids
        """
        for shape in scene.shapes:
            self.draw_shape(shape, label=shape.id if labels else None)
        self.draw_viewport(scene.viewport)
        self.draw_point(scene.viewpoint, color='gold', label='viewpoint' if labels else None)
        if segments:
            for segment in segments:
                self.draw_path_segment(segment)

    def save(self, filename: Optional[str] = None) -> None:
        """
        Save the SVG to a file.

        Args:
            filename (str): Output filename (default: 'output.svg')
        """
        if filename is None:
            filename = "output.svg"
        self.dwg.saveas(filename)

    def to_string(self) -> str:
        """Get the SVG as a string."""
        return self.dwg.tostring()
