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

from .geometry import geometry, Point, Geometry
from . import constants
from .errors import StructuralSceneError
from .material import Material, clear_glass
from .ray import Ray
from .crossing import Crossing, CrossingKind
from .scene_objs import BaseShape, PolygonShape, CircleShape
from .scene import Scene, Viewport
from .intersector import Intersector
from .color import Span, span_transmittance, path_transmittance, accumulate, blend
from .path_tracer import PathTracer, PathSegment
from .renderer import Renderer
from .svg_renderer import SVGRenderer

__all__ = [
    'geometry', 'Point', 'Geometry',
    'constants',
    'StructuralSceneError',
    'Material', 'clear_glass',
    'Ray',
    'Crossing', 'CrossingKind',
    'BaseShape', 'PolygonShape', 'CircleShape',
    'Scene', 'Viewport',
    'Intersector',
    'Span', 'span_transmittance', 'path_transmittance', 'accumulate', 'blend',
    'PathTracer', 'PathSegment',
    'Renderer',
    'SVGRenderer'
]
