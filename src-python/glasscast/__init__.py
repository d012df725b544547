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

glasscast
=========

Subtractive-color rendering of 2D glass scenes, using Shapely for
computational geometry.

Light passing through a glass shape loses part of each color channel, so
overlapping shapes combine like stacked color filters rather than like
light sources.

Main modules:
- core: Rendering engine (Scene, shapes, Intersector, PathTracer, Renderer)
- io: Scene files (JSON)
- developer_tests: Test suite

Quick start:
    from glasscast import Scene, Material, PolygonShape, Renderer

    red = Material(absorption=(0.0, 2.0, 2.0), refractive_index=1.5)
    scene = Scene(
        shapes=[PolygonShape('a', [(1, -1), (3, -1), (3, 1), (1, 1)], red)],
        viewpoint=(0, 0),
        viewport=(-4, -4, 4, 4),
    )
    image = Renderer(scene).render_image(64, 64)
"""

__version__ = "0.1.0"

# Convenience imports for common usage
from .core.errors import StructuralSceneError
from .core.material import Material
from .core.ray import Ray
from .core.scene import Scene, Viewport
from .core.scene_objs import PolygonShape, CircleShape
from .core.intersector import Intersector
from .core.path_tracer import PathTracer
from .core.renderer import Renderer
from .io import load_scene, save_scene

__all__ = [
    'StructuralSceneError',
    'Material',
    'Ray',
    'Scene',
    'Viewport',
    'PolygonShape',
    'CircleShape',
    'Intersector',
    'PathTracer',
    'Renderer',
    'load_scene',
    'save_scene',
    '__version__',
]
