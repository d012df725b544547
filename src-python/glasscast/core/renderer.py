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

from typing import Optional, TYPE_CHECKING

import numpy as np

from .color import Color
from .constants import DEFAULT_MAX_DEPTH
from .path_tracer import PathTracer
from .ray import Ray

if TYPE_CHECKING:
    from .scene import Scene


class Renderer:
    """
    Renders a scene into a framebuffer, one primary ray per pixel.

    The primary ray of a pixel starts at the scene viewpoint and points at
    the centre of the pixel in the viewport; its reach is the distance to
    that point, so the pixel records the light arriving at its own
    location after passing through whatever glass lies in between.

    Pixels are evaluated independently: each one builds its own Ray values
    and only reads the scene, so the rows of an image can be rendered in
    any order or in parallel by the caller.

    Attributes:
        scene (Scene): The scene to render (read only)
        max_depth (int): Bounce budget given to every primary ray
        tracer (PathTracer): The path tracer
        verbose (int): Verbosity level (default: 0)
            0 = silent (no debug output)
            1 = verbose (render summary)
            2 = very verbose/debug (also passed to the path tracer)
    """

    def __init__(
        self,
        scene: 'Scene',
        max_depth: int = DEFAULT_MAX_DEPTH,
        tracer: Optional[PathTracer] = None,
        verbose: int = 0
    ) -> None:
        if max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {max_depth}")
        self.scene: 'Scene' = scene
        self.max_depth: int = max_depth
        self.verbose: int = verbose
        self.tracer: PathTracer = tracer if tracer is not None else PathTracer(
            verbose=max(0, verbose - 1))
        # Same for every pixel; a tuple, so it is safe to share
        self._viewpoint_inside = scene.shapes_containing(scene.viewpoint)

    def primary_ray(self, row: int, col: int, width: int, height: int) -> Ray:
        """
        Build the primary ray of a pixel.

        Args:
            row: Pixel row (0 = top)
            col: Pixel column (0 = left)
            width: Framebuffer width in pixels
            height: Framebuffer height in pixels

        Returns:
            Ray: Full-intensity ray from the viewpoint towards the pixel
        """
        target = self.scene.viewport.point_for_pixel(row, col, width, height)
        return Ray.towards(
            self.scene.viewpoint,
            target,
            carried_color=(1.0,) * self.scene.channels,
            depth=self.max_depth,
        )

    def render_pixel(self, row: int, col: int, width: int, height: int) -> Color:
        """Compute the color of one pixel."""
        ray = self.primary_ray(row, col, width, height)
        return self.tracer.trace(ray, self.scene, inside=self._viewpoint_inside)

    def render(self, framebuffer: np.ndarray) -> np.ndarray:
        """
        Render the scene into a caller-provided framebuffer.

        Args:
            framebuffer: numpy array of shape (height, width, channels),
                where channels matches the scene. Every pixel is overwritten.

        Returns:
            The same framebuffer, filled

        Raises:
            ValueError: If the framebuffer does not have the expected shape
                or is not a floating-point array.
        """
        if framebuffer.ndim != 3 or framebuffer.shape[2] != self.scene.channels:
            raise ValueError(
                f"framebuffer must have shape (height, width, {self.scene.channels}), "
                f"got {framebuffer.shape}"
            )
        if not np.issubdtype(framebuffer.dtype, np.floating):
            raise ValueError(f"framebuffer must have a floating-point dtype, got {framebuffer.dtype}")
        height, width = framebuffer.shape[:2]
        if self.verbose >= 1:
            print(f"### RENDERER {self.scene.get_display_name()}: {width}x{height} pixels, "
                  f"max_depth={self.max_depth}")

        for row in range(height):
            for col in range(width):
                framebuffer[row, col] = self.render_pixel(row, col, width, height)

        if self.verbose >= 1:
            print(f"  Rendered {width * height} pixels")
        return framebuffer

    def render_image(self, width: int, height: int) -> np.ndarray:
        """
        Render the scene into a new float framebuffer.

        Args:
            width: Image width in pixels (> 0)
            height: Image height in pixels (> 0)

        Returns:
            numpy array of shape (height, width, channels)
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Image size must be positive, got {width}x{height}")
        return self.render(np.zeros((height, width, self.scene.channels), dtype=float))
