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

"""
Subtractive color accumulation.

Light crossing glass loses part of each channel. Over a straight span of
length dt inside the materials m1, m2, ... the surviving fraction of a
channel is

    T = exp(-(a_m1 + a_m2 + ...) * dt)

i.e. the optical densities of overlapping glasses add up, which is how
stacked color filters behave. The color at the end of a path is the
starting color times the product of the transmittances of its spans.
"""

from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple

import numpy as np

from .material import Material

Color = Tuple[float, ...]


@dataclass(frozen=True)
class Span:
    """
    A straight stretch of a ray path.

    Attributes:
        length: Distance travelled (dt)
        materials: Materials the ray is inside over the whole stretch
            (empty for air)
    """
    length: float
    materials: Tuple[Material, ...] = ()


def span_transmittance(span: Span, channels: int) -> np.ndarray:
    """
    Fraction of each channel surviving one span.

    Args:
        span: The span
        channels: Number of color channels

    Returns:
        numpy array of shape (channels,) with values in (0, 1]
    """
    density = np.zeros(channels)
    for material in span.materials:
        if material.channels != channels:
            raise ValueError(
                f"Material has {material.channels} channels, expected {channels}"
            )
        density += np.asarray(material.absorption, dtype=float)
    return np.exp(-density * max(span.length, 0.0))


def path_transmittance(spans: Iterable[Span], channels: int) -> np.ndarray:
    """Product of the transmittances of all spans of a path."""
    transmittance = np.ones(channels)
    for span in spans:
        if span.materials and span.length > 0:
            transmittance *= span_transmittance(span, channels)
    return transmittance


def accumulate(color: Sequence[float], spans: Iterable[Span]) -> Color:
    """
    Filter a color through a sequence of spans.

    Args:
        color: Starting color (one value per channel)
        spans: Spans travelled, in any order (multiplication commutes)

    Returns:
        The filtered color as a tuple
    """
    start = np.asarray(color, dtype=float)
    return tuple((start * path_transmittance(spans, start.shape[0])).tolist())


def blend(reflected: Sequence[float], transmitted: Sequence[float], reflectivity: float) -> Color:
    """
    Combine the two branches leaving an interface.

    Returns reflectivity * reflected + (1 - reflectivity) * transmitted.
    """
    r = float(reflectivity)
    mixed = r * np.asarray(reflected, dtype=float) + (1.0 - r) * np.asarray(transmitted, dtype=float)
    return tuple(mixed.tolist())


def to_rgb8(color: Sequence[float]) -> Tuple[int, ...]:
    """Clamp a color to [0, 1] and scale it to 0..255 integers."""
    clipped = np.clip(np.asarray(color, dtype=float), 0.0, 1.0)
    return tuple(int(v) for v in np.round(clipped * 255.0))


def to_css(color: Sequence[float]) -> str:
    """Format the first three channels of a color as a CSS rgb() string."""
    rgb = to_rgb8(color)
    if len(rgb) == 1:
        rgb = rgb * 3
    rgb = rgb + (0,) * (3 - len(rgb))
    return f'rgb({rgb[0]}, {rgb[1]}, {rgb[2]})'
