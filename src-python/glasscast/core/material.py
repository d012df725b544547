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
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from .errors import StructuralSceneError


@dataclass(frozen=True)
class Material:
    """
    The glass a shape is made of.

    Attributes:
        absorption: Per-channel optical density per unit path length. Light
            travelling a distance dt through the glass keeps
            exp(-absorption * dt) of each channel. 0 means the channel
            passes untouched.
        refractive_index: Refractive index of the glass (>= 1.0).
        reflectivity: Fraction of light reflected at each interface of the
            glass, in [0, 1].
        name: Optional human-readable name (used in scene files and previews).

    Notes:
        - Immutable: shapes in one scene may share a Material instance.
        - A red filter absorbs green and blue, e.g. absorption=(0, 2, 2).
    """

    absorption: Tuple[float, ...]
    refractive_index: float = 1.5
    reflectivity: float = 0.0
    name: Optional[str] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        try:
            absorption = tuple(float(a) for a in self.absorption)
            refractive_index = float(self.refractive_index)
            reflectivity = float(self.reflectivity)
        except (TypeError, ValueError) as exc:
            raise StructuralSceneError(
                f"Material parameters must be numbers, got absorption={self.absorption!r}, "
                f"refractive_index={self.refractive_index!r}, reflectivity={self.reflectivity!r}"
            ) from exc
        # frozen dataclass: normalize through object.__setattr__
        object.__setattr__(self, 'absorption', absorption)
        object.__setattr__(self, 'refractive_index', refractive_index)
        object.__setattr__(self, 'reflectivity', reflectivity)

        if not absorption:
            raise StructuralSceneError("Material absorption must have at least one channel")
        for a in absorption:
            if not math.isfinite(a) or a < 0:
                raise StructuralSceneError(
                    f"Material absorption values must be finite and >= 0, got {absorption}"
                )
        if not math.isfinite(refractive_index) or refractive_index < 1.0:
            raise StructuralSceneError(
                f"refractive_index must be >= 1.0, got {refractive_index}"
            )
        if not 0.0 <= reflectivity <= 1.0:
            raise StructuralSceneError(
                f"reflectivity must be in [0, 1], got {reflectivity}"
            )

    @property
    def channels(self) -> int:
        """Number of color channels this material absorbs in."""
        return len(self.absorption)

    def filter_color(self, thickness: float = 1.0) -> Tuple[float, ...]:
        """
        Get the color white light takes after crossing `thickness` of this glass.

        Used for previews; tracing goes through the color accumulator.
        """
        return tuple(math.exp(-a * thickness) for a in self.absorption)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-friendly dictionary."""
        return {
            'absorption': list(self.absorption),
            'refractive_index': self.refractive_index,
            'reflectivity': self.reflectivity,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], name: Optional[str] = None) -> 'Material':
        """
        Build a Material from its dictionary form.

        Raises:
            StructuralSceneError: If a field is missing or invalid.
        """
        if 'absorption' not in data:
            raise StructuralSceneError(f"Material {name!r} has no 'absorption'")
        try:
            return cls(
                absorption=tuple(data['absorption']),
                refractive_index=float(data.get('refractive_index', 1.5)),
                reflectivity=float(data.get('reflectivity', 0.0)),
                name=name,
            )
        except StructuralSceneError:
            raise
        except (TypeError, ValueError) as exc:
            raise StructuralSceneError(f"Invalid material {name!r}: {exc}") from exc


def clear_glass(channels: int = 3, refractive_index: float = 1.5, reflectivity: float = 0.0) -> Material:
    """Create a material that bends light without absorbing any channel."""
    return Material(absorption=(0.0,) * channels, refractive_index=refractive_index,
                    reflectivity=reflectivity, name='clear')
