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
Scene files.

A scene document is a JSON object:

    {
      "name": "filters",
      "background": [0, 0, 0],
      "viewpoint": [0, 0],
      "viewport": [-10, -10, 10, 10],
      "far_limit": 10000,
      "materials": {
        "red": {"absorption": [0, 1, 1], "refractive_index": 1.5, "reflectivity": 0}
      },
      "shapes": [
        {"id": "a", "type": "polygon", "material": "red",
         "vertices": [[0, 0], [1, 0], [1, 1]], "holes": []},
        {"id": "b", "type": "circle", "material": "red",
         "center": [3, 3], "radius": 1}
      ]
    }

"walls" is accepted in place of "shapes" and "light" in place of
"viewpoint". A shape may also give its material inline as an object
instead of a name. Every problem with a document is reported as a
StructuralSceneError before any scene is built.
"""

import json
from pathlib import Path
from typing import Any, Dict, Mapping, Union

from ..core.constants import FAR_LIMIT
from ..core.errors import StructuralSceneError
from ..core.material import Material
from ..core.scene import Scene
from ..core.scene_objs import SHAPE_TYPES

FORMAT_VERSION = 1


def _materials_from_dict(data: Mapping[str, Any]) -> Dict[str, Material]:
    raw = data.get('materials', {})
    if not isinstance(raw, Mapping):
        raise StructuralSceneError("'materials' must be an object mapping names to materials")
    materials = {}
    for name, material_data in raw.items():
        if not isinstance(material_data, Mapping):
            raise StructuralSceneError(f"Material '{name}' must be an object")
        materials[name] = Material.from_dict(material_data, name=name)
    return materials


def _shape_from_dict(shape_data: Any, materials: Mapping[str, Material]):
    if not isinstance(shape_data, Mapping):
        raise StructuralSceneError(f"Shape entries must be objects, got {shape_data!r}")
    shape_type = shape_data.get('type', 'polygon')
    shape_cls = SHAPE_TYPES.get(shape_type)
    if shape_cls is None:
        raise StructuralSceneError(
            f"Unknown shape type '{shape_type}'. Valid options: {tuple(SHAPE_TYPES)}"
        )

    material_ref = shape_data.get('material')
    if isinstance(material_ref, Mapping):
        material = Material.from_dict(material_ref)
    elif isinstance(material_ref, str) and material_ref in materials:
        material = materials[material_ref]
    else:
        raise StructuralSceneError(
            f"Shape '{shape_data.get('id')}' refers to unknown material {material_ref!r}"
        )
    return shape_cls.from_dict(shape_data, material)


def scene_from_dict(data: Mapping[str, Any]) -> Scene:
    """
    Build a validated Scene from its dictionary form.

    Args:
        data: Parsed scene document

    Returns:
        Scene

    Raises:
        StructuralSceneError: If the document or any shape in it is invalid.
    """
    if not isinstance(data, Mapping):
        raise StructuralSceneError("A scene document must be a JSON object")

    materials = _materials_from_dict(data)
    shapes_data = data.get('shapes', data.get('walls', []))
    if not isinstance(shapes_data, list):
        raise StructuralSceneError("'shapes' must be a list")
    shapes = [_shape_from_dict(shape_data, materials) for shape_data in shapes_data]

    return Scene(
        shapes=shapes,
        background=data.get('background', (0.0, 0.0, 0.0)),
        viewpoint=data.get('viewpoint', data.get('light', (0.0, 0.0))),
        viewport=data.get('viewport'),
        far_limit=data.get('far_limit', FAR_LIMIT),
        name=data.get('name'),
    )


def scene_to_dict(scene: Scene) -> Dict[str, Any]:
    """
    Convert a Scene to its dictionary form.

    Materials shared by several shapes are written once. Materials without
    a name are named 'material_<n>'.
    """
    materials: Dict[str, Material] = {}
    names: Dict[int, str] = {}
    shapes = []
    for shape in scene.shapes:
        material = shape.material
        key = id(material)
        if key not in names:
            name = material.name
            if not name or (name in materials and materials[name] != material):
                name = f"material_{len(materials)}"
            materials[name] = material
            names[key] = name
        shapes.append(shape.to_dict(names[key]))

    data: Dict[str, Any] = {
        'version': FORMAT_VERSION,
        'background': list(scene.background),
        'viewpoint': scene.viewpoint.to_list(),
        'viewport': scene.viewport.to_list(),
        'far_limit': scene.far_limit,
        'materials': {name: material.to_dict() for name, material in materials.items()},
        'shapes': shapes,
    }
    if scene.name:
        data['name'] = scene.name
    return data


def load_scene(path: Union[str, Path]) -> Scene:
    """
    Load a scene from a JSON file.

    Raises:
        OSError: If the file cannot be read.
        StructuralSceneError: If the file is not a valid scene document.
    """
    with open(path, 'r', encoding='utf-8') as f:
        try:
            data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise StructuralSceneError(f"{path} is not valid UTF-8 JSON: {exc}") from exc
    return scene_from_dict(data)


def save_scene(scene: Scene, path: Union[str, Path], indent: int = 2) -> Path:
    """
    Save a scene to a JSON file, creating parent directories as needed.

    Returns:
        Path: The written file.
    """
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    with open(output, 'w', encoding='utf-8') as f:
        json.dump(scene_to_dict(scene), f, indent=indent)
    return output
