"""
===============================================================================
SCENE FILE AND SVG PREVIEW TESTS
===============================================================================

Tests for loading, saving and previewing scenes:

1. SCENE FILES
   - Documents with named and inline materials
   - "walls"/"light" aliases
   - Every malformed document is a StructuralSceneError
   - Save and load through a JSON file

2. SVG PREVIEW
   - Shapes, viewpoint and traced segments appear in the SVG

Run with:
    python developer_tests/test_scene_io_and_svg.py

Or with pytest:
    pytest developer_tests/test_scene_io_and_svg.py -v
===============================================================================
"""

import sys
import json
import tempfile
from pathlib import Path

# Add the src-python directory to the path
src_path = Path(__file__).parent.parent.parent
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

import pytest

from glasscast.core.errors import StructuralSceneError
from glasscast.core.material import Material
from glasscast.core.path_tracer import PathTracer
from glasscast.core.ray import Ray
from glasscast.core.scene import Scene
from glasscast.core.scene_objs import CircleShape, PolygonShape
from glasscast.core.svg_renderer import SVGRenderer
from glasscast.io import load_scene, save_scene, scene_from_dict, scene_to_dict


# =============================================================================
# TEST CONFIGURATION
# =============================================================================

def example_document():
    """A small scene document with a shared material and an inline one."""
    return {
        'name': 'filters',
        'background': [0.0, 0.0, 0.0],
        'viewpoint': [-5, 0],
        'viewport': [-6, -3, 6, 3],
        'materials': {
            'red': {'absorption': [0, 2, 2], 'refractive_index': 1.5},
        },
        'shapes': [
            {'id': 'a', 'type': 'polygon', 'material': 'red',
             'vertices': [[0, -1], [1, -1], [1, 1], [0, 1]]},
            {'id': 'b', 'type': 'circle', 'material': 'red',
             'center': [3, 0], 'radius': 1},
            {'id': 'c', 'material': {'absorption': [1, 1, 0], 'reflectivity': 0.1},
             'vertices': [[4, -2], [5, -2], [5, 2]]},
        ],
    }


# =============================================================================
# SCENE FILE TESTS
# =============================================================================

def test_scene_from_dict():
    """Build a scene from a document."""
    print("\n" + "=" * 60)
    print("TEST: scene_from_dict()")
    print("=" * 60)

    scene = scene_from_dict(example_document())
    assert scene.name == 'filters'
    assert [shape.id for shape in scene.shapes] == ['a', 'b', 'c']
    assert isinstance(scene.get_shape('b'), CircleShape)
    assert isinstance(scene.get_shape('c'), PolygonShape)
    assert scene.viewpoint == (-5.0, 0.0)
    assert scene.viewport.to_list() == [-6.0, -3.0, 6.0, 3.0]
    print("  Shapes, viewpoint and viewport - PASS")

    assert scene.get_shape('a').material is scene.get_shape('b').material
    assert scene.get_shape('a').material.name == 'red'
    assert scene.get_shape('c').material.reflectivity == 0.1
    print("  Shared and inline materials - PASS")


def test_aliases():
    """'walls' and 'light' are accepted in place of 'shapes' and 'viewpoint'."""
    print("\n" + "=" * 60)
    print("TEST: Document aliases")
    print("=" * 60)

    document = example_document()
    document['walls'] = document.pop('shapes')
    document['light'] = document.pop('viewpoint')
    scene = scene_from_dict(document)
    assert len(scene) == 3
    assert scene.viewpoint == (-5.0, 0.0)
    print("  walls/light - PASS")


def test_malformed_documents():
    """Every problem with a document is reported as a StructuralSceneError."""
    print("\n" + "=" * 60)
    print("TEST: Malformed documents")
    print("=" * 60)

    def broken(change):
        document = example_document()
        change(document)
        return document

    cases = {
        'not an object': [],
        'unknown material': broken(lambda d: d['shapes'][0].update(material='blue')),
        'unhashable material': broken(lambda d: d['shapes'][0].update(material=['red'])),
        'unknown type': broken(lambda d: d['shapes'][1].update(type='ellipse')),
        'self-intersecting': broken(lambda d: d['shapes'][0].update(
            vertices=[[0, 0], [2, 2], [2, 0], [0, 2]])),
        'duplicate id': broken(lambda d: d['shapes'][1].update(id='a')),
        'bad absorption': broken(lambda d: d['materials']['red'].update(absorption=[0, -1, 0])),
        'channel mismatch': broken(lambda d: d.update(background=[0, 0])),
        'missing radius': broken(lambda d: d['shapes'][1].pop('radius')),
        'shapes not a list': broken(lambda d: d.update(shapes={'a': 1})),
        'materials not an object': broken(lambda d: d.update(materials=[1, 2])),
        'bad viewport': broken(lambda d: d.update(viewport=[0, 0, 1])),
    }
    for name, document in cases.items():
        with pytest.raises(StructuralSceneError):
            scene_from_dict(document)
        print(f"  {name} - PASS")


def test_scene_to_dict():
    """Shared materials are written once; unnamed ones get generated names."""
    print("\n" + "=" * 60)
    print("TEST: scene_to_dict()")
    print("=" * 60)

    shared = Material(absorption=(0.0, 1.0, 1.0), name='red')
    unnamed = Material(absorption=(1.0, 1.0, 0.0))
    scene = Scene([
        PolygonShape('a', [(0, 0), (1, 0), (1, 1)], shared),
        CircleShape('b', (3, 3), 1.0, shared),
        CircleShape('c', (6, 6), 1.0, unnamed),
    ], name='export')

    data = scene_to_dict(scene)
    assert set(data['materials']) == {'red', 'material_1'}
    assert [s['material'] for s in data['shapes']] == ['red', 'red', 'material_1']
    assert data['name'] == 'export'
    assert data['version'] == 1
    print(f"  Materials: {sorted(data['materials'])} - PASS")

    restored = scene_from_dict(data)
    assert [s.id for s in restored.shapes] == ['a', 'b', 'c']
    assert restored.get_shape('c').material == unnamed
    print("  Document builds the same scene - PASS")


def test_save_and_load():
    """Save a scene to disk and load it back."""
    print("\n" + "=" * 60)
    print("TEST: save_scene() / load_scene()")
    print("=" * 60)

    scene = scene_from_dict(example_document())
    with tempfile.TemporaryDirectory() as tmp:
        path = save_scene(scene, Path(tmp) / 'nested' / 'scene.json')
        assert path.exists()
        with open(path, encoding='utf-8') as f:
            assert json.load(f) == scene_to_dict(scene)

        loaded = load_scene(path)
        assert scene_to_dict(loaded) == scene_to_dict(scene)
        print(f"  Saved and reloaded {path.name} - PASS")

        garbage = Path(tmp) / 'garbage.json'
        garbage.write_text('{"shapes": [', encoding='utf-8')
        with pytest.raises(StructuralSceneError):
            load_scene(garbage)
        print("  Invalid JSON rejected - PASS")

        not_utf8 = Path(tmp) / 'latin1.json'
        not_utf8.write_bytes(b'{"name": "\xff\xfe"}')
        with pytest.raises(StructuralSceneError):
            load_scene(not_utf8)
        print("  Non UTF-8 file rejected - PASS")

    with pytest.raises(OSError):
        load_scene(Path(tempfile.gettempdir()) / 'glasscast-missing' / 'scene.json')
    print("  Missing file raises OSError - PASS")


# =============================================================================
# SVG PREVIEW TESTS
# =============================================================================

def test_svg_preview():
    """The preview contains every shape and the traced segments."""
    print("\n" + "=" * 60)
    print("TEST: SVG preview")
    print("=" * 60)

    scene = scene_from_dict(example_document())
    _, segments = PathTracer().trace_path(Ray((-5, 0.2), (1, 0)), scene)

    svg = SVGRenderer.for_scene(scene, width=600)
    assert svg.height == 300
    svg.draw_scene(scene, segments=segments)
    text = svg.to_string()

    for shape_id in ('a', 'b', 'c'):
        assert f'shape-{shape_id}' in text, f"shape-{shape_id} missing"
    assert 'layer-rays' in text
    assert text.count('<line') == len(segments)
    assert 'viewpoint' in text
    print(f"  {len(segments)} segments, 3 shapes - PASS")

    with tempfile.TemporaryDirectory() as tmp:
        output = Path(tmp) / 'preview.svg'
        svg.save(str(output))
        assert output.read_text(encoding='utf-8').startswith('<?xml')
    print("  Saved to file - PASS")


def test_svg_rejects_unknown_shapes():
    """Only polygons and circles can be drawn."""
    print("\n" + "=" * 60)
    print("TEST: SVG unknown shape")
    print("=" * 60)

    class Blob:
        id = 'blob'
        material = Material(absorption=(0.0, 0.0, 0.0))

    with pytest.raises(TypeError):
        SVGRenderer().draw_shape(Blob())
    print("  TypeError - PASS")


# =============================================================================
# MAIN TEST RUNNER
# =============================================================================

def run_all_tests():
    """Run all tests and report results."""
    print("\n" + "=" * 78)
    print("SCENE FILE AND SVG PREVIEW TESTS")
    print("=" * 78)

    tests = [
        ("scene_from_dict()", test_scene_from_dict),
        ("Document aliases", test_aliases),
        ("Malformed documents", test_malformed_documents),
        ("scene_to_dict()", test_scene_to_dict),
        ("save_scene() / load_scene()", test_save_and_load),
        ("SVG preview", test_svg_preview),
        ("SVG unknown shape", test_svg_rejects_unknown_shapes),
    ]

    passed = 0
    failed = 0
    errors = []

    for name, test_func in tests:
        try:
            test_func()
            passed += 1
        except Exception as e:
            failed += 1
            errors.append((name, str(e)))
            print(f"\n  FAILED: {name}")
            print(f"    Error: {e}")

    print("\n" + "=" * 78)
    print(f"SUMMARY: {passed}/{len(tests)} tests passed")
    print("=" * 78)

    if errors:
        print("\nFailed tests:")
        for name, error in errors:
            print(f"  - {name}: {error}")
        return False

    print("\nAll tests passed!")
    return True


if __name__ == "__main__":
    success = run_all_tests()
    sys.exit(0 if success else 1)
