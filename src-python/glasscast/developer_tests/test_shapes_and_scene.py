"""
===============================================================================
SHAPE AND SCENE TESTS
===============================================================================

Tests for building and validating glass scenes:

1. SHAPES
   - Polygon validation (vertex count, self-intersection, zero area)
   - Ring orientation and outward normals
   - Circle validation and containment
   - Holes are air

2. SCENES
   - Duplicate ids and channel mismatches are structural errors
   - Scenes are read-only after construction
   - Viewport pixel mapping and the default viewport

Run with:
    python developer_tests/test_shapes_and_scene.py

Or with pytest:
    pytest developer_tests/test_shapes_and_scene.py -v
===============================================================================
"""

import sys
from pathlib import Path

# Add the src-python directory to the path
src_path = Path(__file__).parent.parent.parent
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

import numpy as np
import pytest

from glasscast.core.crossing import CrossingKind
from glasscast.core.errors import StructuralSceneError
from glasscast.core.geometry import Point
from glasscast.core.material import Material, clear_glass
from glasscast.core.ray import Ray
from glasscast.core.scene import Scene, Viewport
from glasscast.core.scene_objs import CircleShape, PolygonShape


# =============================================================================
# TEST CONFIGURATION
# =============================================================================

# Tolerance for floating-point comparisons
TOLERANCE = 1e-9

RED = Material(absorption=(0.0, 2.0, 2.0), name='red')
SQUARE = [(0, 0), (1, 0), (1, 1), (0, 1)]


def assert_close(actual, expected, tol=TOLERANCE, msg=""):
    """Assert that two values are close within tolerance."""
    if abs(actual - expected) > tol:
        raise AssertionError(
            f"{msg}: expected {expected}, got {actual} (diff: {abs(actual - expected)})"
        )


# =============================================================================
# SHAPE TESTS
# =============================================================================

def test_polygon_validation():
    """Polygons without a well-defined inside are rejected."""
    print("\n" + "=" * 60)
    print("TEST: Polygon validation")
    print("=" * 60)

    with pytest.raises(StructuralSceneError, match="at least 3 vertices"):
        PolygonShape('two', [(0, 0), (1, 1)], RED)
    print("  Too few vertices - PASS")

    with pytest.raises(StructuralSceneError, match="ambiguous boundary"):
        PolygonShape('bowtie', [(0, 0), (2, 2), (2, 0), (0, 2)], RED)
    print("  Self-intersecting bowtie - PASS")

    with pytest.raises(StructuralSceneError):
        PolygonShape('flat', [(0, 0), (1, 0), (2, 0)], RED)
    print("  Zero area - PASS")

    with pytest.raises(StructuralSceneError):
        PolygonShape('nan', [(0, 0), (1, float('nan')), (1, 1)], RED)
    with pytest.raises(StructuralSceneError):
        PolygonShape('bad', [(0, 0), (1,), (1, 1)], RED)
    print("  Malformed vertices - PASS")

    with pytest.raises(StructuralSceneError):
        PolygonShape('', SQUARE, RED)
    with pytest.raises(StructuralSceneError):
        PolygonShape('nomaterial', SQUARE, None)
    print("  Missing id or material - PASS")


def test_polygon_orientation():
    """Clockwise input is re-oriented so normals still point out."""
    print("\n" + "=" * 60)
    print("TEST: Polygon orientation")
    print("=" * 60)

    clockwise = PolygonShape('cw', [(0, 0), (0, 1), (1, 1), (1, 0)], RED)
    ray = Ray(origin=(-5.0, 0.5), direction=(1.0, 0.0))
    crossings = clockwise.crossings(ray, 1e-6, 100.0)

    assert [c.kind for c in crossings] == [CrossingKind.ENTRY, CrossingKind.EXIT]
    assert_close(crossings[0].t, 5.0, msg="Entry distance")
    assert_close(crossings[1].t, 6.0, msg="Exit distance")
    assert_close(crossings[0].normal.x, -1.0, msg="Entry normal")
    assert_close(crossings[1].normal.x, 1.0, msg="Exit normal")
    print("  Entry at x=0 (normal -x), exit at x=1 (normal +x) - PASS")

    # Input vertices are kept as given
    assert clockwise.vertices[1] == Point(0.0, 1.0)
    print("  Vertices preserved - PASS")


def test_polygon_with_hole():
    """Points in a hole are outside the glass."""
    print("\n" + "=" * 60)
    print("TEST: Polygon with a hole")
    print("=" * 60)

    ring = PolygonShape('ring', [(0, 0), (4, 0), (4, 4), (0, 4)], RED,
                        holes=[[(1, 1), (3, 1), (3, 3), (1, 3)]])
    assert ring.contains(Point(0.5, 2.0))
    assert not ring.contains(Point(2.0, 2.0))
    assert_close(ring.to_shapely().area, 12.0, msg="Area")
    print("  Containment and area - PASS")

    with pytest.raises(StructuralSceneError):
        PolygonShape('leaky', [(0, 0), (4, 0), (4, 4), (0, 4)], RED,
                     holes=[[(3, 1), (5, 1), (5, 3), (3, 3)]])
    print("  Hole crossing the outer ring rejected - PASS")


def test_circle_shape():
    """Test circle validation, containment and bounds."""
    print("\n" + "=" * 60)
    print("TEST: Circle shape")
    print("=" * 60)

    for radius in (0.0, -1.0, float('inf')):
        with pytest.raises(StructuralSceneError):
            CircleShape('c', (0, 0), radius, RED)
    with pytest.raises(StructuralSceneError):
        CircleShape('c', (0, 0, 0), 1.0, RED)
    print("  Invalid radius and center rejected - PASS")

    circle = CircleShape('c', (2, 3), 1.0, RED)
    assert circle.contains(Point(2.5, 3.0))
    assert not circle.contains(Point(3.0, 3.0))
    assert circle.bounds == (1.0, 2.0, 3.0, 4.0)
    print("  Containment (boundary excluded) and bounds - PASS")

    ray = Ray(origin=(0.0, 3.0), direction=(1.0, 0.0))
    crossings = circle.crossings(ray, 1e-6, 100.0)
    assert [c.kind for c in crossings] == [CrossingKind.ENTRY, CrossingKind.EXIT]
    assert_close(crossings[0].t, 1.0, msg="Entry distance")
    assert_close(crossings[1].t, 3.0, msg="Exit distance")
    print("  Diameter crossings - PASS")


def test_shape_repr_and_dict():
    """Shapes serialize their geometry and refer to materials by name."""
    print("\n" + "=" * 60)
    print("TEST: Shape dictionaries")
    print("=" * 60)

    polygon = PolygonShape('p', SQUARE, RED)
    data = polygon.to_dict('red')
    assert data == {'id': 'p', 'type': 'polygon', 'material': 'red',
                    'vertices': [[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0]]}
    restored = PolygonShape.from_dict(data, RED)
    assert restored.vertices == polygon.vertices
    print("  Polygon - PASS")

    circle = CircleShape('c', (1, 2), 0.5, RED)
    restored = CircleShape.from_dict(circle.to_dict('red'), RED)
    assert restored.center == circle.center and restored.radius == circle.radius
    with pytest.raises(StructuralSceneError):
        CircleShape.from_dict({'id': 'c', 'center': [0, 0]}, RED)
    print("  Circle - PASS")

    assert "PolygonShape(id='p'" in repr(polygon)


# =============================================================================
# SCENE TESTS
# =============================================================================

def test_scene_validation():
    """Structural problems are reported when the scene is built."""
    print("\n" + "=" * 60)
    print("TEST: Scene validation")
    print("=" * 60)

    a = PolygonShape('a', SQUARE, RED)
    also_a = CircleShape('a', (5, 5), 1.0, RED)
    with pytest.raises(StructuralSceneError, match="Duplicate shape id"):
        Scene([a, also_a])
    print("  Duplicate ids - PASS")

    with pytest.raises(StructuralSceneError, match="channels"):
        Scene([a], background=(0.0, 0.0))
    print("  Channel mismatch - PASS")

    with pytest.raises(StructuralSceneError):
        Scene([a], far_limit=0.0)
    with pytest.raises(StructuralSceneError):
        Scene([a], viewpoint=(0.0, float('inf')))
    with pytest.raises(StructuralSceneError):
        Scene([a], viewport=(1, 1, 0, 2))
    with pytest.raises(StructuralSceneError):
        Scene(["not a shape"])
    print("  Invalid viewing parameters and shapes - PASS")

    # Overlapping shapes are fine
    scene = Scene([a, PolygonShape('b', [(0.5, 0.5), (2, 0.5), (2, 2)], RED)])
    assert len(scene) == 2
    print("  Overlapping shapes accepted - PASS")


def test_scene_is_read_only():
    """A built scene exposes no way to change it."""
    print("\n" + "=" * 60)
    print("TEST: Scene is read-only")
    print("=" * 60)

    shapes = [PolygonShape('a', SQUARE, RED)]
    scene = Scene(shapes)
    shapes.append(CircleShape('b', (5, 5), 1.0, RED))
    assert len(scene) == 1
    print("  Later changes to the input list do not leak in - PASS")

    with pytest.raises(AttributeError):
        scene.shapes = ()
    with pytest.raises(AttributeError):
        scene.background = (1.0, 1.0, 1.0)
    assert isinstance(scene.shapes, tuple)
    print("  Properties cannot be assigned - PASS")


def test_scene_queries():
    """Test lookups by id, insertion index and containment."""
    print("\n" + "=" * 60)
    print("TEST: Scene queries")
    print("=" * 60)

    outer = PolygonShape('outer', [(-5, -5), (5, -5), (5, 5), (-5, 5)], clear_glass())
    inner = CircleShape('inner', (0, 0), 1.0, clear_glass())
    scene = Scene([outer, inner], name='nested')

    assert scene.get_shape('inner') is inner
    assert scene.index_of(inner) == 1
    with pytest.raises(KeyError):
        scene.get_shape('missing')
    print("  get_shape() and index_of() - PASS")

    assert scene.shapes_containing(Point(0.0, 0.0)) == (outer, inner)
    assert scene.shapes_containing(Point(3.0, 0.0)) == (outer,)
    assert scene.shapes_containing(Point(9.0, 0.0)) == ()
    print("  shapes_containing() in insertion order - PASS")

    assert scene.get_display_name() == 'nested'
    assert Scene().get_display_name() == 'Scene_0_shapes'
    assert scene.channels == 3
    print("  Display name and channels - PASS")


def test_viewport_mapping():
    """Pixel centres map into the viewport with row 0 at the top."""
    print("\n" + "=" * 60)
    print("TEST: Viewport pixel mapping")
    print("=" * 60)

    viewport = Viewport(0.0, 0.0, 4.0, 2.0)
    assert viewport.point_for_pixel(0, 0, 4, 2) == Point(0.5, 1.5)
    assert viewport.point_for_pixel(1, 3, 4, 2) == Point(3.5, 0.5)
    print("  Corner pixels - PASS")

    with pytest.raises(StructuralSceneError):
        Viewport.of([0, 0, 1])
    with pytest.raises(StructuralSceneError):
        Viewport(0.0, 0.0, 0.0, 1.0)
    with pytest.raises(StructuralSceneError):
        Viewport(0.0, 0.0, True, 1.0)
    print("  Invalid viewports rejected - PASS")

    viewport = Viewport(0, 0, np.int64(4), np.float32(2.0))
    assert viewport.to_list() == [0.0, 0.0, 4.0, 2.0]
    assert isinstance(viewport.x_max, float)
    print("  numpy bounds accepted - PASS")


def test_default_viewport():
    """Without a viewport the scene frames its shapes and viewpoint."""
    print("\n" + "=" * 60)
    print("TEST: Default viewport")
    print("=" * 60)

    scene = Scene([PolygonShape('a', SQUARE, RED)], viewpoint=(-5.0, 0.0))
    viewport = scene.viewport
    assert viewport.x_min < -5.0 and viewport.x_max > 1.0
    assert viewport.y_min < 0.0 and viewport.y_max > 1.0
    assert_close(viewport.x_min, -5.6, msg="Padded x_min")
    print(f"  Viewport: {viewport.to_list()} - PASS")

    scene = Scene(viewpoint=(2.0, 3.0))
    assert scene.viewport.width > 0 and scene.viewport.height > 0
    print("  Empty scene still gets a viewport - PASS")


# =============================================================================
# MAIN TEST RUNNER
# =============================================================================

def run_all_tests():
    """Run all tests and report results."""
    print("\n" + "=" * 78)
    print("SHAPE AND SCENE TESTS")
    print("=" * 78)

    tests = [
        ("Polygon validation", test_polygon_validation),
        ("Polygon orientation", test_polygon_orientation),
        ("Polygon with a hole", test_polygon_with_hole),
        ("Circle shape", test_circle_shape),
        ("Shape dictionaries", test_shape_repr_and_dict),
        ("Scene validation", test_scene_validation),
        ("Scene is read-only", test_scene_is_read_only),
        ("Scene queries", test_scene_queries),
        ("Viewport mapping", test_viewport_mapping),
        ("Default viewport", test_default_viewport),
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
