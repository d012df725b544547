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
Constants used throughout the glass renderer.

Numeric tolerances and defaults live here so the intersector, the path
tracer and the renderer agree on them without importing each other.
"""

# Minimum distance along a ray for a crossing to count.
# Keeps a ray spawned on a surface from hitting that surface again.
EPSILON = 1e-6

# Rays travelling this close to parallel with an edge are treated as grazing
# (|dot(direction, normal)| below this value) and the hit is dropped
TANGENT_TOLERANCE = 1e-9

# Crossings closer than this (in t) are treated as the same interface.
# Used for vertex hits within one shape and for coincident boundaries
# of different shapes.
MERGE_TOLERANCE = 1e-7

# Rays are never followed further than this
FAR_LIMIT = 1e4

# Default bounce budget for primary rays
DEFAULT_MAX_DEPTH = 8

# Refractive index of the space outside every glass
AMBIENT_REFRACTIVE_INDEX = 1.0

# Number of color channels used when none is specified (RGB)
DEFAULT_CHANNELS = 3
