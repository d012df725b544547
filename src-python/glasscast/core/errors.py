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


class StructuralSceneError(ValueError):
    """
    Raised when a scene cannot be built from its description.

    Covers self-intersecting or degenerate shape boundaries (where inside
    and outside are ambiguous), invalid material parameters, duplicate
    shape ids and malformed scene documents. Always raised while the scene
    is being constructed, never while tracing.
    """
