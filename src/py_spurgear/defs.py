# Copyright 2024 Gergely Bencsik
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#     http://www.apache.org/licenses/LICENSE-2.0
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import numpy as np

DEG2RAD = np.pi / 180
RAD2DEG = 180 / np.pi
PI = np.pi

# Dimension and shape conventions
# Points and vectors are row vectors, shape(3), z is 0 for planar geometry.
# Arrays of points: index comes first, e.g. 16 points: shape(16,3)
VSHAPE = 3

# Geometry: directions
ORIGIN = np.array((0.0, 0.0, 0.0)).reshape(VSHAPE)
"""The center of the coordinate system."""
UP = np.array((0.0, 1.0, 0.0)).reshape(VSHAPE)
"""One unit step in the positive Y direction."""
DOWN = np.array((0.0, -1.0, 0.0)).reshape(VSHAPE)
"""One unit step in the negative Y direction."""
RIGHT = np.array((1.0, 0.0, 0.0)).reshape(VSHAPE)
"""One unit step in the positive X direction."""
LEFT = np.array((-1.0, 0.0, 0.0)).reshape(VSHAPE)
"""One unit step in the negative X direction."""
IN = np.array((0.0, 0.0, -1.0)).reshape(VSHAPE)
"""One unit step in the negative Z direction."""
OUT = np.array((0.0, 0.0, 1.0)).reshape(VSHAPE)
"""One unit step in the positive Z direction."""

UNIT3X3 = np.eye(3)

# Sampling resolution
DEFAULT_FLANK_SAMPLES = 15
"""Number of radial steps along one involute flank (and one flattened root arc)."""
MIN_FLANK_SAMPLES = 12

# Tooth system coefficients (relative to module)
ADDENDUM_COEFFICIENT = 1.0
DEDENDUM_COEFFICIENT = 1.25

# Default gear parameters, millimeters and degrees
DEFAULT_MODULE = 2.0
DEFAULT_PRESSURE_ANGLE = 20.0
DEFAULT_THICKNESS = 5.0

# Below this many teeth, flanks of shifted gears may overlap each other
RECOMMENDED_MIN_TEETH = 8

# RPM to degrees per second: 360 / 60
RPM2DEG_PER_SEC = 6.0

# numerical tolerance for coincident points
POINT_TOLERANCE = 1e-9
