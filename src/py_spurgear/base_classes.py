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

import dataclasses
import numpy as np
from py_spurgear.defs import *
from py_spurgear.function_generators import calc_half_tooth_angle
from scipy.spatial.transform import Rotation as scp_Rotation

# If a dataclass tends to be user input, it should be named param.
# If a dataclass tends to be generated or manipulated by functions,
# it should be named data.


class InvalidParameterError(ValueError):
    """Raised when gear parameters cannot describe a valid gear.

    Geometry is never generated from such parameters and values are never clamped
    silently, limiting inputs to sane ranges is the caller's job."""


@dataclasses.dataclass(frozen=True)
class GearParameters:
    """Immutable parameter set of an involute spur gear.

    Attributes
    ----------
    tooth_count : int
        Number of teeth (z).
    module : float
        Size modulus, pitch diameter = module * tooth_count.
    pressure_angle : float
        Pressure angle in degrees, typically 14.5 ... 25.
    profile_shift : float
        Profile shift coefficient (x-factor), must lie within (-1, 1.25) so the
        pitch circle stays between the root and tip circles.
    bore_diameter : float
        Diameter of the central shaft hole. 0 means no hole.

    Notes
    -----
    Very low tooth counts combined with positive profile shift may result in
    overlapping flanks. This is not detected as an error, callers should keep the
    tooth count at a sane minimum (see RECOMMENDED_MIN_TEETH).

    Examples
    --------
    >>> g = GearParameters(tooth_count=12, module=2, bore_diameter=5)
    >>> float(g.pitch_diameter), float(g.outer_radius), float(g.root_radius)
    (24.0, 14.0, 9.5)
    """

    tooth_count: int
    module: float = DEFAULT_MODULE
    pressure_angle: float = DEFAULT_PRESSURE_ANGLE
    profile_shift: float = 0.0
    bore_diameter: float = 0.0

    def __post_init__(self):
        # integral floats such as 12.0 are stored as int
        try:
            tooth_count = int(self.tooth_count)
        except (TypeError, ValueError, OverflowError):
            raise InvalidParameterError(
                f"Tooth count must be an integer, got {self.tooth_count}"
            ) from None
        if tooth_count == self.tooth_count:
            object.__setattr__(self, "tooth_count", tooth_count)
        self.validate()

    def validate(self):
        """Raise InvalidParameterError for parameters that cannot form a gear."""
        if not isinstance(self.tooth_count, int):
            raise InvalidParameterError(
                f"Tooth count must be an integer, got {self.tooth_count}"
            )
        if self.tooth_count < 1:
            raise InvalidParameterError(
                f"Tooth count must be at least 1, got {self.tooth_count}"
            )
        if not self.module > 0:
            raise InvalidParameterError(f"Module must be positive, got {self.module}")
        if not 0 < self.pressure_angle < 90:
            raise InvalidParameterError(
                f"Pressure angle must be between 0 and 90 degrees, "
                f"got {self.pressure_angle}"
            )
        if not self.root_radius > 0:
            raise InvalidParameterError(
                f"Root radius {self.root_radius:.4f} is not positive "
                f"(tooth_count={self.tooth_count}, profile_shift={self.profile_shift})"
            )
        if not self.outer_radius > self.pitch_radius > self.root_radius:
            raise InvalidParameterError(
                f"Profile shift {self.profile_shift} moves the tip or root circle "
                f"across the pitch circle (outer={self.outer_radius:.4f}, "
                f"pitch={self.pitch_radius:.4f}, root={self.root_radius:.4f})"
            )
        if not self.bore_diameter >= 0:
            raise InvalidParameterError(
                f"Bore diameter must be a non-negative number, "
                f"got {self.bore_diameter}"
            )
        if self.bore_diameter > self.root_diameter:
            raise InvalidParameterError(
                f"Bore diameter {self.bore_diameter} exceeds root diameter "
                f"{self.root_diameter:.4f}"
            )

    def replace(self, **changes) -> "GearParameters":
        """Return a new parameter set with the given fields changed."""
        return dataclasses.replace(self, **changes)

    @property
    def pressure_angle_rad(self):
        """Pressure angle in radians."""
        return self.pressure_angle * DEG2RAD

    @property
    def pitch_diameter(self):
        return self.module * self.tooth_count

    @property
    def pitch_radius(self):
        return self.pitch_diameter / 2

    @property
    def rp(self):
        """Shorthand of pitch_radius."""
        return self.pitch_radius

    @property
    def base_radius(self):
        """Radius of the base circle generating the involute."""
        return self.pitch_radius * np.cos(self.pressure_angle_rad)

    @property
    def addendum(self):
        return self.module * (ADDENDUM_COEFFICIENT + self.profile_shift)

    @property
    def dedendum(self):
        return self.module * (DEDENDUM_COEFFICIENT - self.profile_shift)

    @property
    def outer_radius(self):
        """Tip (addendum) circle radius."""
        return self.pitch_radius + self.addendum

    @property
    def root_radius(self):
        """Root (dedendum) circle radius."""
        return self.pitch_radius - self.dedendum

    @property
    def outer_diameter(self):
        return 2 * self.outer_radius

    @property
    def root_diameter(self):
        return 2 * self.root_radius

    @property
    def bore_radius(self):
        return self.bore_diameter / 2

    @property
    def pitch_angle(self):
        """Angle between two neighbouring teeth in radians."""
        return 2 * PI / self.tooth_count

    @property
    def half_tooth_angle(self):
        """Half of the angular tooth thickness at the base circle, in radians."""
        return calc_half_tooth_angle(
            self.tooth_count, self.pressure_angle_rad, self.profile_shift
        )


@dataclasses.dataclass
class GearTransformData:
    """Data class for placing a gear in the XY plane.

    Attributes
    ----------
    center : np.ndarray
        Center displacement of the gear.
    angle : float
        Rotation progress of the gear around its own center, in radians.
    """

    center: np.ndarray = dataclasses.field(default_factory=lambda: ORIGIN.copy())
    angle: float = 0

    @property
    def rotation(self):
        return scp_Rotation.from_euler("z", self.angle)

    @property
    def angle_degrees(self):
        return self.angle * RAD2DEG


def apply_gear_transform(points: np.ndarray, data: GearTransformData) -> np.ndarray:
    """Rotate points by the gear angle around the origin, then move them to center."""
    return data.rotation.apply(points) + data.center


class GearTransform(GearTransformData):
    """A callable class for applying a gear transformation to a set of points.
    Inherited from GearTransformData."""

    def __call__(self, points) -> np.ndarray:
        return apply_gear_transform(points, self)
