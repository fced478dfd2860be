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

from enum import Enum
from typing import Tuple
import numpy as np
from scipy.optimize import brentq
from py_spurgear.defs import *
from py_spurgear.function_generators import *
from py_spurgear.base_classes import GearParameters, InvalidParameterError


class FlankDirection(Enum):
    """Side of the tooth, the value is the sign of the angular offset."""

    RISING = -1
    FALLING = 1


def sample_flank(
    base_radius: float,
    outer_radius: float,
    root_radius: float,
    half_tooth_angle: float,
    direction: FlankDirection = FlankDirection.RISING,
    angle_offset: float = 0.0,
    n_points: int = DEFAULT_FLANK_SAMPLES,
) -> np.ndarray:
    """Sample one involute flank of a tooth.

    Radii are sampled uniformly from max(base_radius, root_radius) to outer_radius.
    The polar angle of a point at radius r is
    angle_offset +/- (half_tooth_angle - inv(alpha(r))), where alpha(r) is the
    pressure angle of the involute at r.

    Parameters
    ----------
    base_radius : float
        Base circle radius.
    outer_radius : float
        Tip circle radius.
    root_radius : float
        Root circle radius.
    half_tooth_angle : float
        Half of the angular tooth thickness at the base circle in radians.
    direction : FlankDirection, optional
        RISING flank lies at the lower angle side of the tooth center, FALLING at
        the higher. Default is RISING.
    angle_offset : float, optional
        Angular position of the tooth center in radians. Default is 0.
    n_points : int, optional
        Number of radial steps, n_points+1 involute points are produced.
        Default is 15, minimum is 12.

    Returns
    -------
    np.ndarray
        Points of shape (k, 3). RISING flanks are ordered root to tip, FALLING flanks
        tip to root.

    Notes
    -----
    The involute does not exist inside the base circle. When the root circle is
    smaller, the flank is extended by a straight radial segment down to the root
    circle, a simple approximation of the undercut. No trochoid is calculated.
    """
    if n_points < MIN_FLANK_SAMPLES:
        raise InvalidParameterError(
            f"At least {MIN_FLANK_SAMPLES} flank samples are needed, got {n_points}"
        )
    r_start = max(base_radius, root_radius)
    if not r_start > 0:
        raise InvalidParameterError(
            f"Base and root radius must be positive, got {base_radius}, {root_radius}"
        )
    if outer_radius < r_start:
        raise InvalidParameterError(
            f"Outer radius {outer_radius:.4f} is inside the involute start radius "
            f"{r_start:.4f}"
        )

    sign = direction.value
    radii = np.linspace(r_start, outer_radius, n_points + 1)
    inv_r = involute_angle(involute_pressure_angle(radii, base_radius))
    points = polar_to_xyz(radii, angle_offset + sign * (half_tooth_angle - inv_r))

    if root_radius < base_radius:
        # inv(alpha(base_radius)) is 0, the radial segment keeps the base angle
        root_point = polar_to_xyz(root_radius, angle_offset + sign * half_tooth_angle)
        points = np.concatenate([root_point[np.newaxis, :], points], axis=0)

    if direction == FlankDirection.FALLING:
        points = points[::-1]
    return points


def pointed_tip_radius(base_radius: float, half_tooth_angle: float) -> float:
    """Radius where the two flanks of a tooth meet.

    Solves inv(alpha(r)) = half_tooth_angle. Teeth with a tip circle beyond this
    radius have crossing flanks."""
    if half_tooth_angle <= 0:
        return base_radius
    alpha = brentq(
        lambda a: involute_angle(a) - half_tooth_angle, 0, PI / 2 - 1e-9, xtol=1e-14
    )
    return base_radius / np.cos(alpha)


class InvoluteToothProfile:
    """Sampling recipe of the teeth of one gear.

    Parameters
    ----------
    base_radius : float
        Base circle radius.
    outer_radius : float
        Tip circle radius.
    root_radius : float
        Root circle radius.
    half_tooth_angle : float
        Half angular tooth thickness at the base circle in radians.
    pitch_angle : float
        Angle between neighbouring teeth in radians.
    n_points : int, optional
        Flank sampling resolution. Default is 15.
    """

    def __init__(
        self,
        base_radius: float,
        outer_radius: float,
        root_radius: float,
        half_tooth_angle: float,
        pitch_angle: float,
        n_points: int = DEFAULT_FLANK_SAMPLES,
    ):
        self.base_radius = base_radius
        self.outer_radius = outer_radius
        self.root_radius = root_radius
        self.half_tooth_angle = half_tooth_angle
        self.pitch_angle = pitch_angle
        self.n_points = n_points

    @classmethod
    def from_gear(cls, gear: GearParameters, n_points: int = DEFAULT_FLANK_SAMPLES):
        return cls(
            base_radius=gear.base_radius,
            outer_radius=gear.outer_radius,
            root_radius=gear.root_radius,
            half_tooth_angle=gear.half_tooth_angle,
            pitch_angle=gear.pitch_angle,
            n_points=n_points,
        )

    @property
    def has_undercut(self):
        """True when the flank is extended radially below the base circle."""
        return self.root_radius < self.base_radius

    @property
    def tip_radius_limit(self):
        return pointed_tip_radius(self.base_radius, self.half_tooth_angle)

    @property
    def root_angle(self):
        """Angle between the tooth center and its flank endpoints on the root
        circle."""
        r_start = max(self.base_radius, self.root_radius)
        inv_start = involute_angle(involute_pressure_angle(r_start, self.base_radius))
        return self.half_tooth_angle - inv_start

    @property
    def root_arc_angle(self):
        """Angular span of the root arc between two neighbouring teeth."""
        return self.pitch_angle - 2 * self.root_angle

    def flank(self, direction: FlankDirection, tooth_index: int = 0) -> np.ndarray:
        return sample_flank(
            self.base_radius,
            self.outer_radius,
            self.root_radius,
            self.half_tooth_angle,
            direction=direction,
            angle_offset=tooth_index * self.pitch_angle,
            n_points=self.n_points,
        )

    def tooth(self, tooth_index: int = 0) -> Tuple[np.ndarray, np.ndarray]:
        """Rising and falling flank of the tooth with the given index."""
        return (
            self.flank(FlankDirection.RISING, tooth_index),
            self.flank(FlankDirection.FALLING, tooth_index),
        )

    def tooth_points(self, tooth_index: int = 0) -> np.ndarray:
        """Single point list of a tooth, rising flank followed by falling flank."""
        return np.concatenate(self.tooth(tooth_index), axis=0)
