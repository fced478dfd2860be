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
import logging
from typing import Tuple
import numpy as np
from py_spurgear.defs import *
from py_spurgear.base_classes import *


def center_distance(gear_1: GearParameters, gear_2: GearParameters) -> float:
    """
    Calculate the axial distance of two externally meshing spur gears.

    Parameters
    ----------
    gear_1 : GearParameters
        Parameters of gear 1.
    gear_2 : GearParameters
        Parameters of gear 2.

    Returns
    -------
    float
        Half of the sum of the pitch diameters, module * (z1 + z2) / 2 for gears of
        equal module.

    Notes
    -----
    The gears should have the same module. This is not checked, unequal modules
    give a number without physical meaning.
    """
    if gear_1.module != gear_2.module:
        logging.debug(
            f"Center distance of gears with different modules: "
            f"{gear_1.module} and {gear_2.module}"
        )
    return (gear_1.pitch_diameter + gear_2.pitch_diameter) / 2


def gear_ratio(gear_1: GearParameters, gear_2: GearParameters) -> float:
    """Transmission ratio z2 / z1 of gear 1 driving gear 2."""
    return gear_2.tooth_count / gear_1.tooth_count


def angular_velocity_ratio(gear_1: GearParameters, gear_2: GearParameters) -> float:
    """
    Ratio of the angular velocity of gear 2 to gear 1, -z1 / z2.

    External meshing reverses the direction of rotation. The magnitude follows from
    equal surface speeds on the pitch circles: w1 * r1 = w2 * r2 with r ~ z.
    """
    return -gear_1.tooth_count / gear_2.tooth_count


def output_angular_velocity(
    gear_1: GearParameters, gear_2: GearParameters, angular_velocity_1: float
) -> float:
    """Angular velocity of gear 2 when gear 1 rotates with angular_velocity_1.

    Units follow the input, the rendering layer uses degrees per second.

    Examples
    --------
    >>> g1 = GearParameters(tooth_count=12, module=2)
    >>> g2 = GearParameters(tooth_count=24, module=2)
    >>> output_angular_velocity(g1, g2, 60)
    -30.0
    """
    return angular_velocity_1 * angular_velocity_ratio(gear_1, gear_2)


def mesh_phase_offset(gear_2: GearParameters) -> float:
    """
    Initial rotation of gear 2 in degrees, half a pitch angle.

    Rotating gear 2 by 180 / z2 degrees places a tooth valley of gear 2 against the
    tooth of gear 1 pointing towards it. This is an alignment heuristic for
    visualization, not a contact point solution.
    """
    return 180 / gear_2.tooth_count


def rpm_to_degrees_per_second(rpm: float) -> float:
    return rpm * RPM2DEG_PER_SEC


def round_half_up(value: float) -> int:
    """Nearest integer, halves rounded up (2.5 -> 3, unlike round())."""
    return int(np.floor(value + 0.5))


@dataclasses.dataclass(frozen=True)
class GearMetrics:
    """Technical summary values of a single gear, millimeters."""

    tooth_count: int
    module: float
    pressure_angle: float
    profile_shift: float
    bore_diameter: float
    pitch_diameter: float
    base_diameter: float
    outer_diameter: float
    root_diameter: float
    addendum: float
    dedendum: float


def gear_metrics(gear: GearParameters) -> GearMetrics:
    return GearMetrics(
        tooth_count=gear.tooth_count,
        module=gear.module,
        pressure_angle=gear.pressure_angle,
        profile_shift=gear.profile_shift,
        bore_diameter=gear.bore_diameter,
        pitch_diameter=gear.pitch_diameter,
        base_diameter=2 * gear.base_radius,
        outer_diameter=gear.outer_diameter,
        root_diameter=gear.root_diameter,
        addendum=gear.addendum,
        dedendum=gear.dedendum,
    )


@dataclasses.dataclass(frozen=True)
class PairMetrics:
    gear_1: GearMetrics
    gear_2: GearMetrics
    ratio: float
    center_distance: float


@dataclasses.dataclass(frozen=True)
class GearPair:
    """Immutable snapshot of a driving gear (gear_1) meshing with gear_2.

    A changed parameter produces a new pair, consumers holding the old snapshot
    are not affected. Changes made through with_gear_1 / with_gear_2 keep the
    pair meshing: a new module is applied to both gears. With locked_ratio,
    a new tooth count on gear 1 resizes gear 2 to keep target_ratio, while a
    new tooth count on gear 2 sets a new target_ratio.

    Attributes
    ----------
    gear_1 : GearParameters
        Driving gear.
    gear_2 : GearParameters
        Driven gear.
    locked_ratio : bool
        Keep target_ratio when the tooth count of gear 1 changes. Default is True.
    target_ratio : float
        Ratio followed by gear 2 while locked. Default is z2 / z1 of the gears.

    Examples
    --------
    >>> pair = GearPair(GearParameters(12, module=2), GearParameters(24, module=2))
    >>> float(pair.ratio), float(pair.center_distance)
    (2.0, 36.0)
    >>> pair.with_gear_1(tooth_count=15).gear_2.tooth_count
    30
    """

    gear_1: GearParameters
    gear_2: GearParameters
    locked_ratio: bool = True
    target_ratio: float = None

    def __post_init__(self):
        if self.target_ratio is None:
            object.__setattr__(
                self, "target_ratio", gear_ratio(self.gear_1, self.gear_2)
            )

    @property
    def center_distance(self):
        return center_distance(self.gear_1, self.gear_2)

    @property
    def ratio(self):
        return gear_ratio(self.gear_1, self.gear_2)

    @property
    def mesh_phase_offset(self):
        """Initial rotation of gear 2 in degrees."""
        return mesh_phase_offset(self.gear_2)

    @property
    def modules_match(self):
        return bool(np.isclose(self.gear_1.module, self.gear_2.module))

    def with_gear_1(self, **changes) -> "GearPair":
        gear_1 = self.gear_1.replace(**changes)
        changes_2 = {}
        if "module" in changes:
            changes_2["module"] = gear_1.module
        target_ratio = self.target_ratio
        if "tooth_count" in changes:
            if self.locked_ratio:
                changes_2["tooth_count"] = round_half_up(
                    gear_1.tooth_count * self.target_ratio
                )
            else:
                target_ratio = gear_ratio(gear_1, self.gear_2)
        gear_2 = self.gear_2.replace(**changes_2)
        return dataclasses.replace(
            self, gear_1=gear_1, gear_2=gear_2, target_ratio=target_ratio
        )

    def with_gear_2(self, **changes) -> "GearPair":
        gear_2 = self.gear_2.replace(**changes)
        gear_1 = self.gear_1
        if "module" in changes:
            gear_1 = gear_1.replace(module=gear_2.module)
        target_ratio = self.target_ratio
        if "tooth_count" in changes:
            target_ratio = gear_ratio(gear_1, gear_2)
        return dataclasses.replace(
            self, gear_1=gear_1, gear_2=gear_2, target_ratio=target_ratio
        )

    def with_locked_ratio(self, locked: bool = True) -> "GearPair":
        """Toggle the ratio lock, locking keeps the current target ratio."""
        return dataclasses.replace(self, locked_ratio=locked)

    def output_velocity(self, angular_velocity_1: float) -> float:
        return output_angular_velocity(self.gear_1, self.gear_2, angular_velocity_1)

    def rotation_angles(self, time: float, rpm: float) -> Tuple[float, float]:
        """Rotation of both gears in degrees after time seconds at rpm speed of
        gear 1, wrapped into [0, 360).

        Gear 2 starts from the mesh phase offset and turns in the opposite
        direction."""
        angle_1 = rpm_to_degrees_per_second(rpm) * time
        angle_2 = self.mesh_phase_offset + self.output_velocity(angle_1)
        return float(np.mod(angle_1, 360)), float(np.mod(angle_2, 360))

    def gear_2_transform(self, angle_1: float = 0.0) -> GearTransform:
        """Placement of gear 2 on the positive X axis, meshing with gear 1 when gear 1
        is rotated by angle_1 degrees."""
        angle_2 = self.mesh_phase_offset + self.output_velocity(angle_1)
        return GearTransform(
            center=RIGHT * self.center_distance, angle=angle_2 * DEG2RAD
        )

    @property
    def metrics(self) -> PairMetrics:
        return PairMetrics(
            gear_1=gear_metrics(self.gear_1),
            gear_2=gear_metrics(self.gear_2),
            ratio=self.ratio,
            center_distance=self.center_distance,
        )

    def summary(self) -> str:
        """Technical summary of the pair, values rounded to 2 decimals."""
        lines = []
        metrics = self.metrics
        for label, m in (
            ("Gear 1 (driver)", metrics.gear_1),
            ("Gear 2 (driven)", metrics.gear_2),
        ):
            lines.extend(
                [
                    f"{label}:",
                    f"  teeth: {m.tooth_count}",
                    f"  module: {m.module:.2f} mm",
                    f"  bore: {m.bore_diameter:.2f} mm",
                    f"  pitch diameter: {m.pitch_diameter:.2f} mm",
                    f"  outer diameter: {m.outer_diameter:.2f} mm",
                ]
            )
        lines.extend(
            [
                "System:",
                f"  ratio: 1:{self.ratio:.2f}",
                f"  center distance: {self.center_distance:.2f} mm",
            ]
        )
        return "\n".join(lines)


def pair_metrics(pair: GearPair) -> PairMetrics:
    return pair.metrics
