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

from py_spurgear.function_generators import *
from py_spurgear.defs import *
from py_spurgear.base_classes import *
from py_spurgear.gearteeth import *

import dataclasses
import warnings
from typing import List


@dataclasses.dataclass(frozen=True, eq=False)
class PathCommand:
    """Base of the drawing commands making up a closed gear boundary.

    Attributes
    ----------
    point : np.ndarray
        End point of the command. The start point is the end of the previous one.
    """

    point: np.ndarray = dataclasses.field(default_factory=lambda: ORIGIN.copy())


@dataclasses.dataclass(frozen=True, eq=False)
class MoveTo(PathCommand):
    pass


@dataclasses.dataclass(frozen=True, eq=False)
class LineTo(PathCommand):
    pass


@dataclasses.dataclass(frozen=True, eq=False)
class ArcTo(PathCommand):
    """Circular arc around center ending at point.

    Attributes
    ----------
    radius : float
        Arc radius.
    angle : float
        Signed sweep angle in radians, positive is counter-clockwise.
    center : np.ndarray
        Arc center.
    """

    radius: float = 1.0
    angle: float = 0.0
    center: np.ndarray = dataclasses.field(default_factory=lambda: ORIGIN.copy())

    @property
    def large_arc(self):
        return bool(np.abs(self.angle) >= PI)

    @property
    def sweep(self):
        """Positive angle direction, counter-clockwise in the XY plane."""
        return bool(self.angle > 0)

    @property
    def start_angle(self):
        return angle_of_vector_in_xy(self.point - self.center) - self.angle

    def flatten(self, n_div: int) -> np.ndarray:
        """Interior points of the arc split into n_div segments.
        The endpoints are not included."""
        phi0 = self.start_angle
        return arc_points(self.radius, phi0, phi0 + self.angle, n_div, self.center)[
            1:-1
        ]


@dataclasses.dataclass(frozen=True, eq=False)
class ClosePath(PathCommand):
    pass


def commands_to_polyline(commands: List[PathCommand], n_div: int) -> np.ndarray:
    """Flatten a closed command list into a polyline.

    Arcs are subdivided into n_div segments, the closing duplicate of the first
    point is dropped."""
    points = []
    for command in commands:
        if isinstance(command, ArcTo):
            points.extend(command.flatten(n_div))
            points.append(command.point)
        elif isinstance(command, (MoveTo, LineTo)):
            points.append(command.point)
    if len(points) > 1 and np.linalg.norm(points[-1] - points[0]) < POINT_TOLERANCE:
        points = points[:-1]
    return np.array(points, dtype=float).reshape(-1, VSHAPE)


@dataclasses.dataclass(frozen=True, eq=False)
class GearBoundary:
    """Closed 2D boundary of a gear, generated for one parameter snapshot.

    Attributes
    ----------
    outer_commands : List[PathCommand]
        Counter-clockwise outer profile: flanks as line segments, root arcs as
        ArcTo commands, ending with ClosePath.
    bore_commands : List[PathCommand]
        Clockwise bore circle, empty list when the gear has no bore.
    tooth_count : int
        Number of tooth repeats in the outer profile.
    bore_radius : float
        Radius of the bore, 0 for no bore.
    n_div : int
        Subdivision used when arcs are flattened.
    """

    outer_commands: List[PathCommand]
    bore_commands: List[PathCommand]
    tooth_count: int
    bore_radius: float = 0.0
    n_div: int = DEFAULT_FLANK_SAMPLES

    @property
    def has_bore(self):
        return len(self.bore_commands) > 0

    @property
    def start_point(self):
        return self.outer_commands[0].point

    @property
    def is_closed(self):
        """The outer path returns to its literal first point and is closed."""
        if not isinstance(self.outer_commands[0], MoveTo):
            return False
        if not isinstance(self.outer_commands[-1], ClosePath):
            return False
        last_point = self.outer_commands[-2].point
        return bool(np.linalg.norm(last_point - self.start_point) < POINT_TOLERANCE)

    def outer_polyline(self) -> np.ndarray:
        """Outer profile as an (N,3) polyline, root arcs flattened."""
        return commands_to_polyline(self.outer_commands, self.n_div)

    def bore_polyline(self, n_points: int = None) -> np.ndarray:
        """Clockwise bore circle sampled into n_points points.
        Default is the point count of the outer polyline."""
        if n_points is None:
            n_points = self.outer_polyline().shape[0]
        if not self.has_bore:
            return np.zeros((0, VSHAPE))
        phi = np.linspace(0, -2 * PI, n_points, endpoint=False)
        return polar_to_xyz(np.full_like(phi, self.bore_radius), phi)

    def paired_bore_points(self, outer_points: np.ndarray = None) -> np.ndarray:
        """Bore circle points index-paired with the outer polyline.

        Each outer point's polar angle is projected onto the bore radius, so
        paired_bore_points()[i] lies at the same angle as outer_polyline()[i].
        Without a bore all points are at the origin."""
        if outer_points is None:
            outer_points = self.outer_polyline()
        phi = np.arctan2(outer_points[:, 1], outer_points[:, 0])
        return polar_to_xyz(np.full_like(phi, self.bore_radius), phi)


def generate_bore_commands(bore_radius: float) -> List[PathCommand]:
    """Clockwise circle made of two half arcs, empty for zero radius."""
    if bore_radius <= 0:
        return []
    p0 = RIGHT * bore_radius
    return [
        MoveTo(p0),
        ArcTo(-p0, radius=bore_radius, angle=-PI),
        ArcTo(p0, radius=bore_radius, angle=-PI),
        ClosePath(p0),
    ]


def check_tooth_degeneracy(gear: GearParameters, profile: InvoluteToothProfile):
    """Warn about known geometric limits of the tooth model.

    The geometry is not modified, these cases produce self-intersecting
    boundaries."""
    if profile.root_arc_angle < 0:
        warnings.warn(
            f"Neighbouring teeth overlap at the root circle "
            f"(tooth_count={gear.tooth_count}, profile_shift={gear.profile_shift})",
            RuntimeWarning,
            stacklevel=3,
        )
    if gear.outer_radius > profile.tip_radius_limit:
        warnings.warn(
            f"Tooth flanks cross below the tip circle, pointed tip at radius "
            f"{profile.tip_radius_limit:.4f} < {gear.outer_radius:.4f}",
            RuntimeWarning,
            stacklevel=3,
        )


def generate_outer_boundary(
    gear: GearParameters, n_points: int = DEFAULT_FLANK_SAMPLES
) -> GearBoundary:
    """Assemble the closed boundary of a gear from its sampled teeth.

    Each tooth contributes its rising then falling flank. Consecutive teeth are
    connected by counter-clockwise arcs on the root circle, the last tooth returns
    to the first point of the first tooth.

    Parameters
    ----------
    gear : GearParameters
        The gear to draw.
    n_points : int, optional
        Flank sampling resolution, also used for flattening arcs. Default is 15.

    Returns
    -------
    GearBoundary
    """
    profile = InvoluteToothProfile.from_gear(gear, n_points=n_points)
    check_tooth_degeneracy(gear, profile)

    r_d = gear.root_radius
    arc_angle = profile.root_arc_angle

    commands: List[PathCommand] = []
    first_point = None
    for i in range(gear.tooth_count):
        rising, falling = profile.tooth(i)
        if first_point is None:
            first_point = rising[0]
            commands.append(MoveTo(first_point))
        else:
            commands.append(ArcTo(rising[0], radius=r_d, angle=arc_angle))
        commands.extend(LineTo(p) for p in rising[1:])
        commands.extend(LineTo(p) for p in falling)

    commands.append(ArcTo(first_point, radius=r_d, angle=arc_angle))
    commands.append(ClosePath(first_point))

    return GearBoundary(
        outer_commands=commands,
        bore_commands=generate_bore_commands(gear.bore_radius),
        tooth_count=gear.tooth_count,
        bore_radius=gear.bore_radius,
        n_div=n_points,
    )
