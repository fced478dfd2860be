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

import copy
import dataclasses
import warnings
import numpy as np
from py_spurgear.core import *
from py_spurgear.gearmath import *
from py_spurgear.conv_mesh import TriangleMesh, extrude_boundary, merge_meshes
from py_spurgear.conv_stl import mesh_to_ascii_stl, mesh_to_binary_stl
from py_spurgear.conv_svg import (
    boundary_to_svg_path,
    gear_to_svg_document,
    pair_to_svg_document,
)
from py_spurgear.conv_build123d import extrude_to_part
from build123d import Part


class GearInfoMixin:
    """Mixin class for gear information properties."""

    def __init__(self, gear: GearParameters):
        self.gearcore = gear

    @property
    def number_of_teeth(self):
        """Number of teeth of the gear."""
        return self.gearcore.tooth_count

    @property
    def module(self):
        """Module of the gear."""
        return self.gearcore.module

    @property
    def pressure_angle(self):
        """Pressure angle in degrees."""
        return self.gearcore.pressure_angle

    @property
    def profile_shift(self):
        return self.gearcore.profile_shift

    @property
    def bore_diameter(self):
        return self.gearcore.bore_diameter

    @property
    def pitch_radius(self):
        """Nominal pitch radius of the gear."""
        return self.gearcore.pitch_radius

    @property
    def rp(self):
        """Shorthand for pitch radius."""
        return self.gearcore.pitch_radius

    @property
    def r_base(self):
        """Base radius of the involute."""
        return self.gearcore.base_radius

    @property
    def addendum_radius(self):
        """Radius of the tip circle."""
        return self.gearcore.outer_radius

    @property
    def dedendum_radius(self):
        """Radius of the root circle."""
        return self.gearcore.root_radius

    @property
    def bore_radius(self):
        return self.gearcore.bore_radius

    @property
    def pitch_angle(self):
        """Angle between neighbouring teeth in radians."""
        return self.gearcore.pitch_angle

    @property
    def metrics(self) -> GearMetrics:
        """Technical summary values of the gear."""
        return gear_metrics(self.gearcore)


@dataclasses.dataclass
class SpurGearInputParam:
    number_of_teeth: int
    module: float = DEFAULT_MODULE
    pressure_angle: float = DEFAULT_PRESSURE_ANGLE
    profile_shift: float = 0.0
    bore_diameter: float = 0.0
    height: float = DEFAULT_THICKNESS
    center: np.ndarray = dataclasses.field(default_factory=lambda: ORIGIN.copy())
    angle: float = 0
    n_points: int = DEFAULT_FLANK_SAMPLES


class SpurGear(GearInfoMixin):
    """Class for an involute spur gear with a central bore.

    Parameters
    ----------
    number_of_teeth: int
        Number of teeth of the gear.
    module: float, optional
        Module of the gear. Default is 2.0.
    pressure_angle: float, optional
        Pressure angle in degrees. Default is 20.
    profile_shift: float, optional
        Profile shift coefficient. Default is 0.0.
    bore_diameter: float, optional
        Diameter of the shaft hole. Default is 0, no hole.
    height: float, optional
        Extrusion height used for 3D outputs. Default is 5.0.
    center: np.ndarray, optional
        Center reference-point of the gear. Default is ORIGIN.
    angle: float, optional
        Angle (rotation progress) of the gear in radians. Default is 0.
    n_points: int, optional
        Flank sampling resolution, also used for subdividing root arcs. Default is 15.

    Notes
    -----
    The gear parameters are frozen after construction, use with_params() to get a
    gear with different parameters. Center and angle are placement only and can be
    changed freely, eg. by mesh_to().

    Methods
    -------
    mesh_to(other, target_dir=RIGHT)
        Aligns this gear to another gear object. The target_dir parameter specifies
        where this gear should be placed in relation to the other gear.
    boundary()
        Closed 2D boundary of the gear in its own reference frame.
    build_mesh()
        Closed triangle mesh of the gear in its placed position.
    build_part()
        Builds and returns a build123d Part object of the gear.
    to_svg(), to_stl()
        Export to the vector and the mesh format.

    Examples
    --------
    >>> gear1 = SpurGear(number_of_teeth=12, module=2, bore_diameter=5)
    >>> gear2 = SpurGear(number_of_teeth=24, module=2, bore_diameter=5)
    >>> gear2.mesh_to(gear1)
    >>> float(gear2.center[0])
    36.0
    >>> mesh = gear1.build_mesh()
    >>> mesh.is_watertight()
    True
    >>> gear1.to_svg_path().startswith("M ")
    True
    """

    def __init__(
        self,
        number_of_teeth: int,
        module: float = DEFAULT_MODULE,
        pressure_angle: float = DEFAULT_PRESSURE_ANGLE,
        profile_shift: float = 0.0,
        bore_diameter: float = 0.0,
        height: float = DEFAULT_THICKNESS,
        center: np.ndarray = ORIGIN,
        angle: float = 0,
        n_points: int = DEFAULT_FLANK_SAMPLES,
    ):
        self.inputparam = SpurGearInputParam(
            number_of_teeth=number_of_teeth,
            module=module,
            pressure_angle=pressure_angle,
            profile_shift=profile_shift,
            bore_diameter=bore_diameter,
            height=height,
            center=center,
            angle=angle,
            n_points=n_points,
        )
        if not height > 0:
            raise InvalidParameterError(f"Height must be positive, got {height}")
        if n_points < MIN_FLANK_SAMPLES:
            raise InvalidParameterError(
                f"At least {MIN_FLANK_SAMPLES} flank samples are needed, "
                f"got {n_points}"
            )
        super().__init__(self.calc_params())
        self.transform = GearTransform(
            center=np.array(center, dtype=float), angle=angle
        )
        if self.number_of_teeth < RECOMMENDED_MIN_TEETH:
            warnings.warn(
                f"Gears with fewer than {RECOMMENDED_MIN_TEETH} teeth may have "
                f"self-intersecting profiles, got {self.number_of_teeth}",
                RuntimeWarning,
                stacklevel=2,
            )

    def calc_params(self) -> GearParameters:
        """Validated gear parameter snapshot from the input parameters."""
        return GearParameters(
            tooth_count=self.inputparam.number_of_teeth,
            module=self.inputparam.module,
            pressure_angle=self.inputparam.pressure_angle,
            profile_shift=self.inputparam.profile_shift,
            bore_diameter=self.inputparam.bore_diameter,
        )

    @property
    def height(self):
        return self.inputparam.height

    @property
    def center(self):
        """Center of the gear."""
        return self.transform.center

    @center.setter
    def center(self, value):
        self.transform.center = np.array(value, dtype=float)

    @property
    def angle(self):
        """Angle of the gear in radians."""
        return self.transform.angle

    @angle.setter
    def angle(self, value):
        self.transform.angle = value

    def with_params(self, **changes) -> "SpurGear":
        """New gear with the given input parameters changed, placement is kept.

        Examples
        --------
        >>> gear = SpurGear(number_of_teeth=12)
        >>> gear.with_params(number_of_teeth=20).number_of_teeth
        20
        """
        params = dataclasses.replace(
            self.inputparam, center=self.center, angle=self.angle
        )
        params = dataclasses.replace(params, **changes)
        return SpurGear(**dataclasses.asdict(params))

    def mesh_to(self, other: "SpurGear", target_dir: np.ndarray = RIGHT):
        """Aligns this gear to another gear object.

        Parameters
        ----------
        other: SpurGear
            The other gear to mesh to, it acts as the driving gear.
        target_dir: np.ndarray, optional
            Direction vector where this gear should be placed in relation to the other
            gear. Default is RIGHT (x-axis). Need not be unit vector, will be normalized.
        """
        target_dir = normalize_vector(target_dir)
        pair = GearPair(other.gearcore, self.gearcore)
        dir_angle = angle_of_vector_in_xy(target_dir)
        # same as gear 2 of a pair on the X axis, rotated by dir_angle
        angle_1 = (other.angle - dir_angle) * RAD2DEG
        trf = pair.gear_2_transform(angle_1)
        self.center = other.center + target_dir * pair.center_distance
        self.angle = trf.angle + dir_angle

    def reset_location(self):
        """Resets the location of the gear to its original center and angle."""
        self.center = ORIGIN
        self.angle = 0

    def boundary(self) -> GearBoundary:
        """Closed boundary of the gear around the origin, not placed."""
        return generate_outer_boundary(
            self.gearcore, n_points=self.inputparam.n_points
        )

    def build_mesh(self, height: float = None) -> TriangleMesh:
        """Closed triangle mesh of the gear, placed by center and angle.

        Returns
        -------
        TriangleMesh"""
        if height is None:
            height = self.height
        boundary = self.boundary()
        outer = boundary.outer_polyline()
        bore = boundary.paired_bore_points(outer) if boundary.has_bore else None
        mesh = extrude_boundary(outer, bore, height)
        return mesh.rotated_z(self.angle).translated(self.center)

    def build_part(self, height: float = None) -> Part:
        """Creates the build123d Part object of the gear, placed by center and
        angle.

        Returns
        -------
        Part"""
        if height is None:
            height = self.height
        return extrude_to_part(self.boundary(), height, self.transform)

    def to_svg_path(self, precision: int = 4) -> str:
        """SVG path data of the gear, not placed."""
        return boundary_to_svg_path(self.boundary(), precision=precision)

    def to_svg(self, precision: int = 4) -> str:
        """Standalone SVG document of the gear in millimeters."""
        return gear_to_svg_document(
            self.gearcore, boundary=self.boundary(), precision=precision
        )

    def to_stl(self, binary: bool = True, name: str = None):
        """STL export of the placed gear mesh.

        Returns bytes in binary mode, str in ASCII mode."""
        if name is None:
            name = f"gear_m{self.module}_z{self.number_of_teeth}"
        mesh = self.build_mesh()
        if binary:
            return mesh_to_binary_stl(mesh, header=name)
        return mesh_to_ascii_stl(mesh, name=name)

    def copy(self):
        return copy.deepcopy(self)


def make_pair(gear_1: SpurGear, gear_2: SpurGear) -> GearPair:
    """Parameter snapshot of gear_1 driving gear_2."""
    return GearPair(gear_1.gearcore, gear_2.gearcore)


def pair_mesh(
    pair: GearPair,
    height: float = DEFAULT_THICKNESS,
    angle_1: float = 0.0,
    n_points: int = DEFAULT_FLANK_SAMPLES,
) -> TriangleMesh:
    """Combined mesh of both gears, gear 2 placed on the X axis in meshing
    position. angle_1 is the rotation of gear 1 in degrees."""
    gear_1 = SpurGear(
        **_gear_kwargs(pair.gear_1),
        height=height,
        angle=angle_1 * DEG2RAD,
        n_points=n_points,
    )
    gear_2 = SpurGear(**_gear_kwargs(pair.gear_2), height=height, n_points=n_points)
    gear_2.mesh_to(gear_1)
    return merge_meshes(gear_1.build_mesh(), gear_2.build_mesh())


def pair_to_stl(
    pair: GearPair,
    height: float = DEFAULT_THICKNESS,
    angle_1: float = 0.0,
    binary: bool = True,
    name: str = "gear_pair",
):
    """STL export of both gears of a pair in meshing position.

    Examples
    --------
    >>> pair = GearPair(GearParameters(12, bore_diameter=5), GearParameters(24))
    >>> data = pair_to_stl(pair)
    >>> (len(data) - 84) % 50
    0
    """
    mesh = pair_mesh(pair, height=height, angle_1=angle_1)
    if binary:
        return mesh_to_binary_stl(mesh, header=name)
    return mesh_to_ascii_stl(mesh, name=name)


def pair_to_svg(pair: GearPair, angle_1: float = 0.0, precision: int = 4) -> str:
    return pair_to_svg_document(pair, angle_1=angle_1, precision=precision)


def _gear_kwargs(gear: GearParameters):
    return dict(
        number_of_teeth=gear.tooth_count,
        module=gear.module,
        pressure_angle=gear.pressure_angle,
        profile_shift=gear.profile_shift,
        bore_diameter=gear.bore_diameter,
    )
