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

import pytest as pytest
import shapely as shp
from py_spurgear.defs import *
from py_spurgear.base_classes import GearParameters, InvalidParameterError
from py_spurgear.core import generate_outer_boundary
from py_spurgear.gearmath import GearPair
from py_spurgear.conv_build123d import *
from py_spurgear.wrapper import SpurGear


@pytest.mark.parametrize("num_teeth", [8, 21, 55])
@pytest.mark.parametrize("module", [0.5, 2])
@pytest.mark.parametrize("bore_ratio", [0, 0.4])
@pytest.mark.parametrize("height", [0.5, 3])
def test_CAD(num_teeth, module, bore_ratio, height):
    gear = GearParameters(
        tooth_count=num_teeth,
        module=module,
        bore_diameter=bore_ratio * num_teeth * module,
    )
    boundary = generate_outer_boundary(gear)
    wire = boundary_to_wire(boundary)
    face = boundary_to_face(boundary)
    part = extrude_to_part(boundary, height)

    assert wire.is_closed
    assert wire.length > 2 * PI * gear.root_radius

    # flattened root arcs cut a little area off compared to the true arcs
    poly = shp.geometry.Polygon(boundary.outer_polyline()[:, :2])
    expected_area = poly.area - PI * gear.bore_radius**2
    assert face.area == pytest.approx(expected_area, rel=1e-2)

    assert part.is_valid
    assert part.volume == pytest.approx(face.area * height, rel=1e-6)


def test_part_matches_mesh():
    gear = SpurGear(number_of_teeth=30, module=1, bore_diameter=8, height=4)
    part = gear.build_part()
    mesh = gear.build_mesh()
    assert part.volume == pytest.approx(mesh.volume, rel=1e-2)


def test_part_placement():
    gear = SpurGear(number_of_teeth=20, module=1, height=2)
    gear.center = RIGHT * 50
    part = gear.build_part()
    bbox = part.bounding_box()
    assert bbox.center().X == pytest.approx(50, abs=0.5)
    assert bbox.min.Z == pytest.approx(0, abs=1e-6)
    assert bbox.max.Z == pytest.approx(2, abs=1e-6)


def test_pair_parts():
    pair = GearPair(GearParameters(tooth_count=12), GearParameters(tooth_count=24))
    part_1, part_2 = pair_to_parts(pair, thickness=3)
    assert part_1.is_valid and part_2.is_valid
    assert part_1.bounding_box().center().X == pytest.approx(0, abs=0.5)
    assert part_2.bounding_box().center().X == pytest.approx(36, abs=0.5)
    assert part_2.volume > part_1.volume


def test_invalid_thickness():
    boundary = generate_outer_boundary(GearParameters(tooth_count=12))
    with pytest.raises(InvalidParameterError):
        extrude_to_part(boundary, 0)
