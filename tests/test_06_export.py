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

import re
import numpy as np
import pytest as pytest
from py_spurgear.defs import *
from py_spurgear.base_classes import GearParameters
from py_spurgear.core import generate_outer_boundary
from py_spurgear.gearmath import GearPair
from py_spurgear.conv_mesh import extrude_boundary
from py_spurgear.conv_stl import *
from py_spurgear.conv_svg import *
from py_spurgear.wrapper import SpurGear, pair_to_stl, pair_to_svg, pair_mesh


@pytest.fixture
def reference_gear():
    return GearParameters(tooth_count=12, module=2, pressure_angle=20, bore_diameter=5)


def test_svg_path_structure(reference_gear):
    boundary = generate_outer_boundary(reference_gear)
    path = boundary_to_svg_path(boundary)

    assert path.startswith("M ")
    outer, bore = path.split(" Z ")
    assert bore == "M 2.5 0 A 2.5 2.5 0 1 0 -2.5 0 A 2.5 2.5 0 1 0 2.5 0 Z"

    # one root arc per tooth, all counter-clockwise on the root circle
    arcs = re.findall(r"A ([-\d.]+) ([-\d.]+) 0 (\d) (\d) ", outer + " ")
    assert len(arcs) == 12
    for rx, ry, large, sweep in arcs:
        assert float(rx) == pytest.approx(9.5)
        assert float(ry) == pytest.approx(9.5)
        assert (large, sweep) == ("0", "1")

    n_lines = outer.count("L ")
    n_flank = 2 * 17 - 1
    assert n_lines == 12 * n_flank


def test_svg_path_no_bore():
    boundary = generate_outer_boundary(GearParameters(tooth_count=20, module=1))
    path = boundary_to_svg_path(boundary)
    assert path.endswith(" Z")
    assert path.count("M ") == 1
    assert path.count("Z") == 1


def test_svg_path_closes_on_first_point(reference_gear):
    path = boundary_to_svg_path(generate_outer_boundary(reference_gear), precision=6)
    outer = path.split(" Z ")[0]
    tokens = outer.split()
    start = tokens[1:3]
    end = tokens[-2:]
    assert start == end


@pytest.mark.parametrize(
    "value, precision, expected",
    [
        (14.0, 4, "14"),
        (2.5, 4, "2.5"),
        (-2.5, 4, "-2.5"),
        (1.234567, 4, "1.2346"),
        (-0.00001, 4, "0"),
        (-0.0, 2, "0"),
        (9.5, 0, "10"),
    ],
)
def test_format_number(value, precision, expected):
    assert format_number(value, precision) == expected


def test_svg_document(reference_gear):
    doc = gear_to_svg_document(reference_gear)
    assert doc.startswith('<svg xmlns="http://www.w3.org/2000/svg"')
    assert doc.rstrip().endswith("</svg>")
    # outer diameter 28 plus one module margin on each side
    assert 'width="32mm" height="32mm"' in doc
    assert 'viewBox="0 0 32 32"' in doc
    assert 'transform="translate(16, 16)"' in doc
    assert 'fill-rule="evenodd"' in doc
    assert doc.count("<path ") == 1


def test_pair_svg_document():
    pair = GearPair(
        GearParameters(tooth_count=12, module=2), GearParameters(tooth_count=24, module=2)
    )
    doc = pair_to_svg(pair)
    assert doc.count("<path ") == 2
    assert "translate(36, 0) rotate(7.5)" in doc
    assert "Center Distance: 36.00mm" in doc

    doc = pair_to_svg_document(pair, angle_1=30)
    assert "rotate(30)" in doc
    assert "rotate(-7.5)" in doc


def test_ascii_stl(reference_gear):
    mesh = SpurGear(number_of_teeth=12, module=2, bore_diameter=5).build_mesh()
    text = mesh_to_ascii_stl(mesh, name="ref_gear")
    lines = text.splitlines()
    assert lines[0] == "solid ref_gear"
    assert lines[-1] == "endsolid ref_gear"
    assert text.count("facet normal ") == mesh.n_triangles
    assert text.count("endfacet") == mesh.n_triangles
    assert text.count("outer loop") == mesh.n_triangles
    assert text.count("vertex ") == 3 * mesh.n_triangles

    # facet block layout
    assert lines[1].startswith("facet normal ")
    assert lines[2] == "outer loop"
    assert [line.split()[0] for line in lines[3:6]] == ["vertex"] * 3
    assert lines[6] == "endloop"
    assert lines[7] == "endfacet"
    coords = [float(v) for v in lines[3].split()[1:]]
    assert coords == pytest.approx(mesh.triangles[0, 0].tolist(), rel=1e-6)


def test_binary_stl():
    mesh = SpurGear(number_of_teeth=15, module=1, bore_diameter=3).build_mesh()
    data = mesh_to_binary_stl(mesh, header="test gear")
    assert len(data) == 84 + 50 * mesh.n_triangles
    assert data[:9] == b"test gear"
    assert data[9:80] == bytes(71)
    assert int.from_bytes(data[80:84], "little") == mesh.n_triangles

    records = read_binary_stl(data)
    assert records.shape == (mesh.n_triangles,)
    assert records["vertices"] == pytest.approx(mesh.triangles, abs=1e-5)
    assert records["normal"] == pytest.approx(mesh.normals, abs=1e-6)
    assert np.all(records["attr"] == 0)

    with pytest.raises(ValueError):
        read_binary_stl(data[:-1])


def test_write_stl(tmp_path):
    square = np.array([[1, 1], [-1, 1], [-1, -1], [1, -1]], dtype=float)
    mesh = extrude_boundary(square, None, 1)
    path_bin = tmp_path / "box.stl"
    path_txt = tmp_path / "box_ascii.stl"
    write_stl(path_bin, mesh)
    write_stl(path_txt, mesh, binary=False, name="box")
    assert path_bin.stat().st_size == 84 + 50 * 16
    assert path_txt.read_text().startswith("solid box\n")


def test_gear_exports():
    gear = SpurGear(number_of_teeth=10, module=1.5, bore_diameter=4)
    stl_bytes = gear.to_stl()
    assert isinstance(stl_bytes, bytes)
    stl_text = gear.to_stl(binary=False)
    assert stl_text.startswith("solid gear_m1.5_z10\n")
    assert gear.to_svg().count("<path ") == 1
    assert gear.to_svg_path() == boundary_to_svg_path(gear.boundary())


def test_pair_stl():
    pair = GearPair(
        GearParameters(tooth_count=12, bore_diameter=5),
        GearParameters(tooth_count=24, bore_diameter=5),
    )
    mesh = pair_mesh(pair)
    assert mesh.is_watertight()
    data = pair_to_stl(pair)
    assert len(data) == 84 + 50 * mesh.n_triangles
    text = pair_to_stl(pair, binary=False)
    assert text.count("endfacet") == mesh.n_triangles

    # gear 2 sits around the center distance on the X axis
    x = mesh.vertices[:, 0]
    x_max = np.max(x)
    assert 36 + pair.gear_2.root_radius < x_max <= 36 + pair.gear_2.outer_radius + 1e-9
