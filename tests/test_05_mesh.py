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
import pytest as pytest
import shapely as shp
from py_spurgear.defs import *
from py_spurgear.function_generators import polygon_signed_area
from py_spurgear.base_classes import GearParameters, InvalidParameterError
from py_spurgear.core import generate_outer_boundary
from py_spurgear.conv_mesh import *
from py_spurgear.wrapper import SpurGear


def gear_mesh(gear: GearParameters, thickness=5.0):
    boundary = generate_outer_boundary(gear)
    outer = boundary.outer_polyline()
    bore = boundary.paired_bore_points(outer) if boundary.has_bore else None
    return outer, bore, extrude_boundary(outer, bore, thickness)


def test_no_bore_triangle_count():
    gear = GearParameters(tooth_count=8, module=2)
    outer, bore, mesh = gear_mesh(gear)
    n = outer.shape[0]
    assert mesh.n_triangles == 4 * n
    assert mesh.vertices.shape == (2 * n + 2, 3)
    assert mesh.is_watertight()


def test_bore_triangle_count_no_undercut():
    # z=42 at 20 degrees: the root circle lies outside the base circle
    gear = GearParameters(tooth_count=42, module=2, bore_diameter=10)
    assert gear.root_radius > gear.base_radius
    outer, bore, mesh = gear_mesh(gear)
    n = outer.shape[0]
    assert mesh.n_triangles == 8 * n
    assert mesh.is_watertight()


def test_bore_triangle_count_undercut():
    # both radial flank segments of each tooth project onto one bore point
    gear = GearParameters(tooth_count=12, module=2, bore_diameter=5)
    outer, bore, mesh = gear_mesh(gear)
    n = outer.shape[0]
    assert mesh.n_triangles == 8 * n - 8 * 12
    assert mesh.is_watertight()
    assert len(np.unique(mesh.faces)) == mesh.vertices.shape[0]


@pytest.mark.parametrize("num_teeth", [8, 12, 19, 42, 73])
@pytest.mark.parametrize("bore_diameter", [0, 4])
@pytest.mark.parametrize("profile_shift", [0, 0.3])
@pytest.mark.parametrize("thickness", [0.5, 5])
def test_mesh_volume(num_teeth, bore_diameter, profile_shift, thickness):
    gear = GearParameters(
        tooth_count=num_teeth,
        module=1.5,
        profile_shift=profile_shift,
        bore_diameter=bore_diameter,
    )
    outer, bore, mesh = gear_mesh(gear, thickness)
    assert mesh.is_watertight()

    area = shp.geometry.Polygon(outer[:, :2]).area
    if bore is not None:
        area -= polygon_signed_area(bore)
    assert mesh.volume == pytest.approx(area * thickness, rel=1e-9)


def test_mesh_normals():
    # no radial flank segments, every facet has a proper normal
    gear = GearParameters(tooth_count=42, module=1, bore_diameter=6)
    thickness = 3.0
    _, _, mesh = gear_mesh(gear, thickness)
    normals = mesh.normals
    assert np.linalg.norm(normals, axis=1) == pytest.approx(np.ones(mesh.n_triangles))

    tri = mesh.triangles
    z = tri[:, :, 2]
    top = np.all(z == thickness, axis=1)
    bottom = np.all(z == 0, axis=1)
    assert normals[top] == pytest.approx(np.tile(OUT, (np.sum(top), 1)))
    assert normals[bottom] == pytest.approx(np.tile(IN, (np.sum(bottom), 1)))

    # side walls are horizontal: outer walls point away from the axis,
    # bore walls towards it
    side = ~(top | bottom)
    centers = np.mean(tri[side], axis=1)
    radial = np.einsum("ij,ij->i", centers[:, :2], normals[side][:, :2])
    r = np.linalg.norm(centers[:, :2], axis=1)
    assert normals[side][:, 2] == pytest.approx(np.zeros(np.sum(side)), abs=1e-12)
    assert np.all(radial[r > 3 + 1e-6] > 0)
    assert np.all(radial[r < 3 + 1e-6] < 0)


def test_flat_array():
    gear = GearParameters(tooth_count=10, module=1)
    _, _, mesh = gear_mesh(gear)
    flat = mesh.as_flat_array()
    assert flat.shape == (mesh.n_triangles, 12)
    assert flat[:, :9] == pytest.approx(mesh.triangles.reshape(-1, 9))
    assert flat[:, 9:] == pytest.approx(mesh.normals)


def test_mesh_transform_and_merge():
    gear = GearParameters(tooth_count=16, module=1, bore_diameter=3)
    _, _, mesh = gear_mesh(gear)
    moved = mesh.rotated_z(0.3).translated(RIGHT * 20)
    assert moved.volume == pytest.approx(mesh.volume)
    assert moved.is_watertight()

    merged = merge_meshes(mesh, moved)
    assert merged.n_triangles == 2 * mesh.n_triangles
    assert merged.vertices.shape[0] == 2 * mesh.vertices.shape[0]
    assert merged.is_watertight()
    assert merged.volume == pytest.approx(2 * mesh.volume)


def test_weld_ring():
    points = np.array(
        [[1, 0], [1, 0], [0, 1], [-1, 0], [0, -1], [1, 0]], dtype=float
    )
    index, n_unique = weld_ring(points)
    assert n_unique == 4
    assert index.tolist() == [0, 0, 1, 2, 3, 0]


def test_watertight_detects_open_mesh():
    gear = GearParameters(tooth_count=10, module=1)
    _, _, mesh = gear_mesh(gear)
    open_mesh = TriangleMesh(mesh.vertices, mesh.faces[1:])
    assert not open_mesh.is_watertight()
    flipped = TriangleMesh(mesh.vertices, mesh.faces[:, ::-1])
    assert flipped.is_watertight()
    assert flipped.volume == pytest.approx(-mesh.volume)


def test_extrude_input_errors():
    square = np.array([[1, 1], [-1, 1], [-1, -1], [1, -1]], dtype=float)
    with pytest.raises(InvalidParameterError):
        extrude_boundary(square, None, 0)
    with pytest.raises(ValueError):
        extrude_boundary(square, square[:3] * 0.1, 1)
    with pytest.raises(ValueError):
        extrude_boundary(square[:2], None, 1)
    with pytest.raises(ValueError):
        extrude_boundary(np.zeros((4, 4)), None, 1)

    mesh = extrude_boundary(square, None, 2)
    assert mesh.n_triangles == 16
    assert mesh.volume == pytest.approx(8)


def test_spur_gear_mesh_placement():
    gear = SpurGear(number_of_teeth=14, module=1, bore_diameter=4, height=3)
    mesh_0 = gear.build_mesh()
    gear.center = UP * 10
    mesh_1 = gear.build_mesh()
    assert mesh_1.vertices == pytest.approx(mesh_0.vertices + UP * 10)
    assert mesh_1.volume == pytest.approx(mesh_0.volume)
    assert gear.build_mesh(height=6).volume == pytest.approx(2 * mesh_0.volume)
