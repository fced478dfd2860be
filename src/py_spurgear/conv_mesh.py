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
import time
from collections import Counter
from typing import Optional
import numpy as np
from scipy.spatial.transform import Rotation as scp_Rotation
from py_spurgear.defs import *
from py_spurgear.function_generators import to_xyz_array
from py_spurgear.base_classes import InvalidParameterError


@dataclasses.dataclass(frozen=True, eq=False)
class TriangleMesh:
    """Indexed triangle mesh.

    Attributes
    ----------
    vertices : np.ndarray
        Vertex positions, shape (n, 3).
    faces : np.ndarray
        Vertex indices of triangles, shape (m, 3). Counter-clockwise when viewed
        from outside the solid.
    """

    vertices: np.ndarray
    faces: np.ndarray

    @property
    def n_triangles(self):
        return self.faces.shape[0]

    @property
    def triangles(self) -> np.ndarray:
        """Corner positions of each triangle, shape (m, 3, 3)."""
        return self.vertices[self.faces]

    @property
    def normals(self) -> np.ndarray:
        """Unit normals from the edge cross product, zero for degenerate
        triangles."""
        tri = self.triangles
        cross = np.cross(tri[:, 1] - tri[:, 0], tri[:, 2] - tri[:, 0])
        norm = np.linalg.norm(cross, axis=1)
        out = np.zeros_like(cross)
        nonzero = norm > 0
        out[nonzero] = cross[nonzero] / norm[nonzero, np.newaxis]
        return out

    @property
    def volume(self):
        """Signed volume enclosed by the mesh (divergence theorem)."""
        tri = self.triangles
        return np.einsum("ij,ij->", tri[:, 0], np.cross(tri[:, 1], tri[:, 2])) / 6

    def as_flat_array(self) -> np.ndarray:
        """Triangles as rows of 9 corner coordinates followed by the 3 normal
        components, shape (m, 12)."""
        return np.concatenate([self.triangles.reshape(-1, 9), self.normals], axis=1)

    def translated(self, offset: np.ndarray) -> "TriangleMesh":
        return TriangleMesh(self.vertices + offset, self.faces)

    def rotated_z(self, angle: float) -> "TriangleMesh":
        """Rotated copy around the Z axis, angle in radians."""
        rot = scp_Rotation.from_euler("z", angle)
        return TriangleMesh(rot.apply(self.vertices), self.faces)

    def edge_use_counts(self) -> Counter:
        """Number of uses of each directed edge (start index, end index)."""
        edges = np.concatenate(
            [self.faces[:, [0, 1]], self.faces[:, [1, 2]], self.faces[:, [2, 0]]]
        )
        return Counter(map(tuple, edges.tolist()))

    def is_watertight(self) -> bool:
        """Every edge is shared by exactly two triangles with opposite direction."""
        counts = self.edge_use_counts()
        return all(
            count == 1 and counts.get((b, a), 0) == 1 for (a, b), count in counts.items()
        )


def merge_meshes(*meshes: TriangleMesh) -> TriangleMesh:
    """Combine meshes into one, vertex indices are offset accordingly."""
    vertices = []
    faces = []
    offset = 0
    for mesh in meshes:
        vertices.append(mesh.vertices)
        faces.append(mesh.faces + offset)
        offset += mesh.vertices.shape[0]
    return TriangleMesh(np.concatenate(vertices), np.concatenate(faces))


def weld_ring(points: np.ndarray, tol: float = POINT_TOLERANCE):
    """Index map of a closed point ring where consecutive coincident points share
    one index. Returns (index array, number of unique points)."""
    n = points.shape[0]
    index = np.zeros(n, dtype=int)
    for i in range(1, n):
        if np.linalg.norm(points[i] - points[i - 1]) < tol:
            index[i] = index[i - 1]
        else:
            index[i] = index[i - 1] + 1
    n_unique = index[-1] + 1
    if n > 1 and n_unique > 1 and np.linalg.norm(points[-1] - points[0]) < tol:
        index[index == index[-1]] = 0
        n_unique -= 1
    return index, n_unique


def _quad(a, b, c, d):
    """Two triangles of the quad a-b-c-d, split along the a-c diagonal."""
    return [(a, b, c), (a, c, d)]


def extrude_boundary(
    outer_points: np.ndarray,
    bore_points: Optional[np.ndarray],
    thickness: float,
) -> TriangleMesh:
    """Extrude a gear ring into a closed triangle mesh.

    The solid spans z=0 to z=thickness. For each neighbouring index pair
    (i, i+1) a top face quad, a bottom face quad, an outer wall quad and a bore
    wall quad are created, each split into 2 triangles.

    Parameters
    ----------
    outer_points : np.ndarray
        Counter-clockwise outer polyline, shape (N, 2) or (N, 3).
    bore_points : np.ndarray or None
        Bore points index-paired with outer_points by polar angle, same shape.
        None, or all points at the origin, means no bore: top and bottom faces are
        then fanned from the center and there is no bore wall.
    thickness : float
        Extrusion height, must be positive.

    Returns
    -------
    TriangleMesh
        Watertight mesh with outward facing triangles.

    Notes
    -----
    Consecutive bore points at the same angle (radial flank segments project onto
    one bore point) are merged into a single vertex, triangles with a repeated
    vertex are left out. The top and bottom faces keep a zero-area sliver along
    such radial segments, it closes the surface without a T-junction.
    """
    if not thickness > 0:
        raise InvalidParameterError(f"Thickness must be positive, got {thickness}")
    outer = to_xyz_array(outer_points)[:, :2]
    n = outer.shape[0]
    if n < 3:
        raise ValueError(f"At least 3 boundary points are needed, got {n}")

    if bore_points is None:
        bore = np.zeros((n, 2))
    else:
        bore = to_xyz_array(bore_points)[:, :2]
        if bore.shape[0] != n:
            raise ValueError(
                f"Bore points must be index-paired with the outer points, "
                f"got {bore.shape[0]} and {n}"
            )
    has_bore = bool(np.max(np.linalg.norm(bore, axis=1)) > POINT_TOLERANCE)

    start = time.time()
    z_bot = np.zeros((n, 1))
    z_top = np.full((n, 1), float(thickness))
    # vertex layout: outer bottom, outer top, then bore (or center) vertices
    vertices = [np.hstack([outer, z_bot]), np.hstack([outer, z_top])]
    ob = np.arange(n)
    ot = ob + n

    faces = []
    if has_bore:
        bore_index, n_bore = weld_ring(bore)
        bore_unique = np.zeros((n_bore, 2))
        bore_unique[bore_index] = bore
        vertices.append(np.hstack([bore_unique, np.zeros((n_bore, 1))]))
        vertices.append(
            np.hstack([bore_unique, np.full((n_bore, 1), float(thickness))])
        )
        bb = 2 * n + bore_index
        bt = 2 * n + n_bore + bore_index
        for i in range(n):
            j = (i + 1) % n
            faces += _quad(ot[i], ot[j], bt[j], bt[i])
            faces += _quad(ob[i], bb[i], bb[j], ob[j])
            faces += _quad(ob[i], ob[j], ot[j], ot[i])
            faces += _quad(bb[i], bt[i], bt[j], bb[j])
    else:
        c_bot = 2 * n
        c_top = 2 * n + 1
        vertices.append(np.array([[0.0, 0.0, 0.0], [0.0, 0.0, float(thickness)]]))
        for i in range(n):
            j = (i + 1) % n
            faces.append((ot[i], ot[j], c_top))
            faces.append((ob[i], c_bot, ob[j]))
            faces += _quad(ob[i], ob[j], ot[j], ot[i])

    faces = np.array(faces, dtype=int).reshape(-1, 3)
    # triangles with a repeated corner have no area
    keep = (
        (faces[:, 0] != faces[:, 1])
        & (faces[:, 1] != faces[:, 2])
        & (faces[:, 2] != faces[:, 0])
    )
    mesh = TriangleMesh(np.concatenate(vertices, axis=0), faces[keep])
    logging.info(
        f"Mesh of {mesh.n_triangles} triangles generated in "
        f"{time.time()-start:.5f} seconds"
    )
    return mesh
