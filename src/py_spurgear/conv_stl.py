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

import logging
import time
import numpy as np
from py_spurgear.conv_mesh import TriangleMesh

STL_HEADER_SIZE = 80
STL_RECORD_DTYPE = np.dtype(
    [
        ("normal", "<f4", (3,)),
        ("vertices", "<f4", (3, 3)),
        ("attr", "<u2"),
    ]
)


def _fmt(values):
    return " ".join(f"{v:.6e}" for v in values)


def mesh_to_ascii_stl(mesh: TriangleMesh, name: str = "gear") -> str:
    """
    Encode a mesh as ASCII STL text.

    Parameters
    ----------
    mesh : TriangleMesh
        The mesh to encode.
    name : str, optional
        Solid name written after the solid and endsolid keywords.

    Returns
    -------
    str
        One facet block per triangle: facet normal, outer loop, 3 vertices,
        endloop, endfacet.
    """
    start = time.time()
    lines = [f"solid {name}"]
    for tri, normal in zip(mesh.triangles, mesh.normals):
        lines.append(f"facet normal {_fmt(normal)}")
        lines.append("outer loop")
        for vertex in tri:
            lines.append(f"vertex {_fmt(vertex)}")
        lines.append("endloop")
        lines.append("endfacet")
    lines.append(f"endsolid {name}")
    logging.info(
        f"ASCII STL of {mesh.n_triangles} facets encoded in "
        f"{time.time()-start:.5f} seconds"
    )
    return "\n".join(lines) + "\n"


def mesh_to_binary_stl(mesh: TriangleMesh, header: str = "py_spurgear") -> bytes:
    """Encode a mesh as binary STL.

    Layout: 80 byte header, little-endian uint32 triangle count, then one 50 byte
    record per triangle (normal, 3 vertices as float32, uint16 attribute)."""
    header_bytes = header.encode("ascii", errors="replace")[:STL_HEADER_SIZE]
    header_bytes = header_bytes.ljust(STL_HEADER_SIZE, b"\0")
    records = np.zeros(mesh.n_triangles, dtype=STL_RECORD_DTYPE)
    records["normal"] = mesh.normals
    records["vertices"] = mesh.triangles
    count = np.array([mesh.n_triangles], dtype="<u4")
    return header_bytes + count.tobytes() + records.tobytes()


def read_binary_stl(data: bytes) -> np.ndarray:
    """Decode binary STL bytes into the structured record array."""
    if len(data) < STL_HEADER_SIZE + 4:
        raise ValueError(f"Binary STL needs at least 84 bytes, got {len(data)}")
    count = int(np.frombuffer(data, dtype="<u4", count=1, offset=STL_HEADER_SIZE)[0])
    expected = STL_HEADER_SIZE + 4 + count * STL_RECORD_DTYPE.itemsize
    if len(data) != expected:
        raise ValueError(
            f"Binary STL of {count} triangles should be {expected} bytes, "
            f"got {len(data)}"
        )
    return np.frombuffer(
        data, dtype=STL_RECORD_DTYPE, count=count, offset=STL_HEADER_SIZE + 4
    )


def write_stl(path, mesh: TriangleMesh, binary: bool = True, name: str = "gear"):
    """Write a mesh to an STL file, binary by default."""
    if binary:
        with open(path, "wb") as f:
            f.write(mesh_to_binary_stl(mesh, header=name))
    else:
        with open(path, "w") as f:
            f.write(mesh_to_ascii_stl(mesh, name=name))
    logging.info(f"STL written to {path}")
