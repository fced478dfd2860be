"""
Copyright 2024 Gergely Bencsik
Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at
http://www.apache.org/licenses/LICENSE-2.0
Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.

"""

from py_spurgear.core import *
from py_spurgear.function_generators import *
from py_spurgear.base_classes import *
from py_spurgear.gearmath import GearPair
import build123d as bd
import numpy as np
import time
import logging
import warnings


def nppoint2Vector(p: np.ndarray):
    if p.size == 3:
        return bd.Vector((p[0], p[1], p[2]))
    else:
        return [bd.Vector((p[k, 0], p[k, 1], p[k, 2])) for k in range(p.shape[0])]


def np2v(p: np.ndarray):
    # shorthand for npppoint2Vector
    return nppoint2Vector(p)


def arc_midpoint(arc: ArcTo) -> np.ndarray:
    phi = arc.start_angle + arc.angle / 2
    return arc.center + polar_to_xyz(arc.radius, phi)


def commands_to_edges(commands: List[PathCommand]) -> List[bd.Edge]:
    """Converts path commands into build123d Edges.

    Lines shorter than POINT_TOLERANCE are skipped, ClosePath adds a closing line
    only if the path did not return to its start point already."""
    edges = []
    start_point = None
    prev_point = None
    for command in commands:
        point = command.point
        if isinstance(command, MoveTo):
            start_point = point
        elif isinstance(command, ArcTo):
            edges.append(
                bd.Edge.make_three_point_arc(
                    np2v(prev_point), np2v(arc_midpoint(command)), np2v(point)
                )
            )
        elif isinstance(command, (LineTo, ClosePath)):
            if isinstance(command, ClosePath):
                point = start_point
            if np.linalg.norm(point - prev_point) > POINT_TOLERANCE:
                edges.append(bd.Edge.make_line(np2v(prev_point), np2v(point)))
        prev_point = point
    return edges


def boundary_to_wire(boundary: GearBoundary) -> bd.Wire:
    """Outer profile of the gear as a closed build123d Wire."""
    return bd.Wire(commands_to_edges(boundary.outer_commands))


def bore_to_wire(boundary: GearBoundary) -> bd.Wire:
    return bd.Wire(commands_to_edges(boundary.bore_commands))


def boundary_to_face(boundary: GearBoundary) -> bd.Face:
    """Planar Face of the gear on the XY plane, the bore is an inner wire."""
    start = time.time()
    outer_wire = boundary_to_wire(boundary)
    if boundary.has_bore:
        face = bd.Face(outer_wire, inner_wires=[bore_to_wire(boundary)])
    else:
        face = bd.Face(outer_wire)
    logging.log(
        logging.INFO, f"Gear face build time: {time.time()-start:.5f} seconds"
    )
    return face


def fix_attempt(shape):
    if not shape.is_valid:
        warnings.warn("Invalid solid found", RuntimeWarning, stacklevel=2)
        shape = shape.fix()
    return shape


def transform2Location(transform: GearTransformData) -> bd.Location:
    return bd.Location(tuple(transform.center), (0, 0, transform.angle_degrees))


def extrude_to_part(
    boundary: GearBoundary,
    thickness: float,
    transform: GearTransformData = None,
) -> bd.Part:
    """
    Extrude the gear boundary into a build123d Part.

    Parameters
    ----------
    boundary : GearBoundary
        Closed gear boundary.
    thickness : float
        Extrusion height along +Z, must be positive.
    transform : GearTransformData, optional
        Placement applied to the finished part. Default is no placement.

    Returns
    -------
    bd.Part
    """
    if not thickness > 0:
        raise InvalidParameterError(f"Thickness must be positive, got {thickness}")
    face = boundary_to_face(boundary)
    start = time.time()
    part = bd.extrude(face, amount=thickness)
    part = fix_attempt(part)
    logging.log(
        logging.INFO, f"Gear extrusion time: {time.time()-start:.5f} seconds"
    )
    if transform is not None:
        part = transform2Location(transform) * part
    return part


def pair_to_parts(pair: GearPair, thickness: float, angle_1: float = 0.0):
    """Parts of both gears of a pair in meshing position, gear 2 on the X axis."""
    part_1 = extrude_to_part(
        generate_outer_boundary(pair.gear_1),
        thickness,
        GearTransform(angle=angle_1 * DEG2RAD),
    )
    part_2 = extrude_to_part(
        generate_outer_boundary(pair.gear_2),
        thickness,
        pair.gear_2_transform(angle_1),
    )
    return part_1, part_2
