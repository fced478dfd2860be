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

from typing import List
import numpy as np
from py_spurgear.defs import *
from py_spurgear.core import *
from py_spurgear.gearmath import GearPair

SVG_NAMESPACE = "http://www.w3.org/2000/svg"


def format_number(value: float, precision: int = 4) -> str:
    """Fixed precision number with trailing zeros removed, -0 printed as 0."""
    value = round(float(value), precision) + 0.0
    return np.format_float_positional(value, precision=precision, trim="-")


def command_to_svg(command: PathCommand, precision: int = 4) -> str:
    x = format_number(command.point[0], precision)
    y = format_number(command.point[1], precision)
    if isinstance(command, MoveTo):
        return f"M {x} {y}"
    elif isinstance(command, LineTo):
        return f"L {x} {y}"
    elif isinstance(command, ArcTo):
        r = format_number(command.radius, precision)
        return f"A {r} {r} 0 {int(command.large_arc)} {int(command.sweep)} {x} {y}"
    elif isinstance(command, ClosePath):
        return "Z"
    else:
        raise TypeError(f"Unknown path command type: {type(command).__name__}")


def commands_to_svg_path(commands: List[PathCommand], precision: int = 4) -> str:
    return " ".join(command_to_svg(command, precision) for command in commands)


def boundary_to_svg_path(boundary: GearBoundary, precision: int = 4) -> str:
    """
    Encode a gear boundary as the d attribute of an SVG path element.

    The outer profile is followed by the bore circle as a second subpath. With the
    evenodd fill rule the bore is rendered as a hole.

    Parameters
    ----------
    boundary : GearBoundary
        Boundary to encode.
    precision : int, optional
        Number of decimals of the coordinates. Default is 4.

    Returns
    -------
    str
        Path data, e.g. "M 9.5 -0.9 L ... A 9.5 9.5 0 0 1 ... Z M 2.5 0 A ... Z".
    """
    path = commands_to_svg_path(boundary.outer_commands, precision)
    if boundary.has_bore:
        path += " " + commands_to_svg_path(boundary.bore_commands, precision)
    return path


def _svg_document(width: float, height: float, view_box: str, body: List[str]):
    w = format_number(width, 3)
    h = format_number(height, 3)
    lines = [
        f'<svg xmlns="{SVG_NAMESPACE}" viewBox="{view_box}" '
        f'width="{w}mm" height="{h}mm">',
        *body,
        "</svg>",
    ]
    return "\n".join(lines) + "\n"


def _path_element(d: str, transform: str, fill: str, stroke: str):
    return (
        f'  <path d="{d}" fill="{fill}" fill-rule="evenodd" stroke="{stroke}" '
        f'stroke-width="0.1" transform="{transform}"/>'
    )


def gear_to_svg_document(
    gear: GearParameters,
    boundary: GearBoundary = None,
    precision: int = 4,
    fill: str = "none",
    stroke: str = "black",
) -> str:
    """Standalone SVG file of one gear, dimensions in millimeters.

    The canvas is the outer diameter plus one module of margin on each side, the
    gear center is moved to the canvas center."""
    if boundary is None:
        boundary = generate_outer_boundary(gear)
    size = gear.outer_diameter + 2 * gear.module
    offset = format_number(size / 2, precision)
    view = format_number(size, precision)
    body = [
        f"  <!-- Module: {gear.module}, Teeth: {gear.tooth_count}, "
        f"Pressure Angle: {gear.pressure_angle} -->",
        _path_element(
            boundary_to_svg_path(boundary, precision),
            f"translate({offset}, {offset})",
            fill,
            stroke,
        ),
    ]
    return _svg_document(size, size, f"0 0 {view} {view}", body)


def pair_to_svg_document(
    pair: GearPair,
    angle_1: float = 0.0,
    precision: int = 4,
    fills=("none", "none"),
    stroke: str = "black",
) -> str:
    """
    Standalone SVG file of a meshing gear pair.

    Gear 1 sits at the origin rotated by angle_1 degrees, gear 2 on the X axis at
    the center distance, rotated to mesh with gear 1.

    Parameters
    ----------
    pair : GearPair
        The gears to draw.
    angle_1 : float, optional
        Rotation of gear 1 in degrees. Default is 0.
    precision : int, optional
        Number of decimals of the coordinates. Default is 4.
    fills : tuple of str, optional
        Fill colors of gear 1 and gear 2.
    stroke : str, optional
        Outline color.
    """
    g1, g2 = pair.gear_1, pair.gear_2
    transform_2 = pair.gear_2_transform(angle_1)
    margin = max(g1.module, g2.module)
    r1 = g1.outer_radius + margin
    r2 = g2.outer_radius + margin
    x_min = -r1
    x_max = pair.center_distance + r2
    y_max = max(r1, r2)
    width = x_max - x_min
    height = 2 * y_max

    view_box = " ".join(
        format_number(v, precision) for v in (x_min, -y_max, width, height)
    )
    cx = format_number(transform_2.center[0], precision)
    cy = format_number(transform_2.center[1], precision)
    body = [
        f"  <!-- Ratio: 1:{pair.ratio:.2f}, "
        f"Center Distance: {pair.center_distance:.2f}mm -->",
        _path_element(
            boundary_to_svg_path(generate_outer_boundary(g1), precision),
            f"rotate({format_number(angle_1, precision)})",
            fills[0],
            stroke,
        ),
        _path_element(
            boundary_to_svg_path(generate_outer_boundary(g2), precision),
            f"translate({cx}, {cy}) "
            f"rotate({format_number(transform_2.angle_degrees, precision)})",
            fills[1],
            stroke,
        ),
    ]
    return _svg_document(width, height, view_box, body)


def write_svg(path, svg_text: str):
    with open(path, "w") as f:
        f.write(svg_text)
