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
from py_spurgear.defs import *
from scipy.spatial.transform import Rotation as scp_Rotation


def rotate_vector(v, angle):
    rot1 = scp_Rotation.from_euler("z", angles=angle)
    return rot1.apply(v)


def normalize_vector(v):
    return v / np.linalg.norm(v)


def angle_of_vector_in_xy(v):
    return np.arctan2(v[1], v[0])


def involute_angle(alpha):
    """
    The involute function inv(alpha) = tan(alpha) - alpha.
    alpha: pressure angle of an involute point, scalar or array, in radians.
    """
    return np.tan(alpha) - alpha


def calc_half_tooth_angle(num_teeth, pressure_angle, profile_shift=0.0):
    """
    Half of the angular tooth thickness measured at the base circle.
    The pitch circle half-thickness pi/(2z) is widened by profile shift and by
    the involute of the pressure angle.
    pressure_angle: in radians.
    """
    return (
        PI / (2 * num_teeth)
        + 2 * profile_shift * np.tan(pressure_angle) / num_teeth
        + involute_angle(pressure_angle)
    )


def involute_pressure_angle(r, base_radius):
    """
    Pressure angle of the involute at radius r, acos(base_radius / r).
    The ratio is clamped into [0, 1] so radii on or inside the base circle give 0.
    """
    return np.arccos(np.clip(base_radius / np.asarray(r, dtype=float), 0, 1))


def xyz_to_cylindrical(v, center=ORIGIN):
    """
    Convert to cylindrical coordinates. Cylindrical center can be set as kwarg. Zero angles are at the x axis.
    Returns:
    r: radius,
    phi: azimuth angle (rotation around z),
    z: height"""
    v = np.asarray(v)
    center = np.asarray(center)
    single_vector = v.ndim == 1
    if single_vector:
        v = v[np.newaxis, :]
    r = np.linalg.norm((v - center)[:, :2], axis=-1)
    phi = np.arctan2((v - center)[:, 1], (v - center)[:, 0])
    z = (v - center)[:, 2]
    result = np.stack([r, phi, z], axis=-1)
    return result[0] if single_vector else result


def cylindrical_to_xyz(c, center=ORIGIN):
    """
    Convert to cartesian coordinates. Cylindrical center can be set as kwarg. Zero angles are at the x axis.
    Input convention: c= [r, phi, z]
    Returns: x, y, z coordinates
    """
    c = np.asarray(c)
    center = np.asarray(center)
    single_vector = c.ndim == 1
    if single_vector:
        c = c[np.newaxis, :]
    r, phi, z = c[:, 0], c[:, 1], c[:, 2]
    x = r * np.cos(phi) + center[0]
    y = r * np.sin(phi) + center[1]
    z = z + center[2]
    result = np.stack([x, y, z], axis=-1)
    return result[0] if single_vector else result


def polar_to_xyz(r, phi):
    """Planar points from radius and angle arrays, z is 0."""
    r, phi = np.broadcast_arrays(np.asarray(r, dtype=float), np.asarray(phi))
    return cylindrical_to_xyz(np.stack([r, phi, np.zeros_like(r)], axis=-1))


def arc_points(radius, angle_start, angle_end, n_div, center=ORIGIN):
    """
    Points of an arc in the XY plane, including both endpoints.
    n_div: number of segments, n_div+1 points are returned.
    """
    phi = np.linspace(angle_start, angle_end, n_div + 1)
    return polar_to_xyz(np.full_like(phi, radius), phi) + center


def to_xyz_array(points):
    """Accept (n,2) or (n,3) point arrays, return float (n,3) with z=0 where missing."""
    points = np.asarray(points, dtype=float)
    if points.ndim != 2 or points.shape[1] not in (2, 3):
        raise ValueError(
            f"Expected an array of 2D or 3D points, got shape {points.shape}"
        )
    if points.shape[1] == 2:
        points = np.concatenate([points, np.zeros((points.shape[0], 1))], axis=1)
    return points


def polygon_signed_area(points):
    """Shoelace area of a closed XY polygon, positive for CCW winding."""
    x = points[:, 0]
    y = points[:, 1]
    return 0.5 * np.sum(x * np.roll(y, -1) - np.roll(x, -1) * y)
