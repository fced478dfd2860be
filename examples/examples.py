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

from py_spurgear import *
import logging
import os
import tempfile

# These examples are meant to showcase the functionality of the library,
# and serve as manual testing templates for the developer.

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
)


def spur_gears():

    # create 2 spur gears
    gear1 = SpurGear(
        number_of_teeth=12,
        module=2,
        height=4,
        bore_diameter=5,
    )
    gear2 = SpurGear(
        number_of_teeth=23,
        module=2,
        height=4,
        bore_diameter=8,
    )

    # move and align gear 2 next to gear 1 in the Y direction
    gear2.mesh_to(gear1, target_dir=UP)

    # generate build123d Part objects, the bore is part of the profile
    gear_part_1 = gear1.build_part()
    gear_part_2 = gear2.build_part()
    return (gear_part_1, gear_part_2)


def gear_mesh_export():
    gear = SpurGear(number_of_teeth=18, module=1.5, bore_diameter=6, height=6)
    mesh = gear.build_mesh()
    logging.info(
        f"Mesh of {mesh.n_triangles} triangles, volume {mesh.volume:.2f} mm3, "
        f"watertight: {mesh.is_watertight()}"
    )

    # files go to a temporary directory so that running the example leaves no trace
    with tempfile.TemporaryDirectory() as folder:
        write_stl(os.path.join(folder, "gear.stl"), mesh, binary=True)
        write_stl(os.path.join(folder, "gear_ascii.stl"), mesh, binary=False)
        write_svg(os.path.join(folder, "gear.svg"), gear.to_svg())
    return mesh


def gear_pair_summary():
    # parameter snapshots, a change creates a new pair
    pair = GearPair(
        GearParameters(tooth_count=12, module=2, bore_diameter=5),
        GearParameters(tooth_count=24, module=2, bore_diameter=5),
    )
    print(pair.summary())

    pair = pair.with_gear_2(tooth_count=36)
    print(pair.summary())

    # ratio is locked, gear 2 follows gear 1 at 1:3
    pair = pair.with_gear_1(tooth_count=15)
    print(pair.summary())
    return pair


def gear_pair_animation_frames():
    pair = GearPair(GearParameters(tooth_count=15), GearParameters(tooth_count=40))
    rpm = 60
    frames = []
    # 25 frames per second, 1 second of motion
    for k in range(25):
        angle_1, angle_2 = pair.rotation_angles(time=k / 25, rpm=rpm)
        frames.append(pair_to_svg(pair, angle_1=angle_1))
    speed_2 = pair.output_velocity(rpm_to_degrees_per_second(rpm))
    logging.info(f"Gear 2 speed: {speed_2:.2f} deg/s")
    return frames


def gear_pair_stl():
    pair = GearPair(
        GearParameters(tooth_count=10, module=3, bore_diameter=6),
        GearParameters(tooth_count=20, module=3, bore_diameter=6),
    )
    data = pair_to_stl(pair, height=8)
    logging.info(f"Gear pair STL size: {len(data)} bytes")
    return data


if __name__ == "__main__":
    spur_gears()
    gear_mesh_export()
    gear_pair_summary()
    gear_pair_animation_frames()
    gear_pair_stl()
