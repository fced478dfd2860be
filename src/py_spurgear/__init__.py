from importlib.metadata import version, PackageNotFoundError
from py_spurgear.defs import *
from py_spurgear.function_generators import *
from py_spurgear.base_classes import *
from py_spurgear.gearteeth import *
from py_spurgear.core import *
from py_spurgear.gearmath import *
from py_spurgear.conv_mesh import *
from py_spurgear.conv_stl import *
from py_spurgear.conv_svg import *
from py_spurgear.conv_build123d import *
from py_spurgear.wrapper import *


try:
    __version__ = version("py_spurgear")
except PackageNotFoundError:
    __version__ = "unknown version"
