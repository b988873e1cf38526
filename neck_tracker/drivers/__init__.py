"""Joint drivers consuming pose angles."""

from .bone_driver import BoneRotationDriver
from .json_driver import JsonExportDriver

__all__ = [
    "BoneRotationDriver",
    "JsonExportDriver",
]
