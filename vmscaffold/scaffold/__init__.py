"""Vagrant project scaffolding system.

Generates the project tree, per-machine Vagrant definitions and host scripts.
"""

from .core import COMMON_MACHINE, ScaffoldManager
from .host_scripts import HostScriptGenerator
from .templates import TemplateEngine

__all__ = [
    "COMMON_MACHINE",
    "ScaffoldManager",
    "TemplateEngine",
    "HostScriptGenerator",
]
