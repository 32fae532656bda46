"""
Core module - Settings, mesh model, exceptions and logging.
"""

from millpath.core.config import (
    MachiningSettings,
    PostProcessorType,
    SettingsValidation,
    Strategy,
    load_settings,
    validate_settings,
)
from millpath.core.exceptions import (
    MillpathError,
    ConfigurationError,
    InvalidSettingsError,
    GeometryError,
    GenerationCancelled,
)
from millpath.core.mesh import Mesh, to_machining_coordinates, to_source_coordinates

__all__ = [
    # Config
    "MachiningSettings",
    "PostProcessorType",
    "SettingsValidation",
    "Strategy",
    "load_settings",
    "validate_settings",
    # Exceptions
    "MillpathError",
    "ConfigurationError",
    "InvalidSettingsError",
    "GeometryError",
    "GenerationCancelled",
    # Mesh
    "Mesh",
    "to_machining_coordinates",
    "to_source_coordinates",
]
