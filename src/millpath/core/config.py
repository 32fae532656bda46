"""
Machining settings for millpath.

Settings are an immutable pydantic model populated once by the caller.
Range checks live in :func:`validate_settings`, a pure function that returns
a result object instead of raising, so callers decide how to report failures.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from millpath.core.exceptions import ConfigurationError

# Stepover is a fraction of the tool diameter; both bounds are inclusive.
STEP_OVER_MIN = 0.1
STEP_OVER_MAX = 0.9

FLOAT_FIELDS = (
    "tool_diameter",
    "step_over",
    "step_down",
    "safe_height",
    "feed_rate",
    "plunge_rate",
)


class Strategy(Enum):
    """Layer toolpath strategies."""

    PARALLEL = "parallel"  # Contour-following per layer
    SPIRAL = "spiral"  # Archimedean spiral infill
    CONTOUR = "contour"  # Not implemented, emits no layers


class PostProcessorType(Enum):
    """Controller-specific line formatting profiles."""

    GRBL = "grbl"
    MACH3 = "mach3"
    LINUXCNC = "linuxcnc"


class MachiningSettings(BaseModel):
    """
    Settings for one toolpath generation request.

    Attributes:
        tool_diameter: Cutter diameter (mm)
        step_over: Lateral overlap between adjacent passes (fraction)
        step_down: Layer height (mm)
        spindle_speed: Spindle RPM
        safe_height: Retract height for non-cutting moves (mm)
        strategy: Layer strategy
        post_processor: Output line formatting profile
        tool_compensation: Offset stitched paths by the tool radius
        feed_rate: Cutting feed (mm/min)
        plunge_rate: Plunge feed (mm/min)
    """

    model_config = ConfigDict(frozen=True)

    tool_diameter: float = 1.0
    step_over: float = 0.5
    step_down: float = 0.2
    spindle_speed: int = 10000
    safe_height: float = 5.0
    strategy: Strategy = Strategy.PARALLEL
    post_processor: PostProcessorType = PostProcessorType.GRBL
    tool_compensation: bool = False
    feed_rate: float = 1000.0
    plunge_rate: float = 300.0

    @field_validator("strategy", "post_processor", mode="before")
    @classmethod
    def _lowercase_enum_names(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @property
    def tool_radius(self) -> float:
        return self.tool_diameter / 2.0


@dataclass(frozen=True)
class SettingsValidation:
    """Outcome of :func:`validate_settings`."""

    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def __bool__(self) -> bool:
        return self.ok


def validate_settings(settings: MachiningSettings) -> SettingsValidation:
    """
    Check numeric ranges of machining settings.

    NaN and infinite values are always rejected.

    Args:
        settings: Settings to check

    Returns:
        SettingsValidation listing every violated rule (empty when valid)
    """
    errors = [
        f"{name} must be a finite number"
        for name in FLOAT_FIELDS
        if not math.isfinite(getattr(settings, name))
    ]
    if settings.tool_diameter <= 0:
        errors.append("Tool diameter must be positive")
    if not STEP_OVER_MIN <= settings.step_over <= STEP_OVER_MAX:
        errors.append(
            f"Stepover should be between {STEP_OVER_MIN} and {STEP_OVER_MAX}"
        )
    if settings.step_down <= 0:
        errors.append("Step down must be positive")
    if settings.feed_rate <= 0:
        errors.append("Feed rate must be positive")
    if settings.plunge_rate <= 0:
        errors.append("Plunge rate must be positive")
    if settings.spindle_speed < 0:
        errors.append("Spindle speed must not be negative")
    return SettingsValidation(errors=errors)


def settings_from_dict(data: dict[str, Any]) -> MachiningSettings:
    """
    Build settings from a plain mapping, ignoring unknown keys.

    Raises:
        ConfigurationError: If a value has the wrong type or enum name
    """
    valid_fields = set(MachiningSettings.model_fields)
    try:
        return MachiningSettings(
            **{k: v for k, v in data.items() if k in valid_fields}
        )
    except ValidationError as e:
        raise ConfigurationError(
            "Invalid machining settings",
            details={"error": str(e)},
        )


def load_settings(path: str | Path) -> MachiningSettings:
    """
    Load settings from a YAML file.

    The file holds a ``machining:`` mapping; a bare top-level mapping is
    accepted too.

    Args:
        path: YAML file path

    Returns:
        MachiningSettings instance

    Raises:
        ConfigurationError: If the file is missing or malformed
    """
    config_file = Path(path)
    if not config_file.exists():
        raise ConfigurationError(f"Settings file not found: {config_file}")

    try:
        with open(config_file) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Failed to load settings: {config_file}",
            details={"error": str(e)},
        )

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Settings file must hold a mapping: {config_file}")
    if "machining" in data:
        data = data["machining"] or {}

    return settings_from_dict(data)
