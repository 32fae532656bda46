"""
G-code post processors for hobby and small-shop CNC controllers.

GRBL and LinuxCNC accept the plain output. Mach3 profiles used with this
tool expect every motion line to end with ``;``.
"""

from dataclasses import replace
from typing import Dict, List, Optional, Type, Union

from millpath.core.config import MachiningSettings, PostProcessorType

from .base import PostProcessorBase, PostProcessorConfig, format_feed, format_position


class GCodePostProcessor(PostProcessorBase):
    """Plain G-code writer (G21 / G90, G0 / G1 motion, M3 / M5 spindle)."""

    def __init__(self, config: Optional[PostProcessorConfig] = None):
        super().__init__(config or PostProcessorConfig(format_name="gcode"))

    def comment(self, text: str) -> str:
        return f"{self.config.comment_prefix}{text}"

    def header(self, settings: MachiningSettings) -> List[str]:
        return [
            "G21 ; Metric units",
            "G90 ; Absolute positioning",
            f"S{settings.spindle_speed} M3 ; Spindle start",
            f"G0 Z{format_position(settings.safe_height)} ; Safe height",
        ]

    def footer(self) -> List[str]:
        return [
            "M5 ; Spindle stop",
            "G0 X0 Y0 ; Return home",
            "M30 ; Program end",
        ]

    def rapid_move(
        self, x: Optional[float] = None, y: Optional[float] = None, z: Optional[float] = None
    ) -> str:
        words = ["G0"]
        for axis, value in (("X", x), ("Y", y), ("Z", z)):
            if value is not None:
                words.append(f"{axis}{format_position(value)}")
        return " ".join(words)

    def linear_move(self, x: float, y: float, feed: float) -> str:
        return f"G1 X{format_position(x)} Y{format_position(y)} F{format_feed(feed)}"

    def plunge(self, z: float, feed: float) -> str:
        return f"G1 Z{format_position(z)} F{format_feed(feed)}"


class GRBLPostProcessor(GCodePostProcessor):
    """GRBL controllers."""

    def __init__(self, config: Optional[PostProcessorConfig] = None):
        super().__init__(config or PostProcessorConfig(format_name="grbl", file_extension=".nc"))


class Mach3PostProcessor(GCodePostProcessor):
    """Mach3, motion lines terminated with ``;``."""

    def __init__(self, config: Optional[PostProcessorConfig] = None):
        if config is None:
            config = PostProcessorConfig(format_name="mach3", file_extension=".tap")
        super().__init__(replace(config, motion_suffix=";"))


class LinuxCNCPostProcessor(GCodePostProcessor):
    """LinuxCNC."""

    def __init__(self, config: Optional[PostProcessorConfig] = None):
        super().__init__(config or PostProcessorConfig(format_name="linuxcnc", file_extension=".ngc"))


POST_PROCESSOR_REGISTRY: Dict[PostProcessorType, Type[GCodePostProcessor]] = {
    PostProcessorType.GRBL: GRBLPostProcessor,
    PostProcessorType.MACH3: Mach3PostProcessor,
    PostProcessorType.LINUXCNC: LinuxCNCPostProcessor,
}


def get_post_processor(kind: Union[str, PostProcessorType]) -> GCodePostProcessor:
    """
    Create the writer for a controller type.

    Raises:
        ValueError: If the name is not registered
    """
    if not isinstance(kind, PostProcessorType):
        name = str(kind).strip().lower()
        try:
            kind = PostProcessorType(name)
        except ValueError:
            available = ", ".join(sorted(p.value for p in POST_PROCESSOR_REGISTRY))
            raise ValueError(
                f"Unknown post processor '{name}'. Available: {available}"
            ) from None
    return POST_PROCESSOR_REGISTRY[kind]()
