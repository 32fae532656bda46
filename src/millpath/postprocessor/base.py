"""
PostProcessorBase: abstract base class for G-code writers.

A program is made of three parts:

- header: units, positioning mode, spindle start, retract to safe height
- one block per non-empty layer: retract, rapid to the first point, plunge,
  cut through every point, retract
- footer: spindle stop, return home, program end

Subclasses decide how motion commands are spelled and how each motion line
is finished for a particular controller (:meth:`format_command`). Header,
footer and comment lines are never passed through :meth:`format_command`.

Positions are written with two decimals.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, asdict
from typing import Any, Dict, Iterable, List, Optional, Sequence

import numpy as np

from millpath.core.config import MachiningSettings
from millpath.slicing.toolpath import ToolpathLayer


def format_position(value: float) -> str:
    """Two-decimal coordinate, never written as ``-0.00``."""
    text = f"{value:.2f}"
    if text == "-0.00":
        return "0.00"
    return text


def format_feed(value: float) -> str:
    """Feed rate without trailing zeros (``300``, ``250.5``)."""
    return f"{value:.4f}".rstrip("0").rstrip(".")


@dataclass
class PostProcessorConfig:
    """Configuration for a post processor instance."""
    format_name: str = "grbl"
    file_extension: str = ".nc"
    line_ending: str = "\n"              # '\n' or '\r\n'
    comment_prefix: str = "; "
    motion_suffix: str = ""              # appended to every motion line

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'PostProcessorConfig':
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        return cls(**{k: v for k, v in d.items() if k in valid_fields})


class PostProcessorBase(ABC):
    """
    Abstract base class for post processors.

    Subclasses implement format-specific methods:
    - header() / footer()
    - linear_move() / rapid_move() / plunge()
    - comment()

    Writers hold no state between calls; the same instance may build any
    number of programs.
    """

    def __init__(self, config: Optional[PostProcessorConfig] = None):
        self.config = config or PostProcessorConfig()

    @property
    def format_name(self) -> str:
        return self.config.format_name

    @property
    def file_extension(self) -> str:
        return self.config.file_extension

    # ── Abstract methods (must be implemented by subclasses) ───────────

    @abstractmethod
    def header(self, settings: MachiningSettings) -> List[str]:
        """Generate program header lines."""
        ...

    @abstractmethod
    def footer(self) -> List[str]:
        """Generate program footer lines."""
        ...

    @abstractmethod
    def rapid_move(
        self, x: Optional[float] = None, y: Optional[float] = None, z: Optional[float] = None
    ) -> str:
        """Rapid (non-cutting) move to the given axes."""
        ...

    @abstractmethod
    def linear_move(self, x: float, y: float, feed: float) -> str:
        """Horizontal cutting move at the given feed."""
        ...

    @abstractmethod
    def plunge(self, z: float, feed: float) -> str:
        """Vertical cutting move to ``z`` at the given feed."""
        ...

    @abstractmethod
    def comment(self, text: str) -> str:
        """Format a comment line."""
        ...

    # ── Optional overrides ────────────────────────────────────────────

    def format_command(self, command: str) -> str:
        """Finish one motion line for the target controller."""
        return f"{command}{self.config.motion_suffix}"

    # ── Layer emission ────────────────────────────────────────────────

    def layer_block(
        self,
        points: Sequence[np.ndarray],
        depth: float,
        settings: MachiningSettings,
    ) -> List[str]:
        """
        Motion lines cutting through ``points`` at ``depth``.

        Args:
            points: Ordered path points; only X and Y are written
            depth: Cut depth, the tool plunges to ``Z = -depth``
            settings: Supplies safe height and feed rates

        Returns:
            Formatted lines, empty when there are no points
        """
        if len(points) == 0:
            return []

        first = points[0]
        commands = [
            self.rapid_move(z=settings.safe_height),
            self.rapid_move(x=first[0], y=first[1]),
            self.plunge(-depth, settings.plunge_rate),
        ]
        commands.extend(
            self.linear_move(p[0], p[1], settings.feed_rate) for p in points
        )
        commands.append(self.rapid_move(z=settings.safe_height))
        return [self.format_command(c) for c in commands]

    def layer_lines(self, layer: ToolpathLayer, settings: MachiningSettings) -> List[str]:
        """Comment line followed by the layer block."""
        return [self.comment(layer.comment)] + self.layer_block(
            layer.points, layer.depth, settings
        )

    # ── Main generation pipeline ──────────────────────────────────────

    def build_program(
        self, settings: MachiningSettings, layers: Iterable[ToolpathLayer]
    ) -> str:
        """
        Assemble header, layer blocks and footer into the complete program.

        Parameters:
            settings: Machining settings
            layers: Computed layers in emission order; consumed lazily, so
                a generator may stop the build by raising

        Returns:
            Complete program as a string, one command per line.
        """
        lines = list(self.header(settings))
        for layer in layers:
            lines.extend(self.layer_lines(layer, settings))
        lines.extend(self.footer())
        return self.join(lines)

    def join(self, lines: Iterable[str]) -> str:
        """Join lines with the configured line ending, terminating the last."""
        ending = self.config.line_ending
        return "".join(f"{line}{ending}" for line in lines)
