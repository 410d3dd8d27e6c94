"""
Editor session configuration.
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict

from PE_Libs.constants import (
    DEFAULT_FRAME_WINDOW,
    DEFAULT_JPEG_QUALITY,
    DEFAULT_LATENCY_WINDOW,
    DEFAULT_MAX_HISTORY,
    DEFAULT_OUTPUT_FORMAT,
)
from PE_Libs.ImageEditingLib.image_editing_ops import ExportConfig


@dataclass
class EditorConfig:
    """Configuration for an editing session.

    Attributes:
        max_history: Maximum number of undo steps kept (oldest dropped first)
        strict_dimensions: Raise on filter-base size mismatch instead of recapturing
        export_format: Default export format (PNG, JPEG, BMP, WEBP)
        export_quality: JPEG/WEBP quality 1-100
        latency_window: Samples in the rolling latency average
        frame_window: Frame timestamps kept for the FPS estimate
    """
    max_history: int = DEFAULT_MAX_HISTORY
    strict_dimensions: bool = False
    export_format: str = DEFAULT_OUTPUT_FORMAT
    export_quality: int = DEFAULT_JPEG_QUALITY
    latency_window: int = DEFAULT_LATENCY_WINDOW
    frame_window: int = DEFAULT_FRAME_WINDOW

    def __post_init__(self):
        if self.max_history < 1:
            raise ValueError(f"max_history must be >= 1, got {self.max_history}")
        if self.latency_window < 1 or self.frame_window < 2:
            raise ValueError(
                f"latency_window must be >= 1 and frame_window >= 2, "
                f"got {self.latency_window} and {self.frame_window}"
            )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EditorConfig":
        """Create from dictionary."""
        filtered = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**filtered)

    def export_config(self) -> ExportConfig:
        return ExportConfig(save_format=self.export_format, quality=self.export_quality)
