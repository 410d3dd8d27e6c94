"""
Undoable edit parameters.

EditState is an immutable value: every change produces a new instance via
``with_changes``. Field validation lives here so the history stack only
ever holds well-formed states.

Classes:
    EditState: brightness, contrast, saturation, blur, rotation, filter,
               crop ratio and pending crop area

Functions:
    parse_crop_ratio: Convert "W:H" into a width/height aspect (None for free)
    describe_change: Human-readable label for a history transition
"""

from dataclasses import dataclass, fields, replace
from typing import Any, Dict, List, Optional

from PE_Libs.constants import (
    BLUR_RANGE,
    BRIGHTNESS_RANGE,
    CONTRAST_RANGE,
    CROP_RATIO_FREE,
    DEFAULT_BLUR,
    DEFAULT_BRIGHTNESS,
    DEFAULT_CONTRAST,
    DEFAULT_CROP_RATIO,
    DEFAULT_FILTER,
    DEFAULT_ROTATION,
    DEFAULT_SATURATION,
    SATURATION_RANGE,
)
from PE_Libs.ImageEditingLib.image_models import Rect
from PE_Libs.ImageEditingLib.preset_filter import normalize_filter_name
from PE_Libs.ImageEditingLib.rotation import normalize_rotation

_INT_RANGES = {
    "brightness": BRIGHTNESS_RANGE,
    "contrast": CONTRAST_RANGE,
    "saturation": SATURATION_RANGE,
    "blur": BLUR_RANGE,
}

_FIELD_LABELS = {
    "brightness": "Brightness",
    "contrast": "Contrast",
    "saturation": "Saturation",
    "blur": "Blur",
    "rotation": "Rotation",
    "filter": "Filter",
    "crop_ratio": "Crop ratio",
    "crop_area": "Crop area",
}


def parse_crop_ratio(ratio: str) -> Optional[float]:
    """
    Parse a crop ratio.

    Args:
        ratio: "free" or "W:H" with positive numbers (e.g. "16:9")

    Returns:
        Width / height aspect, or None for a free ratio

    Raises:
        ValueError: If the ratio is malformed
    """
    text = str(ratio).strip().lower()
    if text == CROP_RATIO_FREE:
        return None

    parts = text.split(":")
    if len(parts) != 2:
        raise ValueError(f"crop ratio must be 'free' or 'W:H', got {ratio!r}")
    try:
        width, height = float(parts[0]), float(parts[1])
    except ValueError:
        raise ValueError(f"crop ratio must be 'free' or 'W:H', got {ratio!r}") from None
    if width <= 0 or height <= 0:
        raise ValueError(f"crop ratio sides must be positive, got {ratio!r}")
    return width / height


def _validate_field(name: str, value: Any) -> Any:
    if name in _INT_RANGES:
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"{name} must be an int, got {type(value).__name__}")
        low, high = _INT_RANGES[name]
        if not (low <= value <= high):
            raise ValueError(f"{name} must be {low}..{high}, got {value}")
        return value

    if name == "rotation":
        return normalize_rotation(value)

    if name == "filter":
        return normalize_filter_name(value)

    if name == "crop_ratio":
        parse_crop_ratio(value)
        return str(value).strip().lower()

    if name == "crop_area":
        if value is not None and not isinstance(value, Rect):
            raise TypeError(f"crop_area must be a Rect or None, got {type(value).__name__}")
        return value

    raise ValueError(f"Unknown edit field: {name}")


@dataclass(frozen=True)
class EditState:
    """Snapshot of every undoable adjustment.

    Attributes:
        brightness: Additive offset (-100..100)
        contrast: Contrast amount (-100..100)
        saturation: Percentage (0..200), 100 is identity
        blur: Blur amount (0..100)
        rotation: Clockwise degrees (0, 90, 180, 270)
        filter: Preset filter name
        crop_ratio: "free" or "W:H"
        crop_area: Pending crop rectangle in rendered-frame space
    """
    brightness: int = DEFAULT_BRIGHTNESS
    contrast: int = DEFAULT_CONTRAST
    saturation: int = DEFAULT_SATURATION
    blur: int = DEFAULT_BLUR
    rotation: int = DEFAULT_ROTATION
    filter: str = DEFAULT_FILTER
    crop_ratio: str = DEFAULT_CROP_RATIO
    crop_area: Optional[Rect] = None

    def __post_init__(self):
        for item in fields(self):
            value = _validate_field(item.name, getattr(self, item.name))
            object.__setattr__(self, item.name, value)

    @classmethod
    def field_names(cls) -> List[str]:
        return [item.name for item in fields(cls)]

    def with_changes(self, **changes: Any) -> "EditState":
        """Copy with some fields replaced (validated)."""
        unknown = set(changes) - set(self.field_names())
        if unknown:
            raise ValueError(f"Unknown edit field: {', '.join(sorted(unknown))}")
        return replace(self, **changes)

    def is_default(self) -> bool:
        return self == EditState()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        data = {item.name: getattr(self, item.name) for item in fields(self)}
        data["crop_area"] = self.crop_area.to_dict() if self.crop_area else None
        return data


def _format_value(name: str, value: Any) -> str:
    if name == "rotation":
        return f"{value}°"
    if name == "saturation":
        return f"{value}%"
    if name == "crop_area":
        if value is None:
            return "none"
        x, y, width, height = value.snapped()
        return f"{width}x{height} at ({x}, {y})"
    return str(value)


def describe_change(before: EditState, after: EditState) -> str:
    """
    Label a transition between two states for a history panel.

    Example:
        >>> describe_change(EditState(), EditState(brightness=50))
        'Brightness 0 → 50'
    """
    changes = []
    for name in EditState.field_names():
        old, new = getattr(before, name), getattr(after, name)
        if old == new:
            continue
        label = _FIELD_LABELS[name]
        changes.append(f"{label} {_format_value(name, old)} → {_format_value(name, new)}")

    if not changes:
        return "No change"
    return ", ".join(changes)
