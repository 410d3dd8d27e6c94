"""
Pipeline Stage Registry.

This module provides a centralized registry of render stages. Each stage is
a pure function ``(buffer, state) -> buffer`` with an explicit position in
the render order and a predicate telling when its parameters are a no-op.
Stages registered with ``uses_reference_size`` also receive the frame size
the caller expects, as a third argument.

Classes:
    PipelineStageRegistry: Registry for render stages

Functions:
    get_default_registry: Get the global default registry (singleton)
    register_default_stages: Register the four built-in stages
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from PE_Libs.HistoryLib.edit_state import EditState
from PE_Libs.ImageEditingLib.blur_filter import apply_blur
from PE_Libs.ImageEditingLib.color_adjustment import apply_color_adjustment
from PE_Libs.ImageEditingLib.image_models import PixelBuffer
from PE_Libs.ImageEditingLib.preset_filter import apply_preset_filter
from PE_Libs.ImageEditingLib.rotation import apply_rotation

logger = logging.getLogger(__name__)

# Type aliases for stage functions
StageFunction = Callable[[PixelBuffer, EditState], PixelBuffer]
IdentityPredicate = Callable[[EditState], bool]

STAGE_ROTATION = "Rotation"
STAGE_COLOR = "Color Adjustment"
STAGE_PRESET = "Preset Filter"
STAGE_BLUR = "Blur"


class PipelineStageRegistry:
    """
    Registry for render stages.

    Example:
        >>> registry = PipelineStageRegistry()
        >>> registry.register("Invert", invert_stage, order=50)
        >>> registry.list_stages()
        ['Invert']
    """

    def __init__(self):
        """Initialize an empty registry."""
        self._stages: Dict[str, StageFunction] = {}
        self._stage_metadata: Dict[str, Dict[str, Any]] = {}

    def register(
        self,
        name: str,
        stage: StageFunction,
        order: int,
        is_identity: Optional[IdentityPredicate] = None,
        description: str = "",
        uses_reference_size: bool = False,
    ) -> None:
        """
        Register a render stage.

        Args:
            name: Unique stage name (e.g., "Blur")
            stage: Callable accepting (buffer, state) and returning a buffer
            order: Position in the render order (lower runs first)
            is_identity: Returns True when the stage would not change the buffer
            description: Human-readable description of the stage
            uses_reference_size: Pass the expected frame size to the stage

        Raises:
            ValueError: If name is empty or stage is not callable
            RuntimeError: If name or order is already registered
        """
        name = str(name).strip()

        if not name:
            raise ValueError("stage name cannot be empty")

        if not callable(stage):
            raise ValueError(f"stage must be callable, got {type(stage)}")

        if name in self._stages:
            raise RuntimeError(
                f"Stage '{name}' is already registered. "
                f"Use unregister() first to replace it."
            )

        taken = {meta["order"]: other for other, meta in self._stage_metadata.items()}
        if int(order) in taken:
            raise RuntimeError(f"Order {order} is already used by stage '{taken[int(order)]}'")

        self._stages[name] = stage
        self._stage_metadata[name] = {
            "order": int(order),
            "is_identity": is_identity,
            "description": str(description),
            "uses_reference_size": bool(uses_reference_size),
        }

        logger.debug(f"Registered render stage: {name} (order {order})")

    def unregister(self, name: str) -> bool:
        """
        Unregister a stage.

        Returns:
            True if unregistered, False if name was not registered
        """
        name = str(name).strip()

        if name in self._stages:
            del self._stages[name]
            del self._stage_metadata[name]
            logger.debug(f"Unregistered render stage: {name}")
            return True

        return False

    def get_stage(self, name: str) -> StageFunction:
        """
        Get a stage function by name.

        Raises:
            KeyError: If name is not registered
        """
        name = str(name).strip()

        if name not in self._stages:
            available = ", ".join(self.list_stages())
            raise KeyError(
                f"No render stage registered as '{name}'. "
                f"Available stages: {available}"
            )

        return self._stages[name]

    def has_stage(self, name: str) -> bool:
        return str(name).strip() in self._stages

    def list_stages(self) -> List[str]:
        """
        Get stage names in render order.

        Returns:
            List of stage names, lowest order first
        """
        return sorted(self._stages, key=lambda name: self._stage_metadata[name]["order"])

    def get_metadata(self, name: str) -> Dict[str, Any]:
        """
        Get metadata for a stage.

        Raises:
            KeyError: If name is not registered
        """
        name = str(name).strip()

        if name not in self._stage_metadata:
            raise KeyError(f"No metadata for stage: {name}")

        return dict(self._stage_metadata[name])

    def is_identity(self, name: str, state: EditState) -> bool:
        predicate = self.get_metadata(name)["is_identity"]
        return bool(predicate and predicate(state))

    def execute(
        self,
        name: str,
        buffer: PixelBuffer,
        state: EditState,
        reference_size: Optional[Tuple[int, int]] = None,
    ) -> PixelBuffer:
        """
        Run one stage.

        ``reference_size`` is forwarded only to stages registered with
        ``uses_reference_size``; other stages never see it.

        Raises:
            KeyError: If name is not registered
            Exception: Any exception raised by the stage
        """
        stage = self.get_stage(name)
        wants_reference = self.get_metadata(name)["uses_reference_size"]
        if reference_size is not None and wants_reference:
            return stage(buffer, state, reference_size)
        return stage(buffer, state)

    def clear(self) -> None:
        """Clear all registered stages. Use with caution."""
        self._stages.clear()
        self._stage_metadata.clear()
        logger.warning("Render stage registry cleared")


def _rotation_stage(buffer: PixelBuffer, state: EditState) -> PixelBuffer:
    return apply_rotation(buffer, state.rotation)


def _color_stage(
    buffer: PixelBuffer,
    state: EditState,
    reference_size: Optional[Tuple[int, int]] = None,
) -> PixelBuffer:
    return apply_color_adjustment(
        buffer,
        state.brightness,
        state.contrast,
        state.saturation,
        reference_size=reference_size,
    )


def _preset_stage(buffer: PixelBuffer, state: EditState) -> PixelBuffer:
    return apply_preset_filter(buffer, state.filter)


def _blur_stage(buffer: PixelBuffer, state: EditState) -> PixelBuffer:
    return apply_blur(buffer, state.blur)


# Global singleton registry
_default_registry: Optional[PipelineStageRegistry] = None


def get_default_registry() -> PipelineStageRegistry:
    """
    Get the global default registry (singleton).

    Creates the registry on first call and registers the default stages.
    """
    global _default_registry

    if _default_registry is None:
        _default_registry = PipelineStageRegistry()
        register_default_stages(_default_registry)

    return _default_registry


def register_default_stages(registry: PipelineStageRegistry) -> None:
    """
    Register the built-in stages in their fixed order:
    Rotation -> Color Adjustment -> Preset Filter -> Blur.

    Args:
        registry: The registry to register stages with
    """
    registry.register(
        STAGE_ROTATION,
        _rotation_stage,
        order=10,
        is_identity=lambda state: state.rotation == 0,
        description="Rotate by 0/90/180/270 degrees clockwise",
    )

    registry.register(
        STAGE_COLOR,
        _color_stage,
        order=20,
        is_identity=lambda state: (
            state.brightness == 0 and state.contrast == 0 and state.saturation == 100
        ),
        description="Brightness, contrast and saturation",
        uses_reference_size=True,
    )

    registry.register(
        STAGE_PRESET,
        _preset_stage,
        order=30,
        is_identity=lambda state: state.filter == "none",
        description="Named preset filter",
    )

    registry.register(
        STAGE_BLUR,
        _blur_stage,
        order=40,
        is_identity=lambda state: state.blur == 0,
        description="Gaussian blur scaled from the blur slider",
    )

    logger.info("Registered default render stages")
