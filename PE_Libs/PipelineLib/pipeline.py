"""
Render pipeline.

``render_frame`` is a pure function of the source buffer and the edit
state: every frame is recomputed from the untouched source, never from the
previously rendered frame, so slider changes cannot accumulate rounding
error. Stages run in the fixed order Rotation -> Color Adjustment ->
Preset Filter -> Blur; rotating first means the color and blur stages
always see the final canvas dimensions.

Example:
    >>> frame = render_frame(source, EditState(brightness=20, rotation=90))
"""

import logging
from typing import List, Optional, Tuple

from PE_Libs.HistoryLib.edit_state import EditState
from PE_Libs.ImageEditingLib.image_models import PixelBuffer
from PE_Libs.PipelineLib.stage_registry import (
    STAGE_ROTATION,
    PipelineStageRegistry,
    get_default_registry,
)

logger = logging.getLogger(__name__)


def active_stages(state: EditState, registry: Optional[PipelineStageRegistry] = None) -> List[str]:
    """Stage names that would change the buffer for this state, in order."""
    registry = registry or get_default_registry()
    return [
        name for name in registry.list_stages()
        if not registry.is_identity(name, state)
    ]


def run_stages(
    buffer: PixelBuffer,
    state: EditState,
    stages: List[str],
    registry: Optional[PipelineStageRegistry] = None,
    reference_size: Optional[Tuple[int, int]] = None,
) -> PixelBuffer:
    """Run the named stages in the given order."""
    registry = registry or get_default_registry()
    for name in stages:
        buffer = registry.execute(name, buffer, state, reference_size=reference_size)
        logger.debug(f"Stage {name} -> {buffer.width}x{buffer.height}")
    return buffer


def render_frame(
    source: PixelBuffer,
    state: EditState,
    registry: Optional[PipelineStageRegistry] = None,
) -> PixelBuffer:
    """
    Render the display frame for a source buffer and edit state.

    Args:
        source: Working buffer (as loaded, with any applied crops)
        state: Current edit state
        registry: Stage registry (default: built-in stages)

    Returns:
        The frame to display; the source itself for the default state
    """
    if not isinstance(source, PixelBuffer):
        raise TypeError(f"Expected PixelBuffer, got {type(source)}")
    return run_stages(source, state, active_stages(state, registry), registry)


def render_from_filter_base(
    filter_base: PixelBuffer,
    state: EditState,
    registry: Optional[PipelineStageRegistry] = None,
    reference_size: Optional[Tuple[int, int]] = None,
) -> PixelBuffer:
    """
    Render starting from an already-rotated capture.

    The rotation stage is skipped; everything after it runs as in
    ``render_frame``. With ``reference_size`` the color stage checks the
    capture against the expected frame size.

    Raises:
        DimensionMismatchError: If the capture does not match ``reference_size``
    """
    stages = [name for name in active_stages(state, registry) if name != STAGE_ROTATION]
    return run_stages(filter_base, state, stages, registry, reference_size)
