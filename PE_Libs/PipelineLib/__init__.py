"""
PipelineLib - Rendering and session orchestration

This module provides the ordered render pipeline, the stage registry it
runs on, and the EditorSession that ties history, crop and viewport
together.
"""

from PE_Libs.PipelineLib.stage_registry import (
    STAGE_BLUR,
    STAGE_COLOR,
    STAGE_PRESET,
    STAGE_ROTATION,
    PipelineStageRegistry,
    get_default_registry,
    register_default_stages,
)
from PE_Libs.PipelineLib.pipeline import (
    active_stages,
    render_frame,
    render_from_filter_base,
    run_stages,
)
from PE_Libs.PipelineLib.editor_config import EditorConfig
from PE_Libs.PipelineLib.performance import PerformanceMetrics, PerformanceTracker
from PE_Libs.PipelineLib.editor_session import EditorSession, LoadTicket

__all__ = [
    "STAGE_BLUR",
    "STAGE_COLOR",
    "STAGE_PRESET",
    "STAGE_ROTATION",
    "PipelineStageRegistry",
    "get_default_registry",
    "register_default_stages",
    "active_stages",
    "render_frame",
    "render_from_filter_base",
    "run_stages",
    "EditorConfig",
    "PerformanceMetrics",
    "PerformanceTracker",
    "EditorSession",
    "LoadTicket",
]
