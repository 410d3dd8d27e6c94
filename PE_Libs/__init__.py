"""
PE_Libs - Pixel Edit Library Modules

This package contains the core of the Pixel Edit raster editor,
organized into specialized sub-packages:

- ImageEditingLib: Pixel buffer model, pixel transforms, decode/encode
- HistoryLib: Edit state and undo/redo history
- ViewportLib: Zoom/pan coordinate mapping and the crop tool
- PipelineLib: Render pipeline, stage registry and editing session
"""

__version__ = "0.1.0"
