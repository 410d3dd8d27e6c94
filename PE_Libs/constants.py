"""
Constants and configuration values for Pixel Edit.

This module centralizes all constant values, magic numbers, and
configuration settings used throughout the editing core.
"""

# Pixel layout
CHANNELS = 4  # R, G, B, A

# Luma weights used by the saturation stage
SATURATION_LUMA_WEIGHTS = (0.2989, 0.5870, 0.1140)

# Luma weights used by the preset filters
PRESET_LUMA_WEIGHTS = (0.299, 0.587, 0.114)

# Edit state ranges
BRIGHTNESS_RANGE = (-100, 100)
CONTRAST_RANGE = (-100, 100)
SATURATION_RANGE = (0, 200)
BLUR_RANGE = (0, 100)
ROTATION_ANGLES = (0, 90, 180, 270)

# Default edit state
DEFAULT_BRIGHTNESS = 0
DEFAULT_CONTRAST = 0
DEFAULT_SATURATION = 100
DEFAULT_BLUR = 0
DEFAULT_ROTATION = 0
DEFAULT_FILTER = "none"
DEFAULT_CROP_RATIO = "free"

# Preset filters
FILTER_NONE = "none"
FILTER_GRAYSCALE = "grayscale"
FILTER_SEPIA = "sepia"
FILTER_VINTAGE = "vintage"
FILTER_COOL = "cool"
FILTER_WARM = "warm"
FILTER_HDR = "hdr"
FILTER_NAMES = (
    FILTER_NONE,
    FILTER_GRAYSCALE,
    FILTER_SEPIA,
    FILTER_VINTAGE,
    FILTER_COOL,
    FILTER_WARM,
    FILTER_HDR,
)
HDR_SATURATION_BOOST = 1.3

# Blur: slider value -> Gaussian radius in device pixels
BLUR_RADIUS_DIVISOR = 10.0

# Crop ratios
CROP_RATIO_FREE = "free"
CROP_RATIO_PRESETS = ("free", "1:1", "4:3", "16:9", "3:2")

# Crop interaction (handle radius is in viewport pixels, sizes in image pixels)
HANDLE_HIT_RADIUS = 15.0
HANDLE_MIN_RECT_SIZE = 20.0
MIN_CROP_SIZE = 10.0

# Viewport
MIN_ZOOM = 0.1
MAX_ZOOM = 8.0
ZOOM_STEP = 0.1
DEFAULT_ZOOM = 1.0

# History
DEFAULT_MAX_HISTORY = 100

# Performance tracking
DEFAULT_LATENCY_WINDOW = 20
DEFAULT_FRAME_WINDOW = 60

# Supported file formats
SUPPORTED_STANDARD_IMAGES = {".png", ".jpg", ".jpeg", ".bmp", ".gif", ".tiff", ".webp"}

# Export
DEFAULT_OUTPUT_FORMAT = "PNG"
DEFAULT_JPEG_QUALITY = 95
EXPORT_FORMATS = ("PNG", "JPEG", "BMP", "WEBP")
