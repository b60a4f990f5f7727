"""Shared constants and paths for MeshForge."""

from pathlib import Path

# Package paths
PACKAGE_ROOT = Path(__file__).parent
ASSETS_DIR = PACKAGE_ROOT / "assets"
CONFIG_DIR = ASSETS_DIR / "config"
DEFAULTS_FILE = "defaults.json"

# Emboss: displacement at pattern value 255, as a fraction of the largest
# bounding box dimension
EMBOSS_DEFAULT_RATIO = 0.01
PATTERN_MAX_VALUE = 255.0

# Name suffix separator for surfaces split into UV islands
UV_SPLIT_SEPARATOR = "-"

# UV layout image
UV_IMAGE_SIZE = 512
UV_IMAGE_LINE_COLOR = (0, 255, 0, 255)
UV_IMAGE_BACKGROUND = (0, 0, 0, 255)
