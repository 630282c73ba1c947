"""
Paper-doll constants.
This file centralizes the filename grammar tokens and fixed ramp geometry.
"""

# Filename grammar
BASE_TOKEN = "fbas"  # First filename segment for every part sheet
PART_PREFIX = "fbas_"  # Files not starting with this are ignored by the scanner
SPECIAL_TOKEN = "e"  # Trailing segment marking an exclusive part
PART_EXTENSION = "png"
PALETTE_LETTERS = ("a", "b", "c", "d", "f")
MIN_SEGMENTS = 4  # base, layer, name, version

# Palette discovery
PALETTE_FOLDER = "palettes"

# Ramp geometry (pixels)
RAMP_BLOCK_WIDTH = 2
RAMP_BLOCK_HEIGHT = 2

# Reference ramp used when a palette image has a single variant band
CANONICAL_RAMP_KEY = "palettes/mana seed 3-color ramps"

# Part status messages
STATUS_SCANNING = "Parts: scanning catalog..."
