"""
Reference ramp geometry and extraction.

A ramp image stores one colour family as a row of 2x2 swatches. Each
vertical band of swatches is one variant, so an image of height H holds
H // 2 variants. Base ramp images hold the canonical colours a part sheet is
painted with; "mana seed" ramp images hold the selectable recolourings.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import pygame

from ..constants import RAMP_BLOCK_HEIGHT, RAMP_BLOCK_WIDTH
from ..parts.enums import LayerCode

RGB = Tuple[int, int, int]
RGBA = Tuple[int, int, int, int]


@dataclass(frozen=True)
class RampSpec:
    """
    One source ramp -> target ramp pairing.

    Attributes:
        source_key: Key tail of the base ramp image
        source_x: X offset of the first swatch in the base image
        source_count: Number of swatches in the base ramp
        target_key: Key tail of the variant ramp image
        target_x: X offset of the first swatch in the variant image
        target_count: Number of swatches in the variant ramp
    """
    source_key: str
    source_x: int
    source_count: int
    target_key: str
    target_x: int
    target_count: int


_BASE_3 = "palettes/base ramps/3-color base ramp (00a)"
_BASE_4 = "palettes/base ramps/4-color base ramp (00b)"
_BASE_2X3 = "palettes/base ramps/2x 3-color base ramps (00c)"
_BASE_4_3 = "palettes/base ramps/4-color + 3-color base ramps (00d)"
_BASE_SKIN = "palettes/base ramps/skin color base ramp"
_BASE_HAIR = "palettes/base ramps/hair color base ramp"

_RAMPS_3 = "palettes/mana seed 3-color ramps"
_RAMPS_4 = "palettes/mana seed 4-color ramps"
_RAMPS_SKIN = "palettes/mana seed skin ramps"
_RAMPS_HAIR = "palettes/mana seed hair ramps"

# Fixed per-suffix geometry. Suffix "f" also carries the skin and hair
# families because version-00 body and hair sheets use them implicitly.
RAMP_SPECS: Dict[str, Tuple[RampSpec, ...]] = {
    "a": (
        RampSpec(_BASE_3, 0, 4, _RAMPS_3, 0, 4),
    ),
    "b": (
        RampSpec(_BASE_4, 0, 5, _RAMPS_4, 0, 5),
    ),
    "c": (
        RampSpec(_BASE_2X3, 0, 4, _RAMPS_3, 0, 4),
        RampSpec(_BASE_2X3, 8, 4, _RAMPS_3, 0, 4),
    ),
    "d": (
        RampSpec(_BASE_4_3, 0, 5, _RAMPS_4, 0, 5),
        RampSpec(_BASE_4_3, 10, 4, _RAMPS_3, 0, 4),
    ),
    "f": (
        RampSpec(_BASE_4, 0, 5, _RAMPS_4, 0, 5),
        RampSpec(_BASE_SKIN, 0, 5, _RAMPS_SKIN, 0, 5),
        RampSpec(_BASE_HAIR, 0, 6, _RAMPS_HAIR, 0, 6),
    ),
}

# Layers whose unsuffixed sheets still use the standard body/hair ramps.
INFERRED_SUFFIX_FOR_LAYER: Dict[LayerCode, str] = {
    LayerCode.BODY01: "f",
    LayerCode.HAIR13: "f",
}


def ramp_specs_for_suffix(suffix: str) -> Sequence[RampSpec]:
    return RAMP_SPECS.get(suffix, ())


def inferred_palette_suffix(layer: LayerCode) -> Optional[str]:
    return INFERRED_SUFFIX_FOR_LAYER.get(layer)


def pack_rgb(r: int, g: int, b: int) -> int:
    return (r << 16) | (g << 8) | b


def unpack_rgb(value: int) -> RGB:
    return ((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF)


def variant_count(surface: pygame.Surface, block_height: int = RAMP_BLOCK_HEIGHT) -> int:
    """Number of variant bands in a ramp image (at least 1)."""
    return max(1, surface.get_height() // max(1, block_height))


def extract_ramp_variant(
    surface: pygame.Surface,
    x_start: int,
    count: int,
    variant: int,
    block_width: int = RAMP_BLOCK_WIDTH,
    block_height: int = RAMP_BLOCK_HEIGHT,
) -> Optional[List[RGBA]]:
    """
    Sample one variant of a ramp.

    Swatch centres are spaced block_width apart starting at x_start; the
    row sampled is the middle of the variant's band. The variant index is
    clamped to the bands the image actually has.

    Args:
        surface: Ramp image
        x_start: X offset of the first swatch
        count: Number of swatches to read
        variant: Requested variant band

    Returns:
        List of RGBA colours, or None if any sample falls outside the image
    """
    if block_height <= 0 or block_width <= 0:
        return None
    width, height = surface.get_size()
    bands = variant_count(surface, block_height)
    variant = min(max(variant, 0), bands - 1)

    y = variant * block_height + block_height // 2
    if y >= height:
        return None

    colors = []
    for i in range(count):
        x = x_start + i * block_width + block_width // 2
        if x >= width:
            return None
        colors.append(tuple(surface.get_at((x, y))))
    return colors
