"""
Palettes - reference ramp images and ramp-substitution recolouring.
"""

from .catalog import (
    PaletteCatalog,
    PaletteRecord,
    build_palette_catalog,
    is_palette_asset_path,
    palette_key_from_asset_path,
    scan_palette_catalog,
)

from .ramps import (
    RAMP_SPECS,
    RampSpec,
    extract_ramp_variant,
    inferred_palette_suffix,
    pack_rgb,
    ramp_specs_for_suffix,
    unpack_rgb,
    variant_count,
)

from .remap import (
    PaletteRemapEngine,
    RampRemapTable,
    remap_surface_colors,
)

from .selection import (
    LayerPaletteState,
    PaletteSelection,
    canonical_variant_count,
    cycle_palette,
    palette_variant_count,
)

__all__ = [
    "PaletteCatalog",
    "PaletteRecord",
    "build_palette_catalog",
    "is_palette_asset_path",
    "palette_key_from_asset_path",
    "scan_palette_catalog",
    "RAMP_SPECS",
    "RampSpec",
    "extract_ramp_variant",
    "inferred_palette_suffix",
    "pack_rgb",
    "ramp_specs_for_suffix",
    "unpack_rgb",
    "variant_count",
    "PaletteRemapEngine",
    "RampRemapTable",
    "remap_surface_colors",
    "LayerPaletteState",
    "PaletteSelection",
    "canonical_variant_count",
    "cycle_palette",
    "palette_variant_count",
]
