"""
Paper-doll composition core - layered character parts and palette recolouring.

Discovers part sheets on disk, decodes their identity from the filename,
indexes them by key, layer and outfit set, enforces the equip and visibility
rules between layers, and recolours sheets by substituting reference ramps.

## Components

- **parts**: filename grammar, PartCatalog indexes, EquippedSelection rules
- **palettes**: PaletteCatalog, ramp geometry, PaletteRemapEngine, selection
- **services**: asset root walking, image loading, PaperDollService lifecycle
- **core**: configuration and logging

## Quick Start

```python
from paperdoll.src import LayerCode, PaperDollService

service = PaperDollService()
service.load()

# Step the hat layer to its next part
result = service.cycle_part(LayerCode.HEAD14, 1)
print(result.message)

# Persist and restore the outfit
keys = service.equipped_keys()
service.request_equipped_keys(keys)

# Draw back to front
for layer in service.render_plan():
    surface = service.part_surface(layer.part_index, layer.variant)
```
"""

# =============================================================================
# Parts - identity, catalog and equip state
# =============================================================================

from .parts import (
    ALL_LAYERS,
    EquippedSelection,
    LayerCode,
    OutfitSetKey,
    PartCatalog,
    PartFilenameError,
    PartIdentity,
    PartRecord,
    Slot,
    Special,
    build_catalog,
    format_part_key,
    parse_part_filename,
    scan_part_catalog,
)

# =============================================================================
# Palettes - catalog, remap engine and selection
# =============================================================================

from .palettes import (
    LayerPaletteState,
    PaletteCatalog,
    PaletteRecord,
    PaletteRemapEngine,
    PaletteSelection,
    RampRemapTable,
    scan_palette_catalog,
)

# =============================================================================
# Services - lifecycle
# =============================================================================

from .services.paper_doll_service import (
    CatalogSnapshot,
    PaperDollService,
    RenderLayer,
    get_paper_doll_service,
    reset_paper_doll_service,
)

__all__ = [
    # Parts
    "ALL_LAYERS",
    "EquippedSelection",
    "LayerCode",
    "OutfitSetKey",
    "PartCatalog",
    "PartFilenameError",
    "PartIdentity",
    "PartRecord",
    "Slot",
    "Special",
    "build_catalog",
    "format_part_key",
    "parse_part_filename",
    "scan_part_catalog",

    # Palettes
    "LayerPaletteState",
    "PaletteCatalog",
    "PaletteRecord",
    "PaletteRemapEngine",
    "PaletteSelection",
    "RampRemapTable",
    "scan_palette_catalog",

    # Services
    "CatalogSnapshot",
    "PaperDollService",
    "RenderLayer",
    "get_paper_doll_service",
    "reset_paper_doll_service",
]

__version__ = "0.1.0"
