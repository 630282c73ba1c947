"""
Part sheets - filename identity, catalog indexes and equip rules.
"""

from .enums import (
    BaseType,
    LayerCode,
    Slot,
    Special,
    ALL_LAYERS,
    DEFAULT_LAYERS,
    PAIRED_LAYERS,
    SLOT_FOR_LAYER,
    slot_for_layer,
)

from .identity import (
    OutfitSetKey,
    PartFilenameError,
    PartIdentity,
    format_part_key,
    parse_part_filename,
    try_parse_part_filename,
)

from .catalog import (
    PartCatalog,
    PartRecord,
    build_catalog,
    scan_part_catalog,
    set_layers,
)

from .equipped import EquippedSelection

__all__ = [
    "BaseType",
    "LayerCode",
    "Slot",
    "Special",
    "ALL_LAYERS",
    "DEFAULT_LAYERS",
    "PAIRED_LAYERS",
    "SLOT_FOR_LAYER",
    "slot_for_layer",
    "OutfitSetKey",
    "PartFilenameError",
    "PartIdentity",
    "format_part_key",
    "parse_part_filename",
    "try_parse_part_filename",
    "PartCatalog",
    "PartRecord",
    "build_catalog",
    "scan_part_catalog",
    "set_layers",
    "EquippedSelection",
]
