"""
Paper-doll part enums.

Type-safe enumerations for the part filename grammar. The layer codes match
the second segment of every part sheet filename (e.g. fbas_01body_human_00.png).
"""

from enum import Enum
from typing import Dict, Optional, Tuple


class BaseType(str, Enum):
    """
    Part families.

    Only one family exists today; the enum is kept so the catalog sort key
    stays stable when more families are added.
    """
    FBAS = "fbas"

    @property
    def sort_order(self) -> int:
        return _BASE_ORDER[self]


_BASE_ORDER: Dict[BaseType, int] = {BaseType.FBAS: 0}


class LayerCode(str, Enum):
    """
    Rendering layers for paper-doll compositing.

    Declaration order is the z-order: earlier layers are drawn first (behind).
    Values are the two-digit prefixed codes used in filenames.
    """
    UNDR00 = "00undr"
    BODY01 = "01body"
    SOCK02 = "02sock"
    FOT103 = "03fot1"
    LWR104 = "04lwr1"
    SHRT05 = "05shrt"
    LWR206 = "06lwr2"
    FOT207 = "07fot2"
    LWR308 = "08lwr3"
    HAND09 = "09hand"
    OUTR10 = "10outr"
    NECK11 = "11neck"
    FACE12 = "12face"
    HAIR13 = "13hair"
    HEAD14 = "14head"
    OVER15 = "15over"

    @property
    def order(self) -> int:
        """Z-order position (0 = back)."""
        return int(self.value[:2])

    @classmethod
    def from_code(cls, raw: str) -> Optional["LayerCode"]:
        """Reverse lookup of a filename layer code, None when unknown."""
        return _LAYER_BY_CODE.get(raw)


_LAYER_BY_CODE: Dict[str, LayerCode] = {layer.value: layer for layer in LayerCode}

# Fixed enumeration order, used for equipped key output and rendering.
ALL_LAYERS: Tuple[LayerCode, ...] = tuple(LayerCode)


class Slot(str, Enum):
    """
    Mutual-exclusion groups.

    Only one equipped part may occupy a slot, even when the slot spans
    several layers.
    """
    LOWER = "lower"
    FOOTWEAR = "footwear"
    HEAD = "head"


class Special(str, Enum):
    """Special markers carried by the trailing filename segment."""
    EXCLUSIVE = "e"


# Layers without an entry can be co-equipped freely.
SLOT_FOR_LAYER: Dict[LayerCode, Slot] = {
    LayerCode.LWR104: Slot.LOWER,
    LayerCode.LWR206: Slot.LOWER,
    LayerCode.LWR308: Slot.LOWER,
    LayerCode.FOT103: Slot.FOOTWEAR,
    LayerCode.FOT207: Slot.FOOTWEAR,
    LayerCode.HEAD14: Slot.HEAD,
}

# Canonical minimal outfit seeded by EquippedSelection.set_defaults().
DEFAULT_LAYERS: Tuple[LayerCode, ...] = (
    LayerCode.BODY01,
    LayerCode.SOCK02,
    LayerCode.FOT103,
    LayerCode.LWR104,
    LayerCode.SHRT05,
    LayerCode.HAIR13,
)

# An outfit set spanning both of these layers must be equipped as a unit.
PAIRED_LAYERS: Tuple[LayerCode, LayerCode] = (LayerCode.UNDR00, LayerCode.NECK11)


def slot_for_layer(layer: LayerCode) -> Optional[Slot]:
    """
    Get the mutual-exclusion slot for a layer.

    Args:
        layer: The layer to check

    Returns:
        The slot, or None if the layer has no exclusivity group
    """
    return SLOT_FOR_LAYER.get(layer)
