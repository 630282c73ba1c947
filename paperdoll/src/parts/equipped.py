"""
EquippedSelection - Which part is worn on each layer.

This is the single piece of mutable "what is worn" state. It holds at most
one part index per layer and enforces the equip rules:

- Slot exclusivity: equipping a part removes every other part in its slot,
  across all layers sharing that slot.
- Paired sets: equipping a member of a paired-required outfit set equips
  every other member too.
- Hat/hair visibility: visible_layer_map() hides hair when either the hat or
  the hair is marked exclusive. The equipped map itself keeps the hair entry.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from paperdoll.src.core.logging_config import get_logger

from .catalog import PartCatalog
from .enums import ALL_LAYERS, DEFAULT_LAYERS, LayerCode

logger = get_logger(__name__)


@dataclass
class EquippedSelection:
    """
    Mapping of layer -> equipped part index.

    Indices refer to the PartCatalog passed to each operation; a selection
    must be re-applied (via keys) after the catalog is rebuilt.
    """
    by_layer: Dict[LayerCode, int] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.by_layer)

    def get(self, layer: LayerCode) -> Optional[int]:
        return self.by_layer.get(layer)

    def clear(self) -> None:
        self.by_layer.clear()

    def set_defaults(self, catalog: PartCatalog) -> None:
        """
        Seed the canonical minimal outfit.

        Equips the first catalog entry of body, socks, footwear, lower,
        shirt and hair, skipping layers with no parts.
        """
        self.by_layer.clear()
        for layer in DEFAULT_LAYERS:
            indices = catalog.layer_indices(layer)
            if indices:
                self.equip(catalog, indices[0])

    def equip(self, catalog: PartCatalog, index: int) -> bool:
        """
        Equip a part by catalog index.

        Args:
            catalog: Catalog the index refers to
            index: Part index

        Returns:
            True if the part was equipped, False if the index is out of range
        """
        part = catalog.part_at(index)
        if part is None:
            return False

        if part.slot is not None:
            self.by_layer = {
                layer: equipped_index
                for layer, equipped_index in self.by_layer.items()
                if _slot_of(catalog, equipped_index) != part.slot
            }
        self.by_layer[part.layer] = index

        # Single-level expansion: members are inserted directly and never
        # trigger further pairing.
        if catalog.is_paired_required(part.set_key):
            for paired_index in catalog.set_members(part.set_key):
                paired_part = catalog.part_at(paired_index)
                if paired_part is not None:
                    self.by_layer[paired_part.layer] = paired_index

        return True

    def unequip(self, layer: LayerCode) -> Optional[int]:
        """Remove a layer's part, returning the removed index if any."""
        return self.by_layer.pop(layer, None)

    def apply_keys(self, catalog: PartCatalog, keys: Iterable[str]) -> None:
        """
        Replace the selection with the parts named by keys.

        Unknown keys are ignored, so a saved outfit that references a part
        no longer on disk just drops that layer. A listed key beats a set
        member that pairing pulled onto its layer, so a saved selection
        restores exactly even after one half of a paired set was swapped.
        """
        self.by_layer.clear()
        resolved: List[int] = []
        for key in keys:
            index = catalog.index_by_key(key)
            if index is None:
                logger.debug("Ignoring unknown part key", extra={"part_key": key})
                continue
            if self.equip(catalog, index):
                resolved.append(index)

        listed = set(resolved)
        for index in resolved:
            layer = catalog.part_at(index).layer
            current = self.by_layer.get(layer)
            if current is not None and current not in listed:
                self.by_layer[layer] = index

    def equipped_keys(self, catalog: PartCatalog) -> List[str]:
        """
        Part keys of every equipped layer, in layer enumeration order.

        The order is stable so saved documents round-trip exactly.
        """
        keys = []
        for layer in ALL_LAYERS:
            index = self.by_layer.get(layer)
            if index is None:
                continue
            part = catalog.part_at(index)
            if part is None:
                continue
            keys.append(part.part_key)
        return keys

    def visible_layer_map(self, catalog: PartCatalog) -> Dict[LayerCode, int]:
        """
        Derive the layers that should actually be rendered.

        Hair is hidden when the equipped head part is exclusive, or when a
        head part is present and the hair part is exclusive. The selection
        is not modified.
        """
        visible = dict(self.by_layer)

        hat = _part_or_none(catalog, visible.get(LayerCode.HEAD14))
        hair = _part_or_none(catalog, visible.get(LayerCode.HAIR13))

        hat_hides_hair = hat is not None and hat.identity.is_exclusive
        hair_hides_under_hat = hat is not None and hair is not None and hair.identity.is_exclusive

        if hat_hides_hair or hair_hides_under_hat:
            visible.pop(LayerCode.HAIR13, None)
        return visible

    def cycle_layer(self, catalog: PartCatalog, layer: LayerCode, delta: int) -> Optional[int]:
        """
        Step a layer to the next or previous part in catalog order.

        Moving forward past the last part unequips the layer; moving forward
        from an empty layer equips the first part. Backward mirrors this.

        Args:
            catalog: Part catalog
            layer: Layer to cycle
            delta: >= 0 for next, < 0 for previous

        Returns:
            The newly equipped index, or None if the layer ended up empty
        """
        indices = catalog.layer_indices(layer)
        if not indices:
            return None

        current = self.by_layer.get(layer)
        position = indices.index(current) if current in indices else None

        if delta >= 0:
            if position is None:
                next_position = 0
            elif position + 1 < len(indices):
                next_position = position + 1
            else:
                next_position = None
        else:
            if position is None:
                next_position = len(indices) - 1
            elif position > 0:
                next_position = position - 1
            else:
                next_position = None

        if next_position is None:
            self.unequip(layer)
            return None

        next_index = indices[next_position]
        self.equip(catalog, next_index)
        return next_index


def _part_or_none(catalog: PartCatalog, index: Optional[int]):
    if index is None:
        return None
    return catalog.part_at(index)


def _slot_of(catalog: PartCatalog, index: int):
    part = catalog.part_at(index)
    return part.slot if part is not None else None
