"""
Palette selection - which palette and variant each layer is shown with.

A global selection applies to every layer unless the layer has its own
override. Cycling steps through a palette's variants and then wraps onto the
neighbouring palette.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Tuple

from paperdoll.src.services.image_store import ImageStore

from ..constants import CANONICAL_RAMP_KEY, RAMP_BLOCK_HEIGHT
from ..parts.enums import LayerCode
from .catalog import PaletteCatalog
from .ramps import variant_count


@dataclass(frozen=True)
class PaletteSelection:
    """A palette index and one of its variant bands."""
    palette_index: int = 0
    variant: int = 0


@dataclass
class LayerPaletteState:
    """
    Global palette selection plus per-layer overrides.

    Attributes:
        global_selection: Applies to layers without an override, None for
            "no recolouring"
        by_layer: Layer-specific overrides
    """
    global_selection: Optional[PaletteSelection] = None
    by_layer: Dict[LayerCode, PaletteSelection] = field(default_factory=dict)

    def effective(self, layer: LayerCode) -> Optional[Tuple[PaletteSelection, bool]]:
        """
        Get the selection a layer renders with.

        Returns:
            (selection, is_local) or None when neither an override nor a
            global selection exists
        """
        local = self.by_layer.get(layer)
        if local is not None:
            return local, True
        if self.global_selection is not None:
            return self.global_selection, False
        return None

    def set_layer(self, layer: LayerCode, selection: PaletteSelection) -> None:
        """Set a layer override; a selection equal to the global clears it."""
        if selection == self.global_selection:
            self.by_layer.pop(layer, None)
        else:
            self.by_layer[layer] = selection

    def clear_layer(self, layer: LayerCode) -> None:
        self.by_layer.pop(layer, None)

    def variant_for(self, layer: LayerCode) -> Optional[int]:
        effective = self.effective(layer)
        if effective is None:
            return None
        return effective[0].variant


def palette_variant_count(
    catalog: PaletteCatalog,
    image_store: ImageStore,
    palette_index: int,
    block_height: int = RAMP_BLOCK_HEIGHT,
) -> int:
    """
    Number of selectable variants of a palette.

    Palettes that are unavailable or hold a single band report the
    variant count of the canonical 3-colour ramp image instead.
    """
    palette = catalog.palette_at(palette_index)
    if palette is None:
        return 1
    surface = image_store.get_surface(palette.absolute_path)
    if surface is not None:
        count = variant_count(surface, block_height)
        if count > 1:
            return count
    return canonical_variant_count(catalog, image_store, block_height)


def canonical_variant_count(
    catalog: PaletteCatalog,
    image_store: ImageStore,
    block_height: int = RAMP_BLOCK_HEIGHT,
) -> int:
    canonical = catalog.find_by_key_tail(CANONICAL_RAMP_KEY)
    if canonical is None:
        return 1
    surface = image_store.get_surface(canonical.absolute_path)
    if surface is None:
        return 1
    return variant_count(surface, block_height)


def cycle_palette(
    current: PaletteSelection,
    delta: int,
    palette_count: int,
    count_variants: Callable[[int], int],
) -> PaletteSelection:
    """
    Step to the next or previous palette variant.

    Forward steps through the current palette's variants, then wraps to
    variant 0 of the next palette. Backward steps down, then wraps to the
    last variant of the previous palette.

    Args:
        current: Current selection
        delta: >= 0 for next, < 0 for previous
        palette_count: Number of palettes in the catalog
        count_variants: Variant count for a palette index

    Returns:
        The new selection (unchanged when there are no palettes)
    """
    if palette_count <= 0:
        return current

    palette_index = min(max(current.palette_index, 0), palette_count - 1)
    current_count = max(1, count_variants(palette_index))
    variant = min(max(current.variant, 0), current_count - 1)

    if delta >= 0:
        if variant + 1 < current_count:
            return PaletteSelection(palette_index, variant + 1)
        return PaletteSelection((palette_index + 1) % palette_count, 0)

    if variant > 0:
        return PaletteSelection(palette_index, variant - 1)
    previous = (palette_index + palette_count - 1) % palette_count
    return PaletteSelection(previous, max(1, count_variants(previous)) - 1)
