"""
Palette Remap Engine - Ramp-substitution recolouring of part sheets.

Handles:
- Building a colour substitution table for a (palette suffix, variant) pair
  from the base and variant ramp reference images
- Applying a table to a part surface (RGB replaced, per-pixel alpha kept)
- Memoizing tables per (suffix, variant) and recoloured surfaces per
  (part key, variant)

Missing or undersized reference images mean "no remap available": the
caller renders the unmodified sheet.
"""

import threading
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Tuple

import numpy as np
import pygame

from paperdoll.src.core.logging_config import get_logger
from paperdoll.src.services.image_store import ImageStore, normalize_surface

from ..constants import RAMP_BLOCK_HEIGHT, RAMP_BLOCK_WIDTH
from ..parts.catalog import PartRecord
from .catalog import PaletteCatalog
from .ramps import (
    RGB,
    extract_ramp_variant,
    inferred_palette_suffix,
    pack_rgb,
    ramp_specs_for_suffix,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class RampRemapTable:
    """
    Colour substitution table for one (suffix, variant) pair.

    Attributes:
        suffix: Palette suffix letter the table was built for
        variant: Requested variant index
        entries: Packed source RGB -> target RGB
    """
    suffix: str
    variant: int
    entries: Mapping[int, RGB] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.entries)

    def lookup(self, r: int, g: int, b: int) -> Optional[RGB]:
        return self.entries.get(pack_rgb(r, g, b))


def remap_surface_colors(surface: pygame.Surface, table: RampRemapTable) -> pygame.Surface:
    """
    Recolour every pixel whose RGB is a table key.

    Matching ignores the pixel's alpha and the pixel keeps its alpha. When
    no pixel matches, the original surface object is returned untouched.
    Lookups run once per distinct colour, not once per pixel.

    Args:
        surface: Source part sheet, any pixel format
        table: Ready substitution table

    Returns:
        A new 32-bit surface with per-pixel alpha, or `surface` itself if
        nothing changed
    """
    if not table.entries:
        return surface

    source = normalize_surface(surface)
    rgb = pygame.surfarray.array3d(source).astype(np.uint32)
    packed = (rgb[..., 0] << 16) | (rgb[..., 1] << 8) | rgb[..., 2]
    colors, inverse = np.unique(packed, return_inverse=True)

    replacement = np.zeros((len(colors), 3), dtype=np.uint8)
    changed = np.zeros(len(colors), dtype=bool)
    for i, color in enumerate(colors.tolist()):
        target = table.entries.get(color)
        if target is None or pack_rgb(*target) == color:
            continue
        replacement[i] = target
        changed[i] = True

    if not changed.any():
        return surface

    inverse = inverse.reshape(packed.shape)
    mask = changed[inverse]
    result = source.copy() if source is surface else source
    pixels = pygame.surfarray.pixels3d(result)
    pixels[mask] = replacement[inverse[mask]]
    del pixels  # unlocks the surface
    return result


class PaletteRemapEngine:
    """
    Builds and caches ramp remap tables and recoloured part surfaces.

    Table cache: (suffix, variant) -> RampRemapTable, shared by every part
    using the suffix. Image cache: (part key, variant) -> surface. Neither
    cache evicts; call clear() when the catalogs are rescanned.
    """

    def __init__(
        self,
        palette_catalog: PaletteCatalog,
        image_store: ImageStore,
        block_width: int = RAMP_BLOCK_WIDTH,
        block_height: int = RAMP_BLOCK_HEIGHT,
    ):
        self.palette_catalog = palette_catalog
        self.image_store = image_store
        self.block_width = block_width
        self.block_height = block_height

        self._lock = threading.Lock()
        self._tables: Dict[Tuple[str, int], RampRemapTable] = {}
        self._images: Dict[Tuple[str, int], pygame.Surface] = {}

    @property
    def table_count(self) -> int:
        return len(self._tables)

    @property
    def image_count(self) -> int:
        return len(self._images)

    def clear(self) -> None:
        """Drop every cached table and recoloured surface."""
        with self._lock:
            self._tables.clear()
            self._images.clear()

    def set_palette_catalog(self, palette_catalog: PaletteCatalog) -> None:
        """Swap in a rescanned palette catalog and invalidate the caches."""
        with self._lock:
            self.palette_catalog = palette_catalog
            self._tables.clear()
            self._images.clear()

    @staticmethod
    def suffix_for_part(part: PartRecord) -> Optional[str]:
        """Explicit palette suffix, or the one implied by the part's layer."""
        return part.identity.palette or inferred_palette_suffix(part.layer)

    def table_for(self, suffix: str, variant: int) -> Optional[RampRemapTable]:
        """
        Get the remap table for a suffix and variant, building it on first use.

        Returns:
            The table, or None when a reference image is missing or too small
        """
        cache_key = (suffix, variant)
        with self._lock:
            cached = self._tables.get(cache_key)
        if cached is not None:
            return cached

        table = self.build_table(suffix, variant)
        if table is None:
            return None

        with self._lock:
            self._tables[cache_key] = table
        return table

    def table_for_part(self, part: PartRecord, variant: int) -> Optional[RampRemapTable]:
        suffix = self.suffix_for_part(part)
        if suffix is None:
            return None
        return self.table_for(suffix, variant)

    def build_table(self, suffix: str, variant: int) -> Optional[RampRemapTable]:
        """
        Build (without caching) the remap table for a suffix and variant.

        Each ramp pair maps the base ramp's variant 0 onto the variant ramp's
        requested band, colour by colour.
        """
        specs = ramp_specs_for_suffix(suffix)
        if not specs:
            return None

        entries: Dict[int, RGB] = {}
        for spec in specs:
            source = self._reference_surface(spec.source_key)
            target = self._reference_surface(spec.target_key)
            if source is None or target is None:
                logger.debug(
                    "Reference ramp image missing",
                    extra={"suffix": suffix, "source": spec.source_key, "target": spec.target_key},
                )
                return None

            source_ramp = extract_ramp_variant(
                source, spec.source_x, spec.source_count, 0,
                self.block_width, self.block_height,
            )
            target_ramp = extract_ramp_variant(
                target, spec.target_x, spec.target_count, variant,
                self.block_width, self.block_height,
            )
            if source_ramp is None or target_ramp is None:
                logger.debug(
                    "Reference ramp image too small",
                    extra={"suffix": suffix, "source": spec.source_key, "target": spec.target_key},
                )
                return None

            for source_color, target_color in zip(source_ramp, target_ramp):
                entries[pack_rgb(*source_color[:3])] = tuple(target_color[:3])

        if not entries:
            return None
        return RampRemapTable(suffix=suffix, variant=variant, entries=entries)

    def remap_part(
        self,
        part: PartRecord,
        surface: pygame.Surface,
        variant: int,
    ) -> pygame.Surface:
        """
        Get a part's sheet recoloured for a variant.

        Args:
            part: Catalog record of the part
            surface: The part's source sheet
            variant: Requested variant index

        Returns:
            The recoloured surface, or `surface` when no remap applies
        """
        cache_key = (part.part_key, variant)
        with self._lock:
            cached = self._images.get(cache_key)
        if cached is not None:
            return cached

        table = self.table_for_part(part, variant)
        if table is None:
            return surface

        remapped = remap_surface_colors(surface, table)
        with self._lock:
            self._images[cache_key] = remapped
        return remapped

    def _reference_surface(self, key_tail: str) -> Optional[pygame.Surface]:
        palette = self.palette_catalog.find_by_key_tail(key_tail)
        if palette is None:
            return None
        return self.image_store.get_surface(palette.absolute_path)
