"""
Paper Doll Service - Owns the catalogs, equip state and recolouring caches.

Lifecycle:
1. build_catalogs() scans the asset roots into a CatalogSnapshot, off to the
   side. Nothing the service exposes changes while this runs.
2. publish() swaps the snapshot in with a single assignment, invalidates the
   image and remap caches, then applies any pending equip keys (or the
   default outfit).

The presentation layer calls render_plan() and part_surface() each frame;
persistence calls equipped_keys() / request_equipped_keys().

Usage:
    from paperdoll.src.services.paper_doll_service import get_paper_doll_service

    service = get_paper_doll_service()
    service.load()
    for layer in service.render_plan():
        surface = service.part_surface(layer.part_index, layer.variant)
"""

import asyncio
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import pygame

from paperdoll.src.constants import STATUS_SCANNING
from paperdoll.src.core.config import PaperDollConfig, get_config
from paperdoll.src.core.logging_config import get_logger
from paperdoll.src.palettes.catalog import PaletteCatalog, scan_palette_catalog
from paperdoll.src.palettes.remap import PaletteRemapEngine
from paperdoll.src.palettes.selection import (
    LayerPaletteState,
    PaletteSelection,
    cycle_palette,
    palette_variant_count,
)
from paperdoll.src.parts.catalog import PartCatalog, scan_part_catalog
from paperdoll.src.parts.enums import ALL_LAYERS, LayerCode
from paperdoll.src.parts.equipped import EquippedSelection
from paperdoll.src.schemas.service_results import ErrorCodes, ServiceResult
from paperdoll.src.services.image_store import ImageStore

logger = get_logger(__name__)


@dataclass(frozen=True)
class CatalogSnapshot:
    """Part and palette catalogs built together by one scan."""
    catalog: PartCatalog = field(default_factory=PartCatalog)
    palette_catalog: PaletteCatalog = field(default_factory=PaletteCatalog)
    errors: Tuple[str, ...] = ()
    roots: Tuple[Path, ...] = ()


@dataclass(frozen=True)
class RenderLayer:
    """A single part layer to be rendered."""
    layer: LayerCode
    part_index: int
    part_key: str
    image_path: str
    variant: Optional[int] = None  # None renders the sheet unrecoloured

    def __lt__(self, other: "RenderLayer") -> bool:
        """Sort by layer order."""
        return self.layer.order < other.layer.order


class PaperDollService:
    """
    Paper-doll state for one editing session.

    Single-threaded: every method runs on the caller's logical thread except
    the scan inside rescan_async(), which touches no service state until its
    snapshot is published.
    """

    def __init__(
        self,
        config: Optional[PaperDollConfig] = None,
        image_store: Optional[ImageStore] = None,
        roots: Optional[Sequence[Path]] = None,
    ):
        self.config = config or get_config()
        self.image_store = image_store or ImageStore()
        self._roots = [Path(root) for root in roots] if roots is not None else None

        self._snapshot = CatalogSnapshot()
        self.loaded = False
        self.equipped = EquippedSelection()
        self.layer_palettes = LayerPaletteState()
        self.pending_equipped_keys: Optional[List[str]] = None
        self.remap_engine = PaletteRemapEngine(
            self._snapshot.palette_catalog,
            self.image_store,
            block_width=self.config.palettes.block_width,
            block_height=self.config.palettes.block_height,
        )

    # =========================================================================
    # Catalog lifecycle
    # =========================================================================

    @property
    def catalog(self) -> PartCatalog:
        return self._snapshot.catalog

    @property
    def palette_catalog(self) -> PaletteCatalog:
        return self._snapshot.palette_catalog

    @property
    def load_errors(self) -> List[str]:
        return list(self._snapshot.errors)

    def resolve_roots(self) -> List[Path]:
        """Roots to scan, highest priority first."""
        if self._roots is not None:
            roots = list(self._roots)
            if self.config.assets.root_precedence == "last":
                roots.reverse()
            return roots
        return self.config.assets.candidate_roots()

    def build_catalogs(self, roots: Optional[Iterable[Path]] = None) -> CatalogSnapshot:
        """
        Scan the asset roots into a new snapshot without publishing it.

        Safe to run on a worker thread.
        """
        roots = tuple(Path(root) for root in roots) if roots is not None else tuple(self.resolve_roots())
        scan = scan_part_catalog(roots, prefix=self.config.assets.part_prefix)
        palette_catalog = scan_palette_catalog(roots, folder_name=self.config.palettes.folder_name)
        return CatalogSnapshot(
            catalog=scan.catalog,
            palette_catalog=palette_catalog,
            errors=tuple(scan.errors),
            roots=roots,
        )

    def publish(self, snapshot: CatalogSnapshot) -> None:
        """
        Make a snapshot current.

        Previously equipped parts are carried over by key unless equip keys
        are pending, in which case those win. A carried outfit is applied as
        is, so an outfit the user emptied stays empty across a rescan.
        """
        carried_keys = self.equipped.equipped_keys(self.catalog) if self.loaded else None

        self._snapshot = snapshot
        self.image_store.clear()
        self.remap_engine.set_palette_catalog(snapshot.palette_catalog)
        self.loaded = True

        if self.pending_equipped_keys is None and carried_keys is not None:
            self.equipped.apply_keys(self.catalog, carried_keys)
        else:
            self.finalize_equip()

        logger.info(
            "Catalog published",
            extra={
                "parts": len(snapshot.catalog),
                "palettes": len(snapshot.palette_catalog),
                "skipped": len(snapshot.errors),
            },
        )

    def load(self) -> None:
        """Scan and publish once; later calls are no-ops."""
        if self.loaded:
            return
        self.publish(self.build_catalogs())

    def rescan(self) -> None:
        """Rebuild the catalogs from disk and swap them in."""
        self.publish(self.build_catalogs())

    async def rescan_async(self) -> CatalogSnapshot:
        """
        Rebuild the catalogs on a worker thread, then publish.

        Readers keep seeing the previous catalogs until the scan finishes.
        """
        snapshot = await asyncio.to_thread(self.build_catalogs)
        self.publish(snapshot)
        return snapshot

    # =========================================================================
    # Equip state
    # =========================================================================

    def request_equipped_keys(self, keys: Optional[Iterable[str]]) -> None:
        """
        Queue an outfit to equip.

        Applied immediately when the catalog is loaded, otherwise when it is
        published. An empty list equips the default outfit.
        """
        self.pending_equipped_keys = list(keys) if keys is not None else []
        if self.loaded:
            self.finalize_equip()

    def finalize_equip(self) -> None:
        """Apply pending equip keys, or the default outfit when none are queued."""
        keys = self.pending_equipped_keys
        self.pending_equipped_keys = None
        if keys:
            self.equipped.apply_keys(self.catalog, keys)
        else:
            self.equipped.set_defaults(self.catalog)

    def equipped_keys(self) -> List[str]:
        return self.equipped.equipped_keys(self.catalog)

    def visible_layer_map(self) -> Dict[LayerCode, int]:
        return self.equipped.visible_layer_map(self.catalog)

    def equip_part(self, index: int) -> ServiceResult[str]:
        if not self.loaded:
            return ServiceResult.failure("Parts catalog is still loading", ErrorCodes.CATALOG_NOT_LOADED)
        part = self.catalog.part_at(index)
        if part is None or not self.equipped.equip(self.catalog, index):
            return ServiceResult.failure(f"Unknown part index {index}", ErrorCodes.UNKNOWN_PART)
        return ServiceResult.success_with_data(
            part.part_key, f"Equipped {part.layer.value}: {part.identity.short_label}"
        )

    def cycle_part(self, layer: LayerCode, delta: int) -> ServiceResult[Optional[str]]:
        """
        Step a layer to its next/previous part.

        Returns:
            ServiceResult whose data is the new part key (None when the layer
            was unequipped) and whose message is a status line for the UI
        """
        if not self.loaded:
            return ServiceResult.failure("Parts catalog is still loading", ErrorCodes.CATALOG_NOT_LOADED)
        if not self.catalog.layer_indices(layer):
            return ServiceResult.failure(f"No parts found for {layer.value}", ErrorCodes.UNKNOWN_PART)

        index = self.equipped.cycle_layer(self.catalog, layer, delta)
        if index is None:
            return ServiceResult.success_no_data(f"Unequipped {layer.value}")
        part = self.catalog.parts[index]
        return ServiceResult.success_with_data(
            part.part_key, f"Equipped {layer.value}: {part.identity.short_label}"
        )

    # =========================================================================
    # Palettes
    # =========================================================================

    def palette_variant_count(self, palette_index: int) -> int:
        return palette_variant_count(
            self.palette_catalog,
            self.image_store,
            palette_index,
            self.config.palettes.block_height,
        )

    def cycle_global_palette(self, delta: int) -> ServiceResult[PaletteSelection]:
        result = self._check_palettes()
        if result is not None:
            return result
        current = self.layer_palettes.global_selection or PaletteSelection()
        selection = cycle_palette(
            current, delta, len(self.palette_catalog), self.palette_variant_count
        )
        self.layer_palettes.global_selection = selection
        return ServiceResult.success_with_data(
            selection, f"Palette selected: {self._palette_label(selection)}"
        )

    def cycle_layer_palette(self, layer: LayerCode, delta: int) -> ServiceResult[PaletteSelection]:
        result = self._check_palettes()
        if result is not None:
            return result
        effective = self.layer_palettes.effective(layer)
        current = effective[0] if effective is not None else PaletteSelection()
        selection = cycle_palette(
            current, delta, len(self.palette_catalog), self.palette_variant_count
        )
        self.layer_palettes.set_layer(layer, selection)
        return ServiceResult.success_with_data(
            selection, f"Layer {layer.value} color: {self._palette_label(selection)}"
        )

    def _check_palettes(self) -> Optional[ServiceResult]:
        if not self.loaded:
            return ServiceResult.failure("Palette catalog is still loading", ErrorCodes.CATALOG_NOT_LOADED)
        if not len(self.palette_catalog):
            return ServiceResult.failure("No palettes discovered", ErrorCodes.REMAP_UNAVAILABLE)
        return None

    def _palette_label(self, selection: PaletteSelection) -> str:
        palette = self.palette_catalog.palette_at(selection.palette_index)
        name = palette.display_name if palette is not None else "(none)"
        count = self.palette_variant_count(selection.palette_index)
        return f"{name} ({selection.variant + 1}/{count})"

    # =========================================================================
    # Rendering
    # =========================================================================

    def status_text(self) -> str:
        if not self.loaded:
            return STATUS_SCANNING
        errors = self._snapshot.errors
        if not errors:
            return f"Parts: {len(self.catalog)} discovered"
        return f"Parts: {len(self.catalog)} discovered ({len(errors)} skipped)"

    def render_plan(
        self,
        variant_by_layer: Optional[Dict[LayerCode, Optional[int]]] = None,
    ) -> List[RenderLayer]:
        """
        Layers to draw this frame, back to front.

        Args:
            variant_by_layer: Explicit variant per layer. When omitted the
                layer palette state decides; layers missing from an explicit
                mapping render unrecoloured.

        Returns:
            RenderLayer entries in z-order, each carrying the variant to
            recolour with or None to draw the sheet as-is
        """
        visible = self.visible_layer_map()
        layers = []
        for layer in ALL_LAYERS:
            index = visible.get(layer)
            if index is None:
                continue
            part = self.catalog.part_at(index)
            if part is None:
                continue
            if variant_by_layer is None:
                variant = self.layer_palettes.variant_for(layer)
            else:
                variant = variant_by_layer.get(layer)
            layers.append(
                RenderLayer(
                    layer=layer,
                    part_index=index,
                    part_key=part.part_key,
                    image_path=part.image_path,
                    variant=variant,
                )
            )
        return layers

    def part_surface(self, index: int, variant: Optional[int] = None) -> Optional[pygame.Surface]:
        """
        Get the surface to draw for a part.

        Args:
            index: Part index
            variant: Palette variant, None for the unrecoloured sheet

        Returns:
            The (possibly recoloured) surface, or None if the sheet is
            unavailable
        """
        part = self.catalog.part_at(index)
        if part is None:
            return None
        surface = self.image_store.get_surface(part.absolute_path)
        if surface is None or variant is None:
            return surface
        return self.remap_engine.remap_part(part, surface, variant)


# Singleton instance
_paper_doll_service: Optional[PaperDollService] = None


def get_paper_doll_service() -> PaperDollService:
    """Get or create the paper doll service singleton."""
    global _paper_doll_service
    if _paper_doll_service is None:
        _paper_doll_service = PaperDollService()
    return _paper_doll_service


def reset_paper_doll_service() -> None:
    """Reset the paper doll service singleton (for testing)."""
    global _paper_doll_service
    _paper_doll_service = None
