"""
PartCatalog - Indexed collection of every discovered part sheet.

The catalog owns the list of PartRecords plus three derived indexes that are
always built together by build_catalog():

- by_key: part key -> index
- by_layer: layer -> indices, sorted in browsing/cycling order
- sets: outfit set -> indices of every layer variant sharing the identity

Catalogs are treated as immutable once built. A rescan builds a new catalog
and swaps it in; nothing is updated in place.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple

from paperdoll.src.core.logging_config import get_logger
from paperdoll.src.services.asset_scanner import walk_roots

from ..constants import PART_PREFIX
from ..schemas.service_results import ScanResult
from .enums import PAIRED_LAYERS, LayerCode, Slot, slot_for_layer
from .identity import (
    OutfitSetKey,
    PartFilenameError,
    PartIdentity,
    format_part_key,
    parse_part_filename,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class PartRecord:
    """
    One catalog entry.

    Attributes:
        part_key: Stable key like "14head/headscarf/00b/e"
        identity: Parsed filename identity
        slot: Mutual-exclusion slot, None for freely co-equipped layers
        image_path: Root-relative, forward-slash path of the sheet
        source_root: Absolute asset root the sheet was found under
    """
    part_key: str
    identity: PartIdentity
    slot: Optional[Slot] = None
    image_path: str = ""
    source_root: Optional[Path] = None

    @property
    def layer(self) -> LayerCode:
        return self.identity.layer

    @property
    def set_key(self) -> OutfitSetKey:
        return self.identity.set_key

    @property
    def absolute_path(self) -> Path:
        """Filesystem path of the sheet, for image loading."""
        if self.source_root is None:
            return Path(self.image_path)
        return self.source_root / self.image_path

    @classmethod
    def from_identity(
        cls,
        identity: PartIdentity,
        image_path: str,
        source_root: Optional[Path] = None,
    ) -> "PartRecord":
        """Create a record, deriving the key and slot from the identity."""
        return cls(
            part_key=format_part_key(identity),
            identity=identity,
            slot=slot_for_layer(identity.layer),
            image_path=image_path,
            source_root=source_root,
        )


@dataclass
class PartCatalog:
    """
    Queryable index over every discovered part.

    Instances are produced by build_catalog(); the indexes are never edited
    individually.
    """
    parts: List[PartRecord] = field(default_factory=list)
    by_key: Dict[str, int] = field(default_factory=dict)
    by_layer: Dict[LayerCode, List[int]] = field(default_factory=dict)
    sets: Dict[OutfitSetKey, List[int]] = field(default_factory=dict)
    paired_required_sets: FrozenSet[OutfitSetKey] = frozenset()

    def __len__(self) -> int:
        return len(self.parts)

    def part_at(self, index: int) -> Optional[PartRecord]:
        """Get a part by index, None when out of range."""
        if 0 <= index < len(self.parts):
            return self.parts[index]
        return None

    def index_by_key(self, key: str) -> Optional[int]:
        return self.by_key.get(key)

    def layer_indices(self, layer: LayerCode) -> Sequence[int]:
        """Indices of a layer's parts in cycling order (empty when none)."""
        return self.by_layer.get(layer, ())

    def set_members(self, set_key: OutfitSetKey) -> Sequence[int]:
        return self.sets.get(set_key, ())

    def is_paired_required(self, set_key: OutfitSetKey) -> bool:
        return set_key in self.paired_required_sets

    def layers(self) -> List[LayerCode]:
        """Layers that have at least one part, in z-order."""
        return [layer for layer in LayerCode if layer in self.by_layer]


def build_catalog(parts: Iterable[PartRecord]) -> PartCatalog:
    """
    Build a catalog and all of its indexes from a list of records.

    Args:
        parts: Records in discovery order; their positions become indices

    Returns:
        A fully indexed PartCatalog
    """
    parts = list(parts)
    by_key: Dict[str, int] = {}
    by_layer: Dict[LayerCode, List[int]] = {}
    sets: Dict[OutfitSetKey, List[int]] = {}

    for index, part in enumerate(parts):
        by_key.setdefault(part.part_key, index)
        by_layer.setdefault(part.layer, []).append(index)
        sets.setdefault(part.set_key, []).append(index)

    for indices in by_layer.values():
        indices.sort(key=lambda index: parts[index].identity.sort_key())

    paired = set()
    for set_key, indices in sets.items():
        layers = {parts[index].layer for index in indices}
        if all(layer in layers for layer in PAIRED_LAYERS):
            paired.add(set_key)

    return PartCatalog(
        parts=parts,
        by_key=by_key,
        by_layer=by_layer,
        sets=sets,
        paired_required_sets=frozenset(paired),
    )


def scan_part_catalog(
    roots: Iterable[Path],
    prefix: str = PART_PREFIX,
) -> ScanResult[PartCatalog]:
    """
    Discover part sheets under the given roots and build a catalog.

    Roots are scanned in order and the first occurrence of a root-relative
    path wins. Malformed filenames are recorded in the result's errors and
    the scan continues.

    Args:
        roots: Asset roots, highest priority first
        prefix: Only files whose name starts with this are considered

    Returns:
        ScanResult holding the catalog and per-file error strings
    """
    records: List[PartRecord] = []
    errors: List[str] = []
    seen_keys = set()

    for asset in walk_roots(roots):
        if not asset.file_name.startswith(prefix):
            continue
        try:
            identity = parse_part_filename(asset.file_name)
        except PartFilenameError as e:
            errors.append(f"{asset.path}: {e.reason}")
            continue
        record = PartRecord.from_identity(identity, asset.asset_path, source_root=asset.root)
        if record.part_key in seen_keys:
            # Same filename in two folders of one root
            logger.debug(
                "Skipping duplicate part key",
                extra={"part_key": record.part_key, "asset_path": asset.asset_path},
            )
            continue
        seen_keys.add(record.part_key)
        records.append(record)

    catalog = build_catalog(records)
    if errors:
        logger.warning(
            "Skipped malformed part filenames",
            extra={"skipped": len(errors), "parts": len(catalog)},
        )
    if not catalog.parts:
        logger.warning("Part catalog built with zero parts")
    else:
        logger.info(
            "Part catalog built",
            extra={"parts": len(catalog), "layers": len(catalog.by_layer), "sets": len(catalog.sets)},
        )
    return ScanResult(catalog=catalog, errors=errors)


def set_layers(catalog: PartCatalog, set_key: OutfitSetKey) -> Tuple[LayerCode, ...]:
    """Layers occupied by an outfit set, in z-order."""
    layers = {catalog.parts[index].layer for index in catalog.set_members(set_key)}
    return tuple(layer for layer in LayerCode if layer in layers)
