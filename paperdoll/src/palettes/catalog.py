"""
PaletteCatalog - Reference ramp images found under "palettes" folders.

Any .png whose root-relative path is inside a folder named "palettes"
(case-insensitive, at any depth) is a palette. Palettes are sorted by key so
indices are stable across rescans.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from paperdoll.src.core.logging_config import get_logger
from paperdoll.src.services.asset_scanner import walk_roots

from ..constants import PALETTE_FOLDER, PART_EXTENSION

logger = get_logger(__name__)


@dataclass(frozen=True)
class PaletteRecord:
    """
    One palette image.

    Attributes:
        palette_key: Root-relative path with the .png suffix stripped
        image_path: Root-relative, forward-slash path of the image
        source_root: Absolute asset root the image was found under
    """
    palette_key: str
    image_path: str
    source_root: Optional[Path] = None

    @property
    def absolute_path(self) -> Path:
        if self.source_root is None:
            return Path(self.image_path)
        return self.source_root / self.image_path

    @property
    def display_name(self) -> str:
        """File name shown in palette pickers."""
        return Path(self.image_path).name or self.palette_key


@dataclass
class PaletteCatalog:
    """Sorted list of palettes with a key index."""
    palettes: List[PaletteRecord] = field(default_factory=list)
    by_key: Dict[str, int] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.palettes)

    def palette_at(self, index: int) -> Optional[PaletteRecord]:
        if 0 <= index < len(self.palettes):
            return self.palettes[index]
        return None

    def index_by_key(self, key: str) -> Optional[int]:
        return self.by_key.get(key)

    def find_by_key_tail(self, key_tail: str) -> Optional[PaletteRecord]:
        """
        Find the first palette whose key ends with key_tail.

        Matching is case-insensitive and ignores path separator style, so
        "palettes/mana seed 3-color ramps" matches a palette stored under
        any parent folder.
        """
        tail = key_tail.replace("\\", "/").lower()
        for palette in self.palettes:
            if palette.palette_key.replace("\\", "/").lower().endswith(tail):
                return palette
        return None


def is_palette_asset_path(asset_path: str, folder_name: str = PALETTE_FOLDER) -> bool:
    """Check if a root-relative path lies inside a palettes folder."""
    lower = asset_path.lower()
    folder = folder_name.lower()
    return lower.startswith(f"{folder}/") or f"/{folder}/" in lower


def palette_key_from_asset_path(asset_path: str) -> str:
    """Strip the .png suffix (any case) from an asset path."""
    suffix = f".{PART_EXTENSION}"
    if asset_path.lower().endswith(suffix):
        return asset_path[:-len(suffix)]
    return asset_path


def build_palette_catalog(palettes: Iterable[PaletteRecord]) -> PaletteCatalog:
    """Sort palettes by key and index them."""
    ordered = sorted(palettes, key=lambda palette: palette.palette_key)
    by_key = {}
    for index, palette in enumerate(ordered):
        by_key.setdefault(palette.palette_key, index)
    return PaletteCatalog(palettes=ordered, by_key=by_key)


def scan_palette_catalog(
    roots: Iterable[Path],
    folder_name: str = PALETTE_FOLDER,
) -> PaletteCatalog:
    """
    Discover palette images under the given roots.

    Args:
        roots: Asset roots, highest priority first
        folder_name: Folder name marking palette images

    Returns:
        PaletteCatalog sorted by key
    """
    records = []
    for asset in walk_roots(roots):
        if not asset.file_name.lower().endswith(f".{PART_EXTENSION}"):
            continue
        if not is_palette_asset_path(asset.asset_path, folder_name):
            continue
        records.append(
            PaletteRecord(
                palette_key=palette_key_from_asset_path(asset.asset_path),
                image_path=asset.asset_path,
                source_root=asset.root,
            )
        )

    catalog = build_palette_catalog(records)
    logger.info("Palette catalog built", extra={"palettes": len(catalog)})
    return catalog
