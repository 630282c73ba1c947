"""
Asset scanner - recursive, deterministic walk of asset roots.

Thin filesystem collaborator for the part and palette catalogs. Directory
listings are sorted so identical filesystem state always produces identical
catalogs, and unreadable directories are skipped rather than aborting a scan.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Set

from paperdoll.src.core.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class AssetFile:
    """A file found under an asset root."""
    root: Path
    path: Path
    asset_path: str  # root-relative, forward slashes

    @property
    def file_name(self) -> str:
        return self.path.name


def to_asset_path(path: Path, root: Path) -> Optional[str]:
    """
    Get the root-relative, slash-normalized path of a file.

    Returns:
        Path like "images/parts/fbas_01body_human_00.png", or None when the
        file is not under the root
    """
    try:
        relative = path.relative_to(root)
    except ValueError:
        return None
    return relative.as_posix().replace("\\", "/")


def walk_files(root: Path) -> Iterator[AssetFile]:
    """
    Recursively yield every file beneath a root.

    Args:
        root: Directory to walk

    Yields:
        AssetFile entries in sorted (deterministic) order
    """
    try:
        canonical_root = Path(root).resolve(strict=True)
    except (OSError, RuntimeError):
        logger.debug("Skipping missing asset root", extra={"root": str(root)})
        return
    if not canonical_root.is_dir():
        return

    stack: List[Path] = [canonical_root]
    while stack:
        directory = stack.pop()
        try:
            with os.scandir(directory) as entries:
                listing = sorted(entries, key=lambda entry: entry.name)
        except OSError as e:
            logger.debug(
                "Skipping unreadable directory",
                extra={"directory": str(directory), "error": str(e)},
            )
            continue

        subdirectories = []
        for entry in listing:
            try:
                if entry.is_dir():
                    subdirectories.append(Path(entry.path))
                    continue
                if not entry.is_file():
                    continue
            except OSError:
                continue
            path = Path(entry.path)
            asset_path = to_asset_path(path, canonical_root)
            if asset_path is None:
                continue
            yield AssetFile(root=canonical_root, path=path, asset_path=asset_path)

        # Reversed so the stack pops subdirectories in sorted order
        stack.extend(reversed(subdirectories))


def walk_roots(roots: Iterable[Path]) -> Iterator[AssetFile]:
    """
    Walk several roots in priority order, skipping duplicate relative paths.

    The first root containing a given relative path wins; later copies are
    treated as lower priority and ignored.
    """
    seen: Set[str] = set()
    for root in roots:
        for asset in walk_files(root):
            if asset.asset_path in seen:
                logger.debug(
                    "Skipping shadowed asset",
                    extra={"asset_path": asset.asset_path, "root": str(asset.root)},
                )
                continue
            seen.add(asset.asset_path)
            yield asset


def candidate_assets_roots(cwd: Optional[Path] = None) -> List[Path]:
    """
    Discover asset roots relative to a working directory.

    Order: ./assets, ./asset_hander/assets, then the assets folder of the
    working directory and every ancestor. Roots that resolve to the same
    directory are listed once.
    """
    cwd = Path(cwd) if cwd is not None else Path.cwd()
    candidates = [cwd / "assets", cwd / "asset_hander" / "assets"]
    candidates.extend(ancestor / "assets" for ancestor in [cwd, *cwd.parents])

    roots: List[Path] = []
    seen: Set[str] = set()
    for candidate in candidates:
        key = os.path.normcase(os.path.abspath(candidate))
        if key in seen:
            continue
        seen.add(key)
        roots.append(candidate)
    return roots
