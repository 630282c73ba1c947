#!/usr/bin/env python3
"""
Paper-doll Catalog Inspector

Scans asset roots the same way the editor does and prints what was found.

Usage:
    python scripts/inspect_catalog.py [root ...] [--errors] [--sets]

With no roots, the configured roots (paperdoll_config.yml or
PAPERDOLL_ASSET_ROOTS) are used, falling back to the assets folders around
the working directory.

Exit status is 0 when at least one part was found, 1 otherwise.
"""

import sys
from pathlib import Path
from typing import List

# Get project root (parent of scripts directory)
SCRIPT_DIR = Path(__file__).parent.resolve()
PROJECT_ROOT = SCRIPT_DIR.parent
sys.path.insert(0, str(PROJECT_ROOT))

from paperdoll.src.core.config import get_config
from paperdoll.src.core.logging_config import setup_logging
from paperdoll.src.parts.catalog import set_layers
from paperdoll.src.services.paper_doll_service import CatalogSnapshot, PaperDollService


def print_header(text: str) -> None:
    """Print a formatted header."""
    print()
    print("=" * 60)
    print(f"  {text}")
    print("=" * 60)
    print()


def print_layers(snapshot: CatalogSnapshot) -> None:
    catalog = snapshot.catalog
    for layer in catalog.layers():
        indices = catalog.layer_indices(layer)
        print(f"  {layer.value:<8} {len(indices):>4} parts")


def print_sets(snapshot: CatalogSnapshot) -> None:
    """Print every outfit set that spans more than one layer."""
    catalog = snapshot.catalog
    for set_key in sorted(catalog.sets, key=lambda key: (key.name, key.version, key.palette or "")):
        layers = set_layers(catalog, set_key)
        if len(layers) < 2:
            continue
        paired = " (paired)" if catalog.is_paired_required(set_key) else ""
        codes = ", ".join(layer.value for layer in layers)
        print(f"  {set_key.name} v{set_key.version:02d}{set_key.palette or ''}{paired}: {codes}")


def print_palettes(snapshot: CatalogSnapshot) -> None:
    for palette in snapshot.palette_catalog.palettes:
        print(f"  {palette.palette_key}")


def main(argv: List[str]) -> int:
    """
    Scan and report.

    Returns:
        0 on success, 1 when no parts were discovered.
    """
    show_errors = "--errors" in argv
    show_sets = "--sets" in argv
    roots = [Path(arg) for arg in argv if not arg.startswith("--")]

    config = get_config()
    setup_logging(config.debug.log_level, config.debug.environment)
    service = PaperDollService(config=config, roots=roots or None)

    print_header("Paper-doll Catalog")
    scan_roots = service.resolve_roots()
    print("Roots (highest priority first):")
    for root in scan_roots:
        marker = "" if root.is_dir() else " (missing)"
        print(f"  {root}{marker}")

    snapshot = service.build_catalogs(scan_roots)
    service.publish(snapshot)

    print()
    print(service.status_text())
    print()
    print("Layers:")
    print_layers(snapshot)

    if show_sets:
        print()
        print("Outfit sets:")
        print_sets(snapshot)

    print()
    print(f"Palettes: {len(snapshot.palette_catalog)}")
    print_palettes(snapshot)

    if show_errors and snapshot.errors:
        print()
        print("Skipped files:")
        for error in snapshot.errors:
            print(f"  {error}")

    print()
    print("Default outfit:")
    for key in service.equipped_keys():
        print(f"  {key}")
    print()

    return 0 if len(snapshot.catalog) else 1


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
