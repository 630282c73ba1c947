"""
Shared test fixtures.

Image fixtures are real PNG files written with pygame into tmp_path, so the
scanner, image store and remap engine run against actual files.
"""

from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import pygame
import pytest

from paperdoll.src.core.config import AssetsConfig, PaperDollConfig
from paperdoll.src.palettes.ramps import RAMP_SPECS
from paperdoll.src.tests.image_helpers import BASE_COLORS, Color, variant_color


@pytest.fixture
def write_png() -> Callable[..., Path]:
    """Factory writing a PNG filled with one colour, or with explicit pixels."""

    def _write(
        path: Path,
        size: Tuple[int, int] = (4, 4),
        fill: Color = (0, 0, 0, 0),
        pixels: Optional[Dict[Tuple[int, int], Color]] = None,
    ) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        surface = pygame.Surface(size, pygame.SRCALPHA)
        surface.fill(fill)
        for position, color in (pixels or {}).items():
            surface.set_at(position, color)
        pygame.image.save(surface, str(path))
        return path

    return _write


@pytest.fixture
def write_ramp(write_png) -> Callable[..., Path]:
    """
    Factory writing a ramp image.

    Each entry of `bands` is one variant row of swatch colours; swatch i of
    band v fills the 2x2 block at (2i, 2v).
    """

    def _write(root: Path, key: str, bands: Sequence[Sequence[Color]]) -> Path:
        width = max(len(band) for band in bands) * 2
        height = len(bands) * 2
        pixels = {}
        for v, band in enumerate(bands):
            for i, color in enumerate(band):
                for dx in range(2):
                    for dy in range(2):
                        pixels[(i * 2 + dx, v * 2 + dy)] = tuple(color[:3]) + (255,)
        return write_png(root / f"{key}.png", size=(width, height), pixels=pixels)

    return _write


@pytest.fixture
def write_reference_ramps(write_ramp) -> Callable[..., None]:
    """
    Factory writing every reference ramp image needed by the given suffixes.

    Base images hold BASE_COLORS in their single band. Variant images hold
    `variants` bands of variant_color().
    """

    def _write(root: Path, suffixes: Sequence[str] = ("a", "b", "c", "d", "f"), variants: int = 3) -> None:
        widths: Dict[str, int] = {}
        targets: Dict[str, int] = {}
        for suffix in suffixes:
            for spec in RAMP_SPECS[suffix]:
                source_width = spec.source_x // 2 + spec.source_count
                widths[spec.source_key] = max(widths.get(spec.source_key, 0), source_width)
                target_width = spec.target_x // 2 + spec.target_count
                targets[spec.target_key] = max(targets.get(spec.target_key, 0), target_width)

        for key, width in widths.items():
            write_ramp(root, key, [BASE_COLORS[:width]])
        for key, width in targets.items():
            bands = [[variant_color(i, v) for i in range(width)] for v in range(variants)]
            write_ramp(root, key, bands)

    return _write


@pytest.fixture
def asset_root(tmp_path) -> Path:
    root = tmp_path / "assets"
    root.mkdir()
    return root


@pytest.fixture
def make_parts(write_png) -> Callable[..., List[Path]]:
    """Factory writing blank part sheets by filename under root/parts."""

    def _make(root: Path, *file_names: str, folder: str = "parts") -> List[Path]:
        return [write_png(root / folder / name) for name in file_names]

    return _make


@pytest.fixture
def paperdoll_config(asset_root) -> PaperDollConfig:
    """Configuration scanning only the temporary asset root."""
    return PaperDollConfig(assets=AssetsConfig(roots=[str(asset_root)]))
