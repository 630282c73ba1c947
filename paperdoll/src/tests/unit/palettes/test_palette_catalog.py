"""
Tests for palette discovery.
"""

import pytest

from paperdoll.src.palettes.catalog import (
    PaletteRecord,
    build_palette_catalog,
    is_palette_asset_path,
    palette_key_from_asset_path,
    scan_palette_catalog,
)


class TestPalettePaths:
    """Tests for palette path helpers."""

    @pytest.mark.parametrize(
        "asset_path, expected",
        [
            ("palettes/mana seed 3-color ramps.png", True),
            ("Palettes/skin.png", True),
            ("characters/PALETTES/base ramps/hair.png", True),
            ("characters/palette/hair.png", False),
            ("mypalettes/hair.png", False),
            ("palettes.png", False),
        ],
    )
    def test_is_palette_asset_path(self, asset_path, expected):
        assert is_palette_asset_path(asset_path) == expected

    def test_custom_folder_name(self):
        assert is_palette_asset_path("ramps/a.png", folder_name="ramps")
        assert not is_palette_asset_path("palettes/a.png", folder_name="ramps")

    def test_key_strips_png_suffix(self):
        assert palette_key_from_asset_path("palettes/base ramps/skin.PNG") == "palettes/base ramps/skin"
        assert palette_key_from_asset_path("palettes/readme") == "palettes/readme"


class TestPaletteCatalog:
    """Tests for PaletteCatalog lookups."""

    def test_sorted_by_key(self):
        catalog = build_palette_catalog([
            PaletteRecord("palettes/zeta", "palettes/zeta.png"),
            PaletteRecord("palettes/alpha", "palettes/alpha.png"),
        ])

        assert [p.palette_key for p in catalog.palettes] == ["palettes/alpha", "palettes/zeta"]
        assert catalog.index_by_key("palettes/zeta") == 1
        assert catalog.palette_at(5) is None

    def test_find_by_key_tail(self):
        catalog = build_palette_catalog([
            PaletteRecord("art/Palettes/Mana Seed 3-Color Ramps", "art/Palettes/Mana Seed 3-Color Ramps.png"),
        ])

        found = catalog.find_by_key_tail("palettes/mana seed 3-color ramps")

        assert found is not None
        assert found.display_name == "Mana Seed 3-Color Ramps.png"
        assert catalog.find_by_key_tail("palettes/mana seed hair ramps") is None


class TestScanPaletteCatalog:
    """Tests for scanning palettes from disk."""

    def test_scan(self, asset_root, write_png):
        write_png(asset_root / "palettes" / "b.png")
        write_png(asset_root / "palettes" / "base ramps" / "a.png")
        write_png(asset_root / "characters" / "palettes" / "c.png")
        write_png(asset_root / "characters" / "fbas_01body_human_00.png")
        (asset_root / "palettes" / "notes.txt").write_text("not an image")

        catalog = scan_palette_catalog([asset_root])

        assert [p.palette_key for p in catalog.palettes] == [
            "characters/palettes/c",
            "palettes/b",
            "palettes/base ramps/a",
        ]
        assert all(p.absolute_path.is_file() for p in catalog.palettes)

    def test_first_root_wins(self, tmp_path, write_png):
        local = tmp_path / "local"
        shared = tmp_path / "shared"
        write_png(local / "palettes" / "a.png")
        write_png(shared / "palettes" / "a.png")
        write_png(shared / "palettes" / "b.png")

        catalog = scan_palette_catalog([local, shared])

        assert len(catalog) == 2
        assert catalog.palettes[0].source_root == local.resolve()

    def test_no_palettes(self, asset_root):
        assert len(scan_palette_catalog([asset_root])) == 0
