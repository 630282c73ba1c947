"""
Test fixtures for unit tests.

In-memory catalogs that don't require files on disk.
"""

from typing import Callable

import pytest

from paperdoll.src.parts.catalog import PartCatalog, PartRecord, build_catalog
from paperdoll.src.parts.identity import parse_part_filename

SAMPLE_PART_FILES = [
    "fbas_01body_human_00.png",
    "fbas_02sock_socks_00.png",
    "fbas_03fot1_sandals_01.png",
    "fbas_03fot1_boots_00.png",
    "fbas_07fot2_shoes_00.png",
    "fbas_04lwr1_shorts_00.png",
    "fbas_04lwr1_pants_00.png",
    "fbas_06lwr2_skirt_00.png",
    "fbas_05shrt_tunic_00.png",
    "fbas_13hair_long_00.png",
    "fbas_13hair_bob_00_e.png",
    "fbas_14head_hat_01.png",
    "fbas_14head_headscarf_00b_e.png",
    "fbas_00undr_dress_00.png",
    "fbas_11neck_dress_00.png",
    "fbas_11neck_scarf_00.png",
]


@pytest.fixture
def build_test_catalog() -> Callable[..., PartCatalog]:
    """Factory building a catalog from bare part filenames."""

    def _build(*file_names: str) -> PartCatalog:
        records = [
            PartRecord.from_identity(parse_part_filename(name), f"parts/{name}")
            for name in file_names
        ]
        return build_catalog(records)

    return _build


@pytest.fixture
def sample_catalog(build_test_catalog) -> PartCatalog:
    """A catalog covering every slot, a paired set and exclusive head/hair parts."""
    return build_test_catalog(*SAMPLE_PART_FILES)
