"""
Tests for EquippedSelection equip rules.

Tests cover:
1. Default outfit seeding
2. Slot exclusivity across layers
3. Paired outfit sets
4. Hat/hair visibility
5. Key round trips for persistence
6. Prev/next cycling
"""

import pytest

from paperdoll.src.parts.enums import ALL_LAYERS, LayerCode
from paperdoll.src.parts.equipped import EquippedSelection


@pytest.fixture
def selection(sample_catalog) -> EquippedSelection:
    """Selection seeded with the default outfit."""
    selection = EquippedSelection()
    selection.set_defaults(sample_catalog)
    return selection


def key_map(selection, catalog):
    return {layer: catalog.parts[index].part_key for layer, index in selection.by_layer.items()}


# =============================================================================
# Defaults
# =============================================================================

class TestSetDefaults:
    """Tests for the default outfit."""

    def test_first_part_of_each_default_layer(self, selection, sample_catalog):
        assert selection.equipped_keys(sample_catalog) == [
            "01body/human/00",
            "02sock/socks/00",
            "03fot1/boots/00",
            "04lwr1/pants/00",
            "05shrt/tunic/00",
            "13hair/bob/00/e",
        ]

    def test_missing_layers_skipped(self, build_test_catalog):
        catalog = build_test_catalog("fbas_01body_human_00.png", "fbas_14head_hat_01.png")
        selection = EquippedSelection()
        selection.set_defaults(catalog)

        assert selection.equipped_keys(catalog) == ["01body/human/00"]

    def test_defaults_replace_existing(self, selection, sample_catalog):
        selection.equip(sample_catalog, sample_catalog.index_by_key("14head/hat/01"))
        selection.set_defaults(sample_catalog)

        assert selection.get(LayerCode.HEAD14) is None

    def test_empty_catalog(self, build_test_catalog):
        selection = EquippedSelection()
        selection.set_defaults(build_test_catalog())
        assert len(selection) == 0


# =============================================================================
# Equip Rules
# =============================================================================

class TestEquip:
    """Tests for equip() slot and pairing rules."""

    def test_out_of_range_is_noop(self, selection, sample_catalog):
        before = dict(selection.by_layer)

        assert selection.equip(sample_catalog, 999) is False
        assert selection.equip(sample_catalog, -1) is False
        assert selection.by_layer == before

    def test_footwear_slot_spans_layers(self, selection, sample_catalog):
        """Equipping outer footwear removes inner footwear."""
        shoes = sample_catalog.index_by_key("07fot2/shoes/00")

        assert selection.equip(sample_catalog, shoes)
        assert selection.get(LayerCode.FOT207) == shoes
        assert selection.get(LayerCode.FOT103) is None

    def test_lower_slot_spans_layers(self, selection, sample_catalog):
        skirt = sample_catalog.index_by_key("06lwr2/skirt/00")
        selection.equip(sample_catalog, skirt)

        assert selection.get(LayerCode.LWR206) == skirt
        assert selection.get(LayerCode.LWR104) is None

        shorts = sample_catalog.index_by_key("04lwr1/shorts/00")
        selection.equip(sample_catalog, shorts)

        assert selection.get(LayerCode.LWR104) == shorts
        assert selection.get(LayerCode.LWR206) is None

    def test_slotless_layers_co_equip(self, selection, sample_catalog):
        scarf = sample_catalog.index_by_key("11neck/scarf/00")
        selection.equip(sample_catalog, scarf)

        assert selection.get(LayerCode.NECK11) == scarf
        assert selection.get(LayerCode.SHRT05) is not None
        assert len(selection) == 7

    def test_same_layer_replaces(self, selection, sample_catalog):
        long_hair = sample_catalog.index_by_key("13hair/long/00")
        selection.equip(sample_catalog, long_hair)
        assert selection.get(LayerCode.HAIR13) == long_hair

    def test_paired_set_equips_all_members(self, selection, sample_catalog):
        selection.equip(sample_catalog, sample_catalog.index_by_key("00undr/dress/00"))

        assert selection.get(LayerCode.UNDR00) == sample_catalog.index_by_key("00undr/dress/00")
        assert selection.get(LayerCode.NECK11) == sample_catalog.index_by_key("11neck/dress/00")

    def test_paired_set_from_either_member(self, sample_catalog):
        selection = EquippedSelection()
        selection.equip(sample_catalog, sample_catalog.index_by_key("11neck/dress/00"))

        assert selection.get(LayerCode.UNDR00) == sample_catalog.index_by_key("00undr/dress/00")

    def test_unequip(self, selection, sample_catalog):
        body = selection.get(LayerCode.BODY01)

        assert selection.unequip(LayerCode.BODY01) == body
        assert selection.get(LayerCode.BODY01) is None
        assert selection.unequip(LayerCode.BODY01) is None


# =============================================================================
# Visibility
# =============================================================================

class TestVisibleLayerMap:
    """Tests for hat/hair visibility."""

    def test_exclusive_hat_hides_hair(self, selection, sample_catalog):
        selection.equip(sample_catalog, sample_catalog.index_by_key("13hair/long/00"))
        selection.equip(sample_catalog, sample_catalog.index_by_key("14head/headscarf/00b/e"))

        visible = selection.visible_layer_map(sample_catalog)

        assert LayerCode.HAIR13 not in visible
        assert LayerCode.HEAD14 in visible
        # Equip map keeps the hair entry
        assert selection.get(LayerCode.HAIR13) is not None

    def test_exclusive_hair_hidden_under_any_hat(self, selection, sample_catalog):
        """Default hair is the exclusive bob."""
        selection.equip(sample_catalog, sample_catalog.index_by_key("14head/hat/01"))

        assert LayerCode.HAIR13 not in selection.visible_layer_map(sample_catalog)

    def test_plain_hair_under_plain_hat_visible(self, selection, sample_catalog):
        selection.equip(sample_catalog, sample_catalog.index_by_key("13hair/long/00"))
        selection.equip(sample_catalog, sample_catalog.index_by_key("14head/hat/01"))

        visible = selection.visible_layer_map(sample_catalog)

        assert LayerCode.HAIR13 in visible
        assert visible == selection.by_layer

    def test_exclusive_hair_without_hat_visible(self, selection, sample_catalog):
        assert LayerCode.HAIR13 in selection.visible_layer_map(sample_catalog)

    def test_visible_map_is_a_copy(self, selection, sample_catalog):
        visible = selection.visible_layer_map(sample_catalog)
        visible.clear()

        assert len(selection) == 6


# =============================================================================
# Persistence
# =============================================================================

class TestEquippedKeys:
    """Tests for key output and re-application."""

    def test_keys_in_layer_order(self, sample_catalog):
        selection = EquippedSelection()
        selection.equip(sample_catalog, sample_catalog.index_by_key("14head/hat/01"))
        selection.equip(sample_catalog, sample_catalog.index_by_key("01body/human/00"))
        selection.equip(sample_catalog, sample_catalog.index_by_key("05shrt/tunic/00"))

        assert selection.equipped_keys(sample_catalog) == [
            "01body/human/00",
            "05shrt/tunic/00",
            "14head/hat/01",
        ]

    def test_round_trip(self, selection, sample_catalog):
        selection.equip(sample_catalog, sample_catalog.index_by_key("00undr/dress/00"))
        selection.equip(sample_catalog, sample_catalog.index_by_key("14head/headscarf/00b/e"))
        selection.equip(sample_catalog, sample_catalog.index_by_key("07fot2/shoes/00"))

        restored = EquippedSelection()
        restored.apply_keys(sample_catalog, selection.equipped_keys(sample_catalog))

        assert key_map(restored, sample_catalog) == key_map(selection, sample_catalog)

    def test_round_trip_for_every_single_part(self, sample_catalog):
        for index in range(len(sample_catalog)):
            selection = EquippedSelection()
            selection.equip(sample_catalog, index)

            restored = EquippedSelection()
            restored.apply_keys(sample_catalog, selection.equipped_keys(sample_catalog))

            assert restored.by_layer == selection.by_layer

    def test_round_trip_after_swapping_paired_member(self, build_test_catalog):
        """A part swapped in over one half of a paired set survives a reload."""
        catalog = build_test_catalog(
            "fbas_00undr_dress_00.png",
            "fbas_11neck_dress_00.png",
            "fbas_00undr_slip_00.png",
        )
        selection = EquippedSelection()
        selection.equip(catalog, catalog.index_by_key("00undr/dress/00"))
        selection.equip(catalog, catalog.index_by_key("00undr/slip/00"))
        keys = selection.equipped_keys(catalog)
        assert keys == ["00undr/slip/00", "11neck/dress/00"]

        restored = EquippedSelection()
        restored.apply_keys(catalog, keys)

        assert restored.equipped_keys(catalog) == keys
        assert restored.by_layer == selection.by_layer

    def test_unknown_keys_ignored(self, sample_catalog):
        selection = EquippedSelection()
        selection.apply_keys(sample_catalog, ["01body/human/00", "99gone/thing/00", "14head/hat/01"])

        assert selection.equipped_keys(sample_catalog) == ["01body/human/00", "14head/hat/01"]

    def test_apply_keys_clears_first(self, selection, sample_catalog):
        selection.apply_keys(sample_catalog, [])
        assert len(selection) == 0

    def test_every_layer_enumerated(self):
        assert len(set(ALL_LAYERS)) == 16


# =============================================================================
# Cycling
# =============================================================================

class TestCycleLayer:
    """Tests for prev/next part cycling."""

    def test_forward_wraps_through_unequipped(self, selection, sample_catalog):
        boots = sample_catalog.index_by_key("03fot1/boots/00")
        sandals = sample_catalog.index_by_key("03fot1/sandals/01")

        assert selection.get(LayerCode.FOT103) == boots
        assert selection.cycle_layer(sample_catalog, LayerCode.FOT103, 1) == sandals
        assert selection.cycle_layer(sample_catalog, LayerCode.FOT103, 1) is None
        assert selection.get(LayerCode.FOT103) is None
        assert selection.cycle_layer(sample_catalog, LayerCode.FOT103, 1) == boots

    def test_backward_wraps_through_unequipped(self, selection, sample_catalog):
        boots = sample_catalog.index_by_key("03fot1/boots/00")
        sandals = sample_catalog.index_by_key("03fot1/sandals/01")

        assert selection.cycle_layer(sample_catalog, LayerCode.FOT103, -1) is None
        assert selection.cycle_layer(sample_catalog, LayerCode.FOT103, -1) == sandals
        assert selection.cycle_layer(sample_catalog, LayerCode.FOT103, -1) == boots

    def test_cycle_applies_slot_rules(self, selection, sample_catalog):
        shoes = sample_catalog.index_by_key("07fot2/shoes/00")

        assert selection.cycle_layer(sample_catalog, LayerCode.FOT207, 1) == shoes
        assert selection.get(LayerCode.FOT103) is None

    def test_empty_layer_is_noop(self, selection, sample_catalog):
        before = dict(selection.by_layer)

        assert selection.cycle_layer(sample_catalog, LayerCode.OVER15, 1) is None
        assert selection.by_layer == before
