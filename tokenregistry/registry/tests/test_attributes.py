"""
Tests for color and icon derivation.
"""

from dataclasses import replace

import pytest

from conftest import BUSD, CAKE, PALETTE, WBNB, ZERO
from tokenregistry.registry.attributes import AttributeDeriver, IconSources, compute_color
from tokenregistry.registry.models import NetworkData

ASSETS = "https://assets.example/registry"
COMMUNITY = "https://community.example/blockchains"

ONE = "0x0000000000000000000000000000000000000001"


@pytest.fixture
def deriver(bsc_network):
    data = NetworkData(color_overrides={BUSD: "#123456"}, palette=tuple(PALETTE))
    icons = IconSources(local=frozenset({CAKE}), community=frozenset({CAKE, WBNB}))
    return AttributeDeriver(bsc_network, data, icons, ASSETS + "/", COMMUNITY)


class TestComputeColor:
    """Palette selection from address digits."""

    def test_zero_address_uses_first_color(self):
        assert compute_color(ZERO, PALETTE) == PALETTE[0]

    def test_digit_sum_modulo_palette(self):
        assert compute_color(ONE, PALETTE) == PALETTE[1]
        # a + b = 21
        assert compute_color("0xab", PALETTE) == PALETTE[21 % len(PALETTE)]
        assert compute_color("0xAB", PALETTE) == compute_color("0xab", PALETTE)

    def test_empty_palette(self):
        assert compute_color(CAKE, []) is None

    def test_deterministic(self):
        assert compute_color(CAKE, PALETTE) == compute_color(CAKE, PALETTE)


class TestAttributeDeriver:
    """Derived color and icon attributes."""

    def test_color_override_wins(self, deriver):
        assert deriver.color(BUSD) == "#123456"
        assert compute_color(BUSD, PALETTE) in PALETTE

    def test_computed_color(self, deriver):
        assert deriver.color(ZERO) == PALETTE[0]

    def test_color_disabled_network(self, deriver, bsc_network):
        deriver.network = replace(bsc_network, color_enabled=False)
        assert deriver.color(BUSD) is None
        assert deriver.color(ZERO) is None

    def test_local_asset_beats_community(self, deriver):
        assert deriver.logo_url(CAKE) == f"{ASSETS}/assets/56/{CAKE}.png"

    def test_community_icon(self, deriver):
        assert deriver.logo_url(WBNB) == f"{COMMUNITY}/smartchain/assets/{WBNB}/logo.png"

    def test_no_icon(self, deriver):
        attributes = deriver.derive(BUSD)
        assert attributes.logo_url is None
        assert attributes.has_icon is False

    def test_has_icon(self, deriver):
        assert deriver.derive(WBNB).has_icon is True

    def test_community_icon_needs_community_chain(self, deriver, bsc_network):
        deriver.network = replace(bsc_network, community_chain=None)
        assert deriver.logo_url(WBNB) is None

    def test_native(self, deriver):
        attributes = deriver.native()
        assert attributes.logo_url == f"{ASSETS}/assets/56/native.png"
        assert attributes.has_icon is True
        assert attributes.color is None
