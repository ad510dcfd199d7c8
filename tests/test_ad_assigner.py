"""
Tests for Ad Assigner

Covers exact-match and prefix slot resolution and the one-pass static fill.
"""

import pytest
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from services.ad_assigner import AdAssigner, StaticAdAssignment


@pytest.fixture
def assigner():
    return AdAssigner()


class TestResolve:
    """Tests for AdAssigner.resolve."""

    def test_sidebar_returns_all_in_order_and_inline_first_only(self, assigner, ad_unit_factory):
        ads = [ad_unit_factory(slot='sidebar_1'), ad_unit_factory(slot='sidebar_2'),
               ad_unit_factory(slot='inline_1')]

        sidebar = assigner.resolve(ads, 'sidebar')
        inline = assigner.resolve(ads, 'inline')

        assert [ad.slot for ad in sidebar] == ['sidebar_1', 'sidebar_2']
        assert inline.slot == 'inline_1'

    def test_inline_returns_first_of_several(self, assigner, ad_unit_factory):
        ads = [ad_unit_factory(slot='inline_2', alt_text='first'),
               ad_unit_factory(slot='inline_1', alt_text='second')]

        assert assigner.resolve(ads, 'inline').alt_text == 'first'

    @pytest.mark.parametrize('placement,slot', [
        ('header', 'banner_top'),
        ('footer', 'banner_footer'),
        ('mobile', 'mobile_banner'),
        ('banner_top', 'banner_top'),
        ('mobile_banner', 'mobile_banner'),
    ])
    def test_exact_slots(self, assigner, ad_unit_factory, placement, slot):
        ads = [ad_unit_factory(slot='inline_1'), ad_unit_factory(slot=slot)]

        assert assigner.resolve(ads, placement).slot == slot

    def test_exact_slot_first_duplicate_wins(self, assigner, ad_unit_factory):
        ads = [ad_unit_factory(slot='banner_top', alt_text='winner'),
               ad_unit_factory(slot='banner_top', alt_text='loser')]

        assert assigner.resolve(ads, 'header').alt_text == 'winner'

    def test_exact_slot_does_not_prefix_match(self, assigner, ad_unit_factory):
        ads = [ad_unit_factory(slot='banner_top_2')]

        assert assigner.resolve(ads, 'header') is None

    def test_missing_ads_are_not_errors(self, assigner):
        assert assigner.resolve([], 'header') is None
        assert assigner.resolve([], 'inline') is None
        assert assigner.resolve([], 'sidebar') == []

    def test_unknown_slot_raises(self, assigner):
        with pytest.raises(ValueError):
            assigner.resolve([], 'popup')


class TestResolveStaticSlots:
    """Tests for AdAssigner.resolve_static_slots."""

    def test_fills_every_static_placement(self, assigner, ad_unit_factory):
        ads = [ad_unit_factory(slot='banner_top'), ad_unit_factory(slot='banner_footer'),
               ad_unit_factory(slot='mobile_banner'), ad_unit_factory(slot='sidebar_1'),
               ad_unit_factory(slot='sidebar_9')]

        assignment = assigner.resolve_static_slots(ads)

        assert assignment.header.slot == 'banner_top'
        assert assignment.footer.slot == 'banner_footer'
        assert assignment.mobile.slot == 'mobile_banner'
        assert [ad.slot for ad in assignment.sidebar] == ['sidebar_1', 'sidebar_9']

    def test_empty_ads(self, assigner):
        assert assigner.resolve_static_slots([]) == StaticAdAssignment()
