"""
Tests for Page Surface

Covers applying render plans, ad overrides and HTML serialization.
"""

import pytest
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from data.models import SortKey
from services.page_surface import PageSurface
from services.renderer import RenderNode, RenderPlan, LoadMoreState, Presentation


def node(key, kind='card', markup=None):
    return RenderNode(kind=kind, key=key, markup=markup or f'<article>{key}</article>')


def plan(mode, *nodes, enabled=True):
    return RenderPlan(mode=mode, nodes=list(nodes), load_more=LoadMoreState(enabled, 'Load More'))


@pytest.fixture
def surface():
    return PageSurface(title='Test Page')


class TestApplyPlan:
    """Tests for PageSurface.apply_plan."""

    def test_replace_then_append(self, surface):
        surface.apply_plan(plan('replace', node('a'), node('b')))
        surface.apply_plan(plan('append', node('c'), enabled=False))

        assert [n.key for n in surface.grid] == ['a', 'b', 'c']
        assert surface.load_more.enabled is False

    def test_replace_clears_previous_nodes(self, surface):
        surface.apply_plan(plan('replace', node('a')))
        surface.apply_plan(plan('replace', node('z')))

        assert [n.key for n in surface.grid] == ['z']

    def test_unknown_mode_raises(self, surface):
        with pytest.raises(ValueError):
            surface.apply_plan(plan('merge', node('a')))

    def test_show_message_clears_grid(self, surface):
        surface.apply_plan(plan('replace', node('a')))

        surface.show_message('<div class="loading">Failed</div>', key='error')

        assert [n.kind for n in surface.grid] == ['message']
        assert surface.load_more.enabled is False

    def test_replace_node(self, surface):
        surface.apply_plan(plan('replace', node('a'), node('b')))

        assert surface.replace_node('b', node('b', markup='<article>new</article>')) is True
        assert surface.grid[1].markup == '<article>new</article>'
        assert surface.replace_node('missing', node('missing')) is False


class TestAdOverrides:
    """Tests for PageSurface.replace_ad and set_ad."""

    def test_static_slot_override(self, surface):
        surface.set_ad('header', '<div>resolved</div>')

        assert surface.replace_ad('header', '<div>host</div>') is True
        assert surface.ad_slots['header'] == '<div>host</div>'

    def test_sidebar_override_replaces_all_units(self, surface):
        surface.set_sidebar(['<div>one</div>', '<div>two</div>'])

        surface.replace_ad('sidebar', '<div>host</div>')

        assert surface.sidebar == ['<div>host</div>']

    def test_inline_override_rewrites_existing_and_future_ads(self, surface):
        surface.apply_plan(plan('replace', node('a'), node('inline-ad-5', kind='placeholder')))

        surface.replace_ad('inline', '<ins>host ad</ins>')
        surface.apply_plan(plan('append', node('b'), node('inline-ad-10', kind='ad', markup='<a>resolved</a>')))

        inline = [n for n in surface.grid if n.key.startswith('inline-ad')]
        assert all('<ins>host ad</ins>' in n.markup for n in inline)
        assert all(n.kind == 'ad' for n in inline)

    def test_unknown_slot_ignored(self, surface, capture_logs):
        assert surface.replace_ad('popup', '<div/>') is False
        assert any('unknown slot' in r.getMessage() for r in capture_logs)

    def test_set_ad_rejects_repeatable_placements(self, surface):
        with pytest.raises(ValueError):
            surface.set_ad('sidebar', '<div/>')


class TestToHtml:
    """Tests for PageSurface.to_html."""

    def test_document_contains_every_insertion_point(self, surface):
        surface.apply_plan(plan('replace', node('a')))
        surface.set_ad('header', '<div>HEADER AD</div>')
        surface.set_ad('footer', '<div>FOOTER AD</div>')
        surface.set_ad('mobile', '<div>MOBILE AD</div>')
        surface.set_sidebar(['<div>SIDE AD</div>'])

        page = surface.to_html()

        for fragment in ('id="contentGrid"', 'id="searchInput"', 'id="categoryFilter"',
                         'id="sortFilter"', 'id="loadMoreBtn"', 'HEADER AD', 'FOOTER AD',
                         'MOBILE AD', 'SIDE AD', '<article>a</article>', '<title>Test Page</title>'):
            assert fragment in page

    def test_controls_reflect_state_and_escape(self, surface):
        surface.set_categories(['News', '<Tech>'])
        surface.set_controls('"quoted"', '<Tech>', SortKey.POPULAR)

        page = surface.to_html()

        assert 'value="&quot;quoted&quot;"' in page
        assert '<option value="&lt;Tech&gt;" selected>&lt;Tech&gt;</option>' in page
        assert '<option value="popular" selected>' in page

    def test_presentation_applied(self, surface):
        surface.apply_presentation(Presentation(
            company_name='Acme',
            logo_markup='<img src="logo.png" class="logo-image">',
            css_variables={'--primary-color': '#ff0000'},
            tagline='Fresh <daily>',
            social_links={'twitter': 'https://twitter.com/acme'}
        ))

        page = surface.to_html()

        assert '--primary-color: #ff0000' in page
        assert '<img src="logo.png" class="logo-image">' in page
        assert 'Fresh &lt;daily&gt;' in page
        assert 'href="https://twitter.com/acme"' in page

    def test_load_more_disabled_attribute(self, surface):
        surface.apply_plan(plan('replace', node('a'), enabled=False))

        assert '<button id="loadMoreBtn" class="load-more" disabled>' in surface.to_html()
