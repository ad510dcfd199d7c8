"""
Shared Test Fixtures for the Content Browser

This module provides common fixtures used across all test modules.
Fixtures include HTTP response mocks, log capture, a controllable timer
for debounce tests, and factories for payload documents and data objects.
"""

import pytest
from unittest.mock import MagicMock, patch
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any, List
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


FIXED_NOW = datetime(2026, 10, 16, 12, 0, 0, tzinfo=timezone.utc)


# =============================================================================
# Clock Fixtures
# =============================================================================

@pytest.fixture
def fixed_now():
    """A fixed 'now' so relative date formatting is deterministic."""
    return FIXED_NOW


# =============================================================================
# Logging Fixtures
# =============================================================================

@pytest.fixture
def capture_logs():
    """
    Capture log messages for assertion in tests.

    Application loggers propagate to the root logger, so a handler on the
    root logger sees every record.

    Returns:
        list: A list that will contain captured log records.
    """
    import logging

    class LogCapture(logging.Handler):
        def __init__(self):
            super().__init__()
            self.records = []

        def emit(self, record):
            self.records.append(record)

    handler = LogCapture()
    handler.setLevel(logging.DEBUG)

    app_logger = logging.getLogger("content_browser")
    original_app_level = app_logger.level
    app_logger.setLevel(logging.DEBUG)

    root_logger = logging.getLogger()
    original_level = root_logger.level
    root_logger.setLevel(logging.DEBUG)
    root_logger.addHandler(handler)

    yield handler.records

    root_logger.removeHandler(handler)
    root_logger.setLevel(original_level)
    app_logger.setLevel(original_app_level)


# =============================================================================
# HTTP Response Fixtures
# =============================================================================

@pytest.fixture
def mock_http_response():
    """
    Factory fixture for creating mock HTTP responses.

    Usage:
        def test_http_request(mock_http_response):
            response = mock_http_response(status_code=200, json_data=[{'id': 1}])

    Returns:
        callable: A factory function for creating mock responses.
    """
    def _create_response(
        status_code: int = 200,
        json_data: Any = None,
        text: str = '',
        url: str = 'https://example.com/api/posts'
    ) -> MagicMock:
        import json

        mock_response = MagicMock()
        mock_response.status_code = status_code
        mock_response.url = url
        mock_response.ok = 200 <= status_code < 300
        mock_response.text = text or (json.dumps(json_data) if json_data is not None else '')

        if json_data is not None:
            mock_response.json.return_value = json_data
        else:
            mock_response.json.side_effect = ValueError("No JSON object could be decoded")

        return mock_response

    return _create_response


@pytest.fixture
def mock_requests(mock_http_response):
    """
    Mock requests.get for data source tests.

    Returns:
        MagicMock: The patched requests.get with a response factory attached.
    """
    with patch('data.sources.requests.get') as mock_get:
        mock_get.response = mock_http_response
        yield mock_get


# =============================================================================
# Timer Fixtures
# =============================================================================

class FakeTimer:
    """Stand-in for threading.Timer that only fires when told to."""

    def __init__(self, interval, function):
        self.interval = interval
        self.function = function
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        if not self.cancelled:
            self.function()


@pytest.fixture
def fake_timers():
    """
    Factory that records every FakeTimer it creates.

    Usage:
        def test_debounce(fake_timers):
            debouncer = Debouncer(func, 0.3, timer_factory=fake_timers)
            debouncer("a")
            fake_timers.created[-1].fire()
    """
    class _Factory:
        def __init__(self):
            self.created: List[FakeTimer] = []

        def __call__(self, interval, function):
            timer = FakeTimer(interval, function)
            self.created.append(timer)
            return timer

        @property
        def last(self) -> FakeTimer:
            return self.created[-1]

    return _Factory()


# =============================================================================
# Payload Factories
# =============================================================================

@pytest.fixture
def item_payload_factory():
    """
    Factory fixture for raw item dictionaries as the data source returns them.

    Returns:
        callable: A factory producing item dictionaries.
    """
    def _create_item(
        id: Any = 1,
        title: str = 'Test Article',
        description: str = 'A test description.',
        category: str = 'News',
        date: Optional[str] = '2026-10-10T09:00:00Z',
        views: Any = 100,
        thumbnail: str = 'https://example.com/thumb.jpg',
        link: str = 'https://example.com/article',
        **kwargs
    ) -> Dict[str, Any]:
        item = {
            'id': id,
            'title': title,
            'description': description,
            'category': category,
            'date': date,
            'views': views,
            'thumbnail': thumbnail,
            'link': link,
        }
        item.update(kwargs)
        return item

    return _create_item


@pytest.fixture
def sample_items(item_payload_factory):
    """Five raw items across three categories with distinct dates and views."""
    return [
        item_payload_factory(id=1, title='Python Tips', description='Writing idiomatic code',
                             category='Tech', date='2026-10-01T10:00:00Z', views=500),
        item_payload_factory(id=2, title='Market Update', description='Stocks rally again',
                             category='Business', date='2026-10-05T10:00:00Z', views=1500),
        item_payload_factory(id=3, title='Garden Notes', description='Autumn planting with python pots',
                             category='Lifestyle', date='2026-10-03T10:00:00Z', views=500),
        item_payload_factory(id=4, title='AI Roundup', description='This week in models',
                             category='Tech', date='2026-10-07T10:00:00Z', views=2500),
        item_payload_factory(id=5, title='Quarterly Results', description='Earnings season',
                             category='Business', date='2026-10-02T10:00:00Z', views=50),
    ]


@pytest.fixture
def sample_ads():
    """Raw ads covering every slot family."""
    return [
        {'slot': 'banner_top', 'image_url': 'https://ads.example.com/top.png',
         'click_url': 'https://ads.example.com/top', 'alt_text': 'Top banner'},
        {'slot': 'sidebar_1', 'image_url': 'https://ads.example.com/s1.png',
         'click_url': 'https://ads.example.com/s1', 'alt_text': 'Sidebar one'},
        {'slot': 'inline_1', 'image_url': 'https://ads.example.com/i1.png',
         'click_url': 'https://ads.example.com/i1', 'alt_text': 'Inline one'},
        {'slot': 'sidebar_2', 'image_url': 'https://ads.example.com/s2.png',
         'click_url': 'https://ads.example.com/s2', 'alt_text': 'Sidebar two'},
        {'slot': 'banner_footer', 'image_url': 'https://ads.example.com/footer.png',
         'click_url': 'https://ads.example.com/footer', 'alt_text': 'Footer banner'},
        {'slot': 'mobile_banner', 'image_url': 'https://ads.example.com/mobile.png',
         'click_url': 'https://ads.example.com/mobile', 'alt_text': ''},
    ]


@pytest.fixture
def sample_branding():
    return {
        'company_name': 'Acme Media',
        'logo_url': 'https://acme.example.com/logo.png',
        'primary_color': '#ff0000',
        'accent_color': '#00ff00',
        'social_links': {'twitter': 'https://twitter.com/acme'},
        'tagline': 'All the news that fits',
    }


@pytest.fixture
def sample_document(sample_items, sample_ads, sample_branding):
    """A single wrapper object holding items, ads and branding."""
    return {'items': sample_items, 'ads': sample_ads, 'branding': sample_branding}


@pytest.fixture
def many_items(item_payload_factory):
    """Factory for n raw items with strictly decreasing dates (id 1 is newest)."""
    def _create(n: int, **kwargs) -> List[Dict[str, Any]]:
        base = datetime(2026, 10, 1, tzinfo=timezone.utc)
        return [
            item_payload_factory(
                id=i,
                title=f'Item {i}',
                date=(base - timedelta(hours=i)).isoformat(),
                views=i,
                **kwargs
            )
            for i in range(1, n + 1)
        ]
    return _create


# =============================================================================
# Data Model Factories
# =============================================================================

@pytest.fixture
def content_item_factory():
    """Factory for ContentItem objects with sensible defaults."""
    from data.models import ContentItem

    def _create_item(
        id: str = '1',
        title: str = 'Test Article',
        description: str = 'A test description.',
        category: str = 'News',
        published_at: Optional[datetime] = FIXED_NOW - timedelta(days=10),
        popularity: int = 100,
        thumbnail_url: str = 'https://example.com/thumb.jpg',
        target_url: str = 'https://example.com/article'
    ) -> ContentItem:
        return ContentItem(
            id=id, title=title, description=description, category=category,
            published_at=published_at, popularity=popularity,
            thumbnail_url=thumbnail_url, target_url=target_url
        )

    return _create_item


@pytest.fixture
def ad_unit_factory():
    """Factory for AdUnit objects."""
    from data.models import AdUnit

    def _create_ad(slot: str = 'inline_1', image_url: str = 'https://ads.example.com/ad.png',
                   click_url: str = 'https://ads.example.com/click', alt_text: str = 'An ad') -> AdUnit:
        return AdUnit(slot=slot, image_url=image_url, click_url=click_url, alt_text=alt_text)

    return _create_ad
