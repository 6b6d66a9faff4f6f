"""Root pytest configuration for all tests."""

import logging

import pytest

from src.cms_client.query_cache import QueryCache
from src.editing.edit_session import EditSession
from tests.fixtures.sample_pages import ABOUT_CONTENT, HOMEPAGE_CONTENT
from tests.helpers.fake_pages_api import FakePagesAPI
from tests.helpers.manual_timer import ManualTimerFactory


@pytest.fixture
def fake_api():
    """Pages API seeded with a homepage and an about page."""
    return FakePagesAPI({"homepage": HOMEPAGE_CONTENT, "about": ABOUT_CONTENT})


@pytest.fixture
def cache():
    return QueryCache()


@pytest.fixture
def timers():
    return ManualTimerFactory()


@pytest.fixture
def admin_session():
    """Admin session already in edit mode."""
    session = EditSession(is_admin=True)
    session.set_edit_mode(True)
    return session


@pytest.fixture
def viewer_session():
    return EditSession(is_admin=False)


@pytest.fixture(autouse=True)
def _reset_src_logger():
    """Drop handlers that _configure_logging added during a CLI test."""
    yield
    app_logger = logging.getLogger("src")
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
    app_logger.setLevel(logging.NOTSET)
