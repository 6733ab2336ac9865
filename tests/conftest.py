"""Shared test fixtures."""

import sys

import pytest

# Ensure src is in path
sys.path.insert(0, "src")

from datetime import UTC, datetime

from valnk import ContentClient, IndexQueryPlanner, LocalStore, PaginationSettings

FIXED_TIME = datetime(2022, 6, 1, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def store():
    """Fresh in-memory store."""
    return LocalStore()


@pytest.fixture
def settings():
    """Settings independent of the environment."""
    return PaginationSettings(default_page_size=30, max_cursor_length=4096)


@pytest.fixture
def planner(store, settings):
    return IndexQueryPlanner(store, settings)


@pytest.fixture
def client(store, settings):
    return ContentClient(store, settings)


@pytest.fixture
def fixed_time():
    return FIXED_TIME
