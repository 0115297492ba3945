"""Shared pytest fixtures."""

from __future__ import annotations

import pytest

from typedrest.server import Dispatcher, default_fault_classifier, implement
from typedrest.settings import Settings

from tests.factories import (
    create_playlist,
    delete_playlists,
    items,
    list_items,
    list_playlists,
    playlists,
)


@pytest.fixture
def settings() -> Settings:
    return Settings(http2=False)


@pytest.fixture
def dispatchers(settings: Settings) -> list[Dispatcher]:
    classify = default_fault_classifier(settings)
    return [
        implement(playlists.get, list_playlists, classify),
        implement(playlists.post, create_playlist, classify),
        implement(playlists.delete, delete_playlists, classify),
        implement(items.get, list_items, classify),
    ]
