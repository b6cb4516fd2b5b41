"""
Tests d'integration du container DI.

Le catalogue amont et le rafraichissement natif sont fournis par l'hote ;
la bibliotheque tourne sur une base SQLite en memoire.
"""

import time

import pytest
from sqlmodel import Session, create_engine

from src.container import Container
from src.core.entities.library import ItemKind, LibraryItem
from src.core.value_objects.refresh_fields import RefreshField
from src.infrastructure.persistence.database import init_db
from src.services.metadata_providers import VideoMetadataProvider
from src.services.refresh import MetadataRefreshService
from tests.fixtures.source_records import make_file, make_series, make_shoko_episode


@pytest.fixture
def container(test_settings, mock_catalog, mock_legacy_refresher) -> Container:
    engine = create_engine("sqlite:///:memory:")
    init_db(engine)

    container = Container()
    container.config.override(test_settings)
    container.session.override(Session(engine))
    container.catalog.override(mock_catalog)
    container.legacy_refresher.override(mock_legacy_refresher)
    return container


class TestContainerIntegration:
    """Tests d'assemblage via le container."""

    def test_refresh_service_is_singleton(self, container):
        service = container.refresh_service()

        assert isinstance(service, MetadataRefreshService)
        assert container.refresh_service() is service

    def test_trailers_use_video_provider(self, container):
        providers = container.metadata_providers()

        assert isinstance(providers[ItemKind.TRAILER], VideoMetadataProvider)
        assert providers[ItemKind.TRAILER] is providers[ItemKind.VIDEO]

    def test_stall_resets_refresh_context(self, container):
        context = container.refresh_context()
        context.try_visit("episode-1")
        tracker = container.usage_tracker()

        tracker.check_stalled(now=time.monotonic() + 3600)

        assert not context.is_visited("episode-1")

    @pytest.mark.asyncio
    async def test_episode_refresh_end_to_end(self, container, mock_catalog):
        mock_catalog.get_file_by_path.return_value = make_file()
        mock_catalog.get_file.return_value = make_file()
        mock_catalog.get_episode.return_value = make_shoko_episode()
        mock_catalog.get_series.return_value = make_series()

        repository = container.library_repository()
        episode = LibraryItem(
            id="episode-1",
            kind=ItemKind.EPISODE,
            name="Episode 1",
            path="/anime/Cowboy Bebop/01.mkv",
            provider_ids={"Shoko File": "1"},
        )
        repository.save(episode)

        outcome = await container.refresh_service().refresh_episode(
            episode, RefreshField.TITLES_AND_OVERVIEW | RefreshField.DATES
        )

        assert "name" in outcome.updated_fields
        stored = repository.get_item("episode-1")
        assert stored.name == "The Beginning"
        assert stored.date_last_refreshed is not None
