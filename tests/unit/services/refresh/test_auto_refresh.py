"""
Tests du balayage automatique : filtre de selection et ordre de passe.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest

from src.config import MetadataRefreshSettings
from src.core.entities.library import ItemKind, LibraryItem
from src.core.ports.metadata import IMetadataProvider, ItemMetadata, MetadataResult
from src.core.value_objects.refresh_fields import RefreshField
from src.services.id_lookup import IdLookup
from src.services.refresh import MetadataRefreshService
from src.services.refresh.auto_refresh import build_refresh_filter, collect_candidates
from tests.fixtures.library_items import (
    InMemoryLibrary,
    make_episode_item,
    make_season_item,
    make_series_item,
)

NOW = datetime(2026, 1, 10, 12, 0, tzinfo=timezone.utc)


def refresh_config(**kwargs) -> MetadataRefreshSettings:
    return MetadataRefreshSettings(**kwargs)


@pytest.fixture
def library() -> InMemoryLibrary:
    return InMemoryLibrary(make_series_item(), make_season_item())


@pytest.fixture
def id_lookup(library) -> IdLookup:
    return IdLookup(library)


def episode(number: int, premiere_days_ago: float, refreshed_days_ago=None, **kwargs) -> LibraryItem:
    return make_episode_item(
        f"episode-{number}",
        number=number,
        premiere_date=NOW - timedelta(days=premiere_days_ago),
        date_last_refreshed=NOW - timedelta(days=refreshed_days_ago) if refreshed_days_ago is not None else None,
        **kwargs,
    )


class TestBuildRefreshFilter:
    """Tests du predicat de selection."""

    def test_dead_zone_excludes_recent_refresh(self, id_lookup):
        accept = build_refresh_filter(refresh_config(out_of_sync_in_days=0), id_lookup, NOW)

        assert not accept(episode(1, premiere_days_ago=1, refreshed_days_ago=0.5))

    def test_out_of_sync_before_dead_zone_disables_dead_zone(self, id_lookup):
        config = refresh_config(anti_refresh_dead_zone_in_hours=24, out_of_sync_in_days=30)
        accept = build_refresh_filter(config, id_lookup, NOW)

        assert accept(episode(1, premiere_days_ago=1, refreshed_days_ago=0.5))

    def test_stale_item_is_included_regardless_of_premiere(self, id_lookup):
        accept = build_refresh_filter(refresh_config(out_of_sync_in_days=30), id_lookup, NOW)

        assert accept(episode(1, premiere_days_ago=3000, refreshed_days_ago=60))

    def test_never_refreshed_item_is_stale(self, id_lookup):
        accept = build_refresh_filter(refresh_config(out_of_sync_in_days=30), id_lookup, NOW)

        assert accept(episode(1, premiere_days_ago=3000))

    def test_stale_virtual_item_needs_unaired_updates(self, id_lookup):
        stale_virtual = episode(1, premiere_days_ago=3000, refreshed_days_ago=200, is_virtual=True)

        assert not build_refresh_filter(refresh_config(), id_lookup, NOW)(stale_virtual)
        assert build_refresh_filter(refresh_config(update_unaired=True), id_lookup, NOW)(stale_virtual)

    def test_recent_premiere_within_range(self, id_lookup):
        accept = build_refresh_filter(refresh_config(auto_refresh_range_in_days=7), id_lookup, NOW)

        assert accept(episode(1, premiere_days_ago=3, refreshed_days_ago=10))
        assert not accept(episode(2, premiere_days_ago=30, refreshed_days_ago=10))

    def test_range_lower_bound_is_inclusive(self, id_lookup):
        config = refresh_config(
            auto_refresh_range_in_days=7, anti_refresh_dead_zone_in_hours=0, out_of_sync_in_days=0
        )
        accept = build_refresh_filter(config, id_lookup, NOW)

        assert accept(episode(1, premiere_days_ago=7))
        assert not accept(episode(2, premiere_days_ago=7.01))

    def test_future_premiere_needs_unaired_updates(self, id_lookup):
        upcoming = episode(1, premiere_days_ago=-3, refreshed_days_ago=10)

        assert not build_refresh_filter(refresh_config(), id_lookup, NOW)(upcoming)
        assert build_refresh_filter(refresh_config(update_unaired=True), id_lookup, NOW)(upcoming)

    def test_zero_range_has_no_lower_bound(self, id_lookup):
        accept = build_refresh_filter(refresh_config(auto_refresh_range_in_days=0), id_lookup, NOW)

        assert accept(episode(1, premiere_days_ago=100, refreshed_days_ago=10))

    def test_unmanaged_item_is_excluded(self, id_lookup):
        accept = build_refresh_filter(refresh_config(), id_lookup, NOW)
        unmanaged = episode(1, premiere_days_ago=1, refreshed_days_ago=10, provider_ids={}, series_id=None)

        assert not accept(unmanaged)

    def test_item_without_premiere_is_excluded(self, id_lookup):
        accept = build_refresh_filter(refresh_config(), id_lookup, NOW)
        item = make_episode_item(date_last_refreshed=NOW - timedelta(days=10))

        assert not accept(item)

    def test_naive_dates_are_utc(self, id_lookup):
        accept = build_refresh_filter(refresh_config(out_of_sync_in_days=0), id_lookup, NOW)
        item = make_episode_item(
            premiere_date=datetime(2026, 1, 9, 12, 0),
            date_last_refreshed=datetime(2026, 1, 1, 12, 0),
        )

        assert accept(item)


class TestCollectCandidates:
    """Tests de la liste des candidats."""

    def test_parents_are_derived_from_episodes(self, library):
        library.add(episode(1, 1))
        library.add(episode(2, 1))

        movies, series, seasons, episodes = collect_candidates(library, refresh_config(), lambda item: True)

        assert movies == []
        assert [item.id for item in series] == ["series-1"]
        assert [item.id for item in seasons] == ["season-1"]
        assert [item.id for item in episodes] == ["episode-1", "episode-2"]

    def test_episodes_without_file_are_excluded(self, library):
        library.add(episode(1, 1, provider_ids={"Shoko Episode": "10"}))
        library.add(episode(2, 1, is_virtual=True))

        _, _, _, episodes = collect_candidates(library, refresh_config(), lambda item: True)

        assert episodes == []

    def test_unaired_updates_use_internal_ids(self, library):
        library.add(episode(1, 1, is_virtual=True, provider_ids={"Shoko Internal": "shoko://episode/10"}))

        _, _, _, episodes = collect_candidates(library, refresh_config(update_unaired=True), lambda item: True)

        assert [item.id for item in episodes] == ["episode-1"]

    def test_movies_need_a_shoko_file(self, library):
        library.add(LibraryItem(id="movie-1", kind=ItemKind.MOVIE, provider_ids={"Shoko File": "5"}))
        library.add(LibraryItem(id="movie-2", kind=ItemKind.MOVIE))

        movies, _, _, _ = collect_candidates(library, refresh_config(), lambda item: True)

        assert [item.id for item in movies] == ["movie-1"]


class TestAutoRefresh:
    """Tests du balayage complet."""

    @pytest.fixture
    def provider(self) -> AsyncMock:
        provider = AsyncMock(spec=IMetadataProvider)
        provider.get_metadata.return_value = MetadataResult(has_metadata=True, item=ItemMetadata(name="Refreshed"))
        return provider

    @pytest.fixture
    def service(self, library, provider, mock_legacy_refresher, mock_repository, test_settings):
        test_settings.metadata_refresh = refresh_config(
            movie=RefreshField.TITLES_AND_OVERVIEW,
            series=RefreshField.TITLES_AND_OVERVIEW,
            season=RefreshField.TITLES_AND_OVERVIEW,
            episode=RefreshField.TITLES_AND_OVERVIEW,
        )
        return MetadataRefreshService(
            providers={kind: provider for kind in ItemKind},
            legacy_refresher=mock_legacy_refresher,
            repository=mock_repository,
            library=library,
            id_lookup=IdLookup(library),
            settings=test_settings,
            clock=lambda: NOW,
        )

    @pytest.mark.asyncio
    async def test_sweep_order_and_progress(self, service, library, mock_repository):
        library.add(
            LibraryItem(
                id="movie-1",
                kind=ItemKind.MOVIE,
                path="/anime/movie.mkv",
                provider_ids={"Shoko File": "5"},
                premiere_date=NOW - timedelta(days=1),
            )
        )
        library.add(episode(1, 1))
        progress = []

        result = await service.auto_refresh(progress.append)

        saved = [call.args[0].id for call in mock_repository.save.call_args_list]
        assert saved == ["movie-1", "series-1", "season-1", "episode-1"]
        assert (result.movies, result.series, result.seasons, result.episodes) == (1, 1, 1, 1)
        assert result.updated == 4
        assert progress == [25.0, 50.0, 75.0, 100.0, 100.0]

    @pytest.mark.asyncio
    async def test_recent_refresh_is_skipped(self, service, library, test_settings, provider):
        test_settings.metadata_refresh.out_of_sync_in_days = 0
        library.add(episode(1, 1, refreshed_days_ago=0.1))

        result = await service.auto_refresh()

        assert result.total == 0
        provider.get_metadata.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_empty_library_reports_completion(self, service):
        progress = []

        result = await service.auto_refresh(progress.append)

        assert result.total == 0
        assert progress == [100.0]
