"""Tests pour IdLookup."""

import pytest

from src.core.entities.library import ItemKind, LibraryItem
from src.services.id_lookup import IdLookup


@pytest.fixture
def series_item() -> LibraryItem:
    return LibraryItem(id="s1", kind=ItemKind.SERIES, provider_ids={"Shoko Series": "100"})


@pytest.fixture
def lookup(mock_library, series_item) -> IdLookup:
    mock_library.get_item.side_effect = lambda item_id: series_item if item_id == "s1" else None
    return IdLookup(mock_library)


class TestIsEnabledForItem:
    """Tests de la detection des elements geres."""

    def test_item_with_shoko_id(self, lookup):
        item = LibraryItem(id="m1", kind=ItemKind.MOVIE, provider_ids={"Shoko File": "42"})
        assert lookup.is_enabled_for_item(item)

    def test_episode_managed_through_its_series(self, lookup):
        episode = LibraryItem(id="e1", kind=ItemKind.EPISODE, series_id="s1")
        assert lookup.is_enabled_for_item(episode)

    def test_season_of_unmanaged_series(self, lookup, mock_library):
        mock_library.get_item.side_effect = None
        mock_library.get_item.return_value = LibraryItem(id="s2", kind=ItemKind.SERIES)
        season = LibraryItem(id="se1", kind=ItemKind.SEASON, series_id="s2")
        assert not lookup.is_enabled_for_item(season)

    def test_item_without_ids(self, lookup):
        assert not lookup.is_enabled_for_item(LibraryItem(id="m2", kind=ItemKind.MOVIE))

    def test_collection_kind_is_not_allowed(self, lookup):
        collection = LibraryItem(id="c1", kind=ItemKind.COLLECTION, provider_ids={"Shoko Group": "500"})
        assert not lookup.is_enabled_for_item(collection)

    def test_blank_provider_id_is_ignored(self, lookup):
        item = LibraryItem(id="m3", kind=ItemKind.MOVIE, provider_ids={"Shoko File": ""})
        assert not lookup.is_enabled_for_item(item)


class TestIdExtraction:
    """Tests de l'extraction des identifiants."""

    def test_series_id_from_parent_series(self, lookup):
        episode = LibraryItem(id="e1", kind=ItemKind.EPISODE, series_id="s1")
        assert lookup.get_series_id(episode) == "100"

    def test_file_id_with_series_suffix(self, lookup):
        item = LibraryItem(id="e1", kind=ItemKind.EPISODE, provider_ids={"Shoko File": "42:200"})
        assert lookup.get_file_and_series_id(item) == ("42", "200")

    def test_file_id_without_suffix_uses_series(self, lookup):
        item = LibraryItem(id="e1", kind=ItemKind.EPISODE, series_id="s1", provider_ids={"Shoko File": "42"})
        assert lookup.get_file_and_series_id(item) == ("42", "100")

    def test_no_file_id(self, lookup):
        assert lookup.get_file_and_series_id(LibraryItem(id="e2", kind=ItemKind.EPISODE)) == (None, None)

    def test_episode_ids_are_split(self):
        item = LibraryItem(id="e1", kind=ItemKind.EPISODE, provider_ids={"Shoko Episode": "10, 11,"})
        assert IdLookup.get_episode_ids(item) == ["10", "11"]

    def test_group_id(self):
        item = LibraryItem(id="c1", kind=ItemKind.COLLECTION, provider_ids={"Shoko Group": "500"})
        assert IdLookup.get_group_id(item) == "500"
