"""
Tests pour LibraryItem.
"""

from src.core.entities.library import ItemKind, LibraryItem, MetadataField


class TestLibraryItem:
    """Tests de LibraryItem."""

    def test_collections_do_not_support_people(self):
        assert not LibraryItem(id="1", kind=ItemKind.COLLECTION).supports_people

    def test_episodes_support_people(self):
        assert LibraryItem(id="1", kind=ItemKind.EPISODE).supports_people

    def test_is_locked(self):
        item = LibraryItem(id="1", kind=ItemKind.SERIES, locked_fields={MetadataField.NAME})

        assert item.is_locked(MetadataField.NAME)
        assert not item.is_locked(MetadataField.OVERVIEW)

    def test_default_lists_are_not_shared(self):
        first = LibraryItem(id="1", kind=ItemKind.MOVIE)
        second = LibraryItem(id="2", kind=ItemKind.MOVIE)

        first.extra_ids.append("x")

        assert second.extra_ids == []
