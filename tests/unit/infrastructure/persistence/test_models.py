"""
Tests pour les modeles SQLModel de persistance.

Verifie les valeurs par defaut et les helpers de serialisation JSON.
"""

from src.infrastructure.persistence.models import (
    ItemPersonModel,
    LibraryItemModel,
    dump_json,
    load_json,
)


class TestJsonHelpers:
    """Tests pour load_json / dump_json."""

    def test_none_stays_null(self):
        assert dump_json(None) is None
        assert load_json(None, []) == []

    def test_empty_list_is_not_null(self):
        assert dump_json([]) == "[]"
        assert load_json("[]", None) == []

    def test_unicode_is_kept(self):
        assert dump_json(["カウボーイビバップ"]) == '["カウボーイビバップ"]'


class TestLibraryItemModel:
    """Tests pour LibraryItemModel."""

    def test_defaults(self):
        model = LibraryItemModel(id="episode-1", kind="episode")
        assert model.provider_ids_json == "{}"
        assert model.locked_fields_json == "[]"
        assert model.tags_json is None
        assert model.is_virtual is False
        assert model.date_last_refreshed is None


class TestItemPersonModel:
    """Tests pour ItemPersonModel."""

    def test_person_fields(self):
        model = ItemPersonModel(item_id="episode-1", kind="Actor", name="Koichi Yamadera", role="Spike")
        assert model.position == 0
        assert model.provider_ids_json == "{}"
