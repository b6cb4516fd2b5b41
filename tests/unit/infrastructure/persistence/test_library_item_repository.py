"""
Tests pour SQLModelLibraryRepository.

Base SQLite en memoire : verifie la conversion entite/modele, les
requetes du balayage et le remplacement du casting.
"""

from datetime import datetime, timedelta

import pytest
from sqlmodel import Session, create_engine

from src.core.entities.entity_info import PersonInfo, PersonKind
from src.core.entities.library import ItemKind, LibraryItem, MetadataField
from src.core.ports.library import ItemQuery
from src.infrastructure.persistence.database import init_db
from src.infrastructure.persistence.repositories import SQLModelLibraryRepository


@pytest.fixture
def session():
    engine = create_engine("sqlite:///:memory:")
    init_db(engine)
    with Session(engine) as session:
        yield session


@pytest.fixture
def repository(session) -> SQLModelLibraryRepository:
    return SQLModelLibraryRepository(session)


def episode_item(item_id: str, number: int, **kwargs) -> LibraryItem:
    return LibraryItem(
        id=item_id,
        kind=ItemKind.EPISODE,
        name=f"Episode {number}",
        path=f"/anime/Cowboy Bebop/{number:02d}.mkv",
        index_number=number,
        parent_id="season-1",
        series_id="series-1",
        **kwargs,
    )


class TestSave:
    """Tests de la sauvegarde et de la relecture."""

    def test_round_trip_keeps_all_fields(self, repository):
        item = episode_item(
            "episode-1",
            1,
            runtime=timedelta(minutes=24),
            tags=["Space"],
            genres=[],
            provider_ids={"Shoko File": "1"},
            locked_fields={MetadataField.NAME},
            alternate_version_paths=["/anime/Cowboy Bebop/01 - 1080p.mkv"],
            date_last_refreshed=datetime(2026, 1, 10, 12, 0),
        )

        repository.save(item)
        loaded = repository.get_item("episode-1")

        assert loaded == item
        assert loaded.genres == []
        assert loaded.studios is None

    def test_save_updates_existing_row(self, repository):
        item = episode_item("episode-1", 1)
        repository.save(item)

        item.name = "Asteroid Blues"
        repository.save(item)

        assert repository.get_item("episode-1").name == "Asteroid Blues"
        assert len(repository.query_items(ItemQuery(kinds=(ItemKind.EPISODE,)))) == 1

    def test_unknown_item_is_none(self, repository):
        assert repository.get_item("missing") is None


class TestQueries:
    """Tests des requetes de la bibliotheque."""

    @staticmethod
    def populate(repository):
        repository.save(LibraryItem(id="series-1", kind=ItemKind.SERIES, provider_ids={"Shoko Series": "100"}))
        repository.save(LibraryItem(id="season-1", kind=ItemKind.SEASON, parent_id="series-1", index_number=1))
        repository.save(episode_item("episode-2", 2, provider_ids={"Shoko File": "2"}))
        repository.save(episode_item("episode-1", 1, provider_ids={"Shoko File": "1"}))
        repository.save(
            episode_item("episode-3", 3, is_virtual=True, provider_ids={"Shoko Internal": "shoko://episode/13"})
        )
        return repository

    def test_query_filters_kind_provider_and_virtual(self, repository):
        populated = self.populate(repository)
        items = populated.query_items(
            ItemQuery(kinds=(ItemKind.EPISODE,), has_any_provider_id=("Shoko File",), is_virtual=False)
        )

        assert [item.id for item in items] == ["episode-1", "episode-2"]

    def test_query_virtual_items(self, repository):
        populated = self.populate(repository)
        items = populated.query_items(ItemQuery(kinds=(ItemKind.EPISODE,), is_virtual=True))

        assert [item.id for item in items] == ["episode-3"]

    def test_children_are_ordered_by_number(self, repository):
        populated = self.populate(repository)
        season = populated.get_item("season-1")

        children = populated.get_children(season, ItemKind.EPISODE)

        assert [child.id for child in children] == ["episode-1", "episode-2", "episode-3"]

    def test_find_by_path(self, repository):
        populated = self.populate(repository)
        item = populated.find_by_path("/anime/Cowboy Bebop/02.mkv")

        assert item.id == "episode-2"
        assert populated.find_by_path("/anime/missing.mkv") is None


class TestPeople:
    """Tests du casting."""

    def test_update_people_replaces_cast(self, repository):
        item = episode_item("episode-1", 1)
        repository.save(item)
        repository.update_people(item, [PersonInfo(kind=PersonKind.DIRECTOR, name="Shinichiro Watanabe")])

        repository.update_people(
            item,
            [
                PersonInfo(kind=PersonKind.ACTOR, name="Koichi Yamadera", role="Spike"),
                PersonInfo(kind=PersonKind.ACTOR, name="Unsho Ishizuka", role="Jet", provider_ids={"AniDB": "42"}),
            ],
        )

        people = repository.get_people("episode-1")
        assert [(person.name, person.role) for person in people] == [
            ("Koichi Yamadera", "Spike"),
            ("Unsho Ishizuka", "Jet"),
        ]
        assert people[1].provider_ids == {"AniDB": "42"}

    def test_item_without_cast_has_no_people(self, repository):
        repository.save(episode_item("episode-1", 1))

        assert repository.get_people("episode-1") == []
