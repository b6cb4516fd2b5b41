"""
Implementation SQLModel de la bibliotheque hote.

Implemente ILibraryIndex (requetes du balayage, navigation parent/enfants)
et IItemRepository (persistance des elements rafraichis et du casting).
"""

import json
from datetime import timedelta
from typing import Optional, Sequence

from sqlmodel import Session, select

from src.core.entities.entity_info import PersonInfo, PersonKind
from src.core.entities.library import ItemKind, LibraryItem, MetadataField
from src.core.ports.library import IItemRepository, ILibraryIndex, ItemQuery
from src.infrastructure.persistence.models import (
    ItemPersonModel,
    LibraryItemModel,
    dump_json,
    load_json,
)


class SQLModelLibraryRepository(ILibraryIndex, IItemRepository):
    """
    Repository SQLModel des elements de la bibliotheque.

    Conversion bidirectionnelle entre LibraryItem (domaine) et
    LibraryItemModel (persistance).
    """

    def __init__(self, session: Session) -> None:
        """
        Initialise le repository avec une session SQLModel.

        Args :
            session : Session SQLModel active pour les operations DB
        """
        self._session = session

    def _to_entity(self, model: LibraryItemModel) -> LibraryItem:
        return LibraryItem(
            id=model.id,
            kind=ItemKind(model.kind),
            name=model.name,
            path=model.path,
            original_title=model.original_title,
            overview=model.overview,
            premiere_date=model.premiere_date,
            end_date=model.end_date,
            production_year=model.production_year,
            runtime=timedelta(seconds=model.runtime_seconds) if model.runtime_seconds is not None else None,
            tags=load_json(model.tags_json, None),
            genres=load_json(model.genres_json, None),
            studios=load_json(model.studios_json, None),
            production_locations=load_json(model.production_locations_json, None),
            official_rating=model.official_rating,
            community_rating=model.community_rating,
            custom_rating=model.custom_rating,
            provider_ids=load_json(model.provider_ids_json, {}),
            locked_fields={MetadataField(value) for value in load_json(model.locked_fields_json, [])},
            index_number=model.index_number,
            parent_id=model.parent_id,
            series_id=model.series_id,
            extra_ids=load_json(model.extra_ids_json, []),
            alternate_version_paths=load_json(model.alternate_version_paths_json, []),
            additional_part_paths=load_json(model.additional_part_paths_json, []),
            preferred_metadata_language=model.preferred_metadata_language,
            preferred_metadata_country_code=model.preferred_metadata_country_code,
            date_last_refreshed=model.date_last_refreshed,
            is_virtual=model.is_virtual,
        )

    def _copy_to_model(self, entity: LibraryItem, model: LibraryItemModel) -> LibraryItemModel:
        model.kind = entity.kind.value
        model.name = entity.name
        model.path = entity.path
        model.original_title = entity.original_title
        model.overview = entity.overview
        model.premiere_date = entity.premiere_date
        model.end_date = entity.end_date
        model.production_year = entity.production_year
        model.runtime_seconds = entity.runtime.total_seconds() if entity.runtime is not None else None
        model.tags_json = dump_json(entity.tags)
        model.genres_json = dump_json(entity.genres)
        model.studios_json = dump_json(entity.studios)
        model.production_locations_json = dump_json(entity.production_locations)
        model.official_rating = entity.official_rating
        model.community_rating = entity.community_rating
        model.custom_rating = entity.custom_rating
        model.provider_ids_json = json.dumps(entity.provider_ids)
        model.locked_fields_json = json.dumps(sorted(field.value for field in entity.locked_fields))
        model.index_number = entity.index_number
        model.parent_id = entity.parent_id
        model.series_id = entity.series_id
        model.extra_ids_json = json.dumps(entity.extra_ids)
        model.alternate_version_paths_json = json.dumps(entity.alternate_version_paths)
        model.additional_part_paths_json = json.dumps(entity.additional_part_paths)
        model.preferred_metadata_language = entity.preferred_metadata_language
        model.preferred_metadata_country_code = entity.preferred_metadata_country_code
        model.date_last_refreshed = entity.date_last_refreshed
        model.is_virtual = entity.is_virtual
        return model

    # --- ILibraryIndex --------------------------------------------------

    def query_items(self, query: ItemQuery) -> list[LibraryItem]:
        """
        Liste les elements correspondant a la requete.

        Le filtre sur les identifiants externes est applique apres lecture,
        les identifiants etant stockes en JSON.
        """
        statement = select(LibraryItemModel)
        if query.kinds:
            statement = statement.where(LibraryItemModel.kind.in_([kind.value for kind in query.kinds]))
        if query.is_virtual is not None:
            statement = statement.where(LibraryItemModel.is_virtual == query.is_virtual)
        models = self._session.exec(statement.order_by(LibraryItemModel.id)).all()

        items = [self._to_entity(model) for model in models]
        if query.has_any_provider_id:
            items = [
                item
                for item in items
                if any(item.provider_ids.get(name) for name in query.has_any_provider_id)
            ]
        return items

    def get_item(self, item_id: str) -> Optional[LibraryItem]:
        model = self._session.get(LibraryItemModel, item_id)
        if model:
            return self._to_entity(model)
        return None

    def find_by_path(self, path: str) -> Optional[LibraryItem]:
        statement = select(LibraryItemModel).where(
            LibraryItemModel.path == path,
            LibraryItemModel.kind.in_([ItemKind.MOVIE.value, ItemKind.EPISODE.value, ItemKind.VIDEO.value, ItemKind.TRAILER.value]),
        )
        model = self._session.exec(statement).first()
        if model:
            return self._to_entity(model)
        return None

    def get_children(self, item: LibraryItem, kind: ItemKind) -> list[LibraryItem]:
        statement = (
            select(LibraryItemModel)
            .where(LibraryItemModel.parent_id == item.id, LibraryItemModel.kind == kind.value)
            .order_by(LibraryItemModel.index_number, LibraryItemModel.id)
        )
        return [self._to_entity(model) for model in self._session.exec(statement).all()]

    # --- IItemRepository ------------------------------------------------

    def save(self, item: LibraryItem) -> None:
        """Sauvegarde un element (insertion ou mise a jour)."""
        model = self._session.get(LibraryItemModel, item.id) or LibraryItemModel(id=item.id, kind=item.kind.value)
        self._session.add(self._copy_to_model(item, model))
        self._session.commit()

    def update_people(self, item: LibraryItem, people: Sequence[PersonInfo]) -> None:
        """Remplace le casting de l'element."""
        existing = self._session.exec(select(ItemPersonModel).where(ItemPersonModel.item_id == item.id)).all()
        for model in existing:
            self._session.delete(model)
        for position, person in enumerate(people):
            self._session.add(
                ItemPersonModel(
                    item_id=item.id,
                    position=position,
                    kind=person.kind.value,
                    name=person.name,
                    role=person.role,
                    image_url=person.image_url,
                    provider_ids_json=json.dumps(dict(person.provider_ids)),
                )
            )
        self._session.commit()

    def get_people(self, item_id: str) -> list[PersonInfo]:
        """Casting enregistre pour un element, dans l'ordre d'origine."""
        statement = (
            select(ItemPersonModel)
            .where(ItemPersonModel.item_id == item_id)
            .order_by(ItemPersonModel.position)
        )
        return [
            PersonInfo(
                kind=PersonKind(model.kind),
                name=model.name,
                role=model.role,
                image_url=model.image_url,
                provider_ids=json.loads(model.provider_ids_json),
            )
            for model in self._session.exec(statement).all()
        ]
