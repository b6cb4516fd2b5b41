"""
Modeles SQLModel de la bibliotheque AniMeta.

Ces modeles representent les tables de la base de donnees SQLite.
Ils sont distincts des entites de domaine (dataclass dans core/entities/)
selon l'architecture hexagonale.

Tables:
- library_items: Elements de la bibliotheque (collections, films, series, saisons, episodes, videos)
- item_people: Casting et equipe rattaches a un element

Les champs JSON (*_json) stockent les listes et dictionnaires serialises.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Optional

from sqlmodel import Field, Index, SQLModel


def load_json(value: Optional[str], default: Any) -> Any:
    if value is None:
        return default
    return json.loads(value)


def dump_json(value: Any) -> Optional[str]:
    if value is None:
        return None
    return json.dumps(value, ensure_ascii=False)


class LibraryItemModel(SQLModel, table=True):
    """
    Element de la bibliotheque hote.

    Les listes optionnelles (tags, genres...) distinguent None (jamais
    renseigne) d'une liste vide : la colonne JSON reste NULL dans le
    premier cas.
    """

    __tablename__ = "library_items"
    __table_args__ = (Index("ix_library_items_kind_virtual", "kind", "is_virtual"),)

    id: str = Field(primary_key=True)
    kind: str = Field(index=True)
    name: str = ""
    path: str | None = Field(default=None, index=True)
    original_title: str | None = None
    overview: str | None = None
    premiere_date: datetime | None = None
    end_date: datetime | None = None
    production_year: int | None = None
    runtime_seconds: float | None = None
    tags_json: str | None = None  # JSON: ["Action", "Mecha"]
    genres_json: str | None = None
    studios_json: str | None = None
    production_locations_json: str | None = None
    official_rating: str | None = None
    community_rating: float | None = None
    custom_rating: str | None = None
    provider_ids_json: str = "{}"  # JSON: {"Shoko File": "42"}
    locked_fields_json: str = "[]"
    index_number: int | None = None
    parent_id: str | None = Field(default=None, index=True)
    series_id: str | None = Field(default=None, index=True)
    extra_ids_json: str = "[]"
    alternate_version_paths_json: str = "[]"
    additional_part_paths_json: str = "[]"
    preferred_metadata_language: str | None = None
    preferred_metadata_country_code: str | None = None
    date_last_refreshed: datetime | None = None
    is_virtual: bool = Field(default=False)


class ItemPersonModel(SQLModel, table=True):
    """Personne (casting ou equipe) rattachee a un element."""

    __tablename__ = "item_people"

    id: int | None = Field(default=None, primary_key=True)
    item_id: str = Field(index=True, foreign_key="library_items.id")
    position: int = 0
    kind: str
    name: str
    role: str | None = None
    image_url: str | None = None
    provider_ids_json: str = "{}"
