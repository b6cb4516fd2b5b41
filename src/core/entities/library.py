"""
Entites de la bibliotheque hote.

Un LibraryItem est l'element pre-existant sur lequel les metadonnees
synthetisees sont appliquees. Contrairement aux informations canoniques,
il est mutable et persiste par l'hote.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional


class ItemKind(str, Enum):
    """Type d'element de la bibliotheque."""

    COLLECTION = "collection"
    MOVIE = "movie"
    SERIES = "series"
    SEASON = "season"
    EPISODE = "episode"
    VIDEO = "video"
    TRAILER = "trailer"


class MetadataField(str, Enum):
    """Champs verrouillables par l'utilisateur."""

    NAME = "name"
    OVERVIEW = "overview"
    RUNTIME = "runtime"
    TAGS = "tags"
    GENRES = "genres"
    STUDIOS = "studios"
    PRODUCTION_LOCATIONS = "production_locations"
    OFFICIAL_RATING = "official_rating"
    CAST = "cast"


# Types d'elements ne supportant pas de personnes (casting)
_KINDS_WITHOUT_PEOPLE = frozenset({ItemKind.COLLECTION})


@dataclass
class LibraryItem:
    """
    Element de la bibliotheque hote.

    Attributs :
        id : Identifiant unique de l'element
        kind : Type d'element
        name : Titre affiche
        path : Chemin sur le disque (fichier ou dossier)
        provider_ids : Identifiants externes (ex: {"Shoko File": "42"})
        locked_fields : Champs que le rafraichissement ne doit jamais ecraser
        parent_id : Parent direct (serie pour une saison, saison pour un episode)
        series_id : Serie de rattachement (saisons et episodes)
        extra_ids : Bonus attaches directement a l'element
        alternate_version_paths : Versions alternatives liees ou locales
        additional_part_paths : Parties additionnelles (CD1/CD2...)
        date_last_refreshed : Dernier rafraichissement des metadonnees
        is_virtual : Element sans fichier (episode non diffuse ou manquant)
    """

    id: str
    kind: ItemKind
    name: str = ""
    path: Optional[str] = None
    original_title: Optional[str] = None
    overview: Optional[str] = None
    premiere_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    production_year: Optional[int] = None
    runtime: Optional[timedelta] = None
    tags: Optional[list[str]] = None
    genres: Optional[list[str]] = None
    studios: Optional[list[str]] = None
    production_locations: Optional[list[str]] = None
    official_rating: Optional[str] = None
    community_rating: Optional[float] = None
    custom_rating: Optional[str] = None
    provider_ids: dict[str, str] = field(default_factory=dict)
    locked_fields: set[MetadataField] = field(default_factory=set)
    index_number: Optional[int] = None
    parent_id: Optional[str] = None
    series_id: Optional[str] = None
    extra_ids: list[str] = field(default_factory=list)
    alternate_version_paths: list[str] = field(default_factory=list)
    additional_part_paths: list[str] = field(default_factory=list)
    preferred_metadata_language: Optional[str] = None
    preferred_metadata_country_code: Optional[str] = None
    date_last_refreshed: Optional[datetime] = None
    is_virtual: bool = False

    @property
    def supports_people(self) -> bool:
        """True si l'element peut porter un casting."""
        return self.kind not in _KINDS_WITHOUT_PEOPLE

    def is_locked(self, metadata_field: MetadataField) -> bool:
        """True si le champ est verrouille par l'utilisateur."""
        return metadata_field in self.locked_fields
