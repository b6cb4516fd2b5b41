"""
Interfaces ports pour les fournisseurs de metadonnees.

Un fournisseur par type d'element fait le pont entre l'information
canonique synthetisee et la forme native des elements de l'hote.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional

from src.core.entities.entity_info import PersonInfo
from src.core.entities.library import LibraryItem


@dataclass(frozen=True)
class MetadataRequest:
    """
    Requete de metadonnees pour un element.

    Attributs :
        path : Chemin de l'element
        name : Nom courant de l'element
        metadata_language : Langue de metadonnees preferee
        metadata_country_code : Pays de metadonnees prefere
        provider_ids : Identifiants externes connus de l'element
        series_provider_ids : Identifiants externes de la serie parente (saisons)
        index_number : Numero de saison, le cas echeant
        is_missing_episode : L'episode n'a pas de fichier
        is_automated : Requete issue d'un traitement automatique
    """

    path: Optional[str] = None
    name: Optional[str] = None
    metadata_language: Optional[str] = None
    metadata_country_code: Optional[str] = None
    provider_ids: dict[str, str] = field(default_factory=dict)
    series_provider_ids: dict[str, str] = field(default_factory=dict)
    index_number: Optional[int] = None
    is_missing_episode: bool = False
    is_automated: bool = True


@dataclass
class ItemMetadata:
    """Metadonnees a la forme des elements de l'hote."""

    name: str = ""
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
    supports_people: bool = True


@dataclass
class MetadataResult:
    """Resultat d'un fournisseur : metadonnees et casting."""

    has_metadata: bool = False
    item: Optional[ItemMetadata] = None
    people: list[PersonInfo] = field(default_factory=list)

    @classmethod
    def empty(cls) -> "MetadataResult":
        """Resultat sans metadonnees (aucune entite amont correspondante)."""
        return cls()


class IMetadataProvider(ABC):
    """Fournisseur de metadonnees pour un type d'element."""

    @abstractmethod
    async def get_metadata(self, request: MetadataRequest) -> MetadataResult:
        """
        Construit les metadonnees d'un element.

        Retourne :
            MetadataResult avec has_metadata=False si aucune entite ne correspond
        """
        ...


class ICustomMetadataProvider(ABC):
    """Crochet de fournisseur personnalise, execute apres les groupes de champs."""

    @abstractmethod
    async def fetch(self, item: LibraryItem) -> bool:
        """Applique un traitement personnalise. Retourne True si l'element a change."""
        ...
