"""
Interfaces ports pour la bibliotheque hote.

Contrats de l'index des elements (requetes), de la persistance, et du
rafraichissement natif complet ("legacy") de l'hote.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Sequence

from src.core.entities.entity_info import PersonInfo
from src.core.entities.library import ItemKind, LibraryItem


@dataclass(frozen=True)
class ItemQuery:
    """
    Requete sur l'index des elements.

    Attributs :
        kinds : Types d'elements a inclure
        has_any_provider_id : Noms de fournisseurs dont au moins un doit etre present
        is_virtual : Filtre sur les elements virtuels (None = pas de filtre)
        recursive : Recherche dans toute l'arborescence
    """

    kinds: tuple[ItemKind, ...] = ()
    has_any_provider_id: tuple[str, ...] = ()
    is_virtual: Optional[bool] = None
    recursive: bool = True


class ILibraryIndex(ABC):
    """Index des elements de la bibliotheque hote."""

    @abstractmethod
    def query_items(self, query: ItemQuery) -> list[LibraryItem]:
        """Liste les elements correspondant a la requete."""
        ...

    @abstractmethod
    def get_item(self, item_id: str) -> Optional[LibraryItem]:
        """Recupere un element par son identifiant."""
        ...

    @abstractmethod
    def find_by_path(self, path: str) -> Optional[LibraryItem]:
        """Recupere un element video par son chemin."""
        ...

    @abstractmethod
    def get_children(self, item: LibraryItem, kind: ItemKind) -> list[LibraryItem]:
        """Liste les enfants directs d'un type donne (saisons d'une serie...)."""
        ...


class IItemRepository(ABC):
    """
    Persistance des elements de l'hote.

    Les echecs sont leves et propages tels quels (pas de retry).
    """

    @abstractmethod
    def save(self, item: LibraryItem) -> None:
        """Enregistre durablement un element modifie."""
        ...

    @abstractmethod
    def get_people(self, item_id: str) -> list[PersonInfo]:
        """Casting enregistre pour un element, dans l'ordre d'origine."""
        ...

    @abstractmethod
    def update_people(self, item: LibraryItem, people: Sequence[PersonInfo]) -> None:
        """Remplace le casting d'un element."""
        ...


class ILegacyRefresher(ABC):
    """Rafraichissement natif complet de l'hote."""

    @abstractmethod
    async def refresh_metadata(self, item: LibraryItem) -> bool:
        """Rafraichit toutes les metadonnees. Retourne True si quelque chose a change."""
        ...

    @abstractmethod
    async def refresh_images(self, item: LibraryItem) -> bool:
        """Remplace toutes les images. Retourne True si quelque chose a change."""
        ...
