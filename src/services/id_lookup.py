"""
Recherche des identifiants Shoko d'un element de la bibliotheque.

Determine si un element est gere par AniMeta (porte un identifiant Shoko,
directement ou via sa serie) et extrait les identifiants utiles aux
fournisseurs de metadonnees.
"""

from typing import Optional

from src.core.entities.library import ItemKind, LibraryItem
from src.core.ports.library import ILibraryIndex
from src.utils.constants import (
    PROVIDER_SHOKO_EPISODE,
    PROVIDER_SHOKO_FILE,
    PROVIDER_SHOKO_GROUP,
    PROVIDER_SHOKO_SERIES,
)

# Types d'elements pour lesquels la recherche peut reussir
ALLOWED_KINDS = frozenset({
    ItemKind.MOVIE,
    ItemKind.SERIES,
    ItemKind.SEASON,
    ItemKind.EPISODE,
    ItemKind.VIDEO,
    ItemKind.TRAILER,
})

_SHOKO_PROVIDERS = (
    PROVIDER_SHOKO_FILE,
    PROVIDER_SHOKO_EPISODE,
    PROVIDER_SHOKO_SERIES,
    PROVIDER_SHOKO_GROUP,
)


def _has_shoko_id(item: LibraryItem) -> bool:
    return any(item.provider_ids.get(name) for name in _SHOKO_PROVIDERS)


class IdLookup:
    """Recherche d'identifiants Shoko sur les elements de l'hote."""

    def __init__(self, library: ILibraryIndex) -> None:
        self._library = library

    def _root_item(self, item: LibraryItem) -> Optional[LibraryItem]:
        """Element de reference : la serie pour une saison ou un episode."""
        if item.kind in (ItemKind.SEASON, ItemKind.EPISODE) and item.series_id:
            return self._library.get_item(item.series_id)
        return item

    def is_enabled_for_item(self, item: LibraryItem) -> bool:
        """
        True si l'element est gere par AniMeta.

        Une saison ou un episode est gere si sa serie l'est, ou s'il porte
        lui-meme un identifiant Shoko (episode manquant par exemple).
        """
        if item.kind not in ALLOWED_KINDS:
            return False
        if _has_shoko_id(item):
            return True
        root = self._root_item(item)
        return root is not None and root is not item and _has_shoko_id(root)

    def get_series_id(self, item: LibraryItem) -> Optional[str]:
        """Identifiant de serie Shoko de l'element (ou de sa serie)."""
        series_id = item.provider_ids.get(PROVIDER_SHOKO_SERIES)
        if series_id:
            return series_id
        root = self._root_item(item)
        if root is not None and root is not item:
            return root.provider_ids.get(PROVIDER_SHOKO_SERIES) or None
        return None

    def get_file_and_series_id(self, item: LibraryItem) -> tuple[Optional[str], Optional[str]]:
        """
        Identifiants (fichier, serie) d'un element video.

        L'identifiant "Shoko File" peut etre de la forme "fichier:serie".
        """
        value = item.provider_ids.get(PROVIDER_SHOKO_FILE)
        if not value:
            return None, None
        file_id, _, series_id = value.partition(":")
        return file_id, series_id or self.get_series_id(item)

    @staticmethod
    def get_episode_ids(item: LibraryItem) -> list[str]:
        """Identifiants d'episodes Shoko portes par l'element (separes par des virgules)."""
        value = item.provider_ids.get(PROVIDER_SHOKO_EPISODE, "")
        return [part.strip() for part in value.split(",") if part.strip()]

    @staticmethod
    def get_group_id(item: LibraryItem) -> Optional[str]:
        return item.provider_ids.get(PROVIDER_SHOKO_GROUP) or None
