"""
Dataclasses du rafraichissement des metadonnees.
"""

from dataclasses import dataclass
from typing import Iterator

from src.core.entities.library import ItemKind


@dataclass(frozen=True)
class RefreshOutcome:
    """
    Resultat immutable du rafraichissement d'un element.

    Chaque appel retourne son propre resultat ; l'appelant les agrege
    (children) au lieu de modifier un accumulateur partage.

    Attributs :
        item_id : Identifiant de l'element
        kind : Type d'element
        legacy : Le rafraichissement natif a modifie l'element
        updated_fields : Noms des champs modifies par le rafraichissement cible
        children : Resultats des elements rafraichis en cascade
        failed : La branche a echoue (cascade uniquement)
    """

    item_id: str
    kind: ItemKind
    legacy: bool = False
    updated_fields: tuple[str, ...] = ()
    children: tuple["RefreshOutcome", ...] = ()
    failed: bool = False

    @property
    def updated(self) -> bool:
        """True si l'element ou l'un de ses descendants a ete modifie."""
        return self.legacy or bool(self.updated_fields) or any(child.updated for child in self.children)

    def __bool__(self) -> bool:
        return self.updated

    def walk(self) -> Iterator["RefreshOutcome"]:
        """Parcourt le resultat et tous ses descendants."""
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass
class AutoRefreshResult:
    """Bilan d'un balayage automatique."""

    movies: int = 0
    series: int = 0
    seasons: int = 0
    episodes: int = 0
    updated: int = 0

    @property
    def total(self) -> int:
        return self.movies + self.series + self.seasons + self.episodes
