"""
Objets valeur pour les textes localises et les notes.

Objets valeur immutables partages par toutes les sources (Shoko, AniDB, TMDB)
et par les informations canoniques synthetisees.
Tous les objets valeur utilisent @dataclass(frozen=True) pour garantir l'immutabilite.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class TitleType(str, Enum):
    """Type de titre AniDB (uniquement renseigne au niveau serie)."""

    MAIN = "main"
    OFFICIAL = "official"
    SHORT = "short"
    SYNONYM = "synonym"
    TITLE_CARD = "title_card"
    KANJI_READING = "kanji_reading"


@dataclass(frozen=True)
class LocalizedText:
    """
    Texte localise provenant d'une source (titre ou description).

    Attributs :
        value : Le texte
        language_code : Code langue (alpha 3, ou extensions comme "x-jat")
        source : Source du texte ("AniDB", "TMDB", ...)
        is_default : Texte par defaut parmi toutes les valeurs de l'entite
        is_preferred : Texte prefere parmi toutes les valeurs de l'entite
        type : Type de titre AniDB, si connu
    """

    value: str = ""
    language_code: str = "unk"
    source: str = "Unknown"
    is_default: bool = False
    is_preferred: bool = False
    type: Optional[TitleType] = None


@dataclass(frozen=True)
class Rating:
    """
    Note communautaire relative a une valeur maximale.

    Attributs :
        value : Valeur de la note relative a max_value
        max_value : Valeur maximale de l'echelle (0 si inconnue)
        source : Source de la note ("AniDB", "TMDB")
        votes : Nombre de votes, si connu
    """

    value: float = 0.0
    max_value: int = 0
    source: str = ""
    votes: Optional[int] = None

    def to_float(self, scale: int) -> float:
        """Convertit la note vers une echelle donnee (ex: 10)."""
        if self.max_value == 0:
            return 0.0
        if scale == self.max_value:
            return float(self.value)
        return float(self.value * scale / self.max_value)


@dataclass(frozen=True)
class ContentRating:
    """
    Classification de contenu (ex: "PG-13" pour les US).

    L'egalite (et le hash) portent sur les quatre champs, ce qui permet
    la deduplication par simple passage dans un dict.
    """

    rating: str = ""
    country: str = ""
    language: str = ""
    source: str = ""


def distinct_content_ratings(ratings) -> tuple[ContentRating, ...]:
    """Deduplique des classifications en conservant l'ordre de premiere apparition."""
    return tuple(dict.fromkeys(ratings))
