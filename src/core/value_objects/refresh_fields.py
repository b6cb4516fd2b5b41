"""
Ensembles de champs rafraichissables et sources de tags.

Les groupes de champs sont des drapeaux independants (enum.Flag) : appliquer
un groupe ne lit ni n'ecrit jamais les champs d'un autre groupe.
"""

from enum import Flag
from typing import Iterable, Union

from src.core.exceptions import InvalidRefreshFieldError


def _parse_flag(flag_type, value):
    """Parse une valeur de configuration ("A|B", liste de noms, entier) en drapeau."""
    if isinstance(value, flag_type):
        return value
    if isinstance(value, int):
        return flag_type(value)
    if isinstance(value, str):
        names: Iterable[str] = [part for part in value.replace(",", "|").split("|")]
    else:
        names = value

    result = flag_type(0)
    for raw_name in names:
        name = str(raw_name).strip().upper()
        if not name:
            continue
        try:
            result |= flag_type[name]
        except KeyError:
            raise InvalidRefreshFieldError(
                f"Valeur inconnue pour {flag_type.__name__}: {raw_name!r}"
            ) from None
    return result


class RefreshField(Flag):
    """Groupes de champs de metadonnees a mettre a jour."""

    NONE = 0
    # Titre, titre original et description
    TITLES_AND_OVERVIEW = 1 << 0
    # Date de premiere diffusion, annee de production, date de fin et duree
    DATES = 1 << 1
    TAGS_AND_GENRES = 1 << 2
    STUDIOS_AND_PRODUCTION_LOCATIONS = 1 << 3
    CAST_AND_CREW = 1 << 4
    # Classification officielle, note communautaire et note personnalisee
    CONTENT_RATINGS = 1 << 5
    IMAGES = 1 << 6
    PREFERRED_IMAGES = 1 << 7
    # Propage le rafraichissement aux enfants (saisons, episodes)
    RECURSIVE = 1 << 8
    CUSTOM_PROVIDER = 1 << 9
    LEGACY_REFRESH = 1 << 31

    @classmethod
    def parse(cls, value: Union[str, int, Iterable[str], "RefreshField"]) -> "RefreshField":
        """
        Parse une valeur de configuration.

        Exemples :
            RefreshField.parse("TITLES_AND_OVERVIEW|DATES")
            RefreshField.parse(["tags_and_genres", "recursive"])

        Raises :
            InvalidRefreshFieldError : Si un nom de groupe est inconnu
        """
        return _parse_flag(cls, value)

    @property
    def has_field_groups(self) -> bool:
        """True si au moins un groupe autre que le rafraichissement legacy est demande."""
        return bool(self & ~RefreshField.LEGACY_REFRESH)


class TagSource(Flag):
    """Sources TMDB autorisees pour alimenter les tags ou les genres."""

    NONE = 0
    TMDB_KEYWORDS = 1 << 0
    TMDB_GENRES = 1 << 1

    @classmethod
    def parse(cls, value: Union[str, int, Iterable[str], "TagSource"]) -> "TagSource":
        """Parse une valeur de configuration ("TMDB_KEYWORDS|TMDB_GENRES")."""
        return _parse_flag(cls, value)
