"""
Objets valeur immutables representant des concepts du domaine sans identite.

Les objets valeur sont definis par leurs attributs plutot que par une identite.
Ils sont immutables et peuvent etre librement partages et compares par valeur.

Exports :
- LocalizedText : Titre ou description localise, avec sa source
- Rating : Note communautaire relative a une echelle
- ContentRating : Classification de contenu (note, pays, langue, source)
- RefreshField : Groupes de champs a rafraichir (drapeaux)
- TagSource : Sources TMDB des tags et genres (drapeaux)
"""

from src.core.value_objects.refresh_fields import RefreshField, TagSource
from src.core.value_objects.texts import (
    ContentRating,
    LocalizedText,
    Rating,
    TitleType,
    distinct_content_ratings,
)

__all__ = [
    "ContentRating",
    "LocalizedText",
    "Rating",
    "TitleType",
    "distinct_content_ratings",
    "RefreshField",
    "TagSource",
]
