"""
Constantes globales pour AniMeta.

Ce module contient les constantes partagees dans l'application:
- Noms des fournisseurs d'identifiants (cles de provider_ids)
- Prefixes des identifiants synthetises depuis TMDB
- Sous-titres generiques AniDB (entrees principales)
- Ordre de selection des types d'episodes pour un fichier
"""

from src.core.entities.source_records import EpisodeType

# Noms des fournisseurs (cles de LibraryItem.provider_ids)
PROVIDER_ANIDB = "AniDB"
PROVIDER_ANIDB_CREATOR = "AniDB Creator"
PROVIDER_TMDB = "Tmdb"
PROVIDER_SHOKO_GROUP = "Shoko Group"
PROVIDER_SHOKO_SERIES = "Shoko Series"
PROVIDER_SHOKO_EPISODE = "Shoko Episode"
PROVIDER_SHOKO_FILE = "Shoko File"
PROVIDER_SHOKO_INTERNAL = "Shoko Internal"

# Cles de la table des lieux de production
PRODUCTION_LOCATION_ANIDB = "AniDB"
PRODUCTION_LOCATION_TMDB = "TMDB"

# Prefixes des identifiants construits depuis TMDB (jamais en collision
# avec les identifiants Shoko, qui sont numeriques)
ID_PREFIX_TMDB_SHOW = "t"
ID_PREFIX_TMDB_MOVIE = "m"

# Sous-titres AniDB generiques : un episode titre ainsi est l'entree principale
# (le titre repete simplement le nom de la serie)
IGNORED_SUB_TITLES = frozenset({
    "complete movie",
    "music video",
    "oad",
    "ova",
    "short movie",
    "special",
    "tv special",
    "web",
})

# Ordre de selection des types d'episodes : le plus grand index gagne
EPISODE_PICK_ORDER = (
    EpisodeType.SPECIAL,
    EpisodeType.NORMAL,
    EpisodeType.OTHER,
)

# Source et pays des classifications AniDB
ANIDB_CONTENT_RATING_COUNTRY = "US"
ANIDB_CONTENT_RATING_LANGUAGE = "en"

# Ponctuation terminale (pas de ". " ajoute lors de la jonction de textes)
PUNCTUATION_MARKS = frozenset(".,;:!?)]}\"'")
