"""
Enregistrements source deja decodes.

Representations passives de la vue d'une source amont sur une entite :
- Shoko : organisation locale des fichiers (fichiers, episodes, series, groupes)
- AniDB : catalogue anime natif (episodes, animes)
- TMDB : catalogue films/series parent (episodes, films, series)

Aucune logique ici, uniquement des donnees. Le decodage JSON et le transport
sont a la charge du client amont (voir core/ports/catalog.py).
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Optional

from src.core.value_objects.texts import ContentRating, LocalizedText, Rating


class EpisodeType(str, Enum):
    """Type d'episode AniDB."""

    NORMAL = "normal"
    OTHER = "other"
    SPECIAL = "special"
    TRAILER = "trailer"
    THEME_SONG = "theme_song"
    OPENING_SONG = "opening_song"
    ENDING_SONG = "ending_song"
    PARODY = "parody"
    INTERVIEW = "interview"
    EXTRA = "extra"


class SeriesType(str, Enum):
    """Type de serie AniDB."""

    UNKNOWN = "unknown"
    OTHER = "other"
    TV = "tv"
    TV_SPECIAL = "tv_special"
    WEB = "web"
    MOVIE = "movie"
    OVA = "ova"


class RoleType(str, Enum):
    """Type de role d'un createur (staff, studio, doubleur...)."""

    STUDIO = "studio"
    PRODUCER = "producer"
    DIRECTOR = "director"
    SERIES_COMPOSER = "series_composer"
    CHARACTER_DESIGN = "character_design"
    MUSIC = "music"
    SOURCE_WORK = "source_work"
    SEIYUU = "seiyuu"
    ACTOR = "actor"
    STAFF = "staff"


@dataclass(frozen=True)
class Image:
    """Reference vers une image servie par Shoko."""

    url: Optional[str] = None
    is_available: bool = False


@dataclass(frozen=True)
class Staff:
    """Identite d'un membre du staff ou d'un studio."""

    id: Optional[int] = None
    name: str = ""
    image: Optional[Image] = None


@dataclass(frozen=True)
class Character:
    """Personnage interprete."""

    name: str = ""


@dataclass(frozen=True)
class Role:
    """
    Role brut d'un createur sur une entite.

    Attributs :
        type : Type de role
        staff : Identite du createur
        name : Intitule du role (ex: "Director", "Original Work")
        character : Personnage interprete (doubleurs/acteurs uniquement)
    """

    type: RoleType
    staff: Staff
    name: Optional[str] = None
    character: Optional[Character] = None


@dataclass(frozen=True)
class Studio:
    """Studio de production (TMDB)."""

    id: int = 0
    name: str = ""
    country_of_origin: str = ""


# --- References croisees -------------------------------------------------


@dataclass(frozen=True)
class TmdbEpisodeIds:
    """Identifiants TMDB lies a un episode Shoko."""

    episode: tuple[int, ...] = ()
    movie: tuple[int, ...] = ()
    show: tuple[int, ...] = ()


@dataclass(frozen=True)
class CrossReferencePercentage:
    """
    Plage de correspondance fichier/episode.

    Attributs :
        start : Debut de la plage (pourcentage)
        end : Fin de la plage (pourcentage)
        size : Pourcentage brut servant au regroupement
        group : Nombre de groupes supposes dans la release, si connu
    """

    start: int = 0
    end: int = 100
    size: int = 100
    group: Optional[int] = None


@dataclass(frozen=True)
class EpisodeCrossReference:
    """
    Liaison entre un fichier physique et un episode.

    Le couple (ed2k, file_size) identifie le fichier physique.
    """

    anidb: int
    ed2k: str
    file_size: int
    shoko: Optional[int] = None
    tmdb: TmdbEpisodeIds = field(default_factory=TmdbEpisodeIds)
    release_group: Optional[int] = None
    percentage: CrossReferencePercentage = field(default_factory=CrossReferencePercentage)

    @property
    def fingerprint(self) -> tuple[str, int]:
        """Empreinte du fichier physique (hash ED2K, taille en octets)."""
        return (self.ed2k, self.file_size)


@dataclass(frozen=True)
class SeriesCrossReference:
    """Identifiants de serie d'une reference croisee de fichier."""

    anidb: int
    shoko: Optional[int] = None


@dataclass(frozen=True)
class FileCrossReference:
    """References croisees d'un fichier pour une serie."""

    series: SeriesCrossReference
    episodes: tuple[EpisodeCrossReference, ...] = ()


@dataclass(frozen=True)
class ShokoFile:
    """
    Fichier connu de Shoko.

    Attributs :
        id : Identifiant Shoko du fichier
        size : Taille en octets
        cross_references : References croisees par serie
        is_variation : Fichier marque comme variation dans Shoko
        relative_paths : Chemins relatifs dans les dossiers geres
    """

    id: int
    size: int = 0
    cross_references: tuple[FileCrossReference, ...] = ()
    is_variation: bool = False
    relative_paths: tuple[str, ...] = ()


# --- AniDB (catalogue natif) ---------------------------------------------


@dataclass(frozen=True)
class AnidbEpisode:
    """Episode AniDB."""

    id: int
    type: EpisodeType = EpisodeType.NORMAL
    episode_number: int = 1
    duration: Optional[timedelta] = None
    air_date: Optional[datetime] = None
    titles: tuple[LocalizedText, ...] = ()
    description: str = ""
    rating: Rating = field(default_factory=Rating)


@dataclass(frozen=True)
class AnidbAnime:
    """Anime AniDB (niveau serie)."""

    id: int
    type: SeriesType = SeriesType.UNKNOWN
    title: str = ""
    titles: tuple[LocalizedText, ...] = ()
    description: str = ""
    rating: Rating = field(default_factory=Rating)
    air_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_restricted: bool = False


# --- Shoko (organisation locale) -----------------------------------------


@dataclass(frozen=True)
class ShokoEpisode:
    """
    Episode Shoko, enveloppant l'episode AniDB.

    Attributs :
        id : Identifiant Shoko de l'episode
        series_id : Identifiant Shoko de la serie parente
        name : Titre prefere (selon les preferences de langue du serveur)
        description : Description preferee
        anidb : Episode AniDB associe
        cross_references : References croisees de fichiers
        tmdb : Identifiants TMDB lies
    """

    id: str
    series_id: str
    anidb: AnidbEpisode
    name: str = ""
    description: str = ""
    is_hidden: bool = False
    cross_references: tuple[EpisodeCrossReference, ...] = ()
    tmdb: TmdbEpisodeIds = field(default_factory=TmdbEpisodeIds)


@dataclass(frozen=True)
class ShokoSeries:
    """Serie Shoko, enveloppant l'anime AniDB."""

    id: str
    anidb: AnidbAnime
    group_id: Optional[str] = None
    name: str = ""
    description: str = ""
    tmdb_show_ids: tuple[int, ...] = ()
    tmdb_movie_ids: tuple[int, ...] = ()


@dataclass(frozen=True)
class ShokoGroup:
    """Groupe Shoko (base des collections)."""

    id: str
    top_level_id: str
    name: str = ""
    description: str = ""
    parent_id: Optional[str] = None
    main_series_id: Optional[str] = None
    file_count: int = 0


# --- TMDB (catalogue parent) ---------------------------------------------


@dataclass(frozen=True)
class TmdbShow:
    """Serie TMDB."""

    id: int
    title: str = ""
    titles: tuple[LocalizedText, ...] = ()
    overview: str = ""
    overviews: tuple[LocalizedText, ...] = ()
    original_language: str = ""
    tvdb_id: Optional[int] = None
    is_restricted: bool = False
    user_rating: Rating = field(default_factory=Rating)
    genres: tuple[str, ...] = ()
    keywords: tuple[str, ...] = ()
    content_ratings: tuple[ContentRating, ...] = ()
    # Code pays -> nom du pays
    production_countries: dict[str, str] = field(default_factory=dict)
    studios: tuple[Studio, ...] = ()
    first_aired_at: Optional[date] = None
    last_aired_at: Optional[date] = None


@dataclass(frozen=True)
class TmdbEpisode:
    """Episode TMDB."""

    id: int
    show_id: int
    season_id: str = ""
    tvdb_episode_id: Optional[int] = None
    title: str = ""
    titles: tuple[LocalizedText, ...] = ()
    overview: str = ""
    overviews: tuple[LocalizedText, ...] = ()
    season_number: int = 1
    episode_number: int = 1
    user_rating: Rating = field(default_factory=Rating)
    runtime: Optional[timedelta] = None
    cast: tuple[Role, ...] = ()
    crew: tuple[Role, ...] = ()
    file_cross_references: tuple[FileCrossReference, ...] = ()
    aired_at: Optional[date] = None


@dataclass(frozen=True)
class TmdbMovie:
    """Film TMDB."""

    id: int
    collection_id: Optional[int] = None
    imdb_movie_id: Optional[str] = None
    title: str = ""
    titles: tuple[LocalizedText, ...] = ()
    overview: str = ""
    overviews: tuple[LocalizedText, ...] = ()
    original_language: str = ""
    is_restricted: bool = False
    user_rating: Rating = field(default_factory=Rating)
    runtime: Optional[timedelta] = None
    genres: tuple[str, ...] = ()
    keywords: tuple[str, ...] = ()
    content_ratings: tuple[ContentRating, ...] = ()
    production_countries: dict[str, str] = field(default_factory=dict)
    studios: tuple[Studio, ...] = ()
    cast: tuple[Role, ...] = ()
    crew: tuple[Role, ...] = ()
    file_cross_references: tuple[FileCrossReference, ...] = ()
    released_at: Optional[date] = None
