"""
Informations canoniques synthetisees.

Une information par episode, saison (serie Shoko) ou collection, construite
a chaque passe de synthese a partir des donnees source courantes. Ces objets
ne sont jamais modifies en place : la passe suivante les remplace en entier.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Mapping, Optional

from src.core.entities.source_records import EpisodeCrossReference, EpisodeType, ShokoFile, SeriesType
from src.core.value_objects.texts import ContentRating, LocalizedText, Rating


class StructureType(str, Enum):
    """Schema d'identifiants definissant la numerotation des saisons/episodes."""

    SHOKO_GROUPS = "shoko_groups"
    SHOKO_SERIES = "shoko_series"
    TMDB_SERIES_AND_MOVIES = "tmdb_series_and_movies"


class ExtraType(str, Enum):
    """Type de bonus derive du type d'episode."""

    TRAILER = "trailer"
    THEME_VIDEO = "theme_video"
    INTERVIEW = "interview"
    CLIP = "clip"
    BEHIND_THE_SCENES = "behind_the_scenes"
    FEATURETTE = "featurette"
    UNKNOWN = "unknown"


class PersonKind(str, Enum):
    """Vocabulaire fixe des types de personnes."""

    DIRECTOR = "Director"
    PRODUCER = "Producer"
    LYRICIST = "Lyricist"
    WRITER = "Writer"
    COMPOSER = "Composer"
    ACTOR = "Actor"


@dataclass(frozen=True)
class PersonInfo:
    """
    Membre du staff synthetise.

    Attributs :
        kind : Type de personne
        name : Nom
        role : Role ou personnages joues (joints par " / ")
        image_url : URL de l'image, si disponible
        provider_ids : Identifiants par fournisseur (ex: {"AniDB Creator": "123"})
    """

    kind: PersonKind
    name: str
    role: Optional[str] = None
    image_url: Optional[str] = None
    provider_ids: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class EpisodeInfo:
    """
    Information canonique d'un episode (ou d'un film).

    parent_id est l'identifiant de la saison (serie Shoko, saison TMDB ou
    collection TMDB selon structure_type).
    """

    id: str
    parent_id: str
    structure_type: StructureType
    title: str
    titles: tuple[LocalizedText, ...] = ()
    overview: Optional[str] = None
    overviews: tuple[LocalizedText, ...] = ()
    anidb_id: Optional[str] = None
    tmdb_movie_id: Optional[str] = None
    tmdb_episode_id: Optional[str] = None
    tvdb_episode_id: Optional[str] = None
    type: EpisodeType = EpisodeType.NORMAL
    is_hidden: bool = False
    is_main_entry: bool = False
    is_standalone: bool = False
    season_number: Optional[int] = None
    episode_number: int = 1
    original_language_code: Optional[str] = None
    extra_type: Optional[ExtraType] = None
    runtime: Optional[timedelta] = None
    aired_at: Optional[datetime] = None
    community_rating: Rating = field(default_factory=Rating)
    genres: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()
    studios: tuple[str, ...] = ()
    production_locations: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    content_ratings: tuple[ContentRating, ...] = ()
    staff: tuple[PersonInfo, ...] = ()
    cross_references: tuple[EpisodeCrossReference, ...] = ()

    @property
    def is_available(self) -> bool:
        """Un episode sans reference croisee n'a aucun fichier : il est indisponible."""
        return len(self.cross_references) > 0


@dataclass(frozen=True)
class SeasonInfo:
    """
    Information canonique d'une saison (une serie Shoko).

    Les episodes sont repartis en episodes normaux, alternatifs, speciaux
    et bonus.
    """

    id: str
    parent_id: Optional[str]
    structure_type: StructureType
    title: str
    type: SeriesType = SeriesType.UNKNOWN
    titles: tuple[LocalizedText, ...] = ()
    overview: Optional[str] = None
    overviews: tuple[LocalizedText, ...] = ()
    anidb_id: Optional[str] = None
    tmdb_show_id: Optional[str] = None
    original_language_code: Optional[str] = None
    is_restricted: bool = False
    premiere_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    community_rating: Rating = field(default_factory=Rating)
    genres: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()
    studios: tuple[str, ...] = ()
    production_locations: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    content_ratings: tuple[ContentRating, ...] = ()
    staff: tuple[PersonInfo, ...] = ()
    episodes: tuple[EpisodeInfo, ...] = ()
    alternate_episodes: tuple[EpisodeInfo, ...] = ()
    specials: tuple[EpisodeInfo, ...] = ()
    extras: tuple[EpisodeInfo, ...] = ()

    @property
    def is_available(self) -> bool:
        """Disponible si au moins un episode (de n'importe quelle liste) a un fichier."""
        return any(
            episode.is_available
            for episode in (*self.episodes, *self.alternate_episodes, *self.specials, *self.extras)
        )

    @property
    def custom_rating(self) -> Optional[str]:
        """Note personnalisee ("XXX" pour le contenu restreint)."""
        return "XXX" if self.is_restricted else None


@dataclass(frozen=True)
class CollectionInfo:
    """Information canonique d'une collection (un groupe Shoko)."""

    id: str
    top_level_id: str
    title: str
    parent_id: Optional[str] = None
    titles: tuple[LocalizedText, ...] = ()
    overview: Optional[str] = None
    overviews: tuple[LocalizedText, ...] = ()
    main_season_id: Optional[str] = None
    file_count: int = 0
    original_language_code: Optional[str] = None

    @property
    def is_top_level(self) -> bool:
        return self.top_level_id == self.id

    @property
    def is_available(self) -> bool:
        return self.file_count > 0


@dataclass(frozen=True)
class ResolvedEpisode:
    """Episode resolu pour un fichier : (information, reference croisee, identifiant)."""

    episode: EpisodeInfo
    cross_reference: EpisodeCrossReference
    id: str


@dataclass(frozen=True)
class FileInfo:
    """
    Fichier resolu vers ses episodes pour une serie donnee.

    Un fichier sans episode resolu est indisponible (jamais une erreur).
    """

    id: str
    series_id: str
    file: ShokoFile
    episodes: tuple[ResolvedEpisode, ...] = ()

    @property
    def extra_type(self) -> Optional[ExtraType]:
        return next(
            (resolved.episode.extra_type for resolved in self.episodes if resolved.episode.extra_type),
            None,
        )

    @property
    def is_available(self) -> bool:
        return len(self.episodes) > 0
