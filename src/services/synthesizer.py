"""
Synthese des informations canoniques.

L'EntitySynthesizer fusionne les enregistrements Shoko/AniDB et TMDB d'une
meme entite en une information canonique immutable (episode, saison,
collection). Regles de precedence par groupe de champs :

1. Film TMDB lie : duree, date, note, casting, studios, lieux,
   classifications, tags et genres viennent du film (duree AniDB en repli).
2. Sinon episode TMDB lie : idem, mais studios, lieux, classifications,
   tags et genres viennent de la serie TMDB parente.
3. Sinon : tout vient d'AniDB, staff et studios derives des roles AniDB.

L'asymetrie entre 1 et 2 est une regle du domaine : un episode TMDB seul
ne porte presque jamais ces donnees.
"""

from datetime import date, datetime, timezone
from typing import Iterable, Optional, Sequence, Union

from loguru import logger

from src.config import Settings
from src.core.entities.entity_info import (
    CollectionInfo,
    EpisodeInfo,
    PersonInfo,
    PersonKind,
    SeasonInfo,
    StructureType,
)
from src.core.entities.source_records import (
    EpisodeType,
    Image,
    Role,
    RoleType,
    SeriesType,
    ShokoEpisode,
    ShokoGroup,
    ShokoSeries,
    TmdbEpisode,
    TmdbMovie,
    TmdbShow,
)
from src.core.value_objects.refresh_fields import TagSource
from src.core.value_objects.texts import ContentRating, LocalizedText, distinct_content_ratings
from src.services.cross_reference import CrossReferenceResolver
from src.utils.constants import (
    ANIDB_CONTENT_RATING_COUNTRY,
    ANIDB_CONTENT_RATING_LANGUAGE,
    ID_PREFIX_TMDB_MOVIE,
    ID_PREFIX_TMDB_SHOW,
    PRODUCTION_LOCATION_ANIDB,
    PRODUCTION_LOCATION_TMDB,
    PROVIDER_ANIDB,
    PROVIDER_ANIDB_CREATOR,
    PROVIDER_TMDB,
)
from src.utils.text import get_extra_type, sanitize_description

TmdbEntity = Union[TmdbMovie, TmdbShow]

_EARLIEST = datetime.min.replace(tzinfo=timezone.utc)


def _to_datetime(value: Union[date, datetime, None]) -> Optional[datetime]:
    """Convertit une date TMDB (jour seul) en datetime a minuit."""
    if value is None or isinstance(value, datetime):
        return value
    return datetime(value.year, value.month, value.day)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Les dates naives sont considerees en UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def _image_url(image: Optional[Image]) -> Optional[str]:
    if image is not None and image.is_available:
        return image.url
    return None


def group_roles(roles: Iterable[Role]) -> list[list[Role]]:
    """
    Regroupe des roles par (type de role, identite du createur).

    L'ordre de premiere apparition des groupes est conserve.
    """
    groups: dict[tuple, list[Role]] = {}
    for role in roles:
        groups.setdefault((role.type, role.staff.id), []).append(role)
    return list(groups.values())


def role_to_person(roles: Sequence[Role], role_provider: str) -> Optional[PersonInfo]:
    """
    Convertit un groupe de roles en entree de staff.

    Le premier role du groupe est le representant. Les types non reconnus
    ne produisent aucune entree.

    Args:
        roles: Roles d'un meme createur pour un meme type de role
        role_provider: Nom du fournisseur d'identifiant des realisateurs

    Returns:
        PersonInfo, ou None si le type de role n'est pas retenu
    """
    first = roles[0]
    image_url = _image_url(first.staff.image)

    if first.type == RoleType.DIRECTOR:
        provider_ids = {}
        if first.staff.id is not None:
            provider_ids[role_provider] = str(first.staff.id)
        return PersonInfo(
            kind=PersonKind.DIRECTOR,
            name=first.staff.name,
            role=first.name,
            image_url=image_url,
            provider_ids=provider_ids,
        )
    if first.type == RoleType.PRODUCER:
        return PersonInfo(PersonKind.PRODUCER, first.staff.name, first.name, image_url)
    if first.type == RoleType.MUSIC:
        return PersonInfo(PersonKind.LYRICIST, first.staff.name, first.name, image_url)
    if first.type == RoleType.SOURCE_WORK:
        return PersonInfo(PersonKind.WRITER, first.staff.name, first.name, image_url)
    if first.type == RoleType.SERIES_COMPOSER:
        return PersonInfo(PersonKind.COMPOSER, first.staff.name, None, image_url)
    if first.type in (RoleType.SEIYUU, RoleType.ACTOR):
        characters = sorted(
            role.character.name for role in roles if role.character is not None
        )
        return PersonInfo(
            PersonKind.ACTOR, first.staff.name, " / ".join(characters) or None, image_url
        )
    return None


def roles_to_staff(roles: Iterable[Role], role_provider: str) -> tuple[PersonInfo, ...]:
    """Regroupe puis convertit des roles bruts en staff synthetise."""
    people = (role_to_person(group, role_provider) for group in group_roles(roles))
    return tuple(person for person in people if person is not None)


def _distinct_sorted(values: Iterable[str]) -> tuple[str, ...]:
    return tuple(sorted(set(values)))


class EntitySynthesizer:
    """
    Service de synthese des informations canoniques.

    Deterministe : memes enregistrements source et meme configuration,
    meme information synthetisee.
    """

    def __init__(
        self,
        settings: Settings,
        resolver: Optional[CrossReferenceResolver] = None,
    ) -> None:
        self._settings = settings
        self._resolver = resolver or CrossReferenceResolver()

    # --- Textes ---------------------------------------------------------

    def sanitize(self, text: Optional[str]) -> str:
        """Nettoie une description AniDB selon la configuration."""
        return sanitize_description(
            text,
            clean_links=self._settings.synopsis_clean_links,
            clean_misc_lines=self._settings.synopsis_clean_misc_lines,
            remove_summary=self._settings.synopsis_remove_summary,
            clean_multi_empty_lines=self._settings.synopsis_clean_multi_empty_lines,
            enable_markdown=self._settings.synopsis_enable_markdown,
        )

    def _overview(self, description: str, anidb_description: str) -> str:
        """La description preferee n'est nettoyee que si elle vient d'AniDB."""
        if description == anidb_description:
            return self.sanitize(description)
        return description

    def _overviews(
        self,
        description: str,
        anidb_description: str,
        parent_overviews: Sequence[LocalizedText] = (),
    ) -> tuple[LocalizedText, ...]:
        overviews: list[LocalizedText] = []
        if anidb_description and description == anidb_description:
            overviews.append(
                LocalizedText(
                    value=self.sanitize(anidb_description),
                    language_code="en",
                    source=PROVIDER_ANIDB,
                    is_default=True,
                    is_preferred=True,
                )
            )
        overviews.extend(parent_overviews)
        return tuple(overviews)

    def _tmdb_tags_and_genres(self, entity: TmdbEntity) -> tuple[list[str], list[str]]:
        """Tags et genres TMDB filtres par les sources configurees."""
        tags: list[str] = []
        genres: list[str] = []
        if TagSource.TMDB_KEYWORDS in self._settings.tag_sources:
            tags.extend(entity.keywords)
        if TagSource.TMDB_GENRES in self._settings.tag_sources:
            tags.extend(entity.genres)
        if TagSource.TMDB_KEYWORDS in self._settings.genre_sources:
            genres.extend(entity.keywords)
        if TagSource.TMDB_GENRES in self._settings.genre_sources:
            genres.extend(entity.genres)
        return tags, genres

    # --- Episodes -------------------------------------------------------

    def synthesize_episode(
        self,
        episode: ShokoEpisode,
        cast: Sequence[Role],
        genres: Sequence[str],
        tags: Sequence[str],
        production_locations: Sequence[str],
        content_rating_override: Optional[str],
        parent_entity: Union[TmdbMovie, TmdbEpisode, None] = None,
        parent_parent: Optional[TmdbShow] = None,
    ) -> EpisodeInfo:
        """
        Synthetise l'information d'un episode Shoko.

        Args:
            episode: Episode Shoko (avec son episode AniDB)
            cast: Roles AniDB de la serie
            genres: Genres AniDB de la serie
            tags: Tags AniDB de la serie
            production_locations: Lieux de production AniDB
            content_rating_override: Classification AniDB de la serie
            parent_entity: Film ou episode TMDB lie, le cas echeant
            parent_parent: Serie TMDB de l'episode TMDB lie

        Returns:
            EpisodeInfo disponible ssi l'episode a des references croisees
        """
        anidb = episode.anidb
        tmdb_movie = parent_entity if isinstance(parent_entity, TmdbMovie) else None
        tmdb_episode = parent_entity if isinstance(parent_entity, TmdbEpisode) else None
        is_main_entry = self._resolver.is_main_entry(anidb)

        tags_out = list(tags)
        genres_out = list(genres)
        content_ratings: list[ContentRating] = []
        locations: dict[str, tuple[str, ...]] = {}
        if content_rating_override:
            content_ratings.append(
                ContentRating(
                    rating=content_rating_override,
                    country=ANIDB_CONTENT_RATING_COUNTRY,
                    language=ANIDB_CONTENT_RATING_LANGUAGE,
                    source=PROVIDER_ANIDB,
                )
            )
        if production_locations:
            locations[PRODUCTION_LOCATION_ANIDB] = tuple(production_locations)

        tmdb_movie_id = None
        tmdb_episode_id = None
        tvdb_episode_id = None
        studios: tuple[str, ...] = ()

        if tmdb_movie is not None:
            tmdb_movie_id = str(tmdb_movie.id)
            runtime = tmdb_movie.runtime if tmdb_movie.runtime is not None else anidb.duration
            aired_at = _to_datetime(tmdb_movie.released_at)
            community_rating = tmdb_movie.user_rating
            staff = roles_to_staff((*tmdb_movie.cast, *tmdb_movie.crew), PROVIDER_TMDB)
            locations[PRODUCTION_LOCATION_TMDB] = tuple(tmdb_movie.production_countries.values())
            content_ratings.extend(tmdb_movie.content_ratings)
            studios = tuple(studio.name for studio in tmdb_movie.studios)
            extra_tags, extra_genres = self._tmdb_tags_and_genres(tmdb_movie)
            tags_out.extend(extra_tags)
            genres_out.extend(extra_genres)
        elif tmdb_episode is not None:
            tmdb_episode_id = str(tmdb_episode.id)
            if tmdb_episode.tvdb_episode_id is not None:
                tvdb_episode_id = str(tmdb_episode.tvdb_episode_id)
            runtime = tmdb_episode.runtime if tmdb_episode.runtime is not None else anidb.duration
            aired_at = _to_datetime(tmdb_episode.aired_at)
            community_rating = tmdb_episode.user_rating
            staff = roles_to_staff((*tmdb_episode.cast, *tmdb_episode.crew), PROVIDER_TMDB)
            if parent_parent is not None:
                locations[PRODUCTION_LOCATION_TMDB] = tuple(parent_parent.production_countries.values())
                content_ratings.extend(parent_parent.content_ratings)
                studios = tuple(studio.name for studio in parent_parent.studios)
                extra_tags, extra_genres = self._tmdb_tags_and_genres(parent_parent)
                tags_out.extend(extra_tags)
                genres_out.extend(extra_genres)
        else:
            runtime = anidb.duration
            aired_at = anidb.air_date
            community_rating = anidb.rating
            staff = roles_to_staff(cast, PROVIDER_ANIDB_CREATOR)
            studios = tuple(role.staff.name for role in cast if role.type == RoleType.STUDIO)

        parent_titles = parent_entity.titles if parent_entity is not None else ()
        parent_overviews = parent_entity.overviews if parent_entity is not None else ()

        return EpisodeInfo(
            id=episode.id,
            parent_id=episode.series_id,
            structure_type=StructureType.SHOKO_GROUPS,
            title=episode.name,
            titles=(*anidb.titles, *parent_titles),
            overview=self._overview(episode.description, anidb.description),
            overviews=self._overviews(episode.description, anidb.description, parent_overviews),
            anidb_id=str(anidb.id),
            tmdb_movie_id=tmdb_movie_id,
            tmdb_episode_id=tmdb_episode_id,
            tvdb_episode_id=tvdb_episode_id,
            type=anidb.type,
            is_hidden=episode.is_hidden,
            is_main_entry=is_main_entry,
            is_standalone=self._resolver.is_standalone(anidb, tmdb_movie is not None),
            season_number=None,
            episode_number=anidb.episode_number,
            extra_type=get_extra_type(anidb),
            runtime=runtime,
            aired_at=aired_at,
            community_rating=community_rating,
            genres=tuple(genres_out),
            tags=tuple(tags_out),
            studios=studios,
            production_locations=locations,
            content_ratings=distinct_content_ratings(content_ratings),
            staff=staff,
            cross_references=tuple(episode.cross_references),
        )

    def synthesize_parent_episode(self, tmdb_episode: TmdbEpisode, tmdb_show: TmdbShow) -> EpisodeInfo:
        """Synthetise un episode en structure TMDB (identifiants prefixes)."""
        tags, genres = self._tmdb_tags_and_genres(tmdb_show)
        tvdb_episode_id = tmdb_episode.tvdb_episode_id
        return EpisodeInfo(
            id=f"{ID_PREFIX_TMDB_SHOW}{tmdb_episode.id}",
            parent_id=f"{ID_PREFIX_TMDB_SHOW}{tmdb_episode.season_id}",
            structure_type=StructureType.TMDB_SERIES_AND_MOVIES,
            title=tmdb_episode.title,
            titles=tuple(tmdb_episode.titles),
            overview=tmdb_episode.overview,
            overviews=tuple(tmdb_episode.overviews),
            tmdb_episode_id=str(tmdb_episode.id),
            tvdb_episode_id=str(tvdb_episode_id) if tvdb_episode_id is not None else None,
            type=EpisodeType.SPECIAL if tmdb_episode.season_number == 0 else EpisodeType.NORMAL,
            season_number=tmdb_episode.season_number,
            episode_number=tmdb_episode.episode_number,
            original_language_code=tmdb_show.original_language or None,
            runtime=tmdb_episode.runtime,
            aired_at=_to_datetime(tmdb_episode.aired_at),
            community_rating=tmdb_episode.user_rating,
            genres=tuple(genres),
            tags=tuple(tags),
            studios=tuple(studio.name for studio in tmdb_show.studios),
            production_locations={
                PRODUCTION_LOCATION_TMDB: tuple(tmdb_show.production_countries.values()),
            },
            content_ratings=distinct_content_ratings(tmdb_show.content_ratings),
            staff=roles_to_staff((*tmdb_episode.cast, *tmdb_episode.crew), PROVIDER_TMDB),
            cross_references=self._resolver.flatten(tmdb_episode.file_cross_references),
        )

    def synthesize_parent_movie(self, tmdb_movie: TmdbMovie) -> EpisodeInfo:
        """Synthetise un film en structure TMDB (identifiants prefixes)."""
        tags, genres = self._tmdb_tags_and_genres(tmdb_movie)
        movie_id = f"{ID_PREFIX_TMDB_MOVIE}{tmdb_movie.id}"
        return EpisodeInfo(
            id=movie_id,
            parent_id=movie_id,
            structure_type=StructureType.TMDB_SERIES_AND_MOVIES,
            title=tmdb_movie.title,
            titles=tuple(tmdb_movie.titles),
            overview=tmdb_movie.overview,
            overviews=tuple(tmdb_movie.overviews),
            tmdb_movie_id=str(tmdb_movie.id),
            type=EpisodeType.NORMAL,
            is_standalone=True,
            episode_number=1,
            original_language_code=tmdb_movie.original_language or None,
            runtime=tmdb_movie.runtime,
            aired_at=_to_datetime(tmdb_movie.released_at),
            community_rating=tmdb_movie.user_rating,
            genres=tuple(genres),
            tags=tuple(tags),
            studios=tuple(studio.name for studio in tmdb_movie.studios),
            production_locations={
                PRODUCTION_LOCATION_TMDB: tuple(tmdb_movie.production_countries.values()),
            },
            content_ratings=distinct_content_ratings(tmdb_movie.content_ratings),
            staff=roles_to_staff((*tmdb_movie.cast, *tmdb_movie.crew), PROVIDER_TMDB),
            cross_references=self._resolver.flatten(tmdb_movie.file_cross_references),
        )

    # --- Saisons et collections -----------------------------------------

    def synthesize_season(
        self,
        series: ShokoSeries,
        episodes: Sequence[EpisodeInfo],
        tmdb_show: Optional[TmdbShow] = None,
    ) -> SeasonInfo:
        """
        Synthetise l'information d'une serie Shoko (une saison).

        Les episodes visibles sont repartis en listes : normaux, alternatifs
        (type "autre" sans bonus), speciaux et bonus. Si tous les episodes
        normaux sont caches, les alternatifs les remplacent.
        """
        anime = series.anidb
        ordered = sorted(
            episodes,
            key=lambda e: (e.aired_at is None, _as_utc(e.aired_at) or _EARLIEST, e.episode_number),
        )

        normal: list[EpisodeInfo] = []
        alternates: list[EpisodeInfo] = []
        specials: list[EpisodeInfo] = []
        extras: list[EpisodeInfo] = []
        for episode in ordered:
            if episode.is_hidden:
                continue
            if episode.type == EpisodeType.NORMAL:
                normal.append(episode)
            elif episode.extra_type is not None:
                extras.append(episode)
            elif episode.type == EpisodeType.OTHER:
                alternates.append(episode)
            elif episode.type == EpisodeType.SPECIAL:
                specials.append(episode)

        def by_number(items: list[EpisodeInfo]) -> tuple[EpisodeInfo, ...]:
            return tuple(sorted(items, key=lambda e: e.episode_number))

        season_type = anime.type
        if not normal and alternates:
            # Film principal cache mais parties presentes
            if season_type == SeriesType.MOVIE:
                season_type = SeriesType.WEB
            normal, alternates = alternates, []
        elif season_type == SeriesType.MOVIE and any(
            e.is_main_entry and e.is_hidden for e in episodes
        ):
            season_type = SeriesType.WEB

        locations: dict[str, list[str]] = {}
        for episode in episodes:
            for key, values in episode.production_locations.items():
                locations.setdefault(key, []).extend(values)

        staff: list[PersonInfo] = []
        seen_staff: set[tuple] = set()
        for person in (p for e in episodes for p in e.staff):
            key = (person.kind, person.name, person.role)
            if key not in seen_staff:
                seen_staff.add(key)
                staff.append(person)

        parent_titles = tmdb_show.titles if tmdb_show is not None else ()
        parent_overviews = tmdb_show.overviews if tmdb_show is not None else ()

        logger.trace(
            f"Saison synthetisee {series.id} : {len(normal)} episode(s), "
            f"{len(specials)} special(aux), {len(extras)} bonus"
        )
        return SeasonInfo(
            id=series.id,
            parent_id=series.group_id,
            structure_type=StructureType.SHOKO_GROUPS,
            title=series.name,
            type=season_type,
            titles=(*anime.titles, *parent_titles),
            overview=self._overview(series.description, anime.description),
            overviews=self._overviews(series.description, anime.description, parent_overviews),
            anidb_id=str(anime.id),
            tmdb_show_id=str(tmdb_show.id) if tmdb_show is not None else None,
            is_restricted=anime.is_restricted,
            premiere_date=anime.air_date,
            end_date=anime.end_date,
            community_rating=anime.rating,
            genres=_distinct_sorted(g for e in episodes for g in e.genres),
            tags=_distinct_sorted(t for e in episodes for t in e.tags),
            studios=_distinct_sorted(s for e in episodes for s in e.studios),
            production_locations={
                key: _distinct_sorted(values) for key, values in locations.items()
            },
            content_ratings=distinct_content_ratings(
                rating for e in episodes for rating in e.content_ratings
            ),
            staff=tuple(staff),
            episodes=by_number(normal),
            alternate_episodes=by_number(alternates),
            specials=by_number(specials),
            extras=tuple(extras),
        )

    def synthesize_collection(
        self,
        group: ShokoGroup,
        series: Optional[ShokoSeries] = None,
        main_season_id: Optional[str] = None,
    ) -> CollectionInfo:
        """
        Synthetise l'information d'un groupe Shoko.

        Quand la serie principale est fournie, son titre et sa description
        AniDB nettoyee remplacent ceux du groupe.
        """
        if series is None:
            return CollectionInfo(
                id=group.id,
                top_level_id=group.top_level_id,
                title=group.name,
                parent_id=group.parent_id,
                overview=group.description,
                main_season_id=main_season_id,
                file_count=group.file_count,
            )

        anime = series.anidb
        return CollectionInfo(
            id=group.id,
            top_level_id=group.top_level_id,
            title=series.name,
            parent_id=group.parent_id,
            titles=tuple(anime.titles),
            overview=self._overview(series.description, anime.description),
            overviews=self._overviews(series.description, anime.description),
            main_season_id=main_season_id,
            file_count=group.file_count,
        )
