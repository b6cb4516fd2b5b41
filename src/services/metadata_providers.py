"""
Fournisseurs de metadonnees par type d'element.

Chaque fournisseur resout l'element demande vers son information canonique
(via l'InfoManager) puis la convertit a la forme des elements de l'hote.
L'absence d'entite correspondante produit un MetadataResult vide.
"""

from abc import abstractmethod
from datetime import datetime
from typing import Optional, Sequence

from loguru import logger

from src.config import Settings
from src.core.entities.entity_info import (
    CollectionInfo,
    EpisodeInfo,
    PersonInfo,
    SeasonInfo,
)
from src.core.entities.source_records import EpisodeType, SeriesType
from src.core.ports.metadata import (
    IMetadataProvider,
    ItemMetadata,
    MetadataRequest,
    MetadataResult,
)
from src.core.value_objects.texts import ContentRating, Rating, TitleType
from src.services.info_manager import InfoManager
from src.services.usage_tracker import UsageTracker
from src.utils.constants import (
    PRODUCTION_LOCATION_ANIDB,
    PRODUCTION_LOCATION_TMDB,
    PROVIDER_ANIDB,
    PROVIDER_SHOKO_EPISODE,
    PROVIDER_SHOKO_FILE,
    PROVIDER_SHOKO_GROUP,
    PROVIDER_SHOKO_SERIES,
    PROVIDER_TMDB,
)
from src.utils.text import get_title_for_language, join_text


def community_rating(rating: Rating) -> Optional[float]:
    """Note sur 10, ou None si la note est absente."""
    if rating.value <= 0:
        return None
    return round(rating.to_float(10), 2)


def official_rating(ratings: Sequence[ContentRating], country_code: Optional[str]) -> Optional[str]:
    """Classification du pays demande, sinon la premiere disponible."""
    if not ratings:
        return None
    if country_code:
        for rating in ratings:
            if rating.country.lower() == country_code.lower():
                return rating.rating
    return ratings[0].rating


def production_locations(locations: dict) -> list[str]:
    """Lieux de production, TMDB d'abord puis AniDB, sans doublon."""
    result: list[str] = []
    for key in (PRODUCTION_LOCATION_TMDB, PRODUCTION_LOCATION_ANIDB):
        for location in locations.get(key, ()):
            if location not in result:
                result.append(location)
    return result


def _production_year(value: Optional[datetime]) -> Optional[int]:
    return value.year if value is not None else None


def _display_title(titles, default: str, language: Optional[str]) -> str:
    """Titre dans la langue de metadonnees demandee, sinon le titre prefere."""
    if language:
        title = get_title_for_language(titles, language)
        if title:
            return title
    return default


def _original_title(titles) -> Optional[str]:
    """Titre principal AniDB (romanise), s'il existe."""
    for title in titles:
        if title.type == TitleType.MAIN and title.value:
            return title.value
    return None


class _BaseMetadataProvider(IMetadataProvider):
    """Base commune : acces a l'InfoManager et suivi d'activite."""

    kind_name = "Item"

    def __init__(
        self,
        info_manager: InfoManager,
        settings: Settings,
        usage_tracker: Optional[UsageTracker] = None,
    ) -> None:
        self._info_manager = info_manager
        self._settings = settings
        self._usage_tracker = usage_tracker or UsageTracker(settings.usage_tracker_stalled_time_in_seconds)

    async def get_metadata(self, request: MetadataRequest) -> MetadataResult:
        with self._usage_tracker.enter(
            f"Fourniture des metadonnees ({self.kind_name}) pour {request.name!r} (Path={request.path})"
        ):
            return await self._get_metadata(request)

    @abstractmethod
    async def _get_metadata(self, request: MetadataRequest) -> MetadataResult:
        """Metadonnees propres au type d'element."""
        ...

    def _season_metadata(self, season: SeasonInfo, request: MetadataRequest) -> ItemMetadata:
        return ItemMetadata(
            name=_display_title(season.titles, season.title, request.metadata_language),
            original_title=_original_title(season.titles),
            overview=season.overview,
            premiere_date=season.premiere_date,
            end_date=season.end_date,
            production_year=_production_year(season.premiere_date),
            tags=list(season.tags),
            genres=list(season.genres),
            studios=list(season.studios),
            production_locations=production_locations(season.production_locations),
            official_rating=official_rating(season.content_ratings, request.metadata_country_code),
            community_rating=community_rating(season.community_rating),
            custom_rating=season.custom_rating,
            provider_ids=self._season_provider_ids(season),
        )

    @staticmethod
    def _season_provider_ids(season: SeasonInfo) -> dict[str, str]:
        provider_ids = {PROVIDER_SHOKO_SERIES: season.id}
        if season.anidb_id:
            provider_ids[PROVIDER_ANIDB] = season.anidb_id
        if season.tmdb_show_id:
            provider_ids[PROVIDER_TMDB] = season.tmdb_show_id
        return provider_ids

    def _episode_title(self, episode: EpisodeInfo, season: Optional[SeasonInfo], language: Optional[str]) -> str:
        """
        Titre d'un episode.

        Les films et les entrees principales reprennent le titre de la saison.
        """
        if season is not None and (
            (season.type == SeriesType.MOVIE and episode.type in (EpisodeType.NORMAL, EpisodeType.SPECIAL))
            or (episode.is_main_entry and episode.episode_number == 1)
        ):
            return _display_title(season.titles, season.title, language)
        title = _display_title(episode.titles, episode.title, language)
        if title:
            return title
        prefix = "Special" if episode.type == EpisodeType.SPECIAL else "Episode"
        return f"{prefix} {episode.episode_number}"

    def _episodes_metadata(
        self,
        episodes: Sequence[EpisodeInfo],
        season: Optional[SeasonInfo],
        request: MetadataRequest,
        file_id: Optional[str] = None,
    ) -> ItemMetadata:
        """Metadonnees d'un element couvrant un ou plusieurs episodes."""
        episode = episodes[0]
        language = request.metadata_language
        if len(episodes) > 1 and self._settings.title_add_for_multiple_episodes:
            name = join_text(self._episode_title(e, season, language) for e in episodes) or ""
            overview = join_text(e.overview for e in episodes)
        else:
            name = self._episode_title(episode, season, language)
            overview = episode.overview

        provider_ids = {PROVIDER_SHOKO_EPISODE: episode.id}
        if file_id:
            provider_ids[PROVIDER_SHOKO_FILE] = file_id
        if season is not None:
            provider_ids[PROVIDER_SHOKO_SERIES] = season.id
        if episode.anidb_id:
            provider_ids[PROVIDER_ANIDB] = episode.anidb_id
        if episode.tmdb_episode_id or episode.tmdb_movie_id:
            provider_ids[PROVIDER_TMDB] = episode.tmdb_episode_id or episode.tmdb_movie_id

        return ItemMetadata(
            name=name,
            original_title=_original_title(episode.titles),
            overview=overview,
            premiere_date=episode.aired_at,
            production_year=_production_year(episode.aired_at),
            runtime=episode.runtime,
            tags=list(episode.tags),
            genres=list(episode.genres),
            studios=list(episode.studios),
            production_locations=production_locations(episode.production_locations),
            official_rating=official_rating(episode.content_ratings, request.metadata_country_code),
            community_rating=community_rating(episode.community_rating),
            custom_rating=season.custom_rating if season is not None else None,
            provider_ids=provider_ids,
        )

    async def _resolve_file(
        self, request: MetadataRequest
    ) -> tuple[Sequence[EpisodeInfo], Optional[SeasonInfo], Optional[str]]:
        """Resout le fichier de la requete vers (episodes, saison, fichier)."""
        if not request.path:
            return (), None, None
        file_info, season = await self._info_manager.get_file_info_by_path(request.path)
        if file_info is None or not file_info.is_available:
            return (), season, None
        return [resolved.episode for resolved in file_info.episodes], season, file_info.id

    @staticmethod
    def _result(item: ItemMetadata, people: Sequence[PersonInfo] = ()) -> MetadataResult:
        return MetadataResult(has_metadata=True, item=item, people=list(people))


class CollectionMetadataProvider(_BaseMetadataProvider):
    """Collections : un groupe Shoko."""

    kind_name = "Collection"

    async def _get_metadata(self, request: MetadataRequest) -> MetadataResult:
        group_id = request.provider_ids.get(PROVIDER_SHOKO_GROUP)
        if not group_id:
            return MetadataResult.empty()
        collection: Optional[CollectionInfo] = await self._info_manager.get_collection_info(group_id)
        if collection is None:
            logger.warning(f"Collection introuvable (Group={group_id})")
            return MetadataResult.empty()

        item = ItemMetadata(
            name=_display_title(collection.titles, collection.title, request.metadata_language),
            overview=collection.overview,
            provider_ids={PROVIDER_SHOKO_GROUP: collection.id},
            supports_people=False,
        )
        logger.info(f"Collection trouvee {item.name!r} (Group={collection.id})")
        return self._result(item)


class SeriesMetadataProvider(_BaseMetadataProvider):
    """Series : la serie Shoko par defaut de la serie hote."""

    kind_name = "Series"

    async def _get_metadata(self, request: MetadataRequest) -> MetadataResult:
        series_id = request.provider_ids.get(PROVIDER_SHOKO_SERIES)
        season = await self._info_manager.get_season_info(series_id) if series_id else None
        if season is None and request.path:
            _, season, _ = await self._resolve_file(request)
        if season is None:
            logger.warning(f"Serie introuvable pour {request.path!r}")
            return MetadataResult.empty()

        item = self._season_metadata(season, request)
        logger.info(f"Serie trouvee {item.name!r} (Series={season.id})")
        return self._result(item, season.staff)


class SeasonMetadataProvider(_BaseMetadataProvider):
    """Saisons : une serie Shoko sous une serie hote."""

    kind_name = "Season"

    async def _get_metadata(self, request: MetadataRequest) -> MetadataResult:
        series_id = request.provider_ids.get(PROVIDER_SHOKO_SERIES) or request.series_provider_ids.get(
            PROVIDER_SHOKO_SERIES
        )
        if not series_id:
            return MetadataResult.empty()
        season = await self._info_manager.get_season_info(series_id)
        if season is None:
            logger.warning(f"Saison introuvable (Series={series_id})")
            return MetadataResult.empty()

        item = self._season_metadata(season, request)
        if request.index_number is not None and not request.provider_ids.get(PROVIDER_SHOKO_SERIES):
            item.name = f"Season {request.index_number}" if request.index_number else "Specials"
        logger.info(f"Saison trouvee {item.name!r} (Series={season.id})")
        return self._result(item, season.staff)


class EpisodeMetadataProvider(_BaseMetadataProvider):
    """Episodes : depuis le fichier, ou depuis l'identifiant pour un episode manquant."""

    kind_name = "Episode"

    async def _get_metadata(self, request: MetadataRequest) -> MetadataResult:
        file_id = None
        if request.is_missing_episode or not request.path:
            episode_id = request.provider_ids.get(PROVIDER_SHOKO_EPISODE)
            if not episode_id:
                return MetadataResult.empty()
            episode = await self._info_manager.get_episode_info(episode_id)
            season = await self._info_manager.get_season_info_for_episode(episode_id)
            episodes = [episode] if episode is not None else []
        else:
            episodes, season, file_id = await self._resolve_file(request)

        if not episodes or season is None:
            logger.warning(f"Episode introuvable pour {request.path!r}")
            return MetadataResult.empty()

        item = self._episodes_metadata(episodes, season, request, file_id)
        logger.info(
            f"Episode trouve {item.name!r} (File={file_id},Episode={episodes[0].id},Series={season.id})"
        )
        return self._result(item, episodes[0].staff)


class MovieMetadataProvider(_BaseMetadataProvider):
    """Films : le premier episode du fichier, titre de la saison pour les entrees principales."""

    kind_name = "Movie"

    async def _get_metadata(self, request: MetadataRequest) -> MetadataResult:
        episodes, season, file_id = await self._resolve_file(request)
        if not episodes or season is None:
            logger.warning(f"Film introuvable pour {request.path!r}")
            return MetadataResult.empty()

        item = self._episodes_metadata(episodes[:1], season, request, file_id)
        logger.info(f"Film trouve {item.name!r} (File={file_id},Episode={episodes[0].id},Series={season.id})")
        return self._result(item, episodes[0].staff)


class VideoMetadataProvider(_BaseMetadataProvider):
    """Videos et bandes-annonces : bonus attaches a une serie ou un film."""

    kind_name = "Video"

    async def _get_metadata(self, request: MetadataRequest) -> MetadataResult:
        episodes, season, file_id = await self._resolve_file(request)
        if not episodes:
            logger.warning(f"Video introuvable pour {request.path!r}")
            return MetadataResult.empty()

        item = self._episodes_metadata(episodes, season, request, file_id)
        return self._result(item, episodes[0].staff)
