"""
Gestionnaire des informations canoniques.

L'InfoManager recupere les enregistrements source aupres du catalogue amont,
les assemble (details de serie, entites TMDB liees), et delegue la fusion
a l'EntitySynthesizer. Les informations construites sont memorisees pour la
duree de vie de l'instance, jusqu'a un appel a clear().
"""

from dataclasses import dataclass
from typing import Optional

from loguru import logger

from src.core.entities.entity_info import (
    CollectionInfo,
    EpisodeInfo,
    FileInfo,
    ResolvedEpisode,
    SeasonInfo,
    StructureType,
)
from src.core.entities.source_records import (
    Role,
    ShokoEpisode,
    TmdbEpisode,
    TmdbMovie,
    TmdbShow,
)
from src.core.ports.catalog import IShokoCatalog
from src.services.cross_reference import CrossReferenceResolver
from src.services.synthesizer import EntitySynthesizer
from src.utils.constants import ID_PREFIX_TMDB_MOVIE, ID_PREFIX_TMDB_SHOW


@dataclass
class _SeriesDetails:
    """Details de serie partages par tous ses episodes."""

    cast: list[Role]
    genres: list[str]
    tags: list[str]
    production_locations: list[str]
    content_rating: Optional[str]


class InfoManager:
    """
    Construit et memorise les informations canoniques.

    Toute absence en amont (episode, serie, groupe inconnu) se traduit
    par None, jamais par une exception.
    """

    def __init__(
        self,
        catalog: IShokoCatalog,
        synthesizer: EntitySynthesizer,
        resolver: Optional[CrossReferenceResolver] = None,
    ) -> None:
        self._catalog = catalog
        self._synthesizer = synthesizer
        self._resolver = resolver or CrossReferenceResolver()
        self._episodes: dict[str, EpisodeInfo] = {}
        self._seasons: dict[str, SeasonInfo] = {}
        self._series_details: dict[str, _SeriesDetails] = {}

    def clear(self) -> None:
        """Oublie toutes les informations memorisees."""
        logger.debug(
            f"Purge du cache d'informations ({len(self._episodes)} episode(s), "
            f"{len(self._seasons)} saison(s))"
        )
        self._episodes.clear()
        self._seasons.clear()
        self._series_details.clear()

    # --- Episodes -------------------------------------------------------

    async def get_episode_info(self, episode_id: str) -> Optional[EpisodeInfo]:
        """
        Recupere l'information d'un episode.

        Les identifiants prefixes designent un episode ou un film TMDB,
        les autres un episode Shoko.
        """
        if not episode_id:
            return None
        if episode_id in self._episodes:
            return self._episodes[episode_id]

        info: Optional[EpisodeInfo] = None
        if episode_id.startswith(ID_PREFIX_TMDB_SHOW):
            tmdb_episode = await self._catalog.get_tmdb_episode(episode_id[1:])
            if tmdb_episode is None:
                return None
            tmdb_show = await self._catalog.get_tmdb_show(str(tmdb_episode.show_id))
            if tmdb_show is None:
                return None
            info = self._synthesizer.synthesize_parent_episode(tmdb_episode, tmdb_show)
        elif episode_id.startswith(ID_PREFIX_TMDB_MOVIE):
            tmdb_movie = await self._catalog.get_tmdb_movie(episode_id[1:])
            if tmdb_movie is None:
                return None
            info = self._synthesizer.synthesize_parent_movie(tmdb_movie)
        else:
            episode = await self._catalog.get_episode(episode_id)
            if episode is None:
                return None
            info = await self._create_episode_info(episode)

        self._episodes[episode_id] = info
        return info

    async def _create_episode_info(self, episode: ShokoEpisode) -> EpisodeInfo:
        logger.trace(f"Creation de l'information de l'episode {episode.name!r} (Episode={episode.id})")
        details = await self._get_series_details(episode.series_id)
        tmdb_entity, tmdb_parent = await self._find_tmdb_entity(episode)
        return self._synthesizer.synthesize_episode(
            episode,
            details.cast,
            details.genres,
            details.tags,
            details.production_locations,
            details.content_rating,
            tmdb_entity,
            tmdb_parent,
        )

    async def _find_tmdb_entity(
        self, episode: ShokoEpisode
    ) -> tuple[TmdbMovie | TmdbEpisode | None, Optional[TmdbShow]]:
        """Premier film TMDB lie trouve, sinon premier episode TMDB (avec sa serie)."""
        for movie_id in episode.tmdb.movie:
            movie = await self._catalog.get_tmdb_movie(str(movie_id))
            if movie is not None:
                return movie, None
            logger.trace(f"Film TMDB {movie_id} introuvable (Episode={episode.id})")

        for tmdb_episode_id in episode.tmdb.episode:
            tmdb_episode = await self._catalog.get_tmdb_episode(str(tmdb_episode_id))
            if tmdb_episode is not None:
                tmdb_show = await self._catalog.get_tmdb_show(str(tmdb_episode.show_id))
                return tmdb_episode, tmdb_show
            logger.trace(f"Episode TMDB {tmdb_episode_id} introuvable (Episode={episode.id})")

        return None, None

    async def _get_series_details(self, series_id: str) -> _SeriesDetails:
        if series_id not in self._series_details:
            self._series_details[series_id] = _SeriesDetails(
                cast=await self._catalog.get_series_cast(series_id),
                genres=await self._catalog.get_series_genres(series_id),
                tags=await self._catalog.get_series_tags(series_id),
                production_locations=await self._catalog.get_series_production_locations(series_id),
                content_rating=await self._catalog.get_series_content_rating(series_id),
            )
        return self._series_details[series_id]

    # --- Saisons --------------------------------------------------------

    async def get_season_info(self, series_id: str) -> Optional[SeasonInfo]:
        """Recupere l'information d'une serie Shoko et de tous ses episodes."""
        if not series_id:
            return None
        if series_id in self._seasons:
            return self._seasons[series_id]

        series = await self._catalog.get_series(series_id)
        if series is None:
            return None

        episodes: list[EpisodeInfo] = []
        for episode in await self._catalog.get_episodes_for_series(series_id):
            info = self._episodes.get(episode.id)
            if info is None:
                info = await self._create_episode_info(episode)
                self._episodes[episode.id] = info
            episodes.append(info)

        tmdb_show = None
        for show_id in series.tmdb_show_ids:
            tmdb_show = await self._catalog.get_tmdb_show(str(show_id))
            if tmdb_show is not None:
                break

        season = self._synthesizer.synthesize_season(series, episodes, tmdb_show)
        self._seasons[series_id] = season
        return season

    async def get_season_info_for_episode(self, episode_id: str) -> Optional[SeasonInfo]:
        """Recupere la saison (serie Shoko) d'un episode Shoko."""
        episode = await self._catalog.get_episode(episode_id)
        if episode is None:
            return None
        return await self.get_season_info(episode.series_id)

    # --- Collections ----------------------------------------------------

    async def get_collection_info(self, group_id: str) -> Optional[CollectionInfo]:
        """Recupere l'information d'un groupe Shoko (avec sa serie principale)."""
        group = await self._catalog.get_group(group_id)
        if group is None:
            return None
        series = None
        if group.main_series_id:
            series = await self._catalog.get_series(group.main_series_id)
        return self._synthesizer.synthesize_collection(group, series, group.main_series_id)

    # --- Fichiers -------------------------------------------------------

    async def get_file_info(
        self,
        file_id: str,
        series_id: str,
        structure_type: StructureType = StructureType.SHOKO_GROUPS,
    ) -> Optional[FileInfo]:
        """
        Resout un fichier vers ses episodes pour une serie.

        Retourne :
            None si le fichier est inconnu ou sans reference croisee

        Raises :
            CrossReferenceError : Si le fichier ne reference pas la serie demandee
        """
        file = await self._catalog.get_file(file_id)
        if file is None:
            return None
        series_reference = self._resolver.find_series_reference(file, series_id)
        if series_reference is None:
            return None

        resolved: list[ResolvedEpisode] = []
        for reference in series_reference.episodes:
            episode_id = str(reference.shoko)
            if structure_type == StructureType.TMDB_SERIES_AND_MOVIES:
                for tmdb_id in reference.tmdb.episode:
                    info = await self.get_episode_info(f"{ID_PREFIX_TMDB_SHOW}{tmdb_id}")
                    if info is not None:
                        resolved.append(ResolvedEpisode(info, reference, info.id))
                for tmdb_id in reference.tmdb.movie:
                    info = await self.get_episode_info(f"{ID_PREFIX_TMDB_MOVIE}{tmdb_id}")
                    if info is not None:
                        resolved.append(ResolvedEpisode(info, reference, info.id))
                continue

            info = await self.get_episode_info(episode_id)
            if info is None:
                logger.debug(
                    f"Episode inconnu lie au fichier ignore "
                    f"(File={file_id},Episode={episode_id},Series={series_id})"
                )
                continue
            resolved.append(ResolvedEpisode(info, reference, episode_id))

        episodes = self._resolver.select_file_episodes(resolved, structure_type)
        return FileInfo(id=str(file.id), series_id=series_id, file=file, episodes=episodes)

    async def get_file_info_by_path(
        self, path: str
    ) -> tuple[Optional[FileInfo], Optional[SeasonInfo]]:
        """Resout un chemin vers le fichier et la saison par defaut."""
        file = await self._catalog.get_file_by_path(path)
        if file is None:
            return None, None
        series_id = self._resolver.default_series_id(file)
        if series_id is None:
            logger.debug(f"Fichier sans reference croisee : {path}")
            return None, None
        file_info = await self.get_file_info(str(file.id), series_id)
        season = await self.get_season_info(series_id)
        return file_info, season
