"""
Interface port pour le client amont (Shoko, avec AniDB et TMDB embarques).

Le client retourne des enregistrements source deja decodes. Les echecs
remontent sous forme d'absence (None ou liste vide), jamais sous forme
d'exception que le domaine devrait interpreter. Le transport, les delais
d'attente et la politique de retry appartiennent a l'implementation.
"""

from abc import ABC, abstractmethod
from typing import Optional

from src.core.entities.source_records import (
    Role,
    ShokoEpisode,
    ShokoFile,
    ShokoGroup,
    ShokoSeries,
    TmdbEpisode,
    TmdbMovie,
    TmdbShow,
)


class IShokoCatalog(ABC):
    """
    Interface du catalogue amont.

    Fournit les fichiers, episodes, series et groupes Shoko ainsi que
    les enregistrements TMDB lies.
    """

    @abstractmethod
    async def get_file(self, file_id: str) -> Optional[ShokoFile]:
        """Recupere un fichier par son identifiant Shoko."""
        ...

    @abstractmethod
    async def get_file_by_path(self, path: str) -> Optional[ShokoFile]:
        """Recupere le fichier correspondant a un chemin, s'il est connu."""
        ...

    @abstractmethod
    async def get_episode(self, episode_id: str) -> Optional[ShokoEpisode]:
        """Recupere un episode Shoko (avec son episode AniDB)."""
        ...

    @abstractmethod
    async def get_episodes_for_series(self, series_id: str) -> list[ShokoEpisode]:
        """Liste les episodes d'une serie Shoko."""
        ...

    @abstractmethod
    async def get_series(self, series_id: str) -> Optional[ShokoSeries]:
        """Recupere une serie Shoko (avec son anime AniDB)."""
        ...

    @abstractmethod
    async def get_group(self, group_id: str) -> Optional[ShokoGroup]:
        """Recupere un groupe Shoko."""
        ...

    @abstractmethod
    async def get_series_cast(self, series_id: str) -> list[Role]:
        """Liste les roles (staff, studios, doubleurs) d'une serie."""
        ...

    @abstractmethod
    async def get_series_tags(self, series_id: str) -> list[str]:
        """Liste les tags AniDB filtres d'une serie."""
        ...

    @abstractmethod
    async def get_series_genres(self, series_id: str) -> list[str]:
        """Liste les genres AniDB d'une serie."""
        ...

    @abstractmethod
    async def get_series_production_locations(self, series_id: str) -> list[str]:
        """Liste les lieux de production AniDB d'une serie."""
        ...

    @abstractmethod
    async def get_series_content_rating(self, series_id: str) -> Optional[str]:
        """Retourne la classification AniDB d'une serie, si connue."""
        ...

    @abstractmethod
    async def get_tmdb_episode(self, episode_id: str) -> Optional[TmdbEpisode]:
        """Recupere un episode TMDB."""
        ...

    @abstractmethod
    async def get_tmdb_show(self, show_id: str) -> Optional[TmdbShow]:
        """Recupere une serie TMDB."""
        ...

    @abstractmethod
    async def get_tmdb_movie(self, movie_id: str) -> Optional[TmdbMovie]:
        """Recupere un film TMDB."""
        ...
