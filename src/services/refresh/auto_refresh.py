"""
Selection des elements du balayage automatique.

Le filtre combine trois seuils configurables :
- zone morte : un element rafraichi trop recemment est ignore ;
- desynchronisation : un element rafraichi il y a trop longtemps est retenu ;
- fenetre de diffusion : sinon, retenu si sa date de premiere diffusion est recente.
Si le seuil de desynchronisation est anterieur a la zone morte, la zone
morte est desactivee pour la passe.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from src.config import MetadataRefreshSettings
from src.core.entities.library import ItemKind, LibraryItem
from src.core.ports.library import ILibraryIndex, ItemQuery
from src.services.id_lookup import IdLookup
from src.utils.constants import PROVIDER_SHOKO_FILE, PROVIDER_SHOKO_INTERNAL

RefreshFilter = Callable[[LibraryItem], bool]


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Les dates naives sont considerees en UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def build_refresh_filter(
    config: MetadataRefreshSettings, id_lookup: IdLookup, now: datetime
) -> RefreshFilter:
    """Construit le predicat de selection pour une passe demarrant a `now`."""
    now = _as_utc(now)
    update_unaired = config.update_unaired
    upper = None if update_unaired else now
    lower = now - timedelta(days=config.auto_refresh_range_in_days) if config.auto_refresh_range_in_days > 0 else None
    min_age = (
        now - timedelta(hours=config.anti_refresh_dead_zone_in_hours)
        if config.anti_refresh_dead_zone_in_hours > 0
        else None
    )
    out_of_sync = now - timedelta(days=config.out_of_sync_in_days) if config.out_of_sync_in_days > 0 else None
    if out_of_sync is not None and min_age is not None and out_of_sync < min_age:
        min_age = None

    def accept(item: LibraryItem) -> bool:
        last_refreshed = _as_utc(item.date_last_refreshed)
        if min_age is not None and last_refreshed is not None and last_refreshed > min_age:
            return False
        if out_of_sync is not None and (last_refreshed is None or last_refreshed < out_of_sync):
            return update_unaired or not item.is_virtual

        premiere = _as_utc(item.premiere_date)
        if premiere is None or not id_lookup.is_enabled_for_item(item):
            return False
        if lower is not None and premiere < lower:
            return False
        return upper is None or premiere < upper

    return accept


def _distinct_parents(
    library: ILibraryIndex, episodes: list[LibraryItem], attribute: str
) -> list[LibraryItem]:
    """Parents distincts des episodes, dans l'ordre de premiere apparition."""
    parents: list[LibraryItem] = []
    seen: set[str] = set()
    for episode in episodes:
        parent_id = getattr(episode, attribute)
        if not parent_id or parent_id in seen:
            continue
        seen.add(parent_id)
        parent = library.get_item(parent_id)
        if parent is not None:
            parents.append(parent)
    return parents


def collect_candidates(
    library: ILibraryIndex, config: MetadataRefreshSettings, accept: RefreshFilter
) -> tuple[list[LibraryItem], list[LibraryItem], list[LibraryItem], list[LibraryItem]]:
    """
    Liste les candidats du balayage.

    Retourne :
        (films, series, saisons, episodes)
    """
    is_virtual = None if config.update_unaired else False
    movies = [
        item
        for item in library.query_items(
            ItemQuery(kinds=(ItemKind.MOVIE,), has_any_provider_id=(PROVIDER_SHOKO_FILE,), is_virtual=is_virtual)
        )
        if accept(item)
    ]
    episode_provider = PROVIDER_SHOKO_INTERNAL if config.update_unaired else PROVIDER_SHOKO_FILE
    episodes = [
        item
        for item in library.query_items(
            ItemQuery(kinds=(ItemKind.EPISODE,), has_any_provider_id=(episode_provider,), is_virtual=is_virtual)
        )
        if accept(item)
    ]
    seasons = _distinct_parents(library, episodes, "parent_id")
    series = _distinct_parents(library, episodes, "series_id")
    return movies, series, seasons, episodes
