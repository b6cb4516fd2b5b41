"""
Service de rafraichissement cible des metadonnees.

Pour chaque element, applique les groupes de champs demandes a partir des
metadonnees synthetisees, dans un ordre fixe, sans jamais ecraser un champ
verrouille, puis propage le rafraichissement aux elements contenus.
Les elements non geres (ou la demande explicite LEGACY_REFRESH) passent par
le rafraichissement natif de l'hote.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, Mapping, Optional, Sequence

from loguru import logger

from src.config import Settings
from src.core.entities.library import ItemKind, LibraryItem, MetadataField
from src.core.ports.library import IItemRepository, ILegacyRefresher, ILibraryIndex
from src.core.ports.metadata import (
    ICustomMetadataProvider,
    IMetadataProvider,
    ItemMetadata,
    MetadataRequest,
    MetadataResult,
)
from src.core.value_objects.refresh_fields import RefreshField
from src.services.id_lookup import IdLookup
from src.services.refresh.auto_refresh import build_refresh_filter, collect_candidates
from src.services.refresh.context import RefreshContext
from src.services.refresh.dataclasses import AutoRefreshResult, RefreshOutcome

# Attribut de configuration par type d'element
_SETTINGS_ATTRIBUTES = {
    ItemKind.COLLECTION: "collection",
    ItemKind.MOVIE: "movie",
    ItemKind.SERIES: "series",
    ItemKind.SEASON: "season",
    ItemKind.EPISODE: "episode",
    ItemKind.VIDEO: "video",
    ItemKind.TRAILER: "video",
}

_VIDEO_KINDS = (ItemKind.VIDEO, ItemKind.TRAILER)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _sequence_changed(current: Optional[Sequence[str]], new: Optional[Sequence[str]]) -> bool:
    """Une liste change si elle apparait, ou si son contenu (ordonne) differe."""
    if new is None:
        return False
    return current is None or list(current) != list(new)


class MetadataRefreshService:
    """
    Orchestrateur du rafraichissement des metadonnees.

    Un meme element n'est rafraichi qu'une fois par passe (RefreshContext).
    Chaque appel retourne un RefreshOutcome ; bool(outcome) indique si
    quelque chose a change, pour l'element ou ses descendants.
    """

    def __init__(
        self,
        providers: Mapping[ItemKind, IMetadataProvider],
        legacy_refresher: ILegacyRefresher,
        repository: IItemRepository,
        library: ILibraryIndex,
        id_lookup: IdLookup,
        settings: Settings,
        custom_providers: Optional[Mapping[ItemKind, ICustomMetadataProvider]] = None,
        context: Optional[RefreshContext] = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._providers = dict(providers)
        self._legacy_refresher = legacy_refresher
        self._repository = repository
        self._library = library
        self._id_lookup = id_lookup
        self._settings = settings
        self._custom_providers = dict(custom_providers or {})
        self._context = context or RefreshContext()
        self._clock = clock

    @property
    def context(self) -> RefreshContext:
        return self._context

    # --- Operations publiques -------------------------------------------

    async def refresh_collection(
        self, item: LibraryItem, fields: Optional[RefreshField] = None
    ) -> RefreshOutcome:
        """Rafraichit une collection (pas de cascade)."""
        return await self._refresh(item, fields)

    async def refresh_movie(self, item: LibraryItem, fields: Optional[RefreshField] = None) -> RefreshOutcome:
        """Rafraichit un film, puis ses parties additionnelles et versions alternatives."""
        return await self._refresh(item, fields)

    async def refresh_series(self, item: LibraryItem, fields: Optional[RefreshField] = None) -> RefreshOutcome:
        """Rafraichit une serie, ses bonus, puis ses saisons si RECURSIVE."""
        return await self._refresh(item, fields)

    async def refresh_season(self, item: LibraryItem, fields: Optional[RefreshField] = None) -> RefreshOutcome:
        """Rafraichit une saison, ses bonus, puis ses episodes si RECURSIVE."""
        return await self._refresh(item, fields)

    async def refresh_episode(self, item: LibraryItem, fields: Optional[RefreshField] = None) -> RefreshOutcome:
        """Rafraichit un episode, puis ses parties additionnelles et versions alternatives."""
        return await self._refresh(item, fields)

    async def refresh_video(self, item: LibraryItem, fields: Optional[RefreshField] = None) -> RefreshOutcome:
        """Rafraichit une video (bonus ou bande-annonce)."""
        return await self._refresh(item, fields)

    async def auto_refresh(
        self, progress: Optional[Callable[[float], None]] = None
    ) -> AutoRefreshResult:
        """
        Balayage planifie de la bibliotheque.

        Rafraichit les films, puis les series, les saisons et enfin les
        episodes retenus par le filtre, chacun avec les champs configures
        pour son type.

        Args:
            progress: Appele avec un pourcentage (0-100) apres chaque element
        """
        config = self._settings.metadata_refresh
        accept = build_refresh_filter(config, self._id_lookup, self._clock())
        movies, series, seasons, episodes = collect_candidates(self._library, config, accept)

        result = AutoRefreshResult(
            movies=len(movies), series=len(series), seasons=len(seasons), episodes=len(episodes)
        )
        logger.info(
            f"Balayage : {result.movies} film(s), {result.series} serie(s), "
            f"{result.seasons} saison(s), {result.episodes} episode(s) a rafraichir"
        )

        batches = (
            (movies, config.movie),
            (series, config.series),
            (seasons, config.season),
            (episodes, config.episode),
        )
        done = 0
        for items, fields in batches:
            for item in items:
                if await self._refresh(item, fields):
                    result.updated += 1
                done += 1
                if progress is not None:
                    progress(done * 100 / result.total)

        if progress is not None:
            progress(100.0)
        logger.info(f"Balayage termine : {result.updated}/{result.total} element(s) mis a jour")
        return result

    # --- Rafraichissement d'un element ----------------------------------

    def _fields_for(self, item: LibraryItem, fields: Optional[RefreshField]) -> RefreshField:
        if fields is not None:
            return fields
        return getattr(self._settings.metadata_refresh, _SETTINGS_ATTRIBUTES[item.kind])

    def _is_managed(self, item: LibraryItem) -> bool:
        # Les collections sont synthetisees directement depuis les groupes
        if item.kind == ItemKind.COLLECTION:
            return True
        return self._id_lookup.is_enabled_for_item(item)

    def _provider_for(self, kind: ItemKind) -> Optional[IMetadataProvider]:
        provider = self._providers.get(kind)
        if provider is None and kind == ItemKind.TRAILER:
            provider = self._providers.get(ItemKind.VIDEO)
        return provider

    async def _refresh(self, item: LibraryItem, fields: Optional[RefreshField]) -> RefreshOutcome:
        fields = self._fields_for(item, fields)
        if not self._context.try_visit(item.id):
            logger.trace(f"Deja visite pendant cette passe : {item.kind.value} {item.name!r} (Id={item.id})")
            return RefreshOutcome(item.id, item.kind)

        managed = self._is_managed(item)
        legacy = False
        if RefreshField.LEGACY_REFRESH in fields or not managed:
            legacy = await self._legacy_refresher.refresh_metadata(item)
            if not managed or item.kind in _VIDEO_KINDS:
                return RefreshOutcome(item.id, item.kind, legacy=legacy)

        if not fields.has_field_groups:
            return RefreshOutcome(item.id, item.kind, legacy=legacy)

        series: Optional[LibraryItem] = None
        if item.kind == ItemKind.SEASON:
            series = self._library.get_item(item.series_id) if item.series_id else None
            if series is None:
                return RefreshOutcome(item.id, item.kind, legacy=legacy)

        provider = self._provider_for(item.kind)
        if provider is None:
            logger.warning(f"Aucun fournisseur de metadonnees pour le type {item.kind.value}")
            return RefreshOutcome(item.id, item.kind, legacy=legacy)

        result = await provider.get_metadata(self._build_request(item, series))
        if not result.has_metadata or result.item is None:
            return RefreshOutcome(item.id, item.kind, legacy=legacy)

        updated_fields = await self._apply_fields(item, result, fields)
        if updated_fields:
            self._persist(item, updated_fields)

        children = await self._cascade(item, fields)
        return RefreshOutcome(
            item.id, item.kind, legacy=legacy, updated_fields=tuple(updated_fields), children=children
        )

    @staticmethod
    def _build_request(item: LibraryItem, series: Optional[LibraryItem] = None) -> MetadataRequest:
        return MetadataRequest(
            path=item.path,
            name=item.name,
            metadata_language=item.preferred_metadata_language,
            metadata_country_code=item.preferred_metadata_country_code,
            provider_ids=dict(item.provider_ids),
            series_provider_ids=dict(series.provider_ids) if series is not None else {},
            index_number=item.index_number if item.kind == ItemKind.SEASON else None,
            is_missing_episode=item.kind == ItemKind.EPISODE and item.is_virtual,
            is_automated=True,
        )

    async def _apply_fields(
        self, item: LibraryItem, result: MetadataResult, fields: RefreshField
    ) -> list[str]:
        """Applique les groupes de champs dans l'ordre. Retourne les champs modifies."""
        metadata: ItemMetadata = result.item
        updated: list[str] = []

        if RefreshField.TITLES_AND_OVERVIEW in fields:
            if not item.is_locked(MetadataField.NAME) and metadata.name != item.name:
                item.name = metadata.name
                updated.append("name")
            if metadata.original_title != item.original_title:
                item.original_title = metadata.original_title
                updated.append("original_title")
            if not item.is_locked(MetadataField.OVERVIEW) and metadata.overview != item.overview:
                item.overview = metadata.overview
                updated.append("overview")

        if RefreshField.DATES in fields:
            if item.premiere_date != metadata.premiere_date:
                item.premiere_date = metadata.premiere_date
                updated.append("premiere_date")
            if item.end_date != metadata.end_date:
                item.end_date = metadata.end_date
                updated.append("end_date")
            if item.production_year != metadata.production_year:
                item.production_year = metadata.production_year
                updated.append("production_year")
            if (
                not item.is_locked(MetadataField.RUNTIME)
                and metadata.runtime is not None
                and metadata.runtime > timedelta(0)
                and item.runtime != metadata.runtime
            ):
                item.runtime = metadata.runtime
                updated.append("runtime")

        if RefreshField.TAGS_AND_GENRES in fields:
            if not item.is_locked(MetadataField.TAGS) and _sequence_changed(item.tags, metadata.tags):
                item.tags = list(metadata.tags)
                updated.append("tags")
            if not item.is_locked(MetadataField.GENRES) and _sequence_changed(item.genres, metadata.genres):
                item.genres = list(metadata.genres)
                updated.append("genres")

        if RefreshField.STUDIOS_AND_PRODUCTION_LOCATIONS in fields:
            if not item.is_locked(MetadataField.STUDIOS) and _sequence_changed(item.studios, metadata.studios):
                item.studios = list(metadata.studios)
                updated.append("studios")
            if not item.is_locked(MetadataField.PRODUCTION_LOCATIONS) and _sequence_changed(
                item.production_locations, metadata.production_locations
            ):
                item.production_locations = list(metadata.production_locations)
                updated.append("production_locations")

        if RefreshField.CONTENT_RATINGS in fields:
            if not item.is_locked(MetadataField.OFFICIAL_RATING) and metadata.official_rating != item.official_rating:
                item.official_rating = metadata.official_rating
                updated.append("official_rating")
            if metadata.community_rating is not None and metadata.community_rating != item.community_rating:
                item.community_rating = metadata.community_rating
                updated.append("community_rating")
            if metadata.custom_rating != item.custom_rating:
                item.custom_rating = metadata.custom_rating
                updated.append("custom_rating")

        # PREFERRED_IMAGES : aucun ordre prefere applicable aux images locales
        if RefreshField.IMAGES in fields:
            if await self._legacy_refresher.refresh_images(item):
                updated.append("images")

        custom_provider = self._custom_providers.get(item.kind)
        if RefreshField.CUSTOM_PROVIDER in fields and custom_provider is not None:
            if await custom_provider.fetch(item):
                updated.append("custom_provider")

        if (
            metadata.supports_people
            and item.supports_people
            and RefreshField.CAST_AND_CREW in fields
            and not item.is_locked(MetadataField.CAST)
            and result.people
            and list(result.people) != self._repository.get_people(item.id)
        ):
            self._repository.update_people(item, result.people)
            updated.append("cast_and_crew")

        return updated

    def _persist(self, item: LibraryItem, updated_fields: list[str]) -> None:
        item.date_last_refreshed = self._clock()
        logger.debug(
            f"Mise a jour des champs {item.kind.value} {item.name!r} "
            f"(Id={item.id},UpdatedFields={updated_fields})"
        )
        self._repository.save(item)
        logger.debug(
            f"Champs mis a jour {item.kind.value} {item.name!r} "
            f"(Id={item.id},UpdatedFields={updated_fields})"
        )

    # --- Cascade --------------------------------------------------------

    def _cascade_targets(self, item: LibraryItem, fields: RefreshField) -> list[LibraryItem]:
        """Elements contenus a rafraichir apres l'element, dans l'ordre."""
        targets: list[LibraryItem] = []
        if item.kind in (ItemKind.SERIES, ItemKind.SEASON):
            for extra_id in item.extra_ids:
                extra = self._library.get_item(extra_id)
                if extra is not None:
                    targets.append(extra)
            if RefreshField.RECURSIVE in fields:
                child_kind = ItemKind.SEASON if item.kind == ItemKind.SERIES else ItemKind.EPISODE
                targets.extend(self._library.get_children(item, child_kind))
        elif item.kind in (ItemKind.MOVIE, ItemKind.EPISODE):
            for path in [*item.additional_part_paths, *item.alternate_version_paths]:
                video = self._library.find_by_path(path)
                if video is not None:
                    targets.append(video)
        return targets

    async def _cascade(self, item: LibraryItem, fields: RefreshField) -> tuple[RefreshOutcome, ...]:
        outcomes = []
        for child in self._cascade_targets(item, fields):
            outcomes.append(await self._refresh_branch(child, fields))
        return tuple(outcomes)

    async def _refresh_branch(self, child: LibraryItem, fields: RefreshField) -> RefreshOutcome:
        """Rafraichit un element en cascade ; un echec n'interrompt pas les autres branches."""
        try:
            return await self._refresh(child, fields)
        except Exception:
            logger.exception(f"Echec du rafraichissement de {child.kind.value} {child.name!r} (Id={child.id})")
            return RefreshOutcome(child.id, child.kind, failed=True)
