"""
Container d'injection de dependances via dependency-injector.

Assemble la configuration, la bibliotheque SQLModel, la synthese des
informations, un fournisseur de metadonnees par type d'element et
l'orchestrateur de rafraichissement.

Le catalogue amont (Shoko), le rafraichissement natif de l'hote et les
fournisseurs personnalises sont fournis par l'hote via override().
"""

from dependency_injector import containers, providers

from .config import Settings
from .core.entities.library import ItemKind
from .core.ports.catalog import IShokoCatalog
from .core.ports.library import ILegacyRefresher
from .infrastructure.persistence.database import get_session, init_db
from .infrastructure.persistence.repositories import SQLModelLibraryRepository
from .services.cross_reference import CrossReferenceResolver
from .services.id_lookup import IdLookup
from .services.info_manager import InfoManager
from .services.metadata_providers import (
    CollectionMetadataProvider,
    EpisodeMetadataProvider,
    MovieMetadataProvider,
    SeasonMetadataProvider,
    SeriesMetadataProvider,
    VideoMetadataProvider,
)
from .services.refresh import MetadataRefreshService, RefreshContext
from .services.synthesizer import EntitySynthesizer
from .services.usage_tracker import UsageTracker


def _create_usage_tracker(
    settings: Settings, context: RefreshContext, info_manager: InfoManager
) -> UsageTracker:
    """Cree le tracker et y rattache les reinitialisations sur blocage."""
    tracker = UsageTracker(stalled_time_seconds=settings.usage_tracker_stalled_time_in_seconds)
    tracker.on_stalled(context.reset)
    tracker.on_stalled(info_manager.clear)
    return tracker


class Container(containers.DeclarativeContainer):
    """Container DI de l'application.

    Utilisation :
        container = Container()
        container.catalog.override(providers.Object(my_catalog))
        container.legacy_refresher.override(providers.Object(my_refresher))
        container.database.init()  # Initialise la DB une fois
        service = container.refresh_service()
        await service.auto_refresh()
    """

    # Configuration - singleton charge une seule fois
    config = providers.Singleton(Settings)

    # Database - Resource pour initialisation unique
    database = providers.Resource(init_db)

    # Session - partagee par l'index et la persistance
    session = providers.Singleton(lambda: next(get_session()))

    # Collaborateurs fournis par l'hote
    catalog = providers.Dependency(instance_of=IShokoCatalog)
    legacy_refresher = providers.Dependency(instance_of=ILegacyRefresher)
    custom_providers = providers.Dependency(instance_of=dict, default={})

    # Bibliotheque - implemente ILibraryIndex et IItemRepository
    library_repository = providers.Singleton(
        SQLModelLibraryRepository,
        session=session,
    )

    # Synthese (stateless - Singletons)
    cross_reference_resolver = providers.Singleton(CrossReferenceResolver)
    synthesizer = providers.Singleton(
        EntitySynthesizer,
        settings=config,
        resolver=cross_reference_resolver,
    )

    # Caches d'informations et etat de passe - reinitialises sur blocage
    info_manager = providers.Singleton(
        InfoManager,
        catalog=catalog,
        synthesizer=synthesizer,
        resolver=cross_reference_resolver,
    )
    refresh_context = providers.Singleton(RefreshContext)
    usage_tracker = providers.Singleton(
        _create_usage_tracker,
        settings=config,
        context=refresh_context,
        info_manager=info_manager,
    )

    id_lookup = providers.Singleton(IdLookup, library=library_repository)

    # Un fournisseur de metadonnees par type d'element
    collection_provider = providers.Singleton(
        CollectionMetadataProvider, info_manager=info_manager, settings=config, usage_tracker=usage_tracker
    )
    movie_provider = providers.Singleton(
        MovieMetadataProvider, info_manager=info_manager, settings=config, usage_tracker=usage_tracker
    )
    series_provider = providers.Singleton(
        SeriesMetadataProvider, info_manager=info_manager, settings=config, usage_tracker=usage_tracker
    )
    season_provider = providers.Singleton(
        SeasonMetadataProvider, info_manager=info_manager, settings=config, usage_tracker=usage_tracker
    )
    episode_provider = providers.Singleton(
        EpisodeMetadataProvider, info_manager=info_manager, settings=config, usage_tracker=usage_tracker
    )
    video_provider = providers.Singleton(
        VideoMetadataProvider, info_manager=info_manager, settings=config, usage_tracker=usage_tracker
    )

    metadata_providers = providers.Dict(
        {
            ItemKind.COLLECTION: collection_provider,
            ItemKind.MOVIE: movie_provider,
            ItemKind.SERIES: series_provider,
            ItemKind.SEASON: season_provider,
            ItemKind.EPISODE: episode_provider,
            ItemKind.VIDEO: video_provider,
            ItemKind.TRAILER: video_provider,
        }
    )

    # Orchestrateur - Singleton pour partager le contexte de passe
    refresh_service = providers.Singleton(
        MetadataRefreshService,
        providers=metadata_providers,
        legacy_refresher=legacy_refresher,
        repository=library_repository,
        library=library_repository,
        id_lookup=id_lookup,
        settings=config,
        custom_providers=custom_providers,
        context=refresh_context,
    )
