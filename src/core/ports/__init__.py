"""
Ports (interfaces abstraites) definissant les contrats pour les adaptateurs.

Les ports sont les frontieres de l'architecture hexagonale. Ils definissent
ce dont le domaine a besoin du monde exterieur sans specifier
comment ces besoins sont satisfaits.

Port catalogue : Client amont
- IShokoCatalog : Enregistrements Shoko, AniDB et TMDB decodes

Ports bibliotheque : Contrats de l'hote
- ILibraryIndex : Requetes sur les elements
- IItemRepository : Persistance des elements
- ILegacyRefresher : Rafraichissement natif complet

Ports metadonnees : Fournisseurs par type d'element
- IMetadataProvider : Information canonique vers forme de l'hote
- ICustomMetadataProvider : Crochet personnalise
"""

from src.core.ports.catalog import IShokoCatalog
from src.core.ports.library import (
    IItemRepository,
    ILegacyRefresher,
    ILibraryIndex,
    ItemQuery,
)
from src.core.ports.metadata import (
    ICustomMetadataProvider,
    IMetadataProvider,
    ItemMetadata,
    MetadataRequest,
    MetadataResult,
)

__all__ = [
    # Catalogue
    "IShokoCatalog",
    # Bibliotheque
    "IItemRepository",
    "ILegacyRefresher",
    "ILibraryIndex",
    "ItemQuery",
    # Metadonnees
    "ICustomMetadataProvider",
    "IMetadataProvider",
    "ItemMetadata",
    "MetadataRequest",
    "MetadataResult",
]
