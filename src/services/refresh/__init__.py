"""
Package du rafraichissement des metadonnees.

Exports :
- MetadataRefreshService : orchestrateur du rafraichissement cible
- RefreshContext : elements visites pendant une passe
- RefreshOutcome, AutoRefreshResult : resultats
"""

from .context import RefreshContext
from .dataclasses import AutoRefreshResult, RefreshOutcome
from .refresh_service import MetadataRefreshService

__all__ = [
    "AutoRefreshResult",
    "MetadataRefreshService",
    "RefreshContext",
    "RefreshOutcome",
]
