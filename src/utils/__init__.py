"""
Utilitaires et constantes pour AniMeta.

Ce module contient les constantes et fonctions utilitaires partagees.
"""

from src.utils.constants import (
    IGNORED_SUB_TITLES,
    PROVIDER_ANIDB,
    PROVIDER_SHOKO_EPISODE,
    PROVIDER_SHOKO_FILE,
    PROVIDER_SHOKO_GROUP,
    PROVIDER_SHOKO_SERIES,
)

__all__ = [
    "IGNORED_SUB_TITLES",
    "PROVIDER_ANIDB",
    "PROVIDER_SHOKO_EPISODE",
    "PROVIDER_SHOKO_FILE",
    "PROVIDER_SHOKO_GROUP",
    "PROVIDER_SHOKO_SERIES",
]
