"""
Module de persistance SQLite de la bibliotheque AniMeta.

- database.py : Engine SQLite, generateur de session, initialisation
- models.py : Modeles SQLModel (elements et casting)
- repositories/ : Conversion entre entites de domaine et modeles

Usage:
    from src.infrastructure.persistence import init_db, get_session

    init_db()  # Cree les tables si necessaire
    session = next(get_session())
"""

from src.infrastructure.persistence.database import get_engine, get_session, init_db
from src.infrastructure.persistence.models import ItemPersonModel, LibraryItemModel

__all__ = [
    "get_engine",
    "get_session",
    "init_db",
    "ItemPersonModel",
    "LibraryItemModel",
]
