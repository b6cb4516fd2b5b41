"""
Configuration de la base de donnees SQLite de la bibliotheque AniMeta.

Ce module fournit :
- Engine SQLite partage entre threads
- Generateur de session
- Fonction d'initialisation des tables

La base de donnees est configuree via ANIMETA_DATABASE_URL (defaut: sqlite:///animeta.db).
"""

from collections.abc import Generator
from pathlib import Path
from typing import Optional

from sqlalchemy import Engine
from sqlmodel import Session, SQLModel, create_engine

# Engine global - initialise lors du premier appel a get_engine()
_engine: Optional[Engine] = None


def get_engine() -> Engine:
    """
    Retourne l'engine SQLite, en le creant si necessaire.

    Le chemin de la base provient de la configuration de l'application.
    """
    global _engine
    if _engine is None:
        from src.config import Settings
        settings = Settings()

        db_url = settings.database_url
        if db_url.startswith("sqlite:///") and not db_url.startswith("sqlite:///:memory:"):
            db_path = Path(db_url.replace("sqlite:///", ""))
            db_path.parent.mkdir(exist_ok=True, parents=True)

        _engine = create_engine(
            db_url,
            echo=False,
            connect_args={"check_same_thread": False},
        )
    return _engine


def get_session() -> Generator[Session, None, None]:
    """
    Generateur de session SQLModel.

    Utilisation :
        session = next(get_session())

    Yields:
        Session SQLModel connectee a l'engine
    """
    with Session(get_engine()) as session:
        yield session


def init_db(engine: Optional[Engine] = None) -> None:
    """
    Cree les tables si elles n'existent pas.

    Doit etre appelee une fois au demarrage de l'application.
    """
    # Import des modeles pour enregistrer leurs metadonnees
    from src.infrastructure.persistence import models  # noqa: F401

    SQLModel.metadata.create_all(engine or get_engine())
