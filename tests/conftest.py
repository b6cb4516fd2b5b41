"""
Fixtures pytest partagees pour les tests AniMeta.

Ce module contient les fixtures communes utilisees dans les tests:
- Settings de test isoles de l'environnement
- Mocks des ports (catalogue amont, bibliotheque, persistance, rafraichissement natif)
- Services de synthese prets a l'emploi
"""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.config import Settings
from src.core.ports.catalog import IShokoCatalog
from src.core.ports.library import IItemRepository, ILegacyRefresher, ILibraryIndex
from src.services.cross_reference import CrossReferenceResolver
from src.services.synthesizer import EntitySynthesizer


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """
    Settings de test sans fichier .env.

    Utilise tmp_path pour la base et le fichier de log.
    """
    return Settings(
        _env_file=None,
        database_url=f"sqlite:///{tmp_path}/test.db",
        log_file=tmp_path / "test.log",
    )


@pytest.fixture
def resolver() -> CrossReferenceResolver:
    return CrossReferenceResolver()


@pytest.fixture
def synthesizer(test_settings: Settings, resolver: CrossReferenceResolver) -> EntitySynthesizer:
    return EntitySynthesizer(test_settings, resolver)


@pytest.fixture
def mock_catalog() -> AsyncMock:
    """
    Mock de IShokoCatalog.

    Par defaut aucune entite n'existe en amont et les details de serie
    sont vides. Configurer les retours dans chaque test.
    """
    mock = AsyncMock(spec=IShokoCatalog)
    mock.get_file.return_value = None
    mock.get_file_by_path.return_value = None
    mock.get_episode.return_value = None
    mock.get_episodes_for_series.return_value = []
    mock.get_series.return_value = None
    mock.get_group.return_value = None
    mock.get_series_cast.return_value = []
    mock.get_series_tags.return_value = []
    mock.get_series_genres.return_value = []
    mock.get_series_production_locations.return_value = []
    mock.get_series_content_rating.return_value = None
    mock.get_tmdb_episode.return_value = None
    mock.get_tmdb_show.return_value = None
    mock.get_tmdb_movie.return_value = None
    return mock


@pytest.fixture
def mock_library() -> MagicMock:
    """Mock de ILibraryIndex : bibliotheque vide par defaut."""
    mock = MagicMock(spec=ILibraryIndex)
    mock.query_items.return_value = []
    mock.get_item.return_value = None
    mock.find_by_path.return_value = None
    mock.get_children.return_value = []
    return mock


@pytest.fixture
def mock_repository() -> MagicMock:
    """Mock de IItemRepository : aucun casting enregistre par defaut."""
    mock = MagicMock(spec=IItemRepository)
    mock.get_people.return_value = []
    return mock


@pytest.fixture
def mock_legacy_refresher() -> AsyncMock:
    """Mock de ILegacyRefresher : aucun changement par defaut."""
    mock = AsyncMock(spec=ILegacyRefresher)
    mock.refresh_metadata.return_value = False
    mock.refresh_images.return_value = False
    return mock
