"""
Implementations SQLModel des repositories.

Chaque repository :
- Herite des interfaces ABC correspondantes du domaine
- Recoit une session SQLModel via injection de dependances
- Convertit entre entites de domaine (dataclass) et modeles DB (SQLModel)
"""

from src.infrastructure.persistence.repositories.library_item_repository import (
    SQLModelLibraryRepository,
)

__all__ = [
    "SQLModelLibraryRepository",
]
