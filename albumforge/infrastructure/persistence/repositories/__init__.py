"""
Implementations SQLModel des repositories.

Ce module contient les implementations concretes des interfaces repository
definies dans albumforge/core/ports/repositories.py, utilisant SQLModel pour
la persistance SQLite.

Chaque repository :
- Herite de l'interface ABC correspondante du domaine
- Recoit une session SQLModel via injection de dependances
- Convertit entre entites de domaine (dataclass) et modeles DB (SQLModel)
"""

from albumforge.infrastructure.persistence.repositories.album_repository import (
    SQLModelAlbumRepository,
)
from albumforge.infrastructure.persistence.repositories.media_repository import (
    SQLModelMediaRepository,
)

__all__ = [
    "SQLModelAlbumRepository",
    "SQLModelMediaRepository",
]
