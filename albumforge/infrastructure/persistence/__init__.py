"""
Module de persistance SQLite pour albumforge.

Ce module fournit l'infrastructure de stockage utilisant SQLModel (SQLAlchemy).
Il contient :

- database.py : Configuration de l'engine SQLite, session factory, initialisation
- models.py : Modeles SQLModel representant les tables de la base de donnees

Les modeles ici sont des adapters de persistance, distincts des entites de domaine
(dataclass dans core/entities/). La conversion entre les deux se fait dans les
repositories.

Usage:
    from albumforge.infrastructure.persistence import init_db, get_session

    init_db()  # Cree les tables si necessaire
    session = next(get_session())
"""

from albumforge.infrastructure.persistence.database import (
    get_engine,
    get_session,
    init_db,
    reset_engine,
)
from albumforge.infrastructure.persistence.models import AlbumModel, MediaModel

__all__ = [
    "get_engine",
    "get_session",
    "init_db",
    "reset_engine",
    "AlbumModel",
    "MediaModel",
]
