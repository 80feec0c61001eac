"""
Ports (interfaces abstraites) définissant les contrats pour les adaptateurs.

Les ports sont les frontières de l'architecture hexagonale. Ils définissent
ce dont le domaine a besoin du monde extérieur sans spécifier
comment ces besoins sont satisfaits.

Ports repository : Contrats de persistance des données
- IMediaRepository : Stockage des media
- IAlbumRepository : Stockage des albums et de leurs agrégats

Ports système de fichiers : Contrats pour les opérations fichiers
- IFileSystem : Écriture atomique, suppression tolérante, répertoires

Ports image : Contrats de sondage et d'encodage
- IImageRenderer : Sondage, original orienté, dérivés, carrés de couverture
"""

from albumforge.core.ports.repositories import (
    IAlbumRepository,
    IMediaRepository,
)
from albumforge.core.ports.file_system import IFileSystem
from albumforge.core.ports.imaging import IImageRenderer

__all__ = [
    # Repositories
    "IAlbumRepository",
    "IMediaRepository",
    # Système de fichiers
    "IFileSystem",
    # Image
    "IImageRenderer",
]
