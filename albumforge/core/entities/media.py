"""
Entités album et media.

Un Album regroupe des Media. Ses agrégats (nombre de media, couverture) sont
maintenus par le LifecycleManager : le compteur est toujours recalculé par
comptage des enregistrements, jamais incrémenté sur place.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from albumforge.core.entities.artifact import MediaMetadata, MediaType
from albumforge.core.value_objects.media_paths import MediaPathView, path_view_for

# Champs de contenu modifiables apres creation (les derives sont immutables)
CONTENT_FIELDS: frozenset[str] = frozenset({"caption", "alt", "tags", "order", "featured"})


@dataclass
class Album:
    """
    Album de media.

    Attributs :
        id : Identifiant en base
        title : Titre de l'album
        slug : Identifiant lisible dérivé du titre
        description : Description libre
        cover_image : Chemin web de la couverture ("" si non définie)
        total_media : Nombre de media, recalculé par comptage
        created_at : Date de création
        updated_at : Date de dernière modification
    """

    id: Optional[str] = None
    title: str = ""
    slug: str = ""
    description: str = ""
    cover_image: str = ""
    total_media: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def has_cover(self) -> bool:
        return bool(self.cover_image)


@dataclass(frozen=True)
class AlbumAggregate:
    """
    Agrégats autoritatifs d'un album.

    Attributs :
        album_id : Identifiant de l'album
        cover_image_path : Chemin web de la couverture ("" si non définie)
        total_media_count : Nombre de media compté en base
        storage_directory : Chemin web du répertoire de stockage de l'album
        storage_size_bytes : Taille cumulée des fichiers du répertoire
    """

    album_id: str
    cover_image_path: str
    total_media_count: int
    storage_directory: str
    storage_size_bytes: int = 0


@dataclass
class Media:
    """
    Un media (image ou vidéo) rattaché à un album.

    Les chemins peuvent être dans la forme legacy plate (url, optimized,
    thumbnail) ou dans la forme imbriquée file_sizes. La propriété path_view
    fournit une vue uniforme des deux.

    Attributs :
        id : Identifiant en base
        album_id : Album de rattachement
        media_type : Image ou vidéo
        url : Chemin legacy de l'original
        optimized : Chemin legacy de la version optimisée
        thumbnail : Chemin legacy de la miniature
        file_sizes : Forme imbriquée {taille: {path, webpPath, width, height, size}}
        metadata : Métadonnées sondées à l'upload
        original_filename : Nom de fichier fourni à l'upload
        caption : Légende
        alt : Texte alternatif
        tags : Mots-clés
        order : Position dans l'album
        featured : Media mis en avant
        uploaded_at : Date d'upload
        updated_at : Date de dernière modification
    """

    id: Optional[str] = None
    album_id: str = ""
    media_type: MediaType = MediaType.IMAGE
    url: str = ""
    optimized: str = ""
    thumbnail: str = ""
    file_sizes: dict[str, dict[str, Any]] = field(default_factory=dict)
    metadata: Optional[MediaMetadata] = None
    original_filename: str = ""
    caption: str = ""
    alt: str = ""
    tags: tuple[str, ...] = ()
    order: int = 0
    featured: bool = False
    uploaded_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_image(self) -> bool:
        return self.media_type is MediaType.IMAGE

    @property
    def path_view(self) -> MediaPathView:
        """Vue étiquetée des chemins (legacy ou imbriquée)."""
        return path_view_for(
            url=self.url,
            optimized=self.optimized,
            thumbnail=self.thumbnail,
            file_sizes=self.file_sizes,
        )
