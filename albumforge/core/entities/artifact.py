"""
Entités du jeu de fichiers dérivés.

Un ArtifactSet décrit l'ensemble des fichiers produits pour un upload :
un original orienté et, pour une image, trois tailles encodées en JPEG et WebP.
Il est produit atomiquement et n'est jamais persisté partiellement.
Tous les objets sont immutables (@dataclass(frozen=True)).
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class MediaType(str, Enum):
    """Type de media uploade."""

    IMAGE = "image"
    VIDEO = "video"


@dataclass(frozen=True)
class MediaMetadata:
    """
    Métadonnées sondées sur les octets source.

    Attributs :
        format : Format détecté (jpeg, png, webp... ou extension pour une vidéo)
        width : Largeur brute de la source (avant rotation EXIF)
        height : Hauteur brute de la source (avant rotation EXIF)
        has_alpha : La source possède un canal alpha
        orientation : Valeur EXIF Orientation (1 si absente)
        exif : Résumé lisible des champs EXIF utiles (appareil, objectif...)
    """

    format: str
    width: Optional[int] = None
    height: Optional[int] = None
    has_alpha: bool = False
    orientation: int = 1
    exif: Optional[dict[str, str]] = None

    def to_dict(self) -> dict[str, Any]:
        """Forme persistée (clés camelCase du collaborateur de persistance)."""
        return {
            "format": self.format,
            "width": self.width,
            "height": self.height,
            "hasAlpha": self.has_alpha,
            "orientation": self.orientation,
            "exif": dict(self.exif) if self.exif else None,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MediaMetadata":
        """Reconstruit les métadonnées depuis leur forme persistée."""
        return cls(
            format=data.get("format") or "",
            width=data.get("width"),
            height=data.get("height"),
            has_alpha=bool(data.get("hasAlpha", False)),
            orientation=int(data.get("orientation") or 1),
            exif=data.get("exif") or None,
        )


@dataclass(frozen=True)
class OriginalArtifact:
    """Copie originale orientée et sans EXIF."""

    path: str
    width: Optional[int]
    height: Optional[int]
    byte_size: int


@dataclass(frozen=True)
class SizeArtifact:
    """Dérivé d'une taille : chemin JPEG, chemin WebP, dimensions et poids du JPEG."""

    path: str
    webp_path: str
    width: int
    height: int
    byte_size: int
    webp_byte_size: int = 0


@dataclass(frozen=True)
class ArtifactSet:
    """
    Jeu complet de fichiers produits pour un upload.

    Attributs :
        token : Token unique partagé par tous les fichiers de l'upload
        album_id : Album de rattachement
        media_type : Image ou vidéo
        original : Copie originale
        sizes : Dérivés par nom de taille (vide pour une vidéo)
        metadata : Métadonnées sondées sur la source
        original_filename : Nom de fichier fourni à l'upload
        media_id : ID du media une fois persisté
    """

    token: str
    album_id: str
    media_type: MediaType
    original: OriginalArtifact
    sizes: Mapping[str, SizeArtifact] = field(default_factory=dict)
    metadata: Optional[MediaMetadata] = None
    original_filename: str = ""
    media_id: Optional[str] = None

    @property
    def is_image(self) -> bool:
        return self.media_type is MediaType.IMAGE

    def path_for(self, size_name: str) -> Optional[str]:
        """Chemin principal d'une taille ('original' inclus)."""
        if size_name == "original":
            return self.original.path
        artifact = self.sizes.get(size_name)
        return artifact.path if artifact else None

    def all_paths(self) -> list[str]:
        """Tous les chemins web du jeu, original en premier."""
        paths = [self.original.path]
        for artifact in self.sizes.values():
            paths.append(artifact.path)
            paths.append(artifact.webp_path)
        return paths

    def to_file_sizes(self) -> dict[str, dict[str, Any]]:
        """
        Forme persistée fileSizes.

        {original: {path, width, height, size},
         thumbnail|medium|full: {path, webpPath, width, height, size}}
        """
        file_sizes: dict[str, dict[str, Any]] = {
            "original": {
                "path": self.original.path,
                "width": self.original.width,
                "height": self.original.height,
                "size": self.original.byte_size,
            }
        }
        for name, artifact in self.sizes.items():
            file_sizes[name] = {
                "path": artifact.path,
                "webpPath": artifact.webp_path,
                "width": artifact.width,
                "height": artifact.height,
                "size": artifact.byte_size,
            }
        return file_sizes
