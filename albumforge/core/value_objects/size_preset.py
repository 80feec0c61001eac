"""
Objets valeur pour les tailles de derives.

Les presets de taille sont fixes : thumbnail (300x300, cover), medium (800x600,
inside) et full (1920x1080, inside). Chaque preset est produit en deux encodages
(JPEG et WebP).
"""

from dataclasses import dataclass
from enum import Enum


class FitMode(str, Enum):
    """
    Mode d'ajustement d'une image dans la boite cible.

    COVER: produit exactement largeur x hauteur, recadrage centre
    INSIDE: conserve le ratio, reduit pour tenir dans la boite, n'agrandit jamais
    """

    COVER = "cover"
    INSIDE = "inside"


class Encoding(str, Enum):
    """Encodage d'un fichier derive. La valeur est l'extension de fichier."""

    JPEG = "jpg"
    WEBP = "webp"

    @property
    def extension(self) -> str:
        """Extension avec le point (ex: '.jpg')."""
        return f".{self.value}"


@dataclass(frozen=True)
class SizePreset:
    """
    Boite cible nommee pour un derive.

    Attributs :
        name : Nom du preset (thumbnail, medium, full)
        max_width : Largeur de la boite en pixels
        max_height : Hauteur de la boite en pixels
        fit_mode : Mode d'ajustement (cover ou inside)
    """

    name: str
    max_width: int
    max_height: int
    fit_mode: FitMode

    def target_dimensions(self, width: int, height: int) -> tuple[int, int]:
        """
        Calcule les dimensions de sortie pour une source width x height.

        En mode COVER la sortie a toujours exactement la taille de la boite.
        En mode INSIDE la source n'est jamais agrandie : si elle tient deja
        dans la boite, ses dimensions sont conservees.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Dimensions invalides: {width}x{height}")

        if self.fit_mode is FitMode.COVER:
            return self.max_width, self.max_height

        if width <= self.max_width and height <= self.max_height:
            return width, height

        scale = min(self.max_width / width, self.max_height / height)
        return max(1, round(width * scale)), max(1, round(height * scale))


THUMBNAIL = SizePreset("thumbnail", 300, 300, FitMode.COVER)
MEDIUM = SizePreset("medium", 800, 600, FitMode.INSIDE)
FULL = SizePreset("full", 1920, 1080, FitMode.INSIDE)

# Ordre de generation et de persistance
SIZE_PRESETS: tuple[SizePreset, ...] = (THUMBNAIL, MEDIUM, FULL)

SIZE_NAMES: tuple[str, ...] = tuple(preset.name for preset in SIZE_PRESETS)

# Encodages produits pour chaque preset
DERIVATIVE_ENCODINGS: tuple[Encoding, ...] = (Encoding.JPEG, Encoding.WEBP)


@dataclass(frozen=True)
class RenderedImage:
    """
    Image encodee en memoire, prete a etre ecrite.

    Attributs :
        data : Octets encodes
        width : Largeur en pixels apres traitement
        height : Hauteur en pixels apres traitement
    """

    data: bytes
    width: int
    height: int
