"""
Interface port pour le rendu d'images.

Le port travaille sur des octets : chaque rendu décode sa propre copie de la
source, ce qui rend les rendus d'un même upload indépendants les uns des
autres (et donc parallélisables).
"""

from abc import ABC, abstractmethod

from albumforge.core.entities.artifact import MediaMetadata
from albumforge.core.value_objects.size_preset import Encoding, RenderedImage, SizePreset


class IImageRenderer(ABC):
    """
    Interface de sondage et d'encodage d'images.

    Toute sortie est orientée physiquement selon l'EXIF source et ne contient
    aucune métadonnée EXIF.
    """

    @abstractmethod
    def probe(self, raw: bytes) -> MediaMetadata:
        """
        Sonde les métadonnées de l'image source.

        Raises :
            InputError : Si les octets ne sont pas une image supportée et décodable
        """
        ...

    @abstractmethod
    def render_original(self, raw: bytes, quality: int) -> RenderedImage:
        """Produit la copie originale : rotation EXIF appliquée, EXIF retiré, JPEG."""
        ...

    @abstractmethod
    def render_variant(
        self,
        raw: bytes,
        preset: SizePreset,
        encoding: Encoding,
        quality: int,
    ) -> RenderedImage:
        """Produit un dérivé d'une taille dans un encodage donné."""
        ...

    @abstractmethod
    def render_square(self, raw: bytes, size: int, quality: int) -> RenderedImage:
        """Produit un carré size x size recadré au centre (JPEG progressif)."""
        ...
