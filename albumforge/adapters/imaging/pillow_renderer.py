"""
Rendu d'images via Pillow.

Implementation concrete de IImageRenderer :
- Sondage du format, des dimensions, de l'alpha et de l'orientation EXIF
- Rotation physique selon l'orientation EXIF (ImageOps.exif_transpose)
- Redimensionnement cover (recadrage centre) ou inside (sans agrandissement)
- Encodage JPEG progressif ou WebP, sans recopier l'EXIF source

Chaque rendu decode sa propre copie des octets source : aucun objet Image
n'est partage entre deux rendus, ce qui permet de les executer en parallele.
"""

from io import BytesIO
from typing import Optional

from PIL import Image, ImageOps, UnidentifiedImageError

from albumforge.core.entities.artifact import MediaMetadata
from albumforge.core.errors import InputError
from albumforge.core.ports.imaging import IImageRenderer
from albumforge.core.value_objects.size_preset import (
    Encoding,
    FitMode,
    RenderedImage,
    SizePreset,
)

# Tag EXIF Orientation (IFD0)
ORIENTATION_TAG = 0x0112

# Sous-IFD Exif contenant les reglages de prise de vue
EXIF_IFD_POINTER = 0x8769

# Tags IFD0 : fabricant et modele de l'appareil
MAKE_TAG = 0x010F
MODEL_TAG = 0x0110

# Tags du sous-IFD Exif resumes dans les metadonnees
EXIF_SUMMARY_TAGS: dict[str, int] = {
    "lens": 0xA434,
    "iso": 0x8827,
    "aperture": 0x829D,
    "shutter_speed": 0x829A,
    "focal_length": 0x920A,
    "date_taken": 0x9003,
}

# Modes Pillow portant un canal alpha
ALPHA_MODES: frozenset[str] = frozenset({"RGBA", "LA", "PA", "RGBa", "La"})

# Couleur de fond pour aplatir l'alpha en JPEG
JPEG_BACKGROUND = (255, 255, 255)


def _has_alpha(image: Image.Image) -> bool:
    """Detecte un canal alpha (y compris la transparence de palette)."""
    if image.mode in ALPHA_MODES:
        return True
    return image.mode == "P" and "transparency" in image.info


def _exif_summary(image: Image.Image) -> Optional[dict[str, str]]:
    """
    Extrait un resume lisible des champs EXIF utiles.

    Retourne None si l'image ne porte aucun de ces champs.
    """
    exif = image.getexif()
    summary: dict[str, str] = {}

    camera = " ".join(
        str(exif.get(tag)).strip() for tag in (MAKE_TAG, MODEL_TAG) if exif.get(tag)
    )
    if camera:
        summary["camera"] = camera

    details = exif.get_ifd(EXIF_IFD_POINTER)
    for name, tag in EXIF_SUMMARY_TAGS.items():
        value = details.get(tag)
        if value is not None and str(value).strip():
            summary[name] = str(value).strip()

    return summary or None


class PillowImageRenderer(IImageRenderer):
    """
    Implementation de IImageRenderer basee sur Pillow.

    Toutes les sorties sont orientees physiquement : l'orientation EXIF est
    appliquee aux pixels puis l'EXIF n'est pas reecrit dans le fichier encode.
    """

    def probe(self, raw: bytes) -> MediaMetadata:
        """
        Sonde les octets source.

        Decode completement l'image pour detecter les fichiers tronques
        avant toute ecriture sur le disque.
        """
        if not raw:
            raise InputError("Fichier vide")

        try:
            with Image.open(BytesIO(raw)) as image:
                image.load()
                width, height = image.size
                return MediaMetadata(
                    format=(image.format or "").lower(),
                    width=width,
                    height=height,
                    has_alpha=_has_alpha(image),
                    orientation=int(image.getexif().get(ORIENTATION_TAG, 1) or 1),
                    exif=_exif_summary(image),
                )
        except UnidentifiedImageError as exc:
            raise InputError("Format d'image non supporte") from exc
        except Image.DecompressionBombError as exc:
            raise InputError("Image trop grande") from exc
        except (OSError, ValueError, SyntaxError) as exc:
            raise InputError(f"Image corrompue: {exc}") from exc

    def render_original(self, raw: bytes, quality: int) -> RenderedImage:
        """Original oriente, encode en JPEG haute qualite."""
        image = self._decode(raw)
        return self._encode(image, Encoding.JPEG, quality)

    def render_variant(
        self,
        raw: bytes,
        preset: SizePreset,
        encoding: Encoding,
        quality: int,
    ) -> RenderedImage:
        """Derive d'une taille : cover recadre au centre, inside sans agrandissement."""
        image = self._decode(raw)
        target = preset.target_dimensions(*image.size)

        if preset.fit_mode is FitMode.COVER:
            image = ImageOps.fit(
                image, target, method=Image.Resampling.LANCZOS, centering=(0.5, 0.5)
            )
        elif target != image.size:
            image = image.resize(target, Image.Resampling.LANCZOS)

        return self._encode(image, encoding, quality)

    def render_square(self, raw: bytes, size: int, quality: int) -> RenderedImage:
        """Carre size x size recadre au centre, JPEG progressif."""
        image = self._decode(raw)
        image = ImageOps.fit(
            image, (size, size), method=Image.Resampling.LANCZOS, centering=(0.5, 0.5)
        )
        return self._encode(image, Encoding.JPEG, quality)

    def _decode(self, raw: bytes) -> Image.Image:
        """Decode les octets et applique la rotation EXIF."""
        try:
            with Image.open(BytesIO(raw)) as image:
                image.load()
                oriented = ImageOps.exif_transpose(image)
        except Image.DecompressionBombError as exc:
            raise InputError("Image trop grande") from exc
        except (OSError, ValueError, SyntaxError) as exc:
            raise InputError(f"Image illisible: {exc}") from exc

        # Palette avec transparence : passer en RGBA avant tout redimensionnement
        if oriented.mode == "P":
            oriented = oriented.convert("RGBA" if _has_alpha(oriented) else "RGB")
        elif oriented.mode not in ("RGB", "RGBA", "L"):
            oriented = oriented.convert("RGBA" if _has_alpha(oriented) else "RGB")
        return oriented

    def _encode(self, image: Image.Image, encoding: Encoding, quality: int) -> RenderedImage:
        """Encode l'image sans metadonnees EXIF."""
        buffer = BytesIO()

        if encoding is Encoding.JPEG:
            if image.mode == "RGBA":
                # JPEG n'a pas d'alpha : aplatir sur fond blanc
                background = Image.new("RGB", image.size, JPEG_BACKGROUND)
                background.paste(image, mask=image.getchannel("A"))
                image = background
            elif image.mode != "RGB":
                image = image.convert("RGB")
            image.save(buffer, format="JPEG", quality=quality, progressive=True, optimize=True)
        else:
            if image.mode not in ("RGB", "RGBA"):
                image = image.convert("RGB")
            image.save(buffer, format="WEBP", quality=quality)

        width, height = image.size
        return RenderedImage(data=buffer.getvalue(), width=width, height=height)
