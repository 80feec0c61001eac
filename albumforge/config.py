"""
Configuration de l'application via pydantic-settings.

La configuration est chargée depuis les variables d'environnement avec le préfixe ALBUMFORGE_,
et peut optionnellement être fournie via un fichier .env.
"""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Trouver le fichier .env à la racine du projet (parent de albumforge/)
_PROJECT_ROOT = Path(__file__).parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Paramètres de l'application avec support des variables d'environnement.

    Tous les paramètres peuvent être surchargés via des variables d'environnement
    avec le préfixe ALBUMFORGE_.
    Exemple : ALBUMFORGE_PUBLIC_ROOT=/srv/site/public

    Les chemins sont automatiquement étendus (~ -> répertoire home).
    """

    model_config = SettingsConfigDict(
        env_prefix="ALBUMFORGE_",
        env_file=_ENV_FILE if _ENV_FILE.exists() else ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Racine publique servie par le site (contient uploads/)
    public_root: Path = Field(default=Path("public"))

    # Base de données
    database_url: str = Field(default="sqlite:///albumforge.db")

    # Encodage (qualité 1-100)
    jpeg_quality: int = Field(default=85, ge=1, le=100)
    webp_quality: int = Field(default=85, ge=1, le=100)
    original_quality: int = Field(default=95, ge=1, le=100)
    cover_size: int = Field(default=800, ge=1)

    # Limites d'upload
    max_image_size_mb: int = Field(default=10, ge=1)
    max_video_size_mb: int = Field(default=100, ge=1)

    # Nombre de rendus parallèles par upload (1 = séquentiel)
    generation_workers: int = Field(default=1, ge=1, le=7)

    # Logging (fichier + stderr, rotation 10MB, 5 fichiers de rétention)
    log_level: str = Field(default="INFO")
    log_file: Path = Field(default=Path("logs/albumforge.log"))
    log_rotation_size: str = Field(default="10 MB")
    log_retention_count: int = Field(default=5)

    @field_validator("public_root", "log_file", mode="before")
    @classmethod
    def expand_path(cls, v: str | Path) -> Path:
        """Étend ~ vers le répertoire home dans les chemins."""
        return Path(v).expanduser()

    @property
    def max_image_bytes(self) -> int:
        """Taille maximale d'une image en octets."""
        return self.max_image_size_mb * 1024 * 1024

    @property
    def max_video_bytes(self) -> int:
        """Taille maximale d'une vidéo en octets."""
        return self.max_video_size_mb * 1024 * 1024
