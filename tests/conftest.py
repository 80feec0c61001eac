"""
Fixtures pytest partagees pour les tests albumforge.

Ce module contient les fixtures communes utilisees dans les tests:
- Settings de test avec racine publique temporaire
- Fabrique d'images Pillow (taille, mode, format, orientation EXIF)
- Base SQLite en memoire et repositories SQLModel
- Services du pipeline branches sur le vrai systeme de fichiers
"""

from io import BytesIO
from pathlib import Path
from typing import Callable, Iterator, Optional

import pytest
from PIL import Image
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from albumforge.adapters.file_system import FileSystemAdapter
from albumforge.adapters.imaging import PillowImageRenderer
from albumforge.config import Settings
from albumforge.core.entities.media import Album
from albumforge.infrastructure.persistence import models  # noqa: F401
from albumforge.infrastructure.persistence.repositories import (
    SQLModelAlbumRepository,
    SQLModelMediaRepository,
)
from albumforge.services.cover_selector import CoverSelector
from albumforge.services.derivative_generator import DerivativeGenerator
from albumforge.services.lifecycle import LifecycleManager
from albumforge.services.storage_layout import StorageLayout

ImageFactory = Callable[..., bytes]


def make_image_bytes(
    width: int = 1200,
    height: int = 900,
    mode: str = "RGB",
    fmt: str = "JPEG",
    orientation: Optional[int] = None,
    make: Optional[str] = None,
    model: Optional[str] = None,
) -> bytes:
    """
    Genere une image encodee en memoire.

    L'image est coupee en deux couleurs (gauche rouge, droite bleue) pour
    pouvoir verifier la rotation appliquee.
    """
    image = Image.new(mode, (width, height), _color(mode, (200, 30, 30)))
    image.paste(_color(mode, (30, 30, 200)), (width // 2, 0, width, height))

    exif = Image.Exif()
    if orientation is not None:
        exif[0x0112] = orientation
    if make:
        exif[0x010F] = make
    if model:
        exif[0x0110] = model

    buffer = BytesIO()
    params = {"exif": exif.tobytes()} if len(exif) else {}
    image.save(buffer, format=fmt, **params)
    return buffer.getvalue()


def _color(mode: str, rgb: tuple[int, int, int]):
    if mode == "RGBA":
        return (*rgb, 128)
    if mode == "L":
        return rgb[0]
    return rgb


@pytest.fixture
def image_factory() -> ImageFactory:
    """Fabrique d'images : image_factory(width=..., height=..., fmt="PNG", ...)."""
    return make_image_bytes


@pytest.fixture
def jpeg_bytes() -> bytes:
    """Photo JPEG 1200x900 standard."""
    return make_image_bytes()


@pytest.fixture
def public_root(tmp_path: Path) -> Path:
    root = tmp_path / "public"
    root.mkdir()
    return root


@pytest.fixture
def test_settings(tmp_path: Path, public_root: Path) -> Settings:
    """
    Settings de test avec chemins temporaires.

    Utilise tmp_path de pytest pour isoler chaque test.
    """
    return Settings(
        public_root=public_root,
        database_url=f"sqlite:///{tmp_path / 'test.db'}",
        log_file=tmp_path / "logs" / "test.log",
    )


# ============================================================================
# Base de donnees
# ============================================================================


@pytest.fixture
def engine():
    """Engine SQLite en memoire partage par toutes les sessions du test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine) -> Iterator[Session]:
    with Session(engine) as session:
        yield session


@pytest.fixture
def media_repo(session: Session) -> SQLModelMediaRepository:
    return SQLModelMediaRepository(session)


@pytest.fixture
def album_repo(session: Session) -> SQLModelAlbumRepository:
    return SQLModelAlbumRepository(session)


@pytest.fixture
def album(album_repo: SQLModelAlbumRepository) -> Album:
    """Album vide persiste."""
    return album_repo.save(Album(title="Vacances", slug="vacances"))


# ============================================================================
# Services
# ============================================================================


@pytest.fixture
def file_system() -> FileSystemAdapter:
    return FileSystemAdapter()


@pytest.fixture
def renderer() -> PillowImageRenderer:
    return PillowImageRenderer()


@pytest.fixture
def layout(public_root: Path, file_system: FileSystemAdapter) -> StorageLayout:
    return StorageLayout(public_root, file_system)


@pytest.fixture
def generator(renderer, file_system, layout) -> DerivativeGenerator:
    return DerivativeGenerator(renderer, file_system, layout)


@pytest.fixture
def cover_selector(media_repo, album_repo, layout, file_system, renderer) -> CoverSelector:
    return CoverSelector(media_repo, album_repo, layout, file_system, renderer)


@pytest.fixture
def lifecycle(
    media_repo, album_repo, generator, cover_selector, layout, file_system
) -> LifecycleManager:
    return LifecycleManager(
        media_repo, album_repo, generator, cover_selector, layout, file_system
    )
