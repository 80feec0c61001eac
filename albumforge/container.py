"""
Container d'injection de dependances via dependency-injector.

Fournit une gestion centralisee des dependances pour la CLI.
Inclut les repositories SQLModel et les services du pipeline media.
"""

from dependency_injector import containers, providers

from .adapters.file_system import FileSystemAdapter
from .adapters.imaging import PillowImageRenderer
from .config import Settings
from .infrastructure.persistence.database import get_session, init_db
from .infrastructure.persistence.repositories import (
    SQLModelAlbumRepository,
    SQLModelMediaRepository,
)
from .services.cover_selector import CoverSelector
from .services.derivative_generator import DerivativeGenerator
from .services.lifecycle import LifecycleManager
from .services.path_migration import PathMigrationService
from .services.storage_layout import StorageLayout


class Container(containers.DeclarativeContainer):
    """Container DI de l'application.

    Utilisation :
        container = Container()
        container.database.init()  # Initialise la DB une fois
        manager = container.lifecycle_manager()
        result = manager.create_artifacts(raw, "photo.jpg", album_id="1")
    """

    # Configuration - singleton charge une seule fois
    config = providers.Singleton(Settings)

    # Database - Resource pour initialisation unique
    database = providers.Resource(init_db)

    # Session factory - nouvelle session a chaque appel
    session = providers.Factory(lambda: next(get_session()))

    # Adapters - implementations concretes des ports (sans etat)
    file_system = providers.Singleton(FileSystemAdapter)
    image_renderer = providers.Singleton(PillowImageRenderer)

    # Disposition des fichiers sous la racine publique
    storage_layout = providers.Singleton(
        StorageLayout,
        public_root=config.provided.public_root,
        file_system=file_system,
    )

    # Generateur - Singleton : aucun etat partage entre deux uploads
    derivative_generator = providers.Singleton(
        DerivativeGenerator,
        renderer=image_renderer,
        file_system=file_system,
        layout=storage_layout,
        jpeg_quality=config.provided.jpeg_quality,
        webp_quality=config.provided.webp_quality,
        original_quality=config.provided.original_quality,
        max_image_bytes=config.provided.max_image_bytes,
        max_video_bytes=config.provided.max_video_bytes,
        max_workers=config.provided.generation_workers,
    )

    # Repositories - Factory pour nouvelle instance avec session fraiche
    media_repository = providers.Factory(
        SQLModelMediaRepository,
        session=session,
    )
    album_repository = providers.Factory(
        SQLModelAlbumRepository,
        session=session,
    )

    # Services - Factory car dependent des repositories (sessions fraiches)
    cover_selector = providers.Factory(
        CoverSelector,
        media_repo=media_repository,
        album_repo=album_repository,
        layout=storage_layout,
        file_system=file_system,
        renderer=image_renderer,
        cover_size=config.provided.cover_size,
        quality=config.provided.jpeg_quality,
    )

    lifecycle_manager = providers.Factory(
        LifecycleManager,
        media_repo=media_repository,
        album_repo=album_repository,
        generator=derivative_generator,
        cover_selector=cover_selector,
        layout=storage_layout,
        file_system=file_system,
    )

    path_migration_service = providers.Factory(
        PathMigrationService,
        media_repo=media_repository,
        album_repo=album_repository,
    )
