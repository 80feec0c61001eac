"""Sous-package CLI commands - re-exporte les commandes publiques."""

from albumforge.adapters.cli.commands.album_commands import (
    album_stats,
    create_album,
    delete_album,
    generate_cover,
    select_cover,
)
from albumforge.adapters.cli.commands.media_commands import (
    delete_media,
    upload,
)
from albumforge.adapters.cli.commands.maintenance_commands import (
    migrate_paths,
)

__all__ = [
    # albums
    "album_stats",
    "create_album",
    "delete_album",
    "generate_cover",
    "select_cover",
    # media
    "delete_media",
    "upload",
    # maintenance
    "migrate_paths",
]
