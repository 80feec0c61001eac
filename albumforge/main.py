"""
Point d'entrée CLI d'albumforge.

Initialise le container DI, configure le logging et fournit les commandes CLI.
"""

from typing import Annotated

import typer
from loguru import logger

from .adapters.cli.commands import (
    album_stats,
    create_album,
    delete_album,
    delete_media,
    generate_cover,
    migrate_paths,
    select_cover,
    upload,
)
from .config import Settings
from .container import Container
from .logging_config import configure_logging

__version__ = "0.1.0"

app = typer.Typer(
    name="albumforge",
    help="Génération des dérivés et cycle de vie des media d'albums",
)
container = Container()


@app.callback()
def main_callback(
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Mode silencieux (aucun log du pipeline)"),
    ] = False,
) -> None:
    """albumforge - Dérivés d'images et albums."""
    if quiet:
        logger.disable("albumforge")


# Albums
app.command(name="create-album")(create_album)
app.command(name="delete-album")(delete_album)
app.command(name="select-cover")(select_cover)
app.command(name="generate-cover")(generate_cover)
app.command(name="album-stats")(album_stats)

# Media
app.command()(upload)
app.command(name="delete-media")(delete_media)

# Maintenance
app.command(name="migrate-paths")(migrate_paths)


def get_config() -> Settings:
    """Récupère les paramètres de l'application depuis le container DI."""
    return container.config()


@app.command()
def info() -> None:
    """Affiche la configuration actuelle."""
    config = get_config()
    typer.echo(f"Racine publique : {config.public_root}")
    typer.echo(f"Base de données : {config.database_url}")
    typer.echo(
        f"Qualité : JPEG {config.jpeg_quality}, WebP {config.webp_quality}, "
        f"original {config.original_quality}"
    )
    typer.echo(
        f"Limites : images {config.max_image_size_mb} MB, vidéos {config.max_video_size_mb} MB"
    )
    typer.echo(f"Rendus parallèles : {config.generation_workers}")
    typer.echo(f"Niveau de log : {config.log_level}")


@app.command()
def version() -> None:
    """Affiche les informations de version."""
    typer.echo(f"albumforge v{__version__}")


def main() -> None:
    """Point d'entrée de l'application."""
    # Charge la configuration et configure le logging
    settings = container.config()
    configure_logging(
        log_level=settings.log_level,
        log_file=settings.log_file,
        rotation_size=settings.log_rotation_size,
        retention_count=settings.log_retention_count,
    )

    # Initialise la base de données (crée les tables si nécessaire)
    container.database.init()

    logger.debug(f"Démarrage d'albumforge v{__version__}")

    # Lance la CLI
    app()


if __name__ == "__main__":
    main()
