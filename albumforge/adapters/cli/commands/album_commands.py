"""
Commandes CLI des albums (create-album, delete-album, select-cover, generate-cover, album-stats).
"""

from typing import Annotated

import typer
from rich.table import Table

from albumforge.adapters.cli.helpers import console, get_container, slugify, suppress_loguru
from albumforge.core.entities.media import Album
from albumforge.core.errors import AlbumNotFoundError
from albumforge.services.storage_layout import format_bytes


def create_album(
    title: Annotated[str, typer.Argument(help="Titre de l'album")],
    description: Annotated[
        str,
        typer.Option("--description", "-d", help="Description de l'album"),
    ] = "",
) -> None:
    """Cree un album vide."""
    container = get_container()
    album = container.album_repository().save(
        Album(title=title, slug=slugify(title), description=description)
    )
    console.print(f"[green]Album cree:[/green] {album.title} (id {album.id})")


def delete_album(
    album_id: Annotated[str, typer.Argument(help="ID de l'album")],
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Ne pas demander de confirmation"),
    ] = False,
) -> None:
    """
    Supprime un album, tous ses media et leurs fichiers.

    Le repertoire de l'album n'est supprime que s'il est vide.
    """
    if not yes and not typer.confirm(f"Supprimer l'album {album_id} et tous ses media ?"):
        raise typer.Abort()

    container = get_container()
    with suppress_loguru():
        result = container.lifecycle_manager().delete_album_cascade(album_id)

    if not result.found:
        console.print(f"[yellow]Album introuvable: {album_id}[/yellow]")
        raise typer.Exit(1)

    console.print(f"[green]Album {album_id} supprime[/green]")
    console.print(f"  Media supprimes : {result.media_deleted_count}")
    console.print(f"  Fichiers supprimes : {result.files_deleted_count}")
    if result.file_deletion_error_count:
        console.print(f"  [red]Echecs de suppression : {result.file_deletion_error_count}[/red]")
        for error in result.errors:
            console.print(f"    [dim]{error}[/dim]")
    if not result.directory_removed:
        console.print("  [yellow]Repertoire conserve (non vide ou absent)[/yellow]")


def select_cover(
    album_id: Annotated[str, typer.Argument(help="ID de l'album")],
) -> None:
    """Selectionne la couverture d'un album qui n'en a pas."""
    container = get_container()
    try:
        cover = container.cover_selector().select_cover(album_id)
    except AlbumNotFoundError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    if cover is None:
        console.print("[yellow]Aucune image dans l'album, couverture non definie[/yellow]")
    else:
        console.print(f"[green]Couverture:[/green] {cover}")


def generate_cover(
    album_id: Annotated[str, typer.Argument(help="ID de l'album")],
) -> None:
    """Genere la couverture carree d'un album a partir de sa premiere image."""
    container = get_container()
    cover = container.cover_selector().generate_square_cover(album_id)
    if cover is None:
        console.print("[red]Generation de la couverture impossible (voir les logs)[/red]")
        raise typer.Exit(1)
    console.print(f"[green]Couverture carree:[/green] {cover}")


def album_stats(
    album_id: Annotated[str, typer.Argument(help="ID de l'album")],
) -> None:
    """Affiche les agregats d'un album (compteur, couverture, stockage)."""
    container = get_container()
    try:
        aggregate = container.lifecycle_manager().aggregate(album_id)
    except AlbumNotFoundError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    table = Table(title=f"Album {album_id}")
    table.add_column("Propriete", style="cyan")
    table.add_column("Valeur")
    table.add_row("Media", str(aggregate.total_media_count))
    table.add_row("Couverture", aggregate.cover_image_path or "-")
    table.add_row("Repertoire", aggregate.storage_directory)
    table.add_row("Stockage", format_bytes(aggregate.storage_size_bytes))
    console.print(table)
