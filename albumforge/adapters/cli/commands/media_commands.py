"""
Commandes CLI des media (upload, delete-media).
"""

from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn

from albumforge.adapters.cli.helpers import console, get_container, suppress_loguru
from albumforge.core.errors import AlbumNotFoundError


def upload(
    album_id: Annotated[str, typer.Argument(help="ID de l'album cible")],
    files: Annotated[
        list[Path],
        typer.Argument(help="Images ou videos a ajouter", exists=True, dir_okay=False),
    ],
    tags: Annotated[
        Optional[list[str]],
        typer.Option("--tag", "-t", help="Mot-cle (repetable)"),
    ] = None,
) -> None:
    """
    Ajoute des fichiers a un album.

    Chaque fichier recoit sa position dans la liste comme ordre.

    Exemples:
      albumforge upload 3 plage.jpg coucher.png
      albumforge upload 3 *.jpg --tag vacances --tag 2024
    """
    container = get_container()
    manager = container.lifecycle_manager()

    if container.album_repository().get_by_id(album_id) is None:
        console.print(f"[red]{AlbumNotFoundError(album_id)}[/red]")
        raise typer.Exit(1)

    with suppress_loguru(), Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
    ) as progress:
        task = progress.add_task("Lecture des fichiers", total=len(files))
        payload = []
        for path in files:
            payload.append((path.name, path.read_bytes()))
            progress.advance(task)

        progress.update(task, description="Generation des derives")
        batch = manager.upload_many(payload, album_id, tags=tags or ())

    for result in batch.results:
        if result.success:
            console.print(f"[green]OK[/green] {result.filename} -> media {result.media.id}")
        else:
            console.print(f"[red]ECHEC[/red] {result.filename}: {result.error}")

    console.print(f"\n{len(batch.uploaded)}/{len(batch.results)} fichier(s) ajoute(s)")
    if batch.errors:
        raise typer.Exit(1)


def delete_media(
    media_ids: Annotated[list[str], typer.Argument(help="ID des media a supprimer")],
) -> None:
    """Supprime un ou plusieurs media et leurs fichiers."""
    container = get_container()
    with suppress_loguru():
        result = container.lifecycle_manager().bulk_delete(media_ids)

    console.print(
        f"[green]{result.deleted_count} media supprime(s)[/green], "
        f"{result.files_deleted} fichier(s)"
    )
    for media_id in result.not_found:
        console.print(f"[yellow]Media introuvable: {media_id}[/yellow]")
    for error in result.file_errors:
        console.print(f"[red]{error}[/red]")
    if result.not_found:
        raise typer.Exit(1)
