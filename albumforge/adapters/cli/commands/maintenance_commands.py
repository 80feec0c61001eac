"""
Commandes CLI de maintenance (migrate-paths).
"""

from typing import Annotated

import typer

from albumforge.adapters.cli.helpers import console, get_container


def migrate_paths(
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            help="Simule sans modifier la base",
        ),
    ] = False,
) -> None:
    """
    Corrige les chemins legacy prefixes par public/ en base.

    Exemples:
      albumforge migrate-paths --dry-run   # Rapport sans modification
      albumforge migrate-paths             # Correction
    """
    container = get_container()
    report = container.path_migration_service().run(dry_run=dry_run)

    mode_label = "[dim](dry-run)[/dim] " if dry_run else ""
    console.print(f"{mode_label}[bold cyan]Media examines:[/bold cyan] {report.total}")
    console.print(f"  Corriges : {report.fixed_count}")
    console.print(f"  Deja conformes : {report.already_correct_count}")
    console.print(f"  Couvertures d'album corrigees : {report.albums_fixed}")
