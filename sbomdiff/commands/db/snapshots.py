import typer
from rich.table import Table

from sbomdiff.core.clickhouse import check_clickhouse_connection
from sbomdiff.core.container import get_container
from sbomdiff.core.decorators import handle_errors
from sbomdiff.core.logging import console


@handle_errors
def main(
    project_id: str = typer.Argument(..., help='Project id'),
    limit: int = typer.Option(50, help='Max snapshots to list'),
):
    """List a project's SBOM snapshots, newest first (Guest)."""
    container = get_container()

    check_clickhouse_connection(
        container.config.get_db_config('guest'),
        console=console,
        require_database=True,
    )

    with container.get_snapshot_repository() as query_repo:
        rows = container.get_db_service().list_project_snapshots(
            query_repo, project_id, limit=limit,
        )

    if not rows:
        console.print(f'[yellow]No snapshots found for project {project_id}.[/yellow]')
        return

    table = Table(title=f'Snapshots of {project_id}')
    table.add_column('SBOM ID', style='cyan')
    table.add_column('Format', style='green')
    table.add_column('Components', style='magenta', justify='right')
    table.add_column('Imported', style='dim')
    for row in rows:
        fmt = f"{row['format']} {row['format_version']}".strip()
        table.add_row(str(row['id']), fmt or '-', f"{row['components']:,}", str(row['created_at']))
    console.print(table)
