import structlog
import typer

from sbomdiff.core.clickhouse import check_clickhouse_connection
from sbomdiff.core.container import get_container
from sbomdiff.core.decorators import handle_errors
from sbomdiff.core.logging import console

logger = structlog.get_logger('db_init')
app = typer.Typer()


@app.callback(invoke_without_command=True)
@handle_errors
def main(
    reset: bool = typer.Option(False, '--reset', help='Drop existing tables first (destructive)'),
):
    """Create the snapshot tables (Admin)."""
    container = get_container()

    # Check Connection (Admin); the database may not exist yet
    check_clickhouse_connection(
        container.config.get_db_config('admin'),
        console=console,
        require_database=False,
    )

    if reset and not typer.confirm('Drop all sbomdiff tables?'):
        raise typer.Exit(1)

    with container.get_ingestion_repository() as repo_db:
        container.get_db_service().init_schema(repo_db, reset=reset)

    console.print('[green]Schema ready.[/green]')
