import typer
from rich.table import Table

from sbomdiff.core.clickhouse import check_clickhouse_connection
from sbomdiff.core.container import get_container
from sbomdiff.core.decorators import handle_errors
from sbomdiff.core.logging import console

app = typer.Typer()


@app.callback(invoke_without_command=True)
@handle_errors
def main():
    """Show database statistics."""
    container = get_container()

    # Check Connection (Guest)
    check_clickhouse_connection(
        container.config.get_db_config('guest'),
        console=console,
        require_database=True,
    )

    with container.get_snapshot_repository() as query_repo:
        stats = container.get_db_service().get_db_stats(query_repo)

    overview = Table(title='Database Statistics')
    overview.add_column('Table', style='cyan')
    overview.add_column('Rows', style='magenta', justify='right')
    for table, count in stats.items():
        overview.add_row(table, f'{count:,}')
    console.print(overview)
