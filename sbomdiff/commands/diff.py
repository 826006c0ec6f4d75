import dotenv
import structlog
import typer
from rich.table import Table

from sbomdiff.core.clickhouse import check_clickhouse_connection
from sbomdiff.core.container import get_container
from sbomdiff.core.decorators import handle_errors
from sbomdiff.core.logging import console
from sbomdiff.core.validation import validate_diff_ids
from sbomdiff.models.diff import DiffResult

logger = structlog.get_logger('diff')

dotenv.load_dotenv()

SEVERITY_STYLES = {
    'CRITICAL': 'bold magenta',
    'HIGH': 'bold red',
    'MEDIUM': 'yellow',
    'LOW': 'green',
}


@handle_errors
def main(
    base_sbom_id: str = typer.Argument(..., help='Base (older) SBOM snapshot id'),
    target_sbom_id: str = typer.Argument(..., help='Target (newer) SBOM snapshot id'),
    as_json: bool = typer.Option(False, '--json', help='Print the raw JSON result'),
    host: str = typer.Option(None, help='ClickHouse host'),
    port: int = typer.Option(None, help='ClickHouse http port'),
    database: str = typer.Option(None, help='ClickHouse database'),
):
    """
    Compare two SBOM snapshots of the same project (Guest).
    """
    base_id, target_id = validate_diff_ids(base_sbom_id, target_sbom_id)

    container = get_container()

    # CLI Overrides
    if host:
        container.config._db_base.host = host
    if port:
        container.config._db_base.port = port
    if database:
        container.config._db_base.database = database

    check_clickhouse_connection(
        container.config.get_db_config('guest'),
        console=console,
        require_database=True,
    )

    with container.get_snapshot_repository() as repo:
        result = container.create_diff_service(repo).diff(base_id, target_id)

    if as_json:
        typer.echo(result.model_dump_json(indent=2))
        return

    render_diff(result)


def render_diff(result: DiffResult) -> None:
    summary = result.summary
    overview = Table(title='SBOM Diff Summary')
    overview.add_column('Metric', style='cyan')
    overview.add_column('Count', style='magenta', justify='right')
    overview.add_row('Added', f'{summary.added_count:,}')
    overview.add_row('Removed', f'{summary.removed_count:,}')
    overview.add_row('Updated', f'{summary.updated_count:,}')
    overview.add_row('New Vulnerabilities', f'{summary.new_vulnerabilities_count:,}')
    console.print(overview)

    if result.is_empty:
        console.print('[green]No differences between the two snapshots.[/green]')
        return

    for title, items, style in (
        ('Added Components', result.added, 'green'),
        ('Removed Components', result.removed, 'red'),
    ):
        if not items:
            continue
        table = Table(title=title)
        table.add_column('Name', style=style)
        table.add_column('Version', style='yellow')
        table.add_column('License', style='dim')
        for item in items:
            table.add_row(item.name, item.version, item.license or '-')
        console.print(table)

    if result.updated:
        table = Table(title='Updated Components')
        table.add_column('Name', style='cyan')
        table.add_column('Old Version', style='dim')
        table.add_column('New Version', style='yellow')
        for item in result.updated:
            table.add_row(item.name, item.old_version, item.new_version)
        console.print(table)

    if result.new_vulnerabilities:
        table = Table(title='New Vulnerabilities')
        table.add_column('Severity')
        table.add_column('CVE', style='bold')
        table.add_column('Component', style='cyan')
        table.add_column('Version', style='yellow')
        for vuln in result.new_vulnerabilities:
            style = SEVERITY_STYLES.get(vuln.severity.upper(), 'white')
            table.add_row(
                f'[{style}]{vuln.severity or "UNKNOWN"}[/{style}]',
                vuln.cve_id, vuln.component, vuln.version,
            )
        console.print(table)
