"""ClickHouse preflight checks run before CLI commands touch the database."""
import socket

import clickhouse_connect
import typer
from rich.console import Console

from sbomdiff.core.config import DatabaseConfig

SETUP_HINT = (
    '[green]Solution:[/] [cyan]docker run -d --name clickhouse -p 8123:8123 '
    'clickhouse/clickhouse-server:25.12-alpine[/] then [cyan]sbomdiff db init[/]'
)


def check_clickhouse_connection(
    db_config: DatabaseConfig,
    console: Console | None = None,
    require_database: bool = True,
) -> bool:
    """
    Check ClickHouse connectivity for a role-specific config.

    Steps:
        1. Network - is the server reachable?
        2. Authentication and database access
        3. Tables - do the snapshot tables exist?

    With require_database=False (schema creation) only steps 1 and 2 run,
    against the 'default' database.

    Raises typer.Exit(1) after printing a hint on the first failing step.
    """
    console = console or Console()

    if not _check_network(db_config.host, db_config.port, console):
        raise typer.Exit(1)

    database = db_config.database if require_database else 'default'
    client = _connect(db_config, database, console)
    if client is None:
        raise typer.Exit(1)

    try:
        if require_database and not _check_tables(client, db_config, console):
            raise typer.Exit(1)
    finally:
        client.close()

    return True


def _check_network(host: str, port: int, console: Console) -> bool:
    try:
        with socket.create_connection((host, port), timeout=5):
            return True
    except TimeoutError:
        console.print(
            f'[bold red]Error:[/] Connection to [cyan]{host}:{port}[/] timed out.\n\n{SETUP_HINT}',
        )
    except OSError as e:
        console.print(
            f'[bold red]Error:[/] Cannot reach [cyan]{host}:{port}[/]\n[dim]{e}[/dim]\n\n{SETUP_HINT}',
        )
    return False


def _connect(db_config: DatabaseConfig, database: str, console: Console):
    params = {**db_config.get_connection_params(), 'database': database}
    try:
        client = clickhouse_connect.get_client(**params)
        client.query('SELECT 1')
        return client
    except Exception as e:
        err = str(e).lower()
        if 'unknown database' in err:
            console.print(
                f'[bold red]Error:[/] Database [cyan]{database}[/] does not exist.\n\n'
                '[green]Solution:[/] [cyan]sbomdiff db init[/]',
            )
        elif any(x in err for x in ['authentication', 'password', 'denied', 'incorrect']):
            console.print(
                f'[bold red]Error:[/] Authentication failed for [cyan]{db_config.user}[/]',
            )
        else:
            console.print(f'[bold red]Error:[/] Cannot connect: [dim]{e}[/dim]')
        return None


def _check_tables(client, db_config: DatabaseConfig, console: Console) -> bool:
    try:
        existing = {row[0] for row in client.query('SHOW TABLES').result_rows}
    except Exception as e:
        console.print(f'[bold red]Error:[/] Cannot check tables: [dim]{e}[/dim]')
        return False

    if missing := set(db_config.tables) - existing:
        console.print(
            f'[bold red]Error:[/] Missing tables: [cyan]{", ".join(sorted(missing))}[/]\n\n'
            '[green]Solution:[/] [cyan]sbomdiff db init[/]',
        )
        return False
    return True
