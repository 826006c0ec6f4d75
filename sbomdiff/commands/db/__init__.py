import typer

from . import init
from . import snapshots
from . import status

app = typer.Typer(help='Database operations')

app.add_typer(init.app, name='init')
app.add_typer(status.app, name='status')
app.command(name='snapshots')(snapshots.main)
