import typer

from sbomdiff.commands import db
from sbomdiff.commands import diff
from sbomdiff.commands import serve
from sbomdiff.core.logging import setup_logging

app = typer.Typer(
    help='sbomdiff: compare stored SBOM snapshots.',
    no_args_is_help=True,
    pretty_exceptions_show_locals=False,
)

app.command(name='diff')(diff.main)
app.add_typer(serve.app, name='serve')
app.add_typer(db.app, name='db')


@app.callback()
def main(
    debug: bool = typer.Option(False, '--debug', help='Enable debug logging'),
):
    """
    sbomdiff CLI - added, removed and updated components between two SBOMs.
    """
    level = 'DEBUG' if debug else 'INFO'
    setup_logging(level=level)


if __name__ == '__main__':
    app()
