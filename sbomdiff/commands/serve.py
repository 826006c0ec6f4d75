import dotenv
import structlog
import typer
import uvicorn

from sbomdiff.core.container import get_container
from sbomdiff.server.app import create_app

logger = structlog.get_logger('serve')
app = typer.Typer()

dotenv.load_dotenv()


@app.callback(invoke_without_command=True)
def main(
    host: str = typer.Option(None, help='Bind address (default: SBOMDIFF_HOST)'),
    port: int = typer.Option(None, help='Bind port (default: SBOMDIFF_PORT)'),
):
    """
    Serve POST /api/v1/sbom/diff over HTTP.
    """
    container = get_container()
    server = container.config.server
    bind_host = host or server.host
    bind_port = port or server.port

    logger.info(
        'Starting API server', host=bind_host, port=bind_port,
        match_key=container.config.diff.match_key,
    )
    # log_config=None keeps uvicorn on the structlog-configured root logger
    uvicorn.run(create_app(), host=bind_host, port=bind_port, log_config=None)
