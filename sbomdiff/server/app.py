"""HTTP surface: POST /api/v1/sbom/diff."""
from collections.abc import Callable
from collections.abc import Iterator

import structlog
from fastapi import APIRouter
from fastapi import Depends
from fastapi import FastAPI
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from sbomdiff.__version__ import __version__
from sbomdiff.core.errors import SbomDiffError
from sbomdiff.core.validation import validate_diff_ids
from sbomdiff.models.diff import DiffResult
from sbomdiff.services.diff_service import DiffService

logger = structlog.get_logger('api')

router = APIRouter(prefix='/api/v1/sbom', tags=['sbom'])

DiffServiceFactory = Callable[[], DiffService]


class DiffRequest(BaseModel):
    base_sbom_id: str | None = None
    target_sbom_id: str | None = None


def get_diff_service(request: Request) -> Iterator[DiffService]:
    factory: DiffServiceFactory = request.app.state.diff_service_factory
    service = factory()
    try:
        yield service
    finally:
        close = getattr(service.provider, 'close', None)
        if callable(close):
            close()


@router.post('/diff', response_model=DiffResult)
def diff_sboms(payload: DiffRequest, service: DiffService = Depends(get_diff_service)):
    """Compare two snapshots of the same project."""
    # ids are checked here so malformed input never reaches the provider
    base_id, target_id = validate_diff_ids(payload.base_sbom_id, payload.target_sbom_id)
    return service.diff(base_id, target_id)


async def sbomdiff_error_handler(request: Request, exc: SbomDiffError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error('Diff request failed', path=request.url.path, error=exc.message)
    else:
        logger.info('Diff request rejected', path=request.url.path, error=exc.message)
    return JSONResponse(status_code=exc.status_code, content={'error': exc.message})


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={'error': 'invalid request body'})


def create_app(diff_service_factory: DiffServiceFactory | None = None) -> FastAPI:
    """
    Build the API application.

    diff_service_factory is called once per request; by default it builds a
    DiffService on the guest ClickHouse repository from the container.
    """
    if diff_service_factory is None:
        from sbomdiff.core.container import get_container
        diff_service_factory = get_container().create_diff_service

    app = FastAPI(
        title='sbomdiff',
        description='Compare stored SBOM snapshots',
        version=__version__,
    )
    app.state.diff_service_factory = diff_service_factory
    app.include_router(router)
    app.add_exception_handler(SbomDiffError, sbomdiff_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    @app.get('/health')
    def health_check():
        return {'status': 'ok'}

    return app
