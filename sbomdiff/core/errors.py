"""Error taxonomy shared by the diff service, the API and the CLI."""


class SbomDiffError(Exception):
    """Base class for all sbomdiff errors."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(SbomDiffError):
    """Malformed snapshot id, or base and target are the same snapshot."""

    status_code = 400


class NotFoundError(SbomDiffError):
    """Snapshot id does not resolve, or belongs to a different project."""

    status_code = 400


class InternalError(SbomDiffError):
    """Provider I/O failure (database unavailable, query error, ...)."""

    status_code = 500
