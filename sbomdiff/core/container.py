"""Dependency Injection Container."""
from typing import Optional

from sbomdiff.core.config import get_config
from sbomdiff.core.config import SbomDiffConfig
from sbomdiff.core.repository import IngestionRepository
from sbomdiff.core.repository import SnapshotRepository
from sbomdiff.services.db_service import DbService
from sbomdiff.services.diff_service import DiffService


class Container:
    """Simple DI Container to manage service lifecycles."""

    _instance: Optional['Container'] = None

    def __init__(self) -> None:
        self.config: SbomDiffConfig = get_config()
        self._db_service: DbService | None = None

    @classmethod
    def get_instance(cls) -> 'Container':
        if cls._instance is None:
            cls._instance = Container()
        return cls._instance

    # -- Repositories --

    def get_ingestion_repository(self) -> IngestionRepository:
        """Get Write-Access Repository (Admin)."""
        db_config = self.config.get_db_config(role='admin')
        return IngestionRepository(db_config)

    def get_snapshot_repository(self) -> SnapshotRepository:
        """Get Read-Only Repository (Guest)."""
        db_config = self.config.get_db_config(role='guest')
        return SnapshotRepository(db_config)

    # -- Services --

    def get_db_service(self) -> DbService:
        if not self._db_service:
            self._db_service = DbService()
        return self._db_service

    def create_diff_service(self, provider: SnapshotRepository | None = None) -> DiffService:
        """Factory for DiffService (one per request/command, owns its provider)."""
        return DiffService(
            provider or self.get_snapshot_repository(),
            match_key=self.config.diff.match_key,
        )

# Global Accessor


def get_container() -> Container:
    return Container.get_instance()
